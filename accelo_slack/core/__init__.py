"""Core: configuration, logging, errors and the application factory."""
