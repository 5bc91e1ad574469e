"""Domain layer: enums, interfaces, message building and request services."""
