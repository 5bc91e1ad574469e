"""HTTP middleware."""

from .error_handler import ErrorHandlerMiddleware
from .request_logging import RequestLoggingMiddleware, redact_query_params

__all__ = ["ErrorHandlerMiddleware", "RequestLoggingMiddleware", "redact_query_params"]
