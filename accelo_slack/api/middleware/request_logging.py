"""
Request and response logging middleware.

The shared webhook secret travels in the query string, so it is redacted
before anything is logged.
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from accelo_slack.core.logging.logger import get_logger

REDACTED = "***"
SENSITIVE_PARAMS = {"token"}


def redact_query_params(params: dict[str, str]) -> dict[str, str]:
    """Copy of ``params`` with secret values replaced."""
    return {
        key: REDACTED if key.lower() in SENSITIVE_PARAMS else value
        for key, value in params.items()
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and its response status with timing."""

    def __init__(self, app, log_requests: bool = True, log_responses: bool = True):
        super().__init__(app)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.sensitive_headers = {"authorization", "cookie", "set-cookie", "x-slack-signature"}

    def _should_skip_logging(self, path: str) -> bool:
        skip_paths = ["/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"]
        return any(path.startswith(skip_path) for skip_path in skip_paths)

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        logger = get_logger(__name__)
        skip = self._should_skip_logging(request.url.path)

        if self.log_requests and not skip:
            log_data = {
                "method": request.method,
                "path": request.url.path,
                "query_params": redact_query_params(dict(request.query_params)),
                "headers": {
                    k: v
                    for k, v in request.headers.items()
                    if k.lower() not in self.sensitive_headers
                },
                "client_host": request.client.host if request.client else "unknown",
            }
            logger.info(
                f"Incoming {request.method} {request.url.path} "
                f"{log_data['query_params']}",
                extra={"request": log_data},
            )

        response = await call_next(request)
        process_time_ms = round((time.time() - start_time) * 1000, 2)

        settings = getattr(request.app.state, "settings", None)
        if settings is not None and settings.is_development:
            response.headers["X-Process-Time"] = str(process_time_ms)

        if self.log_responses and not skip:
            status_code = response.status_code
            if status_code >= 500:
                log_level = "error"
            elif status_code >= 400:
                log_level = "warning"
            else:
                log_level = "info"
            getattr(logger, log_level)(
                f"Response {status_code} for {request.method} {request.url.path} "
                f"({process_time_ms}ms)"
            )

        return response
