"""
Exceptions raised by the outbound API clients.
"""


class RemoteCallError(Exception):
    """
    A remote call failed.

    Raised when a response body cannot be parsed or does not have the shape
    the caller needs. Status codes are carried along for logging but 4xx and
    5xx responses are not told apart.
    """

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        self.message = message
        self.status = status
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        details = []
        if self.status is not None:
            details.append(f"status={self.status}")
        if self.url:
            details.append(f"url={self.url}")
        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class AcceloApiError(RemoteCallError):
    """Raised when an Accelo API call fails."""


class SlackApiError(RemoteCallError):
    """Raised when a Slack Web API call fails."""
