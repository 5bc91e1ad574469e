"""
Raw HTTP response shared by the outbound API clients.
"""

import json
from dataclasses import dataclass
from typing import Any

from .errors import RemoteCallError


@dataclass(frozen=True)
class HttpResponse:
    """Status code and body text of a single outbound call."""

    status: int
    text: str
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self, error_cls: type[RemoteCallError] = RemoteCallError) -> Any:
        """Parse the body as JSON, raising ``error_cls`` when it is not JSON."""
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as e:
            raise error_cls(
                f"Response body is not valid JSON: {e.msg}",
                status=self.status,
                url=self.url,
            ) from e
