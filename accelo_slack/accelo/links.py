"""
Browser links into an Accelo deployment.
"""


class AcceloLinks:
    """Builds ``https://<domain>.accelo.com/?action=...`` URLs."""

    def __init__(self, web_url: str):
        self.web_url = web_url.rstrip("/")

    def _action(self, action: str, object_id: str | int | None) -> str:
        return f"{self.web_url}/?action={action}&id={object_id}"

    def request(self, request_id: str | int) -> str:
        return self._action("customer_request", request_id)

    def convert_request(self, request_id: str | int) -> str:
        return f"{self._action('convert_request', request_id)}&conversion_id=1&no_auto_header=1"

    def issue(self, issue_id: str | int | None) -> str:
        return self._action("view_issue", issue_id)

    def contact(self, contact_id: str | int | None) -> str:
        return self._action("view_contact", contact_id)

    def company(self, company_id: str | int | None) -> str:
        return self._action("view_company", company_id)


def slack_link(url: str, label: str | None) -> str:
    """mrkdwn link ``<url|label>``."""
    return f"<{url}|{label}>"
