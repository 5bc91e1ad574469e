"""
Slack message for an Accelo request.

The message is rebuilt from scratch on every post and refresh: a header
linking to the request, a six-field summary, and an action row that depends
on the request's standing.
"""

from typing import Any

from accelo_slack.accelo import AcceloAPI, AcceloLinks
from accelo_slack.accelo.links import slack_link
from accelo_slack.accelo.models import Issue, Request
from accelo_slack.core.config.settings import Settings
from accelo_slack.core.errors import AcceloApiError
from accelo_slack.core.logging.logger import get_logger
from accelo_slack.domain.enums import ButtonAction, Standing
from accelo_slack.domain.interfaces import IUserDirectory
from accelo_slack.slack.models import (
    ChatMessage,
    actions,
    button,
    fields_section,
    section,
)

REQUEST_FIELDS = "conversion_id,standing,type(),claimer,affiliation(contact(),company()),title,body"
ISSUE_FIELDS = "assignee(),title,status(),standing(),description"

UNCLAIMED = "Unclaimed"
UNKNOWN = "Unknown"
ISSUE_DESCRIPTION_PREVIEW = 200


def has_conversion(conversion_id: str | None) -> bool:
    """Accelo reports an unconverted request as an empty or ``0`` conversion id."""
    # "0" counts as unconverted even though it is a non-empty string
    return bool(conversion_id) and conversion_id != "0"


class RequestMessageBuilder:
    """Builds the ChatMessage that represents one Accelo request."""

    def __init__(
        self,
        accelo: AcceloAPI,
        directory: IUserDirectory,
        settings: Settings,
        logger: Any | None = None,
    ):
        self.accelo = accelo
        self.directory = directory
        self.settings = settings
        self.links = AcceloLinks(settings.accelo_web_url)
        self.logger = logger or get_logger(__name__)

    async def build(self, request_id: str | int) -> ChatMessage:
        """
        Fetch the request and build its message.

        A title matching the denylist closes the request in Accelo and yields
        a plain notice for the denylist channel instead.

        Raises:
            AcceloApiError: If Accelo has no such request
        """
        request_id = str(request_id)
        request = await self.accelo.requests.get(request_id, REQUEST_FIELDS)
        if request is None:
            raise AcceloApiError(f"Request {request_id} not found")

        title = request.title or ""

        denylist_entry = self._match_denylist(title)
        if denylist_entry is not None:
            return await self._close_denylisted(request_id, title, denylist_entry)

        type_title = request.type_title
        message = ChatMessage(channel=self._channel_for(type_title), text=title)
        message.blocks.append(section(f"*{slack_link(self.links.request(request_id), title)}*"))
        message.blocks.append(await self._summary_block(request, type_title))

        standing = Standing.from_raw(request.standing)

        if standing in (Standing.PENDING, Standing.OPEN):
            if type_title == self.settings.alert_request_type:
                message.blocks.append(section(f"```{request.body or ''}```"))
            message.blocks.append(
                actions(
                    button(ButtonAction.REFRESH.value, request_id),
                    button(ButtonAction.CLAIM.value, request_id, style="primary"),
                    button(
                        "Convert",
                        request_id,
                        style="primary",
                        url=self.links.convert_request(request_id),
                    ),
                    button(ButtonAction.CLOSE.value, request_id, style="danger"),
                )
            )

        elif standing is Standing.CONVERTED:
            issue_id = request.conversion_id
            if has_conversion(issue_id):
                issue = await self.accelo.issues.get(issue_id, ISSUE_FIELDS)
                if issue is None:
                    self.logger.warning(f"Issue {issue_id} of request {request_id} not found")
                else:
                    message.blocks.insert(1, await self._issue_block(issue_id, issue))
                message.blocks.append(
                    actions(
                        button(ButtonAction.REFRESH.value, request_id),
                        button(
                            "View Ticket",
                            request_id,
                            style="primary",
                            url=self.links.issue(issue_id),
                        ),
                    )
                )

        elif standing is Standing.CLOSED:
            message.blocks.append(
                actions(
                    button(ButtonAction.REFRESH.value, request_id),
                    button(ButtonAction.REOPEN.value, request_id, style="primary"),
                )
            )

        else:
            message.blocks.append(actions(button(ButtonAction.REFRESH.value, request_id)))

        return message

    def _match_denylist(self, title: str) -> str | None:
        for entry in self.settings.title_denylist:
            if entry in title:
                return entry
        return None

    async def _close_denylisted(self, request_id: str, title: str, entry: str) -> ChatMessage:
        self.logger.info(f"🚫 Request {request_id} matched denylist entry {entry!r}, closing")
        await self.accelo.requests.update(request_id, {"standing": "closed"})
        text = (
            f":accelo: *{slack_link(self.links.request(request_id), title)}*\n\n"
            f"This request matched the blocklist search `{entry}` and was automatically closed."
        )
        return ChatMessage(channel=self.settings.denylist_channel, text=text)

    def _channel_for(self, type_title: str | None) -> str:
        channel = self.settings.channel_for(type_title)
        if not channel:
            self.logger.warning(
                f"⚠️ No channel configured for request type {type_title!r}; add it to CHANNEL_MAP"
            )
        return channel

    async def _claimer_text(self, request: Request) -> str:
        claimer_id = request.claimer_id
        if claimer_id == "0":
            return UNCLAIMED
        return await self.directory.slack_mention(claimer_id)

    async def _summary_block(self, request: Request, type_title: str | None) -> dict[str, Any]:
        affiliation = request.affiliation_record
        contact = affiliation.contact_record if affiliation else None
        company = affiliation.company_record if affiliation else None

        requester = (
            slack_link(self.links.contact(contact.id), contact.full_name) if contact else UNKNOWN
        )
        company_text = slack_link(self.links.company(company.id), company.name) if company else UNKNOWN
        email = (affiliation.email if affiliation else None) or UNKNOWN

        return fields_section(
            f"*Status:*\n`{Standing.display(request.standing)}`",
            f"*Type:*\n{type_title or UNKNOWN}",
            f"*Claimed by:*\n{await self._claimer_text(request)}",
            f"*Requester:*\n{requester}",
            f"*Company:*\n{company_text}",
            f"*Email:*\n{email}",
        )

    async def _issue_block(self, issue_id: str, issue: Issue) -> dict[str, Any]:
        assignee = await self.directory.slack_mention(issue.assignee_id)
        description = (issue.description or "")[:ISSUE_DESCRIPTION_PREVIEW]
        return section(
            f":ticket: {slack_link(self.links.issue(issue_id), issue.title)}\n"
            f"Assigned to: {assignee}\n"
            f"Status: `{issue.status_title}`\n"
            f"```{description}...```"
        )
