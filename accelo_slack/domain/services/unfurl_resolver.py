"""
Previews for Accelo links shared in Slack.

Each shared link is classified by the Accelo action in its URL (issue, task
or activity), the object is fetched, and a ``{title, text}`` preview is
built. Links that cannot be resolved are left out; all previews of one
``link_shared`` event are submitted in a single ``chat.unfurl`` call.
"""

import asyncio
import re
from typing import Any

import aiohttp

from accelo_slack.accelo import AcceloAPI, AcceloLinks
from accelo_slack.accelo.links import slack_link
from accelo_slack.core.errors import RemoteCallError
from accelo_slack.core.logging.logger import get_logger
from accelo_slack.domain.interfaces import IUserDirectory
from accelo_slack.slack.client import SlackClient
from accelo_slack.slack.models import LinkSharedEvent

ISSUE_PREVIEW_FIELDS = "title,description,standing,status(),assignee,contact(),company()"
TASK_PREVIEW_FIELDS = "title,description,against_type,against_id,assignee,status(),issue(),contact()"
ACTIVITY_PREVIEW_FIELDS = "subject,body,against_type,against_id,owner_type,owner_id,staff"

ID_MARKER = "id="
ID_WINDOW = 7

_NON_DIGITS = re.compile(r"[^0-9]")


def extract_link_id(url: str) -> str:
    """
    Object id of an Accelo link.

    Takes the 7 characters following the last ``id=`` and drops every
    non-digit. Without ``id=`` the window falls on characters 2 to 8 of
    the URL.

    Example:
        >>> extract_link_id("https://x.accelo.com/?action=view_issue&id=00123abc")
        '00123'
    """
    start = url.rfind(ID_MARKER) + len(ID_MARKER)
    return _NON_DIGITS.sub("", url[start : start + ID_WINDOW])


class LinkUnfurlResolver:
    """Turns shared Accelo links into Slack unfurl previews."""

    def __init__(
        self,
        accelo: AcceloAPI,
        slack: SlackClient,
        directory: IUserDirectory,
        links: AcceloLinks,
        logger: Any | None = None,
    ):
        self.accelo = accelo
        self.slack = slack
        self.directory = directory
        self.links = links
        self.logger = logger or get_logger(__name__)

    async def resolve(self, urls: list[str]) -> dict[str, dict[str, str]]:
        """Preview per resolvable URL; unresolvable URLs are omitted."""
        unfurls: dict[str, dict[str, str]] = {}
        for url in urls:
            try:
                preview = await self.resolve_link(url)
            except (RemoteCallError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                self.logger.warning(f"Skipping unfurl for {url}: {e}")
                continue
            if preview is not None:
                unfurls[url] = preview
        return unfurls

    async def resolve_link(self, url: str) -> dict[str, str] | None:
        object_id = extract_link_id(url)
        if not object_id:
            self.logger.debug(f"No object id in {url}")
            return None

        if "view_issue" in url or "view_support_issue" in url:
            return await self._issue_preview(object_id)
        if "view_task" in url:
            return await self._task_preview(object_id)
        if "view_activity" in url:
            return await self._activity_preview(object_id)
        return None

    async def resolve_and_submit(self, event: LinkSharedEvent) -> dict[str, Any]:
        """Resolve every link of the event and submit one ``chat.unfurl``."""
        unfurls = await self.resolve([link.url for link in event.links])
        self.logger.info(
            f"🔗 Unfurling {len(unfurls)} of {len(event.links)} links in {event.channel}"
        )
        return await self.slack.unfurl(event.channel, event.message_ts, unfurls)

    async def _issue_preview(self, issue_id: str) -> dict[str, str] | None:
        issue = await self.accelo.issues.get(issue_id, ISSUE_PREVIEW_FIELDS)
        if issue is None:
            return None

        contact = issue.contact_record.full_name if issue.contact_record else issue.contact
        company = issue.company_record.name if issue.company_record else issue.company
        assignee = await self.directory.slack_mention(issue.assignee_id)

        return {
            "title": f":ticket: {issue.title}",
            "text": (
                f"\nContact: {contact}\nCompany: {company}\nAssigned to: {assignee}"
                f"\nStatus: `{issue.status_title}`\n```{issue.description}```"
            ),
        }

    async def _task_preview(self, task_id: str) -> dict[str, str] | None:
        task = await self.accelo.tasks.get(task_id, TASK_PREVIEW_FIELDS)
        if task is None or task.against_type != "issue":
            return None

        issue = task.issue_record
        issue_id = issue.id if issue else task.against_id
        ticket = slack_link(self.links.issue(issue_id), issue.title if issue else None)

        contact_record = task.contact_record
        contact_id = contact_record.id if contact_record else task.contact
        contact = slack_link(
            self.links.contact(contact_id), contact_record.full_name if contact_record else None
        )

        assignee = await self.directory.slack_mention(task.assignee_id)

        return {
            "title": f":clipboard: {task.title}",
            "text": (
                f"\nTicket: {ticket}\nContact: {contact}\nAssigned to: {assignee}"
                f"\nStatus: `{task.status_title}`\n```{task.description}```"
            ),
        }

    async def _activity_preview(self, activity_id: str) -> dict[str, str] | None:
        activity = await self.accelo.activities.get(activity_id, ACTIVITY_PREVIEW_FIELDS)
        if activity is None or activity.against_type != "issue":
            return None

        issue = await self.accelo.issues.get(activity.against_id, "title")
        issue_title = issue.title if issue is not None else None
        sender = await self._activity_sender(activity.owner_type, activity.owner_id, activity.staff_id)

        return {
            "title": f":pencil: {activity.subject}",
            "text": (
                f"\nTicket: {slack_link(self.links.issue(activity.against_id), issue_title)}"
                f"\nFrom: {sender}\n```{activity.body}```"
            ),
        }

    async def _activity_sender(
        self, owner_type: str | None, owner_id: str | None, staff_id: str | None
    ) -> str:
        """Mention for staff owners, backticked email for affiliation owners."""
        if owner_type == "staff":
            return await self.directory.slack_mention(staff_id or owner_id)
        if owner_type == "affiliation" and owner_id:
            affiliation = await self.accelo.affiliations.get(owner_id, "email")
            if affiliation is not None:
                return f"`{affiliation.email}`"
        return "Unknown"
