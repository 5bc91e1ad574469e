"""
Matching of Accelo staff to Slack users by email.
"""

from typing import Any

from accelo_slack.accelo import AcceloAPI
from accelo_slack.core.logging.logger import get_logger
from accelo_slack.domain.interfaces import DirectoryUser, IUserDirectory
from accelo_slack.slack.client import SlackClient

STAFF_FIELDS = "firstname,surname,email"

logger = get_logger(__name__)


async def sync_users(
    accelo: AcceloAPI,
    slack: SlackClient,
    directory: IUserDirectory,
) -> list[DirectoryUser]:
    """
    Rebuild the user directory.

    Every Accelo staff member whose email is known to Slack is stored;
    the rest are skipped.
    """
    staff = await accelo.staff.list(STAFF_FIELDS)
    users: list[DirectoryUser] = []

    for member in staff:
        if not member.email or member.id is None:
            continue
        result: dict[str, Any] = await slack.users_lookup_by_email(member.email)
        if not result.get("ok"):
            logger.debug(f"No Slack user for {member.email}")
            continue
        slack_user = result.get("user") or {}
        users.append(
            DirectoryUser(
                first_name=member.firstname,
                last_name=member.surname,
                email=member.email,
                accelo_id=member.id,
                slack_id=slack_user["id"],
                slack_username=slack_user.get("name"),
            )
        )

    await directory.replace_all(users)
    logger.info(f"👥 Matched {len(users)} of {len(staff)} Accelo staff to Slack users")
    return users
