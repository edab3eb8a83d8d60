"""Render a ChangelogReport as the changelog message.

Each ticket that was not reverted becomes one markdown bullet linking to
the issue tracker:

      * [PROJ-1](https://jira.example.com/browse/PROJ-1) - Fix bug

An empty changelog renders as the placeholder `` ~ None ~ `` instead of an
empty string. HTML entities that the tracker left in summaries (``&#39;``,
``&amp;``) are decoded so the message reads as plain text.
"""

from __future__ import annotations

import html

from release_changelog.schemas import ChangelogReport, Ticket

PLACEHOLDER = " ~ None ~ "


def ticket_url(base_url: str, key: str) -> str:
    """Build the browse URL for a ticket key."""
    return f"{base_url.rstrip('/')}/browse/{key}"


def render_ticket_line(ticket: Ticket, base_url: str) -> str:
    return f"  * [{ticket.key}]({ticket_url(base_url, ticket.key)}) - {ticket.summary}\n"


def render_changelog(report: ChangelogReport, base_url: str) -> str:
    """Render the report's tickets as the changelog message.

    Args:
        report: The assembled changelog report
        base_url: Issue tracker base URL used for ticket links

    Returns:
        One bullet line per non-reverted ticket in ``tickets.all`` order,
        or the placeholder when none remain
    """
    visible = [ticket for ticket in report.tickets.all if not ticket.reverted]
    if not visible:
        return PLACEHOLDER

    message = "".join(render_ticket_line(ticket, base_url) for ticket in visible)
    return html.unescape(message)
