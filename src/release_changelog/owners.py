"""Group pending tickets by the person who reported them."""

from __future__ import annotations

from collections.abc import Iterable

from release_changelog.schemas import Reporter, Ticket


def group_by_owner(pending: Iterable[Ticket]) -> list[Reporter]:
    """Group pending tickets by reporter email.

    The first ticket seen for an email creates the Reporter and fixes its
    display name and messaging handle; later tickets are appended to it.

    Reporters are returned in discovery order. No secondary ordering is
    applied: the historical sort key named a field that reporters never had,
    so it never reordered anything.

    Args:
        pending: Pending tickets, in report order

    Returns:
        One Reporter per distinct reporter email
    """
    reporters: dict[str | None, Reporter] = {}
    for ticket in pending:
        email = ticket.reporter_email
        reporter = reporters.get(email)
        if reporter is None:
            reporters[email] = Reporter(
                email=email,
                name=ticket.fields.reporter.display_name,
                slack_user=ticket.slack_user,
                tickets=[ticket],
            )
        else:
            reporter.tickets.append(ticket)

    return list(reporters.values())
