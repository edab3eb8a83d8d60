"""Ticket aggregation for commit logs.

Groups commits under the tickets they reference and classifies each distinct
ticket as approved or pending against the configured approval statuses.

Ordering contract:
- Tickets are discovered in commit order, then in reference order within
  each commit
- ``ordered_tickets`` is a stable sort by issue type name, so tickets of the
  same type keep their discovery order
- ``approved``/``pending`` and the commit partitions preserve the order of
  the list they were split from

Input tickets are never mutated: each distinct key gets a fresh copy that
accumulates its commits, so aggregating the same input twice yields the
same result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from release_changelog.schemas import CommitLogEntry, Ticket

ApprovalStatusInput = str | Iterable[str] | None


@dataclass
class TicketAggregation:
    """Result of aggregating commits by ticket.

    Attributes:
        tickets_by_key: Distinct tickets keyed by ticket key, in discovery order
        ordered_tickets: Distinct tickets, stably sorted by issue type name
        approved: Tickets whose status is in the approval set
        pending: Tickets whose status is not in the approval set
        commits_with_tickets: Commits referencing at least one ticket
        commits_without_tickets: Commits referencing no ticket
    """

    tickets_by_key: dict[str, Ticket] = field(default_factory=dict)
    ordered_tickets: list[Ticket] = field(default_factory=list)
    approved: list[Ticket] = field(default_factory=list)
    pending: list[Ticket] = field(default_factory=list)
    commits_with_tickets: list[CommitLogEntry] = field(default_factory=list)
    commits_without_tickets: list[CommitLogEntry] = field(default_factory=list)


def normalize_approval_status(approval_status: ApprovalStatusInput) -> frozenset[str]:
    """Normalize a single status name or a collection of them to a set."""
    if approval_status is None:
        return frozenset()
    if isinstance(approval_status, str):
        return frozenset([approval_status])
    return frozenset(approval_status)


def aggregate(
    commits: Iterable[CommitLogEntry],
    approval_status: ApprovalStatusInput,
) -> TicketAggregation:
    """Group commits by ticket and split tickets into approved and pending.

    Args:
        commits: Commit log entries, in source-control order
        approval_status: Status name(s) treated as approved

    Returns:
        A TicketAggregation with ordered tickets and commit partitions
    """
    statuses = normalize_approval_status(approval_status)
    commits = list(commits)

    tickets_by_key: dict[str, Ticket] = {}
    for commit in commits:
        for ref in commit.tickets:
            ticket = tickets_by_key.get(ref.key)
            if ticket is None:
                ticket = ref.model_copy(update={"commits": [], "commit_ids": []})
                tickets_by_key[ref.key] = ticket
            # A commit mentioning the same key twice still counts once
            if ticket.commits and ticket.commits[-1] is commit:
                continue
            ticket.commits.append(commit)
            ticket.commit_ids.append(commit.identifier)

    ordered = sorted(tickets_by_key.values(), key=lambda ticket: ticket.issue_type)

    return TicketAggregation(
        tickets_by_key=tickets_by_key,
        ordered_tickets=ordered,
        approved=[t for t in ordered if t.status in statuses],
        pending=[t for t in ordered if t.status not in statuses],
        commits_with_tickets=[c for c in commits if c.tickets],
        commits_without_tickets=[c for c in commits if not c.tickets],
    )
