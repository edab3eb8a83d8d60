"""Assemble the structured ChangelogReport from aggregation results."""

from __future__ import annotations

from collections.abc import Iterable

from release_changelog.aggregator import ApprovalStatusInput, TicketAggregation, aggregate
from release_changelog.logging_config import get_logger
from release_changelog.owners import group_by_owner
from release_changelog.schemas import (
    ChangelogReport,
    CommitBuckets,
    CommitLogEntry,
    Reporter,
    TicketBuckets,
)

logger = get_logger(__name__)


def assemble_report(
    aggregation: TicketAggregation,
    pending_by_owner: list[Reporter],
    commits: list[CommitLogEntry],
) -> ChangelogReport:
    """Place aggregation and owner-grouping results into a ChangelogReport."""
    return ChangelogReport(
        commits=CommitBuckets(
            all=commits,
            tickets=aggregation.commits_with_tickets,
            no_tickets=aggregation.commits_without_tickets,
        ),
        tickets=TicketBuckets(
            all=aggregation.ordered_tickets,
            approved=aggregation.approved,
            pending=aggregation.pending,
            pending_by_owner=pending_by_owner,
        ),
    )


def build_report(
    commits: Iterable[CommitLogEntry],
    approval_status: ApprovalStatusInput,
) -> ChangelogReport:
    """Aggregate commits, group pending tickets by owner, and build the report.

    Args:
        commits: Resolved commit log entries, in source-control order
        approval_status: Status name(s) treated as approved

    Returns:
        The assembled ChangelogReport
    """
    commits = list(commits)
    aggregation = aggregate(commits, approval_status)
    pending_by_owner = group_by_owner(aggregation.pending)
    report = assemble_report(aggregation, pending_by_owner, commits)

    logger.info(
        "report_built",
        commits=len(commits),
        commits_without_tickets=len(aggregation.commits_without_tickets),
        tickets=len(aggregation.ordered_tickets),
        approved=len(aggregation.approved),
        pending=len(aggregation.pending),
        owners=len(pending_by_owner),
    )
    return report
