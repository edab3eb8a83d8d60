"""Turn fetched commits into CommitLogEntry objects with resolved tickets.

This is the bridge between the collaborators and the changelog core:
1. Ticket keys are extracted from each commit message
2. Every distinct key is resolved once through the issue tracker
3. Tickets are filtered by issue type
4. Revert commits ("This reverts commit <sha>") mark their targets reverted,
   and a ticket is reverted when every commit that introduced it was
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from release_changelog.context.jira import IssueTrackerProtocol
from release_changelog.logging_config import get_logger
from release_changelog.schemas import CommitLogEntry, RawCommit, Ticket

logger = get_logger(__name__)

REVERT_PATTERN = re.compile(r"This reverts commit ([0-9a-fA-F]{7,40})")

# "/body/flags" style patterns, as CI inputs usually spell them
_DELIMITED_PATTERN = re.compile(r"^/(?P<body>.*)/(?P<flags>[a-z]*)$", re.DOTALL)
_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


def compile_ticket_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a ticket key pattern, accepting ``/body/flags`` notation.

    Flags ``i``, ``m`` and ``s`` map to their ``re`` equivalents; others
    (such as ``g``) are ignored because matching is always global.

    Raises:
        re.error: If the pattern is not a valid regular expression
    """
    if isinstance(pattern, re.Pattern):
        return pattern

    match = _DELIMITED_PATTERN.match(pattern)
    if match is None:
        return re.compile(pattern)

    flags = 0
    for flag in match.group("flags"):
        flags |= _FLAGS.get(flag, 0)
    return re.compile(match.group("body"), flags)


def extract_ticket_keys(message: str, pattern: re.Pattern[str]) -> list[str]:
    """Return the distinct ticket keys in a message, in order of appearance."""
    return list(dict.fromkeys(m.group(0) for m in pattern.finditer(message)))


def find_reverted_identifiers(commits: Iterable[RawCommit]) -> set[str]:
    """Collect the (possibly abbreviated) hashes named by revert commits."""
    reverted: set[str] = set()
    for commit in commits:
        reverted.update(sha.lower() for sha in REVERT_PATTERN.findall(commit.message))
    return reverted


def is_revert(commit: RawCommit) -> bool:
    return REVERT_PATTERN.search(commit.message) is not None


def _is_reverted(identifier: str, reverted: set[str]) -> bool:
    identifier = identifier.lower()
    return any(identifier.startswith(sha) for sha in reverted)


def issue_type_allowed(
    ticket: Ticket,
    include_issue_types: Sequence[str] = (),
    exclude_issue_types: Sequence[str] = (),
) -> bool:
    """Apply the exclude list, then the include list when it is non-empty."""
    if ticket.issue_type in exclude_issue_types:
        return False
    if include_issue_types and ticket.issue_type not in include_issue_types:
        return False
    return True


async def collect_commit_logs(
    commits: Sequence[RawCommit],
    tracker: IssueTrackerProtocol,
    pattern: str | re.Pattern[str],
    include_issue_types: Sequence[str] = (),
    exclude_issue_types: Sequence[str] = (),
) -> list[CommitLogEntry]:
    """Resolve the tickets each commit references.

    Args:
        commits: Fetched commits, in source-control order
        tracker: Issue tracker used to resolve ticket keys
        pattern: Ticket key pattern
        include_issue_types: If non-empty, only keep these issue types
        exclude_issue_types: Issue types to drop

    Returns:
        One CommitLogEntry per commit, in input order
    """
    compiled = compile_ticket_pattern(pattern)
    keys_by_commit = [extract_ticket_keys(c.message, compiled) for c in commits]
    distinct_keys = list(dict.fromkeys(k for keys in keys_by_commit for k in keys))

    found = await tracker.get_tickets(distinct_keys) if distinct_keys else {}
    tickets = {
        key: ticket
        for key, ticket in found.items()
        if issue_type_allowed(ticket, include_issue_types, exclude_issue_types)
    }

    reverted_shas = find_reverted_identifiers(commits)
    commit_reverted = [_is_reverted(c.identifier, reverted_shas) for c in commits]

    # Revert commits mention the ticket too but never count as introducing it
    introduced_by: dict[str, list[bool]] = {key: [] for key in tickets}
    for commit, keys, reverted in zip(commits, keys_by_commit, commit_reverted):
        if is_revert(commit):
            continue
        for key in keys:
            if key in introduced_by:
                introduced_by[key].append(reverted)

    resolved = {
        key: ticket.model_copy(update={"reverted": all(introduced_by[key])})
        for key, ticket in tickets.items()
    }

    entries = [
        CommitLogEntry(
            identifier=commit.identifier,
            message=commit.message,
            tickets=[resolved[k] for k in keys if k in resolved],
            reverted=reverted,
        )
        for commit, keys, reverted in zip(commits, keys_by_commit, commit_reverted)
    ]

    logger.info(
        "commit_logs_collected",
        commits=len(entries),
        ticket_keys=len(distinct_keys),
        tickets_resolved=len(resolved),
        reverted_commits=sum(commit_reverted),
    )
    return entries
