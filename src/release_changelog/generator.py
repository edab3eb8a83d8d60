"""Changelog pipeline orchestrator.

This module ties together all the components:
- Commit fetching (context/github.py)
- Ticket resolution and revert tracking (context/jira.py, context/collector.py)
- Release naming (naming.py)
- Report building (aggregator.py, owners.py, report.py)
- Message rendering (render.py)

The pipeline follows this flow:
1. Fetch the commits in the configured range
2. Resolve the tickets each commit references
3. Name the release
4. Build the structured ChangelogReport
5. Render the changelog message

``build_changelog`` runs steps 3-5 on commit logs that are already
resolved; the CLI and API use it directly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from release_changelog.aggregator import ApprovalStatusInput
from release_changelog.config import ChangelogConfig
from release_changelog.context.collector import collect_commit_logs
from release_changelog.context.github import GitHubSourceControl, SourceControlProtocol
from release_changelog.context.jira import IssueTrackerProtocol, JiraClient
from release_changelog.logging_config import get_logger
from release_changelog.naming import name_release
from release_changelog.render import render_changelog
from release_changelog.report import build_report
from release_changelog.schemas import ChangelogReport, CommitLogEntry

logger = get_logger(__name__)


@dataclass
class ChangelogResult:
    """Everything one pipeline run produces.

    Attributes:
        release: Release name for this run
        report: Structured changelog report
        message: Rendered changelog message
    """

    release: str
    report: ChangelogReport
    message: str


def build_changelog(
    commits: Iterable[CommitLogEntry],
    approval_status: ApprovalStatusInput,
    base_url: str,
    release_name: str | None = None,
    seed: int | str | None = None,
) -> ChangelogResult:
    """Name the release, build the report, and render the message.

    Args:
        commits: Resolved commit log entries
        approval_status: Status name(s) treated as approved
        base_url: Issue tracker base URL for ticket links
        release_name: Release name override
        seed: Seed for generated release names

    Returns:
        The ChangelogResult for this run
    """
    release = name_release(release_name, seed=seed)
    report = build_report(commits, approval_status)
    message = render_changelog(report, base_url)
    logger.info("changelog_rendered", release=release, length=len(message))
    return ChangelogResult(release=release, report=report, message=message)


class ChangelogGenerator:
    """Orchestrates the full changelog pipeline against live collaborators.

    Each call to generate() is independent.

    Usage:
        generator = ChangelogGenerator(load_config())
        result = await generator.generate()
    """

    def __init__(
        self,
        config: ChangelogConfig,
        source_control: SourceControlProtocol | None = None,
        issue_tracker: IssueTrackerProtocol | None = None,
        seed: int | str | None = None,
    ) -> None:
        """Initialize the generator with its dependencies.

        Args:
            config: Pipeline configuration
            source_control: Commit source. Defaults to GitHub.
            issue_tracker: Ticket source. Defaults to Jira.
            seed: Seed for generated release names
        """
        self.config = config
        self.source_control = source_control or GitHubSourceControl(
            token=config.github_token
        )
        self.issue_tracker = issue_tracker or JiraClient(
            host=config.jira_host or config.base_url,
            email=config.jira_email,
            token=config.jira_token,
        )
        self.seed = seed

    async def generate(self) -> ChangelogResult:
        """Run the pipeline for the configured commit range.

        Raises:
            ValueError: If the repository or range start is not configured
        """
        config = self.config
        if not config.repo or not config.range_from:
            raise ValueError("Both repo and range_from must be configured")

        logger.info(
            "changelog_started",
            repo=config.repo,
            range_from=config.range_from,
            range_to=config.range_to,
        )
        try:
            raw_commits = await self.source_control.get_commit_logs(
                config.repo, config.range_from, config.range_to
            )
            logger.info("commits_fetched", repo=config.repo, count=len(raw_commits))

            commit_logs = await collect_commit_logs(
                raw_commits,
                self.issue_tracker,
                config.ticket_id_pattern,
                include_issue_types=config.include_issue_types,
                exclude_issue_types=config.exclude_issue_types,
            )

            return build_changelog(
                commit_logs,
                config.approval_status,
                config.base_url,
                release_name=config.release_name_override,
                seed=self.seed,
            )
        except Exception as e:
            logger.error(
                "changelog_failed",
                repo=config.repo,
                error=str(e),
                exc_info=True,
            )
            raise
