"""GitHub source-control client for fetching the commits in a release range.

This module fetches the commits between two refs from GitHub's compare API.
The changelog pipeline only needs each commit's hash and message; ticket
keys are extracted from messages later by the collector.

Design notes:
- Uses httpx for async HTTP requests
- Follows the Link header for paginated compare results
- Uses a Protocol so the pipeline doesn't depend on the concrete
  implementation (makes testing with mocks easy)

GitHub API docs: https://docs.github.com/en/rest/commits/commits#compare-two-commits
"""

from __future__ import annotations

import os
from typing import Protocol

import httpx

from release_changelog.schemas import RawCommit

# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class SourceControlProtocol(Protocol):
    """Protocol defining the interface for commit history fetching."""

    async def get_commit_logs(
        self, repo: str, range_from: str, range_to: str
    ) -> list[RawCommit]:
        """Fetch the commits reachable from range_to but not from range_from.

        Args:
            repo: Repository in "owner/name" format
            range_from: Base ref (tag, branch, or SHA)
            range_to: Head ref (tag, branch, or SHA)

        Returns:
            Commits in the order the source returns them
        """
        ...


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class GitHubSourceControl:
    """Real GitHub API client using httpx.

    Usage:
        source = GitHubSourceControl(token="ghp_...")
        commits = await source.get_commit_logs("myorg/api", "v1.0.0", "HEAD")
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub token. Falls back to the GITHUB_TOKEN environment
                   variable if not provided.
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self._token = token or os.environ.get("GITHUB_TOKEN", "")
        self._transport = transport
        self._headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            self._headers["Authorization"] = f"Bearer {self._token}"

    async def get_commit_logs(
        self, repo: str, range_from: str, range_to: str
    ) -> list[RawCommit]:
        """Fetch the commits in ``range_from...range_to``.

        Raises:
            httpx.HTTPStatusError: If any GitHub API call fails
        """
        async with httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=self._headers,
            timeout=30.0,
            transport=self._transport,
        ) as client:
            commits_data = await self._handle_pagination(
                client, f"/repos/{repo}/compare/{range_from}...{range_to}"
            )

        return [
            RawCommit(
                identifier=c["sha"],
                message=c["commit"]["message"],
                author_email=(c["commit"].get("author") or {}).get("email") or "",
            )
            for c in commits_data
        ]

    async def _handle_pagination(
        self,
        client: httpx.AsyncClient,
        url: str,
    ) -> list[dict]:
        """Collect the ``commits`` array from every page of a compare response."""
        all_items: list[dict] = []
        next_url: str | None = url
        params: dict | None = {"per_page": 100}

        while next_url:
            resp = await client.get(next_url, params=params)
            resp.raise_for_status()
            all_items.extend(resp.json().get("commits", []))
            next_url = self._parse_next_link(resp.headers.get("link", ""))
            # Next links already carry the full query string
            params = None

        return all_items

    @staticmethod
    def _parse_next_link(link_header: str) -> str | None:
        """Extract the 'next' URL from a GitHub Link header."""
        if not link_header:
            return None
        for part in link_header.split(","):
            if 'rel="next"' in part:
                return part.split(";")[0].strip().strip("<>")
        return None


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockSourceControl:
    """Mock source control that returns predefined commits.

    Usage:
        source = MockSourceControl(commits=[RawCommit(identifier="a1", message="PROJ-1 fix")])
        commits = await source.get_commit_logs("myorg/api", "v1", "HEAD")
    """

    def __init__(self, commits: list[RawCommit] | None = None) -> None:
        self._commits = commits or []
        self.calls: list[tuple[str, str, str]] = []

    async def get_commit_logs(
        self, repo: str, range_from: str, range_to: str
    ) -> list[RawCommit]:
        self.calls.append((repo, range_from, range_to))
        return list(self._commits)
