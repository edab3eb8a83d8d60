"""Jira client for resolving ticket keys into ticket metadata.

Only the fields the changelog renders or groups by are requested: summary,
issue type, status, and reporter.

Design notes:
- Uses httpx for async HTTP requests, one client per batch of keys
- Unknown keys (404) resolve to nothing rather than failing the run, since
  commit messages routinely mention keys from other projects
- Credentials are passed through as configured

Jira REST docs: https://developer.atlassian.com/cloud/jira/platform/rest/v2/
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

import httpx

from release_changelog.logging_config import get_logger
from release_changelog.schemas import Ticket

logger = get_logger(__name__)

TICKET_FIELDS = "summary,issuetype,status,reporter"

# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class IssueTrackerProtocol(Protocol):
    """Protocol for ticket metadata lookups."""

    async def get_tickets(self, keys: Iterable[str]) -> dict[str, Ticket]:
        """Resolve ticket keys to tickets.

        Args:
            keys: Ticket keys to look up

        Returns:
            Found tickets keyed by ticket key; unknown keys are omitted
        """
        ...


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class JiraClient:
    """Real Jira REST client using httpx.

    Usage:
        jira = JiraClient(host="myorg.atlassian.net", email="bot@myorg.com", token="...")
        tickets = await jira.get_tickets(["PROJ-1", "PROJ-2"])
    """

    def __init__(
        self,
        host: str,
        email: str | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Jira client.

        Args:
            host: Jira host, with or without scheme (e.g., "myorg.atlassian.net")
            email: Account email for basic credentials
            token: API token for basic credentials
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        self._base_url = host.rstrip("/")
        self._auth = (email, token) if email and token else None
        self._transport = transport
        self._headers = {"Accept": "application/json"}

    async def get_tickets(self, keys: Iterable[str]) -> dict[str, Ticket]:
        """Fetch each distinct key once.

        Raises:
            httpx.HTTPStatusError: On any non-404 error response
        """
        tickets: dict[str, Ticket] = {}
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            auth=self._auth,
            timeout=30.0,
            transport=self._transport,
        ) as client:
            for key in dict.fromkeys(keys):
                ticket = await self._get_ticket(client, key)
                if ticket is not None:
                    tickets[key] = ticket
        return tickets

    async def _get_ticket(self, client: httpx.AsyncClient, key: str) -> Ticket | None:
        resp = await client.get(
            f"/rest/api/2/issue/{key}", params={"fields": TICKET_FIELDS}
        )
        if resp.status_code == 404:
            logger.warning("ticket_not_found", key=key)
            return None
        resp.raise_for_status()
        return Ticket.model_validate(resp.json())


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockIssueTracker:
    """Mock issue tracker serving tickets from a dict.

    Usage:
        tracker = MockIssueTracker(tickets={"PROJ-1": {...ticket payload...}})
        found = await tracker.get_tickets(["PROJ-1"])
    """

    def __init__(self, tickets: dict[str, Ticket | dict] | None = None) -> None:
        self._tickets = {
            key: Ticket.model_validate(value) for key, value in (tickets or {}).items()
        }
        self.requested: list[str] = []

    async def get_tickets(self, keys: Iterable[str]) -> dict[str, Ticket]:
        found: dict[str, Ticket] = {}
        for key in keys:
            self.requested.append(key)
            if key in self._tickets:
                found[key] = self._tickets[key]
        return found
