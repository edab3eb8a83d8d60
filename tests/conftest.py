"""Shared fixtures for the changelog tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from structlog.testing import capture_logs

from release_changelog.schemas import CommitLogEntry, Ticket


@pytest.fixture(autouse=True)
def captured_logs():
    """Capture structlog events instead of printing them."""
    with capture_logs() as logs:
        yield logs


def ticket_payload(
    key: str,
    summary: str = "Do something",
    issue_type: str = "Bug",
    status: str = "Done",
    email: str | None = "a@x.com",
    name: str | None = "Alice",
    slack_user: str | None = None,
    reverted: bool = False,
) -> dict:
    """A ticket payload shaped like the issue tracker's JSON."""
    reporter: dict = {}
    if email is not None:
        reporter["emailAddress"] = email
    if name is not None:
        reporter["displayName"] = name
    payload: dict = {
        "key": key,
        "fields": {
            "summary": summary,
            "issuetype": {"name": issue_type},
            "status": {"name": status},
            "reporter": reporter,
        },
        "reverted": reverted,
    }
    if slack_user is not None:
        payload["slackUser"] = slack_user
    return payload


@pytest.fixture
def ticket_json() -> Callable[..., dict]:
    """Factory for raw ticket payloads."""
    return ticket_payload


@pytest.fixture
def make_ticket() -> Callable[..., Ticket]:
    """Factory for Ticket models."""

    def _make(key: str, **kwargs) -> Ticket:
        return Ticket.model_validate(ticket_payload(key, **kwargs))

    return _make


@pytest.fixture
def make_commit() -> Callable[..., CommitLogEntry]:
    """Factory for CommitLogEntry models."""

    def _make(
        identifier: str,
        tickets: list[Ticket] | None = None,
        message: str = "",
        reverted: bool = False,
    ) -> CommitLogEntry:
        return CommitLogEntry(
            identifier=identifier,
            message=message or f"commit {identifier}",
            tickets=tickets or [],
            reverted=reverted,
        )

    return _make
