"""Tests for Pydantic schemas.

These tests verify that the input/output schemas:
- Accept the issue tracker's camelCase payloads
- Reject payloads missing required fields
- Serialize reports with the original report keys and no cycles

Run with: pytest tests/test_schemas.py -v
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from release_changelog.schemas import (
    ChangelogReport,
    CommitBuckets,
    CommitLogEntry,
    Reporter,
    Ticket,
    TicketBuckets,
)


# ---------------------------------------------------------------------------
# Ticket Schema Tests
# ---------------------------------------------------------------------------


class TestTicket:
    """Tests for the Ticket schema."""

    def test_parses_tracker_payload(self, ticket_json) -> None:
        """Tracker-shaped JSON parses, aliases included."""
        ticket = Ticket.model_validate(
            ticket_json("PROJ-1", summary="Fix bug", slack_user="@alice")
        )
        assert ticket.key == "PROJ-1"
        assert ticket.summary == "Fix bug"
        assert ticket.issue_type == "Bug"
        assert ticket.status == "Done"
        assert ticket.reporter_email == "a@x.com"
        assert ticket.fields.reporter.display_name == "Alice"
        assert ticket.slack_user == "@alice"
        assert ticket.reverted is False
        assert ticket.commits == []

    def test_ignores_extra_tracker_fields(self, ticket_json) -> None:
        """Extra fields from the tracker API are dropped, not rejected."""
        payload = ticket_json("PROJ-1")
        payload["id"] = "10001"
        payload["fields"]["priority"] = {"name": "High"}
        ticket = Ticket.model_validate(payload)
        assert ticket.key == "PROJ-1"

    def test_missing_reporter_email_is_allowed(self, ticket_json) -> None:
        """An absent reporter email parses to None."""
        ticket = Ticket.model_validate(ticket_json("PROJ-1", email=None))
        assert ticket.reporter_email is None

    def test_missing_summary_rejected(self, ticket_json) -> None:
        payload = ticket_json("PROJ-1")
        del payload["fields"]["summary"]
        with pytest.raises(ValidationError):
            Ticket.model_validate(payload)

    def test_empty_key_rejected(self, ticket_json) -> None:
        with pytest.raises(ValidationError):
            Ticket.model_validate(ticket_json(""))

    def test_commits_not_serialized(self, make_ticket, make_commit) -> None:
        """Accumulated commits are excluded from dumps."""
        ticket = make_ticket("PROJ-1")
        ticket.commits.append(make_commit("a1", [ticket]))
        data = ticket.model_dump(by_alias=True)
        assert "commits" not in data
        assert data["fields"]["reporter"]["emailAddress"] == "a@x.com"


# ---------------------------------------------------------------------------
# Commit Schema Tests
# ---------------------------------------------------------------------------


class TestCommitLogEntry:
    """Tests for the CommitLogEntry schema."""

    @pytest.mark.parametrize("field", ["identifier", "id", "hash"])
    def test_identifier_aliases(self, field: str) -> None:
        commit = CommitLogEntry.model_validate({field: "a1", "tickets": []})
        assert commit.identifier == "a1"

    def test_defaults(self) -> None:
        commit = CommitLogEntry.model_validate({"id": "a1"})
        assert commit.message == ""
        assert commit.tickets == []
        assert commit.reverted is False

    def test_nested_tickets_parse(self, ticket_json) -> None:
        commit = CommitLogEntry.model_validate(
            {"id": "a1", "tickets": [ticket_json("PROJ-1"), ticket_json("PROJ-2")]}
        )
        assert [t.key for t in commit.tickets] == ["PROJ-1", "PROJ-2"]

    def test_missing_identifier_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CommitLogEntry.model_validate({"message": "no id"})


# ---------------------------------------------------------------------------
# Report Schema Tests
# ---------------------------------------------------------------------------


class TestChangelogReport:
    """Tests for report serialization."""

    def test_empty_report_defaults(self) -> None:
        report = ChangelogReport()
        assert report.commits.all == []
        assert report.tickets.pending_by_owner == []

    def test_dump_uses_report_keys(self, make_ticket, make_commit) -> None:
        """by_alias dumps use noTickets/pendingByOwner and stay JSON-safe."""
        ticket = make_ticket("PROJ-1", status="In Progress")
        commit = make_commit("a1", [ticket])
        ticket.commits.append(commit)
        report = ChangelogReport(
            commits=CommitBuckets(all=[commit], tickets=[commit], no_tickets=[]),
            tickets=TicketBuckets(
                all=[ticket],
                approved=[],
                pending=[ticket],
                pending_by_owner=[
                    Reporter(email="a@x.com", name="Alice", tickets=[ticket])
                ],
            ),
        )
        data = json.loads(report.model_dump_json(by_alias=True))
        assert set(data["commits"]) == {"all", "tickets", "noTickets"}
        assert set(data["tickets"]) == {"all", "approved", "pending", "pendingByOwner"}
        assert data["tickets"]["pendingByOwner"][0]["email"] == "a@x.com"
        assert data["commits"]["all"][0]["tickets"][0]["key"] == "PROJ-1"

    def test_report_round_trips_from_aliases(self) -> None:
        report = ChangelogReport.model_validate(
            {
                "commits": {"all": [], "tickets": [], "noTickets": []},
                "tickets": {
                    "all": [],
                    "approved": [],
                    "pending": [],
                    "pendingByOwner": [],
                },
            }
        )
        assert report.commits.no_tickets == []
