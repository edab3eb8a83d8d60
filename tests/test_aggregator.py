"""Tests for ticket aggregation.

These tests verify that aggregate():
- Records each ticket key once, no matter how many commits reference it
- Orders tickets by issue type with a stable sort
- Partitions tickets by approval status and commits by ticket presence
- Leaves its inputs untouched

Run with: pytest tests/test_aggregator.py -v
"""

from __future__ import annotations

import pytest

from release_changelog.aggregator import aggregate, normalize_approval_status


# ---------------------------------------------------------------------------
# Approval Status Normalization
# ---------------------------------------------------------------------------


class TestNormalizeApprovalStatus:
    """Tests for normalize_approval_status."""

    def test_scalar(self) -> None:
        assert normalize_approval_status("Done") == frozenset({"Done"})

    def test_list(self) -> None:
        assert normalize_approval_status(["Done", "Closed", "Done"]) == frozenset(
            {"Done", "Closed"}
        )

    def test_tuple_and_set(self) -> None:
        assert normalize_approval_status(("Done",)) == frozenset({"Done"})
        assert normalize_approval_status({"Done"}) == frozenset({"Done"})

    def test_none_is_empty(self) -> None:
        assert normalize_approval_status(None) == frozenset()


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class TestAggregate:
    """Tests for aggregate."""

    def test_shared_ticket_accumulates(self, make_ticket, make_commit) -> None:
        """Commits referencing the same key land on one ticket record."""
        t1 = make_ticket("PROJ-1")
        commits = [
            make_commit("a1", [t1]),
            make_commit("a2", [make_ticket("PROJ-1")]),
            make_commit("a3", [make_ticket("PROJ-2")]),
        ]
        result = aggregate(commits, "Done")

        assert list(result.tickets_by_key) == ["PROJ-1", "PROJ-2"]
        assert [c.identifier for c in result.tickets_by_key["PROJ-1"].commits] == [
            "a1",
            "a2",
        ]
        assert [c.identifier for c in result.tickets_by_key["PROJ-2"].commits] == ["a3"]
        assert result.tickets_by_key["PROJ-1"].commit_ids == ["a1", "a2"]

    def test_first_seen_ticket_data_wins(self, make_ticket, make_commit) -> None:
        commits = [
            make_commit("a1", [make_ticket("PROJ-1", summary="First")]),
            make_commit("a2", [make_ticket("PROJ-1", summary="Second")]),
        ]
        result = aggregate(commits, "Done")
        assert result.tickets_by_key["PROJ-1"].summary == "First"

    def test_duplicate_reference_in_one_commit_counts_once(
        self, make_ticket, make_commit
    ) -> None:
        ticket = make_ticket("PROJ-1")
        result = aggregate([make_commit("a1", [ticket, ticket])], "Done")
        assert len(result.ordered_tickets) == 1
        assert len(result.ordered_tickets[0].commits) == 1
        assert result.ordered_tickets[0].commit_ids == ["a1"]

    def test_stable_sort_by_issue_type(self, make_ticket, make_commit) -> None:
        """Tickets sort by issue type; equal types keep discovery order."""
        commits = [
            make_commit("a1", [make_ticket("PROJ-3", issue_type="Story")]),
            make_commit("a2", [make_ticket("PROJ-1", issue_type="Task")]),
            make_commit("a3", [make_ticket("PROJ-9", issue_type="Bug")]),
            make_commit("a4", [make_ticket("PROJ-2", issue_type="Story")]),
            make_commit("a5", [make_ticket("PROJ-5", issue_type="Bug")]),
        ]
        result = aggregate(commits, "Done")
        assert [t.key for t in result.ordered_tickets] == [
            "PROJ-9",
            "PROJ-5",
            "PROJ-3",
            "PROJ-2",
            "PROJ-1",
        ]

    @pytest.mark.parametrize("approval_status", ["Done", ["Done"], ("Done", "Closed")])
    def test_partition_by_status(self, make_ticket, make_commit, approval_status) -> None:
        commits = [
            make_commit("a1", [make_ticket("PROJ-1", status="Done")]),
            make_commit("a2", [make_ticket("PROJ-2", status="In Progress")]),
            make_commit("a3", [make_ticket("PROJ-3", status="Done")]),
        ]
        result = aggregate(commits, approval_status)
        assert [t.key for t in result.approved] == ["PROJ-1", "PROJ-3"]
        assert [t.key for t in result.pending] == ["PROJ-2"]

    def test_approved_and_pending_partition_all(self, make_ticket, make_commit) -> None:
        statuses = ["Done", "Closed", "Open", "Review", "Accepted", "Open"]
        commits = [
            make_commit(f"c{i}", [make_ticket(f"PROJ-{i}", status=s)])
            for i, s in enumerate(statuses)
        ]
        result = aggregate(commits, ["Done", "Closed", "Accepted"])

        approved = {t.key for t in result.approved}
        pending = {t.key for t in result.pending}
        assert approved.isdisjoint(pending)
        assert approved | pending == {t.key for t in result.ordered_tickets}
        assert all(t.status in {"Done", "Closed", "Accepted"} for t in result.approved)

    def test_commit_partition(self, make_ticket, make_commit) -> None:
        commits = [
            make_commit("a1", [make_ticket("PROJ-1")]),
            make_commit("a2"),
            make_commit("a3", [make_ticket("PROJ-2")]),
            make_commit("a4"),
        ]
        result = aggregate(commits, "Done")
        assert [c.identifier for c in result.commits_with_tickets] == ["a1", "a3"]
        assert [c.identifier for c in result.commits_without_tickets] == ["a2", "a4"]
        assert len(result.commits_with_tickets) + len(
            result.commits_without_tickets
        ) == len(commits)

    def test_empty_input(self) -> None:
        result = aggregate([], "Done")
        assert result.ordered_tickets == []
        assert result.commits_with_tickets == []
        assert result.commits_without_tickets == []

    def test_inputs_not_mutated_and_idempotent(self, make_ticket, make_commit) -> None:
        """Aggregating twice gives the same commit counts; inputs stay clean."""
        ticket = make_ticket("PROJ-1")
        commits = [make_commit("a1", [ticket]), make_commit("a2", [ticket])]

        first = aggregate(commits, "Done")
        second = aggregate(commits, "Done")

        assert ticket.commits == []
        assert ticket.commit_ids == []
        assert len(first.ordered_tickets[0].commits) == 2
        assert len(second.ordered_tickets[0].commits) == 2
        assert second.ordered_tickets[0].commit_ids == ["a1", "a2"]
        assert first.ordered_tickets[0] is not ticket

    def test_accepts_generator(self, make_ticket, make_commit) -> None:
        commits = (make_commit(f"a{i}", [make_ticket("PROJ-1")]) for i in range(3))
        result = aggregate(commits, "Done")
        assert len(result.commits_with_tickets) == 3
        assert len(result.ordered_tickets[0].commits) == 3
