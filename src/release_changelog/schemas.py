"""Pydantic models defining the input/output contract for the changelog builder.

These schemas are the single source of truth for what flows in and out of
the changelog core. They are used for:
- Validating commit/ticket payloads at the system boundary (CLI, API, Jira)
- Carrying aggregated tickets and owner groups between pipeline steps
- Serializing the structured ChangelogReport for downstream consumers

Key design decisions:
- Input models accept the issue tracker's camelCase field names as aliases
  (emailAddress, displayName, slackUser) and populate by name as well
- Ticket.commits is excluded from serialization so that a report dump never
  recurses commit -> ticket -> commit; Ticket.commit_ids carries the
  identifiers instead
- Output models serialize with the original report keys (noTickets,
  pendingByOwner) when dumped with by_alias=True
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Ticket Schemas
# ---------------------------------------------------------------------------


class IssueType(BaseModel):
    """Issue type of a ticket (e.g., "Bug", "Story", "Task")."""

    name: str = Field(..., description="Issue type name")


class TicketStatus(BaseModel):
    """Workflow status of a ticket (e.g., "In Progress", "Done")."""

    name: str = Field(..., description="Status name")


class TicketReporter(BaseModel):
    """The person who reported a ticket, as the issue tracker returns it.

    Attributes:
        email_address: Reporter email. Used as the owner grouping key.
        display_name: Human-readable reporter name
    """

    model_config = ConfigDict(populate_by_name=True)

    email_address: str | None = Field(
        None, alias="emailAddress", description="Reporter email address"
    )
    display_name: str | None = Field(
        None, alias="displayName", description="Reporter display name"
    )


class TicketFields(BaseModel):
    """The subset of issue tracker fields the changelog needs."""

    summary: str = Field(..., description="One-line ticket summary")
    issuetype: IssueType = Field(..., description="Issue type")
    status: TicketStatus = Field(..., description="Current workflow status")
    reporter: TicketReporter = Field(
        default_factory=TicketReporter, description="Ticket reporter"
    )


class Ticket(BaseModel):
    """A tracked work item referenced by one or more commits.

    Attributes:
        key: Unique ticket key (e.g., "PROJ-123")
        fields: Issue tracker fields (summary, type, status, reporter)
        slack_user: Optional messaging handle for the reporter
        reverted: True when every commit that introduced this ticket was
                  later reverted. Resolved upstream and passed through.
        commits: Commits referencing this ticket, in the order encountered.
                 Filled in by the aggregator and never serialized.
        commit_ids: Identifiers of those commits. Serialized in place of
                    the commits themselves.
    """

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(..., min_length=1, description="Ticket key")
    fields: TicketFields = Field(..., description="Issue tracker fields")
    slack_user: str | None = Field(
        None, alias="slackUser", description="Reporter messaging handle"
    )
    reverted: bool = Field(False, description="All introducing commits reverted")
    commits: list[CommitLogEntry] = Field(
        default_factory=list,
        exclude=True,
        description="Commits referencing this ticket",
    )
    commit_ids: list[str] = Field(
        default_factory=list,
        alias="commitIds",
        description="Identifiers of the commits referencing this ticket",
    )

    @property
    def summary(self) -> str:
        return self.fields.summary

    @property
    def issue_type(self) -> str:
        return self.fields.issuetype.name

    @property
    def status(self) -> str:
        return self.fields.status.name

    @property
    def reporter_email(self) -> str | None:
        return self.fields.reporter.email_address


# ---------------------------------------------------------------------------
# Commit Schemas
# ---------------------------------------------------------------------------


class RawCommit(BaseModel):
    """A commit as fetched from source control, before ticket resolution."""

    identifier: str = Field(..., description="Commit hash")
    message: str = Field("", description="Full commit message")
    author_email: str = Field("", description="Commit author email")


class CommitLogEntry(BaseModel):
    """A source-control commit with the tickets its message references.

    Attributes:
        identifier: Commit hash (accepts "id" or "hash" on input)
        message: Full commit message
        tickets: Tickets referenced by this commit, in message order
        reverted: Whether a later commit reverted this one
    """

    identifier: str = Field(
        ...,
        validation_alias=AliasChoices("identifier", "id", "hash"),
        description="Commit hash",
    )
    message: str = Field("", description="Commit message")
    tickets: list[Ticket] = Field(
        default_factory=list, description="Tickets referenced by the commit"
    )
    reverted: bool = Field(False, description="Reverted by a later commit")


Ticket.model_rebuild()


# ---------------------------------------------------------------------------
# Report Schemas
# ---------------------------------------------------------------------------


class Reporter(BaseModel):
    """Owner of one or more pending tickets, keyed by email.

    Attributes:
        email: Reporter email (the grouping key)
        name: Reporter display name, taken from the first ticket seen
        slack_user: Messaging handle, taken from the first ticket seen
        tickets: Owned pending tickets, in discovery order
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = Field(..., description="Reporter email")
    name: str | None = Field(None, description="Reporter display name")
    slack_user: str | None = Field(
        None, alias="slackUser", description="Reporter messaging handle"
    )
    tickets: list[Ticket] = Field(
        default_factory=list, description="Pending tickets owned by the reporter"
    )


class CommitBuckets(BaseModel):
    """Commits split by whether they reference any ticket."""

    model_config = ConfigDict(populate_by_name=True)

    all: list[CommitLogEntry] = Field(default_factory=list)
    tickets: list[CommitLogEntry] = Field(default_factory=list)
    no_tickets: list[CommitLogEntry] = Field(
        default_factory=list, alias="noTickets"
    )


class TicketBuckets(BaseModel):
    """Distinct tickets, partitioned by approval state and grouped by owner."""

    model_config = ConfigDict(populate_by_name=True)

    all: list[Ticket] = Field(default_factory=list)
    approved: list[Ticket] = Field(default_factory=list)
    pending: list[Ticket] = Field(default_factory=list)
    pending_by_owner: list[Reporter] = Field(
        default_factory=list, alias="pendingByOwner"
    )


class ChangelogReport(BaseModel):
    """Structured release report consumed by the renderer and downstream jobs."""

    commits: CommitBuckets = Field(default_factory=CommitBuckets)
    tickets: TicketBuckets = Field(default_factory=TicketBuckets)


# ---------------------------------------------------------------------------
# API Schemas
# ---------------------------------------------------------------------------


class ChangelogRequest(BaseModel):
    """Request body for building a changelog from resolved commit logs."""

    commits: list[CommitLogEntry] = Field(
        default_factory=list, description="Resolved commit log entries"
    )
    approval_status: str | list[str] = Field(
        default_factory=lambda: ["Done", "Closed", "Accepted"],
        description="Status name(s) treated as approved",
    )
    base_url: str = Field(..., min_length=1, description="Issue tracker base URL")
    release_name: str | None = Field(
        None, description="Release name override; generated when omitted"
    )


class ChangelogResponse(BaseModel):
    """Response body with the release name, rendered message, and report."""

    release: str
    message: str
    report: ChangelogReport
