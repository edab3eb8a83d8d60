"""Configuration for the changelog pipeline.

Settings come from two layers, applied in order:
1. An optional YAML file (missing file means defaults)
2. Environment variables, as a CI job would provide them

Usage:
    config = load_config("changelog.yaml")
    config.approval_statuses  # frozenset({"Done", "Closed", "Accepted"})
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from release_changelog.aggregator import normalize_approval_status
from release_changelog.context.collector import compile_ticket_pattern

# Environment variable -> config field
ENV_FIELDS: dict[str, str] = {
    "JIRA_BASE_URL": "base_url",
    "JIRA_HOST": "jira_host",
    "JIRA_EMAIL": "jira_email",
    "JIRA_TOKEN": "jira_token",
    "JIRA_TICKET_ID_PATTERN": "ticket_id_pattern",
    "VERSION": "release_name_override",
    "SOURCE_CONTROL_RANGE_FROM": "range_from",
    "SOURCE_CONTROL_RANGE_TO": "range_to",
    "GITHUB_TOKEN": "github_token",
    "GITHUB_REPOSITORY": "repo",
}

DEFAULT_TICKET_ID_PATTERN = r"[A-Z][A-Z0-9]+-\d+"


class ChangelogConfig(BaseModel):
    """Top-level changelog settings.

    Attributes:
        base_url: Issue tracker web URL used for ticket links
        approval_status: Status name(s) treated as approved
        exclude_issue_types: Issue types dropped while collecting tickets
        include_issue_types: If non-empty, only these issue types are kept
        ticket_id_pattern: Regex (optionally ``/body/flags``) for ticket keys
        release_name_override: Fixed release name; generated when unset
        range_from: Base ref of the commit range
        range_to: Head ref of the commit range
        repo: Repository in "owner/name" format
    """

    base_url: str = ""
    approval_status: str | list[str] = Field(
        default_factory=lambda: ["Done", "Closed", "Accepted"]
    )
    exclude_issue_types: list[str] = Field(default_factory=lambda: ["Sub-task"])
    include_issue_types: list[str] = Field(default_factory=list)
    ticket_id_pattern: str = DEFAULT_TICKET_ID_PATTERN
    release_name_override: str | None = None
    range_from: str | None = None
    range_to: str = "HEAD"
    repo: str | None = None
    jira_host: str | None = None
    jira_email: str | None = None
    jira_token: str | None = None
    github_token: str | None = None

    @field_validator("ticket_id_pattern")
    @classmethod
    def check_pattern_compiles(cls, value: str) -> str:
        """Reject ticket patterns that are not valid regular expressions."""
        try:
            compile_ticket_pattern(value)
        except re.error as exc:
            raise ValueError(f"Invalid ticket_id_pattern {value!r}: {exc}") from exc
        return value

    @property
    def approval_statuses(self) -> frozenset[str]:
        return normalize_approval_status(self.approval_status)


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ChangelogConfig:
    """Load config from an optional YAML file and overlay environment variables.

    Args:
        path: Path to a YAML config file. Missing files are ignored.
        env: Environment mapping. Uses ``os.environ`` if not provided.

    Returns:
        A validated ChangelogConfig

    Raises:
        ValueError: If the YAML is invalid or the merged config fails validation
    """
    env = os.environ if env is None else env

    raw: Any = {}
    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            try:
                raw = yaml.safe_load(config_path.read_text()) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
            if not isinstance(raw, dict):
                raise ValueError(f"Invalid changelog config in {path}: expected a mapping")

    for var, field_name in ENV_FIELDS.items():
        value = env.get(var)
        if value:
            raw[field_name] = value

    statuses = env.get("APPROVAL_STATUS")
    if statuses:
        raw["approval_status"] = [s.strip() for s in statuses.split(",") if s.strip()]

    try:
        return ChangelogConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid changelog config: {exc}") from exc
