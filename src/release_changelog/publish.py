"""Publish pipeline outputs to the GitHub Actions runner."""

from __future__ import annotations

import os
import uuid
from pathlib import Path


def _escape_command_value(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_output(name: str, value: str, path: str | Path | None = None) -> None:
    """Expose ``value`` as step output ``name``.

    Appends to the file named by ``$GITHUB_OUTPUT`` (or ``path``) using the
    heredoc form, which carries multi-line values intact. Without an output
    file, falls back to the legacy ``::set-output`` workflow command on stdout.

    Args:
        name: Output name (e.g., "changelog_message")
        value: Output value
        path: Output file; defaults to the GITHUB_OUTPUT environment variable
    """
    target = path or os.environ.get("GITHUB_OUTPUT")
    if not target:
        print(f"::set-output name={name}::{_escape_command_value(value)}")
        return

    delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
    with open(target, "a", encoding="utf-8") as fh:
        fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
