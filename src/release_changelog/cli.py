"""Command-line entry point for the changelog builder.

Two modes:
- Offline: read already-resolved commit log entries as JSON (file or stdin)
  and render the changelog
- Fetch (``--fetch``): pull commits from GitHub and tickets from Jira using
  the configured range, then render

Usage:
    release-changelog --input commits.json --base-url https://jira.example.com
    cat commits.json | release-changelog --format json
    release-changelog --fetch --config changelog.yaml --github-output
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from pydantic import TypeAdapter

from release_changelog.config import load_config
from release_changelog.generator import ChangelogGenerator, ChangelogResult, build_changelog
from release_changelog.logging_config import get_logger, setup_logging
from release_changelog.publish import set_output
from release_changelog.schemas import ChangelogResponse, CommitLogEntry

logger = get_logger(__name__)

_commit_list = TypeAdapter(list[CommitLogEntry])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-changelog",
        description="Build a release changelog from commits and their tickets",
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        help="Path to JSON file with commit log entries (reads stdin if omitted)",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Fetch commits and tickets from GitHub/Jira instead of reading input",
    )
    parser.add_argument("--config", "-c", type=str, help="Path to YAML config file")
    parser.add_argument("--base-url", type=str, help="Issue tracker base URL")
    parser.add_argument(
        "--approval-status",
        action="append",
        help="Status treated as approved (repeatable)",
    )
    parser.add_argument("--release-name", type=str, help="Release name override")
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Print the message only (text) or the full result (json)",
    )
    parser.add_argument(
        "--github-output",
        action="store_true",
        help="Publish the message as the changelog_message step output",
    )
    parser.add_argument("--log-level", type=str, help="Logging level")
    return parser


def _read_commits(path: str | None) -> list[CommitLogEntry]:
    if path:
        with open(path) as f:
            data = json.load(f)
    else:
        data = json.load(sys.stdin)
    return _commit_list.validate_python(data)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(log_level=args.log_level)

    if not args.fetch and not args.input and sys.stdin.isatty():
        parser.print_usage()
        print("Provide --input FILE, pipe JSON via stdin, or pass --fetch.")
        return 2

    try:
        config = load_config(args.config)
        updates = {
            "base_url": args.base_url,
            "approval_status": args.approval_status,
            "release_name_override": args.release_name,
        }
        config = config.model_copy(
            update={k: v for k, v in updates.items() if v is not None}
        )

        if args.fetch:
            result: ChangelogResult = asyncio.run(ChangelogGenerator(config).generate())
        else:
            result = build_changelog(
                _read_commits(args.input),
                config.approval_status,
                config.base_url,
                release_name=config.release_name_override,
            )
    except Exception as e:
        logger.error("changelog_failed", error=str(e), exc_info=True)
        return 1

    if args.format == "json":
        response = ChangelogResponse(
            release=result.release, message=result.message, report=result.report
        )
        print(response.model_dump_json(indent=2, by_alias=True))
    else:
        sys.stdout.write(result.message)

    if args.github_output:
        set_output("changelog_message", result.message)

    return 0


if __name__ == "__main__":
    sys.exit(main())
