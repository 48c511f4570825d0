"""gitreplay CLI entry points.
This module exposes commands that replay a repository and query it.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Any, Sequence

from core.config import ReplayConfig
from core.errors import ReplayError
from store.history_sdk import ReplayClient, ReplaySession


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="gitreplay",
        description="Replay git history into an in-memory snapshot store",
    )
    parser.add_argument("--data-root", help="Override GITREPLAY_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_log_command(subparsers)
    _add_tip_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the gitreplay CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        if args.command == "log":
            return _run_log_command(client, args)
        if args.command == "tip":
            return _run_tip_command(client, args)
    except ReplayError as error:
        print(f"gitreplay: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> ReplayClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = ReplayConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return ReplayClient(config)


def _run_log_command(client: ReplayClient, args: argparse.Namespace) -> int:
    """Handle log command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    session = client.replay(args.source)
    for snapshot in session.result.snapshots:
        print(
            f"{snapshot.sequence}\t"
            f"{snapshot.snapshot_id}\t"
            f"{','.join(snapshot.parent_ids) or '-'}\t"
            f"{snapshot.entry_count}\t"
            f"{_subject(snapshot.message)}"
        )
    return 0


def _run_tip_command(client: ReplayClient, args: argparse.Namespace) -> int:
    """Handle tip command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    session = client.replay(args.source)
    for snapshot in session.tips():
        print(snapshot.snapshot_id)
        _print_checkout(session, snapshot.snapshot_id)
    return 0


def _print_checkout(session: ReplaySession, snapshot_id: str) -> None:
    """Print one path and size line per file in a snapshot."""
    content = session.checkout(snapshot_id)
    for path in sorted(content):
        print(f"{path}\t{len(content[path])}")


def _subject(message: str) -> str:
    lines = message.strip().splitlines()
    return lines[0] if lines else ""


def _add_log_command(subparsers: Any) -> None:
    """Register log subcommand."""
    parser = subparsers.add_parser("log", help="Replay history and list stored snapshots")
    parser.add_argument("source", help="Local repository path or remote git URI")


def _add_tip_command(subparsers: Any) -> None:
    """Register tip subcommand."""
    parser = subparsers.add_parser("tip", help="Replay history and show tip snapshot contents")
    parser.add_argument("source", help="Local repository path or remote git URI")
