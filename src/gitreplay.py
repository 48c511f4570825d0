"""Public SDK surface for gitreplay.

This module provides a stable import path for library users.
It re-exports the primary client, store, and query models.
"""

from __future__ import annotations

from core.config import ReplayConfig
from core.types import (
    RepositoryReference,
    ReplayResult,
    SearchResults,
    SourceCommit,
    StoredSnapshot,
)
from replay.history_order import iter_history
from replay.snapshot_replayer import SnapshotReplayer, replay_history
from replay.tree_flattener import flatten_commit
from source.dulwich_source import DulwichCommitSource
from source.ref_resolver import resolve_seed_commits
from store.history_sdk import ReplayClient, ReplaySession
from store.memory_store import MemorySnapshotStore
from store.query_engine import (
    AllSnapshotsExpression,
    SearchQuery,
    SnapshotIdsExpression,
    TipOfExpression,
)

__all__ = [
    "AllSnapshotsExpression",
    "DulwichCommitSource",
    "MemorySnapshotStore",
    "ReplayClient",
    "ReplayConfig",
    "ReplayResult",
    "ReplaySession",
    "RepositoryReference",
    "SearchQuery",
    "SearchResults",
    "SnapshotIdsExpression",
    "SnapshotReplayer",
    "SourceCommit",
    "StoredSnapshot",
    "TipOfExpression",
    "flatten_commit",
    "iter_history",
    "replay_history",
    "resolve_seed_commits",
]
