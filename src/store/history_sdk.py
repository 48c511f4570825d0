"""Python SDK for replay and query operations.

This module exposes high-level APIs that replay a repository into a
fresh snapshot store and query the resulting history.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import ReplayConfig
from core.types import FlatContentMapping, ReplayResult, SearchResults, StoredSnapshot
from replay.snapshot_replayer import replay_history
from source.repository_clone import open_commit_source
from store.memory_store import MemorySnapshotStore, SnapshotRef
from store.query_engine import (
    AllSnapshotsExpression,
    SearchExpression,
    SearchQuery,
    TipOfExpression,
)


class ReplayClient:
    """Primary SDK entry point for replay workflows."""

    def __init__(self, config: ReplayConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or ReplayConfig.from_env()

    def replay(self, source_uri: str) -> "ReplaySession":
        """Replay a repository's full history into a fresh store.

        Args:
            source_uri: Local repository path or remote URI.

        Returns:
            Session holding the populated store.

        Raises:
            ReplaySourceError: If the repository cannot be read.
            ReplayStoreError: If the store rejects a snapshot.
        """
        store = MemorySnapshotStore()
        with open_commit_source(source_uri, self._config) as source:
            result = replay_history(source, store)
        return ReplaySession(store, result)

    def with_data_root(self, data_root: str) -> "ReplayClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return ReplayClient(replace(self._config, data_root=resolved_root))


class ReplaySession:
    """Query handle over one replayed store."""

    def __init__(self, store: MemorySnapshotStore, result: ReplayResult) -> None:
        self._store = store
        self._result = result

    @property
    def store(self) -> MemorySnapshotStore:
        return self._store

    @property
    def result(self) -> ReplayResult:
        return self._result

    def search(self, expression: SearchExpression) -> SearchResults:
        """Evaluate a search expression against the replayed history."""
        return self._store.search(SearchQuery(expression))

    def tips(self) -> tuple[StoredSnapshot, ...]:
        """Return snapshots with no descendant in the whole history."""
        return self.search(TipOfExpression(AllSnapshotsExpression())).snapshots

    def checkout(self, snapshot: SnapshotRef) -> FlatContentMapping:
        """Materialize the content mapping of a snapshot."""
        return self._store.checkout(snapshot)
