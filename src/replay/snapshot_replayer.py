"""Replay orchestration from commit source into snapshot store.

This module resolves reference tips, orders the reachable history,
flattens each commit, and records one snapshot per source commit.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import ReplayResult, StoredSnapshot
from replay.history_order import iter_history
from replay.tree_flattener import flatten_commit
from source.commit_source import CommitSource
from source.ref_resolver import resolve_seed_commits
from store.memory_store import MemorySnapshotStore

_LOGGER = get_logger(__name__)


class SnapshotReplayer:
    """Single-pass runner replaying full history into one store.

    Each stored snapshot is linked to the snapshots of its source
    parents, so the store history mirrors the source commit graph.
    """

    def __init__(self, source: CommitSource, store: MemorySnapshotStore) -> None:
        self._source = source
        self._store = store

    def run(self) -> ReplayResult:
        """Replay every reachable commit in order.

        Returns:
            Replay result listing the stored snapshots.

        Raises:
            ReplaySourceError: If a commit, tree, or blob cannot be read.
            ReplayStoreError: If the store rejects a snapshot.
        """
        if len(self._store):
            _LOGGER.warning("replay_into_non_empty_store", existing_snapshots=len(self._store))
        seed_ids = tuple(sorted(resolve_seed_commits(self._source)))
        _LOGGER.info("replay_started", seed_count=len(seed_ids))
        snapshots_by_commit: dict[str, StoredSnapshot] = {}
        replayed: list[StoredSnapshot] = []
        for commit in iter_history(self._source, seed_ids):
            content = flatten_commit(self._source, commit)
            parents = [
                snapshots_by_commit[parent_id] for parent_id in dict.fromkeys(commit.parent_ids)
            ]
            snapshot = self._store.commit(content, commit.message, parents)
            snapshots_by_commit[commit.commit_id] = snapshot
            replayed.append(snapshot)
            _LOGGER.debug(
                "snapshot_replayed",
                commit_id=commit.commit_id,
                snapshot_id=snapshot.snapshot_id,
                entry_count=snapshot.entry_count,
            )
        _LOGGER.info(
            "replay_completed",
            seed_count=len(seed_ids),
            snapshot_count=len(replayed),
        )
        return ReplayResult(
            snapshots=tuple(replayed),
            seed_ids=seed_ids,
            snapshot_ids_by_commit={
                commit_id: snapshot.snapshot_id
                for commit_id, snapshot in snapshots_by_commit.items()
            },
        )


def replay_history(source: CommitSource, store: MemorySnapshotStore) -> ReplayResult:
    """Replay the full history of a commit source into a store.

    Args:
        source: Commit source to read.
        store: Store receiving one snapshot per source commit.

    Returns:
        Replay result listing the stored snapshots.
    """
    return SnapshotReplayer(source, store).run()
