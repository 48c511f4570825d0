"""Unit tests for replay orchestration."""

from __future__ import annotations

import pytest

from core.errors import ReplayStoreError
from replay.snapshot_replayer import SnapshotReplayer, replay_history
from store.memory_store import MemorySnapshotStore
from tests.fake_source import FakeCommitSource


def _two_branch_source() -> FakeCommitSource:
    source = FakeCommitSource()
    root = source.add_commit({"a.txt": b"1"}, "root", 100)
    main = source.add_commit({"a.txt": b"2"}, "main", 200, (root,))
    feature = source.add_commit({"b.txt": b"3"}, "feature", 150, (root,))
    source.set_ref("refs/heads/main", main)
    source.set_ref("refs/heads/feature", feature)
    return source


def test_replay_mirrors_source_parent_edges() -> None:
    """Each snapshot's parents should be the snapshots of its commit's parents."""
    source = _two_branch_source()
    store = MemorySnapshotStore()

    result = replay_history(source, store)
    mapped = result.snapshot_ids_by_commit
    expected: dict[str, tuple[str, ...]] = {}
    for commit_id, snapshot_id in mapped.items():
        parent_ids = source.load_commit(commit_id).parent_ids
        expected[snapshot_id] = tuple(mapped[parent] for parent in parent_ids)

    assert {snapshot.snapshot_id: snapshot.parent_ids for snapshot in store.snapshots()} == expected


def test_replay_records_commit_messages_in_order() -> None:
    """Snapshots should follow history order with source messages."""
    store = MemorySnapshotStore()

    result = replay_history(_two_branch_source(), store)

    assert [snapshot.message for snapshot in result.snapshots] == ["root", "feature", "main"]


def test_replay_reports_seed_ids() -> None:
    """The result should list the resolved branch tips."""
    source = _two_branch_source()

    result = replay_history(source, MemorySnapshotStore())

    assert set(result.seed_ids) == {ref.object_id for ref in source.references}


def test_replay_into_separate_stores_is_independent() -> None:
    """Replaying into two stores yields equal but unshared histories."""
    source = _two_branch_source()
    first_store = MemorySnapshotStore()
    second_store = MemorySnapshotStore()

    first = replay_history(source, first_store)
    second = replay_history(source, second_store)

    assert first.snapshots == second.snapshots and len(first_store) == len(second_store) == 3


def test_replay_twice_into_one_store_appends() -> None:
    """Replay is not idempotent: a second run appends new snapshots."""
    source = _two_branch_source()
    store = MemorySnapshotStore()
    replayer = SnapshotReplayer(source, store)
    replayer.run()

    replayer.run()

    assert len(store) == 6


def test_replay_propagates_store_rejection() -> None:
    """A store rejecting content should abort the replay."""
    source = FakeCommitSource()
    source.set_ref("refs/heads/main", source.add_commit({"ok.txt": b"1"}, "ok", 100))

    class RejectingStore(MemorySnapshotStore):
        def commit(self, content, message, parents=None):  # type: ignore[override]
            raise ReplayStoreError("rejected")

    with pytest.raises(ReplayStoreError):
        replay_history(source, RejectingStore())
