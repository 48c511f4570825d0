"""Unit tests for the in-memory snapshot store."""

from __future__ import annotations

import pytest

from core.errors import ReplayStoreError
from store.memory_store import MemorySnapshotStore


def test_commit_links_to_current_head_by_default() -> None:
    """Without explicit parents a commit should follow the head."""
    store = MemorySnapshotStore()
    first = store.commit({"a.txt": b"1"}, "first")

    second = store.commit({"a.txt": b"2"}, "second")

    assert second.parent_ids == (first.snapshot_id,)


def test_commit_records_explicit_parents() -> None:
    """Explicit parents should be recorded in the given order."""
    store = MemorySnapshotStore()
    left = store.commit({"a.txt": b"1"}, "left", parents=[])
    right = store.commit({"b.txt": b"2"}, "right", parents=[])

    merge = store.commit({"a.txt": b"1", "b.txt": b"2"}, "merge", parents=[left, right])

    assert merge.parent_ids == (left.snapshot_id, right.snapshot_id)


def test_checkout_returns_committed_content() -> None:
    """Checkout should materialize exactly the committed mapping."""
    store = MemorySnapshotStore()
    snapshot = store.commit({"a.txt": b"1", "dir/b.bin": b"\x00\x01"}, "files")

    content = store.checkout(snapshot)

    assert content == {"a.txt": b"1", "dir/b.bin": b"\x00\x01"}


def test_checkout_returns_independent_copy() -> None:
    """Mutating a checkout must not alter stored content."""
    store = MemorySnapshotStore()
    snapshot = store.commit({"a.txt": b"1"}, "files")
    store.checkout(snapshot)["a.txt"] = b"changed"

    assert store.checkout(snapshot.snapshot_id) == {"a.txt": b"1"}


def test_commit_deduplicates_identical_blobs() -> None:
    """Identical content across paths and snapshots is stored once."""
    store = MemorySnapshotStore()
    store.commit({"a.txt": b"same", "b.txt": b"same"}, "first")
    store.commit({"c.txt": b"same"}, "second")

    assert store.blob_count == 1


def test_commit_assigns_distinct_ids_to_identical_commits() -> None:
    """Repeated identical content still yields distinct snapshots."""
    store = MemorySnapshotStore()
    first = store.commit({"a.txt": b"1"}, "same", parents=[])

    second = store.commit({"a.txt": b"1"}, "same", parents=[])

    assert first.snapshot_id != second.snapshot_id


@pytest.mark.parametrize(
    "content",
    [
        {"": b"1"},
        {"/abs.txt": b"1"},
        {"dir/": b"1"},
        {"a.txt": "text"},
    ],
)
def test_commit_rejects_invalid_content(content: dict) -> None:
    """Invalid paths or non-bytes values should be rejected."""
    store = MemorySnapshotStore()

    with pytest.raises(ReplayStoreError):
        store.commit(content, "bad")

    assert len(store) == 0


def test_commit_rejects_unknown_parent() -> None:
    """A parent id unknown to the store should be rejected."""
    store = MemorySnapshotStore()

    with pytest.raises(ReplayStoreError):
        store.commit({"a.txt": b"1"}, "orphan", parents=["missing"])

    assert store.head is None


def test_checkout_rejects_snapshot_from_other_store() -> None:
    """Stores are independent and do not share snapshots."""
    first_store = MemorySnapshotStore()
    second_store = MemorySnapshotStore()
    snapshot = first_store.commit({"a.txt": b"1"}, "one")
    second_store.commit({"b.txt": b"2"}, "two")

    with pytest.raises(ReplayStoreError):
        second_store.checkout(snapshot)

    assert len(second_store) == 1
