"""Unit tests for snapshot search expressions."""

from __future__ import annotations

import pytest

from core.errors import ReplayQueryError, ReplayStoreError
from store.memory_store import MemorySnapshotStore
from store.query_engine import (
    AllSnapshotsExpression,
    SearchQuery,
    SnapshotIdsExpression,
    TipOfExpression,
)


def _branching_store() -> tuple[MemorySnapshotStore, dict[str, str]]:
    store = MemorySnapshotStore()
    root = store.commit({"a.txt": b"1"}, "root", parents=[])
    main = store.commit({"a.txt": b"2"}, "main", parents=[root])
    feature = store.commit({"b.txt": b"3"}, "feature", parents=[root])
    main_next = store.commit({"a.txt": b"4"}, "main-next", parents=[main])
    ids = {
        "root": root.snapshot_id,
        "main": main.snapshot_id,
        "feature": feature.snapshot_id,
        "main_next": main_next.snapshot_id,
    }
    return store, ids


def test_all_snapshots_returns_commit_order() -> None:
    """All-snapshots should list every snapshot by sequence."""
    store, _ = _branching_store()

    results = store.search(SearchQuery(AllSnapshotsExpression()))

    assert [snapshot.message for snapshot in results.snapshots] == [
        "root",
        "main",
        "feature",
        "main-next",
    ]


def test_tip_of_all_returns_branch_heads() -> None:
    """Tip-of-all should return one snapshot per branch head."""
    store, ids = _branching_store()

    results = store.search(TipOfExpression(AllSnapshotsExpression()))

    assert [snapshot.snapshot_id for snapshot in results.snapshots] == [
        ids["feature"],
        ids["main_next"],
    ]


def test_tip_of_follows_descendants_outside_the_set() -> None:
    """A member is not a tip when a descendant is reached via non-members."""
    store, ids = _branching_store()
    subset = SnapshotIdsExpression((ids["root"], ids["main_next"]))

    results = store.search(TipOfExpression(subset))

    assert [snapshot.snapshot_id for snapshot in results.snapshots] == [ids["main_next"]]


def test_tip_of_keeps_unrelated_members() -> None:
    """Members without ancestry between them are all tips."""
    store, ids = _branching_store()
    subset = SnapshotIdsExpression((ids["main_next"], ids["feature"]))

    results = store.search(TipOfExpression(subset))

    assert len(results) == 2


def test_tip_of_empty_store_is_empty() -> None:
    """Searching an empty store should match nothing."""
    store = MemorySnapshotStore()

    results = store.search(TipOfExpression(AllSnapshotsExpression()))

    assert results.snapshots == ()


def test_snapshot_ids_rejects_unknown_id() -> None:
    """Selecting an unknown snapshot id should fail."""
    store, _ = _branching_store()

    with pytest.raises(ReplayStoreError):
        store.search(SnapshotIdsExpression(("unknown",)))


def test_search_rejects_non_expression() -> None:
    """Objects without an evaluate method are not expressions."""
    store, _ = _branching_store()

    with pytest.raises(ReplayQueryError):
        store.search(SearchQuery("all"))  # type: ignore[arg-type]
