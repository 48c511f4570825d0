"""Search expressions over recorded snapshot history.

Expressions are immutable trees evaluated lazily against a store's
history. Evaluation never mutates the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from core.errors import ReplayQueryError
from core.types import StoredSnapshot


class SnapshotHistory(Protocol):
    """Read-only view of a store's snapshots."""

    def snapshots(self) -> list[StoredSnapshot]:
        """Return every snapshot in commit order."""
        ...

    def get(self, snapshot_id: str) -> StoredSnapshot:
        """Return one snapshot by id."""
        ...


class SearchExpression(Protocol):
    """Composable query producing a set of snapshots."""

    def evaluate(self, history: SnapshotHistory) -> tuple[StoredSnapshot, ...]:
        """Return matching snapshots in store commit order."""
        ...


@dataclass(frozen=True)
class AllSnapshotsExpression:
    """Every snapshot recorded in the store."""

    def evaluate(self, history: SnapshotHistory) -> tuple[StoredSnapshot, ...]:
        return tuple(history.snapshots())


@dataclass(frozen=True)
class SnapshotIdsExpression:
    """An explicit selection of snapshots by id."""

    snapshot_ids: tuple[str, ...]

    def evaluate(self, history: SnapshotHistory) -> tuple[StoredSnapshot, ...]:
        selected = [history.get(snapshot_id) for snapshot_id in dict.fromkeys(self.snapshot_ids)]
        return _in_commit_order(selected)


@dataclass(frozen=True)
class TipOfExpression:
    """Members of the inner result that have no descendant in it.

    Descendants are followed through snapshots outside the inner result,
    so a member whose descendant is reached only via non-members is
    still excluded.
    """

    inner: SearchExpression

    def evaluate(self, history: SnapshotHistory) -> tuple[StoredSnapshot, ...]:
        members = self.inner.evaluate(history)
        covered = _proper_ancestor_ids(history, members)
        return tuple(snapshot for snapshot in members if snapshot.snapshot_id not in covered)


@dataclass(frozen=True)
class SearchQuery:
    """Search request wrapping a root expression."""

    expression: SearchExpression


def evaluate_expression(
    expression: SearchExpression,
    history: SnapshotHistory,
) -> tuple[StoredSnapshot, ...]:
    """Evaluate an expression against a snapshot history.

    Args:
        expression: Root search expression.
        history: Store history to evaluate against.

    Returns:
        Matching snapshots in store commit order.

    Raises:
        ReplayQueryError: If the expression cannot be evaluated.
    """
    evaluate = getattr(expression, "evaluate", None)
    if not callable(evaluate):
        raise ReplayQueryError(
            f"Unsupported search expression {expression!r}. "
            "Compose queries from AllSnapshotsExpression, TipOfExpression, "
            "and SnapshotIdsExpression."
        )
    return tuple(evaluate(history))


def _proper_ancestor_ids(
    history: SnapshotHistory,
    members: Iterable[StoredSnapshot],
) -> set[str]:
    """Collect ids of every strict ancestor of any member."""
    visited: set[str] = set()
    pending = [parent_id for snapshot in members for parent_id in snapshot.parent_ids]
    while pending:
        snapshot_id = pending.pop()
        if snapshot_id in visited:
            continue
        visited.add(snapshot_id)
        pending.extend(history.get(snapshot_id).parent_ids)
    return visited


def _in_commit_order(snapshots: Sequence[StoredSnapshot]) -> tuple[StoredSnapshot, ...]:
    return tuple(sorted(snapshots, key=lambda snapshot: snapshot.sequence))
