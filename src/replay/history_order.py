"""Commit history ordering.

Commits are emitted parents-first. Among commits whose parents have all
been emitted, the oldest by commit time goes next, with the commit id
breaking ties. This is the reverse of a newest-first topological walk.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import heapq
from typing import Iterable, Iterator

from core.logging_config import get_logger
from core.types import SourceCommit
from source.commit_source import CommitSource

_LOGGER = get_logger(__name__)


@dataclass
class CommitNode:
    """Arena node for one commit and its graph edges."""

    commit: SourceCommit
    child_ids: list[str] = field(default_factory=list)
    pending_parents: int = 0


def iter_history(source: CommitSource, seed_ids: Iterable[str]) -> Iterator[SourceCommit]:
    """Yield every commit reachable from the seeds in replay order.

    The arena is loaded when iteration starts. Re-invoke to restart.

    Args:
        source: Commit source holding the history.
        seed_ids: Commit ids to start traversal from.

    Yields:
        Commits, each after all of its parents.

    Raises:
        MissingObjectError: If a reachable parent commit is absent.
    """
    arena = build_commit_arena(source, seed_ids)
    ready: list[tuple[int, str]] = []
    for node in arena.values():
        if node.pending_parents == 0:
            heapq.heappush(ready, _order_key(node))
    emitted = 0
    while ready:
        _, commit_id = heapq.heappop(ready)
        node = arena[commit_id]
        yield node.commit
        emitted += 1
        for child_id in node.child_ids:
            child = arena[child_id]
            child.pending_parents -= 1
            if child.pending_parents == 0:
                heapq.heappush(ready, _order_key(child))
    _LOGGER.debug("history_ordered", commit_count=emitted)


def build_commit_arena(
    source: CommitSource,
    seed_ids: Iterable[str],
) -> dict[str, CommitNode]:
    """Load every reachable commit once and link parent/child edges.

    Args:
        source: Commit source holding the history.
        seed_ids: Commit ids to start traversal from.

    Returns:
        Commit nodes indexed by commit id.
    """
    arena: dict[str, CommitNode] = {}
    queue = deque(sorted(set(seed_ids)))
    while queue:
        commit_id = queue.popleft()
        if commit_id in arena:
            continue
        commit = source.load_commit(commit_id)
        arena[commit_id] = CommitNode(commit=commit)
        queue.extend(parent_id for parent_id in commit.parent_ids if parent_id not in arena)
    for commit_id, node in arena.items():
        for parent_id in dict.fromkeys(node.commit.parent_ids):
            arena[parent_id].child_ids.append(commit_id)
            node.pending_parents += 1
    return arena


def _order_key(node: CommitNode) -> tuple[int, str]:
    return (node.commit.commit_time, node.commit.commit_id)
