"""Shared typed models.

This module defines immutable data models used by the source, replay,
and store layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

FlatContentMapping = Dict[str, bytes]


@dataclass(frozen=True)
class RepositoryReference:
    """Reference tip captured from the commit source.

    Attributes:
        name: Full reference name, e.g. refs/heads/main.
        object_id: Object the reference points at directly.
        peeled_object_id: Object reached after peeling annotated tags,
            when known.
    """

    name: str
    object_id: str
    peeled_object_id: str | None = None

    @property
    def is_peeled(self) -> bool:
        """Return whether the peeled target is already known."""
        return self.peeled_object_id is not None

    @property
    def target_id(self) -> str:
        """Return the peeled target when known, else the direct target."""
        return self.peeled_object_id or self.object_id


@dataclass(frozen=True)
class SourceCommit:
    """Commit metadata loaded from the commit source.

    Attributes:
        commit_id: Commit object id.
        message: Full decoded commit message.
        commit_time: Committer timestamp in seconds since epoch.
        parent_ids: Parent commit ids in recorded order.
        tree_id: Root tree object id.
    """

    commit_id: str
    message: str
    commit_time: int
    parent_ids: tuple[str, ...]
    tree_id: str

    @property
    def subject(self) -> str:
        """Return the first line of the commit message."""
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""


@dataclass(frozen=True)
class TreeEntry:
    """Leaf entry produced by recursive tree enumeration.

    Attributes:
        path: Slash-joined path from the tree root.
        object_id: Blob object id.
        mode: Git file mode, e.g. 0o100644 or 0o120000.
    """

    path: str
    object_id: str
    mode: int


@dataclass(frozen=True)
class StoredSnapshot:
    """Snapshot recorded in a snapshot store.

    Attributes:
        snapshot_id: Content-addressed identifier assigned by the store.
        sequence: Zero-based commit position within the store.
        message: Message recorded with the snapshot.
        parent_ids: Snapshot ids of the predecessors.
        entry_count: Number of paths in the snapshot content.
    """

    snapshot_id: str
    sequence: int
    message: str
    parent_ids: tuple[str, ...]
    entry_count: int


@dataclass(frozen=True)
class ReplayResult:
    """Outcome of replaying a commit source into a store.

    Attributes:
        snapshots: Stored snapshots in commit order.
        seed_ids: Commit ids that seeded the history traversal.
        snapshot_ids_by_commit: Source commit id to snapshot id.
    """

    snapshots: tuple[StoredSnapshot, ...]
    seed_ids: tuple[str, ...]
    snapshot_ids_by_commit: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResults:
    """Snapshots matched by a search, in store commit order."""

    snapshots: tuple[StoredSnapshot, ...]

    def __len__(self) -> int:
        return len(self.snapshots)
