"""In-memory content-addressable snapshot store.

This module records flat content mappings as immutable snapshots with
explicit parent links. It provides search and checkout for queries.
"""

from __future__ import annotations

import hashlib
import json
from typing import Mapping, Sequence, Union

from core.constants import HASH_ALGORITHM, PATH_SEPARATOR
from core.errors import ReplayStoreError
from core.logging_config import get_logger
from core.types import FlatContentMapping, SearchResults, StoredSnapshot
from store.query_engine import SearchExpression, SearchQuery, evaluate_expression

_LOGGER = get_logger(__name__)

SnapshotRef = Union[StoredSnapshot, str]


class MemorySnapshotStore:
    """Snapshot store keeping blobs and snapshots in process memory.

    Blobs are deduplicated by content digest. Each instance is fully
    independent; no state is shared between stores.
    """

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._entries: dict[str, dict[str, str]] = {}
        self._snapshots: list[StoredSnapshot] = []
        self._by_id: dict[str, StoredSnapshot] = {}

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def head(self) -> StoredSnapshot | None:
        """Return the most recently committed snapshot, if any."""
        return self._snapshots[-1] if self._snapshots else None

    @property
    def blob_count(self) -> int:
        """Return the number of distinct content blobs held."""
        return len(self._blobs)

    def commit(
        self,
        content: Mapping[str, bytes],
        message: str,
        parents: Sequence[SnapshotRef] | None = None,
    ) -> StoredSnapshot:
        """Record a new snapshot.

        Args:
            content: Full path to bytes mapping for the snapshot.
            message: Message recorded with the snapshot.
            parents: Predecessor snapshots. ``None`` links to the current
                head; an empty sequence records a root snapshot.

        Returns:
            The stored snapshot.

        Raises:
            ReplayStoreError: If content is invalid or a parent is unknown.
        """
        if parents is None:
            parent_ids = (self.head.snapshot_id,) if self.head else ()
        else:
            parent_ids = tuple(self._resolve(parent).snapshot_id for parent in parents)
        digests = self._store_blobs(content)
        sequence = len(self._snapshots)
        snapshot = StoredSnapshot(
            snapshot_id=_build_snapshot_id(sequence, message, parent_ids, digests),
            sequence=sequence,
            message=message,
            parent_ids=parent_ids,
            entry_count=len(digests),
        )
        self._entries[snapshot.snapshot_id] = digests
        self._snapshots.append(snapshot)
        self._by_id[snapshot.snapshot_id] = snapshot
        _LOGGER.debug(
            "snapshot_committed",
            snapshot_id=snapshot.snapshot_id,
            sequence=sequence,
            parent_ids=list(parent_ids),
            entry_count=snapshot.entry_count,
        )
        return snapshot

    def snapshots(self) -> list[StoredSnapshot]:
        """Return every snapshot in commit order."""
        return list(self._snapshots)

    def get(self, snapshot_id: str) -> StoredSnapshot:
        """Return one snapshot by id.

        Raises:
            ReplayStoreError: If the id is unknown to this store.
        """
        snapshot = self._by_id.get(snapshot_id)
        if snapshot is None:
            raise ReplayStoreError(
                f"Snapshot '{snapshot_id}' not found in this store. "
                "Use search to discover valid snapshot ids."
            )
        return snapshot

    def search(self, query: SearchQuery | SearchExpression) -> SearchResults:
        """Evaluate a search against the recorded history.

        Args:
            query: Search query or bare expression.

        Returns:
            Matching snapshots in commit order.
        """
        expression = query.expression if isinstance(query, SearchQuery) else query
        return SearchResults(snapshots=evaluate_expression(expression, self))

    def checkout(self, snapshot: SnapshotRef) -> FlatContentMapping:
        """Materialize the full content mapping of a snapshot.

        Args:
            snapshot: Stored snapshot or its id.

        Returns:
            Fresh path to bytes mapping.

        Raises:
            ReplayStoreError: If the snapshot is unknown to this store.
        """
        resolved = self._resolve(snapshot)
        digests = self._entries[resolved.snapshot_id]
        return {path: self._blobs[digest] for path, digest in digests.items()}

    def _resolve(self, snapshot: SnapshotRef) -> StoredSnapshot:
        snapshot_id = snapshot.snapshot_id if isinstance(snapshot, StoredSnapshot) else snapshot
        resolved = self.get(snapshot_id)
        if isinstance(snapshot, StoredSnapshot) and resolved != snapshot:
            raise ReplayStoreError(
                f"Snapshot '{snapshot_id}' belongs to a different store. "
                "Check out snapshots from the store that recorded them."
            )
        return resolved

    def _store_blobs(self, content: Mapping[str, bytes]) -> dict[str, str]:
        _validate_content(content)
        digests: dict[str, str] = {}
        for path, data in content.items():
            payload = bytes(data)
            digest = hashlib.new(HASH_ALGORITHM, payload).hexdigest()
            self._blobs.setdefault(digest, payload)
            digests[path] = digest
        return digests


def _validate_content(content: Mapping[str, bytes]) -> None:
    """Reject mappings the store cannot record faithfully.

    Raises:
        ReplayStoreError: If a path or value is invalid.
    """
    if not isinstance(content, Mapping):
        raise ReplayStoreError(
            f"Snapshot content must be a mapping, got {type(content).__name__}."
        )
    for path, data in content.items():
        if not isinstance(path, str) or not path:
            raise ReplayStoreError(
                f"Invalid snapshot path {path!r}: expected a non-empty string."
            )
        if path.startswith(PATH_SEPARATOR) or path.endswith(PATH_SEPARATOR):
            raise ReplayStoreError(
                f"Invalid snapshot path '{path}': paths are relative and name files."
            )
        if not isinstance(data, (bytes, bytearray)):
            raise ReplayStoreError(
                f"Invalid content for '{path}': expected bytes, got {type(data).__name__}."
            )


def _build_snapshot_id(
    sequence: int,
    message: str,
    parent_ids: tuple[str, ...],
    digests: Mapping[str, str],
) -> str:
    """Build a deterministic snapshot id from its recorded fields."""
    payload = {
        "sequence": sequence,
        "message": message,
        "parent_ids": list(parent_ids),
        "entries": dict(sorted(digests.items())),
    }
    serialized_payload = json.dumps(payload, sort_keys=True)
    return hashlib.new(HASH_ALGORITHM, serialized_payload.encode("utf-8")).hexdigest()
