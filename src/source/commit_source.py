"""Commit source capability interface.

Any object store that can list refs, peel tags, and load typed
objects satisfies this protocol and can feed the replay engine.
"""

from __future__ import annotations

from typing import Generator, Protocol

from core.types import RepositoryReference, SourceCommit, TreeEntry


class CommitSource(Protocol):
    """Read-only view over a version-controlled object store.

    Loads raise ``MissingObjectError`` for absent objects and
    ``IncorrectObjectTypeError`` for objects of another type. Other
    read failures raise ``ReplaySourceError``.
    """

    def list_references(self) -> list[RepositoryReference]:
        """Return every reference tip in the repository."""
        ...

    def peel_reference(self, reference: RepositoryReference) -> RepositoryReference:
        """Return the reference with its fully peeled target filled in."""
        ...

    def load_commit(self, object_id: str) -> SourceCommit:
        """Load an object that must be a commit."""
        ...

    def load_tree(self, object_id: str) -> str:
        """Check that an object is a tree and return its id."""
        ...

    def load_blob(self, object_id: str) -> bytes:
        """Load the content bytes of a blob."""
        ...

    def iter_tree(self, tree_id: str) -> Generator[TreeEntry, None, None]:
        """Yield every leaf entry under a tree, recursively."""
        ...

    def close(self) -> None:
        """Release handles held by the source."""
        ...
