"""dulwich-backed commit source.

This module adapts a dulwich repository to the commit source protocol.
It maps dulwich lookup failures onto the replay error taxonomy.
"""

from __future__ import annotations

import codecs
from dataclasses import replace
import stat
from pathlib import Path
from typing import Any, Generator, Iterator
import zlib

from dulwich.errors import ChecksumMismatch, NotGitRepository, ObjectFormatException
from dulwich.objects import S_ISGITLINK, Blob, Commit, ShaFile, Tag, Tree
from dulwich.repo import Repo

from core.constants import DEFAULT_MESSAGE_ENCODING, MAX_PEEL_DEPTH, PATH_SEPARATOR
from core.errors import IncorrectObjectTypeError, MissingObjectError, ReplaySourceError
from core.logging_config import get_logger
from core.types import RepositoryReference, SourceCommit, TreeEntry

_LOGGER = get_logger(__name__)


class DulwichCommitSource:
    """Commit source reading objects through a dulwich repository.

    The source owns the repository handle only when opened through
    ``open_path``; borrowed repositories are left open on close.
    """

    def __init__(
        self,
        repository: Any,
        message_encoding: str = DEFAULT_MESSAGE_ENCODING,
        owns_repository: bool = False,
    ) -> None:
        """Wrap an open dulwich repository.

        Args:
            repository: dulwich ``Repo`` or ``MemoryRepo`` instance.
            message_encoding: Fallback encoding for commit messages.
            owns_repository: Whether ``close`` should close the repository.
        """
        self._repository = repository
        self._message_encoding = message_encoding
        self._owns_repository = owns_repository

    @classmethod
    def open_path(
        cls,
        repository_path: Path,
        message_encoding: str = DEFAULT_MESSAGE_ENCODING,
    ) -> "DulwichCommitSource":
        """Open a bare or non-bare repository on disk.

        Args:
            repository_path: Repository or work tree directory.
            message_encoding: Fallback encoding for commit messages.

        Returns:
            Commit source owning the opened repository.

        Raises:
            ReplaySourceError: If the path is not a git repository.
        """
        try:
            repository = Repo(str(repository_path))
        except NotGitRepository as error:
            raise ReplaySourceError(
                f"No git repository found at {repository_path}. "
                "Pass the path of a cloned repository or a remote URL."
            ) from error
        return cls(repository, message_encoding, owns_repository=True)

    def __enter__(self) -> "DulwichCommitSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the repository handle when owned."""
        if self._owns_repository:
            self._repository.close()

    def list_references(self) -> list[RepositoryReference]:
        """Return every reference tip sorted by name."""
        refs = self._repository.refs
        references: list[RepositoryReference] = []
        for name, object_sha in sorted(refs.as_dict().items()):
            peeled_sha = refs.get_peeled(name)
            references.append(
                RepositoryReference(
                    name=name.decode("utf-8", "surrogateescape"),
                    object_id=object_sha.decode("ascii"),
                    peeled_object_id=peeled_sha.decode("ascii") if peeled_sha else None,
                )
            )
        return references

    def peel_reference(self, reference: RepositoryReference) -> RepositoryReference:
        """Peel annotated tags until a non-tag object is reached.

        Peeling stops early at a missing object so the caller can decide
        whether the reference is usable.

        Args:
            reference: Reference to peel.

        Returns:
            Copy of the reference with ``peeled_object_id`` set.

        Raises:
            ReplaySourceError: If the tag chain exceeds the peel depth.
        """
        object_id = reference.object_id
        for _ in range(MAX_PEEL_DEPTH):
            try:
                shafile = self._load_object(object_id)
            except MissingObjectError:
                break
            if not isinstance(shafile, Tag):
                break
            _, target_sha = shafile.object
            object_id = target_sha.decode("ascii")
        else:
            raise ReplaySourceError(
                f"Reference {reference.name} did not peel to a non-tag object within "
                f"{MAX_PEEL_DEPTH} levels. Inspect the tag chain for corruption."
            )
        return replace(reference, peeled_object_id=object_id)

    def load_commit(self, object_id: str) -> SourceCommit:
        """Load an object that must be a commit."""
        commit = self._load_typed(object_id, Commit)
        return SourceCommit(
            commit_id=object_id,
            message=self._decode_message(commit),
            commit_time=int(commit.commit_time),
            parent_ids=tuple(parent.decode("ascii") for parent in commit.parents),
            tree_id=commit.tree.decode("ascii"),
        )

    def load_tree(self, object_id: str) -> str:
        """Check that an object is a tree and return its id."""
        self._load_typed(object_id, Tree)
        return object_id

    def load_blob(self, object_id: str) -> bytes:
        """Load the content bytes of a blob."""
        blob = self._load_typed(object_id, Blob)
        return blob.as_raw_string()

    def iter_tree(self, tree_id: str) -> Generator[TreeEntry, None, None]:
        """Yield every leaf entry under a tree, recursively.

        Gitlink entries are skipped since they designate commits in
        another repository rather than blobs in this one.
        """
        yield from self._walk_tree(tree_id, "")

    def _walk_tree(self, tree_id: str, prefix: str) -> Iterator[TreeEntry]:
        tree = self._load_typed(tree_id, Tree)
        for name, mode, sha in tree.items():
            path = prefix + name.decode("utf-8", "surrogateescape")
            object_id = sha.decode("ascii")
            if stat.S_ISDIR(mode):
                yield from self._walk_tree(object_id, path + PATH_SEPARATOR)
            elif S_ISGITLINK(mode):
                _LOGGER.debug("gitlink_skipped", path=path, object_id=object_id)
            else:
                yield TreeEntry(path=path, object_id=object_id, mode=mode)

    def _load_typed(self, object_id: str, expected_class: type) -> Any:
        shafile = self._load_object(object_id)
        if not isinstance(shafile, expected_class):
            raise IncorrectObjectTypeError(
                object_id,
                expected_type=expected_class.type_name.decode("ascii"),
                actual_type=shafile.type_name.decode("ascii"),
            )
        return shafile

    def _load_object(self, object_id: str) -> ShaFile:
        try:
            return self._repository.object_store[object_id.encode("ascii")]
        except KeyError as error:
            raise MissingObjectError(object_id) from error
        except (ChecksumMismatch, ObjectFormatException, zlib.error, OSError) as error:
            raise ReplaySourceError(
                f"Failed to read object {object_id}: {error}. "
                "The repository may be corrupt; re-clone it and retry the replay."
            ) from error

    def _decode_message(self, commit: Commit) -> str:
        encoding = self._message_encoding
        if commit.encoding:
            declared = commit.encoding.decode("ascii", "replace")
            try:
                encoding = codecs.lookup(declared).name
            except LookupError:
                _LOGGER.warning(
                    "unknown_message_encoding",
                    commit_id=commit.id.decode("ascii"),
                    encoding=declared,
                )
        return commit.message.decode(encoding, "replace")
