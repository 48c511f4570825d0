"""Repository access for replay runs.

This module opens a local repository or clones a remote one into the
configured data root before handing it to the replay engine.
"""

from __future__ import annotations

import hashlib
import re
import shutil
from pathlib import Path
from typing import Any

from core.config import ReplayConfig
from core.constants import CLONE_DIGEST_LENGTH, CLONES_DIR_NAME, HASH_ALGORITHM
from core.errors import ReplayDependencyError, ReplaySourceError
from core.logging_config import get_logger
from source.dulwich_source import DulwichCommitSource

_LOGGER = get_logger(__name__)
_SCP_LIKE_URI = re.compile(r"^[\w.-]+@[\w.-]+:")


def is_remote_uri(source_uri: str) -> bool:
    """Return whether a source string names a remote repository."""
    return "://" in source_uri or bool(_SCP_LIKE_URI.match(source_uri))


def open_commit_source(source_uri: str, config: ReplayConfig) -> DulwichCommitSource:
    """Open a commit source for a local path or remote URI.

    Remote repositories are cloned bare under the data root. An existing
    clone is reused as-is without fetching.

    Args:
        source_uri: Local repository path or remote URI.
        config: Runtime configuration.

    Returns:
        Commit source owning its repository handle.

    Raises:
        ReplaySourceError: If the repository cannot be opened or cloned.
    """
    if not is_remote_uri(source_uri):
        local_path = Path(source_uri).expanduser().resolve()
        return DulwichCommitSource.open_path(local_path, config.message_encoding)
    clone_dir = build_clone_dir(source_uri, config.data_root)
    if not clone_dir.exists():
        _clone_repository(source_uri, clone_dir)
    else:
        _LOGGER.info("clone_reused", source_uri=source_uri, clone_dir=str(clone_dir))
    return DulwichCommitSource.open_path(clone_dir, config.message_encoding)


def build_clone_dir(source_uri: str, data_root: Path) -> Path:
    """Build a stable clone directory for a remote URI.

    Args:
        source_uri: Remote repository URI.
        data_root: Configured data root.

    Returns:
        Clone directory path under the data root.
    """
    name = source_uri.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    digest = hashlib.new(HASH_ALGORITHM, source_uri.encode("utf-8")).hexdigest()
    return data_root / CLONES_DIR_NAME / f"{name or 'repository'}-{digest[:CLONE_DIGEST_LENGTH]}"


def _clone_repository(source_uri: str, clone_dir: Path) -> None:
    """Clone a remote repository bare into ``clone_dir``.

    Raises:
        ReplayDependencyError: If dulwich porcelain is unavailable.
        ReplaySourceError: If the clone fails.
    """
    porcelain = _load_porcelain()
    clone_dir.parent.mkdir(parents=True, exist_ok=True)
    _LOGGER.info("clone_started", source_uri=source_uri, clone_dir=str(clone_dir))
    try:
        repository = porcelain.clone(source_uri, str(clone_dir), bare=True)
    except Exception as error:
        shutil.rmtree(clone_dir, ignore_errors=True)
        raise ReplaySourceError(
            f"Failed to clone {source_uri} into {clone_dir}: {error}. "
            "Check the URI and network access, then retry."
        ) from error
    repository.close()
    _LOGGER.info("clone_completed", source_uri=source_uri, clone_dir=str(clone_dir))


def _load_porcelain() -> Any:
    try:
        from dulwich import porcelain
    except ImportError as error:
        raise ReplayDependencyError(
            "Cloning requires dulwich porcelain, but it could not be imported. "
            "Install dulwich to replay remote repositories."
        ) from error
    return porcelain
