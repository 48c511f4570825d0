"""Commit tree flattening.

This module converts a commit's recursive file tree into a flat
path to content mapping ready for the snapshot store.
"""

from __future__ import annotations

from contextlib import closing

from core.logging_config import get_logger
from core.types import FlatContentMapping, SourceCommit
from source.commit_source import CommitSource

_LOGGER = get_logger(__name__)


def flatten_commit(source: CommitSource, commit: SourceCommit) -> FlatContentMapping:
    """Build the full path to bytes mapping for one commit.

    Every leaf blob under the root tree is loaded. A read failure on any
    tree or blob propagates so no partial mapping is ever returned.

    Args:
        source: Commit source holding the objects.
        commit: Commit whose tree is flattened.

    Returns:
        Mapping from slash-joined path to blob content.

    Raises:
        ReplaySourceError: If any tree or blob cannot be read.
    """
    content: FlatContentMapping = {}
    tree_id = source.load_tree(commit.tree_id)
    with closing(source.iter_tree(tree_id)) as entries:
        for entry in entries:
            content[entry.path] = source.load_blob(entry.object_id)
            _LOGGER.debug(
                "tree_entry_flattened",
                commit_id=commit.commit_id,
                path=entry.path,
                mode=oct(entry.mode),
            )
    return content
