"""Reference tip resolution.

This module turns every reference in a commit source into the set of
commit ids that seed the history traversal.
"""

from __future__ import annotations

from core.errors import IncorrectObjectTypeError, MissingObjectError
from core.logging_config import get_logger
from source.commit_source import CommitSource

_LOGGER = get_logger(__name__)


def resolve_seed_commits(source: CommitSource) -> frozenset[str]:
    """Resolve all reference tips to distinct commit ids.

    References whose target is missing or is not a commit (for example
    a tag pointing at a tree) contribute nothing and are skipped.

    Args:
        source: Commit source to enumerate.

    Returns:
        Distinct commit ids reachable from reference tips.

    Raises:
        ReplaySourceError: If a reference cannot be read for another reason.
    """
    seed_ids: set[str] = set()
    for reference in source.list_references():
        if not reference.is_peeled:
            reference = source.peel_reference(reference)
        try:
            commit = source.load_commit(reference.target_id)
        except (MissingObjectError, IncorrectObjectTypeError) as error:
            _LOGGER.debug(
                "reference_skipped",
                reference=reference.name,
                target_id=reference.target_id,
                reason=str(error),
            )
            continue
        seed_ids.add(commit.commit_id)
    return frozenset(seed_ids)
