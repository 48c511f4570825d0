"""Unit tests for repository access helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import ReplayConfig
from core.errors import ReplaySourceError
from source.repository_clone import build_clone_dir, is_remote_uri, open_commit_source


@pytest.mark.parametrize(
    ("source_uri", "expected"),
    [
        ("https://github.com/nanovc/nano-jgit-analyzer.git", True),
        ("git@github.com:nanovc/nano-jgit-analyzer.git", True),
        ("file:///srv/repos/project.git", True),
        ("/srv/repos/project.git", False),
        ("relative/checkout", False),
    ],
)
def test_is_remote_uri_classifies_sources(source_uri: str, expected: bool) -> None:
    """URLs and scp-like addresses are remote; filesystem paths are not."""
    assert is_remote_uri(source_uri) is expected


def test_build_clone_dir_is_stable_and_named(tmp_path: Path) -> None:
    """Clone directories derive from the repository name and a digest."""
    uri = "https://github.com/nanovc/nano-jgit-analyzer.git"

    clone_dir = build_clone_dir(uri, tmp_path)

    assert clone_dir == build_clone_dir(uri, tmp_path)
    assert clone_dir.parent == tmp_path / "clones"
    assert clone_dir.name.startswith("nano-jgit-analyzer-")


def test_build_clone_dir_separates_distinct_uris(tmp_path: Path) -> None:
    """Same repository name on different hosts must not share a clone."""
    first = build_clone_dir("https://a.example.com/team/repo.git", tmp_path)

    second = build_clone_dir("https://b.example.com/team/repo.git", tmp_path)

    assert first != second


def test_open_local_path_requires_repository(tmp_path: Path) -> None:
    """Opening a plain directory should fail with a source error."""
    config = ReplayConfig(data_root=tmp_path, message_encoding="utf-8")

    with pytest.raises(ReplaySourceError):
        open_commit_source(str(tmp_path), config)
