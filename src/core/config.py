"""Runtime configuration model for gitreplay.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_MESSAGE_ENCODING
from core.errors import ReplayConfigError


@dataclass(frozen=True)
class ReplayConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for cloned source repositories.
        message_encoding: Fallback encoding for commit messages that
            carry no encoding header.
    """

    data_root: Path
    message_encoding: str

    @classmethod
    def from_env(cls) -> "ReplayConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ReplayConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("GITREPLAY_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        encoding_value = os.getenv("GITREPLAY_MESSAGE_ENCODING", DEFAULT_MESSAGE_ENCODING)
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            message_encoding=_parse_message_encoding(encoding_value),
        )


def _parse_message_encoding(raw_value: str) -> str:
    """Parse the commit message encoding environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Canonical codec name.

    Raises:
        ReplayConfigError: If no codec is registered under that name.
    """
    try:
        return codecs.lookup(raw_value).name
    except LookupError as error:
        raise ReplayConfigError(
            "Invalid GITREPLAY_MESSAGE_ENCODING value: "
            f"unknown codec '{raw_value}'. "
            "Set GITREPLAY_MESSAGE_ENCODING to a Python codec name such as utf-8."
        ) from error
