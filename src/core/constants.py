"""Core constants used across gitreplay modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".gitreplay")
DEFAULT_MESSAGE_ENCODING = "utf-8"
CLONES_DIR_NAME = "clones"
HASH_ALGORITHM = "sha256"
CLONE_DIGEST_LENGTH = 12
MAX_PEEL_DEPTH = 64
PATH_SEPARATOR = "/"
