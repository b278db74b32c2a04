"""Path normalization helpers for doc-root scoped access."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

REPEATED_SLASH_PATTERN: Final[re.Pattern[str]] = re.compile(r"/+")


def normalize_doc_path(candidate: str) -> str:
    """Canonicalize a caller-supplied path into slash-separated relative form."""
    normalized = candidate.replace("\\", "/")
    while normalized.startswith(("./", "/")):
        normalized = normalized[2:] if normalized.startswith("./") else normalized.lstrip("/")
    normalized = REPEATED_SLASH_PATTERN.sub("/", normalized)
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def has_traversal(normalized: str) -> bool:
    """Return True when any slash-delimited segment is exactly '..'."""
    return any(segment == ".." for segment in normalized.split("/"))


def is_within_root(root: Path, target: Path) -> bool:
    """Return True when target lies on or under root.

    Both paths must already be resolved; symlinks are not followed here.
    """
    return target == root or target.is_relative_to(root)
