"""Keyword derivation for relevance suggestions."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

from docs_mcp.security import normalize_doc_path

MARKDOWN_SUFFIX_PATTERN: Final[re.Pattern[str]] = re.compile(r"\.(mdx|md)$", re.IGNORECASE)
# Split on hyphens and underscores, and before every uppercase letter.
TOKEN_SPLIT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[-_]|(?=[A-Z])")
MIN_PATH_KEYWORD_LENGTH: Final[int] = 3


def extract_keywords_from_path(path_input: str) -> list[str]:
    """Derive lowercase keywords from the final segment of a requested path."""
    filename = normalize_doc_path(path_input).split("/")[-1]
    stem = MARKDOWN_SUFFIX_PATTERN.sub("", filename)
    keywords: dict[str, None] = {}
    for part in TOKEN_SPLIT_PATTERN.split(stem):
        if len(part) >= MIN_PATH_KEYWORD_LENGTH:
            keywords[part.lower()] = None
    return list(keywords)


def normalize_keywords(keywords: Iterable[str]) -> list[str]:
    """Split keywords on whitespace, lowercase them and drop duplicates."""
    output: dict[str, None] = {}
    for keyword in keywords:
        for token in keyword.split():
            output[token.lower()] = None
    return list(output)
