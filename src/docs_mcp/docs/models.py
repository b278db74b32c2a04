"""Typed models for path resolution, listings and query results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar


@dataclass(slots=True, frozen=True)
class DocRoot:
    """Configured documentation root.

    ``relative_path`` is the root's location relative to the configuration
    file and doubles as the display prefix; ``absolute_path`` is the resolved
    directory every served document must live under.
    """

    relative_path: str
    absolute_path: Path

    @property
    def display_prefix(self) -> str:
        """Return the prefix used when displaying paths, empty for '.'."""
        return "" if self.relative_path == "." else self.relative_path


@dataclass(slots=True, frozen=True)
class ResolvedDocPath:
    """Location of a resolved request; relative_path is '.' for the root."""

    absolute_path: Path
    relative_path: str


@dataclass(slots=True, frozen=True)
class Found:
    """Resolution outcome for an existing file or directory."""

    resolved: ResolvedDocPath
    is_directory: bool


@dataclass(slots=True, frozen=True)
class NotFound:
    """Resolution outcome when no candidate exists under the root."""


@dataclass(slots=True, frozen=True)
class SecurityViolation:
    """Resolution outcome for a rejected traversal attempt."""


Resolution = Found | NotFound | SecurityViolation


@dataclass(slots=True, frozen=True)
class DirectoryListing:
    """Sorted immediate children of a resolved directory."""

    subdirectories: tuple[str, ...]
    files: tuple[str, ...]
    file_names: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class TopLevelEntries:
    """Entries directly under the doc root, used for discoverability hints."""

    directories: tuple[str, ...]
    reference_subdirectories: tuple[str, ...]
    files: tuple[str, ...]


@dataclass(slots=True)
class FileScore:
    """Per-file accumulator used while scanning for suggestions."""

    path: str
    path_relevance: int
    keyword_matches: set[str] = field(default_factory=set)
    total_matches: int = 0
    title_matches: int = 0

    def final_score(self, total_keywords: int) -> int:
        """Combine match counts and structural bonuses into a ranking score."""
        all_keywords_bonus = 10 if len(self.keyword_matches) == total_keywords else 0
        return (
            self.total_matches * 1
            + self.title_matches * 3
            + self.path_relevance * 2
            + len(self.keyword_matches) * 5
            + all_keywords_bonus
        )


@dataclass(slots=True, frozen=True)
class DirectoryFile:
    """One listed markdown file and its content."""

    display_path: str
    content: str


@dataclass(slots=True, frozen=True)
class FileContent:
    """Result for a requested path that resolved to a file."""

    kind: ClassVar[str] = "file"

    path: str
    content: str


@dataclass(slots=True, frozen=True)
class DirectoryContent:
    """Result for a requested path that resolved to a directory."""

    kind: ClassVar[str] = "directory"

    path: str
    subdirectories: tuple[str, ...]
    files: tuple[str, ...]
    contents: tuple[DirectoryFile, ...] = ()
    suggestions: str = ""


@dataclass(slots=True, frozen=True)
class ErrorContent:
    """Result for a requested path that could not be served."""

    kind: ClassVar[str] = "error"

    path: str
    error: str
    suggestions: str = ""
    available_paths: str = ""


DocResult = FileContent | DirectoryContent | ErrorContent
