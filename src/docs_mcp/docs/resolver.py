"""Doc-root confined path resolution and directory listing."""

from __future__ import annotations

import re
from typing import Final

from docs_mcp.docs.filesystem import UNRESOLVABLE_ERRORS, DocFileSystem
from docs_mcp.docs.models import (
    DirectoryListing,
    DocRoot,
    Found,
    NotFound,
    Resolution,
    ResolvedDocPath,
    SecurityViolation,
    TopLevelEntries,
)
from docs_mcp.logging import JsonlEventLogger
from docs_mcp.security import has_traversal, is_within_root, normalize_doc_path

MARKDOWN_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"\.mdx?$", re.IGNORECASE)
REFERENCE_DIRECTORY: Final[str] = "reference"


def display_sort_key(value: str) -> tuple[str, str]:
    """Case-insensitive ordering with lowercase first on ties."""
    return (value.casefold(), value.swapcase())


def build_display_path(relative_path: str, entry: str, root_prefix: str, is_directory: bool) -> str:
    """Join root prefix, relative directory and entry name for display."""
    cleaned = "" if relative_path == "." else normalize_doc_path(relative_path)
    composed = "/".join(segment for segment in (root_prefix, cleaned, entry) if segment)
    return f"{composed}/" if is_directory else composed


def _resolution_candidates(normalized: str, root_prefix: str) -> list[str]:
    candidates: dict[str, None] = {normalized or ".": None}
    if root_prefix and normalized.startswith(f"{root_prefix}/"):
        candidates[normalized[len(root_prefix) + 1 :]] = None
    if root_prefix and normalized == root_prefix:
        candidates["."] = None
    return list(candidates)


class PathResolver:
    """Maps caller paths onto a single DocRoot without ever leaving it."""

    def __init__(
        self,
        doc_root: DocRoot,
        filesystem: DocFileSystem,
        events: JsonlEventLogger | None = None,
    ) -> None:
        self._doc_root = doc_root
        self._root = doc_root.absolute_path.resolve()
        self._filesystem = filesystem
        self._events = events or JsonlEventLogger()

    async def resolve(self, doc_path: str) -> Resolution:
        """Resolve a caller path to the first existing candidate under the root."""
        normalized = normalize_doc_path(doc_path)
        if has_traversal(normalized):
            self._events.error("Path traversal attempt detected", {"docPath": doc_path})
            return SecurityViolation()

        root = self._root
        for candidate in _resolution_candidates(normalized, self._doc_root.display_prefix):
            candidate_path = root if candidate == "." else root / candidate
            try:
                target = await self._filesystem.resolve(candidate_path)
                if not is_within_root(root, target):
                    continue
                kind = await self._filesystem.stat(target)
            except UNRESOLVABLE_ERRORS:
                continue
            return Found(
                resolved=ResolvedDocPath(
                    absolute_path=target,
                    relative_path=candidate,
                ),
                is_directory=kind == "directory",
            )
        return NotFound()

    async def list_directory(self, resolved: ResolvedDocPath) -> DirectoryListing:
        """List subdirectories and ``.md`` files of a resolved directory."""
        root_prefix = self._doc_root.display_prefix
        directories: list[str] = []
        files: list[tuple[str, str]] = []
        for entry in await self._filesystem.scandir(resolved.absolute_path):
            if entry.is_dir:
                directories.append(
                    build_display_path(resolved.relative_path, entry.name, root_prefix, True)
                )
            elif entry.is_file and entry.name.endswith(".md"):
                display = build_display_path(resolved.relative_path, entry.name, root_prefix, False)
                files.append((display, entry.name))
        directories.sort(key=display_sort_key)
        files.sort(key=lambda item: display_sort_key(item[0]))
        return DirectoryListing(
            subdirectories=tuple(directories),
            files=tuple(display for display, _ in files),
            file_names=tuple(name for _, name in files),
        )

    async def top_level_entries(self) -> TopLevelEntries:
        """Collect root directories, markdown files and reference subdirectories."""
        root = self._doc_root.absolute_path
        directory_names: list[str] = []
        file_names: list[str] = []
        for entry in await self._filesystem.scandir(root):
            if entry.is_dir:
                directory_names.append(entry.name)
            elif entry.is_file and MARKDOWN_NAME_PATTERN.search(entry.name):
                file_names.append(entry.name)
        directory_names.sort(key=display_sort_key)
        file_names.sort(key=display_sort_key)

        reference_subdirectories: list[str] = []
        if REFERENCE_DIRECTORY in directory_names:
            reference_entries = await self._filesystem.scandir(root / REFERENCE_DIRECTORY)
            reference_subdirectories = sorted(
                (
                    f"{REFERENCE_DIRECTORY}/{entry.name}/"
                    for entry in reference_entries
                    if entry.is_dir
                ),
                key=display_sort_key,
            )
        return TopLevelEntries(
            directories=tuple(f"{name}/" for name in directory_names),
            reference_subdirectories=tuple(reference_subdirectories),
            files=tuple(file_names),
        )
