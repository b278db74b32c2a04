"""Batch orchestration of resolution, listing and suggestions."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from docs_mcp.docs.filesystem import DocFileSystem, LocalFileSystem
from docs_mcp.docs.models import (
    DirectoryContent,
    DirectoryFile,
    DocResult,
    DocRoot,
    ErrorContent,
    FileContent,
    Found,
    ResolvedDocPath,
    SecurityViolation,
)
from docs_mcp.docs.render import render_available_paths, render_paths_description
from docs_mcp.docs.resolver import PathResolver
from docs_mcp.docs.suggest import MarkdownFileCache, RelevanceSuggester
from docs_mcp.logging import JsonlEventLogger

INVALID_PATH_MESSAGE = "Invalid path"


class DocsQuery:
    """Serves documentation requests for one DocRoot.

    Every requested path is handled independently: a failure for one path
    becomes that path's ErrorContent and never affects its siblings.
    """

    def __init__(
        self,
        doc_root: DocRoot,
        filesystem: DocFileSystem | None = None,
        events: JsonlEventLogger | None = None,
        max_suggestions: int = 10,
        cache_ttl_seconds: float = 60.0,
        max_concurrent_reads: int = 32,
    ) -> None:
        self._doc_root = doc_root
        self._filesystem = filesystem or LocalFileSystem()
        self._events = events or JsonlEventLogger()
        self._resolver = PathResolver(doc_root, self._filesystem, self._events)
        self._suggester = RelevanceSuggester(
            self._filesystem,
            cache=MarkdownFileCache(
                self._filesystem, ttl_seconds=cache_ttl_seconds, events=self._events
            ),
            events=self._events,
            max_results=max_suggestions,
            max_concurrent_reads=max_concurrent_reads,
        )

    async def query(
        self, paths: Sequence[str], query_keywords: Sequence[str] | None = None
    ) -> list[DocResult]:
        """Resolve every requested path concurrently, preserving request order."""
        keywords = list(query_keywords or [])
        return list(await asyncio.gather(*(self._query_one(path, keywords) for path in paths)))

    async def available_paths(self) -> str:
        entries = await self._resolver.top_level_entries()
        root_label = self._doc_root.display_prefix or "documentation root"
        return render_available_paths(entries, root_label)

    async def paths_description(self) -> str:
        return render_paths_description(await self._resolver.top_level_entries())

    async def _query_one(self, doc_path: str, query_keywords: list[str]) -> DocResult:
        try:
            resolution = await self._resolver.resolve(doc_path)
            if isinstance(resolution, SecurityViolation):
                return ErrorContent(path=doc_path, error=INVALID_PATH_MESSAGE)
            if isinstance(resolution, Found):
                return await self._read_found(doc_path, resolution, query_keywords)
            suggestions = await self._suggestions(doc_path, query_keywords)
            return ErrorContent(
                path=doc_path,
                error=f'Path "{doc_path}" not found.',
                suggestions=suggestions,
                available_paths=await self.available_paths(),
            )
        except Exception as error:
            self._events.warning(f"Failed to read content for path: {doc_path}", error)
            return ErrorContent(path=doc_path, error=str(error) or "Unknown error")

    async def _read_found(
        self, doc_path: str, resolution: Found, query_keywords: list[str]
    ) -> DocResult:
        resolved = resolution.resolved
        try:
            if resolution.is_directory:
                return await self._read_directory(doc_path, resolved, query_keywords)
            content = await self._filesystem.read_text(resolved.absolute_path)
        except (OSError, UnicodeDecodeError) as error:
            self._events.error(
                "Failed to read documentation content", {"docPath": doc_path, "error": str(error)}
            )
            raise
        return FileContent(path=doc_path, content=content)

    async def _read_directory(
        self, doc_path: str, resolved: ResolvedDocPath, query_keywords: list[str]
    ) -> DirectoryContent:
        listing = await self._resolver.list_directory(resolved)
        texts = await asyncio.gather(
            *(
                self._filesystem.read_text(resolved.absolute_path / name)
                for name in listing.file_names
            )
        )
        return DirectoryContent(
            path=doc_path,
            subdirectories=listing.subdirectories,
            files=listing.files,
            contents=tuple(
                DirectoryFile(display_path=display, content=text)
                for display, text in zip(listing.files, texts, strict=True)
            ),
            suggestions=await self._suggestions(doc_path, query_keywords),
        )

    async def _suggestions(self, doc_path: str, query_keywords: list[str]) -> str:
        return await self._suggester.suggest(
            doc_path, query_keywords, [self._doc_root.absolute_path]
        )
