"""Keyword-driven relevance suggestions over the markdown tree."""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from docs_mcp.docs.filesystem import DirEntry, DocFileSystem
from docs_mcp.docs.keywords import extract_keywords_from_path, normalize_keywords
from docs_mcp.docs.models import FileScore
from docs_mcp.logging import JsonlEventLogger

MAX_SUGGESTIONS: Final[int] = 10
SUGGESTION_HEADER: Final[str] = "Here are some paths that might be relevant based on your query:"
HIGH_VALUE_SEGMENTS: Final[tuple[str, ...]] = ("guides", "getting-started", "architecture")


async def walk_markdown_files(
    filesystem: DocFileSystem,
    base_dir: Path,
    events: JsonlEventLogger | None = None,
) -> AsyncIterator[Path]:
    """Yield every ``.md`` file under base_dir in depth-first, name-sorted order.

    Unreadable directories are logged and skipped.
    """
    stack: list[list[DirEntry]] = [await _pending_entries(filesystem, base_dir, events)]
    while stack:
        pending = stack[-1]
        if not pending:
            stack.pop()
            continue
        entry = pending.pop()
        if entry.is_dir:
            stack.append(await _pending_entries(filesystem, entry.path, events))
            continue
        if entry.is_file and entry.name.endswith(".md"):
            yield entry.path


async def _pending_entries(
    filesystem: DocFileSystem,
    directory: Path,
    events: JsonlEventLogger | None,
) -> list[DirEntry]:
    try:
        entries = await filesystem.scandir(directory)
    except OSError as error:
        if events is not None:
            events.warning(
                "Skipping unreadable directory during suggestion scan",
                {"path": directory, "error": error},
            )
        return []
    # Reversed so that list.pop() hands entries out in name order.
    return sorted(entries, key=lambda item: item.name, reverse=True)


@dataclass(slots=True, frozen=True)
class _CacheEntry:
    files: tuple[Path, ...]
    stored_at: float


class MarkdownFileCache:
    """Per-directory memo of markdown walks.

    Entries expire after ``ttl_seconds``; a TTL of zero disables caching.
    Concurrent first requests for the same directory share one walk.
    """

    def __init__(
        self,
        filesystem: DocFileSystem,
        ttl_seconds: float = 60.0,
        events: JsonlEventLogger | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0.")
        self._filesystem = filesystem
        self._ttl_seconds = ttl_seconds
        self._events = events
        self._clock = clock
        self._entries: dict[Path, _CacheEntry] = {}
        self._in_flight: dict[Path, asyncio.Future[tuple[Path, ...]]] = {}

    async def files(self, base_dir: Path) -> tuple[Path, ...]:
        """Return markdown files under base_dir, walking at most once per TTL window."""
        cached = self._entries.get(base_dir)
        if cached is not None and not self._is_expired(cached):
            return cached.files
        pending = self._in_flight.get(base_dir)
        if pending is not None:
            return await asyncio.shield(pending)
        task = asyncio.ensure_future(self._walk(base_dir))
        self._in_flight[base_dir] = task
        try:
            files = await asyncio.shield(task)
        finally:
            self._in_flight.pop(base_dir, None)
        if self._ttl_seconds > 0:
            self._entries[base_dir] = _CacheEntry(files=files, stored_at=self._clock())
        return files

    def invalidate(self, base_dir: Path | None = None) -> None:
        """Drop cached walks for one directory, or for all of them."""
        if base_dir is None:
            self._entries.clear()
            return
        self._entries.pop(base_dir, None)

    def _is_expired(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.stored_at >= self._ttl_seconds

    async def _walk(self, base_dir: Path) -> tuple[Path, ...]:
        return tuple(
            [path async for path in walk_markdown_files(self._filesystem, base_dir, self._events)]
        )


def calculate_path_relevance(relative_path: str, keywords: Sequence[str]) -> int:
    """Score structural cues in a candidate's own path."""
    relevance = 0
    path_lower = relative_path.lower()
    if path_lower.startswith("reference/"):
        relevance += 2
    for keyword in keywords:
        if keyword.lower() in path_lower:
            relevance += 3
    if any(segment in path_lower for segment in HIGH_VALUE_SEGMENTS):
        relevance += 1
    return relevance


def score_document(relative_path: str, text: str, keywords: Sequence[str]) -> FileScore | None:
    """Accumulate line-level keyword matches; None when nothing matches."""
    score: FileScore | None = None
    for line in text.split("\n"):
        lower_line = line.lower()
        for keyword in keywords:
            if keyword.lower() not in lower_line:
                continue
            if score is None:
                score = FileScore(
                    path=relative_path,
                    path_relevance=calculate_path_relevance(relative_path, keywords),
                )
            score.keyword_matches.add(keyword)
            score.total_matches += 1
            if "#" in lower_line or "title" in lower_line:
                score.title_matches += 1
    return score


def rank_scores(
    scores: Iterable[FileScore], total_keywords: int, limit: int = MAX_SUGGESTIONS
) -> list[FileScore]:
    """Order scores best-first; ties keep scan order."""
    ranked = sorted(scores, key=lambda score: -score.final_score(total_keywords))
    return ranked[: min(limit, MAX_SUGGESTIONS)]


def format_suggestions(paths: Iterable[str]) -> str:
    """Render the suggestion block, or an empty string when there is nothing to show."""
    ordered = sorted(set(paths))
    if not ordered:
        return ""
    listing = "\n".join(f"- {path}" for path in ordered)
    return f"{SUGGESTION_HEADER}\n\n{listing}"


class RelevanceSuggester:
    """Scans markdown files under base directories and ranks them by keyword coverage."""

    def __init__(
        self,
        filesystem: DocFileSystem,
        cache: MarkdownFileCache | None = None,
        events: JsonlEventLogger | None = None,
        max_results: int = MAX_SUGGESTIONS,
        max_concurrent_reads: int = 32,
    ) -> None:
        if max_results < 1 or max_results > MAX_SUGGESTIONS:
            raise ValueError(f"max_results must be between 1 and {MAX_SUGGESTIONS}.")
        if max_concurrent_reads < 1:
            raise ValueError("max_concurrent_reads must be >= 1.")
        self._filesystem = filesystem
        self._events = events or JsonlEventLogger()
        self._cache = cache or MarkdownFileCache(filesystem, events=self._events)
        self._max_results = max_results
        self._max_concurrent_reads = max_concurrent_reads

    async def search_document_content(self, keywords: Sequence[str], base_dir: Path) -> list[str]:
        """Return up to max_results root-relative paths ranked by relevance."""
        if not keywords:
            return []
        files = await self._cache.files(base_dir)
        read_slots = asyncio.Semaphore(self._max_concurrent_reads)

        async def score_candidate(path: Path) -> FileScore | None:
            async with read_slots:
                try:
                    text = await self._filesystem.read_text(path)
                except (OSError, UnicodeDecodeError) as error:
                    self._events.warning(
                        "Skipping unreadable file during suggestion scan",
                        {"path": path, "error": error},
                    )
                    return None
            return score_document(path.relative_to(base_dir).as_posix(), text, keywords)

        results = await asyncio.gather(*(score_candidate(path) for path in files))
        scores = [score for score in results if score is not None]
        ranked = rank_scores(scores, len(keywords), self._max_results)
        return [score.path for score in ranked]

    async def suggest(
        self,
        path_input: str,
        query_keywords: Sequence[str] | None,
        base_dirs: Sequence[Path],
    ) -> str:
        """Build the suggestion block for a requested path and optional query keywords."""
        keywords = normalize_keywords(
            [*extract_keywords_from_path(path_input), *(query_keywords or [])]
        )
        if not keywords:
            return ""
        suggested: dict[str, None] = {}
        for base_dir in base_dirs:
            for path in await self.search_document_content(keywords, base_dir):
                if len(suggested) >= self._max_results:
                    break
                suggested[path] = None
        return format_suggestions(suggested)
