from __future__ import annotations

import asyncio
import json
from pathlib import Path

from docs_mcp.docs import (
    DocRoot,
    Found,
    LocalFileSystem,
    NotFound,
    PathResolver,
    SecurityViolation,
)
from docs_mcp.logging import JsonlEventLogger


def _resolver(tmp_path: Path, events: JsonlEventLogger | None = None) -> PathResolver:
    docs = tmp_path / "docs"
    (docs / "overview").mkdir(parents=True)
    (docs / "index.md").write_text("# Welcome\n", encoding="utf-8")
    (docs / "overview" / "intro.md").write_text("intro\n", encoding="utf-8")
    root = DocRoot(relative_path="docs", absolute_path=docs.resolve())
    return PathResolver(root, LocalFileSystem(), events)


def test_resolves_file_relative_to_root(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    outcome = asyncio.run(resolver.resolve("overview/intro.md"))

    assert isinstance(outcome, Found)
    assert outcome.is_directory is False
    assert outcome.resolved.relative_path == "overview/intro.md"
    assert outcome.resolved.absolute_path == (tmp_path / "docs" / "overview" / "intro.md").resolve()


def test_redundant_root_prefix_is_stripped(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    outcome = asyncio.run(resolver.resolve("docs/overview/intro.md"))

    assert isinstance(outcome, Found)
    assert outcome.resolved.relative_path == "overview/intro.md"


def test_root_prefix_alone_resolves_to_root(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    outcome = asyncio.run(resolver.resolve("docs/"))

    assert isinstance(outcome, Found)
    assert outcome.is_directory is True
    assert outcome.resolved.relative_path == "."
    assert outcome.resolved.absolute_path == (tmp_path / "docs").resolve()


def test_empty_path_resolves_to_root(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    for raw in ("", "/", "./"):
        outcome = asyncio.run(resolver.resolve(raw))
        assert isinstance(outcome, Found)
        assert outcome.resolved.relative_path == "."


def test_messy_separators_resolve_to_same_file(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    outcome = asyncio.run(resolver.resolve(".//overview\\\\intro.md"))

    assert isinstance(outcome, Found)
    assert outcome.resolved.relative_path == "overview/intro.md"


def test_missing_path_is_not_found(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    assert isinstance(asyncio.run(resolver.resolve("overview/missing.md")), NotFound)


def _read_events(path: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


def test_traversal_is_security_violation_and_audited(tmp_path: Path) -> None:
    events = JsonlEventLogger(path=tmp_path / "events.jsonl")
    resolver = _resolver(tmp_path, events)

    outcome = asyncio.run(resolver.resolve("a/../../etc/passwd"))

    assert isinstance(outcome, SecurityViolation)
    entries = _read_events(tmp_path / "events.jsonl")
    assert entries[-1]["level"] == "error"
    assert entries[-1]["message"] == "Path traversal attempt detected"
    assert entries[-1]["data"] == {"docPath": "a/../../etc/passwd"}


def test_symlink_escape_is_not_resolved(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "leak.md").write_text("secret", encoding="utf-8")
    (tmp_path / "docs" / "link").symlink_to(outside, target_is_directory=True)

    assert isinstance(asyncio.run(resolver.resolve("link/leak.md")), NotFound)


def test_resolved_paths_never_escape_root(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)
    root = (tmp_path / "docs").resolve()

    for raw in ("index.md", "docs/index.md", "//index.md", "docs//overview/", ".", "docs"):
        outcome = asyncio.run(resolver.resolve(raw))
        assert isinstance(outcome, Found), raw
        assert outcome.resolved.absolute_path.is_relative_to(root), raw


class LoopingFileSystem(LocalFileSystem):
    """Local filesystem that reports a symlink loop for one candidate."""

    def __init__(self, looping_path: Path) -> None:
        self._looping_path = looping_path

    async def resolve(self, path: Path) -> Path:
        if path == self._looping_path:
            raise RuntimeError(f"Symlink loop from {path}")
        return await super().resolve(path)


def test_unresolvable_candidate_falls_through_to_next(tmp_path: Path) -> None:
    _resolver(tmp_path)
    docs = (tmp_path / "docs").resolve()
    (docs / "docs").mkdir()
    root = DocRoot(relative_path="docs", absolute_path=docs)
    resolver = PathResolver(root, LoopingFileSystem(docs / "docs"))

    outcome = asyncio.run(resolver.resolve("docs"))

    assert isinstance(outcome, Found)
    assert outcome.resolved.relative_path == "."


def test_overlong_candidate_is_not_found(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    outcome = asyncio.run(resolver.resolve("x" * 300 + ".md"))

    assert isinstance(outcome, NotFound)
