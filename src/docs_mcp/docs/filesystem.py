"""Asynchronous filesystem access used by the resolver and suggester."""

from __future__ import annotations

import asyncio
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol

PathKind = Literal["file", "directory", "other"]

# Any of these while locating a candidate means the candidate does not exist.
# ValueError covers embedded NUL bytes; RuntimeError covers symlink loops.
UNRESOLVABLE_ERRORS: tuple[type[Exception], ...] = (OSError, ValueError, RuntimeError)


@dataclass(slots=True, frozen=True)
class DirEntry:
    """One directory entry; symlinks are neither files nor directories."""

    name: str
    path: Path
    is_dir: bool
    is_file: bool


class DocFileSystem(Protocol):
    """Read-only filesystem collaborator.

    ``resolve`` and ``stat`` raise for targets that cannot be located; callers
    treat any of ``UNRESOLVABLE_ERRORS`` as "not found".
    """

    async def resolve(self, path: Path) -> Path: ...

    async def stat(self, path: Path) -> PathKind: ...

    async def scandir(self, path: Path) -> list[DirEntry]: ...

    async def read_text(self, path: Path) -> str: ...


class LocalFileSystem:
    """DocFileSystem backed by the local disk, offloading calls to threads."""

    async def resolve(self, path: Path) -> Path:
        return await asyncio.to_thread(path.resolve)

    async def stat(self, path: Path) -> PathKind:
        return await asyncio.to_thread(_stat_kind, path)

    async def scandir(self, path: Path) -> list[DirEntry]:
        return await asyncio.to_thread(_scandir, path)

    async def read_text(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")


def _stat_kind(path: Path) -> PathKind:
    mode = path.stat().st_mode
    if stat.S_ISDIR(mode):
        return "directory"
    if stat.S_ISREG(mode):
        return "file"
    return "other"


def _scandir(path: Path) -> list[DirEntry]:
    with os.scandir(path) as entries:
        return [
            DirEntry(
                name=entry.name,
                path=Path(entry.path),
                is_dir=entry.is_dir(follow_symlinks=False),
                is_file=entry.is_file(follow_symlinks=False),
            )
            for entry in entries
        ]
