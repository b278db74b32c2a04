"""Leveled JSONL event log for diagnostics emitted by the docs core."""

from __future__ import annotations

import contextlib
import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Final, TextIO

from .audit import utc_timestamp

LOG_LEVELS: Final[tuple[str, ...]] = ("debug", "info", "notice", "warning", "error", "critical")
_LEVEL_RANK: Final[dict[str, int]] = {level: rank for rank, level in enumerate(LOG_LEVELS)}


@dataclass(slots=True, frozen=True)
class LogEvent:
    """One leveled diagnostic event."""

    timestamp: str
    level: str
    message: str
    data: dict[str, object]


def event_data(data: object) -> dict[str, object]:
    """Convert arbitrary event payloads into a JSON-friendly mapping."""
    if data is None:
        return {}
    if isinstance(data, BaseException):
        return {"name": type(data).__name__, "message": str(data)}
    if isinstance(data, dict):
        output: dict[str, object] = {}
        for key, value in data.items():
            if isinstance(value, BaseException):
                output[str(key)] = event_data(value)
            elif isinstance(value, Path):
                output[str(key)] = value.as_posix()
            else:
                output[str(key)] = value
        return output
    return {"data": data}


class JsonlEventLogger:
    """Fire-and-forget leveled logger.

    Events below ``level`` are dropped. With no ``path`` and no ``stream`` the
    logger is a no-op sink. A failed write falls back to a single stderr line
    and never raises.
    """

    def __init__(
        self,
        path: Path | None = None,
        level: str = "info",
        stream: TextIO | None = None,
    ) -> None:
        if level not in _LEVEL_RANK:
            raise ValueError(f"Unknown log level: {level}")
        self._path = path
        self._threshold = _LEVEL_RANK[level]
        self._stream = stream
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)

    def enabled_for(self, level: str) -> bool:
        return _LEVEL_RANK.get(level, 0) >= self._threshold

    def log(self, level: str, message: str, data: object = None) -> None:
        if not self.enabled_for(level):
            return
        event = LogEvent(
            timestamp=utc_timestamp(),
            level=level,
            message=message,
            data=event_data(data),
        )
        line = json.dumps(asdict(event), sort_keys=True, default=str)
        if self._stream is not None:
            try:
                self._stream.write(f"[{level.upper()}] {message} {line}\n")
            except (OSError, ValueError) as error:
                _report_unavailable(level, message, error)
        if self._path is None:
            return
        try:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(line)
                handle.write("\n")
        except OSError as error:
            _report_unavailable(level, message, error)

    def debug(self, message: str, data: object = None) -> None:
        self.log("debug", message, data)

    def info(self, message: str, data: object = None) -> None:
        self.log("info", message, data)

    def warning(self, message: str, data: object = None) -> None:
        self.log("warning", message, data)

    def error(self, message: str, data: object = None) -> None:
        self.log("error", message, data)


def _report_unavailable(level: str, message: str, error: Exception) -> None:
    # Last resort; stderr itself may be the sink that failed.
    with contextlib.suppress(OSError, ValueError):
        sys.stderr.write(f"[{level.upper()}] {message} (event log unavailable: {error})\n")
