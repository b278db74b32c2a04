"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass
from pathlib import Path

from docs_mcp.docs import MAX_SUGGESTIONS, DocRoot
from docs_mcp.logging import LOG_LEVELS

CONFIG_FILENAME = "mcp-docs-server.toml"
DEFAULT_DOCS_DIR = "docs"
DEFAULT_NAME = "Acme"
DEFAULT_TOOL_NAME = "searchDocs"
DEFAULT_DESCRIPTION = (
    "Search the {{NAME}} documentation. Call {{TOOL_NAME}} with one or more paths "
    "relative to the documentation root; directories return a listing plus the "
    "content of their markdown files. Pass queryKeywords with the important words "
    "from the user's question to get suggestions when a path does not exist."
)
DEFAULT_CACHE_TTL_SECONDS = 60
DEFAULT_MAX_CONCURRENT_READS = 32

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]+")


@dataclass(slots=True, frozen=True)
class SuggestionConfig:
    """Relevance suggestion settings."""

    max_results: int = MAX_SUGGESTIONS
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    max_concurrent_reads: int = DEFAULT_MAX_CONCURRENT_READS


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Event log settings."""

    level: str = "info"
    stderr: bool = False


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged server configuration."""

    name: str
    title: str
    package_name: str
    version: str
    tool: str
    description: str
    doc_root: DocRoot
    config_path: Path
    root_dir: Path
    data_dir: Path
    suggestions: SuggestionConfig
    logging: LoggingConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for tool responses."""
        return {
            "name": self.name,
            "title": self.title,
            "package": self.package_name,
            "version": self.version,
            "tool": self.tool,
            "docs": {
                "relative_path": self.doc_root.relative_path,
                "absolute_path": str(self.doc_root.absolute_path),
            },
            "suggestions": {
                "max_results": self.suggestions.max_results,
                "cache_ttl_seconds": self.suggestions.cache_ttl_seconds,
                "max_concurrent_reads": self.suggestions.max_concurrent_reads,
            },
            "logging": {"level": self.logging.level, "stderr": self.logging.stderr},
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    docs: str | None = None
    data_dir: Path | None = None
    max_suggestions: int | None = None
    cache_ttl_seconds: int | None = None
    log_level: str | None = None


def create_tool_name(raw_name: str, raw_package: str) -> str:
    """Derive ``search<PascalCase>`` from the name, falling back to the package."""
    for candidate in (raw_name, raw_package):
        segments = _NON_ALPHANUMERIC.sub(" ", candidate.strip()).split()
        cleaned = "".join(segment[0].upper() + segment[1:] for segment in segments)
        if cleaned:
            return f"search{cleaned}"
    return DEFAULT_TOOL_NAME


def normalize_doc_dir(value: str) -> str:
    """Normalize a configured doc directory relative to the config file."""
    normalized = re.sub(r"/+", "/", value.replace("\\", "/").lstrip("/")).removesuffix("/")
    if normalized == ".":
        raise ValueError('Doc directory "." is not supported. Please specify a subdirectory.')
    if any(segment == ".." for segment in normalized.split("/")):
        raise ValueError(f"Doc directory cannot include parent directory traversal: {value}")
    return normalized or DEFAULT_DOCS_DIR


def resolve_doc_root(root_dir: Path, docs_value: str) -> DocRoot:
    """Build the DocRoot for a configured or overridden doc directory."""
    if Path(docs_value).is_absolute():
        absolute = Path(docs_value).resolve()
        doc_root = DocRoot(relative_path=absolute.name, absolute_path=absolute)
    else:
        relative = normalize_doc_dir(docs_value)
        doc_root = DocRoot(relative_path=relative, absolute_path=(root_dir / relative).resolve())
    if not doc_root.absolute_path.is_dir():
        raise ValueError(f"Expected directory at {doc_root.absolute_path}")
    return doc_root


def load_config_file(config_path: Path) -> dict[str, object]:
    """Load the optional TOML configuration file."""
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        return tomllib.load(handle)


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_string(payload: dict[str, object], key: str, default: str) -> str:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"Config field '{key}' must be a string.")
    return value


def _optional_int(
    value: object,
    name: str,
    default: int,
    minimum: int = 1,
    cap: int | None = None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        qualifier = "a positive integer" if minimum == 1 else f"an integer >= {minimum}"
        raise ValueError(f"Config field '{name}' must be {qualifier}.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value


def _log_level(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or value not in LOG_LEVELS:
        raise ValueError(f"Config field '{name}' must be one of: {', '.join(LOG_LEVELS)}.")
    return value


def merge_config(
    config_path: Path, payload: dict[str, object], overrides: CliOverrides
) -> ServerConfig:
    """Merge defaults, the config file, then CLI/startup overrides."""
    root_dir = config_path.parent
    suggestions_payload = _get_table(payload, "suggestions")
    logging_payload = _get_table(payload, "logging")

    raw_name = _optional_string(payload, "name", "")
    package_name = _optional_string(payload, "package", "")
    version = _optional_string(payload, "version", "0.0.0")
    docs_value = overrides.docs or _optional_string(payload, "docs", DEFAULT_DOCS_DIR)
    template = _optional_string(payload, "description", DEFAULT_DESCRIPTION)

    max_results = _optional_int(
        suggestions_payload.get("max_results"),
        "suggestions.max_results",
        MAX_SUGGESTIONS,
        cap=MAX_SUGGESTIONS,
    )
    max_results = _optional_int(
        overrides.max_suggestions,
        "overrides.max_suggestions",
        max_results,
        cap=MAX_SUGGESTIONS,
    )
    cache_ttl_seconds = _optional_int(
        suggestions_payload.get("cache_ttl_seconds"),
        "suggestions.cache_ttl_seconds",
        DEFAULT_CACHE_TTL_SECONDS,
        minimum=0,
    )
    cache_ttl_seconds = _optional_int(
        overrides.cache_ttl_seconds,
        "overrides.cache_ttl_seconds",
        cache_ttl_seconds,
        minimum=0,
    )
    max_concurrent_reads = _optional_int(
        suggestions_payload.get("max_concurrent_reads"),
        "suggestions.max_concurrent_reads",
        DEFAULT_MAX_CONCURRENT_READS,
    )

    level = _log_level(logging_payload.get("level"), "logging.level", "info")
    level = _log_level(overrides.log_level, "overrides.log_level", level)
    stderr = logging_payload.get("stderr", False)
    if not isinstance(stderr, bool):
        raise ValueError("Config field 'logging.stderr' must be a boolean.")

    name = raw_name.strip() or DEFAULT_NAME
    tool = create_tool_name(raw_name, package_name)
    data_dir = overrides.data_dir or root_dir / ".docs_mcp"
    return ServerConfig(
        name=name,
        title=f"{name} Documentation Server",
        package_name=package_name,
        version=version,
        tool=tool,
        description=template.replace("{{NAME}}", name).replace("{{TOOL_NAME}}", tool),
        doc_root=resolve_doc_root(root_dir, docs_value),
        config_path=config_path,
        root_dir=root_dir,
        data_dir=data_dir.resolve(),
        suggestions=SuggestionConfig(
            max_results=max_results,
            cache_ttl_seconds=cache_ttl_seconds,
            max_concurrent_reads=max_concurrent_reads,
        ),
        logging=LoggingConfig(level=level, stderr=stderr),
    )


def load_effective_config(
    config_path: Path, overrides: CliOverrides | None = None
) -> ServerConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_path = config_path.resolve()
    payload = load_config_file(resolved_path)
    return merge_config(resolved_path, payload, overrides or CliOverrides())
