"""Text shapes for query results, listings and tool descriptions."""

from __future__ import annotations

import json
from collections.abc import Sequence

from docs_mcp.docs.models import (
    DirectoryContent,
    DocResult,
    FileContent,
    TopLevelEntries,
)


def render_available_paths(entries: TopLevelEntries, root_label: str) -> str:
    """Render the top-level discoverability block attached to not-found errors."""
    lines = [f'Available top-level paths under "{root_label}":', "", "Directories:"]
    lines.extend(_bullets(entries.directories))
    if entries.reference_subdirectories:
        lines.extend(["", "Reference subdirectories:"])
        lines.extend(f"- {item}" for item in entries.reference_subdirectories)
    lines.extend(["", "Files:"])
    lines.extend(_bullets(entries.files))
    return "\n".join(lines).strip()


def render_paths_description(entries: TopLevelEntries) -> str:
    """Describe the ``paths`` tool argument with the root's top-level entries."""
    lines = [
        "One or more documentation paths to fetch",
        "Available paths:",
        "Available top-level paths:",
        "Directories:",
    ]
    lines.extend(_bullets(entries.directories))
    if entries.reference_subdirectories:
        lines.append("Reference subdirectories:")
        lines.extend(f"- {item}" for item in entries.reference_subdirectories)
    lines.append("Files:")
    lines.extend(_bullets(entries.files))
    return "\n".join(lines)


def _bullets(items: Sequence[str]) -> list[str]:
    if not items:
        return ["- (none)"]
    return [f"- {item}" for item in items]


def render_directory_listing(result: DirectoryContent) -> str:
    """Render a directory header followed by the content of every listed file."""
    header = "\n".join(
        [
            f"Directory contents of {result.path}:",
            "",
            "Subdirectories:" if result.subdirectories else "No subdirectories.",
            *(f"- {item}" for item in result.subdirectories),
            "",
            "Files in this directory:" if result.files else "No files in this directory.",
            *(f"- {item}" for item in result.files),
            "",
            "---",
            "",
            "Contents of all files in this directory:",
            "",
        ]
    )
    contents = "".join(f"\n\n# {item.display_path}\n\n{item.content}" for item in result.contents)
    return header + contents


def render_body(result: DocResult) -> str:
    """Return the legacy body text for one result."""
    if isinstance(result, FileContent):
        return result.content
    if isinstance(result, DirectoryContent):
        body = render_directory_listing(result)
        if result.suggestions:
            body += "\n".join(["", "---", "", result.suggestions])
        return body
    return "\n\n".join(
        part for part in (result.error, result.available_paths, result.suggestions) if part
    )


def render_text(results: Sequence[DocResult]) -> str:
    """Render the legacy concatenated response."""
    return "\n".join(f"## {result.path}\n\n{render_body(result)}\n\n---\n" for result in results)


def structured_entry(result: DocResult) -> dict[str, object]:
    """Split one result into tagged metadata and body."""
    metadata: dict[str, object] = {"path": result.path}
    if isinstance(result, FileContent):
        body = result.content
    elif isinstance(result, DirectoryContent):
        body = render_directory_listing(result)
        if result.suggestions:
            metadata["suggestions"] = result.suggestions
    else:
        metadata["error"] = result.error
        if result.suggestions:
            metadata["suggestions"] = result.suggestions
        body = result.available_paths
    return {"kind": result.kind, "metadata": metadata, "body": body}


def render_frontmatter(entry: dict[str, object]) -> str:
    """Render a structured entry as a frontmatter block followed by its body."""
    metadata = entry["metadata"]
    if not isinstance(metadata, dict):
        raise TypeError("Structured entry metadata must be a mapping.")
    lines = ["---", f"kind: {entry['kind']}"]
    for key in ("path", "error", "suggestions"):
        if key in metadata:
            lines.append(f"{key}: {json.dumps(metadata[key], ensure_ascii=False)}")
    lines.append("---")
    body = entry["body"]
    if body:
        return "\n".join(lines) + f"\n\n{body}"
    return "\n".join(lines)


def render_structured(results: Sequence[DocResult]) -> list[dict[str, object]]:
    return [structured_entry(result) for result in results]

