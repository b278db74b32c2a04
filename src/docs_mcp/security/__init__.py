"""Path normalization and doc-root confinement primitives."""

from .paths import has_traversal, is_within_root, normalize_doc_path

__all__ = ["has_traversal", "is_within_root", "normalize_doc_path"]
