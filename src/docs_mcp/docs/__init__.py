"""Documentation path resolution and relevance suggestions."""

from .filesystem import DirEntry, DocFileSystem, LocalFileSystem
from .keywords import extract_keywords_from_path, normalize_keywords
from .models import (
    DirectoryContent,
    DirectoryFile,
    DirectoryListing,
    DocResult,
    DocRoot,
    ErrorContent,
    FileContent,
    FileScore,
    Found,
    NotFound,
    Resolution,
    ResolvedDocPath,
    SecurityViolation,
    TopLevelEntries,
)
from .query import INVALID_PATH_MESSAGE, DocsQuery
from .resolver import PathResolver
from .suggest import MAX_SUGGESTIONS, MarkdownFileCache, RelevanceSuggester

__all__ = [
    "DirEntry",
    "DirectoryContent",
    "DirectoryFile",
    "DirectoryListing",
    "DocFileSystem",
    "DocResult",
    "DocRoot",
    "DocsQuery",
    "ErrorContent",
    "FileContent",
    "FileScore",
    "Found",
    "INVALID_PATH_MESSAGE",
    "LocalFileSystem",
    "MAX_SUGGESTIONS",
    "MarkdownFileCache",
    "NotFound",
    "PathResolver",
    "RelevanceSuggester",
    "Resolution",
    "ResolvedDocPath",
    "SecurityViolation",
    "TopLevelEntries",
    "extract_keywords_from_path",
    "normalize_keywords",
]
