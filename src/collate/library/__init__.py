"""Library, loaders and errors for collate.

Exceptions are imported first: the parser and renderer depend on them, and
``core`` depends on the parser.
"""

from collate.library.exceptions import (
    ArityError,
    CollateError,
    CollateIOError,
    DuplicateBlockError,
    ErrorCode,
    ExpansionLimitError,
    ExportError,
    GrammarError,
    LexError,
    RecursionLimitError,
    ResolutionError,
    SourceError,
    SourceSnippet,
    UndefinedParameterError,
    UnregisteredBlockError,
    ValidationError,
    build_source_snippet,
)
from collate.library.loaders import DictLoader, FileSystemLoader, Loader
from collate.library.core import ExportResult, Library

__all__ = [
    "ArityError",
    "CollateError",
    "CollateIOError",
    "DictLoader",
    "DuplicateBlockError",
    "ErrorCode",
    "ExpansionLimitError",
    "ExportError",
    "ExportResult",
    "FileSystemLoader",
    "GrammarError",
    "LexError",
    "Library",
    "Loader",
    "RecursionLimitError",
    "ResolutionError",
    "SourceError",
    "SourceSnippet",
    "UndefinedParameterError",
    "UnregisteredBlockError",
    "ValidationError",
    "build_source_snippet",
]
