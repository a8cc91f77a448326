"""Exceptions for the collate engine.

Exception Hierarchy:
CollateError (base)
├── LexError                  # Malformed command text
├── GrammarError              # Unknown verb, bad arguments, bad structure
├── ValidationError           # Duplicate names, multiple exports
│   └── DuplicateBlockError   # Block name already registered
├── ResolutionError           # Render-time lookup failures
│   ├── UnregisteredBlockError
│   ├── UndefinedParameterError
│   ├── ArityError            # Argument count != parameter count
│   └── RecursionLimitError   # Block call chain too deep
├── ExpansionLimitError       # Block exports never reached a fixed point
└── CollateIOError
    ├── SourceError           # Source directory/file could not be read
    └── ExportError           # Output could not be written

Every error is fatal to the run. Context (filename, block, position, block
stack) is attached as the error propagates outwards, so the final message
reads like::

    pages/index.txt: (3:1) Unknown command 'q'

"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path

from collate.library import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes.

    Format: C-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), GRM (grammar), VAL (validation),
    RES (resolution), EXP (expansion), IO (filesystem)
    """

    # Lexer errors (C-LEX-xxx)
    INVALID_COMMAND = "C-LEX-001"
    UNTERMINATED_COMMAND = "C-LEX-002"
    UNCLOSED_LITERAL = "C-LEX-003"

    # Grammar errors (C-GRM-xxx)
    UNKNOWN_COMMAND = "C-GRM-001"
    MISSING_ARGUMENTS = "C-GRM-002"
    INVALID_ARGUMENT = "C-GRM-003"
    NESTED_BLOCK = "C-GRM-004"
    OUTSIDE_BLOCK = "C-GRM-005"

    # Validation errors (C-VAL-xxx)
    DUPLICATE_BLOCK = "C-VAL-001"
    DUPLICATE_PARAMETER = "C-VAL-002"
    MULTIPLE_EXPORTS = "C-VAL-003"

    # Resolution errors (C-RES-xxx)
    UNREGISTERED_BLOCK = "C-RES-001"
    UNDEFINED_PARAMETER = "C-RES-002"
    ARITY_MISMATCH = "C-RES-003"
    LITERAL_ARGUMENTS = "C-RES-004"
    RECURSION_LIMIT = "C-RES-005"

    # Expansion errors (C-EXP-xxx)
    EXPANSION_LIMIT = "C-EXP-001"

    # Filesystem errors (C-IO-xxx)
    SOURCE_NOT_FOUND = "C-IO-001"
    READ_FAILED = "C-IO-002"
    WRITE_FAILED = "C-IO-003"
    INVALID_EXPORT_PATH = "C-IO-004"

    @property
    def category(self) -> str:
        """Error category (e.g., 'lexer', 'grammar', 'resolution')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "GRM": "grammar",
            "VAL": "validation",
            "RES": "resolution",
            "EXP": "expansion",
            "IO": "io",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def format_block_stack(stack: list[str] | None) -> str:
    """Format the block call chain for error messages.

    Example:
        >>> print(format_block_stack(["page", "layout", "nav"]))
        Block stack:
          • page
          • layout
          • nav
    """
    if not stack:
        return ""

    lines = [terminal.dim_text("Block stack:")]
    for name in stack:
        lines.append(f"  • {terminal.location(name)}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Source lines around an error, with an optional caret.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional 0-based column for the caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
            if lineno == self.error_line and self.column is not None:
                caret = " " * self.column + "^"
                parts.append(f"{terminal.dim_text('     |')} {terminal.error_line(caret)}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 1,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from source text.

    Args:
        source: Full source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional 0-based column for the caret.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CollateError(Exception):
    """Base exception for all collate errors.

    Attributes:
        message: Bare description, without location
        code: ErrorCode for searchable identification
        filename: Source unit the error came from
        lineno: 1-based line, when known
        col_offset: 0-based column, when known
        block: Name of the block being built or rendered
        block_stack: Chain of block invocations leading to the error
        suggestion: Optional hint for fixing the problem
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        filename: str | None = None,
        lineno: int | None = None,
        col_offset: int | None = None,
        source: str | None = None,
        block: str | None = None,
        block_stack: list[str] | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        self.filename = filename
        self.lineno = lineno
        self.col_offset = col_offset
        self.source = source
        self.block = block
        self.block_stack = block_stack or []
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def position(self) -> str | None:
        """``line:col`` (both 1-based), or None if the position is unknown."""
        if self.lineno is None:
            return None
        col = (self.col_offset or 0) + 1
        return f"{self.lineno}:{col}"

    def with_context(
        self,
        *,
        filename: str | None = None,
        source: str | None = None,
        block: str | None = None,
    ) -> CollateError:
        """Attach outer context without overwriting what is already known.

        Returns self so callers can ``raise err.with_context(...)``.
        """
        if self.filename is None:
            self.filename = filename
        if self.source is None:
            self.source = source
        if self.block is None:
            self.block = block
        self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        msg = self.message
        if self.position:
            msg = f"({self.position}) {msg}"
        if self.block and self.lineno is None:
            msg = f"{msg} (in block '{self.block}')"
        if self.filename:
            msg = f"{self.filename}: {msg}"
        if self.block_stack:
            msg += "\n" + format_block_stack(self.block_stack)
        return msg

    def format_compact(self) -> str:
        """Format the error as a terminal diagnostic.

        Format::

            C-GRM-001: Unknown command 'q'
              --> pages/index.txt:3:1
               |
            >  3 | ^|q|
                 | ^
               |
              Hint: ...
        """
        parts: list[str] = [
            terminal.format_error_header(self.code.value if self.code else None, self.message)
        ]

        location = self.filename or "<string>"
        if self.position:
            location += f":{self.position}"
        parts.append(f"  --> {terminal.location(location)}")
        if self.block:
            parts.append(f"  Block: {self.block}")

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                snippet = build_source_snippet(
                    self.source, self.lineno, column=self.col_offset
                )
                parts.append(snippet.format())

        if self.block_stack:
            parts.append(format_block_stack(self.block_stack))

        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")

        return "\n".join(parts)


class LexError(CollateError):
    """Malformed command text at a given line and column."""

    code: ErrorCode | None = ErrorCode.INVALID_COMMAND


class GrammarError(CollateError):
    """A command that does not fit the grammar or the block structure."""

    code: ErrorCode | None = ErrorCode.UNKNOWN_COMMAND


class ValidationError(CollateError):
    """Structurally valid source whose definitions conflict."""

    code: ErrorCode | None = ErrorCode.DUPLICATE_PARAMETER


class DuplicateBlockError(ValidationError):
    """A block name is already registered in the library.

    Example:
        >>> library.import_string("^|n a|^|e|")
        >>> library.import_string("^|n a|^|e|")
        DuplicateBlockError: Name taken 'a' (first defined at <string>:1)
    """

    code: ErrorCode | None = ErrorCode.DUPLICATE_BLOCK

    def __init__(self, name: str, existing: str | None = None, **kwargs):
        self.name = name
        self.existing = existing
        msg = f"Name taken '{name}'"
        if existing:
            msg += f" (first defined at {existing})"
        super().__init__(msg, **kwargs)


class ResolutionError(CollateError):
    """Render-time failure to resolve a reference."""

    code: ErrorCode | None = ErrorCode.UNREGISTERED_BLOCK


class UnregisteredBlockError(ResolutionError):
    """A use site names a block that is not in the library.

    If ``available_names`` is given, a "Did you mean?" suggestion is added
    when a close match exists.
    """

    code: ErrorCode | None = ErrorCode.UNREGISTERED_BLOCK

    def __init__(
        self,
        name: str,
        available_names: frozenset[str] | None = None,
        **kwargs,
    ):
        self.name = name
        msg = f"Using unregistered block '{name}'"
        if available_names:
            matches = get_close_matches(name, sorted(available_names), n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
        super().__init__(msg, **kwargs)


class UndefinedParameterError(ResolutionError):
    """``#name`` used in a block that declares no parameter ``name``."""

    code: ErrorCode | None = ErrorCode.UNDEFINED_PARAMETER

    def __init__(self, name: str, **kwargs):
        self.name = name
        super().__init__(f"Parameter named '{name}' does not exist", **kwargs)


class ArityError(ResolutionError):
    """Argument count at a use site differs from the target's parameter count."""

    code: ErrorCode | None = ErrorCode.ARITY_MISMATCH

    def __init__(self, name: str, expected: int, received: int, **kwargs):
        self.name = name
        self.expected = expected
        self.received = received
        noun = "parameter" if expected == 1 else "parameters"
        super().__init__(
            f"Block '{name}' expected {expected} {noun}, received {received}",
            **kwargs,
        )


class RecursionLimitError(ResolutionError):
    """Block invocations nested deeper than ``max_render_depth``."""

    code: ErrorCode | None = ErrorCode.RECURSION_LIMIT

    def __init__(self, name: str, limit: int, **kwargs):
        self.name = name
        self.limit = limit
        kwargs.setdefault("suggestion", "Check for blocks that use themselves: a -> b -> a")
        super().__init__(
            f"Maximum render depth exceeded ({limit}) when using block '{name}'",
            **kwargs,
        )


class ExpansionLimitError(CollateError):
    """Block exports kept producing new block exports past the pass cap."""

    code: ErrorCode | None = ErrorCode.EXPANSION_LIMIT

    def __init__(self, limit: int, pending: list[str], **kwargs):
        self.limit = limit
        self.pending = pending
        kwargs.setdefault(
            "suggestion",
            "A block export keeps generating new block exports; "
            "raise max_expansion_passes if this is intended",
        )
        super().__init__(
            f"Block exports did not settle after {limit} passes "
            f"(still pending: {', '.join(pending)})",
            **kwargs,
        )


class CollateIOError(CollateError):
    """Filesystem failure, carrying the offending path."""

    code: ErrorCode | None = ErrorCode.READ_FAILED

    def __init__(self, message: str, path: str | Path | None = None, **kwargs):
        self.path = Path(path) if path is not None else None
        if path is not None:
            message = f"'{path}': {message}"
        super().__init__(message, **kwargs)


class SourceError(CollateIOError):
    """Source directory or file could not be read."""

    code: ErrorCode | None = ErrorCode.READ_FAILED


class ExportError(CollateIOError):
    """An export could not be written."""

    code: ErrorCode | None = ErrorCode.WRITE_FAILED
