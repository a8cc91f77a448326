"""Base node class for collate source nodes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for everything the lexer and builder produce.

    Nodes track their source location (1-based line, 0-based column) for
    error reporting and are immutable once built.
    """

    lineno: int
    col_offset: int
