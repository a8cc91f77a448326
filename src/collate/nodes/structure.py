"""Block definitions and parsed documents."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from collate.nodes.base import Node
from collate.nodes.elements import Content, Element


@dataclass(frozen=True, slots=True)
class FileExport:
    """Render once and write to ``path`` under the output directory."""

    path: str


@dataclass(frozen=True, slots=True)
class BlockExport:
    """Render and feed the output back into the library as source."""


Export = FileExport | BlockExport


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Named, parameterized unit of template source.

    Attributes:
        name: Library-wide unique identifier
        params: Positional parameter names, unique within the block
        export: Optional export declaration
        elements: Ordered body
        filename: Source the block was parsed from (for diagnostics)
    """

    name: str
    params: tuple[str, ...] = ()
    export: Export | None = None
    elements: tuple[Element, ...] = ()
    filename: str | None = None

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def location(self) -> str:
        return f"{self.filename or '<string>'}:{self.lineno}"


@dataclass(frozen=True, slots=True)
class Document(Node):
    """One parsed source unit: its blocks plus top-level text outside them."""

    blocks: Sequence[Block]
    body: Sequence[Content] = ()
    filename: str | None = None
