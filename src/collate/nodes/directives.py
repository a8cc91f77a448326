"""Structural directives produced by the command grammar.

These only exist between the lexer and the block builder; the builder folds
them into ``Block`` attributes.
"""

from __future__ import annotations

from dataclasses import dataclass

from collate.nodes.base import Node
from collate.nodes.elements import Content, UseBlock


@dataclass(frozen=True, slots=True)
class OpenBlock(Node):
    """``^|n name|``"""

    name: str


@dataclass(frozen=True, slots=True)
class DeclareParams(Node):
    """``^|p first second|``"""

    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DeclareExport(Node):
    """``^|x path|`` (file export) or ``^|x|`` (block export).

    ``path`` is None for a block export.
    """

    path: str | None = None


@dataclass(frozen=True, slots=True)
class CloseBlock(Node):
    """``^|e|``"""


Directive = OpenBlock | DeclareParams | DeclareExport | CloseBlock | Content | UseBlock
