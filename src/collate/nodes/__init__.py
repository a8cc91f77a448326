"""Collate node definitions.

Everything here is a frozen dataclass: the lexer emits directives, the
builder folds them into blocks, and the renderer walks block elements.
"""

from collate.nodes.arguments import (
    Argument,
    BlockRef,
    LiteralArg,
    LiteralValue,
    NameArg,
    Parameter,
    ParamRef,
)
from collate.nodes.base import Node
from collate.nodes.directives import (
    CloseBlock,
    DeclareExport,
    DeclareParams,
    Directive,
    OpenBlock,
)
from collate.nodes.elements import Content, Element, UseBlock
from collate.nodes.structure import Block, BlockExport, Document, Export, FileExport

__all__ = [
    "Argument",
    "Block",
    "BlockExport",
    "BlockRef",
    "CloseBlock",
    "Content",
    "DeclareExport",
    "DeclareParams",
    "Directive",
    "Document",
    "Element",
    "Export",
    "FileExport",
    "LiteralArg",
    "LiteralValue",
    "NameArg",
    "Node",
    "OpenBlock",
    "ParamRef",
    "Parameter",
    "UseBlock",
]
