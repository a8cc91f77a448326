"""Block body elements."""

from __future__ import annotations

from dataclasses import dataclass

from collate.nodes.arguments import Argument
from collate.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Content(Node):
    """Literal text."""

    text: str


@dataclass(frozen=True, slots=True)
class UseBlock(Node):
    """Use site: ``^|u target args...|`` or ``^|ui target args...|``.

    ``arguments`` is None when no arguments were written.
    """

    indented: bool
    target: Argument
    arguments: tuple[Argument, ...] | None = None


Element = Content | UseBlock
