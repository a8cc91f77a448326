"""Use-site arguments and their resolved parameter values.

Two separate families keep "written in source" apart from "known at render
time":

- ``Argument`` (syntax): ``LiteralArg`` ``(text)``, ``NameArg`` ``name``,
  ``ParamRef`` ``#name``.
- ``Parameter`` (value): ``LiteralValue`` or ``BlockRef``.

``collate.renderer.evaluate`` turns the former into the latter.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LiteralArg:
    """Literal text argument: ``(some text)``"""

    value: str

    def __str__(self) -> str:
        return f"({self.value})"


@dataclass(frozen=True, slots=True)
class NameArg:
    """Bare identifier argument, naming a block: ``header``"""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ParamRef:
    """Reference to a parameter of the enclosing block: ``#title``"""

    name: str

    def __str__(self) -> str:
        return f"#{self.name}"


@dataclass(frozen=True, slots=True)
class LiteralValue:
    """Resolved literal text, spliced into output as-is."""

    value: str


@dataclass(frozen=True, slots=True)
class BlockRef:
    """Resolved block name, rendered from the library when used."""

    name: str


Argument = LiteralArg | NameArg | ParamRef
Parameter = LiteralValue | BlockRef
