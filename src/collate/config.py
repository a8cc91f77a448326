"""Configuration for the collate engine.

A single frozen ``CollateConfig`` is threaded through the lexer, renderer and
library. ``DEFAULT_CONFIG`` matches the reference syntax::

    ^|n greet|
    ^|p name|
    Hello, ^|u #name|!
    ^|e|

Example:
    >>> from collate import CollateConfig, Library
    >>> config = CollateConfig(indent_unit="\\t", max_expansion_passes=None)
    >>> library = Library(config=config)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CollateConfig:
    """Engine settings.

    Attributes:
        command_flag: Character that announces a command (``^``).
        command_start: Character that opens a command after the flag (``|``).
        command_end: Character that closes a command (``|``).
        indent_unit: Text of one indentation level for ``ui`` propagation.
        max_render_depth: Maximum nested block invocations per render.
        max_expansion_passes: Cap on block-export expansion passes.
            ``None`` disables the cap.
        encoding: Encoding for reading sources and writing exports.
    """

    command_flag: str = "^"
    command_start: str = "|"
    command_end: str = "|"
    indent_unit: str = "    "
    max_render_depth: int = 64
    max_expansion_passes: int | None = 100
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        for field_name in ("command_flag", "command_start", "command_end"):
            value = getattr(self, field_name)
            if len(value) != 1:
                raise ValueError(f"{field_name} must be a single character, got {value!r}")
            if value.isspace():
                raise ValueError(f"{field_name} cannot be whitespace")
        if self.command_flag in (self.command_start, self.command_end):
            raise ValueError("command_flag must differ from the command delimiters")
        if not self.indent_unit:
            raise ValueError("indent_unit cannot be empty")
        if self.max_render_depth < 1:
            raise ValueError("max_render_depth must be at least 1")
        if self.max_expansion_passes is not None and self.max_expansion_passes < 1:
            raise ValueError("max_expansion_passes must be at least 1 (or None)")


DEFAULT_CONFIG = CollateConfig()
