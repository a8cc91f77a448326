"""Character-level lexer for collate source.

Splits raw text into alternating literal content and commands. Commands are
handed to the grammar as soon as they close, so the output is a flat stream
of directives ready for the block builder.

States:
    CONTENT         default; the flag character moves to COMMAND_FLAG
    COMMAND_FLAG    flag seen; start delimiter opens a command, a second flag
                    escapes it, anything else is content
    COMMAND         accumulate until the end delimiter
    SKIP_NEWLINE    after a command: swallow one newline
    CANCELLED_FLAG  after ``^^``: further flags are literal

Example:
    >>> tokenize("^|n hi|\\nHello^|e|")
    [OpenBlock(lineno=1, col_offset=0, name='hi'),
     Content(lineno=2, col_offset=0, text='Hello'),
     CloseBlock(lineno=2, col_offset=5)]
"""

from __future__ import annotations

from enum import Enum, auto

from collate.config import DEFAULT_CONFIG, CollateConfig
from collate.library.exceptions import CollateError, ErrorCode, LexError
from collate.nodes import Content, Directive, UseBlock
from collate.parser.grammar import CommandParser


class LexerState(Enum):
    CONTENT = auto()
    COMMAND_FLAG = auto()
    COMMAND = auto()
    SKIP_NEWLINE = auto()
    CANCELLED_FLAG = auto()


class Lexer:
    """Single-use scanner over one source unit.

    All scanning state (position, buffers, output) lives on the instance.

    Attributes:
        source: Text being scanned
        config: Control characters come from here
        filename: Attached to errors
    """

    __slots__ = (
        "_buffer",
        "_buffer_pos",
        "_col",
        "_command",
        "_command_pos",
        "_directives",
        "_flag_pos",
        "_grammar",
        "_line",
        "_state",
        "config",
        "filename",
        "source",
    )

    def __init__(
        self,
        source: str,
        config: CollateConfig | None = None,
        *,
        filename: str | None = None,
    ):
        self.source = source
        self.config = config or DEFAULT_CONFIG
        self.filename = filename
        self._grammar = CommandParser()
        self._line = 1
        self._col = 0
        self._state = LexerState.CONTENT
        self._buffer: list[str] = []
        self._buffer_pos = (1, 0)
        self._command: list[str] = []
        self._command_pos = (1, 0)
        self._flag_pos = (1, 0)
        self._directives: list[Directive] = []

    def tokenize(self) -> list[Directive]:
        """Scan the whole source.

        Raises:
            LexError: Malformed or unterminated command
            GrammarError: Command text the grammar rejects
        """
        try:
            for c in self.source:
                self._step(c)
                if c == "\n":
                    self._line += 1
                    self._col = 0
                else:
                    self._col += 1
            self._finish()
        except CollateError as err:
            err.with_context(filename=self.filename, source=self.source)
            raise
        return self._directives

    def _step(self, c: str) -> None:
        flag = self.config.command_flag
        state = self._state

        if state is LexerState.CONTENT:
            self._scan_content(c)
        elif state is LexerState.COMMAND_FLAG:
            if c == self.config.command_start:
                self._close_content()
                self._command_pos = self._flag_pos
                self._state = LexerState.COMMAND
            elif c == flag:
                self._push(c, self._flag_pos)
                self._state = LexerState.CANCELLED_FLAG
            else:
                self._push(flag, self._flag_pos)
                self._push(c)
                self._state = LexerState.CONTENT
        elif state is LexerState.COMMAND:
            if c == self.config.command_end:
                self._close_command()
            else:
                self._command.append(c)
        elif state is LexerState.SKIP_NEWLINE:
            self._state = LexerState.CONTENT
            if c != "\n":
                self._scan_content(c)
        elif state is LexerState.CANCELLED_FLAG:
            self._push(c)
            if c != flag:
                self._state = LexerState.CONTENT

    def _scan_content(self, c: str) -> None:
        if c == self.config.command_flag:
            self._flag_pos = (self._line, self._col)
            self._state = LexerState.COMMAND_FLAG
        else:
            self._push(c)

    def _push(self, c: str, pos: tuple[int, int] | None = None) -> None:
        if not self._buffer:
            self._buffer_pos = pos or (self._line, self._col)
        self._buffer.append(c)

    def _close_content(self) -> None:
        if self._buffer:
            lineno, col_offset = self._buffer_pos
            self._directives.append(Content(lineno, col_offset, text="".join(self._buffer)))
            self._buffer.clear()

    def _close_command(self) -> None:
        text = "".join(self._command)
        self._command.clear()
        lineno, col_offset = self._command_pos
        directives = self._grammar.parse(text, lineno, col_offset)
        self._directives.extend(directives)
        # A newline after a use is real output; after anything else it is layout.
        if directives and isinstance(directives[-1], UseBlock):
            self._state = LexerState.CONTENT
        else:
            self._state = LexerState.SKIP_NEWLINE

    def _finish(self) -> None:
        if self._state is LexerState.COMMAND:
            lineno, col_offset = self._command_pos
            raise LexError(
                "Unterminated command",
                code=ErrorCode.UNTERMINATED_COMMAND,
                lineno=lineno,
                col_offset=col_offset,
                suggestion=f"Close the command with '{self.config.command_end}'",
            )
        if self._state is LexerState.COMMAND_FLAG:
            self._push(self.config.command_flag, self._flag_pos)
        self._close_content()


def tokenize(
    source: str,
    config: CollateConfig | None = None,
    *,
    filename: str | None = None,
) -> list[Directive]:
    """Convenience wrapper: ``Lexer(source, config, filename=...).tokenize()``."""
    return Lexer(source, config, filename=filename).tokenize()
