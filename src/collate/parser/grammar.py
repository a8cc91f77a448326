"""Command grammar for collate.

Turns the text between ``^|`` and ``|`` into directives. The text is split on
whitespace with two sigils:

- ``#name``  parameter reference (``ParamRef``)
- ``(text)`` literal, may contain spaces, no nesting (``LiteralArg``)

Anything else is a bare name (``NameArg``). The first token is the verb:

    n <name>              open a block
    p <name>...           declare parameters
    x [path | -]          export (path: to a file; none or '-': back into the library)
    u <target> [args...]  use a block, literal or parameter
    ui <target> [args...] same, propagating the caller's indentation
    e                     close the open block
"""

from __future__ import annotations

from collate.library.exceptions import ErrorCode, GrammarError, LexError
from collate.nodes import (
    Argument,
    CloseBlock,
    DeclareExport,
    DeclareParams,
    Directive,
    LiteralArg,
    NameArg,
    OpenBlock,
    ParamRef,
    UseBlock,
)

NEW_BLOCK_COMMAND = "n"
DEFINE_PARAMS_COMMAND = "p"
ENABLE_EXPORT_COMMAND = "x"
USE_BLOCK_COMMAND = "u"
USE_BLOCK_INDENTED_COMMAND = "ui"
END_BLOCK_COMMAND = "e"

BLOCK_EXPORT_SENTINEL = "-"

PARAM_SIGIL = "#"
LITERAL_OPEN = "("
LITERAL_CLOSE = ")"

# verb -> parser method name
_COMMAND_PARSERS: dict[str, str] = {
    NEW_BLOCK_COMMAND: "_parse_open",
    DEFINE_PARAMS_COMMAND: "_parse_params",
    ENABLE_EXPORT_COMMAND: "_parse_export",
    USE_BLOCK_COMMAND: "_parse_use",
    USE_BLOCK_INDENTED_COMMAND: "_parse_use",
    END_BLOCK_COMMAND: "_parse_close",
}

# verb -> minimum number of arguments after the verb
_MIN_ARGUMENTS: dict[str, int] = {
    NEW_BLOCK_COMMAND: 1,
    DEFINE_PARAMS_COMMAND: 1,
    ENABLE_EXPORT_COMMAND: 0,
    USE_BLOCK_COMMAND: 1,
    USE_BLOCK_INDENTED_COMMAND: 1,
    END_BLOCK_COMMAND: 0,
}

USE_COMMANDS = frozenset({USE_BLOCK_COMMAND, USE_BLOCK_INDENTED_COMMAND})


def split_arguments(text: str, lineno: int = 1, col_offset: int = 0) -> list[Argument]:
    """Split command text into arguments.

    Args:
        text: Raw command text (without the delimiters)
        lineno: Line of the command, for errors
        col_offset: Column of the command, for errors

    Raises:
        LexError: On an unclosed ``(`` literal or an empty ``#`` reference

    Example:
        >>> split_arguments("u greet (Hello, World) #who")
        [NameArg(value='u'), NameArg(value='greet'),
         LiteralArg(value='Hello, World'), ParamRef(name='who')]
    """
    arguments: list[Argument] = []
    word: list[str] = []

    def flush_word() -> None:
        if not word:
            return
        token = "".join(word)
        word.clear()
        if token.startswith(PARAM_SIGIL):
            name = token[len(PARAM_SIGIL):]
            if not name:
                raise LexError(
                    "Empty parameter reference '#'",
                    code=ErrorCode.INVALID_COMMAND,
                    lineno=lineno,
                    col_offset=col_offset,
                )
            arguments.append(ParamRef(name))
        else:
            arguments.append(NameArg(token))

    i = 0
    while i < len(text):
        c = text[i]
        if c.isspace():
            flush_word()
        elif c == LITERAL_OPEN:
            flush_word()
            end = text.find(LITERAL_CLOSE, i + 1)
            if end == -1:
                raise LexError(
                    f"Unclosed literal argument '{text[i:]}'",
                    code=ErrorCode.UNCLOSED_LITERAL,
                    lineno=lineno,
                    col_offset=col_offset,
                    suggestion="Close the literal with ')'; literals cannot nest parentheses",
                )
            arguments.append(LiteralArg(text[i + 1 : end]))
            i = end
        else:
            word.append(c)
        i += 1
    flush_word()
    return arguments


class CommandParser:
    """Parse one command's text into directives.

    Stateless; a single instance can serve any number of commands.

    Example:
        >>> CommandParser().parse("p first second", lineno=2)
        [DeclareParams(lineno=2, col_offset=0, names=('first', 'second'))]
    """

    def parse(self, text: str, lineno: int = 1, col_offset: int = 0) -> list[Directive]:
        """Parse command text.

        Returns an empty list for an empty command (``^||``).

        Raises:
            LexError: Malformed argument sigils
            GrammarError: Unknown verb, wrong argument count or kind
        """
        if not text:
            return []
        arguments = split_arguments(text, lineno, col_offset)
        if not arguments:
            raise self._error("Empty command", lineno, col_offset, code=ErrorCode.INVALID_COMMAND)

        verb, *rest = arguments
        method_name = _COMMAND_PARSERS.get(verb.value) if isinstance(verb, NameArg) else None
        if method_name is None:
            raise self._error(
                f"Unknown command '{verb}'",
                lineno,
                col_offset,
                code=ErrorCode.UNKNOWN_COMMAND,
                suggestion=f"Valid commands: {', '.join(_COMMAND_PARSERS)}",
            )
        if len(rest) < _MIN_ARGUMENTS[verb.value]:
            raise self._error(
                f"Not enough arguments for '{verb.value}' "
                f"(expected at least {_MIN_ARGUMENTS[verb.value]}, got {len(rest)})",
                lineno,
                col_offset,
                code=ErrorCode.MISSING_ARGUMENTS,
            )
        return getattr(self, method_name)(verb.value, rest, lineno, col_offset)

    def _parse_open(
        self, verb: str, args: list[Argument], lineno: int, col_offset: int
    ) -> list[Directive]:
        self._expect_at_most(verb, args, 1, lineno, col_offset)
        name = self._expect_name(verb, args[0], "block name", lineno, col_offset)
        return [OpenBlock(lineno, col_offset, name=name)]

    def _parse_params(
        self, verb: str, args: list[Argument], lineno: int, col_offset: int
    ) -> list[Directive]:
        names = tuple(
            self._expect_name(verb, arg, "parameter name", lineno, col_offset) for arg in args
        )
        return [DeclareParams(lineno, col_offset, names=names)]

    def _parse_export(
        self, verb: str, args: list[Argument], lineno: int, col_offset: int
    ) -> list[Directive]:
        self._expect_at_most(verb, args, 1, lineno, col_offset)
        if not args:
            return [DeclareExport(lineno, col_offset, path=None)]

        (target,) = args
        if isinstance(target, ParamRef):
            raise self._error(
                f"Export path cannot be a parameter reference ('{target}')",
                lineno,
                col_offset,
                code=ErrorCode.INVALID_ARGUMENT,
            )
        if isinstance(target, NameArg) and target.value == BLOCK_EXPORT_SENTINEL:
            return [DeclareExport(lineno, col_offset, path=None)]
        if not target.value.strip():
            raise self._error(
                "Export path cannot be empty",
                lineno,
                col_offset,
                code=ErrorCode.INVALID_ARGUMENT,
            )
        return [DeclareExport(lineno, col_offset, path=target.value)]

    def _parse_use(
        self, verb: str, args: list[Argument], lineno: int, col_offset: int
    ) -> list[Directive]:
        target, *parameters = args
        return [
            UseBlock(
                lineno,
                col_offset,
                indented=verb == USE_BLOCK_INDENTED_COMMAND,
                target=target,
                arguments=tuple(parameters) if parameters else None,
            )
        ]

    def _parse_close(
        self, verb: str, args: list[Argument], lineno: int, col_offset: int
    ) -> list[Directive]:
        self._expect_at_most(verb, args, 0, lineno, col_offset)
        return [CloseBlock(lineno, col_offset)]

    def _expect_name(
        self, verb: str, arg: Argument, what: str, lineno: int, col_offset: int
    ) -> str:
        if not isinstance(arg, NameArg):
            raise self._error(
                f"'{verb}' expects a bare {what}, got '{arg}'",
                lineno,
                col_offset,
                code=ErrorCode.INVALID_ARGUMENT,
            )
        return arg.value

    def _expect_at_most(
        self, verb: str, args: list[Argument], limit: int, lineno: int, col_offset: int
    ) -> None:
        if len(args) > limit:
            extra = " ".join(str(a) for a in args[limit:])
            raise self._error(
                f"Too many arguments for '{verb}': {extra}",
                lineno,
                col_offset,
                code=ErrorCode.INVALID_ARGUMENT,
            )

    def _error(
        self,
        message: str,
        lineno: int,
        col_offset: int,
        *,
        code: ErrorCode,
        suggestion: str | None = None,
    ) -> GrammarError:
        return GrammarError(
            message, code=code, lineno=lineno, col_offset=col_offset, suggestion=suggestion
        )


def parse_command(text: str, lineno: int = 1, col_offset: int = 0) -> list[Directive]:
    """Parse a single command's text. See ``CommandParser.parse``."""
    return _PARSER.parse(text, lineno, col_offset)


_PARSER = CommandParser()
