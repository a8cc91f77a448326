"""Tests for command grammar: argument splitting and verb dispatch."""

from __future__ import annotations

import pytest

from collate.library import ErrorCode, GrammarError, LexError
from collate.nodes import (
    CloseBlock,
    DeclareExport,
    DeclareParams,
    LiteralArg,
    NameArg,
    OpenBlock,
    ParamRef,
    UseBlock,
)
from collate.parser.grammar import (
    _COMMAND_PARSERS,
    _MIN_ARGUMENTS,
    USE_COMMANDS,
    CommandParser,
    parse_command,
    split_arguments,
)


class TestSplitArguments:
    def test_bare_words(self) -> None:
        assert split_arguments("u  header\tfooter") == [
            NameArg("u"),
            NameArg("header"),
            NameArg("footer"),
        ]

    def test_literal_keeps_spaces(self) -> None:
        assert split_arguments("u (Hello, World)") == [
            NameArg("u"),
            LiteralArg("Hello, World"),
        ]

    def test_empty_literal(self) -> None:
        assert split_arguments("u ()") == [NameArg("u"), LiteralArg("")]

    def test_literal_starts_new_token(self) -> None:
        assert split_arguments("u a(b)c") == [
            NameArg("u"),
            NameArg("a"),
            LiteralArg("b"),
            NameArg("c"),
        ]

    def test_param_ref(self) -> None:
        assert split_arguments("u #title") == [NameArg("u"), ParamRef("title")]

    def test_unclosed_literal(self) -> None:
        with pytest.raises(LexError) as exc_info:
            split_arguments("u (open", lineno=3, col_offset=4)
        err = exc_info.value
        assert err.code is ErrorCode.UNCLOSED_LITERAL
        assert (err.lineno, err.col_offset) == (3, 4)

    def test_empty_param_ref(self) -> None:
        with pytest.raises(LexError, match="Empty parameter reference"):
            split_arguments("u #")


class TestDispatchTable:
    """The verb tables stay in sync with the parser."""

    def test_every_verb_has_a_parser_method(self) -> None:
        parser = CommandParser()
        for verb, method_name in _COMMAND_PARSERS.items():
            assert callable(getattr(parser, method_name)), verb

    def test_every_verb_has_a_minimum(self) -> None:
        assert set(_COMMAND_PARSERS) == set(_MIN_ARGUMENTS)

    def test_verbs(self) -> None:
        assert set(_COMMAND_PARSERS) == {"n", "p", "x", "u", "ui", "e"}
        assert USE_COMMANDS == {"u", "ui"}


class TestCommands:
    def test_empty_command(self) -> None:
        assert parse_command("") == []

    def test_open(self) -> None:
        assert parse_command("n page", 4, 2) == [OpenBlock(4, 2, name="page")]

    def test_params(self) -> None:
        assert parse_command("p title body") == [
            DeclareParams(1, 0, names=("title", "body"))
        ]

    @pytest.mark.parametrize("text", ["x", "x -"])
    def test_block_export(self, text: str) -> None:
        assert parse_command(text) == [DeclareExport(1, 0, path=None)]

    @pytest.mark.parametrize(
        ("text", "path"),
        [
            ("x out/index.html", "out/index.html"),
            ("x (my page.txt)", "my page.txt"),
        ],
    )
    def test_file_export(self, text: str, path: str) -> None:
        assert parse_command(text) == [DeclareExport(1, 0, path=path)]

    def test_use_without_arguments(self) -> None:
        assert parse_command("u header") == [
            UseBlock(1, 0, indented=False, target=NameArg("header"), arguments=None)
        ]

    def test_use_indented_with_arguments(self) -> None:
        assert parse_command("ui item (a) #b c") == [
            UseBlock(
                1,
                0,
                indented=True,
                target=NameArg("item"),
                arguments=(LiteralArg("a"), ParamRef("b"), NameArg("c")),
            )
        ]

    def test_use_literal_and_param_targets(self) -> None:
        (literal,) = parse_command("u (text)")
        (param,) = parse_command("u #p")
        assert literal.target == LiteralArg("text")
        assert param.target == ParamRef("p")

    def test_close(self) -> None:
        assert parse_command("e", 9, 0) == [CloseBlock(9, 0)]


class TestCommandErrors:
    @pytest.mark.parametrize(
        ("text", "code"),
        [
            ("   ", ErrorCode.INVALID_COMMAND),
            ("q", ErrorCode.UNKNOWN_COMMAND),
            ("(n) a", ErrorCode.UNKNOWN_COMMAND),
            ("#n a", ErrorCode.UNKNOWN_COMMAND),
            ("n", ErrorCode.MISSING_ARGUMENTS),
            ("p", ErrorCode.MISSING_ARGUMENTS),
            ("u", ErrorCode.MISSING_ARGUMENTS),
            ("ui", ErrorCode.MISSING_ARGUMENTS),
            ("n a b", ErrorCode.INVALID_ARGUMENT),
            ("n (a)", ErrorCode.INVALID_ARGUMENT),
            ("n #a", ErrorCode.INVALID_ARGUMENT),
            ("p a (b)", ErrorCode.INVALID_ARGUMENT),
            ("x a b", ErrorCode.INVALID_ARGUMENT),
            ("x #path", ErrorCode.INVALID_ARGUMENT),
            ("x ( )", ErrorCode.INVALID_ARGUMENT),
            ("e now", ErrorCode.INVALID_ARGUMENT),
        ],
    )
    def test_rejected(self, text: str, code: ErrorCode) -> None:
        with pytest.raises(GrammarError) as exc_info:
            parse_command(text, 2, 7)
        err = exc_info.value
        assert err.code is code
        assert (err.lineno, err.col_offset) == (2, 7)

    def test_unknown_command_lists_valid_verbs(self) -> None:
        with pytest.raises(GrammarError) as exc_info:
            parse_command("use header")
        assert "Unknown command 'use'" in str(exc_info.value)
        assert "ui" in exc_info.value.suggestion

    def test_missing_arguments_message(self) -> None:
        with pytest.raises(GrammarError, match=r"Not enough arguments for 'n' \(expected at least 1, got 0\)"):
            parse_command("n")
