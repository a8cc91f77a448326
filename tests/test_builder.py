"""Tests for folding directives into blocks."""

from __future__ import annotations

import pytest

from collate import parse, parse_document
from collate.library import ErrorCode, GrammarError, ValidationError
from collate.nodes import (
    BlockExport,
    CloseBlock,
    Content,
    FileExport,
    LiteralArg,
    NameArg,
    OpenBlock,
    UseBlock,
)
from collate.parser import BlockBuilder


class TestBlocks:
    def test_single_block(self) -> None:
        (block,) = parse("^|n greet|\n^|p name|\nHello, ^|u #name|!\n^|e|\n")
        assert block.name == "greet"
        assert block.params == ("name",)
        assert block.arity == 1
        assert block.export is None
        assert [type(e) for e in block.elements] == [Content, UseBlock, Content]
        assert block.elements[0].text == "Hello, "
        assert block.elements[-1].text == "!"

    def test_definition_order(self) -> None:
        blocks = parse("^|n b|^|e|\n^|n a|^|e|\n^|n c|^|e|")
        assert [b.name for b in blocks] == ["b", "a", "c"]

    def test_params_accumulate(self) -> None:
        (block,) = parse("^|n a|\n^|p x|\n^|p y z|\n^|e|")
        assert block.params == ("x", "y", "z")

    def test_file_export(self) -> None:
        (block,) = parse("^|n page|\n^|x out/page.txt|\nbody\n^|e|")
        assert block.export == FileExport("out/page.txt")

    def test_block_export(self) -> None:
        (block,) = parse("^|n gen|\n^|x|\nbody\n^|e|")
        assert block.export == BlockExport()

    def test_export_anywhere_in_block(self) -> None:
        (block,) = parse("^|n a|\ntext\n^|x a.txt|\n^|e|")
        assert block.export == FileExport("a.txt")
        assert block.elements == (Content(2, 0, text="text"),)

    def test_empty_block(self) -> None:
        (block,) = parse("^|n empty|\n^|e|")
        assert block.elements == ()

    def test_location(self) -> None:
        blocks = parse("\n\n^|n a|^|e|", filename="lib.txt")
        assert blocks[0].location == "lib.txt:3"
        assert blocks[0].filename == "lib.txt"


class TestTrailingNewline:
    def test_one_newline_trimmed(self) -> None:
        (block,) = parse("^|n a|\nline\n\n^|e|")
        assert block.elements == (Content(2, 0, text="line\n"),)

    def test_content_reduced_to_nothing_is_dropped(self) -> None:
        (block,) = parse("^|n a|\n^|u b|\n^|e|")
        assert block.elements == (
            UseBlock(2, 0, indented=False, target=NameArg("b"), arguments=None),
        )

    def test_block_open_at_end_of_input_is_closed(self) -> None:
        (block,) = parse("^|n a|\nhello\n")
        assert block.name == "a"
        assert block.elements == (Content(2, 0, text="hello"),)

    def test_open_block_after_closed_one(self) -> None:
        blocks = parse("^|n a|\nA\n^|e|\n^|n b|\n^|p x|\nB ^|u #x|")
        assert [b.name for b in blocks] == ["a", "b"]
        assert blocks[1].params == ("x",)

    def test_no_trim_before_use(self) -> None:
        (block,) = parse("^|n a|\nline\n^|u (x)|^|e|")
        assert block.elements == (
            Content(2, 0, text="line\n"),
            UseBlock(3, 0, indented=False, target=LiteralArg("x"), arguments=None),
        )


class TestTopLevel:
    def test_content_outside_blocks_is_body(self) -> None:
        document = parse_document("intro\n^|n a|\nx\n^|e|\noutro")
        assert [b.name for b in document.blocks] == ["a"]
        assert [e.text for e in document.body] == ["intro\n", "outro"]

    def test_builder_accepts_directive_stream(self) -> None:
        document = BlockBuilder("f.txt").build(
            [OpenBlock(1, 0, name="a"), Content(1, 6, text="x"), CloseBlock(1, 7)]
        )
        assert document.filename == "f.txt"
        assert document.blocks[0].elements == (Content(1, 6, text="x"),)


class TestStructureErrors:
    def test_nested_block(self) -> None:
        with pytest.raises(GrammarError) as exc_info:
            parse("^|n outer|\n^|n inner|\n^|e|\n^|e|")
        err = exc_info.value
        assert err.code is ErrorCode.NESTED_BLOCK
        assert "Illegally nested block 'inner'" in err.message
        assert err.lineno == 2

    def test_close_without_open(self) -> None:
        with pytest.raises(GrammarError, match="Close without open") as exc_info:
            parse("text\n^|e|")
        assert exc_info.value.code is ErrorCode.OUTSIDE_BLOCK

    @pytest.mark.parametrize(
        ("source", "verb"),
        [("^|p a|", "p"), ("^|x a.txt|", "x"), ("^|u a|", "u"), ("^|ui a|", "u")],
    )
    def test_component_before_open(self, source: str, verb: str) -> None:
        with pytest.raises(GrammarError) as exc_info:
            parse(source)
        assert exc_info.value.code is ErrorCode.OUTSIDE_BLOCK
        assert f"'{verb}' outside a block" in exc_info.value.message

class TestValidationErrors:
    def test_duplicate_parameter(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse("^|n a|\n^|p x y|\n^|p x|\n^|e|")
        err = exc_info.value
        assert err.code is ErrorCode.DUPLICATE_PARAMETER
        assert err.block == "a"
        assert err.lineno == 3

    def test_duplicate_parameter_in_one_command(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate parameter 'x'"):
            parse("^|n a|^|p x x|^|e|")

    def test_multiple_exports(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse("^|n a|\n^|x a.txt|\n^|x|\n^|e|")
        assert exc_info.value.code is ErrorCode.MULTIPLE_EXPORTS
        assert exc_info.value.message == "Multiple exports defined"
