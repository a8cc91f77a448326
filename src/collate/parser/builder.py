"""Block builder: folds the directive stream into validated blocks.

Content outside any block is tolerated and collected into the document's
top-level body. Inside a block the builder enforces:

- no ``n`` before the matching ``e`` (illegally nested block)
- parameter names unique within the block
- at most one export declaration

A block still open at end of input is closed there, as if by ``e``.

References between blocks are not checked here; a block may use another
that is defined later, or in another source unit.
"""

from __future__ import annotations

from collections.abc import Iterable

from collate.config import CollateConfig
from collate.lexer import Lexer
from collate.library.exceptions import (
    CollateError,
    ErrorCode,
    GrammarError,
    ValidationError,
)
from collate.nodes import (
    Block,
    BlockExport,
    CloseBlock,
    Content,
    DeclareExport,
    DeclareParams,
    Directive,
    Document,
    Element,
    Export,
    FileExport,
    OpenBlock,
    UseBlock,
)

_VERBS = {
    DeclareParams: "p",
    DeclareExport: "x",
    UseBlock: "u",
}


class _OpenBlock:
    """Mutable accumulator for the block currently being built."""

    __slots__ = ("elements", "export", "header", "params")

    def __init__(self, header: OpenBlock):
        self.header = header
        self.params: list[str] = []
        self.export: Export | None = None
        self.elements: list[Element] = []


class BlockBuilder:
    """Assemble ``Block`` definitions from a directive stream.

    Example:
        >>> builder = BlockBuilder(filename="greet.txt")
        >>> doc = builder.build(tokenize("^|n greet|\\n^|p name|\\nHi ^|u #name|\\n^|e|"))
        >>> doc.blocks[0].params
        ('name',)
    """

    __slots__ = ("filename",)

    def __init__(self, filename: str | None = None):
        self.filename = filename

    def build(self, directives: Iterable[Directive]) -> Document:
        """Build a document from directives.

        Raises:
            GrammarError: Nesting or stray directives
            ValidationError: Duplicate parameter, multiple exports
        """
        blocks: list[Block] = []
        body: list[Content] = []
        current: _OpenBlock | None = None

        for directive in directives:
            if isinstance(directive, OpenBlock):
                if current is not None:
                    raise GrammarError(
                        f"Illegally nested block '{directive.name}' "
                        f"(block '{current.header.name}' is still open)",
                        code=ErrorCode.NESTED_BLOCK,
                        lineno=directive.lineno,
                        col_offset=directive.col_offset,
                        suggestion="Close the open block with ^|e| first",
                    )
                current = _OpenBlock(directive)
            elif isinstance(directive, CloseBlock):
                if current is None:
                    raise GrammarError(
                        "Close without open",
                        code=ErrorCode.OUTSIDE_BLOCK,
                        lineno=directive.lineno,
                        col_offset=directive.col_offset,
                    )
                blocks.append(self._finish(current))
                current = None
            elif current is None:
                if isinstance(directive, Content):
                    body.append(directive)
                    continue
                verb = _VERBS.get(type(directive), "?")
                raise GrammarError(
                    f"Component before open: '{verb}' outside a block",
                    code=ErrorCode.OUTSIDE_BLOCK,
                    lineno=directive.lineno,
                    col_offset=directive.col_offset,
                    suggestion="Open a block with ^|n name| first",
                )
            elif isinstance(directive, DeclareParams):
                self._add_params(current, directive)
            elif isinstance(directive, DeclareExport):
                self._set_export(current, directive)
            else:
                current.elements.append(directive)

        if current is not None:
            blocks.append(self._finish(current))

        return Document(1, 0, blocks=tuple(blocks), body=tuple(body), filename=self.filename)

    def _add_params(self, block: _OpenBlock, directive: DeclareParams) -> None:
        for name in directive.names:
            if name in block.params:
                raise ValidationError(
                    f"Duplicate parameter '{name}'",
                    code=ErrorCode.DUPLICATE_PARAMETER,
                    lineno=directive.lineno,
                    col_offset=directive.col_offset,
                    block=block.header.name,
                )
            block.params.append(name)

    def _set_export(self, block: _OpenBlock, directive: DeclareExport) -> None:
        if block.export is not None:
            raise ValidationError(
                "Multiple exports defined",
                code=ErrorCode.MULTIPLE_EXPORTS,
                lineno=directive.lineno,
                col_offset=directive.col_offset,
                block=block.header.name,
            )
        block.export = BlockExport() if directive.path is None else FileExport(directive.path)

    def _finish(self, block: _OpenBlock) -> Block:
        elements = block.elements
        # The line holding ^|e| should not leave a trailing blank line.
        if elements and isinstance(elements[-1], Content) and elements[-1].text.endswith("\n"):
            last = elements.pop()
            if len(last.text) > 1:
                elements.append(Content(last.lineno, last.col_offset, text=last.text[:-1]))

        header = block.header
        return Block(
            header.lineno,
            header.col_offset,
            name=header.name,
            params=tuple(block.params),
            export=block.export,
            elements=tuple(elements),
            filename=self.filename,
        )


def parse_document(
    source: str,
    config: CollateConfig | None = None,
    *,
    filename: str | None = None,
) -> Document:
    """Lex and build one source unit.

    Errors carry ``filename`` and ``source`` for diagnostics.
    """
    directives = Lexer(source, config, filename=filename).tokenize()
    try:
        return BlockBuilder(filename).build(directives)
    except CollateError as err:
        err.with_context(filename=filename, source=source)
        raise


def parse(
    source: str,
    config: CollateConfig | None = None,
    *,
    filename: str | None = None,
) -> list[Block]:
    """Parse source text into its blocks, in definition order."""
    return list(parse_document(source, config, filename=filename).blocks)
