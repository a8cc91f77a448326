"""Recursive block renderer.

``Renderer.render(block, parameters, depth)`` binds the block's parameters,
walks its elements and concatenates the output:

- ``Content`` is copied. At ``depth > 0`` every newline in it is followed by
  ``depth`` indent units, so multi-line text follows the caller's nesting.
- ``UseBlock`` evaluates its target against the current bindings. A literal
  is spliced in directly; a block reference is looked up and rendered with
  its own evaluated arguments. ``ui`` passes ``depth + nested_indent`` (the
  indentation of the last line of the latest multi-line content) to the
  callee; ``u`` passes 0.

Rendering is pure and uncached: a block used from N sites is evaluated N
times.

Example:
    >>> renderer = Renderer({"greet": greet})
    >>> renderer.render(greet, [LiteralValue("World")])
    'Hello, World!'
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from collate.config import DEFAULT_CONFIG, CollateConfig
from collate.library.exceptions import (
    ArityError,
    CollateError,
    ErrorCode,
    ResolutionError,
    UndefinedParameterError,
    UnregisteredBlockError,
)
from collate.nodes import (
    Argument,
    Block,
    BlockRef,
    Content,
    LiteralArg,
    LiteralValue,
    NameArg,
    Parameter,
    ParamRef,
    UseBlock,
)
from collate.render_context import RenderContext


def evaluate(argument: Argument, bindings: Mapping[str, Parameter]) -> Parameter:
    """Resolve a use-site argument against the enclosing block's bindings.

    Raises:
        UndefinedParameterError: ``#name`` with no such binding
    """
    if isinstance(argument, LiteralArg):
        return LiteralValue(argument.value)
    if isinstance(argument, NameArg):
        return BlockRef(argument.value)
    try:
        return bindings[argument.name]
    except KeyError:
        raise UndefinedParameterError(argument.name) from None


def bind_parameters(block: Block, parameters: Sequence[Parameter]) -> dict[str, Parameter]:
    """Zip ``block.params`` with positional parameter values.

    Raises:
        ArityError: If the counts differ
    """
    if len(parameters) != block.arity:
        raise ArityError(block.name, block.arity, len(parameters))
    return dict(zip(block.params, parameters))


def count_indent_units(line: str, unit: str) -> int:
    """Number of whole ``unit`` repetitions at the start of ``line``."""
    count = 0
    width = len(unit)
    while line.startswith(unit, count * width):
        count += 1
    return count


class Renderer:
    """Render blocks against a name -> block mapping.

    The mapping is read at render time, so blocks registered after the
    renderer was created are visible.
    """

    __slots__ = ("_blocks", "config")

    def __init__(self, blocks: Mapping[str, Block], config: CollateConfig | None = None):
        self._blocks = blocks
        self.config = config or DEFAULT_CONFIG

    def render(
        self,
        block: Block,
        parameters: Sequence[Parameter] = (),
        depth: int = 0,
        context: RenderContext | None = None,
    ) -> str:
        """Render ``block`` with positional ``parameters`` at ``depth``.

        Raises:
            ResolutionError: Unregistered block, undefined parameter,
                arity mismatch or recursion limit
        """
        if context is None:
            context = RenderContext(max_depth=self.config.max_render_depth)
        ctx = context.child_context(block.name)
        try:
            bindings = bind_parameters(block, parameters)
        except ArityError as err:
            err.block_stack = context.stack_summary()
            err.with_context(filename=block.filename, block=context.current_block)
            raise

        unit = self.config.indent_unit
        buf: list[str] = []
        _append = buf.append
        nested_indent = 0

        for element in block.elements:
            if isinstance(element, Content):
                text = element.text
                if "\n" in text:
                    nested_indent = count_indent_units(text.rsplit("\n", 1)[1], unit)
                    if depth:
                        text = text.replace("\n", "\n" + unit * depth)
                _append(text)
            else:
                _append(self._render_use(block, element, bindings, depth, nested_indent, ctx))

        return "".join(buf)

    def _render_use(
        self,
        block: Block,
        use: UseBlock,
        bindings: Mapping[str, Parameter],
        depth: int,
        nested_indent: int,
        ctx: RenderContext,
    ) -> str:
        try:
            target = evaluate(use.target, bindings)

            if isinstance(target, LiteralValue):
                if use.arguments:
                    raise ResolutionError(
                        f"Literal '{target.value}' cannot take arguments",
                        code=ErrorCode.LITERAL_ARGUMENTS,
                    )
                return target.value

            callee = self._blocks.get(target.name)
            if callee is None:
                raise UnregisteredBlockError(
                    target.name, available_names=frozenset(self._blocks)
                )

            parameters = [evaluate(arg, bindings) for arg in use.arguments or ()]
            if len(parameters) != callee.arity:
                raise ArityError(callee.name, callee.arity, len(parameters))
        except CollateError as err:
            self._locate(err, block, use, ctx)
            raise

        callee_depth = depth + nested_indent if use.indented else 0
        return self.render(callee, parameters, callee_depth, ctx)

    @staticmethod
    def _locate(err: CollateError, block: Block, use: UseBlock, ctx: RenderContext) -> None:
        """Point an error raised at a use site back at that use site."""
        if err.lineno is None:
            err.lineno = use.lineno
            err.col_offset = use.col_offset
        if not err.block_stack:
            err.block_stack = ctx.stack_summary()
        err.with_context(filename=block.filename, block=block.name)
