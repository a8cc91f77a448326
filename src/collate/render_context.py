"""Per-render state for the collate renderer.

A ``RenderContext`` is created for each top-level render and handed down
explicitly through recursive block invocations. It carries no user data,
only what is needed for diagnostics and for stopping runaway recursion.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from collate.library.exceptions import RecursionLimitError


@dataclass
class RenderContext:
    """Call-chain state for one render.

    Attributes:
        block_stack: Names of the blocks currently being rendered, outermost first
        max_depth: Maximum length of ``block_stack``
    """

    block_stack: list[str] = field(default_factory=list)

    # Deep enough for any hand-written nesting while catching a -> b -> a
    # long before Python's own recursion limit.
    max_depth: int = 64

    @property
    def depth(self) -> int:
        return len(self.block_stack)

    @property
    def current_block(self) -> str | None:
        return self.block_stack[-1] if self.block_stack else None

    def check_depth(self, block_name: str) -> None:
        """Raise if entering ``block_name`` would exceed ``max_depth``.

        Raises:
            RecursionLimitError: If depth >= max_depth
        """
        if self.depth >= self.max_depth:
            raise RecursionLimitError(
                block_name,
                self.max_depth,
                block=self.current_block,
                block_stack=self.stack_summary(),
            )

    def child_context(self, block_name: str) -> RenderContext:
        """Context for rendering ``block_name`` one level deeper."""
        self.check_depth(block_name)
        return RenderContext(
            block_stack=[*self.block_stack, block_name],
            max_depth=self.max_depth,
        )

    def stack_summary(self, limit: int = 10) -> list[str]:
        """Block stack for error messages, eliding the middle of long chains."""
        if len(self.block_stack) <= limit:
            return list(self.block_stack)
        head = self.block_stack[: limit // 2]
        tail = self.block_stack[-(limit // 2) :]
        skipped = len(self.block_stack) - len(head) - len(tail)
        return [*head, f"... ({skipped} more)", *tail]
