"""Library: the registry that owns every block of a run.

A run has two phases:

1. **Ingestion**: each source unit is parsed and its blocks merged. Names
   must be unique across all units; export declarations are recorded.
2. **Export**: block exports are rendered and their output re-imported as
   new source until no new block exports appear (``expand``); then every
   file export is rendered and written (``export_all``).

Example:
    >>> library = Library()
    >>> library.import_string('''^|n greet|
    ... ^|p name|
    ... Hello, ^|u #name|!
    ... ^|e|
    ... ''')
    >>> library.render("greet", ["World"])
    'Hello, World!'
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from collate.config import DEFAULT_CONFIG, CollateConfig
from collate.library.exceptions import (
    CollateError,
    DuplicateBlockError,
    ErrorCode,
    ExpansionLimitError,
    ExportError,
    SourceError,
    UnregisteredBlockError,
)
from collate.library.loaders import FileSystemLoader, Loader
from collate.nodes import Block, BlockExport, FileExport, LiteralValue, Parameter
from collate.parser import parse_document
from collate.renderer import Renderer

logger = logging.getLogger(__name__)

# Filename given to source produced by a block export
EXPORT_SOURCE_FORMAT = "<export:{name}>"


@dataclass(frozen=True, slots=True)
class ExportResult:
    """One written file export."""

    name: str
    path: Path
    size: int


class Library:
    """All blocks of a run, by name.

    Attributes:
        config: Engine configuration shared with the lexer and renderer

    Methods:
        import_string(source): Parse and merge one source unit
        render(name): Render a block by name
        expand(): Resolve block exports to a fixed point
        export_all(output_dir): Expand, then write every file export

    Not thread-safe; one instance per run.
    """

    __slots__ = ("_block_exports", "_blocks", "_file_exports", "_renderer", "config")

    def __init__(self, config: CollateConfig | None = None):
        self.config = config or DEFAULT_CONFIG
        self._blocks: dict[str, Block] = {}
        # Ordered set of names awaiting re-ingestion
        self._block_exports: dict[str, None] = {}
        self._file_exports: dict[str, str] = {}
        self._renderer = Renderer(self._blocks, self.config)

    @classmethod
    def from_loader(cls, loader: Loader, config: CollateConfig | None = None) -> Library:
        """Import every source unit a loader lists, in its order."""
        library = cls(config)
        for name in loader.list_sources():
            source, filename = loader.get_source(name)
            library.import_string(source, filename=filename or name)
        return library

    @classmethod
    def from_directory(cls, path: str | Path, config: CollateConfig | None = None) -> Library:
        """Import every regular file under ``path`` (sorted, recursive)."""
        config = config or DEFAULT_CONFIG
        return cls.from_loader(FileSystemLoader(path, encoding=config.encoding), config)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def import_string(self, source: str, filename: str | None = None) -> list[Block]:
        """Parse one source unit and merge its blocks.

        Returns:
            The newly registered blocks, in definition order.

        Raises:
            LexError, GrammarError, ValidationError: Invalid source
            DuplicateBlockError: A name is already taken
        """
        document = parse_document(source, self.config, filename=filename)
        try:
            self.merge(document.blocks)
        except CollateError as err:
            err.with_context(filename=filename, source=source)
            raise
        logger.debug(f"Imported {len(document.blocks)} block(s) from {filename or '<string>'}")
        return list(document.blocks)

    def import_file(self, path: str | Path) -> list[Block]:
        """Read and import a single file."""
        path = Path(path)
        try:
            source = path.read_text(self.config.encoding)
        except FileNotFoundError:
            raise SourceError(
                "Source file not found", path, code=ErrorCode.SOURCE_NOT_FOUND
            ) from None
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"Couldn't read file: {e}", path) from e
        return self.import_string(source, filename=str(path))

    def merge(self, blocks: Iterable[Block]) -> None:
        """Register blocks, recording their export declarations.

        The whole batch is checked before anything is registered.

        Raises:
            DuplicateBlockError: A name is taken, in the library or the batch
        """
        batch: dict[str, Block] = {}
        for block in blocks:
            existing = self._blocks.get(block.name) or batch.get(block.name)
            if existing is not None:
                raise DuplicateBlockError(
                    block.name,
                    existing.location,
                    filename=block.filename,
                    lineno=block.lineno,
                    col_offset=block.col_offset,
                )
            batch[block.name] = block

        for name, block in batch.items():
            self._blocks[name] = block
            if isinstance(block.export, FileExport):
                self._file_exports[name] = block.export.path
            elif isinstance(block.export, BlockExport):
                self._block_exports[name] = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def get(self, name: str) -> Block | None:
        return self._blocks.get(name)

    def list_blocks(self) -> list[str]:
        """Block names in registration order."""
        return list(self._blocks)

    @property
    def pending_block_exports(self) -> tuple[str, ...]:
        """Block exports not yet expanded."""
        return tuple(self._block_exports)

    @property
    def file_exports(self) -> dict[str, str]:
        """Block name -> relative output path."""
        return dict(self._file_exports)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, name: str, arguments: Sequence[str | Parameter] = ()) -> str:
        """Render a block by name.

        Plain strings in ``arguments`` are passed as literals.

        Raises:
            UnregisteredBlockError: No block called ``name``
            ResolutionError: Any failure while rendering
        """
        block = self._blocks.get(name)
        if block is None:
            raise UnregisteredBlockError(name, available_names=frozenset(self._blocks))
        parameters = [LiteralValue(a) if isinstance(a, str) else a for a in arguments]
        return self._renderer.render(block, parameters)

    def render_string(self, source: str, filename: str | None = None) -> str:
        """Import ``source`` and return its top-level text.

        Blocks defined in ``source`` are registered like any other import.
        Only plain text may sit outside them (a top-level ``u`` is a
        GrammarError), so text with no commands renders unchanged; use
        ``render(name)`` for the blocks themselves.
        """
        document = parse_document(source, self.config, filename=filename)
        self.merge(document.blocks)
        anonymous = Block(1, 0, name=filename or "<string>", elements=tuple(document.body))
        return self._renderer.render(anonymous)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def expand(self) -> int:
        """Render pending block exports and re-import their output.

        Repeats until a pass registers no new block exports.

        Returns:
            Number of passes performed (0 if nothing was pending).

        Raises:
            ExpansionLimitError: ``config.max_expansion_passes`` reached with
                block exports still pending
        """
        limit = self.config.max_expansion_passes
        passes = 0
        while self._block_exports:
            if limit is not None and passes >= limit:
                raise ExpansionLimitError(limit, list(self._block_exports))
            snapshot = list(self._block_exports)
            self._block_exports.clear()
            passes += 1
            for name in snapshot:
                output = self.render(name)
                blocks = self.import_string(output, filename=EXPORT_SOURCE_FORMAT.format(name=name))
                logger.debug(
                    f"Expansion pass {passes}: block '{name}' produced "
                    f"{len(blocks)} block(s): {', '.join(b.name for b in blocks) or '-'}"
                )
        return passes

    def export_all(self, output_dir: str | Path) -> list[ExportResult]:
        """Expand block exports, then render and write every file export.

        All file exports are rendered before the first write, so a render
        failure leaves the output directory untouched.

        Returns:
            One ExportResult per written file, in registration order.

        Raises:
            ResolutionError: A render failed
            ExportError: Invalid export path, or a write failed
        """
        self.expand()

        output = Path(output_dir)
        pending: list[tuple[str, Path, bytes]] = []
        for name, relative in self._file_exports.items():
            target = self._export_path(output, name, relative)
            data = self.render(name).encode(self.config.encoding)
            pending.append((name, target, data))

        try:
            output.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(f"Couldn't create output directory: {e}", output) from e

        results: list[ExportResult] = []
        for name, target, data in pending:
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            except OSError as e:
                raise ExportError(f"Couldn't write export: {e}", target, block=name) from e
            logger.info(f"Exported block '{name}' ({len(data)}B) to '{target}'")
            results.append(ExportResult(name=name, path=target, size=len(data)))
        return results

    def _export_path(self, output: Path, name: str, relative: str) -> Path:
        """Resolve an export path, refusing anything outside ``output``."""
        rel = Path(relative)
        target = output / rel
        root = output.resolve()
        resolved = target.resolve()
        if rel.is_absolute() or resolved == root or not resolved.is_relative_to(root):
            block = self._blocks[name]
            raise ExportError(
                "Export path must be a file path inside the output directory",
                relative,
                code=ErrorCode.INVALID_EXPORT_PATH,
                filename=block.filename,
                block=name,
            )
        return target
