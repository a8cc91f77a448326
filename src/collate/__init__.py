"""Collate: a block-based text macro language.

Source files declare named, parameterized blocks that use one another,
substitute arguments and carry indentation into multi-line content. Blocks
can be exported to files, or back into the library as new source for
generative multi-pass expansion.

Quickstart:
    >>> from collate import Library
    >>> library = Library()
    >>> library.import_string('''^|n greet|
    ... ^|p name|
    ... Hello, ^|u #name|!
    ... ^|e|
    ... ^|n main|
    ... ^|u greet (World)|
    ... ^|e|
    ... ''')
    >>> library.render("main")
    'Hello, World!'

Directory-based runs:
    >>> library = Library.from_directory("site/")
    >>> library.export_all("public/")

Architecture:
Source → Lexer → directives → BlockBuilder → Blocks → Library → Renderer

Pipeline stages:
1. **Lexer** (``collate.lexer``): character state machine, hands each
   command to the grammar
2. **Grammar** (``collate.parser.grammar``): ``n p x u ui e`` → directives
3. **Builder** (``collate.parser.builder``): directives → validated blocks
4. **Library** (``collate.library``): name registry, block-export
   expansion, file export
5. **Renderer** (``collate.renderer``): parameter binding, name
   resolution, indentation propagation

Syntax:
    ^|n name|            open block ``name``
    ^|p a b|             declare parameters ``a`` and ``b``
    ^|x out/page.txt|    export to a file (``^|x|`` re-imports the output)
    ^|u target args|     use a block, a ``(literal)`` or a ``#param``
    ^|ui target args|    same, inheriting the current indentation
    ^|e|                 close the block
    ^^                   a literal ``^``

"""

from collate.config import DEFAULT_CONFIG, CollateConfig
from collate.library import (
    ArityError,
    CollateError,
    CollateIOError,
    DictLoader,
    DuplicateBlockError,
    ErrorCode,
    ExpansionLimitError,
    ExportError,
    ExportResult,
    FileSystemLoader,
    GrammarError,
    LexError,
    Library,
    RecursionLimitError,
    ResolutionError,
    SourceError,
    UndefinedParameterError,
    UnregisteredBlockError,
    ValidationError,
)
from collate.lexer import Lexer, tokenize
from collate.nodes import Block, BlockExport, BlockRef, FileExport, LiteralValue
from collate.parser import parse, parse_document
from collate.renderer import Renderer, evaluate

__version__ = "0.1.0"

__all__ = [
    "ArityError",
    "Block",
    "BlockExport",
    "BlockRef",
    "CollateConfig",
    "CollateError",
    "CollateIOError",
    "DEFAULT_CONFIG",
    "DictLoader",
    "DuplicateBlockError",
    "ErrorCode",
    "ExpansionLimitError",
    "ExportError",
    "ExportResult",
    "FileExport",
    "FileSystemLoader",
    "GrammarError",
    "LexError",
    "Lexer",
    "Library",
    "LiteralValue",
    "RecursionLimitError",
    "Renderer",
    "ResolutionError",
    "SourceError",
    "UndefinedParameterError",
    "UnregisteredBlockError",
    "ValidationError",
    "__version__",
    "evaluate",
    "parse",
    "parse_document",
    "tokenize",
]
