"""Collate parser: command grammar and block builder.

Pipeline:
    source -> Lexer (collate.lexer) -> directives -> BlockBuilder -> Document

Example:
    >>> from collate.parser import parse
    >>> [b.name for b in parse("^|n a|A^|e|\\n^|n b|B^|e|")]
    ['a', 'b']
"""

from collate.parser.grammar import CommandParser, parse_command, split_arguments
from collate.parser.builder import BlockBuilder, parse, parse_document

__all__ = [
    "BlockBuilder",
    "CommandParser",
    "parse",
    "parse_command",
    "parse_document",
    "split_arguments",
]
