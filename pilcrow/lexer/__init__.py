"""
Pilcrow Lexer Package

Implements the longest-match tokenizer for the Pilcrow language.

Key Features:
- Token catalog with precomputed priority weights
- Keyword recognition that never splits identifiers ("ifx" stays one token)
- Whitespace runs coalesced into a single layout token
- Comments and layout kept in the output for tooling
- Typed errors instead of aborting on bad input

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, CatalogEntry, CATALOG
from .lexer import Lexer, tokenize, tokenize_with_spans, dump_tokens
from .errors import LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "CatalogEntry",
    "CATALOG",
    "LexerError",
    "tokenize",
    "tokenize_with_spans",
    "dump_tokens",
]
