"""
Pilcrow Front End Package

Lexer and parser for Pilcrow, a small experimental programming language.
Turns source text into a token list and then into a syntax tree for later
stages.

Architecture:
    pilcrow/
    ├── lexer/           # Token catalog and longest-match tokenizer
    ├── parser/          # Recursive descent parser and syntax tree
    ├── errors.py        # Shared error taxonomy
    ├── driver.py        # File reading and pipeline helpers
    └── cli.py           # Command line entry point

Author: xwest
License: MIT
"""

__version__ = "0.1.0-alpha"
__author__ = "xwest"
__email__ = "dev@pilcrow-lang.org"
__license__ = "MIT"

# Core exports
from .errors import PilcrowError, UnsupportedFeature
from .lexer import Lexer, LexerError, Token, TokenType, tokenize
from .parser import Parser, ParseError, SyntaxNode, NodeKind, parse

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "SyntaxNode",
    "NodeKind",

    # Functions
    "tokenize",
    "parse",

    # Errors
    "PilcrowError",
    "LexerError",
    "ParseError",
    "UnsupportedFeature",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
