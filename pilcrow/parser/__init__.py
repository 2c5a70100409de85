"""
Pilcrow Parser Package

Implements a recursive descent parser for the Pilcrow language.
Produces an immutable syntax tree with S-expression dumps for testing.

Key Features:
- Pure productions: cursor position in, (node, next position) out
- Precedence climbing for binary operators
- Dangling else bound to the nearest if
- Fail-fast diagnostics naming the expected construct

Author: xwest
"""

from .ast_nodes import NodeKind, SyntaxNode
from .parser import Parser, Precedence, parse, parse_string, strip_layout
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "Precedence",
    "parse",
    "parse_string",
    "strip_layout",

    # Syntax tree
    "NodeKind",
    "SyntaxNode",

    # Error handling
    "ParseError",
]
