"""
Token definitions for the Pilcrow lexer.

This module defines every lexical category Pilcrow recognizes:
- Punctuation and operators
- Keywords
- Identifiers and literals (strings and numbers)
- Comments and layout (end-of-line, runs of horizontal whitespace)

It also builds the token catalog: one entry per recognizable lexical unit,
pairing a token type with an anchored pattern and the canonical spelling that
decides priority when several patterns match at the same position.

Author: xwest
"""

import re
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern, Tuple


class TokenType(Enum):
    """
    Enumeration of all token types in Pilcrow.

    Only ID, LITERAL and COMMENT carry the matched text as a payload;
    every other type is a bare marker.
    """

    # ========================================================================
    # Punctuation
    # ========================================================================
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    SEMICOLON = auto()              # ;
    COLON = auto()                  # :
    PERIOD = auto()                 # .
    COMMA = auto()                  # ,
    RIGHT_ARROW = auto()            # ->

    # ========================================================================
    # Operators
    # ========================================================================
    LEQ_COMPARATOR = auto()         # <=
    GEQ_COMPARATOR = auto()         # >=
    LE_COMPARATOR = auto()          # <
    GE_COMPARATOR = auto()          # >
    EQ_COMPARATOR = auto()          # ==
    NEQ_COMPARATOR = auto()         # !=
    AND_OPERATION = auto()          # &&
    OR_OPERATION = auto()           # ||
    EQUAL = auto()                  # =
    ASTERISK = auto()               # *
    AMPERSAND = auto()              # &
    DASH = auto()                   # -
    SLASH = auto()                  # /
    QUESTION_MARK = auto()          # ?
    PLUS = auto()                   # +
    PIPE = auto()                   # |

    # ========================================================================
    # Keywords
    # ========================================================================
    IF = auto()                     # if
    ELSE = auto()                   # else
    WHILE = auto()                  # while
    IN = auto()                     # in
    FN = auto()                     # fn
    RETURN = auto()                 # return
    LET = auto()                    # let

    # ========================================================================
    # Payload-carrying tokens
    # ========================================================================
    ID = auto()                     # variable_name
    LITERAL = auto()                # "text", 42, 3.5
    COMMENT = auto()                # // note

    # ========================================================================
    # Layout
    # ========================================================================
    EOL = auto()                    # \n or \r\n
    SPACE = auto()                  # run of spaces and tabs

    @property
    def has_payload(self) -> bool:
        """Check if tokens of this type carry their matched text."""
        return self in PAYLOAD_TYPES

    @property
    def is_layout(self) -> bool:
        """Check if this type separates tokens without a grammatical role."""
        return self in LAYOUT_TYPES

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]


PAYLOAD_TYPES = frozenset({TokenType.ID, TokenType.LITERAL, TokenType.COMMENT})

LAYOUT_TYPES = frozenset({TokenType.COMMENT, TokenType.SPACE, TokenType.EOL})

# Names used in token dumps and diagnostics
DISPLAY_NAMES: Dict[TokenType, str] = {
    TokenType.LEFT_BRACE: "LeftBrace",
    TokenType.RIGHT_BRACE: "RightBrace",
    TokenType.LEFT_BRACKET: "LeftBracket",
    TokenType.RIGHT_BRACKET: "RightBracket",
    TokenType.LEFT_PAREN: "LeftParen",
    TokenType.RIGHT_PAREN: "RightParen",
    TokenType.SEMICOLON: "Semicolon",
    TokenType.COLON: "Colon",
    TokenType.PERIOD: "Period",
    TokenType.COMMA: "Comma",
    TokenType.RIGHT_ARROW: "RightArrow",
    TokenType.LEQ_COMPARATOR: "LeqComparator",
    TokenType.GEQ_COMPARATOR: "GeqComparator",
    TokenType.LE_COMPARATOR: "LeComparator",
    TokenType.GE_COMPARATOR: "GeComparator",
    TokenType.EQ_COMPARATOR: "EqComparator",
    TokenType.NEQ_COMPARATOR: "NeqComparator",
    TokenType.AND_OPERATION: "AndOperation",
    TokenType.OR_OPERATION: "OrOperation",
    TokenType.EQUAL: "Equal",
    TokenType.ASTERISK: "Asterisk",
    TokenType.AMPERSAND: "Ampersand",
    TokenType.DASH: "Dash",
    TokenType.SLASH: "Slash",
    TokenType.QUESTION_MARK: "QuestionMark",
    TokenType.PLUS: "Plus",
    TokenType.PIPE: "Pipe",
    TokenType.IF: "IfToken",
    TokenType.ELSE: "ElseToken",
    TokenType.WHILE: "WhileToken",
    TokenType.IN: "InToken",
    TokenType.FN: "FnToken",
    TokenType.RETURN: "ReturnToken",
    TokenType.LET: "LetToken",
    TokenType.ID: "ID",
    TokenType.LITERAL: "Literal",
    TokenType.COMMENT: "Comment",
    TokenType.EOL: "EOL",
    TokenType.SPACE: "Space",
}


def quote_payload(text: str) -> str:
    """Render payload text in double quotes for dumps."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Tokens do not carry locations; the lexer computes one only when it
    reports an error.
    """
    filename: str
    line: int
    column: int
    offset: int  # Characters consumed before this location

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Pilcrow language.

    Equality is structural: two tokens are equal when they have the same
    type and the same payload.
    """
    type: TokenType
    value: Optional[str] = None     # Exact matched text, payload types only

    def __post_init__(self):
        if self.type.has_payload and self.value is None:
            raise ValueError(f"{self.type.display_name} token requires its matched text")
        if not self.type.has_payload and self.value is not None:
            raise ValueError(f"{self.type.display_name} token does not carry text")

    def __str__(self) -> str:
        return self.dump()

    def dump(self) -> str:
        """Render the token as an S-expression, e.g. (ID "x") or LetToken."""
        if self.type.has_payload:
            return f"({self.type.display_name} {quote_payload(self.value)})"
        return self.type.display_name

    @property
    def is_layout(self) -> bool:
        return self.type.is_layout


# Lookup tables for fixed spellings.
# These feed the catalog below and the parser's diagnostics.

KEYWORDS: Dict[str, TokenType] = {
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "in": TokenType.IN,
    "fn": TokenType.FN,
    "return": TokenType.RETURN,
    "let": TokenType.LET,
}

OPERATORS: Dict[str, TokenType] = {
    # Punctuation
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ".": TokenType.PERIOD,
    ",": TokenType.COMMA,
    "->": TokenType.RIGHT_ARROW,

    # Comparison
    "<=": TokenType.LEQ_COMPARATOR,
    ">=": TokenType.GEQ_COMPARATOR,
    "<": TokenType.LE_COMPARATOR,
    ">": TokenType.GE_COMPARATOR,
    "==": TokenType.EQ_COMPARATOR,
    "!=": TokenType.NEQ_COMPARATOR,

    # Logical
    "&&": TokenType.AND_OPERATION,
    "||": TokenType.OR_OPERATION,

    # Single character operators
    "=": TokenType.EQUAL,
    "*": TokenType.ASTERISK,
    "&": TokenType.AMPERSAND,
    "-": TokenType.DASH,
    "/": TokenType.SLASH,
    "?": TokenType.QUESTION_MARK,
    "+": TokenType.PLUS,
    "|": TokenType.PIPE,
}

SPELLINGS: Dict[TokenType, str] = {
    token_type: spelling
    for spelling, token_type in {**OPERATORS, **KEYWORDS}.items()
}

HORIZONTAL_SPACE = " \t"


@dataclass(frozen=True)
class CatalogEntry:
    """
    One recognizable lexical unit.

    The pattern is always applied with ``Pattern.match(source, pos)`` so it
    can only match at the cursor. The priority weight is the length of the
    canonical spelling and is fixed when the entry is built.
    """
    token_type: TokenType
    regex: Pattern[str]
    spelling: str
    priority: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "priority", len(self.spelling))

    def pattern(self) -> Pattern[str]:
        return self.regex

    def literal(self) -> str:
        return self.spelling

    def matches_at(self, source: str, pos: int) -> bool:
        return self.regex.match(source, pos) is not None


def _fixed(spelling: str, token_type: TokenType) -> CatalogEntry:
    return CatalogEntry(token_type, re.compile(re.escape(spelling)), spelling)


def _keyword(spelling: str, token_type: TokenType) -> CatalogEntry:
    # Must not be followed by an identifier character: "ifx" is one identifier
    return CatalogEntry(
        token_type, re.compile(re.escape(spelling) + r"(?![A-Za-z0-9_])"), spelling
    )


def build_catalog() -> Tuple[CatalogEntry, ...]:
    """Build the full token catalog."""
    entries = [_fixed(spelling, token_type) for spelling, token_type in OPERATORS.items()]
    entries.extend(_keyword(spelling, token_type) for spelling, token_type in KEYWORDS.items())

    # Variable length categories only recognize how the token starts;
    # the lexer re-scans the remainder with the full rule.
    entries.extend([
        CatalogEntry(TokenType.COMMENT, re.compile(r"//"), "//"),
        CatalogEntry(TokenType.ID, re.compile(r"[A-Za-z_]"), ""),
        CatalogEntry(TokenType.LITERAL, re.compile(r'"'), ""),
        CatalogEntry(TokenType.LITERAL, re.compile(r"[0-9]"), ""),
        CatalogEntry(TokenType.EOL, re.compile(r"\r?\n"), " "),
        CatalogEntry(TokenType.SPACE, re.compile(r"[ \t]+"), " "),
    ])
    return tuple(entries)


CATALOG: Tuple[CatalogEntry, ...] = build_catalog()
