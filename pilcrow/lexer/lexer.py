"""
Pilcrow Lexer - turns source text into a token list

Every catalog pattern is tried at the cursor and the entry with the longest
canonical spelling wins. That one rule is what lets keywords beat
identifiers and "<=" beat "<". Identifiers, literals and comments are
re-scanned with their full rule once the catalog has picked them.

Layout tokens (spaces, newlines, comments) stay in the output; the parser
drops them itself.

xwest
"""

import logging
import re
from operator import attrgetter
from typing import List, Sequence, Tuple

from .tokens import Token, TokenType, SourceLocation, CatalogEntry, CATALOG, HORIZONTAL_SPACE
from .errors import (
    create_invalid_character_error,
    create_unterminated_string_error
)

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_]+")
NUMBER_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?")


class Lexer:
    """
    Pilcrow lexical analyzer.

    Single pass, left to right. Produces the token list plus a parallel list
    of (start, end) source spans, one per token.
    """

    def __init__(
        self,
        source: str,
        filename: str = "<unknown>",
        catalog: Sequence[CatalogEntry] = CATALOG
    ):
        """
        Initialize the lexer with source code.

        Args:
            source: Complete program text
            filename: Name of source file for error reporting
            catalog: Token catalog to match against
        """
        self.source = source
        self.filename = filename
        self.catalog = tuple(catalog)
        self.pos = 0
        self.tokens: List[Token] = []
        self.spans: List[Tuple[int, int]] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens, starting with a synthetic EOL token

        Raises:
            LexerError: If some part of the input matches no catalog entry
        """
        logger.info("Tokenising %s", self.filename)
        self.pos = 0
        # Leading EOL marks the start of the program
        self.tokens = [Token(TokenType.EOL)]
        self.spans = [(0, 0)]

        while self.pos < len(self.source):
            start = self.pos
            if self.source[self.pos] in HORIZONTAL_SPACE:
                token, end = self._scan_space()
            else:
                token, end = self._materialize(self._longest_match())

            logger.debug("Pushing token: %s", token)
            self.tokens.append(token)
            self.spans.append((start, end))
            self.pos = end

        logger.info("Successfully tokenised %d tokens from %s", len(self.tokens), self.filename)
        return list(self.tokens)

    def _longest_match(self) -> CatalogEntry:
        """Pick the matching catalog entry with the highest priority weight."""
        matches = [entry for entry in self.catalog if entry.matches_at(self.source, self.pos)]
        if not matches:
            raise create_invalid_character_error(self.source[self.pos], self.location(self.pos))
        # max() keeps the first of equal weights, so ties follow catalog order
        return max(matches, key=attrgetter("priority"))

    def _materialize(self, entry: CatalogEntry) -> Tuple[Token, int]:
        """Build the token for a selected entry and find where it ends."""
        token_type = entry.token_type

        if token_type is TokenType.ID:
            end = self._scan_identifier()
        elif token_type is TokenType.LITERAL:
            if self.source[self.pos] == '"':
                end = self._scan_string()
            else:
                end = self._scan_number()
        elif token_type is TokenType.COMMENT:
            end = self._scan_line_comment()
        else:
            # Fixed spelling; only EOL ("\r\n") can be longer than its literal
            end = entry.pattern().match(self.source, self.pos).end()
            return Token(token_type), end

        return Token(token_type, self.source[self.pos:end]), end

    def _scan_space(self) -> Tuple[Token, int]:
        """Coalesce a run of spaces and tabs into one SPACE token."""
        end = self.pos
        while end < len(self.source) and self.source[end] in HORIZONTAL_SPACE:
            end += 1
        return Token(TokenType.SPACE), end

    def _scan_identifier(self) -> int:
        return IDENTIFIER_PATTERN.match(self.source, self.pos).end()

    def _scan_number(self) -> int:
        return NUMBER_PATTERN.match(self.source, self.pos).end()

    def _scan_string(self) -> int:
        """Find the end of a string literal, honouring backslash escapes."""
        end = self.pos + 1  # Skip opening quote

        while end < len(self.source):
            char = self.source[end]
            if char == "\\":
                # Backslash escapes whatever comes next, including a quote
                end += 2
            elif char == '"':
                return end + 1
            else:
                end += 1

        raise create_unterminated_string_error(self.location(self.pos))

    def _scan_line_comment(self) -> int:
        """Line comments run to the end of the line, terminator excluded."""
        end = self.source.find("\n", self.pos)
        if end == -1:
            return len(self.source)
        if self.source[end - 1] == "\r":
            end -= 1
        return end

    def location(self, offset: int) -> SourceLocation:
        """Compute line and column for a character offset."""
        line = self.source.count("\n", 0, offset) + 1
        line_start = self.source.rfind("\n", 0, offset) + 1
        return SourceLocation(self.filename, line, offset - line_start + 1, offset)


def tokenize(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens, layout and comments included

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_with_spans(source: str, filename: str = "<string>") -> List[Tuple[Token, Tuple[int, int]]]:
    """Tokenize and pair every token with its (start, end) source span."""
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()
    return list(zip(tokens, lexer.spans))


def dump_tokens(tokens: Sequence[Token]) -> str:
    """Render a token list one S-expression per line."""
    return "\n".join(token.dump() for token in tokens)
