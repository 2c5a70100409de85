"""
Error handling for the Pilcrow lexer.

The lexer never recovers: the first character sequence it cannot classify
raises a LexerError carrying the offending character, the number of
characters already consumed and a source location for the diagnostic.

Author: xwest
"""

from typing import List, Optional

from ..errors import PilcrowError
from .tokens import SourceLocation


class LexerError(PilcrowError):
    """
    Exception raised when the lexer cannot classify the remaining input.

    ``position`` is the length of the already-consumed prefix and
    ``character`` the character found there.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        character: str,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(
            message,
            location=location,
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.location = location
        self.character = character

    @property
    def position(self) -> int:
        return self.location.offset


# Characters people reach for that Pilcrow spells differently
OPERATOR_ALTERNATIVES = {
    "!": ["!="],
    "%": ["/"],
    "'": ['"'],
    "~": ["-"],
    "^": ["*"],
}


def suggest_operator_corrections(char: str) -> List[str]:
    """Suggest valid operators for a character the catalog rejects."""
    return [f"Did you mean '{op}'?" for op in OPERATOR_ALTERNATIVES.get(char, [])]


# Helper functions for creating common errors
def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character no catalog pattern accepts."""
    if char.isprintable():
        help_text = f"The character '{char}' does not start any Pilcrow token."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Token not found for character(s) beginning with {char!r}",
        location=location,
        character=char,
        code="L001",
        help_text=help_text,
        suggestions=suggest_operator_corrections(char)
    )


def create_unterminated_string_error(location: SourceLocation) -> LexerError:
    """Create an error for a string literal with no closing quote."""
    return LexerError(
        message="Unterminated string literal",
        location=location,
        character='"',
        code="L002",
        help_text="String literals must be closed with a matching \" quote.",
        suggestions=['Add a closing " quote', "Check for unescaped quotes in the string"]
    )