"""
Error handling for the Pilcrow parser.

The parser stops at the first grammar violation. A ParseError records what
was expected, the token actually found (None at end of input), its index in
the filtered token stream and the construct being built at the time.

Author: xwest
"""

from typing import List, Optional

from ..errors import PilcrowError
from ..lexer.tokens import Token, TokenType, SPELLINGS


class ParseError(PilcrowError):
    """
    Exception raised when the token stream violates the grammar.
    """

    def __init__(
        self,
        message: str,
        expected: str,
        found: Optional[Token],
        position: int,
        construct: Optional[str] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(
            message,
            location=f"token {position}",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.expected = expected
        self.found = found
        self.position = position
        self.construct = construct


def describe_token_type(token_type: TokenType) -> str:
    """Human readable name for a token type, e.g. "'='" or "identifier"."""
    if token_type in SPELLINGS:
        return f"'{SPELLINGS[token_type]}'"
    if token_type is TokenType.ID:
        return "identifier"
    if token_type is TokenType.LITERAL:
        return "literal"
    return token_type.display_name


def describe_token(token: Optional[Token]) -> str:
    if token is None:
        return "end of input"
    if token.type.has_payload:
        return f"{token.type.display_name} {token.value!r}"
    return describe_token_type(token.type)


def suggest_missing_token(expected: str) -> List[str]:
    """Suggest what token might be missing."""
    token_suggestions = {
        "';'": ["Add a semicolon ';' to end the statement"],
        "')'": ["Add a closing parenthesis ')'"],
        "']'": ["Add a closing bracket ']'"],
        "'}'": ["Add a closing brace '}'"],
        "'{'": ["Add an opening brace '{' to start a block"],
        "'='": ["Add an assignment operator '='"],
    }
    return token_suggestions.get(expected, [])


# Helper functions for creating common parser errors

def _in_construct(construct: Optional[str]) -> str:
    return f" in {construct}" if construct else ""


def create_unexpected_token_error(
    expected: str, found: Token, position: int, construct: Optional[str] = None
) -> ParseError:
    """Create an error for an unexpected token."""
    found_str = describe_token(found)
    return ParseError(
        message=f"Expected {expected}{_in_construct(construct)}, found {found_str}",
        expected=expected,
        found=found,
        position=position,
        construct=construct,
        code="P001",
        help_text=f"The parser expected to see {expected} at this position, but found {found_str} instead.",
        suggestions=suggest_missing_token(expected)
    )


def create_unexpected_eof_error(
    expected: str, position: int, construct: Optional[str] = None
) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Expected {expected}{_in_construct(construct)}, found end of input",
        expected=expected,
        found=None,
        position=position,
        construct=construct,
        code="P010",
        help_text=f"The parser reached the end of the file while expecting {expected}.",
        suggestions=suggest_missing_token(expected) or ["Check for incomplete statements"]
    )


def create_invalid_expression_error(found: Token, position: int) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    return ParseError(
        message=f"Expected expression, found {describe_token(found)}",
        expected="expression",
        found=found,
        position=position,
        construct="expression",
        code="P005",
        help_text="Expressions start with an identifier, a literal, '(', '[', '-' or '&'.",
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_invalid_assignment_target_error(found: Token, position: int) -> ParseError:
    """Create an error for assigning to something that is not a place."""
    return ParseError(
        message="Invalid assignment target",
        expected="identifier, field or index before '='",
        found=found,
        position=position,
        construct="assignment",
        code="P013",
        help_text="Only variables, fields and indexed elements can be assigned to.",
        suggestions=["Use '==' for comparison"]
    )


def create_nesting_too_deep_error(found: Token, position: int) -> ParseError:
    """Create an error for a statement nested beyond the interpreter stack."""
    return ParseError(
        message=f"Nesting too deep in statement starting with {describe_token(found)}",
        expected="shallower nesting",
        found=found,
        position=position,
        construct="statement",
        code="P014",
        help_text="Parentheses, brackets, blocks or unary operators are nested too deeply to parse.",
        suggestions=["Split the expression using intermediate let bindings"]
    )
