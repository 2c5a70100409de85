"""
Test suite for the Pilcrow lexer.

Tests cover:
- Longest match and keyword boundaries
- Whitespace coalescing and layout tokens
- Variable length tokens (identifiers, literals, comments)
- Total lexing and span reconstruction
- Typed errors for unrecognized input

Author: xwest
"""

import random
import re
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from pilcrow.lexer import Lexer, LexerError, tokenize, tokenize_with_spans, dump_tokens
from pilcrow.lexer.tokens import Token, TokenType, CatalogEntry, KEYWORDS, OPERATORS
from pilcrow.parser import strip_layout


EOL = Token(TokenType.EOL)
SPACE = Token(TokenType.SPACE)


def ident(name):
    return Token(TokenType.ID, name)


def literal(text):
    return Token(TokenType.LITERAL, text)


class TestLongestMatch(unittest.TestCase):
    """Test cases for catalog disambiguation."""

    def _lex(self, source):
        """Tokens without the leading EOL marker."""
        tokens = tokenize(source)
        self.assertEqual(tokens[0], EOL)
        return tokens[1:]

    def test_empty_source(self):
        self.assertEqual(tokenize(""), [EOL])

    def test_every_spelling_is_one_token(self):
        """A lone operator or keyword never splits into shorter pieces."""
        for spelling, token_type in {**OPERATORS, **KEYWORDS}.items():
            self.assertEqual(self._lex(spelling), [Token(token_type)], spelling)

    def test_leq_is_not_split(self):
        self.assertEqual(self._lex("<="), [Token(TokenType.LEQ_COMPARATOR)])
        self.assertEqual(
            self._lex("a<=b"),
            [ident("a"), Token(TokenType.LEQ_COMPARATOR), ident("b")]
        )

    def test_arrow_and_dash(self):
        self.assertEqual(
            self._lex("->-"),
            [Token(TokenType.RIGHT_ARROW), Token(TokenType.DASH)]
        )

    def test_keyword_boundary(self):
        """Keyword plus an identifier character is a single identifier."""
        for keyword in KEYWORDS:
            for rest in ("x", "Y", "7", "_", "fy"):
                word = keyword + rest
                self.assertEqual(self._lex(word), [ident(word)], word)

    def test_keyword_followed_by_punctuation(self):
        self.assertEqual(
            self._lex("if(x)"),
            [Token(TokenType.IF), Token(TokenType.LEFT_PAREN), ident("x"),
             Token(TokenType.RIGHT_PAREN)]
        )

    def test_identifier_prefix_of_keyword(self):
        self.assertEqual(self._lex("i"), [ident("i")])
        self.assertEqual(self._lex("_let"), [ident("_let")])

    def test_catalog_order_does_not_matter(self):
        """Priority comes from the weight, not from where an entry sits."""
        less = CatalogEntry(TokenType.LE_COMPARATOR, re.compile("<"), "<")
        less_equal = CatalogEntry(TokenType.LEQ_COMPARATOR, re.compile("<="), "<=")
        for catalog in ((less, less_equal), (less_equal, less)):
            tokens = Lexer("<=", catalog=catalog).tokenize()
            self.assertEqual(tokens, [EOL, Token(TokenType.LEQ_COMPARATOR)])


class TestLayout(unittest.TestCase):
    """Test cases for whitespace, newlines and comments."""

    def test_whitespace_coalescing(self):
        """Any run of spaces and tabs becomes exactly one SPACE token."""
        for run in (" ", "  ", "\t", " \t ", " " * 17, "\t\t\t"):
            self.assertEqual(
                tokenize("a" + run + "b"),
                [EOL, ident("a"), SPACE, ident("b")],
                repr(run)
            )

    def test_no_consecutive_spaces(self):
        tokens = tokenize("let   x \t=\t\t5 ;  ")
        for first, second in zip(tokens, tokens[1:]):
            self.assertFalse(first == SPACE and second == SPACE)

    def test_newlines(self):
        self.assertEqual(
            tokenize("a\nb\r\nc"),
            [EOL, ident("a"), EOL, ident("b"), EOL, ident("c")]
        )

    def test_line_comment(self):
        """Comments run to the end of the line and keep their text."""
        self.assertEqual(
            tokenize("x // note\ny"),
            [EOL, ident("x"), SPACE, Token(TokenType.COMMENT, "// note"), EOL, ident("y")]
        )

    def test_comment_at_end_of_input(self):
        tokens = tokenize("let x = 1; // note")
        self.assertEqual(tokens[-1], Token(TokenType.COMMENT, "// note"))

    def test_comment_excludes_carriage_return(self):
        self.assertEqual(
            tokenize("// a\r\nx"),
            [EOL, Token(TokenType.COMMENT, "// a"), EOL, ident("x")]
        )

    def test_comment_beats_slash(self):
        self.assertEqual(
            tokenize("a / b // c"),
            [EOL, ident("a"), SPACE, Token(TokenType.SLASH), SPACE, ident("b"), SPACE,
             Token(TokenType.COMMENT, "// c")]
        )


class TestVariableLengthTokens(unittest.TestCase):
    """Test cases for identifiers and literals."""

    def test_identifier(self):
        self.assertEqual(tokenize("snake_case_1"), [EOL, ident("snake_case_1")])

    def test_numbers(self):
        self.assertEqual(tokenize("42"), [EOL, literal("42")])
        self.assertEqual(tokenize("3.14"), [EOL, literal("3.14")])
        self.assertEqual(
            tokenize("1."),
            [EOL, literal("1"), Token(TokenType.PERIOD)]
        )
        self.assertEqual(tokenize("5abc"), [EOL, literal("5"), ident("abc")])

    def test_string_literal_keeps_quotes(self):
        self.assertEqual(tokenize('"hello world"'), [EOL, literal('"hello world"')])

    def test_string_escapes(self):
        source = r'"say \"hi\" \\"'
        self.assertEqual(tokenize(source), [EOL, literal(source)])

    def test_string_contains_operators(self):
        self.assertEqual(
            tokenize('x = "a // b";'),
            [EOL, ident("x"), SPACE, Token(TokenType.EQUAL), SPACE,
             literal('"a // b"'), Token(TokenType.SEMICOLON)]
        )

    def test_end_to_end_filtered_stream(self):
        self.assertEqual(
            strip_layout(tokenize("let x = 5;")),
            [Token(TokenType.LET), ident("x"), Token(TokenType.EQUAL),
             literal("5"), Token(TokenType.SEMICOLON)]
        )


class TestTotalLexing(unittest.TestCase):
    """Recognizable pieces in any order lex without loss."""

    PIECES = [
        "{", "}", "[", "]", "(", ")", ";", ":", ".", ",", "->",
        "<=", ">=", "<", ">", "==", "!=", "&&", "||",
        "=", "*", "&", "-", "/", "?", "+", "|",
        "if", "else", "while", "in", "fn", "return", "let",
        "name", "x_1", '"text"', '"esc \\" q"', "42", "3.14",
        " ", "\t", "\n", "\r\n", "// note\n",
    ]

    def test_spans_reconstruct_input(self):
        rng = random.Random(1234)
        for _ in range(200):
            pieces = [rng.choice(self.PIECES) for _ in range(rng.randint(1, 30))]
            source = "".join(pieces)

            pairs = tokenize_with_spans(source)

            self.assertEqual(pairs[0], (EOL, (0, 0)))
            rebuilt = "".join(source[start:end] for _, (start, end) in pairs)
            self.assertEqual(rebuilt, source)

            # Spans are contiguous and non-empty after the marker
            cursor = 0
            for _, (start, end) in pairs[1:]:
                self.assertEqual(start, cursor)
                self.assertGreater(end, start)
                cursor = end
            self.assertEqual(cursor, len(source))

    def test_spans_parallel_tokens(self):
        lexer = Lexer("let x = 5;")
        tokens = lexer.tokenize()
        self.assertEqual(len(tokens), len(lexer.spans))
        self.assertEqual(lexer.spans[1], (0, 3))

    def test_dump_tokens(self):
        self.assertEqual(
            dump_tokens(tokenize("let x")),
            'EOL\nLetToken\nSpace\n(ID "x")'
        )


class TestLexerErrors(unittest.TestCase):
    """Test cases for typed lexer errors."""

    def test_invalid_character(self):
        with self.assertRaises(LexerError) as ctx:
            tokenize("let x = 5 $ 3;")
        error = ctx.exception
        self.assertEqual(error.position, 10)
        self.assertEqual(error.character, "$")
        self.assertEqual(error.diagnostic.code, "L001")

    def test_lone_bang_is_rejected(self):
        with self.assertRaises(LexerError) as ctx:
            tokenize("!x")
        self.assertEqual(ctx.exception.position, 0)
        self.assertEqual(ctx.exception.character, "!")

    def test_error_location(self):
        with self.assertRaises(LexerError) as ctx:
            tokenize("a\n  @", filename="prog.pil")
        location = ctx.exception.location
        self.assertEqual((location.line, location.column, location.offset), (2, 3, 4))
        self.assertIn("prog.pil:2:3", str(ctx.exception))

    def test_unterminated_string(self):
        with self.assertRaises(LexerError) as ctx:
            tokenize('let s = "abc')
        self.assertEqual(ctx.exception.position, 8)
        self.assertEqual(ctx.exception.character, '"')
        self.assertEqual(ctx.exception.diagnostic.code, "L002")

    def test_escaped_quote_does_not_terminate(self):
        with self.assertRaises(LexerError):
            tokenize('"abc\\"')

    def test_trailing_backslash(self):
        with self.assertRaises(LexerError):
            tokenize('"abc\\')

    def test_non_ascii_is_rejected(self):
        with self.assertRaises(LexerError) as ctx:
            tokenize("x ≤ y")
        self.assertEqual(ctx.exception.position, 2)


if __name__ == '__main__':
    unittest.main()
