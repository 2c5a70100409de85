"""
Pilcrow Recursive Descent Parser

Builds a syntax tree from the lexer's token list. Every production takes a
cursor position and returns the node it built together with the position
after it, so nothing but the token tuple lives on the parser object.

Binary expressions use precedence climbing over the table below; ties at
the same level associate to the left.

Author: xwest
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..lexer.tokens import Token, TokenType
from .ast_nodes import NodeKind, SyntaxNode, make_program
from .errors import (
    create_unexpected_token_error, create_unexpected_eof_error,
    create_invalid_expression_error, create_invalid_assignment_target_error,
    create_nesting_too_deep_error, describe_token_type
)

logger = logging.getLogger(__name__)

# A production's result: the node and the cursor just past it
Parsed = Tuple[SyntaxNode, int]


class Precedence(IntEnum):
    """
    Binary operator precedence levels, lowest binds loosest.

    Assignment and postfix operators have their own productions.
    """
    OR = 1              # ||
    AND = 2             # &&
    EQUALITY = 3        # ==, !=
    COMPARISON = 4      # <, >, <=, >=
    TERM = 5            # +, -
    FACTOR = 6          # *, /
    UNARY = 7           # right operand floor above FACTOR; no binary operator sits here


BINARY_OPERATORS: Dict[TokenType, Tuple[Precedence, NodeKind]] = {
    TokenType.OR_OPERATION: (Precedence.OR, NodeKind.BINARY_OR),
    TokenType.AND_OPERATION: (Precedence.AND, NodeKind.BINARY_AND),
    TokenType.EQ_COMPARATOR: (Precedence.EQUALITY, NodeKind.BINARY_EQ),
    TokenType.NEQ_COMPARATOR: (Precedence.EQUALITY, NodeKind.BINARY_NEQ),
    TokenType.LE_COMPARATOR: (Precedence.COMPARISON, NodeKind.BINARY_LESS),
    TokenType.GE_COMPARATOR: (Precedence.COMPARISON, NodeKind.BINARY_GREATER),
    TokenType.LEQ_COMPARATOR: (Precedence.COMPARISON, NodeKind.BINARY_LEQ),
    TokenType.GEQ_COMPARATOR: (Precedence.COMPARISON, NodeKind.BINARY_GEQ),
    TokenType.PLUS: (Precedence.TERM, NodeKind.BINARY_ADD),
    TokenType.DASH: (Precedence.TERM, NodeKind.BINARY_SUB),
    TokenType.ASTERISK: (Precedence.FACTOR, NodeKind.BINARY_MUL),
    TokenType.SLASH: (Precedence.FACTOR, NodeKind.BINARY_DIV),
}

UNARY_OPERATORS: Dict[TokenType, NodeKind] = {
    TokenType.DASH: NodeKind.NEGATE,
    TokenType.AMPERSAND: NodeKind.REFERENCE,
}

ASSIGNABLE_KINDS = frozenset({NodeKind.IDENTIFIER, NodeKind.FIELD, NodeKind.INDEX})


def strip_layout(tokens: Sequence[Token]) -> List[Token]:
    """Drop comments, whitespace and end-of-line tokens."""
    return [token for token in tokens if not token.is_layout]


class Parser:
    """
    Pilcrow recursive descent parser.

    Accepts the raw lexer output or an already filtered token list; layout
    tokens are removed before parsing. The first grammar violation raises
    ParseError and no partial tree is returned.
    """

    def __init__(self, tokens: Sequence[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer
        """
        self.tokens: Tuple[Token, ...] = tuple(strip_layout(tokens))

        # Statements recognized by their first token; anything else is an
        # expression statement
        self.statement_parsers: Dict[TokenType, Callable[[int], Parsed]] = {
            TokenType.LET: self._parse_let,
            TokenType.IF: self._parse_if,
            TokenType.WHILE: self._parse_while,
            TokenType.FN: self._parse_fn,
            TokenType.RETURN: self._parse_return,
            TokenType.LEFT_BRACE: self._parse_block,
        }

    def parse(self) -> SyntaxNode:
        """
        Parse the token stream into a syntax tree.

        Returns:
            Program node whose children are the top-level statements

        Raises:
            ParseError: On the first grammar violation
        """
        logger.info("Parsing %d tokens to syntax tree", len(self.tokens))
        statements = []
        pos = 0
        while pos < len(self.tokens):
            try:
                statement, pos = self._parse_statement(pos)
            except RecursionError:
                raise create_nesting_too_deep_error(self.tokens[pos], pos) from None
            statements.append(statement)

        logger.info("Successfully parsed %d top-level statements", len(statements))
        return make_program(tuple(statements))

    # Statements

    def _parse_statement(self, pos: int) -> Parsed:
        token = self._expect_any(pos, "statement", "statement")
        statement_parser = self.statement_parsers.get(token.type)
        if statement_parser is not None:
            return statement_parser(pos)
        return self._parse_expression_statement(pos)

    def _parse_let(self, pos: int) -> Parsed:
        """let ID [: type] = expression ;"""
        construct = "let statement"
        let_token, pos = self._expect(pos, TokenType.LET, construct)
        name, pos = self._parse_identifier(pos, construct)
        children = [name]

        if self._check(pos, TokenType.COLON):
            type_node, pos = self._parse_type(pos + 1, construct)
            children.append(type_node)

        _, pos = self._expect(pos, TokenType.EQUAL, construct)
        value, pos = self._parse_expression(pos)
        _, pos = self._expect(pos, TokenType.SEMICOLON, construct)
        children.append(value)

        return SyntaxNode(NodeKind.LET, let_token, tuple(children)), pos

    def _parse_if(self, pos: int) -> Parsed:
        """if expression block [else (block | if)]"""
        construct = "if statement"
        if_token, pos = self._expect(pos, TokenType.IF, construct)
        condition, pos = self._parse_expression(pos)
        then_branch, pos = self._parse_block(pos, construct)
        children = [condition, then_branch]

        # The else always belongs to this, the nearest, if
        if self._check(pos, TokenType.ELSE):
            if self._check(pos + 1, TokenType.IF):
                else_branch, pos = self._parse_if(pos + 1)
            else:
                else_branch, pos = self._parse_block(pos + 1, "else branch")
            children.append(else_branch)

        return SyntaxNode(NodeKind.IF, if_token, tuple(children)), pos

    def _parse_while(self, pos: int) -> Parsed:
        construct = "while statement"
        while_token, pos = self._expect(pos, TokenType.WHILE, construct)
        condition, pos = self._parse_expression(pos)
        body, pos = self._parse_block(pos, construct)
        return SyntaxNode(NodeKind.WHILE, while_token, (condition, body)), pos

    def _parse_fn(self, pos: int) -> Parsed:
        """fn ID ( params ) [-> type] block"""
        construct = "function declaration"
        fn_token, pos = self._expect(pos, TokenType.FN, construct)
        name, pos = self._parse_identifier(pos, construct)
        params, pos = self._parse_parameter_list(pos)
        children = [name, params]

        if self._check(pos, TokenType.RIGHT_ARROW):
            return_type, pos = self._parse_type(pos + 1, construct)
            children.append(return_type)

        body, pos = self._parse_block(pos, construct)
        children.append(body)
        return SyntaxNode(NodeKind.FN, fn_token, tuple(children)), pos

    def _parse_parameter_list(self, pos: int) -> Parsed:
        construct = "parameter list"
        open_token, pos = self._expect(pos, TokenType.LEFT_PAREN, construct)
        params = []

        while not self._check(pos, TokenType.RIGHT_PAREN):
            name, pos = self._parse_identifier(pos, construct)
            param_children = [name]
            if self._check(pos, TokenType.COLON):
                type_node, pos = self._parse_type(pos + 1, construct)
                param_children.append(type_node)
            params.append(SyntaxNode(NodeKind.PARAM, name.token, tuple(param_children)))

            if not self._check(pos, TokenType.COMMA):
                break
            pos += 1  # Trailing commas are allowed

        _, pos = self._expect(pos, TokenType.RIGHT_PAREN, construct)
        return SyntaxNode(NodeKind.PARAMS, open_token, tuple(params)), pos

    def _parse_return(self, pos: int) -> Parsed:
        """return [expression] ;"""
        construct = "return statement"
        return_token, pos = self._expect(pos, TokenType.RETURN, construct)
        children: Tuple[SyntaxNode, ...] = ()

        if not self._check(pos, TokenType.SEMICOLON):
            value, pos = self._parse_expression(pos)
            children = (value,)

        _, pos = self._expect(pos, TokenType.SEMICOLON, construct)
        return SyntaxNode(NodeKind.RETURN, return_token, children), pos

    def _parse_block(self, pos: int, construct: str = "block") -> Parsed:
        """{ statement* }"""
        open_token, pos = self._expect(pos, TokenType.LEFT_BRACE, construct)
        statements = []

        while not self._check(pos, TokenType.RIGHT_BRACE):
            self._expect_any(pos, describe_token_type(TokenType.RIGHT_BRACE), "block")
            statement, pos = self._parse_statement(pos)
            statements.append(statement)

        _, pos = self._expect(pos, TokenType.RIGHT_BRACE, "block")
        return SyntaxNode(NodeKind.BLOCK, open_token, tuple(statements)), pos

    def _parse_expression_statement(self, pos: int) -> Parsed:
        expression, pos = self._parse_expression(pos)
        semicolon, pos = self._expect(pos, TokenType.SEMICOLON, "expression statement")
        return SyntaxNode(NodeKind.EXPR_STATEMENT, semicolon, (expression,)), pos

    def _parse_type(self, pos: int, construct: str) -> Parsed:
        name, pos = self._parse_identifier(pos, f"type annotation of {construct}")
        return SyntaxNode(NodeKind.TYPE, name.token, (name,)), pos

    # Expressions

    def _parse_expression(self, pos: int) -> Parsed:
        return self._parse_assignment(pos)

    def _parse_assignment(self, pos: int) -> Parsed:
        """Assignment is right associative and binds loosest."""
        target, pos = self._parse_binary(pos, Precedence.OR)
        if not self._check(pos, TokenType.EQUAL):
            return target, pos

        operator = self.tokens[pos]
        if target.kind not in ASSIGNABLE_KINDS:
            raise create_invalid_assignment_target_error(operator, pos)
        value, pos = self._parse_assignment(pos + 1)
        return SyntaxNode(NodeKind.ASSIGN, operator, (target, value)), pos

    def _parse_binary(self, pos: int, min_precedence: Precedence) -> Parsed:
        """Precedence climbing over BINARY_OPERATORS."""
        left, pos = self._parse_unary(pos)

        while True:
            operator = self._peek(pos)
            if operator is None or operator.type not in BINARY_OPERATORS:
                break
            precedence, kind = BINARY_OPERATORS[operator.type]
            if precedence < min_precedence:
                break
            # One level higher on the right keeps equal operators left associative
            right, pos = self._parse_binary(pos + 1, Precedence(precedence + 1))
            left = SyntaxNode(kind, operator, (left, right))

        return left, pos

    def _parse_unary(self, pos: int) -> Parsed:
        operator = self._peek(pos)
        if operator is not None and operator.type in UNARY_OPERATORS:
            operand, pos = self._parse_unary(pos + 1)
            return SyntaxNode(UNARY_OPERATORS[operator.type], operator, (operand,)), pos
        return self._parse_postfix(pos)

    def _parse_postfix(self, pos: int) -> Parsed:
        """Calls, indexing and field access chain left to right."""
        node, pos = self._parse_primary(pos)

        while True:
            token = self._peek(pos)
            if token is None:
                break
            if token.type is TokenType.LEFT_PAREN:
                args, pos = self._parse_arguments(pos + 1, TokenType.RIGHT_PAREN, "function call")
                node = SyntaxNode(NodeKind.CALL, token, (node, *args))
            elif token.type is TokenType.LEFT_BRACKET:
                index, pos = self._parse_expression(pos + 1)
                _, pos = self._expect(pos, TokenType.RIGHT_BRACKET, "index expression")
                node = SyntaxNode(NodeKind.INDEX, token, (node, index))
            elif token.type is TokenType.PERIOD:
                field, pos = self._parse_identifier(pos + 1, "field access")
                node = SyntaxNode(NodeKind.FIELD, token, (node, field))
            else:
                break

        return node, pos

    def _parse_primary(self, pos: int) -> Parsed:
        token = self._expect_any(pos, "expression", "expression")

        if token.type is TokenType.ID:
            return SyntaxNode(NodeKind.IDENTIFIER, token), pos + 1
        if token.type is TokenType.LITERAL:
            return SyntaxNode(NodeKind.LITERAL, token), pos + 1
        if token.type is TokenType.LEFT_PAREN:
            expression, pos = self._parse_expression(pos + 1)
            _, pos = self._expect(pos, TokenType.RIGHT_PAREN, "parenthesized expression")
            return expression, pos
        if token.type is TokenType.LEFT_BRACKET:
            elements, pos = self._parse_arguments(pos + 1, TokenType.RIGHT_BRACKET, "array literal")
            return SyntaxNode(NodeKind.ARRAY, token, tuple(elements)), pos

        raise create_invalid_expression_error(token, pos)

    def _parse_arguments(
        self, pos: int, closing: TokenType, construct: str
    ) -> Tuple[List[SyntaxNode], int]:
        """Comma separated expressions up to and including ``closing``."""
        args = []
        while not self._check(pos, closing):
            arg, pos = self._parse_expression(pos)
            args.append(arg)
            if not self._check(pos, TokenType.COMMA):
                break
            pos += 1

        _, pos = self._expect(pos, closing, construct)
        return args, pos

    def _parse_identifier(self, pos: int, construct: str) -> Parsed:
        token, pos = self._expect(pos, TokenType.ID, construct)
        return SyntaxNode(NodeKind.IDENTIFIER, token), pos

    # Utility methods

    def _peek(self, pos: int) -> Optional[Token]:
        """Token at ``pos``, or None past the end."""
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    def _check(self, pos: int, token_type: TokenType) -> bool:
        token = self._peek(pos)
        return token is not None and token.type is token_type

    def _expect(self, pos: int, token_type: TokenType, construct: str) -> Tuple[Token, int]:
        """Return the token at ``pos`` if it has the given type, else raise."""
        expected = describe_token_type(token_type)
        token = self._expect_any(pos, expected, construct)
        if token.type is not token_type:
            raise create_unexpected_token_error(expected, token, pos, construct)
        return token, pos + 1

    def _expect_any(self, pos: int, expected: str, construct: str) -> Token:
        """Return the token at ``pos``; running out of tokens is an error."""
        token = self._peek(pos)
        if token is None:
            raise create_unexpected_eof_error(expected, pos, construct)
        return token


def parse(tokens: Sequence[Token]) -> SyntaxNode:
    """
    Parse a token list into a syntax tree.

    Raises:
        ParseError: If parsing fails
    """
    return Parser(tokens).parse()


def parse_string(source: str, filename: str = "<string>") -> SyntaxNode:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        Program syntax tree

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize

    return parse(tokenize(source, filename))
