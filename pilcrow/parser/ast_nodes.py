"""
Syntax tree node definitions for Pilcrow.

A single node type covers the whole tree: every node has a kind, the token
that introduced it and an ordered tuple of children. Nodes are frozen, so a
finished tree can be handed to later stages without copying.

Author: xwest
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from ..lexer.tokens import Token, TokenType, quote_payload


class NodeKind(Enum):
    """Enumeration of all syntax node kinds. Values are the dump names."""

    # Top-level
    PROGRAM = "Program"

    # Statements
    LET = "Let"
    IF = "If"
    WHILE = "While"
    FN = "Fn"
    RETURN = "Return"
    BLOCK = "Block"
    EXPR_STATEMENT = "ExprStatement"

    # Declarations
    PARAMS = "Params"
    PARAM = "Param"
    TYPE = "Type"

    # Binary operators
    ASSIGN = "Assign"
    BINARY_OR = "BinaryOr"
    BINARY_AND = "BinaryAnd"
    BINARY_EQ = "BinaryEq"
    BINARY_NEQ = "BinaryNeq"
    BINARY_LESS = "BinaryLess"
    BINARY_GREATER = "BinaryGreater"
    BINARY_LEQ = "BinaryLeq"
    BINARY_GEQ = "BinaryGeq"
    BINARY_ADD = "BinaryAdd"
    BINARY_SUB = "BinarySub"
    BINARY_MUL = "BinaryMul"
    BINARY_DIV = "BinaryDiv"

    # Unary operators
    NEGATE = "Negate"
    REFERENCE = "Reference"

    # Postfix
    CALL = "Call"
    INDEX = "Index"
    FIELD = "Field"

    # Primaries
    ARRAY = "Array"
    IDENTIFIER = "ID"
    LITERAL = "Literal"

    @property
    def is_leaf(self) -> bool:
        return self in (NodeKind.IDENTIFIER, NodeKind.LITERAL)


@dataclass(frozen=True)
class SyntaxNode:
    """
    One node of the Pilcrow syntax tree.

    Children are owned by their parent; there are no parent links.
    """
    kind: NodeKind
    token: Token
    children: Tuple["SyntaxNode", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def text(self) -> Optional[str]:
        """Payload of the node's token, for identifiers and literals."""
        return self.token.value

    def walk(self) -> Iterator["SyntaxNode"]:
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def dump(self) -> str:
        """
        Render the subtree as an S-expression.

        Leaves print their payload, e.g. (ID "x"); every other node prints
        its kind followed by its children, e.g. (Let (ID "x") (Literal "5")).
        Iterative; trees from long operator chains exceed the recursion limit.
        """
        pieces: List[str] = []
        stack: List[Union["SyntaxNode", str]] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                pieces.append(item)
            elif item.kind.is_leaf:
                pieces.append(f"({item.kind.value} {quote_payload(item.text)})")
            else:
                pieces.append(f"({item.kind.value}")
                stack.append(")")
                for child in reversed(item.children):
                    stack.append(child)
                    stack.append(" ")
        return "".join(pieces)

    def __str__(self) -> str:
        return self.dump()


def make_program(statements: Tuple[SyntaxNode, ...]) -> SyntaxNode:
    """Build the synthetic root holding the top-level statements."""
    return SyntaxNode(NodeKind.PROGRAM, Token(TokenType.EOL), statements)
