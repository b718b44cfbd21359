"""Syntax parser: builds an expression tree from the finalised token stream.

Grammar, loosest to tightest::

    line       := assignment | expression
    assignment := VARIABLE "=" expression          (only at line start)
    expression := term (("+" | "-" | <juxtaposition>) term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | primary
    primary    := VALUE | VARIABLE | "(" expression ")"

Juxtaposed operands are added, so ``100 200`` is ``100 + 200``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from .calculus import DataItem, item_from_token
from .types import OperationType, ParseError, Token, UnaryType, VariableToken

_BINARY_OPERATORS = {
    "+": OperationType.ADD,
    "-": OperationType.SUB,
    "*": OperationType.MUL,
    "/": OperationType.DIV,
}
_UNARY_OPERATORS = {"+": UnaryType.PLUS, "-": UnaryType.MINUS}


@dataclass(frozen=True)
class ItemNode:
    item: DataItem


@dataclass(frozen=True)
class VariableNode:
    name: str


@dataclass(frozen=True)
class BinaryNode:
    left: "AstNode"
    right: "AstNode"
    op: OperationType


@dataclass(frozen=True)
class UnaryNode:
    op: UnaryType
    operand: "AstNode"


@dataclass(frozen=True)
class AssignmentNode:
    name: str
    value: "AstNode"


AstNode = Union[ItemNode, VariableNode, BinaryNode, UnaryNode, AssignmentNode]


def is_balanced(tokens: Sequence[Token]) -> tuple[bool, int | None]:
    """Check parentheses balance. Returns (is_balanced, offending character offset)."""
    stack: list[Token] = []
    for token in tokens:
        if token.is_operator("("):
            stack.append(token)
        elif token.is_operator(")"):
            if not stack:
                return False, token.start
            stack.pop()
    if stack:
        return False, stack[0].start
    return True, None


class SyntaxParser:
    """Recursive-descent parser over one line's tokens."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.index = 0

    # Cursor helpers

    def get_index(self) -> int:
        return self.index

    def set_index(self, index: int) -> None:
        self.index = index

    def peek_token(self) -> Token | None:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def consume_token(self) -> Token | None:
        token = self.peek_token()
        if token is not None:
            self.index += 1
        return token

    def check_operator(self, *chars: str) -> bool:
        token = self.peek_token()
        return token is not None and token.is_operator(*chars)

    def match_operator(self, *chars: str) -> str | None:
        """Consume and return the next operator if it is one of ``chars``."""
        if not self.check_operator(*chars):
            return None
        return self.consume_token().token_type.char

    # Grammar

    def parse(self) -> AstNode:
        """Parse the whole token list.

        Raises:
            ParseError: On empty input, unbalanced parentheses, a missing
                operand, or tokens left over after the expression
        """
        if not self.tokens:
            raise ParseError("Empty expression", "EMPTY_EXPRESSION")
        balanced, position = is_balanced(self.tokens)
        if not balanced:
            raise ParseError(
                f"Unbalanced parentheses at position {position}", "UNBALANCED_PARENS"
            )
        node = self.parse_assignment()
        if node is None:
            node = self.parse_expression()
        leftover = self.peek_token()
        if leftover is not None:
            raise ParseError(f"Unexpected {leftover.raw!r} at position {leftover.start}")
        return node

    def parse_assignment(self) -> AstNode | None:
        start = self.get_index()
        token = self.consume_token()
        if (
            token is not None
            and isinstance(token.token_type, VariableToken)
            and self.match_operator("=")
        ):
            if self.peek_token() is None:
                raise ParseError(
                    f"Missing value for {token.token_type.name!r}", "EMPTY_ASSIGNMENT"
                )
            return AssignmentNode(token.token_type.name, self.parse_expression())
        self.set_index(start)
        return None

    def _starts_operand(self) -> bool:
        token = self.peek_token()
        if token is None:
            return False
        return (
            token.is_value
            or isinstance(token.token_type, VariableToken)
            or token.is_operator("(")
        )

    def parse_expression(self) -> AstNode:
        left = self.parse_term()
        while True:
            char = self.match_operator("+", "-")
            if char is not None:
                left = BinaryNode(left, self.parse_term(), _BINARY_OPERATORS[char])
            elif self._starts_operand():
                left = BinaryNode(left, self.parse_term(), OperationType.ADD)
            else:
                return left

    def parse_term(self) -> AstNode:
        left = self.parse_unary()
        while True:
            char = self.match_operator("*", "/")
            if char is None:
                return left
            left = BinaryNode(left, self.parse_unary(), _BINARY_OPERATORS[char])

    def parse_unary(self) -> AstNode:
        char = self.match_operator("+", "-")
        if char is not None:
            return UnaryNode(_UNARY_OPERATORS[char], self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> AstNode:
        token = self.consume_token()
        if token is None:
            raise ParseError("Unexpected end of expression")
        if token.is_value:
            return ItemNode(item_from_token(token.token_type))
        if isinstance(token.token_type, VariableToken):
            return VariableNode(token.token_type.name)
        if token.is_operator("("):
            node = self.parse_expression()
            if self.match_operator(")") is None:
                raise ParseError("Expected ')'", "UNBALANCED_PARENS")
            return node
        raise ParseError(f"Unexpected {token.raw!r} at position {token.start}")
