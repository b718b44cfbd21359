"""Evaluate an expression tree against a session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .calculus import DataItem
from .logging_config import get_logger
from .syntax import AssignmentNode, AstNode, BinaryNode, ItemNode, UnaryNode, VariableNode
from .types import EvalError, OperationType

if TYPE_CHECKING:
    from .config import CalcConfig
    from .session import Session

logger = get_logger("evaluator")


def calculate_item(
    config: CalcConfig, op: OperationType, left: DataItem, right: DataItem
) -> DataItem:
    """Combine two values: the left operand decides first, then the right one.

    Raises:
        EvalError: If neither operand supports the operation
    """
    result = left.calculate(config, True, right, op)
    if result is None:
        result = right.calculate(config, False, left, op)
    if result is None and op is OperationType.DIV and right.get_underlying_number() == 0:
        raise EvalError("Division by zero")
    if result is None:
        raise EvalError(
            f"Cannot apply {op.value} to {left.type_name()} and {right.type_name()}",
            "UNSUPPORTED_OPERATION",
        )
    return result


def evaluate(node: AstNode, config: CalcConfig, session: Session) -> DataItem:
    """Evaluate ``node``; assignments store their value in ``session``.

    Raises:
        EvalError: On undefined variables or unsupported operations
    """
    if isinstance(node, ItemNode):
        return node.item
    if isinstance(node, VariableNode):
        value = session.get_variable(node.name)
        if value is None:
            raise EvalError(f"Undefined variable {node.name!r}", "UNDEFINED_VARIABLE")
        return value
    if isinstance(node, UnaryNode):
        return evaluate(node.operand, config, session).unary(node.op)
    if isinstance(node, BinaryNode):
        left = evaluate(node.left, config, session)
        right = evaluate(node.right, config, session)
        return calculate_item(config, node.op, left, right)
    if isinstance(node, AssignmentNode):
        value = evaluate(node.value, config, session)
        session.set_variable(node.name, value)
        logger.debug("Bound %r to %r", node.name, value)
        return value
    raise EvalError(f"Unknown node {node!r}")
