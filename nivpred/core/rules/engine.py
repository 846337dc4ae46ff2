"""Restricted expression evaluator for policy ladder conditions."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Collection, Mapping

__all__ = ["RuleEvaluationError", "check_expression", "evaluate"]


@dataclass(frozen=True)
class RuleEvaluationError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover - dataclass default
        return self.message


class _SafeEvaluator(ast.NodeVisitor):
    def __init__(self, variables: Mapping[str, Any]):
        self.variables = variables

    def visit_BoolOp(self, node: ast.BoolOp) -> bool:
        values = [bool(self.visit(value)) for value in node.values]
        if isinstance(node.op, ast.And):
            return all(values)
        if isinstance(node.op, ast.Or):
            return any(values)
        raise RuleEvaluationError(f"Unsupported boolean operator: {node.op!r}")

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Any:
        operand = self.visit(node.operand)
        if isinstance(node.op, ast.Not):
            return not bool(operand)
        if isinstance(node.op, ast.USub):
            return None if operand is None else -operand
        raise RuleEvaluationError(f"Unsupported unary operator: {node.op!r}")

    def visit_BinOp(self, node: ast.BinOp) -> Any:
        if not isinstance(node.op, (ast.Add, ast.Sub)):
            raise RuleEvaluationError(f"Unsupported arithmetic operator: {node.op!r}")
        left = self.visit(node.left)
        right = self.visit(node.right)
        if left is None or right is None:
            return None
        if isinstance(node.op, ast.Add):
            return left + right
        return left - right

    def visit_Compare(self, node: ast.Compare) -> bool:
        left = self.visit(node.left)
        result = True
        for operator, comparator in zip(node.ops, node.comparators):
            right = self.visit(comparator)
            if left is None or right is None:
                comparison = False
            elif isinstance(operator, ast.Lt):
                comparison = left < right
            elif isinstance(operator, ast.Gt):
                comparison = left > right
            elif isinstance(operator, ast.LtE):
                comparison = left <= right
            elif isinstance(operator, ast.GtE):
                comparison = left >= right
            elif isinstance(operator, ast.Eq):
                comparison = left == right
            elif isinstance(operator, ast.NotEq):
                comparison = left != right
            else:
                raise RuleEvaluationError(f"Unsupported comparator: {operator!r}")
            result = result and comparison
            left = right
        return result

    def visit_Name(self, node: ast.Name) -> Any:
        if node.id not in self.variables:
            raise RuleEvaluationError(f"Variable '{node.id}' not allowed in rule")
        return self.variables[node.id]

    def visit_Constant(self, node: ast.Constant) -> Any:
        if isinstance(node.value, (bool, int, float, str)):
            return node.value
        raise RuleEvaluationError(f"Unsupported constant in rule: {node.value!r}")

    def generic_visit(self, node: ast.AST) -> Any:
        raise RuleEvaluationError(f"Unsupported syntax in rule: {ast.dump(node)}")


@lru_cache(maxsize=256)
def _parse(expression: str) -> ast.expr:
    try:
        return ast.parse(expression, mode="eval").body
    except SyntaxError as exc:
        raise RuleEvaluationError(f"Invalid rule expression {expression!r}: {exc.msg}") from exc


def evaluate(expression: str, variables: Mapping[str, Any]) -> bool:
    """Evaluate *expression* against *variables*; comparisons with ``None`` are false."""

    return bool(_SafeEvaluator(variables).visit(_parse(expression)))


def check_expression(expression: str, allowed: Collection[str]) -> None:
    """Raise :class:`RuleEvaluationError` unless *expression* is well formed.

    Every name must be in *allowed*. The expression is dry-run with all
    variables unknown, which exercises the full syntax check.
    """

    tree = _parse(expression)
    for node in ast.walk(tree):
        if isinstance(node, ast.Name) and node.id not in allowed:
            raise RuleEvaluationError(f"Variable '{node.id}' not allowed in rule")
    _SafeEvaluator({name: None for name in allowed}).visit(tree)
