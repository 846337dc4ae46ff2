from .engine import RuleEvaluationError, check_expression, evaluate

__all__ = ["RuleEvaluationError", "check_expression", "evaluate"]
