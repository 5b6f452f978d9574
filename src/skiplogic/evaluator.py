"""
Condition evaluation.

evaluate() is the single place where condition kinds are matched. It is a
pure function of the condition tree, the answers and the custom handler.

Missing answers are not errors. Their result depends on the operator:

    equals                 False (a literal never stands for "no answer")
    not equals             True
    >, >=, <, <=           False
    contains               False
    not contains           True

The same table applies when sub_key names a field that the answer does not
have, or when the answer is not composite at all.

Present answers:

    equals / not equals    compare the scalar text; a list or composite
                           answer never equals a literal
    >, >=, <, <=           both sides parsed as plain decimals; NumericFormatError
                           when either side does not parse (not caught here)
    contains / not contains
                           list membership of the literal. A scalar or
                           composite answer is not a list, and BOTH operators
                           are False for it: a type mismatch must not make a
                           question appear through a vacuous "not contains".
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from .answers import Answer
from .conditions import (
    ComparisonOperator,
    Condition,
    CustomCondition,
    DecisionCondition,
    DecisionOperator,
    SimpleCondition,
)
from .errors import MissingHandlerError, NumericFormatError
from .interfaces import AnswerProvider, CustomConditionHandler

logger = logging.getLogger(__name__)

# Plain decimal notation only: no digit separators, no inf or nan
_DECIMAL = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


_ABSENT_RESULTS = {
    ComparisonOperator.EQUALS: False,
    ComparisonOperator.NOT_EQUALS: True,
    ComparisonOperator.GREATER_THAN: False,
    ComparisonOperator.GREATER_EQUAL: False,
    ComparisonOperator.LESS_THAN: False,
    ComparisonOperator.LESS_EQUAL: False,
    ComparisonOperator.CONTAINS: False,
    ComparisonOperator.NOT_CONTAINS: True,
}


def evaluate(
    condition: Optional[Condition],
    answers: AnswerProvider,
    custom_handler: Optional[CustomConditionHandler] = None,
) -> bool:
    """
    Evaluate a condition tree against the current answers.

    Args:
        condition: Tree to evaluate. None means "always visible".
        answers: Source of answers (usually the SurveyState)
        custom_handler: Required only if the tree holds a CustomCondition

    Returns:
        True if the condition holds

    Raises:
        NumericFormatError: ordered comparison on a non-numeric value
        MissingHandlerError: CustomCondition without a handler
        TypeError: object that is not a known condition kind
    """
    if condition is None:
        result = True
    elif isinstance(condition, SimpleCondition):
        result = _evaluate_simple(condition, answers)
    elif isinstance(condition, DecisionCondition):
        result = _evaluate_decision(condition, answers, custom_handler)
    elif isinstance(condition, CustomCondition):
        result = _evaluate_custom(condition, answers, custom_handler)
    else:
        raise TypeError(f"Unsupported Condition type: {type(condition)}")
    logger.debug("Evaluated condition %r as %s", condition, result)
    return result


def _resolve_answer(condition: SimpleCondition, answers: AnswerProvider) -> Optional[Answer]:
    answer = answers.answer_for(condition.question_id)
    if answer is None or condition.sub_key is None:
        return answer
    if not answer.is_composite():
        return None
    return answer.as_map().get(condition.sub_key)


def _to_number(text: Optional[str], what: str, condition: SimpleCondition) -> float:
    if text is None:
        raise NumericFormatError(
            f"{what} of condition on '{condition.question_id}' is not a scalar value"
        )
    if _DECIMAL.fullmatch(text.strip()) is None:
        raise NumericFormatError(
            f"{what} '{text}' of condition on '{condition.question_id}' is not a number"
        )
    return float(text)


def _evaluate_simple(condition: SimpleCondition, answers: AnswerProvider) -> bool:
    answer = _resolve_answer(condition, answers)
    operator = condition.operator

    if answer is None:
        return _ABSENT_RESULTS[operator]

    text = answer.as_text() if answer.is_scalar() else None

    if operator is ComparisonOperator.EQUALS:
        return text is not None and condition.value == text
    if operator is ComparisonOperator.NOT_EQUALS:
        return text is None or condition.value != text

    if operator.is_ordered:
        expected = _to_number(condition.value, "Literal", condition)
        actual = _to_number(text, "Answer", condition)
        if operator is ComparisonOperator.GREATER_THAN:
            return actual > expected
        if operator is ComparisonOperator.GREATER_EQUAL:
            return actual >= expected
        if operator is ComparisonOperator.LESS_THAN:
            return actual < expected
        return actual <= expected

    if not answer.is_list():
        return False
    if operator is ComparisonOperator.CONTAINS:
        return condition.value in answer.as_list()
    if operator is ComparisonOperator.NOT_CONTAINS:
        return condition.value not in answer.as_list()

    raise TypeError(f"Unsupported comparison operator: {operator}")


def _evaluate_decision(
    condition: DecisionCondition,
    answers: AnswerProvider,
    custom_handler: Optional[CustomConditionHandler],
) -> bool:
    if condition.operator is DecisionOperator.OR:
        for sub in condition.subconditions:
            if evaluate(sub, answers, custom_handler):
                return True
        return False
    if condition.operator is DecisionOperator.AND:
        for sub in condition.subconditions:
            if not evaluate(sub, answers, custom_handler):
                return False
        return True
    raise TypeError(f"Unsupported decision operator: {condition.operator}")


def _evaluate_custom(
    condition: CustomCondition,
    answers: AnswerProvider,
    custom_handler: Optional[CustomConditionHandler],
) -> bool:
    if custom_handler is None:
        raise MissingHandlerError("A CustomConditionHandler must be set to evaluate custom conditions")
    snapshot: Dict[str, Optional[Answer]] = {
        question_id: answers.answer_for(question_id)
        for question_id in sorted(condition.question_ids)
    }
    return bool(custom_handler.is_condition_met(snapshot, condition.extra))


class ConditionEvaluator:
    """
    Binds evaluate() to one answer source and one custom handler.

    SurveyState owns one evaluator and passes itself as the answer source.
    """

    def __init__(self, answers: AnswerProvider, custom_handler: Optional[CustomConditionHandler] = None):
        self._answers = answers
        self._custom_handler = custom_handler

    @property
    def custom_handler(self) -> Optional[CustomConditionHandler]:
        return self._custom_handler

    def set_custom_condition_handler(self, handler: Optional[CustomConditionHandler]) -> None:
        self._custom_handler = handler

    def is_condition_met(self, condition: Optional[Condition]) -> bool:
        return evaluate(condition, self._answers, self._custom_handler)


__all__ = ["evaluate", "ConditionEvaluator"]
