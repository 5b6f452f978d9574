"""
Condition trees for question visibility.

A Condition is attached to a question definition and decides whether that
question is currently shown. Conditions are represented as immutable trees,
never as strings.

The union is CLOSED. There are exactly three node kinds:

    - SimpleCondition    compare one answer (or one composite field) to a literal
    - DecisionCondition  AND / OR over an ordered list of child conditions
    - CustomCondition    delegate to a host-supplied handler

ARCHITECTURAL RULE:
    Nodes are structure only. Evaluation lives in skiplogic.evaluator,
    in a single function that matches every kind. Adding a kind means
    extending this module and that function, never subclassing.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple


class Condition(ABC):
    """
    Base class for all condition nodes.

    DO NOT:
        - Add evaluation logic here (belongs in the evaluator)
        - Add dependency analysis here (belongs in the analyzer)
    """
    pass


class ComparisonOperator(Enum):
    """
    Operators of a SimpleCondition.

    The values are the wire names used in survey definition files.
    """

    EQUALS = "equals"
    NOT_EQUALS = "not equals"
    GREATER_THAN = "greater than"
    GREATER_EQUAL = "greater than or equal to"
    LESS_THAN = "less than"
    LESS_EQUAL = "less than or equal to"
    CONTAINS = "contains"
    NOT_CONTAINS = "not contains"

    @property
    def is_ordered(self) -> bool:
        return self in _ORDERED_OPERATORS


_ORDERED_OPERATORS = frozenset({
    ComparisonOperator.GREATER_THAN,
    ComparisonOperator.GREATER_EQUAL,
    ComparisonOperator.LESS_THAN,
    ComparisonOperator.LESS_EQUAL,
})


class DecisionOperator(Enum):
    """Logical combinators of a DecisionCondition."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class SimpleCondition(Condition):
    """
    Compares the answer of one question against a literal.

    Example:
        "show if age >= 18"

    Becomes:
        SimpleCondition(
            question_id="age",
            operator=ComparisonOperator.GREATER_EQUAL,
            value="18",
        )

    Properties:
        question_id: id of the question whose answer is read
        operator: ComparisonOperator
        value: literal, always text (numeric operators parse it)
        sub_key: optional field of a composite answer to compare instead
    """

    question_id: str
    operator: ComparisonOperator
    value: str
    sub_key: Optional[str] = None


@dataclass(frozen=True)
class DecisionCondition(Condition):
    """
    AND / OR over child conditions, evaluated left to right.

    An empty AND is true and an empty OR is false.
    Children are stored as a tuple so the node stays immutable.
    """

    operator: DecisionOperator
    subconditions: Tuple[Condition, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "subconditions", tuple(self.subconditions))


@dataclass(frozen=True)
class CustomCondition(Condition):
    """
    Host-defined predicate.

    The evaluator hands the answers of question_ids, plus the opaque
    extra payload, to the configured CustomConditionHandler.
    """

    question_ids: FrozenSet[str] = frozenset()
    extra: Any = field(default=None, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "question_ids", frozenset(self.question_ids))


def all_of(*subconditions: Condition) -> DecisionCondition:
    """Shorthand for an AND decision."""
    return DecisionCondition(DecisionOperator.AND, subconditions)


def any_of(*subconditions: Condition) -> DecisionCondition:
    """Shorthand for an OR decision."""
    return DecisionCondition(DecisionOperator.OR, subconditions)


__all__ = [
    "Condition",
    "ComparisonOperator",
    "DecisionOperator",
    "SimpleCondition",
    "DecisionCondition",
    "CustomCondition",
    "all_of",
    "any_of",
]
