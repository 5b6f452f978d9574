"""
Answer values for survey questions.

An Answer is the response to exactly one question. It is a closed tagged
union of three immutable variants:

    - ScalarAnswer     one text value ("yes", "42")
    - ListAnswer       an ordered selection (["a", "b"])
    - CompositeAnswer  sub-answers keyed by sub-question id, recursive

The variant is fixed at construction. Reading an Answer through the
accessor of another variant raises AnswerTypeError instead of returning a
placeholder.

Example:
    A multi-part "address" question answered with a street and a list of
    flags becomes:

        CompositeAnswer({
            "street": ScalarAnswer("Main St"),
            "flags": ListAnswer(("po_box",)),
        })
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from .errors import AnswerTypeError


class Answer(ABC):
    """
    Base class for all answer variants.

    Structure only: answers never evaluate themselves and carry no
    reference back to the question they answer.
    """

    def is_scalar(self) -> bool:
        return False

    def is_list(self) -> bool:
        return False

    def is_composite(self) -> bool:
        return False

    def as_text(self) -> str:
        raise AnswerTypeError(f"{type(self).__name__} has no scalar text")

    def as_list(self) -> Tuple[str, ...]:
        raise AnswerTypeError(f"{type(self).__name__} has no list items")

    def as_map(self) -> Mapping[str, "Answer"]:
        raise AnswerTypeError(f"{type(self).__name__} has no composite fields")

    @staticmethod
    def from_value(value: Any) -> "Answer":
        """
        Build an Answer from plain Python data.

        str -> ScalarAnswer, list/tuple of str -> ListAnswer,
        dict -> CompositeAnswer (values converted recursively).
        Answers pass through unchanged.

        Raises:
            AnswerTypeError: for any other type
        """
        if isinstance(value, Answer):
            return value
        if isinstance(value, str):
            return ScalarAnswer(value)
        if isinstance(value, (list, tuple)):
            return ListAnswer(tuple(value))
        if isinstance(value, dict):
            return CompositeAnswer({key: Answer.from_value(sub) for key, sub in value.items()})
        raise AnswerTypeError(f"Cannot build an Answer from {type(value).__name__}")


@dataclass(frozen=True)
class ScalarAnswer(Answer):
    """A single text answer."""

    text: str

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise AnswerTypeError(f"Scalar answer text must be str, got {type(self.text).__name__}")

    def is_scalar(self) -> bool:
        return True

    def as_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class ListAnswer(Answer):
    """An ordered multi-selection answer. Items are stored as a tuple."""

    items: Tuple[str, ...]

    def __post_init__(self):
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, str):
                raise AnswerTypeError(f"List answer items must be str, got {type(item).__name__}")
        object.__setattr__(self, "items", items)

    def is_list(self) -> bool:
        return True

    def as_list(self) -> Tuple[str, ...]:
        return self.items


@dataclass(frozen=True)
class CompositeAnswer(Answer):
    """
    Sub-answers keyed by sub-question id.

    The mapping is copied and wrapped read-only at construction, so the
    caller's dict can change afterwards without touching the answer.
    """

    fields: Mapping[str, Answer]

    def __post_init__(self):
        fields = dict(self.fields)
        for key, sub in fields.items():
            if not isinstance(sub, Answer):
                raise AnswerTypeError(
                    f"Composite field '{key}' must be an Answer, got {type(sub).__name__}"
                )
        object.__setattr__(self, "fields", MappingProxyType(fields))

    def is_composite(self) -> bool:
        return True

    def as_map(self) -> Mapping[str, Answer]:
        return self.fields


__all__ = ["Answer", "ScalarAnswer", "ListAnswer", "CompositeAnswer"]
