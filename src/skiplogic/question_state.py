"""
Per-question mutable record.

A QuestionState holds the answer of one question plus free-form string
attributes the host wants to keep next to it (draft text, UI flags, ...).
It is created lazily by SurveyState.get_state_for() and lives as long as
the survey session.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .answers import Answer
from .errors import ReservedKeyError
from .interfaces import OnQuestionStateChangedListener

QUESTION_ID_KEY = "question_id"
ANSWER_KEY = "answer"


class QuestionState:
    """
    Holds the id, attributes and answer of one question.

    Attribute writes notify the listener with question_state_changed();
    answer writes notify with question_answered(). The listener is called
    synchronously, after the new value is stored.
    """

    def __init__(self, question_id: str, listener: Optional[OnQuestionStateChangedListener] = None):
        self._question_id = question_id
        self._attributes: Dict[str, str] = {}
        self._answer: Optional[Answer] = None
        self._listener = listener

    def __repr__(self) -> str:
        return f"QuestionState(id={self._question_id!r}, answer={self._answer!r})"

    @property
    def id(self) -> str:
        return self._question_id

    @property
    def answer(self) -> Optional[Answer]:
        return self._answer

    @property
    def attributes(self) -> Dict[str, str]:
        """A copy of the attributes; mutate through set_attribute()."""
        return dict(self._attributes)

    def is_answered(self) -> bool:
        return self._answer is not None

    def get_attribute(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._attributes.get(key, default)

    def set_attribute(self, key: str, value: str) -> None:
        """
        Store a host attribute.

        Raises:
            ReservedKeyError: for "question_id" (the id never changes) and
                "answer" (answers go through set_answer)
        """
        if key == QUESTION_ID_KEY:
            raise ReservedKeyError("The question id cannot be updated")
        if key == ANSWER_KEY:
            raise ReservedKeyError("The answer must be updated via set_answer")
        self._attributes[key] = value
        if self._listener is not None:
            self._listener.question_state_changed(self)

    def set_answer(self, answer: Any) -> None:
        """
        Replace the stored answer.

        Answers are never merged. Setting the same answer again still
        notifies, so visibility is always recomputed.
        """
        self._answer = Answer.from_value(answer)
        if self._listener is not None:
            self._listener.question_answered(self)
