"""
Collaborator contracts.

The engine talks to the host only through these abstract classes. They
carry no behavior beyond DictAnswerProvider, a small adapter that lets a
plain mapping stand in for a live survey (handy for previews and tests).
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Mapping, Optional

from .answers import Answer
from .serialization import answers_to_dict

if TYPE_CHECKING:
    from .model import Question, SubmitData
    from .question_state import QuestionState


class AnswerProvider(ABC):
    """Read access to the current answers of a survey."""

    @abstractmethod
    def answer_for(self, question_id: str) -> Optional[Answer]:
        """Return the answer of question_id, or None if unanswered."""

    @abstractmethod
    def all_answers_json(self) -> str:
        """Return every answer as the JSON export document."""


class CustomConditionHandler(ABC):
    """Evaluates CustomCondition nodes on behalf of the host."""

    @abstractmethod
    def is_condition_met(self, answers: Mapping[str, Optional[Answer]], extra: Any) -> bool:
        """
        Args:
            answers: answer (or None) for each declared question id
            extra: the condition's opaque payload
        """


class Validator(ABC):
    """
    Answer validation, consulted by the host before it submits an answer.

    Never called by condition evaluation.
    """

    @abstractmethod
    def validate(self, question: "Question", answer: Answer) -> Optional[str]:
        """Return an error message, or None when the answer is acceptable."""


class SubmitSurveyHandler(ABC):
    """Receives the finished survey."""

    @abstractmethod
    def submit(self, submit_data: "SubmitData", answers_json: str) -> None:
        pass


class OnQuestionStateChangedListener(ABC):
    """
    Observer of a single QuestionState.

    Two notifications on purpose: attribute changes never affect
    visibility, answers always may.
    """

    @abstractmethod
    def question_state_changed(self, question_state: "QuestionState") -> None:
        pass

    @abstractmethod
    def question_answered(self, question_state: "QuestionState") -> None:
        pass


class OnSurveyStateChangedListener(ABC):
    """
    Observer of the revealed question list.

    Positions are valid indices into the host's list at the moment of
    each call; applying the calls in order keeps the list in sync.
    """

    def question_inserted(self, adapter_position: int) -> None:
        pass

    def question_removed(self, adapter_position: int) -> None:
        pass

    def question_changed(self, adapter_position: int) -> None:
        pass

    def submit_button_inserted(self, adapter_position: int) -> None:
        pass


class DictAnswerProvider(AnswerProvider):
    """AnswerProvider backed by a plain mapping of question id to answer."""

    def __init__(self, answers: Optional[Mapping[str, Any]] = None):
        self._answers = {
            question_id: Answer.from_value(value)
            for question_id, value in (answers or {}).items()
            if value is not None
        }

    def answer_for(self, question_id: str) -> Optional[Answer]:
        return self._answers.get(question_id)

    def all_answers_json(self) -> str:
        return json.dumps(answers_to_dict(self._answers))


__all__ = [
    "AnswerProvider",
    "CustomConditionHandler",
    "Validator",
    "SubmitSurveyHandler",
    "OnQuestionStateChangedListener",
    "OnSurveyStateChangedListener",
    "DictAnswerProvider",
]
