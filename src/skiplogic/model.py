"""
Survey Definition Objects

Defines the static, read-only input of a survey session:
    - Questions (with their visibility condition)
    - Submit data (what the final slot does)
    - SurveyQuestions (ordered root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering
        - Hold no answers (answers live in SurveyState)
        - Are fully serializable (see skiplogic.serialization)
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .conditions import Condition
from .errors import DefinitionError


@dataclass
class SubmitData:
    """
    Describes the submit slot shown after the last visible question.

    Properties:
        button_title: Label of the submit action
        url: Optional endpoint the host posts the answers to
    """

    button_title: str = "Submit"
    url: Optional[str] = None


@dataclass
class Question:
    """
    A single question of the survey.

    Properties:
        id:
            Unique, stable identifier (e.g. "age", "smoker")

        text:
            Human-readable question text

        question_type:
            Free-form hint for the renderer (e.g. "single_text_field",
            "checkboxes", "add_text_field"). The engine never reads it.

        condition:
            Condition deciding visibility.
            If None: the question is always visible.

        options:
            Choice labels for selection questions (renderer data)

        sub_questions:
            Ids of the parts of a multi-part question. Their answers are
            stored as fields of one CompositeAnswer.

        validations:
            Opaque validation rules handed to the host's Validator

        metadata:
            Arbitrary key-value pairs (use sparingly)

    ARCHITECTURAL RULE:
        - condition is about showing the question
        - validations are about accepting the response
        - These are separate concerns
    """

    id: str
    text: str = ""
    question_type: str = "single_text_field"
    condition: Optional[Condition] = None
    options: List[str] = field(default_factory=list)
    sub_questions: List[str] = field(default_factory=list)
    validations: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class SurveyQuestions:
    """
    Root container: the ordered question list of one survey.

    Order matters. Adapter positions, progressive disclosure and the
    submit slot are all derived from this order.

    INVARIANTS:
        - Question ids are unique
    """

    questions: List[Question] = field(default_factory=list)
    submit: SubmitData = field(default_factory=SubmitData)

    def __post_init__(self):
        seen = set()
        for question in self.questions:
            if question.id in seen:
                raise DefinitionError(f"Duplicate question id: {question.id}")
            seen.add(question.id)

    def __len__(self) -> int:
        return len(self.questions)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by id.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def index_of(self, question_id: str) -> int:
        """Return the definition index of a question, or -1 if unknown."""
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        return -1

    def question_ids(self) -> List[str]:
        return [question.id for question in self.questions]
