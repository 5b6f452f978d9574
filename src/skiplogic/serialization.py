"""
Serialization helpers for survey definitions and answers.

Provides lossless JSON/YAML round-trip of SurveyQuestions via an
intermediate dict representation, and the answer export document

    {"answers": {question_id: "text" | ["a", "b"] | {sub_id: ...}}}

This module intentionally keeps the serialized structure stable and explicit.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import yaml

from .answers import Answer, CompositeAnswer, ListAnswer, ScalarAnswer
from .conditions import (
    ComparisonOperator,
    Condition,
    CustomCondition,
    DecisionCondition,
    DecisionOperator,
    SimpleCondition,
)
from .errors import AnswerTypeError, DefinitionError
from .model import Question, SubmitData, SurveyQuestions

logger = logging.getLogger(__name__)


# =============================================================================
# Conditions
# =============================================================================


def condition_to_dict(condition: Condition | None) -> Any:
    if condition is None:
        return None
    if isinstance(condition, SimpleCondition):
        return {
            "type": "simple",
            "question_id": condition.question_id,
            "sub_key": condition.sub_key,
            "operator": condition.operator.value,
            "value": condition.value,
        }
    if isinstance(condition, DecisionCondition):
        return {
            "type": "decision",
            "operator": condition.operator.value,
            "subconditions": [condition_to_dict(sub) for sub in condition.subconditions],
        }
    if isinstance(condition, CustomCondition):
        return {
            "type": "custom",
            "question_ids": sorted(condition.question_ids),
            "extra": condition.extra,
        }
    raise TypeError(f"Unsupported Condition type: {type(condition)}")


def condition_from_dict(d: Any) -> Condition | None:
    if d is None:
        return None
    if not isinstance(d, dict):
        raise DefinitionError(f"Condition must be a mapping, got {type(d).__name__}")
    t = d.get("type")
    try:
        if t == "simple":
            return SimpleCondition(
                question_id=d["question_id"],
                operator=ComparisonOperator(d["operator"]),
                value=str(d["value"]),
                sub_key=d.get("sub_key"),
            )
        if t == "decision":
            return DecisionCondition(
                operator=DecisionOperator(d["operator"]),
                subconditions=tuple(condition_from_dict(sub) for sub in d.get("subconditions", [])),
            )
        if t == "custom":
            return CustomCondition(
                question_ids=frozenset(d.get("question_ids", [])),
                extra=d.get("extra"),
            )
    except DefinitionError:
        raise
    except KeyError as e:
        raise DefinitionError(f"Condition of type '{t}' is missing key {e}") from None
    except ValueError as e:
        raise DefinitionError(f"Invalid condition of type '{t}': {e}") from None
    raise DefinitionError(f"Unsupported condition dict type: {t}")


# =============================================================================
# Survey definition
# =============================================================================


def submit_to_dict(s: SubmitData) -> Dict[str, Any]:
    return {"button_title": s.button_title, "url": s.url}


def submit_from_dict(d: Dict[str, Any] | None) -> SubmitData:
    if d is None:
        return SubmitData()
    return SubmitData(button_title=d.get("button_title", "Submit"), url=d.get("url"))


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "text": q.text,
        "question_type": q.question_type,
        "condition": condition_to_dict(q.condition),
        "options": q.options,
        "sub_questions": q.sub_questions,
        "validations": q.validations,
        "metadata": q.metadata,
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    if "id" not in d:
        raise DefinitionError(f"Question is missing an id: {d!r}")
    return Question(
        id=d["id"],
        text=d.get("text", ""),
        question_type=d.get("question_type", "single_text_field"),
        condition=condition_from_dict(d.get("condition")),
        options=list(d.get("options", [])),
        sub_questions=list(d.get("sub_questions", [])),
        validations=list(d.get("validations", [])),
        metadata=dict(d.get("metadata", {})),
    )


def survey_to_dict(s: SurveyQuestions) -> Dict[str, Any]:
    return {
        "questions": [question_to_dict(q) for q in s.questions],
        "submit": submit_to_dict(s.submit),
    }


def survey_from_dict(d: Dict[str, Any]) -> SurveyQuestions:
    return SurveyQuestions(
        questions=[question_from_dict(q) for q in d.get("questions", [])],
        submit=submit_from_dict(d.get("submit")),
    )


def survey_to_json(s: SurveyQuestions) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_from_json(s: str) -> SurveyQuestions:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: SurveyQuestions) -> str:
    return yaml.safe_dump(survey_to_dict(s))


def survey_from_yaml(s: str) -> SurveyQuestions:
    d = yaml.safe_load(s)
    return survey_from_dict(d)


# =============================================================================
# Answers
# =============================================================================


def answer_to_value(answer: Answer) -> Any:
    """Scalar -> str, List -> list, Composite -> nested dict."""
    if isinstance(answer, ScalarAnswer):
        return answer.text
    if isinstance(answer, ListAnswer):
        return list(answer.items)
    if isinstance(answer, CompositeAnswer):
        return {key: answer_to_value(sub) for key, sub in answer.fields.items()}
    raise TypeError(f"Unsupported Answer type: {type(answer)}")


def answers_to_dict(answers: Mapping[str, Optional[Answer]]) -> Dict[str, Any]:
    """
    Build the answer export document.

    A question without an answer is logged and omitted, never written
    as null.
    """
    exported: Dict[str, Any] = {}
    for question_id, answer in answers.items():
        if answer is None:
            logger.debug("No answer for question '%s', left out of the export", question_id)
            continue
        exported[question_id] = answer_to_value(answer)
    return {"answers": exported}


def answers_from_dict(d: Dict[str, Any]) -> Dict[str, Answer]:
    """Read an answer export document back into Answer values."""
    if not isinstance(d, dict) or not isinstance(d.get("answers"), dict):
        raise DefinitionError("Answer document must be a mapping with an 'answers' mapping")
    try:
        return {question_id: Answer.from_value(value) for question_id, value in d["answers"].items()}
    except AnswerTypeError as e:
        raise DefinitionError(f"Invalid answer value: {e}") from None


def answers_from_json(s: str) -> Dict[str, Answer]:
    return answers_from_dict(json.loads(s))
