"""
skiplogic: conditional-visibility engine for dynamic questionnaires.

This package decides WHICH questions of a survey are visible, and WHERE,
as answers change:

    - answers      immutable answer values (scalar, list, composite)
    - conditions   visibility condition trees
    - evaluator    pure condition evaluation
    - filtered     visible-question projection with positional deltas
    - survey_state session state, progressive disclosure, answer export

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - How a question is drawn
    - How answers are transported or stored
    - Whether an answer is valid (a host-supplied Validator decides)

Hosts consume insert/remove/change events; nothing here renders.
"""

from .answers import Answer, CompositeAnswer, ListAnswer, ScalarAnswer
from .conditions import (
    ComparisonOperator,
    Condition,
    CustomCondition,
    DecisionCondition,
    DecisionOperator,
    SimpleCondition,
    all_of,
    any_of,
)
from .errors import (
    AnswerTypeError,
    DefinitionError,
    MissingHandlerError,
    NotInitializedError,
    NumericFormatError,
    ReservedKeyError,
    SkipLogicError,
)
from .evaluator import ConditionEvaluator, evaluate
from .filtered import FilteredQuestions, QuestionAdapterPosition, RecomputeMode, SkipStatusChange
from .interfaces import (
    AnswerProvider,
    CustomConditionHandler,
    DictAnswerProvider,
    OnQuestionStateChangedListener,
    OnSurveyStateChangedListener,
    SubmitSurveyHandler,
    Validator,
)
from .model import Question, SubmitData, SurveyQuestions
from .question_state import QuestionState
from .survey_state import SurveyState

__version__ = "0.1.0"
