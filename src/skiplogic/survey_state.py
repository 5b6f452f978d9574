"""
Survey session state.

SurveyState owns the answers of one survey session and drives the host's
question list:

    QuestionState.set_answer()
        -> SurveyState.question_answered()
            -> FilteredQuestions recomputes visibility (reading answers
               back through SurveyState.answer_for)
            -> skip/show delta translated into adapter events
            -> reveal cursor advanced if the answered question was the
               last revealed one
        -> queued events delivered to OnSurveyStateChangedListeners

Progressive disclosure: the host shows the first visible_question_count
slots of (visible questions + [submit slot]). The cursor starts at one slot
and grows each time the question in the last revealed slot is answered.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from .answers import Answer
from .conditions import Condition
from .errors import MissingHandlerError, NotInitializedError
from .evaluator import ConditionEvaluator
from .filtered import FilteredQuestions, RecomputeMode, SkipStatusChange
from .interfaces import (
    AnswerProvider,
    CustomConditionHandler,
    OnQuestionStateChangedListener,
    OnSurveyStateChangedListener,
    SubmitSurveyHandler,
    Validator,
)
from .model import Question, SubmitData, SurveyQuestions
from .question_state import QuestionState
from .serialization import answers_to_dict

logger = logging.getLogger(__name__)

QUESTION_INSERTED = "question_inserted"
QUESTION_REMOVED = "question_removed"
QUESTION_CHANGED = "question_changed"
SUBMIT_BUTTON_INSERTED = "submit_button_inserted"


class SurveyState(OnQuestionStateChangedListener, AnswerProvider):
    """
    Tracks the current state of one survey session.

    Usage:
        state = SurveyState(questions).set_custom_condition_handler(handler).init_filter()
        state.add_on_survey_state_changed_listener(adapter)
        state.get_state_for("age").set_answer("42")
    """

    def __init__(
        self,
        survey_questions: SurveyQuestions,
        recompute_mode: RecomputeMode = RecomputeMode.DEPENDENTS,
    ):
        self._survey_questions = survey_questions
        self._recompute_mode = recompute_mode
        self._question_states: Dict[str, QuestionState] = {}
        self._condition_evaluator = ConditionEvaluator(self)
        self._filtered_questions: Optional[FilteredQuestions] = None
        self._validator: Optional[Validator] = None
        self._submit_survey_handler: Optional[SubmitSurveyHandler] = None
        self._listeners: List[OnSurveyStateChangedListener] = []
        self._visible_question_count = 1

        self._pending_events: Deque[Tuple[str, int]] = deque()
        self._dispatching = False

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_validator(self, validator: Optional[Validator]) -> "SurveyState":
        self._validator = validator
        return self

    @property
    def validator(self) -> Optional[Validator]:
        return self._validator

    def set_custom_condition_handler(self, handler: Optional[CustomConditionHandler]) -> "SurveyState":
        self._condition_evaluator.set_custom_condition_handler(handler)
        return self

    @property
    def condition_evaluator(self) -> ConditionEvaluator:
        return self._condition_evaluator

    def set_submit_survey_handler(self, handler: Optional[SubmitSurveyHandler]) -> "SurveyState":
        self._submit_survey_handler = handler
        return self

    @property
    def submit_survey_handler(self) -> Optional[SubmitSurveyHandler]:
        return self._submit_survey_handler

    @property
    def survey_questions(self) -> SurveyQuestions:
        return self._survey_questions

    @property
    def visible_question_count(self) -> int:
        return self._visible_question_count

    @property
    def submit_data(self) -> SubmitData:
        return self._survey_questions.submit

    def init_filter(self) -> "SurveyState":
        """
        Build the visible-question projection from the current answers.

        Answers set before this call are stored without events and decide
        the initial visibility. Call after the custom condition handler is
        set: the initial pass evaluates every condition.
        """
        self._filtered_questions = FilteredQuestions(
            self._survey_questions,
            self._condition_evaluator,
            recompute_mode=self._recompute_mode,
        )
        self._filtered_questions.add_skip_status_listener(self._skip_status_changed)
        return self

    def _require_filter(self) -> FilteredQuestions:
        if self._filtered_questions is None:
            raise NotInitializedError("Please call init_filter on SurveyState")
        return self._filtered_questions

    # =========================================================================
    # Queries
    # =========================================================================

    def get_question_for(self, adapter_position: int) -> Optional[Question]:
        """
        Return the visible question at adapter_position.

        None means the position holds no question (the submit slot, or
        past the end).
        """
        return self._require_filter().get_question_for(adapter_position)

    def is_submit_position(self, adapter_position: int) -> bool:
        return self._require_filter().size() == adapter_position

    def visible_size(self) -> int:
        """Number of currently visible questions (revealed or not)."""
        return self._require_filter().size()

    def revealed_question_ids(self) -> List[Optional[str]]:
        """Ids of the revealed slots in order; None stands for the submit slot."""
        filtered = self._require_filter()
        slots: List[Optional[str]] = filtered.visible_question_ids() + [None]
        return slots[:self._visible_question_count]

    def get_state_for(self, question_id: str) -> QuestionState:
        """Return the QuestionState of question_id, creating it on first use."""
        question_state = self._question_states.get(question_id)
        if question_state is None:
            question_state = QuestionState(question_id, self)
            self._question_states[question_id] = question_state
        return question_state

    def is_condition_met(self, condition: Optional[Condition]) -> bool:
        return self._condition_evaluator.is_condition_met(condition)

    # =========================================================================
    # AnswerProvider
    # =========================================================================

    def answer_for(self, question_id: str) -> Optional[Answer]:
        return self.get_state_for(question_id).answer

    def all_answers(self) -> Dict[str, Any]:
        """
        Export every answer as {"answers": {question_id: value}}.

        Questions that have a state but no answer are logged and left out.
        """
        return answers_to_dict(
            {question_id: state.answer for question_id, state in self._question_states.items()}
        )

    def all_answers_json(self) -> str:
        return json.dumps(self.all_answers())

    # =========================================================================
    # OnQuestionStateChangedListener
    # =========================================================================

    def question_state_changed(self, question_state: QuestionState) -> None:
        self._question_states[question_state.id] = question_state

    def question_answered(self, question_state: QuestionState) -> None:
        self._question_states[question_state.id] = question_state
        if self._filtered_questions is None:
            # Picked up by the initial pass of init_filter()
            logger.debug("Answer to '%s' stored before init_filter", question_state.id)
            return
        filtered = self._filtered_questions

        filtered.question_answered(question_state)

        if self._visible_question_count < 1:
            self._reveal_next_slot()

        last_question = filtered.get_question_for(self._visible_question_count - 1)
        if last_question is not None and last_question.id == question_state.id:
            self._reveal_next_slot()

        self._dispatch_pending()

    def _skip_status_changed(self, change: SkipStatusChange) -> None:
        """
        Translate a skip/show delta into adapter events for the revealed
        prefix.

        Removals come first, highest position first; insertions follow,
        lowest position first. Changes beyond the revealed prefix are not
        on screen and produce no event.
        """
        for skipped in change.newly_skipped:
            if skipped.adapter_position < self._visible_question_count:
                self._visible_question_count -= 1
                self._pending_events.append((QUESTION_REMOVED, skipped.adapter_position))

        for shown in change.newly_shown:
            if shown.adapter_position < self._visible_question_count - 1:
                self._visible_question_count += 1
                self._pending_events.append((QUESTION_INSERTED, shown.adapter_position))
            elif shown.adapter_position == self._visible_question_count - 1:
                self._pending_events.append((QUESTION_CHANGED, shown.adapter_position))

    # =========================================================================
    # Progressive disclosure
    # =========================================================================

    def increase_visible_question_count(self) -> None:
        """Reveal one more slot, unless the submit slot is already revealed."""
        self._reveal_next_slot()
        self._dispatch_pending()

    def _reveal_next_slot(self) -> None:
        filtered = self._require_filter()
        if self._visible_question_count > filtered.size():
            return
        self._visible_question_count += 1
        position = self._visible_question_count - 1
        if position == filtered.size():
            logger.info("All questions revealed, submit slot at position %d", position)
            self._pending_events.append((SUBMIT_BUTTON_INSERTED, position))
        else:
            logger.info("Revealed question slot %d", position)
            self._pending_events.append((QUESTION_INSERTED, position))

    # =========================================================================
    # Submission
    # =========================================================================

    def submit_survey(self) -> None:
        """Hand the submit data and the JSON answer export to the submit handler."""
        if self._submit_survey_handler is None:
            raise MissingHandlerError("A SubmitSurveyHandler must be set to submit the survey")
        logger.info("Submitting survey with %d question states", len(self._question_states))
        self._submit_survey_handler.submit(self.submit_data, self.all_answers_json())

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_on_survey_state_changed_listener(self, listener: OnSurveyStateChangedListener) -> None:
        self._listeners.append(listener)

    def remove_on_survey_state_changed_listener(self, listener: OnSurveyStateChangedListener) -> None:
        self._listeners.remove(listener)

    def _dispatch_pending(self) -> None:
        """
        Deliver queued events in order.

        Only the outermost call drains the queue. A listener that answers a
        question from inside a callback gets its events queued behind the
        ones still pending.
        """
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending_events:
                method_name, adapter_position = self._pending_events.popleft()
                for listener in list(self._listeners):
                    getattr(listener, method_name)(adapter_position)
        finally:
            self._dispatching = False
