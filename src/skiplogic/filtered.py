"""
Visible-question projection.

FilteredQuestions keeps one visibility flag per question of the survey
definition and derives the ordered list of visible questions from it. The
adapter position of a visible question is the number of visible questions
before it.

When an answer changes, question_answered() re-evaluates the affected
conditions against one snapshot of the old flags and reports every flip:

    hidden  -> visible   "newly shown",   position in the NEW ordering
    visible -> hidden    "newly skipped", position in the OLD ordering

Applying the skipped entries (descending) and then the shown entries
(ascending) to a list that mirrors the old ordering yields the new one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .analyzer import build_dependency_index
from .evaluator import ConditionEvaluator
from .model import Question, SurveyQuestions
from .question_state import QuestionState

logger = logging.getLogger(__name__)


class RecomputeMode(Enum):
    """Which conditions are re-evaluated after an answer."""
    DEPENDENTS = "dependents"  # Only conditions that read the answered question
    FULL = "full"              # Every condition, every time


@dataclass(frozen=True)
class QuestionAdapterPosition:
    """A question id paired with its adapter position."""
    question_id: str
    adapter_position: int


@dataclass(frozen=True)
class SkipStatusChange:
    """
    Combined result of one recompute pass.

    newly_skipped is ordered by descending old position, newly_shown by
    ascending new position.
    """
    newly_skipped: Tuple[QuestionAdapterPosition, ...] = ()
    newly_shown: Tuple[QuestionAdapterPosition, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.newly_skipped or self.newly_shown)


SkipStatusListener = Callable[[SkipStatusChange], None]


def _visible_indices(flags: Sequence[bool]) -> List[int]:
    return [index for index, visible in enumerate(flags) if visible]


class FilteredQuestions:
    """
    Ordered visible subset of a survey's questions.

    Both recompute modes produce identical SkipStatusChange results; the
    DEPENDENTS mode only skips conditions that cannot have changed.
    """

    def __init__(
        self,
        survey_questions: SurveyQuestions,
        evaluator: ConditionEvaluator,
        recompute_mode: RecomputeMode = RecomputeMode.DEPENDENTS,
    ):
        self._questions: List[Question] = list(survey_questions.questions)
        self._evaluator = evaluator
        self._recompute_mode = recompute_mode
        self._dependency_index = build_dependency_index(self._questions)
        self._listeners: List[SkipStatusListener] = []
        # Conditions of a failed pass, re-checked until a pass commits
        self._unsettled: Set[int] = set()

        self._visible: List[bool] = [
            evaluator.is_condition_met(question.condition) for question in self._questions
        ]
        self._visible_positions: List[int] = _visible_indices(self._visible)

    def __len__(self) -> int:
        return len(self._visible_positions)

    @property
    def recompute_mode(self) -> RecomputeMode:
        return self._recompute_mode

    def size(self) -> int:
        return len(self._visible_positions)

    def add_skip_status_listener(self, listener: SkipStatusListener) -> None:
        self._listeners.append(listener)

    def remove_skip_status_listener(self, listener: SkipStatusListener) -> None:
        self._listeners.remove(listener)

    def get_question_for(self, adapter_position: int) -> Optional[Question]:
        """Return the visible question at adapter_position, or None when out of range."""
        if 0 <= adapter_position < len(self._visible_positions):
            return self._questions[self._visible_positions[adapter_position]]
        return None

    def position_of(self, question_id: str) -> Optional[int]:
        """Return the adapter position of a visible question, None if hidden or unknown."""
        for position, index in enumerate(self._visible_positions):
            if self._questions[index].id == question_id:
                return position
        return None

    def is_visible(self, question_id: str) -> bool:
        return self.position_of(question_id) is not None

    def visible_question_ids(self) -> List[str]:
        return [self._questions[index].id for index in self._visible_positions]

    def _indices_to_recompute(self, question_id: str) -> Iterable[int]:
        if self._recompute_mode is RecomputeMode.FULL:
            return range(len(self._questions))
        return sorted(set(self._dependency_index.get(question_id, ())) | self._unsettled)

    def question_answered(self, question_state: QuestionState) -> SkipStatusChange:
        """
        Recompute visibility after question_state was answered.

        Flags are only committed once every affected condition evaluated
        successfully, so an evaluation error leaves the projection intact.
        The conditions of a failed pass are re-evaluated on every later pass
        until one succeeds, so both recompute modes raise on the same answers.

        Returns:
            The SkipStatusChange (falsy when nothing flipped). Listeners are
            notified only for a non-empty change.
        """
        indices = list(self._indices_to_recompute(question_state.id))
        new_visible = list(self._visible)
        try:
            for index in indices:
                new_visible[index] = self._evaluator.is_condition_met(self._questions[index].condition)
        except Exception:
            if self._recompute_mode is RecomputeMode.DEPENDENTS:
                self._unsettled.update(indices)
            raise
        self._unsettled.clear()

        old_positions: Dict[int, int] = {index: pos for pos, index in enumerate(self._visible_positions)}
        new_visible_positions = _visible_indices(new_visible)
        new_positions: Dict[int, int] = {index: pos for pos, index in enumerate(new_visible_positions)}

        skipped = []
        shown = []
        for index, (was_visible, is_visible) in enumerate(zip(self._visible, new_visible)):
            if was_visible and not is_visible:
                skipped.append(QuestionAdapterPosition(self._questions[index].id, old_positions[index]))
            elif is_visible and not was_visible:
                shown.append(QuestionAdapterPosition(self._questions[index].id, new_positions[index]))

        self._visible = new_visible
        self._visible_positions = new_visible_positions

        change = SkipStatusChange(
            newly_skipped=tuple(sorted(skipped, key=lambda p: p.adapter_position, reverse=True)),
            newly_shown=tuple(sorted(shown, key=lambda p: p.adapter_position)),
        )
        if change:
            logger.debug(
                "Answer to '%s' skipped %s and showed %s",
                question_state.id,
                [p.question_id for p in change.newly_skipped],
                [p.question_id for p in change.newly_shown],
            )
            for listener in list(self._listeners):
                listener(change)
        return change
