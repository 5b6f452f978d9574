from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from skiplogic.examples import build_branching_survey, build_intake_survey
from skiplogic.interfaces import CustomConditionHandler, OnSurveyStateChangedListener
from skiplogic.survey_state import SurveyState


class AdultHandler(CustomConditionHandler):
    """Decides custom conditions from a birth year, counting its calls."""

    def __init__(self, reference_year: int = 2026):
        self.reference_year = reference_year
        self.calls: List[Tuple[dict, object]] = []

    def is_condition_met(self, answers, extra) -> bool:
        self.calls.append((dict(answers), extra))
        year = answers.get("birth_year")
        if year is None:
            return False
        return self.reference_year - int(year.as_text()) >= extra["min_age"]


class RecordingAdapter(OnSurveyStateChangedListener):
    """
    Mirrors the host list by replaying events.

    slots holds question ids, None for the submit slot.
    """

    def __init__(self, state: SurveyState):
        self.state = state
        self.events: List[Tuple[str, int]] = []
        self.slots: List[Optional[str]] = list(state.revealed_question_ids())

    def _slot_at(self, position: int) -> Optional[str]:
        question = self.state.get_question_for(position)
        return question.id if question is not None else None

    def question_inserted(self, adapter_position: int) -> None:
        self.events.append(("inserted", adapter_position))
        assert 0 <= adapter_position <= len(self.slots)
        self.slots.insert(adapter_position, self._slot_at(adapter_position))

    def question_removed(self, adapter_position: int) -> None:
        self.events.append(("removed", adapter_position))
        assert 0 <= adapter_position < len(self.slots)
        del self.slots[adapter_position]

    def question_changed(self, adapter_position: int) -> None:
        self.events.append(("changed", adapter_position))
        assert 0 <= adapter_position < len(self.slots)
        self.slots[adapter_position] = self._slot_at(adapter_position)

    def submit_button_inserted(self, adapter_position: int) -> None:
        self.events.append(("submit", adapter_position))
        assert adapter_position == len(self.slots)
        self.slots.insert(adapter_position, None)

    def take_events(self) -> List[Tuple[str, int]]:
        events, self.events = self.events, []
        return events


@pytest.fixture
def adult_handler() -> AdultHandler:
    return AdultHandler()


@pytest.fixture
def branching_state() -> SurveyState:
    return SurveyState(build_branching_survey()).init_filter()


@pytest.fixture
def intake_state(adult_handler) -> SurveyState:
    return SurveyState(build_intake_survey()).set_custom_condition_handler(adult_handler).init_filter()


@pytest.fixture
def make_adapter():
    def _make(state: SurveyState) -> RecordingAdapter:
        adapter = RecordingAdapter(state)
        state.add_on_survey_state_changed_listener(adapter)
        return adapter
    return _make
