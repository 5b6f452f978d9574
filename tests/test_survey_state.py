"""
Tests for SurveyState.

These tests verify:
    - Lazy question states and usage-order errors
    - Progressive disclosure of the revealed prefix
    - Adapter events, including the yes/no branching walkthrough
    - Host lists replayed from events always match the revealed prefix
    - Answer export and submission
"""

import json
import logging

import pytest

from skiplogic.answers import ScalarAnswer
from skiplogic.conditions import CustomCondition
from skiplogic.errors import MissingHandlerError, NotInitializedError
from skiplogic.examples import build_branching_survey, build_intake_survey
from skiplogic.filtered import RecomputeMode
from skiplogic.interfaces import (
    CustomConditionHandler,
    OnSurveyStateChangedListener,
    SubmitSurveyHandler,
    Validator,
)
from skiplogic.model import Question, SurveyQuestions
from skiplogic.serialization import answers_from_json
from skiplogic.survey_state import SurveyState


class CountingHandler(CustomConditionHandler):
    def __init__(self):
        self.calls = 0

    def is_condition_met(self, answers, extra):
        self.calls += 1
        return answers["q1"] is not None and answers["q1"].as_text() == "yes"


class CapturingSubmitHandler(SubmitSurveyHandler):
    def __init__(self):
        self.submitted = []

    def submit(self, submit_data, answers_json):
        self.submitted.append((submit_data, answers_json))


class AcceptAll(Validator):
    def validate(self, question, answer):
        return None


class TestQuestionStates:

    def test_get_state_for_is_lazy_and_stable(self, branching_state):
        state = branching_state.get_state_for("new")
        assert state.id == "new"
        assert branching_state.get_state_for("new") is state

    def test_answer_for(self, branching_state):
        assert branching_state.answer_for("q3") is None
        branching_state.get_state_for("q3").set_answer("fine")
        assert branching_state.answer_for("q3") == ScalarAnswer("fine")

    def test_attribute_changes_do_not_emit_events(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        branching_state.get_state_for("q1").set_attribute("draft", "ye")
        assert adapter.events == []


class TestInitialization:

    def test_get_question_before_init(self):
        state = SurveyState(build_branching_survey())
        with pytest.raises(NotInitializedError):
            state.get_question_for(0)

    def test_answer_before_init_decides_initial_visibility(self):
        state = SurveyState(build_branching_survey())
        state.get_state_for("q1").set_answer("yes")
        with pytest.raises(NotInitializedError):
            state.visible_size()
        state.init_filter()
        assert state.visible_size() == 3
        assert state.revealed_question_ids() == ["q1"]
        assert state.all_answers() == {"answers": {"q1": "yes"}}

    def test_initial_cursor(self, branching_state):
        assert branching_state.visible_question_count == 1
        assert branching_state.revealed_question_ids() == ["q1"]
        assert branching_state.get_question_for(0).id == "q1"

    def test_custom_condition_needs_handler_at_init(self):
        survey = SurveyQuestions(questions=[Question(id="q1", condition=CustomCondition({"q0"}))])
        with pytest.raises(MissingHandlerError):
            SurveyState(survey).init_filter()

    def test_empty_survey_reveals_submit_slot(self):
        state = SurveyState(SurveyQuestions()).init_filter()
        assert state.revealed_question_ids() == [None]
        assert state.is_submit_position(0)

    def test_setters_chain(self):
        handler = CountingHandler()
        validator = AcceptAll()
        submit = CapturingSubmitHandler()
        state = (
            SurveyState(build_branching_survey())
            .set_custom_condition_handler(handler)
            .set_validator(validator)
            .set_submit_survey_handler(submit)
        )
        assert state.condition_evaluator.custom_handler is handler
        assert state.validator is validator
        assert state.submit_survey_handler is submit


class TestBranchingWalkthrough:
    """q1 (yes/no), q2 shown only for q1 == yes, q3 unconditional."""

    def test_yes_reveals_follow_up_once(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        branching_state.get_state_for("q1").set_answer("yes")
        assert adapter.take_events() == [("inserted", 1)]
        assert branching_state.visible_question_count == 2
        assert branching_state.revealed_question_ids() == ["q1", "q2"]

    def test_switching_to_no_removes_follow_up(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        q1 = branching_state.get_state_for("q1")
        q1.set_answer("yes")
        adapter.take_events()

        q1.set_answer("no")
        events = adapter.take_events()
        assert events[0] == ("removed", 1)
        assert branching_state.visible_question_count == 2
        assert "q2" not in branching_state.revealed_question_ids()
        assert branching_state.revealed_question_ids() == ["q1", "q3"]
        assert adapter.slots == ["q1", "q3"]

    def test_no_skips_straight_to_closer(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        branching_state.get_state_for("q1").set_answer("no")
        assert adapter.take_events() == [("inserted", 1)]
        assert branching_state.revealed_question_ids() == ["q1", "q3"]

    def test_full_walk_to_submit(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        branching_state.get_state_for("q1").set_answer("yes")
        branching_state.get_state_for("q2").set_answer("3")
        assert adapter.take_events() == [("inserted", 1), ("inserted", 2)]

        branching_state.get_state_for("q3").set_answer("nothing")
        assert adapter.take_events() == [("submit", 3)]
        assert branching_state.revealed_question_ids() == ["q1", "q2", "q3", None]
        assert branching_state.is_submit_position(3)
        assert branching_state.get_question_for(3) is None

    def test_no_reveal_past_submit(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        for question_id, value in [("q1", "yes"), ("q2", "3"), ("q3", "x")]:
            branching_state.get_state_for(question_id).set_answer(value)
        adapter.take_events()

        branching_state.get_state_for("q3").set_answer("y")
        branching_state.increase_visible_question_count()
        assert adapter.take_events() == []
        assert branching_state.visible_question_count == 4

    def test_skip_and_reshow_after_everything_revealed(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        for question_id, value in [("q1", "yes"), ("q2", "3"), ("q3", "x")]:
            branching_state.get_state_for(question_id).set_answer(value)
        adapter.take_events()

        branching_state.get_state_for("q1").set_answer("no")
        assert adapter.take_events() == [("removed", 1)]
        assert branching_state.revealed_question_ids() == ["q1", "q3", None]

        branching_state.get_state_for("q1").set_answer("yes")
        assert adapter.take_events() == [("inserted", 1)]
        assert branching_state.revealed_question_ids() == ["q1", "q2", "q3", None]

    def test_follow_up_replaces_frontier(self, branching_state, make_adapter):
        """A question shown in the last revealed slot re-renders that slot."""
        adapter = make_adapter(branching_state)
        q1 = branching_state.get_state_for("q1")
        q1.set_answer("no")
        adapter.take_events()

        q1.set_answer("yes")
        assert adapter.take_events() == [("changed", 1)]
        assert branching_state.revealed_question_ids() == ["q1", "q2"]

        branching_state.get_state_for("q2").set_answer("1")
        assert adapter.take_events() == [("inserted", 2)]
        assert adapter.slots == ["q1", "q2", "q3"]

    def test_repeated_identical_answer_recomputes(self, make_adapter):
        handler = CountingHandler()
        survey = SurveyQuestions(questions=[
            Question(id="q1"),
            Question(id="q2", condition=CustomCondition({"q1"})),
            Question(id="q3"),
        ])
        state = SurveyState(survey).set_custom_condition_handler(handler).init_filter()
        adapter = make_adapter(state)
        assert handler.calls == 1

        state.get_state_for("q1").set_answer("yes")
        state.get_state_for("q1").set_answer("yes")
        assert handler.calls == 3
        assert adapter.take_events() == [("inserted", 1)]
        assert state.revealed_question_ids() == ["q1", "q2"]

    @pytest.mark.parametrize("mode", list(RecomputeMode))
    def test_events_independent_of_recompute_mode(self, mode, make_adapter):
        state = SurveyState(build_branching_survey(), recompute_mode=mode).init_filter()
        adapter = make_adapter(state)
        for value in ["yes", "no", "yes"]:
            state.get_state_for("q1").set_answer(value)
        assert adapter.take_events() == [("inserted", 1), ("removed", 1), ("inserted", 1), ("changed", 1)]


class TestAdapterConsistency:

    SCRIPT = [
        ("contact", {"email": "a@b.c"}),
        ("birth_year", "1990"),
        ("habits", ["smoking"]),
        ("cigarettes", "25"),
        ("heavy_use", "yes"),
        ("habits", ["none"]),
        ("phone_consent", "no"),
        ("habits", ["smoking", "alcohol"]),
        ("cigarettes", "2"),
        ("contact", {"phone": "555"}),
        ("birth_year", "2019"),
        ("habits", ["alcohol"]),
        ("contact", {"phone": ""}),
        ("heavy_use", "no"),
    ]

    def test_replayed_list_matches_revealed_prefix(self, intake_state, make_adapter):
        adapter = make_adapter(intake_state)
        assert adapter.slots == ["contact"]
        for question_id, value in self.SCRIPT:
            intake_state.get_state_for(question_id).set_answer(value)
            assert adapter.slots == intake_state.revealed_question_ids(), question_id
            assert 1 <= intake_state.visible_question_count <= intake_state.visible_size() + 1

    def test_reentrant_listener(self, branching_state, make_adapter):
        """A listener answering during a callback keeps the host list consistent."""
        adapter = make_adapter(branching_state)

        class AutoAnswer(OnSurveyStateChangedListener):
            def question_inserted(self, adapter_position):
                question = branching_state.get_question_for(adapter_position)
                if question is not None and question.id == "q2":
                    branching_state.get_state_for("q2").set_answer("5")

        branching_state.add_on_survey_state_changed_listener(AutoAnswer())
        branching_state.get_state_for("q1").set_answer("yes")
        assert adapter.take_events() == [("inserted", 1), ("inserted", 2)]
        assert adapter.slots == branching_state.revealed_question_ids() == ["q1", "q2", "q3"]

    def test_removed_listener_gets_nothing(self, branching_state, make_adapter):
        adapter = make_adapter(branching_state)
        branching_state.remove_on_survey_state_changed_listener(adapter)
        branching_state.get_state_for("q1").set_answer("yes")
        assert adapter.events == []


class TestAnswerExport:

    def test_all_answers_nested(self, intake_state):
        intake_state.get_state_for("contact").set_answer({"email": "a@b.c", "phone": "555"})
        intake_state.get_state_for("habits").set_answer(["smoking", "alcohol"])
        intake_state.get_state_for("birth_year").set_answer("1990")
        exported = intake_state.all_answers()
        assert exported == {
            "answers": {
                "contact": {"email": "a@b.c", "phone": "555"},
                "habits": ["smoking", "alcohol"],
                "birth_year": "1990",
            }
        }

    def test_unanswered_states_omitted_and_logged(self, branching_state, caplog):
        branching_state.get_state_for("q3").set_answer("done")
        with caplog.at_level(logging.DEBUG, logger="skiplogic"):
            exported = branching_state.all_answers()
        assert exported == {"answers": {"q3": "done"}}
        assert "q1" in caplog.text
        assert all(record.levelno < logging.WARNING for record in caplog.records)

    def test_json_export_round_trips(self, intake_state):
        intake_state.get_state_for("contact").set_answer({"email": "a@b.c"})
        intake_state.get_state_for("habits").set_answer(["none"])
        restored = answers_from_json(intake_state.all_answers_json())
        assert restored == {
            "contact": intake_state.answer_for("contact"),
            "habits": intake_state.answer_for("habits"),
        }

    def test_submit_without_handler(self, branching_state):
        with pytest.raises(MissingHandlerError):
            branching_state.submit_survey()

    def test_submit(self, branching_state):
        handler = CapturingSubmitHandler()
        branching_state.set_submit_survey_handler(handler)
        branching_state.get_state_for("q1").set_answer("no")
        branching_state.submit_survey()
        [(submit_data, answers_json)] = handler.submitted
        assert submit_data.button_title == "Done"
        assert json.loads(answers_json) == {"answers": {"q1": "no"}}
