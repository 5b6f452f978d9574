"""
Demo: Walk the example surveys, print adapter events, the answer export
and an analyzer report.
"""

import logging

from skiplogic.analyzer import analyze_survey
from skiplogic.examples import build_branching_survey, build_intake_survey
from skiplogic.interfaces import CustomConditionHandler, OnSurveyStateChangedListener
from skiplogic.serialization import survey_to_yaml
from skiplogic.survey_state import SurveyState


class PrintingAdapter(OnSurveyStateChangedListener):
    """Prints every event the host list would receive."""

    def __init__(self, state):
        self.state = state

    def _label(self, position):
        question = self.state.get_question_for(position)
        return question.id if question is not None else "<submit>"

    def question_inserted(self, adapter_position):
        print(f"    + inserted {self._label(adapter_position)} at {adapter_position}")

    def question_removed(self, adapter_position):
        print(f"    - removed position {adapter_position}")

    def question_changed(self, adapter_position):
        print(f"    ~ changed {adapter_position} to {self._label(adapter_position)}")

    def submit_button_inserted(self, adapter_position):
        print(f"    + submit button at {adapter_position}")


class AgeHandler(CustomConditionHandler):
    def is_condition_met(self, answers, extra):
        year = answers.get("birth_year")
        return year is not None and 2026 - int(year.as_text()) >= extra["min_age"]


def walk(state, script):
    state.add_on_survey_state_changed_listener(PrintingAdapter(state))
    print(f"  revealed: {state.revealed_question_ids()}")
    for question_id, value in script:
        print(f"  answer {question_id} = {value!r}")
        state.get_state_for(question_id).set_answer(value)
        print(f"  revealed: {state.revealed_question_ids()}")
    print(f"  export: {state.all_answers_json()}")
    print()


def print_report(report):
    """Pretty-print a SurveyReport."""
    print("=" * 70)
    print("SURVEY ANALYSIS REPORT")
    print("=" * 70)
    print(f"  Questions:             {report.total_questions}")
    print(f"  Conditional:           {report.conditional_questions}")
    print(f"  Custom conditions:     {report.custom_conditions}")
    print(f"  Max condition depth:   {report.max_condition_depth}")
    print(f"  Avg condition depth:   {report.avg_condition_depth:.2f}")
    for question_id, dependents in sorted(report.dependents.items()):
        print(f"    {question_id} -> {', '.join(dependents)}")
    if report.warnings:
        print("  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("  No warnings - survey looks clean!")
    print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("Branching survey")
    walk(
        SurveyState(build_branching_survey()).init_filter(),
        [("q1", "yes"), ("q1", "no"), ("q1", "yes"), ("q2", "3"), ("q3", "nothing")],
    )

    intake = build_intake_survey()
    print("Intake survey")
    walk(
        SurveyState(intake).set_custom_condition_handler(AgeHandler()).init_filter(),
        [
            ("contact", {"email": "ada@example.org", "phone": "555"}),
            ("birth_year", "1990"),
            ("habits", ["smoking", "alcohol"]),
            ("cigarettes", "25"),
        ],
    )

    print_report(analyze_survey(intake))

    with open("intake_survey.yaml", "w") as f:
        f.write(survey_to_yaml(intake))
    print("Survey definition exported to intake_survey.yaml")
