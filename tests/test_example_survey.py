"""
Test the example survey definitions.

Validates that the builders create the expected questions and conditions.
"""

from skiplogic.conditions import CustomCondition, DecisionCondition
from skiplogic.examples import build_branching_survey, build_intake_survey


def test_branching_survey_structure():
    survey = build_branching_survey()
    assert survey.question_ids() == ["q1", "q2", "q3"]
    assert survey.get_question("q1").condition is None
    assert survey.get_question("q2").condition.question_id == "q1"
    assert survey.get_question("q3").condition is None
    assert survey.submit.button_title == "Done"


def test_intake_survey_structure():
    survey = build_intake_survey()
    assert len(survey) == 6
    assert survey.get_question("contact").sub_questions == ["email", "phone"]

    cigarettes = survey.get_question("cigarettes").condition
    assert isinstance(cigarettes, DecisionCondition)
    assert any(isinstance(sub, CustomCondition) for sub in cigarettes.subconditions)

    assert survey.get_question("phone_consent").condition.sub_key == "phone"
