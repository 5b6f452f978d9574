"""
Example survey definitions.

build_branching_survey() is the smallest survey with skip logic: a yes/no
question, a follow-up shown only for "yes", and an unconditional closer.

build_intake_survey() exercises every condition kind: composite sub-keys,
list membership, numeric comparisons, nested decisions and a custom
condition (the host decides "is_adult" from the birth year).
"""
from .conditions import (
    ComparisonOperator,
    CustomCondition,
    SimpleCondition,
    all_of,
    any_of,
)
from .model import Question, SubmitData, SurveyQuestions


def build_branching_survey() -> SurveyQuestions:
    return SurveyQuestions(
        questions=[
            Question(id="q1", text="Do you exercise?", question_type="segment_select",
                     options=["yes", "no"]),
            Question(
                id="q2",
                text="How many times a week?",
                condition=SimpleCondition("q1", ComparisonOperator.EQUALS, "yes"),
            ),
            Question(id="q3", text="Anything else to add?"),
        ],
        submit=SubmitData(button_title="Done"),
    )


def build_intake_survey() -> SurveyQuestions:
    survey = SurveyQuestions(submit=SubmitData(button_title="Send", url="https://example.org/intake"))

    contact = Question(
        id="contact",
        text="How can we reach you?",
        question_type="add_text_field",
        sub_questions=["email", "phone"],
    )

    birth_year = Question(
        id="birth_year",
        text="What year were you born?",
        validations=[{"type": "greater than", "value": 1900}],
    )

    habits = Question(
        id="habits",
        text="Which of these apply to you?",
        question_type="checkboxes",
        options=["smoking", "alcohol", "none"],
    )

    # Asked when the person smokes and is older than 15 by their own count
    cigarettes = Question(
        id="cigarettes",
        text="How many cigarettes per day?",
        condition=all_of(
            SimpleCondition("habits", ComparisonOperator.CONTAINS, "smoking"),
            CustomCondition(frozenset({"birth_year"}), extra={"min_age": 16}),
        ),
    )

    heavy_use = Question(
        id="heavy_use",
        text="Have you tried to cut down?",
        condition=any_of(
            SimpleCondition("cigarettes", ComparisonOperator.GREATER_EQUAL, "20"),
            all_of(
                SimpleCondition("habits", ComparisonOperator.CONTAINS, "alcohol"),
                SimpleCondition("habits", ComparisonOperator.CONTAINS, "smoking"),
            ),
        ),
    )

    phone_consent = Question(
        id="phone_consent",
        text="May we call you?",
        condition=SimpleCondition("contact", ComparisonOperator.NOT_EQUALS, "", sub_key="phone"),
    )

    survey.questions = [contact, birth_year, habits, cigarettes, heavy_use, phone_consent]
    return survey
