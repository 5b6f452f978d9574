"""
Tests for answer values.

These tests verify:
    - Each variant reports its own kind and only its own kind
    - Wrong-variant accessors fail instead of returning placeholders
    - Answers are immutable
    - Plain Python data converts into answers
"""

import dataclasses

import pytest

from skiplogic.answers import Answer, CompositeAnswer, ListAnswer, ScalarAnswer
from skiplogic.errors import AnswerTypeError


class TestScalarAnswer:
    """Test single text answers."""

    def test_scalar_kind(self):
        """Scalar answers report only the scalar kind."""
        answer = ScalarAnswer("yes")
        assert answer.is_scalar()
        assert not answer.is_list()
        assert not answer.is_composite()
        assert answer.as_text() == "yes"

    def test_scalar_wrong_accessors(self):
        """List and map accessors fail on a scalar."""
        answer = ScalarAnswer("yes")
        with pytest.raises(AnswerTypeError):
            answer.as_list()
        with pytest.raises(AnswerTypeError):
            answer.as_map()

    def test_scalar_requires_text(self):
        """Non-text scalar values are rejected."""
        with pytest.raises(AnswerTypeError):
            ScalarAnswer(5)

    def test_scalar_immutable(self):
        """Scalar answers should be immutable."""
        answer = ScalarAnswer("yes")
        with pytest.raises(dataclasses.FrozenInstanceError):
            answer.text = "no"

    def test_scalar_equality(self):
        assert ScalarAnswer("a") == ScalarAnswer("a")
        assert ScalarAnswer("a") != ScalarAnswer("b")


class TestListAnswer:
    """Test multi-selection answers."""

    def test_list_kind(self):
        answer = ListAnswer(["a", "b"])
        assert answer.is_list()
        assert not answer.is_scalar()
        assert answer.as_list() == ("a", "b")

    def test_list_is_stored_as_tuple(self):
        """The caller's list can change without touching the answer."""
        items = ["a", "b"]
        answer = ListAnswer(items)
        items.append("c")
        assert answer.as_list() == ("a", "b")

    def test_list_wrong_accessor(self):
        with pytest.raises(AnswerTypeError):
            ListAnswer(["a"]).as_text()

    def test_list_rejects_non_text_items(self):
        with pytest.raises(AnswerTypeError):
            ListAnswer(["a", 1])

    def test_empty_list(self):
        assert ListAnswer([]).as_list() == ()


class TestCompositeAnswer:
    """Test multi-part answers."""

    def test_composite_kind(self):
        answer = CompositeAnswer({"email": ScalarAnswer("a@b.c")})
        assert answer.is_composite()
        assert answer.as_map()["email"] == ScalarAnswer("a@b.c")

    def test_composite_fields_read_only(self):
        """The field mapping cannot be mutated after construction."""
        answer = CompositeAnswer({"email": ScalarAnswer("a@b.c")})
        with pytest.raises(TypeError):
            answer.as_map()["phone"] = ScalarAnswer("555")

    def test_composite_copies_input(self):
        fields = {"email": ScalarAnswer("a@b.c")}
        answer = CompositeAnswer(fields)
        fields["phone"] = ScalarAnswer("555")
        assert "phone" not in answer.as_map()

    def test_composite_requires_answers(self):
        with pytest.raises(AnswerTypeError):
            CompositeAnswer({"email": "a@b.c"})

    def test_composite_wrong_accessor(self):
        with pytest.raises(AnswerTypeError):
            CompositeAnswer({}).as_list()

    def test_composite_equality(self):
        left = CompositeAnswer({"a": ScalarAnswer("1"), "b": ListAnswer(["x"])})
        right = CompositeAnswer({"a": ScalarAnswer("1"), "b": ListAnswer(["x"])})
        assert left == right


class TestFromValue:
    """Test conversion from plain Python data."""

    def test_from_text(self):
        assert Answer.from_value("yes") == ScalarAnswer("yes")

    def test_from_list(self):
        assert Answer.from_value(["a", "b"]) == ListAnswer(("a", "b"))

    def test_from_nested_dict(self):
        answer = Answer.from_value({"contact": {"email": "a@b.c"}, "tags": ["x"]})
        assert answer == CompositeAnswer({
            "contact": CompositeAnswer({"email": ScalarAnswer("a@b.c")}),
            "tags": ListAnswer(("x",)),
        })

    def test_answer_passes_through(self):
        answer = ScalarAnswer("yes")
        assert Answer.from_value(answer) is answer

    def test_unsupported_value(self):
        with pytest.raises(AnswerTypeError):
            Answer.from_value(3.5)
        with pytest.raises(AnswerTypeError):
            Answer.from_value(None)
