"""Tests for the FormDefinition schema."""

import pytest
from pydantic import ValidationError

from prototyper.domain.schemas import (
    AnswerType,
    BranchingChoiceQuestion,
    FormDefinition,
    NonBranchingQuestion,
)


class TestQuestionParsing:

    def test_branching_choice_selects_branching_model(self, branching_form):
        question = branching_form.questions[1]

        assert isinstance(question, BranchingChoiceQuestion)
        assert [o.text_value for o in question.options_branching] == ["Yes", "No"]
        assert question.options_branching[0].next_question_value == -1

    def test_other_types_select_non_branching_model(self, linear_form):
        assert all(isinstance(q, NonBranchingQuestion) for q in linear_form.questions)

    def test_unknown_answer_type_is_accepted(self, form_factory):
        form = form_factory([{"answer_type": "hologram", "question_text": "?"}])

        assert form.questions[0].answer_type == "hologram"
        assert AnswerType.parse("hologram") is None

    def test_missing_question_text_is_rejected(self, form_factory):
        with pytest.raises(ValidationError):
            form_factory([{"answer_type": "text"}])

    def test_duration_must_be_positive(self, form_factory):
        with pytest.raises(ValidationError):
            form_factory([], duration=0)


class TestNormalisation:

    def test_nulls_are_dropped(self, form_factory):
        form = form_factory(
            [{"answer_type": "text", "question_text": "Q", "hint_text": None, "next_question_value": None}],
            description=None,
        )

        assert form.description == ""
        assert form.questions[0].hint_text is None
        assert form.questions[0].next_question_value is None

    def test_age_bounds_cleared_on_other_types(self, form_factory):
        form = form_factory([{
            "answer_type": "date",
            "question_text": "When?",
            "date_of_birth_minimum_age": 18,
        }])

        assert form.questions[0].date_of_birth_minimum_age is None

    def test_age_bounds_kept_on_date_of_birth(self, form_factory):
        form = form_factory([{
            "answer_type": "date_of_birth",
            "question_text": "When were you born?",
            "date_of_birth_minimum_age": 18,
            "date_of_birth_maximum_age": 65,
        }])

        assert form.questions[0].date_of_birth_minimum_age == 18
        assert form.questions[0].date_of_birth_maximum_age == 65

    def test_options_cleared_on_non_choice_types(self, form_factory):
        form = form_factory([
            {"answer_type": "text", "question_text": "Q", "options": ["a"]},
            {"answer_type": "multiple_choice", "question_text": "Q", "options": ["a", "b"]},
        ])

        assert form.questions[0].options is None
        assert form.questions[1].options == ["a", "b"]

    def test_display_hint_text_drops_one_full_stop(self, form_factory):
        form = form_factory([{"answer_type": "text", "question_text": "Q", "hint_text": "Like this.."}])

        assert form.questions[0].display_hint_text == "Like this."


class TestProgressIndicators:

    def test_defaults_on_for_linear_form(self, linear_form):
        assert linear_form.show_progress_indicators is None
        assert linear_form.progress_indicators_enabled is True

    def test_always_off_with_branching(self, form_factory, branching_form):
        forced = form_factory(
            [q.model_dump() for q in branching_form.questions],
            show_progress_indicators=True,
        )

        assert branching_form.has_branching
        assert forced.progress_indicators_enabled is False

    def test_explicit_false_is_respected(self, form_factory):
        form = form_factory([{"answer_type": "text", "question_text": "Q"}], show_progress_indicators=False)

        assert form.progress_indicators_enabled is False

    def test_model_is_frozen(self, linear_form):
        with pytest.raises(ValidationError):
            linear_form.title = "Changed"

    def test_total_questions(self, linear_form):
        assert linear_form.total_questions == 3
        assert FormDefinition(title="Empty").total_questions == 0
