"""Tests for the Navigation Resolver."""

import pytest

from prototyper.domain.services.navigation_resolver import (
    CHECK_ANSWERS,
    FINISH,
    NavigationResult,
    default_target,
    resolve,
    static_target,
)


@pytest.fixture
def jump_form(form_factory):
    """Q1 jumps straight to Q3, Q2 ends the form, Q3 is last."""
    return form_factory([
        {"answer_type": "text", "question_text": "One", "next_question_value": 3},
        {"answer_type": "text", "question_text": "Two", "next_question_value": -1},
        {"answer_type": "text", "question_text": "Three"},
    ])


class TestSequentialNavigation:

    def test_next_in_sequence(self, linear_form):
        result = resolve(linear_form.questions[0], 1, 3)

        assert result == NavigationResult(target=2)
        assert result.page == "question-2"
        assert not result.is_terminal

    def test_last_question_finishes(self, linear_form):
        result = resolve(linear_form.questions[2], 3, 3)

        assert result.target == FINISH
        assert result.page == CHECK_ANSWERS

    def test_default_target(self):
        assert default_target(1, 2) == 2
        assert default_target(2, 2) == FINISH


class TestExplicitTargets:

    def test_explicit_jump(self, jump_form):
        assert resolve(jump_form.questions[0], 1, 3).target == 3

    def test_explicit_finish(self, jump_form):
        assert resolve(jump_form.questions[1], 2, 3).target == FINISH

    def test_check_answers_shortcut_beats_explicit_target(self, jump_form):
        result = resolve(jump_form.questions[0], 1, 3, arrived_via_check_answers=True)

        assert result.target == CHECK_ANSWERS
        assert result.is_terminal


class TestBranching:

    @pytest.fixture
    def branching_question(self, branching_form):
        return branching_form.questions[1]

    def test_option_to_finish(self, branching_question):
        assert resolve(branching_question, 2, 3, user_answer="Yes").target == FINISH

    def test_option_to_question(self, branching_question):
        assert resolve(branching_question, 2, 3, user_answer="No").target == 3

    @pytest.mark.parametrize("user_answer", [None, "", "Maybe"])
    def test_unmatched_answer_reshows_question(self, branching_question, user_answer):
        result = resolve(branching_question, 2, 3, user_answer=user_answer)

        assert result.redirect_to_current
        assert result.target == 2
        assert result.page == "question-2"

    def test_branching_ignores_check_answers_shortcut(self, branching_question):
        result = resolve(branching_question, 2, 3, arrived_via_check_answers=True, user_answer="No")

        assert result.target == 3

    def test_static_target_of_branching_is_finish(self, branching_question):
        assert static_target(branching_question, 2, 3) == FINISH


class TestResolverProperties:

    def test_sequential_targets_always_move_forward(self, form_factory):
        questions = [{"answer_type": "text", "question_text": f"Q{i}"} for i in range(1, 8)]
        form = form_factory(questions)

        for number, question in enumerate(form.questions, start=1):
            target = resolve(question, number, form.total_questions).target
            assert target == FINISH or target > number
