"""
Navigation Resolver.

Decides which page follows a question once it has been answered.
Pure: no I/O, no logging, no session access. The caller supplies the
answer and whether the question was reached from the check-answers page.
"""

from dataclasses import dataclass
from typing import Optional, Union

from prototyper.domain.schemas import (
    FINISH_VALUE,
    BranchingChoiceQuestion,
    NonBranchingQuestion,
    QuestionBase,
)

FINISH = "finish"
CHECK_ANSWERS = "check-answers"

Target = Union[int, str]


@dataclass(frozen=True)
class NavigationResult:
    """Where to go after a question.

    ``target`` is a 1-based question number, ``FINISH`` or
    ``CHECK_ANSWERS``. When ``redirect_to_current`` is set the target is
    the current question, shown again.
    """
    target: Target
    redirect_to_current: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.target in (FINISH, CHECK_ANSWERS)

    @property
    def page(self) -> str:
        """Page name of the target; Finish routes to check answers."""
        if self.is_terminal:
            return CHECK_ANSWERS
        return f"question-{self.target}"


def target_from_value(value: int) -> Target:
    """Map a stored ``next_question_value`` to a target."""
    return FINISH if value == FINISH_VALUE else value


def default_target(question_number: int, total_questions: int) -> Target:
    """The next question in sequence, or Finish after the last one."""
    return question_number + 1 if question_number < total_questions else FINISH


def static_target(question: QuestionBase, question_number: int, total_questions: int) -> Target:
    """
    Target known before any answer is given.

    Branching questions have no single static target and resolve to Finish
    here; callers that need per-option targets read ``options_branching``.
    """
    if isinstance(question, NonBranchingQuestion) and question.next_question_value is not None:
        return target_from_value(question.next_question_value)
    if isinstance(question, BranchingChoiceQuestion):
        return FINISH
    return default_target(question_number, total_questions)


def resolve(
    question: QuestionBase,
    question_number: int,
    total_questions: int,
    arrived_via_check_answers: bool = False,
    user_answer: Optional[object] = None,
) -> NavigationResult:
    """
    Resolve the page that follows ``question``.

    Args:
        question: The question just submitted
        question_number: Its 1-based position
        total_questions: Number of questions in the form
        arrived_via_check_answers: The question was opened from check answers
        user_answer: The stored answer, used by branching questions

    Returns:
        NavigationResult
    """
    if isinstance(question, BranchingChoiceQuestion):
        option = next(
            (o for o in question.options_branching if user_answer is not None and o.text_value == user_answer),
            None,
        )
        if option is None:
            return NavigationResult(target=question_number, redirect_to_current=True)
        return NavigationResult(target=target_from_value(option.next_question_value))

    if arrived_via_check_answers:
        return NavigationResult(target=CHECK_ANSWERS)

    return NavigationResult(target=static_target(question, question_number, total_questions))
