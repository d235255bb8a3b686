"""
Structure Graph Builder.

Walks the question sequence and produces the structure page view model:
a list entry per question and Mermaid flowchart source with nodes
Q1..Qn and a single Finish node. Purely structural, it never looks at
live answers and never fails on a well-formed question list.
"""

import logging
from typing import List, Sequence

from prototyper.domain.schemas import (
    AnswerType,
    BranchingChoiceQuestion,
    BranchingOption,
    QuestionBase,
)
from prototyper.domain.services.navigation_resolver import FINISH, Target, static_target
from prototyper.web.viewmodels import BranchingOptionVM, StructureListItemVM, StructureVM

logger = logging.getLogger(__name__)

FINISH_NODE = 'Finish(["End"])'


def escape_for_mermaid(text: str) -> str:
    return str(text).replace('"', '\\"')


def option_target(option: BranchingOption) -> Target:
    # Anything other than a positive question number ends the form
    value = option.next_question_value
    return value if isinstance(value, int) and value > 0 else FINISH


def _node(target: Target) -> str:
    return "Finish" if target == FINISH else f"Q{target}"


def _list_item(question: QuestionBase, index: int, total: int) -> StructureListItemVM:
    item = StructureListItemVM(
        index=index,
        answer_type=question.answer_type,
        question_text=question.question_text,
        options=getattr(question, "options", None),
    )

    if isinstance(question, BranchingChoiceQuestion):
        item.branching_options = [
            BranchingOptionVM(label=option.text_value, next=option_target(option))
            for option in question.options_branching
        ]
    else:
        target = static_target(question, index, total)
        # Sequential steps are implied by the list order
        if target == FINISH or target != index + 1:
            item.show_next_jump = True
            item.next_jump_target = target

    if question.answer_type == AnswerType.DATE_OF_BIRTH.value:
        item.min_age = getattr(question, "date_of_birth_minimum_age", None)
        item.max_age = getattr(question, "date_of_birth_maximum_age", None)

    return item


def build_mermaid(questions: Sequence[QuestionBase]) -> str:
    """Flowchart source for the question graph."""
    total = len(questions)
    lines: List[str] = ["flowchart TD"]

    for i, question in enumerate(questions, start=1):
        lines.append(f'Q{i}["{escape_for_mermaid(question.question_text)}"]')

        if isinstance(question, BranchingChoiceQuestion):
            if not question.options_branching:
                logger.warning(f"Branching question {i} has no options")
            for option in question.options_branching:
                label = escape_for_mermaid(option.text_value)
                lines.append(f"Q{i} -->|{label}| {_node(option_target(option))}")
        else:
            lines.append(f"Q{i} --> {_node(static_target(question, i, total))}")

    lines.append(FINISH_NODE)
    return "\n".join(lines)


def build_structure_vm(questions: Sequence[QuestionBase]) -> StructureVM:
    """Build the structure page view model for a question sequence."""
    total = len(questions)
    items = [_list_item(q, i, total) for i, q in enumerate(questions, start=1)]
    return StructureVM(list=items, mermaid=build_mermaid(questions))
