"""
Page Assembler.

Builds the complete template source for every page of a form: a shared
base layout, the start page, one page per question, check answers and
confirmation. Pages are built in two flavours:

- live: rendered by the preview, question forms post to
  ``question-<n>/submit`` so navigation is resolved against the answer
- download: a standalone copy, question forms post straight to the
  statically known next page
"""

import json
import logging
from typing import Dict, Optional

from prototyper.core.assets import form_script_source
from prototyper.domain.expressions import to_template_literal
from prototyper.domain.schemas import FormDefinition, NonBranchingQuestion
from prototyper.domain.services import page_templates
from prototyper.domain.services.check_answers_formatter import build_check_answers_rows
from prototyper.domain.services.field_compiler import CompiledField, compile_field
from prototyper.domain.services.navigation_resolver import (
    CHECK_ANSWERS,
    FINISH,
    default_target,
    target_from_value,
)
from prototyper.domain.services.page_templates import QuestionHeaderOptions
from prototyper.settings import get_settings

logger = logging.getLogger(__name__)

START = "start"
CONFIRMATION = "confirmation"


class InvalidQuestionIndexError(ValueError):
    """Raised when a question page is requested for an index outside the form."""
    pass


def _design_system(design_system: Optional[str]) -> str:
    return design_system or get_settings().default_design_system


def _question_at(form: FormDefinition, question_index: int):
    if (
        isinstance(question_index, bool)
        or not isinstance(question_index, int)
        or question_index < 0
        or question_index >= form.total_questions
    ):
        raise InvalidQuestionIndexError(
            f"Invalid question index: {question_index!r} "
            f"(form has {form.total_questions} questions)"
        )
    return form.questions[question_index]


def _page_href(url_prefix: str, page: str) -> str:
    return f"/{url_prefix}/{page}"


def static_next_page(form: FormDefinition, question_index: int) -> str:
    """
    Page a question posts to in the downloadable copy.

    An explicit ``next_question_value`` wins, otherwise the next question
    in sequence, otherwise check answers. Branching questions fall back to
    the sequence because their target depends on the answer.
    """
    question = _question_at(form, question_index)
    number = question_index + 1
    if isinstance(question, NonBranchingQuestion) and question.next_question_value is not None:
        target = target_from_value(question.next_question_value)
    else:
        target = default_target(number, form.total_questions)
    return CHECK_ANSWERS if target == FINISH else f"question-{target}"


def previous_page(question_index: int) -> str:
    return START if question_index == 0 else f"question-{question_index}"


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

def build_base_page(design_system: Optional[str] = None) -> str:
    settings = get_settings()
    return page_templates.base_page(
        asset_path=settings.asset_path,
        design_system=_design_system(design_system),
        form_script_path=settings.form_script_path,
    )


def build_start_page(
    form: FormDefinition,
    url_prefix: str,
    design_system: Optional[str] = None,
    show_demo_warning: bool = False,
) -> str:
    return page_templates.start_page(form, url_prefix, _design_system(design_system), show_demo_warning)


def compile_question(form: FormDefinition, question_index: int) -> CompiledField:
    """Compile the field for the question at a 0-based index."""
    question = _question_at(form, question_index)
    total = form.total_questions if form.progress_indicators_enabled else None
    return compile_field(question, question_index + 1, questions_as_headings=True, total_questions=total)


def build_question_page(
    form: FormDefinition,
    url_prefix: str,
    question_index: int,
    design_system: Optional[str] = None,
    show_demo_warning: bool = False,
    live: bool = False,
) -> str:
    """
    Build the page for the question at a 0-based index.

    Raises:
        InvalidQuestionIndexError: If the index is negative, not an
            integer, or not less than the number of questions
    """
    question = _question_at(form, question_index)
    number = question_index + 1

    if live:
        form_action = _page_href(url_prefix, f"question-{number}/submit")
    else:
        form_action = _page_href(url_prefix, static_next_page(form, question_index))

    header = page_templates.question_header(QuestionHeaderOptions(
        title=form.title,
        question_title=question.question_text,
        back_link_href=_page_href(url_prefix, previous_page(question_index)),
        form_action=form_action,
        design_system=_design_system(design_system),
        show_demo_warning=show_demo_warning,
        detailed_explanation=question.detailed_explanation,
    ))
    field = compile_question(form, question_index)
    logger.debug(f"Assembled question page {number} of '{form.title}' ({question.answer_type})")
    return "\n".join([header, field.source, page_templates.question_footer()])


def build_check_answers_page(
    form: FormDefinition,
    url_prefix: str,
    design_system: Optional[str] = None,
    show_demo_warning: bool = False,
) -> str:
    rows = build_check_answers_rows(form, url_prefix)
    summary = to_template_literal({"rows": [row.to_macro_row() for row in rows]})
    if form.total_questions:
        back_link = _page_href(url_prefix, f"question-{form.total_questions}")
    else:
        back_link = _page_href(url_prefix, START)
    return "\n".join([
        page_templates.check_answers_header(
            form.title, back_link, _design_system(design_system), show_demo_warning,
        ),
        f"{{{{ govukSummaryList({summary}) }}}}",
        page_templates.check_answers_footer(url_prefix),
    ])


def build_confirmation_page(
    form: FormDefinition,
    design_system: Optional[str] = None,
    show_demo_warning: bool = False,
) -> str:
    return page_templates.confirmation_page(form, _design_system(design_system), show_demo_warning)


# ---------------------------------------------------------------------------
# Downloadable copy
# ---------------------------------------------------------------------------

def assemble_downloadable_pages(
    form: FormDefinition,
    url_prefix: str,
    design_system: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build every file of the downloadable prototype.

    Returns:
        File path to file content, in page order, then the form definition
        as ``<url_prefix>.json`` and the browser validation script
    """
    design_system = _design_system(design_system)
    views = f"views/{url_prefix}"

    files: Dict[str, str] = {
        f"views/{page_templates.BASE_TEMPLATE_NAME}": build_base_page(design_system),
        f"{views}/start.njk": build_start_page(form, url_prefix, design_system),
    }
    for index in range(form.total_questions):
        files[f"{views}/question-{index + 1}.njk"] = build_question_page(
            form, url_prefix, index, design_system,
        )
    files[f"{views}/check-answers.njk"] = build_check_answers_page(form, url_prefix, design_system)
    files[f"{views}/confirmation.njk"] = build_confirmation_page(form, design_system)
    files[f"{url_prefix}.json"] = json.dumps(form.model_dump(mode="json", exclude_none=True), indent=2)
    files[get_settings().form_script_path.lstrip("/")] = form_script_source()

    logger.info(f"Assembled {len(files)} files for '{form.title}' ({design_system})")
    return files
