"""
Live preview of a form.

Renders compiled pages against one session's answers and keeps the
navigation history used for back links. A ``PreviewSession`` belongs to
a single user session and is only touched by that session's requests.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from jinja2 import ChoiceLoader, DictLoader, Environment

from prototyper.domain.schemas import FormDefinition
from prototyper.domain.services import page_assembler
from prototyper.domain.services.check_answers_formatter import CHECK_ANSWERS_REFERRER
from prototyper.domain.services.client_validation import ValidationOutcome, validate_submission
from prototyper.domain.services.navigation_resolver import CHECK_ANSWERS, NavigationResult, resolve
from prototyper.domain.services.page_templates import BASE_TEMPLATE_NAME
from prototyper.settings import get_settings
from prototyper.web.environment import frontend_environment

logger = logging.getLogger(__name__)


class PreviewPageNotFoundError(LookupError):
    """Raised when a preview page does not exist in the form."""
    pass


@dataclass
class PreviewSession:
    """Live Answer Store, navigation history and pending errors for one form."""
    answers: Dict[str, Any] = field(default_factory=dict)
    history: List[str] = field(default_factory=list)
    # Page name to {control name: message} from a rejected submission
    field_errors: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def merge_answers(self, body: Mapping[str, Any]) -> None:
        self.answers.update(body)

    def reset(self) -> None:
        self.answers.clear()
        self.history.clear()
        self.field_errors.clear()

    def take_errors(self, page: str) -> Dict[str, str]:
        """Errors to show on ``page``; they are shown once."""
        return self.field_errors.pop(page, {})

    def record_visit(self, url: str, back: bool = False) -> None:
        """
        Track a page view.

        Going back drops the latest entry; any other visit is pushed
        unless it repeats the current one.
        """
        if back:
            if self.history:
                self.history.pop()
        elif not self.history or self.history[-1] != url:
            self.history.append(url)

    def back_link_href(self) -> Optional[str]:
        """Previous page in the history, marked as a back navigation."""
        if len(self.history) < 2:
            return None
        parts = urlsplit(self.history[-2])
        query = dict(parse_qsl(parts.query))
        query["back"] = "true"
        return f"{parts.path}?{urlencode(query)}"


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of submitting one question page."""
    redirect_url: str
    navigation: Optional[NavigationResult] = None
    validation: ValidationOutcome = field(default_factory=ValidationOutcome)


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

def valid_pages(form: FormDefinition) -> List[str]:
    pages = [page_assembler.START, CHECK_ANSWERS, page_assembler.CONFIRMATION]
    pages.extend(f"question-{n}" for n in range(1, form.total_questions + 1))
    return pages


def _question_number(page: str) -> int:
    return int(page.split("-", 1)[1])


def build_live_page(
    form: FormDefinition,
    page: str,
    url_prefix: str,
    design_system: Optional[str] = None,
) -> str:
    """
    Template source of one preview page.

    Raises:
        PreviewPageNotFoundError: If ``page`` is not a page of the form
    """
    if page not in valid_pages(form):
        raise PreviewPageNotFoundError(f"Page '{page}' does not exist in '{form.title}'")

    show_demo_warning = get_settings().show_demo_warning_live
    if page == page_assembler.START:
        return page_assembler.build_start_page(form, url_prefix, design_system, show_demo_warning)
    if page == CHECK_ANSWERS:
        return page_assembler.build_check_answers_page(form, url_prefix, design_system, show_demo_warning)
    if page == page_assembler.CONFIRMATION:
        return page_assembler.build_confirmation_page(form, design_system, show_demo_warning)
    return page_assembler.build_question_page(
        form,
        url_prefix,
        _question_number(page) - 1,
        design_system,
        show_demo_warning,
        live=True,
    )


def render_page(
    form: FormDefinition,
    page: str,
    url_prefix: str,
    session: PreviewSession,
    env: Optional[Environment] = None,
    url: Optional[str] = None,
    back: bool = False,
    design_system: Optional[str] = None,
) -> str:
    """
    Render a preview page for a session.

    Args:
        form: The form being previewed
        page: Page name (``start``, ``question-<n>``, ``check-answers``, ``confirmation``)
        url_prefix: URL prefix of the preview
        session: The viewer's answers, history and pending errors
        env: Environment able to load the GOV.UK component templates,
            defaults to one over the configured frontend template directories
        url: Requested URL, recorded in the history
        back: The page was reached through a back link
        design_system: Overrides the configured default

    Returns:
        Rendered HTML

    Raises:
        PreviewPageNotFoundError: If ``page`` is not a page of the form
    """
    source = build_live_page(form, page, url_prefix, design_system)
    env = env or frontend_environment()

    if page == page_assembler.CONFIRMATION:
        session.reset()
    else:
        session.record_visit(url or f"/{url_prefix}/{page}", back=back)
    errors = session.take_errors(page)

    loader = ChoiceLoader([
        DictLoader({
            BASE_TEMPLATE_NAME: page_assembler.build_base_page(design_system),
            f"{page}.njk": source,
        }),
        env.loader,
    ])
    template = env.overlay(loader=loader).get_template(f"{page}.njk")
    return template.render(
        backLinkHref=session.back_link_href(),
        data=session.answers,
        errors=errors,
        errorList=[{"text": message, "href": f"#{name}"} for name, message in errors.items()],
    )


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def submit_question(
    form: FormDefinition,
    url_prefix: str,
    question_number: int,
    body: Mapping[str, Any],
    session: PreviewSession,
    referrer: str = "",
    today: Optional[date] = None,
) -> SubmitResult:
    """
    Store a submitted question page and work out where to go next.

    The submitted body replaces the question's stored answers, so a
    control left out of the body (no box ticked) is cleared. The body is
    stored before validation so a re-shown page keeps what the user
    typed; a rejected submission leaves its errors for the next render.

    Raises:
        PreviewPageNotFoundError: If ``question_number`` is outside the form
    """
    if not 1 <= question_number <= form.total_questions:
        raise PreviewPageNotFoundError(f"Question {question_number} does not exist in '{form.title}'")

    page = f"question-{question_number}"
    current = f"/{url_prefix}/{page}"
    compiled = page_assembler.compile_question(form, question_number - 1)

    for control in compiled.controls:
        for key in control.value_keys:
            if key not in body:
                session.answers.pop(key, None)
    session.merge_answers(body)

    outcome = validate_submission(compiled.controls, body, today=today)
    if outcome.blocked:
        session.field_errors[page] = dict(outcome.errors)
        logger.info(f"Question {question_number} of '{form.title}' failed validation")
        return SubmitResult(redirect_url=current, validation=outcome)
    session.field_errors.pop(page, None)

    question = form.questions[question_number - 1]
    result = resolve(
        question,
        question_number,
        form.total_questions,
        arrived_via_check_answers=CHECK_ANSWERS_REFERRER in (referrer or ""),
        user_answer=session.answers.get(page),
    )
    redirect_url = current if result.redirect_to_current else f"/{url_prefix}/{result.page}"
    logger.debug(f"Question {question_number} of '{form.title}' -> {redirect_url}")
    return SubmitResult(redirect_url=redirect_url, navigation=result, validation=outcome)
