"""
Check-Answers Formatter.

Answers are unknown when pages are compiled, so each summary row holds a
``CompiledExpression`` that the template engine evaluates against the
live answers at render time. Multi-field answers drop absent subfields
and put each present one on its own line.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from prototyper.domain.expressions import (
    CompiledExpression,
    NOT_PROVIDED,
    all_of,
    answer_key,
    answer_ref,
    apply_filter,
    concat,
    conditional,
    join_present_lines,
    literal,
    present_or,
    quote,
)
from prototyper.domain.schemas import AnswerType, FormDefinition, QuestionBase
from prototyper.domain.services.country_data import CHOOSE_VALUE

logger = logging.getLogger(__name__)

CHECK_ANSWERS_REFERRER = "referrer=check-answers"
MULTILINE_ROW_CLASS = "force-multiline-row"
MULTILINE_VALUE_CLASS = "force-multiline-value"


@dataclass(frozen=True)
class CheckAnswersRow:
    """One summary-list row on the check-answers page."""
    question_number: int
    question_text: str
    value: CompiledExpression
    change_href: str

    @property
    def row_classes(self) -> str:
        return MULTILINE_ROW_CLASS if self.value.is_multiline else ""

    @property
    def value_classes(self) -> str:
        return MULTILINE_VALUE_CLASS if self.value.is_multiline else ""

    def to_macro_row(self) -> Dict[str, object]:
        """Row options for the ``govukSummaryList`` macro."""
        return {
            "actions": {
                "items": [{
                    "href": self.change_href,
                    "text": "Change",
                    "visuallyHiddenText": self.question_text,
                }],
            },
            "classes": self.row_classes,
            "key": {"text": self.question_text},
            "value": {"classes": self.value_classes, "text": self.value},
        }


# ---------------------------------------------------------------------------
# Per answer type expressions
# ---------------------------------------------------------------------------

def _scalar(n: int) -> CompiledExpression:
    return present_or(answer_ref(n))


def _currency(n: int) -> CompiledExpression:
    value = answer_ref(n)
    return present_or(concat(literal("£"), value), condition=value)


def _multiple_choice(n: int) -> CompiledExpression:
    value = answer_ref(n)
    as_text = conditional(
        value,
        CompiledExpression(f"not {apply_filter(value, 'isArray').source}"),
        apply_filter(value, "formatList"),
    )
    return conditional(
        literal(NOT_PROVIDED),
        CompiledExpression(f"not {value.source}"),
        CompiledExpression(f"({as_text.source})"),
    )


def _date_complete(n: int, prefix: Optional[str] = None) -> CompiledExpression:
    def part(name: str) -> CompiledExpression:
        return answer_ref(n, f"{prefix}-{name}" if prefix else name)
    return all_of(part("day"), part("month"), part("year"))


def _formatted_date(n: int, prefix: Optional[str] = None) -> CompiledExpression:
    data = CompiledExpression("data")
    iso = apply_filter(data, "isoDateFromDateInput", literal(answer_key(n, prefix)))
    return apply_filter(iso, "govukDate")


def _date(n: int) -> CompiledExpression:
    return present_or(_formatted_date(n), condition=_date_complete(n))


def _subfields(n: int, names: Tuple[str, ...]) -> List[CompiledExpression]:
    return [answer_ref(n, name) for name in names]


def _address(n: int) -> CompiledExpression:
    return join_present_lines(_subfields(
        n, ("addressLine1", "addressLine2", "addressTown", "addressCounty", "addressPostcode"),
    ))


def _bank_details(n: int) -> CompiledExpression:
    return join_present_lines(_subfields(
        n, ("nameOnTheAccount", "sortCode", "accountNumber", "rollNumber"),
    ))


def _emergency_contact(n: int) -> CompiledExpression:
    return join_present_lines(_subfields(
        n, ("fullName", "relationship", "phoneNumber", "alternativePhoneNumber"),
    ))


def _chosen(n: int, subfield: str) -> CompiledExpression:
    value = answer_ref(n, subfield)
    return conditional(
        value,
        CompiledExpression(f"{value.source} != {quote(CHOOSE_VALUE)}"),
        literal(""),
    )


def _dated(n: int, subfield: str, label: str) -> CompiledExpression:
    text = concat(literal(label), CompiledExpression(f"({_formatted_date(n, subfield).source})"))
    return CompiledExpression(f"({conditional(text, _date_complete(n, subfield), literal('')).source})")


def _passport_information(n: int) -> CompiledExpression:
    return join_present_lines([
        answer_ref(n, "passportNumber"),
        CompiledExpression(f"({_chosen(n, 'countryOfIssue').source})"),
        _dated(n, "issueDate", "Issued on "),
        _dated(n, "expiryDate", "Expires on "),
        CompiledExpression(f"({_chosen(n, 'nationality').source})"),
    ])


_FORMATTERS: Dict[AnswerType, Callable[[int], CompiledExpression]] = {
    AnswerType.ADDRESS: _address,
    AnswerType.BANK_DETAILS: _bank_details,
    AnswerType.BRANCHING_CHOICE: _scalar,
    AnswerType.COUNTRY: _scalar,
    AnswerType.DATE: _date,
    AnswerType.DATE_OF_BIRTH: _date,
    AnswerType.EMAIL: _scalar,
    AnswerType.EMERGENCY_CONTACT_DETAILS: _emergency_contact,
    AnswerType.FILE_UPLOAD: _scalar,
    AnswerType.GBP_CURRENCY_AMOUNT: _currency,
    AnswerType.MULTIPLE_CHOICE: _multiple_choice,
    AnswerType.NAME: _scalar,
    AnswerType.NATIONAL_INSURANCE_NUMBER: _scalar,
    AnswerType.NATIONALITY: _scalar,
    AnswerType.PASSPORT_INFORMATION: _passport_information,
    AnswerType.PHONE_NUMBER: _scalar,
    AnswerType.SINGLE_CHOICE: _scalar,
    AnswerType.TAX_CODE: _scalar,
    AnswerType.TEXT: _scalar,
    AnswerType.TEXT_AREA: _scalar,
    AnswerType.VAT_REGISTRATION_NUMBER: _scalar,
}


def format_answer(question: QuestionBase, question_number: int) -> CompiledExpression:
    """Expression that renders the stored answer to ``question``."""
    answer_type = AnswerType.parse(question.answer_type)
    formatter = _FORMATTERS.get(answer_type) if answer_type else None
    # Unknown answer types still get a row; they may have stored a plain value
    return (formatter or _scalar)(question_number)


def build_check_answers_rows(form: FormDefinition, url_prefix: str) -> List[CheckAnswersRow]:
    """Build one row per question, each linking back to its question page."""
    rows = []
    for index, question in enumerate(form.questions):
        number = index + 1
        rows.append(CheckAnswersRow(
            question_number=number,
            question_text=question.question_text,
            value=format_answer(question, number),
            change_href=f"/{url_prefix}/question-{number}?{CHECK_ANSWERS_REFERRER}",
        ))
    logger.debug(f"Built {len(rows)} check answers rows for '{form.title}'")
    return rows
