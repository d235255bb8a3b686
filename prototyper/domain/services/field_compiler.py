"""
Field Compiler.

Turns one question into the template source for its input controls.
Each answer type has one entry in ``_COMPILERS``; every control it emits
references its live answer through ``data['question-<n>[-<subfield>]']``
and carries the validation attributes the client validation engine
checks on submission.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from prototyper.domain.expressions import (
    CompiledExpression,
    answer_key,
    answer_ref,
    apply_filter,
    conditional,
    literal,
    quote,
    to_template_literal,
)
from prototyper.domain.schemas import AnswerType, BranchingChoiceQuestion, QuestionBase
from prototyper.domain.services import field_attributes as fa
from prototyper.domain.services.country_data import country_items, nationality_items
from prototyper.domain.services.field_attributes import Attr

logger = logging.getLogger(__name__)


class ControlKind(str, Enum):
    """Input control families, as seen by the validation engine."""
    INPUT = "input"
    SELECT = "select"
    RADIOS = "radios"
    CHECKBOXES = "checkboxes"
    DATE_INPUT = "date_input"
    TEXTAREA = "textarea"
    FILE_UPLOAD = "file_upload"


@dataclass(frozen=True)
class FieldControl:
    """One input control and its validation attributes.

    For date inputs ``name`` is the prefix shared by the ``-day``,
    ``-month`` and ``-year`` values.
    """
    kind: ControlKind
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def value_keys(self) -> List[str]:
        """Live Answer Store keys this control submits."""
        if self.kind == ControlKind.DATE_INPUT:
            return [f"{self.name}-{part}" for part in ("day", "month", "year")]
        return [self.name]


@dataclass(frozen=True)
class CompiledField:
    """Template source for a question's controls."""
    source: str
    controls: List[FieldControl] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.source


@dataclass
class _FieldContext:
    question: QuestionBase
    number: int
    as_heading: bool

    @property
    def size(self) -> str:
        return "l" if self.as_heading else "m"

    @property
    def hint(self) -> Optional[Dict[str, str]]:
        hint_text = self.question.display_hint_text
        return {"text": hint_text} if hint_text else None

    @property
    def required_error(self) -> str:
        return self.question.required_error_text or fa.DEFAULT_REQUIRED_ERROR

    def key(self, subfield: Optional[str] = None) -> str:
        return answer_key(self.number, subfield)

    def value(self, subfield: Optional[str] = None) -> CompiledExpression:
        return answer_ref(self.number, subfield)

    def legend(self) -> Dict[str, Any]:
        return {
            "classes": f"govuk-fieldset__legend--{self.size}",
            "isPageHeading": self.as_heading,
            "text": self.question.question_text,
        }

    def label(self) -> Dict[str, Any]:
        return {
            "classes": f"govuk-label--{self.size}",
            "isPageHeading": self.as_heading,
            "text": self.question.question_text,
        }

    def heading(self) -> str:
        tag = "h1" if self.as_heading else "h2"
        return (
            f'<{tag} class="govuk-heading-{self.size}">'
            f"{{{{ {quote(self.question.question_text)} }}}}</{tag}>"
        )


def macro_call(name: str, options: Dict[str, Any]) -> str:
    return f"{{{{ {name}({to_template_literal(options)}) }}}}"


def error_message(control_name: str) -> CompiledExpression:
    """
    ``errorMessage`` option for a control.

    Reads the ``errors`` mapping (control name to message) the preview
    renders a rejected submission with. Without one it is false, which
    the components treat as no error.
    """
    error = CompiledExpression(f"(errors or {{}})[{quote(control_name)}]")
    return conditional(CompiledExpression(f"{{'text': {error.source}}}"), error, CompiledExpression("false"))


class _Builder:
    """Collects macro calls and controls for one field."""

    def __init__(self) -> None:
        self.parts: List[str] = []
        self.controls: List[FieldControl] = []

    def raw(self, source: str) -> None:
        self.parts.append(source)

    def control(
        self,
        macro: str,
        kind: ControlKind,
        name: str,
        options: Dict[str, Any],
        attributes: Dict[str, str],
    ) -> None:
        options = {"attributes": attributes, "errorMessage": error_message(name), **options}
        self.parts.append(macro_call(macro, options))
        self.controls.append(FieldControl(kind=kind, name=name, attributes=dict(attributes)))

    def build(self) -> CompiledField:
        return CompiledField(source="\n".join(self.parts), controls=self.controls)


def _required(ctx: _FieldContext, attributes: Dict[str, str], message: str) -> Dict[str, str]:
    if ctx.question.required:
        attributes[Attr.REQUIRED] = message
    return attributes


# ---------------------------------------------------------------------------
# Single text inputs
# ---------------------------------------------------------------------------

_TEXT_INPUT_RULES: Dict[str, Dict[str, Any]] = {
    AnswerType.TEXT.value: {"spellcheck": True},
    AnswerType.NAME.value: {"autocomplete": "name"},
    AnswerType.EMAIL.value: {
        "type": "email",
        "autocomplete": "email",
        "validation": {Attr.EMAIL: fa.EMAIL_ERROR},
    },
    AnswerType.GBP_CURRENCY_AMOUNT.value: {
        "prefix": {"text": "£"},
        "classes": "govuk-input--width-10",
        "validation": {Attr.GBP_CURRENCY_AMOUNT: fa.GBP_CURRENCY_AMOUNT_ERROR},
    },
    AnswerType.NATIONAL_INSURANCE_NUMBER.value: {
        "validation": {Attr.NATIONAL_INSURANCE_NUMBER: fa.NATIONAL_INSURANCE_NUMBER_ERROR},
    },
    AnswerType.PHONE_NUMBER.value: {
        "type": "tel",
        "autocomplete": "tel",
        "validation": {Attr.PHONE_NUMBER: fa.PHONE_NUMBER_ERROR},
    },
    AnswerType.TAX_CODE.value: {
        "classes": "govuk-input--width-10",
        "validation": {Attr.TAX_CODE: fa.TAX_CODE_ERROR},
    },
    AnswerType.VAT_REGISTRATION_NUMBER.value: {
        "classes": "govuk-input--width-10",
        "validation": {Attr.VAT_REGISTRATION_NUMBER: fa.VAT_REGISTRATION_NUMBER_ERROR},
    },
}


def _compile_text_input(ctx: _FieldContext) -> CompiledField:
    rule = _TEXT_INPUT_RULES[ctx.question.answer_type]
    attributes = _required(ctx, {}, ctx.required_error)
    attributes.update(rule.get("validation", {}))

    options = {
        "autocomplete": rule.get("autocomplete"),
        "classes": rule.get("classes", ""),
        "hint": ctx.hint,
        "label": ctx.label(),
        "name": ctx.key(),
        "prefix": rule.get("prefix"),
        "spellcheck": rule.get("spellcheck", False),
        "type": rule.get("type"),
        "value": ctx.value(),
    }
    builder = _Builder()
    builder.control("govukInput", ControlKind.INPUT, ctx.key(), options, attributes)
    return builder.build()


def _compile_text_area(ctx: _FieldContext) -> CompiledField:
    builder = _Builder()
    builder.control(
        "govukTextarea",
        ControlKind.TEXTAREA,
        ctx.key(),
        {"hint": ctx.hint, "label": ctx.label(), "name": ctx.key(), "value": ctx.value()},
        _required(ctx, {}, ctx.required_error),
    )
    return builder.build()


def _compile_file_upload(ctx: _FieldContext) -> CompiledField:
    builder = _Builder()
    builder.control(
        "govukFileUpload",
        ControlKind.FILE_UPLOAD,
        ctx.key(),
        {"hint": ctx.hint, "javascript": True, "label": ctx.label(), "name": ctx.key()},
        _required(ctx, {}, ctx.required_error),
    )
    return builder.build()


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------

def _choice_group(
    ctx: _FieldContext,
    macro: str,
    kind: ControlKind,
    items: List[Dict[str, Any]],
) -> CompiledField:
    builder = _Builder()
    builder.control(
        macro,
        kind,
        ctx.key(),
        {
            "fieldset": {"legend": ctx.legend()},
            "hint": ctx.hint,
            "items": items,
            "name": ctx.key(),
        },
        _required(ctx, {}, ctx.required_error),
    )
    return builder.build()


def _radio_item(ctx: _FieldContext, option: str) -> Dict[str, Any]:
    return {
        "checked": CompiledExpression(f"{ctx.value().source} == {quote(option)}"),
        "text": option,
        "value": option,
    }


def _compile_single_choice(ctx: _FieldContext) -> CompiledField:
    options = getattr(ctx.question, "options", None) or []
    items = [_radio_item(ctx, option) for option in options]
    return _choice_group(ctx, "govukRadios", ControlKind.RADIOS, items)


def _compile_branching_choice(ctx: _FieldContext) -> CompiledField:
    question = ctx.question
    if not isinstance(question, BranchingChoiceQuestion):
        raise TypeError(f"Expected a branching choice question, got {type(question).__name__}")
    items = [_radio_item(ctx, option.text_value) for option in question.options_branching]
    return _choice_group(ctx, "govukRadios", ControlKind.RADIOS, items)


def _compile_multiple_choice(ctx: _FieldContext) -> CompiledField:
    options = getattr(ctx.question, "options", None) or []
    items = [
        {
            "checked": apply_filter(ctx.value(), "includes", literal(option)),
            "text": option,
            "value": option,
        }
        for option in options
    ]
    return _choice_group(ctx, "govukCheckboxes", ControlKind.CHECKBOXES, items)


def _compile_select(ctx: _FieldContext) -> CompiledField:
    if ctx.question.answer_type == AnswerType.COUNTRY.value:
        items = country_items()
    else:
        items = nationality_items()
    builder = _Builder()
    builder.control(
        "govukSelect",
        ControlKind.SELECT,
        ctx.key(),
        {
            "hint": ctx.hint,
            "items": items,
            "label": ctx.label(),
            "name": ctx.key(),
            "value": ctx.value(),
        },
        _required(ctx, {}, ctx.required_error),
    )
    return builder.build()


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_DATE_PARTS = (
    ("day", "govuk-date-input__input--day govuk-input--width-2"),
    ("month", "govuk-date-input__input--month govuk-input--width-2"),
    ("year", "govuk-date-input__input--year govuk-input--width-4"),
)


def _date_items(ctx: _FieldContext, prefix: Optional[str], autocomplete: bool) -> List[Dict[str, Any]]:
    items = []
    for part, classes in _DATE_PARTS:
        subfield = f"{prefix}-{part}" if prefix else part
        items.append({
            "autocomplete": f"bday-{part}" if autocomplete else None,
            "classes": classes,
            "name": part,
            "value": ctx.value(subfield),
        })
    return items


def _date_options(
    ctx: _FieldContext,
    legend: Dict[str, Any],
    prefix: Optional[str] = None,
    autocomplete: bool = False,
) -> Dict[str, Any]:
    return {
        "fieldset": {"legend": legend},
        "hint": {"text": "For example, 31 3 2016"},
        "id": ctx.key(prefix),
        "items": _date_items(ctx, prefix, autocomplete),
        "namePrefix": ctx.key(prefix),
    }


def _compile_date(ctx: _FieldContext) -> CompiledField:
    question = ctx.question
    is_date_of_birth = question.answer_type == AnswerType.DATE_OF_BIRTH.value

    attributes = {Attr.INVALID_DATE: fa.invalid_date_error(question.required)}
    _required(ctx, attributes, ctx.required_error)
    if is_date_of_birth:
        attributes[Attr.DATE_OF_BIRTH] = fa.DATE_OF_BIRTH_ERROR
        minimum_age = getattr(question, "date_of_birth_minimum_age", None)
        maximum_age = getattr(question, "date_of_birth_maximum_age", None)
        if minimum_age:
            attributes[Attr.MINIMUM_AGE] = str(minimum_age)
            attributes[Attr.MINIMUM_AGE_ERROR] = fa.minimum_age_error(minimum_age)
        if maximum_age:
            attributes[Attr.MAXIMUM_AGE] = str(maximum_age)
            attributes[Attr.MAXIMUM_AGE_ERROR] = fa.maximum_age_error(maximum_age)

    builder = _Builder()
    builder.control(
        "govukDateInput",
        ControlKind.DATE_INPUT,
        ctx.key(),
        _date_options(ctx, ctx.legend(), autocomplete=is_date_of_birth),
        attributes,
    )
    return builder.build()


# ---------------------------------------------------------------------------
# Multi-field answers
# ---------------------------------------------------------------------------

def _subfield_input(
    builder: _Builder,
    ctx: _FieldContext,
    subfield: str,
    label: str,
    required_error: Optional[str],
    validation: Optional[Dict[str, str]] = None,
    **options: Any,
) -> None:
    attributes = dict(validation or {})
    if required_error:
        _required(ctx, attributes, required_error)
    builder.control(
        "govukInput",
        ControlKind.INPUT,
        ctx.key(subfield),
        {
            **options,
            "label": {"text": label},
            "name": ctx.key(subfield),
            "value": ctx.value(subfield),
        },
        attributes,
    )


def _compile_address(ctx: _FieldContext) -> CompiledField:
    builder = _Builder()
    legend = {**ctx.legend(), "classes": "govuk-fieldset__legend--l"}
    builder.raw(f"{{% call govukFieldset({to_template_literal({'legend': legend})}) %}}")
    _subfield_input(
        builder, ctx, "addressLine1", "Address line 1",
        "Enter address line 1, typically the building and street",
        autocomplete="address-line1", id="address-line-1",
    )
    _subfield_input(
        builder, ctx, "addressLine2", "Address line 2 (optional)", None,
        autocomplete="address-line2", id="address-line-2",
    )
    _subfield_input(
        builder, ctx, "addressTown", "Town or city", "Enter a town or city",
        autocomplete="address-level2", classes="govuk-!-width-two-thirds", id="address-town",
    )
    _subfield_input(
        builder, ctx, "addressCounty", "County (optional)", None,
        autocomplete="address-level1", classes="govuk-!-width-two-thirds", id="address-county",
    )
    _subfield_input(
        builder, ctx, "addressPostcode", "Postcode", "Enter a postcode",
        validation={Attr.POSTCODE: fa.POSTCODE_ERROR},
        autocomplete="postal-code", classes="govuk-input--width-10", id="address-postcode",
    )
    builder.raw("{% endcall %}")
    return builder.build()


def _compile_bank_details(ctx: _FieldContext) -> CompiledField:
    builder = _Builder()
    builder.raw(ctx.heading())
    _subfield_input(
        builder, ctx, "nameOnTheAccount", "Name on the account", "Enter the name on the account",
        autocomplete="name", id="name-on-the-account",
    )
    _subfield_input(
        builder, ctx, "sortCode", "Sort code", "Enter a sort code",
        validation={Attr.SORT_CODE: fa.SORT_CODE_ERROR},
        classes="govuk-input--width-5 govuk-input--extra-letter-spacing",
        hint={"text": "Must be 6 digits long"},
        id="sort-code", inputmode="numeric", spellcheck=False,
    )
    _subfield_input(
        builder, ctx, "accountNumber", "Account number", "Enter an account number",
        validation={
            Attr.ACCOUNT_NUMBER: fa.ACCOUNT_NUMBER_ERROR,
            Attr.ACCOUNT_NUMBER_LENGTH: fa.ACCOUNT_NUMBER_LENGTH_ERROR,
        },
        classes="govuk-input--width-10 govuk-input--extra-letter-spacing",
        hint={"text": "Must be between 6 and 8 digits long"},
        id="account-number", inputmode="numeric", spellcheck=False,
    )
    _subfield_input(
        builder, ctx, "rollNumber", "Building society roll number (if you have one)", None,
        validation={
            Attr.ROLL_NUMBER_CHARACTERS: fa.ROLL_NUMBER_CHARACTERS_ERROR,
            Attr.ROLL_NUMBER_LENGTH: fa.ROLL_NUMBER_LENGTH_ERROR,
        },
        classes="govuk-input--width-10 govuk-input--extra-letter-spacing",
        hint={"text": "You can find it on your card, statement or passbook"},
        id="roll-number", spellcheck=False,
    )
    return builder.build()


def _compile_emergency_contact(ctx: _FieldContext) -> CompiledField:
    builder = _Builder()
    builder.raw(ctx.heading())
    _subfield_input(
        builder, ctx, "fullName", "Full name", "Enter a name",
        validation={Attr.INVALID_NAME: "Enter a valid name"},
        autocomplete="name", id="full-name",
    )
    _subfield_input(
        builder, ctx, "relationship", "Relationship",
        "Enter the relationship of your contact to you",
        id="relationship",
    )
    _subfield_input(
        builder, ctx, "phoneNumber", "Phone number", "Enter a phone number",
        validation={Attr.PHONE_NUMBER: fa.PHONE_NUMBER_ERROR},
        autocomplete="tel", id="phone-number", type="tel",
    )
    _subfield_input(
        builder, ctx, "alternativePhoneNumber", "Alternative phone number", None,
        validation={Attr.PHONE_NUMBER: fa.PHONE_NUMBER_ERROR},
        autocomplete="tel", id="alternative-phone-number", type="tel",
    )
    return builder.build()


def _subfield_select(
    builder: _Builder,
    ctx: _FieldContext,
    subfield: str,
    label: str,
    items: List[Dict[str, Any]],
    required_error: str,
) -> None:
    builder.control(
        "govukSelect",
        ControlKind.SELECT,
        ctx.key(subfield),
        {"items": items, "label": {"text": label}, "name": ctx.key(subfield), "value": ctx.value(subfield)},
        _required(ctx, {}, required_error),
    )


def _subfield_date(
    builder: _Builder,
    ctx: _FieldContext,
    subfield: str,
    legend: str,
    required_error: str,
) -> None:
    attributes = {Attr.INVALID_DATE: fa.invalid_date_error(ctx.question.required)}
    builder.control(
        "govukDateInput",
        ControlKind.DATE_INPUT,
        ctx.key(subfield),
        _date_options(ctx, {"text": legend}, prefix=subfield),
        _required(ctx, attributes, required_error),
    )


def _compile_passport_information(ctx: _FieldContext) -> CompiledField:
    builder = _Builder()
    builder.raw(ctx.heading())
    _subfield_input(
        builder, ctx, "passportNumber", "Passport number", "Enter passport number",
        validation={Attr.PASSPORT_NUMBER: fa.PASSPORT_NUMBER_ERROR},
        autocomplete="passport-number", id="passport-number", spellcheck=False,
    )
    _subfield_select(builder, ctx, "countryOfIssue", "Country of issue", country_items(), "Select a country")
    _subfield_date(builder, ctx, "issueDate", "Issue date", "Enter issue date")
    _subfield_date(builder, ctx, "expiryDate", "Expiry date", "Enter expiry date")
    _subfield_select(builder, ctx, "nationality", "Nationality", nationality_items(), "Select nationality")
    return builder.build()


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

_COMPILERS: Dict[AnswerType, Callable[[_FieldContext], CompiledField]] = {
    AnswerType.ADDRESS: _compile_address,
    AnswerType.BANK_DETAILS: _compile_bank_details,
    AnswerType.BRANCHING_CHOICE: _compile_branching_choice,
    AnswerType.COUNTRY: _compile_select,
    AnswerType.DATE: _compile_date,
    AnswerType.DATE_OF_BIRTH: _compile_date,
    AnswerType.EMAIL: _compile_text_input,
    AnswerType.EMERGENCY_CONTACT_DETAILS: _compile_emergency_contact,
    AnswerType.FILE_UPLOAD: _compile_file_upload,
    AnswerType.GBP_CURRENCY_AMOUNT: _compile_text_input,
    AnswerType.MULTIPLE_CHOICE: _compile_multiple_choice,
    AnswerType.NAME: _compile_text_input,
    AnswerType.NATIONAL_INSURANCE_NUMBER: _compile_text_input,
    AnswerType.NATIONALITY: _compile_select,
    AnswerType.PASSPORT_INFORMATION: _compile_passport_information,
    AnswerType.PHONE_NUMBER: _compile_text_input,
    AnswerType.SINGLE_CHOICE: _compile_single_choice,
    AnswerType.TAX_CODE: _compile_text_input,
    AnswerType.TEXT: _compile_text_input,
    AnswerType.TEXT_AREA: _compile_text_area,
    AnswerType.VAT_REGISTRATION_NUMBER: _compile_text_input,
}


def supported_answer_types() -> List[AnswerType]:
    return list(_COMPILERS)


def compile_field(
    question: QuestionBase,
    question_number: int,
    questions_as_headings: bool = True,
    total_questions: Optional[int] = None,
) -> CompiledField:
    """
    Compile a question into the template source for its controls.

    Args:
        question: The question to compile
        question_number: 1-based position of the question in the form
        questions_as_headings: Render the question text as the page heading
        total_questions: When set, prefix a "Question X of N" caption

    Returns:
        CompiledField; empty when the answer type is not recognised
    """
    answer_type = AnswerType.parse(question.answer_type)
    compiler = _COMPILERS.get(answer_type) if answer_type else None
    if compiler is None:
        logger.warning(
            f"Unrecognised answer type '{question.answer_type}' for question "
            f"{question_number}; compiling to an empty fragment"
        )
        return CompiledField(source="")

    compiled = compiler(_FieldContext(question, question_number, questions_as_headings))
    if total_questions:
        caption = (
            f'<span class="govuk-caption-l">Question {question_number} '
            f"of {total_questions}</span>"
        )
        compiled = CompiledField(source=f"{caption}\n{compiled.source}", controls=compiled.controls)
    return compiled
