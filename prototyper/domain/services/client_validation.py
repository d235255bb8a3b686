"""
Client Validation Engine.

Checks a page submission against the validation attributes the field
compiler attached to each control. A rule only runs when its attribute is
present, and the first failing rule for a control is the one reported.

Order of checks for one submission:
    1. select controls (required)
    2. radio groups (required, failure ends the pass)
    3. checkbox groups (required, failure ends the pass)
    4. date groups (required, then validity and date-of-birth windows)
    5. text inputs (required, then format rules)
    6. text areas and file uploads (required)
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from prototyper.domain.services.country_data import CHOOSE_VALUE
from prototyper.domain.services.field_attributes import Attr
from prototyper.domain.services.field_compiler import ControlKind, FieldControl

logger = logging.getLogger(__name__)

POSTCODE_RE = re.compile(r"[a-z]{1,2}\d[a-z\d]?\s*\d[a-z]{2}", re.IGNORECASE)
SORT_CODE_RE = re.compile(r"(?!(?:0{6}|00-00-00))(?:\d{6}|\d\d-\d\d-\d\d)")
DIGITS_RE = re.compile(r"\d+")
ROLL_NUMBER_RE = re.compile(r"[a-zA-Z0-9\-/. ]+")
PASSPORT_NUMBER_RE = re.compile(r"[A-Z0-9]{6,9}")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NATIONAL_INSURANCE_NUMBER_RE = re.compile(r"[A-Z]{2}\d{6}[A-D]", re.IGNORECASE)
PHONE_NUMBER_RE = re.compile(r"((0|44|\+44|\+44\(0\)|\+440))?(\d){9,10}")
TAX_CODE_RE = re.compile(
    r"(NT|[SC]?(0T|D[0123]|BR|K[1-9]\d{0,5}|[1-9]\d{0,5}[LMNT])( W1| M1| X)?)",
    re.IGNORECASE,
)
VAT_REGISTRATION_NUMBER_RE = re.compile(r"(GB)?\d{9}", re.IGNORECASE)

ACCOUNT_NUMBER_MIN_LENGTH = 6
ACCOUNT_NUMBER_MAX_LENGTH = 8
ROLL_NUMBER_MAX_LENGTH = 18

_WHITESPACE_RE = re.compile(r"\s")


@dataclass
class ValidationOutcome:
    """Result of validating one submission.

    ``errors`` maps a control name (the date group prefix for date inputs)
    to the message shown in its error slot.
    """
    errors: Dict[str, str] = field(default_factory=dict)
    short_circuited: bool = False

    @property
    def blocked(self) -> bool:
        return bool(self.errors)

    def fail(self, name: str, message: str) -> None:
        # First failing rule wins
        self.errors.setdefault(name, message)


# ---------------------------------------------------------------------------
# Submitted values
# ---------------------------------------------------------------------------

def _text(values: Mapping[str, Any], name: str) -> str:
    value = values.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return str(value)


def _has_selection(values: Mapping[str, Any], name: str) -> bool:
    value = values.get(name)
    if isinstance(value, (list, tuple)):
        return any(str(v).strip() for v in value)
    return bool(value is not None and str(value).strip())


def _strip_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub("", text)


# ---------------------------------------------------------------------------
# Text input rules
# ---------------------------------------------------------------------------

def _pattern(regex: "re.Pattern[str]", normalise: Callable[[str], str] = str.strip) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        return regex.fullmatch(normalise(value)) is not None
    return check


def _account_number_length(value: str) -> bool:
    return ACCOUNT_NUMBER_MIN_LENGTH <= len(value.strip()) <= ACCOUNT_NUMBER_MAX_LENGTH


def _roll_number_length(value: str) -> bool:
    return len(value.strip()) <= ROLL_NUMBER_MAX_LENGTH


# (attribute, passes) in the order rules are tried
TEXT_INPUT_RULES: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    (Attr.POSTCODE, _pattern(POSTCODE_RE)),
    (Attr.SORT_CODE, _pattern(SORT_CODE_RE)),
    (Attr.ACCOUNT_NUMBER, _pattern(DIGITS_RE)),
    (Attr.ACCOUNT_NUMBER_LENGTH, _account_number_length),
    (Attr.PASSPORT_NUMBER, _pattern(PASSPORT_NUMBER_RE)),
    (Attr.ROLL_NUMBER_LENGTH, _roll_number_length),
    (Attr.ROLL_NUMBER_CHARACTERS, _pattern(ROLL_NUMBER_RE)),
    (Attr.EMAIL, _pattern(EMAIL_RE)),
    (Attr.NATIONAL_INSURANCE_NUMBER, _pattern(NATIONAL_INSURANCE_NUMBER_RE, _strip_whitespace)),
    (Attr.PHONE_NUMBER, _pattern(PHONE_NUMBER_RE, _strip_whitespace)),
    (Attr.TAX_CODE, _pattern(TAX_CODE_RE)),
    (Attr.VAT_REGISTRATION_NUMBER, _pattern(VAT_REGISTRATION_NUMBER_RE, _strip_whitespace)),
)


def validate_text_input(control: FieldControl, value: str) -> Optional[str]:
    """Error message for a text input, or None when it passes."""
    attributes = control.attributes
    if not value.strip():
        return attributes.get(Attr.REQUIRED)

    for attribute, passes in TEXT_INPUT_RULES:
        if attribute in attributes and not passes(value):
            return attributes[attribute]
    return None


# ---------------------------------------------------------------------------
# Date groups
# ---------------------------------------------------------------------------

def _years_before(today: date, years: int) -> date:
    year = today.year - years
    if year < date.min.year:
        return date.min
    try:
        return today.replace(year=year)
    except ValueError:
        # 29 February in a non-leap year rolls over to 1 March
        return date(year, 3, 1)


def parse_date_parts(day: str, month: str, year: str) -> Optional[date]:
    """
    Parse day/month/year text into a date.

    Returns None unless every part is numeric and within day 1-31,
    month 1-12 and year 1-9999. A day past the end of its month rolls
    into the following month (31 April is 1 May).
    """
    parts = [p.strip() for p in (day, month, year)]
    if not all(p.isdigit() for p in parts):
        return None
    d, m, y = (int(p) for p in parts)
    if not (1 <= d <= 31 and 1 <= m <= 12 and 1 <= y <= 9999):
        return None
    return date(y, m, 1) + timedelta(days=d - 1)


def validate_date_group(
    control: FieldControl,
    values: Mapping[str, Any],
    today: date,
) -> Optional[str]:
    """Error message for a date group, or None when it passes or is blank."""
    attributes = control.attributes
    day, month, year = (_text(values, f"{control.name}-{part}") for part in ("day", "month", "year"))
    filled = [bool(p.strip()) for p in (day, month, year)]

    if Attr.REQUIRED in attributes and not all(filled):
        return attributes[Attr.REQUIRED]
    if not any(filled):
        return None

    entered = parse_date_parts(day, month, year)
    if entered is None:
        return attributes.get(Attr.INVALID_DATE)

    if Attr.DATE_OF_BIRTH in attributes and entered > today:
        return attributes[Attr.DATE_OF_BIRTH]

    if Attr.MINIMUM_AGE in attributes and Attr.MINIMUM_AGE_ERROR in attributes:
        latest = _years_before(today, int(attributes[Attr.MINIMUM_AGE]))
        if entered > latest:
            return attributes[Attr.MINIMUM_AGE_ERROR]

    if Attr.MAXIMUM_AGE in attributes and Attr.MAXIMUM_AGE_ERROR in attributes:
        # One extra year so the boundary year itself is still allowed
        earliest = _years_before(today, int(attributes[Attr.MAXIMUM_AGE]) + 1)
        if entered <= earliest:
            return attributes[Attr.MAXIMUM_AGE_ERROR]

    return None


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def _of_kind(controls: Sequence[FieldControl], *kinds: ControlKind) -> List[FieldControl]:
    return [c for c in controls if c.kind in kinds]


def validate_submission(
    controls: Sequence[FieldControl],
    values: Mapping[str, Any],
    today: Optional[date] = None,
) -> ValidationOutcome:
    """
    Validate submitted values against a page's controls.

    Args:
        controls: Controls of the compiled question on the page
        values: Submitted form body, keyed by control name
        today: Reference date for date-of-birth checks, defaults to today

    Returns:
        ValidationOutcome; ``blocked`` is True when submission must not proceed
    """
    today = today or date.today()
    outcome = ValidationOutcome()

    for control in _of_kind(controls, ControlKind.SELECT):
        if Attr.REQUIRED not in control.attributes:
            continue
        value = _text(values, control.name).strip()
        if not value or value == CHOOSE_VALUE:
            outcome.fail(control.name, control.attributes[Attr.REQUIRED])

    for control in _of_kind(controls, ControlKind.RADIOS, ControlKind.CHECKBOXES):
        if Attr.REQUIRED in control.attributes and not _has_selection(values, control.name):
            outcome.fail(control.name, control.attributes[Attr.REQUIRED])
            outcome.short_circuited = True
            logger.debug(f"Required choice '{control.name}' missing; skipping remaining checks")
            return outcome

    for control in _of_kind(controls, ControlKind.DATE_INPUT):
        message = validate_date_group(control, values, today)
        if message:
            outcome.fail(control.name, message)

    for control in _of_kind(controls, ControlKind.INPUT):
        message = validate_text_input(control, _text(values, control.name))
        if message:
            outcome.fail(control.name, message)

    for control in _of_kind(controls, ControlKind.TEXTAREA, ControlKind.FILE_UPLOAD):
        if Attr.REQUIRED in control.attributes and not _text(values, control.name).strip():
            outcome.fail(control.name, control.attributes[Attr.REQUIRED])

    if outcome.blocked:
        logger.debug(f"Submission blocked with {len(outcome.errors)} field error(s)")
    return outcome
