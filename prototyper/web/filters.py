"""
Template filters used by compiled pages.

Compiled check-answers expressions and choice controls call these by name,
so the names registered in ``FILTERS`` are part of the page contract.
"""

import re
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from markupsafe import Markup, escape

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_MONTH_ALIASES = {
    alias: number
    for number, name in enumerate(MONTH_NAMES, start=1)
    for alias in (str(number), f"{number:02d}", name[:3].lower(), name.lower())
}

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def parse_month(value: Any) -> Optional[int]:
    """Month number from ``3``, ``03``, ``mar`` or ``March``."""
    if not value:
        return None
    return _MONTH_ALIASES.get(str(value).strip().lower())


def _number(value: Any) -> Optional[int]:
    if not value:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def iso_date_from_date_input(values: Any, name_prefix: Optional[str] = None) -> str:
    """
    Convert day/month/year answers into an ISO 8601 date.

    With ``name_prefix`` the parts are read from ``<prefix>-day`` and so
    on, otherwise from ``day``, ``month`` and ``year``. Returns ``YYYY-MM``
    when the day is missing and an empty string without a month or year.
    """
    if not isinstance(values, Mapping):
        return ""

    def part(name: str) -> Any:
        return values.get(f"{name_prefix}-{name}" if name_prefix else name)

    day = _number(part("day"))
    month = parse_month(part("month"))
    year = _number(part("year"))

    if not year or not month:
        return ""
    if not day:
        return f"{year}-{month:02d}"
    return f"{year}-{month:02d}-{day:02d}"


def govuk_date(value: Any) -> str:
    """``2021-08-17`` to ``17 August 2021``, ``2021-08`` to ``August 2021``."""
    if not value:
        return ""
    text = str(value)
    parts = text.split("-")
    try:
        numbers = [int(p) for p in parts]
        if len(numbers) == 2:
            return f"{MONTH_NAMES[numbers[1] - 1]} {numbers[0]}"
        if len(numbers) == 3:
            parsed = date(*numbers)
            return f"{parsed.day} {MONTH_NAMES[parsed.month - 1]} {parsed.year}"
    except (ValueError, IndexError):
        return text
    return text


def format_list(values: Sequence[str]) -> str:
    """``a``, ``a and b``, ``a, b, and c``."""
    values = [str(v) for v in values]
    if not values:
        return ""
    if len(values) == 1:
        return values[0]
    if len(values) == 2:
        return f"{values[0]} and {values[1]}"
    return f"{', '.join(values[:-1])}, and {values[-1]}"


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def includes(container: Any, item: Any) -> bool:
    """Membership for lists, substring for strings, False otherwise."""
    if isinstance(container, (list, tuple)):
        return item in container
    if isinstance(container, str):
        return str(item) in container
    return False


def govuk_paragraphs(text: Any) -> Markup:
    """
    Render author text as GOV.UK body paragraphs.

    Blank lines separate paragraphs and single line breaks are kept.
    Only used by the preview environment; full Markdown belongs to the
    prototype kit the downloaded pages run in.
    """
    if not text:
        return Markup("")
    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(str(text)) if p.strip()]
    return Markup("\n").join(
        Markup('<p class="govuk-body">{}</p>').format(Markup("<br>").join(escape(line) for line in p.splitlines()))
        for p in paragraphs
    )


FILTERS = {
    "isoDateFromDateInput": iso_date_from_date_input,
    "govukDate": govuk_date,
    "formatList": format_list,
    "isArray": is_array,
    "includes": includes,
    "govukMarkdown": govuk_paragraphs,
}
