"""
Compiled template-language expressions.

Page sources embed expressions over the Live Answer Store (the ``data``
mapping) that are only evaluated later, when a prototype is rendered
against real session answers. ``CompiledExpression`` keeps those
expressions apart from literal text so that literal values are always
quoted and expressions are never quoted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

NOT_PROVIDED = "Not provided"


class ExpressionError(TypeError):
    """Raised when an expression is combined with plain text."""
    pass


@dataclass(frozen=True)
class CompiledExpression:
    """A unit of template-language source referencing live data."""

    source: str
    multiline: bool = False

    @property
    def is_multiline(self) -> bool:
        """True when the expression joins its parts with line breaks."""
        return self.multiline

    def __str__(self) -> str:
        return self.source

    def __add__(self, other: Any) -> CompiledExpression:
        raise ExpressionError(
            "CompiledExpression cannot be concatenated with "
            f"{type(other).__name__}; use concat() instead"
        )

    __radd__ = __add__


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

def quote(text: str) -> str:
    """
    Quote text as a single-quoted template string literal.

    Backslashes, quotes and line breaks are escaped so user-authored text
    can never terminate the literal.
    """
    escaped = (
        str(text)
        .replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace("\r", "\\n")
    )
    return f"'{escaped}'"


def literal(text: str) -> CompiledExpression:
    return CompiledExpression(quote(text))


def answer_key(question_number: int, subfield: Optional[str] = None) -> str:
    """Live Answer Store key for a question or one of its subfields."""
    key = f"question-{question_number}"
    return f"{key}-{subfield}" if subfield else key


def data_ref(key: str) -> CompiledExpression:
    return CompiledExpression(f"data[{quote(key)}]")


def answer_ref(question_number: int, subfield: Optional[str] = None) -> CompiledExpression:
    return data_ref(answer_key(question_number, subfield))


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------

def concat(*parts: CompiledExpression) -> CompiledExpression:
    """Join expressions with the template concatenation operator."""
    return CompiledExpression(
        " ~ ".join(p.source for p in parts),
        multiline=any(p.multiline for p in parts),
    )


def all_of(*parts: CompiledExpression) -> CompiledExpression:
    return CompiledExpression(" and ".join(p.source for p in parts))


def conditional(
    then: CompiledExpression,
    condition: CompiledExpression,
    otherwise: CompiledExpression,
) -> CompiledExpression:
    return CompiledExpression(
        f"{then.source} if {condition.source} else {otherwise.source}",
        multiline=then.multiline or otherwise.multiline,
    )


def present_or(
    value: CompiledExpression,
    condition: Optional[CompiledExpression] = None,
    fallback: str = NOT_PROVIDED,
) -> CompiledExpression:
    """``value`` when ``condition`` (default: the value itself) is truthy."""
    return conditional(value, condition or value, literal(fallback))


def apply_filter(value: CompiledExpression, name: str, *args: CompiledExpression) -> CompiledExpression:
    call = f"{name}({', '.join(a.source for a in args)})" if args else name
    return CompiledExpression(f"{value.source} | {call}", multiline=value.multiline)


def join_present_lines(
    parts: Sequence[CompiledExpression],
    fallback: str = NOT_PROVIDED,
) -> CompiledExpression:
    """
    Join the truthy parts with line breaks, or ``fallback`` if none are.

    Absent parts are dropped before joining, so a line break only ever
    separates two present values.
    """
    items = ", ".join(p.source for p in parts)
    return CompiledExpression(
        f"([{items}] | select | join({quote(chr(10))})) or {quote(fallback)}",
        multiline=True,
    )


# ---------------------------------------------------------------------------
# Macro arguments
# ---------------------------------------------------------------------------

def to_template_literal(value: Any) -> str:
    """
    Serialise a macro argument as template-language source.

    Strings become quoted literals, ``CompiledExpression`` values are
    emitted verbatim, and ``None`` entries in mappings are omitted.
    """
    if isinstance(value, CompiledExpression):
        return value.source
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return quote(value)
    if value is None:
        return "none"
    if isinstance(value, Mapping):
        return _mapping_literal(value)
    if isinstance(value, Iterable):
        return "[" + ", ".join(to_template_literal(v) for v in value) + "]"
    raise ExpressionError(f"Cannot serialise {type(value).__name__} as a template literal")


def _mapping_literal(mapping: Mapping[str, Any]) -> str:
    entries = [
        f"{quote(key)}: {to_template_literal(value)}"
        for key, value in mapping.items()
        if value is not None
    ]
    if not entries:
        return "{}"
    return "{\n" + ",\n".join(entries) + "\n}"
