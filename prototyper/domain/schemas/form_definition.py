"""
FormDefinition schema.

A form is an ordered list of questions. A question is either a
branching choice, whose options each carry their own target, or one of
the non-branching answer types, which carry an optional explicit
``next_question_value``. Targets are 1-based question numbers or
``FINISH_VALUE`` (-1).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, model_validator

FINISH_VALUE = -1


class AnswerType(str, Enum):
    """Answer types understood by the compiler."""
    ADDRESS = "address"
    BANK_DETAILS = "bank_details"
    BRANCHING_CHOICE = "branching_choice"
    COUNTRY = "country"
    DATE = "date"
    DATE_OF_BIRTH = "date_of_birth"
    EMAIL = "email"
    EMERGENCY_CONTACT_DETAILS = "emergency_contact_details"
    FILE_UPLOAD = "file_upload"
    GBP_CURRENCY_AMOUNT = "gbp_currency_amount"
    MULTIPLE_CHOICE = "multiple_choice"
    NAME = "name"
    NATIONAL_INSURANCE_NUMBER = "national_insurance_number"
    NATIONALITY = "nationality"
    PASSPORT_INFORMATION = "passport_information"
    PHONE_NUMBER = "phone_number"
    SINGLE_CHOICE = "single_choice"
    TAX_CODE = "tax_code"
    TEXT = "text"
    TEXT_AREA = "text_area"
    VAT_REGISTRATION_NUMBER = "vat_registration_number"

    @classmethod
    def parse(cls, value: str) -> Optional[AnswerType]:
        """Return the answer type for ``value``, or None if unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return None


CHOICE_TYPES = {AnswerType.SINGLE_CHOICE.value, AnswerType.MULTIPLE_CHOICE.value}


class BranchingOption(BaseModel):
    """One option of a branching choice and the question it leads to."""
    model_config = ConfigDict(frozen=True)

    text_value: str = ""
    next_question_value: int = FINISH_VALUE


class QuestionBase(BaseModel):
    """Fields shared by every question."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    answer_type: str
    question_text: str
    required: bool = False
    required_error_text: Optional[str] = None
    hint_text: Optional[str] = None
    detailed_explanation: Optional[str] = None

    @property
    def is_branching(self) -> bool:
        return self.answer_type == AnswerType.BRANCHING_CHOICE.value

    @property
    def display_hint_text(self) -> Optional[str]:
        """Hint text with a single trailing full stop removed."""
        if not self.hint_text:
            return self.hint_text
        return self.hint_text[:-1] if self.hint_text.endswith(".") else self.hint_text


class BranchingChoiceQuestion(QuestionBase):
    """A single-choice question whose answer decides the next page."""
    answer_type: Literal["branching_choice"] = "branching_choice"
    options_branching: List[BranchingOption] = Field(default_factory=list)


class NonBranchingQuestion(QuestionBase):
    """Any question other than a branching choice."""
    next_question_value: Optional[int] = None
    options: Optional[List[str]] = None
    date_of_birth_minimum_age: Optional[int] = None
    date_of_birth_maximum_age: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _clear_inapplicable_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        answer_type = data.get("answer_type")
        if answer_type != AnswerType.DATE_OF_BIRTH.value:
            data.pop("date_of_birth_minimum_age", None)
            data.pop("date_of_birth_maximum_age", None)
        if answer_type not in CHOICE_TYPES:
            data.pop("options", None)
        return data


def _question_kind(value: Any) -> str:
    answer_type = value.get("answer_type") if isinstance(value, dict) else getattr(value, "answer_type", None)
    return "branching" if answer_type == AnswerType.BRANCHING_CHOICE.value else "non_branching"


Question = Annotated[
    Union[
        Annotated[BranchingChoiceQuestion, Tag("branching")],
        Annotated[NonBranchingQuestion, Tag("non_branching")],
    ],
    Discriminator(_question_kind),
]


def _drop_nulls(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value if v is not None]
    return value


class FormDefinition(BaseModel):
    """Declarative description of a whole form."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    description: str = ""
    duration: int = Field(default=1, ge=1)
    before_you_start: str = ""
    what_happens_next: str = ""
    form_type: str = "form"
    show_progress_indicators: Optional[bool] = None
    questions: List[Question] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        # Generated definitions use null for "not set"
        return _drop_nulls(data) if isinstance(data, dict) else data

    @property
    def has_branching(self) -> bool:
        return any(q.is_branching for q in self.questions)

    @property
    def progress_indicators_enabled(self) -> bool:
        """Question X of N captions only make sense for a linear form."""
        if self.has_branching:
            return False
        if self.show_progress_indicators is None:
            return True
        return self.show_progress_indicators

    @property
    def total_questions(self) -> int:
        return len(self.questions)
