"""Tests for the Check-Answers Formatter."""

import pytest
from jinja2 import Environment

from prototyper.domain.services.check_answers_formatter import (
    MULTILINE_ROW_CLASS,
    build_check_answers_rows,
    format_answer,
)
from prototyper.web.environment import evaluate_expression


@pytest.fixture
def answer(form_factory):
    """Evaluate the check-answers value of a single-question form."""
    def evaluate(answer_type, data, **fields):
        form = form_factory([{"answer_type": answer_type, "question_text": "Q", **fields}])
        expression = format_answer(form.questions[0], 1)
        return expression, evaluate_expression(expression, data)
    return evaluate


# =============================================================================
# Single values
# =============================================================================

class TestScalarAnswers:

    def test_present_value(self, answer):
        expression, value = answer("text", {"question-1": "Hello"})

        assert value == "Hello"
        assert not expression.is_multiline

    def test_missing_value(self, answer):
        _, value = answer("text", {})
        assert value == "Not provided"

    def test_empty_value(self, answer):
        _, value = answer("name", {"question-1": ""})
        assert value == "Not provided"

    def test_currency_is_prefixed(self, answer):
        _, value = answer("gbp_currency_amount", {"question-1": "12.50"})
        assert value == "£12.50"

    def test_unknown_type_still_shows_stored_value(self, answer):
        _, value = answer("hologram", {"question-1": "seen"})
        assert value == "seen"


class TestMultipleChoice:

    @pytest.mark.parametrize("stored, expected", [
        (["Red"], "Red"),
        (["Red", "Green"], "Red and Green"),
        (["Red", "Green", "Blue"], "Red, Green, and Blue"),
        ("Red", "Red"),
    ])
    def test_formats_list(self, answer, stored, expected):
        _, value = answer("multiple_choice", {"question-1": stored}, options=["Red", "Green", "Blue"])
        assert value == expected

    def test_nothing_chosen(self, answer):
        _, value = answer("multiple_choice", {}, options=["Red"])
        assert value == "Not provided"


class TestDates:

    def test_full_date(self, answer):
        _, value = answer("date", {"question-1-day": "17", "question-1-month": "8", "question-1-year": "2021"})
        assert value == "17 August 2021"

    def test_month_name_accepted(self, answer):
        _, value = answer("date_of_birth", {
            "question-1-day": "1", "question-1-month": "March", "question-1-year": "1990",
        })
        assert value == "1 March 1990"

    def test_incomplete_date(self, answer):
        _, value = answer("date", {"question-1-day": "17", "question-1-year": "2021"})
        assert value == "Not provided"


# =============================================================================
# Multi-field answers
# =============================================================================

class TestMultiFieldAnswers:

    def test_address_skips_missing_lines(self, answer):
        expression, value = answer("address", {
            "question-1-addressTown": "Leeds",
            "question-1-addressPostcode": "LS1 1AA",
        })

        assert value == "Leeds\nLS1 1AA"
        assert expression.is_multiline

    def test_address_all_missing(self, answer):
        _, value = answer("address", {})
        assert value == "Not provided"

    def test_bank_details_order(self, answer):
        _, value = answer("bank_details", {
            "question-1-accountNumber": "12345678",
            "question-1-nameOnTheAccount": "A Person",
            "question-1-sortCode": "309430",
        })
        assert value == "A Person\n309430\n12345678"

    def test_emergency_contact(self, answer):
        _, value = answer("emergency_contact_details", {
            "question-1-fullName": "Sam",
            "question-1-phoneNumber": "07700900982",
        })
        assert value == "Sam\n07700900982"

    def test_passport_excludes_placeholder_selects(self, answer):
        _, value = answer("passport_information", {
            "question-1-passportNumber": "AB123456",
            "question-1-countryOfIssue": "choose",
            "question-1-issueDate-day": "1",
            "question-1-issueDate-month": "2",
            "question-1-issueDate-year": "2020",
            "question-1-nationality": "British",
        })
        assert value == "AB123456\nIssued on 1 February 2020\nBritish"

    def test_passport_all_placeholders(self, answer):
        _, value = answer("passport_information", {
            "question-1-countryOfIssue": "choose",
            "question-1-nationality": "choose",
        })
        assert value == "Not provided"


# =============================================================================
# Rows
# =============================================================================

class TestRows:

    def test_one_row_per_question(self, branching_form):
        rows = build_check_answers_rows(branching_form, "prototype/abc")

        assert [r.question_number for r in rows] == [1, 2, 3]
        assert rows[1].change_href == "/prototype/abc/question-2?referrer=check-answers"

    def test_multiline_row_classes(self, branching_form):
        rows = build_check_answers_rows(branching_form, "p")

        assert rows[0].row_classes == ""
        assert rows[2].row_classes == MULTILINE_ROW_CLASS
        assert rows[2].to_macro_row()["value"]["classes"] == "force-multiline-value"

    def test_macro_row_keeps_expression(self, linear_form):
        row = build_check_answers_rows(linear_form, "p")[0]
        macro_row = row.to_macro_row()

        assert macro_row["value"]["text"] is row.value
        assert macro_row["actions"]["items"][0]["visuallyHiddenText"] == "What is your name?"

    def test_values_parse_as_expressions(self, branching_form):
        env = Environment()
        for row in build_check_answers_rows(branching_form, "p"):
            env.compile_expression(row.value.source)
