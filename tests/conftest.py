"""
Shared pytest fixtures for all tests.

Provides sample form definitions and settings isolation.
"""

import pytest

from prototyper.core.assets import reset_asset_version_cache
from prototyper.domain.schemas import FormDefinition
from prototyper.settings import clear_settings_cache


# =============================================================================
# SETTINGS ISOLATION
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """
    Give every test default settings with a known HMRC version file.

    Settings and the HMRC version are cached per process, so both caches
    are cleared around each test.
    """
    version_file = tmp_path / "VERSION.txt"
    version_file.write_text("6.1.0\n", encoding="utf-8")
    monkeypatch.setenv("HMRC_VERSION_FILE", str(version_file))
    monkeypatch.delenv("DEFAULT_DESIGN_SYSTEM", raising=False)
    monkeypatch.delenv("SHOW_DEMO_WARNING_LIVE", raising=False)
    clear_settings_cache()
    reset_asset_version_cache()
    yield
    clear_settings_cache()
    reset_asset_version_cache()


# =============================================================================
# FORM DEFINITIONS
# =============================================================================

def make_form(questions, **overrides) -> FormDefinition:
    """Build a FormDefinition around a list of raw question dicts."""
    data = {
        "title": "Apply for a fishing licence",
        "description": "Use this service to apply for a fishing licence.",
        "duration": 5,
        "before_you_start": "You will need your address.",
        "what_happens_next": "We will email you within 5 days.",
        "form_type": "application",
        "questions": questions,
    }
    data.update(overrides)
    return FormDefinition.model_validate(data)


@pytest.fixture
def linear_form() -> FormDefinition:
    """Three sequential questions, no branching."""
    return make_form([
        {"answer_type": "name", "question_text": "What is your name?", "required": True},
        {"answer_type": "email", "question_text": "What is your email address?", "required": True},
        {"answer_type": "text_area", "question_text": "Why do you want a licence?"},
    ])


@pytest.fixture
def branching_form() -> FormDefinition:
    """Q2 branches: Yes finishes the form, No continues to Q3."""
    return make_form([
        {"answer_type": "name", "question_text": "What is your name?"},
        {
            "answer_type": "branching_choice",
            "question_text": "Have you held a licence before?",
            "required": True,
            "options_branching": [
                {"text_value": "Yes", "next_question_value": -1},
                {"text_value": "No", "next_question_value": 3},
            ],
        },
        {"answer_type": "address", "question_text": "What is your address?"},
    ])


@pytest.fixture
def form_factory():
    """Build a FormDefinition from raw question dicts."""
    return make_form
