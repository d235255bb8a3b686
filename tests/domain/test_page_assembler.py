"""Tests for the Page Assembler."""

import json

import pytest
from jinja2 import Environment, meta

from prototyper.core.assets import AssetVersionNotFoundError, form_script_source, reset_asset_version_cache
from prototyper.domain.services.page_assembler import (
    InvalidQuestionIndexError,
    assemble_downloadable_pages,
    build_base_page,
    build_check_answers_page,
    build_confirmation_page,
    build_question_page,
    build_start_page,
    static_next_page,
)
from prototyper.settings import clear_settings_cache


def parses(source: str) -> None:
    Environment().parse(source)


# =============================================================================
# Question pages
# =============================================================================

class TestQuestionPage:

    @pytest.mark.parametrize("index", [-1, 3, 1.0, "1", True])
    def test_invalid_index_fails_fast(self, linear_form, index):
        with pytest.raises(InvalidQuestionIndexError, match="Invalid question index"):
            build_question_page(linear_form, "p", index)

    def test_invalid_index_is_a_value_error(self, linear_form):
        with pytest.raises(ValueError):
            build_question_page(linear_form, "p", 10)

    def test_page_parses(self, branching_form):
        for index in range(3):
            parses(build_question_page(branching_form, "p", index))

    def test_back_links(self, linear_form):
        assert "'/p/start'" in build_question_page(linear_form, "p", 0)
        assert "'/p/question-1'" in build_question_page(linear_form, "p", 1)

    def test_download_action_posts_to_next_page(self, linear_form):
        assert "<form action=\"{{ '/p/question-2' }}\"" in build_question_page(linear_form, "p", 0)
        assert "<form action=\"{{ '/p/check-answers' }}\"" in build_question_page(linear_form, "p", 2)

    def test_live_action_posts_to_submit(self, linear_form):
        page = build_question_page(linear_form, "p", 1, live=True)

        assert "<form action=\"{{ '/p/question-2/submit' }}\"" in page

    def test_progress_caption_only_without_branching(self, linear_form, branching_form):
        assert "Question 1 of 3" in build_question_page(linear_form, "p", 0)
        assert "Question 1 of 3" not in build_question_page(branching_form, "p", 0)

    def test_detailed_explanation(self, form_factory):
        form = form_factory([{
            "answer_type": "text",
            "question_text": "Q",
            "detailed_explanation": "Look on the card.",
        }])
        page = build_question_page(form, "p", 0)

        assert "govukDetails" in page
        assert "'Look on the card.'" in page

    def test_demo_warning(self, linear_form):
        assert "demo-warning-tag" in build_question_page(linear_form, "p", 0, show_demo_warning=True)
        assert "demo-warning-tag" not in build_question_page(linear_form, "p", 0)

    def test_unknown_answer_type_page_still_builds(self, form_factory):
        form = form_factory([{"answer_type": "hologram", "question_text": "Q"}])

        parses(build_question_page(form, "p", 0))


class TestStaticNextPage:

    def test_explicit_value_is_used_as_is(self, form_factory):
        form = form_factory([
            {"answer_type": "text", "question_text": "One", "next_question_value": 3},
            {"answer_type": "text", "question_text": "Two", "next_question_value": -1},
            {"answer_type": "text", "question_text": "Three"},
        ])

        assert static_next_page(form, 0) == "question-3"
        assert static_next_page(form, 1) == "check-answers"
        assert static_next_page(form, 2) == "check-answers"

    def test_branching_falls_back_to_sequence(self, branching_form):
        assert static_next_page(branching_form, 1) == "question-3"


# =============================================================================
# Other pages
# =============================================================================

class TestOtherPages:

    def test_start_page(self, linear_form):
        page = build_start_page(linear_form, "p")

        parses(page)
        assert "Completing this form takes around 5 minutes." in page
        assert "'href': '/p/question-1'" in page

    def test_start_page_single_minute(self, form_factory):
        page = build_start_page(form_factory([], duration=1), "p")

        assert "takes around 1 minute." in page

    def test_check_answers_page(self, branching_form):
        page = build_check_answers_page(branching_form, "p")

        parses(page)
        assert "govukSummaryList" in page
        assert "'/p/question-3'" in page
        assert "<form action=\"{{ '/p/confirmation' }}\"" in page
        assert "'Accept and send'" in page
        assert "force-multiline-row" in page

    def test_confirmation_page(self, linear_form):
        page = build_confirmation_page(linear_form)

        parses(page)
        assert "'Application complete'" in page

    def test_title_with_quotes_is_escaped(self, form_factory):
        form = form_factory([{"answer_type": "text", "question_text": "Q"}], title="Bob's 'form'")

        for page in (build_start_page(form, "p"), build_question_page(form, "p", 0), build_confirmation_page(form)):
            parses(page)
            assert "Bob\\'s \\'form\\'" in page

    @pytest.mark.parametrize("prefix", ["it's", "a{{x}}b", "x' }}{{ x"])
    def test_url_prefix_stays_inside_literals(self, linear_form, prefix):
        pages = [
            build_start_page(linear_form, prefix),
            build_question_page(linear_form, prefix, 0),
            build_question_page(linear_form, prefix, 0, live=True),
            build_check_answers_page(linear_form, prefix),
        ]

        for page in pages:
            assert "x" not in meta.find_undeclared_variables(Environment().parse(page))

    def test_check_answers_back_link_without_questions(self, form_factory):
        page = build_check_answers_page(form_factory([]), "p")

        parses(page)
        assert "'/p/start'" in page
        assert "question-0" not in page

    def test_check_answers_back_link_to_last_question(self, linear_form):
        assert "backLinkHref else '/p/question-3'" in build_check_answers_page(linear_form, "p")


class TestBasePage:

    def test_govuk_base(self):
        page = build_base_page("GOV.UK")

        parses(page)
        assert "hmrc" not in page
        assert "<script type=\"module\" src=\"{{ '/assets/form.js' }}\"></script>" in page

    def test_hmrc_base_uses_versioned_assets(self):
        page = build_base_page("HMRC")

        parses(page)
        assert "hmrc-frontend-6.1.0.min.css" in page
        assert "import hmrcBanner" in page

    def test_hmrc_without_version_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HMRC_VERSION_FILE", str(tmp_path / "missing"))
        clear_settings_cache()
        reset_asset_version_cache()

        with pytest.raises(AssetVersionNotFoundError):
            build_base_page("HMRC")

    def test_hmrc_banner_on_pages(self, linear_form):
        assert "hmrcBanner" in build_start_page(linear_form, "p", "HMRC")
        assert "hmrcBanner" not in build_start_page(linear_form, "p", "GOV.UK")


# =============================================================================
# Downloadable copy
# =============================================================================

class TestDownloadablePages:

    def test_file_layout(self, linear_form):
        files = assemble_downloadable_pages(linear_form, "fishing")

        assert list(files) == [
            "views/form-base.njk",
            "views/fishing/start.njk",
            "views/fishing/question-1.njk",
            "views/fishing/question-2.njk",
            "views/fishing/question-3.njk",
            "views/fishing/check-answers.njk",
            "views/fishing/confirmation.njk",
            "fishing.json",
            "assets/form.js",
        ]

    def test_pages_parse_and_have_no_demo_warning(self, branching_form):
        files = assemble_downloadable_pages(branching_form, "fishing")

        for path, content in files.items():
            if path.endswith(".njk"):
                parses(content)
                assert "demo-warning-tag" not in content or path.endswith("form-base.njk")

    def test_form_definition_round_trips(self, branching_form):
        files = assemble_downloadable_pages(branching_form, "fishing")
        stored = json.loads(files["fishing.json"])

        assert stored["title"] == branching_form.title
        assert stored["questions"][1]["options_branching"][1]["next_question_value"] == 3

    def test_ships_browser_validation_script(self, linear_form):
        files = assemble_downloadable_pages(linear_form, "fishing")

        assert files["assets/form.js"] == form_script_source()
        assert "addEventListener('submit', validateForm)" in files["assets/form.js"]

    def test_script_follows_configured_path(self, linear_form, monkeypatch):
        monkeypatch.setenv("FORM_SCRIPT_PATH", "/public/js/form.js")
        clear_settings_cache()
        files = assemble_downloadable_pages(linear_form, "fishing")

        assert "public/js/form.js" in files
        assert "{{ '/public/js/form.js' }}" in files["views/form-base.njk"]
