"""
Fixed page text around the compiled fields.

Every function returns template source. User-authored text only ever
enters the source through ``quote`` so it is escaped as a string literal.
"""

from dataclasses import dataclass
from typing import List, Optional

from prototyper.core.assets import get_hmrc_assets_version
from prototyper.domain.expressions import quote
from prototyper.domain.schemas import FormDefinition

BASE_TEMPLATE_NAME = "form-base.njk"
HMRC = "HMRC"

GOVUK_MACROS = (
    ("button", "govukButton"),
    ("back-link", "govukBackLink"),
    ("header", "govukHeader"),
    ("breadcrumbs", "govukBreadcrumbs"),
    ("panel", "govukPanel"),
    ("date-input", "govukDateInput"),
    ("input", "govukInput"),
    ("textarea", "govukTextarea"),
    ("radios", "govukRadios"),
    ("checkboxes", "govukCheckboxes"),
    ("summary-list", "govukSummaryList"),
    ("service-navigation", "govukServiceNavigation"),
    ("file-upload", "govukFileUpload"),
    ("phase-banner", "govukPhaseBanner"),
    ("select", "govukSelect"),
    ("fieldset", "govukFieldset"),
    ("details", "govukDetails"),
    ("error-summary", "govukErrorSummary"),
)


@dataclass(frozen=True)
class QuestionHeaderOptions:
    title: str
    question_title: str
    back_link_href: str
    form_action: str
    design_system: str
    show_demo_warning: bool = False
    detailed_explanation: Optional[str] = None


def _output(text: str) -> str:
    """Print a string literal, for text that sits in HTML rather than a macro call."""
    return f"{{{{ {quote(text)} }}}}"


def _markdown(text: str) -> str:
    return f"{{{{ {quote(text)} | govukMarkdown | safe }}}}"


def _demo_warning() -> List[str]:
    return [
        '  <section aria-label="Demo warning">',
        "    {{ govukPhaseBanner({",
        "      'tag': {",
        "        'text': 'Demo',",
        "        'classes': 'demo-warning-tag'",
        "      },",
        "      'text': 'This is a non-functioning prototype of a government service for demonstration purposes only.'",
        "    }) }}",
        "  </section>",
    ]


def _before_content_banners(design_system: str, show_demo_warning: bool) -> List[str]:
    lines = _demo_warning() if show_demo_warning else []
    if design_system == HMRC:
        lines += ["  {{ hmrcBanner({'useTudorCrown': true}) }}"]
    return lines


def _page_preamble(page_title: str, service_title: Optional[str]) -> List[str]:
    lines = [
        f'{{% extends "{BASE_TEMPLATE_NAME}" %}}',
        f"{{% set pageTitle = {quote(page_title)} %}}",
    ]
    if service_title is not None:
        lines.append(f"{{% set serviceTitle = {quote(service_title)} %}}")
    return lines


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

def base_page(asset_path: str, design_system: str, form_script_path: str) -> str:
    """Shared layout every page extends."""
    hmrc_version = get_hmrc_assets_version() if design_system == HMRC else None

    lines = [
        '{% extends "govuk/template.njk" %}',
        "{% set govukRebrand = true %}",
        f"{{% set assetPath = {quote(asset_path)} %}}",
        "",
    ]
    lines += [
        f'{{% from "govuk/components/{component}/macro.njk" import {macro} %}}'
        for component, macro in GOVUK_MACROS
    ]
    if hmrc_version:
        lines.append('{% from "hmrc/components/banner/macro.njk" import hmrcBanner %}')

    lines += [
        "",
        "{% block head %}",
        '  <link href="{{ assetPath }}/govuk-frontend.min.css" rel="stylesheet">',
    ]
    if hmrc_version:
        lines.append(f'  <link href="{{{{ assetPath }}}}/hmrc-frontend-{hmrc_version}.min.css" rel="stylesheet">')
    lines += [
        "  <style>",
        "    .demo-warning-tag {",
        "      background-color: #ffdd00;",
        "      color: #0b0c0c;",
        "    }",
        "    @media (min-width: 40.0625em) {",
        "      .force-multiline-row {",
        "        white-space: pre-line;",
        "      }",
        "    }",
        "    @media (max-width: 40.0625em) {",
        "      .force-multiline-value {",
        "        white-space: pre-line;",
        "      }",
        "    }",
        "  </style>",
        "{% endblock %}",
        "",
        "{% block pageTitle %}",
        "  {{ pageTitle }} – GOV.UK",
        "{% endblock %}",
        "",
        "{% block header %}",
        "  {{ govukHeader({",
        "    'classes': 'govuk-header--full-width-border',",
        "    'homepageUrl': 'https://www.gov.uk'",
        "  }) }}",
        "  {% if serviceTitle is defined %}{{ govukServiceNavigation({",
        "    'serviceName': serviceTitle",
        "  }) }}{% endif %}",
        "{% endblock %}",
        "",
        "{% block bodyEnd %}",
        '  <script type="module" src="{{ assetPath }}/govuk-frontend.min.js"></script>',
    ]
    if hmrc_version:
        lines.append(
            f'  <script type="module" src="{{{{ assetPath }}}}/hmrc-frontend-{hmrc_version}.min.js"></script>'
        )
    lines += [
        f'  <script type="module" src="{_output(form_script_path)}"></script>',
        '  <script type="module">',
        "    import { initAll } from '{{ assetPath }}/govuk-frontend.min.js'",
        "    initAll()",
        "  </script>",
        "{% endblock %}",
    ]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Start
# ---------------------------------------------------------------------------

def start_page(form: FormDefinition, url_prefix: str, design_system: str, show_demo_warning: bool) -> str:
    minutes = "minute" if form.duration == 1 else "minutes"
    lines = _page_preamble(form.title, None)
    lines += ["", "{% block beforeContent %}"]
    lines += _before_content_banners(design_system, show_demo_warning)
    lines += [
        "  {{ govukBreadcrumbs({",
        "    'items': [",
        "      {'text': 'Home', 'href': '#'},",
        "      {'text': 'Section', 'href': '#'},",
        f"      {{'text': {quote(form.title)}}}",
        "    ]",
        "  }) }}",
        "{% endblock %}",
        "",
        "{% block content %}",
        '  <div class="govuk-grid-row">',
        '    <div class="govuk-grid-column-two-thirds">',
        f'      <h1 class="govuk-heading-xl">{_output(form.title)}</h1>',
        "",
        f"      {_markdown(form.description)}",
        "",
        f'      <p class="govuk-body">Completing this form takes around {form.duration} {minutes}.</p>',
        "",
        '      <h2 class="govuk-heading-m">Before you start</h2>',
        "",
        f"      {_markdown(form.before_you_start)}",
        "",
        "      {{ govukButton({",
        "        'text': 'Start now',",
        f"        'href': {quote(f'/{url_prefix}/question-1')},",
        "        'isStartButton': true",
        "      }) }}",
        "    </div>",
        "",
        '    <div class="govuk-grid-column-one-third">',
        '      <aside class="govuk-prototype-kit-common-templates-related-items" role="complementary">',
        '        <h2 class="govuk-heading-m" id="subsection-title">Subsection</h2>',
        '        <nav role="navigation" aria-labelledby="subsection-title">',
        '          <ul class="govuk-list govuk-!-font-size-16">',
        '            <li><a href="#">Related link</a></li>',
        '            <li><a href="#">Related link</a></li>',
        '            <li><a href="#" class="govuk-!-font-weight-bold">More <span class="govuk-visually-hidden">in Subsection</span></a></li>',
        "          </ul>",
        "        </nav>",
        "      </aside>",
        "    </div>",
        "  </div>",
        "{% endblock %}",
    ]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Question
# ---------------------------------------------------------------------------

def question_header(opts: QuestionHeaderOptions) -> str:
    lines = _page_preamble(f"{opts.question_title} – {opts.title}", opts.title)
    lines += ["", "{% block beforeContent %}"]
    lines += _before_content_banners(opts.design_system, opts.show_demo_warning)
    lines += [
        '  <section aria-label="Back link">',
        "    {{ govukBackLink({",
        f"      'href': backLinkHref if backLinkHref else {quote(opts.back_link_href)},",
        "      'text': 'Back'",
        "    }) }}",
        "  </section>",
        "{% endblock %}",
        "",
        "{% block content %}",
        '  <div class="govuk-grid-row">',
        '    <div class="govuk-grid-column-two-thirds">',
        "      {% if errorList %}{{ govukErrorSummary({",
        "        'titleText': 'There is a problem',",
        "        'errorList': errorList",
        "      }) }}{% endif %}",
        f'      <form action="{_output(opts.form_action)}" method="post" novalidate>',
    ]
    if opts.detailed_explanation:
        lines += [
            "      {{ govukDetails({",
            "        'summaryText': 'Help with this question',",
            f"        'text': {quote(opts.detailed_explanation)}",
            "      }) }}",
        ]
    return "\n".join(lines)


def question_footer() -> str:
    return "\n".join([
        "      {{ govukButton({",
        "        'text': 'Continue'",
        "      }) }}",
        "      </form>",
        "    </div>",
        "  </div>",
        "{% endblock %}",
    ])


# ---------------------------------------------------------------------------
# Check answers
# ---------------------------------------------------------------------------

def check_answers_header(title: str, back_link_href: str, design_system: str, show_demo_warning: bool) -> str:
    lines = _page_preamble(f"Check your answers – {title}", title)
    lines += ["", "{% block beforeContent %}"]
    lines += _before_content_banners(design_system, show_demo_warning)
    lines += [
        "  {{ govukBackLink({",
        "    'text': 'Back',",
        f"    'href': backLinkHref if backLinkHref else {quote(back_link_href)}",
        "  }) }}",
        "{% endblock %}",
        "",
        "{% block content %}",
        '  <div class="govuk-grid-row">',
        '    <div class="govuk-grid-column-two-thirds-from-desktop">',
        '      <h1 class="govuk-heading-xl">Check your answers</h1>',
    ]
    return "\n".join(lines)


def check_answers_footer(url_prefix: str) -> str:
    return "\n".join([
        '      <h2 class="govuk-heading-m">Now send your answers</h2>',
        '      <p class="govuk-body">',
        "        By submitting this form you are confirming that, to the best of your knowledge, the details you are providing are correct.",
        "      </p>",
        f'      <form action="{_output(f"/{url_prefix}/confirmation")}" method="post" novalidate>',
        "        {{ govukButton({",
        "          'text': 'Accept and send'",
        "        }) }}",
        "      </form>",
        "    </div>",
        "  </div>",
        "{% endblock %}",
    ])


# ---------------------------------------------------------------------------
# Confirmation
# ---------------------------------------------------------------------------

def confirmation_page(form: FormDefinition, design_system: str, show_demo_warning: bool) -> str:
    form_type = form.form_type[:1].upper() + form.form_type[1:].lower()
    lines = _page_preamble(f"{form_type} complete – {form.title}", form.title)
    lines += ["", "{% block beforeContent %}"]
    lines += _before_content_banners(design_system, show_demo_warning)
    lines += [
        "{% endblock %}",
        "",
        "{% block content %}",
        '  <div class="govuk-grid-row">',
        '    <div class="govuk-grid-column-two-thirds">',
        "      {{ govukPanel({",
        f"        'titleText': {quote(f'{form_type} complete')}",
        "      }) }}",
        "",
        '      <h2 class="govuk-heading-m">What happens next</h2>',
        "",
        f"      {_markdown(form.what_happens_next)}",
        "",
        '      <p class="govuk-body">',
        '        <a href="#">What did you think of this service?</a> (takes 30 seconds)',
        "      </p>",
        "    </div>",
        "  </div>",
        "{% endblock %}",
    ]
    return "\n".join(lines)
