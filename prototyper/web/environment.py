"""
Reference Jinja2 environment for compiled pages.

Registers the filters compiled expressions rely on. The GOV.UK component
macros themselves come from the loader the caller supplies.
"""

import logging
from typing import Any, Mapping, Optional

from jinja2 import BaseLoader, Environment, FileSystemLoader

from prototyper.domain.expressions import CompiledExpression
from prototyper.settings import get_settings
from prototyper.web.filters import FILTERS

logger = logging.getLogger(__name__)


def build_environment(loader: Optional[BaseLoader] = None, autoescape: bool = True) -> Environment:
    """Create an environment with the compiled-page filters registered."""
    env = Environment(loader=loader or BaseLoader(), autoescape=autoescape)
    env.filters.update(FILTERS)
    return env


def frontend_environment() -> Environment:
    """Environment that loads components from the installed frontend packages."""
    template_dirs = get_settings().template_dirs
    logger.debug(f"Loading frontend templates from {template_dirs}")
    return build_environment(FileSystemLoader(template_dirs))


def evaluate_expression(
    expression: CompiledExpression,
    data: Mapping[str, Any],
    env: Optional[Environment] = None,
) -> Any:
    """Evaluate a compiled expression against a Live Answer Store."""
    env = env or build_environment()
    return env.compile_expression(expression.source)(data=dict(data))
