"""
Compile a form definition into a downloadable prototype.

Usage:
    prototyper-compile form.json --prefix my-form --out build/
    prototyper-compile form.json --structure
"""

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from prototyper.core.logging import configure_logging
from prototyper.domain.schemas import FormDefinition
from prototyper.domain.services.page_assembler import assemble_downloadable_pages
from prototyper.domain.services.structure_graph_builder import build_structure_vm
from prototyper.settings import DESIGN_SYSTEMS, get_settings

logger = logging.getLogger(__name__)


def load_form(path: Path) -> FormDefinition:
    with path.open(encoding="utf-8") as f:
        return FormDefinition.model_validate(json.load(f))


def write_files(files: dict, out_dir: Path) -> None:
    for relative_path, content in files.items():
        target = out_dir / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    parser = argparse.ArgumentParser(
        description="Compile a form definition into prototype page templates"
    )
    parser.add_argument("form", type=Path, help="Path to the form definition JSON")
    parser.add_argument(
        "--prefix", default="prototype",
        help="URL prefix the pages are served under",
    )
    parser.add_argument(
        "--out", type=Path, default=Path("build"),
        help="Directory to write the prototype files to",
    )
    parser.add_argument(
        "--design-system", choices=DESIGN_SYSTEMS, default=settings.default_design_system,
        help="Design system the pages are built for",
    )
    parser.add_argument(
        "--structure", action="store_true",
        help="Print the structure view model as JSON instead of writing pages",
    )
    args = parser.parse_args(argv)

    try:
        form = load_form(args.form)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Could not load form definition {args.form}: {e}")
        return 1

    if args.structure:
        print(build_structure_vm(form.questions).model_dump_json(by_alias=True, indent=2))
        return 0

    files = assemble_downloadable_pages(form, args.prefix, args.design_system)
    write_files(files, args.out)
    logger.info(f"Wrote {len(files)} files to {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
