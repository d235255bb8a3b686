"""
Frontend assets referenced by compiled pages.

The HMRC frontend ships its CSS and JS under versioned file names, so
pages built for the HMRC design system need the installed version. It
is read once per process and cached; ``reset_asset_version_cache`` exists
for process start-up and tests.
"""

import logging
from functools import lru_cache
from pathlib import Path

from prototyper.settings import get_settings

logger = logging.getLogger(__name__)


class AssetVersionNotFoundError(Exception):
    """Raised when the HMRC frontend version file is missing."""
    pass


@lru_cache(maxsize=1)
def get_hmrc_assets_version() -> str:
    """
    Return the installed HMRC frontend version.

    Raises:
        AssetVersionNotFoundError: If the version file does not exist
    """
    version_file = Path(get_settings().hmrc_version_file)
    if not version_file.is_file():
        raise AssetVersionNotFoundError(
            f"HMRC frontend assets version file not found: {version_file}"
        )
    version = version_file.read_text(encoding="utf-8").strip()
    logger.debug(f"Loaded HMRC frontend version {version}")
    return version


FORM_SCRIPT_FILE = Path(__file__).resolve().parent.parent / "data" / "form.js"


@lru_cache(maxsize=1)
def form_script_source() -> str:
    """Browser validation script shipped with every downloaded prototype."""
    return FORM_SCRIPT_FILE.read_text(encoding="utf-8")


def reset_asset_version_cache() -> None:
    get_hmrc_assets_version.cache_clear()
