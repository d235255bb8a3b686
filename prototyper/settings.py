"""Application configuration management."""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

DESIGN_SYSTEMS = ("GOV.UK", "HMRC")
LOG_FORMATS = ("text", "json")


@dataclass
class Settings:
    """Settings loaded from environment."""

    # App
    app_name: str = "Form Prototyper"
    environment: str = "development"  # development, staging, production

    # Compiled pages
    asset_path: str = "/assets"
    form_script_path: str = "/assets/form.js"
    default_design_system: str = "GOV.UK"
    show_demo_warning_live: bool = True

    # Frontend packages
    hmrc_version_file: str = "node_modules/hmrc-frontend/hmrc/VERSION.txt"
    frontend_template_dirs: str = "node_modules/govuk-frontend/dist,node_modules/hmrc-frontend"

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.default_design_system not in DESIGN_SYSTEMS:
            raise ValueError(
                f"DEFAULT_DESIGN_SYSTEM must be one of {', '.join(DESIGN_SYSTEMS)}"
            )
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}")

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def template_dirs(self) -> List[str]:
        """Directories holding the GOV.UK and HMRC component templates."""
        return [d.strip() for d in self.frontend_template_dirs.split(",") if d.strip()]


def load_settings_from_env(env_file: Optional[str] = None) -> Settings:
    """Load settings from environment variables."""
    load_dotenv(env_file)

    def get_bool(key: str, default: bool = False) -> bool:
        value = os.getenv(key, str(default)).lower()
        return value in ("true", "1", "yes")

    return Settings(
        # App
        app_name=os.getenv("APP_NAME", "Form Prototyper"),
        environment=os.getenv("ENVIRONMENT", "development"),

        # Compiled pages
        asset_path=os.getenv("ASSET_PATH", "/assets"),
        form_script_path=os.getenv("FORM_SCRIPT_PATH", "/assets/form.js"),
        default_design_system=os.getenv("DEFAULT_DESIGN_SYSTEM", "GOV.UK"),
        show_demo_warning_live=get_bool("SHOW_DEMO_WARNING_LIVE", True),

        # Frontend packages
        hmrc_version_file=os.getenv(
            "HMRC_VERSION_FILE", "node_modules/hmrc-frontend/hmrc/VERSION.txt"
        ),
        frontend_template_dirs=os.getenv(
            "FRONTEND_TEMPLATE_DIRS",
            "node_modules/govuk-frontend/dist,node_modules/hmrc-frontend",
        ),

        # Logging
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "text"),
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings_from_env()


def clear_settings_cache() -> None:
    """Clear settings cache (useful for testing)."""
    get_settings.cache_clear()
