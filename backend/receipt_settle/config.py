"""
Configuration settings loaded from environment variables.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Any, List
from dotenv import load_dotenv
from pathlib import Path
import logging

# Determine .env file path (backend/.env)
_env_path = Path(__file__).parent.parent / ".env"

# Environment variables take precedence over defaults
load_dotenv(dotenv_path=_env_path, override=True)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application settings
    env: str = Field(
        default="local",
        alias="ENV",
        description="Environment (local, staging, production)"
    )
    log_level: str = Field(
        default="info",
        alias="LOG_LEVEL",
        description="Logging level"
    )
    cors_allow_origins: Any = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        alias="CORS_ALLOW_ORIGINS",
        description="Allowed CORS origins (comma-separated in the environment)"
    )

    # Settlement defaults
    total_item_name: str = Field(
        default="합계",
        alias="TOTAL_ITEM_NAME",
        description="Name of the total row seeded from a scanned receipt"
    )
    default_item_name: str = Field(
        default="품목",
        alias="DEFAULT_ITEM_NAME",
        description="Name given to newly added items"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Upper-case the level name; unknown names fall back to INFO."""
        name = str(v or "").strip().upper()
        if name not in LOG_LEVELS:
            logger.warning(f"Unknown LOG_LEVEL {v!r}, using INFO")
            return "INFO"
        return name

    @field_validator('cors_allow_origins', mode='before')
    @classmethod
    def parse_origins_from_string(cls, v: Any) -> List[str]:
        """Parse a comma-separated origin list from a string environment variable."""
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return list(v or [])

    model_config = {
        "env_file": str(_env_path),
        "case_sensitive": False,
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }


# Create a singleton settings instance
settings = Settings()

logger.debug(f"Loaded settings for env={settings.env}, log_level={settings.log_level}")
