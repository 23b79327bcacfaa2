"""
Runtime settings read from the environment (and an optional .env file).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .generation.gemini import DEFAULT_MODEL

logger = logging.getLogger("ds-encounter-builder")


class Settings(BaseModel):
    """Paths and credentials used by the CLI."""
    bestiary_dir: Path = Field(default=Path("Bestiary/Monsters"), description="Root of the statblock documents")
    catalog_path: Path = Field(default=Path("data/monsters.json"), description="Where the catalog JSON is written")
    custom_store_path: Path = Field(default=Path("data/custom_monsters.json"), description="Custom monster store file")
    gemini_api_key: str | None = Field(default=None, description="Gemini API key for monster generation")
    gemini_model: str = Field(default=DEFAULT_MODEL)
    log_level: str = Field(default="INFO")


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from ``DS_*`` / ``GEMINI_*`` environment variables.

    Values from a .env file are loaded first but never override variables
    already set in the environment.
    """
    if not load_dotenv(dotenv_path=env_file):
        logger.debug("No .env file found, using environment only")

    defaults = Settings()
    return Settings(
        bestiary_dir=Path(os.getenv("DS_BESTIARY_DIR", str(defaults.bestiary_dir))),
        catalog_path=Path(os.getenv("DS_CATALOG_PATH", str(defaults.catalog_path))),
        custom_store_path=Path(os.getenv("DS_CUSTOM_STORE_PATH", str(defaults.custom_store_path))),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", defaults.gemini_model),
        log_level=os.getenv("DS_LOG_LEVEL", defaults.log_level).upper(),
    )
