# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Centralized configuration for environment variables."""

import logging
import os
from pathlib import Path

SNAPSHOT_DIR_ENV = "SCOREBOOK_SNAPSHOT_DIR"
ERA_INNINGS_ENV = "SCOREBOOK_ERA_INNINGS"
LOG_LEVEL_ENV = "SCOREBOOK_LOG_LEVEL"

DEFAULT_SNAPSHOT_DIR = Path(__file__).resolve().parent / "data" / "games"
DEFAULT_ERA_INNINGS = 9
DEFAULT_PORT = 5050


def get_snapshot_dir() -> Path:
    """Return the directory holding game snapshot JSON files."""
    value = os.environ.get(SNAPSHOT_DIR_ENV, "")
    return Path(value) if value else DEFAULT_SNAPSHOT_DIR


def get_era_innings() -> int:
    """Return the ERA denominator (innings in a standard game)."""
    value = os.environ.get(ERA_INNINGS_ENV, "")
    if not value:
        return DEFAULT_ERA_INNINGS
    try:
        innings = int(value)
    except ValueError:
        raise ValueError(f"{ERA_INNINGS_ENV} must be an integer, got {value!r}") from None
    if innings < 1:
        raise ValueError(f"{ERA_INNINGS_ENV} must be at least 1, got {innings}")
    return innings


def get_log_level() -> int:
    """Return the logging level name from the environment (default WARNING)."""
    name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def get_port() -> int:
    return int(os.environ.get("PORT", DEFAULT_PORT))


def configure_logging() -> None:
    """Configure root logging for the CLI and the web app."""
    logging.basicConfig(
        level=get_log_level(),
        format="%(levelname)s: %(message)s",
    )
