"""Environment variable validation and management."""

import os
import logging
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on", "enabled"}
_FALSY = {"0", "false", "no", "off", "disabled"}


class ConfigurationError(Exception):
    """Raised when environment variables are missing or invalid."""


def validate_environment() -> None:
    """Apply defaults and validate the variables the application reads.

    Raises ConfigurationError if validation fails.
    """
    defaults = {
        "DB_PATH": os.getenv("DB_PATH") or "data.db",
    }

    for var, value in defaults.items():
        if not os.getenv(var):
            os.environ[var] = value
            logger.info("Environment variable %s not set; using default '%s'", var, value)

    optional_vars: Dict[str, str] = {
        "FACT_CATEGORIES_PATH": "Alternate fact category catalog (JSON)",
        "GAMES_PATH": "Alternate game catalog (JSON)",
        "LEARNING_PATH_DECISION_LOG": "Emit structured learning path log events",
    }

    for var in ("FACT_CATEGORIES_PATH", "GAMES_PATH"):
        catalog_path = os.getenv(var)
        if catalog_path and not Path(catalog_path).is_file():
            raise ConfigurationError(f"{var} does not point to a file: {catalog_path}")

    decision_log = os.getenv("LEARNING_PATH_DECISION_LOG")
    if decision_log is not None and decision_log.strip().lower() not in _TRUTHY | _FALSY:
        raise ConfigurationError(
            f"Invalid boolean for LEARNING_PATH_DECISION_LOG: {decision_log}"
        )

    for var, description in optional_vars.items():
        if not os.getenv(var):
            logger.debug("Optional environment variable not set: %s (%s)", var, description)


def get_env_bool(name: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY
