"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LOGGING_CONFIG = Path("conf") / "logging.yml"


def configure_logging(config_path: str | Path = DEFAULT_LOGGING_CONFIG) -> None:
    """Apply a ``logging.config.dictConfig`` YAML file.

    Falls back to ``logging.basicConfig`` at INFO level when the file
    does not exist.
    """
    path = Path(config_path)
    if not path.exists():
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        logger.info("No logging config at %s, using basicConfig", path)
        return

    with path.open(encoding="utf-8") as f:
        logging.config.dictConfig(yaml.safe_load(f))
    logger.debug("Logging configured from %s", path)
