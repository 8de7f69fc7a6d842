"""Application configuration and defaults."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from kubesearch.models.weights import AuthorWeights

logger = logging.getLogger(__name__)

# Deployments from these maintainers get their score multiplied.
DEFAULT_AUTHOR_WEIGHTS: dict[str, float] = {
    "bjw-s": 1.5,
}


def _default_db_path() -> Path:
    return Path(os.environ.get("KUBESEARCH_DB_PATH", "") or "./repos.db")


def _default_db_extended_path() -> Path:
    return Path(os.environ.get("KUBESEARCH_DB_EXTENDED_PATH", "") or "./repos-extended.db")


def _default_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "") or "info"


def _default_output() -> str:
    return os.environ.get("KUBESEARCH_OUTPUT", "") or "table"


def parse_author_weights(raw: str | None) -> AuthorWeights:
    """Parse the AUTHOR_WEIGHTS JSON object, e.g. '{"bjw-s": 1.5, "onedr0p": 1.2}'.

    Falls back to the defaults when the variable is unset or not valid JSON.
    Entries that are not positive numbers are dropped.
    """
    if not raw:
        return AuthorWeights.from_mapping(DEFAULT_AUTHOR_WEIGHTS)
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("Failed to parse AUTHOR_WEIGHTS, using defaults", exc_info=True)
        return AuthorWeights.from_mapping(DEFAULT_AUTHOR_WEIGHTS)
    if not isinstance(parsed, dict):
        logger.warning("AUTHOR_WEIGHTS must be a JSON object, using defaults")
        return AuthorWeights.from_mapping(DEFAULT_AUTHOR_WEIGHTS)

    weights: dict[str, float] = {}
    for author, weight in parsed.items():
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight <= 0:
            logger.warning("Ignoring author weight %r=%r (must be a positive number)", author, weight)
            continue
        weights[str(author)] = float(weight)
    logger.debug("Loaded custom author weights: %s", weights)
    return AuthorWeights.from_mapping(weights)


def _default_author_weights() -> AuthorWeights:
    return parse_author_weights(os.environ.get("AUTHOR_WEIGHTS"))


@dataclass
class Settings:
    db_path: Path = field(default_factory=_default_db_path)
    db_extended_path: Path = field(default_factory=_default_db_extended_path)
    log_level: str = field(default_factory=_default_log_level)
    author_weights: AuthorWeights = field(default_factory=_default_author_weights)
    default_output: str = field(default_factory=_default_output)

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


# Global singleton
settings = Settings()
