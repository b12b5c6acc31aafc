"""
Logging setup for CNC Gateway Config.

Single log level for the generator and the CLI,
taken from the CNC_LOG_LEVEL env (name or number), else INFO.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_level(raw: str) -> int:
    if not raw or not str(raw).strip():
        return logging.INFO
    raw = str(raw).strip().upper()
    if raw.isdigit():
        return int(raw)
    return int(getattr(logging, raw, logging.INFO))


def level_from_env() -> int:
    """Resolve log level: CNC_LOG_LEVEL env, else INFO."""
    return _parse_level(os.environ.get("CNC_LOG_LEVEL", ""))


def apply_log_level(level: int) -> None:
    """Set root logger level so all loggers use this level."""
    logging.getLogger().setLevel(level)


def configure_logging(level: int | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    apply_log_level(level_from_env() if level is None else level)
