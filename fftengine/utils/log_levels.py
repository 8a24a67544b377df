from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

_LEVEL_ALIASES: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": logging.DEBUG,
}


def parse_log_level(value: str | int | None, default: int = logging.WARNING) -> int:
    """Parse a log level string into a numeric level."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    raw = value.strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    key = raw.upper().replace("-", "_")
    return _LEVEL_ALIASES.get(key, default)


def log_level_name(value: str | int | None, default: int = logging.WARNING) -> str:
    """Return a lowercase log level name."""
    level = parse_log_level(value, default)
    name = logging.getLevelName(level)
    if isinstance(name, str) and not name.startswith("Level "):
        return name.lower()
    return logging.getLevelName(default).lower()


def configure_logging(level: str | int | None = None) -> int:
    """Set the level of the ``fftengine`` logger tree.

    ``level`` defaults to the configured ``logging.level``. A stream handler
    is attached only when the root logger has none, so applications that
    configure logging themselves keep their handlers.

    Returns:
        The numeric level applied
    """
    if level is None:
        from fftengine.config import get_config

        level = get_config().logging.level
    numeric = parse_log_level(level, logging.WARNING)
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("fftengine").setLevel(numeric)
    logger.debug(f"fftengine logging level set to {log_level_name(numeric)}")
    return numeric
