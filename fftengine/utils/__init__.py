"""Utility modules for fftengine."""

from fftengine.utils.log_levels import configure_logging, log_level_name, parse_log_level

__all__ = [
    "configure_logging",
    "log_level_name",
    "parse_log_level",
]
