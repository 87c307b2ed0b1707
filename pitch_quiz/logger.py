"""Centralized lazy-loading logger lookup for Pitch Quiz."""
import logging
from typing import Dict

# Module-level cache for loggers
_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get a lazily initialized logger with the given name.

    Levels and handlers are applied later by
    ``pitch_quiz.logging_config.setup_logging``.

    Args:
        name: The full module name (e.g., 'pitch_quiz.match_engine')

    Returns:
        A logger instance
    """
    if name not in _logger_cache:
        _logger_cache[name] = logging.getLogger(name)
    return _logger_cache[name]
