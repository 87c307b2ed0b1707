"""Centralized logging configuration for Pitch Quiz.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "pitch_quiz": logging.INFO,
    "pitch_quiz.main": logging.INFO,
    "pitch_quiz.session": logging.INFO,
    # Pipeline components
    "pitch_quiz.match_engine": logging.INFO,  # Set to DEBUG for per-detection output
    "pitch_quiz.note_utils": logging.INFO,
    "pitch_quiz.audio": logging.INFO,
    "pitch_quiz.core": logging.INFO,
    "pitch_quiz.ui": logging.WARNING,  # UI modules are noisy, keep at WARNING
    "pitch_quiz.logger": logging.WARNING,
    # Libraries/third-party
    "aubio": logging.ERROR,
    "pygame": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'pitch_quiz' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("pitch_quiz"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels. Only top-level entries get the handler;
    # child loggers such as 'pitch_quiz.audio.frame_buffer' propagate to them.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if module_name in ("", "pitch_quiz", "aubio", "pygame"):
            logger.addHandler(_console_handler)
            logger.propagate = False

    logging.getLogger("pitch_quiz").info("Logging configuration complete")
