"""Centralized logging configuration for Fretboard Master.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Dict, Optional, TextIO

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "fretboard_master": logging.INFO,
    "fretboard_master.main": logging.INFO,
    # Game components
    "fretboard_master.fretboard": logging.INFO,
    "fretboard_master.session": logging.INFO,  # Set to DEBUG to trace every tick
    "fretboard_master.scheduler": logging.WARNING,
    "fretboard_master.audio": logging.INFO,
    "fretboard_master.core": logging.INFO,
    "fretboard_master.ui": logging.WARNING,  # UI modules often noisy, keep at WARNING
    # Libraries/third-party
    "PIL": logging.ERROR,
    "pygame": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None

# Loggers handed out by get_logger
_logger_cache: Dict[str, logging.Logger] = {}


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'fretboard_master' log levels with this level (e.g., "DEBUG").
        log_file: Write log records to this file instead of the console. The curses
                  UI needs this, otherwise log lines land on top of the drawn screen.
        stream: Stream for the console handler (default: stdout).
    """
    global _console_handler

    if _console_handler is not None:
        _console_handler.close()

    if log_file:
        _console_handler = logging.FileHandler(log_file)
    else:
        _console_handler = logging.StreamHandler(stream or sys.stdout)
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
                if module_name.startswith("fretboard_master"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_console_handler)
        logger.propagate = False

    # Confirm setup complete
    logging.getLogger("fretboard_master").debug("Logging configuration complete")


def get_logger(name: str) -> logging.Logger:
    """Get the logger for a module, cached by name.

    Modules missing from MODULE_LOG_LEVELS propagate to their nearest listed
    package, so 'fretboard_master.core.config' logs through
    'fretboard_master.core' at that package's level.

    Args:
        name: The full module name (e.g., 'fretboard_master.session')

    Returns:
        The logger for that module
    """
    logger = _logger_cache.get(name)
    if logger is None:
        logger = _logger_cache[name] = logging.getLogger(name)
    return logger
