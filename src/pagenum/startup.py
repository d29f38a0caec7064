"""Startup logic the command line entry point runs before anything else.

Handles:
- Console encoding (Windows consoles default to a legacy code page)
- Debug mode (PAGENUM_DEBUG turns on the trace log)
- Logging configuration
"""

import logging
import os
import platform
import sys

from pagenum.internals import constants
from pagenum.internals.logger import setup_logger

DEBUG_ENV_VAR = "PAGENUM_DEBUG"

_TRUE_WORDS = frozenset({"true", "t", "1", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"false", "f", "0", "no", "n", "off"})


# region initialize_application
def initialize_application() -> logging.Logger:
    """Common startup tasks. Exits with a message if logging can't be set up."""

    # Must run before any console output
    _use_utf8_console()

    debug, bad_value = _debug_mode_from_env()

    try:
        log = setup_logger(enable_trace=debug)
    except PermissionError as e:
        print(
            f"Cannot create log files: {e}. Check permissions on your Documents folder.",
            file=sys.stderr,
        )
        sys.exit(1)
    except OSError as e:
        print(
            f"Cannot create log files: {e}. Check free disk space and folder access.",
            file=sys.stderr,
        )
        sys.exit(1)

    if bad_value is not None:
        # Only reportable now that logging exists.
        log.warning(
            f"Invalid value for {DEBUG_ENV_VAR}: '{bad_value}'. Using default ({constants.DEBUG_MODE_DEFAULT})."
        )
    log.info(f"Starting pagenum Log. Debug mode: {debug}")
    return log


# endregion


# region debug mode
def parse_switch(value: str) -> bool:
    """Read an on/off word such as "yes", "0" or "Off". Raises ValueError for anything else."""
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"{value!r} is not an on/off value")


def _debug_mode_from_env() -> tuple[bool, str | None]:
    """
    Debug mode from PAGENUM_DEBUG, else constants.DEBUG_MODE_DEFAULT.

    Returns (debug, bad_value); bad_value is the raw env string when it couldn't be parsed.
    """
    raw = os.environ.get(DEBUG_ENV_VAR)
    if raw is None:
        return constants.DEBUG_MODE_DEFAULT, None
    try:
        return parse_switch(raw), None
    except ValueError:
        return constants.DEBUG_MODE_DEFAULT, raw


# endregion


# region _use_utf8_console
def _use_utf8_console() -> None:
    """Print slide paths and typefaces with non-ASCII characters without UnicodeEncodeError."""
    if platform.system() == "Windows" and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")


# endregion
