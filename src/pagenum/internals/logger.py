"""
Logging setup for the "pagenum" logger.

Every line carries the session id and, when emitted during a numbering run, that run's
pipeline id, so interleaved runs from background threads can be told apart in one file.
"""

import logging
from pathlib import Path

from pagenum.internals.paths import user_log_dir_path
from pagenum.internals.run_context import get_pipeline_run_id, get_session_id

LOG_FILENAME = "pagenum.log"
TRACE_LOG_FILENAME = "trace_pagenum.log"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# region PipelineRunFilter
class PipelineRunFilter(logging.Filter):
    """Stamp each record with the emitting thread's pipeline run id (as `pipeline_id`)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.pipeline_id = get_pipeline_run_id()
        return True


# endregion


# region setup_logger
def setup_logger(
    name: str = "pagenum",
    level: int = logging.DEBUG,
    enable_trace: bool = False,
) -> logging.Logger:
    """
    Attach console and file handlers to the named logger.

    Safe to call more than once: a logger that already has handlers is returned as-is.

    Args:
        name: Logger name (default: "pagenum")
        level: Minimum level for the logger itself
        enable_trace: Also write trace_pagenum.log with file/function/line for every record

    Example output line:
        2025-01-09 14:23:45 [INFO] Found 12 slide(s). [session:a1b2c3d4 pipeline:9f8e7d6c]
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    # Keep our records out of whatever a host application attached to the root logger.
    logger.propagate = False

    session_id = get_session_id()
    run_filter = PipelineRunFilter()
    formatter = logging.Formatter(
        f"%(asctime)s [%(levelname)s] %(message)s [session:{session_id} pipeline:%(pipeline_id)s]",
        datefmt=_DATE_FORMAT,
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    logger.addHandler(_configured(console_handler, formatter, run_filter))

    log_file = log_file_path()
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(_configured(file_handler, formatter, run_filter))

    if enable_trace:
        trace_formatter = logging.Formatter(
            "%(filename)s: %(funcName)s(), Line: %(lineno)d: - [%(levelname)s] %(asctime)s"
            f" - %(message)s -- [session={session_id} pipeline=%(pipeline_id)s thread=%(threadName)s]",
            datefmt=_DATE_FORMAT,
        )
        trace_handler = logging.FileHandler(
            user_log_dir_path() / TRACE_LOG_FILENAME, encoding="utf-8"
        )
        trace_handler.setLevel(logging.DEBUG)
        logger.addHandler(_configured(trace_handler, trace_formatter, run_filter))

    logger.info(f"Logger initialized. Writing to {log_file}")
    return logger


def log_file_path() -> Path:
    """Where the main log file lives."""
    return user_log_dir_path() / LOG_FILENAME


def _configured(
    handler: logging.Handler, formatter: logging.Formatter, run_filter: logging.Filter
) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(run_filter)
    return handler


# endregion
