"""Identifiers that tie log lines and manifests to one invocation.

- session id: one per process (one CLI invocation, or one host application session).
- pipeline run id: one per process_presentation() call, held per thread so runs started
  with run_in_background() on different worker threads don't overwrite each other.
"""

from __future__ import annotations

import os
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

NO_PIPELINE_RUN = "-"

_session_id: str | None = None
_session_lock = threading.Lock()

_current = threading.local()


def _new_id() -> str:
    return uuid.uuid4().hex[:8]


# region get_session_id
def get_session_id() -> str:
    """
    Return the session ID, generating it on first use.

    PAGENUM_SESSION_ID in the environment wins, so a host application can correlate
    our log with its own.
    """
    global _session_id

    if _session_id is None:
        with _session_lock:
            if _session_id is None:
                _session_id = os.environ.get("PAGENUM_SESSION_ID") or _new_id()
    return _session_id


# endregion


# region pipeline runs
@contextmanager
def pipeline_run() -> Iterator[str]:
    """
    Give the calling thread a fresh pipeline run id for the duration of the block.

    Nested runs on the same thread restore the outer id on exit.
    """
    outer = getattr(_current, "run_id", None)
    run_id = _new_id()
    _current.run_id = run_id
    try:
        yield run_id
    finally:
        _current.run_id = outer


def get_pipeline_run_id() -> str:
    """The calling thread's pipeline run id, or NO_PIPELINE_RUN outside a run."""
    return getattr(_current, "run_id", None) or NO_PIPELINE_RUN


# endregion
