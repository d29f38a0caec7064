"""Caller-facing contracts for the numbering pipeline, plus stock implementations.

A caller hands the pipeline:
- an InputProvider it can open for reading,
- an OutputSink it can open for writing (only opened at the very end of a run),
- a ProcessingListener that receives progress and exactly one completion call.

run_in_background() runs the pipeline on a worker thread and, if given a dispatch
function, routes every listener call through it so a single-threaded UI loop can
receive them on its own thread (e.g. `dispatch=lambda fn: root.after(0, fn)` for Tk).
"""

from __future__ import annotations

import functools
import io
import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Callable, Protocol

from pagenum.errors import SinkUnavailableError, SourceUnavailableError

if TYPE_CHECKING:
    from pagenum.internals.config.define_config import UserConfig

log = logging.getLogger("pagenum")


# region Protocols
class InputProvider(Protocol):
    """Something that can be opened as a readable binary stream."""

    def open(self) -> BinaryIO:
        """Open the source. Raises SourceUnavailableError if it can't be opened."""
        ...


class OutputSink(Protocol):
    """Something that can be opened as a writable binary stream."""

    def open(self) -> BinaryIO:
        """Open the destination. Raises SinkUnavailableError if it can't be opened."""
        ...


class ProcessingListener(Protocol):
    """Receives progress and completion notifications from a pipeline run."""

    def on_progress(self, percent: int, message: str) -> None: ...

    def on_complete(self, success: bool, message: str) -> None: ...


# endregion


# region File adapters
class FileInputProvider:
    """Read the presentation from a path on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def open(self) -> BinaryIO:
        try:
            return open(self.path, "rb")
        except OSError as e:
            log.error(f"Could not open input file {self.path}: {e}")
            raise SourceUnavailableError(
                f"Could not open input file {self.path}: {e}"
            ) from e

    def __repr__(self) -> str:
        return f"FileInputProvider({str(self.path)!r})"


class FileOutputSink:
    """Write the numbered presentation to a path on disk, creating parent folders as needed."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def open(self) -> BinaryIO:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            return open(self.path, "wb")
        except PermissionError as e:
            log.error(f"Permission denied opening output file {self.path}: {e}")
            raise SinkUnavailableError(
                f"Save failed: {self.path} may be open in another program"
            ) from e
        except OSError as e:
            log.error(f"Could not open output file {self.path}: {e}")
            raise SinkUnavailableError(
                f"Could not open output file {self.path}: {e}"
            ) from e

    def __repr__(self) -> str:
        return f"FileOutputSink({str(self.path)!r})"


# endregion


# region In-memory adapters
class BytesInputProvider:
    """Serve the presentation from bytes already in memory."""

    def __init__(self, data: bytes) -> None:
        self.data = data

    def open(self) -> BinaryIO:
        return io.BytesIO(self.data)

    def __repr__(self) -> str:
        return f"BytesInputProvider({len(self.data)} bytes)"


class _RetainingBytesIO(io.BytesIO):
    """BytesIO that remembers its contents after close()."""

    def __init__(self) -> None:
        super().__init__()
        self.retained: bytes | None = None

    def close(self) -> None:
        if not self.closed:
            self.retained = self.getvalue()
        super().close()


class BytesOutputSink:
    """Collect the numbered presentation in memory; read it back with getvalue()."""

    def __init__(self) -> None:
        self._buffer: _RetainingBytesIO | None = None

    @property
    def opened(self) -> bool:
        """True once the pipeline has started writing output."""
        return self._buffer is not None

    def open(self) -> BinaryIO:
        self._buffer = _RetainingBytesIO()
        return self._buffer

    def getvalue(self) -> bytes:
        if self._buffer is None:
            return b""
        if self._buffer.retained is not None:
            return self._buffer.retained
        return self._buffer.getvalue()

    def __repr__(self) -> str:
        return f"BytesOutputSink(opened={self.opened})"


# endregion


# region Listeners
class LoggingListener:
    """Listener that logs progress and remembers what it was told. Used by the CLI."""

    def __init__(self) -> None:
        self.progress: list[tuple[int, str]] = []
        self.success: bool | None = None
        self.message: str | None = None

    def on_progress(self, percent: int, message: str) -> None:
        self.progress.append((percent, message))
        log.info(f"[{percent:3d}%] {message}")

    def on_complete(self, success: bool, message: str) -> None:
        self.success = success
        self.message = message
        if success:
            log.info(message)
        else:
            log.error(message)


class CallbackListener:
    """Adapt two plain callables to the ProcessingListener protocol."""

    def __init__(
        self,
        on_progress: Callable[[int, str], None] | None = None,
        on_complete: Callable[[bool, str], None] | None = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_complete = on_complete

    def on_progress(self, percent: int, message: str) -> None:
        if self._on_progress is not None:
            self._on_progress(percent, message)

    def on_complete(self, success: bool, message: str) -> None:
        if self._on_complete is not None:
            self._on_complete(success, message)


class DispatchingListener:
    """Forward every notification through `dispatch`, e.g. onto a UI thread's event queue."""

    def __init__(
        self,
        listener: ProcessingListener,
        dispatch: Callable[[Callable[[], None]], object],
    ) -> None:
        self.listener = listener
        self.dispatch = dispatch

    def on_progress(self, percent: int, message: str) -> None:
        self.dispatch(functools.partial(self.listener.on_progress, percent, message))

    def on_complete(self, success: bool, message: str) -> None:
        self.dispatch(functools.partial(self.listener.on_complete, success, message))


# endregion


# region run_in_background
def run_in_background(
    source: InputProvider,
    sink: OutputSink,
    listener: ProcessingListener,
    cfg: UserConfig | None = None,
    dispatch: Callable[[Callable[[], None]], object] | None = None,
) -> threading.Thread:
    """
    Start process_presentation() on a worker thread and return the (started) thread.

    The pipeline never raises to the caller; the outcome arrives via listener.on_complete.

    Args:
        source: Where to read the presentation from.
        sink: Where to write the numbered presentation.
        listener: Receives progress and completion.
        cfg: Optional configuration (style, staging location, manifest switch).
        dispatch: Optional hand-off function. When given, listener calls are wrapped in a
            zero-arg callable and passed to it instead of being invoked on the worker thread.
    """
    # Imported here; pipeline imports this module for the protocols.
    from pagenum.pipeline import process_presentation

    target_listener: ProcessingListener = (
        DispatchingListener(listener, dispatch) if dispatch is not None else listener
    )

    log.info("Starting page numbering in background thread.")
    thread = threading.Thread(
        target=process_presentation,
        args=(source, sink, target_listener),
        kwargs={"cfg": cfg},
        name="pagenum-worker",
        daemon=True,
    )
    thread.start()
    return thread


# endregion
