"""Tests for the caller-facing providers, sinks, listeners and background runner."""

import logging
import queue
import threading
from pathlib import Path

import pytest

from pagenum.boundary import (
    BytesInputProvider,
    BytesOutputSink,
    CallbackListener,
    DispatchingListener,
    FileInputProvider,
    FileOutputSink,
    LoggingListener,
    run_in_background,
)
from pagenum.errors import SinkUnavailableError, SourceUnavailableError
from pagenum.internals.config.define_config import UserConfig
from tests import helpers
from tests.helpers import RecordingListener


# region Providers and sinks
def test_file_input_provider_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "deck.pptx"
    path.write_bytes(b"abc")

    with FileInputProvider(path).open() as f:
        assert f.read() == b"abc"


def test_file_input_provider_missing_file_raises_and_logs(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        with pytest.raises(SourceUnavailableError, match="Could not open input file"):
            FileInputProvider(tmp_path / "nope.pptx").open()
    assert "nope.pptx" in caplog.text


def test_file_output_sink_creates_parent_folders(tmp_path: Path) -> None:
    path = tmp_path / "a" / "b" / "out.pptx"

    with FileOutputSink(path).open() as f:
        f.write(b"xyz")

    assert path.read_bytes() == b"xyz"


def test_file_output_sink_on_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(SinkUnavailableError):
        FileOutputSink(tmp_path).open()


def test_bytes_output_sink_keeps_data_after_close() -> None:
    sink = BytesOutputSink()
    assert not sink.opened
    assert sink.getvalue() == b""

    with sink.open() as f:
        f.write(b"hello")

    assert sink.opened
    assert sink.getvalue() == b"hello"


def test_bytes_input_provider_opens_fresh_stream_each_time() -> None:
    provider = BytesInputProvider(b"data")
    with provider.open() as f:
        f.read()
    with provider.open() as f:
        assert f.read() == b"data"


# endregion


# region Listeners
def test_logging_listener_records_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    listener = LoggingListener()

    with caplog.at_level(logging.INFO, logger="pagenum"):
        listener.on_progress(10, "Opening presentation...")
        listener.on_complete(False, "Not a valid presentation file")

    assert listener.progress == [(10, "Opening presentation...")]
    assert listener.success is False
    assert listener.message == "Not a valid presentation file"
    assert "[ 10%] Opening presentation..." in caplog.text


def test_callback_listener_forwards_calls() -> None:
    seen: list[tuple] = []
    listener = CallbackListener(
        on_progress=lambda p, m: seen.append(("progress", p, m)),
        on_complete=lambda s, m: seen.append(("complete", s, m)),
    )

    listener.on_progress(50, "half")
    listener.on_complete(True, "done")

    assert seen == [("progress", 50, "half"), ("complete", True, "done")]


def test_callback_listener_tolerates_missing_callbacks() -> None:
    listener = CallbackListener()
    listener.on_progress(1, "x")
    listener.on_complete(True, "y")


def test_dispatching_listener_defers_until_dispatched() -> None:
    inner = RecordingListener()
    pending: list = []
    listener = DispatchingListener(inner, pending.append)

    listener.on_progress(20, "Extracting presentation...")
    listener.on_complete(True, "ok")
    assert inner.progress == []

    for call in pending:
        call()

    assert inner.progress == [(20, "Extracting presentation...")]
    assert inner.completions == [(True, "ok")]


# endregion


# region run_in_background
def test_run_in_background_delivers_on_worker_thread_by_default(
    three_slide_pptx: bytes, quiet_cfg: UserConfig
) -> None:
    sink = BytesOutputSink()
    threads: list[str] = []
    done = threading.Event()
    listener = CallbackListener(
        on_complete=lambda s, m: (threads.append(threading.current_thread().name), done.set())
    )

    thread = run_in_background(BytesInputProvider(three_slide_pptx), sink, listener, quiet_cfg)
    thread.join(timeout=30)

    assert done.is_set()
    assert threads == ["pagenum-worker"]
    assert "ppt/slides/slide1.xml" in helpers.read_zip(sink.getvalue())


def test_run_in_background_hands_notifications_to_dispatch(
    three_slide_pptx: bytes, quiet_cfg: UserConfig
) -> None:
    """Simulates a UI loop: the worker only enqueues, the main thread runs the callbacks."""
    events: queue.Queue = queue.Queue()
    listener = RecordingListener()
    main_thread = threading.current_thread()
    seen_on: set[threading.Thread] = set()

    class _ThreadCheckingListener(RecordingListener):
        def on_progress(self, percent: int, message: str) -> None:
            seen_on.add(threading.current_thread())
            listener.on_progress(percent, message)

        def on_complete(self, success: bool, message: str) -> None:
            seen_on.add(threading.current_thread())
            listener.on_complete(success, message)

    thread = run_in_background(
        BytesInputProvider(three_slide_pptx),
        BytesOutputSink(),
        _ThreadCheckingListener(),
        quiet_cfg,
        dispatch=events.put,
    )
    thread.join(timeout=30)

    while not events.empty():
        events.get()()

    assert seen_on == {main_thread}
    assert listener.percents[-1] == 100
    assert listener.completions == [(True, "Successfully added slide numbers to 3 slides")]


# endregion
