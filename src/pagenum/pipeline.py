"""Number every slide of a presentation: extract, locate slides, insert shapes, repack, save.

process_presentation() is the single entry point. It never raises; every run ends with
exactly one listener.on_complete() call and returns the matching ProcessingOutcome.

Stage progression (percent reported before each stage starts):
    Opening 10 -> Extracting 20 -> LocatingSlides 40 -> Numbering 50..80
    -> Repackaging 80 -> Saving 90 -> Done 100
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import BinaryIO, Union

from pagenum import archive, slides
from pagenum.archive import Package
from pagenum.boundary import InputProvider, OutputSink, ProcessingListener
from pagenum.errors import (
    ConfigurationError,
    PageNumberError,
    SinkUnavailableError,
    SlideMutationError,
    SourceUnavailableError,
    UnexpectedError,
)
from pagenum.internals import constants
from pagenum.internals.config.define_config import UserConfig
from pagenum.internals.manifest import RunManifest
from pagenum.internals.run_context import get_session_id, pipeline_run
from pagenum.mutate import PageNumberStyle, mutate
from pagenum.slides import SlidePart

log = logging.getLogger("pagenum")

_COPY_CHUNK_SIZE = 1024 * 1024


# region Outcome types
@dataclass
class SlideResult:
    """What happened to one slide. Kept for diagnostics; callers only see the aggregate."""

    path: str
    index: int
    numbered: bool
    reason: str | None = None


@dataclass
class Completed:
    """The run finished. Individual slides may still have been skipped (see slide_results)."""

    slide_count: int
    slide_results: list[SlideResult] = field(default_factory=list)

    success = True

    @property
    def message(self) -> str:
        return f"Successfully added slide numbers to {self.slide_count} slides"

    @property
    def numbered_count(self) -> int:
        return sum(1 for r in self.slide_results if r.numbered)

    @property
    def skipped(self) -> list[SlideResult]:
        return [r for r in self.slide_results if not r.numbered]


@dataclass
class Failed:
    """The run aborted; nothing usable was delivered."""

    message: str
    error: PageNumberError

    success = False


ProcessingOutcome = Union[Completed, Failed]

# endregion


# region ProgressReporter
class ProgressReporter:
    """
    Wraps the caller's listener to guarantee the notification contract:
    percentages never go down, and on_complete is delivered exactly once.

    Reports are also recorded in the run manifest, when there is one.
    """

    def __init__(
        self, listener: ProcessingListener, manifest: RunManifest | None = None
    ) -> None:
        self.listener = listener
        self.manifest = manifest
        self.last_percent = 0
        self.last_message: str | None = None
        self.completed = False

    def progress(self, percent: int, message: str) -> None:
        percent = max(0, min(100, percent))
        if percent < self.last_percent:
            log.debug(f"Progress {percent} would go backwards from {self.last_percent}; holding.")
            percent = self.last_percent
        self.last_percent = percent
        self.last_message = message
        if self.manifest is not None:
            self.manifest.record_stage(percent, message)
        log.debug(f"Progress {percent}%: {message}")
        self.listener.on_progress(percent, message)

    def complete(self, success: bool, message: str) -> None:
        """
        Deliver the terminal notification. A second call is ignored, and an exception
        from the listener is logged, never raised: the run is over either way.
        """
        if self.completed:
            log.warning(f"Ignoring second completion call ({success}, {message!r}).")
            return
        self.completed = True
        try:
            self.listener.on_complete(success, message)
        except Exception:
            log.exception("Listener raised in on_complete; the outcome is still returned.")


# endregion


# region process_presentation
def process_presentation(
    source: InputProvider,
    sink: OutputSink,
    listener: ProcessingListener,
    cfg: UserConfig | None = None,
) -> ProcessingOutcome:
    """
    Add a page number to every slide of the presentation read from `source` and write the
    result to `sink`.

    Args:
        source: Provides the input pptx bytes.
        sink: Receives the output pptx bytes. Only opened once everything else has succeeded.
        listener: Gets progress updates and one final completion call. An exception raised
            by its on_progress ends the run as Failed(UnexpectedError).
        cfg: Style, staging location and manifest settings. Defaults to UserConfig().
            Invalid settings end the run as Failed(ConfigurationError) before anything is read.

    Returns:
        Completed(slide_count) or Failed(message). The same outcome is sent to listener.on_complete.
    """
    cfg = cfg if cfg is not None else UserConfig()

    with pipeline_run() as pipeline_id:
        log_pipeline_info(pipeline_id, source, sink)
        manifest = _start_manifest(cfg, pipeline_id, source, sink)
        reporter = ProgressReporter(listener, manifest)

        outcome = _run_guarded(source, sink, reporter, cfg, pipeline_id)

        if isinstance(outcome, Completed):
            if manifest is not None:
                manifest.complete([asdict(r) for r in outcome.slide_results])
            log.info(f"Numbered {outcome.numbered_count} of {outcome.slide_count} slide(s).")
        elif manifest is not None:
            manifest.fail(outcome.error, stage=reporter.last_message)

        reporter.complete(outcome.success, outcome.message)
        return outcome


def _run_guarded(
    source: InputProvider,
    sink: OutputSink,
    reporter: ProgressReporter,
    cfg: UserConfig,
    pipeline_id: str,
) -> ProcessingOutcome:
    """Run every stage, including the final Done report, and turn any exception into Failed."""
    try:
        style = _checked_style(cfg)
        with tempfile.TemporaryDirectory(
            prefix=f"{constants.STAGING_PREFIX}{pipeline_id}_",
            dir=cfg.get_staging_dir(),
            ignore_cleanup_errors=True,
        ) as staging:
            log.debug(f"Staging in {staging}")
            slide_results = _run_stages(source, sink, reporter, Path(staging), style)
        reporter.progress(constants.PROGRESS_DONE, "Processing complete!")
        return Completed(slide_count=len(slide_results), slide_results=slide_results)
    except PageNumberError as e:
        log.error(f"Pipeline failed: {e}")
        return Failed(message=str(e), error=e)
    except Exception as e:
        log.exception("Unexpected pipeline failure")
        wrapped = UnexpectedError(str(e) or type(e).__name__)
        wrapped.__cause__ = e
        return Failed(message=str(wrapped), error=wrapped)


def _checked_style(cfg: UserConfig) -> PageNumberStyle:
    """Validate the settings that end up inside slide XML, then build the style from them."""
    try:
        cfg.validate()
    except ValueError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
    return cfg.style()


# endregion


# region _run_stages
def _run_stages(
    source: InputProvider,
    sink: OutputSink,
    reporter: ProgressReporter,
    staging: Path,
    style: PageNumberStyle,
) -> list[SlideResult]:
    """Everything between "Opening" and "Saving". Raises PageNumberError subclasses on abort."""

    reporter.progress(constants.PROGRESS_OPENING, "Opening presentation...")
    staged_input = staging / "input.pptx"
    _stage_input(source, staged_input)

    reporter.progress(constants.PROGRESS_EXTRACTING, "Extracting presentation...")
    with open(staged_input, "rb") as f:
        pkg = archive.extract(f)

    reporter.progress(constants.PROGRESS_LOCATING, "Processing slides...")
    slide_parts = slides.locate(pkg)
    log.info(f"Found {len(slide_parts)} slide(s).")

    reporter.progress(constants.PROGRESS_NUMBERING, "Adding slide numbers...")
    results: list[SlideResult] = []
    total = len(slide_parts)
    for position, part in enumerate(slide_parts):
        results.append(number_slide(pkg, part, style))
        percent = constants.PROGRESS_NUMBERING + (
            position * constants.PROGRESS_NUMBERING_SPAN // total
        )
        reporter.progress(percent, f"Processing slide {part.index}...")

    reporter.progress(constants.PROGRESS_REPACKAGING, "Rebuilding presentation...")
    staged_output = staging / "output.pptx"
    with open(staged_output, "wb") as f:
        archive.pack_to(pkg, f)

    reporter.progress(constants.PROGRESS_SAVING, "Saving file...")
    _deliver_output(staged_output, sink)

    return results


# endregion


# region number_slide
def number_slide(pkg: Package, part: SlidePart, style: PageNumberStyle) -> SlideResult:
    """
    Insert the page number into one slide part of `pkg`.

    Failures are contained: the part is left untouched and the result says why.
    """
    entry = pkg[part.path]
    try:
        try:
            xml = entry.payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SlideMutationError(f"{part.path} is not UTF-8 text: {e}") from e
        new_xml = mutate(xml, part.index, style)
    except SlideMutationError as e:
        log.warning(f"Skipping page number on {part.path}: {e}")
        return SlideResult(path=part.path, index=part.index, numbered=False, reason=str(e))

    pkg.replace_payload(part.path, new_xml.encode("utf-8"))
    return SlideResult(path=part.path, index=part.index, numbered=True)


# endregion


# region Stream helpers
def _stage_input(source: InputProvider, destination: Path) -> None:
    """Copy the caller's input stream into the staging folder."""
    try:
        src = source.open()
    except SourceUnavailableError:
        raise
    except OSError as e:
        log.error(f"Could not open input: {e}")
        raise SourceUnavailableError(f"Could not open input: {e}") from e

    with src, open(destination, "wb") as dst:
        while True:
            try:
                chunk = src.read(_COPY_CHUNK_SIZE)
            except OSError as e:
                log.error(f"Could not read input: {e}")
                raise SourceUnavailableError(f"Could not read input: {e}") from e
            if not chunk:
                break
            dst.write(chunk)


def _deliver_output(staged_output: Path, sink: OutputSink) -> None:
    """
    Copy the packed presentation to the caller's sink.

    If writing fails partway, the sink may hold a truncated file; we don't roll it back.
    """
    try:
        dst: BinaryIO = sink.open()
    except SinkUnavailableError:
        raise
    except OSError as e:
        log.error(f"Could not open output: {e}")
        raise SinkUnavailableError(f"Could not open output: {e}") from e

    try:
        with dst, open(staged_output, "rb") as src:
            while chunk := src.read(_COPY_CHUNK_SIZE):
                dst.write(chunk)
    except OSError as e:
        log.error(f"Save failed: {e}")
        raise SinkUnavailableError(f"Save failed (disk space or IO issue): {e}") from e

    log.info(f"Saved numbered presentation to {sink!r}.")


# endregion


# region Manifest and logging helpers
def _start_manifest(
    cfg: UserConfig, pipeline_id: str, source: InputProvider, sink: OutputSink
) -> RunManifest | None:
    """Create and start the run manifest if enabled. A manifest problem never stops the run."""
    if not cfg.write_manifest:
        return None
    try:
        manifest = RunManifest(
            cfg, run_id=pipeline_id, source=repr(source), destination=repr(sink)
        )
    except (OSError, ValueError, AttributeError) as e:
        log.warning(f"Could not create run manifest: {e}")
        return None
    manifest.start()
    return manifest


def log_pipeline_info(
    pipeline_id: str, source: InputProvider, sink: OutputSink
) -> None:
    """Print this pipeline run's run ID, session ID, and endpoints to the log."""
    log.info("=== Pipeline Run Started ===")
    log.info(f"Run ID: {pipeline_id}")
    log.info(f"Session ID: {get_session_id()}")
    log.info(f"Input: {source!r}")
    log.info(f"Output: {sink!r}")


# endregion
