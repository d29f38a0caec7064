"""JSON record of one numbering run: what went in, what came out, and what happened to each slide.

One file per pipeline run, in the user manifests folder:

    run_<pipeline id>_manifest.json

The manifest is a diagnostic aid. Failing to write it is logged and otherwise ignored.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import sys
from datetime import datetime
from typing import Any

from pagenum import __version__
from pagenum.internals.config.define_config import UserConfig
from pagenum.internals.logger import log_file_path
from pagenum.internals.paths import user_manifests_dir
from pagenum.internals.run_context import get_session_id

log = logging.getLogger("pagenum")

MANIFEST_VERSION = "1.1"


# region RunManifest
class RunManifest:
    """Tracks one pipeline run and mirrors it to disk at start and at the end."""

    def __init__(
        self,
        cfg: UserConfig,
        run_id: str,
        source: str = "unknown",
        destination: str = "unknown",
    ) -> None:
        """Build the record in memory. Nothing touches the disk until start()."""
        self.run_id = run_id
        self.start_time = datetime.now()
        self.end_time: datetime | None = None
        self.manifest_path = user_manifests_dir() / f"run_{run_id}_manifest.json"

        style = cfg.style()
        self.manifest: dict[str, Any] = {
            "manifest_version": MANIFEST_VERSION,
            "app_version": __version__,
            "run_id": run_id,
            "session_id": get_session_id(),
            "status": "created",
            "source": source,
            "destination": destination,
            "start_time": self.start_time.isoformat(),
            "end_time": None,
            "duration_seconds": None,
            "environment": {
                "python_version": sys.version.split()[0],
                "platform": platform.system(),
                "platform_release": platform.release(),
            },
            "log_path": str(log_file_path()),
            "page_number_style": {
                "box_emu": [style.offset_x, style.offset_y, style.width, style.height],
                "font_size": style.font_size,
                "typeface": style.typeface,
                "color": style.color,
                "bold": style.bold,
                "align": style.align.value,
            },
            "config": cfg.config_to_dict(),
            "stages": [],
            "slide_count": None,
            "numbered_count": None,
            "slides": [],
            "error": None,
            "error_type": None,
            "failed_stage": None,
        }

    @property
    def duration(self) -> float | None:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def start(self) -> None:
        self.manifest["status"] = "running"
        self._write()

    def record_stage(self, percent: int, message: str) -> None:
        """Remember a progress report. Kept in memory; written with the final status."""
        self.manifest["stages"].append(
            {"percent": percent, "message": message, "at": datetime.now().isoformat()}
        )

    def complete(self, slides: list[dict[str, Any]]) -> None:
        """
        Mark the run successful.

        Args:
            slides: One dict per located slide, in index order, with at least
                "path", "index" and "numbered" (and "reason" for skipped slides).
        """
        self._finish("success")
        self.manifest["slide_count"] = len(slides)
        self.manifest["numbered_count"] = sum(1 for s in slides if s.get("numbered"))
        self.manifest["slides"] = slides
        self._write()
        log.info(f"Manifest written: {self.manifest_path}")

    def fail(self, error: BaseException, stage: str | None = None) -> None:
        """Mark the run failed, noting the last stage that was reported before it broke."""
        self._finish("fail")
        self.manifest["error"] = str(error)
        self.manifest["error_type"] = type(error).__name__
        self.manifest["failed_stage"] = stage
        self._write()
        log.error(f"Manifest written ({self.manifest_path}): failed - {error}")

    def _finish(self, status: str) -> None:
        self.end_time = datetime.now()
        self.manifest["status"] = status
        self.manifest["end_time"] = self.end_time.isoformat()
        self.manifest["duration_seconds"] = self.duration

    def _write(self) -> None:
        """Write via a temp file and rename, so readers never see half a manifest."""
        tmp_path = self.manifest_path.with_name(self.manifest_path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                json.dump(self.manifest, f, indent=2)
            os.replace(tmp_path, self.manifest_path)
        except OSError as e:
            log.error(f"Failed to write manifest to {self.manifest_path}: {e}")


# endregion
