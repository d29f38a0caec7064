# internals/config/define_config.py
"""User configuration dataclass and validation."""

# region imports
from __future__ import annotations

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    # Python 3.10
    import tomli as tomllib  # type: ignore[no-redef]

import logging
import re
from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import tomli_w  # For writing (no stdlib equivalent yet)

from pagenum.internals import constants
from pagenum.internals.paths import resolve_path, user_output_dir, user_staging_dir
from pagenum.mutate import Alignment, PageNumberStyle

# endregion

log = logging.getLogger("pagenum")

_HEX_COLOR_RE = re.compile(r"[0-9A-Fa-f]{6}")


# region class UserConfig
@dataclass
class UserConfig:
    """All user-configurable settings for pagenum."""

    # region class fields

    # region Input/Output
    input_pptx: Optional[Path] = None  # Presentation to number
    output_pptx: Optional[Path] = None  # Exact output file; wins over output_folder
    output_folder: Optional[Path] = (
        None  # Folder for a timestamped output file when output_pptx isn't set
    )
    staging_dir: Optional[Path] = (
        None  # Parent for per-run temp folders; defaults to the user cache dir
    )
    write_manifest: bool = True
    # endregion

    # region Page number style
    offset_x: int = constants.DEFAULT_OFFSET_X
    offset_y: int = constants.DEFAULT_OFFSET_Y
    width: int = constants.DEFAULT_WIDTH
    height: int = constants.DEFAULT_HEIGHT
    font_size: int = constants.DEFAULT_FONT_SIZE  # hundredths of a point
    typeface: str = constants.DEFAULT_TYPEFACE
    color: str = constants.DEFAULT_COLOR  # RRGGBB
    bold: bool = True
    align: Alignment = Alignment.RIGHT
    # endregion

    # endregion

    # region post_init
    def __post_init__(self) -> None:
        """Convert string inputs of path fields into Path objects."""
        if self.input_pptx is not None:
            self.input_pptx = Path(self.input_pptx)
        if self.output_pptx is not None:
            self.output_pptx = Path(self.output_pptx)
        if self.output_folder is not None:
            self.output_folder = Path(self.output_folder)
        if self.staging_dir is not None:
            self.staging_dir = Path(self.staging_dir)

    # endregion

    # region getters
    def get_input_pptx_file(self) -> Path | None:
        """Get the input pptx file path, or None if not specified."""
        if self.input_pptx:
            return resolve_path(str(self.input_pptx))
        return None

    def get_output_folder(self) -> Path:
        """Get the output folder, with fallback to the default user output dir."""
        if self.output_pptx:
            return resolve_path(str(self.output_pptx)).parent
        if self.output_folder:
            return resolve_path(str(self.output_folder))
        return user_output_dir()

    def get_output_file(self) -> Path:
        """
        Get the output pptx path.

        Uses output_pptx as-is when set; otherwise builds "<input stem>_numbered_<timestamp>.pptx"
        inside the output folder so repeated runs don't clobber each other.
        """
        if self.output_pptx:
            return resolve_path(str(self.output_pptx))

        input_file = self.get_input_pptx_file()
        stem = input_file.stem if input_file else "presentation"
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        return (
            self.get_output_folder()
            / f"{stem}{constants.OUTPUT_SUFFIX}_{timestamp}.pptx"
        )

    def get_staging_dir(self) -> Path:
        """Get the parent folder for per-run staging, creating it if needed."""
        if self.staging_dir:
            staging = resolve_path(str(self.staging_dir))
            staging.mkdir(parents=True, exist_ok=True)
            return staging
        return user_staging_dir()

    def style(self) -> PageNumberStyle:
        """Build the page number style the slide mutator consumes."""
        return PageNumberStyle(
            offset_x=self.offset_x,
            offset_y=self.offset_y,
            width=self.width,
            height=self.height,
            font_size=self.font_size,
            typeface=self.typeface,
            color=self.color.upper(),
            bold=self.bold,
            align=self.align,
        )

    # endregion

    # region from_toml
    @classmethod
    def from_toml(cls, path: Path) -> UserConfig:
        """
        Load configuration from a TOML file.

        The TOML file should have flat key-value pairs matching the UserConfig field names.

        Example TOML:
            input_pptx = "~/talks/keynote.pptx"
            font_size = 1400
            align = "center"
            bold = false

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If TOML is invalid or contains invalid enum values
        """
        path = Path(path)
        if not path.exists():
            error_msg = f"Config file not found: {path}"
            log.error(error_msg)
            raise FileNotFoundError(error_msg)
        if path.is_dir():
            error_msg = f"This is a directory (folder), not a toml file: {path}"
            log.error(error_msg)
            raise ValueError(error_msg)

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            error_msg = f"Invalid TOML syntax in {path}. Check for missing or mismatched quote marks."
            log.error(error_msg)
            raise ValueError(error_msg) from e
        except PermissionError as e:
            error_msg = f"We hit a permission error when trying to access {path}"
            log.error(error_msg)
            raise ValueError(error_msg) from e

        if not data:
            log.warning(
                f"Config toml file loaded as empty, so no UserConfig fields were set from: {path}."
            )

        valid_fields = {f.name for f in fields(cls)}
        unexpected = set(data.keys()) - valid_fields

        if unexpected:
            log.warning(
                f"Ignoring unexpected fields in TOML config: {', '.join(sorted(unexpected))}. "
                f"Check for typos. Valid fields: {', '.join(sorted(valid_fields))}"
            )
            data = {k: v for k, v in data.items() if k in valid_fields}

        if "align" in data:
            try:
                data["align"] = Alignment.from_string(data["align"])
            except ValueError as e:
                error_msg = (
                    f"Invalid align: '{data['align']}'. "
                    f"Valid options: {[a.value for a in Alignment]}"
                )
                log.error(error_msg)
                raise ValueError(error_msg) from e

        return cls(**data)

    # endregion

    # region save_toml
    def save_toml(self, path: Path) -> None:
        """Save configuration to a TOML file."""
        path = Path(path)

        if path.exists() and path.is_dir():
            error_msg = f"Cannot save config: path is a directory, not a file: {path}."
            log.error(error_msg)
            raise ValueError(error_msg)

        path.parent.mkdir(parents=True, exist_ok=True)

        # TOML can't serialize None
        data = {k: v for k, v in self.config_to_dict().items() if v is not None}

        try:
            log.info(f"Attempting to save to {path}")
            with open(path, "wb") as f:
                tomli_w.dump(data, f)
            log.info(f"Saved toml config file at {path}")
        except PermissionError as e:
            error_msg = f"Permission denied writing to: {path}"
            log.error(error_msg)
            raise PermissionError(error_msg) from e
        except OSError as e:
            error_msg = f"Failed to write config file to {path}"
            log.error(error_msg)
            raise OSError(error_msg) from e

    # endregion

    # region config_to_dict
    def config_to_dict(self) -> dict[str, Any]:
        """Convert config to a TOML/JSON-serializable dict, paths with forward slashes."""
        return {
            "input_pptx": self.input_pptx.as_posix() if self.input_pptx else None,
            "output_pptx": self.output_pptx.as_posix() if self.output_pptx else None,
            "output_folder": (
                self.output_folder.as_posix() if self.output_folder else None
            ),
            "staging_dir": self.staging_dir.as_posix() if self.staging_dir else None,
            "write_manifest": self.write_manifest,
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "width": self.width,
            "height": self.height,
            "font_size": self.font_size,
            "typeface": self.typeface,
            "color": self.color,
            "bold": self.bold,
            "align": self.align.value,
        }

    # endregion

    # region Validation instance methods
    def pre_run_check(self) -> None:
        """Validate everything needed for a file-to-file pipeline run."""
        self.validate()
        self.validate_pipeline_requirements()

    def validate(self) -> None:
        """
        Validate intrinsic config values (no filesystem access).

        Catches wrong types, negative geometry, and malformed colors before a run starts.
        """
        if not isinstance(self.align, Alignment):
            raise ValueError(
                f"align must be an Alignment enum, got {type(self.align).__name__}. "
                f"Valid values: {[a.value for a in Alignment]}"
            )

        for field_name in ["write_manifest", "bold"]:
            val = getattr(self, field_name)
            if not isinstance(val, bool):
                raise ValueError(
                    f"{field_name} must be a boolean, got {type(val).__name__}"
                )

        for field_name in ["offset_x", "offset_y", "width", "height", "font_size"]:
            val = getattr(self, field_name)
            # bool is an int subclass; reject it explicitly
            if isinstance(val, bool) or not isinstance(val, int):
                raise ValueError(
                    f"{field_name} must be an integer, got {type(val).__name__}"
                )
            if val < 0:
                raise ValueError(f"{field_name} cannot be negative, got {val}")

        if self.font_size == 0:
            raise ValueError("font_size must be greater than zero")

        if not isinstance(self.typeface, str) or not self.typeface.strip():
            raise ValueError("typeface must be a non-empty string")

        if not isinstance(self.color, str) or not _HEX_COLOR_RE.fullmatch(self.color):
            raise ValueError(
                f"color must be six hex digits like '000000', got {self.color!r}"
            )

        if self.output_folder is not None and str(self.output_folder) == "":
            raise ValueError(
                "output_folder cannot be empty string; use None for default"
            )

    def _validate_output_folder(self) -> None:
        """Helper: validate output folder is usable"""
        output_folder = self.get_output_folder()
        if output_folder.exists() and not output_folder.is_dir():
            raise ValueError(
                f"Output path exists but is not a directory: {output_folder}"
            )

    def validate_pipeline_requirements(self) -> None:
        """
        Validate external state needed to number a presentation file.

        Checks the input exists and is a .pptx file, and that the output location is usable.
        """
        input_path = self.get_input_pptx_file()

        if input_path is None:
            raise ValueError(
                "No input pptx file specified. Please set input_pptx before running the pipeline."
            )
        if not input_path.exists():
            raise FileNotFoundError(f"Input pptx not found: {input_path}")
        if not input_path.is_file():
            raise ValueError(f"Input pptx path is not a file: {input_path}")

        if input_path.suffix.lower() == ".ppt":
            raise ValueError(
                "This tool only supports .pptx files. Please convert your .ppt file to .pptx format first."
            )
        if input_path.suffix.lower() != ".pptx":
            log.warning(
                f"Input file {input_path} doesn't have a .pptx extension; trying it anyway."
            )

        output_file = self.get_output_file()
        if output_file == input_path:
            raise ValueError(
                f"Output file would overwrite the input file: {input_path}. Choose a different output."
            )

        self._validate_output_folder()

    # endregion


# endregion
