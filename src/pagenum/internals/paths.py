"""Cross-platform path resolution for user directories.

Uses platformdirs to find OS-appropriate locations for:
- Logs (where pagenum.log lives)
- Output (default save location for numbered decks)
- Manifests (one JSON record per pipeline run)
- Staging (temporary per-run working folders, under the user cache dir)
"""

import os
from pathlib import Path

from platformdirs import (
    user_cache_dir,
    user_documents_dir,
)  # Gives us the "right" place for files on each OS

PACKAGE_NAME = "pagenum"


# region user_base_dir
def user_base_dir() -> Path:
    """
    Base directory for all pagenum user files.

    Returns:
        Path to ~/Documents/pagenum/ (or OS equivalent)

    Examples:
        Windows: C:/Users/YourName/Documents/pagenum/
        macOS: /Users/YourName/Documents/pagenum/
        Linux: /home/yourname/Documents/pagenum/
    """
    base = Path(user_documents_dir()) / PACKAGE_NAME
    base.mkdir(parents=True, exist_ok=True)
    return base


# endregion


# region user_log_dir_path
def user_log_dir_path() -> Path:
    """
    Directory for log files.

    Returns:
        Path to ~/Documents/pagenum/logs/
    """
    log_dir = user_base_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


# endregion


# region user_output_dir
def user_output_dir() -> Path:
    """Default output directory for numbered presentations."""
    output_dir = user_base_dir() / "output"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


# endregion


# region user_manifests_dir
def user_manifests_dir() -> Path:
    """Directory for saved manifest files."""
    manifests_dir = user_base_dir() / "manifests"
    manifests_dir.mkdir(parents=True, exist_ok=True)
    return manifests_dir


# endregion


# region user_staging_dir
def user_staging_dir() -> Path:
    """
    Parent directory for per-run staging folders.

    Each pipeline run creates (and always removes) its own uniquely named folder in here.

    Returns:
        Path to the OS user cache dir for pagenum, e.g. ~/.cache/pagenum/staging/ on Linux
    """
    staging = Path(user_cache_dir(PACKAGE_NAME)) / "staging"
    staging.mkdir(parents=True, exist_ok=True)
    return staging


# endregion


# region resolve_path
def resolve_path(raw: str) -> Path:
    """
    Expand ~ and ${VARS}; resolve to absolute path.

    Relative paths resolve relative to current working directory.
    """
    expanded = os.path.expandvars(raw)
    return Path(expanded).expanduser().resolve()


# endregion
