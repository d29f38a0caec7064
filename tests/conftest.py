"""Shared fixtures"""

# tests/conftest.py
from pathlib import Path

import pytest

from pagenum.internals import paths
from pagenum.internals.config.define_config import UserConfig
from tests import helpers


@pytest.fixture(autouse=True)
def isolated_user_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the documents and cache folders at tmp_path so no test writes into the real home folder."""
    documents = tmp_path / "documents"
    cache = tmp_path / "cache"
    monkeypatch.setattr(paths, "user_documents_dir", lambda: str(documents))
    monkeypatch.setattr(paths, "user_cache_dir", lambda *args, **kwargs: str(cache))
    return documents / paths.PACKAGE_NAME


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Temporary directory for test output files"""
    output = tmp_path / "output"
    output.mkdir()
    return output


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Parent folder for pipeline staging, so tests can check it's emptied afterwards."""
    staging = tmp_path / "staging"
    staging.mkdir()
    return staging


@pytest.fixture
def quiet_cfg(staging_dir: Path) -> UserConfig:
    """Config with staging in tmp_path and no manifest writing."""
    return UserConfig(staging_dir=staging_dir, write_manifest=False)


@pytest.fixture(scope="session")
def three_slide_pptx() -> bytes:
    """A python-pptx deck with three titled slides."""
    return helpers.make_pptx_bytes(3)


@pytest.fixture
def path_to_three_slide_pptx(tmp_path: Path, three_slide_pptx: bytes) -> Path:
    """The three slide deck written to disk."""
    path = tmp_path / "input" / "deck.pptx"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(three_slide_pptx)
    return path


@pytest.fixture
def sample_cfg(path_to_three_slide_pptx: Path, temp_output_dir: Path) -> UserConfig:
    """Sample config object for a file-to-file run"""
    return UserConfig(
        input_pptx=path_to_three_slide_pptx,
        output_folder=temp_output_dir,
    )


@pytest.fixture
def clean_debug_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Ensure debug env var is not set before test."""
    monkeypatch.delenv("PAGENUM_DEBUG", raising=False)
    return monkeypatch


@pytest.fixture
def sample_config_toml(tmp_path: Path) -> Path:
    """Path to a config toml covering every style field"""
    path = tmp_path / "configs" / "settings.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        'input_pptx = "talk.pptx"\n'
        "offset_x = 100\n"
        "offset_y = 200\n"
        "width = 300\n"
        "height = 400\n"
        "font_size = 1800\n"
        'typeface = "Calibri"\n'
        'color = "ff0000"\n'
        "bold = false\n"
        'align = "center"\n'
        "write_manifest = false\n",
        encoding="utf-8",
    )
    return path
