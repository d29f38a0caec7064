"""Tests for the entry point at __main__.py (`python -m pagenum` / the `pagenum` script)."""

# tests/test_main.py

from unittest.mock import MagicMock, patch

import pytest

from pagenum.errors import ArchiveFormatError


def test_main_runs_cli_after_startup() -> None:
    with (
        patch("pagenum.__main__.startup.initialize_application") as mock_startup,
        patch("pagenum.__main__.run_cli") as mock_cli,
    ):
        mock_startup.return_value = MagicMock()

        from pagenum.__main__ import main

        main()

        mock_startup.assert_called_once()
        mock_cli.assert_called_once()


@pytest.mark.parametrize(
    "error",
    [
        ArchiveFormatError("Not a valid presentation file: File is not a zip file"),
        FileNotFoundError("Input pptx not found: talk.pptx"),
        ValueError("color must be six hex digits like '000000', got 'red'"),
    ],
)
def test_main_exits_non_zero_on_expected_failures(error: Exception) -> None:
    """Expected failures are logged as one line and exit with status 1, no traceback."""
    with (
        patch("pagenum.__main__.startup.initialize_application") as mock_startup,
        patch("pagenum.__main__.run_cli", side_effect=error),
    ):
        mock_log = MagicMock()
        mock_startup.return_value = mock_log

        from pagenum.__main__ import main

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        mock_log.error.assert_called_once_with(f"Page numbering failed: {error}")


def test_main_reraises_unexpected_exceptions() -> None:
    with (
        patch("pagenum.__main__.startup.initialize_application") as mock_startup,
        patch("pagenum.__main__.run_cli", side_effect=RuntimeError("boom")),
    ):
        mock_log = MagicMock()
        mock_startup.return_value = mock_log

        from pagenum.__main__ import main

        with pytest.raises(RuntimeError, match="boom"):
            main()

        mock_log.exception.assert_called_once()
