"""Entry point for the pagenum command line tool."""

from __future__ import annotations

import logging
import sys

from pagenum import startup
from pagenum.cli import run as run_cli
from pagenum.errors import PageNumberError


def main() -> None:
    """Application entry point.

    Call like:
    ```
    python -m pagenum talk.pptx
    pagenum talk.pptx --output-pptx talk_numbered.pptx
    ```
    """

    log: logging.Logger = startup.initialize_application()

    try:
        run_cli()
    except (PageNumberError, ValueError, FileNotFoundError) as e:
        # Expected failures: already logged where they happened, report and exit non-zero.
        log.error(f"Page numbering failed: {e}")
        sys.exit(1)
    except Exception:
        log.exception("Unhandled exception - program crashed.")  # Logs full traceback
        raise


if __name__ == "__main__":

    main()
