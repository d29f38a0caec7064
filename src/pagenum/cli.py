"""CLI Interface Logic (argparse etc)"""

import argparse
import logging
from dataclasses import fields
from pathlib import Path

from pagenum.internals.config.define_config import UserConfig
from pagenum.mutate import Alignment
from pagenum.orchestrator import run_pipeline

log = logging.getLogger("pagenum")


def run(argv: list[str] | None = None) -> Path:
    """Run CLI interface. Assumes startup.initialize_application() was already called."""

    args = parse_args(argv)

    # CLI args > config file > defaults
    cfg = build_config_from_args(args)

    return run_pipeline(cfg)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns argparse.Namespace with all the UserConfig fields as attributes.
    Validates that all config fields have corresponding CLI arguments.
    """
    parser = argparse.ArgumentParser(
        prog="pagenum",
        description="Add a page number to every slide of a PowerPoint pptx file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Number a deck, output lands in ~/Documents/pagenum/output/
  pagenum talk.pptx

  # Choose the output file
  pagenum talk.pptx --output-pptx talk_numbered.pptx

  # Use config file, overriding the font size
  pagenum --config path/to/my_settings.toml --font-size 1400
        """,
    )

    # Config file (special - loads other values)
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to TOML configuration file with UserConfig field names as keys",
    )

    # Input/Output files
    parser.add_argument(
        "input_pptx",
        nargs="?",
        type=str,
        metavar="INPUT_PPTX",
        help="Input PowerPoint file (.pptx file)",
    )
    parser.add_argument(
        "--output-pptx",
        type=str,
        dest="output_pptx",
        metavar="PATH",
        help="Output file. Takes precedence over --output-folder",
    )
    parser.add_argument(
        "--output-folder",
        type=str,
        dest="output_folder",
        metavar="PATH",
        help="Output folder for a timestamped output file",
    )
    parser.add_argument(
        "--staging-dir",
        type=str,
        dest="staging_dir",
        metavar="PATH",
        help="Folder for temporary per-run working files (always cleaned up)",
    )

    # Page number geometry, in EMUs (914400 per inch)
    parser.add_argument("--offset-x", type=int, dest="offset_x", metavar="EMU")
    parser.add_argument("--offset-y", type=int, dest="offset_y", metavar="EMU")
    parser.add_argument("--width", type=int, dest="width", metavar="EMU")
    parser.add_argument("--height", type=int, dest="height", metavar="EMU")

    # Run formatting
    parser.add_argument(
        "--font-size",
        type=int,
        dest="font_size",
        metavar="N",
        help="Font size in hundredths of a point (default: 1200 = 12pt)",
    )
    parser.add_argument("--typeface", type=str, dest="typeface", metavar="NAME")
    parser.add_argument(
        "--color",
        type=str,
        dest="color",
        metavar="RRGGBB",
        help="Text color as six hex digits (default: 000000)",
    )
    parser.add_argument(
        "--align",
        type=str,
        dest="align",
        choices=["left", "center", "right", "l", "ctr", "r"],
        help="Paragraph alignment inside the page number box (default: right)",
    )

    bold_group = parser.add_mutually_exclusive_group()
    bold_group.add_argument(
        "--bold",
        action="store_true",
        dest="bold",
        help="Bold page numbers (default: enabled)",
    )
    bold_group.add_argument(
        "--no-bold",
        action="store_false",
        dest="bold",
        help="Regular weight page numbers",
    )

    manifest_group = parser.add_mutually_exclusive_group()
    manifest_group.add_argument(
        "--manifest",
        action="store_true",
        dest="write_manifest",
        help="Write a JSON run manifest (default: enabled)",
    )
    manifest_group.add_argument(
        "--no-manifest",
        action="store_false",
        dest="write_manifest",
        help="Do not write a run manifest",
    )

    # None means "not given on the command line", so config file values survive.
    parser.set_defaults(bold=None, write_manifest=None)

    _validate_args_match_config(parser)

    return parser.parse_args(argv)


def build_config_from_args(args: argparse.Namespace) -> UserConfig:
    """
    Build UserConfig from parsed arguments with proper priority.

    Priority order (highest to lowest):
    1. CLI arguments (if explicitly provided)
    2. Config file values (if --config provided)
    3. UserConfig defaults
    """
    if args.config:
        config_path = Path(args.config)
        log.info(f"Loading config from {config_path}")
        cfg = UserConfig.from_toml(config_path)
    else:
        cfg = UserConfig()

    # Path args
    if args.input_pptx is not None:
        cfg.input_pptx = Path(args.input_pptx)
    if args.output_pptx is not None:
        cfg.output_pptx = Path(args.output_pptx)
    if args.output_folder is not None:
        cfg.output_folder = Path(args.output_folder)
    if args.staging_dir is not None:
        cfg.staging_dir = Path(args.staging_dir)

    # Ints and strings: argparse already converted types
    for name in ["offset_x", "offset_y", "width", "height", "font_size", "typeface", "color"]:
        value = getattr(args, name)
        if value is not None:
            setattr(cfg, name, value)

    if args.align is not None:
        cfg.align = Alignment.from_string(args.align)

    # Booleans are None unless one of the pair was given
    if args.bold is not None:
        cfg.bold = args.bold
    if args.write_manifest is not None:
        cfg.write_manifest = args.write_manifest

    cfg.validate()

    return cfg


def _validate_args_match_config(parser: argparse.ArgumentParser) -> None:
    """
    Ensure all UserConfig fields have corresponding CLI arguments.

    Catches a field added to UserConfig without a matching CLI argument (or vice versa).

    Raises:
        RuntimeError: If there's a mismatch between config fields and CLI args
    """
    config_fields = {f.name for f in fields(UserConfig)}

    excluded_args = ["help", "config"]
    arg_names = {
        action.dest for action in parser._actions if action.dest not in excluded_args
    }

    missing_in_args = config_fields - arg_names
    extra_in_args = arg_names - config_fields

    if missing_in_args:
        log.error(
            "UserConfig fields must have corresponding arg added to cli.parse_args() to ensure parity between interfaces."
        )
        raise RuntimeError(
            f"CLI arguments missing for UserConfig fields: {missing_in_args}\n"
            "These config fields need corresponding arguments added to parse_args()"
        )

    if extra_in_args:
        log.error(
            "We detected unexpected CLI args that do not match UserConfig fields. New argparse fields must either "
            "have a corresponding UserConfig field, or be CLI-specific and listed in excluded_args in _validate_args_match_config()"
        )
        raise RuntimeError(
            f"CLI arguments don't match UserConfig fields: {extra_in_args}\n"
            "Either remove these CLI args or add corresponding fields to UserConfig"
        )


def main() -> None:
    """Development entry point - run CLI directly with `python -m pagenum.cli`"""
    from pagenum import startup

    log = startup.initialize_application()
    try:
        run()
    except Exception:
        log.exception("Fatal error in CLI")
        raise


if __name__ == "__main__":
    main()
