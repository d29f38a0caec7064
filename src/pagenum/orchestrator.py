"""Run the numbering pipeline file-to-file from a UserConfig (used by the CLI)."""

import logging
from pathlib import Path

from pagenum.boundary import FileInputProvider, FileOutputSink, LoggingListener
from pagenum.internals.config.define_config import UserConfig
from pagenum.internals.paths import user_log_dir_path
from pagenum.pipeline import Failed, process_presentation

log = logging.getLogger("pagenum")


# region run_pipeline
def run_pipeline(cfg: UserConfig) -> Path:
    """
    Validate the config, number cfg.input_pptx and write it to cfg.get_output_file().

    Returns:
        Path of the saved presentation.

    Raises:
        ValueError / FileNotFoundError: If the config fails validation.
        PageNumberError: The pipeline's error, if the run failed.
    """
    cfg.pre_run_check()

    input_path = cfg.get_input_pptx_file()
    # pre_run_check() already rejected a missing input; this narrows the type.
    if input_path is None:
        raise ValueError("input_pptx must be set before running the pipeline.")
    output_path = cfg.get_output_file()

    listener = LoggingListener()
    outcome = process_presentation(
        FileInputProvider(input_path),
        FileOutputSink(output_path),
        listener,
        cfg,
    )

    if isinstance(outcome, Failed):
        log.info(f"See log: {user_log_dir_path()}")
        raise outcome.error

    skipped = outcome.skipped
    if skipped:
        log.warning(
            f"{len(skipped)} slide(s) were left without a page number: "
            f"{', '.join(r.path for r in skipped)}"
        )

    log.info("pagenum pipeline complete")
    log.info(f"  Original: {input_path}")
    log.info(f"  -> Final:  {output_path}")
    log.info(f"See log: {user_log_dir_path()}")
    return output_path


# endregion
