"""
monitoring.py — Logging setup and run reporting for the job board pipeline.
"""

import json
import logging
import os
import sys

from config import LOG_DIR, LOG_FILE

ROOT_LOGGER_NAME = "job_board"


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger wrapper that accepts structured context:

        logger.info("Merged jobs", context={"persisted": 100, "fresh": 20})

    The context dict is appended to the message as JSON.
    """

    def process(self, msg, kwargs):
        context = dict(self.extra or {})
        context.update(kwargs.pop("context", None) or {})
        if context:
            msg = f"{msg} {json.dumps(context, default=str, sort_keys=True)}"
        return msg, kwargs


def setup_logging(level: int = None) -> logging.Logger:
    """
    Set up logging to both file and stdout.
    Returns the root logger for the application.
    """
    if level is None:
        level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Prevent duplicate handlers on re-init
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(LOG_FILE), mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"File logging disabled: {e}")

    return logger


def get_logger(name: str, **context) -> ContextAdapter:
    """Get a child logger for a specific module, optionally bound to context."""
    return ContextAdapter(logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}"), context)


def log_scraper_success(logger, scraper_name: str, count: int):
    """Log a successful scraper run."""
    logger.info(f"[{scraper_name}] Fetched {count} listings successfully")


def log_scraper_failure(logger, scraper_name: str, error: Exception):
    """Log a scraper failure."""
    logger.error(f"[{scraper_name}] Scraper failed: {type(error).__name__}: {str(error)}")


def log_pipeline_step(logger, step: str, input_count: int, output_count: int):
    """Log a pipeline step with input/output counts."""
    filtered = input_count - output_count
    logger.info(
        f"[{step}] {input_count} in → {output_count} out ({filtered} filtered)",
        context={"step": step, "in": input_count, "out": output_count},
    )


def log_run_summary(
    logger,
    jobs_fetched: int,
    jobs_current: int,
    jobs_archived: int,
    jobs_new: int,
    errors: list[str],
    duration: float
):
    """Log a complete run summary."""
    logger.info("=" * 60)
    logger.info("RUN SUMMARY")
    logger.info(f"  Fetched:           {jobs_fetched}")
    logger.info(f"  Current listings:  {jobs_current}")
    logger.info(f"  Archived listings: {jobs_archived}")
    logger.info(f"  New this run:      {jobs_new}")
    logger.info(f"  Errors:            {len(errors)}")
    logger.info(f"  Duration:          {duration:.1f}s")

    if errors:
        logger.warning("ERRORS:")
        for err in errors:
            logger.warning(f"  - {err}")

    logger.info("=" * 60)
