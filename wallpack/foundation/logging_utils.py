"""Logging setup for pack builds."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_run_logger(run_id: str, log_dir: str | None = None) -> tuple[logging.Logger, str | None]:
    """
    Configure the operational logger for one build run.

    INFO and above go to stderr; when `log_dir` is given a UTF-8 file receives
    everything at DEBUG. Returns (logger, log file path or None).
    """
    logger = logging.getLogger(f"wallpack.{run_id}")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    log_file = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"{run_id}_build.log")
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug("Operational logging initialized for run %s", run_id)
    return logger, log_file
