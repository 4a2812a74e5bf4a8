"""
Logging configuration for the sum puzzle generator.

A batch run logs to a timestamped, rotating file in the output directory and,
optionally, to stderr so printed puzzles on stdout stay readable. Each
generation attempt produces a handful of DEBUG lines from the samplers,
validator, solver and uniqueness search; with up to max_attempts attempts per
puzzle those lines are only kept when attempt tracing is on.
"""
#
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional


# Modules that log once or more per generation attempt
ATTEMPT_LOGGERS = (
    "grid_sampler",
    "mask_sampler",
    "validator",
    "logical_solver",
    "uniqueness",
    "puzzle_generator",
)

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s - %(message)s"


def log_file_path(output_dir: str, log_file_prefix: str) -> str:
    """Timestamped log file path inside the output directory."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(output_dir, f"{log_file_prefix}_{timestamp}.log")


def set_attempt_tracing(enabled: bool):
    """
    Keep or drop per-attempt DEBUG records.

    Args:
        enabled: True lets attempt loggers pass DEBUG records to the
            handlers, False holds them at INFO
    """
    level = logging.NOTSET if enabled else logging.INFO
    for name in ATTEMPT_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_logging(
    output_dir: str,
    log_level: str = "INFO",
    log_file_prefix: str = "puzzle_generator",
    enable_console: bool = True,
    trace_attempts: Optional[bool] = None,
) -> str:
    """
    Configure the root logger for a generation run.

    Args:
        output_dir: Directory for the log file, created if missing
        log_level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file_prefix: Prefix for the log filename
        enable_console: Whether to log to stderr as well
        trace_attempts: Keep per-attempt DEBUG records; defaults to on
            when log_level is DEBUG

    Returns:
        Path to the log file
    """
    os.makedirs(output_dir, exist_ok=True)
    log_path = log_file_path(output_dir, log_file_prefix)

    console_level = getattr(logging, log_level.upper(), logging.INFO)
    if trace_attempts is None:
        trace_attempts = console_level <= logging.DEBUG

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # A second run in the same process replaces the first run's handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    root_logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    set_attempt_tracing(trace_attempts)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized: {log_path}")
    logger.debug(
        f"Console level: {log_level}, console: {enable_console}, "
        f"attempt tracing: {trace_attempts}"
    )

    return log_path
