"""
Logging configuration for the daily word grid service.
Provides dual-handler logging (console + rotating file).
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
from logging.handlers import RotatingFileHandler
from typing import Optional


def setup_logging(
    log_dir: Optional[str],
    log_level: str = "INFO",
    log_file_prefix: str = "sanaharava",
    enable_console: bool = True,
) -> Optional[str]:
    """
    Configure logging with a console handler and a rotating file handler.

    The service runs as a long-lived process and as a scheduled job, so one
    log file per prefix is kept and rotated by size.

    Args:
        log_dir: Directory for the log file (None disables file logging)
        log_level: Console logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file_prefix: Prefix for log filename
        enable_console: Whether to enable console logging

    Returns:
        Path to the log file, or None when file logging is disabled
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    detailed_formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s - %(name)s:%(lineno)d - %(funcName)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Handlers filter

    # Remove existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    log_path = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, f"{log_file_prefix}.log")

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging initialized: file={log_path}, level={log_level}, console={enable_console}")

    return log_path
