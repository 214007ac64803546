# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Logging configuration.

Modules log through ``logging.getLogger(__name__)``; this module installs
a single console handler on the package logger. Calling
`configure_logging()` again only updates the level.

Environment variables:
- SMB_DASHBOARD_LOG_LEVEL: overrides the configured level.
"""

import logging
import os
import sys

PACKAGE_LOGGER = "smb_dashboard"
LOG_FORMAT = "[{asctime}] {levelname} {name} {message}"

_HANDLER_NAME = "smb_dashboard_console"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger and return it.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Returns:
        The "smb_dashboard" logger.
    """
    level_name = os.environ.get("SMB_DASHBOARD_LOG_LEVEL", level).upper()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level_name)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, style="{"))
        logger.addHandler(handler)

    return logger
