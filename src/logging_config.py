# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Logging setup for the service."""

import logging

LOG_FORMAT = "%(levelname)s %(asctime)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler to the application logger.

    Idempotent: subsequent calls only adjust the level.
    """
    logger = logging.getLogger("src")
    resolved = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(resolved)
    if logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    )
    logger.addHandler(handler)
