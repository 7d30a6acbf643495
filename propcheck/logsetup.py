#!/usr/bin/env python3
#===- propcheck/logsetup.py - Logging Setup ------------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from __future__ import annotations

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def init_logging(level: Union[int, str] = logging.INFO, name: str = "propcheck") -> logging.Logger:
    """
    Initialize logging with a consistent format and return the package logger.

    Args:
        level: logging level, as int or name ("DEBUG", "info", ...)
        name: logger name (default: "propcheck")
    """
    level = parse_level(level)
    # Only configure root once to avoid duplicate handlers in pytest runs
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    root_logger.setLevel(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
