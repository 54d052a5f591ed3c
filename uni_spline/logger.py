"""
Thin wrapper around Python's ``logging`` module for the ``uni_spline`` hierarchy.

The library never installs handlers on import; applications opt in with
:func:`setup`.

Usage
-----
>>> from uni_spline.logger import get_logger, setup
>>> setup("DEBUG")
>>> log = get_logger(__name__)
>>> log.debug("solving 12 unknowns")
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO, Union

ROOT_NAME = "uni_spline"
LOG_FORMAT = "%(levelname)-7s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``uni_spline`` hierarchy.

    Module names such as ``uni_spline.solver`` inherit from the root
    ``uni_spline`` logger, so a single :func:`set_level` call controls all
    of them.
    """
    return logging.getLogger(name or ROOT_NAME)


def set_level(level: Union[int, str] = logging.INFO) -> None:
    """Set the log level for all uni_spline loggers at once."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(ROOT_NAME).setLevel(level)


def setup(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Attach a stream handler with the uni_spline format.

    Extra calls are no-ops once a handler is present.
    """
    root = logging.getLogger(ROOT_NAME)
    if root.handlers:
        return
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    set_level(level)
