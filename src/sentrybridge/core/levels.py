# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Map `logging` levels to Sentry severities.

Levels follow the ordering of the standard library: a larger number is more
severe. The mapping is a banding over that order, so custom levels registered
between the standard ones map to the band below them.
"""

from __future__ import annotations

import logging
from typing import Final

DEFAULT_SEVERITY: Final[str] = "info"

# (lower bound, event severity, breadcrumb severity), most severe first.
_SEVERITY_BANDS: Final[tuple[tuple[int, str, str], ...]] = (
    (logging.CRITICAL, "fatal", "fatal"),
    (logging.ERROR, "error", "error"),
    (logging.WARNING, "warning", "warning"),
    (logging.INFO, "info", "info"),
    (logging.NOTSET, "debug", "debug"),
)

_LEVEL_ALIASES: Final[dict[str, int]] = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "EXCEPTION": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _band(level: int) -> tuple[int, str, str]:
    for band in _SEVERITY_BANDS:
        if level >= band[0]:
            return band
    # Negative levels are below NOTSET.
    return _SEVERITY_BANDS[-1]


def to_event_level(level: int | None) -> str:
    """Return the Sentry event severity for a `logging` level."""
    if level is None:
        return DEFAULT_SEVERITY
    return _band(level)[1]


def to_breadcrumb_level(level: int | None) -> str:
    """Return the Sentry breadcrumb severity for a `logging` level."""
    if level is None:
        return DEFAULT_SEVERITY
    return _band(level)[2]


def level_name(level: int) -> str:
    """Return the display name `logging` uses for a level number."""
    return logging.getLevelName(level)


def parse_level(value: int | str) -> int:
    """
    Convert a level number or level name into a `logging` level number.

    Args:
    ----
        value (int | str): A level number, a numeric string or a level name
                           such as ``"warning"``, ``"WARN"`` or ``"FATAL"``.

    Returns:
    -------
        int: The level number.

    Raises:
    ------
        ValueError: If the value does not name a known level.

    """
    if isinstance(value, bool):
        msg = f"Invalid log level: {value!r}"
        raise ValueError(msg)
    if isinstance(value, int):
        return value

    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return int(text)

    name = text.upper()
    if name in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[name]

    # Levels registered through logging.addLevelName().
    registered = logging.getLevelNamesMapping().get(name)
    if registered is None:
        msg = f"Invalid log level: {value!r}"
        raise ValueError(msg)
    return registered
