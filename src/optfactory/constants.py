"""Constants used throughout optfactory.

This module defines the package logger and the sentinel used to mark
parameters and options that carry no default value.
"""

import logging

LOGGER_NAME: str = "optfactory"
"""Default logger name for optfactory."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for optfactory internal diagnostics."""


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()
"""Sentinel for "no default value" (``None`` is a legitimate default)."""
