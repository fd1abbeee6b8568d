# SPDX-License-Identifier: EUPL-1.2
#
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

from __future__ import annotations


class BaseBridgeError(Exception):
    """Base exception for all SentryBridge errors."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception


# Telemetry client


class ClientInitializationError(BaseBridgeError):
    """Raised when the telemetry client could not be created from the DSN."""


# LoggingManager


class LoggerConfigurationError(BaseBridgeError):
    """Base exception for logger configuration errors."""


class LogHandlerError(LoggerConfigurationError):
    """Raised when a logging handler cannot be created."""


# SettingsManager


class SettingsConfigurationError(BaseBridgeError):
    """Raised when a configuration file or section is invalid."""


class SettingsWriteConfigurationError(BaseBridgeError):
    """Raised when the default configuration cannot be written."""


class ConfigFileNotFoundError(SettingsConfigurationError, FileNotFoundError):
    """Raised when the configuration file is not found or not readable."""
