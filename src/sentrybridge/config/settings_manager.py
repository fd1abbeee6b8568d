# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
SettingsManager module.

For loading and accessing configuration settings in the SentryBridge
application.

This module defines the `SettingsManager` class, which handles:
- Loading configuration from predefined TOML files.
- Falling back to default settings if no valid file is found.
- Persisting the default configuration to disk.
- Overriding the Sentry DSN and environment from environment variables.
- Validating the ``[sentry]`` section into a `RouterConfig`.

The configuration includes sections for logging, console output and the
Sentry connection.
"""

from __future__ import annotations

import copy
import os
import tomllib
from pathlib import Path
from typing import Any, ClassVar, TypeVar

import platformdirs
import structlog
import tomli_w
from pydantic import ValidationError

from sentrybridge.__about__ import __app_config_name__, __app_name__
from sentrybridge.core.router import RouterConfig
from sentrybridge.exceptions import ConfigFileNotFoundError, SettingsConfigurationError, SettingsWriteConfigurationError

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)

T = TypeVar("T")

# Environment variables that take precedence over the [sentry] section.
ENVIRONMENT_OVERRIDES: dict[str, str] = {
    "SENTRY_DSN": "dsn",
    "SENTRY_ENVIRONMENT": "environment",
}


class SettingsManager:
    """
    Manage configuration loading and access for SentryBridge.

    This class attempts to load configuration data from a list of known
    locations, falling back to defaults if none are found. The defaults are
    then written to the user configuration directory.

    The configuration is expected to be in TOML format and structured into
    the sections "logger", "console_handler" and "sentry".

    Attributes
    ----------
    DEFAULT_SETTINGS_LOCATIONS (ClassVar[list[Path]]):
        An ordered list of file paths to check for configuration files.
    DEFAULT_WRITE_LOCATION (ClassVar[Path]):
        Where the default configuration is written if no file was found.
    DEFAULT_CONFIG (ClassVar[dict[str, dict[str, Any]]]):
        The fallback configuration used if no valid file is found.
    """

    APP_NAME: ClassVar[str] = __app_name__.lower()
    CONF_NAME: ClassVar[str] = __app_config_name__.lower()

    DEFAULT_SETTINGS_LOCATIONS: ClassVar[list[Path]] = [
        Path("config.toml"),
        Path(platformdirs.user_config_dir(APP_NAME, appauthor=False)) / CONF_NAME,
        Path(platformdirs.site_config_dir(APP_NAME, appauthor=False)) / CONF_NAME,
    ]

    DEFAULT_WRITE_LOCATION: ClassVar[Path] = Path(platformdirs.user_config_dir(APP_NAME, appauthor=False)) / CONF_NAME

    DEFAULT_CONFIG: ClassVar[dict[str, dict[str, Any]]] = {
        "logger": {
            "level": "INFO",
            "output_format": "console",
        },
        "console_handler": {"enabled": True},
        "sentry": {
            "dsn": "",
            "environment": "",
            "send_identity": False,
            "minimum_breadcrumb_level": "WARNING",
            "handler_level": "DEBUG",
        },
    }

    def __init__(self) -> None:
        """
        Initialize an empty SettingsManager.

        Call `load_settings` to read the configuration.
        """
        self._settings: dict[str, dict[str, Any]] = {}
        self._loaded_config_file: Path | None = None
        self._internal_errors: list[str] = []
        self.logger = structlog.get_logger(__name__)

    @property
    def loaded_config_file(self) -> Path | None:
        return self._loaded_config_file

    def load_settings(self, config_path_from_cli: Path | None = None) -> None:
        """
        Load the application settings.

        Prioritizes:
        1. CLI-provided path (if not None and exists)
        2. Predefined default locations
        3. Falls back to default configuration and saves it if no file is found.

        Environment variable overrides are applied last.
        """
        self._settings = {}
        self._internal_errors = []

        loaded_config = self._load_config_from_paths(config_path_from_cli)
        self._settings = self._apply_environment_overrides(loaded_config)

    def _load_config_from_paths(self, config_path_from_cli: Path | None = None) -> dict[str, dict[str, Any]]:
        """Load the configuration, prioritizing CLI path, then predefined locations."""
        # 1. Try CLI-provided path first
        if config_path_from_cli:
            self.logger.info("Attempting to load config from CLI specified path", path=str(config_path_from_cli))
            if config_path_from_cli.exists():
                try:
                    return self._load_from_file(config_path_from_cli)
                except (SettingsConfigurationError, ConfigFileNotFoundError) as e:
                    self.logger.warning(
                        "Failed to load config from CLI path (malformed or access error).",
                        path=str(config_path_from_cli),
                        error=str(e),
                    )
                    self._internal_errors.append(f"CLI config '{config_path_from_cli}' error: {e}")
                    raise
            else:
                self.logger.warning(
                    "Specified configuration file via CLI does not exist. Searching predefined locations.",
                    path=str(config_path_from_cli),
                )
                self._internal_errors.append(f"CLI config '{config_path_from_cli}' not found.")

        # 2. Search predefined locations
        self.logger.info(
            "Searching for configuration file in predefined locations",
            locations=[str(p) for p in self.DEFAULT_SETTINGS_LOCATIONS],
        )
        for path_candidate in self.DEFAULT_SETTINGS_LOCATIONS:
            path = Path(path_candidate)
            self.logger.debug("Checking predefined config location", path=str(path))
            if path.exists():
                try:
                    return self._load_from_file(path)
                except (SettingsConfigurationError, ConfigFileNotFoundError) as e:
                    self.logger.warning(
                        "Predefined config file malformed or access error.",
                        path=str(path),
                        error=str(e),
                    )
                    self._internal_errors.append(f"Predefined config '{path}' error: {e}")
                    raise

        # 3. No configuration file found after all attempts; use default
        self.logger.warning("No valid configuration file found; using default settings.")
        self._internal_errors.append("No configuration file found; using default settings.")
        try:
            self._save_default_config()
        except SettingsWriteConfigurationError as e:
            self.logger.exception("Failed to save default configuration after falling back to defaults.", error=str(e))
            self._internal_errors.append(f"Failed to save default config: {e}")
            raise

        return copy.deepcopy(self.DEFAULT_CONFIG)

    def _load_from_file(self, path: Path) -> dict[str, dict[str, Any]]:
        """
        Load configuration from a specific file path.

        Raises: SettingsConfigurationError, ConfigFileNotFoundError
        """
        self.logger.info("Loading configuration from file", path=str(path))
        try:
            with path.open("rb") as f:
                config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            self._internal_errors.append(f"TOML decoding failed for '{path}': {e}")
            self.logger.exception("TOML decoding failed for configuration file", path=str(path))
            msg = f"Malformed TOML file: {path}"
            raise SettingsConfigurationError(msg, e) from e
        except OSError as e:
            self._internal_errors.append(f"OS error accessing config file '{path}': {e}")
            self.logger.exception("Operating system error accessing configuration file", path=str(path))
            msg = f"Could not access file: {path}"
            raise ConfigFileNotFoundError(msg, e) from e

        self._loaded_config_file = path
        return config

    def _save_default_config(self) -> None:
        """
        Write the default configuration to the default write location.

        Raises: SettingsWriteConfigurationError if the location is not writable.
        """
        path = Path(self.DEFAULT_WRITE_LOCATION)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as f:
                tomli_w.dump(self.DEFAULT_CONFIG, f)
        except OSError as e:
            self.logger.exception("Unable to write default configuration to this location.", path=str(path))
            self._internal_errors.append(f"Failed to save default config to '{path}': {e}")
            msg = "Unable to write default configuration to this location."
            raise SettingsWriteConfigurationError(msg, e) from e

        self.logger.info("Default configuration written successfully.", path=str(path))
        self._loaded_config_file = path

    def _apply_environment_overrides(self, config: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        """Return a copy of `config` with SENTRY_* environment variables applied."""
        config = copy.deepcopy(config)
        for variable, key in ENVIRONMENT_OVERRIDES.items():
            value = os.environ.get(variable)
            if value:
                config.setdefault("sentry", {})[key] = value
                self.logger.debug("Applied environment override", variable=variable, key=key)
        return config

    def get(self, section: str, key: str, default: T | None = None) -> T | Any:
        """
        Retrieve a value from the configuration with optional default.

        Args:
        ----
            section (str): Section name in the configuration.
            key (str): Key within the section.
            default (Any, optional): Value to return if key is not found.

        Returns:
        -------
            Any: The configuration value, or the provided default.

        """
        value = self._settings.get(section, {}).get(key)
        if value is not None:
            return value
        return default

    def get_section(self, section: str) -> dict[str, Any]:
        """Return a copy of one configuration section, empty if it is missing."""
        return copy.deepcopy(self._settings.get(section, {}))

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Return the full config dict."""
        return copy.deepcopy(self._settings)

    def router_config(self) -> RouterConfig:
        """
        Validate the ``[sentry]`` section into a `RouterConfig`.

        Raises:
        ------
            SettingsConfigurationError: If a value in the section is invalid.

        """
        try:
            return RouterConfig.model_validate(self.get_section("sentry"))
        except ValidationError as e:
            self._internal_errors.append(f"Invalid [sentry] settings: {e}")
            self.logger.exception("Invalid Sentry settings.")
            msg = "Invalid [sentry] settings"
            raise SettingsConfigurationError(msg, e) from e

    def get_instance_errors(self) -> list[str]:
        """Exposes internal errors encountered during configuration."""
        return list(self._internal_errors)


class SettingsManagerSingleton:
    """
    Singleton class for SettingsManager.

    That ensure a single instance
    manages application settings.
    """

    _instance: SettingsManager | None = None
    _initialization_errors: ClassVar[list[str]] = []
    _is_configured: ClassVar[bool] = False

    @classmethod
    def get_instance(cls) -> SettingsManager:
        """Return the single instance of SettingsManager, creating it if needed."""
        if cls._instance is None:
            cls._instance = SettingsManager()
        return cls._instance

    @classmethod
    def initialize_from_context(cls, config_path: Path | None = None) -> None:
        """
        Load the settings of the single instance.

        A second call is ignored and recorded as an initialization error.
        """
        if cls._is_configured:
            cls._initialization_errors.append("SettingsManagerSingleton already configured. Cannot re-configure.")
            return

        cls._initialization_errors.clear()
        instance = cls.get_instance()
        try:
            instance.load_settings(config_path)
        except Exception as e:
            cls._initialization_errors.append(f"Unexpected error during SettingsManager initialization: {e}")
            raise
        cls._initialization_errors.extend(instance.get_instance_errors())
        cls._is_configured = True

    @classmethod
    def get_initialization_errors(cls) -> list[str]:
        """Exposes initialization errors for testing/debugging."""
        errors = list(cls._initialization_errors)
        if cls._instance:
            errors.extend(cls._instance.get_instance_errors())
        return list(dict.fromkeys(errors))

    @classmethod
    def reset(cls) -> None:
        """
        Reset the singleton instance and its configuration state.

        Primarily for testing.
        """
        cls._instance = None
        cls._initialization_errors.clear()
        cls._is_configured = False
