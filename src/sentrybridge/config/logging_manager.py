# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Logging manager wiring structlog, the standard library and Sentry together.

The `LoggingManager` class is responsible for setting up logging in the
application. It integrates Python's built-in logging system with `structlog`
for structured logging and installs a `SentryHandler` on the root logger, so
that every record, from structlog or plain `logging`, reaches the bridge.

Features:
--------
- Console logging with colorized or JSON output.
- Forwarding of log records to Sentry as breadcrumbs or events.
- Separate thresholds for the console and for Sentry, so debug breadcrumbs
  can be collected without flooding the console.

Example usage:
--------------
    manager = LoggingManager()
    manager.apply_configuration(
        cli_log_level=logging.INFO,
        enable_console_logging=True,
        log_config=settings.as_dict(),
        router_config=settings.router_config(),
    )
    log = manager.get_logger(__name__)
    log.error("disk full", path="/x")
    manager.shutdown()

Exceptions Raised:
-----------------
- LogHandlerError: Raised if the Sentry handler cannot be created.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Final

import structlog
from structlog.stdlib import ProcessorFormatter

from sentrybridge.__about__ import __app_name__
from sentrybridge.core.levels import parse_level
from sentrybridge.core.router import EventRouter
from sentrybridge.exceptions import LogHandlerError
from sentrybridge.integrations.logging_handler import SentryHandler

if TYPE_CHECKING:
    from structlog.typing import Processor

    from sentrybridge.core.client import TelemetryClient
    from sentrybridge.core.router import RouterConfig

VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


class LoggingManager:
    """
    Manages the full configuration of the application's logging.

    Attributes
    ----------
    cli_log_level : int | None
        Level requested on the command line; it can only increase verbosity.
    enable_console_logging : bool
        Force the console handler on, regardless of the settings.
    log_config : dict[str, Any]
        The settings sections "logger", "console_handler" and "sentry".
    effective_log_level : int
        The console level after applying settings and CLI override.
    sentry_handler : SentryHandler | None
        The installed Sentry handler, if any.

    """

    APP_NAME: Final[str] = __app_name__

    def __init__(self) -> None:
        """
        Initialize LoggingManager attributes with default/None values.

        Does NOT apply the logging configuration yet.
        Call .apply_configuration() to set up logging.
        """
        self._internal_errors: list[str] = []
        self._logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

        self.cli_log_level: int | None = None
        self.enable_console_logging: bool = False
        self.log_config: dict[str, Any] = {}
        self.effective_log_level = logging.INFO
        self.sentry_handler: SentryHandler | None = None

    def apply_configuration(
        self,
        *,
        cli_log_level: int | None = None,
        enable_console_logging: bool,
        log_config: dict[str, Any],
        router_config: RouterConfig,
        client: TelemetryClient | None = None,
    ) -> None:
        """
        Apply the full logging configuration.

        Args:
        ----
            cli_log_level (int | None): Level derived from the CLI verbosity.
            enable_console_logging (bool): Force console output on.
            log_config (dict[str, Any]): The application settings.
            router_config (RouterConfig): Configuration of the Sentry router.
            client (TelemetryClient | None): Telemetry client; `SentryClient` if None.

        Raises:
        ------
            LogHandlerError: If the Sentry handler cannot be set up.

        """
        self._internal_errors.clear()

        self.cli_log_level = cli_log_level
        self.enable_console_logging = enable_console_logging
        self.log_config = log_config

        self._logger.debug("Applying logging configuration...")
        try:
            self._apply_full_configuration(router_config, client)
        except Exception as e:
            error_msg = "Critical error applying logging configuration: "
            self._internal_errors.append(error_msg + str(e))
            self._logger.exception(error_msg)
            raise

        self._logger.info("Full logging configuration applied.")

    def shutdown(self) -> None:
        """
        Shut down logging handlers to ensure logs are flushed and resources released.

        Closing the Sentry handler closes the router and with it the Sentry client.
        """
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
        self.sentry_handler = None

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        """Return a structlog logger, the application logger if no name is given."""
        return structlog.get_logger(name or self.APP_NAME)

    def get_instance_errors(self) -> list[str]:
        """Exposes internal errors encountered during configuration."""
        return list(self._internal_errors)

    # --- private methods ---
    def _clear_existing_handlers(self, root_logger: logging.Logger) -> None:
        """Close and remove all existing handlers of the root logger."""
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
        self._logger.debug("Cleared existing root logger handlers.")

    def _get_effective_log_level(self, logger_main_settings: dict[str, Any]) -> int:
        """Determine the effective console log level based on settings and CLI override."""
        settings_level_str = str(logger_main_settings.get("level", "INFO"))
        try:
            effective_level = parse_level(settings_level_str)
        except ValueError:
            self._internal_errors.append(f"Invalid log level '{settings_level_str}' in config. Falling back to INFO.")
            self._logger.warning(
                "Invalid log level from settings. Falling back to INFO.", settings_level_str=settings_level_str
            )
            effective_level = logging.INFO

        # A lower number is more verbose; the CLI can only increase verbosity.
        if self.cli_log_level is not None:
            original_effective_level = effective_level
            effective_level = min(effective_level, self.cli_log_level)
            self._logger.debug(
                "CLI log level applied.",
                cli_log_level=logging.getLevelName(self.cli_log_level),
                original_effective_level=logging.getLevelName(original_effective_level),
                final_effective_level=logging.getLevelName(effective_level),
            )

        return effective_level

    def _get_handler_level(self, sentry_settings: dict[str, Any]) -> int:
        """Return the level from which records are handed to Sentry."""
        value = sentry_settings.get("handler_level", "DEBUG")
        try:
            return parse_level(value)
        except ValueError:
            self._internal_errors.append(f"Invalid Sentry handler level '{value}'. Falling back to DEBUG.")
            self._logger.warning("Invalid Sentry handler level. Falling back to DEBUG.", handler_level=value)
            return logging.DEBUG

    def _get_primary_renderer(self, logger_main_settings: dict[str, Any]) -> list[Processor]:
        """Determine the final structlog processors for console output."""
        output_format = str(logger_main_settings.get("output_format", "console")).lower()
        if output_format == "json":
            return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        return [structlog.dev.ConsoleRenderer()]

    def _get_shared_processors(self) -> list[Processor]:
        """
        Return the list of shared structlog processors.

        `format_exc_info` is left to the renderers: the Sentry handler needs the
        exception object, not its text.
        """
        return [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

    def _setup_console_handler(
        self,
        root_logger: logging.Logger,
        renderers: list[Processor],
        shared_processors: list[Processor],
        console_handler_settings: dict[str, Any],
    ) -> None:
        """Set up the console log handler if enabled."""
        if not (self.enable_console_logging or console_handler_settings.get("enabled")):
            return
        try:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(self.effective_log_level)
            console_handler.setFormatter(
                ProcessorFormatter(
                    processors=[ProcessorFormatter.remove_processors_meta, *renderers],
                    foreign_pre_chain=shared_processors,
                )
            )
            root_logger.addHandler(console_handler)
            self._logger.debug("Console handler added.")
        except Exception as e:  # noqa: BLE001
            msg = "Failed to set up console handler: "
            self._internal_errors.append(msg + str(e))
            self._logger.exception(msg)

    def _setup_sentry_handler(
        self,
        root_logger: logging.Logger,
        router_config: RouterConfig,
        handler_level: int,
        client: TelemetryClient | None,
    ) -> SentryHandler:
        """Install the Sentry handler on the root logger."""
        try:
            handler = SentryHandler(EventRouter(config=router_config, client=client), level=handler_level)
        except Exception as e:
            msg = "Failed to set up Sentry handler"
            raise LogHandlerError(msg, e) from e

        root_logger.addHandler(handler)
        self._logger.debug(
            "Sentry handler added.",
            handler_level=logging.getLevelName(handler_level),
            minimum_breadcrumb_level=logging.getLevelName(router_config.minimum_breadcrumb_level),
            inert=router_config.dsn is None,
        )
        return handler

    def _apply_full_configuration(self, router_config: RouterConfig, client: TelemetryClient | None) -> None:
        """Apply the full structlog and standard logging configuration."""
        root_logger = logging.getLogger()
        self._clear_existing_handlers(root_logger)

        if not self.log_config:
            self._internal_errors.append("Logging configuration dictionary is empty.")
            self._logger.warning("No logging configuration provided.")

        logger_main_settings = self.log_config.get("logger", {})
        console_handler_settings = self.log_config.get("console_handler", {})
        sentry_settings = self.log_config.get("sentry", {})

        self.effective_log_level = self._get_effective_log_level(logger_main_settings)
        handler_level = self._get_handler_level(sentry_settings)
        root_logger.setLevel(min(self.effective_log_level, handler_level))

        shared_processors = self._get_shared_processors()
        structlog.configure(
            processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )

        self._setup_console_handler(
            root_logger,
            self._get_primary_renderer(logger_main_settings),
            shared_processors,
            console_handler_settings,
        )
        self.sentry_handler = self._setup_sentry_handler(root_logger, router_config, handler_level, client)

        # Re-fetch the logger AFTER configuration
        self._logger = structlog.get_logger(__name__)
        self._logger.debug("Structlog core configured.")
