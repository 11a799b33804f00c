"""
============================================================================
ENDPOINT PINGER - MAIN APPLICATION
============================================================================
Process entry point. Wires the layers together and owns the startup /
shutdown order.

Startup Order
-------------
1.  Load process settings (environment / .env)
2.  Load the YAML endpoint configuration (fatal on failure, exit 1)
3.  Configure logging at the configured level
4.  Build the shared HTTP client
5.  Create the PingScheduler, install SIGINT / SIGTERM handlers
6.  Start: immediate probes + recurring jobs, then block until a signal

Shutdown Order
--------------
On SIGINT or SIGTERM:
    stop new firings → drain running firings → close HTTP client → exit

Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import signal
import sys
from typing import Optional

import httpx

from config.constants import ErrorCodes
from config.loader import load_config
from config.models import RunConfig
from config.settings import PingerSettings, get_settings
from exceptions.base import ConfigurationError
from monitoring.http_client import build_http_client
from monitoring.scheduler import PingScheduler
from utils.logger import get_logger, setup_logging


logger = get_logger("Main")


# ============================================================================
# APPLICATION CLASS
# ============================================================================

class PingerApplication:
    """
    Top-level application orchestrator.

    Owns the config, the shared HTTP client and the scheduler, and is the
    single place that knows the startup / shutdown order.
    """

    def __init__(self, settings: Optional[PingerSettings] = None):
        self.settings = settings or get_settings()

        # --- subsystems (populated during startup) ---
        self.config: Optional[RunConfig] = None
        self.client: Optional[httpx.AsyncClient] = None
        self.scheduler: Optional[PingScheduler] = None

    # ==================================================================
    # PHASE 1: CONFIGURATION
    # ==================================================================

    def _load_config(self) -> RunConfig:
        """Load the endpoint config, then configure logging from it."""
        config = load_config(self.settings.config_path)

        setup_logging(
            config.log_level,
            json=self.settings.log_json,
            colorize=self.settings.log_colorize,
        )
        logger.debug(
            f"Config loaded from {self.settings.config_path}: "
            f"{len(config.endpoints)} endpoint(s), "
            f"timeout={config.timeout_seconds}s, "
            f"http logging={'on' if config.http_logging_enabled else 'off'}"
        )
        return config

    # ==================================================================
    # PHASE 2: HTTP CLIENT & SCHEDULER
    # ==================================================================

    def _init_runtime(self) -> None:
        self.client = build_http_client(self.config)
        self.scheduler = PingScheduler(
            self.config,
            self.client,
            settings=self.settings,
        )

    # ==================================================================
    # FULL STARTUP SEQUENCE
    # ==================================================================

    async def startup(self) -> None:
        """
        Execute the startup sequence up to a running scheduler.

        Raises:
            ConfigurationError: The endpoint configuration could not be loaded
        """
        self.config = self._load_config()
        self._init_runtime()

        await self.scheduler.start()
        logger.info("Pinger started. Press Ctrl+C to exit.")

    # ==================================================================
    # SHUTDOWN SEQUENCE
    # ==================================================================

    def request_shutdown(self) -> None:
        """Signal-safe: wake up run() so the shutdown sequence can start."""
        if self.scheduler:
            self.scheduler.request_shutdown()

    async def shutdown(self) -> None:
        """
        Drain the scheduler, then release the HTTP client.
        A failure in one step doesn't prevent the next from running.
        """
        if self.scheduler:
            try:
                await self.scheduler.shutdown()
            except Exception as e:
                logger.error(f"Scheduler shutdown error: {e}")

        if self.client:
            try:
                await self.client.aclose()
            except Exception as e:
                logger.error(f"HTTP client close error: {e}")

    # ==================================================================
    # RUN
    # ==================================================================

    async def run(self) -> None:
        """Block until a shutdown has been requested."""
        await self.scheduler.wait_for_shutdown()


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    app: PingerApplication,
) -> None:
    """
    Install SIGTERM / SIGINT handlers so that the pinger drains gracefully
    when stopped by the OS or by Ctrl+C.
    """
    def _handle_signal(sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}")
        app.request_shutdown()

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _handle_signal, sig)
        except (NotImplementedError, OSError):
            # Not supported on Windows; Ctrl+C then arrives as KeyboardInterrupt
            pass


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

async def main() -> int:
    """
    Async main: creates the app, starts it, and runs until a signal.

    Returns:
        Process exit status
    """
    app = PingerApplication()

    try:
        await app.startup()
    except ConfigurationError as e:
        logger.bind(error=e.to_dict()).error(f"Failed to load config: {e.message}")
        logger.debug(e.log_format())
        await app.shutdown()
        return ErrorCodes.FATAL

    _install_signal_handlers(asyncio.get_running_loop(), app)

    try:
        await app.run()
    finally:
        await app.shutdown()

    return ErrorCodes.OK


def run() -> None:
    """Console-script entry point."""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        exit_code = ErrorCodes.OK
    sys.exit(exit_code)


# ============================================================================
# SCRIPT ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    run()
