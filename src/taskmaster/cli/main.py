# src/taskmaster/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the console REPL, then shuts the
stores down.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import follow_debug_preference, parse_level, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    console_level = parse_level(getattr(settings, "log_level", "INFO"))

    log_dir = getattr(settings, "data_dir", ".local/taskmaster")
    console = setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "Taskmaster"))

    state = create_initial_state(settings=settings)
    follow_debug_preference(console, state.preferences, console_level)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run.")
    finally:
        shutdown_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
