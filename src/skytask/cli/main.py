# src/skytask/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console front-end.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import console_alert, run_console_loop
from ..errors import ConfigurationError
from ..logging_setup import quiet_http_libraries, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=getattr(settings, "data_dir", ".local/skytask"), console_level=console_level)
    quiet_http_libraries()

    logger.info("Starting %s...", getattr(settings, "app_name", "skytask"))

    try:
        state = create_initial_state(settings=settings, alert=console_alert)
    except ConfigurationError as e:
        logger.error("%s", e.message)
        sys.exit(1)

    try:
        run_console_loop(state)
    finally:
        for client in (state.backend.generator, state.backend.search):
            close = getattr(client, "close", None)
            if callable(close):
                close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
