# src/task_cli/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the menu loop on asyncio.
Termination signals become SystemExit so the running prompt unwinds and
leaves raw mode before the process ends.
"""

from __future__ import annotations

import asyncio
import contextlib
import locale
import logging
import signal
import sys

from ..cli.app import TaskApp
from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _install_signal_handlers() -> None:
    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise SystemExit(128 + signum)

    for name in ("SIGTERM", "SIGHUP"):
        sig = getattr(signal, name, None)
        if sig is None:
            continue
        try:
            signal.signal(sig, _handle_signal)
        except (OSError, ValueError):
            # Not in the main thread, or not supported on this platform.
            logger.debug("Cannot install handler for %s", name)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Title sorting collates with the user's locale.
    with contextlib.suppress(locale.Error):
        locale.setlocale(locale.LC_COLLATE, "")

    logger.info("Starting %s (tasks=%s)", settings.app_name, settings.tasks_path)

    _install_signal_handlers()

    state = create_initial_state(settings=settings)
    app = TaskApp(state)

    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    except Exception:
        logger.exception("Unexpected error, exiting.")
        print("  ✗ Unexpected error; see the log file for details.", file=sys.stderr)
        sys.exit(1)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
