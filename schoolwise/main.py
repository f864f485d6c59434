#!/usr/bin/env python3
"""SchoolWise report client - web entry point with structured logging."""

import argparse
import logging
from functools import partial
from typing import Optional

import flet as ft

from .config.app_config import AppConfig
from .config.directory_config import LOGS_DIR
from .utils.thread_pool import shutdown_thread_pool

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Ensure structured logging is configured once for the web entry point."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        # Respect existing configuration (e.g., when invoked from tests)
        return

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            LOGS_DIR / "schoolwise_main.log", encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"File logging disabled, cannot write to {LOGS_DIR}: {e}")

    root_logger.setLevel(logging.DEBUG)


def main(page: ft.Page, config: Optional[AppConfig] = None):
    """Build the SchoolWise page for one Flet session."""
    from .ui.main_gui import SchoolWiseGUI

    try:
        logger.info("Initializing SchoolWiseGUI for Flet page")
        app = SchoolWiseGUI(page, config)
        logger.debug("SchoolWiseGUI instantiated: %s", app)
    except Exception as e:
        logger.exception("Error while initializing the GUI page")
        page.add(ft.Text(f"Error loading application: {e}", color="red"))
        page.update()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='School-wise report generator')
    parser.add_argument('--port', type=int, default=8080, help='Port to run on (default: 8080)')
    parser.add_argument('--no-browser', action='store_true', help='Open as a desktop window instead of the browser')
    parser.add_argument('--server-url', default=None, help='Backend base URL (default: $SCHOOLWISE_SERVER_URL)')
    parser.add_argument('--download-dir', default=None, help='Folder for generated reports')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to the console')
    return parser.parse_args(argv)


def run(argv=None) -> None:
    args = parse_args(argv)
    _configure_logging(args.verbose)

    config = AppConfig.from_env(
        server_url=args.server_url,
        download_dir=args.download_dir,
        verbose=args.verbose or None,
    )
    logger.info("Starting SchoolWise on port %s (backend %s)", args.port, config.server_url)
    logger.info("Reports will be saved to %s", config.download_dir)

    view_mode = ft.AppView.FLET_APP if args.no_browser else ft.AppView.WEB_BROWSER
    try:
        ft.app(target=partial(main, config=config), port=args.port, view=view_mode)
    except Exception:
        logger.exception("Error starting web application")
        raise
    finally:
        # Process-wide pool, outlives every session
        shutdown_thread_pool(wait=False)


if __name__ == "__main__":
    run()
