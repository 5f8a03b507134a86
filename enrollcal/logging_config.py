"""
Logging setup for the command line tool.

Library modules only create loggers; handlers are installed here, once,
when the CLI starts.
"""

from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """
    Configure console logging.

    verbose=True shows DEBUG messages (skipped rows and their reasons),
    otherwise only warnings and errors are shown.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Keep handlers someone else already installed
    if root_logger.handlers:
        return

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)
