"""
Console utilities for PySineModel.

Provides the shared Rich console and the logging setup used by
applications embedding the analysis pipeline.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Module-level rich console instance
rich_console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Handler:
    """Route the library's log records through a Rich handler.

    Args:
        verbose: Show INFO records (otherwise only errors are shown).
        debug: Show per-frame DEBUG records, source paths and rich tracebacks.

    Returns:
        The installed handler.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.ERROR

    handler = RichHandler(
        level=level,
        console=rich_console,
        rich_tracebacks=debug or verbose,
        show_path=debug,
        show_time=False,
    )
    logging.basicConfig(format="%(message)s", level=level, handlers=[handler], force=True)
    return handler
