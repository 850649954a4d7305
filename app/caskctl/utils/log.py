"""Logging setup for the CLI.

Library modules only create module-level loggers; the CLI decides where
records go and how verbose they are.
"""

import logging

from rich.logging import RichHandler

from caskctl.utils.formatting import err_console

LOGGER_NAME = "caskctl"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route caskctl log records to stderr through Rich.

    Per-package progress is logged at INFO and raw brew output at DEBUG,
    so both only show up in verbose mode.

    Args:
        verbose: Show per-package progress and command details.
        quiet: Only show errors.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
