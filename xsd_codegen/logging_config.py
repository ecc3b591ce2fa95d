"""Logging setup shared by all xsd_codegen modules.

Loggers are plain :mod:`logging` loggers under the ``xsd_codegen`` root,
rendered through a Rich handler on stderr.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "xsd_codegen"

_configured = False


def setup_logging(
    level: int = logging.WARNING, console: Optional[Console] = None
) -> logging.Logger:
    """Configure the package root logger.

    Calling this more than once only updates the level.

    Args:
        level: Minimum level emitted by the root logger.
        console: Rich console to write to (defaults to stderr).

    Returns:
        The package root logger.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.propagate = False
        _configured = True

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name``, nested under the package root."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
