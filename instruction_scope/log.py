import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "instruction_scope"


def configure_logging(level: str = "WARNING", console: Optional[Console] = None) -> logging.Logger:
    """Route package log records through a rich handler on stderr."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_level=True,
        show_path=False,
        show_time=False,
        rich_tracebacks=True,
    )
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False
    return logger
