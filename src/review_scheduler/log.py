"""Console logging for applications embedding the scheduler."""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "review_scheduler"


def configure_logging(level: int = logging.INFO, console: Optional[Console] = None) -> logging.Logger:
    """Attach a rich handler to the package logger and return it.

    Calling it again replaces the handler instead of stacking a second one.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
