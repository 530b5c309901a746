# pyright: standard

"""bitbucket-backup: bitbucket_backup/__logger__.py
A common logger rendering through rich.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Initialize basic console and handler
cons = Console(stderr=True)
rich_handler = RichHandler(console=cons, show_path=False)
# Package root logger, module loggers propagate into it
logger = logging.getLogger("bitbucket_backup")


def create_logger(level: str | int = "INFO") -> None:
    """Helper function to route package logging through a rich handler."""
    # pylint: disable=global-statement
    global cons, rich_handler

    cons = Console(stderr=True)
    rich_handler = RichHandler(console=cons, show_path=False)

    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(level)
    logger.addHandler(rich_handler)

    logging.basicConfig(
        format="%(message)s",
        datefmt="%H:%M:%S",
        level=level,
        handlers=[rich_handler],
        force=True,
    )
