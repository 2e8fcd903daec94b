"""Opt-in console logging for eps-nsga.

Library modules only create loggers via ``logging.getLogger(__name__)``; they
never attach handlers. Call configure_logging() from a script to see progress.
"""

import logging


def configure_logging(*, level: int = logging.INFO) -> None:
    """Attach a minimal console handler to the ``eps_nsga`` logger.

    Nothing happens if the root logger or the ``eps_nsga`` logger already has
    handlers, so an application's own logging setup always wins.

    Args:
        level: Logging level for the ``eps_nsga`` logger.
    """
    root = logging.getLogger()
    package_logger = logging.getLogger("eps_nsga")

    if root.handlers or package_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


__all__ = ["configure_logging"]
