"""Logging helper module."""

from __future__ import annotations

from logging import DEBUG, WARNING, Formatter, Logger, StreamHandler, getLogger

_ROOT = "sprig"


def init_logging(verbose: bool = False) -> None:
    """Attach a stderr handler to the package logger.

    Should be called once by the process entry point. Library code only
    ever obtains loggers through :func:`get_logger`.
    """
    logger = getLogger(_ROOT)
    if not logger.handlers:
        handler = StreamHandler()
        handler.setFormatter(Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(DEBUG if verbose else WARNING)
    if verbose:
        logger.debug("Debug logging enabled.")


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)
