"""Logging configuration for the application."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Send application logs to stdout.

    Signup decisions and sweep results are logged at INFO; store and hashing
    failures at ERROR with tracebacks. SQLAlchemy's own loggers stay at
    WARNING unless SQL_ECHO is on.

    Args:
        level: Logging level name; unknown names fall back to INFO
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
