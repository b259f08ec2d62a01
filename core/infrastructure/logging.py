"""
Logging infrastructure.

One place configures the root handler; modules keep using
``logging.getLogger(__name__)``.
"""
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install the process-wide log format.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

