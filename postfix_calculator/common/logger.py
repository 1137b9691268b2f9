"""Package-wide logger."""
import logging

LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger: logging.Logger = logging.getLogger("postfix_calculator")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(logging.INFO)


def set_verbose(verbose: bool) -> None:
    """
    Switch the package logger between INFO and DEBUG.

    :param bool verbose: True to log conversion details
    """
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
