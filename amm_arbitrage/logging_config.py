"""Console logging setup for the command line entry point."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Attach one stderr handler to the package logger.

    Library modules only create loggers; handlers are configured here.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("amm_arbitrage")
    package_logger.handlers = [handler]
    package_logger.setLevel(level)
