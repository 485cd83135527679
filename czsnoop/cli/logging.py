"""
Logging setup for the czsnoop CLI.
"""

import logging
from typing import TextIO

from czsnoop.utils.tqdm_logging import TqdmLoggingHandler

# Loggers of libraries we call that are too chatty at DEBUG
NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def setup_logging(verbose: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """
    Set up console logging for the CLI.

    Args:
        verbose: If True, log at DEBUG level, otherwise INFO
        stream: Output stream (default: stderr, so stdout only carries results)

    Returns:
        The configured ``czsnoop`` package logger
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = TqdmLoggingHandler(level=level, stream=stream)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    # Child loggers (czsnoop.search.*, czsnoop.rzp.*) route through this one
    pkg_logger = logging.getLogger("czsnoop")
    pkg_logger.setLevel(level)
    pkg_logger.handlers = [
        h for h in pkg_logger.handlers if isinstance(h, logging.NullHandler)
    ]  # Clear handlers from a previous setup
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False  # Don't propagate to root

    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    return pkg_logger
