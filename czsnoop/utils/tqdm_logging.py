"""
Tqdm-compatible logging.

Routes log records through tqdm.write() so that messages logged by worker
threads appear on their own lines instead of breaking the deep search
progress bar.
"""

import logging
import sys
from typing import TextIO

from tqdm import tqdm


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes through tqdm.write() to avoid progress bar interference.

    Usage:
        handler = TqdmLoggingHandler(level=logging.INFO)
        logger.addHandler(handler)
    """

    def __init__(self, level: int = logging.NOTSET, stream: TextIO | None = None):
        """
        Initialize the handler.

        Args:
            level: Minimum logging level to handle
            stream: Output stream (default: sys.stderr, resolved at emit time)
        """
        super().__init__(level)
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record through tqdm.write()."""
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
