"""
CLI utilities for czsnoop.

This package provides:
- Logging setup
- Argument parsing and age-to-date conversion
- Result rendering
- Command entry points
"""

from czsnoop.cli.args import (
    build_parser,
    max_age_to_born_after,
    min_age_to_born_before,
    resolve_date_bounds,
)
from czsnoop.cli.commands import main, run
from czsnoop.cli.logging import setup_logging
from czsnoop.cli.output import format_detail, format_person

__all__ = [
    # Logging
    "setup_logging",
    # Arguments
    "build_parser",
    "resolve_date_bounds",
    "min_age_to_born_before",
    "max_age_to_born_after",
    # Output
    "format_person",
    "format_detail",
    # Commands
    "main",
    "run",
]
