"""
czsnoop - OSINT search over Czech public registers.

This package provides:
- A client for the Trade Licensing Register (RZP) at https://www.rzp.cz
- Concurrent search-and-enrichment of persons and economic subjects
- A small command line interface (``czsnoop person`` / ``czsnoop search``)
"""

import logging

# Set up NullHandler to prevent "No handler found" warnings
# when used as a library. Applications should configure their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

# Re-export commonly used items
from czsnoop.config import get_settings
from czsnoop.domain.models import AggregatedPerson, PersonSearchInput
from czsnoop.errors import (
    AmbiguousQueryError,
    CzsnoopError,
    DataIntegrityError,
    RemoteFailureError,
)
from czsnoop.search import search_persons, search_subjects

__all__ = [
    "__version__",
    # Config
    "get_settings",
    # Models
    "AggregatedPerson",
    "PersonSearchInput",
    # Errors
    "CzsnoopError",
    "AmbiguousQueryError",
    "RemoteFailureError",
    "DataIntegrityError",
    # Search
    "search_persons",
    "search_subjects",
]
