"""
Concurrent search-and-enrichment over the RZP register.

- wide: one subject query per partition, merged
- deep: bounded pool of detail fetches
- address: same-address cross-reference
- person: top-level person aggregation
- subject: name/ICO subject search with details
"""

from czsnoop.search.address import find_same_address_subjects
from czsnoop.search.cancellation import CancellationToken
from czsnoop.search.deep import deep_search
from czsnoop.search.person import search_persons
from czsnoop.search.subject import search_subjects
from czsnoop.search.wide import wide_search

__all__ = [
    "CancellationToken",
    "wide_search",
    "deep_search",
    "find_same_address_subjects",
    "search_persons",
    "search_subjects",
]
