"""
Subject search: entrepreneurs matching a name or ICO, with full detail.

Runs a wide search over both partitions, then a deep search over the
natural-person candidates. Both stages share one cancellation token.
"""

import logging

from czsnoop.domain.models import DetailRecord, PersonSearchInput, SubjectQuery
from czsnoop.domain.validation import create_ico, within_birth_bounds
from czsnoop.rzp.client import RzpClient
from czsnoop.search.cancellation import CancellationToken
from czsnoop.search.deep import deep_search
from czsnoop.search.wide import wide_search

logger = logging.getLogger(__name__)


def build_subject_query(search_input: PersonSearchInput) -> SubjectQuery:
    """
    Pick the discriminant for a subject search; ICO wins over name.

    Raises:
        ValueError: If neither is given or the ICO is malformed
    """
    if search_input.ico:
        return SubjectQuery(ico=create_ico(search_input.ico))
    if search_input.query.strip():
        return SubjectQuery(name=search_input.query.strip())
    raise ValueError("subject search needs a name or an ICO")


def search_subjects(
    client: RzpClient,
    search_input: PersonSearchInput,
    token: CancellationToken | None = None,
    deep_search_workers: int | None = None,
    show_progress: bool = False,
) -> list[DetailRecord]:
    """
    Search natural-person entrepreneurs by name or ICO.

    Args:
        client: RZP client
        search_input: Name or ICO plus optional inclusive birth-date bounds
        token: Optional cancellation token (default: a new one per call)
        deep_search_workers: Worker bound for detail fetches
        show_progress: Show a progress bar while fetching details

    Returns:
        DetailRecord of every matching natural-person entrepreneur
    """
    token = token or CancellationToken()
    candidates = wide_search(client, build_subject_query(search_input), token)
    natural_persons = [candidate for candidate in candidates if candidate.is_natural_person]
    logger.debug(
        f"Found {len(candidates)} subjects, {len(natural_persons)} of them natural persons"
    )

    details = deep_search(
        client,
        natural_persons,
        token,
        max_workers=deep_search_workers,
        show_progress=show_progress,
    )
    return [
        detail
        for detail in details
        if within_birth_bounds(detail.birth_date, search_input.born_after, search_input.born_before)
    ]
