"""
Deep search: fetch the full detail record of each candidate.

Detail fetches are the most expensive call and the most frequent one when
enriching many subjects, so they run on a bounded pool of workers.
"""

import logging
from collections.abc import Iterable

from czsnoop.config import get_deep_search_workers
from czsnoop.domain.models import Candidate, DetailRecord
from czsnoop.errors import DataIntegrityError
from czsnoop.rzp.client import RzpClient
from czsnoop.search.cancellation import CancellationToken
from czsnoop.utils.parallel import execute_all_or_nothing

logger = logging.getLogger(__name__)


def fetch_detail(client: RzpClient, candidate: Candidate, token: CancellationToken) -> DetailRecord:
    """
    Fetch and verify the detail record of one candidate.

    Raises:
        DataIntegrityError: If the record belongs to a different ICO
    """
    detail = client.get_detail(candidate.detail_ref, before_request=token.raise_if_cancelled)
    if detail.ico != candidate.ico:
        raise DataIntegrityError(
            f"detail record ICO '{detail.ico}' does not match subject "
            f"'{candidate.name}' with ICO '{candidate.ico}'"
        )
    logger.debug(f"Fetched detail for {candidate.name} ({candidate.ico})")
    return detail


def deep_search(
    client: RzpClient,
    candidates: Iterable[Candidate],
    token: CancellationToken | None = None,
    max_workers: int | None = None,
    show_progress: bool = False,
) -> list[DetailRecord]:
    """
    Fetch detail records for candidates on a bounded worker pool.

    At most min(max_workers, len(candidates)) fetches run at once. The
    first failure cancels the token; the call then raises it and returns
    no partial list. Callers must not rely on the output order.

    Args:
        client: RZP client
        candidates: Candidates from a wide or person search
        token: Cancellation token shared with the rest of the search
        max_workers: Worker bound (default: settings.deep_search_workers)
        show_progress: Show a progress bar on stderr

    Returns:
        One DetailRecord per candidate
    """
    candidates = list(candidates)
    if not candidates:
        return []

    token = token or CancellationToken()
    workers = get_deep_search_workers() if max_workers is None else max_workers
    logger.debug(f"Fetching details for {len(candidates)} subjects with {workers} workers")

    return execute_all_or_nothing(
        candidates,
        lambda candidate: fetch_detail(client, candidate, token),
        token,
        max_workers=workers,
        desc="Fetching details",
        unit="subject",
        show_progress=show_progress,
    )
