"""
Wide search: one subject query per partition, merged.

A name or ICO search only returns subjects of one legal role at a time,
so a complete list needs one query per partition. Both are issued
concurrently and concatenated. A truncated partition makes the whole
result unusable for identity matching, so it fails the search instead of
narrowing it.
"""

import logging
from dataclasses import replace

from czsnoop.domain.models import Candidate, Partition, SubjectQuery
from czsnoop.errors import AmbiguousQueryError
from czsnoop.rzp.client import RzpClient
from czsnoop.search.cancellation import CancellationToken
from czsnoop.utils.parallel import execute_all_or_nothing

logger = logging.getLogger(__name__)

PARTITIONS = (Partition.ENTREPRENEUR, Partition.STATUTORY_BODY)


def wide_search(
    client: RzpClient,
    template: SubjectQuery,
    token: CancellationToken | None = None,
) -> list[Candidate]:
    """
    Search subjects across all partitions.

    Args:
        client: RZP client
        template: Query with a name or ICO; its partition is overridden
        token: Cancellation token shared with the rest of the search

    Returns:
        Candidates of all partitions (partition order, then register order)

    Raises:
        AmbiguousQueryError: If any partition's result was truncated
        RemoteFailureError: If any partition query failed
    """
    token = token or CancellationToken()

    def search_partition(partition: Partition) -> list[Candidate]:
        token.raise_if_cancelled()
        result = client.search_subject(replace(template, partition=partition))
        if result.truncated:
            raise AmbiguousQueryError()
        logger.debug(f"Found {len(result.subjects)} subjects in partition '{partition.value}'")
        return result.subjects

    per_partition = execute_all_or_nothing(
        PARTITIONS, search_partition, token, max_workers=len(PARTITIONS), desc="Wide search"
    )
    return [candidate for subjects in per_partition for candidate in subjects]
