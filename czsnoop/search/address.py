"""
Address cross-reference: other subjects registered at the same address.

Resolution failures (unparseable address, zero or several matching
register addresses) only degrade the enrichment of one subject; remote
failures still fail the search.
"""

import logging

from czsnoop.domain.models import AddressCode, SubjectQuery
from czsnoop.domain.validation import address_to_searchable
from czsnoop.errors import DegradedEnrichmentError
from czsnoop.rzp.client import RzpClient
from czsnoop.search.cancellation import CancellationToken

logger = logging.getLogger(__name__)


def resolve_address_code(client: RzpClient, address: str, token: CancellationToken) -> AddressCode:
    """
    Resolve free-text address to exactly one register address code.

    Raises:
        AddressNormalizationError: If the address cannot be normalized
        DegradedEnrichmentError: If the register returns zero or several matches
    """
    searchable = address_to_searchable(address)
    token.raise_if_cancelled()
    matches = client.search_address(searchable)
    if len(matches) != 1:
        raise DegradedEnrichmentError(
            f"expected exactly one address for '{searchable}', got {len(matches)}"
        )
    return matches[0].code


def find_same_address_subjects(
    client: RzpClient, address: str, token: CancellationToken | None = None
) -> list[str]:
    """
    Names of subjects registered at the given address.

    The subject the address came from is not filtered out, so the list
    may contain only that subject.

    Args:
        client: RZP client
        address: Free-text address as stored in the register
        token: Cancellation token shared with the rest of the search

    Returns:
        Subject names, or an empty list if the address could not be resolved
    """
    token = token or CancellationToken()
    try:
        code = resolve_address_code(client, address, token)
    except DegradedEnrichmentError as e:
        logger.warning(f"Unable to get address code for '{address}': {e}")
        return []

    token.raise_if_cancelled()
    result = client.search_subject(SubjectQuery(address_code=code))
    if result.truncated:
        logger.warning(f"Too many subjects registered at '{address}', skipping same-address list")
        return []
    return [subject.name for subject in result.subjects]
