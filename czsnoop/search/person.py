"""
Person aggregation: the top-level person search.

Pipeline for a free-text name:
1. Person search (fails on truncation)
2. One task per matched person, all in parallel:
   subjects of the person -> detail of the person's own natural-person
   subject -> same-address cross-reference
3. Inclusive birth-date filter over the assembled records

The call is all-or-nothing: any remote or integrity failure in any task,
or a truncated subject list of any person, cancels the whole search and
is raised; only address resolution may degrade without failing.
"""

import logging

from czsnoop.domain.models import (
    AggregatedPerson,
    EconomicSubject,
    PersonCandidate,
    PersonSearchInput,
    SubjectQuery,
)
from czsnoop.domain.validation import split_person_name, within_birth_bounds
from czsnoop.errors import AmbiguousQueryError
from czsnoop.rzp.client import RzpClient
from czsnoop.search.address import find_same_address_subjects
from czsnoop.search.cancellation import CancellationToken
from czsnoop.search.deep import deep_search
from czsnoop.utils.parallel import execute_all_or_nothing

logger = logging.getLogger(__name__)


def find_persons(
    client: RzpClient, query: str, token: CancellationToken
) -> list[PersonCandidate]:
    """
    Run the person search for a free-text name.

    Raises:
        ValueError: If the query has no name in it
        AmbiguousQueryError: If the register truncated the result
    """
    person_query = split_person_name(query)
    if not person_query.surname:
        raise ValueError("person search needs a name")

    token.raise_if_cancelled()
    result = client.search_person(person_query)
    if result.truncated:
        raise AmbiguousQueryError()
    logger.debug(f"Found {len(result.people)} persons")
    return result.people


def aggregate_person(
    client: RzpClient,
    person: PersonCandidate,
    token: CancellationToken,
    deep_search_workers: int | None = None,
) -> AggregatedPerson:
    """
    Assemble one AggregatedPerson from the person's dependent lookups.

    Args:
        client: RZP client
        person: Person candidate (each task gets its own immutable copy)
        token: Cancellation token shared by the whole search
        deep_search_workers: Worker bound passed to deep_search

    Returns:
        AggregatedPerson, enriched where the person has an own subject

    Raises:
        AmbiguousQueryError: If the person's subject list was truncated
    """
    logger.debug(f"Searching subjects for person {person.display_name}")
    token.raise_if_cancelled()
    result = client.search_subject(SubjectQuery(person_id=person.person_id))
    if result.truncated:
        raise AmbiguousQueryError()

    subjects = [
        EconomicSubject(name=subject.name, address=subject.address, ico=subject.ico)
        for subject in result.subjects
    ]

    own_subjects = [subject for subject in result.subjects if subject.is_natural_person]
    citizenship = ""
    address = ""
    same_address_subjects: list[str] = []
    birth_date = person.date_of_birth

    if own_subjects:
        if len(own_subjects) > 1:
            logger.debug(
                f"{person.display_name} has {len(own_subjects)} natural-person subjects, using the first"
            )
        own = own_subjects[0]
        # A single-candidate deep search shares the token, so a failure here cancels the search
        [detail] = deep_search(client, [own], token, max_workers=deep_search_workers)
        address = detail.address or own.address
        citizenship = detail.citizenship
        birth_date = birth_date or detail.birth_date
        same_address_subjects = find_same_address_subjects(client, address, token)

    logger.debug(f"Done searching subjects for person {person.display_name}")
    return AggregatedPerson(
        first_name=person.first_name,
        last_name=person.last_name,
        full_name=person.display_name,
        birth_date=birth_date,
        title_before_name=person.title_before_name,
        title_after_name=person.title_after_name,
        subjects=subjects,
        citizenship=citizenship,
        address=address,
        same_address_subjects=same_address_subjects,
    )


def search_persons(
    client: RzpClient,
    search_input: PersonSearchInput,
    token: CancellationToken | None = None,
    deep_search_workers: int | None = None,
) -> list[AggregatedPerson]:
    """
    Search persons by name and aggregate everything the register knows about them.

    Args:
        client: RZP client
        search_input: Name plus optional inclusive birth-date bounds
        token: Optional cancellation token (default: a new one per call)
        deep_search_workers: Worker bound for detail fetches

    Returns:
        AggregatedPerson records in the order the register listed the persons

    Raises:
        AmbiguousQueryError: If the person search or any person's subject list was truncated
        RemoteFailureError: If any remote call failed
        DataIntegrityError: If a detail record is inconsistent
    """
    token = token or CancellationToken()
    people = find_persons(client, search_input.query, token)

    persons = execute_all_or_nothing(
        people,
        lambda person: aggregate_person(client, person, token, deep_search_workers),
        token,
        desc="Aggregating persons",
        unit="person",
    )

    filtered = [
        person
        for person in persons
        if within_birth_bounds(person.birth_date, search_input.born_after, search_input.born_before)
    ]
    logger.debug(f"{len(filtered)} of {len(persons)} persons within birth date bounds")
    return filtered
