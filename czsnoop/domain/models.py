"""
Data models for register queries and search results.

Queries and raw register records flow from the RZP client into the
search pipeline; AggregatedPerson is the only entity handed back to
callers of a person search. All records are frozen so they can be passed
between worker threads without copying.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Generic, TypeVar

from czsnoop.constants import NATURAL_PERSON_TYPE

T = TypeVar("T")

AddressCode = int


class Partition(Enum):
    """Legal-role category a subject search is split across."""

    ENTREPRENEUR = "entrepreneur"
    STATUTORY_BODY = "statutory body"

    @property
    def role_code(self) -> str:
        """Value of the ``s-role`` query parameter."""
        return "P" if self is Partition.ENTREPRENEUR else "S"


@dataclass(frozen=True)
class SubjectQuery:
    """Search for economic subjects by exactly one discriminant."""

    name: str | None = None
    ico: str | None = None
    person_id: str | None = None
    address_code: AddressCode | None = None
    partition: Partition | None = None

    def discriminant(self) -> str:
        """
        Name of the field this query searches by.

        Raises:
            ValueError: If zero or more than one discriminant is set
        """
        present = [
            key
            for key in ("name", "ico", "person_id", "address_code")
            if getattr(self, key) not in (None, "")
        ]
        if len(present) != 1:
            raise ValueError(
                f"subject query needs exactly one of name, ico, person_id, address_code; got {present}"
            )
        return present[0]


@dataclass(frozen=True)
class PersonQuery:
    """Search for natural persons recorded in the register."""

    first_name: str = ""
    surname: str = ""
    date_of_birth: date | None = None


@dataclass(frozen=True)
class Candidate:
    """Lightweight subject match returned by a broad search."""

    name: str
    ico: str
    address: str
    detail_ref: str
    subject_type: str = ""

    @property
    def is_natural_person(self) -> bool:
        return self.subject_type == NATURAL_PERSON_TYPE


@dataclass(frozen=True)
class SubjectSearchResult:
    subjects: list[Candidate]
    truncated: bool = False


@dataclass(frozen=True)
class PersonCandidate:
    """Person match returned by the person search endpoint."""

    first_name: str
    last_name: str
    display_name: str
    person_id: str
    date_of_birth: date | None = None
    title_before_name: str = ""
    title_after_name: str = ""
    role: str = ""


@dataclass(frozen=True)
class PersonSearchResult:
    people: list[PersonCandidate]
    truncated: bool = False


@dataclass(frozen=True)
class AddressMatch:
    """Address known to the register, with its internal code."""

    address: str
    code: AddressCode


@dataclass(frozen=True)
class Trade:
    """A single trade licence held by a subject."""

    trade_type: str
    date_of_origin: date
    license_validity: str = ""


@dataclass(frozen=True)
class DetailRecord:
    """Full profile of a natural-person entrepreneur."""

    ico: str
    full_name: str
    first_name: str
    last_name: str
    birth_date: date
    citizenship: str
    address: str
    title_before_name: str = ""
    title_after_name: str = ""
    trades: list[Trade] = field(default_factory=list)


@dataclass(frozen=True)
class EconomicSubject:
    """Subject a person is linked to."""

    name: str
    address: str
    ico: str


@dataclass(frozen=True)
class AggregatedPerson:
    """Final result for a person search."""

    first_name: str
    last_name: str
    full_name: str
    birth_date: date | None
    title_before_name: str = ""
    title_after_name: str = ""
    subjects: list[EconomicSubject] = field(default_factory=list)
    citizenship: str = ""  # From the person's own natural-person detail, if any
    address: str = ""
    same_address_subjects: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PersonSearchInput:
    """Caller-facing query. Date bounds are inclusive; None means unbounded."""

    query: str = ""
    ico: str | None = None
    born_after: date | None = None
    born_before: date | None = None


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the error that prevented it."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
