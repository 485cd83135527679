"""
Client for the Trade Licensing Register (RZP).

Wraps the register's public JSON/XML endpoints behind four operations:
search_subject, search_person, search_address and get_detail. Each call
is a single synchronous round trip (two for get_detail) with its own
timeout; every failure is raised as a typed CzsnoopError.

The client holds an RZP session id and a requests.Session, and is safe
to share between worker threads.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

import requests

from czsnoop.config import Settings, get_settings
from czsnoop.constants import (
    ISO_DATE_FORMAT,
    RZP_ADDRESSES_PATH,
    RZP_DETAIL_PATH,
    RZP_PERSONS_PATH,
    RZP_SESSION_PATH,
    RZP_SUBJECTS_PATH,
)
from czsnoop.domain.models import (
    AddressMatch,
    Candidate,
    DetailRecord,
    PersonCandidate,
    PersonQuery,
    PersonSearchResult,
    SubjectQuery,
    SubjectSearchResult,
)
from czsnoop.errors import DataIntegrityError, RemoteFailureError
from czsnoop.rzp.xml_records import DirectoryRecord, parse_directory_record, parse_statement

logger = logging.getLogger(__name__)


def _parse_iso_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except ValueError as e:
        raise DataIntegrityError(f"unable to parse date '{value}': {e}") from e


class RzpClient:
    """
    Session-bound RZP client.

    Use create_client() to open a session; the constructor is for callers
    that already have a session id (tests, long-lived sessions).
    """

    def __init__(
        self,
        session: requests.Session,
        session_id: str,
        base_url: str,
        timeout: float,
        user_agent: str = "",
    ):
        self.session = session
        self.session_id = session_id
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent

    def _headers(self, accept: str = "application/json") -> dict[str, str]:
        headers = {
            "Sesid": self.session_id,
            "Accept-Language": "cs",
            "Accept": accept,
        }
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers

    def _get(self, path: str, params: dict[str, str] | None = None, accept: str = "application/json"):
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} {params or ''}")
        try:
            response = self.session.get(
                url, params=params, headers=self._headers(accept), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise RemoteFailureError(f"unable to do request to {url}: {e}") from e

        if response.status_code != 200:
            raise RemoteFailureError(
                f"unexpected status code: {response.status_code} for {url}, "
                f"with response {response.text[:500]}"
            )
        return response

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        response = self._get(path, params)
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteFailureError(f"unable to unmarshal response from {path}: {e}") from e
        if not isinstance(data, dict):
            raise RemoteFailureError(f"unexpected response shape from {path}: {type(data).__name__}")
        return data

    def search_subject(self, query: SubjectQuery) -> SubjectSearchResult:
        """
        Search economic subjects.

        Name and ICO searches are restricted to the query's partition;
        person-id and address-code searches cover all roles.

        Args:
            query: Subject query with exactly one discriminant

        Returns:
            SubjectSearchResult with candidates and the truncation flag
        """
        discriminant = query.discriminant()
        params = {
            # without true, RZP rejects names whose last word is shorter than 4 characters
            "s-presvyber": "true",
            "pouzeplatne": "true",
        }
        if discriminant == "name":
            params["s-obchjm"] = query.name
        elif discriminant == "ico":
            params["s-ico"] = query.ico
        elif discriminant == "person_id":
            params["s-osoba"] = query.person_id
        else:
            params["s-adresa"] = str(query.address_code)

        if discriminant in ("name", "ico"):
            if query.partition is None:
                raise ValueError(f"{discriminant} search requires a partition")
            params["s-role"] = query.partition.role_code

        data = self._get_json(RZP_SUBJECTS_PATH, params)
        subjects = [
            Candidate(
                name=item.get("nazev", ""),
                ico=item.get("ico", "") or "",
                address=item.get("sidlo", "") or "",
                detail_ref=item.get("ssarzp", ""),
                subject_type=item.get("typSubjektu", "") or "",
            )
            for item in data.get("subjekty") or []
        ]
        return SubjectSearchResult(subjects=subjects, truncated=bool(data.get("seznamNeniKompletni")))

    def search_person(self, query: PersonQuery) -> PersonSearchResult:
        """Search natural persons by name and optionally exact birth date."""
        params = {"pouzeplatne": "true"}
        if query.first_name:
            params["o-jmeno"] = query.first_name
        if query.surname:
            params["o-prijmeni"] = query.surname
        if query.date_of_birth is not None:
            params["o-datum"] = query.date_of_birth.strftime(ISO_DATE_FORMAT)

        data = self._get_json(RZP_PERSONS_PATH, params)
        people = [
            PersonCandidate(
                first_name=item.get("jmeno", ""),
                last_name=item.get("prijmeni", ""),
                display_name=item.get("zobrazeneJmeno", ""),
                person_id=item.get("idOsoby", ""),
                date_of_birth=_parse_iso_date(item.get("datum")),
                title_before_name=item.get("titulPred", "") or "",
                title_after_name=item.get("titulZa", "") or "",
                role=item.get("roleOsoby", "") or "",
            )
            for item in data.get("osoby") or []
        ]
        return PersonSearchResult(people=people, truncated=bool(data.get("seznamNeniKompletni")))

    def search_address(self, text: str) -> list[AddressMatch]:
        """Resolve searchable address text ("milovicka 9") to register addresses."""
        data = self._get_json(RZP_ADDRESSES_PATH, {"a-text": text})
        matches = []
        for item in data.get("adresy") or []:
            try:
                code = int(item["kod"])
            except (KeyError, TypeError, ValueError) as e:
                raise RemoteFailureError(f"address match without a valid code: {item}") from e
            matches.append(AddressMatch(address=item.get("adresa", ""), code=code))
        return matches

    def get_directory_record(self, ref: str) -> DirectoryRecord:
        """First half of a detail fetch: the subject's directory record."""
        response = self._get(RZP_DETAIL_PATH.format(ref=ref), accept="text/xml")
        return parse_directory_record(response.content)

    def get_statement(self, path: str) -> DetailRecord:
        """Second half of a detail fetch: the statement linked from the directory record."""
        response = self._get(path, accept="text/xml")
        return parse_statement(response.content)

    def get_detail(
        self, ref: str, before_request: Callable[[], None] | None = None
    ) -> DetailRecord:
        """
        Fetch the full detail of a subject (two chained requests).

        Args:
            ref: Opaque detail reference (ssarzp) from a subject search
            before_request: Optional hook called before each of the two
                requests; raising from it aborts the fetch

        Returns:
            DetailRecord parsed from the subject's statement

        Raises:
            DataIntegrityError: If the statement belongs to a different ICO
                than its directory record
        """
        if before_request is not None:
            before_request()
        directory = self.get_directory_record(ref)
        if before_request is not None:
            before_request()
        detail = self.get_statement(directory.statement_path)
        if directory.ico and detail.ico != directory.ico:
            raise DataIntegrityError(
                f"statement ICO '{detail.ico}' does not match directory record ICO '{directory.ico}'"
            )
        return detail


def start_session(session: requests.Session, base_url: str, timeout: float) -> str:
    """
    Open an RZP session and return its id.

    The register also sets a session cookie, which the requests.Session keeps.
    """
    url = f"{base_url}{RZP_SESSION_PATH}"
    try:
        response = session.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise RemoteFailureError(f"unable to start RZP session: {e}") from e
    if response.status_code != 200:
        raise RemoteFailureError(
            f"unexpected status code: {response.status_code} while starting RZP session"
        )
    try:
        session_id = response.json()["sesid"]
    except (ValueError, KeyError, TypeError) as e:
        raise RemoteFailureError(f"unable to unmarshal session response: {e}") from e
    return session_id


def create_client(
    settings: Settings | None = None, session: requests.Session | None = None
) -> RzpClient:
    """
    Create a client with a fresh RZP session.

    Args:
        settings: Optional settings (default: get_settings())
        session: Optional requests.Session for connection pooling

    Returns:
        RzpClient ready for concurrent use
    """
    settings = settings or get_settings()
    if session is None:
        session = requests.Session()
    session_id = start_session(session, settings.base_url, settings.request_timeout)
    logger.debug(f"Created RZP client with session {session_id}")
    return RzpClient(
        session=session,
        session_id=session_id,
        base_url=settings.base_url,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )
