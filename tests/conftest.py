"""
Pytest configuration and shared fixtures for czsnoop tests.
"""

import logging
import os
import threading
import time
from datetime import date

import pytest

from czsnoop.domain.models import (
    AddressMatch,
    Candidate,
    DetailRecord,
    PersonCandidate,
    PersonSearchResult,
    SubjectSearchResult,
)

# Never pick up a developer's .env overrides in unit tests
os.environ.setdefault("CZSNOOP_BASE_URL", "https://www.rzp.cz")


class FakeRegistryClient:
    """
    Scripted stand-in for RzpClient.

    Every lookup table maps a query key to either a result or an exception
    instance to raise. Calls are recorded, and concurrent detail fetches
    are counted so tests can check the worker bound.
    """

    def __init__(
        self,
        people: PersonSearchResult | Exception | None = None,
        subjects: dict | None = None,
        details: dict | None = None,
        addresses: dict | None = None,
        detail_delay: float = 0.0,
    ):
        self.people = people or PersonSearchResult(people=[])
        self.subjects = subjects or {}
        self.details = details or {}
        self.addresses = addresses or {}
        self.detail_delay = detail_delay

        self.calls: list[tuple] = []
        self._lock = threading.Lock()
        self._active_details = 0
        self.max_active_details = 0

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return value

    def calls_to(self, method: str) -> list[tuple]:
        with self._lock:
            return [call for call in self.calls if call[0] == method]

    def search_person(self, query):
        self._record("search_person", query)
        return self._answer(self.people)

    def search_subject(self, query):
        key = query.discriminant()
        value = getattr(query, key)
        if key in ("name", "ico"):
            lookup = (query.partition, value)
        else:
            lookup = (key, value)
        self._record("search_subject", lookup)
        return self._answer(self.subjects.get(lookup, SubjectSearchResult(subjects=[])))

    def search_address(self, text):
        self._record("search_address", text)
        return self._answer(self.addresses.get(text, []))

    def get_detail(self, ref, before_request=None):
        if before_request is not None:
            before_request()
        with self._lock:
            self.calls.append(("get_detail", ref))
            self._active_details += 1
            self.max_active_details = max(self.max_active_details, self._active_details)
        try:
            if self.detail_delay:
                time.sleep(self.detail_delay)
            return self._answer(self.details[ref])
        finally:
            with self._lock:
                self._active_details -= 1


def make_candidate(ico: str, name: str = "", subject_type: str = "F", address: str = "") -> Candidate:
    return Candidate(
        name=name or f"Subject {ico}",
        ico=ico,
        address=address or "Milovická 197/9, 198 00, Praha 9 - Hloubětín",
        detail_ref=f"ref-{ico}",
        subject_type=subject_type,
    )


def make_detail(ico: str, birth_date: date = date(1980, 5, 17), **overrides) -> DetailRecord:
    fields = {
        "ico": ico,
        "full_name": "Jan Novák",
        "first_name": "Jan",
        "last_name": "Novák",
        "birth_date": birth_date,
        "citizenship": "Česká republika",
        "address": "Milovická 197/9, 198 00, Praha 9 - Hloubětín",
    }
    fields.update(overrides)
    return DetailRecord(**fields)


def make_person(person_id: str, first_name: str = "Jan", birth_date: date | None = None) -> PersonCandidate:
    return PersonCandidate(
        first_name=first_name,
        last_name="Novák",
        display_name=f"{first_name} Novák",
        person_id=person_id,
        date_of_birth=birth_date,
    )


def single_address(code: int = 22421611) -> list[AddressMatch]:
    return [AddressMatch(address="Milovická 197/9, 198 00, Praha 9 - Hloubětín", code=code)]


@pytest.fixture
def fake_client_factory():
    """Build a FakeRegistryClient from keyword arguments."""
    return FakeRegistryClient


def directory_xml(ico: str = "01895541", statement_path: str = "/rzp/api3-c/srv/vw/v1/listiny/01895541.xml") -> bytes:
    """A minimal ``<Vypis>`` document linking to a statement."""
    link = f"<Odkazy><VypisXML>{statement_path}</VypisXML></Odkazy>" if statement_path else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Vypis>
  <Subjekt>
    <Ico><Hodnota>{ico}</Hodnota></Ico>
    <ObchodniJmenoFO>Ing. Jan Novák</ObchodniJmenoFO>
    <Sidlo><Adresa><Hodnota>Milovická 197/9, 198 00, Praha 9 - Hloubětín</Hodnota></Adresa></Sidlo>
    {link}
  </Subjekt>
</Vypis>""".encode()


def statement_xml(
    ico: str = "01895541", birth_date: str = "17.05.1980", encoding: str = "windows-1250"
) -> bytes:
    """A ``<listiny>`` statement with two licences, encoded like the register serves it."""
    return f"""<?xml version="1.0" encoding="{encoding}"?>
<listiny>
  <verweb>
    <PodnikatelDetail>
      <IdentifikacniCislo><PlatnostHodnoty><Hodnota>{ico}</Hodnota></PlatnostHodnoty></IdentifikacniCislo>
      <PodnikatelOsoba>
        <ZucastnenaOsobaDetail>
          <JmenoPrijmeni><Hodnota>Jan Novák</Hodnota></JmenoPrijmeni>
          <Jmeno><Hodnota>Jan</Hodnota></Jmeno>
          <Prijmeni><Hodnota>Novák</Hodnota></Prijmeni>
          <TitulPredJmenem><Hodnota>Ing.</Hodnota></TitulPredJmenem>
          <DatumNarozeni><Hodnota>{birth_date}</Hodnota></DatumNarozeni>
          <Obcanstvi><Hodnota>Česká republika</Hodnota></Obcanstvi>
        </ZucastnenaOsobaDetail>
      </PodnikatelOsoba>
      <AdresaPodnikani>
        <PlatnostAdresy>
          <ZmenaAdresy><TextAdresy>Milovická 197/9, 198 00, Praha 9 - Hloubětín</TextAdresy></ZmenaAdresy>
        </PlatnostAdresy>
      </AdresaPodnikani>
      <SeznamZivnosti>
        <Zivnost>
          <Vznik>01.02.2010</Vznik>
          <PlatnostOpravneni><Hodnota>na dobu neurčitou</Hodnota></PlatnostOpravneni>
          <Predmet><Hodnota>Výroba, obchod a služby</Hodnota></Predmet>
          <Obor>
            <Vycet>
              <Drive>Velkoobchod a maloobchod</Drive>
              <Drive>Poskytování software</Drive>
            </Vycet>
          </Obor>
        </Zivnost>
        <Zivnost>
          <Vznik>03.04.2015</Vznik>
          <Predmet><Hodnota>Hostinská činnost</Hodnota></Predmet>
        </Zivnost>
      </SeznamZivnosti>
    </PodnikatelDetail>
  </verweb>
</listiny>""".encode(encoding)


@pytest.fixture
def restore_package_logger():
    """Undo setup_logging() so later tests still see records via caplog."""
    pkg_logger = logging.getLogger("czsnoop")
    saved = (list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate)
    yield pkg_logger
    pkg_logger.handlers, pkg_logger.level, pkg_logger.propagate = saved
