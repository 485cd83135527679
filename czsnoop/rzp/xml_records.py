"""
Parsing of RZP XML documents.

A subject's full detail is spread over two documents:
1. The directory record (``<Vypis>``), which links to the statement
2. The statement (``<listiny>``), which holds the person details and trades

Statements are often served as windows-1250, so documents are parsed from
raw bytes and the XML declaration decides the charset.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from bs4 import BeautifulSoup, Tag

from czsnoop.constants import RZP_XML_DATE_FORMAT
from czsnoop.domain.models import DetailRecord, Trade
from czsnoop.errors import DataIntegrityError, RemoteFailureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryRecord:
    """The parts of ``<Vypis>`` needed to reach the statement."""

    ico: str
    statement_path: str


def _child(node: Tag | None, *path: str) -> Tag | None:
    """Walk down direct-or-nested children by tag name, None if any step is missing."""
    for name in path:
        if node is None:
            return None
        node = node.find(name)
    return node


def _text(node: Tag | None, *path: str) -> str:
    found = _child(node, *path)
    if found is None:
        return ""
    return found.get_text(strip=True)


def parse_rzp_date(value: str, field_name: str) -> date:
    """
    Parse a DD.MM.YYYY date from an RZP document.

    Raises:
        DataIntegrityError: If the value is missing or malformed
    """
    try:
        return datetime.strptime(value.strip(), RZP_XML_DATE_FORMAT).date()
    except ValueError as e:
        raise DataIntegrityError(f"unable to parse {field_name} '{value}': {e}") from e


def _load(content: bytes, root_name: str) -> Tag:
    soup = BeautifulSoup(content, "xml")
    root = soup.find(root_name)
    if root is None:
        raise RemoteFailureError(f"unable to unmarshal response: missing <{root_name}> element")
    return root


def parse_directory_record(content: bytes) -> DirectoryRecord:
    """
    Parse the directory record of a subject.

    Args:
        content: Raw XML bytes of the ``<Vypis>`` document

    Returns:
        DirectoryRecord with the statement path

    Raises:
        RemoteFailureError: If the document is not a directory record or
            has no statement link
    """
    subject = _child(_load(content, "Vypis"), "Subjekt")
    statement_path = _text(subject, "Odkazy", "VypisXML")
    if not statement_path:
        raise RemoteFailureError("directory record has no statement link")

    return DirectoryRecord(
        ico=_text(subject, "Ico", "Hodnota"),
        statement_path=statement_path,
    )


def _parse_trades(detail: Tag | None) -> list[Trade]:
    trades: list[Trade] = []
    trade_list = _child(detail, "SeznamZivnosti")
    if trade_list is None:
        return trades

    for licence in trade_list.find_all("Zivnost", recursive=False):
        origin = parse_rzp_date(_text(licence, "Vznik"), "trade date of origin")
        validity = _text(licence, "PlatnostOpravneni", "Hodnota")
        fields = _child(licence, "Obor", "Vycet")
        field_names = (
            [f.get_text(strip=True) for f in fields.find_all("Drive")] if fields is not None else []
        )
        # Licences without a list of fields are named by their subject
        if not field_names:
            field_names = [_text(licence, "Predmet", "Hodnota")]
        trades.extend(
            Trade(trade_type=name, date_of_origin=origin, license_validity=validity)
            for name in field_names
            if name
        )
    return trades


def parse_statement(content: bytes) -> DetailRecord:
    """
    Parse a subject statement into a DetailRecord.

    Args:
        content: Raw XML bytes of the ``<listiny>`` document

    Returns:
        DetailRecord for the entrepreneur

    Raises:
        RemoteFailureError: If the document is not a statement
        DataIntegrityError: If a required date cannot be parsed
    """
    detail = _child(_load(content, "listiny"), "verweb", "PodnikatelDetail")
    if detail is None:
        raise RemoteFailureError("statement has no entrepreneur detail")

    person = _child(detail, "PodnikatelOsoba", "ZucastnenaOsobaDetail")
    birth_date = parse_rzp_date(_text(person, "DatumNarozeni", "Hodnota"), "birth date")

    record = DetailRecord(
        ico=_text(detail, "IdentifikacniCislo", "PlatnostHodnoty", "Hodnota"),
        full_name=_text(person, "JmenoPrijmeni", "Hodnota"),
        first_name=_text(person, "Jmeno", "Hodnota"),
        last_name=_text(person, "Prijmeni", "Hodnota"),
        title_before_name=_text(person, "TitulPredJmenem", "Hodnota"),
        title_after_name=_text(person, "TitulZaJmenem", "Hodnota"),
        birth_date=birth_date,
        citizenship=_text(person, "Obcanstvi", "Hodnota"),
        address=_text(detail, "AdresaPodnikani", "PlatnostAdresy", "ZmenaAdresy", "TextAdresy"),
        trades=_parse_trades(detail),
    )
    logger.debug(f"Parsed statement for {record.full_name} ({record.ico}), {len(record.trades)} trades")
    return record
