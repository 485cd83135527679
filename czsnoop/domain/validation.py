"""
Validation and normalization of register values.

This module provides centralized helpers for ICO validation, name
splitting, birth-date filtering and address normalization. All code that
needs one of these should go through here to keep behaviour consistent.
"""

import re
import unicodedata
from datetime import date

from czsnoop.constants import ICO_LENGTH
from czsnoop.domain.models import PersonQuery
from czsnoop.errors import AddressNormalizationError

# Segments carrying only a land-registry number ("č.p. 12", "č.ev. 3")
LAND_REGISTRY_PREFIX = re.compile(r"^(č\.\s*p\.|č\.\s*ev\.)\s*", re.IGNORECASE)
# "Milovická 197/9", "Na Příkopě 12", "Dlouhá 5a"
STREET_NUMBER_PATTERN = re.compile(r"^(?P<street>.*?)\s*(?P<number>\d+[a-zA-Z]?(?:/\d+[a-zA-Z]?)?)$")


def create_ico(ico: str) -> str:
    """
    Validate an ICO (8-digit registry identifier).

    Args:
        ico: Candidate identifier

    Returns:
        The identifier, unchanged

    Raises:
        ValueError: If the value is not exactly 8 digits
    """
    if len(ico) != ICO_LENGTH:
        raise ValueError(f"ICO must be {ICO_LENGTH} characters long")
    if not ico.isdigit():
        raise ValueError("ICO must be a number")
    return ico


def split_person_name(query: str) -> PersonQuery:
    """
    Build a person query by splitting on the last whitespace boundary.

    Everything before the final token becomes the first name and the final
    token becomes the surname. This is a known simplification: multi-word
    surnames end up partly in the first name and a single token is treated
    as a surname only.

    Args:
        query: Free-text name, e.g. "Jan Novák"

    Returns:
        PersonQuery with first_name and surname set
    """
    parts = query.split()
    if not parts:
        return PersonQuery()
    return PersonQuery(first_name=" ".join(parts[:-1]), surname=parts[-1])


def within_birth_bounds(
    birth_date: date | None, born_after: date | None, born_before: date | None
) -> bool:
    """
    Check a birth date against inclusive bounds.

    Unset bounds impose no constraint. A record without a birth date only
    passes when no bound is set.
    """
    if born_after is None and born_before is None:
        return True
    if birth_date is None:
        return False
    if born_after is not None and birth_date < born_after:
        return False
    if born_before is not None and birth_date > born_before:
        return False
    return True


def fold_diacritics(text: str) -> str:
    """Remove diacritics and lower-case ("Hloubětín" -> "hloubetin")."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


def address_to_searchable(address: str) -> str:
    """
    Convert an RZP address to the form accepted by the address search.

    "Milovická 197/9, 198 00, Praha 9 - Hloubětín" -> "milovicka 9"

    The orientation number (after the slash) is preferred over the
    descriptive number. Segments with only a land-registry number use the
    municipality from the last segment in place of a street.

    Raises:
        AddressNormalizationError: If no street/number can be found
    """
    segments = [s.strip() for s in address.split(",") if s.strip()]
    if not segments:
        raise AddressNormalizationError(f"empty address: '{address}'")

    first = segments[0]
    registry_match = LAND_REGISTRY_PREFIX.match(first)
    if registry_match:
        number = first[registry_match.end() :].strip()
        if not number.isdigit() or len(segments) < 2:
            raise AddressNormalizationError(f"unable to parse address '{address}'")
        municipality = segments[-1].split(" - ")[0]
        # "Praha 9" -> "Praha"; district numbers are not part of the name
        municipality = re.sub(r"\s+\d+$", "", municipality)
        return f"{fold_diacritics(municipality)} {number}"

    match = STREET_NUMBER_PATTERN.match(first)
    if not match or not match.group("street"):
        raise AddressNormalizationError(f"unable to parse address '{address}'")

    number = match.group("number")
    if "/" in number:
        number = number.split("/", 1)[1]
    return f"{fold_diacritics(match.group('street'))} {number.lower()}"
