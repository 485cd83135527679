"""
Argument parsing for the czsnoop CLI.

Provides the parser for both subcommands and the conversion of age
limits to inclusive birth-date bounds.
"""

import argparse
from datetime import date, datetime, timedelta

from czsnoop.constants import ISO_DATE_FORMAT


def parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from None


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"age must be >= 0, got {number}")
    return number


def is_leap_year(year: int) -> bool:
    if year % 400 == 0:
        return True
    if year % 100 == 0:
        return False
    return year % 4 == 0


def shift_years(day: date, years: int) -> date:
    """Move a date by whole years; 29 February rolls over to 1 March."""
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return date(day.year + years, 3, 1)


def min_age_to_born_before(min_age: int, today: date) -> date:
    """
    Latest birth date of someone at least min_age years old today.

    Someone born on 29 February turns a year older on 1 March in common
    years, so a bound landing on 1 March of a leap year moves back a day.
    """
    result = shift_years(today, -min_age)
    if result.month == 3 and result.day == 1 and is_leap_year(result.year):
        return result - timedelta(days=1)
    return result


def max_age_to_born_after(max_age: int, today: date) -> date:
    """Earliest birth date of someone at most max_age years old today."""
    return shift_years(today, -max_age - 1) + timedelta(days=1)


def add_date_bound_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Add --born-after/--born-before/--min-age/--max-age to a parser.

    --min-age excludes --born-before and --max-age excludes --born-after.
    """
    upper = parser.add_mutually_exclusive_group()
    upper.add_argument(
        "--born-before",
        type=parse_date,
        help="Search for people born on given date or earlier (YYYY-MM-DD)",
    )
    upper.add_argument(
        "--min-age", type=non_negative_int, help="Search for people at least given age"
    )

    lower = parser.add_mutually_exclusive_group()
    lower.add_argument(
        "--born-after",
        type=parse_date,
        help="Search for people born on given date or later (YYYY-MM-DD)",
    )
    lower.add_argument(
        "--max-age", type=non_negative_int, help="Search for people at most given age"
    )


def resolve_date_bounds(args: argparse.Namespace, today: date) -> tuple[date | None, date | None]:
    """
    Turn parsed date/age arguments into (born_after, born_before).

    Returns:
        Inclusive bounds, None where unset
    """
    born_after = args.born_after
    born_before = args.born_before
    if args.min_age is not None:
        born_before = min_age_to_born_before(args.min_age, today)
    if args.max_age is not None:
        born_after = max_age_to_born_after(args.max_age, today)
    return born_after, born_before


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level ``czsnoop`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="czsnoop",
        description=(
            "Search OSINT data specific for the Czech Republic. "
            "Uses the Trade Licensing Register at https://www.rzp.cz"
        ),
    )
    parser.add_argument("--debug", action="store_true", help="Enable verbose mode")

    subparsers = parser.add_subparsers(dest="command", required=True)

    person = subparsers.add_parser("person", help="Searches for person using all providers")
    person.add_argument("name", help="Person name, e.g. 'Jan Novak'")
    add_date_bound_arguments(person)

    search = subparsers.add_parser("search", help="Searches entrepreneurs by name or ICO")
    discriminant = search.add_mutually_exclusive_group(required=True)
    discriminant.add_argument("--name", help="Search input should be treated as name")
    discriminant.add_argument("--ico", help="Search by 8-digit identification number")
    search.add_argument(
        "--progress", action="store_true", help="Show a progress bar while fetching details"
    )
    add_date_bound_arguments(search)

    return parser
