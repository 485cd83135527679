"""
CLI command entry points for czsnoop.

``main`` is registered as the ``czsnoop`` console script in pyproject.toml.
"""

import logging
import sys
from datetime import date

from czsnoop.cli.args import build_parser, resolve_date_bounds
from czsnoop.cli.logging import setup_logging
from czsnoop.cli.output import format_detail, format_person
from czsnoop.domain.models import PersonSearchInput
from czsnoop.errors import CzsnoopError
from czsnoop.rzp.client import create_client
from czsnoop.search import search_persons, search_subjects

logger = logging.getLogger(__name__)


def run_person(args, born_after: date | None, born_before: date | None) -> list[str]:
    """Run the person search and render its results."""
    client = create_client()
    persons = search_persons(
        client,
        PersonSearchInput(query=args.name, born_after=born_after, born_before=born_before),
    )
    logger.info(f"Found {len(persons)} persons")
    return [format_person(person) for person in persons]


def run_search(args, born_after: date | None, born_before: date | None) -> list[str]:
    """Run the subject search and render its results."""
    client = create_client()
    details = search_subjects(
        client,
        PersonSearchInput(
            query=args.name or "", ico=args.ico, born_after=born_after, born_before=born_before
        ),
        show_progress=args.progress,
    )
    logger.info(f"Found {len(details)} entrepreneurs")
    return [format_detail(detail) for detail in details]


COMMANDS = {
    "person": run_person,
    "search": run_search,
}


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the czsnoop command.

    Returns:
        Process exit status (0 on success, 1 on any search failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.debug)

    born_after, born_before = resolve_date_bounds(args, date.today())
    try:
        blocks = COMMANDS[args.command](args, born_after, born_before)
    except (CzsnoopError, ValueError) as e:
        logger.error(f"Search failed: {e}")
        return 1

    for block in blocks:
        print(block)
        print()
    return 0


def run():
    """Console script wrapper around main()."""
    sys.exit(main())
