"""
Plain-text rendering of search results.
"""

from czsnoop.domain.models import AggregatedPerson, DetailRecord


def _full_name(title_before: str, name: str, title_after: str) -> str:
    parts = [title_before, name]
    text = " ".join(p for p in parts if p)
    if title_after:
        text = f"{text}, {title_after}"
    return text


def format_person(person: AggregatedPerson) -> str:
    """Render one aggregated person as an indented text block."""
    lines = [_full_name(person.title_before_name, person.full_name, person.title_after_name)]
    if person.birth_date:
        lines.append(f"  Born: {person.birth_date.isoformat()}")
    if person.citizenship:
        lines.append(f"  Citizenship: {person.citizenship}")
    if person.address:
        lines.append(f"  Address: {person.address}")
    if person.subjects:
        lines.append("  Subjects:")
        lines.extend(
            f"    {subject.name} (ICO {subject.ico or '-'}), {subject.address}"
            for subject in person.subjects
        )
    if person.same_address_subjects:
        lines.append("  Same address:")
        lines.extend(f"    {name}" for name in person.same_address_subjects)
    return "\n".join(lines)


def format_detail(detail: DetailRecord) -> str:
    """Render one detail record as an indented text block."""
    lines = [
        _full_name(detail.title_before_name, detail.full_name, detail.title_after_name),
        f"  ICO: {detail.ico}",
        f"  Born: {detail.birth_date.isoformat()}",
    ]
    if detail.citizenship:
        lines.append(f"  Citizenship: {detail.citizenship}")
    if detail.address:
        lines.append(f"  Address: {detail.address}")
    if detail.trades:
        lines.append("  Trades:")
        for trade in detail.trades:
            line = f"    {trade.trade_type} (since {trade.date_of_origin.isoformat()})"
            if trade.license_validity:
                line += f", {trade.license_validity}"
            lines.append(line)
    return "\n".join(lines)
