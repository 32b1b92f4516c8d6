from __future__ import annotations

from datetime import date

ELLIPSIS = "..."


def truncate_time(value: str | None) -> str:
    """Booking service times may carry seconds ("09:00:00"); display uses HH:MM."""
    if not value:
        return ""
    return value[:5]


def format_meeting_date(value: str | None) -> str:
    """Format an ISO date as "10 March 2025". Unparsable input is returned unchanged."""
    if not value:
        return ""
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return f"{parsed.day:02d} {parsed.strftime('%B')} {parsed.year}"


def format_time_range(start: str | None, end: str | None) -> str:
    return f"{truncate_time(start)} - {truncate_time(end)}"


def page_numbers(current: int, total: int) -> list[int | str]:
    """
    Page strip for the booking list: the first page, a window of two pages either
    side of the current one, and the last page, with "..." over the gaps.
    """
    pages: list[int | str] = []
    if current > 3:
        pages.append(1)
        if current > 4:
            pages.append(ELLIPSIS)

    for page in range(max(1, current - 2), min(total, current + 2) + 1):
        pages.append(page)

    if current < total - 2:
        if current < total - 3:
            pages.append(ELLIPSIS)
        pages.append(total)

    return pages
