"""
In-memory filtering and sorting for the admin application list.

The dashboard loads every application once and narrows it down locally, so
this module is pure and synchronous. Each call recomputes the result from the
full list.
"""

import unicodedata
from enum import Enum
from typing import Iterable, List, Optional, TypeVar

from recruiting.models.application import ApplicationStatus

ALL_STATUSES = "all"

T = TypeVar("T")


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    NAME = "name"


def parse_status_filter(value: Optional[str]) -> Optional[ApplicationStatus]:
    """
    Convert a status filter value into a status, or None for "all".

    Raises:
        ValueError: If value is neither "all" nor a known status
    """
    if value is None or value == ALL_STATUSES:
        return None
    return ApplicationStatus(value)


def matches_search(application, term: str) -> bool:
    """
    Search rule used by the dashboard.

    name, email and message match case-insensitively; phone is a plain
    substring match without case folding.
    """
    if not term:
        return True

    lowered = term.lower()
    return (
        lowered in application.name.lower()
        or lowered in application.email.lower()
        or term in application.phone
        or lowered in (application.message or "").lower()
    )


def name_sort_key(name: str):
    """
    Locale-style collation key: accents and case are ignored first, the raw
    text only breaks ties.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), name.casefold(), name)


def filter_and_sort(
    applications: Iterable[T],
    search: str = "",
    status: Optional[str] = ALL_STATUSES,
    sort_by: str = SortOrder.NEWEST,
) -> List[T]:
    """
    Apply search, status filter and sort order to a list of applications.

    Args:
        applications: Any objects exposing name, email, phone, message,
            status and created_at
        search: Free-text term; empty matches everything
        status: A status value or "all"
        sort_by: "newest", "oldest" or "name"

    Returns:
        New list; the input is left untouched. Equal sort keys keep their
        input order.

    Raises:
        ValueError: For an unknown status filter or sort order
    """
    status_filter = parse_status_filter(status)
    order = SortOrder(sort_by)

    filtered = [
        app for app in applications
        if matches_search(app, search)
        and (status_filter is None or app.status == status_filter)
    ]

    if order == SortOrder.NEWEST:
        filtered.sort(key=lambda app: app.created_at, reverse=True)
    elif order == SortOrder.OLDEST:
        filtered.sort(key=lambda app: app.created_at)
    else:
        filtered.sort(key=lambda app: name_sort_key(app.name))

    return filtered
