# complaint_desk/services/support/complaint_filters.py

from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional, Union

SEARCH_FIELDS = ("customer_name", "machine_number", "contact_number")


def field_value(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def matches_search(record: Any, search_term: str) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    return any(
        needle in as_text(field_value(record, name)).lower()
        for name in SEARCH_FIELDS
    )


def matches_date(record: Any, date_filter: Union[str, date, None]) -> bool:
    wanted = as_text(date_filter)
    if not wanted:
        return True
    return as_text(field_value(record, "date")) == wanted


def matches_status(record: Any, status_filter: Union[str, Enum, None]) -> bool:
    wanted = as_text(status_filter)
    if not wanted:
        return True
    return as_text(field_value(record, "status")) == wanted


def visible_complaints(
    records: Iterable[Any],
    search_term: Optional[str] = "",
    date_filter: Union[str, date, None] = "",
    status_filter: Union[str, Enum, None] = "",
) -> list:
    """
    Records shown for the current search box, date picker and status select.

    All three clauses must hold; an empty clause matches everything. Order of
    ``records`` is preserved.
    """
    return [
        record
        for record in records
        if matches_search(record, search_term or "")
        and matches_date(record, date_filter)
        and matches_status(record, status_filter)
    ]
