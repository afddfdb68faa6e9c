# complaint_desk/services/support/complaint_export.py

import csv
import io
from datetime import date
from typing import Any, Iterable, Optional, Union

from complaint_desk.services.support.complaint_filters import as_text, field_value

# (CSV header, complaint attribute)
EXPORT_COLUMNS = (
    ("Complaint Number", "complaint_number"),
    ("Date", "date"),
    ("Customer Name", "customer_name"),
    ("Address", "address"),
    ("Place", "place"),
    ("Contact Number", "contact_number"),
    ("Company Complaint Number", "company_complaint_number"),
    ("Machine Number", "machine_number"),
    ("Machine Type", "machine_type"),
    ("Machine Capacity", "machine_capacity"),
    ("Company", "company"),
    ("Fault", "fault"),
    ("Work Done", "work_done"),
    ("Parts Used", "parts_used"),
    ("Cost", "cost"),
    ("Technician Name", "technician_name"),
    ("Completion Date", "completion_date"),
    ("Status", "status"),
)

DateLike = Union[str, date, None]


def _to_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def filter_by_date_range(records: Iterable[Any], from_date: DateLike = None, to_date: DateLike = None) -> list:
    start = _to_date(from_date)
    end = _to_date(to_date)

    selected = []
    for record in records:
        record_date = _to_date(field_value(record, "date"))
        if start and (record_date is None or record_date < start):
            continue
        if end and (record_date is None or record_date > end):
            continue
        selected.append(record)
    return selected


def export_rows(records: Iterable[Any], from_date: DateLike = None, to_date: DateLike = None) -> list[dict]:
    return [
        {header: as_text(field_value(record, attr)) for header, attr in EXPORT_COLUMNS}
        for record in filter_by_date_range(records, from_date, to_date)
    ]


def export_filename(from_date: DateLike = None, to_date: DateLike = None, today: Optional[date] = None) -> str:
    today = today or date.today()
    start = as_text(_to_date(from_date)) or "start"
    end = as_text(_to_date(to_date)) or "end"
    return f"complaints_{start}_to_{end}_{today.isoformat()}.csv"


def render_csv(rows: list[dict]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=[header for header, _ in EXPORT_COLUMNS],
        lineterminator="\n",
    )
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def _pretty(value: date) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def describe_range(from_date: DateLike = None, to_date: DateLike = None) -> str:
    start = _to_date(from_date)
    end = _to_date(to_date)
    if start and end:
        return f"Exporting data from {_pretty(start)} to {_pretty(end)}"
    if start:
        return f"Exporting data from {_pretty(start)}"
    if end:
        return f"Exporting data until {_pretty(end)}"
    return "Exporting all data"
