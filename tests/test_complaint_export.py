import csv
import io
from datetime import date
from decimal import Decimal

from complaint_desk.models.enums.complaint_status import ComplaintStatus
from complaint_desk.services.support.complaint_export import (
    EXPORT_COLUMNS,
    describe_range,
    export_filename,
    export_rows,
    filter_by_date_range,
    render_csv,
)


def _complaint(number, day, **fields):
    values = {
        "complaint_number": number,
        "date": day,
        "customer_name": "Alice",
        "machine_type": "WM",
        "fault": "Leaks",
        "cost": Decimal("0.00"),
        "status": ComplaintStatus.OPEN,
        "completion_date": None,
    }
    values.update(fields)
    return values


COMPLAINTS = [
    _complaint("COMP3", date(2024, 1, 20)),
    _complaint("COMP2", date(2024, 1, 15)),
    _complaint("COMP1", date(2024, 1, 10)),
]


def test_columns_are_in_fixed_order():
    assert [header for header, _ in EXPORT_COLUMNS] == [
        "Complaint Number",
        "Date",
        "Customer Name",
        "Address",
        "Place",
        "Contact Number",
        "Company Complaint Number",
        "Machine Number",
        "Machine Type",
        "Machine Capacity",
        "Company",
        "Fault",
        "Work Done",
        "Parts Used",
        "Cost",
        "Technician Name",
        "Completion Date",
        "Status",
    ]


def test_rows_project_every_field_as_text():
    record = _complaint(
        "COMP9",
        date(2024, 2, 1),
        address="12 Main Road",
        cost=Decimal("250.00"),
        status=ComplaintStatus.CLOSED,
        completion_date=date(2024, 2, 3),
    )

    [row] = export_rows([record])

    assert list(row) == [header for header, _ in EXPORT_COLUMNS]
    assert row["Complaint Number"] == "COMP9"
    assert row["Date"] == "2024-02-01"
    assert row["Address"] == "12 Main Road"
    assert row["Place"] == ""
    assert row["Cost"] == "250.00"
    assert row["Completion Date"] == "2024-02-03"
    assert row["Status"] == "Closed"


def test_missing_completion_date_is_blank():
    [row] = export_rows([COMPLAINTS[0]])

    assert row["Completion Date"] == ""


def test_date_range_is_inclusive():
    selected = filter_by_date_range(COMPLAINTS, "2024-01-10", "2024-01-15")

    assert [c["complaint_number"] for c in selected] == ["COMP2", "COMP1"]


def test_open_ended_ranges():
    assert [c["complaint_number"] for c in filter_by_date_range(COMPLAINTS, from_date="2024-01-15")] == ["COMP3", "COMP2"]
    assert [c["complaint_number"] for c in filter_by_date_range(COMPLAINTS, to_date=date(2024, 1, 14))] == ["COMP1"]
    assert filter_by_date_range(COMPLAINTS) == COMPLAINTS


def test_filename_pattern():
    today = date(2024, 3, 5)

    assert export_filename(today=today) == "complaints_start_to_end_2024-03-05.csv"
    assert export_filename("2024-01-01", None, today) == "complaints_2024-01-01_to_end_2024-03-05.csv"
    assert export_filename(None, date(2024, 1, 31), today) == "complaints_start_to_2024-01-31_2024-03-05.csv"
    assert export_filename("", "", today) == "complaints_start_to_end_2024-03-05.csv"


def test_render_csv_writes_header_and_rows():
    text = render_csv(export_rows(COMPLAINTS, "2024-01-15"))

    parsed = list(csv.DictReader(io.StringIO(text)))
    assert [row["Complaint Number"] for row in parsed] == ["COMP3", "COMP2"]
    assert text.splitlines()[0].startswith("Complaint Number,Date,Customer Name")


def test_render_csv_with_no_rows_still_has_header():
    assert render_csv([]).strip().split(",")[-1] == "Status"


def test_describe_range():
    assert describe_range() == "Exporting all data"
    assert describe_range("2024-01-10") == "Exporting data from Jan 10, 2024"
    assert describe_range(None, "2024-02-05") == "Exporting data until Feb 5, 2024"
    assert describe_range("2024-01-10", "2024-02-05") == "Exporting data from Jan 10, 2024 to Feb 5, 2024"
