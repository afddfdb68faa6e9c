import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from complaint_desk.constants.error_codes import ErrorCode
from complaint_desk.core.exceptions import StoreError, ConflictError
from complaint_desk.models.enums.complaint_status import ComplaintStatus
from complaint_desk.services.support import complaint_store
from complaint_desk.services.support.complaint_store import (
    create_complaint,
    delete_complaint,
    generate_complaint_number,
    list_all_complaints,
    update_complaint,
)


def test_complaint_number_uses_trailing_clock_digits():
    assert generate_complaint_number(1704880800123456) == "COMP00123456"


def test_complaint_numbers_differ_over_time():
    assert generate_complaint_number(1_000_001) != generate_complaint_number(1_000_002)


async def test_create_assigns_identity_and_defaults(db, make_draft):
    created = await create_complaint(
        db,
        make_draft(customer_name="Alice", machine_type="WM", fault="Leaks", date="2024-01-10"),
    )

    assert created.id is not None
    assert created.complaint_number.startswith("COMP")
    assert created.status == ComplaintStatus.OPEN
    assert created.completion_date is None
    assert created.cost == Decimal("0")
    assert created.created_at is not None
    assert created.updated_at is not None

    listed = await list_all_complaints(db)
    assert [c.id for c in listed] == [created.id]
    record = listed[0]
    assert record.customer_name == "Alice"
    assert record.machine_type == "WM"
    assert record.fault == "Leaks"
    assert record.date == date(2024, 1, 10)


async def test_status_defaults_to_open_when_not_given(db, make_draft):
    draft = make_draft()
    draft_values = draft.model_dump()
    draft_values.pop("status")
    created = await create_complaint(db, type(draft)(**draft_values))

    assert created.status == ComplaintStatus.OPEN


async def test_list_is_newest_first(db, make_draft):
    for name in ("First", "Second", "Third"):
        await create_complaint(db, make_draft(customer_name=name))

    listed = await list_all_complaints(db)

    assert [c.customer_name for c in listed] == ["Third", "Second", "First"]


async def test_update_replaces_mutable_fields(db, make_draft):
    created = await create_complaint(db, make_draft())
    original_number = created.complaint_number

    changes = make_draft(
        customer_name="Alice Cooper",
        machine_type="AC",
        fault="Not cooling",
        date="2024-02-01",
        address="12 Main Road",
        work_done="Gas refill",
        cost="150.50",
        technician_name="Ravi",
        status="Closed",
        completion_date="2024-02-03",
    )
    await update_complaint(db, created.id, changes)

    listed = await list_all_complaints(db)
    assert len(listed) == 1
    record = listed[0]
    assert record.id == created.id
    assert record.complaint_number == original_number
    for field, value in changes.model_dump().items():
        assert getattr(record, field) == value, field


async def test_update_unknown_id_raises_not_found(db, make_draft):
    with pytest.raises(StoreError) as exc_info:
        await update_complaint(db, uuid.uuid4(), make_draft())

    assert exc_info.value.status_code == 404
    assert exc_info.value.error_code == ErrorCode.COMPLAINT_NOT_FOUND


async def test_update_with_stale_timestamp_is_a_conflict(db, make_draft):
    created = await create_complaint(db, make_draft())
    stale = datetime(2000, 1, 1, tzinfo=timezone.utc)

    with pytest.raises(ConflictError):
        await update_complaint(db, created.id, make_draft(fault="Noisy"), expected_updated_at=stale)

    listed = await list_all_complaints(db)
    assert listed[0].fault == "Leaks"


async def test_update_with_current_timestamp_succeeds(db, make_draft):
    created = await create_complaint(db, make_draft())

    updated = await update_complaint(
        db,
        created.id,
        make_draft(fault="Noisy"),
        expected_updated_at=created.updated_at,
    )

    assert updated.fault == "Noisy"


async def test_update_without_timestamp_is_last_write_wins(db, make_draft):
    created = await create_complaint(db, make_draft())

    await update_complaint(db, created.id, make_draft(fault="First edit"))
    await update_complaint(db, created.id, make_draft(fault="Second edit"))

    listed = await list_all_complaints(db)
    assert listed[0].fault == "Second edit"


async def test_delete_removes_record(db, make_draft):
    keep = await create_complaint(db, make_draft(customer_name="Keep"))
    gone = await create_complaint(db, make_draft(customer_name="Gone"))

    await delete_complaint(db, gone.id)

    listed = await list_all_complaints(db)
    assert [c.id for c in listed] == [keep.id]


async def test_delete_unknown_id_is_silent(db, make_draft):
    await create_complaint(db, make_draft())

    await delete_complaint(db, uuid.uuid4())

    assert len(await list_all_complaints(db)) == 1


async def test_duplicate_complaint_number_is_reported(db, make_draft, monkeypatch):
    monkeypatch.setattr(complaint_store, "generate_complaint_number", lambda: "COMP00000001")
    await create_complaint(db, make_draft(customer_name="One"))

    with pytest.raises(StoreError) as exc_info:
        await create_complaint(db, make_draft(customer_name="Two"))

    assert exc_info.value.status_code == 409
    assert exc_info.value.error_code == ErrorCode.COMPLAINT_NUMBER_EXISTS
    assert [c.customer_name for c in await list_all_complaints(db)] == ["One"]


async def test_list_failure_raises_store_error(broken_db):
    with pytest.raises(StoreError) as exc_info:
        await list_all_complaints(broken_db)

    assert exc_info.value.status_code == 500
    broken_db.rollback.assert_awaited()


async def test_create_failure_raises_store_error(broken_db, make_draft):
    with pytest.raises(StoreError):
        await create_complaint(broken_db, make_draft())

    broken_db.commit.assert_not_awaited()


async def test_delete_failure_raises_store_error(broken_db):
    with pytest.raises(StoreError):
        await delete_complaint(broken_db, uuid.uuid4())


async def test_update_failure_raises_store_error(broken_db, make_draft):
    with pytest.raises(StoreError) as exc_info:
        await update_complaint(broken_db, uuid.uuid4(), make_draft())

    assert exc_info.value.status_code == 500
    broken_db.rollback.assert_awaited()
    broken_db.commit.assert_not_awaited()
