# complaint_desk/services/support/complaint_form.py

import uuid
from datetime import date, datetime
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_desk.core.exceptions import FormValidationError
from complaint_desk.models.enums.complaint_status import ComplaintStatus
from complaint_desk.schemas.support.complaint_schemas import (
    ComplaintDraft,
    MUTABLE_FIELDS,
    REQUIRED_FIELDS,
)
from complaint_desk.services.support import complaint_store
from complaint_desk.services.support.complaint_filters import as_text, field_value
from complaint_desk.utils.decimal_utils import to_cost
from complaint_desk.utils.logger import get_logger

logger = get_logger(__name__)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ComplaintForm:
    """
    Draft values for the new/edit complaint form.

    Values are kept as typed (mostly strings) until ``to_draft`` turns them
    into a ``ComplaintDraft``. Nothing is persisted until ``submit``.
    """

    def __init__(
        self,
        values: dict,
        complaint_id: Optional[uuid.UUID] = None,
        loaded_updated_at: Optional[datetime] = None,
    ):
        self.values = {name: None for name in MUTABLE_FIELDS}
        self.complaint_id = complaint_id
        self.loaded_updated_at = loaded_updated_at
        self.update_fields(values)

    @classmethod
    def for_create(cls, today: Optional[date] = None) -> "ComplaintForm":
        today = today or date.today()
        return cls(
            {
                "date": today.isoformat(),
                "customer_name": "",
                "address": "",
                "place": "",
                "contact_number": "",
                "machine_type": "",
                "machine_number": "",
                "machine_capacity": "",
                "company": "",
                "company_complaint_number": "",
                "fault": "",
                "work_done": "",
                "parts_used": "",
                "resolution": "",
                "cost": 0,
                "technician_name": "",
                "completion_date": None,
                "status": ComplaintStatus.OPEN.value,
            }
        )

    @classmethod
    def for_edit(cls, complaint: Any) -> "ComplaintForm":
        values = {}
        for name in MUTABLE_FIELDS:
            value = field_value(complaint, name)
            if name == "cost":
                values[name] = value if value is not None else 0
            elif name in ("date", "status", "completion_date", "machine_type"):
                values[name] = as_text(value) or None
            else:
                values[name] = value if value is not None else ""

        return cls(
            values,
            complaint_id=field_value(complaint, "id"),
            loaded_updated_at=field_value(complaint, "updated_at"),
        )

    @property
    def is_edit(self) -> bool:
        return self.complaint_id is not None

    # -------------------------
    # FIELD INPUT
    # -------------------------
    def set_field(self, name: str, value: Any) -> None:
        if name not in self.values:
            raise KeyError(f"'{name}' is not an editable complaint field")

        if name == "cost":
            cost = to_cost(value)
            if cost == 0 and not _blank(value) and value not in (0, "0"):
                logger.debug("Cost input read as 0", extra={"raw_cost": as_text(value)})
            value = cost
        elif name == "completion_date" and _blank(value):
            value = None

        self.values[name] = value

    def update_fields(self, values: dict) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    # -------------------------
    # VALIDATION
    # -------------------------
    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if _blank(self.values.get(name))]

    def to_draft(self) -> ComplaintDraft:
        missing = self.missing_fields()
        if missing:
            raise FormValidationError(missing)

        try:
            return ComplaintDraft(**self.values)
        except ValidationError as exc:
            # model-level errors have no loc; the only one is the completion_date rule
            fields = sorted(
                {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
                or {"completion_date"}
            )
            raise FormValidationError(
                fields,
                message="Some fields have invalid values",
            ) from exc

    # -------------------------
    # SUBMIT
    # -------------------------
    async def submit(
        self,
        db: AsyncSession,
        expected_updated_at: Optional[datetime] = None,
    ):
        draft = self.to_draft()

        if self.is_edit:
            return await complaint_store.update_complaint(
                db,
                self.complaint_id,
                draft,
                expected_updated_at=expected_updated_at,
            )
        return await complaint_store.create_complaint(db, draft)
