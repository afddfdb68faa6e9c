import datetime
import uuid
from decimal import Decimal
from typing import Optional, List, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from complaint_desk.models.enums.complaint_status import ComplaintStatus, MachineType


MUTABLE_FIELDS = (
    "date",
    "customer_name",
    "address",
    "place",
    "contact_number",
    "machine_type",
    "machine_number",
    "machine_capacity",
    "company",
    "company_complaint_number",
    "fault",
    "work_done",
    "parts_used",
    "resolution",
    "cost",
    "technician_name",
    "completion_date",
    "status",
)

REQUIRED_FIELDS = ("customer_name", "machine_type", "fault", "date", "status")


class ComplaintDraft(BaseModel):
    """Fields a user supplies on create/update. Store-assigned fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    date: datetime.date
    customer_name: str = Field(min_length=1)
    address: Optional[str] = None
    place: Optional[str] = None
    contact_number: Optional[str] = None
    machine_type: MachineType
    machine_number: Optional[str] = None
    machine_capacity: Optional[str] = None
    company: Optional[str] = None
    company_complaint_number: Optional[str] = None
    fault: str = Field(min_length=1)
    work_done: Optional[str] = None
    parts_used: Optional[str] = None
    resolution: Optional[str] = None
    cost: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    technician_name: Optional[str] = None
    completion_date: Optional[datetime.date] = None
    status: ComplaintStatus = ComplaintStatus.OPEN

    @model_validator(mode="after")
    def _completion_date_only_when_closed(self):
        if self.completion_date is not None and self.status != ComplaintStatus.CLOSED:
            raise ValueError("completion_date can only be set on a Closed complaint")
        return self

    def to_row(self) -> dict:
        row = self.model_dump()
        row["machine_type"] = self.machine_type.value
        return row


class ComplaintFormInput(BaseModel):
    """Raw form values as typed by staff. Coercion and validation happen in ComplaintForm."""

    date: Optional[str] = None
    customer_name: Optional[str] = None
    address: Optional[str] = None
    place: Optional[str] = None
    contact_number: Optional[str] = None
    machine_type: Optional[str] = None
    machine_number: Optional[str] = None
    machine_capacity: Optional[str] = None
    company: Optional[str] = None
    company_complaint_number: Optional[str] = None
    fault: Optional[str] = None
    work_done: Optional[str] = None
    parts_used: Optional[str] = None
    resolution: Optional[str] = None
    cost: Optional[Union[float, str]] = None
    technician_name: Optional[str] = None
    completion_date: Optional[str] = None
    status: Optional[str] = None

    # edit mode only
    expected_updated_at: Optional[datetime.datetime] = None

    def form_fields(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"expected_updated_at"})


class ComplaintOut(BaseModel):
    id: uuid.UUID
    complaint_number: str
    date: datetime.date
    customer_name: str
    address: Optional[str] = None
    place: Optional[str] = None
    contact_number: Optional[str] = None
    machine_type: str
    machine_number: Optional[str] = None
    machine_capacity: Optional[str] = None
    company: Optional[str] = None
    company_complaint_number: Optional[str] = None
    fault: str
    work_done: Optional[str] = None
    parts_used: Optional[str] = None
    resolution: Optional[str] = None
    cost: Decimal = Decimal("0")
    technician_name: Optional[str] = None
    completion_date: Optional[datetime.date] = None
    status: ComplaintStatus
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ComplaintListData(BaseModel):
    total: int
    items: List[ComplaintOut]
