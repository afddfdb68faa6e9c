import uuid

from sqlalchemy import Column, String, Text, Date, Numeric, Uuid, Enum as SAEnum, CheckConstraint, Index
from complaint_desk.core.db import Base
from complaint_desk.models.base.mixins import TimestampMixin
from complaint_desk.models.enums.complaint_status import ComplaintStatus


class Complaint(Base, TimestampMixin):
    __tablename__ = "complaints"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    complaint_number = Column(String(32), nullable=False, unique=True, index=True)

    date = Column(Date, nullable=False, index=True)
    customer_name = Column(String(255), nullable=False, index=True)
    address = Column(Text, nullable=True)
    place = Column(String(255), nullable=True)
    contact_number = Column(String(50), nullable=True)

    machine_type = Column(String(50), nullable=False)
    machine_number = Column(String(100), nullable=True)
    machine_capacity = Column(String(50), nullable=True)
    company = Column(String(255), nullable=True)
    company_complaint_number = Column(String(100), nullable=True)

    fault = Column(Text, nullable=False)
    work_done = Column(Text, nullable=True)
    parts_used = Column(Text, nullable=True)
    resolution = Column(Text, nullable=True)
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    technician_name = Column(String(255), nullable=True)
    completion_date = Column(Date, nullable=True)

    status = Column(
        SAEnum(
            ComplaintStatus,
            name="complaint_status",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ComplaintStatus.OPEN,
        index=True,
    )

    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_complaint_cost_non_negative"),
        Index("ix_complaint_status_date", "status", "date"),
    )

    def __repr__(self):
        return f"<Complaint id={self.id} number={self.complaint_number} status={self.status}>"
