# complaint_desk/services/support/complaint_store.py

import time
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update, delete, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_desk.models.support.complaint_models import Complaint
from complaint_desk.models.base.mixins import utcnow
from complaint_desk.schemas.support.complaint_schemas import ComplaintDraft
from complaint_desk.core.exceptions import StoreError, ConflictError
from complaint_desk.constants.error_codes import ErrorCode
from complaint_desk.utils.logger import get_logger

logger = get_logger(__name__)


def generate_complaint_number(now_us: Optional[int] = None) -> str:
    # Trailing digits of the microsecond clock; distinct at human operation rates
    now_us = now_us if now_us is not None else time.time_ns() // 1000
    return f"COMP{str(now_us)[-8:]}"


async def _rollback(db: AsyncSession) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError:
        logger.exception("Rollback failed")


# =========================
# LIST
# =========================
async def list_all_complaints(db: AsyncSession) -> list[Complaint]:
    try:
        result = await db.execute(
            select(Complaint)
            .order_by(desc(Complaint.created_at))
            .execution_options(populate_existing=True)
        )
        complaints = list(result.scalars().all())
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch complaints")
        await _rollback(db)
        raise StoreError("Failed to fetch complaints") from exc

    logger.debug("Fetched complaints", extra={"count": len(complaints)})
    return complaints


# =========================
# CREATE
# =========================
async def create_complaint(db: AsyncSession, draft: ComplaintDraft) -> Complaint:
    complaint = Complaint(
        **draft.to_row(),
        complaint_number=generate_complaint_number(),
    )
    db.add(complaint)

    try:
        await db.flush()
        await db.commit()
        await db.refresh(complaint)
    except IntegrityError as exc:
        logger.exception("Failed to add complaint")
        await _rollback(db)
        # complaint_number is the only unique column a caller can collide on
        raise StoreError(
            "Complaint number already exists. Please retry.",
            status_code=409,
            error_code=ErrorCode.COMPLAINT_NUMBER_EXISTS,
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to add complaint")
        await _rollback(db)
        raise StoreError("Failed to add complaint") from exc

    if complaint.id is None:
        raise StoreError("No data returned from insert operation")

    logger.info(
        "Complaint created",
        extra={"complaint_id": str(complaint.id), "complaint_number": complaint.complaint_number},
    )
    return complaint


# =========================
# UPDATE (FULL REPLACE)
# =========================
async def update_complaint(
    db: AsyncSession,
    complaint_id: uuid.UUID,
    draft: ComplaintDraft,
    expected_updated_at: Optional[datetime] = None,
) -> Complaint:
    """
    Replace every mutable field of a complaint.

    Last write wins unless ``expected_updated_at`` is given, in which case the
    row is only written if it has not changed since the caller read it.
    """
    conditions = [Complaint.id == complaint_id]
    if expected_updated_at is not None:
        conditions.append(Complaint.updated_at == expected_updated_at)

    stmt = (
        update(Complaint)
        .where(*conditions)
        .values(**draft.to_row(), updated_at=utcnow())
        .returning(Complaint)
        .execution_options(synchronize_session="fetch")
    )

    try:
        result = await db.execute(stmt)
        complaint = result.scalar_one_or_none()

        if complaint is None and expected_updated_at is not None:
            exists = await db.scalar(
                select(Complaint.id).where(Complaint.id == complaint_id)
            )
        else:
            exists = None

        await db.commit()
    except SQLAlchemyError as exc:
        logger.exception("Failed to update complaint", extra={"complaint_id": str(complaint_id)})
        await _rollback(db)
        raise StoreError("Failed to update complaint") from exc

    if complaint is None:
        if exists:
            logger.warning("Complaint update conflict", extra={"complaint_id": str(complaint_id)})
            raise ConflictError(details={"complaint_id": str(complaint_id)})
        raise StoreError(
            "Complaint not found",
            status_code=404,
            error_code=ErrorCode.COMPLAINT_NOT_FOUND,
        )

    logger.info("Complaint updated", extra={"complaint_id": str(complaint_id)})
    return complaint


# =========================
# DELETE (HARD)
# =========================
async def delete_complaint(db: AsyncSession, complaint_id: uuid.UUID) -> None:
    try:
        await db.execute(delete(Complaint).where(Complaint.id == complaint_id))
        await db.commit()
    except SQLAlchemyError as exc:
        logger.exception("Failed to delete complaint", extra={"complaint_id": str(complaint_id)})
        await _rollback(db)
        raise StoreError("Failed to delete complaint") from exc

    logger.info("Complaint deleted", extra={"complaint_id": str(complaint_id)})
