# complaint_desk/routers/support/complaint_router.py

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_desk.core.db import get_db
from complaint_desk.core.exceptions import AppException
from complaint_desk.constants.error_codes import ErrorCode
from complaint_desk.models.enums.complaint_status import ComplaintStatus
from complaint_desk.schemas.support.complaint_schemas import (
    ComplaintFormInput,
    ComplaintOut,
    ComplaintListData,
)
from complaint_desk.services.support.complaint_store import (
    list_all_complaints,
    delete_complaint,
)
from complaint_desk.services.support.complaint_filters import visible_complaints
from complaint_desk.services.support.complaint_export import (
    export_rows,
    export_filename,
    render_csv,
)
from complaint_desk.services.support.complaint_form import ComplaintForm
from complaint_desk.utils.response import APIResponse, success_response
from complaint_desk.utils.logger import get_logger

router = APIRouter(prefix="/complaints", tags=["Complaints"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[ComplaintListData])
async def list_complaints_api(
    db: AsyncSession = Depends(get_db),

    search: str = Query(""),
    complaint_date: Optional[date] = Query(None, alias="date"),
    status: Optional[ComplaintStatus] = Query(None),
):
    logger.info(
        "List complaints",
        extra={"search": search, "date_filter": str(complaint_date or ""), "status_filter": status},
    )

    complaints = await list_all_complaints(db)
    items = visible_complaints(complaints, search, complaint_date, status)

    return success_response(
        "Complaints fetched successfully",
        {"total": len(items), "items": items},
    )


@router.get("/export")
async def export_complaints_api(
    db: AsyncSession = Depends(get_db),

    search: str = Query(""),
    complaint_date: Optional[date] = Query(None, alias="date"),
    status: Optional[ComplaintStatus] = Query(None),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
):
    complaints = await list_all_complaints(db)
    items = visible_complaints(complaints, search, complaint_date, status)

    rows = export_rows(items, from_date, to_date)
    filename = export_filename(from_date, to_date)
    logger.info("Export complaints", extra={"rows": len(rows), "export_filename": filename})

    return Response(
        content=render_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/", response_model=APIResponse[ComplaintOut])
async def create_complaint_api(
    payload: ComplaintFormInput,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Create complaint", extra={"customer_name": payload.customer_name})

    form = ComplaintForm.for_create()
    form.update_fields(payload.form_fields())
    complaint = await form.submit(db)

    return success_response("Complaint created successfully", complaint)


@router.put("/{complaint_id}", response_model=APIResponse[ComplaintOut])
async def update_complaint_api(
    complaint_id: uuid.UUID,
    payload: ComplaintFormInput,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Update complaint", extra={"complaint_id": str(complaint_id)})

    form = ComplaintForm({}, complaint_id=complaint_id)
    form.update_fields({"status": ComplaintStatus.OPEN.value, "cost": 0})
    form.update_fields(payload.form_fields())
    complaint = await form.submit(db, expected_updated_at=payload.expected_updated_at)

    return success_response("Complaint updated successfully", complaint)


@router.delete("/{complaint_id}", response_model=APIResponse[None])
async def delete_complaint_api(
    complaint_id: uuid.UUID,
    confirm: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    if not confirm:
        raise AppException(
            400,
            "Deleting a complaint must be confirmed",
            ErrorCode.CONFIRMATION_REQUIRED,
        )

    logger.info("Delete complaint", extra={"complaint_id": str(complaint_id)})
    await delete_complaint(db, complaint_id)
    return success_response("Complaint deleted successfully")
