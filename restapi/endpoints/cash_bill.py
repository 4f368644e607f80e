"""Cash bill statement export endpoints."""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from components.bill import schemas
from components.bill.exporters import (
    CSV_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    export_filename,
    member_scope,
    render_transcript,
    workbook_bytes,
)
from components.bill.layout import layout_document
from components.bill.repository import CashBillRepository
from components.core.config import get_settings
from components.core.init_db import get_db
from components.core.logging import get_logger
from restapi.dependencies import get_today

logger = get_logger(__name__)

router = APIRouter(
    prefix="/cash-bills",
    tags=["cash bills"],
    responses={404: {"description": "No users found"}},
)


async def _load_snapshots(
    db: AsyncSession, payload: Optional[schemas.CashBillRequest]
) -> List[schemas.MemberCashBillSnapshot]:
    selected_user = payload.selected_user if payload else None
    snapshots = await CashBillRepository(db).get_snapshots(selected_user)
    if not snapshots:
        raise HTTPException(status_code=404, detail="No users found")
    logger.info("Fetched cash bill data for %d members", len(snapshots))
    return snapshots


def _scope(snapshots: List[schemas.MemberCashBillSnapshot],
           payload: Optional[schemas.CashBillRequest]) -> Optional[str]:
    if payload is None or payload.selected_user is None:
        return None
    return member_scope(snapshots[0], payload.selected_user)


def _attachment(content, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/excel")
async def download_cash_bills(
    payload: Optional[schemas.CashBillRequest] = None,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Download cash bills as a spreadsheet.

    Bills are placed two per row in member order; pass selected_user to get
    a single member's bill.
    """
    snapshots = await _load_snapshots(db, payload)
    document = layout_document(snapshots, bill_date=today, title=get_settings().CASH_BILL_TITLE)
    filename = export_filename("cash-bill", _scope(snapshots, payload), today, "xlsx")
    logger.info("Generated cash bill workbook %s with %d bands", filename, len(document.bands))
    return _attachment(workbook_bytes(document), XLSX_MEDIA_TYPE, filename)


@router.post("/transcript")
async def download_cash_bill_transcript(
    payload: Optional[schemas.CashBillRequest] = None,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    """Download the same cash bills as a flat CSV transcript, one section per member."""
    snapshots = await _load_snapshots(db, payload)
    content = render_transcript(snapshots, bill_date=today, title=get_settings().CASH_BILL_TITLE)
    filename = export_filename("cash-bill", _scope(snapshots, payload), today, "csv")
    logger.info("Generated cash bill transcript %s", filename)
    return _attachment(content, CSV_MEDIA_TYPE, filename)
