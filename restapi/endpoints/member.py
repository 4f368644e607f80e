"""Member endpoints for the API."""

from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.init_db import get_db
from components.loan.repository import LoanRepository
from components.member import schemas
from components.member.repository import MemberRepository
from components.report.member_report import build_member_report, report_filename
from restapi.dependencies import get_now

router = APIRouter(
    prefix="/members",
    tags=["members"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Member)
async def create_member(
    member: schemas.MemberCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a new member."""
    repo = MemberRepository(db)

    # Check if member with this email already exists
    if await repo.exists(member.email):
        raise HTTPException(
            status_code=400,
            detail="Member with this email already exists"
        )

    return await repo.create(member)


@router.get("/", response_model=List[schemas.Member])
async def read_members(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Number of records to return"),
    db: AsyncSession = Depends(get_db),
):
    """Get list of members ordered by name."""
    repo = MemberRepository(db)
    return await repo.get_all(skip=skip, limit=limit)


@router.get("/{member_id}", response_model=schemas.Member)
async def read_member(
    member_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific member by ID."""
    repo = MemberRepository(db)
    member = await repo.get_by_id(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


@router.put("/{member_id}", response_model=schemas.Member)
async def update_member(
    member_id: int,
    member: schemas.MemberUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a member."""
    repo = MemberRepository(db)

    # Check if new email is already taken by another member
    existing = await repo.get_by_email(member.email)
    if existing and existing.id != member_id:
        raise HTTPException(
            status_code=400,
            detail="Email is already taken by another member"
        )

    updated = await repo.update(member_id, member)
    if not updated:
        raise HTTPException(status_code=404, detail="Member not found")
    return updated


@router.delete("/{member_id}")
async def delete_member(
    member_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a member without loans."""
    repo = MemberRepository(db)
    if not await repo.delete(member_id):
        raise HTTPException(status_code=404, detail="Member not found")
    return {"message": "Member deleted successfully"}


@router.get("/{member_id}/report")
async def download_member_report(
    member_id: int,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Download the member's loan report as CSV.

    Sections: user information, loans history, payment history with totals,
    and a summary of active/completed loans.
    """
    member = await MemberRepository(db).get_by_id(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")

    loan_repo = LoanRepository(db)
    loans = [loan for loan, _ in await loan_repo.list_loans(user_id=member_id)]
    payments = await loan_repo.list_all_payments(user_id=member_id)

    content = build_member_report(
        member, loans, payments, now, currency=get_settings().CURRENCY_SYMBOL
    )
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(member.full_name, now)}"'},
    )
