"""Loan and payment ledger endpoints for the API."""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.loan import ledger, schemas
from components.loan.repository import LoanRepository
from components.report.monthly import build_monthly_report, monthly_report_csv, validate_month_year
from restapi.dependencies import get_now

router = APIRouter(
    prefix="/loans",
    tags=["loans"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Loan)
async def create_loan(
    loan: schemas.LoanCreate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Create an active loan for a member. Interest rate defaults to the pool rate."""
    return await LoanRepository(db).create_loan(loan, now)


@router.get("/", response_model=List[schemas.LoanOverview])
async def read_loans(
    status: Optional[schemas.LoanStatus] = Query(None, description="Filter by loan status"),
    user_id: Optional[int] = Query(None, description="Filter by member"),
    search: Optional[str] = Query(None, description="Match member name, member code or email"),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Get loans with their borrowers, newest first.

    Each loan carries the interest one cycle would charge on its current
    balance and whether interest was paid in the current month.
    """
    repo = LoanRepository(db)
    rows = await repo.list_loans(status=status, user_id=user_id, search=search)
    interest_status = await repo.get_interest_status([loan.id for loan, _ in rows], now)

    return [
        schemas.LoanOverview(
            **schemas.Loan.model_validate(loan).model_dump(),
            member_name=member.full_name,
            member_code=member.member_id,
            member_email=member.email,
            monthly_interest=float(ledger.monthly_interest_due(loan)),
            interest_paid_this_month=interest_status[loan.id],
        )
        for loan, member in rows
    ]


@router.get("/payments", response_model=List[schemas.LoanPayment])
async def read_payment_history(
    user_id: Optional[int] = Query(None, description="Only this member's payments"),
    db: AsyncSession = Depends(get_db),
):
    """Payment history across all loans, newest first."""
    return await LoanRepository(db).list_all_payments(user_id=user_id)


@router.get("/reports/monthly")
async def download_monthly_report(
    month_year: str = Query(..., description="Period in YYYY-MM format"),
    db: AsyncSession = Depends(get_db),
):
    """Per-member totals of principal and interest paid in one period, as CSV."""
    validate_month_year(month_year)
    rows = await LoanRepository(db).list_payments_for_month(month_year)
    report = build_monthly_report(rows, month_year)
    return Response(
        content=monthly_report_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="monthly-report-{month_year}.csv"'},
    )


@router.get("/{loan_id}", response_model=schemas.Loan)
async def read_loan(
    loan_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific loan by ID."""
    return await LoanRepository(db).get_loan(loan_id)


@router.get("/{loan_id}/payments", response_model=schemas.PaymentHistory)
async def read_loan_payments(
    loan_id: int,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Ledger entries of a loan, newest first."""
    repo = LoanRepository(db)
    await repo.get_loan(loan_id)
    payments = await repo.list_payments(loan_id)
    return schemas.PaymentHistory(
        loan_id=loan_id,
        interest_paid_this_month=ledger.is_interest_paid_this_cycle(payments, now),
        payments=[schemas.LoanPayment.model_validate(p) for p in payments],
    )


@router.post("/{loan_id}/payments", response_model=schemas.PaymentResult)
async def record_payment(
    loan_id: int,
    payment: schemas.PaymentRequest,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Record a payment against a loan.

    - interest_paid: whether this cycle's interest was paid; the amount is
      the current balance times the loan's interest rate
    - principal_amount: optional principal paid, between 0 and the balance

    When the balance reaches zero the loan is marked completed.
    """
    entry, loan = await LoanRepository(db).record_payment(
        loan_id, payment.interest_paid, payment.principal_amount, now
    )
    return schemas.PaymentResult(
        payment=schemas.LoanPayment.model_validate(entry),
        loan=schemas.Loan.model_validate(loan),
    )
