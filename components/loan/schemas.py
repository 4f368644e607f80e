"""Pydantic schemas for loans and ledger entries."""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

LoanStatus = Literal["pending", "approved", "rejected", "active", "completed"]
PaymentStatus = Literal["paid", "unpaid", "missed", "partial"]


class LoanCreate(BaseModel):
    """Schema for an admin-created loan."""
    user_id: int
    amount: float = Field(..., gt=0)
    interest_rate: Optional[float] = Field(None, ge=0)
    duration_months: Optional[int] = Field(None, ge=1)
    purpose: Optional[str] = None


class Loan(BaseModel):
    """Schema for loan response."""
    id: int
    user_id: int
    principal_amount: float
    amount: float
    interest_rate: float
    duration_months: int
    purpose: Optional[str] = None
    status: LoanStatus
    requested_at: datetime
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LoanOverview(Loan):
    """Loan row for the admin loan list."""
    member_name: str
    member_code: Optional[str] = None
    member_email: str
    monthly_interest: float
    interest_paid_this_month: bool


class PaymentRequest(BaseModel):
    """Payment intent sent by the admin.

    Range checks on ``principal_amount`` happen in the ledger so that they are
    reported with the loan's current balance.
    """
    interest_paid: bool
    principal_amount: Optional[Decimal] = None


class LoanPaymentCreate(BaseModel):
    """Ledger entry proposed by the ledger engine."""
    loan_id: int
    user_id: int
    month_year: str
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal
    payment_date: datetime
    status: PaymentStatus


class LoanUpdate(BaseModel):
    """Loan fields the ledger engine wants written back."""
    amount: Decimal
    updated_at: datetime
    status: Optional[LoanStatus] = None


class LoanPayment(BaseModel):
    """Schema for ledger entry response."""
    id: int
    loan_id: int
    user_id: int
    month_year: str
    principal_paid: float
    interest_paid: float
    remaining_balance: float
    payment_date: datetime
    status: PaymentStatus

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    """Response for a recorded payment."""
    payment: LoanPayment
    loan: Loan


class PaymentHistory(BaseModel):
    """Ledger entries of one loan, newest first."""
    loan_id: int
    interest_paid_this_month: bool
    payments: List[LoanPayment]
