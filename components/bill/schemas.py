"""Pydantic schemas for cash bill statements."""

from typing import Any, Optional
from pydantic import BaseModel


class MemberCashBillSnapshot(BaseModel):
    """
    Point-in-time financial read of one member, used only for statements.

    Every field is optional and untyped. Rows come from a projection this
    service does not own; the layout coerces bad values to zero.
    """
    user_id: Any = None
    full_name: Any = None
    name: Any = None
    voucher_no: Any = None
    voucher: Any = None
    member_id: Any = None

    subscription_income: Any = None
    loan_balance: Any = None  # Principal balance before interest
    monthly_interest: Any = None
    updated_principal_balance: Any = None
    monthly_installment: Any = None
    installment_interest: Any = None
    interest_months: Any = None
    total_loan_balance: Any = None
    fine: Any = None
    total_amount_to_pay: Any = None

    class Config:
        from_attributes = True
        extra = "ignore"


class CashBillRequest(BaseModel):
    """Body of a cash bill export request; no member means all members."""
    selected_user: Optional[int] = None
