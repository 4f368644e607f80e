"""Loan payment ledger.

Pure functions that compute the next state of a loan from a payment intent.
Nothing here touches the database; the repository persists the proposed
``(LoanPaymentCreate, LoanUpdate)`` pair in one transaction.

Interest is simple and flat: one recording with ``interest_paid`` set charges
``balance * interest_rate / 100`` on the balance *before* any principal in the
same recording is applied.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Sequence, Tuple

from components.core.exceptions import ValidationError
from components.loan.schemas import LoanPaymentCreate, LoanUpdate

CENT = Decimal("0.01")
PAYABLE_STATUSES = ("active", "approved")


def to_money(value: Any) -> Decimal:
    """Convert an ORM/float/str amount to a cent-quantized Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_interest_due(loan: Any) -> Decimal:
    """Interest one cycle would charge on the current balance."""
    balance = to_money(loan.amount)
    rate = Decimal(str(loan.interest_rate))
    return to_money(balance * rate / 100)


def _validate(loan: Any, balance: Decimal, interest_marked_paid: bool,
              principal_amount: Optional[Decimal]) -> Decimal:
    if loan.status == "completed":
        raise ValidationError(f"Loan {loan.id} is completed; no further payments are accepted")
    if loan.status not in PAYABLE_STATUSES:
        raise ValidationError(f"Loan {loan.id} is {loan.status}; payments need an active loan")

    if principal_amount is None:
        principal = Decimal("0")
    elif isinstance(principal_amount, Decimal):
        principal = principal_amount
    else:
        principal = Decimal(str(principal_amount))

    # range checks run on the amount as sent, before any rounding
    if not principal.is_finite():
        raise ValidationError("Principal amount must be a finite number")
    if principal < 0:
        raise ValidationError("Principal amount cannot be negative")
    if principal > balance:
        raise ValidationError(
            f"Principal amount must be between 0 and {balance} (current balance)"
        )
    if principal.quantize(CENT) != principal:
        raise ValidationError(f"Principal amount {principal} has fractions of a cent")
    if not interest_marked_paid and principal == 0:
        raise ValidationError("nothing to record")
    return to_money(principal)


def record_payment(
    loan: Any,
    interest_marked_paid: bool,
    principal_amount: Optional[Decimal] = None,
    *,
    now: datetime,
) -> Tuple[LoanPaymentCreate, LoanUpdate]:
    """Compute the ledger entry and loan update for one payment.

    Raises ``ValidationError`` before producing anything when the intent is
    out of range or empty.
    """
    current_balance = to_money(loan.amount)
    principal = _validate(loan, current_balance, interest_marked_paid, principal_amount)

    interest = monthly_interest_due(loan) if interest_marked_paid else Decimal("0.00")
    remaining = max(Decimal("0.00"), current_balance - principal)

    entry = LoanPaymentCreate(
        loan_id=loan.id,
        user_id=loan.user_id,
        month_year=now.strftime("%Y-%m"),
        principal_paid=principal,
        interest_paid=interest,
        remaining_balance=remaining,
        payment_date=now,
        status="paid",
    )
    update = LoanUpdate(
        amount=remaining,
        updated_at=now,
        status="completed" if remaining == 0 else None,
    )
    return entry, update


def is_interest_paid_this_cycle(payments: Sequence[Any], now: datetime) -> bool:
    """Whether the newest entry is this month's and carried interest.

    ``payments`` must already be ordered by ``payment_date`` descending.
    """
    if not payments:
        return False
    latest = payments[0]
    paid_on = latest.payment_date
    if paid_on is None:
        return False
    same_period = paid_on.year == now.year and paid_on.month == now.month
    return same_period and to_money(latest.interest_paid) > 0
