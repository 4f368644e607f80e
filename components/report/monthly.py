"""Monthly payment report built from ledger entries."""

import re
from typing import Any, Sequence, Tuple

import pandas as pd

from components.core.exceptions import ValidationError

MONTH_YEAR = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

REPORT_COLUMNS = [
    "member",
    "member_code",
    "payments",
    "principal_paid",
    "interest_paid",
    "last_remaining_balance",
]


def validate_month_year(month_year: str) -> str:
    if not MONTH_YEAR.match(month_year or ""):
        raise ValidationError(f"Invalid month_year: {month_year!r}. Expected YYYY-MM")
    return month_year


def build_monthly_report(rows: Sequence[Tuple[Any, Any]], month_year: str) -> pd.DataFrame:
    """
    Summarize one period's ledger entries per member.

    ``rows`` are ``(payment, member)`` pairs ordered oldest first, so the last
    remaining balance of a member is the one after their latest payment. A
    final ``TOTAL`` row sums the money columns.
    """
    validate_month_year(month_year)

    records = [
        {
            "user_id": member.id,
            "member": member.full_name,
            "member_code": member.member_id or "",
            "loan_id": payment.loan_id,
            "principal_paid": float(payment.principal_paid),
            "interest_paid": float(payment.interest_paid),
            "remaining_balance": float(payment.remaining_balance),
        }
        for payment, member in rows
        if payment.month_year == month_year
    ]
    if not records:
        return pd.DataFrame(columns=REPORT_COLUMNS)

    frame = pd.DataFrame.from_records(records)
    summary = (
        frame.groupby(["user_id", "member", "member_code"], sort=False)
        .agg(
            payments=("loan_id", "count"),
            principal_paid=("principal_paid", "sum"),
            interest_paid=("interest_paid", "sum"),
            last_remaining_balance=("remaining_balance", "last"),
        )
        .reset_index()
        .sort_values("member", kind="stable")
    )

    total = pd.DataFrame([{
        "member": "TOTAL",
        "member_code": "",
        "payments": int(summary["payments"].sum()),
        "principal_paid": summary["principal_paid"].sum(),
        "interest_paid": summary["interest_paid"].sum(),
        "last_remaining_balance": summary["last_remaining_balance"].sum(),
    }])

    report = pd.concat([summary[REPORT_COLUMNS], total], ignore_index=True)
    return report.round({"principal_paid": 2, "interest_paid": 2, "last_remaining_balance": 2})


def monthly_report_csv(report: pd.DataFrame) -> str:
    return report.to_csv(index=False)
