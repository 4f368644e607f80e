"""Per-member loan report (CSV)."""

import csv
import io
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence

from components.loan.ledger import to_money


def _day(value: Any) -> str:
    return value.strftime("%b %d, %Y") if value else "N/A"


def report_filename(full_name: str, on: datetime) -> str:
    base = re.sub(r"[^A-Za-z0-9_\-.]", "_", re.sub(r"\s+", "_", full_name.strip()))
    return f"{base}_Loan_Report_{on.strftime('%Y-%m-%d')}.csv"


def build_member_report(
    member: Any,
    loans: Sequence[Any],
    payments: Sequence[Any],
    now: datetime,
    currency: str = "₹",
) -> str:
    """
    Render a member's loan report.

    ``loans`` are expected newest first and ``payments`` ordered by payment
    date descending, the way the repository returns them.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    def money(value: Any) -> str:
        return f"{currency}{to_money(value)}"

    writer.writerow([f"LOAN REPORT FOR {member.full_name}"])
    writer.writerow([])
    writer.writerow(["User Information"])
    writer.writerow(["Name", "Email", "Phone", "Member Since", "Monthly Contribution"])
    writer.writerow([
        member.full_name,
        member.email,
        member.phone or "N/A",
        _day(member.created_at),
        money(member.monthly_contribution or 0),
    ])

    writer.writerow([])
    writer.writerow(["Loans History"])
    writer.writerow(["Loan #", "Loan Date", "Amount", "Interest Rate", "Current Balance", "Status", "Closed Date"])
    if loans:
        for index, loan in enumerate(loans, start=1):
            closed = _day(loan.updated_at) if loan.status == "completed" else "N/A"
            writer.writerow([
                index,
                _day(loan.requested_at),
                money(loan.principal_amount),
                f"{loan.interest_rate}%",
                money(loan.amount),
                loan.status,
                closed,
            ])
    else:
        writer.writerow(["No loans found"])

    writer.writerow([])
    writer.writerow(["Payment History"])
    writer.writerow(["Payment #", "Date", "Interest Paid", "Principal Paid", "Interest Status", "Remaining Balance"])
    if payments:
        total_interest = Decimal("0")
        total_principal = Decimal("0")
        for index, payment in enumerate(payments, start=1):
            interest = to_money(payment.interest_paid)
            principal = to_money(payment.principal_paid)
            writer.writerow([
                index,
                _day(payment.payment_date),
                money(interest),
                money(principal),
                "PAID" if interest > 0 else "UNPAID",
                money(payment.remaining_balance),
            ])
            total_interest += interest
            total_principal += principal
        writer.writerow([])
        writer.writerow(["", "Total", money(total_interest), money(total_principal), "", ""])
    else:
        writer.writerow(["No payments found"])

    active_loan = next((loan for loan in loans if loan.status == "active"), None)
    writer.writerow([])
    writer.writerow(["Summary"])
    writer.writerow(["Metric", "Value"])
    writer.writerow(["Total Loans Taken", len(loans)])
    writer.writerow(["Active Loans", sum(1 for loan in loans if loan.status == "active")])
    writer.writerow(["Completed Loans", sum(1 for loan in loans if loan.status == "completed")])
    if active_loan is not None:
        writer.writerow(["Current Outstanding Balance", money(active_loan.amount)])
    writer.writerow(["Report Generated", now.strftime("%b %d, %Y at %I:%M %p")])

    return buffer.getvalue()
