"""Script to seed demo data into the database."""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import delete

from components.bill.models import MemberCashBill
from components.core.init_db import db_manager
from components.core.logging import get_logger, setup_logging
from components.loan.models import Loan
from components.loan.repository import LoanRepository
from components.loan.schemas import LoanCreate
from components.member.models import Member
from components.payment.models import LoanPayment

logger = get_logger("scripts.seed_data")

MEMBERS = [
    ("Asha Menon V-101", "asha@example.com", "V-101", Decimal("1000")),
    ("Ravi Kumar", "ravi@example.com", "V-102", Decimal("1000")),
    ("Meera Nair (V103)", "meera@example.com", None, Decimal("1500")),
]


async def seed_data():
    """Seed members, loans, a few months of payments and cash bill rows."""
    await db_manager.create_all()

    async with db_manager.get_db() as db:
        # Clear existing data
        for model in (LoanPayment, Loan, MemberCashBill, Member):
            await db.execute(delete(model))
        await db.commit()

        start = datetime(2024, 1, 5, 10, 0)
        members = []
        for full_name, email, code, contribution in MEMBERS:
            member = Member(
                full_name=full_name,
                email=email,
                member_id=code,
                role="user",
                monthly_contribution=contribution,
                created_at=start,
                updated_at=start,
            )
            db.add(member)
            members.append(member)
        await db.commit()

        repo = LoanRepository(db)
        for member in members:
            loan = await repo.create_loan(
                LoanCreate(user_id=member.id, amount=20000, interest_rate=1.5), start
            )
            # Three months of interest plus some principal
            for month in range(1, 4):
                await repo.record_payment(
                    loan.id, True, Decimal("2000"), start + timedelta(days=30 * month)
                )
            await db.refresh(loan)

            interest = (loan.amount * loan.interest_rate / 100).quantize(Decimal("0.01"))
            db.add(MemberCashBill(
                user_id=member.id,
                full_name=member.full_name,
                member_id=member.member_id,
                subscription_income=member.monthly_contribution,
                loan_balance=loan.amount,
                monthly_interest=interest,
                updated_principal_balance=loan.amount - Decimal("2000"),
                monthly_installment=Decimal("2000"),
                installment_interest=interest,
                interest_months=3,
                total_loan_balance=loan.amount,
                fine=0,
                total_amount_to_pay=member.monthly_contribution + Decimal("2000") + interest,
            ))
        await db.commit()

    logger.info("Seeded %d members", len(MEMBERS))


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed_data())
