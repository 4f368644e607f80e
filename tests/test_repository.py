"""Tests for the async repositories against a SQLite database."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from components.bill.models import MemberCashBill
from components.bill.repository import CashBillRepository
from components.core.exceptions import ConflictError, NotFoundError, ValidationError
from components.loan.repository import LoanRepository
from components.loan.schemas import LoanCreate
from components.member.repository import MemberRepository
from components.member.schemas import MemberCreate
from components.payment.models import LoanPayment

MARCH = datetime(2025, 3, 15, 10, 30)


async def seed_loan(session, amount=10000, email="asha@example.com", code="V-101", rate=1.5):
    member = await MemberRepository(session).create(
        MemberCreate(full_name="Asha Menon", email=email, member_id=code)
    )
    loan = await LoanRepository(session).create_loan(
        LoanCreate(user_id=member.id, amount=amount, interest_rate=rate), now=datetime(2025, 1, 1)
    )
    return member, loan


class TestCreateLoan:
    def test_defaults_and_balance(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                member = await MemberRepository(session).create(
                    MemberCreate(full_name="Ravi", email="ravi@example.com")
                )
                loan = await LoanRepository(session).create_loan(
                    LoanCreate(user_id=member.id, amount=5000), now=MARCH
                )
                return loan

        loan = run_db(scenario)
        assert loan.status == "active"
        assert loan.amount == Decimal("5000.00")
        assert loan.principal_amount == Decimal("5000.00")
        assert float(loan.interest_rate) == 15.0
        assert loan.duration_months == 12
        assert loan.version == 1

    def test_unknown_member(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                await LoanRepository(session).create_loan(LoanCreate(user_id=99, amount=10), now=MARCH)

        with pytest.raises(NotFoundError):
            run_db(scenario)


class TestRecordPayment:
    def test_persists_entry_and_balance(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                _, loan = await seed_loan(session)
                payment, updated = await LoanRepository(session).record_payment(
                    loan.id, True, Decimal("2000"), MARCH
                )
            async with maker() as session:
                repo = LoanRepository(session)
                return payment, updated, await repo.get_loan(loan.id), await repo.list_payments(loan.id)

        payment, updated, stored, history = run_db(scenario)
        assert payment.interest_paid == Decimal("150.00")
        assert payment.month_year == "2025-03"
        assert payment.status == "paid"
        assert updated.amount == Decimal("8000.00")
        assert stored.amount == Decimal("8000.00")
        assert stored.version == 2
        assert [p.id for p in history] == [payment.id]

    def test_payoff_completes_loan_and_blocks_further_payments(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                _, loan = await seed_loan(session, amount=1000)
                repo = LoanRepository(session)
                _, updated = await repo.record_payment(loan.id, False, Decimal("1000"), MARCH)
                assert updated.status == "completed"
                assert updated.amount == 0
                await repo.record_payment(loan.id, True, None, MARCH)

        with pytest.raises(ValidationError, match="completed"):
            run_db(scenario)

    def test_rejected_payment_writes_nothing(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                _, loan = await seed_loan(session, amount=1000)
                with pytest.raises(ValidationError):
                    await LoanRepository(session).record_payment(loan.id, True, Decimal("1500"), MARCH)
            async with maker() as session:
                count = await session.scalar(select(func.count(LoanPayment.id)))
                stored = await LoanRepository(session).get_loan(loan.id)
                return count, stored

        count, stored = run_db(scenario)
        assert count == 0
        assert stored.amount == Decimal("1000.00")
        assert stored.version == 1

    def test_unknown_loan(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                await LoanRepository(session).record_payment(404, True, None, MARCH)

        with pytest.raises(NotFoundError):
            run_db(scenario)

    def test_stale_writer_gets_conflict(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                _, loan = await seed_loan(session)

            async with maker() as stale, maker() as fresh:
                # holding the reference keeps the version-1 loan in the identity map
                stale_loan = await LoanRepository(stale).get_loan(loan.id)
                await LoanRepository(fresh).record_payment(loan.id, True, Decimal("100"), MARCH)
                assert stale_loan.version == 1
                with pytest.raises(ConflictError):
                    await LoanRepository(stale).record_payment(loan.id, True, Decimal("100"), MARCH)

            async with maker() as session:
                count = await session.scalar(select(func.count(LoanPayment.id)))
                stored = await LoanRepository(session).get_loan(loan.id)
                return count, stored

        count, stored = run_db(scenario)
        assert count == 1
        assert stored.amount == Decimal("9900.00")
        assert stored.version == 2


class TestQueries:
    def test_interest_status_and_month_listing(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                _, first = await seed_loan(session)
                _, second = await seed_loan(session, email="b@example.com", code="V-102")
                repo = LoanRepository(session)
                await repo.record_payment(first.id, True, None, datetime(2025, 3, 2))
                await repo.record_payment(second.id, False, Decimal("10"), datetime(2025, 3, 3))
                await repo.record_payment(second.id, True, None, datetime(2025, 2, 3))
                status = await repo.get_interest_status([first.id, second.id, 999], MARCH)
                march = await repo.list_payments_for_month("2025-03")
                return first.id, second.id, status, march

        first_id, second_id, status, march = run_db(scenario)
        assert status == {first_id: True, second_id: False, 999: False}
        assert [payment.loan_id for payment, _ in march] == [first_id, second_id]
        assert all(member.full_name == "Asha Menon" for _, member in march)

    def test_list_loans_search_and_filters(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                _, first = await seed_loan(session)
                _, second = await seed_loan(session, email="b@example.com", code="V-202")
                repo = LoanRepository(session)
                await repo.record_payment(second.id, False, Decimal("10000"), MARCH)
                by_code = await repo.list_loans(search="v-202")
                active = await repo.list_loans(status="active")
                by_email = await repo.list_loans(search="ASHA@")
                return first.id, second.id, by_code, active, by_email

        first_id, second_id, by_code, active, by_email = run_db(scenario)
        assert [loan.id for loan, _ in by_code] == [second_id]
        assert [loan.id for loan, _ in active] == [first_id]
        assert [loan.id for loan, _ in by_email] == [first_id]


class TestMembers:
    def test_delete_member_with_loans_is_refused(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                member, _ = await seed_loan(session)
                await MemberRepository(session).delete(member.id)

        with pytest.raises(ValidationError):
            run_db(scenario)

    def test_members_ordered_by_name(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                repo = MemberRepository(session)
                for name in ["Zara", "Amit", "Meera"]:
                    await repo.create(MemberCreate(full_name=name, email=f"{name}@example.com"))
                return [m.full_name for m in await repo.get_all()], await repo.exists("Amit@example.com")

        names, exists = run_db(scenario)
        assert names == ["Amit", "Meera", "Zara"]
        assert exists is True


class TestCashBills:
    def test_snapshots_filtered_and_ordered(self, run_db) -> None:
        async def scenario(maker):
            async with maker() as session:
                session.add_all([
                    MemberCashBill(user_id=2, full_name="Jane Roe V-9", fine=Decimal("5")),
                    MemberCashBill(user_id=1, full_name="John Doe V-123", total_amount_to_pay=Decimal("3350")),
                ])
                await session.commit()
                repo = CashBillRepository(session)
                return await repo.get_snapshots(), await repo.get_snapshots(2), await repo.get_snapshots(42)

        everyone, one, nobody = run_db(scenario)
        assert [s.user_id for s in everyone] == [1, 2]
        assert everyone[0].total_amount_to_pay == Decimal("3350.00")
        assert [s.full_name for s in one] == ["Jane Roe V-9"]
        assert nobody == []
