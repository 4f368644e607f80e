"""Repository for loan and ledger operations."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.exceptions import ConflictError, NotFoundError, StoreError
from components.core.logging import get_logger
from components.loan import ledger
from components.loan import schemas
from components.loan.models import Loan
from components.member.models import Member
from components.payment.models import LoanPayment

logger = get_logger(__name__)


class LoanRepository:
    """Repository for loan operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_loan(self, loan_id: int) -> Loan:
        """Get loan by ID or raise NotFoundError."""
        try:
            result = await self.session.execute(select(Loan).where(Loan.id == loan_id))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load loan {loan_id}: {e}") from e
        loan = result.scalar_one_or_none()
        if loan is None:
            raise NotFoundError(f"Loan {loan_id} not found")
        return loan

    async def list_payments(self, loan_id: int) -> List[LoanPayment]:
        """Ledger entries of one loan, newest first."""
        try:
            result = await self.session.execute(
                select(LoanPayment)
                .where(LoanPayment.loan_id == loan_id)
                .order_by(LoanPayment.payment_date.desc(), LoanPayment.id.desc())
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load payments for loan {loan_id}: {e}") from e
        return list(result.scalars().all())

    async def list_all_payments(self, user_id: Optional[int] = None) -> List[LoanPayment]:
        """Payment history across loans, optionally for one member."""
        query = select(LoanPayment)
        if user_id is not None:
            query = query.where(LoanPayment.user_id == user_id)
        query = query.order_by(LoanPayment.payment_date.desc(), LoanPayment.id.desc())
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load payment history: {e}") from e
        return list(result.scalars().all())

    async def list_payments_for_month(self, month_year: str) -> List[Tuple[LoanPayment, Member]]:
        """Ledger entries of one period with their members, oldest first."""
        try:
            result = await self.session.execute(
                select(LoanPayment, Member)
                .join(Member, LoanPayment.user_id == Member.id)
                .where(LoanPayment.month_year == month_year)
                .order_by(LoanPayment.payment_date, LoanPayment.id)
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load payments for {month_year}: {e}") from e
        return [(payment, member) for payment, member in result.all()]

    async def insert_payment(self, entry: schemas.LoanPaymentCreate) -> LoanPayment:
        """Stage a new ledger entry in the current transaction."""
        payment = LoanPayment(**entry.model_dump(), created_at=entry.payment_date)
        self.session.add(payment)
        await self.session.flush()
        return payment

    async def update_loan(
        self,
        loan_id: int,
        fields: schemas.LoanUpdate,
        expected_version: int,
    ) -> None:
        """Stage a loan update guarded by the version the caller read.

        Raises ConflictError when another writer changed the loan first.
        """
        values = {"amount": fields.amount, "updated_at": fields.updated_at}
        if fields.status is not None:
            values["status"] = fields.status
        result = await self.session.execute(
            update(Loan)
            .where(Loan.id == loan_id, Loan.version == expected_version)
            .values(version=Loan.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError(
                f"Loan {loan_id} was modified by another request; reload and try again"
            )

    async def record_payment(
        self,
        loan_id: int,
        interest_marked_paid: bool,
        principal_amount: Optional[Decimal],
        now: datetime,
    ) -> Tuple[LoanPayment, Loan]:
        """
        Record one payment against a loan.

        The ledger entry and the loan update are committed together; on any
        failure the transaction is rolled back and nothing is written.
        """
        loan = await self.get_loan(loan_id)
        entry, loan_update = ledger.record_payment(
            loan, interest_marked_paid, principal_amount, now=now
        )

        try:
            payment = await self.insert_payment(entry)
            await self.update_loan(loan.id, loan_update, expected_version=loan.version)
            await self.session.commit()
        except ConflictError:
            await self.session.rollback()
            logger.warning("Concurrent update on loan %s, payment not recorded", loan_id)
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to record payment for loan %s: %s", loan_id, e)
            raise StoreError(f"Failed to record payment for loan {loan_id}: {e}") from e

        await self.session.refresh(loan)
        await self.session.refresh(payment)
        logger.info(
            "Recorded payment on loan %s: principal=%s interest=%s remaining=%s status=%s",
            loan.id, entry.principal_paid, entry.interest_paid, entry.remaining_balance, loan.status,
        )
        return payment, loan

    async def create_loan(self, data: schemas.LoanCreate, now: datetime) -> Loan:
        """Create an active loan for an existing member."""
        settings = get_settings()
        try:
            result = await self.session.execute(select(Member.id).where(Member.id == data.user_id))
            if result.scalar_one_or_none() is None:
                raise NotFoundError(f"Member {data.user_id} not found")

            loan = Loan(
                user_id=data.user_id,
                principal_amount=ledger.to_money(data.amount),
                amount=ledger.to_money(data.amount),
                interest_rate=(
                    data.interest_rate if data.interest_rate is not None
                    else settings.DEFAULT_INTEREST_RATE
                ),
                duration_months=data.duration_months or settings.DEFAULT_LOAN_DURATION_MONTHS,
                purpose=data.purpose or None,
                status="active",
                requested_at=now,
                approved_at=now,
                created_at=now,
                updated_at=now,
                version=1,
            )
            self.session.add(loan)
            await self.session.commit()
            await self.session.refresh(loan)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to create loan: {e}") from e

        logger.info("Created loan %s for member %s amount=%s", loan.id, loan.user_id, loan.amount)
        return loan

    async def list_loans(
        self,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Tuple[Loan, Member]]:
        """Loans with their borrowers, newest first."""
        query = select(Loan, Member).join(Member, Loan.user_id == Member.id)

        if status:
            query = query.where(Loan.status == status)
        if user_id is not None:
            query = query.where(Loan.user_id == user_id)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(Member.full_name).like(pattern),
                    func.lower(func.coalesce(Member.member_id, "")).like(pattern),
                    func.lower(Member.email).like(pattern),
                )
            )

        query = query.order_by(Loan.created_at.desc(), Loan.id.desc())
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list loans: {e}") from e
        return [(loan, member) for loan, member in result.all()]

    async def get_interest_status(self, loan_ids: Sequence[int], now: datetime) -> Dict[int, bool]:
        """Interest-paid-this-month flag for each loan, computed from the ledger."""
        status_map = {loan_id: False for loan_id in loan_ids}
        if not loan_ids:
            return status_map

        try:
            result = await self.session.execute(
                select(LoanPayment)
                .where(LoanPayment.loan_id.in_(list(loan_ids)))
                .order_by(LoanPayment.payment_date.desc(), LoanPayment.id.desc())
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load payments: {e}") from e

        by_loan: Dict[int, List[LoanPayment]] = {}
        for payment in result.scalars().all():
            by_loan.setdefault(payment.loan_id, []).append(payment)

        for loan_id, payments in by_loan.items():
            status_map[loan_id] = ledger.is_interest_paid_this_cycle(payments, now)
        return status_map
