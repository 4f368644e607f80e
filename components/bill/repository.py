"""Repository for cash bill snapshot reads."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from components.bill.models import MemberCashBill
from components.bill.schemas import MemberCashBillSnapshot
from components.core.exceptions import StoreError


class CashBillRepository:
    """Read-only access to the member cash bill projection."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_snapshots(self, user_id: Optional[int] = None) -> List[MemberCashBillSnapshot]:
        """Snapshots for one member or for everyone, in member order."""
        query = select(MemberCashBill)
        if user_id is not None:
            query = query.where(MemberCashBill.user_id == user_id)
        query = query.order_by(MemberCashBill.user_id)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch cash bill data: {e}") from e
        return [MemberCashBillSnapshot.model_validate(row) for row in result.scalars().all()]
