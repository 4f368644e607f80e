"""Repository for member operations."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import StoreError, ValidationError
from components.loan.models import Loan
from components.member.models import Member
from components.member.schemas import MemberCreate, MemberUpdate


class MemberRepository:
    """Repository for member operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, member: MemberCreate) -> Member:
        """Create a new member."""
        now = datetime.now()
        db_member = Member(**member.model_dump(), created_at=now, updated_at=now)
        self.session.add(db_member)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to create member: {e}") from e
        await self.session.refresh(db_member)
        return db_member

    async def get_by_id(self, member_id: int) -> Optional[Member]:
        """Get member by ID."""
        result = await self.session.execute(
            select(Member).where(Member.id == member_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Member]:
        """Get member by email."""
        result = await self.session.execute(
            select(Member).where(Member.email == email)
        )
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 100) -> List[Member]:
        """Get members ordered by name."""
        result = await self.session.execute(
            select(Member).order_by(Member.full_name, Member.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, member_id: int, member: MemberUpdate) -> Optional[Member]:
        """Update member by ID."""
        db_member = await self.get_by_id(member_id)
        if not db_member:
            return None

        for field, value in member.model_dump().items():
            setattr(db_member, field, value)
        db_member.updated_at = datetime.now()

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to update member {member_id}: {e}") from e
        await self.session.refresh(db_member)
        return db_member

    async def delete(self, member_id: int) -> bool:
        """Delete member by ID. Members with loans on record cannot be deleted."""
        db_member = await self.get_by_id(member_id)
        if not db_member:
            return False

        result = await self.session.execute(
            select(Loan.id).where(Loan.user_id == member_id).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            raise ValidationError("Member has loans on record and cannot be deleted")

        await self.session.delete(db_member)
        await self.session.commit()
        return True

    async def exists(self, email: str) -> bool:
        """Check if member with given email exists."""
        result = await self.session.execute(
            select(Member.id).where(Member.email == email)
        )
        return result.scalar_one_or_none() is not None
