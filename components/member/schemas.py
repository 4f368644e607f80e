"""Pydantic schemas for member data validation."""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field


class MemberBase(BaseModel):
    """Base member schema."""
    full_name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=3, max_length=255)
    phone: Optional[str] = None
    member_id: Optional[str] = None
    role: Literal["user", "admin"] = "user"
    monthly_contribution: float = Field(0, ge=0)


class MemberCreate(MemberBase):
    """Schema for member creation."""
    pass


class MemberUpdate(MemberBase):
    """Schema for member update."""
    pass


class Member(MemberBase):
    """Schema for member response."""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
