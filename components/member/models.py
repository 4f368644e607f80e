"""Member model for the database."""

from sqlalchemy import Column, Integer, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class Member(Base):
    """Member of the lending pool (profile row)."""
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(32), nullable=True)
    member_id = Column(String(16), nullable=True)  # Voucher / booklet code, e.g. V-123
    role = Column(String(16), nullable=False, default="user")
    monthly_contribution = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    # Relationship with Loans
    loans = relationship("Loan", back_populates="member", foreign_keys="Loan.user_id")
