"""Loan model for the database."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class Loan(Base):
    """Loan given to a member. ``amount`` is the outstanding principal balance."""
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    principal_amount = Column(Numeric(12, 2), nullable=False)  # Disbursed amount, never changes
    amount = Column(Numeric(12, 2), nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False)  # Percent, fixed at creation
    duration_months = Column(Integer, nullable=False, default=12)
    purpose = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default="pending")
    requested_at = Column(DateTime, nullable=False)
    approved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    version = Column(Integer, nullable=False, default=1)  # Bumped on every balance write

    # Relationships
    member = relationship("Member", back_populates="loans")
    payments = relationship("LoanPayment", back_populates="loan")
