"""Loan payment (ledger entry) model for the database."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class LoanPayment(Base):
    """Append-only ledger entry for one payment-recording action."""
    __tablename__ = "loan_payments"

    id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    month_year = Column(String(7), nullable=False)  # YYYY-MM
    principal_paid = Column(Numeric(12, 2), nullable=False, default=0)
    interest_paid = Column(Numeric(12, 2), nullable=False, default=0)
    remaining_balance = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(DateTime, nullable=False)
    status = Column(String(16), nullable=False)
    created_at = Column(DateTime, nullable=False)

    # Relationships
    loan = relationship("Loan", back_populates="payments")
