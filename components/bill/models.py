"""Read-only member cash bill projection."""

from sqlalchemy import Column, Integer, String, Numeric

from components.core.database import Base


class MemberCashBill(Base):
    """One row per member, maintained outside this service (view or batch job)."""
    __tablename__ = "member_cash_bill_data"

    user_id = Column(Integer, primary_key=True)
    full_name = Column(String(160), nullable=True)
    voucher_no = Column(String(16), nullable=True)
    voucher = Column(String(16), nullable=True)
    member_id = Column(String(16), nullable=True)
    subscription_income = Column(Numeric(12, 2), nullable=True)
    loan_balance = Column(Numeric(12, 2), nullable=True)
    monthly_interest = Column(Numeric(12, 2), nullable=True)
    updated_principal_balance = Column(Numeric(12, 2), nullable=True)
    monthly_installment = Column(Numeric(12, 2), nullable=True)
    installment_interest = Column(Numeric(12, 2), nullable=True)
    interest_months = Column(Numeric(6, 2), nullable=True)
    total_loan_balance = Column(Numeric(12, 2), nullable=True)
    fine = Column(Numeric(12, 2), nullable=True)
    total_amount_to_pay = Column(Numeric(12, 2), nullable=True)
