"""Pytest configuration and fixtures."""

import asyncio
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from components.core.database import Base
import components.core.init_db  # noqa: F401  registers all models


@pytest.fixture
def now() -> datetime:
    """Fixed wall clock used by ledger and report tests."""
    return datetime(2025, 3, 15, 10, 30)


@pytest.fixture
def today() -> date:
    return date(2025, 3, 15)


@pytest.fixture
def make_loan():
    """Build a loan-like object for the pure ledger functions."""

    def factory(**overrides):
        fields = {
            "id": 7,
            "user_id": 3,
            "amount": Decimal("10000.00"),
            "interest_rate": Decimal("15"),
            "status": "active",
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return factory


@pytest.fixture
def sample_snapshot() -> dict:
    """Snapshot with every line item present."""
    return {
        "user_id": 1,
        "full_name": "John Doe V-123",
        "member_id": None,
        "subscription_income": 1000,
        "loan_balance": 20000,
        "monthly_interest": 300,
        "updated_principal_balance": 18000,
        "monthly_installment": 2000,
        "installment_interest": 300,
        "interest_months": 3,
        "total_loan_balance": 18000,
        "fine": 50,
        "total_amount_to_pay": 3350,
    }


@pytest.fixture
def db_url(tmp_path) -> str:
    """File-backed SQLite so separate sessions get separate connections."""
    return f"sqlite+aiosqlite:///{tmp_path / 'pool.db'}"


@pytest.fixture
def run_db(db_url):
    """Run an async scenario against a fresh database.

    The scenario receives a session factory; everything happens inside one
    event loop.
    """

    def runner(scenario):
        async def main():
            engine = create_async_engine(db_url, poolclass=NullPool)
            try:
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                maker = async_sessionmaker(engine, expire_on_commit=False)
                return await scenario(maker)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return runner
