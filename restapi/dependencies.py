"""Shared request dependencies."""

from datetime import date, datetime


def get_now() -> datetime:
    """Wall clock for ledger and report timestamps; overridden in tests."""
    return datetime.now()


def get_today() -> date:
    return date.today()
