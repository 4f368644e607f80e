"""Schemas shared across routers."""

from pydantic import BaseModel


class HealthCheck(BaseModel):
    """Liveness report of the admin service."""
    service_name: str
    status: str
    version: str
    cash_bill_title: str
