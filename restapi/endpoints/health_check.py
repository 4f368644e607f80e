"""Liveness endpoint for the admin service."""

from fastapi import APIRouter

from components.core import schemas
from components.core.config import get_settings

SERVICE_NAME = "Lending Pool Admin"
SERVICE_VERSION = "1.0.0"

router = APIRouter(
    prefix="/health_check",
    tags=["services"],
    responses={200: {"description": "Service is healthy"}},
)


@router.get("/", response_model=schemas.HealthCheck)
async def health_check() -> schemas.HealthCheck:
    """Report that the service is up, with the statement title in use."""
    return schemas.HealthCheck(
        service_name=SERVICE_NAME,
        status="healthy",
        version=SERVICE_VERSION,
        cash_bill_title=get_settings().CASH_BILL_TITLE,
    )
