"""Health check API endpoints"""
from fastapi import APIRouter, Depends

from app.deps.common import get_database
from core.db import Database
from service.health_service import get_health
from service.dto import HealthResponseDTO

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponseDTO)
def health_check(database: Database = Depends(get_database)) -> HealthResponseDTO:
    """
    Basic health check endpoint.

    Returns:
        HealthResponseDTO: Health status with timestamp and database state
    """
    return get_health(database)
