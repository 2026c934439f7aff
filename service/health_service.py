"""Health service for basic health checks"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from core.db import Database
from service.dto import HealthResponseDTO

logger = logging.getLogger(__name__)

SERVICE_VERSION = "0.1.0"


def get_health(database: Database) -> HealthResponseDTO:
    """
    Report liveness plus a database round trip.

    Returns:
        HealthResponseDTO: ``ok`` is False when the database ping fails
    """
    try:
        database.ping()
        db_status = "ok"
    except (SQLAlchemyError, RuntimeError) as e:
        logger.error("Database ping failed", extra={"error": str(e)})
        db_status = "unavailable"

    return HealthResponseDTO(
        ok=db_status == "ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=SERVICE_VERSION,
        database=db_status,
    )
