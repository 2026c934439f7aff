"""Translate service exceptions into HTTP errors"""
import logging

from fastapi import HTTPException

from service.errors import DomainValidationError, NotFoundError, StoreError

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str, trace_id: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "trace_id": trace_id
            }
        }
    )


def to_http_error(exc: Exception, trace_id: str) -> HTTPException:
    if isinstance(exc, DomainValidationError):
        logger.warning("Domain validation error", extra={
            "trace_id": trace_id,
            "error_type": exc.code,
            "error": exc.message
        })
        message = f"{exc.field}: {exc.message}" if exc.field else exc.message
        return _error(400, exc.code, message, trace_id)

    if isinstance(exc, NotFoundError):
        logger.info("Resource not found", extra={
            "trace_id": trace_id,
            "error": exc.message
        })
        return _error(404, exc.code, exc.message, trace_id)

    if isinstance(exc, StoreError):
        logger.error("Store error", extra={
            "trace_id": trace_id,
            "error_type": exc.code,
            "error": exc.message
        })
        return _error(500, exc.code, exc.message, trace_id)

    logger.error("Unexpected error", extra={
        "trace_id": trace_id,
        "error_type": type(exc).__name__,
        "error": str(exc)
    })
    return _error(500, "INTERNAL_ERROR", "Internal server error", trace_id)
