"""Common dependencies for FastAPI dependency injection"""
import uuid
from datetime import datetime, timezone
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from core.db import Database
from core.locks import KeyedLock


def get_database(request: Request) -> Database:
    """Store handle attached to the application at startup"""
    return request.app.state.database


def get_db_session(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields:
        Session: SQLAlchemy database session
    """
    session = database.session()
    try:
        yield session
    finally:
        session.close()


def get_ledger_locks(request: Request) -> KeyedLock:
    """Lock map serializing toggles per (actor, target) inside this process"""
    return request.app.state.ledger_locks


def get_trace_id() -> str:
    """
    Generate unique trace ID for request tracking.

    Returns:
        str: Unique trace ID
    """
    return f"api_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> str:
    """
    Acting user for mutating routes.

    The identity provider's token is verified upstream; this layer only
    requires a bearer token to be present and trusts the X-User-Id header.
    """
    if not authorization or not authorization.startswith("Bearer ") or not x_user_id:
        raise HTTPException(
            status_code=401,
            detail={"error": {"code": "UNAUTHORIZED", "message": "Unauthorized"}},
        )
    return x_user_id
