"""Identity store: user upsert and lookups"""
import logging
import time
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.models import User
from service.dto import IdentityUpsertDTO, UserDTO, UserPublicDTO
from service.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)

USERNAME_PREFIX = "user_"
USERNAME_KEY_CHARS = 8


def default_username(identity_key: str) -> str:
    """Deterministic handle for users who never picked one"""
    return f"{USERNAME_PREFIX}{identity_key[:USERNAME_KEY_CHARS]}"


def to_public(user: User) -> UserPublicDTO:
    return UserPublicDTO.model_validate(user)


def resolve_public(session: Session, user_id: str) -> Optional[UserPublicDTO]:
    """Public projection for ``user_id``, or None when the user is absent"""
    user = session.get(User, user_id)
    return to_public(user) if user is not None else None


def require_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("user", user_id)
    return user


def _upsert_statement(session: Session):
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(User)
    if dialect == "sqlite":
        return sqlite.insert(User)
    raise StoreError(f"Upsert not supported for dialect {dialect}")


def upsert_identity(dto: IdentityUpsertDTO, *, session: Session, trace_id: str) -> UserDTO:
    """
    Create the user on first verification, refresh profile fields afterwards.

    Counters and username are never touched on the update path, so repeated
    calls with the same input only move ``updated_at``.

    Args:
        dto: Identity as verified by the external provider
        trace_id: Request tracing ID
        session: Database session

    Returns:
        UserDTO: Stored user record

    Raises:
        StoreError: Storage failure, including email/username collisions
    """
    start_time = time.time()
    display_name = dto.display_name or dto.email.split("@")[0]

    stmt = _upsert_statement(session).values(
        id=dto.uid,
        email=dto.email,
        username=dto.username or default_username(dto.uid),
        first_name=display_name,
        profile_image_url=dto.avatar_url,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["id"],
        set_={
            "email": stmt.excluded.email,
            "first_name": stmt.excluded.first_name,
            "profile_image_url": stmt.excluded.profile_image_url,
            "updated_at": func.now(),
        },
    )

    try:
        session.execute(stmt)
        session.commit()
        user = session.get(User, dto.uid, populate_existing=True)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Identity upsert failed", extra={
            "trace_id": trace_id,
            "user_id": dto.uid,
            "error": str(e),
        })
        raise StoreError("Failed to store user") from e

    logger.info("Identity upserted", extra={
        "trace_id": trace_id,
        "user_id": dto.uid,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return UserDTO.model_validate(user)


def get_identity(user_id: str, *, session: Session, trace_id: str) -> UserDTO:
    try:
        user = session.get(User, user_id)
    except SQLAlchemyError as e:
        logger.error("User lookup failed", extra={"trace_id": trace_id, "user_id": user_id})
        raise StoreError("Failed to fetch user") from e

    if user is None:
        raise NotFoundError("user", user_id)
    return UserDTO.model_validate(user)


def get_user_by_username(username: str, *, session: Session, trace_id: str) -> UserDTO:
    try:
        user = session.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error("Username lookup failed", extra={"trace_id": trace_id})
        raise StoreError("Failed to fetch user") from e

    if user is None:
        raise NotFoundError("user", username)
    return UserDTO.model_validate(user)
