"""Feed service: offset-paginated public video listing"""
import logging
import time
from typing import Any, Dict, List, Optional

from pydantic_settings import BaseSettings
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.models import Video
from service.content_service import author_projection
from service.dto import FeedVideoDTO, UserPublicDTO
from service.errors import StoreError

logger = logging.getLogger(__name__)


class FeedSettings(BaseSettings):
    feed_default_limit: int = 10

    class Config:
        env_file = ".env"
        extra = "ignore"


# Largest value a BIGINT bind parameter accepts
MAX_PAGE_PARAM = 2 ** 63 - 1


def coerce_page_param(value: Any, default: int) -> int:
    """Permissive parsing: anything that is not an integer in ``[0, MAX_PAGE_PARAM]`` becomes ``default``"""
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            return default
        value = int(value)
    if isinstance(value, int) and 0 <= value <= MAX_PAGE_PARAM:
        return value
    return default


def get_feed(
    limit: Any = None,
    offset: Any = None,
    *,
    session: Session,
    trace_id: str,
    settings: Optional[FeedSettings] = None
) -> List[FeedVideoDTO]:
    """
    Public videos, newest first, with their authors embedded.

    Ordering is ``created_at`` descending with later inserts winning ties, so
    consecutive pages over an unchanged table neither overlap nor skip.
    Inserts at the head while paging shift offsets; there is no cursor.

    Args:
        limit: Page size, default from settings (10)
        offset: Number of videos to skip, default 0
        trace_id: Request tracing ID
        session: Database session
        settings: Feed configuration

    Returns:
        List[FeedVideoDTO]: Page of videos; ``user`` is None for authors that
        could not be resolved

    Raises:
        StoreError: The page itself could not be read
    """
    settings = settings or FeedSettings()
    start_time = time.time()
    limit = coerce_page_param(limit, settings.feed_default_limit)
    offset = coerce_page_param(offset, 0)

    try:
        videos = session.execute(
            select(Video)
            .where(Video.is_public.is_(True))
            .order_by(Video.created_at.desc(), Video.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()
    except SQLAlchemyError as e:
        logger.error("Feed query failed", extra={
            "trace_id": trace_id,
            "error": str(e),
        })
        raise StoreError("Failed to fetch videos") from e

    # DTOs first: a failed author lookup rolls back and expires the loaded rows
    page = [FeedVideoDTO.model_validate(video) for video in videos]
    authors: Dict[str, Optional[UserPublicDTO]] = {}
    for item in page:
        item.user = author_projection(session, item.user_id, trace_id, authors)

    logger.info("Feed served", extra={
        "trace_id": trace_id,
        "limit": limit,
        "offset": offset,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return page
