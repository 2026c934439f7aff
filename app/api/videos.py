from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import to_http_error
from app.deps.common import get_current_user_id, get_db_session, get_ledger_locks, get_trace_id
from core.locks import KeyedLock
from service import content_service, feed_service, ledger_service
from service.dto import (
    CommentCreateDTO,
    CommentDTO,
    FeedVideoDTO,
    LikeToggleDTO,
    VideoCreateDTO,
    VideoDTO,
    VideoTarget,
)

router = APIRouter(tags=["videos"])


@router.get("/videos/feed", response_model=List[FeedVideoDTO])
def get_feed(
    limit: Optional[str] = Query(default=None),
    offset: Optional[str] = Query(default=None),
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> List[FeedVideoDTO]:
    """Public videos, newest first. Malformed paging values fall back to defaults."""
    try:
        return feed_service.get_feed(limit, offset, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.post("/videos", response_model=VideoDTO)
def create_video(
    request: VideoCreateDTO,
    actor_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> VideoDTO:
    try:
        return content_service.create_video(actor_id, request, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.get("/videos/{video_id}", response_model=FeedVideoDTO)
def get_video(
    video_id: int,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> FeedVideoDTO:
    try:
        return content_service.get_video(video_id, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.get("/videos/{video_id}/comments", response_model=List[CommentDTO])
def get_comments(
    video_id: int,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> List[CommentDTO]:
    try:
        return content_service.get_comments_by_video(video_id, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.post("/videos/{video_id}/comments", response_model=CommentDTO)
def create_comment(
    video_id: int,
    request: CommentCreateDTO,
    actor_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> CommentDTO:
    try:
        return content_service.create_comment(
            video_id,
            actor_id,
            request.content,
            session=session,
            trace_id=trace_id
        )
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.post("/videos/{video_id}/like", response_model=LikeToggleDTO)
def toggle_video_like(
    video_id: int,
    actor_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
    locks: KeyedLock = Depends(get_ledger_locks),
    trace_id: str = Depends(get_trace_id)
) -> LikeToggleDTO:
    try:
        liked = ledger_service.toggle_like(
            actor_id,
            VideoTarget(video_id=video_id),
            session=session,
            trace_id=trace_id,
            locks=locks
        )
        return LikeToggleDTO(liked=liked)
    except Exception as e:
        raise to_http_error(e, trace_id)
