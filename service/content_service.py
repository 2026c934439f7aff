"""Content store: videos and comments"""
import logging
import time
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.models import Comment, Video
from service.counters import adjust_counter
from service.dto import CommentDTO, FeedVideoDTO, UserPublicDTO, VideoCreateDTO, VideoDTO
from service.errors import DomainValidationError, NotFoundError, StoreError
from service.identity_service import require_user, resolve_public

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_TITLE = "Untitled Video"


def require_video(session: Session, video_id: int) -> Video:
    video = session.get(Video, video_id)
    if video is None:
        raise NotFoundError("video", video_id)
    return video


def author_projection(
    session: Session,
    user_id: str,
    trace_id: str,
    cache: Optional[Dict[str, Optional[UserPublicDTO]]] = None,
) -> Optional[UserPublicDTO]:
    """Resolve an author for embedding; a failed lookup yields None instead of raising"""
    if cache is not None and user_id in cache:
        return cache[user_id]

    try:
        author = resolve_public(session, user_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning("Author resolution failed", extra={
            "trace_id": trace_id,
            "user_id": user_id,
            "error": str(e),
        })
        author = None

    if cache is not None:
        cache[user_id] = author
    return author


def create_video(owner_id: str, dto: VideoCreateDTO, *, session: Session, trace_id: str) -> VideoDTO:
    """
    Register a video for ``owner_id`` once its upload has completed.

    Raises:
        NotFoundError: Unknown owner
        StoreError: Storage failure
    """
    try:
        require_user(session, owner_id)

        video = Video(
            user_id=owner_id,
            title=dto.title or DEFAULT_VIDEO_TITLE,
            description=dto.description or "",
            video_url=dto.video_url,
            thumbnail_url=dto.thumbnail_url,
            duration=dto.duration,
            is_public=dto.is_public,
        )
        session.add(video)
        session.commit()
        session.refresh(video)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Video creation failed", extra={
            "trace_id": trace_id,
            "user_id": owner_id,
            "error": str(e),
        })
        raise StoreError("Failed to save video") from e

    logger.info("Video created", extra={
        "trace_id": trace_id,
        "user_id": owner_id,
        "video_id": video.id,
    })
    return VideoDTO.model_validate(video)


def get_video(video_id: int, *, session: Session, trace_id: str) -> FeedVideoDTO:
    """Direct lookup by id; private videos are returned too"""
    try:
        video = require_video(session, video_id)
    except SQLAlchemyError as e:
        logger.error("Video lookup failed", extra={"trace_id": trace_id, "video_id": video_id})
        raise StoreError("Failed to fetch video") from e

    result = FeedVideoDTO.model_validate(video)
    result.user = author_projection(session, result.user_id, trace_id)
    return result


def get_videos_by_owner(owner_id: str, *, session: Session, trace_id: str) -> List[VideoDTO]:
    """All of the owner's videos, newest first"""
    try:
        require_user(session, owner_id)
        videos = session.execute(
            select(Video)
            .where(Video.user_id == owner_id)
            .order_by(Video.created_at.desc(), Video.id.desc())
        ).scalars().all()
    except SQLAlchemyError as e:
        logger.error("Owner videos lookup failed", extra={"trace_id": trace_id, "user_id": owner_id})
        raise StoreError("Failed to fetch user videos") from e

    return [VideoDTO.model_validate(v) for v in videos]


def create_comment(
    video_id: int,
    user_id: str,
    content: str,
    *,
    session: Session,
    trace_id: str
) -> CommentDTO:
    """
    Store a comment and bump the parent video's comment counter.

    The comment row commits on its own. The counter increment runs as a
    second unit: if the video has vanished or the update fails, the comment
    stays and the counter is left for the reconciliation job.

    Args:
        video_id: Parent video
        user_id: Author
        content: Comment text, must not be blank
        trace_id: Request tracing ID
        session: Database session

    Returns:
        CommentDTO: Created comment with the author's public projection

    Raises:
        DomainValidationError: Blank content
        NotFoundError: Unknown video or author
        StoreError: Comment row could not be stored
    """
    start_time = time.time()

    if content is None or not content.strip():
        logger.warning("Rejected empty comment", extra={"trace_id": trace_id, "video_id": video_id})
        raise DomainValidationError("Comment content must not be empty", field="content")

    try:
        require_video(session, video_id)
        require_user(session, user_id)

        comment = Comment(video_id=video_id, user_id=user_id, content=content)
        session.add(comment)
        session.commit()
        session.refresh(comment)
        result = CommentDTO.model_validate(comment)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Comment creation failed", extra={
            "trace_id": trace_id,
            "video_id": video_id,
            "user_id": user_id,
            "error": str(e),
        })
        raise StoreError("Failed to create comment") from e

    try:
        if adjust_counter(session, Video, video_id, "comments_count", 1):
            session.commit()
        else:
            session.rollback()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Comment counter increment failed", extra={
            "trace_id": trace_id,
            "video_id": video_id,
            "comment_id": result.id,
            "error": str(e),
        })

    result.user = author_projection(session, user_id, trace_id)

    logger.info("Comment created", extra={
        "trace_id": trace_id,
        "video_id": video_id,
        "comment_id": result.id,
        "user_id": user_id,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return result


def get_comments_by_video(video_id: int, *, session: Session, trace_id: str) -> List[CommentDTO]:
    """Comments on a video, newest first, each with its author projection"""
    try:
        require_video(session, video_id)
        comments = session.execute(
            select(Comment)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        ).scalars().all()
    except SQLAlchemyError as e:
        logger.error("Comments lookup failed", extra={"trace_id": trace_id, "video_id": video_id})
        raise StoreError("Failed to fetch comments") from e

    results = [CommentDTO.model_validate(comment) for comment in comments]
    authors: Dict[str, Optional[UserPublicDTO]] = {}
    for dto in results:
        dto.user = author_projection(session, dto.user_id, trace_id, authors)
    return results
