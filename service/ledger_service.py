"""Engagement ledger: like and follow edges and the counters they drive"""
import logging
import time
from contextlib import nullcontext
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.locks import KeyedLock
from core.models import Comment, Follow, Like, User, Video
from service.counters import adjust_counter
from service.dto import CommentTarget, LikeTarget, UserPublicDTO, VideoTarget
from service.errors import DomainValidationError, NotFoundError, StoreError
from service.identity_service import require_user, to_public

logger = logging.getLogger(__name__)


def target_label(target: LikeTarget) -> str:
    if isinstance(target, VideoTarget):
        return f"video:{target.video_id}"
    return f"comment:{target.comment_id}"


def like_lock_key(user_id: str, target: LikeTarget) -> str:
    return f"like:{user_id}:{target_label(target)}"


def follow_lock_key(follower_id: str, following_id: str) -> str:
    return f"follow:{follower_id}:{following_id}"


def _hold(locks: Optional[KeyedLock], key: str):
    return locks.hold(key) if locks is not None else nullcontext()


def _require_target(session: Session, target: LikeTarget):
    """Return (model, row) for the like target"""
    if isinstance(target, VideoTarget):
        row = session.get(Video, target.video_id)
        if row is None:
            raise NotFoundError("video", target.video_id)
        return Video, row
    if isinstance(target, CommentTarget):
        row = session.get(Comment, target.comment_id)
        if row is None:
            raise NotFoundError("comment", target.comment_id)
        return Comment, row
    raise DomainValidationError("Like target must be a video or a comment", field="target")


def _like_lookup(user_id: str, target: LikeTarget):
    stmt = select(Like).where(Like.user_id == user_id)
    if isinstance(target, VideoTarget):
        return stmt.where(Like.video_id == target.video_id)
    return stmt.where(Like.comment_id == target.comment_id)


def _new_like(user_id: str, target: LikeTarget) -> Like:
    if isinstance(target, VideoTarget):
        return Like(user_id=user_id, video_id=target.video_id)
    return Like(user_id=user_id, comment_id=target.comment_id)


def toggle_like(
    user_id: str,
    target: LikeTarget,
    *,
    session: Session,
    trace_id: str,
    locks: Optional[KeyedLock] = None
) -> bool:
    """
    Flip the like between ``user_id`` and a video or comment.

    The edge row, the target's ``likes_count`` and the owner's likes-received
    counter change in one transaction. Decrements never go below zero.
    Concurrent toggles for the same (user, target) are serialized through
    ``locks``; across processes the unique constraint on the edge decides,
    and a losing insert reports the converged "liked" state.

    Args:
        user_id: Acting user
        target: VideoTarget or CommentTarget
        trace_id: Request tracing ID
        session: Database session
        locks: Per-key lock map shared by request handlers

    Returns:
        bool: True when the user now likes the target

    Raises:
        NotFoundError: Unknown user or target
        StoreError: Storage failure
    """
    start_time = time.time()
    label = target_label(target)
    inserting = False

    with _hold(locks, like_lock_key(user_id, target)):
        try:
            require_user(session, user_id)
            model, row = _require_target(session, target)
            owner_id = row.user_id

            existing = session.execute(_like_lookup(user_id, target)).scalar_one_or_none()
            if existing is not None:
                session.delete(existing)
                session.flush()
                delta = -1
            else:
                inserting = True
                session.add(_new_like(user_id, target))
                session.flush()
                delta = 1

            adjust_counter(session, model, row.id, "likes_count", delta)
            adjust_counter(session, User, owner_id, "likes_count", delta)
            session.commit()

        except IntegrityError as e:
            session.rollback()
            if not inserting:
                raise StoreError("Failed to toggle like") from e
            logger.warning("Concurrent like insert lost, edge already present", extra={
                "trace_id": trace_id,
                "user_id": user_id,
                "target": label,
            })
            return True

        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Like toggle failed", extra={
                "trace_id": trace_id,
                "user_id": user_id,
                "target": label,
                "error": str(e),
            })
            raise StoreError("Failed to toggle like") from e

    liked = delta > 0
    logger.info("Like toggled", extra={
        "trace_id": trace_id,
        "user_id": user_id,
        "target": label,
        "liked": liked,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return liked


def toggle_follow(
    follower_id: str,
    following_id: str,
    *,
    session: Session,
    trace_id: str,
    locks: Optional[KeyedLock] = None
) -> bool:
    """
    Flip the follow edge from ``follower_id`` to ``following_id``.

    ``following_count`` on the follower and ``followers_count`` on the
    followed user always change together with the edge row.

    Returns:
        bool: True when the follower now follows the other user

    Raises:
        DomainValidationError: Self-follow
        NotFoundError: Either user is unknown
        StoreError: Storage failure
    """
    if follower_id == following_id:
        logger.warning("Rejected self-follow", extra={"trace_id": trace_id, "user_id": follower_id})
        raise DomainValidationError("Cannot follow yourself", field="following_id")

    start_time = time.time()
    inserting = False

    with _hold(locks, follow_lock_key(follower_id, following_id)):
        try:
            require_user(session, follower_id)
            require_user(session, following_id)

            existing = session.execute(
                select(Follow).where(
                    Follow.follower_id == follower_id,
                    Follow.following_id == following_id,
                )
            ).scalar_one_or_none()

            if existing is not None:
                session.delete(existing)
                session.flush()
                delta = -1
            else:
                inserting = True
                session.add(Follow(follower_id=follower_id, following_id=following_id))
                session.flush()
                delta = 1

            adjust_counter(session, User, follower_id, "following_count", delta)
            adjust_counter(session, User, following_id, "followers_count", delta)
            session.commit()

        except IntegrityError as e:
            session.rollback()
            if not inserting:
                raise StoreError("Failed to toggle follow") from e
            logger.warning("Concurrent follow insert lost, edge already present", extra={
                "trace_id": trace_id,
                "user_id": follower_id,
                "target": f"user:{following_id}",
            })
            return True

        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Follow toggle failed", extra={
                "trace_id": trace_id,
                "user_id": follower_id,
                "target": f"user:{following_id}",
                "error": str(e),
            })
            raise StoreError("Failed to toggle follow") from e

    following = delta > 0
    logger.info("Follow toggled", extra={
        "trace_id": trace_id,
        "user_id": follower_id,
        "target": f"user:{following_id}",
        "following": following,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return following


def get_followers(user_id: str, *, session: Session, trace_id: str) -> List[UserPublicDTO]:
    """Users following ``user_id``, most recent follow first"""
    try:
        require_user(session, user_id)
        users = session.execute(
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        ).scalars().all()
    except SQLAlchemyError as e:
        logger.error("Followers lookup failed", extra={"trace_id": trace_id, "user_id": user_id})
        raise StoreError("Failed to fetch followers") from e

    return [to_public(u) for u in users]


def get_following(user_id: str, *, session: Session, trace_id: str) -> List[UserPublicDTO]:
    """Users that ``user_id`` follows, most recent follow first"""
    try:
        require_user(session, user_id)
        users = session.execute(
            select(User)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        ).scalars().all()
    except SQLAlchemyError as e:
        logger.error("Following lookup failed", extra={"trace_id": trace_id, "user_id": user_id})
        raise StoreError("Failed to fetch following") from e

    return [to_public(u) for u in users]
