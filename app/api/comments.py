from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import to_http_error
from app.deps.common import get_current_user_id, get_db_session, get_ledger_locks, get_trace_id
from core.locks import KeyedLock
from service import ledger_service
from service.dto import CommentTarget, LikeToggleDTO

router = APIRouter(tags=["comments"])


@router.post("/comments/{comment_id}/like", response_model=LikeToggleDTO)
def toggle_comment_like(
    comment_id: int,
    actor_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
    locks: KeyedLock = Depends(get_ledger_locks),
    trace_id: str = Depends(get_trace_id)
) -> LikeToggleDTO:
    """Like a comment as the acting user, or remove the like"""
    try:
        liked = ledger_service.toggle_like(
            actor_id,
            CommentTarget(comment_id=comment_id),
            session=session,
            trace_id=trace_id,
            locks=locks
        )
        return LikeToggleDTO(liked=liked)
    except Exception as e:
        raise to_http_error(e, trace_id)
