from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import to_http_error
from app.deps.common import get_current_user_id, get_db_session, get_ledger_locks, get_trace_id
from core.locks import KeyedLock
from service import content_service, identity_service, ledger_service
from service.dto import FollowToggleDTO, IdentityUpsertDTO, UserDTO, UserPublicDTO, VideoDTO

router = APIRouter(tags=["users"])


@router.post("/auth/verify", response_model=UserDTO)
def verify_identity(
    request: IdentityUpsertDTO,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> UserDTO:
    """Create or refresh the user behind a verified identity"""
    try:
        return identity_service.upsert_identity(request, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.get("/users/by-username/{username}", response_model=UserDTO)
def get_user_by_username(
    username: str,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> UserDTO:
    try:
        return identity_service.get_user_by_username(username, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.get("/users/{user_id}", response_model=UserDTO)
def get_user(
    user_id: str,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> UserDTO:
    try:
        return identity_service.get_identity(user_id, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.get("/users/{user_id}/videos", response_model=List[VideoDTO])
def get_user_videos(
    user_id: str,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> List[VideoDTO]:
    try:
        return content_service.get_videos_by_owner(user_id, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.post("/users/{user_id}/follow", response_model=FollowToggleDTO)
def toggle_follow(
    user_id: str,
    actor_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db_session),
    locks: KeyedLock = Depends(get_ledger_locks),
    trace_id: str = Depends(get_trace_id)
) -> FollowToggleDTO:
    """Follow ``user_id`` as the acting user, or unfollow if already following"""
    try:
        following = ledger_service.toggle_follow(
            actor_id,
            user_id,
            session=session,
            trace_id=trace_id,
            locks=locks
        )
        return FollowToggleDTO(following=following)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.get("/users/{user_id}/followers", response_model=List[UserPublicDTO])
def get_followers(
    user_id: str,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> List[UserPublicDTO]:
    try:
        return ledger_service.get_followers(user_id, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)


@router.get("/users/{user_id}/following", response_model=List[UserPublicDTO])
def get_following(
    user_id: str,
    session: Session = Depends(get_db_session),
    trace_id: str = Depends(get_trace_id)
) -> List[UserPublicDTO]:
    try:
        return ledger_service.get_following(user_id, session=session, trace_id=trace_id)
    except Exception as e:
        raise to_http_error(e, trace_id)
