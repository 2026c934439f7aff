from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func
from core.db import Base, BigIntId


class Like(Base):
    """Like edge from a user to exactly one video or comment"""
    __tablename__ = "likes"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    video_id = Column(BigIntId, ForeignKey("videos.id"), nullable=True)
    comment_id = Column(BigIntId, ForeignKey("comments.id"), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_likes_user_video"),
        UniqueConstraint("user_id", "comment_id", name="uq_likes_user_comment"),
        CheckConstraint(
            "(video_id IS NULL) <> (comment_id IS NULL)",
            name="ck_likes_single_target",
        ),
    )
