from sqlalchemy import Column, String, Text, Integer, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from core.db import Base, BigIntId


class Comment(Base):
    """Comment on a video"""
    __tablename__ = "comments"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    video_id = Column(BigIntId, ForeignKey("videos.id"), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    likes_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    video = relationship("Video", back_populates="comments")

    __table_args__ = (
        Index("idx_comments_video_created", "video_id", "created_at"),
    )
