from sqlalchemy import Column, String, Text, Integer, Boolean, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, true
from core.db import Base, BigIntId


class Video(Base):
    """Uploaded or linked short video"""
    __tablename__ = "videos"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, comment="Owning user")
    title = Column(Text)
    description = Column(Text)
    video_url = Column(Text, nullable=False)
    thumbnail_url = Column(Text)
    duration = Column(Integer, comment="Length in seconds")

    likes_count = Column(Integer, nullable=False, default=0, server_default="0")
    comments_count = Column(Integer, nullable=False, default=0, server_default="0")
    views_count = Column(Integer, nullable=False, default=0, server_default="0")

    is_public = Column(Boolean, nullable=False, default=True, server_default=true(),
                       comment="Feed visibility only; direct lookups ignore it")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(),
                        onupdate=func.now())

    comments = relationship("Comment", back_populates="video")

    __table_args__ = (
        Index("idx_videos_public_created", "is_public", "created_at"),
        Index("idx_videos_user_created", "user_id", "created_at"),
    )
