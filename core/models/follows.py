from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Index, UniqueConstraint
from sqlalchemy.sql import func
from core.db import Base, BigIntId


class Follow(Base):
    """Directed follow edge between two users"""
    __tablename__ = "follows"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    follower_id = Column(String, ForeignKey("users.id"), nullable=False, comment="Who follows")
    following_id = Column(String, ForeignKey("users.id"), nullable=False, comment="Who is followed")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        Index("idx_follows_following", "following_id"),
    )
