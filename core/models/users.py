from sqlalchemy import Column, String, Text, Integer, Boolean, TIMESTAMP
from sqlalchemy.sql import func, false
from core.db import Base


class User(Base):
    """User identity and aggregate social counters"""
    __tablename__ = "users"

    id = Column(String, primary_key=True, comment="External identity key")
    email = Column(String, unique=True, nullable=False, comment="Account email")
    first_name = Column(String, comment="Display name")
    last_name = Column(String)
    profile_image_url = Column(String, comment="Avatar URL")
    username = Column(String, unique=True, comment="Public handle")
    bio = Column(Text)

    # Denormalized counters, derived from follows/likes rows
    followers_count = Column(Integer, nullable=False, default=0, server_default="0")
    following_count = Column(Integer, nullable=False, default=0, server_default="0")
    likes_count = Column(Integer, nullable=False, default=0, server_default="0",
                         comment="Likes received across owned videos and comments")

    is_email_verified = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(),
                        onupdate=func.now())
