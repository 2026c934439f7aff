"""Core database models"""
from .users import User
from .videos import Video
from .comments import Comment
from .likes import Like
from .follows import Follow

__all__ = ["User", "Video", "Comment", "Like", "Follow"]
