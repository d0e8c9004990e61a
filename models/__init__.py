"""
models/ - Domain Models
=======================
Plain dataclasses for users, posts and comments.
"""

from models.comment import Comment
from models.post import Post
from models.user import User

__all__ = ["User", "Post", "Comment"]
