"""
models/comment.py
-----------------
Domain model for comments on posts.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Comment:
    """A user's comment on a post."""
    post_id: int
    user_id: int
    comment_body: str
    comment_id: Optional[int] = None
