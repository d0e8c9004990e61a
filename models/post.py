"""
models/post.py
--------------
Domain model for blog posts.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Post:
    """
    Represents a post owned by exactly one user.

    Attributes:
        post_id: Database primary key (None for new records).
        title: Headline, at most 255 characters.
        post_body: Post text, unbounded.
        user_id: Owning user's ID.
        published: Whether the post is visible to readers (default: False).
    """
    title: str
    post_body: str
    user_id: int
    published: bool = False
    post_id: Optional[int] = None

    def __str__(self) -> str:
        status = "published" if self.published else "draft"
        return f"#{self.post_id} {self.title} ({status})"
