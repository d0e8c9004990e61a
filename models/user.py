"""
models/user.py
--------------
Domain model for blog users.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class User:
    """
    Represents an account that can write posts and comments.

    Attributes:
        user_id: Database primary key (None for new records).
        name: Display name.
        email: Contact address. Not unique.
        password_hash: Opaque credential material, never a plaintext password.
    """
    name: str
    email: str
    password_hash: str = field(repr=False)
    user_id: Optional[int] = None

    def __str__(self) -> str:
        return f"#{self.user_id} {self.name} <{self.email}>"
