import os
import sys
from pathlib import Path

import pytest

# Ensure the project root is importable when pytest changes CWD
PKG_ROOT = Path(__file__).resolve().parents[1]
if str(PKG_ROOT) not in sys.path:
    sys.path.insert(0, str(PKG_ROOT))

from db.connection import close_pool, init_pool  # noqa: E402
from db.init_db import create_tables, drop_tables  # noqa: E402
from models.post import Post  # noqa: E402
from models.user import User  # noqa: E402
from repositories.comment_repo import CommentRepository  # noqa: E402
from repositories.post_repo import PostRepository  # noqa: E402
from repositories.user_repo import UserRepository  # noqa: E402


# Set TEST_DATABASE_URL to a throwaway PostgreSQL database to run every
# store test against it as well. Its tables are dropped around each test.
POSTGRES_URL = os.getenv("TEST_DATABASE_URL")

STORE_URLS = [
    pytest.param("sqlite:///:memory:", id="sqlite"),
    pytest.param(
        POSTGRES_URL,
        id="postgresql",
        marks=pytest.mark.skipif(not POSTGRES_URL, reason="TEST_DATABASE_URL not set"),
    ),
]


@pytest.fixture(params=STORE_URLS)
def store(request):
    """A fresh store with the schema applied, on each configured backend."""
    init_pool(database_url=request.param)
    drop_tables()
    create_tables()
    try:
        yield request.param
        drop_tables()
    finally:
        close_pool()


@pytest.fixture
def users(store):
    return UserRepository()


@pytest.fixture
def posts(store):
    return PostRepository()


@pytest.fixture
def comments(store):
    return CommentRepository()


@pytest.fixture
def ann(users):
    return users.add(User(name="Ann", email="ann@x.com", password_hash="h1"))


@pytest.fixture
def ann_post(posts, ann):
    return posts.add(Post(title="Hi", post_body="body", user_id=ann.user_id))
