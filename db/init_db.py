"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
or to drop every table again:
    python -m db.init_db --drop
"""

import sys

from db.connection import get_dialect, transaction
from utils.logger import get_logger

logger = get_logger(__name__)

# No ON DELETE action is declared: deleting a referenced row is rejected.
SCHEMA_SQL = {
    "postgresql": [
        """
        CREATE TABLE IF NOT EXISTS users (
            user_id         SERIAL PRIMARY KEY,
            name            VARCHAR(255) NOT NULL,
            email           VARCHAR(255) NOT NULL,
            password_hash   VARCHAR(255) NOT NULL
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS posts (
            post_id         SERIAL PRIMARY KEY,
            title           VARCHAR(255) NOT NULL,
            post_body       TEXT NOT NULL,
            published       BOOLEAN NOT NULL DEFAULT FALSE,
            user_id         INT NOT NULL REFERENCES users(user_id)
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS comments (
            comment_id      SERIAL PRIMARY KEY,
            post_id         INT NOT NULL REFERENCES posts(post_id),
            user_id         INT NOT NULL REFERENCES users(user_id),
            comment_body    TEXT NOT NULL
        );
        """,
    ],
    "sqlite": [
        """
        CREATE TABLE IF NOT EXISTS users (
            user_id         INTEGER PRIMARY KEY AUTOINCREMENT,
            name            VARCHAR(255) NOT NULL,
            email           VARCHAR(255) NOT NULL,
            password_hash   VARCHAR(255) NOT NULL
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS posts (
            post_id         INTEGER PRIMARY KEY AUTOINCREMENT,
            title           VARCHAR(255) NOT NULL,
            post_body       TEXT NOT NULL,
            published       BOOLEAN NOT NULL DEFAULT 0,
            user_id         INTEGER NOT NULL REFERENCES users(user_id)
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS comments (
            comment_id      INTEGER PRIMARY KEY AUTOINCREMENT,
            post_id         INTEGER NOT NULL REFERENCES posts(post_id),
            user_id         INTEGER NOT NULL REFERENCES users(user_id),
            comment_body    TEXT NOT NULL
        );
        """,
    ],
}

# Dependents first.
DROP_SQL = [
    "DROP TABLE IF EXISTS comments;",
    "DROP TABLE IF EXISTS posts;",
    "DROP TABLE IF EXISTS users;",
]


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    dialect = get_dialect()
    try:
        with transaction() as cur:
            for statement in SCHEMA_SQL[dialect]:
                cur.execute(statement)
        logger.info(f"Database schema initialized successfully ({dialect}).")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


def drop_tables() -> None:
    """Drop comments, posts and users, in that order."""
    try:
        with transaction() as cur:
            for statement in DROP_SQL:
                cur.execute(statement)
        logger.info("Database schema dropped.")
    except Exception as e:
        logger.error(f"Failed to drop schema: {e}")
        raise


if __name__ == "__main__":
    from db.connection import close_pool, init_pool
    init_pool()
    try:
        if "--drop" in sys.argv[1:]:
            drop_tables()
            print("Database schema dropped.")
        else:
            create_tables()
            print("Database schema created successfully.")
    finally:
        close_pool()
