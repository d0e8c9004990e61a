"""
repositories/post_repo.py
--------------------------
Data access layer for blog posts.
All SQL queries related to the `posts` table live here.
"""

from db.connection import transaction
from db.errors import ConstraintViolation, NotFound
from models.post import Post
from utils.logger import get_logger
from utils.validation import (
    clean_changes,
    fits_id_column,
    require_flag,
    require_id,
    require_key,
    require_text,
    require_varchar,
)

logger = get_logger(__name__)

_COLUMNS = "post_id, title, post_body, published, user_id"

_UPDATABLE = {
    "title": require_varchar,
    "post_body": require_text,
    "published": require_flag,
    "user_id": require_id,
}


class PostRepository:
    """Repository for CRUD operations on the posts table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, post: Post) -> Post:
        """
        Insert a new post.

        Args:
            post: The Post domain object to persist. `published`
                defaults to False when not set.

        Returns:
            The same Post with its `post_id` populated.

        Raises:
            ConstraintViolation: If a field is missing or empty, or
                `user_id` does not reference an existing user.
        """
        require_varchar("title", post.title)
        require_text("post_body", post.post_body)
        require_flag("published", post.published)
        require_id("user_id", post.user_id)
        sql = """
            INSERT INTO posts (title, post_body, published, user_id)
            VALUES (%s, %s, %s, %s)
            RETURNING post_id;
        """
        try:
            with transaction() as cur:
                cur.execute(sql, (post.title, post.post_body, post.published, post.user_id))
                post.post_id = cur.fetchone()[0]
        except ConstraintViolation as e:
            logger.error(f"Failed to add post for user {post.user_id}: {e}")
            raise
        logger.info(f"Added post #{post.post_id} for user {post.user_id}")
        return post

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, post_id: int) -> Post:
        """
        Fetch a single post.

        Raises:
            NotFound: If no post has this ID.
        """
        require_key("posts", "post_id", post_id)
        sql = f"SELECT {_COLUMNS} FROM posts WHERE post_id = %s;"
        with transaction() as cur:
            cur.execute(sql, (post_id,))
            row = cur.fetchone()
        if row is None:
            raise NotFound("posts", post_id)
        return self._row_to_post(row)

    def list_by_user(self, user_id: int, published_only: bool = False) -> list[Post]:
        """
        Fetch the posts a user owns.

        Args:
            user_id: Owning user's ID.
            published_only: Skip drafts.

        Returns:
            List of Post objects, oldest first.
        """
        if not fits_id_column(user_id):
            return []
        sql = f"SELECT {_COLUMNS} FROM posts WHERE user_id = %s"
        params: list = [user_id]
        if published_only:
            sql += " AND published = %s"
            params.append(True)
        sql += " ORDER BY post_id;"

        with transaction() as cur:
            cur.execute(sql, params)
            return [self._row_to_post(r) for r in cur.fetchall()]

    def list_published(self) -> list[Post]:
        """Every published post, oldest first."""
        sql = f"SELECT {_COLUMNS} FROM posts WHERE published = %s ORDER BY post_id;"
        with transaction() as cur:
            cur.execute(sql, (True,))
            return [self._row_to_post(r) for r in cur.fetchall()]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, post_id: int, /, **changes) -> Post:
        """
        Change any of `title`, `post_body`, `published` or `user_id`.

        Returns:
            The post as stored after the update.

        Raises:
            NotFound: If no post has this ID.
            ConstraintViolation: If a column is unknown, a value is invalid,
                or a new `user_id` does not reference an existing user.
        """
        require_key("posts", "post_id", post_id)
        changes = clean_changes(changes, _UPDATABLE)
        if not changes:
            return self.get_by_id(post_id)

        assignments = ", ".join(f"{column} = %s" for column in changes)
        sql = f"UPDATE posts SET {assignments} WHERE post_id = %s;"
        try:
            with transaction() as cur:
                cur.execute(sql, (*changes.values(), post_id))
                if cur.rowcount == 0:
                    raise NotFound("posts", post_id)
                cur.execute(f"SELECT {_COLUMNS} FROM posts WHERE post_id = %s;", (post_id,))
                row = cur.fetchone()
        except ConstraintViolation as e:
            logger.error(f"Failed to update post #{post_id}: {e}")
            raise
        logger.info(f"Updated post #{post_id}: {', '.join(changes)}")
        return self._row_to_post(row)

    def set_published(self, post_id: int, published: bool = True) -> Post:
        """Publish or unpublish a post."""
        return self.update(post_id, published=published)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, post_id: int) -> None:
        """
        Delete a post that has no comments.

        Raises:
            NotFound: If no post has this ID.
            ConstraintViolation: If comments still reference the post.
        """
        require_key("posts", "post_id", post_id)
        sql = "DELETE FROM posts WHERE post_id = %s;"
        try:
            with transaction() as cur:
                cur.execute(sql, (post_id,))
                if cur.rowcount == 0:
                    raise NotFound("posts", post_id)
        except ConstraintViolation as e:
            logger.error(f"Failed to delete post #{post_id}: {e}")
            raise
        logger.info(f"Deleted post #{post_id}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_post(row: tuple) -> Post:
        """Convert a database row tuple to a Post domain object."""
        return Post(
            post_id=row[0],
            title=row[1],
            post_body=row[2],
            published=bool(row[3]),
            user_id=row[4],
        )
