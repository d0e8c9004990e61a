"""
repositories/comment_repo.py
-----------------------------
Data access layer for comments on posts.
"""

from db.connection import transaction
from db.errors import ConstraintViolation, NotFound
from models.comment import Comment
from utils.logger import get_logger
from utils.validation import (
    clean_changes,
    fits_id_column,
    require_id,
    require_key,
    require_text,
)

logger = get_logger(__name__)

_COLUMNS = "comment_id, post_id, user_id, comment_body"

_UPDATABLE = {
    "comment_body": require_text,
    "post_id": require_id,
    "user_id": require_id,
}


class CommentRepository:
    """Repository for CRUD operations on the comments table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, comment: Comment) -> Comment:
        """
        Insert a new comment.

        Args:
            comment: The Comment domain object to persist.

        Returns:
            The same Comment with its `comment_id` populated.

        Raises:
            ConstraintViolation: If the body is empty, or `post_id` or
                `user_id` does not reference an existing row.
        """
        require_id("post_id", comment.post_id)
        require_id("user_id", comment.user_id)
        require_text("comment_body", comment.comment_body)
        sql = """
            INSERT INTO comments (post_id, user_id, comment_body)
            VALUES (%s, %s, %s)
            RETURNING comment_id;
        """
        try:
            with transaction() as cur:
                cur.execute(sql, (comment.post_id, comment.user_id, comment.comment_body))
                comment.comment_id = cur.fetchone()[0]
        except ConstraintViolation as e:
            logger.error(f"Failed to add comment on post {comment.post_id}: {e}")
            raise
        logger.info(f"Added comment #{comment.comment_id} on post {comment.post_id}")
        return comment

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, comment_id: int) -> Comment:
        """
        Fetch a single comment.

        Raises:
            NotFound: If no comment has this ID.
        """
        require_key("comments", "comment_id", comment_id)
        sql = f"SELECT {_COLUMNS} FROM comments WHERE comment_id = %s;"
        with transaction() as cur:
            cur.execute(sql, (comment_id,))
            row = cur.fetchone()
        if row is None:
            raise NotFound("comments", comment_id)
        return self._row_to_comment(row)

    def list_by_post(self, post_id: int) -> list[Comment]:
        """
        Fetch the comments on a post.

        Args:
            post_id: The commented post's ID.

        Returns:
            List of Comment objects, oldest first.
        """
        if not fits_id_column(post_id):
            return []
        sql = f"SELECT {_COLUMNS} FROM comments WHERE post_id = %s ORDER BY comment_id;"
        with transaction() as cur:
            cur.execute(sql, (post_id,))
            return [self._row_to_comment(r) for r in cur.fetchall()]

    def list_by_user(self, user_id: int) -> list[Comment]:
        """Comments a user wrote, oldest first."""
        if not fits_id_column(user_id):
            return []
        sql = f"SELECT {_COLUMNS} FROM comments WHERE user_id = %s ORDER BY comment_id;"
        with transaction() as cur:
            cur.execute(sql, (user_id,))
            return [self._row_to_comment(r) for r in cur.fetchall()]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, comment_id: int, /, **changes) -> Comment:
        """
        Change any of `comment_body`, `post_id` or `user_id`.

        Returns:
            The comment as stored after the update.

        Raises:
            NotFound: If no comment has this ID.
            ConstraintViolation: If a column is unknown, a value is invalid,
                or a new foreign key does not reference an existing row.
        """
        require_key("comments", "comment_id", comment_id)
        changes = clean_changes(changes, _UPDATABLE)
        if not changes:
            return self.get_by_id(comment_id)

        assignments = ", ".join(f"{column} = %s" for column in changes)
        sql = f"UPDATE comments SET {assignments} WHERE comment_id = %s;"
        try:
            with transaction() as cur:
                cur.execute(sql, (*changes.values(), comment_id))
                if cur.rowcount == 0:
                    raise NotFound("comments", comment_id)
                cur.execute(
                    f"SELECT {_COLUMNS} FROM comments WHERE comment_id = %s;", (comment_id,)
                )
                row = cur.fetchone()
        except ConstraintViolation as e:
            logger.error(f"Failed to update comment #{comment_id}: {e}")
            raise
        logger.info(f"Updated comment #{comment_id}: {', '.join(changes)}")
        return self._row_to_comment(row)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, comment_id: int) -> None:
        """
        Delete a comment.

        Raises:
            NotFound: If no comment has this ID.
        """
        require_key("comments", "comment_id", comment_id)
        sql = "DELETE FROM comments WHERE comment_id = %s;"
        with transaction() as cur:
            cur.execute(sql, (comment_id,))
            if cur.rowcount == 0:
                raise NotFound("comments", comment_id)
        logger.info(f"Deleted comment #{comment_id}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_comment(row: tuple) -> Comment:
        """Convert a database row tuple to a Comment domain object."""
        return Comment(
            comment_id=row[0],
            post_id=row[1],
            user_id=row[2],
            comment_body=row[3],
        )
