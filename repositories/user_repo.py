"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from db.connection import transaction
from db.errors import ConstraintViolation, NotFound
from models.user import User
from utils.logger import get_logger
from utils.validation import clean_changes, require_key, require_varchar

logger = get_logger(__name__)

_COLUMNS = "user_id, name, email, password_hash"

_UPDATABLE = {
    "name": require_varchar,
    "email": require_varchar,
    "password_hash": require_varchar,
}


class UserRepository:
    """Repository for CRUD operations on the users table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Args:
            user: The User domain object to persist.

        Returns:
            The same User with its `user_id` populated.

        Raises:
            ConstraintViolation: If a field is missing or empty.
        """
        require_varchar("name", user.name)
        require_varchar("email", user.email)
        require_varchar("password_hash", user.password_hash)
        sql = """
            INSERT INTO users (name, email, password_hash)
            VALUES (%s, %s, %s)
            RETURNING user_id;
        """
        try:
            with transaction() as cur:
                cur.execute(sql, (user.name, user.email, user.password_hash))
                user.user_id = cur.fetchone()[0]
        except ConstraintViolation as e:
            logger.error(f"Failed to add user: {e}")
            raise
        logger.info(f"Added user #{user.user_id}")
        return user

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, user_id: int) -> User:
        """
        Fetch a single user.

        Raises:
            NotFound: If no user has this ID.
        """
        require_key("users", "user_id", user_id)
        sql = f"SELECT {_COLUMNS} FROM users WHERE user_id = %s;"
        with transaction() as cur:
            cur.execute(sql, (user_id,))
            row = cur.fetchone()
        if row is None:
            raise NotFound("users", user_id)
        return self._row_to_user(row)

    def list_all(self) -> list[User]:
        """All users, oldest first."""
        sql = f"SELECT {_COLUMNS} FROM users ORDER BY user_id;"
        with transaction() as cur:
            cur.execute(sql)
            return [self._row_to_user(r) for r in cur.fetchall()]

    def find_by_email(self, email: str) -> list[User]:
        """Every user registered under `email` (addresses are not unique)."""
        try:
            require_varchar("email", email)
        except ConstraintViolation:
            # No stored address can match text the column would reject.
            return []
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = %s ORDER BY user_id;"
        with transaction() as cur:
            cur.execute(sql, (email,))
            return [self._row_to_user(r) for r in cur.fetchall()]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, user_id: int, /, **changes) -> User:
        """
        Change any of `name`, `email` or `password_hash`.

        Returns:
            The user as stored after the update.

        Raises:
            NotFound: If no user has this ID.
            ConstraintViolation: If a column is unknown or a value is empty.
        """
        require_key("users", "user_id", user_id)
        changes = clean_changes(changes, _UPDATABLE)
        if not changes:
            return self.get_by_id(user_id)

        assignments = ", ".join(f"{column} = %s" for column in changes)
        sql = f"UPDATE users SET {assignments} WHERE user_id = %s;"
        try:
            with transaction() as cur:
                cur.execute(sql, (*changes.values(), user_id))
                if cur.rowcount == 0:
                    raise NotFound("users", user_id)
                cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id = %s;", (user_id,))
                row = cur.fetchone()
        except ConstraintViolation as e:
            logger.error(f"Failed to update user #{user_id}: {e}")
            raise
        logger.info(f"Updated user #{user_id}: {', '.join(changes)}")
        return self._row_to_user(row)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, user_id: int) -> None:
        """
        Delete a user who owns no posts and wrote no comments.

        Raises:
            NotFound: If no user has this ID.
            ConstraintViolation: If posts or comments still reference the user.
        """
        require_key("users", "user_id", user_id)
        sql = "DELETE FROM users WHERE user_id = %s;"
        try:
            with transaction() as cur:
                cur.execute(sql, (user_id,))
                if cur.rowcount == 0:
                    raise NotFound("users", user_id)
        except ConstraintViolation as e:
            logger.error(f"Failed to delete user #{user_id}: {e}")
            raise
        logger.info(f"Deleted user #{user_id}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        """Convert a database row tuple to a User domain object."""
        return User(
            user_id=row[0],
            name=row[1],
            email=row[2],
            password_hash=row[3],
        )
