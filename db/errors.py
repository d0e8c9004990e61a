"""
db/errors.py
------------
Errors reported by the store to its callers.
"""


class StoreError(Exception):
    """Base class for every error raised by the data-access layer."""


class ConstraintViolation(StoreError):
    """A write broke a NOT NULL, foreign-key or type rule."""


class NotFound(StoreError):
    """The targeted row does not exist."""

    def __init__(self, table: str, row_id: int):
        super().__init__(f"No row in {table} with id {row_id}")
        self.table = table
        self.row_id = row_id
