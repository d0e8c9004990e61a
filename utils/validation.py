"""
utils/validation.py
-------------------
Field checks applied before any SQL reaches the database.
Failures raise ConstraintViolation; lookups of ids that cannot exist raise NotFound.
"""

from typing import Any, Callable

from db.errors import ConstraintViolation, NotFound

Validator = Callable[[str, Any], Any]

VARCHAR_LENGTH = 255

# Key columns are 32-bit INT in the PostgreSQL schema.
MIN_ID = -(2 ** 31)
MAX_ID = 2 ** 31 - 1


def require_text(field: str, value: Any) -> str:
    """Reject None, non-strings, blank strings and text the drivers cannot store."""
    if not isinstance(value, str) or not value.strip():
        raise ConstraintViolation(f"{field} must be a non-empty string")
    if "\x00" in value:
        raise ConstraintViolation(f"{field} must not contain NUL characters")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ConstraintViolation(f"{field} is not valid UTF-8 text") from None
    return value


def require_varchar(field: str, value: Any) -> str:
    """`require_text` for VARCHAR(255) columns."""
    require_text(field, value)
    if len(value) > VARCHAR_LENGTH:
        raise ConstraintViolation(
            f"{field} must be at most {VARCHAR_LENGTH} characters, got {len(value)}"
        )
    return value


def fits_id_column(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_ID <= value <= MAX_ID


def require_id(field: str, value: Any) -> int:
    # bool is an int subclass; True is not a valid row id.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstraintViolation(f"{field} must be an integer id, got {value!r}")
    if not fits_id_column(value):
        raise ConstraintViolation(f"{field} is out of range: {value}")
    return value


def require_key(table: str, field: str, value: Any) -> int:
    """
    Check a primary key used for lookup.

    A well-typed id outside the column range cannot exist, so it is NotFound.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstraintViolation(f"{field} must be an integer id, got {value!r}")
    if not fits_id_column(value):
        raise NotFound(table, value)
    return value


def require_flag(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConstraintViolation(f"{field} must be a boolean, got {value!r}")
    return value


def clean_changes(changes: dict, validators: dict[str, Validator]) -> dict:
    """
    Validate a partial update.

    Args:
        changes: Column name to new value.
        validators: The updatable columns and the check for each.

    Returns:
        The validated changes, in the order given.

    Raises:
        ConstraintViolation: If a column is not updatable or a value is invalid.
    """
    unknown = sorted(set(changes) - set(validators))
    if unknown:
        raise ConstraintViolation(f"Cannot update column(s): {', '.join(unknown)}")
    return {column: validators[column](column, value) for column, value in changes.items()}
