"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module instead of
redefining them locally.
"""

from datetime import datetime, timezone
from uuid import UUID

from notekeep.backend.core.exceptions import ValidationError


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC. This keeps comparisons and database storage
    consistent across PostgreSQL and SQLite.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC. Naive values are assumed UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def owner_prefix(owner_id: str | UUID) -> str:
    """Blob name prefix that scopes files to one account."""
    return f"user-{owner_id}/"


def validate_filename(filename: str | None) -> str:
    """
    Ensure a filename is a single, non-empty path segment.

    Blob names are built as `user-<id>/<filename>`, so anything that could
    step outside the owner's prefix is rejected.

    Raises:
        ValidationError: If the name is empty or contains a path component
    """
    name = (filename or "").strip()
    if not name or name in {".", ".."}:
        raise ValidationError("Filename is required", details={"filename": filename})
    if "/" in name or "\\" in name or ".." in name or "\x00" in name:
        raise ValidationError(
            "Filename must not contain path separators",
            details={"filename": filename},
        )
    return name
