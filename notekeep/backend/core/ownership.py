"""
Ownership Guard.

A caller may only touch resources whose recorded creator is the caller.
Denial is reported exactly like a missing row, so a caller cannot discover
other accounts' notes, contacts or profiles.
"""

from typing import Any

from notekeep.backend.core.exceptions import NotFoundError
from notekeep.backend.core.logging import get_logger

logger = get_logger(__name__)


def authorize(caller_id: str, resource: Any, owner_attr: str = "created_by") -> bool:
    """Return True if the caller owns the resource."""
    owner_id = getattr(resource, owner_attr, None)
    return owner_id is not None and str(owner_id) == str(caller_id)


def require_owner(
    caller_id: str,
    resource: Any,
    label: str,
    owner_attr: str = "created_by",
) -> None:
    """
    Raise NotFoundError unless the caller owns the resource.

    Args:
        caller_id: Authenticated account id
        resource: Loaded ORM instance
        label: Entity name used in the error message ("Note", "Contact")
        owner_attr: Attribute holding the owner's account id
    """
    if not authorize(caller_id, resource, owner_attr):
        logger.warning(
            "Ownership check denied",
            extra={
                "resource": label,
                "resource_id": getattr(resource, "id", None),
                "caller_id": caller_id,
            },
        )
        raise NotFoundError(f"{label} not found")
