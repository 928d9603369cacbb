"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from notekeep.backend.api.v1.endpoints import auth, contacts, files, notes, users


def build_router(auth_strategy: str = "jwt", files_enabled: bool = True) -> APIRouter:
    """
    Assemble the v1 router.

    Args:
        auth_strategy: Active token strategy; /auth is only served for "jwt"
        files_enabled: Mount the /files endpoints
    """
    router = APIRouter()

    router.include_router(users.router, prefix="/users", tags=["users"])
    router.include_router(notes.router, prefix="/notes", tags=["notes"])
    router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])

    if files_enabled:
        router.include_router(files.router, prefix="/files", tags=["files"])

    if auth_strategy == "jwt":
        router.include_router(auth.router, prefix="/auth", tags=["auth"])

    return router
