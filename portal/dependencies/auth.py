"""Authentication dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.client import BackendClient
from portal.services.auth_context import AuthContext, auth_registry

# HTTP Bearer scheme for the backend token
security = HTTPBearer(auto_error=False)


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthContext:
    """Get the signed-in admin's context.

    Raises:
        HTTPException: 401 if not signed in or the session was cleared.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    context = auth_registry.get(credentials.credentials)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or invalidated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


def get_admin_client(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> BackendClient:
    """Backend client acting as the signed-in admin."""
    return BackendClient(auth=auth)


def get_public_client() -> BackendClient:
    """Backend client for unauthenticated calls (login, candidate endpoints)."""
    return BackendClient()


async def require_importer(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    """Bulk import is not available to the Creator role."""
    if auth.is_creator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Bulk import is not available for your role",
        )
    return auth
