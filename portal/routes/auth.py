"""Authentication routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.client import BackendClient, BackendUnauthorized
from portal.dependencies.auth import get_auth_context, get_public_client
from portal.models.auth import LoginRequest, LoginResponse, MessageResponse
from portal.services.auth_context import AuthContext, auth_registry

router = APIRouter(prefix="/api/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


@router.post("/login", response_model=LoginResponse)
def login(
    data: LoginRequest,
    client: Annotated[BackendClient, Depends(get_public_client)],
) -> LoginResponse:
    """Login against the backend and register the admin's context."""
    try:
        result = client.login(data.email, data.password)
    except BackendUnauthorized as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message or "Invalid credentials",
        ) from exc

    result = result if isinstance(result, dict) else {}
    token = result.get("token") or result.get("access_token")
    if not isinstance(token, str) or not token:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Login response did not include a token",
        )

    user = result.get("user") if isinstance(result.get("user"), dict) else {}
    context = auth_registry.sign_in(token, user)
    return LoginResponse(token=token, role=context.role, user=context.user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> MessageResponse:
    """Logout (clear the admin's context)."""
    if credentials is not None:
        auth_registry.sign_out(credentials.credentials)
    return MessageResponse(message="Successfully logged out")


@router.get("/me")
def me(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict[str, object]:
    """Get the signed-in admin's identity and role."""
    return {"user": auth.user, "role": auth.role, "is_creator": auth.is_creator}
