"""Pydantic models for authentication."""
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Admin login request."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Token and identity handed back to the browser."""

    token: str
    role: str | None = None
    user: dict[str, object] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
