"""Validation utilities."""
from fastapi import HTTPException


def validate_id(name: str, value: str) -> str:
    """Validate an opaque identifier taken from a URL (no path segments)."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if "/" in cleaned or "\\" in cleaned or cleaned in {".", ".."}:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned


def require_fields(**fields: object) -> None:
    """Reject a form when any required field is blank."""
    missing = [
        name
        for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise HTTPException(
            status_code=400,
            detail="Please fill all required fields: " + ", ".join(missing),
        )
