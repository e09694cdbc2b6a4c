"""Category-related Pydantic models."""
from pydantic import BaseModel, Field


class Category(BaseModel):
    """Category row as returned by the backend."""

    id: int
    name: str
    description: str | None = None
    parent_category: str | None = None
    question_count: int | None = None
    created_at: str | None = None


class CategoryWrite(BaseModel):
    """Model for creating or updating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    parent_category: str | None = None
