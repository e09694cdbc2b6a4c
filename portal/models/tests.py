"""Test assembly Pydantic models."""
from pydantic import BaseModel, Field


class NewTestRequest(BaseModel):
    """Model for creating a test from selected bank questions."""

    test_name: str = ""
    question_ids: list[int] = Field(default_factory=list)


class BuilderViewRequest(BaseModel):
    """Picker state for the test builder tree."""

    difficulty_filters: dict[str, str] = Field(default_factory=dict)
    selected_ids: list[int] = Field(default_factory=list)
