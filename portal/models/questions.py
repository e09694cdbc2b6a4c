"""Question-related Pydantic models."""
from typing import Literal

from pydantic import BaseModel, Field

from portal.config import DEFAULT_DIFFICULTY


class Question(BaseModel):
    """Question bank entry as returned by the backend."""

    id: int
    question_text: str
    category_id: int | None = None
    category_name: str
    difficulty: str = DEFAULT_DIFFICULTY
    options: dict[str, str] = Field(default_factory=dict)
    correct_option: str | None = None


class QuestionWrite(BaseModel):
    """Question editor form.

    ``category`` is the chosen root name; ``subcategory_id`` is the id picked
    from that root's children, if any.
    """

    category: str = ""
    subcategory_id: int | None = None
    question_text: str = ""
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    options: dict[str, str] = Field(default_factory=dict)
    correct_option: str = "a"


class QuestionPage(BaseModel):
    """One page of the question list."""

    items: list[Question]
    total: int
    page: int
    per_page: int
    total_pages: int
