"""Candidate-facing Pydantic models."""
from pydantic import BaseModel, EmailStr, Field, field_validator


class AssessmentQuestion(BaseModel):
    """Question as served to a candidate (no correct option)."""

    question_id: int
    question: str
    options: dict[str, str] = Field(default_factory=dict)
    difficulty: str | None = None
    category_name: str | None = None


class AssessmentDefinition(BaseModel):
    """Test payload fetched by test code."""

    test_name: str
    questions: list[AssessmentQuestion] = Field(default_factory=list)


class CandidateInfo(BaseModel):
    """Identity captured on the entry screen."""

    name: str = Field(..., max_length=200)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class HandoffResponse(BaseModel):
    """Reference to the stored candidate identity."""

    handoff_id: str
    start_url: str


class StartRequest(BaseModel):
    """Model for opening a session from a handoff entry."""

    handoff_id: str = Field(..., min_length=1)


class SelectRequest(BaseModel):
    """Model for picking an option on the current question."""

    option: str = Field(..., min_length=1)


class NavigateRequest(BaseModel):
    """Model for jumping to a question from the navigator."""

    index: int = Field(..., ge=0)


class AnswerEntry(BaseModel):
    """One index-aligned answer in a submission."""

    questionId: str
    selected: str


class SubmissionPayload(BaseModel):
    """Body sent to the backend on submit."""

    testId: str
    name: str
    email: str
    timeTaken: int
    answers: list[AnswerEntry]
