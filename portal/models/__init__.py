"""Pydantic models."""
from portal.models.auth import LoginRequest, LoginResponse, MessageResponse
from portal.models.candidate import (
    AnswerEntry,
    AssessmentDefinition,
    AssessmentQuestion,
    CandidateInfo,
    HandoffResponse,
    NavigateRequest,
    SelectRequest,
    StartRequest,
    SubmissionPayload,
)
from portal.models.categories import Category, CategoryWrite
from portal.models.questions import Question, QuestionPage, QuestionWrite
from portal.models.tests import BuilderViewRequest, NewTestRequest

__all__ = [
    "AnswerEntry",
    "AssessmentDefinition",
    "AssessmentQuestion",
    "BuilderViewRequest",
    "CandidateInfo",
    "Category",
    "CategoryWrite",
    "HandoffResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "NavigateRequest",
    "Question",
    "QuestionPage",
    "QuestionWrite",
    "SelectRequest",
    "StartRequest",
    "SubmissionPayload",
    "NewTestRequest",
]
