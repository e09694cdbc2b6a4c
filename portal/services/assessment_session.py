"""Candidate test-taking state machine.

A session moves between three views:

    testing  --next/skip past last-->  preview  --submit ok-->  success
    testing  <--------review---------  preview

Answers are keyed by question id, statuses by question index. Elapsed time
is measured on a monotonic clock and only runs in the testing view.
"""
from __future__ import annotations

import enum
import functools
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from portal.models.candidate import AnswerEntry, AssessmentQuestion, SubmissionPayload
from portal.utils.time_utils import format_duration


class View(str, enum.Enum):
    """Session views."""

    TESTING = "testing"
    PREVIEW = "preview"
    SUCCESS = "success"


class QuestionStatus(str, enum.Enum):
    """Per-question navigator status."""

    ANSWERED = "answered"
    SKIPPED = "skipped"
    NOT_VISITED = "not-visited"


class InvalidTransitionError(Exception):
    """Raised when an event is not allowed in the current view."""


class SubmissionInFlightError(Exception):
    """Raised when submit is pressed while a submission is running."""


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


@dataclass
class AssessmentSession:
    test_code: str
    test_name: str
    candidate_name: str
    candidate_email: str
    questions: tuple[AssessmentQuestion, ...]
    answers: dict[int, str] = field(default_factory=dict)
    question_status: dict[int, QuestionStatus] = field(default_factory=dict)
    current_index: int = 0
    view: View = View.TESTING
    submitting: bool = False
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _accumulated: float = field(default=0.0, init=False, repr=False)
    _resumed_at: float | None = field(default=None, init=False, repr=False)
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.questions = tuple(self.questions)
        if not self.questions:
            raise ValueError("Test has no questions")
        self._resumed_at = self.clock()

    # State

    @property
    def elapsed_seconds(self) -> int:
        elapsed = self._accumulated
        if self._resumed_at is not None:
            elapsed += self.clock() - self._resumed_at
        return int(elapsed)

    @property
    def current_question(self) -> AssessmentQuestion:
        return self.questions[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index == len(self.questions) - 1

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    def status_counts(self) -> dict[str, int]:
        """Navigator tallies; not-visited is whatever is neither answered nor skipped."""
        statuses = list(self.question_status.values())
        answered = statuses.count(QuestionStatus.ANSWERED)
        skipped = statuses.count(QuestionStatus.SKIPPED)
        return {
            "answered": answered,
            "skipped": skipped,
            "not_visited": len(self.questions) - answered - skipped,
        }

    def _require(self, view: View) -> None:
        if self.view != view:
            raise InvalidTransitionError(
                f"Not allowed while session is in '{self.view.value}' view"
            )

    def _pause(self) -> None:
        if self._resumed_at is not None:
            self._accumulated += self.clock() - self._resumed_at
            self._resumed_at = None

    def _advance(self) -> None:
        if self.is_last:
            self._pause()
            self.view = View.PREVIEW
        else:
            self.current_index += 1

    # Testing view events

    @_locked
    def select(self, option: str) -> None:
        self._require(View.TESTING)
        question = self.current_question
        if question.options and option not in question.options:
            raise ValueError(f"Unknown option '{option}'")
        self.answers[question.question_id] = option
        self.question_status[self.current_index] = QuestionStatus.ANSWERED

    @_locked
    def skip(self) -> None:
        self._require(View.TESTING)
        if self.current_index not in self.question_status:
            self.question_status[self.current_index] = QuestionStatus.SKIPPED
        self._advance()

    @_locked
    def next(self) -> None:
        self._require(View.TESTING)
        self._advance()

    @_locked
    def previous(self) -> None:
        self._require(View.TESTING)
        self.current_index = max(0, self.current_index - 1)

    @_locked
    def navigate(self, index: int) -> None:
        self._require(View.TESTING)
        if not 0 <= index < len(self.questions):
            raise ValueError(f"Question index {index} out of range")
        leaving = self.current_index
        if (
            leaving not in self.question_status
            and self.questions[leaving].question_id not in self.answers
        ):
            self.question_status[leaving] = QuestionStatus.NOT_VISITED
        self.current_index = index

    # Preview view events

    @_locked
    def review(self) -> None:
        self._require(View.PREVIEW)
        if self.submitting:
            raise SubmissionInFlightError("Submission in progress")
        self.current_index = 0
        self.view = View.TESTING
        self._resumed_at = self.clock()

    def build_payload(self) -> SubmissionPayload:
        """Build the index-aligned submission; unanswered questions send ""."""
        return SubmissionPayload(
            testId=self.test_code,
            name=self.candidate_name,
            email=self.candidate_email,
            timeTaken=self.elapsed_seconds,
            answers=[
                AnswerEntry(
                    questionId=str(q.question_id),
                    selected=self.answers.get(q.question_id, ""),
                )
                for q in self.questions
            ],
        )

    @_locked
    def begin_submit(self) -> SubmissionPayload:
        """Claim the single submission slot and return the payload to send."""
        self._require(View.PREVIEW)
        if self.submitting:
            raise SubmissionInFlightError("Submission already in progress")
        self.submitting = True
        return self.build_payload()

    @_locked
    def complete_submit(self) -> None:
        self.submitting = False
        self.view = View.SUCCESS

    @_locked
    def fail_submit(self) -> None:
        self.submitting = False

    # Rendering

    def snapshot(self) -> dict[str, object]:
        """Serialize the session for the candidate UI."""
        with self._lock:
            elapsed = self.elapsed_seconds
            data: dict[str, object] = {
                "view": self.view.value,
                "test_code": self.test_code,
                "test_name": self.test_name,
                "candidate_name": self.candidate_name,
                "candidate_email": self.candidate_email,
                "total_questions": len(self.questions),
                "answered_count": self.answered_count,
                "elapsed_seconds": elapsed,
                "elapsed_formatted": format_duration(elapsed),
                "submitting": self.submitting,
            }
            if self.view == View.TESTING:
                question = self.current_question
                data["current_index"] = self.current_index
                data["is_last"] = self.is_last
                data["question"] = {
                    **question.model_dump(),
                    "selected": self.answers.get(question.question_id),
                }
                data["statuses"] = [
                    status.value if status else None
                    for status in (
                        self.question_status.get(index)
                        for index in range(len(self.questions))
                    )
                ]
                data["counts"] = self.status_counts()
            return data
