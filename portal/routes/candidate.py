"""Candidate-facing test-taking endpoints.

Backend failures are reported inline (no login redirect); the candidate can
retry the same action.
"""
import logging
from typing import Annotated, Callable

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from portal.client import BackendClient, BackendError
from portal.dependencies.auth import get_public_client
from portal.models.candidate import (
    AssessmentDefinition,
    CandidateInfo,
    HandoffResponse,
    NavigateRequest,
    SelectRequest,
    StartRequest,
)
from portal.services.assessment_session import (
    AssessmentSession,
    InvalidTransitionError,
    SubmissionInFlightError,
)
from portal.services.session_store import (
    HandoffStore,
    SessionStore,
    handoff_store,
    session_store,
)
from portal.utils.validation import validate_id

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/candidate", tags=["candidate"])


def get_handoff_store() -> HandoffStore:
    return handoff_store


def get_session_store() -> SessionStore:
    return session_store


def _entry_url(test_code: str) -> str:
    return f"/candidate/{test_code}"


def _fetch_test(client: BackendClient, test_code: str) -> AssessmentDefinition:
    try:
        data = client.get_public_test(test_code)
    except BackendError as exc:
        raise HTTPException(
            status_code=404 if exc.status_code == 404 else 502,
            detail=exc.message
            or "Failed to load test information. Please check the link.",
        ) from exc
    try:
        return AssessmentDefinition.model_validate(data)
    except ValidationError as exc:
        log.warning("Malformed test payload for %s: %s", test_code, exc)
        raise HTTPException(status_code=502, detail="Received an invalid test definition") from exc


def _get_session(store: SessionStore, session_id: str) -> AssessmentSession:
    session = store.get(validate_id("sessionId", session_id))
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _apply(session: AssessmentSession, action: Callable[[], None]) -> dict[str, object]:
    try:
        action()
    except (InvalidTransitionError, SubmissionInFlightError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return session.snapshot()


@router.get("/{test_code}")
def get_entry(
    test_code: str,
    client: Annotated[BackendClient, Depends(get_public_client)],
) -> dict[str, object]:
    """Get the test name for the entry screen."""
    test_code = validate_id("testCode", test_code)
    definition = _fetch_test(client, test_code)
    return {
        "test_code": test_code,
        "test_name": definition.test_name,
        "total_questions": len(definition.questions),
    }


@router.post("/{test_code}", response_model=HandoffResponse)
def register_candidate(
    test_code: str,
    info: CandidateInfo,
    handoffs: Annotated[HandoffStore, Depends(get_handoff_store)],
) -> HandoffResponse:
    """Store the candidate's name and email for the test screen."""
    test_code = validate_id("testCode", test_code)
    handoff_id = handoffs.put(test_code, info.name, str(info.email))
    return HandoffResponse(
        handoff_id=handoff_id, start_url=f"{_entry_url(test_code)}/start"
    )


@router.post("/{test_code}/start")
def start_session(
    test_code: str,
    data: StartRequest,
    client: Annotated[BackendClient, Depends(get_public_client)],
    handoffs: Annotated[HandoffStore, Depends(get_handoff_store)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Load the test and open a session for the registered candidate."""
    test_code = validate_id("testCode", test_code)
    handoff = handoffs.get(data.handoff_id, test_code)
    if handoff is None:
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Candidate details are missing. Please start again.",
                "redirect": _entry_url(test_code),
            },
        )

    try:
        definition = _fetch_test(client, test_code)
        session = AssessmentSession(
            test_code=test_code,
            test_name=definition.test_name,
            candidate_name=handoff.candidate_name,
            candidate_email=handoff.candidate_email,
            questions=tuple(definition.questions),
        )
    except HTTPException as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail={"message": exc.detail, "redirect": _entry_url(test_code)},
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=400,
            detail={"message": str(exc), "redirect": _entry_url(test_code)},
        ) from exc

    session_id = sessions.add(session, data.handoff_id)
    log.info("Started session %s for test %s", session_id, test_code)
    return {"session_id": session_id, **session.snapshot()}


@router.get("/sessions/{session_id}")
def get_session(
    session_id: str,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Get the current session view."""
    return _get_session(sessions, session_id).snapshot()


@router.post("/sessions/{session_id}/select")
def select_option(
    session_id: str,
    data: SelectRequest,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Pick an option for the current question."""
    session = _get_session(sessions, session_id)
    return _apply(session, lambda: session.select(data.option))


@router.post("/sessions/{session_id}/skip")
def skip_question(
    session_id: str,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Skip the current question."""
    session = _get_session(sessions, session_id)
    return _apply(session, session.skip)


@router.post("/sessions/{session_id}/next")
def next_question(
    session_id: str,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Advance to the next question, or to preview from the last one."""
    session = _get_session(sessions, session_id)
    return _apply(session, session.next)


@router.post("/sessions/{session_id}/previous")
def previous_question(
    session_id: str,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Go back one question."""
    session = _get_session(sessions, session_id)
    return _apply(session, session.previous)


@router.post("/sessions/{session_id}/navigate")
def navigate(
    session_id: str,
    data: NavigateRequest,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Jump to a question from the navigator."""
    session = _get_session(sessions, session_id)
    return _apply(session, lambda: session.navigate(data.index))


@router.post("/sessions/{session_id}/review")
def review(
    session_id: str,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Return from preview to the first question."""
    session = _get_session(sessions, session_id)
    return _apply(session, session.review)


@router.post("/sessions/{session_id}/submit")
def submit(
    session_id: str,
    client: Annotated[BackendClient, Depends(get_public_client)],
    handoffs: Annotated[HandoffStore, Depends(get_handoff_store)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, object]:
    """Submit the answers; on success the session is torn down."""
    session = _get_session(sessions, session_id)
    try:
        payload = session.begin_submit()
    except (InvalidTransitionError, SubmissionInFlightError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    try:
        client.submit_test_result(payload.model_dump())
    except BackendError as exc:
        session.fail_submit()
        raise HTTPException(
            status_code=502, detail=exc.message or "Failed to submit test."
        ) from exc
    except Exception:
        session.fail_submit()
        raise

    session.complete_submit()
    handoff_id = sessions.handoff_for(session_id)
    if handoff_id:
        handoffs.clear(handoff_id)
    sessions.discard(session_id)
    log.info("Session %s submitted for test %s", session_id, session.test_code)
    return session.snapshot()
