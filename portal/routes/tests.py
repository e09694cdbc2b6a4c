"""Test assembly endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from portal.client import BackendClient
from portal.config import BUILDER_QUESTION_LIMIT, PUBLIC_BASE_URL
from portal.dependencies.auth import get_admin_client
from portal.models.tests import BuilderViewRequest, NewTestRequest
from portal.services.builder import BuilderError, build_test_payload, builder_view
from portal.services.catalog import load_categories, load_question_page
from portal.services.category_tree import CategoryTreeError

router = APIRouter(prefix="/api/tests", tags=["tests"])


def candidate_link(test_code: str) -> str:
    """Get the link a candidate opens to take a test."""
    return f"{PUBLIC_BASE_URL}/candidate/{test_code}"


def _with_link(test: dict[str, object]) -> dict[str, object]:
    test = dict(test)
    code = test.get("test_code")
    if code:
        test["candidate_link"] = candidate_link(str(code))
    return test


@router.get("")
def list_tests(
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> list[dict[str, object]]:
    """List the admin's tests with candidate links."""
    return [_with_link(test) for test in client.get_tests()]


@router.post("/builder")
def builder(
    state: BuilderViewRequest,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, object]:
    """Get the question picker tree for the test builder."""
    categories = load_categories(client)
    questions = load_question_page(client, 1, BUILDER_QUESTION_LIMIT).items
    try:
        return builder_view(
            categories, questions, state.difficulty_filters, state.selected_ids
        )
    except (BuilderError, CategoryTreeError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("")
def create_test(
    data: NewTestRequest,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, object]:
    """Create a test from selected bank questions."""
    questions = load_question_page(client, 1, BUILDER_QUESTION_LIMIT).items
    try:
        payload = build_test_payload(data.test_name, questions, data.question_ids)
    except BuilderError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    result = client.create_test(payload)
    return _with_link(result) if isinstance(result, dict) else {"test": result}


@router.delete("/{test_id}")
def delete_test(
    test_id: int,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, str]:
    """Delete a test."""
    client.delete_test(test_id)
    return {"status": "deleted"}
