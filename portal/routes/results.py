"""Candidate result endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from portal.client import BackendClient
from portal.dependencies.auth import get_admin_client
from portal.services.results import result_detail_view, summarize_results

router = APIRouter(prefix="/api/results", tags=["results"])


@router.get("")
def list_results(
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> list[dict[str, object]]:
    """List candidate results."""
    return summarize_results(client.get_results())


@router.get("/{result_id}")
def get_result(
    result_id: int,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, object]:
    """Get one result with responses grouped by category."""
    return result_detail_view(client.get_result_detail(result_id))


@router.delete("/{result_id}")
def delete_result(
    result_id: int,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, str]:
    """Delete a candidate result."""
    client.delete_result(result_id)
    return {"status": "deleted"}
