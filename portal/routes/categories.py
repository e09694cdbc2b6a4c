"""Category management endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from portal.client import BackendClient
from portal.dependencies.auth import get_admin_client
from portal.models.categories import Category, CategoryWrite
from portal.services.catalog import load_categories
from portal.services.category_tree import (
    CategoryTreeError,
    children_of,
    derived_roots,
    duplicate_names,
    validate_category_write,
)

router = APIRouter(prefix="/api/categories", tags=["categories"])


def _matches(category: Category, query: str) -> bool:
    return query in category.name.lower() or (
        category.parent_category is not None
        and query in category.parent_category.lower()
    )


def _write_payload(
    categories: list[Category], data: CategoryWrite, category_id: int | None = None
) -> dict[str, object]:
    try:
        parent = validate_category_write(
            categories, data.name, data.parent_category, category_id
        )
    except CategoryTreeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    description = (data.description or "").strip()
    return {
        "name": data.name.strip(),
        "description": description or None,
        "parent_category": parent,
    }


@router.get("")
def list_categories(
    client: Annotated[BackendClient, Depends(get_admin_client)],
    search: str = "",
) -> dict[str, object]:
    """List categories with picker options."""
    categories = load_categories(client)
    query = search.strip().lower()
    items = [c for c in categories if _matches(c, query)] if query else categories
    return {
        "items": [c.model_dump() for c in items],
        "roots": derived_roots(categories),
        "duplicate_names": duplicate_names(categories),
    }


@router.get("/children")
def list_children(
    client: Annotated[BackendClient, Depends(get_admin_client)],
    root: str = Query(..., min_length=1),
) -> list[dict[str, object]]:
    """List the categories assignable under a root."""
    return [c.model_dump() for c in children_of(load_categories(client), root)]


@router.post("")
def create_category(
    data: CategoryWrite,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, object]:
    """Create a category."""
    payload = _write_payload(load_categories(client), data)
    result = client.create_category(payload)
    return {"message": "Category created successfully!", "category": result}


@router.put("/{category_id}")
def update_category(
    category_id: int,
    data: CategoryWrite,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, object]:
    """Update a category."""
    categories = load_categories(client)
    if not any(c.id == category_id for c in categories):
        raise HTTPException(status_code=404, detail="Category not found")
    payload = _write_payload(categories, data, category_id)
    result = client.update_category(category_id, payload)
    return {"message": "Category updated successfully!", "category": result}


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, str]:
    """Delete a category."""
    client.delete_category(category_id)
    return {"status": "deleted"}
