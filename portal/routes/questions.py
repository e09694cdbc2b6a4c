"""Question bank endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import PlainTextResponse

from portal.client import BackendClient
from portal.config import DEFAULT_PER_PAGE, DIFFICULTIES, MAX_UPLOAD_BYTES, OPTION_KEYS
from portal.dependencies.auth import get_admin_client, require_importer
from portal.models.categories import Category
from portal.models.questions import QuestionWrite
from portal.services.bulk_import import CSVImportError, import_questions, template_csv
from portal.services.catalog import load_categories, load_question_page
from portal.services.category_tree import (
    CategoryTreeError,
    children_of,
    derived_roots,
    editor_selection,
    question_filters,
    resolve_category_id,
)
from portal.utils.validation import require_fields

router = APIRouter(prefix="/api/questions", tags=["questions"])


def _question_payload(categories: list[Category], data: QuestionWrite) -> dict[str, object]:
    options = {key: (data.options.get(key) or "").strip() for key in OPTION_KEYS}
    require_fields(
        category=data.category,
        question_text=data.question_text,
        option_a=options["a"],
        option_b=options["b"],
    )
    correct = data.correct_option.strip().lower()
    if correct not in OPTION_KEYS or not options[correct]:
        raise HTTPException(status_code=400, detail="Correct option must be a filled-in option")

    try:
        category_id = resolve_category_id(categories, data.category, data.subcategory_id)
    except CategoryTreeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "category_id": category_id,
        "question_text": data.question_text.strip(),
        "options": options,
        "correct_option": correct,
        "difficulty": data.difficulty,
    }


@router.get("")
def list_questions(
    client: Annotated[BackendClient, Depends(get_admin_client)],
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=100),
    category: str = "all",
    subcategory: str = "all",
    difficulty: str = "all",
) -> dict[str, object]:
    """List questions with category pickers resolved to backend filters."""
    categories = load_categories(client)
    root = None if category == "all" else category
    sub = None if subcategory == "all" else subcategory
    try:
        filters = question_filters(categories, root, sub)
    except CategoryTreeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if difficulty != "all":
        if difficulty not in DIFFICULTIES:
            raise HTTPException(status_code=400, detail="Invalid difficulty")
        filters["difficulty"] = difficulty

    result = load_question_page(client, page, per_page, **filters)
    items = []
    for question in result.items:
        try:
            root_name, subcategory_id = editor_selection(categories, question)
        except CategoryTreeError:
            root_name, subcategory_id = "", None
        items.append(
            {
                **question.model_dump(),
                "editor": {"category": root_name, "subcategory_id": subcategory_id},
            }
        )

    return {
        "items": items,
        "total": result.total,
        "page": result.page,
        "per_page": result.per_page,
        "total_pages": result.total_pages,
        "roots": derived_roots(categories),
        "subcategories": [c.model_dump() for c in children_of(categories, root)]
        if root
        else [],
    }


@router.post("")
def create_question(
    data: QuestionWrite,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, object]:
    """Create a question."""
    payload = _question_payload(load_categories(client), data)
    return {"question": client.create_question(payload)}


@router.put("/{question_id}")
def update_question(
    question_id: int,
    data: QuestionWrite,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, object]:
    """Update a question."""
    payload = _question_payload(load_categories(client), data)
    return {"question": client.update_question(question_id, payload)}


@router.delete("/{question_id}")
def delete_question(
    question_id: int,
    client: Annotated[BackendClient, Depends(get_admin_client)],
) -> dict[str, str]:
    """Delete a question."""
    client.delete_question(question_id)
    return {"status": "deleted"}


@router.get("/import/template", response_class=PlainTextResponse)
def download_template() -> PlainTextResponse:
    """Download the bulk import CSV template."""
    return PlainTextResponse(
        template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="questions_template.csv"'},
    )


@router.post("/import", dependencies=[Depends(require_importer)])
def bulk_import(
    client: Annotated[BackendClient, Depends(get_admin_client)],
    file: UploadFile = File(...),
) -> dict[str, object]:
    """Import questions from an uploaded CSV; rows succeed or fail independently."""
    content = file.file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File is too large (limit {MAX_UPLOAD_BYTES} bytes)",
        )
    categories = load_categories(client)
    try:
        report = import_questions(client, categories, content)
    except CSVImportError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return report.as_dict()
