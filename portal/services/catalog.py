"""Load category and question lists from the backend into models."""
from __future__ import annotations

import math

from portal.client import BackendClient
from portal.models.categories import Category
from portal.models.questions import Question, QuestionPage


def load_categories(client: BackendClient) -> list[Category]:
    """Fetch the flat category list."""
    return [Category.model_validate(item) for item in client.get_categories()]


def load_question_page(
    client: BackendClient, page: int, per_page: int, **filters: object
) -> QuestionPage:
    """Fetch one page of the question bank."""
    data = client.get_questions(page, per_page, **filters)
    items = [Question.model_validate(item) for item in data.get("items", [])]
    total = int(data.get("total") or len(items))
    return QuestionPage(
        items=items,
        total=total,
        page=page,
        per_page=per_page,
        total_pages=math.ceil(total / per_page) if per_page else 0,
    )
