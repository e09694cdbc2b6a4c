from portal.services.catalog import load_categories, load_question_page


class PageClient:
    def __init__(self, data) -> None:
        self.data = data

    def get_categories(self):
        return [{"id": 1, "name": "Database"}]

    def get_questions(self, page, per_page, **filters):
        return self.data


def test_missing_total_falls_back_to_item_count() -> None:
    items = [{"id": 1, "question_text": "Q", "category_name": "SQL"}]
    result = load_question_page(PageClient({"items": items, "total": None}), 1, 10)
    assert result.total == 1
    assert result.total_pages == 1


def test_page_count_rounds_up() -> None:
    result = load_question_page(PageClient({"items": [], "total": 21}), 3, 10)
    assert result.total_pages == 3
    assert result.page == 3


def test_load_categories() -> None:
    categories = load_categories(PageClient({}))
    assert categories[0].parent_category is None
