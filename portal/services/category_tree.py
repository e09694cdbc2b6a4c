"""Two-level category hierarchy resolution.

The backend returns categories as a flat list. A category is a *root* when
its ``parent_category`` is empty or the "Main Category" marker; otherwise
``parent_category`` holds the *name* of its root. Every picker in the portal
(question editor, question filter bar, bulk importer, test builder) goes
through the helpers here instead of re-deriving the tree.

All lookups are exact, case-sensitive name matches. A name lookup that hits
more than one row raises ``DuplicateCategoryNameError``.
"""
from __future__ import annotations

from collections import Counter
from typing import Callable, Protocol, Sequence

from portal.config import MAIN_CATEGORY_MARKER


class CategoryLike(Protocol):
    id: int
    name: str
    parent_category: str | None


class CategoryTreeError(ValueError):
    """Base class for category validation failures."""


class CategoryNotFoundError(CategoryTreeError):
    """Raised when a selection does not resolve to a concrete category."""


class DuplicateCategoryNameError(CategoryTreeError):
    """Raised when a name lookup is ambiguous."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Category name '{name}' is not unique")


class CategoryHierarchyError(CategoryTreeError):
    """Raised when a write would break the two-level tree."""


def is_root(category: CategoryLike) -> bool:
    """Check whether a category has no parent."""
    parent = category.parent_category
    return not parent or parent == MAIN_CATEGORY_MARKER


def parent_name(category: CategoryLike) -> str | None:
    """Get the parent name of a subcategory, None for roots."""
    if is_root(category):
        return None
    return category.parent_category


def normalize_parent(value: str | None) -> str | None:
    """Map picker values meaning "no parent" to None."""
    if value is None:
        return None
    value = value.strip()
    if not value or value == "none" or value == MAIN_CATEGORY_MARKER:
        return None
    return value


def derived_roots(categories: Sequence[CategoryLike]) -> list[str]:
    """Get every pickable root name, sorted.

    A name referenced as a parent counts as a root even when no root row
    exists for it.
    """
    roots = {c.name for c in categories if is_root(c)}
    roots.update(c.parent_category for c in categories if not is_root(c))
    return sorted(roots)


def children_of(
    categories: Sequence[CategoryLike], root_name: str
) -> list[CategoryLike]:
    """Get the assignable categories under a root.

    Includes the root row itself (when one exists) so a root can be picked
    directly as well as act as a parent.
    """
    return [
        c
        for c in categories
        if (not is_root(c) and c.parent_category == root_name)
        or (is_root(c) and c.name == root_name)
    ]


def _find_unique(
    categories: Sequence[CategoryLike],
    name: str,
    predicate: Callable[[CategoryLike], bool] | None = None,
) -> CategoryLike | None:
    matches = [
        c for c in categories if c.name == name and (predicate is None or predicate(c))
    ]
    if len(matches) > 1:
        raise DuplicateCategoryNameError(name)
    return matches[0] if matches else None


def find_category(
    categories: Sequence[CategoryLike], name: str
) -> CategoryLike | None:
    """Find the category row with the given name."""
    return _find_unique(categories, name)


def find_root(categories: Sequence[CategoryLike], name: str) -> CategoryLike | None:
    """Find the root row with the given name."""
    return _find_unique(categories, name, is_root)


def resolve_category_id(
    categories: Sequence[CategoryLike],
    root_name: str,
    subcategory: int | str | None = None,
) -> int:
    """Resolve a (root, subcategory) selection to a category id for writes.

    ``subcategory`` is either an id picked from ``children_of`` or a
    subcategory name (bulk import rows). An id is used as-is once it is known
    to exist. A name is looked up among the root's children and falls back to
    the root row when absent.

    Raises:
        CategoryNotFoundError: nothing resolves; the write must be rejected.
        DuplicateCategoryNameError: a name lookup is ambiguous.
    """
    if isinstance(subcategory, int):
        if any(c.id == subcategory for c in categories):
            return subcategory
        raise CategoryNotFoundError(f"Subcategory {subcategory} not found")

    if subcategory:
        sub = _find_unique(children_of(categories, root_name), subcategory)
        if sub is not None:
            return sub.id

    root = find_root(categories, root_name) if root_name else None
    if root is None:
        if subcategory:
            raise CategoryNotFoundError(
                f"Category not found for: {root_name} / {subcategory}"
            )
        raise CategoryNotFoundError(f"Category not found for: {root_name}")
    return root.id


def effective_root(categories: Sequence[CategoryLike], question) -> str | None:
    """Get the root name a question belongs to.

    Returns None when the question's category has no matching row; callers
    must surface that instead of dropping the question.
    """
    category = find_category(categories, question.category_name)
    if category is None:
        return None
    return parent_name(category) or category.name


def editor_selection(
    categories: Sequence[CategoryLike], question
) -> tuple[str, int | None]:
    """Map a stored question back to the editor's (root, subcategory id) pickers."""
    category = find_category(categories, question.category_name)
    if category is None:
        return "", None
    parent = parent_name(category)
    if parent:
        return parent, category.id
    return category.name, None


def question_filters(
    categories: Sequence[CategoryLike],
    root_name: str | None = None,
    subcategory_name: str | None = None,
) -> dict[str, object]:
    """Translate the question list's category pickers into backend filters.

    A root with no row of its own filters by ``parent_category`` group.
    """
    if subcategory_name:
        pool = children_of(categories, root_name) if root_name else categories
        sub = _find_unique(pool, subcategory_name)
        if sub is None:
            raise CategoryNotFoundError(f"Subcategory '{subcategory_name}' not found")
        return {"category_id": sub.id}
    if root_name:
        root = find_root(categories, root_name)
        if root is not None:
            return {"category_id": root.id}
        return {"parent_category": root_name}
    return {}


def duplicate_names(categories: Sequence[CategoryLike]) -> list[str]:
    """Get the names shared by more than one category."""
    counts = Counter(c.name for c in categories)
    return sorted(name for name, count in counts.items() if count > 1)


def validate_category_write(
    categories: Sequence[CategoryLike],
    name: str,
    parent: str | None,
    category_id: int | None = None,
) -> str | None:
    """Check a category create/update against the tree rules.

    Returns the normalized parent name (None for a root).
    """
    name = name.strip()
    if not name:
        raise CategoryTreeError("Name is required")

    others = [c for c in categories if c.id != category_id]
    if any(c.name == name for c in others):
        raise DuplicateCategoryNameError(name)

    parent = normalize_parent(parent)
    if parent is None:
        return None
    if parent == name:
        raise CategoryHierarchyError("A category cannot be its own parent")
    if any(c.name == parent and not is_root(c) for c in others):
        raise CategoryHierarchyError(f"'{parent}' is a subcategory")
    if parent not in derived_roots(others):
        raise CategoryHierarchyError(f"Parent '{parent}' is not a root category")

    if category_id is not None:
        current = next((c for c in categories if c.id == category_id), None)
        if current is not None and any(
            parent_name(c) == current.name for c in others
        ):
            raise CategoryHierarchyError(
                f"'{current.name}' has subcategories and cannot become one"
            )
    return parent
