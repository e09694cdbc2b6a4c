"""Test assembly from the question bank."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from portal.config import DIFFICULTIES
from portal.models.questions import Question
from portal.services.category_tree import CategoryLike, derived_roots, effective_root

log = logging.getLogger(__name__)

ALL_DIFFICULTIES = "ALL"


class BuilderError(ValueError):
    """Invalid test assembly request."""


@dataclass
class RootGroup:
    """Questions under one root, split into subcategories and direct members."""

    name: str
    total: int = 0
    subcategories: dict[str, list[Question]] = field(default_factory=dict)
    direct: list[Question] = field(default_factory=list)

    def add(self, question: Question) -> None:
        self.total += 1
        if question.category_name != self.name:
            self.subcategories.setdefault(question.category_name, []).append(question)
        else:
            self.direct.append(question)


def filter_by_difficulty(questions: Sequence[Question], difficulty: str) -> list[Question]:
    if difficulty == ALL_DIFFICULTIES:
        return list(questions)
    return [q for q in questions if q.difficulty == difficulty]


def group_questions(
    categories: Sequence[CategoryLike], questions: Sequence[Question]
) -> tuple[dict[str, RootGroup], list[Question]]:
    """Group questions by effective root.

    Returns the groups (one per derived root, even when empty) and the
    questions whose category has no matching row.
    """
    groups = {name: RootGroup(name) for name in derived_roots(categories)}
    unassigned: list[Question] = []
    for question in questions:
        root = effective_root(categories, question)
        if root is None:
            log.warning(
                "Question %s has unknown category '%s'", question.id, question.category_name
            )
            unassigned.append(question)
            continue
        groups.setdefault(root, RootGroup(root)).add(question)
    return groups, unassigned


def _question_entry(question: Question, selected: set[int]) -> dict[str, object]:
    return {
        "id": question.id,
        "question_text": question.question_text,
        "difficulty": question.difficulty,
        "selected": question.id in selected,
    }


def builder_view(
    categories: Sequence[CategoryLike],
    questions: Sequence[Question],
    difficulty_filters: dict[str, str] | None = None,
    selected_ids: Sequence[int] = (),
) -> dict[str, object]:
    """Build the question picker tree with per-root difficulty filters applied."""
    difficulty_filters = difficulty_filters or {}
    selected = set(selected_ids)
    groups, unassigned = group_questions(categories, questions)

    roots = []
    for name in sorted(groups):
        group = groups[name]
        difficulty = difficulty_filters.get(name, ALL_DIFFICULTIES)
        if difficulty != ALL_DIFFICULTIES and difficulty not in DIFFICULTIES:
            raise BuilderError(f"Unknown difficulty '{difficulty}'")
        roots.append(
            {
                "name": name,
                "total": group.total,
                "difficulty": difficulty,
                "direct": [
                    _question_entry(q, selected)
                    for q in filter_by_difficulty(group.direct, difficulty)
                ],
                "subcategories": [
                    {
                        "name": sub_name,
                        "total": len(sub_questions),
                        "questions": [
                            _question_entry(q, selected)
                            for q in filter_by_difficulty(sub_questions, difficulty)
                        ],
                    }
                    for sub_name, sub_questions in sorted(group.subcategories.items())
                ],
            }
        )

    return {
        "roots": roots,
        "unassigned": [_question_entry(q, selected) for q in unassigned],
        "selected_count": len(selected),
    }


def build_test_payload(
    test_name: str,
    questions: Sequence[Question],
    selected_ids: Sequence[int],
) -> dict[str, object]:
    """Build the create-test body from the selected question ids, in selection order."""
    test_name = test_name.strip()
    if not test_name:
        raise BuilderError("Please enter a test name")
    if not selected_ids:
        raise BuilderError("Please select at least one question")

    by_id = {q.id: q for q in questions}
    missing = [qid for qid in selected_ids if qid not in by_id]
    if missing:
        raise BuilderError(
            "Unknown question ids: " + ", ".join(str(qid) for qid in missing)
        )

    ordered = list(dict.fromkeys(selected_ids))
    return {
        "test_name": test_name,
        "questions": [
            {
                "question_id": q.id,
                "answer": q.correct_option,
                "options": q.options,
                "category": {"id": q.category_id, "name": q.category_name},
                "question": q.question_text,
                "difficulty": q.difficulty,
            }
            for q in (by_id[qid] for qid in ordered)
        ],
    }
