"""Bulk question import from CSV."""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from portal.client import BackendClient, BackendError, BackendUnauthorized
from portal.config import DEFAULT_DIFFICULTY, DIFFICULTIES, OPTION_KEYS
from portal.services.category_tree import CategoryLike, CategoryTreeError, resolve_category_id

log = logging.getLogger(__name__)

TEMPLATE_HEADERS = [
    "question_text",
    "category_name",
    "subcategory_name",
    "difficulty_level",
    "option_a",
    "option_b",
    "option_c",
    "option_d",
    "correct_answer",
]
TEMPLATE_SAMPLE = [
    "What is SQL?",
    "Database",
    "SQL",
    "Easy",
    "Structured Query Language",
    "Strong Question Language",
    "Structured Question List",
    "None",
    "a",
]


class CSVImportError(Exception):
    """The uploaded file could not be read as CSV."""


@dataclass
class RowFailure:
    row_number: int
    reason: str


@dataclass
class ImportReport:
    total: int
    succeeded: int = 0
    failures: list[RowFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def status(self) -> str:
        if self.succeeded == 0:
            return "error"
        return "success" if self.succeeded == self.total else "info"

    @property
    def message(self) -> str:
        if self.total == 0:
            return "No valid data found in CSV."
        if self.succeeded == 0:
            return f"Failed to upload questions. All {self.failed} failed."
        message = f"Uploaded {self.succeeded}/{self.total} questions."
        if self.failed:
            message += f" ({self.failed} failed)"
        return message

    def as_dict(self) -> dict[str, object]:
        return {
            "status": self.status,
            "message": self.message,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failures": [
                {"row": failure.row_number, "reason": failure.reason}
                for failure in self.failures
            ],
        }


def template_csv() -> str:
    """Render the downloadable import template."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TEMPLATE_HEADERS)
    writer.writerow(TEMPLATE_SAMPLE)
    return buffer.getvalue()


def parse_rows(content: bytes | str) -> Iterator[tuple[int, dict[str, str]]]:
    """Yield (row_number, row) for each non-blank data row.

    Raises:
        CSVImportError: the file cannot be decoded or parsed
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise CSVImportError(f"Failed to decode file as UTF-8: {exc}") from exc

    reader = csv.DictReader(io.StringIO(content))
    try:
        for row_number, row in enumerate(reader, start=2):
            cleaned = {
                key.strip(): (value or "").strip()
                for key, value in row.items()
                if key is not None
            }
            if not any(cleaned.values()):
                continue
            yield row_number, cleaned
    except csv.Error as exc:
        raise CSVImportError(f"CSV parsing error: {exc}") from exc


def build_question_payload(
    categories: Sequence[CategoryLike], row: dict[str, str]
) -> dict[str, object]:
    """Map one CSV row to a question create payload."""
    category_id = resolve_category_id(
        categories, row.get("category_name", ""), row.get("subcategory_name") or None
    )

    question_text = row.get("question_text", "")
    if not question_text:
        raise ValueError("question_text is empty")

    correct = row.get("correct_answer", "").lower()
    if correct not in OPTION_KEYS:
        raise ValueError(f"correct_answer '{correct}' is not one of {', '.join(OPTION_KEYS)}")

    difficulty = row.get("difficulty_level") or DEFAULT_DIFFICULTY
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty '{difficulty}'")

    return {
        "category_id": category_id,
        "question_text": question_text,
        "options": {key: row.get(f"option_{key}", "") for key in OPTION_KEYS},
        "correct_option": correct,
        "difficulty": difficulty,
    }


def import_questions(
    client: BackendClient,
    categories: Sequence[CategoryLike],
    content: bytes | str,
) -> ImportReport:
    """Create one question per row; rows succeed or fail independently."""
    rows = list(parse_rows(content))
    report = ImportReport(total=len(rows))

    for row_number, row in rows:
        try:
            payload = build_question_payload(categories, row)
            client.create_question(payload)
        except BackendUnauthorized:
            raise
        except (CategoryTreeError, ValueError, BackendError) as exc:
            log.warning("Import row %s failed: %s", row_number, exc)
            report.failures.append(RowFailure(row_number, str(exc)))
            continue
        report.succeeded += 1

    log.info("Bulk import finished: %s", report.message)
    return report
