from typing import Annotated

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

import portal.dependencies.auth as auth_dependencies
from portal.app import app
from portal.dependencies.auth import get_admin_client, get_auth_context, get_public_client
from portal.routes import auth as auth_routes
from portal.routes.candidate import get_handoff_store, get_session_store
from portal.services.auth_context import AuthContext, AuthRegistry
from portal.services.session_store import HandoffStore, SessionStore


class FakeBackend:
    """Stands in for BackendClient; records writes and serves canned data."""

    def __init__(self) -> None:
        self.categories = [
            {"id": 1, "name": "Database", "parent_category": None},
            {"id": 2, "name": "SQL", "parent_category": "Database"},
            {"id": 3, "name": "Python", "parent_category": "Main Category"},
        ]
        self.questions = [
            {"id": 10, "question_text": "What is a join?", "category_name": "SQL", "difficulty": "Easy"},
            {"id": 11, "question_text": "What is the GIL?", "category_name": "Python", "difficulty": "Hard"},
        ]
        self.public_test = {
            "test_name": "Backend screening",
            "questions": [
                {"question_id": 10, "question": "What is a join?", "options": {"a": "A", "b": "B"}},
                {"question_id": 11, "question": "What is the GIL?", "options": {"a": "A", "b": "B"}},
            ],
        }
        self.login_result: dict[str, object] = {
            "token": "tok-admin",
            "user": {"email": "admin@example.com", "role": {"role_name": "Admin"}},
        }
        self.fail_with: Exception | None = None
        self.calls: list[tuple[str, object]] = []

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def login(self, email, password):
        self._maybe_fail()
        self.calls.append(("login", email))
        return self.login_result

    def get_categories(self):
        self._maybe_fail()
        return self.categories

    def create_category(self, data):
        self.calls.append(("create_category", data))
        return {"id": 99, **data}

    def update_category(self, category_id, data):
        self.calls.append(("update_category", (category_id, data)))
        return {"id": category_id, **data}

    def delete_category(self, category_id):
        self.calls.append(("delete_category", category_id))

    def get_questions(self, page, per_page, **filters):
        self._maybe_fail()
        self.calls.append(("get_questions", filters))
        return {"items": self.questions, "total": len(self.questions)}

    def create_question(self, data):
        self.calls.append(("create_question", data))
        return {"id": 12, **data}

    def update_question(self, question_id, data):
        self.calls.append(("update_question", (question_id, data)))
        return {"id": question_id, **data}

    def delete_question(self, question_id):
        self.calls.append(("delete_question", question_id))

    def get_tests(self):
        return [{"id": 1, "test_name": "Screening", "test_code": "abc123"}]

    def create_test(self, data):
        self.calls.append(("create_test", data))
        return {"id": 2, "test_code": "new001"}

    def delete_test(self, test_id):
        self.calls.append(("delete_test", test_id))

    def get_results(self):
        return [{"id": 5, "score_percentage": 50, "created_at": "2025-01-02T09:05:00"}]

    def get_result_detail(self, result_id):
        return {"candidate": {"name": "Sam", "score": 90}, "responses": []}

    def delete_result(self, result_id):
        self.calls.append(("delete_result", result_id))

    def get_public_test(self, test_code):
        self._maybe_fail()
        return self.public_test

    def submit_test_result(self, payload):
        self._maybe_fail()
        self.calls.append(("submit", payload))
        return {"message": "ok"}


def _admin_override(backend: FakeBackend):
    def get_backend(
        auth: Annotated[AuthContext, Depends(get_auth_context)],
    ) -> FakeBackend:
        return backend

    return get_backend


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def registry(monkeypatch) -> AuthRegistry:
    fresh = AuthRegistry()
    monkeypatch.setattr(auth_dependencies, "auth_registry", fresh)
    monkeypatch.setattr(auth_routes, "auth_registry", fresh)
    return fresh


@pytest.fixture
def stores() -> tuple[HandoffStore, SessionStore]:
    return HandoffStore(), SessionStore()


@pytest.fixture
def client(backend, registry, stores, monkeypatch):
    monkeypatch.setenv("BACKEND_API_URL", "http://backend.test/api")
    handoffs, sessions = stores
    app.dependency_overrides[get_public_client] = lambda: backend
    app.dependency_overrides[get_admin_client] = _admin_override(backend)
    app.dependency_overrides[get_handoff_store] = lambda: handoffs
    app.dependency_overrides[get_session_store] = lambda: sessions
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client, registry) -> dict[str, str]:
    registry.sign_in("tok-admin", {"email": "admin@example.com", "role": {"role_name": "Admin"}})
    return {"Authorization": "Bearer tok-admin"}
