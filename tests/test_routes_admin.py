from portal.client import BackendError, BackendUnauthorized
from portal.routes import questions as questions_routes


CSV_HEADER = (
    "question_text,category_name,subcategory_name,difficulty_level,"
    "option_a,option_b,option_c,option_d,correct_answer"
)


def test_health(client) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_login_registers_context(client, backend) -> None:
    response = client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": "secret"}
    )
    assert response.status_code == 200
    assert response.json()["token"] == "tok-admin"
    assert response.json()["role"] == "Admin"

    headers = {"Authorization": "Bearer tok-admin"}
    me = client.get("/api/auth/me", headers=headers).json()
    assert me["user"]["email"] == "admin@example.com"
    assert me["is_creator"] is False

    client.post("/api/auth/logout", headers=headers)
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_login_rejected(client, backend) -> None:
    backend.fail_with = BackendUnauthorized("Invalid credentials", 401)
    response = client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": "wrong"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_admin_routes_require_sign_in(client) -> None:
    response = client.get("/api/categories")
    assert response.status_code == 401
    response = client.get("/api/categories", headers={"Authorization": "Bearer unknown"})
    assert response.status_code == 401


def test_backend_401_redirects_to_login(client, backend, admin_headers) -> None:
    backend.fail_with = BackendUnauthorized("Session expired. Please log in again.", 401)
    response = client.get("/api/categories", headers=admin_headers)
    assert response.status_code == 401
    assert response.json()["redirect"] == "/login"


def test_invalid_backend_body_maps_to_bad_gateway(client, backend, admin_headers) -> None:
    backend.fail_with = BackendError("Received an invalid response from the server", 200)
    response = client.get("/api/categories", headers=admin_headers)
    assert response.status_code == 502
    assert response.json() == {"detail": "Received an invalid response from the server"}


def test_list_categories(client, admin_headers) -> None:
    body = client.get("/api/categories", headers=admin_headers).json()
    assert body["roots"] == ["Database", "Python"]
    assert body["duplicate_names"] == []

    body = client.get("/api/categories?search=data", headers=admin_headers).json()
    assert [item["name"] for item in body["items"]] == ["Database", "SQL"]

    children = client.get("/api/categories/children?root=Database", headers=admin_headers).json()
    assert [item["id"] for item in children] == [1, 2]


def test_create_category_validates_hierarchy(client, backend, admin_headers) -> None:
    response = client.post(
        "/api/categories", json={"name": "SQL", "parent_category": "Database"}, headers=admin_headers
    )
    assert response.status_code == 400

    response = client.post(
        "/api/categories", json={"name": "Joins", "parent_category": "SQL"}, headers=admin_headers
    )
    assert response.status_code == 400

    response = client.post(
        "/api/categories",
        json={"name": "NoSQL", "description": " ", "parent_category": "Database"},
        headers=admin_headers,
    )
    assert response.json()["message"] == "Category created successfully!"
    assert backend.calls[-1] == (
        "create_category",
        {"name": "NoSQL", "description": None, "parent_category": "Database"},
    )


def test_update_unknown_category(client, admin_headers) -> None:
    response = client.put("/api/categories/42", json={"name": "Go"}, headers=admin_headers)
    assert response.status_code == 404


def test_list_questions_resolves_filters(client, backend, admin_headers) -> None:
    response = client.get("/api/questions?category=Database", headers=admin_headers)
    body = response.json()

    assert ("get_questions", {"category_id": 1}) in backend.calls
    assert body["total_pages"] == 1
    assert body["items"][0]["editor"] == {"category": "Database", "subcategory_id": 2}
    assert body["items"][1]["editor"] == {"category": "Python", "subcategory_id": None}
    assert [item["name"] for item in body["subcategories"]] == ["Database", "SQL"]

    response = client.get("/api/questions?difficulty=Impossible", headers=admin_headers)
    assert response.status_code == 400


def test_create_question_resolves_category(client, backend, admin_headers) -> None:
    data = {
        "category": "Database",
        "subcategory_id": 2,
        "question_text": "What is an index?",
        "difficulty": "Medium",
        "options": {"a": "A lookup structure", "b": "A table"},
        "correct_option": "a",
    }
    response = client.post("/api/questions", json=data, headers=admin_headers)
    assert response.status_code == 200
    name, payload = backend.calls[-1]
    assert name == "create_question"
    assert payload["category_id"] == 2
    assert payload["options"] == {"a": "A lookup structure", "b": "A table", "c": "", "d": ""}

    response = client.post(
        "/api/questions", json={**data, "correct_option": "c"}, headers=admin_headers
    )
    assert response.status_code == 400

    response = client.post(
        "/api/questions", json={**data, "category": "Cloud", "subcategory_id": None},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_bulk_import_forbidden_for_creator(client, registry) -> None:
    registry.sign_in("tok-creator", {"role": {"role_name": "Creator"}})
    response = client.post(
        "/api/questions/import",
        files={"file": ("q.csv", CSV_HEADER + "\n", "text/csv")},
        headers={"Authorization": "Bearer tok-creator"},
    )
    assert response.status_code == 403


def test_bulk_import_reports_rows(client, backend, admin_headers) -> None:
    content = "\n".join(
        [
            CSV_HEADER,
            "What is SQL?,Database,SQL,Easy,A,B,C,D,a",
            "Broken row,Nowhere,,Easy,A,B,,,a",
        ]
    )
    response = client.post(
        "/api/questions/import",
        files={"file": ("q.csv", content, "text/csv")},
        headers=admin_headers,
    )
    body = response.json()
    assert body["status"] == "info"
    assert body["message"] == "Uploaded 1/2 questions. (1 failed)"
    assert body["failures"][0]["row"] == 3


def test_bulk_import_rejects_oversized_file(client, admin_headers, monkeypatch) -> None:
    monkeypatch.setattr(questions_routes, "MAX_UPLOAD_BYTES", 16)
    response = client.post(
        "/api/questions/import",
        files={"file": ("q.csv", CSV_HEADER + "\n", "text/csv")},
        headers=admin_headers,
    )
    assert response.status_code == 413


def test_import_template_download(client) -> None:
    response = client.get("/api/questions/import/template")
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.splitlines()[0] == CSV_HEADER


def test_tests_list_and_create(client, backend, admin_headers) -> None:
    tests = client.get("/api/tests", headers=admin_headers).json()
    assert tests[0]["candidate_link"].endswith("/candidate/abc123")

    response = client.post(
        "/api/tests",
        json={"test_name": "Screening", "question_ids": [11, 10, 11]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    name, payload = backend.calls[-1]
    assert name == "create_test"
    assert [q["question_id"] for q in payload["questions"]] == [11, 10]

    response = client.post(
        "/api/tests", json={"test_name": " ", "question_ids": [10]}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a test name"


def test_builder_view(client, admin_headers) -> None:
    response = client.post(
        "/api/tests/builder",
        json={"difficulty_filters": {"Python": "Easy"}, "selected_ids": [10]},
        headers=admin_headers,
    )
    body = response.json()
    assert body["selected_count"] == 1
    python = next(root for root in body["roots"] if root["name"] == "Python")
    assert python["direct"] == []

    response = client.post(
        "/api/tests/builder",
        json={"difficulty_filters": {"Python": "Trivial"}},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_result_detail(client, admin_headers) -> None:
    results = client.get("/api/results", headers=admin_headers).json()
    assert results[0]["score_band"] == "medium"
    detail = client.get("/api/results/5", headers=admin_headers).json()
    assert detail["candidate"]["status_text"] == "Excellent"
