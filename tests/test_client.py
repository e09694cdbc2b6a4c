import pytest
import requests

from portal.client import BackendClient, BackendError, BackendUnauthorized
from portal.services.auth_context import AuthContext


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.content = b"" if payload is None and text is None else b"x"
        self._text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.calls = []
        self.responses = list(responses or [])
        self.error = error

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append((method, url, headers, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def test_client_sends_bearer_token_and_params() -> None:
    session = FakeSession([FakeResponse(payload={"items": [], "total": 0})])
    client = BackendClient(
        base_url="http://backend/", auth=AuthContext(token="tok"), session=session
    )

    client.get_questions(2, 25, category_id=3, parent_category=None, difficulty="Easy")

    method, url, headers, kwargs = session.calls[0]
    assert method == "GET"
    assert url == "http://backend/questions/"
    assert headers == {"Authorization": "Bearer tok"}
    assert kwargs["params"] == {"page": 2, "per_page": 25, "category_id": 3, "difficulty": "Easy"}
    assert session.headers["Content-Type"] == "application/json"


def test_client_without_auth_sends_no_header() -> None:
    session = FakeSession([FakeResponse(payload={"test_name": "T", "questions": []})])
    client = BackendClient(base_url="http://backend", session=session)
    assert client.get_public_test("abc")["test_name"] == "T"
    assert session.calls[0][1] == "http://backend/candidates/test/abc"
    assert session.calls[0][2] == {}


def test_unauthorized_clears_auth_context() -> None:
    auth = AuthContext(token="tok", user={"email": "a@b.c"}, role="Admin")
    session = FakeSession([FakeResponse(401, {"error": "Token expired"})])
    client = BackendClient(base_url="http://backend", auth=auth, session=session)

    with pytest.raises(BackendUnauthorized) as exc_info:
        client.get_categories()

    assert exc_info.value.message == "Token expired"
    assert not auth.is_authenticated
    assert auth.role is None


def test_error_message_from_backend_body() -> None:
    session = FakeSession([FakeResponse(400, {"error": "Name exists"})])
    client = BackendClient(base_url="http://backend", session=session)
    with pytest.raises(BackendError) as exc_info:
        client.create_category({"name": "x"})
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Name exists"


def test_error_without_json_body_uses_fallback() -> None:
    session = FakeSession([FakeResponse(500, text="boom")])
    client = BackendClient(base_url="http://backend", session=session)
    with pytest.raises(BackendError) as exc_info:
        client.get_tests()
    assert exc_info.value.message == "Request failed with status 500"


def test_network_failure_becomes_backend_error() -> None:
    session = FakeSession(error=requests.ConnectionError("refused"))
    client = BackendClient(base_url="http://backend", session=session)
    with pytest.raises(BackendError) as exc_info:
        client.submit_test_result({"testId": "abc"})
    assert exc_info.value.status_code is None


def test_empty_body_returns_none() -> None:
    session = FakeSession([FakeResponse(204)])
    client = BackendClient(base_url="http://backend", session=session)
    assert client.delete_result(7) is None
    assert session.calls[0][:2] == ("DELETE", "http://backend/candidates/response/7")


def test_non_json_body_becomes_backend_error() -> None:
    session = FakeSession([FakeResponse(200, text="OK")])
    client = BackendClient(base_url="http://backend", session=session)
    with pytest.raises(BackendError) as excinfo:
        client.submit_test_result({"testId": "abc"})
    assert excinfo.value.message == "Received an invalid response from the server"
    assert excinfo.value.status_code == 200


def test_missing_backend_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BACKEND_API_URL", raising=False)
    with pytest.raises(RuntimeError):
        BackendClient()
