"""Tests for the authenticated client and HTTP repository against a mock backend."""

from datetime import date

import httpx
import pytest

from core.errors import ApiError, AuthenticationError, SessionExpiredError
from core.models import UploadFile, UploadRequest
from infrastructure.api_client import AuthenticatedClient
from infrastructure.image_repository import HttpImageRepository

BASE = "https://api.test/api"
DAY = date(2024, 5, 1)


class Backend:
    """Tiny fake of the daycare image API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.images = [
            {"id": 1, "name": "Art Class", "date": "2024-05-01", "imageUrl": "https://x/1.jpg"},
            {"id": 2, "name": "Art Class", "date": "2024-05-01", "imageUrl": "https://x/2.jpg"},
        ]
        self.delete_status = 200
        self.status_override: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_override is not None:
            return httpx.Response(self.status_override, json={"message": "nope"})
        path = request.url.path
        if request.method == "GET" and path == "/api/images/child/c1":
            return httpx.Response(200, json=self.images)
        if request.method == "DELETE" and path.startswith("/api/images/"):
            return httpx.Response(self.delete_status, json={"message": "ok"})
        if request.method == "GET" and path == "/api/activities":
            return httpx.Response(200, json={"activities": [{"id": 3, "title": "Painting"}]})
        if request.method == "POST" and path == "/api/images/upload/c1":
            return httpx.Response(201, json={"data": []})
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def backend():
    return Backend()


@pytest.fixture
def client(backend):
    c = AuthenticatedClient(BASE, token="tok", transport=httpx.MockTransport(backend))
    yield c
    c.close()


@pytest.fixture
def repo(client):
    return HttpImageRepository(client, daycare_id="1")


class TestAuthenticatedClient:
    def test_bearer_header_and_url_join(self, client, backend):
        client.request("GET", "images/child/c1")
        req = backend.requests[-1]
        assert req.headers["Authorization"] == "Bearer tok"
        assert str(req.url) == f"{BASE}/images/child/c1"

    def test_absolute_url_used_verbatim(self, client):
        assert client.resolve_url("https://cdn.test/a.jpg") == "https://cdn.test/a.jpg"

    def test_missing_token(self, backend):
        c = AuthenticatedClient(BASE, token=None, transport=httpx.MockTransport(backend))
        with pytest.raises(AuthenticationError):
            c.request("GET", "/images/child/c1")
        assert backend.requests == []

    def test_401_is_session_expired(self, client, backend):
        backend.status_override = 401
        with pytest.raises(SessionExpiredError):
            client.request("GET", "/images/child/c1")

    def test_error_message_from_body(self, client, backend):
        backend.status_override = 500
        with pytest.raises(ApiError) as exc:
            client.request("GET", "/images/child/c1")
        assert exc.value.status == 500
        assert exc.value.message == "nope"

    def test_transport_error_wrapped(self):
        def boom(request):
            raise httpx.ConnectError("refused", request=request)

        c = AuthenticatedClient(BASE, token="t", transport=httpx.MockTransport(boom))
        with pytest.raises(ApiError) as exc:
            c.request("GET", "/x")
        assert exc.value.status is None


class TestHttpImageRepository:
    def test_fetch_images_sends_date(self, repo, backend):
        images = repo.fetch_images("c1", DAY)
        assert [img.id for img in images] == [1, 2]
        assert backend.requests[-1].url.params["date"] == "2024-05-01"

    def test_fetch_failure_raises(self, repo, backend):
        backend.status_override = 500
        with pytest.raises(ApiError):
            repo.fetch_images("c1", DAY)

    def test_delete_success(self, repo, backend):
        result = repo.delete_image(2)
        assert result.success
        assert backend.requests[-1].method == "DELETE"
        assert backend.requests[-1].url.path == "/api/images/2"

    def test_delete_failure_reported_not_raised(self, repo, backend):
        backend.delete_status = 500
        result = repo.delete_image(2)
        assert not result.success
        assert result.reason

    def test_fetch_activities(self, repo, backend):
        acts = repo.fetch_activities("c1", DAY)
        assert [a.title for a in acts] == ["Painting"]
        assert backend.requests[-1].url.params["childId"] == "c1"

    def test_upload_multipart(self, repo, backend):
        request = UploadRequest(
            child_id="c1",
            date=DAY,
            activity_name="Painting",
            files=[UploadFile("a.jpg", b"\xff\xd8data")],
        )
        assert repo.upload_images(request) is True
        sent = backend.requests[-1]
        assert sent.headers["Content-Type"].startswith("multipart/form-data")
        body = sent.read()
        assert b'name="name"' in body and b"Painting" in body
        assert b'name="daycareId"' in body
        assert b'filename="a.jpg"' in body

    def test_upload_without_files_is_noop(self, repo, backend):
        request = UploadRequest(child_id="c1", date=DAY, activity_name="Painting")
        assert repo.upload_images(request) is False
        assert backend.requests == []
