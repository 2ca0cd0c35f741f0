"""End-to-end tests of the HTTP surface with a fake object store."""

import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from helpers import make_image
from upload_broker.api.main import create_app
from upload_broker.core.entities.image import ImageStatus

ORIGIN = "http://localhost:5173"


def _request_upload(client, name="cat.png", content_type="image/png", size=2048):
    return client.post(
        "/images/upload-request",
        json={"fileName": name, "contentType": content_type, "fileSize": size},
    )


def _assert_error(response, status, code, message=None):
    assert response.status_code == status
    error = response.json()["error"]
    assert error["code"] == code
    assert error["requestId"]
    assert response.headers["X-Request-ID"] == error["requestId"]
    if message is not None:
        assert error["message"] == message


class TestUploadFlow:
    def test_request_confirm_list_view(self, client, storage):
        response = _request_upload(client)
        assert response.status_code == 200
        body = response.json()
        image, upload = body["image"], body["upload"]
        assert image["status"] == "requested"
        assert image["originalName"] == "cat.png"
        assert image["mimeType"] == "image/png"
        assert image["byteSize"] == 2048
        assert upload["method"] == "PUT"
        assert upload["headers"] == {"Content-Type": "image/png"}
        assert upload["expiresInSec"] == 300

        # not visible until confirmed
        assert client.get("/images").json() == {"items": []}
        _assert_error(client.get(f"/images/{image['id']}"), 404, "NotFound", "Image not found")

        storage.objects[image["objectKey"]] = "etag-1"
        response = client.post(
            "/images/upload-complete",
            json={"id": image["id"], "objectKey": image["objectKey"]},
        )
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

        listing = client.get("/images").json()
        assert [i["id"] for i in listing["items"]] == [image["id"]]
        assert "nextCursor" not in listing
        assert listing["items"][0]["uploadedAt"]

        meta = client.get(f"/images/{image['id']}").json()
        assert meta["objectKey"] == image["objectKey"]

        response = client.post("/images/view-urls", json={"requests": [{"id": image["id"]}], "ttlSec": 99999})
        results = response.json()["results"]
        assert len(results) == 1
        assert results[0]["id"] == image["id"]
        assert "X-Amz-Expires=300" in results[0]["url"]
        assert results[0]["expiresAt"]

    def test_confirm_twice_conflicts(self, client, storage):
        image = _request_upload(client).json()["image"]
        storage.objects[image["objectKey"]] = "etag-1"
        payload = {"id": image["id"], "objectKey": image["objectKey"]}

        assert client.post("/images/upload-complete", json=payload).status_code == 200
        _assert_error(
            client.post("/images/upload-complete", json=payload),
            409, "Conflict", "Image already processed",
        )

    def test_confirm_without_object(self, client):
        image = _request_upload(client).json()["image"]
        payload = {"id": image["id"], "objectKey": image["objectKey"]}

        _assert_error(
            client.post("/images/upload-complete", json=payload),
            404, "NotFound", "Object not found in storage",
        )
        _assert_error(client.post("/images/upload-complete", json=payload), 409, "Conflict")


class TestValidation:
    def test_disallowed_type(self, client):
        _assert_error(
            _request_upload(client, "x.png", "application/pdf"),
            400, "BadRequest", "Content type not allowed",
        )

    def test_oversized(self, client):
        _assert_error(
            _request_upload(client, size=50 * 1024 * 1024 + 1),
            400, "BadRequest", "File size exceeds limit",
        )

    @pytest.mark.parametrize("payload", [
        {"fileName": "a.png", "contentType": "image/png"},
        {"fileName": "a.png", "contentType": "image/png", "fileSize": "big"},
        {},
    ])
    def test_malformed_body(self, client, payload):
        _assert_error(
            client.post("/images/upload-request", json=payload),
            400, "BadRequest", "Invalid request body",
        )

    def test_non_json_body(self, client):
        response = client.post(
            "/images/upload-request", content=b"not json", headers={"Content-Type": "application/json"},
        )
        _assert_error(response, 400, "BadRequest")

    def test_confirm_requires_uuid(self, client):
        _assert_error(
            client.post("/images/upload-complete", json={"id": "nope", "objectKey": "k"}),
            400, "BadRequest",
        )

    def test_get_invalid_id(self, client):
        _assert_error(client.get("/images/not-a-uuid"), 400, "BadRequest", "Invalid image ID")

    def test_view_urls_empty(self, client):
        _assert_error(
            client.post("/images/view-urls", json={"requests": []}),
            400, "BadRequest", "At least one request is required",
        )


class TestListing:
    def test_pagination(self, client, repo):
        ids = [repo.add(make_image(str(uuid.uuid4()))).id for _ in range(3)]
        # same created_at: order falls back to id
        expected = sorted(ids, reverse=True)

        first = client.get("/images", params={"limit": 2}).json()
        assert [i["id"] for i in first["items"]] == expected[:2]
        assert first["nextCursor"]

    def test_bad_limit_falls_back(self, client, repo):
        repo.add(make_image(str(uuid.uuid4())))
        for limit in ("abc", "0", "1000"):
            response = client.get("/images", params={"limit": limit})
            assert response.status_code == 200
            assert len(response.json()["items"]) == 1

    def test_failed_image_hidden(self, client, repo):
        image = repo.add(make_image(str(uuid.uuid4()), status=ImageStatus.FAILED))
        _assert_error(client.get(f"/images/{image.id}"), 404, "NotFound")


class TestEnvelope:
    def test_request_id_echoed(self, client):
        response = client.get("/images/not-a-uuid", headers={"X-Request-ID": "req-123"})
        assert response.json()["error"]["requestId"] == "req-123"
        assert response.headers["X-Request-ID"] == "req-123"

    def test_success_carries_request_id(self, client):
        assert client.get("/healthz").headers["X-Request-ID"]

    def test_unknown_route(self, client):
        _assert_error(client.get("/nowhere"), 404, "NotFound")

    def test_method_not_allowed_is_bad_request(self, client):
        _assert_error(client.post("/healthz"), 400, "BadRequest")

    def test_unhandled_error(self, app):
        app.state.services.get_image = MagicMock()
        app.state.services.get_image.execute.side_effect = RuntimeError("boom")
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get(f"/images/{uuid.uuid4()}")
        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "InternalError"
        assert error["message"] == "Internal server error"
        assert error["requestId"]


class TestCors:
    def test_preflight_allowed_origin(self, client):
        response = client.options(
            "/images/upload-request",
            headers={"Origin": ORIGIN, "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ORIGIN

    def test_other_origin_not_allowed(self, client):
        response = client.get("/healthz", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in response.headers


class TestMetadataOnly:
    @pytest.fixture
    def bare_client(self, settings):
        app = create_app(settings, storage=None)
        with TestClient(app) as c:
            yield c

    def test_health_reports_disabled(self, bare_client):
        assert bare_client.get("/healthz").json() == {"status": "ok", "objectStore": "disabled"}

    def test_store_operations_fail(self, bare_client):
        _assert_error(
            _request_upload(bare_client), 500, "InternalError", "object-store client not available",
        )
        _assert_error(
            bare_client.post("/images/view-urls", json={"requests": [{"id": str(uuid.uuid4())}]}),
            500, "InternalError", "object-store client not available",
        )

    def test_reads_still_work(self, bare_client):
        assert bare_client.get("/images").json() == {"items": []}


def test_health_enabled(client):
    assert client.get("/healthz").json() == {"status": "ok", "objectStore": "enabled"}
