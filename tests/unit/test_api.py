"""Unit tests for the HTTP API (POST /map and health probes)."""

import logging
from unittest.mock import AsyncMock

import orjson
import pytest
from fastapi.testclient import TestClient

from apps.video_mapper import mapper as mapper_module
from services.api.app import create_app
from services.api.health import HealthChecker


@pytest.fixture
def broker_check() -> AsyncMock:
    return AsyncMock(return_value=True)


@pytest.fixture
def client(mapper, broker_check) -> TestClient:
    app = create_app(
        mapper=mapper,
        health_checker=HealthChecker(broker_check),
        logger=logging.getLogger("tests.api"),
    )
    return TestClient(app)


MAP_HEADERS = {"X-Request-Id": "req-1", "Message-Timestamp": "ts-1"}


def _unencodable(obj, *args, **kwargs):
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


class TestMap:
    def test_returns_publication_event(self, client, native_video):
        response = client.post("/map", content=orjson.dumps(native_video), headers=MAP_HEADERS)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        event = response.json()
        assert event["contentUri"] == "http://video-mapper-iw-uk-p.svc.ft.com/video/model/abc-1"
        assert orjson.loads(event["payload"]) == {
            "uuid": "abc-1",
            "identifiers": [
                {"authority": "http://api.ft.com/system/BRIGHTCOVE", "identifierValue": "999"}
            ],
            "publishedDate": "2020-01-01T00:00:00Z",
            "mediaType": "video/mp4",
            "publishReference": "req-1",
            "lastModified": "ts-1",
        }

    def test_does_not_require_origin_header(self, client, native_video):
        response = client.post("/map", content=orjson.dumps(native_video), headers=MAP_HEADERS)

        assert response.status_code == 200

    @pytest.mark.parametrize("body", [b"", b"{broken", b"[]"])
    def test_malformed_body_is_bad_request(self, client, body):
        response = client.post("/map", content=body, headers=MAP_HEADERS)

        assert response.status_code == 400
        assert response.content == b""

    @pytest.mark.parametrize("header", ["X-Request-Id", "Message-Timestamp"])
    def test_missing_header_is_bad_request(self, client, native_video, header):
        headers = {k: v for k, v in MAP_HEADERS.items() if k != header}

        response = client.post("/map", content=orjson.dumps(native_video), headers=headers)

        assert response.status_code == 400
        assert response.json()["code"] == "missing_header"
        assert response.json()["header"] == header

    @pytest.mark.parametrize("key", ["uuid", "id", "updated_at"])
    def test_missing_field_is_bad_request(self, client, native_video, key):
        native_video[key] = ""

        response = client.post("/map", content=orjson.dumps(native_video), headers=MAP_HEADERS)

        assert response.status_code == 400
        assert response.json()["code"] == "missing_field"
        assert response.json()["field"] == key

    def test_missing_name_maps_to_bare_video_type(self, client, native_video):
        del native_video["name"]

        response = client.post("/map", content=orjson.dumps(native_video), headers=MAP_HEADERS)

        assert response.status_code == 200
        assert orjson.loads(response.json()["payload"])["mediaType"] == "video/"

    def test_serialization_failure_is_server_error(self, client, native_video, monkeypatch):
        body = orjson.dumps(native_video)
        monkeypatch.setattr(mapper_module.orjson, "dumps", _unencodable)

        response = client.post("/map", content=body, headers=MAP_HEADERS)

        assert response.status_code == 500
        assert response.json()["code"] == "serialization_failure"
        assert "contentUri" not in response.text


class TestHealth:
    def test_gtg_ok(self, client):
        response = client.get("/__gtg")

        assert response.status_code == 200
        assert response.text == "OK"

    def test_gtg_unavailable_when_broker_down(self, client, broker_check):
        broker_check.return_value = False

        response = client.get("/__gtg")

        assert response.status_code == 503

    def test_gtg_unavailable_when_check_raises(self, client, broker_check):
        broker_check.side_effect = ConnectionError("refused")

        assert client.get("/__gtg").status_code == 503

    def test_health_document(self, client, broker_check):
        broker_check.return_value = False

        body = client.get("/__health").json()

        assert body["schemaVersion"] == 1
        assert body["ok"] is False
        assert body["checks"][0]["name"] == "Message queue reachable"
        assert body["checks"][0]["ok"] is False
