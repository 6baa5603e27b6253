"""Tests for the Suno HTTP client against a mocked transport."""

from __future__ import annotations

import asyncio
import json

import allure
import httpx
import pytest

from suno_mcp.config import SunoApiSettings
from suno_mcp.generation.errors import SubmissionFailedError, TransportError
from suno_mcp.generation.models import LifecycleStatus
from suno_mcp.http.suno_client import INVALID_RESPONSE_CODE, SunoTaskClient

pytestmark = [
    allure.epic("Generate Music Tool"),
    allure.feature("Suno API Client"),
]

SETTINGS = SunoApiSettings(api_key="secret-key", base_url="https://suno.test")


def _client(handler) -> SunoTaskClient:
    return SunoTaskClient(SETTINGS, transport=httpx.MockTransport(handler))


def _call(client: SunoTaskClient, method: str, *args):
    async def scenario():
        async with client:
            return await getattr(client, method)(*args)

    return asyncio.run(scenario())


class TestSubmit:
    def test_posts_payload_with_bearer_auth(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"code": "success", "data": "task-123"})

        result = _call(_client(handler), "submit", {"prompt": "la", "mv": "chirp-v4"})

        assert result.is_success
        assert result.task_id == "task-123"
        request = seen[0]
        assert request.method == "POST"
        assert request.url == "https://suno.test/suno/submit/music"
        assert request.headers["Authorization"] == "Bearer secret-key"
        assert json.loads(request.content) == {"prompt": "la", "mv": "chirp-v4"}

    def test_returns_non_success_code_with_message(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"code": "error", "message": "quota exceeded"})

        result = _call(_client(handler), "submit", {})

        assert not result.is_success
        assert result.code == "error"
        assert result.message == "quota exceeded"
        assert result.task_id is None

    def test_blank_task_id_is_not_success(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"code": "success", "data": "   "})

        assert not _call(_client(handler), "submit", {}).is_success

    def test_padded_task_id_is_trimmed(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"code": "success", "data": " task-123 "})

        result = _call(_client(handler), "submit", {})

        assert result.is_success
        assert result.task_id == "task-123"

    def test_http_error_status_raises_with_upstream_message(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "invalid api key"}})

        with pytest.raises(SubmissionFailedError, match="invalid api key") as exc_info:
            _call(_client(handler), "submit", {})

        assert exc_info.value.status_code == 401

    def test_network_error_raises_submission_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SubmissionFailedError, match="connection refused"):
            _call(_client(handler), "submit", {})

    def test_non_json_body_raises_submission_failure(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(SubmissionFailedError, match="not a JSON object"):
            _call(_client(handler), "submit", {})


class TestFetch:
    def test_parses_snapshot_and_clips(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "code": "success",
                    "data": {
                        "task_id": "task-123",
                        "action": "MUSIC",
                        "status": "IN_PROGRESS",
                        "progress": "50%",
                        "data": [
                            {
                                "id": "clip-1",
                                "title": "Song",
                                "status": "streaming",
                                "audio_url": "https://x/a.mp3",
                                "image_url": "https://x/a.png",
                                "metadata": {"tags": "folk", "duration": 121.5},
                            },
                            "not-a-clip",
                        ],
                    },
                },
            )

        envelope = _call(_client(handler), "fetch", "task-123")

        assert seen[0].method == "GET"
        assert seen[0].url == "https://suno.test/suno/fetch/task-123"
        assert envelope.is_success
        snapshot = envelope.snapshot
        assert snapshot is not None
        assert snapshot.task_id == "task-123"
        assert snapshot.status is LifecycleStatus.IN_PROGRESS
        assert snapshot.progress == "50%"
        assert len(snapshot.clips) == 1
        clip = snapshot.clips[0]
        assert clip.audio_url == "https://x/a.mp3"
        assert clip.image_url == "https://x/a.png"
        assert clip.style_tags == "folk"
        assert clip.duration == 121.5

    def test_unrecognized_status_maps_to_unknown(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"code": "success", "data": {"task_id": "task-123", "status": "QUEUED"}},
            )

        envelope = _call(_client(handler), "fetch", "task-123")

        assert envelope.snapshot is not None
        assert envelope.snapshot.status is LifecycleStatus.UNKNOWN
        assert envelope.snapshot.clips == ()

    def test_non_success_code_has_no_snapshot(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"code": "not_found", "message": "task missing", "data": {"task_id": "x"}},
            )

        envelope = _call(_client(handler), "fetch", "task-123")

        assert not envelope.is_success
        assert envelope.message == "task missing"
        assert envelope.snapshot is None

    def test_non_json_body_becomes_empty_envelope(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="oops")

        envelope = _call(_client(handler), "fetch", "task-123")

        assert envelope.code == INVALID_RESPONSE_CODE
        assert envelope.snapshot is None

    def test_http_error_status_raises_transport_error(self) -> None:
        def handler(_: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="Service Unavailable")

        with pytest.raises(TransportError, match="Status 503") as exc_info:
            _call(_client(handler), "fetch", "task-123")

        assert exc_info.value.status_code == 503

    def test_timeout_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        with pytest.raises(TransportError, match="timeout") as exc_info:
            _call(_client(handler), "fetch", "task-123")

        assert exc_info.value.status_code is None
