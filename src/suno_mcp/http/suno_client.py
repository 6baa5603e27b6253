"""Async Suno API client with bearer auth and connection retries."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from suno_mcp.config import SunoApiSettings
from suno_mcp.generation.errors import SubmissionFailedError, TransportError
from suno_mcp.generation.models import (
    SUCCESS_CODE,
    FetchEnvelope,
    SubmissionResult,
    parse_task_snapshot,
)

logger = logging.getLogger(__name__)

INVALID_RESPONSE_CODE = "invalid_response"


class TaskClient(Protocol):
    """Submit/fetch operations the task lifecycle depends on."""

    async def submit(self, payload: dict[str, Any]) -> SubmissionResult:
        """Submit a generation task."""
        raise NotImplementedError

    async def fetch(self, task_id: str) -> FetchEnvelope:
        """Fetch the current snapshot of a task."""
        raise NotImplementedError


class SunoTaskClient:
    """httpx wrapper for the submit and fetch endpoints."""

    def __init__(
        self,
        settings: SunoApiSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=httpx.Timeout(settings.request_timeout_seconds, connect=10.0),
            headers={
                "Authorization": f"Bearer {settings.api_key}",
                "Content-Type": "application/json",
            },
            transport=transport or httpx.AsyncHTTPTransport(retries=settings.connect_retries),
        )

    async def submit(self, payload: dict[str, Any]) -> SubmissionResult:
        """POST the payload; any failure here is fatal for the invocation."""

        try:
            response = await self._client.post(self._settings.submit_path, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Network error submitting Suno task: %s", exc)
            raise SubmissionFailedError(
                f"Suno API submission failed: {_describe_network_error(exc)}",
            ) from exc

        if not response.is_success:
            message = _error_message(response)
            logger.warning("Suno submit returned HTTP %s: %s", response.status_code, message)
            raise SubmissionFailedError(
                f"Suno API submission failed: {message}",
                status_code=response.status_code,
            )

        body = _json_object(response)
        if body is None:
            raise SubmissionFailedError(
                "Suno API submission failed: response was not a JSON object.",
                status_code=response.status_code,
            )
        logger.debug("Suno submit response: %s", body)
        data = body.get("data")
        return SubmissionResult(
            code=str(body.get("code") or ""),
            message=_text_or_none(body.get("message")),
            task_id=data.strip() if isinstance(data, str) else None,
        )

    async def fetch(self, task_id: str) -> FetchEnvelope:
        """GET one snapshot; malformed bodies come back as envelopes without data."""

        try:
            response = await self._client.get(f"{self._settings.fetch_path}{task_id}")
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Suno API fetch failed for task {task_id}: {_describe_network_error(exc)}",
            ) from exc

        if not response.is_success:
            raise TransportError(
                f"Suno API error (Status {response.status_code}): {_error_message(response)}",
                status_code=response.status_code,
            )

        body = _json_object(response)
        if body is None:
            return FetchEnvelope(
                code=INVALID_RESPONSE_CODE,
                message="Fetch response was not a JSON object.",
            )
        code = str(body.get("code") or "")
        data = body.get("data")
        snapshot = (
            parse_task_snapshot(data) if code == SUCCESS_CODE and isinstance(data, dict) else None
        )
        return FetchEnvelope(
            code=code,
            message=_text_or_none(body.get("message")),
            snapshot=snapshot,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> SunoTaskClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _error_message(response: httpx.Response) -> str:
    body: Any
    try:
        body = response.json()
    except ValueError:
        body = response.text
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
        nested = body.get("error")
        if isinstance(nested, dict) and isinstance(nested.get("message"), str):
            return nested["message"]
    if isinstance(body, str) and body.strip():
        return body.strip()
    return response.reason_phrase or f"HTTP {response.status_code}"


def _describe_network_error(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    return str(exc) or type(exc).__name__


def _text_or_none(value: object) -> str | None:
    return value if isinstance(value, str) and value else None
