"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from suno_mcp.config import PollingSettings, Settings, SunoApiSettings
from suno_mcp.generation.models import (
    ClipResult,
    FetchEnvelope,
    LifecycleStatus,
    SubmissionResult,
    TaskSnapshot,
)


class ScriptedTaskClient:
    """Task client replaying canned submit/fetch results.

    Fetch results are consumed in order; the last one repeats once the script
    runs out. Exceptions in the script are raised instead of returned.
    """

    def __init__(
        self,
        *,
        submission: SubmissionResult | Exception | None = None,
        fetches: list[FetchEnvelope | Exception] | None = None,
    ) -> None:
        self.submission = submission or SubmissionResult(
            code="success",
            message=None,
            task_id="task-123",
        )
        self.fetches = list(fetches or [])
        self.submitted: list[dict[str, Any]] = []
        self.fetched: list[str] = []

    async def submit(self, payload: dict[str, Any]) -> SubmissionResult:
        self.submitted.append(payload)
        if isinstance(self.submission, Exception):
            raise self.submission
        return self.submission

    async def fetch(self, task_id: str) -> FetchEnvelope:
        index = min(len(self.fetched), len(self.fetches) - 1)
        self.fetched.append(task_id)
        result = self.fetches[index]
        if isinstance(result, Exception):
            raise result
        return result


class RecordingSleep:
    """Stand-in for asyncio.sleep that returns immediately."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def snapshot_envelope(
    status: LifecycleStatus,
    *,
    task_id: str = "task-123",
    clips: tuple[ClipResult, ...] = (),
    fail_reason: str | None = None,
) -> FetchEnvelope:
    return FetchEnvelope(
        code="success",
        snapshot=TaskSnapshot(
            task_id=task_id,
            status=status,
            fail_reason=fail_reason,
            clips=clips,
        ),
    )


@pytest.fixture()
def polling_settings() -> PollingSettings:
    return PollingSettings(interval_seconds=5.0, max_attempts=6, transport_error_limit=3)


@pytest.fixture()
def settings(polling_settings: PollingSettings) -> Settings:
    return Settings(
        suno=SunoApiSettings(api_key="test-key", base_url="https://suno.test"),
        polling=polling_settings,
    )


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def scripted_client_factory():
    return ScriptedTaskClient


@pytest.fixture()
def envelope_factory():
    return snapshot_envelope
