"""Fixed-interval polling state machine for one submitted task."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from enum import Enum

from suno_mcp.config import PollingSettings
from suno_mcp.generation.errors import PollingFailedError, PollingFailureKind, TransportError
from suno_mcp.generation.models import ClipResult, FetchEnvelope, LifecycleStatus
from suno_mcp.http.suno_client import TaskClient

logger = logging.getLogger(__name__)

UNKNOWN_FAIL_REASON = "unknown reason"


class PollPhase(str, Enum):
    """Poller states."""

    SUBMITTED = "submitted"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PollState:
    """Everything the poller knows after the latest observation."""

    task_id: str
    phase: PollPhase = PollPhase.SUBMITTED
    attempts: int = 0
    clip: ClipResult | None = None
    failure_kind: PollingFailureKind | None = None
    failure_reason: str | None = None
    last_status: LifecycleStatus | None = None
    note: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.phase in {PollPhase.SUCCEEDED, PollPhase.FAILED}


def advance(state: PollState, envelope: FetchEnvelope | None, *, max_attempts: int) -> PollState:
    """Apply one fetch observation; `None` means the attempt produced no information.

    Every call consumes one attempt. A state that is still polling once the
    budget is spent becomes a timeout failure.
    """

    if state.is_terminal:
        return state

    polled = replace(state, phase=PollPhase.POLLING, attempts=state.attempts + 1, note=None)
    following = _interpret(polled, envelope)
    if following.phase is PollPhase.POLLING and following.attempts >= max_attempts:
        return replace(
            following,
            phase=PollPhase.FAILED,
            failure_kind=PollingFailureKind.TIMEOUT,
            failure_reason=f"timed out after {following.attempts} polling attempts",
        )
    return following


def _interpret(state: PollState, envelope: FetchEnvelope | None) -> PollState:  # noqa: PLR0911
    if envelope is None:
        return replace(state, note="no response")
    if not envelope.is_success or envelope.snapshot is None:
        return replace(
            state,
            note=f"code={envelope.code or 'missing'} message={envelope.message or 'N/A'}",
        )

    snapshot = envelope.snapshot
    if snapshot.task_id != state.task_id:
        return replace(state, note=f"mismatched task_id {snapshot.task_id!r}")

    state = replace(state, last_status=snapshot.status)
    if snapshot.status is LifecycleStatus.FAILED:
        return replace(
            state,
            phase=PollPhase.FAILED,
            failure_kind=PollingFailureKind.FAILED,
            failure_reason=snapshot.fail_reason or UNKNOWN_FAIL_REASON,
        )

    clip = snapshot.first_clip
    if snapshot.status in {LifecycleStatus.COMPLETE, LifecycleStatus.IN_PROGRESS}:
        if clip is not None and clip.has_audio:
            return replace(state, phase=PollPhase.SUCCEEDED, clip=clip)
        if snapshot.status is LifecycleStatus.COMPLETE:
            return replace(
                state,
                phase=PollPhase.FAILED,
                failure_kind=PollingFailureKind.DATA_INCONSISTENT,
                failure_reason="task is complete but no audio was produced",
            )

    return replace(state, note=f"progress={snapshot.progress or 'N/A'}")


class TaskPoller:
    """Polls one task until it succeeds, fails, or runs out of attempts."""

    def __init__(
        self,
        *,
        client: TaskClient,
        settings: PollingSettings,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.settings = settings
        self._sleep = sleep

    async def run(self, task_id: str) -> ClipResult:
        """Return the first playable clip or raise `PollingFailedError`.

        Transport errors are absorbed as empty attempts until
        `transport_error_limit` of them happen in a row, then re-raised.
        """

        state = PollState(task_id=task_id)
        consecutive_transport_errors = 0
        while not state.is_terminal:
            await self._sleep(self.settings.interval_seconds)
            logger.debug("Polling attempt %d for task %s", state.attempts + 1, task_id)

            envelope: FetchEnvelope | None
            try:
                envelope = await self.client.fetch(task_id)
            except TransportError as error:
                consecutive_transport_errors += 1
                if consecutive_transport_errors >= self.settings.transport_error_limit:
                    logger.error(
                        "Task %s: giving up after %d consecutive transport errors: %s",
                        task_id,
                        consecutive_transport_errors,
                        error,
                    )
                    raise
                logger.warning("Task %s: transport error while polling: %s", task_id, error)
                envelope = None
            else:
                consecutive_transport_errors = 0

            state = advance(state, envelope, max_attempts=self.settings.max_attempts)
            self._log_observation(state, envelope)

        if state.phase is PollPhase.SUCCEEDED and state.clip is not None:
            logger.info("Task %s complete! Audio URL: %s", task_id, state.clip.audio_url)
            return state.clip

        kind = state.failure_kind or PollingFailureKind.FAILED
        raise PollingFailedError(
            _failure_message(task_id, kind, state.failure_reason),
            kind=kind,
            task_id=task_id,
            attempts=state.attempts,
        )

    def _log_observation(self, state: PollState, envelope: FetchEnvelope | None) -> None:
        if envelope is None:
            return
        if state.is_terminal and state.failure_kind is not PollingFailureKind.TIMEOUT:
            return
        snapshot = envelope.snapshot
        if not envelope.is_success or snapshot is None:
            logger.warning("Task %s: no task data this attempt (%s)", state.task_id, state.note)
            if not envelope.is_success and state.attempts >= self.settings.max_attempts / 2:
                logger.error(
                    "Task %s still not showing success code after %d attempts. Last code: %s",
                    state.task_id,
                    state.attempts,
                    envelope.code,
                )
            return
        if snapshot.task_id != state.task_id:
            logger.warning("Task %s: %s; continuing poll", state.task_id, state.note)
            return
        logger.info("Task %s status: %s (%s)", state.task_id, snapshot.status.value, state.note)


def _failure_message(task_id: str, kind: PollingFailureKind, reason: str | None) -> str:
    if kind is PollingFailureKind.FAILED:
        return f"Suno task {task_id} failed: {reason or UNKNOWN_FAIL_REASON}"
    if kind is PollingFailureKind.DATA_INCONSISTENT:
        return f"Suno task {task_id} is COMPLETE but no audio_url was found."
    return f"Suno task {task_id} {reason or 'timed out'}."
