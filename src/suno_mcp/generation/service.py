"""Application service running one `generate_music` invocation end to end."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from suno_mcp.config import PollingSettings
from suno_mcp.generation.errors import GenerationError, SubmissionFailedError
from suno_mcp.generation.failure_classifier import ToolErrorReport, classify_failure
from suno_mcp.generation.formatter import format_clip_result
from suno_mcp.generation.payload import build_submission_payload
from suno_mcp.generation.poller import TaskPoller
from suno_mcp.generation.validator import validate_generation_arguments
from suno_mcp.http.suno_client import TaskClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ToolOutcome:
    """Text returned to the host, flagged when it reports an upstream failure."""

    text: str
    is_error: bool = False
    report: ToolErrorReport | None = None


class MusicGenerationService:
    """Validate, submit, poll and format one generation."""

    def __init__(
        self,
        *,
        client: TaskClient,
        polling: PollingSettings,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.polling = polling
        self._sleep = sleep

    async def generate(self, arguments: object) -> ToolOutcome:
        """Run the whole lifecycle for one set of tool arguments.

        `InvalidArgumentsError` propagates before any network call. Upstream
        failures come back as an error-flagged outcome.
        """

        request = validate_generation_arguments(arguments)
        payload = build_submission_payload(request)
        logger.info("Submitting %s task to Suno API", type(request).__name__)
        logger.debug("Submit payload: %s", payload)

        try:
            task_id = await self._submit(payload)
            poller = TaskPoller(client=self.client, settings=self.polling, sleep=self._sleep)
            clip = await poller.run(task_id)
        except GenerationError as error:
            report = classify_failure(error)
            logger.warning("Generation failed: %s %s", report.text, report.to_log_details())
            return ToolOutcome(text=report.text, is_error=True, report=report)

        return ToolOutcome(text=format_clip_result(clip))

    async def _submit(self, payload: dict[str, object]) -> str:
        result = await self.client.submit(payload)
        if not result.is_success or result.task_id is None:
            raise SubmissionFailedError(
                f"Suno API submission failed: {result.message or 'No task ID string returned.'}",
            )
        task_id = result.task_id.strip()
        logger.info(
            "Music generation task submitted. Task ID: %s. "
            "Polling every %.1fs, up to %d attempts.",
            task_id,
            self.polling.interval_seconds,
            self.polling.max_attempts,
        )
        return task_id
