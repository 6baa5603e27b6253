"""Generation failure types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PollingFailureKind(str, Enum):
    """Terminal polling outcomes other than success."""

    FAILED = "failed"
    DATA_INCONSISTENT = "data_inconsistent"
    TIMEOUT = "timeout"


@dataclass(slots=True)
class GenerationError(Exception):
    """Base generation error."""

    message: str
    code: str = "generation_error"
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class InvalidArgumentsError(GenerationError):
    """Tool arguments rejected before any network call."""

    code: str = "invalid_arguments"


@dataclass(slots=True)
class SubmissionFailedError(GenerationError):
    """Task was not accepted upstream; nothing to poll."""

    code: str = "submission_failed"


@dataclass(slots=True)
class TransportError(GenerationError):
    """Network or HTTP-level failure talking to the upstream API."""

    code: str = "transport_error"


@dataclass(slots=True)
class PollingFailedError(GenerationError):
    """Submitted task reached a terminal non-success state."""

    code: str = "polling_failed"
    kind: PollingFailureKind = PollingFailureKind.FAILED
    task_id: str = ""
    attempts: int = 0
