"""Deterministic mapping of generation failures to user-facing error reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from suno_mcp.generation.errors import (
    GenerationError,
    InvalidArgumentsError,
    PollingFailedError,
    PollingFailureKind,
    SubmissionFailedError,
)

SUNO_FAILURE_CLASSIFIER_VERSION = 1


class ErrorKind(str, Enum):
    """Error taxonomy surfaced to the host."""

    INVALID_ARGUMENTS = "invalid_arguments"
    SUBMISSION_FAILED = "submission_failed"
    POLLING_FAILED = "polling_failed"
    TRANSPORT_ERROR = "transport_error"


class UpstreamHint(str, Enum):
    """Coarse reading of the upstream message text."""

    BILLING_OR_QUOTA = "billing_or_quota"
    ACCESS_OR_AUTH = "access_or_auth"
    RATE_LIMITED = "rate_limited"
    CONTENT_REJECTED = "content_rejected"
    UNKNOWN = "unknown"


_BILLING_OR_QUOTA_PATTERNS: tuple[str, ...] = (
    "quota",
    "insufficient",
    "balance",
    "billing",
    "payment",
    "credits",
    "exceeded",
)
_ACCESS_OR_AUTH_PATTERNS: tuple[str, ...] = (
    "unauthorized",
    "forbidden",
    "invalid api key",
    "invalid token",
    "authentication",
)
_RATE_LIMIT_PATTERNS: tuple[str, ...] = (
    "too many requests",
    "rate limit",
    "try again later",
)
_CONTENT_REJECTED_PATTERNS: tuple[str, ...] = (
    "nsfw",
    "moderation",
    "copyright",
    "inappropriate",
    "policy",
)
_STATUS_HINTS: dict[int, UpstreamHint] = {
    401: UpstreamHint.ACCESS_OR_AUTH,
    402: UpstreamHint.BILLING_OR_QUOTA,
    403: UpstreamHint.ACCESS_OR_AUTH,
    429: UpstreamHint.RATE_LIMITED,
}


@dataclass(slots=True)
class ToolErrorReport:
    """Normalized failure report for one tool invocation."""

    kind: ErrorKind
    message: str
    status_code: int | None
    hint: UpstreamHint
    matched_pattern: str | None
    polling_kind: PollingFailureKind | None = None

    @property
    def text(self) -> str:
        if self.status_code is not None and f"Status {self.status_code}" not in self.message:
            return f"{self.message} (Status {self.status_code})"
        return self.message

    def to_log_details(self) -> dict[str, object]:
        """Serialize classifier diagnostics for structured logging."""

        return {
            "classifier_version": SUNO_FAILURE_CLASSIFIER_VERSION,
            "kind": self.kind.value,
            "polling_kind": self.polling_kind.value if self.polling_kind else None,
            "status_code": self.status_code,
            "hint": self.hint.value,
            "matched_pattern": self.matched_pattern,
        }


def classify_failure(error: GenerationError) -> ToolErrorReport:
    """Place a generation failure in the taxonomy and read a hint from its text."""

    hint, pattern = _upstream_hint(error.message, error.status_code)
    return ToolErrorReport(
        kind=_error_kind(error),
        message=error.message,
        status_code=error.status_code,
        hint=hint,
        matched_pattern=pattern,
        polling_kind=error.kind if isinstance(error, PollingFailedError) else None,
    )


def _error_kind(error: GenerationError) -> ErrorKind:
    if isinstance(error, InvalidArgumentsError):
        return ErrorKind.INVALID_ARGUMENTS
    if isinstance(error, SubmissionFailedError):
        return ErrorKind.SUBMISSION_FAILED
    if isinstance(error, PollingFailedError):
        return ErrorKind.POLLING_FAILED
    # TransportError and any unclassified client failure
    return ErrorKind.TRANSPORT_ERROR


def _upstream_hint(message: str, status_code: int | None) -> tuple[UpstreamHint, str | None]:
    haystack = message.lower()
    for hint, patterns in (
        (UpstreamHint.BILLING_OR_QUOTA, _BILLING_OR_QUOTA_PATTERNS),
        (UpstreamHint.ACCESS_OR_AUTH, _ACCESS_OR_AUTH_PATTERNS),
        (UpstreamHint.RATE_LIMITED, _RATE_LIMIT_PATTERNS),
        (UpstreamHint.CONTENT_REJECTED, _CONTENT_REJECTED_PATTERNS),
    ):
        pattern = _first_match(haystack, patterns)
        if pattern is not None:
            return hint, pattern
    if status_code is not None and status_code in _STATUS_HINTS:
        return _STATUS_HINTS[status_code], None
    return UpstreamHint.UNKNOWN, None


def _first_match(haystack: str, patterns: tuple[str, ...]) -> str | None:
    for pattern in patterns:
        if pattern in haystack:
            return pattern
    return None
