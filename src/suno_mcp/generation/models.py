"""Domain models for one music generation task."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SUCCESS_CODE = "success"


class ModelVersion(str, Enum):
    """Upstream model identifiers accepted in `mv`."""

    CHIRP_V3_0 = "chirp-v3-0"
    CHIRP_V3_5 = "chirp-v3-5"
    CHIRP_V4 = "chirp-v4"


DEFAULT_MODEL_VERSION = ModelVersion.CHIRP_V4


class LifecycleStatus(str, Enum):
    """Task states reported by the fetch endpoint."""

    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: object) -> LifecycleStatus:
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return cls.UNKNOWN
        return cls.UNKNOWN


@dataclass(frozen=True, slots=True)
class Continuation:
    """Extend an earlier clip from a timestamp."""

    task_id: str
    continue_at: float
    clip_id: str


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Options shared by both request modes."""

    model_version: ModelVersion | None = None
    make_instrumental: bool = False
    continuation: Continuation | None = None


@dataclass(frozen=True, slots=True)
class CustomRequest:
    """Generation driven by explicit lyrics, style tags and title."""

    prompt: str
    tags: str
    title: str
    options: GenerationOptions = field(default_factory=GenerationOptions)


@dataclass(frozen=True, slots=True)
class InspirationRequest:
    """Generation driven by a free-form description."""

    description: str
    prompt: str | None = None
    tags: str | None = None
    title: str | None = None
    options: GenerationOptions = field(default_factory=GenerationOptions)


GenerationRequest = CustomRequest | InspirationRequest


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """Parsed submit response."""

    code: str
    message: str | None
    task_id: str | None

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE and bool(self.task_id and self.task_id.strip())


@dataclass(frozen=True, slots=True)
class ClipResult:
    """One rendered (or rendering) clip of a task."""

    id: str
    title: str = ""
    audio_url: str | None = None
    image_url: str | None = None
    style_tags: str | None = None
    status: str | None = None
    duration: float | None = None

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url and self.audio_url.strip())


@dataclass(frozen=True, slots=True)
class TaskSnapshot:
    """Task state as reported by one fetch call."""

    task_id: str
    status: LifecycleStatus
    fail_reason: str | None = None
    progress: str | None = None
    clips: tuple[ClipResult, ...] = ()

    @property
    def first_clip(self) -> ClipResult | None:
        return self.clips[0] if self.clips else None


@dataclass(frozen=True, slots=True)
class FetchEnvelope:
    """Status envelope wrapping one fetch response."""

    code: str
    message: str | None = None
    snapshot: TaskSnapshot | None = None

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE


def parse_task_snapshot(raw: dict[str, Any]) -> TaskSnapshot:
    """Build a snapshot from the `data` object of a fetch response."""

    clips_raw = raw.get("data")
    clips: list[ClipResult] = []
    if isinstance(clips_raw, list):
        clips.extend(_parse_clip(item) for item in clips_raw if isinstance(item, dict))
    return TaskSnapshot(
        task_id=str(raw.get("task_id") or ""),
        status=LifecycleStatus.parse(raw.get("status")),
        fail_reason=_optional_str(raw.get("fail_reason")),
        progress=_optional_str(raw.get("progress")),
        clips=tuple(clips),
    )


def _parse_clip(raw: dict[str, Any]) -> ClipResult:
    metadata = raw.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    duration = metadata.get("duration")
    return ClipResult(
        id=str(raw.get("id") or ""),
        title=_optional_str(raw.get("title")) or "",
        audio_url=_optional_str(raw.get("audio_url")),
        image_url=_optional_str(raw.get("image_url")),
        style_tags=_optional_str(metadata.get("tags")),
        status=_optional_str(raw.get("status")),
        duration=float(duration)
        if isinstance(duration, int | float) and not isinstance(duration, bool)
        else None,
    )


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
