"""Validation of raw `generate_music` tool arguments."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from suno_mcp.generation.errors import InvalidArgumentsError
from suno_mcp.generation.models import (
    Continuation,
    CustomRequest,
    GenerationOptions,
    GenerationRequest,
    InspirationRequest,
    ModelVersion,
)

_CUSTOM_FIELDS = ("prompt", "tags", "title")


def validate_generation_arguments(raw: object) -> GenerationRequest:
    """Turn a loosely-typed argument bag into a custom or inspiration request.

    Raises `InvalidArgumentsError` on the first violated rule. Rules are checked
    in a fixed order: object shape, mode fields, model version, instrumental
    flag, continuation triple.
    """

    if not isinstance(raw, Mapping):
        raise InvalidArgumentsError("Arguments must be an object.")

    description = _description(raw)
    if description is None:
        fields = {name: _required_text(raw, name) for name in _CUSTOM_FIELDS}
        missing = [name for name, value in fields.items() if value is None]
        if missing:
            raise InvalidArgumentsError(
                "Custom-mode fields missing: "
                + ", ".join(missing)
                + ". Provide prompt, tags and title, or gpt_description_prompt "
                "for inspiration mode.",
            )
        return CustomRequest(
            prompt=fields["prompt"] or "",
            tags=fields["tags"] or "",
            title=fields["title"] or "",
            options=_options(raw),
        )

    return InspirationRequest(
        description=description,
        prompt=_passthrough_text(raw, "prompt"),
        tags=_passthrough_text(raw, "tags"),
        title=_passthrough_text(raw, "title"),
        options=_options(raw),
    )


def _description(raw: Mapping[str, Any]) -> str | None:
    value = raw.get("gpt_description_prompt")
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentsError("gpt_description_prompt must be a string.")
    if not value.strip():
        return None
    return value


def _required_text(raw: Mapping[str, Any], name: str) -> str | None:
    value = raw.get(name)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _passthrough_text(raw: Mapping[str, Any], name: str) -> str | None:
    value = raw.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentsError(f"{name} must be a string.")
    return value if value.strip() else None


def _options(raw: Mapping[str, Any]) -> GenerationOptions:
    return GenerationOptions(
        model_version=_model_version(raw.get("mv")),
        make_instrumental=_make_instrumental(raw.get("make_instrumental")),
        continuation=_continuation(raw),
    )


def _model_version(value: object) -> ModelVersion | None:
    if value is None:
        return None
    supported = [version.value for version in ModelVersion]
    if not isinstance(value, str) or value not in supported:
        raise InvalidArgumentsError(
            f"Unsupported mv {value!r}. Expected one of: {', '.join(supported)}.",
        )
    return ModelVersion(value)


def _make_instrumental(value: object) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidArgumentsError("make_instrumental must be a boolean.")
    return value


def _continuation(raw: Mapping[str, Any]) -> Continuation | None:
    task_id = _required_text(raw, "task_id")
    clip_id = _required_text(raw, "continue_clip_id")
    continue_at = raw.get("continue_at")
    has_continue_at = (
        isinstance(continue_at, int | float)
        and not isinstance(continue_at, bool)
        and math.isfinite(continue_at)
        and continue_at >= 0
    )

    if task_id is None and clip_id is None and not has_continue_at:
        return None
    if task_id is None or clip_id is None or not has_continue_at:
        raise InvalidArgumentsError(
            "Incomplete continuation parameters: task_id, continue_at and "
            "continue_clip_id must be provided together.",
        )
    return Continuation(task_id=task_id, continue_at=continue_at, clip_id=clip_id)
