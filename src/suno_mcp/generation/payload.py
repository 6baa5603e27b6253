"""Submission payload mapping."""

from __future__ import annotations

from typing import Any

from suno_mcp.generation.models import (
    DEFAULT_MODEL_VERSION,
    CustomRequest,
    GenerationOptions,
    GenerationRequest,
)


def build_submission_payload(request: GenerationRequest) -> dict[str, Any]:
    """Map a validated request to the JSON body of the submit endpoint.

    In inspiration mode the upstream API reads the presence of prompt/tags/title
    as a mode signal, so unsupplied ones are omitted instead of sent empty.
    """

    payload: dict[str, Any] = {}
    if isinstance(request, CustomRequest):
        payload["prompt"] = request.prompt
        payload["tags"] = request.tags
        payload["title"] = request.title
    else:
        payload["gpt_description_prompt"] = request.description
        for name, value in (
            ("prompt", request.prompt),
            ("tags", request.tags),
            ("title", request.title),
        ):
            if value:
                payload[name] = value
    payload.update(_options_payload(request.options))
    return payload


def _options_payload(options: GenerationOptions) -> dict[str, Any]:
    version = options.model_version or DEFAULT_MODEL_VERSION
    fields: dict[str, Any] = {
        "mv": version.value,
        "make_instrumental": options.make_instrumental,
    }
    if options.continuation is not None:
        fields["task_id"] = options.continuation.task_id
        fields["continue_at"] = options.continuation.continue_at
        fields["continue_clip_id"] = options.continuation.clip_id
    return fields
