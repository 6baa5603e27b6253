"""Tool output text for a finished generation."""

from __future__ import annotations

from suno_mcp.generation.models import ClipResult


def format_clip_result(clip: ClipResult) -> str:
    """Render the completion message followed by optional clip details."""

    lines = [f"Song generated! You can listen to it here: {clip.audio_url}"]
    for label, value in (
        ("Title", clip.title),
        ("Style", clip.style_tags),
        ("Image", clip.image_url),
    ):
        if value and value.strip():
            lines.append(f"{label}: {value}")
    return "\n".join(lines)
