"""Controllers for suno-mcp CLI commands."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any

from mcp import types
from mcp.shared.exceptions import McpError

from suno_mcp.config import Settings
from suno_mcp.generation.service import MusicGenerationService
from suno_mcp.http.suno_client import SunoTaskClient
from suno_mcp.server import TOOL_NAME, generate_music_tool, handle_call_tool, serve_stdio

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(slots=True)
class ServeCommand:
    """CLI input for the stdio server."""

    log_level: str | None


@dataclass(slots=True)
class GenerateCommand:
    """CLI input for one direct generation, bypassing the MCP host."""

    prompt: str | None
    tags: str | None
    title: str | None
    description: str | None
    model_version: str | None
    make_instrumental: bool
    continue_task_id: str | None
    continue_at: float | None
    continue_clip_id: str | None
    log_level: str | None

    def to_arguments(self) -> dict[str, Any]:
        """Build the same argument bag a host would send."""

        candidates: dict[str, Any] = {
            "prompt": self.prompt,
            "tags": self.tags,
            "title": self.title,
            "gpt_description_prompt": self.description,
            "mv": self.model_version,
            "task_id": self.continue_task_id,
            "continue_at": self.continue_at,
            "continue_clip_id": self.continue_clip_id,
        }
        arguments = {name: value for name, value in candidates.items() if value is not None}
        if self.make_instrumental:
            arguments["make_instrumental"] = True
        return arguments


@dataclass(slots=True)
class GenerateResult:
    """Lines to print and whether the generation produced audio."""

    lines: list[str]
    success: bool


class MusicCliController:
    """Runs CLI commands against environment settings."""

    def serve(self, command: ServeCommand) -> None:
        """Validate configuration, then block serving MCP on stdio."""

        settings = Settings.from_env()
        settings.validate_for_server()
        configure_logging(command.log_level or settings.server.log_level)
        try:
            asyncio.run(serve_stdio(settings))
        except KeyboardInterrupt:
            logger.info("Received interrupt, shutting down Suno MCP server")

    def generate(self, command: GenerateCommand) -> GenerateResult:
        """Run one tool call in-process and return its text."""

        settings = Settings.from_env()
        settings.validate_for_server()
        configure_logging(command.log_level or settings.server.log_level)
        try:
            result = asyncio.run(_generate_once(settings, command.to_arguments()))
        except McpError as error:
            return GenerateResult(lines=[error.error.message], success=False)
        text_lines = [
            line
            for block in result.content
            if isinstance(block, types.TextContent)
            for line in block.text.splitlines()
        ]
        return GenerateResult(lines=text_lines, success=not result.isError)

    def tool_schema(self) -> list[str]:
        """Render the advertised tool definition as JSON."""

        tool = generate_music_tool()
        return json.dumps(tool.model_dump(exclude_none=True), indent=2).splitlines()


async def _generate_once(settings: Settings, arguments: dict[str, Any]) -> types.CallToolResult:
    async with SunoTaskClient(settings.suno) as client:
        service = MusicGenerationService(client=client, polling=settings.polling)
        return await handle_call_tool(
            service,
            types.CallToolRequestParams(name=TOOL_NAME, arguments=arguments),
        )


def configure_logging(level: str) -> None:
    """Send logs to stderr; stdout carries the MCP channel."""

    logging.basicConfig(stream=sys.stderr, level=level.upper(), format=LOG_FORMAT, force=True)
