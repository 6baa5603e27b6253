"""MCP stdio server exposing the `generate_music` tool."""

from __future__ import annotations

import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from suno_mcp import __version__
from suno_mcp.config import Settings
from suno_mcp.generation.errors import InvalidArgumentsError
from suno_mcp.generation.models import DEFAULT_MODEL_VERSION, ModelVersion
from suno_mcp.generation.service import MusicGenerationService, ToolOutcome
from suno_mcp.http.suno_client import SunoTaskClient

logger = logging.getLogger(__name__)

TOOL_NAME = "generate_music"

TOOL_DESCRIPTION = (
    "Generates a song using the Suno API. Provide lyrics, style, and title for custom "
    "mode, or a description for inspiration mode. Returns the audio URL upon completion. "
    "Polling for results may take a few minutes.\n\n"
    "When returning an audio URL, please use the following HTML format for user "
    "convenience:\n"
    "```html\n"
    "<audio controls>\n"
    '  <source src="YOUR_AUDIO_URL_HERE" type="audio/mpeg">\n'
    "</audio>\n"
    "<br>\n"
    '<a href="YOUR_AUDIO_URL_HERE" download="SONG_TITLE.mp3">Download</a>\n'
    "```"
)


def tool_input_schema() -> dict[str, Any]:
    """JSON schema advertised for the tool; conditional rules live in the validator."""

    return {
        "type": "object",
        "properties": {
            "prompt": {
                "type": "string",
                "description": (
                    "Lyrics content. Required for custom mode. "
                    "Example: '[Verse 1]\\nUnder the starry sky...'"
                ),
            },
            "tags": {
                "type": "string",
                "description": (
                    "Music style tags, comma-separated. Required for custom mode. "
                    "Example: 'acoustic, folk, pop'"
                ),
            },
            "title": {
                "type": "string",
                "description": "Song title. Required for custom mode.",
            },
            "mv": {
                "type": "string",
                "enum": [version.value for version in ModelVersion],
                "description": (
                    f"Optional. Model version. Defaults to '{DEFAULT_MODEL_VERSION.value}'."
                ),
            },
            "make_instrumental": {
                "type": "boolean",
                "description": (
                    "Optional. Whether to generate instrumental music. Defaults to false."
                ),
            },
            "gpt_description_prompt": {
                "type": "string",
                "description": (
                    "Optional. Description for inspiration mode. When provided, "
                    "'prompt', 'tags' and 'title' are not required."
                ),
            },
            "task_id": {
                "type": "string",
                "description": (
                    "Optional. Task ID of a previous song to continue. "
                    "Requires 'continue_at' and 'continue_clip_id'."
                ),
            },
            "continue_at": {
                "type": "number",
                "description": (
                    "Optional. Time in seconds from which to continue the song. "
                    "Requires 'task_id' and 'continue_clip_id'."
                ),
            },
            "continue_clip_id": {
                "type": "string",
                "description": (
                    "Optional. Clip ID of the song part to continue. "
                    "Requires 'task_id' and 'continue_at'."
                ),
            },
        },
        "required": [],
    }


def generate_music_tool() -> types.Tool:
    return types.Tool(
        name=TOOL_NAME,
        description=TOOL_DESCRIPTION,
        inputSchema=tool_input_schema(),
    )


def build_server(service: MusicGenerationService, *, name: str) -> Server:
    """Wire tool listing and dispatch onto a low-level MCP server."""

    server: Server = Server(name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [generate_music_tool()]

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        return types.ServerResult(await handle_call_tool(service, request.params))

    # Registered directly so McpError reaches the host as a protocol fault
    # instead of being folded into an error-flagged result.
    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def handle_call_tool(
    service: MusicGenerationService,
    params: types.CallToolRequestParams,
) -> types.CallToolResult:
    """Dispatch one tool call; protocol-level problems raise `McpError`."""

    if params.name != TOOL_NAME:
        raise McpError(
            types.ErrorData(
                code=types.METHOD_NOT_FOUND,
                message=f"Unknown tool: {params.name!r}",
            ),
        )

    try:
        outcome = await service.generate(params.arguments or {})
    except InvalidArgumentsError as error:
        logger.warning("Invalid arguments for %s: %s", TOOL_NAME, error)
        raise McpError(
            types.ErrorData(
                code=types.INVALID_PARAMS,
                message=f"Invalid parameters for {TOOL_NAME}: {error}",
            ),
        ) from error
    except Exception as error:  # noqa: BLE001
        logger.exception("Unexpected error while generating music")
        raise McpError(
            types.ErrorData(
                code=types.INTERNAL_ERROR,
                message=f"An unexpected error occurred: {error}",
            ),
        ) from error

    return tool_result(outcome)


def tool_result(outcome: ToolOutcome) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=outcome.text)],
        isError=outcome.is_error,
    )


async def serve_stdio(settings: Settings) -> None:
    """Run the MCP server on stdin/stdout until the host disconnects."""

    async with SunoTaskClient(settings.suno) as client:
        service = MusicGenerationService(client=client, polling=settings.polling)
        server = build_server(service, name=settings.server.name)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Suno MCP server %s is ready on stdio", settings.server.name)
            await server.run(read_stream, write_stream, server.create_initialization_options())
