"""CLI entrypoint for suno-mcp."""

import rich_click as click

from suno_mcp import __version__
from suno_mcp.controllers import GenerateCommand, MusicCliController, ServeCommand
from suno_mcp.generation.models import ModelVersion

click.rich_click.USE_MARKDOWN = True
CONTROLLER = MusicCliController()
LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


@click.group()
@click.version_option(version=__version__, prog_name="suno-mcp")
def suno_mcp() -> None:
    """Suno music generation MCP server."""


@suno_mcp.command("serve")
@click.option(
    "--log-level",
    type=LOG_LEVELS,
    default=None,
    help="Override SUNO_MCP_LOG_LEVEL. Logs go to stderr.",
)
def serve(log_level: str | None) -> None:
    """Serve the `generate_music` tool over MCP stdio."""

    try:
        CONTROLLER.serve(ServeCommand(log_level=log_level))
    except ValueError as error:
        raise click.ClickException(str(error)) from error


@suno_mcp.command("generate")
@click.option("--prompt", default=None, help="Lyrics. Required in custom mode.")
@click.option("--tags", default=None, help="Comma-separated style tags. Required in custom mode.")
@click.option("--title", default=None, help="Song title. Required in custom mode.")
@click.option(
    "--description",
    default=None,
    help="Free-form description; switches to inspiration mode.",
)
@click.option(
    "--model-version",
    type=click.Choice([version.value for version in ModelVersion]),
    default=None,
    help="Model version (default chirp-v4).",
)
@click.option("--instrumental", is_flag=True, default=False, help="Generate without vocals.")
@click.option("--continue-task-id", default=None, help="Task ID of the song to continue.")
@click.option(
    "--continue-at",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds into the clip to continue from.",
)
@click.option("--continue-clip-id", default=None, help="Clip ID to continue.")
@click.option("--log-level", type=LOG_LEVELS, default=None, help="Override SUNO_MCP_LOG_LEVEL.")
def generate(  # noqa: PLR0913
    prompt: str | None,
    tags: str | None,
    title: str | None,
    description: str | None,
    model_version: str | None,
    instrumental: bool,
    continue_task_id: str | None,
    continue_at: float | None,
    continue_clip_id: str | None,
    log_level: str | None,
) -> None:
    """Generate one song directly, without an MCP host."""

    try:
        result = CONTROLLER.generate(
            GenerateCommand(
                prompt=prompt,
                tags=tags,
                title=title,
                description=description,
                model_version=model_version,
                make_instrumental=instrumental,
                continue_task_id=continue_task_id,
                continue_at=continue_at,
                continue_clip_id=continue_clip_id,
                log_level=log_level,
            ),
        )
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Music generation failed.")


@suno_mcp.command("tool-schema")
def tool_schema() -> None:
    """Print the tool definition advertised to MCP hosts."""

    _emit_lines(CONTROLLER.tool_schema())


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    suno_mcp()
