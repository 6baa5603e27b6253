from __future__ import annotations

import json

import allure
from click.testing import CliRunner

from suno_mcp import __version__
from suno_mcp.controllers import GenerateCommand
from suno_mcp.main import suno_mcp

pytestmark = [
    allure.epic("Generate Music Tool"),
    allure.feature("CLI"),
]


def test_version():
    assert __version__


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(suno_mcp, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_tool_schema_prints_tool_definition():
    result = CliRunner().invoke(suno_mcp, ["tool-schema"])

    assert result.exit_code == 0
    tool = json.loads(result.output)
    assert tool["name"] == "generate_music"
    assert "gpt_description_prompt" in tool["inputSchema"]["properties"]


def test_serve_fails_fast_without_api_key(monkeypatch):
    monkeypatch.delenv("SUNO_MCP_API_KEY", raising=False)
    monkeypatch.delenv("SunoKey", raising=False)

    result = CliRunner().invoke(suno_mcp, ["serve"])

    assert result.exit_code != 0
    assert "Suno API key is required" in result.output


def test_generate_fails_fast_without_api_key(monkeypatch):
    monkeypatch.delenv("SUNO_MCP_API_KEY", raising=False)
    monkeypatch.delenv("SunoKey", raising=False)

    result = CliRunner().invoke(suno_mcp, ["generate", "--description", "rainy day"])

    assert result.exit_code != 0
    assert "Suno API key is required" in result.output


def test_generate_command_builds_host_style_arguments():
    command = GenerateCommand(
        prompt=None,
        tags="lofi",
        title=None,
        description="rainy day",
        model_version="chirp-v3-5",
        make_instrumental=True,
        continue_task_id="task-1",
        continue_at=12.0,
        continue_clip_id="clip-1",
        log_level=None,
    )

    assert command.to_arguments() == {
        "tags": "lofi",
        "gpt_description_prompt": "rainy day",
        "mv": "chirp-v3-5",
        "make_instrumental": True,
        "task_id": "task-1",
        "continue_at": 12.0,
        "continue_clip_id": "clip-1",
    }
