# tests/test_cli.py
import json
import logging

import pytest
from conftest import ScriptedClient, route
from typer.testing import CliRunner

import ollama_novelist.__main__ as cli
from ollama_novelist.errors import TransportError

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()


def _patch_client(monkeypatch, client):
    seen = {}

    def factory(**kwargs):
        seen.update(kwargs)
        return client

    monkeypatch.setattr(cli, "GenerationClient", factory)
    return seen


def test_cli_writes_log_caption_and_epub(monkeypatch, tmp_path):
    seen = _patch_client(monkeypatch, ScriptedClient(route))

    result = runner.invoke(cli.app, [
        "--prompt", "A lighthouse keeper finds a message in a bottle",
        "--chapters", "2",
        "--model", "llama3",
        "--output", str(tmp_path),
    ])

    assert result.exit_code == 0, result.output
    assert seen["model"] == "llama3"
    assert (tmp_path / "prompts" / "A lighthouse keeper finds a message in a bottle.txt").exists()
    assert (tmp_path / "cover.txt").read_text("utf-8").startswith("A lighthouse at dusk.")
    assert (tmp_path / "cover.png").exists()
    assert (tmp_path / "The Bottle at Gull Rock.epub").exists()


def test_cli_reads_config_file(monkeypatch, tmp_path):
    client = ScriptedClient(route)
    _patch_client(monkeypatch, client)
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"prompt": "from the file", "chapters": 1, "output_dir": str(tmp_path)}))

    result = runner.invoke(cli.app, ["--config", str(answers)])

    assert result.exit_code == 0, result.output
    assert "from the file" in client.prompts[0]


def test_cli_failure_exits_without_book(monkeypatch, tmp_path):
    def down(prompt):
        raise TransportError("Ollama unreachable")

    _patch_client(monkeypatch, ScriptedClient(down))
    result = runner.invoke(cli.app, ["--output", str(tmp_path)])

    assert result.exit_code == 1
    assert not list(tmp_path.glob("*.epub"))
    assert not (tmp_path / "prompts").exists()


def test_cli_missing_cover_in_config_fails_before_generation(monkeypatch, tmp_path):
    client = ScriptedClient(route)
    _patch_client(monkeypatch, client)
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"cover": str(tmp_path / "nope.png"), "output_dir": str(tmp_path)}))

    result = runner.invoke(cli.app, ["--config", str(answers)])

    assert result.exit_code == 1
    assert "Invalid settings" in result.output
    assert client.prompts == []
