import json

from typer.testing import CliRunner

from docfetch import cli
from docfetch.errors import RetrievalError
from docfetch.workflows.normalize import NormalizedOutput
from docfetch.workflows.results import MediaRef

runner = CliRunner()


def _fake_fetch(output=None, error=None):
    seen = {}

    async def fake(url, *, max_length, start_index, raw, config):
        seen.update(url=url, max_length=max_length, start_index=start_index, raw=raw)
        if error is not None:
            raise error
        return output or NormalizedOutput(url=url, text="hello")

    fake.seen = seen
    return fake


def test_minimal_help():
    result = runner.invoke(cli.app, [])
    assert result.exit_code == 0
    assert "docfetch get <url>" in result.output


def test_help_full_mentions_env_vars():
    result = runner.invoke(cli.app, ["--help-full"])
    assert result.exit_code == 0
    assert "DOCFETCH_TIMEOUT" in result.output


def test_find():
    result = runner.invoke(cli.app, ["--find", "transport"])
    assert result.exit_code == 0
    assert "flag --mode" in result.output


def test_get_prints_rendered_text(monkeypatch):
    fake = _fake_fetch(
        NormalizedOutput(url="https://example.com/", text="hello", media_refs=[MediaRef("https://example.com/a.png")])
    )
    monkeypatch.setattr(cli, "fetch_and_normalize", fake)
    result = runner.invoke(cli.app, ["get", "https://example.com/", "--max-length", "50", "--start-index", "3", "--raw"])
    assert result.exit_code == 0
    assert "Contents of https://example.com/:\nhello" in result.output
    assert "- https://example.com/a.png" in result.output
    assert fake.seen == {"url": "https://example.com/", "max_length": 50, "start_index": 3, "raw": True}


def test_get_json(monkeypatch):
    monkeypatch.setattr(cli, "fetch_and_normalize", _fake_fetch())
    result = runner.invoke(cli.app, ["get", "https://example.com/", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip().splitlines()[-1])
    assert payload["text"] == "hello"
    assert payload["images"] == []


def test_get_invalid_arguments_exit_2():
    result = runner.invoke(cli.app, ["get", "not-a-url"])
    assert result.exit_code == 2
    assert "error:" in result.output


def test_get_retrieval_error_exit_3(monkeypatch):
    err = RetrievalError("Failed to fetch https://example.com/ - status code 503", url="https://example.com/", status=503)
    monkeypatch.setattr(cli, "fetch_and_normalize", _fake_fetch(error=err))
    result = runner.invoke(cli.app, ["get", "https://example.com/"])
    assert result.exit_code == 3
    assert "status code 503" in result.output


def test_serve_rejects_unknown_mode():
    result = runner.invoke(cli.app, ["serve", "--mode", "smoke-signals"])
    assert result.exit_code == 1
    assert "Invalid mode: smoke-signals" in result.output


def test_serve_passes_mode_and_bind(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "run_server", lambda mode, host=None, port=None: calls.append((mode, host, port)))
    result = runner.invoke(cli.app, ["serve", "--mode", "http", "--host", "0.0.0.0", "--port", "9001"])
    assert result.exit_code == 0
    assert calls == [("http", "0.0.0.0", 9001)]


def test_doctor_command():
    result = runner.invoke(cli.app, ["doctor"])
    assert "Docfetch doctor" in result.output
