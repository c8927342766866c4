import io

import pytest

from psqlx_ai import cli
from psqlx_ai.errors import MissingCredentialError
from psqlx_ai.resolver import Provider


@pytest.fixture(autouse=True)
def _quiet(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    monkeypatch.delenv("ENABLE_METRICS", raising=False)
    monkeypatch.delenv("PSQLX_AI_TIMEOUT_SECONDS", raising=False)


def test_cli_prints_completion(monkeypatch, capsys):
    observed = {}

    def fake_complete(messages, system_instruction, **kwargs):
        observed.update(messages=messages, system=system_instruction, **kwargs)
        return "SELECT 1;"

    monkeypatch.setattr(cli, "complete", fake_complete)
    rc = cli.main(["--system", "sql only", "how", "do", "I", "count?"])
    assert rc == 0
    assert capsys.readouterr().out == "SELECT 1;\n"
    assert observed["messages"] == [{"role": "user", "content": "how do I count?"}]
    assert observed["system"] == "sql only"
    assert observed["timeout_seconds"] is None


def test_cli_reads_prompt_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr(cli, "complete", lambda messages, system, **kw: messages[0]["content"].upper())
    monkeypatch.setattr("sys.stdin", io.StringIO("hello"))
    assert cli.main([]) == 0
    assert capsys.readouterr().out == "HELLO\n"


def test_cli_reports_completion_errors(monkeypatch, capsys):
    def fake_complete(messages, system_instruction, **kwargs):
        raise MissingCredentialError(Provider.OPENAI, "OPENAI_API_KEY")

    monkeypatch.setattr(cli, "complete", fake_complete)
    assert cli.main(["hi"]) == 1
    assert "OPENAI_API_KEY" in capsys.readouterr().err


def test_cli_rejects_empty_prompt(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("   "))
    assert cli.main([]) == 2
