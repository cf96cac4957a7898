"""Unit tests for the CLI module (repo_edit_bot.cli.main)."""

import json
from unittest.mock import MagicMock, patch

import pytest

from repo_edit_bot.agents.exceptions import AgentError
from repo_edit_bot.cli.main import (
    EXIT_AGENT_ERROR,
    EXIT_CREDENTIAL_ERROR,
    EXIT_INVALID_INPUT,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_ORCHESTRATOR_ERROR,
    EXIT_SUCCESS,
    EXIT_UNEXPECTED,
    build_parser,
    format_result_json,
    main,
    parse_repo,
)
from repo_edit_bot.models import FailureKind, PipelineResult, UndoResult
from repo_edit_bot.orchestrator import AgentSession, CodeAgent
from repo_edit_bot.orchestrator.exceptions import PipelineError
from repo_edit_bot.storage import InMemoryHistoryStore

from conftest import ScriptedBackend


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GITHUB_TOKEN",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "REPO_EDIT_BOT_PROVIDER",
        "REPO_EDIT_BOT_MAX_RETRIES",
    ):
        monkeypatch.delenv(name, raising=False)


def _run(argv, session):
    with patch("repo_edit_bot.cli.main.create_session", return_value=session):
        return main(argv)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class TestParser:
    def test_chat_command(self):
        args = build_parser().parse_args(["chat", "acme/site", "make it blue"])
        assert args.command == "chat"
        assert args.repo == "acme/site"
        assert args.message == "make it blue"

    def test_undo_command(self):
        args = build_parser().parse_args(["--output-json", "undo", "acme/site", "--commit", "abc"])
        assert args.command == "undo"
        assert args.commit == "abc"
        assert args.output_json

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_rejects_unknown_provider(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--provider", "other", "chat", "a/b", "x"])


class TestParseRepo:
    def test_valid(self):
        repo = parse_repo("acme/site", "t", "https://api.github.com")
        assert repo.full_name == "acme/site"

    @pytest.mark.parametrize("raw", ["acme", "acme/site/extra", "/site", ""])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_repo(raw, "t", "https://api.github.com")


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------

class TestMain:
    def test_invalid_repo(self, capsys):
        assert main(["--token", "t", "chat", "not-a-repo", "hi"]) == EXIT_INVALID_INPUT

    def test_missing_token(self, capsys):
        assert main(["chat", "acme/site", "hi"]) == EXIT_INVALID_INPUT
        assert "GITHUB_TOKEN" in capsys.readouterr().err

    def test_dry_run_hides_secrets(self, capsys):
        code = main(["--dry-run", "--output-json", "--token", "ghp_secret", "chat", "acme/site", "hi"])
        assert code == EXIT_SUCCESS
        out = capsys.readouterr().out
        config = json.loads(out)
        assert config["repo"] == "acme/site"
        assert "ghp_secret" not in out

    def test_chat_human_output(self, capsys):
        session = MagicMock()
        session.send.return_value = PipelineResult(
            response="Done.", files_changed=["a.css"], commit_sha="abcdef123", commit_message="m"
        )
        assert _run(["--token", "t", "chat", "acme/site", "blue"], session) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Done." in out
        assert "[abcdef1] m" in out
        session.send.assert_called_once_with("blue")

    def test_chat_json_output(self, capsys):
        session = MagicMock()
        session.send.return_value = PipelineResult(response="hi")
        assert _run(["--output-json", "--token", "t", "chat", "acme/site", "hi"], session) == 0
        assert json.loads(capsys.readouterr().out)["response"] == "hi"

    def test_undo_last(self, capsys):
        session = MagicMock()
        session.undo_last.return_value = UndoResult(commit_sha="abcdef123", files_reverted=["a"])
        assert _run(["--token", "t", "undo", "acme/site"], session) == EXIT_SUCCESS
        assert "Reverted 1 file(s) from abcdef1" in capsys.readouterr().out

    def test_undo_specific_commit(self, capsys):
        session = MagicMock()
        session.undo.return_value = UndoResult(commit_sha="abc1234")
        assert _run(["--token", "t", "undo", "acme/site", "--commit", "abc1234"], session) == 0
        session.undo.assert_called_once_with("abc1234")
        session.agent.undo.assert_not_called()
        session.undo_last.assert_not_called()

    def test_undo_commit_flags_recorded_run(self, remote, repo_ref, make_adapter, capsys):
        backend = ScriptedBackend(
            [
                "code",
                '["src/App.css"]',
                json.dumps(
                    {
                        "explanation": "Done.",
                        "changes": [{"path": "src/App.css", "content": "h1 { color: blue; }"}],
                    }
                ),
            ]
        )
        agent = CodeAgent(adapter=make_adapter(backend), gateway_factory=lambda repo: remote)
        store = InMemoryHistoryStore()
        session = AgentSession(agent, store, repo_ref)
        sent = session.send("blue title")

        argv = ["--token", "t", "undo", "acme/site", "--commit", sent.commit_sha]
        assert _run(argv, session) == EXIT_SUCCESS

        assert not store.commits(repo_ref.key)[0].can_undo
        assert store.latest_undoable(repo_ref.key) is None

    @pytest.mark.parametrize(
        "name, value",
        [
            ("REPO_EDIT_BOT_PROVIDER", "other"),
            ("REPO_EDIT_BOT_MAX_RETRIES", "abc"),
            ("REPO_EDIT_BOT_MAX_RETRIES", "0"),
        ],
    )
    def test_invalid_environment_settings(self, monkeypatch, capsys, name, value):
        monkeypatch.setenv(name, value)
        assert main(["--token", "t", "chat", "acme/site", "hi"]) == EXIT_INVALID_INPUT
        assert "invalid configuration" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (PipelineError("denied", FailureKind.CREDENTIAL), EXIT_CREDENTIAL_ERROR),
            (PipelineError("no parent", FailureKind.PRECONDITION), EXIT_AGENT_ERROR),
            (PipelineError("429", FailureKind.BACKEND), EXIT_ORCHESTRATOR_ERROR),
            (AgentError("x"), EXIT_AGENT_ERROR),
            (KeyboardInterrupt(), EXIT_KEYBOARD_INTERRUPT),
            (RuntimeError("boom"), EXIT_UNEXPECTED),
        ],
    )
    def test_error_exit_codes(self, exc, expected, capsys):
        session = MagicMock()
        session.send.side_effect = exc
        assert _run(["--token", "t", "chat", "acme/site", "hi"], session) == expected

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        session = MagicMock()
        session.send.return_value = PipelineResult(response="ok")
        with patch("repo_edit_bot.cli.main.create_session", return_value=session) as create:
            assert main(["chat", "acme/site", "hi"]) == EXIT_SUCCESS
        repo = create.call_args.args[2]
        assert repo.token == "ghp_env"


def test_format_result_json():
    data = json.loads(format_result_json(UndoResult(commit_sha="c1", files_reverted=["a"])))
    assert data == {"commit_sha": "c1", "files_reverted": ["a"]}
