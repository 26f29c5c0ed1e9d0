"""
Unit Tests for the CLI

Tests one-shot and interactive modes and exit codes.
"""

import io

import pytest
from unittest.mock import patch

import cli
from ai import ConfigurationError
from services import ChatService
from tests.fakes import scripted_pipeline_backend


@pytest.fixture
def run_cli(test_settings):
    """Run cli.main over a scripted backend; returns (exit_code, stdout, backend)."""
    def runner(argv, stdin_text="", reply="Hi!", intent="chat"):
        backend = scripted_pipeline_backend(intent=intent, reply=reply)
        stdout = io.StringIO()

        def make_service(settings):
            return ChatService(settings, backend=backend)

        with patch("cli.load_settings", return_value=test_settings), \
                patch("cli.ChatService", side_effect=make_service), \
                patch("cli.setup_logging"):
            code = cli.main(argv, stdin=io.StringIO(stdin_text), stdout=stdout)

        return code, stdout.getvalue(), backend
    return runner


class TestOneShot:
    """Test single-message mode."""

    def test_prints_reply(self, run_cli):
        code, out, _ = run_cli(["hello"])

        assert code == cli.EXIT_OK
        assert out == "Hi!\n"

    def test_response_failure_exit_code(self, run_cli):
        code, out, _ = run_cli(["hello"], reply=RuntimeError("503"))

        assert code == cli.EXIT_TURN_FAILED
        assert out == ""

    def test_classification_failure_still_succeeds(self, run_cli):
        code, out, _ = run_cli(["hello"], intent=RuntimeError("classifier down"))

        assert code == cli.EXIT_OK
        assert out == "Hi!\n"

    def test_missing_config_exit_code(self):
        error = ConfigurationError("GOOGLE_API_KEY not found in environment variables.")

        with patch("cli.load_settings", side_effect=error):
            assert cli.main(["hello"]) == cli.EXIT_CONFIG_ERROR

    def test_invalid_environment_exit_code(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "k")
        monkeypatch.setenv("TIMEOUT", "soon")

        assert cli.main(["hello"]) == cli.EXIT_CONFIG_ERROR

    def test_search_flag_overrides_settings(self, run_cli):
        code, _, backend = run_cli(["--search", "none", "who is the president?"], intent="search")

        assert code == cli.EXIT_OK
        assert not any("[[ ## query ## ]]" in call["prompt"] for call in backend.calls)


class TestInteractive:
    """Test interactive loop."""

    def test_reads_lines_until_eof(self, run_cli):
        code, out, backend = run_cli([], stdin_text="hello\n\nhow are you?\n")

        assert code == cli.EXIT_OK
        assert out.splitlines()[1:] == ["Hi!", "Hi!"]
        # Second turn sees the first in its history
        last_prompt = [c["prompt"] for c in backend.calls if "[[ ## reply ## ]]" in c["prompt"]][-1]
        assert "User: hello\nAssistant: Hi!" in last_prompt

    def test_quit_command_stops(self, run_cli):
        code, out, _ = run_cli([], stdin_text="hello\nexit\nignored\n")

        assert code == cli.EXIT_OK
        assert out.splitlines()[1:] == ["Hi!"]

    def test_failed_turn_sets_exit_code(self, run_cli):
        code, _, _ = run_cli([], stdin_text="hello\n", reply=RuntimeError("503"))

        assert code == cli.EXIT_TURN_FAILED
