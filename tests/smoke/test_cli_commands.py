"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(args: list[str], timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m trivia_core.cli.main'
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    env = dict(os.environ, PYTHONIOENCODING="utf-8", COLUMNS="200", TRIVIA_LOG_LEVEL="WARNING")

    result = subprocess.run(
        [sys.executable, "-m", "trivia_core.cli.main", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=timeout,
        env=env,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command(["--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "draw" in stdout
        assert "fallback" in stdout

    def test_content_help(self):
        code, stdout, stderr = run_cli_command(["content", "--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "validate" in stdout


class TestContentCommands:
    def test_stats(self):
        code, stdout, stderr = run_cli_command(["content", "stats"])

        assert code == 0, f"stats failed: {stderr}"
        assert "Source: primary" in stdout
        assert "Content by Category" in stdout

    def test_validate_good_document(self):
        code, stdout, stderr = run_cli_command(["content", "validate", "data/questions_fixed.json"])

        assert code == 0, f"validate failed: {stderr}"
        assert "Valid" in stdout

    def test_validate_reports_skipped_records(self, tmp_path):
        document = tmp_path / "broken.json"
        document.write_text(json.dumps({
            "dogBreeds": [
                {
                    "id": "ok-1",
                    "difficulty": "easy",
                    "text": {"de": "Frage?"},
                    "answers": {"de": ["A", "B"]},
                    "correctAnswerIndex": 0,
                },
                {"id": "bad-1", "difficulty": "easy"},
            ]
        }), encoding="utf-8")

        code, stdout, stderr = run_cli_command(["content", "validate", str(document)])

        assert code == 0, f"validate failed: {stderr}"
        assert "1 items, 1 skipped" in stdout

    def test_validate_missing_file(self):
        code, stdout, _ = run_cli_command(["content", "validate", "does-not-exist.json"])

        assert code == 1
        assert "Source not found" in stdout


class TestDrawCommand:
    def test_draw(self):
        code, stdout, stderr = run_cli_command(["draw", "--any", "--seed", "smoke", "--count", "3"])

        assert code == 0, f"draw failed: {stderr}"
        assert "3 question(s) for Dog Trivia (level 1)" in stdout

    def test_draw_level_from_answers(self):
        code, stdout, stderr = run_cli_command(
            ["draw", "--path", "dogBreeds", "--count", "2", "--answered", "25"]
        )

        assert code == 0, f"draw failed: {stderr}"
        assert "(level 3)" in stdout


class TestProgressionCommands:
    def test_rewards(self):
        code, stdout, stderr = run_cli_command(["rewards", "--accuracy", "0.85"])

        assert code == 0, f"rewards failed: {stderr}"
        assert "Checkpoint Rewards" in stdout
        assert "Reward schedule is non-decreasing" in stdout

    def test_fallback_without_checkpoint(self):
        code, stdout, stderr = run_cli_command(["fallback", "--answered", "0"])

        assert code == 0, f"fallback failed: {stderr}"
        assert "restart_from_beginning" in stdout
        assert "States: game_over -> recovering -> resumed" in stdout

    def test_fallback_to_checkpoint(self):
        code, stdout, stderr = run_cli_command(["fallback", "--path", "dogTraining", "--answered", "17"])

        assert code == 0, f"fallback failed: {stderr}"
        assert "reset_to_checkpoint" in stdout
        assert "Next draw level: 2" in stdout
