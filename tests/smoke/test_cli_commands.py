"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate scheduling math deeply - the unit tests do that.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json

import pytest
from typer.testing import CliRunner

from recall.cli.main import app
from recall.config import get_settings

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

runner = CliRunner()

T0 = "2024-03-01T09:00:00Z"
T1 = "2024-03-02T09:00:00Z"


@pytest.fixture
def fresh_settings():
    """Re-read RECALL_* variables for each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestCLIHelp:
    def test_main_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("advance", "status", "dashboard"):
            assert command in result.stdout

    @pytest.mark.parametrize("command", ["advance", "status", "dashboard"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])

        assert result.exit_code == 0, result.output


class TestAdvance:
    def test_first_review(self):
        result = runner.invoke(app, ["advance", "5", "--now", T0])

        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["easeFactor"] == 2.5
        assert record["interval"] == 1
        assert record["repetitions"] == 1

    def test_second_review_from_state_file(self, tmp_path):
        first = runner.invoke(app, ["advance", "5", "--now", T0])
        state_file = _write(tmp_path, "state.json", json.loads(first.stdout))

        result = runner.invoke(app, ["advance", "5", "--state", str(state_file), "--now", T1])

        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["repetitions"] == 2
        assert record["interval"] == 6
        assert record["easeFactor"] == pytest.approx(2.6)

    def test_out_of_range_quality_fails(self):
        result = runner.invoke(app, ["advance", "7", "--now", T0])

        assert result.exit_code == 1

    def test_naive_now_fails(self):
        result = runner.invoke(app, ["advance", "5", "--now", "2024-03-01T09:00:00"])

        assert result.exit_code == 1

    def test_missing_state_file_fails(self, tmp_path):
        result = runner.invoke(app, ["advance", "5", "--state", str(tmp_path / "nope.json")])

        assert result.exit_code == 1

    def test_malformed_state_file_fails(self, tmp_path, sample_record):
        sample_record["easeFactor"] = 0.9
        state_file = _write(tmp_path, "state.json", sample_record)

        result = runner.invoke(app, ["advance", "4", "--state", str(state_file)])

        assert result.exit_code == 1


class TestStatus:
    def test_overdue_state(self, tmp_path, sample_record):
        state_file = _write(tmp_path, "state.json", sample_record)

        # nextReview is 2024-03-08, so this is two days overdue
        result = runner.invoke(app, ["status", str(state_file), "--now", "2024-03-10T09:00:00Z"])

        assert result.exit_code == 0, result.output
        assert "Strength" in result.stdout
        assert "80%" in result.stdout
        assert "yes" in result.stdout

    def test_invalid_json_fails(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["status", str(state_file)])

        assert result.exit_code == 1


class TestDashboard:
    def test_dashboard_renders(self, tmp_path, sample_record):
        notes = [
            {"id": "n1", "title": "Krebs Cycle", "review_data": sample_record},
            {"id": "n2", "title": "Draft note"},
        ]
        notes_file = _write(tmp_path, "notes.json", notes)

        result = runner.invoke(app, ["dashboard", str(notes_file), "--now", "2024-03-10T09:00:00Z"])

        assert result.exit_code == 0, result.output
        assert "Average memory strength" in result.stdout
        assert "80%" in result.stdout
        assert "Overdue" in result.stdout
        assert "Krebs Cycle" in result.stdout
        assert "Sun Mar 10" in result.stdout

    def test_dashboard_without_reviews(self, tmp_path):
        notes_file = _write(tmp_path, "notes.json", [{"id": "n1", "title": "Draft"}])

        result = runner.invoke(app, ["dashboard", str(notes_file)])

        assert result.exit_code == 0, result.output
        assert "N/A" in result.stdout

    def test_dashboard_requires_list(self, tmp_path, sample_record):
        notes_file = _write(tmp_path, "notes.json", sample_record)

        result = runner.invoke(app, ["dashboard", str(notes_file)])

        assert result.exit_code == 1


class TestSettingsErrors:
    def test_inconsistent_ease_settings_fail_cleanly(self, tmp_path, sample_record, monkeypatch, fresh_settings):
        monkeypatch.setenv("RECALL_MINIMUM_EASE", "3.0")
        state_file = _write(tmp_path, "state.json", sample_record)

        result = runner.invoke(app, ["status", str(state_file), "--now", T1])

        assert result.exit_code == 1
        assert "minimum_ease" in result.output
        assert not isinstance(result.exception, ValueError)

    @pytest.mark.parametrize("command", ["advance", "dashboard"])
    def test_out_of_range_setting_fails_cleanly(self, tmp_path, monkeypatch, fresh_settings, command):
        monkeypatch.setenv("RECALL_FIRST_INTERVAL", "0")
        notes_file = _write(tmp_path, "notes.json", [])
        args = ["advance", "5"] if command == "advance" else ["dashboard", str(notes_file)]

        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert "Invalid RECALL_* settings" in result.output
        assert "first_interval" in result.output
