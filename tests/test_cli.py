"""Tests for the tally command line."""

import json
from pathlib import Path

import pytest

from tally.cli.app import app
from tally.config.paths import DATA_FILE_ENV_VAR, get_tally_home
from tally.entries import load, persist

pytestmark = pytest.mark.usefixtures("restore_root_logger")


@pytest.fixture
def invoke(cli_runner, data_file):
    """Run a tally command against the temp data file."""

    def _invoke(*args: str, input: str | None = None):
        return cli_runner.invoke(app, ["--data-file", str(data_file), *args], input=input)

    return _invoke


@pytest.fixture
def seeded(data_file, sample_store) -> Path:
    persist(sample_store, data_file)
    return data_file


class TestTracking:
    """Tests for start, stop, continue and status."""

    def test_start_creates_open_entry(self, invoke, data_file):
        result = invoke("start", "write report")

        assert result.exit_code == 0
        assert "Started" in result.output
        store = load(data_file)
        assert store.is_tracking
        assert store.last.description == "write report"

    def test_start_trims_description(self, invoke, data_file):
        assert invoke("start", "  write report  ").exit_code == 0
        assert load(data_file).last.description == "write report"

    def test_start_twice_fails(self, invoke, data_file):
        invoke("start", "first")
        result = invoke("start", "second")

        assert result.exit_code == 1
        assert "already running" in result.output
        assert len(load(data_file)) == 1

    def test_stop_closes_entry(self, invoke, data_file):
        invoke("start", "write")
        result = invoke("stop")

        assert result.exit_code == 0
        assert "Stopped" in result.output
        assert not load(data_file).is_tracking

    def test_stop_when_idle_fails(self, invoke):
        result = invoke("stop")
        assert result.exit_code == 1
        assert "already stopped" in result.output

    def test_start_and_stop_at_given_times(self, invoke, data_file):
        assert invoke("start", "meeting", "--at", "2024-03-04 09:00").exit_code == 0
        result = invoke("stop", "--at", "2024-03-04 10:30")

        assert result.exit_code == 0
        assert "01:30:00" in result.output
        (entry,) = load(data_file).list()
        assert entry.start.isoformat() == "2024-03-04T09:00:00+00:00"
        assert entry.end.isoformat() == "2024-03-04T10:30:00+00:00"

    def test_unparseable_at_fails(self, invoke, data_file):
        result = invoke("start", "x", "--at", "xyzzy")
        assert result.exit_code == 1
        assert "Could not parse time" in result.output
        assert not data_file.exists()

    def test_continue_reuses_description(self, invoke, seeded):
        result = invoke("continue")

        assert result.exit_code == 0
        store = load(seeded)
        assert len(store) == 4
        assert store.active.description == "write report"

    def test_continue_on_empty_store_fails(self, invoke):
        result = invoke("continue")
        assert result.exit_code == 1
        assert "couldn't be continued" in result.output

    def test_status_without_entries(self, invoke):
        result = invoke("status")
        assert result.exit_code == 1
        assert "No entries found" in result.output

    def test_status_while_tracking(self, invoke):
        invoke("start", "deep work")
        result = invoke("status")

        assert result.exit_code == 0
        assert "Active: True" in result.output
        assert "Description: deep work" in result.output
        assert "Elapsed" in result.output

    def test_status_when_idle(self, invoke, seeded):
        result = invoke("status")
        assert result.exit_code == 1
        assert "Active: False" in result.output
        assert "End Time: 09:00:00" in result.output


class TestAutoInsertStop:
    @pytest.fixture
    def config_file(self, tmp_path) -> Path:
        path = tmp_path / "config.toml"
        path.write_text("auto_insert_stop = true\n")
        return path

    def test_start_switches_sessions(self, invoke, config_file, data_file):
        invoke("--config", str(config_file), "start", "a")
        result = invoke("--config", str(config_file), "start", "b")

        assert result.exit_code == 0
        first, second = load(data_file).list()
        assert first.end is not None
        assert first.end == second.start
        assert second.is_open

    def test_same_description_still_fails(self, invoke, config_file):
        invoke("--config", str(config_file), "start", "a")
        result = invoke("--config", str(config_file), "start", "a")
        assert result.exit_code == 1

    def test_missing_explicit_config_fails(self, invoke, tmp_path):
        result = invoke("--config", str(tmp_path / "nope.toml"), "status")
        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestShow:
    """Tests for show and the default command."""

    def test_default_command_shows_today(self, invoke):
        result = invoke()
        assert result.exit_code == 0
        assert "Work Time: 00:00:00" in result.output

    def test_empty_range_says_so(self, invoke, seeded):
        result = invoke("show", "--from", "2024-03-10")
        assert result.exit_code == 0
        assert "No entries found" in result.output
        assert "Work Time: 00:00:00" in result.output

    def test_plain_total_for_everything(self, invoke, seeded):
        result = invoke("show", "all", "--plain", "-s")
        assert result.exit_code == 0
        assert result.output.strip() == "02:45:00"

    def test_from_date_covers_one_day(self, invoke, seeded):
        result = invoke("show", "--from", "2024-03-04", "--plain")
        assert result.output.strip() == "01:45:00"

    def test_description_filter_with_range(self, invoke, seeded):
        result = invoke(
            "show", "report", "--from", "2024-03-04", "--to", "2024-03-05", "--plain"
        )
        assert result.output.strip() == "02:30:00"

    def test_custom_format(self, invoke, seeded):
        result = invoke("show", "all", "--plain", "--format", "{h}h {mm}m")
        assert result.output.strip() == "2h 45m"

    def test_multiple_days_print_table(self, invoke, seeded):
        result = invoke("show", "all")
        assert result.exit_code == 0
        assert "Work Time per Day" in result.output
        assert "Work Time: 02:45:00" in result.output

    def test_remaining_with_default_goals(self, invoke):
        result = invoke("show", "--remaining", "--plain")
        assert result.exit_code == 0
        assert result.output.strip() == "08:00:00"

    def test_remaining_week(self, invoke):
        result = invoke("show", "week", "--remaining")
        assert "Remaining Work Time: 40:00:00" in result.output

    def test_remaining_rejects_filters(self, invoke):
        result = invoke("show", "report", "--remaining")
        assert result.exit_code == 1

    def test_corrupt_store_fails(self, invoke, data_file):
        data_file.write_text("{broken\n")
        result = invoke("show", "all")
        assert result.exit_code == 1
        assert "Corrupt entry store" in result.output


class TestList:
    def test_lists_entries(self, invoke, seeded):
        result = invoke("list", "all")
        assert result.exit_code == 0
        assert "review" in result.output
        assert "Total: 3 entries" in result.output

    def test_marks_running_entry(self, invoke):
        invoke("start", "a")
        result = invoke("list")
        assert "running" in result.output
        assert "Total: 1 entry" in result.output

    def test_no_entries(self, invoke):
        result = invoke("list", "all")
        assert result.exit_code == 0
        assert "No entries found" in result.output


class TestDataCommands:
    """Tests for export, import and path."""

    def test_export_to_stdout(self, invoke, seeded):
        result = invoke("export", "-")

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert len(records) == 3
        assert records[0]["duration_seconds"] == 5400.0

    def test_export_open_entry_keeps_null_end(self, invoke):
        invoke("start", "a")
        records = json.loads(invoke("export", "-").stdout)
        assert records[0]["end"] is None
        assert records[0]["duration_seconds"] is None

    def test_export_readable(self, invoke, seeded):
        result = invoke("export", "-", "--readable")
        lines = result.stdout.splitlines()
        assert lines[0] == 'Start "write report" at 2024.03.04-09:00:00'
        assert lines[1] == "Stop at 2024.03.04-10:30:00"

    def test_export_with_filter(self, invoke, seeded):
        result = invoke("export", "-", "--from", "2024-03-05")
        assert [r["description"] for r in json.loads(result.stdout)] == ["write report"]

    def test_export_then_import(self, invoke, cli_runner, seeded, tmp_path):
        export_file = tmp_path / "export.json"
        assert invoke("export", str(export_file), "--pretty").exit_code == 0

        target = tmp_path / "imported.jsonl"
        result = cli_runner.invoke(
            app, ["--data-file", str(target), "import", str(export_file)]
        )

        assert result.exit_code == 0
        assert "Imported 3 entries" in result.output
        assert load(target).list() == load(seeded).list()

    def test_import_declined_keeps_entries(self, invoke, seeded, tmp_path):
        export_file = tmp_path / "export.json"
        export_file.write_text("[]")

        result = invoke("import", str(export_file), input="n\n")

        assert result.exit_code == 1
        assert "Cancelled" in result.output
        assert len(load(seeded)) == 3

    def test_import_force_replaces(self, invoke, seeded, tmp_path):
        export_file = tmp_path / "export.json"
        export_file.write_text("[]")

        assert invoke("import", str(export_file), "--force").exit_code == 0
        assert len(load(seeded)) == 0

    def test_import_rejects_invalid_file(self, invoke, data_file, tmp_path):
        export_file = tmp_path / "export.json"
        export_file.write_text('{"not": "a list"}')

        result = invoke("import", str(export_file))

        assert result.exit_code == 1
        assert "Corrupt entry store" in result.output
        assert not data_file.exists()

    def test_path_prints_data_file(self, invoke, data_file):
        result = invoke("path")
        assert result.output.strip() == str(data_file)

    def test_path_honors_data_file_env_var(self, cli_runner, monkeypatch, tmp_path):
        monkeypatch.setenv(DATA_FILE_ENV_VAR, str(tmp_path / "from-env.jsonl"))
        result = cli_runner.invoke(app, ["path"])
        assert result.output.strip() == str(tmp_path / "from-env.jsonl")

    def test_path_defaults_to_tally_home(self, cli_runner):
        result = cli_runner.invoke(app, ["path"])
        assert result.output.strip() == str(get_tally_home() / "entries.jsonl")


class TestConfigCommand:
    def test_validate(self, cli_runner, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('timezone = "Europe/Berlin"\n')

        result = cli_runner.invoke(app, ["config", "validate", "--path", str(config_file)])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_validate_invalid(self, cli_runner, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('timezone = "Nowhere/Special"\n')

        result = cli_runner.invoke(app, ["config", "validate", "--path", str(config_file)])

        assert result.exit_code == 1
        assert "validation failed" in result.output

    def test_uses_global_config_option(self, cli_runner, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text('timezone = "Nowhere/Special"\n')

        result = cli_runner.invoke(app, ["--config", str(config_file), "config", "validate"])

        assert result.exit_code == 1
        assert "validation failed" in result.output

    def test_show_global_config_file(self, cli_runner, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text("auto_insert_stop = true\n")

        result = cli_runner.invoke(app, ["--config", str(config_file), "config", "show"])

        assert result.exit_code == 0
        assert "auto_insert_stop" in result.output

    def test_show_missing(self, cli_runner):
        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_unknown_action(self, cli_runner):
        result = cli_runner.invoke(app, ["config", "bogus"])
        assert result.exit_code == 1
        assert "Unknown action" in result.output

