import json
from pathlib import Path
from unittest.mock import MagicMock

from typer.testing import CliRunner

from cliniccache.domain.models.cache import CacheStats

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# fresh_app: the Typer app with dependencies rebuilt for this test
# mock_console_display: MagicMock (patches ConsoleDisplay)
# isolated_config (autouse): CACHE_DIR points into tmp_path


def test_set_then_get_flow(runner: CliRunner, fresh_app, mock_console_display: MagicMock):
    result = runner.invoke(fresh_app, ["set", "clinic_1", '{"name": "Downtown"}', "--ttl", "60"])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_info.assert_called_once_with("Cached 'clinic_1' in tier 'both'.")

    result = runner.invoke(fresh_app, ["get", "clinic_1"])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_value.assert_called_once_with("clinic_1", {"name": "Downtown"})
    mock_console_display.display_error.assert_not_called()


def test_values_survive_a_new_process(runner: CliRunner, fresh_app, mock_console_display: MagicMock, tmp_path: Path):
    from cliniccache import main

    runner.invoke(fresh_app, ["set", "dentist_profile_7", '{"id": "7"}', "--tier", "persistent"])
    # A new composition root only sees what reached the disk tier
    main.reset_dependencies()

    result = runner.invoke(fresh_app, ["get", "dentist_profile_7"])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_value.assert_called_once_with("dentist_profile_7", {"id": "7"})
    assert (tmp_path / "storage").is_dir()


def test_memory_tier_does_not_survive_a_new_process(runner: CliRunner, fresh_app, mock_console_display: MagicMock):
    from cliniccache import main

    runner.invoke(fresh_app, ["set", "appointments_42", "[1, 2]", "-t", "memory"])
    main.reset_dependencies()

    runner.invoke(fresh_app, ["get", "appointments_42"])
    mock_console_display.display_warning.assert_called_once_with("No cached data for 'appointments_42'.")


def test_stats_flow(runner: CliRunner, fresh_app, mock_console_display: MagicMock):
    runner.invoke(fresh_app, ["set", "a", "1"])
    runner.invoke(fresh_app, ["set", "b", "2", "--tier", "memory"])

    result = runner.invoke(fresh_app, ["stats"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_stats.assert_called_once_with(
        CacheStats(memory_size=2, persistent_size=1, memory_keys=["a", "b"], persistent_keys=["a"])
    )


def test_invalidate_flow(runner: CliRunner, fresh_app, mock_console_display: MagicMock):
    for key in ("dentist_profile_42", "patient_profile_42", "appointments_42", "clinic_42"):
        runner.invoke(fresh_app, ["set", key, json.dumps({"key": key})])

    result = runner.invoke(fresh_app, ["invalidate", "42"])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"

    mock_console_display.reset_mock()
    runner.invoke(fresh_app, ["get", "patient_profile_42"])
    mock_console_display.display_warning.assert_called_once_with("No cached data for 'patient_profile_42'.")
    runner.invoke(fresh_app, ["get", "clinic_42"])
    mock_console_display.display_value.assert_called_once_with("clinic_42", {"key": "clinic_42"})


def test_clear_and_cleanup_flow(runner: CliRunner, fresh_app, mock_console_display: MagicMock):
    runner.invoke(fresh_app, ["set", "a", "1"])

    result = runner.invoke(fresh_app, ["clear"])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_info.assert_any_call("Cache tier 'both' cleared successfully.")

    result = runner.invoke(fresh_app, ["cleanup"])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    mock_console_display.display_info.assert_any_call("Cleanup removed 0 entries (memory: 0, persistent: 0).")


def test_invalid_input_is_reported(runner: CliRunner, fresh_app, mock_console_display: MagicMock):
    result = runner.invoke(fresh_app, ["set", "k", "{broken"])
    assert result.exit_code == 0
    result = runner.invoke(fresh_app, ["clear", "--tier", "cloud"])
    assert result.exit_code == 0

    assert mock_console_display.display_error.call_count == 2
    mock_console_display.display_info.assert_not_called()


def test_real_console_output(runner: CliRunner, fresh_app):
    runner.invoke(fresh_app, ["set", "clinic_9", '{"name": "Uptown"}'])
    result = runner.invoke(fresh_app, ["get", "clinic_9"])
    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert "Uptown" in result.output
