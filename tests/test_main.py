"""Tests for the bootstrap entry point."""

import pytest

from main import bootstrap


class TestBootstrap:
    """Test suite for bootstrap()."""

    @pytest.fixture(autouse=True)
    def isolated_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

    def test_malformed_settings_exit_code(self, tmp_path, monkeypatch, capsys):
        """Test that a broken settings file exits with status 2 and a log line."""
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        monkeypatch.setenv("PEWPEW_SETTINGS_PATH", str(path))

        assert bootstrap(["--no-camera"]) == 2
        assert "Invalid configuration" in capsys.readouterr().out

    def test_invalid_override_exit_code(self, tmp_path, monkeypatch):
        """Test that a non-positive time limit from the CLI is rejected up front."""
        monkeypatch.setenv("PEWPEW_SETTINGS_PATH", str(tmp_path / "missing.json"))
        assert bootstrap(["--no-camera", "--time-limit", "0"]) == 2
