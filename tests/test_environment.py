"""
Tests for primer.core.environment — environment lookup, directory
ensuring, best-effort repair, and runtime settings.
"""

import logging
from pathlib import Path

import pytest
from primer.core.config import PrimerConfig
from primer.core.environment import (
    FilesystemDirectoryEnsurer,
    MappingEnvironment,
    OsEnvironment,
    RuntimeSettings,
    ensure_directories,
    resolve_settings,
)
from primer.exceptions import DirectoryError, PrimerError

from conftest import RecordingEnsurer


# =============================================================================
# EnvironmentProvider
# =============================================================================

class TestEnvironmentProviders:
    """get(name) returns the value or None; absence is never an error."""

    def test_mapping_environment_hit(self, environment):
        assert environment.get("USER") == "ada"

    def test_mapping_environment_miss(self, environment):
        assert environment.get("NOT_THERE") is None

    def test_mapping_environment_empty_value_is_absent(self):
        assert MappingEnvironment({"USER": ""}).get("USER") is None

    def test_mapping_environment_is_a_snapshot(self):
        values = {"USER": "ada"}
        env = MappingEnvironment(values)
        values["USER"] = "grace"
        assert env.get("USER") == "ada"

    def test_os_environment_reads_process_env(self, monkeypatch):
        monkeypatch.setenv("PRIMER_TEST_VALUE", "42")
        assert OsEnvironment().get("PRIMER_TEST_VALUE") == "42"

    def test_os_environment_missing_is_none(self, monkeypatch):
        monkeypatch.delenv("PRIMER_TEST_VALUE", raising=False)
        assert OsEnvironment().get("PRIMER_TEST_VALUE") is None


# =============================================================================
# FilesystemDirectoryEnsurer
# =============================================================================

class TestFilesystemDirectoryEnsurer:
    """Idempotent creation on the real filesystem."""

    def test_creates_missing_directory(self, tmp_path):
        target = tmp_path / "uploads"
        assert FilesystemDirectoryEnsurer().ensure_exists(target) is True
        assert target.is_dir()

    def test_creates_nested_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        assert FilesystemDirectoryEnsurer().ensure_exists(str(target)) is True
        assert target.is_dir()

    def test_existing_directory_is_a_no_op(self, tmp_path):
        target = tmp_path / "logs"
        target.mkdir()
        marker = target / "keep.txt"
        marker.write_text("x", encoding="utf-8")
        before = target.stat().st_mtime_ns

        assert FilesystemDirectoryEnsurer().ensure_exists(target) is False
        assert marker.read_text(encoding="utf-8") == "x"
        assert target.stat().st_mtime_ns == before

    def test_existing_file_raises_directory_error(self, tmp_path):
        target = tmp_path / "temp"
        target.write_text("not a dir", encoding="utf-8")
        with pytest.raises(DirectoryError, match="not a directory"):
            FilesystemDirectoryEnsurer().ensure_exists(target)

    def test_directory_error_is_os_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(OSError):
            FilesystemDirectoryEnsurer().ensure_exists(blocker / "child")

    def test_name_too_long_raises_directory_error(self, tmp_path):
        with pytest.raises(DirectoryError):
            FilesystemDirectoryEnsurer().ensure_exists(tmp_path / ("a" * 300))

    def test_directory_error_is_primer_error(self):
        assert issubclass(DirectoryError, PrimerError)


# =============================================================================
# ensure_directories — best effort
# =============================================================================

class TestEnsureDirectories:
    """One failure never stops the remaining attempts."""

    def test_all_created(self, recording_ensurer):
        report = ensure_directories(["uploads", "logs", "temp"], recording_ensurer)
        assert report.ok
        assert report.created == ("uploads", "logs", "temp")
        assert report.ensured == ("uploads", "logs", "temp")

    def test_existing_directories_are_ensured_not_created(self):
        ensurer = RecordingEnsurer(existing=["logs"])
        report = ensure_directories(["uploads", "logs"], ensurer)
        assert report.ensured == ("uploads", "logs")
        assert report.created == ("uploads",)

    def test_failure_does_not_stop_remaining(self, caplog):
        ensurer = RecordingEnsurer(failing=["uploads"])
        with caplog.at_level(logging.WARNING, logger="primer.core.environment"):
            report = ensure_directories(["uploads", "logs", "temp"], ensurer)

        assert ensurer.attempts == ["uploads", "logs", "temp"]
        assert not report.ok
        assert list(report.failed) == ["uploads"]
        assert "permission denied" in report.failed["uploads"]
        assert report.ensured == ("logs", "temp")
        assert "Failed to create directory uploads" in caplog.text

    def test_every_failure_is_recorded(self):
        ensurer = RecordingEnsurer(failing=["a", "b"])
        report = ensure_directories(["a", "b"], ensurer)
        assert set(report.failed) == {"a", "b"}
        assert report.ensured == ()

    def test_plain_os_error_from_ensurer_is_recorded(self):
        ensurer = RecordingEnsurer(failing=["/x/bad"], error=PermissionError)
        report = ensure_directories(["/x/bad", "/x/good"], ensurer)
        assert ensurer.attempts == ["/x/bad", "/x/good"]
        assert report.ensured == ("/x/good",)
        assert "permission denied" in report.failed["/x/bad"]

    def test_name_too_long_does_not_stop_remaining(self, tmp_path):
        too_long = tmp_path / ("a" * 300)
        report = ensure_directories([too_long, tmp_path / "ok"], FilesystemDirectoryEnsurer())
        assert list(report.failed) == [str(too_long)]
        assert report.created == (str(tmp_path / "ok"),)
        assert (tmp_path / "ok").is_dir()

    def test_report_is_read_only(self, recording_ensurer):
        report = ensure_directories(["a"], recording_ensurer)
        with pytest.raises(AttributeError):
            report.created.append("b")
        with pytest.raises(TypeError):
            report.failed["b"] = "boom"
        with pytest.raises(AttributeError):
            report.ensured = ()

    def test_accepts_paths(self, tmp_path):
        targets = [tmp_path / "x", tmp_path / "y"]
        report = ensure_directories(targets, FilesystemDirectoryEnsurer())
        assert report.created == tuple(str(t) for t in targets)
        assert all(t.is_dir() for t in targets)

    def test_progress_bar_option(self, recording_ensurer):
        report = ensure_directories(["a"], recording_ensurer, show_progress=True)
        assert report.created == ("a",)

    def test_empty_input(self, recording_ensurer):
        report = ensure_directories([], recording_ensurer)
        assert report.ok
        assert report.ensured == ()


# =============================================================================
# resolve_settings
# =============================================================================

class TestResolveSettings:
    """USER / HOME / PRIMER_WORKSPACE with defaults."""

    def test_all_values_present(self, environment):
        settings = resolve_settings(environment, PrimerConfig())
        assert settings == RuntimeSettings(
            user="ada", home="/home/ada", workspace="/srv/primer", defaults_applied=(),
        )

    def test_all_defaults(self, empty_environment):
        settings = resolve_settings(empty_environment, PrimerConfig())
        assert settings.user == "defaultuser"
        assert settings.home == "/home/defaultuser"
        assert Path(settings.workspace) == Path("/home/defaultuser") / "workspace"
        assert settings.defaults_applied == ("user", "home", "workspace")

    def test_missing_user_logs_warning(self, empty_environment, caplog):
        with caplog.at_level(logging.WARNING, logger="primer.core.environment"):
            resolve_settings(empty_environment, PrimerConfig())
        assert "$USER not set" in caplog.text

    def test_home_derived_from_user(self):
        env = MappingEnvironment({"USER": "grace"})
        settings = resolve_settings(env, PrimerConfig())
        assert settings.home == "/home/grace"
        assert settings.defaults_applied == ("home", "workspace")

    def test_workspace_derived_from_home(self):
        env = MappingEnvironment({"USER": "grace", "HOME": "/users/grace"})
        config = PrimerConfig(workspace_dirname="work")
        settings = resolve_settings(env, config)
        assert Path(settings.workspace) == Path("/users/grace") / "work"

    def test_custom_default_user(self, empty_environment):
        config = PrimerConfig(default_user="service")
        assert resolve_settings(empty_environment, config).user == "service"

    def test_settings_are_frozen(self, environment):
        settings = resolve_settings(environment, PrimerConfig())
        with pytest.raises(AttributeError):
            settings.user = "mallory"
