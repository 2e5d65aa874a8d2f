"""Tests for argument parsing and the command-line entry point."""

import logging
from unittest.mock import patch

import pytest

from gvc import cli
from gvc.args import parse_args
from gvc.constants import Constants, ExitCodes
from gvc.errors import UserCancelledError
from gvc.update.updater import DependencyUpdater


@pytest.fixture(autouse=True)
def restore_globals(monkeypatch):
    """Keep config overrides and logging setup from leaking between tests."""
    for name in ("REQUEST_TIMEOUT", "HTTP_RETRY_MAX", "MAX_RESPONSE_BYTES"):
        monkeypatch.setattr(Constants, name, getattr(Constants, name))
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseArgs:
    """Subcommands and global options."""

    def test_update_flags(self):
        args = parse_args(["-p", "proj", "update", "-i", "--stable-only", "--filter", "okhttp"])
        assert args.COMMAND == "update"
        assert args.PROJECT_PATH == "proj"
        assert args.INTERACTIVE is True
        assert args.STABLE_ONLY is True
        assert args.FILTER == "okhttp"

    def test_defaults(self):
        args = parse_args(["check"])
        assert args.PROJECT_PATH == "."
        assert args.INCLUDE_UNSTABLE is False
        assert args.LOG_LEVEL is None
        assert args.CONFIG is None

    def test_add_flags(self):
        args = parse_args(["add", "--plugin", "--alias", "lint", "org.example.lint:1.0"])
        assert args.COMMAND == "add"
        assert args.COORDINATE == "org.example.lint:1.0"
        assert args.PLUGIN is True
        assert args.ALIAS == "lint"
        assert args.VERSION_ALIAS is None
        assert args.STABLE_ONLY is None

    def test_add_defaults_to_library(self):
        assert parse_args(["add", "g:a"]).PLUGIN is False
        assert parse_args(["add", "--library", "g:a"]).PLUGIN is False

    def test_add_kind_flags_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["add", "--plugin", "--library", "g:a"])

    def test_loglevel_is_case_insensitive(self):
        assert parse_args(["--loglevel", "debug", "list"]).LOG_LEVEL == "DEBUG"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


def run_main(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def fake_updater(library_client, plugin_client):
    def factory(_repositories):
        return DependencyUpdater(library_client, plugin_client, echo=lambda _="": None)
    return factory


class TestMain:
    """Exit codes and command dispatch."""

    def test_list(self, gradle_project, capsys):
        code = run_main(["-p", str(gradle_project), "list"])

        out = capsys.readouterr().out
        assert code == ExitCodes.SUCCESS.value
        assert "com.squareup.okhttp3:okhttp:4.10.0" in out
        assert "com.google.guava:guava:31.1" in out
        assert "org.jetbrains.kotlin.jvm:1.9.0" in out

    def test_check_does_not_write(self, gradle_project, library_client, plugin_client, capsys):
        catalog = gradle_project / "gradle" / "libs.versions.toml"
        before = catalog.read_bytes()

        with patch("gvc.workflow._default_updater", fake_updater(library_client, plugin_client)):
            code = run_main(["-p", str(gradle_project), "check"])

        out = capsys.readouterr().out
        assert code == ExitCodes.SUCCESS.value
        assert "Found 4 update(s)" in out
        assert "junit 4.12 → 4.13.2 (stable)" in out
        assert catalog.read_bytes() == before

    def test_update_with_filter(self, gradle_project, library_client, plugin_client):
        catalog = gradle_project / "gradle" / "libs.versions.toml"

        with patch("gvc.workflow._default_updater", fake_updater(library_client, plugin_client)):
            code = run_main(["-p", str(gradle_project), "update", "--filter", "junit"])

        assert code == ExitCodes.SUCCESS.value
        assert 'version = "4.13.2"' in catalog.read_text(encoding="utf-8")
        assert "guava:31.1" in catalog.read_text(encoding="utf-8")

    def test_stable_only_from_config(self, gradle_project, library_client, plugin_client):
        (gradle_project / ".gvc.yml").write_text("stable_only: true\n", encoding="utf-8")
        catalog = gradle_project / "gradle" / "libs.versions.toml"

        with patch("gvc.workflow._default_updater", fake_updater(library_client, plugin_client)):
            run_main(["-p", str(gradle_project), "update"])

        assert 'okhttp = "4.11.0"' in catalog.read_text(encoding="utf-8")

    def test_invalid_project_is_validation_error(self, tmp_path):
        assert run_main(["-p", str(tmp_path), "list"]) == ExitCodes.VALIDATION_ERROR.value

    def test_bad_config_is_validation_error(self, gradle_project, tmp_path):
        missing = tmp_path / "missing.yml"
        assert run_main(["-p", str(gradle_project), "-c", str(missing), "list"]) == ExitCodes.VALIDATION_ERROR.value

    def test_broken_catalog_is_file_error(self, gradle_project):
        (gradle_project / "gradle" / "libs.versions.toml").write_text("[libraries\n", encoding="utf-8")
        assert run_main(["-p", str(gradle_project), "list"]) == ExitCodes.FILE_ERROR.value

    def test_insecure_repository_is_validation_error(self, gradle_project):
        (gradle_project / ".gvc.yml").write_text(
            "repositories:\n  - url: http://127.0.0.1:8081/maven\n", encoding="utf-8"
        )
        assert run_main(["-p", str(gradle_project), "check"]) == ExitCodes.VALIDATION_ERROR.value

    def test_cancel_exit_code(self, gradle_project):
        with patch("gvc.cli.workflow.execute_update", side_effect=UserCancelledError()):
            assert run_main(["-p", str(gradle_project), "update", "-i"]) == ExitCodes.USER_CANCELLED.value


class TestStableOnlyDefaults:
    """Which version channel each command uses."""

    def run_command(self, gradle_project, argv, target):
        with patch(f"gvc.cli.workflow.{target}") as execute:
            cli.run(parse_args(["-p", str(gradle_project)] + argv))
        return execute.call_args.kwargs["stable_only"]

    def test_check_is_stable_only_by_default(self, gradle_project):
        assert self.run_command(gradle_project, ["check"], "execute_check") is True

    def test_check_include_unstable(self, gradle_project):
        assert self.run_command(gradle_project, ["check", "--include-unstable"], "execute_check") is False

    def test_check_follows_config(self, gradle_project):
        (gradle_project / ".gvc.yml").write_text("stable_only: false\n", encoding="utf-8")
        assert self.run_command(gradle_project, ["check"], "execute_check") is False

    def test_update_includes_unstable_by_default(self, gradle_project):
        assert self.run_command(gradle_project, ["update"], "execute_update") is False

    def test_update_stable_only_flag(self, gradle_project):
        assert self.run_command(gradle_project, ["update", "--stable-only"], "execute_update") is True


class TestAddCommand:
    """``gvc add`` end to end against fake repositories."""

    def test_add_library_with_latest_version(self, gradle_project, library_client, plugin_client, capsys):
        library_client.versions["com.squareup.retrofit2:retrofit"] = ["2.9.0", "2.11.0", "3.0.0-beta1"]
        catalog = gradle_project / "gradle" / "libs.versions.toml"

        with patch("gvc.workflow._default_updater", fake_updater(library_client, plugin_client)):
            code = run_main(["-p", str(gradle_project), "add", "--stable-only", "com.squareup.retrofit2:retrofit"])

        text = catalog.read_text(encoding="utf-8")
        assert code == ExitCodes.SUCCESS.value
        assert 'squareup-retrofit2 = "2.11.0"' in text
        assert "squareup-retrofit2-retrofit" in text
        assert 'okhttp = "4.10.0" # network stack' in text
        assert "Library 'squareup-retrofit2-retrofit' added" in capsys.readouterr().out

    def test_add_plugin_with_explicit_version(self, gradle_project, library_client, plugin_client):
        plugin_client.versions["com.diffplug.spotless:com.diffplug.spotless"] = ["6.25.0"]
        catalog = gradle_project / "gradle" / "libs.versions.toml"

        with patch("gvc.workflow._default_updater", fake_updater(library_client, plugin_client)):
            code = run_main(["-p", str(gradle_project), "add", "--plugin", "com.diffplug.spotless:6.25.0"])

        text = catalog.read_text(encoding="utf-8")
        assert code == ExitCodes.SUCCESS.value
        assert 'diffplug-spotless = "6.25.0"' in text
        assert 'id = "com.diffplug.spotless"' in text

    def test_unknown_version_is_validation_error(self, gradle_project, library_client, plugin_client):
        catalog = gradle_project / "gradle" / "libs.versions.toml"
        before = catalog.read_bytes()

        with patch("gvc.workflow._default_updater", fake_updater(library_client, plugin_client)):
            code = run_main(["-p", str(gradle_project), "add", "junit:junit:9.9"])

        assert code == ExitCodes.VALIDATION_ERROR.value
        assert catalog.read_bytes() == before

    def test_duplicate_library_is_validation_error(self, gradle_project, library_client, plugin_client):
        catalog = gradle_project / "gradle" / "libs.versions.toml"
        before = catalog.read_bytes()

        with patch("gvc.workflow._default_updater", fake_updater(library_client, plugin_client)):
            code = run_main(["-p", str(gradle_project), "add", "junit:junit:4.13.2"])

        assert code == ExitCodes.VALIDATION_ERROR.value
        assert catalog.read_bytes() == before
