import logging

import pytest
from click.testing import CliRunner

import portagemaint.cli as cli_module


@pytest.fixture
def captured(monkeypatch, tmp_path):
    captured = {}

    class FakeRunner:
        def __init__(self, config):
            captured["config"] = config

        def run(self):
            logging.getLogger("portagemaint").warning("Could not send mail to root@localhost")
            return captured.get("exit_code", 0)

    monkeypatch.setattr(cli_module, "MaintenanceRunner", FakeRunner)
    monkeypatch.setattr(cli_module, "SYSTEM_CONFIG_PATH", str(tmp_path / "system.yml"))
    monkeypatch.setattr(cli_module, "USER_CONFIG_PATH", str(tmp_path / "user.yml"))
    return captured


def test_cli_uses_defaults_without_config(captured):
    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    config = captured["config"]
    assert config.auto_abort is True
    assert config.verbosity == 0
    assert config.nice == 19
    assert config.perl_cleaner_args == "--all"
    assert config.error_email == ""


def test_cli_layers_system_user_and_explicit_config(tmp_path, captured):
    (tmp_path / "system.yml").write_text(
        "error_email: root@localhost\nnice: 19\nsync_args: --quiet\n",
        encoding="utf-8",
    )
    (tmp_path / "user.yml").write_text("nice: 5\nauto_abort: false\n", encoding="utf-8")
    explicit = tmp_path / "explicit.yml"
    explicit.write_text("sync_args: --verbose\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, ["--config", str(explicit), "-n", "7"])

    assert result.exit_code == 0
    config = captured["config"]
    assert config.error_email == "root@localhost"
    assert config.auto_abort is False
    assert config.sync_args == "--verbose"
    assert config.nice == 7


def test_cli_flags_override_config(tmp_path, captured):
    (tmp_path / "user.yml").write_text(
        "update_args: --update @world\nauto_abort: true\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(
        cli_module.main,
        [
            "-a",
            "false",
            "-u",
            "--update --deep @world",
            "-d",
            "--exclude gentoo-sources",
            "-e",
            "--library libssl.so.1.1",
            "-l",
            "--modules",
            "-r",
            "--keep-going",
            "-s",
            "--quiet",
            "--debug",
        ],
    )

    assert result.exit_code == 0
    config = captured["config"]
    assert config.auto_abort is False
    assert config.update_args == "--update --deep @world"
    assert config.depclean_args == "--exclude gentoo-sources"
    assert config.revdep_rebuild_args == "--library libssl.so.1.1"
    assert config.perl_cleaner_args == "--modules"
    assert config.preserved_rebuild_args == "--keep-going"
    assert config.sync_args == "--quiet"
    assert config.debug is True


def test_cli_short_verbose_flag_sets_level_one(captured):
    result = CliRunner().invoke(cli_module.main, ["-v"])

    assert result.exit_code == 0
    assert captured["config"].verbosity == 1


def test_cli_verbose_level_wins_over_short_flag(captured):
    result = CliRunner().invoke(cli_module.main, ["-v", "--verbose", "0"])

    assert result.exit_code == 0
    assert captured["config"].verbosity == 0


def test_cli_rejects_reserved_verbosity_levels(captured):
    result = CliRunner().invoke(cli_module.main, ["--verbose", "2"])

    assert result.exit_code == 1
    assert "config" not in captured


def test_cli_rejects_unknown_flag_with_exit_code_one(captured):
    result = CliRunner().invoke(cli_module.main, ["--frobnicate"])

    assert result.exit_code == 1
    assert "No such option" in result.output
    assert "config" not in captured


def test_cli_help_exits_zero(captured):
    result = CliRunner().invoke(cli_module.main, ["-h"])

    assert result.exit_code == 0
    assert "--sync-args" in result.output
    assert "config" not in captured


def test_cli_reports_invalid_config_file(tmp_path, captured):
    (tmp_path / "system.yml").write_text("bogus: 1\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1
    assert "Unknown configuration keys" in result.output


def test_cli_reports_bad_config_value(tmp_path, captured):
    (tmp_path / "user.yml").write_text("nice: lots\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1
    assert "Invalid value for 'nice'" in result.output


def test_cli_exits_with_runner_exit_code(captured):
    captured["exit_code"] = 4

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 4


def test_cli_is_silent_at_verbosity_zero(captured):
    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert result.output == ""
    assert cli_module.console_handler.level > logging.CRITICAL


def test_cli_verbose_run_lets_log_lines_through(captured):
    result = CliRunner().invoke(cli_module.main, ["-v"])

    assert result.exit_code == 0
    assert cli_module.console_handler.level == logging.DEBUG
