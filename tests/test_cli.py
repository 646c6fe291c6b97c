from click.testing import CliRunner

import desksetup.cli as cli_module
from desksetup.models import Profile


def _fake_setup(captured, exit_code=0):
    class FakeSetup:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def run(self):
            return exit_code

    return FakeSetup


def test_cli_requires_root(monkeypatch):
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 1000)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup({}))

    result = CliRunner().invoke(cli_module.main, ["--base"])

    assert result.exit_code == 1
    assert "administrative privileges" in result.output


def test_cli_help_exits_cleanly():
    result = CliRunner().invoke(cli_module.main, ["--help"])

    assert result.exit_code == 0
    assert "--dry-run" in result.output
    assert "--install" in result.output
    assert "--base" in result.output


def test_cli_flags_select_profile_and_dry_run(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 0)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup(captured))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, ["--install", "--dry-run"])

    assert result.exit_code == 0
    assert captured["profile"] == Profile.HYPRLAND
    assert captured["dry_run"] is True
    assert captured["profile_chooser"] is cli_module.prompt_profile


def test_cli_base_flag(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 0)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup(captured))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, ["--base"])

    assert result.exit_code == 0
    assert captured["profile"] == Profile.BASE
    assert captured["dry_run"] is False


def test_cli_without_flags_leaves_profile_to_menu(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 0)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup(captured))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert captured["profile"] is None


def test_cli_uses_default_config_and_allows_cli_override(tmp_path, monkeypatch):
    (tmp_path / ".desksetup.yml").write_text(
        "profile: hyprland\n"
        "dry_run: true\n"
        "log_dir: /tmp/desksetup-logs\n"
        "retry_attempts: 5\n"
        "retry_delay_seconds: 0.5\n",
        encoding="utf-8",
    )
    captured = {}
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 0)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup(captured))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, ["--base"])

    assert result.exit_code == 0
    assert captured["profile"] == Profile.BASE
    assert captured["dry_run"] is True
    assert captured["log_dir"] == "/tmp/desksetup-logs"
    assert captured["retry_policy"].max_attempts == 5
    assert captured["retry_policy"].delay_seconds == 0.5


def test_cli_rejects_invalid_config(tmp_path, monkeypatch):
    config_file = tmp_path / "custom.yml"
    config_file.write_text("colour: true\n", encoding="utf-8")
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 0)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup({}))

    result = CliRunner().invoke(cli_module.main, ["--config", str(config_file)])

    assert result.exit_code == 1
    assert "Unknown configuration keys: colour" in result.output


def test_cli_rejects_non_numeric_retry_attempts(tmp_path, monkeypatch):
    (tmp_path / ".desksetup.yml").write_text("retry_attempts: three\n", encoding="utf-8")
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 0)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup({}))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, ["--base"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert "Invalid retry_attempts 'three'" in result.output


def test_cli_propagates_fatal_exit_status(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module.os, "geteuid", lambda: 0)
    monkeypatch.setattr(cli_module, "DesktopSetup", _fake_setup({}, exit_code=1))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, ["--base"])

    assert result.exit_code == 1


def test_prompt_profile_maps_menu_choices(monkeypatch):
    answers = iter(["1", "2", "3", "anything"])
    monkeypatch.setattr(cli_module.click, "prompt", lambda *_args, **_kwargs: next(answers))

    assert cli_module.prompt_profile() == Profile.HYPRLAND
    assert cli_module.prompt_profile() == Profile.BASE
    assert cli_module.prompt_profile() is None
    assert cli_module.prompt_profile() is None
