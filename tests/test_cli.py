from click.testing import CliRunner

import reviewapps.cli as cli_module


class FakeManager:
    captured = {}

    def __init__(self, **kwargs):
        FakeManager.captured = kwargs

    def run(self):
        return 0


def test_cli_reads_action_inputs_from_environment(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "ReviewAppManager", FakeManager)
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        [],
        env={
            "INPUT_NAME": "widgets-pr-42",
            "INPUT_BUILD_ARGS": "A=1\nB=2",
            "INPUT_HA": "--ha=true",
            "GITHUB_EVENT_PATH": "/tmp/event.json",
            "GITHUB_OUTPUT": "/tmp/output",
        },
    )

    assert result.exit_code == 0
    options = FakeManager.captured["options"]
    assert options["name"] == "widgets-pr-42"
    assert options["build_args"] == "A=1\nB=2"
    assert options["ha"] == "--ha=true"
    assert options["region"] is None
    assert FakeManager.captured["event_path"] == "/tmp/event.json"
    assert FakeManager.captured["github_output"] == "/tmp/output"
    assert FakeManager.captured["dry_run"] is False


def test_cli_uses_settings_file_and_allows_cli_override(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "ReviewAppManager", FakeManager)
    settings_file = tmp_path / "settings.yml"
    settings_file.write_text(
        "region: ams\n" "org: acme\n" "dry_run: true\n",
        encoding="utf-8",
    )

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        ["--settings", str(settings_file), "--region", "fra"],
    )

    assert result.exit_code == 0
    options = FakeManager.captured["options"]
    assert options["region"] == "fra"
    assert options["org"] == "acme"
    assert FakeManager.captured["dry_run"] is True


def test_cli_uses_default_settings_file_when_present(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "ReviewAppManager", FakeManager)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".review-apps.yml").write_text("postgres: widgets-db-42\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert FakeManager.captured["options"]["postgres"] == "widgets-db-42"


def test_cli_rejects_unknown_settings_keys(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "ReviewAppManager", FakeManager)
    settings_file = tmp_path / "settings.yml"
    settings_file.write_text("colour: blue\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--settings", str(settings_file)])

    assert result.exit_code == 1
    assert "Unknown settings keys: colour" in result.output


def test_cli_exit_code_follows_manager(tmp_path, monkeypatch):
    class FailingManager(FakeManager):
        def run(self):
            return 1

    monkeypatch.setattr(cli_module, "ReviewAppManager", FailingManager)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1
