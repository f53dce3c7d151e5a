"""Tests for the migrator command line."""

import json
import types

import pytest
from click.testing import CliRunner

from migrator.analyzer import NetworkAnalyzer
from migrator.cli import migrator


@pytest.fixture
def host(monkeypatch, fake_runner, home_host):
    """Analyzer wired to scripted command output and a controllable probe."""
    state = types.SimpleNamespace(
        runner=fake_runner(home_host), reachable=True, analyzers=[]
    )

    def make_analyzer(options):
        analyzer = NetworkAnalyzer(
            options, runner=state.runner, probe=lambda record: state.reachable
        )
        state.analyzers.append(analyzer)
        return analyzer

    monkeypatch.setattr("migrator.commands.analyze_cmd.NetworkAnalyzer", make_analyzer)
    monkeypatch.setattr("migrator.commands.run_cmd.NetworkAnalyzer", make_analyzer)
    return state


@pytest.fixture
def engine(monkeypatch):
    """Records engine invocations instead of migrating."""
    calls = []

    def fake_run(args, **kwargs):
        calls.append({"args": args, "options": json.loads(kwargs["input"])})
        return types.SimpleNamespace(returncode=0)

    monkeypatch.setenv("MIGRATOR_ENGINE", "flasher")
    monkeypatch.setattr("subprocess.run", fake_run)
    return calls


def test_analyze(host, engine):
    """Test a successful analysis hands over the analyze task only."""
    result = CliRunner().invoke(migrator, ["analyze", "-i", "balena.img"])

    assert result.exit_code == 0, result.output
    assert "Found WiFi profiles: CoffeeShop, gal47lows" in result.output
    assert "balena API is reachable from gal47lows (wireless)" in result.output
    assert "NETWORK ANALYSIS" in result.output

    (call,) = engine
    assert call["args"][:2] == ["flasher", "balena.img"]
    assert call["options"]["omit_tasks"] == [
        "shrink",
        "copy",
        "config",
        "bootloader",
        "reboot",
    ]
    names = [p["name"] for p in call["options"]["connection_profiles"]]
    assert names == ["CoffeeShop", "gal47lows"]


def test_analyze_unreachable(host, engine):
    """Test the migration is refused when no connection reaches the API."""
    host.reachable = False

    result = CliRunner().invoke(migrator, ["analyze", "-i", "balena.img"])

    assert result.exit_code == 1
    assert "Can't proceed with migration:" in result.output
    assert "not reachable from any connected interface" in result.output
    # The report is still produced for diagnosis
    assert "Verified connection: <none>" in result.output
    assert engine == []


def test_analyze_no_wifi(host, engine):
    """Test --no-wifi skips Wi-Fi discovery."""
    result = CliRunner().invoke(migrator, ["analyze", "-i", "balena.img", "--no-wifi"])

    # The only connection is Wi-Fi, which now has no profile to verify
    assert result.exit_code == 1
    assert "Found WiFi profiles: <none>" in result.output
    assert host.runner.commands_matching("WiFi") == []
    assert host.analyzers[0].options.include_wifi is False


def test_analyze_json_report(host, engine, tmp_path):
    """Test the report is written to a file with passphrases masked."""
    output = tmp_path / "analysis.json"

    result = CliRunner().invoke(
        migrator, ["analyze", "-i", "balena.img", "-o", str(output)]
    )

    assert result.exit_code == 0, result.output
    report = json.loads(output.read_text())
    assert report["verified"]["ip_address"] == "192.168.1.217"
    keys = {p["name"]: p["wifi_key"] for p in report["profiles"]}
    assert keys == {"CoffeeShop": "", "gal47lows": "***"}
    assert report["rejections"] == ["WiFi profile Corp with auth WPA2 not supported"]


def test_analyze_discovery_failure(host, engine, command_error):
    """Test a failing query aborts with the query name."""
    host.runner.responses["Get-NetAdapter"] = command_error

    result = CliRunner().invoke(migrator, ["analyze", "-i", "balena.img"])

    assert result.exit_code == 1
    assert "Can't proceed with migration: Get-NetAdapter:" in result.output


def test_analyze_requires_engine(host, monkeypatch):
    """Test an unconfigured engine is reported before discovery."""
    monkeypatch.delenv("MIGRATOR_ENGINE", raising=False)

    result = CliRunner().invoke(migrator, ["analyze", "-i", "balena.img"])

    assert result.exit_code == 1
    assert "No migration engine configured" in result.output
    assert host.runner.calls == []


def test_analyze_requires_image():
    """Test the image option is required."""
    result = CliRunner().invoke(migrator, ["analyze"])

    assert result.exit_code == 2


def test_run_declined(host, engine):
    """Test nothing happens when the user does not confirm."""
    result = CliRunner().invoke(migrator, ["run", "-i", "balena.img"], input="n\n")

    assert result.exit_code == 0
    assert "Warning! This tool will overwrite" in result.output
    assert host.runner.calls == []
    assert engine == []


def test_run_confirmed(host, engine):
    """Test a confirmed migration runs every task."""
    result = CliRunner().invoke(migrator, ["run", "-i", "balena.img"], input="y\n")

    assert result.exit_code == 0, result.output
    (call,) = engine
    assert call["options"]["omit_tasks"] == []
    assert "Migration result: ok" in result.output


def test_run_last_task(host, engine):
    """Test --last-task omits the later tasks."""
    result = CliRunner().invoke(
        migrator, ["run", "-i", "balena.img", "-y", "--last-task", "copy"]
    )

    assert result.exit_code == 0, result.output
    assert engine[0]["options"]["omit_tasks"] == ["config", "bootloader", "reboot"]


def test_run_skip_tasks(host, engine):
    """Test --skip-tasks is passed through."""
    result = CliRunner().invoke(
        migrator, ["run", "-i", "balena.img", "-y", "--skip-tasks", "shrink,reboot"]
    )

    assert result.exit_code == 0, result.output
    assert engine[0]["options"]["omit_tasks"] == ["shrink", "reboot"]


def test_run_task_options_exclusive(host, engine):
    """Test --last-task and --skip-tasks cannot be combined."""
    result = CliRunner().invoke(
        migrator,
        ["run", "-i", "x.img", "-y", "--last-task", "copy", "--skip-tasks", "reboot"],
    )

    assert result.exit_code == 2
    assert engine == []


def test_run_unknown_last_task(host, engine):
    """Test an unknown last task is a usage error."""
    result = CliRunner().invoke(
        migrator, ["run", "-i", "x.img", "-y", "--last-task", "format"]
    )

    assert result.exit_code == 2
    assert "not understood" in result.output


def test_run_engine_failure(host, monkeypatch):
    """Test a failed migration exits non-zero."""
    monkeypatch.setenv("MIGRATOR_ENGINE", "flasher")
    monkeypatch.setattr(
        "subprocess.run", lambda *_a, **_kw: types.SimpleNamespace(returncode=1)
    )

    result = CliRunner().invoke(migrator, ["run", "-i", "balena.img", "-y"])

    assert result.exit_code == 1
    assert "Migration result: failed" in result.output


def test_version():
    """Test the version command."""
    result = CliRunner().invoke(migrator, ["version"])

    assert result.exit_code == 0
    assert result.output.startswith("migrator 0.2.4")
