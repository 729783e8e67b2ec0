import json
from pathlib import Path

from typer.testing import CliRunner

from hwreport.cli import app
from hwreport.collector import collect
from hwreport.config import CommandSet
from hwreport.metrics import Metrics

runner = CliRunner()


def _write_config(tmp_path: Path, fake_command) -> Path:
    commands = {
        "cpu": fake_command('{"lscpu": [{"field": "Model name:", "data": "Test CPU"}]}'),
        "gpu": fake_command("00:02.0 0300: 8086:3ea0 (rev 02)\n"),
        "screen": fake_command("HDMI-1 connected 600mm x 340mm\n   2560x1440 59.95*\n"),
        "space": fake_command("/dev/sda1 1048576 1 1 1% /\n"),
        "arch": fake_command("amd64\n"),
    }
    lines = ["commands:"]
    for name, command in commands.items():
        lines.append(f"  {name}: {json.dumps(command)}")
    lines.append("  hwcap: null")
    config_path = tmp_path / "hwreport.yaml"
    config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return config_path


def test_collect_runs_every_collector(fake_command) -> None:
    metrics = Metrics(
        CommandSet(
            cpu=fake_command('{"lscpu": []}'),
            gpu=fake_command("01:00.0 0300: 10de:1234 (rev a1)\n"),
            screen=fake_command(""),
            space=fake_command("/dev/sda1 2097152\n"),
            arch=fake_command("arm64\n"),
            hwcap=None,
        )
    )
    report = collect(metrics)
    assert list(report) == ["cpu", "gpu", "screens", "partitions", "arch", "hwcap"]
    assert report["gpu"] == [{"vendor": "10de", "model": "1234"}]
    assert report["screens"] == []
    assert report["partitions"] == [2.0]
    assert report["arch"] == "arm64"
    assert report["hwcap"] == ""
    assert report["cpu"]["name"] == ""


def test_cli_collect_json(tmp_path: Path, fake_command) -> None:
    config_path = _write_config(tmp_path, fake_command)
    result = runner.invoke(app, ["collect", "--config", str(config_path), "--json"])
    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert report["cpu"]["name"] == "Test CPU"
    assert report["screens"] == [
        {"size": "600mmx340mm", "resolution": "2560x1440", "frequency": "59.95"}
    ]
    assert report["arch"] == "amd64"


def test_cli_collect_writes_file(tmp_path: Path, fake_command) -> None:
    config_path = _write_config(tmp_path, fake_command)
    out_path = tmp_path / "out" / "report.json"
    result = runner.invoke(app, ["collect", "--config", str(config_path), "--out", str(out_path)])
    assert result.exit_code == 0, result.output
    report = json.loads(out_path.read_text(encoding="utf-8"))
    assert report["gpu"] == [{"model": "3ea0", "vendor": "8086"}]
    assert report["partitions"] == [1.0]


def test_cli_commands_table(tmp_path: Path, fake_command) -> None:
    config_path = _write_config(tmp_path, fake_command)
    result = runner.invoke(app, ["commands", "--config", str(config_path)])
    assert result.exit_code == 0, result.output
    assert "hwcap" in result.output
    assert "disabled" in result.output


def test_cli_rejects_invalid_config(tmp_path: Path) -> None:
    config_path = tmp_path / "hwreport.yaml"
    config_path.write_text("commands:\n  bogus: x\n", encoding="utf-8")
    result = runner.invoke(app, ["commands", "--config", str(config_path)])
    assert result.exit_code != 0
