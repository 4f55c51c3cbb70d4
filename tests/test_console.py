import json
import subprocess
import sys
from dataclasses import dataclass, field

import pytest

from vulncheck_cli import console
from vulncheck_cli.console import FlagError
from vulncheck_cli.models import PurlDetail, ScanResult, ScanResultVulnerability


def test_success_line(capsys):
    console.success("all good")
    assert capsys.readouterr().out == "✓ all good\n"


def test_info_line(capsys):
    console.info("[note] here")
    assert capsys.readouterr().out == "i [note] here\n"


def test_stat_line(capsys):
    console.stat("Size", "12 MB")
    assert capsys.readouterr().out == "i Size: 12 MB\n"


def test_danger_returns_message():
    err = console.danger("broken")
    assert isinstance(err, Exception)
    assert str(err) == "✗ broken\n"


def test_error_formats_arguments():
    err = console.error("Failed to save token: %s", "disk full")
    assert isinstance(err, FlagError)
    assert str(err) == "Failed to save token: disk full"


def test_error_without_arguments_keeps_text():
    err = console.error("100% failed")
    assert str(err) == "100% failed"
    with pytest.raises(FlagError):
        raise err


def test_print_json_round_trip(capsys):
    data = {"name": "ipintel-3d", "count": 3, "tags": ["a", "b"]}
    console.print_json(data)
    out = capsys.readouterr().out
    assert json.loads(out) == data
    assert '\n  "name"' in out


def test_print_json_escapes_html(capsys):
    console.print_json({"html": "<a>&"})
    out = capsys.readouterr().out
    assert "<" not in out and "&" not in out
    assert json.loads(out) == {"html": "<a>&"}


def test_print_json_of_model(capsys):
    result = ScanResult([ScanResultVulnerability(name="lodash", cve="CVE-2021-23337",
                                                 purl_detail=PurlDetail(purl="pkg:npm/lodash"))])
    console.print_json(result)
    assert json.loads(capsys.readouterr().out) == result.to_dict()


@dataclass
class _Sample:
    label: str
    values: list = field(default_factory=list)
    _hidden: object = None


def test_print_json_of_dataclass_skips_private(capsys):
    console.print_json(_Sample("x", [1, 2], object()))
    assert json.loads(capsys.readouterr().out) == {"label": "x", "values": [1, 2]}


def test_print_json_rejects_unknown_types():
    with pytest.raises(TypeError):
        console.print_json({"value": object()})


def test_json_file_round_trip(tmp_path):
    target = tmp_path / "out.json"
    data = {"vulnerabilities": [{"cve": "CVE-2021-44228", "in_kev": True}]}
    console.json_file(data, target)
    text = target.read_text(encoding="utf-8")
    assert json.loads(text) == data
    assert not text.endswith("\n")


def test_json_file_missing_directory(tmp_path):
    with pytest.raises(OSError):
        console.json_file({}, tmp_path / "missing" / "out.json")


@pytest.mark.parametrize(
    "platform, command",
    [("linux", ["clear"]), ("win32", ["cmd", "/c", "cls"])],
)
def test_clear_screen_runs_platform_command(monkeypatch, platform, command):
    def fail(cmd, **kw):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(sys, "platform", platform)
    monkeypatch.setattr(subprocess, "run", fail)
    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        console.clear_screen()
    assert excinfo.value.cmd == command


def test_viewport_shows_header_and_content(capsys):
    console.viewport("initial-access", {"cve": "CVE-2021-44228"})
    out = capsys.readouterr().out
    assert "Browsing index: initial-access" in out
    assert "CVE-2021-44228" in out