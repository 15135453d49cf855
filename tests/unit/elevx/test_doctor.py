"""Unit tests for elevx doctor checks."""

from __future__ import annotations

from elevx.config import ElevxConfig
from elevx.doctor import run_doctor


def _by_id(report):
    return {item.id: item for item in report.checks}


def test_linux_with_pkexec_passes(make_host) -> None:
    host = make_host("linux")
    host.present.add("/usr/bin/pkexec")
    report = run_doctor(host, ElevxConfig())
    assert report.status == "passed"
    assert _by_id(report)["mechanism"].message.endswith("/usr/bin/pkexec")
    assert report.config["linux_binaries"] == ["/usr/bin/kdesudo", "/usr/bin/pkexec"]


def test_linux_without_front_end_fails(make_host) -> None:
    host = make_host("linux")
    report = run_doctor(host, ElevxConfig())
    assert report.status == "failed"
    mechanism = _by_id(report)["mechanism"]
    assert mechanism.status == "fail"
    assert any("pkexec" in step for step in mechanism.remediation)


def test_darwin_checks_asset_and_user(make_host) -> None:
    host = make_host("darwin")
    report = run_doctor(host, ElevxConfig())
    checks = _by_id(report)
    assert checks["mechanism"].status == "pass"
    assert checks["user"].status == "pass"
    assert report.status == "passed"

    host.user = None
    assert run_doctor(host, ElevxConfig()).status == "failed"


def test_win32_requires_powershell(make_host, monkeypatch) -> None:
    host = make_host("win32")
    monkeypatch.setattr("elevx.doctor.shutil.which", lambda name: None)
    assert _by_id(run_doctor(host, ElevxConfig()))["mechanism"].status == "fail"

    monkeypatch.setattr("elevx.doctor.shutil.which", lambda name: f"C:\\Windows\\{name}")
    assert run_doctor(host, ElevxConfig()).status == "passed"


def test_unsupported_platform_and_missing_temp(make_host) -> None:
    host = make_host("sunos5")
    host.temp_dir = lambda: None
    report = run_doctor(host, ElevxConfig())
    checks = _by_id(report)
    assert checks["platform"].status == "fail"
    assert checks["temp_dir"].status == "fail"
    assert "mechanism" not in checks
    assert report.to_dict()["status"] == "failed"


def test_report_names_strategy(make_host) -> None:
    assert run_doctor(make_host("win32"), ElevxConfig()).strategy == "WindowsStrategy"
    assert run_doctor(make_host("sunos5"), ElevxConfig()).strategy == ""
