"""Unit tests for the macOS prompt-bundle strategy."""

from __future__ import annotations

import io
import plistlib
import subprocess
import zipfile

import pytest

from elevx.config import ElevxConfig
from elevx.errors import CommandError, HostPreconditionError, PermissionDeniedError
from elevx.platforms.mac import MacStrategy, applet_bytes, bundle_label, unpack_applet
from elevx.types import ElevationRequest
from tests.host_stubs import exec_result, posix_only

# Mirrors the bundle's shell script without the sudo timestamp and chown steps.
APPLET_EMULATION = "/bin/bash sudo-prompt-command 1>stdout 2>stderr; /bin/echo $? > code"


def _authorize(host, argv, kwargs):
    """Pretend the password prompt was accepted."""
    snapshot = _snapshot(kwargs["cwd"])
    host.snapshots.append(snapshot)
    subprocess.run(["/bin/bash", "-c", APPLET_EMULATION], cwd=kwargs["cwd"], check=True)
    return exec_result(argv)


def _cancel(host, argv, kwargs):
    host.snapshots.append(_snapshot(kwargs["cwd"]))
    return exec_result(argv)


def _snapshot(macos_dir):
    app = macos_dir.parent.parent
    return {
        "app": app,
        "files": sorted(str(p.relative_to(app)) for p in app.rglob("*") if p.is_file()),
        "plist": plistlib.loads((app / "Contents" / "Info.plist").read_bytes()),
        "icon": (app / "Contents" / "Resources" / "applet.icns").read_bytes(),
        "command": (macos_dir / "sudo-prompt-command").read_text(encoding="utf-8"),
    }


@pytest.fixture
def mac_host(make_host):
    def _make(responder):
        host = make_host("darwin", responder)
        host.snapshots = []
        return host

    return _make


def _strategy(host) -> MacStrategy:
    return MacStrategy(host, ElevxConfig())


def test_applet_asset_is_a_complete_bundle() -> None:
    with zipfile.ZipFile(io.BytesIO(applet_bytes())) as archive:
        names = set(archive.namelist())
    assert {"Contents/Info.plist", "Contents/MacOS/applet", "Contents/MacOS/sudo-prompt-script"} <= names


@posix_only
def test_unpack_keeps_executable_bits(make_host) -> None:
    host = make_host("darwin")
    target = host.tmp / "Bundle.app"
    count = unpack_applet(host, applet_bytes(), target)
    assert count == 8
    assert (target / "Contents" / "MacOS" / "applet").stat().st_mode & 0o111
    assert not (target / "Contents" / "Info.plist").stat().st_mode & 0o111


@posix_only
def test_success_stages_bundle_and_reads_triad(mac_host) -> None:
    host = mac_host(_authorize)
    request = ElevationRequest(command='echo "$FOO"; echo warn >&2', name="Disk Tool", env={"FOO": "bar"})

    result = _strategy(host).run(request)

    assert result.stdout == "bar\n"
    assert result.stderr == "warn\n"
    assert result.platform == "darwin"

    (argv, kwargs), = host.calls
    assert argv == ("./applet",)
    snapshot = host.snapshots[0]
    assert snapshot["app"].name == "Disk Tool.app"
    assert kwargs["cwd"] == snapshot["app"] / "Contents" / "MacOS"
    assert snapshot["plist"]["CFBundleName"] == bundle_label("Disk Tool") == "Disk Tool Password Prompt"
    assert snapshot["command"].startswith(f'cd "{host.work}"\n')
    assert "Contents/MacOS/sudo-prompt-command" in snapshot["files"]
    assert host.contexts() == []


@posix_only
def test_streams_are_returned_byte_faithful(mac_host) -> None:
    host = mac_host(_authorize)
    request = ElevationRequest(command="printf '\\377caf\\r\\nend'; printf '\\201' >&2", name="App")
    result = _strategy(host).run(request)
    assert result.stdout == "\ufffdcaf\r\nend"
    assert result.stderr == "\ufffd"
    assert host.contexts() == []


@posix_only
def test_command_failure_after_authorization(mac_host) -> None:
    host = mac_host(_authorize)
    request = ElevationRequest(command="echo oops >&2; exit 5", name="App")
    with pytest.raises(CommandError) as excinfo:
        _strategy(host).run(request)
    assert excinfo.value.code == 5
    assert excinfo.value.stderr == "oops\n"
    assert host.contexts() == []


@posix_only
def test_cancelled_prompt_leaves_no_code_file(mac_host) -> None:
    host = mac_host(_cancel)
    with pytest.raises(PermissionDeniedError):
        _strategy(host).run(ElevationRequest(command="id", name="App"))
    assert host.contexts() == []


@posix_only
def test_applet_failure_is_permission_denied(mac_host) -> None:
    host = mac_host(lambda h, argv, kw: exec_result(argv, code=1, stderr="execution error: User canceled. (-128)"))
    with pytest.raises(PermissionDeniedError) as excinfo:
        _strategy(host).run(ElevationRequest(command="id", name="App"))
    assert excinfo.value.cause.returncode == 1
    assert host.contexts() == []


@posix_only
def test_custom_icon_is_copied(mac_host, tmp_path) -> None:
    icon = tmp_path / "custom.icns"
    icon.write_bytes(b"icns-data")
    host = mac_host(_authorize)
    _strategy(host).run(ElevationRequest(command="true", name="App", icon=icon))
    assert host.snapshots[0]["icon"] == b"icns-data"


@posix_only
def test_missing_icon_aborts_and_cleans_up(mac_host, tmp_path) -> None:
    host = mac_host(_authorize)
    with pytest.raises(FileNotFoundError):
        _strategy(host).run(ElevationRequest(command="true", name="App", icon=tmp_path / "nope.icns"))
    assert host.calls == []
    assert host.contexts() == []


def test_requires_login_user(mac_host) -> None:
    host = mac_host(_authorize)
    host.user = None
    with pytest.raises(HostPreconditionError, match="USER"):
        _strategy(host).run(ElevationRequest(command="id", name="App"))
    assert host.contexts() == []


def test_requires_temp_dir(mac_host) -> None:
    host = mac_host(_authorize)
    host.temp_dir = lambda: None
    with pytest.raises(HostPreconditionError, match="Temporary directory"):
        _strategy(host).run(ElevationRequest(command="id", name="App"))
