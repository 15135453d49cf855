"""Pre-flight checks for elevx (doctor command).

Reports whether an elevation attempt could succeed on this machine without
prompting for anything.
"""

from __future__ import annotations

import io
import shutil
import zipfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal

from elevx import __version__
from elevx.config import ElevxConfig
from elevx.errors import MechanismNotFoundError
from elevx.host import Host, current_user_name
from elevx.platforms import STRATEGIES
from elevx.platforms.linux import find_binary
from elevx.platforms.mac import applet_bytes
from elevx.types import SUPPORTED_PLATFORMS


@dataclass
class CheckItem:
    """Individual check result."""

    id: str
    status: Literal["pass", "fail", "warn"]
    message: str
    remediation: list[str] = field(default_factory=list)


@dataclass
class DoctorReport:
    """Complete doctor check report."""

    status: Literal["passed", "failed"] = "passed"
    version: str = __version__
    platform: str = ""
    strategy: str = ""
    user: str = ""
    config: dict[str, Any] = field(default_factory=dict)
    checks: list[CheckItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _check_platform(host: Host) -> CheckItem:
    if host.platform in SUPPORTED_PLATFORMS:
        return CheckItem(id="platform", status="pass", message=f"Platform {host.platform} is supported")
    return CheckItem(
        id="platform",
        status="fail",
        message=f"Platform {host.platform} is not supported",
        remediation=["elevx supports linux, darwin and win32 only"],
    )


def _check_temp_dir(host: Host) -> CheckItem:
    temp = host.temp_dir()
    if temp is None or not Path(temp).is_dir():
        return CheckItem(
            id="temp_dir",
            status="fail",
            message="Temporary directory is not available",
            remediation=["Set TMPDIR (or TEMP on Windows) to a writable directory"],
        )
    return CheckItem(id="temp_dir", status="pass", message=f"Temporary directory: {temp}")


def _check_linux_mechanism(host: Host, config: ElevxConfig) -> CheckItem:
    try:
        binary = find_binary(host, config.linux_binaries)
    except MechanismNotFoundError as exc:
        return CheckItem(
            id="mechanism",
            status="fail",
            message=str(exc),
            remediation=[
                "Install polkit (pkexec) or kdesudo",
                f"Probed: {', '.join(config.linux_binaries)}",
            ],
        )
    return CheckItem(id="mechanism", status="pass", message=f"Elevation front-end: {binary}")


def _check_mac_mechanism(host: Host) -> list[CheckItem]:
    items: list[CheckItem] = []
    try:
        with zipfile.ZipFile(io.BytesIO(applet_bytes())) as archive:
            names = set(archive.namelist())
    except (OSError, zipfile.BadZipFile) as exc:
        items.append(
            CheckItem(
                id="mechanism",
                status="fail",
                message=f"Prompt bundle asset unreadable: {exc}",
                remediation=["Reinstall elevx; resources/applet.zip is missing or corrupt"],
            )
        )
    else:
        required = {"Contents/MacOS/applet", "Contents/MacOS/sudo-prompt-script", "Contents/Info.plist"}
        missing = sorted(required - names)
        if missing:
            items.append(
                CheckItem(
                    id="mechanism",
                    status="fail",
                    message=f"Prompt bundle asset incomplete: missing {missing}",
                    remediation=["Reinstall elevx"],
                )
            )
        else:
            items.append(CheckItem(id="mechanism", status="pass", message="Prompt bundle asset present"))

    if host.login_user():
        items.append(CheckItem(id="user", status="pass", message=f"USER={host.login_user()}"))
    else:
        items.append(
            CheckItem(
                id="user",
                status="fail",
                message="USER is not set",
                remediation=["The macOS prompt bundle requires $USER"],
            )
        )
    return items


def _check_windows_mechanism() -> CheckItem:
    if shutil.which("powershell.exe") or shutil.which("powershell"):
        return CheckItem(id="mechanism", status="pass", message="powershell.exe found")
    return CheckItem(
        id="mechanism",
        status="fail",
        message="powershell.exe not found on PATH",
        remediation=["Start-Process -Verb runAs requires Windows PowerShell"],
    )


def run_doctor(host: Host | None = None, config: ElevxConfig | None = None) -> DoctorReport:
    """Run all checks for the current platform."""
    host = host or Host()
    config = config or ElevxConfig()

    checks = [_check_platform(host), _check_temp_dir(host)]
    if host.platform == "linux":
        checks.append(_check_linux_mechanism(host, config))
    elif host.platform == "darwin":
        checks.extend(_check_mac_mechanism(host))
    elif host.platform == "win32":
        checks.append(_check_windows_mechanism())

    strategy_cls = STRATEGIES.get(host.platform)
    failed = any(item.status == "fail" for item in checks)
    return DoctorReport(
        status="failed" if failed else "passed",
        platform=host.platform,
        strategy=strategy_cls.__name__ if strategy_cls else "",
        user=current_user_name(),
        config=config.to_dict(),
        checks=checks,
    )
