"""Types for elevx elevation attempts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

Platform = Literal["linux", "darwin", "win32"]

SUPPORTED_PLATFORMS: tuple[str, ...] = ("darwin", "linux", "win32")


@dataclass(frozen=True)
class ElevationRequest:
    """Validated, immutable input for a single elevation attempt."""

    command: str
    name: str
    icon: Path | None = None
    env: Mapping[str, str] | None = None


@dataclass(frozen=True)
class ElevationResult:
    """Captured output of an elevated command that exited zero."""

    stdout: str
    stderr: str
    platform: str
    returncode: int = 0


@dataclass
class ElevationContext:
    """Per-attempt staging state rooted in a uniquely named temp directory."""

    identity: str
    temp_dir: Path
    staged: list[str] = field(default_factory=list)

    @property
    def root(self) -> Path:
        return self.temp_dir / self.identity

    def mark(self, step: str) -> None:
        """Record a completed staging step."""
        self.staged.append(step)


@dataclass
class MacContext(ElevationContext):
    """Paths inside the unpacked prompt bundle."""

    name: str = ""

    @property
    def app_path(self) -> Path:
        return self.root / f"{self.name}.app"

    @property
    def macos_dir(self) -> Path:
        return self.app_path / "Contents" / "MacOS"

    @property
    def plist_path(self) -> Path:
        return self.app_path / "Contents" / "Info.plist"

    @property
    def icon_path(self) -> Path:
        return self.app_path / "Contents" / "Resources" / "applet.icns"

    @property
    def command_path(self) -> Path:
        return self.macos_dir / "sudo-prompt-command"

    @property
    def applet_binary(self) -> Path:
        return self.macos_dir / "applet"

    @property
    def status_path(self) -> Path:
        return self.macos_dir / "code"

    @property
    def stdout_path(self) -> Path:
        return self.macos_dir / "stdout"

    @property
    def stderr_path(self) -> Path:
        return self.macos_dir / "stderr"


@dataclass
class WindowsContext(ElevationContext):
    """Script and result-file paths for the scripting-host mechanism."""

    @property
    def execute_path(self) -> Path:
        return self.root / "execute.bat"

    @property
    def command_path(self) -> Path:
        return self.root / "command.bat"

    @property
    def stdout_path(self) -> Path:
        return self.root / "stdout"

    @property
    def stderr_path(self) -> Path:
        return self.root / "stderr"

    @property
    def status_path(self) -> Path:
        return self.root / "status"
