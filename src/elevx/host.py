"""Narrow OS interface consumed by the elevation strategies.

Strategies never call ``os``/``subprocess`` directly: they go through a
``Host`` so that tests can replay any platform on any machine.
"""

from __future__ import annotations

import getpass
import os
import secrets
import shutil
import sys
import tempfile
import time
from collections.abc import Sequence
from pathlib import Path

from elevx.exec import MAX_OUTPUT_BYTES, ExecResult, run_command


class Host:
    """Process, filesystem and entropy primitives of the running machine."""

    def __init__(self, platform: str | None = None) -> None:
        self.platform = platform or sys.platform

    def temp_dir(self) -> Path | None:
        value = tempfile.gettempdir()
        return Path(value) if value else None

    def cwd(self) -> Path:
        return Path.cwd()

    def login_user(self) -> str | None:
        """Return ``$USER``; the macOS prompt bundle's shell script needs it."""
        return os.environ.get("USER") or None

    def random_bytes(self, count: int) -> bytes:
        return secrets.token_bytes(count)

    def stat(self, path: Path) -> os.stat_result:
        return path.stat()

    def exists(self, path: Path) -> bool:
        try:
            self.stat(path)
        except FileNotFoundError:
            return False
        return True

    def make_dir(self, path: Path) -> None:
        path.mkdir()

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_text(self, path: Path, text: str) -> None:
        # newline="" keeps CRLF batch scripts byte-exact on every platform.
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)

    def write_bytes(self, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    def chmod(self, path: Path, mode: int) -> None:
        path.chmod(mode)

    def remove_tree(self, path: Path) -> None:
        shutil.rmtree(path)

    def run(
        self,
        argv: Sequence[str] | str,
        *,
        cwd: Path | None = None,
        shell: bool = False,
        close_stdin: bool = False,
        max_output: int = MAX_OUTPUT_BYTES,
    ) -> ExecResult:
        return run_command(argv, cwd=cwd, shell=shell, close_stdin=close_stdin, max_output=max_output)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


def current_user_name() -> str:
    """Best-effort login name for diagnostics output."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "(unknown)"
