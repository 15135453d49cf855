"""Linux: kdesudo or pkexec, with the magic token on stdout as result channel."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from elevx.channel import parse_inline
from elevx.errors import MechanismNotFoundError, PermissionDeniedError
from elevx.exec import ExecResult
from elevx.host import Host
from elevx.materialize import render_posix_script
from elevx.platforms.base import ElevationStrategy
from elevx.types import ElevationContext, ElevationRequest, ElevationResult

logger = logging.getLogger(__name__)


def find_binary(host: Host, candidates: tuple[str, ...]) -> Path:
    """Return the first elevation front-end that exists.

    Missing paths are skipped; any other stat failure is raised.
    """
    for candidate in candidates:
        path = Path(candidate)
        try:
            host.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug("no elevation front-end at %s", path)
            continue
        return path
    raise MechanismNotFoundError("Unable to find pkexec or kdesudo.")


def mechanism_arguments(binary: Path, name: str) -> list[str]:
    """Front-end specific arguments placed before the wrapped command."""
    binary_name = binary.name.lower()
    if "kdesudo" in binary_name:
        return [
            "--comment",
            f"{name} wants to make changes. Enter your password to allow this.",
            # Do not show the wrapped command in the dialog.
            "-d",
            "--",
        ]
    if "pkexec" in binary_name:
        return ["--disable-internal-agent"]
    return []


def build_argv(binary: Path, request: ElevationRequest, cwd: Path, magic: str) -> list[str]:
    """Full argv: front-end, its arguments, then bash running token + script."""
    script = render_posix_script(request.command, request.env, cwd)
    return [
        str(binary),
        *mechanism_arguments(binary, request.name),
        "/bin/bash",
        "-c",
        f"echo {magic}\n{script}",
    ]


class LinuxStrategy(ElevationStrategy):
    """Runs inline: no temp context, stdout carries the result."""

    platform = "linux"

    def stage(self, request: ElevationRequest, context: ElevationContext | None) -> None:
        return None

    def invoke(self, request: ElevationRequest, context: ElevationContext | None) -> ExecResult:
        binary = find_binary(self.host, self.config.linux_binaries)
        argv = build_argv(binary, request, self.host.cwd(), self.config.magic_token)
        try:
            return self.host.run(argv, max_output=self.config.max_output_bytes)
        except OSError as exc:
            raise PermissionDeniedError(cause=exc) from exc

    def recover_result(
        self,
        request: ElevationRequest,
        context: ElevationContext | None,
        invocation: ExecResult,
        *,
        cancel: threading.Event | None = None,
    ) -> ElevationResult:
        return parse_inline(
            invocation,
            magic=self.config.magic_token,
            command=request.command,
            platform=self.platform,
        )
