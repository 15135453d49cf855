"""Process runner used by every elevation mechanism."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from elevx.errors import OutputLimitError

logger = logging.getLogger(__name__)

# Large enough for chatty installers; overruns are fatal rather than truncated.
MAX_OUTPUT_BYTES = 134217728


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path | None
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def decode_output(raw: bytes) -> str:
    """Decode captured output as UTF-8, replacing undecodable bytes."""
    return raw.decode("utf-8", errors="replace")


def run_command(
    argv: Sequence[str] | str,
    *,
    cwd: Path | None = None,
    shell: bool = False,
    close_stdin: bool = False,
    max_output: int = MAX_OUTPUT_BYTES,
) -> ExecResult:
    """Run command to completion and return structured result.

    ``close_stdin`` attaches stdin to the null device so children that read
    from it see EOF immediately.
    """
    rendered: tuple[str, ...] = (argv,) if isinstance(argv, str) else tuple(argv)
    logger.debug("exec %s (cwd=%s)", " ".join(rendered), cwd)
    completed = subprocess.run(
        argv if shell or not isinstance(argv, str) else [argv],
        cwd=cwd,
        shell=shell,
        stdin=subprocess.DEVNULL if close_stdin else None,
        capture_output=True,
        check=False,
    )
    for stream, raw in (("stdout", completed.stdout), ("stderr", completed.stderr)):
        if len(raw) > max_output:
            raise OutputLimitError(stream, len(raw), max_output)
    result = ExecResult(
        argv=rendered,
        cwd=cwd,
        returncode=completed.returncode,
        stdout=decode_output(completed.stdout),
        stderr=decode_output(completed.stderr),
    )
    logger.debug("exec returned %d", result.returncode)
    return result
