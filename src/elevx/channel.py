"""Recover the elevated command's real exit status and streams.

Elevation front-ends exit with their own codes (0, 126, 127, ...) that say
little about the inner command, so results travel out of band: either as a
magic-token prefix on the front-end's stdout, or as a status/stdout/stderr
file triad written inside the isolated context.
"""

from __future__ import annotations

import logging
from pathlib import Path

from elevx.errors import CommandError, PermissionDeniedError
from elevx.exec import ExecResult, decode_output
from elevx.host import Host
from elevx.types import ElevationResult

logger = logging.getLogger(__name__)

NO_AGENT_MARKER = "No authentication agent found"


def parse_inline(
    result: ExecResult,
    *,
    magic: str,
    command: str,
    platform: str,
) -> ElevationResult:
    """Classify a front-end run whose stdout carries the magic-token prefix.

    The token is only printed once the elevated shell has started, so its
    presence turns any non-zero exit into a command error. Without it the
    failure belongs to the front-end and is reported as permission denied;
    stderr text is not inspected beyond the no-agent marker because it is
    localized.
    """
    prefix = magic + "\n"
    stdout = result.stdout
    elevated = stdout.startswith(prefix)
    if elevated:
        stdout = stdout[len(prefix):]
    logger.debug("inline channel: elevated=%s returncode=%d", elevated, result.returncode)

    if result.returncode != 0:
        if not elevated:
            raise PermissionDeniedError(no_agent=NO_AGENT_MARKER in result.stderr, cause=result)
        raise CommandError(command, result.returncode, stdout, result.stderr)
    return ElevationResult(stdout=stdout, stderr=result.stderr, platform=platform)


def parse_status_code(text: str) -> int:
    """Parse the status file body, which includes a trailing newline."""
    try:
        return int(text.strip(), 10)
    except ValueError as exc:
        raise ValueError(f"Status file does not contain an exit code: {text!r}") from exc


def read_result_triad(
    host: Host,
    *,
    status_path: Path,
    stdout_path: Path,
    stderr_path: Path,
    command: str,
    platform: str,
    missing_is_denied: bool = False,
    line_sep: str = "\n",
) -> ElevationResult:
    """Read status, stdout and stderr files and classify the outcome.

    When ``missing_is_denied`` is set, an absent status file means the prompt
    never ran the command and is reported as permission denied.
    """
    try:
        status_text = host.read_text(status_path)
    except FileNotFoundError as exc:
        if missing_is_denied:
            raise PermissionDeniedError(cause=exc) from exc
        raise
    # No newline translation; undecodable bytes become U+FFFD.
    stdout = decode_output(host.read_bytes(stdout_path))
    stderr = decode_output(host.read_bytes(stderr_path))
    code = parse_status_code(status_text)
    logger.debug("file channel: status=%d", code)
    if code != 0:
        raise CommandError(command, code, stdout, stderr, line_sep=line_sep)
    return ElevationResult(stdout=stdout, stderr=stderr, platform=platform)
