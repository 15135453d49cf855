"""Render the caller's command into platform-native scripts."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path, PurePath

from elevx.errors import HostPreconditionError

POSIX_LINE_SEP = "\n"
BATCH_LINE_SEP = "\r\n"

_BATCH_SPECIAL = re.compile(r"([<>|&^])")


def escape_double_quotes(value: str) -> str:
    """Escape ``"`` for use inside a double-quoted POSIX shell string."""
    if not isinstance(value, str):
        raise TypeError("Expected a string.")
    return value.replace('"', '\\"')


def escape_batch_value(value: str) -> str:
    """Caret-escape cmd.exe metacharacters in a ``set`` value.

    cmd assigns everything after ``=`` verbatim, quotes included, so quoting
    is not an option here.
    """
    return _BATCH_SPECIAL.sub(r"^\1", value)


def quote_powershell_literal(value: str) -> str:
    """Return ``value`` as a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def render_posix_script(command: str, env: Mapping[str, str] | None, cwd: PurePath | str) -> str:
    """Shell script that runs ``command`` from ``cwd`` with ``env`` exported."""
    lines = [f'cd "{escape_double_quotes(str(cwd))}"']
    for key, value in (env or {}).items():
        lines.append(f'export {key}="{escape_double_quotes(value)}"')
    lines.append(command)
    return POSIX_LINE_SEP.join(lines)


def render_batch_script(command: str, env: Mapping[str, str] | None, cwd: PurePath | str) -> str:
    """Batch script that runs ``command`` from ``cwd`` with ``env`` set.

    Raises:
        HostPreconditionError: If ``cwd`` contains a double quote.
    """
    cwd_text = str(cwd)
    if '"' in cwd_text:
        raise HostPreconditionError("Working directory cannot contain double-quotes.")
    lines = [
        "@echo off",
        # UTF-8 code page so non-ASCII output survives the redirect.
        "chcp 65001>nul",
        # /d also switches drive when cwd is on another volume.
        f'cd /d "{cwd_text}"',
    ]
    for key, value in (env or {}).items():
        lines.append(f"set {key}={escape_batch_value(value)}")
    lines.append(command)
    return BATCH_LINE_SEP.join(lines)


def render_execute_script(command_path: Path, stdout_path: Path, stderr_path: Path, status_path: Path) -> str:
    """Outer batch script redirecting the command script into the result files."""
    lines = [
        "@echo off",
        f'call "{command_path}" > "{stdout_path}" 2> "{stderr_path}"',
        f'(echo %ERRORLEVEL%) > "{status_path}"',
    ]
    return BATCH_LINE_SEP.join(lines)
