"""Unit tests for the subprocess runner."""

from __future__ import annotations

from pathlib import Path

import pytest

from elevx.errors import OutputLimitError
from elevx.exec import run_command
from tests.host_stubs import posix_only


@posix_only
def test_captures_streams_and_code(tmp_path: Path) -> None:
    result = run_command(["/bin/sh", "-c", "echo out; echo err >&2; exit 3"], cwd=tmp_path)
    assert result.returncode == 3
    assert not result.ok
    assert result.stdout == "out\n"
    assert result.stderr == "err\n"
    assert result.cwd == tmp_path


@posix_only
def test_runs_in_cwd(tmp_path: Path) -> None:
    result = run_command(["/bin/sh", "-c", "pwd -P"], cwd=tmp_path)
    assert result.ok
    assert result.stdout.strip() == str(tmp_path.resolve())


@posix_only
def test_close_stdin_gives_eof() -> None:
    result = run_command(["/bin/sh", "-c", "cat; echo done"], close_stdin=True)
    assert result.stdout == "done\n"


@posix_only
def test_shell_string() -> None:
    result = run_command("echo shell", shell=True)
    assert result.stdout == "shell\n"
    assert result.argv == ("echo shell",)


@posix_only
def test_output_limit_is_fatal() -> None:
    with pytest.raises(OutputLimitError) as excinfo:
        run_command(["/bin/sh", "-c", "printf 'x%.0s' 1 2 3 4 5 6 7 8 9 10"], max_output=8)
    assert excinfo.value.stream == "stdout"
    assert excinfo.value.size == 10
    assert excinfo.value.limit == 8


@posix_only
def test_invalid_utf8_is_replaced() -> None:
    result = run_command(["/bin/sh", "-c", "printf '\\377ok'"])
    assert result.stdout.endswith("ok")
    assert "�" in result.stdout
