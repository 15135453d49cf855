"""Unit tests for elevx request validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from elevx.errors import ElevationValidationError
from elevx.validate import (
    build_request,
    default_name,
    is_valid_name,
    validate_command,
    validate_env,
    validate_icon,
)


@pytest.mark.parametrize("name", ["A", "Disk Utility", "abc 123", "x" * 70, " padded "])
def test_valid_names_accepted(name: str) -> None:
    assert is_valid_name(name)


@pytest.mark.parametrize(
    "name",
    ["", "   ", "x" * 71, "semi;colon", "quote'name", "dash-name", "tab\tname", "émoji", None, 7],
)
def test_invalid_names_rejected(name: object) -> None:
    assert not is_valid_name(name)


def test_build_request_rejects_bad_name_before_touching_fs(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ElevationValidationError, match="alphanumeric"):
        build_request("echo hi", name="bad/name")
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("key", ["1ABC", "A-B", "A B", "", "FOO=BAR", "ü"])
def test_env_rejects_bad_keys(key: str) -> None:
    with pytest.raises(ElevationValidationError, match="invalid environment variable name"):
        validate_env({key: "value"})


@pytest.mark.parametrize("value", ["a\nb", "a\rb", "\r\n"])
def test_env_rejects_line_breaks_in_values(value: str) -> None:
    with pytest.raises(ElevationValidationError, match="invalid environment variable value"):
        validate_env({"KEY": value})


def test_env_rejects_empty_mapping() -> None:
    with pytest.raises(ElevationValidationError, match="must not be empty"):
        validate_env({})


def test_env_rejects_non_string_values() -> None:
    with pytest.raises(ElevationValidationError, match="must be strings"):
        validate_env({"KEY": 1})


def test_env_absent_is_accepted() -> None:
    assert validate_env(None) is None


def test_env_is_copied_and_read_only() -> None:
    source = {"_UNDER": "x", "lower_case9": "y y", "PATHLIKE": "a;b|c&d"}
    env = validate_env(source)
    source["EXTRA"] = "z"
    assert dict(env) == {"_UNDER": "x", "lower_case9": "y y", "PATHLIKE": "a;b|c&d"}
    with pytest.raises(TypeError):
        env["NEW"] = "v"  # type: ignore[index]


def test_command_rejects_sudo_prefix() -> None:
    with pytest.raises(ElevationValidationError, match="sudo"):
        validate_command("SUDO rm -rf /tmp/x")
    assert validate_command("echo sudo") == "echo sudo"


def test_command_must_be_string() -> None:
    with pytest.raises(ElevationValidationError, match="string"):
        validate_command(["echo", "hi"])


def test_icon_rules() -> None:
    assert validate_icon(None) is None
    assert validate_icon("/tmp/app.icns") == Path("/tmp/app.icns")
    with pytest.raises(ElevationValidationError, match="empty"):
        validate_icon("  ")
    with pytest.raises(ElevationValidationError, match="string"):
        validate_icon(42)


def test_default_name_from_process(monkeypatch) -> None:
    monkeypatch.setattr("elevx.validate.sys.argv", ["/usr/local/bin/installer.py"])
    assert default_name() == "installer"

    monkeypatch.setattr("elevx.validate.sys.argv", ["/usr/local/bin/my-tool"])
    with pytest.raises(ElevationValidationError, match="process name"):
        default_name()


def test_build_request_returns_frozen_request() -> None:
    request = build_request("echo hi", name="My App", env={"FOO": "bar"})
    assert request.command == "echo hi"
    assert request.name == "My App"
    assert request.icon is None
    assert dict(request.env) == {"FOO": "bar"}
    with pytest.raises(AttributeError):
        request.command = "other"  # type: ignore[misc]
