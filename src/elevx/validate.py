"""Fail-closed validation of elevation requests.

Everything here runs before the first filesystem or process call.
"""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from elevx.errors import ElevationValidationError
from elevx.types import ElevationRequest

NAME_MAX_LENGTH = 70

_NAME_RE = re.compile(r"^[A-Za-z0-9 ]+$")
# POSIX portable environment variable names.
_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ENV_VALUE_FORBIDDEN = re.compile(r"[\r\n]")
_SUDO_PREFIX = re.compile(r"^sudo", re.IGNORECASE)


def is_valid_name(value: object) -> bool:
    """Alphanumeric plus spaces, non-blank, at most 70 characters.

    The length cap keeps ``<name>.app`` under filesystem name limits even
    after Unicode normalization.
    """
    if not isinstance(value, str):
        return False
    if not _NAME_RE.fullmatch(value):
        return False
    if not value.strip():
        return False
    return len(value) <= NAME_MAX_LENGTH


def validate_name(name: object) -> str:
    if not is_valid_name(name):
        raise ElevationValidationError(
            "name must be alphanumeric only (spaces are allowed) and <= 70 characters."
        )
    return name  # type: ignore[return-value]


def default_name() -> str:
    """Derive a prompt name from the host process when the caller gives none."""
    candidate = Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else ""
    if not is_valid_name(candidate):
        raise ElevationValidationError("process name cannot be used as a valid name.")
    return candidate


def validate_command(command: object) -> str:
    if not isinstance(command, str):
        raise ElevationValidationError("Command should be a string.")
    if _SUDO_PREFIX.match(command):
        raise ElevationValidationError('Command should not be prefixed with "sudo".')
    return command


def validate_icon(icon: object) -> Path | None:
    if icon is None:
        return None
    if not isinstance(icon, (str, Path)):
        raise ElevationValidationError("icon must be a string if provided.")
    if not str(icon).strip():
        raise ElevationValidationError("icon must not be empty if provided.")
    return Path(icon)


def validate_env(env: object) -> Mapping[str, str] | None:
    """Check an optional mapping of environment variables.

    Absent is fine; present-but-empty is rejected.
    """
    if env is None:
        return None
    if not isinstance(env, Mapping):
        raise ElevationValidationError("env must be a mapping if provided.")
    if not env:
        raise ElevationValidationError("env must not be empty if provided.")
    for key, value in env.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ElevationValidationError("env environment variables must be strings.")
        if not _ENV_KEY_RE.fullmatch(key):
            raise ElevationValidationError(
                f"env has an invalid environment variable name: {json.dumps(key)}"
            )
        if _ENV_VALUE_FORBIDDEN.search(value):
            raise ElevationValidationError(
                f"env has an invalid environment variable value: {json.dumps(value)}"
            )
    return MappingProxyType(dict(env))


def build_request(
    command: object,
    *,
    name: object = None,
    icon: object = None,
    env: object = None,
) -> ElevationRequest:
    """Validate raw caller input into an immutable ``ElevationRequest``."""
    validated_command = validate_command(command)
    validated_name = default_name() if name is None else validate_name(name)
    return ElevationRequest(
        command=validated_command,
        name=validated_name,
        icon=validate_icon(icon),
        env=validate_env(env),
    )
