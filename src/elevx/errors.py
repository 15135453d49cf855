"""Error taxonomy for elevation attempts."""

from __future__ import annotations

from typing import Any

PERMISSION_DENIED = "User did not grant permission."
NO_POLKIT_AGENT = "No polkit authentication agent found."

REASON_VALIDATION = "VALIDATION"
REASON_PLATFORM_UNSUPPORTED = "PLATFORM_UNSUPPORTED"
REASON_MECHANISM_NOT_FOUND = "MECHANISM_NOT_FOUND"
REASON_PERMISSION_DENIED = "PERMISSION_DENIED"
REASON_NO_AUTH_AGENT = "NO_AUTH_AGENT"
REASON_COMMAND_FAILED = "COMMAND_FAILED"
REASON_IDENTITY_INVALID = "IDENTITY_INVALID"
REASON_HOST_PRECONDITION = "HOST_PRECONDITION"
REASON_OUTPUT_LIMIT = "OUTPUT_LIMIT"
REASON_CANCELLED = "CANCELLED"
REASON_CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"
REASON_CONFIG_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"


class ElevationError(RuntimeError):
    """Base class for every classified elevation failure."""

    reason_code: str = "ELEVATION_ERROR"

    def __init__(self, message: str, reason_code: str | None = None) -> None:
        super().__init__(message)
        if reason_code is not None:
            self.reason_code = reason_code


class ElevationValidationError(ElevationError, ValueError):
    """Caller input is malformed. Raised before any OS interaction."""

    reason_code = REASON_VALIDATION


class PlatformUnsupportedError(ElevationError):
    reason_code = REASON_PLATFORM_UNSUPPORTED

    def __init__(self, platform: str) -> None:
        super().__init__("Platform not yet supported.")
        self.platform = platform


class MechanismNotFoundError(ElevationError):
    reason_code = REASON_MECHANISM_NOT_FOUND


class PermissionDeniedError(ElevationError):
    """Elevation was declined, cancelled, or no authentication agent exists.

    The message is always one of the fixed user-facing strings; OS messages
    vary by locale and are kept on ``cause`` for diagnostics only.
    """

    reason_code = REASON_PERMISSION_DENIED

    def __init__(self, *, no_agent: bool = False, cause: Any = None) -> None:
        message = NO_POLKIT_AGENT if no_agent else PERMISSION_DENIED
        super().__init__(message, REASON_NO_AUTH_AGENT if no_agent else REASON_PERMISSION_DENIED)
        self.no_agent = no_agent
        self.cause = cause


class CommandError(ElevationError):
    """The elevated command ran and exited non-zero."""

    reason_code = REASON_COMMAND_FAILED

    def __init__(
        self,
        command: str,
        code: int,
        stdout: str,
        stderr: str,
        *,
        line_sep: str = "\n",
    ) -> None:
        super().__init__(f"Command failed: {command}{line_sep}{stderr}")
        self.command = command
        self.code = code
        self.stdout = stdout
        self.stderr = stderr


class IdentityError(ElevationError):
    reason_code = REASON_IDENTITY_INVALID


class HostPreconditionError(ElevationError):
    """The host environment cannot support an attempt (temp dir, user, cwd)."""

    reason_code = REASON_HOST_PRECONDITION


class OutputLimitError(ElevationError):
    reason_code = REASON_OUTPUT_LIMIT

    def __init__(self, stream: str, size: int, limit: int) -> None:
        super().__init__(f"{stream} exceeded maximum output size ({size} > {limit} bytes)")
        self.stream = stream
        self.size = size
        self.limit = limit


class ElevationCancelledError(ElevationError):
    reason_code = REASON_CANCELLED


class ConfigError(ElevationError, ValueError):
    """Configuration file could not be parsed or validated."""

    reason_code = REASON_CONFIG_SCHEMA_INVALID
