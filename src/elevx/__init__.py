"""elevx - run a command with administrator privileges and get its output back."""

__version__ = "0.1.0"

from elevx.api import exec_elevated
from elevx.config import ElevxConfig, load_config
from elevx.errors import (
    CommandError,
    ElevationCancelledError,
    ElevationError,
    ElevationValidationError,
    HostPreconditionError,
    IdentityError,
    MechanismNotFoundError,
    OutputLimitError,
    PermissionDeniedError,
    PlatformUnsupportedError,
)
from elevx.types import ElevationRequest, ElevationResult

__all__ = [
    "CommandError",
    "ElevationCancelledError",
    "ElevationError",
    "ElevationRequest",
    "ElevationResult",
    "ElevationValidationError",
    "ElevxConfig",
    "HostPreconditionError",
    "IdentityError",
    "MechanismNotFoundError",
    "OutputLimitError",
    "PermissionDeniedError",
    "PlatformUnsupportedError",
    "__version__",
    "exec_elevated",
    "load_config",
]
