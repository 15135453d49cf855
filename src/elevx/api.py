"""Public entry point: validate, pick a strategy, run one elevation attempt."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path

from elevx.config import ElevxConfig, load_config
from elevx.errors import PlatformUnsupportedError
from elevx.host import Host
from elevx.platforms import select_strategy
from elevx.types import SUPPORTED_PLATFORMS, ElevationResult
from elevx.validate import build_request

logger = logging.getLogger(__name__)


def exec_elevated(
    command: str,
    *,
    name: str | None = None,
    icon: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    config: ElevxConfig | None = None,
    host: Host | None = None,
    cancel: threading.Event | None = None,
) -> ElevationResult:
    """Run ``command`` with administrator privileges and return its output.

    Args:
        command: Shell command text, run verbatim (no ``sudo`` prefix).
        name: Prompt name; letters, digits and spaces, at most 70 chars.
            Defaults to the host process name.
        icon: Optional ``.icns`` file shown by the macOS prompt.
        env: Optional non-empty mapping of variables to set for the command.
        config: Tunables; loaded via ``load_config()`` when omitted.
        host: OS primitives; the running machine when omitted.
        cancel: Set to abandon a Windows completion wait.

    Returns:
        ElevationResult with the command's stdout and stderr.

    Raises:
        ElevationValidationError: Malformed input, before any OS interaction.
        PlatformUnsupportedError: Not Linux, macOS or Windows.
        MechanismNotFoundError: No elevation front-end located.
        PermissionDeniedError: Elevation declined or no auth agent.
        CommandError: The command ran elevated and exited non-zero.
        HostPreconditionError: No temp dir, no $USER on macOS, or a quote in
            a path the scripts must embed.
        IdentityError: The attempt identity failed its safety check.
        OutputLimitError: A captured stream exceeded ``max_output_bytes``.
        ElevationCancelledError: ``cancel`` was set during a Windows wait.
    """
    request = build_request(command, name=name, icon=icon, env=env)
    host = host or Host()
    if host.platform not in SUPPORTED_PLATFORMS:
        raise PlatformUnsupportedError(host.platform)
    strategy = select_strategy(host, config or load_config())
    logger.debug("elevating via %s", type(strategy).__name__)
    return strategy.run(request, cancel=cancel)
