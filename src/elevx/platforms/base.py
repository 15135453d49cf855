"""Shared orchestration shape for per-platform elevation strategies."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from elevx.cleanup import run_with_cleanup
from elevx.config import ElevxConfig
from elevx.errors import HostPreconditionError
from elevx.host import Host
from elevx.identity import generate_identity
from elevx.types import ElevationContext, ElevationRequest, ElevationResult

logger = logging.getLogger(__name__)


class ElevationStrategy(ABC):
    """One elevation mechanism.

    ``run`` sequences ``prepare`` -> ``stage`` -> ``invoke`` ->
    ``recover_result``; each step raises to short-circuit the rest, and a
    prepared context is removed before ``run`` returns or raises.
    """

    platform: str = ""

    def __init__(self, host: Host, config: ElevxConfig) -> None:
        self.host = host
        self.config = config

    def prepare(self, request: ElevationRequest) -> ElevationContext | None:
        """Create the isolated context, or return None if none is needed."""
        return None

    @abstractmethod
    def stage(self, request: ElevationRequest, context: ElevationContext | None) -> None:
        """Write every file the mechanism needs."""

    @abstractmethod
    def invoke(self, request: ElevationRequest, context: ElevationContext | None) -> Any:
        """Run the elevation mechanism; return whatever recovery needs."""

    @abstractmethod
    def recover_result(
        self,
        request: ElevationRequest,
        context: ElevationContext | None,
        invocation: Any,
        *,
        cancel: threading.Event | None = None,
    ) -> ElevationResult:
        """Turn the mechanism's side channel into a result or a classified error."""

    def run(self, request: ElevationRequest, *, cancel: threading.Event | None = None) -> ElevationResult:
        context = self.prepare(request)

        def attempt() -> ElevationResult:
            self.stage(request, context)
            invocation = self.invoke(request, context)
            return self.recover_result(request, context, invocation, cancel=cancel)

        if context is None:
            return attempt()
        return run_with_cleanup(self.host, context, attempt)

    def require_temp_dir(self) -> Path:
        temp = self.host.temp_dir()
        if not temp:
            raise HostPreconditionError("Temporary directory is not defined.")
        return temp

    def new_identity(self, request: ElevationRequest) -> str:
        identity = generate_identity(request.name, request.command, self.host.random_bytes)
        logger.debug("attempt identity %s", identity)
        return identity
