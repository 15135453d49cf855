"""Per-platform elevation strategies."""

from __future__ import annotations

from elevx.config import ElevxConfig
from elevx.errors import PlatformUnsupportedError
from elevx.host import Host
from elevx.platforms.base import ElevationStrategy
from elevx.platforms.linux import LinuxStrategy
from elevx.platforms.mac import MacStrategy
from elevx.platforms.windows import WindowsStrategy

STRATEGIES: dict[str, type[ElevationStrategy]] = {
    "darwin": MacStrategy,
    "linux": LinuxStrategy,
    "win32": WindowsStrategy,
}


def select_strategy(host: Host, config: ElevxConfig) -> ElevationStrategy:
    """Instantiate the strategy for ``host.platform``."""
    strategy_cls = STRATEGIES.get(host.platform)
    if strategy_cls is None:
        raise PlatformUnsupportedError(host.platform)
    return strategy_cls(host, config)


__all__ = [
    "ElevationStrategy",
    "LinuxStrategy",
    "MacStrategy",
    "STRATEGIES",
    "WindowsStrategy",
    "select_strategy",
]
