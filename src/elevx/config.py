"""Load and validate elevx configuration.

Lookup order:
1. explicit path argument
2. ``$ELEVX_CONFIG``
3. ``~/.config/elevx/config.yaml`` (when present)
4. built-in defaults

``$ELEVX_POLL_INTERVAL`` overrides the poll interval from any source.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from elevx.errors import REASON_CONFIG_PARSE_ERROR, REASON_CONFIG_SCHEMA_INVALID, ConfigError
from elevx.exec import MAX_OUTPUT_BYTES
from elevx.schemas.validator import validate_data

CONFIG_ENV_VAR = "ELEVX_CONFIG"
POLL_INTERVAL_ENV_VAR = "ELEVX_POLL_INTERVAL"

# kdesudo offers a richer prompt than pkexec; both take trailing argv.
DEFAULT_LINUX_BINARIES: tuple[str, ...] = ("/usr/bin/kdesudo", "/usr/bin/pkexec")


@dataclass(frozen=True)
class ElevxConfig:
    """Tunables shared by every elevation strategy."""

    poll_interval: float = 1.0
    # Smallest complete status file: one digit plus its line terminator.
    status_min_bytes: int = 2
    max_output_bytes: int = MAX_OUTPUT_BYTES
    linux_binaries: tuple[str, ...] = DEFAULT_LINUX_BINARIES
    magic_token: str = "ELEVX_ELEVATED"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ElevxConfig:
        """Parse and validate config dict into ElevxConfig."""
        errors = validate_data(data, "config")
        if errors:
            raise ConfigError(
                "Invalid elevx config:\n" + "\n".join(f"  - {msg}" for msg in errors),
                REASON_CONFIG_SCHEMA_INVALID,
            )
        defaults = cls()
        return cls(
            poll_interval=float(data.get("poll_interval", defaults.poll_interval)),
            status_min_bytes=int(data.get("status_min_bytes", defaults.status_min_bytes)),
            max_output_bytes=int(data.get("max_output_bytes", defaults.max_output_bytes)),
            linux_binaries=tuple(data.get("linux_binaries", defaults.linux_binaries)),
            magic_token=str(data.get("magic_token", defaults.magic_token)),
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["linux_binaries"] = list(self.linux_binaries)
        return payload


def default_config_path() -> Path:
    return Path.home() / ".config" / "elevx" / "config.yaml"


def load_config(path: Path | None = None) -> ElevxConfig:
    """Resolve, parse and validate configuration.

    Raises:
        ConfigError: If an explicitly named file is missing, or any file is
            malformed or fails schema validation.
    """
    explicit = path
    if explicit is None and os.environ.get(CONFIG_ENV_VAR):
        explicit = Path(os.environ[CONFIG_ENV_VAR])

    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}", REASON_CONFIG_PARSE_ERROR)
        config = _load_file(explicit)
    elif default_config_path().is_file():
        config = _load_file(default_config_path())
    else:
        config = ElevxConfig()

    return _apply_env_overrides(config)


def _load_file(path: Path) -> ElevxConfig:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML config at {path}: {exc}", REASON_CONFIG_PARSE_ERROR) from exc
    if raw is None:
        return ElevxConfig()
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Malformed config at {path}: expected mapping at top level",
            REASON_CONFIG_PARSE_ERROR,
        )
    return ElevxConfig.from_dict(raw)


def _apply_env_overrides(config: ElevxConfig) -> ElevxConfig:
    value = os.environ.get(POLL_INTERVAL_ENV_VAR)
    if not value:
        return config
    try:
        interval = float(value)
    except ValueError as exc:
        raise ConfigError(f"{POLL_INTERVAL_ENV_VAR} must be a number, got {value!r}") from exc
    if interval <= 0:
        raise ConfigError(f"{POLL_INTERVAL_ENV_VAR} must be > 0, got {value!r}")
    return replace(config, poll_interval=interval)
