"""Pytest configuration and fixtures for elevx tests."""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from elevx.config import ElevxConfig
from tests.host_stubs import FakeHost, Responder


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    This prevents silent "no data collected" scenarios that produce 0% coverage
    without failing the test run.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'elevx' (the package) not 'src/elevx' (filesystem path).",
            returncode=1,
        )


@pytest.fixture
def make_host(tmp_path: Path) -> Callable[..., FakeHost]:
    def _make(platform: str, responder: Responder | None = None) -> FakeHost:
        return FakeHost(platform, tmp_path, responder)

    return _make


@pytest.fixture
def fast_config() -> ElevxConfig:
    return ElevxConfig(poll_interval=0.01)
