"""Canonical JSON envelopes for CLI output."""

from __future__ import annotations

import json
from typing import Any

from elevx.errors import CommandError, ElevationError, PermissionDeniedError
from elevx.types import ElevationResult


def canonical_dumps(obj: Any) -> str:
    """Serialize a JSON-compatible object with stable canonical formatting."""
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def success_payload(result: ElevationResult) -> dict[str, Any]:
    return {
        "status": "ok",
        "platform": result.platform,
        "returncode": result.returncode,
        "stdout": result.stdout,
        "stderr": result.stderr,
    }


def error_payload(error: ElevationError) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "status": "error",
        "reason_code": error.reason_code,
        "message": str(error),
    }
    if isinstance(error, CommandError):
        payload["returncode"] = error.code
        payload["stdout"] = error.stdout
        payload["stderr"] = error.stderr
    if isinstance(error, PermissionDeniedError) and error.cause is not None:
        payload["cause"] = _describe_cause(error.cause)
    return payload


def _describe_cause(cause: Any) -> str:
    stderr = getattr(cause, "stderr", None)
    if isinstance(stderr, str) and stderr.strip():
        return stderr.strip()
    return str(cause)
