"""Per-attempt identity used to name the isolated temp directory."""

from __future__ import annotations

import hashlib
import logging
import random
import re
import time
from collections.abc import Callable

from elevx.errors import IdentityError

logger = logging.getLogger(__name__)

IDENTITY_TAG = b"elevx-identity-1"
IDENTITY_LENGTH = 32
RANDOM_BYTES = 256

_IDENTITY_RE = re.compile(r"^[0-9a-f]{32}$")


def is_valid_identity(value: object) -> bool:
    return isinstance(value, str) and _IDENTITY_RE.fullmatch(value) is not None


def generate_identity(
    name: str,
    command: str,
    random_source: Callable[[int], bytes],
) -> str:
    """Hash a domain tag, name, command and random material into 32 hex chars.

    When ``random_source`` fails a time-based composite is used instead. It is
    weaker, but an attempt on a host without a working RNG still proceeds.

    Raises:
        IdentityError: If the result is not exactly 32 lowercase hex chars.
            Cleanup recursively deletes a directory named by this value.
    """
    try:
        material = random_source(RANDOM_BYTES)
    except (OSError, NotImplementedError) as exc:
        logger.warning("CSPRNG unavailable (%s); using time-based identity material", exc)
        material = f"{time.time_ns()}{random.random()}".encode()

    digest = hashlib.sha256()
    digest.update(IDENTITY_TAG)
    digest.update(name.encode("utf-8"))
    digest.update(command.encode("utf-8"))
    digest.update(material)
    identity = digest.hexdigest()[-IDENTITY_LENGTH:]
    if not is_valid_identity(identity):
        raise IdentityError("Expected a valid identity.")
    return identity
