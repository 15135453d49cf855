"""Teardown of the isolated context directory."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from elevx.errors import IdentityError
from elevx.host import Host
from elevx.identity import is_valid_identity
from elevx.types import ElevationContext

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def remove_context(host: Host, context: ElevationContext) -> None:
    """Recursively delete the context root.

    Refuses anything that is not ``<temp_dir>/<32-hex identity>``.
    """
    if not is_valid_identity(context.identity):
        raise IdentityError("Refusing to remove context with an invalid identity.")
    root = context.root
    if root.parent != context.temp_dir or root.name != context.identity:
        raise IdentityError(f"Refusing to remove unexpected path: {root}")
    if not host.exists(root):
        logger.debug("context %s was never created", root)
        return
    logger.debug("removing context %s", root)
    host.remove_tree(root)


def run_with_cleanup(host: Host, context: ElevationContext, operation: Callable[[], _T]) -> _T:
    """Run ``operation`` then remove the context exactly once.

    An operation error always wins; a cleanup failure is raised only when the
    operation itself succeeded.
    """
    try:
        result = operation()
    except BaseException:
        logger.debug(
            "attempt in %s failed; staged steps: %s",
            context.root,
            ", ".join(context.staged) or "none",
        )
        try:
            remove_context(host, context)
        except Exception as cleanup_exc:
            logger.warning("cleanup of %s failed after an earlier error: %s", context.root, cleanup_exc)
        raise
    remove_context(host, context)
    return result
