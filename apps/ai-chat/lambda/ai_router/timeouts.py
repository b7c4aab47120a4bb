"""Deadline guard for awaitables that cannot be cancelled safely.

``with_timeout`` stops *waiting* for an operation once its deadline passes but
never cancels it: provider SDK calls that already reached the backend keep
running to completion in the background and their outcome is discarded.
"""

import asyncio
import logging
import math
from collections.abc import Awaitable
from typing import Any, TypeVar

from .errors import ProviderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Strong references to timed-out operations until they settle.
_abandoned_tasks: set[asyncio.Future[Any]] = set()


def timeout_enabled(timeout_ms: float | None) -> bool:
    return timeout_ms is not None and math.isfinite(timeout_ms) and timeout_ms > 0


def pending_abandoned_operations() -> int:
    return len(_abandoned_tasks)


def _discard_late_outcome(task: asyncio.Future[Any], label: str) -> None:
    _abandoned_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(
            "Abandoned operation failed after timeout",
            extra={"label": label, "error": str(error)},
        )
    else:
        logger.debug("Abandoned operation completed after timeout", extra={"label": label})


def _abandon(task: asyncio.Future[Any], label: str) -> None:
    _abandoned_tasks.add(task)
    task.add_done_callback(lambda done: _discard_late_outcome(done, label))


async def with_timeout(operation: Awaitable[T], timeout_ms: float | None, label: str) -> T:
    """Await ``operation`` for at most ``timeout_ms`` milliseconds.

    A ``None``, zero, negative or non-finite timeout disables the guard and the
    operation is awaited to natural completion. On expiry a
    ``ProviderTimeoutError`` naming ``label`` and the duration is raised while
    the operation itself keeps running.
    """
    if not timeout_enabled(timeout_ms):
        return await operation

    task = asyncio.ensure_future(operation)
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout_ms / 1000)
    except TimeoutError:
        if task.done():
            raise
        _abandon(task, label)
        raise ProviderTimeoutError(label, timeout_ms) from None
    except asyncio.CancelledError:
        if not task.done():
            _abandon(task, label)
        raise
