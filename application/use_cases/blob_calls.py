"""Run blocking blob-store calls off the event loop under a deadline."""

from __future__ import annotations

import asyncio
import functools
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from domain.exceptions import StorageError

T = TypeVar("T")


async def call_with_deadline(
    func: Callable[..., T],
    *args: Any,  # noqa: ANN401
    timeout_seconds: float | None,
    cancel_event: threading.Event | None = None,
    **kwargs: Any,  # noqa: ANN401
) -> T:
    """Await ``func(*args, **kwargs)`` in the default executor.

    The worker thread cannot be interrupted. When the deadline expires,
    ``cancel_event`` is set so a call that checks it can abandon its work.

    Raises:
        StorageError: If the deadline expires before the call returns.

    """
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(None, functools.partial(func, *args, **kwargs)),
            timeout=timeout_seconds,
        )
    except TimeoutError as e:
        if cancel_event is not None:
            cancel_event.set()
        msg = f"Blob storage call timed out after {timeout_seconds}s"
        raise StorageError(msg) from e
