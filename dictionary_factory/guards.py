"""Deadline and pacing helpers wrapped around blocking provider calls."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Optional, TypeVar

from dictionary_factory import logging_manager as log_mgr
from dictionary_factory.errors import ProviderTimeoutError

logger = log_mgr.get_logger().getChild("guards")

T = TypeVar("T")


def call_with_timeout(
    func: Callable[[], T],
    timeout: Optional[float],
    *,
    label: str = "provider call",
) -> T:
    """Run ``func`` on a one-shot worker and give up after ``timeout`` seconds.

    The worker thread is abandoned rather than joined when the deadline passes,
    so a hung HTTP request cannot stall the batch. Exceptions raised by
    ``func`` propagate unchanged.
    """

    if timeout is None or timeout <= 0:
        return func()

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dictionary-guard")
    future = executor.submit(func)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as exc:
        future.cancel()
        logger.warning(
            "%s timed out after %.1fs",
            label,
            timeout,
            extra={"event": "guard.timeout", "console_suppress": True},
        )
        raise ProviderTimeoutError(
            f"{label} timed out after {timeout:g}s"
        ) from exc
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


class Pacer:
    """Interruptible sleeps backed by a :class:`threading.Event` stop token."""

    def __init__(self, stop_event: Optional[threading.Event] = None) -> None:
        self.stop_event = stop_event or threading.Event()

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def pause(self, seconds: float) -> bool:
        """Wait ``seconds``; return ``False`` when the wait ended because of a stop."""

        if seconds <= 0:
            return not self.stopped
        return not self.stop_event.wait(seconds)


__all__ = ["Pacer", "call_with_timeout"]
