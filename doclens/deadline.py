"""Deadline primitive shared by the fetch client and the summarizer.

:func:`race_deadline` schedules the operation and a timer as two independent
tasks and returns whichever settles first.  When the timer wins the operation
task is cancelled and dropped without being awaited: cancellation of the
underlying remote work is best-effort only.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

T = TypeVar("T")


class DeadlineExceeded(Exception):
    """Raised by :func:`race_deadline` when the timer settles first."""

    def __init__(self, seconds: float) -> None:
        super().__init__(f"Operation timed out after {seconds:g}s")
        self.seconds = seconds


async def race_deadline(operation: Awaitable[T], seconds: float) -> T:
    """Await *operation* for at most *seconds*.

    Returns the operation's result, re-raises its exception, or raises
    :class:`DeadlineExceeded` if the timer fires first.  If both settle in the
    same loop iteration the operation wins.
    """
    task = asyncio.ensure_future(operation)
    timer = asyncio.ensure_future(asyncio.sleep(seconds))
    try:
        done, _ = await asyncio.wait(
            {task, timer}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        task.cancel()
        timer.cancel()
        raise

    if task in done:
        timer.cancel()
        return task.result()

    task.cancel()
    raise DeadlineExceeded(seconds)
