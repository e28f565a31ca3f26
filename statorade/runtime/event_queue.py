# statorade/runtime/event_queue.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, Callable, Deque, Tuple

from statorade.core.events import EventRequest

logger = logging.getLogger(__name__)

Resolver = Callable[[EventRequest], Any]


class DispatchQueue:
    """
    FIFO queue of pending event dispatches, drained by the running asyncio
    event loop.

    Every submission schedules exactly one ``call_soon`` callback, and every
    callback resolves exactly one request (the oldest). Because the loop runs
    ready callbacks in the order they were scheduled, requests resolve in
    submission order, and everything a resolution does synchronously (including
    submitting further requests) finishes before the next request is looked at.
    """

    def __init__(self, resolver: Resolver) -> None:
        """
        :param resolver: Called with each request when its turn comes; its
                         return value becomes the result of the request's future.
        """
        self._resolver = resolver
        self._pending: Deque[Tuple[EventRequest, asyncio.Future]] = deque()

    def submit(self, request: EventRequest) -> asyncio.Future:
        """
        Queue a request for resolution on a later loop iteration.

        :param request: The event snapshot to resolve.
        :return: A future resolving to whatever the resolver returns.
        :raises RuntimeError: If no event loop is running.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending.append((request, future))
        loop.call_soon(self._resolve_next)
        logger.debug("Queued %r for state %r (%d pending)", request.event_name, request.state_name, len(self._pending))
        return future

    def _resolve_next(self) -> None:
        request, future = self._pending.popleft()
        try:
            result = self._resolver(request)
        except Exception as exc:
            logger.debug("Dispatch of %r raised %r", request.event_name, exc)
            if not future.done():
                future.set_exception(exc)
            return
        if not future.done():
            future.set_result(result)

    async def join(self) -> None:
        """
        Wait until every submitted request has been resolved, including
        requests submitted while waiting.
        """
        while self._pending:
            await asyncio.sleep(0)

    def __len__(self) -> int:
        return len(self._pending)

    def is_empty(self) -> bool:
        """Check if no dispatches are waiting."""
        return not self._pending
