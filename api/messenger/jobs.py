"""
Fire-and-forget submission of webhook deliveries.

The mutation path calls ``submit`` and returns immediately; delivery runs
later, on the event loop or in an arq worker.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

from messenger.channels import WireRequest
from messenger.channels.dispatcher import deliver

logger = logging.getLogger(__name__)

DELIVER_JOB = "deliver_webhook"


class DeliverySubmitter(ABC):
    """Common interface for handing a request off for delivery."""

    @abstractmethod
    def submit(self, request: WireRequest) -> None:
        """Schedule delivery without waiting for it."""
        ...


class BackgroundSubmitter(DeliverySubmitter):
    """
    Deliver in-process.

    Inside a running event loop each request becomes its own task; from
    synchronous code it runs on a short-lived daemon thread.
    """

    def __init__(self, verify_ssl: Optional[bool] = None, timeout: Optional[float] = None):
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._tasks: set[asyncio.Task] = set()

    def submit(self, request: WireRequest) -> None:
        coro = deliver(request, verify_ssl=self.verify_ssl, timeout=self.timeout)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            threading.Thread(target=asyncio.run, args=(coro,), daemon=True).start()
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for deliveries submitted from this loop (shutdown, tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class ArqSubmitter(DeliverySubmitter):
    """
    Queue deliveries as arq jobs for the messenger worker.

    The arq pool belongs to the event loop that created it, so ``submit``
    must be called from code running on that loop. Synchronous hosts should
    use BackgroundSubmitter instead.
    """

    def __init__(self, pool):
        self.pool = pool
        self._tasks: set[asyncio.Task] = set()

    def submit(self, request: WireRequest) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                "ArqSubmitter needs a running event loop; use BackgroundSubmitter from synchronous code"
            ) from None
        task = loop.create_task(self._enqueue(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _enqueue(self, request: WireRequest) -> None:
        try:
            await self.pool.enqueue_job(DELIVER_JOB, request.url, request.content_type, request.body)
        except Exception:
            logger.error("Cannot queue notification for %s", request.url, exc_info=True)

    async def drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
