"""Best-effort event delivery through an asyncio.Queue."""

import asyncio
import logging
from typing import Optional

from ...const import DEFAULT_EVENT_QUEUE_SIZE
from ...domain.interfaces import IEventSink
from ...domain.value_objects import PollingEvent

_LOGGER = logging.getLogger(__name__)


class QueueEventSink(IEventSink):
    """IEventSink that puts events on an asyncio.Queue without waiting.

    A full or closed queue drops the event; a slow consumer must never
    stall the polling loop. Without an explicit queue one is created on
    first use, so it binds to the loop that runs the poller rather than
    whichever loop was current at construction.

    Example:
        >>> sink = QueueEventSink(maxsize=100)
        >>> poller = ModbusPoller(event_sink=sink)
        >>> event = await sink.queue.get()
    """

    def __init__(
        self,
        queue: Optional[asyncio.Queue] = None,
        maxsize: int = DEFAULT_EVENT_QUEUE_SIZE,
    ):
        self._queue = queue
        self._maxsize = maxsize
        self._closed = False
        self._dropped = 0

    @property
    def queue(self) -> asyncio.Queue:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self._maxsize)
        return self._queue

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped_events(self) -> int:
        """Number of events dropped because the queue was full or closed."""
        return self._dropped

    def close(self) -> None:
        """Stop accepting events. Events already queued stay readable."""
        self._closed = True

    def publish(self, event: PollingEvent) -> bool:
        if self._closed:
            self._dropped += 1
            return False
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped += 1
            _LOGGER.warning(
                "Event queue full, dropping %s (%d dropped so far)",
                type(event).__name__,
                self._dropped,
            )
            return False
        return True
