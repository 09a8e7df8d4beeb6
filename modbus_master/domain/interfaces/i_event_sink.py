"""IEventSink interface for polling event consumers."""

from abc import ABC, abstractmethod

from ..value_objects import PollingEvent


class IEventSink(ABC):
    """Receives polling events from the scheduler.

    Publishing is best-effort and must never block the polling loop.
    """

    @abstractmethod
    def publish(self, event: PollingEvent) -> bool:
        """Deliver an event.

        Returns:
            True if delivered, False if dropped
        """
