"""Event delivery implementations."""

from .queue_event_sink import QueueEventSink

__all__ = ["QueueEventSink"]
