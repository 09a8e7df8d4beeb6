"""Application services.

Reusable application logic shared by the use cases and the poller.
"""

from .reading_store import LastReadingStore

__all__ = ["LastReadingStore"]
