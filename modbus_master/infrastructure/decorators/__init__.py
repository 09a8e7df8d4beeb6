"""Infrastructure layer decorators."""

from .error_handler import handle_transport_errors
from .connection_decorator import require_connection

__all__ = [
    "handle_transport_errors",
    "require_connection",
]
