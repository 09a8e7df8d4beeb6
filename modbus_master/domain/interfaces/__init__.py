"""Domain interfaces.

Contracts that infrastructure implementations fulfil, so that the
scheduler and codecs can be tested with fakes and the transport can be
swapped without touching domain logic.
"""

from .i_crc import ICRC
from .i_protocol import IProtocol
from .i_transport import ITransport
from .i_register_reader import IRegisterReader, ReadFunction
from .i_event_sink import IEventSink

__all__ = [
    "ICRC",
    "IProtocol",
    "ITransport",
    "IRegisterReader",
    "ReadFunction",
    "IEventSink",
]
