from .transport import MemoryTransport, Transport
from .wire_client import ConnectionState, WireClient, WireEvent, set_chain

__all__ = (
    "Transport",
    "MemoryTransport",
    "ConnectionState",
    "WireClient",
    "WireEvent",
    "set_chain",
)
