from typing import Protocol

class Transport(Protocol):
    """A byte stream to one host, owned by a single connection.

    Implementations raise TransportError subclasses instead of OSError.
    """

    def connect(self, host: str, port: int) -> None:
        ...

    def write(self, data: bytes) -> int:
        """Sends all of ``data`` and returns its length."""
        ...

    def read_into(self, buffer: bytearray) -> int:
        """Returns 0 once the peer has closed the stream."""
        ...

    def close(self) -> None:
        """Safe to call more than once."""
        ...
