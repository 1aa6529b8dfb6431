import socket

from .config import REQUEST_TIMEOUT
from .errors import (
    TransportError,
    DnsFailureError,
    SocketConnectError,
    SocketWriteError,
    SocketReadError,
    SocketTimeoutError,
)
from .transport import Transport


class TcpTransport(Transport):
    """Plain TCP stream with one timeout applied to connect and every read or write.

    Subclasses layer a protocol over the connected socket by overriding ``_wrap``.
    """

    # recv_into errors that mean the peer ended the stream cleanly.
    _END_OF_STREAM: tuple[type[OSError], ...] = ()

    def __init__(self, timeout: float | None = REQUEST_TIMEOUT) -> None:
        self._timeout = timeout
        self._sock: socket.socket | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self, host: str, port: int) -> None:
        if self._sock is not None:
            raise TransportError("Transport is already connected.")

        try:
            sock = socket.create_connection((host, port), timeout=self._timeout)
        except socket.gaierror as e:
            raise DnsFailureError(f"DNS Failure for host '{host}'") from e
        except TimeoutError as e:
            raise SocketTimeoutError(f"Connecting to {host}:{port} timed out") from e
        except OSError as e:
            raise SocketConnectError(f"Socket connection failed: {e}") from e

        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            self._sock = self._wrap(sock, host)
        except TimeoutError as e:
            sock.close()
            raise SocketTimeoutError(f"Setting up {host}:{port} timed out") from e
        except OSError as e:
            sock.close()
            raise SocketConnectError(f"Socket setup failed: {e}") from e

    def _wrap(self, sock: socket.socket, host: str) -> socket.socket:
        return sock

    def write(self, data: bytes) -> int:
        if self._sock is None:
            raise TransportError("Cannot write on a disconnected transport.")

        try:
            self._sock.sendall(data)
        except TimeoutError as e:
            raise SocketTimeoutError("Socket write timed out") from e
        except OSError as e:
            raise SocketWriteError(f"Socket write failed: {e}") from e
        return len(data)

    def read_into(self, buffer: bytearray) -> int:
        if self._sock is None:
            raise TransportError("Cannot read from a disconnected transport.")

        try:
            return self._sock.recv_into(buffer)
        except self._END_OF_STREAM:
            return 0
        except TimeoutError as e:
            raise SocketTimeoutError("Socket read timed out") from e
        except OSError as e:
            raise SocketReadError(f"Socket read failed: {e}") from e

    def close(self) -> None:
        sock, self._sock = self._sock, None
        if sock is not None:
            sock.close()
