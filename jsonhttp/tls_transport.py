import socket
import ssl

from .config import REQUEST_TIMEOUT
from .errors import TlsHandshakeError
from .tcp_transport import TcpTransport


def default_context(verify: bool = True) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class TlsTransport(TcpTransport):
    """Transport over a TLS-wrapped TCP socket, used for https URLs."""

    _END_OF_STREAM = (ssl.SSLZeroReturnError,)

    def __init__(self, timeout: float | None = REQUEST_TIMEOUT, context: ssl.SSLContext | None = None) -> None:
        super().__init__(timeout)
        self._context = context if context is not None else default_context()

    def _wrap(self, sock: socket.socket, host: str) -> socket.socket:
        try:
            return self._context.wrap_socket(sock, server_hostname=host)
        except (ssl.SSLError, ssl.CertificateError) as e:
            sock.close()
            raise TlsHandshakeError(f"TLS handshake with '{host}' failed: {e}") from e
