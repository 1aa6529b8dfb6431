class JsonHttpError(Exception):
    """Base exception for the jsonhttp library."""
    pass

# --- Transport Errors ---

class TransportError(JsonHttpError):
    """A generic error occurred in the transport layer."""
    pass

class DnsFailureError(TransportError): pass
class SocketConnectError(TransportError): pass
class SocketWriteError(TransportError): pass
class SocketReadError(TransportError): pass
class SocketTimeoutError(TransportError): pass
class TlsHandshakeError(TransportError): pass
class ConnectionClosedError(TransportError): pass

# --- HTTP Client Errors ---

class HttpClientError(JsonHttpError):
    """A generic error occurred in the HTTP client logic."""
    pass

class UrlParseError(HttpClientError): pass
class HttpParseError(HttpClientError): pass
class InvalidRequestError(HttpClientError): pass
class UploadReadError(HttpClientError): pass


class ResponseBodyNotFoundError(HttpClientError):
    """The server answered with a not-found class status, so there is no body to open."""
    pass


class StatusMismatchError(HttpClientError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected HTTP status {expected}, got {actual}.")
        self.expected = expected
        self.actual = actual


class DecodeError(HttpClientError):
    """The response text could not be decoded into the target shape."""
    pass


class EncodeError(HttpClientError):
    """The request body could not be serialised to JSON."""
    pass
