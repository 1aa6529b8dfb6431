import logging

from dataclasses import dataclass
from io import BytesIO
from typing import Any, BinaryIO
from urllib.parse import quote, urlencode, urlsplit

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from .config import ClientConfig, CONTENT_TYPE_FORM, CONTENT_TYPE_JSON
from .errors import EncodeError, InvalidRequestError, ResponseBodyNotFoundError, UrlParseError
from .http1_protocol import Http1Protocol
from .http_protocol import HttpProtocol, HttpRequest, HttpResponse, HttpStatusCode
from .multipart import build_multipart_body
from .request import Request
from .tcp_transport import TcpTransport
from .tls_transport import TlsTransport, default_context
from .transport import Transport


logger = logging.getLogger(__name__)

HTTPS_SCHEME = "https"
_DEFAULT_PORTS = {True: 443, False: 80}
_PATH_SAFE_CHARS = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE_CHARS = _PATH_SAFE_CHARS + "?"
_NOT_FOUND_STATUSES = (HttpStatusCode.NOT_FOUND.value, HttpStatusCode.GONE.value)
_JSON = TypeAdapter(Any)


@dataclass(frozen=True)
class Target:
    secure: bool
    host: str
    port: int
    path: str
    host_header: str


def parse_url(url: str) -> Target:
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise UrlParseError(f"Invalid URL '{url}': {e}") from e

    if not parts.hostname:
        raise UrlParseError(f"URL '{url}' has no host.")

    secure = parts.scheme.lower() == HTTPS_SCHEME
    path = quote(parts.path or "/", safe=_PATH_SAFE_CHARS)
    if parts.query:
        path += "?" + quote(parts.query, safe=_QUERY_SAFE_CHARS)

    host_header = parts.hostname if ":" not in parts.hostname else f"[{parts.hostname}]"
    if port is not None:
        host_header += f":{port}"

    return Target(
        secure=secure,
        host=parts.hostname,
        port=port if port is not None else _DEFAULT_PORTS[secure],
        path=path,
        host_header=host_header,
    )


def _merge_headers(defaults: list[tuple[str, str]], overrides) -> list[tuple[str, str]]:
    if not overrides:
        return defaults

    override_names = {key.lower() for key in overrides}
    merged = [(key, value) for key, value in defaults if key.lower() not in override_names]
    merged.extend(overrides.items())
    return merged


class TransportConnection:
    """An open HTTP connection for exactly one Request.

    Use it as a context manager: the transport is connected on entry and is
    always disconnected on exit, whether or not the exchange succeeded.
    """

    def __init__(self, request: Request, config: ClientConfig | None = None):
        self._request = request
        self._config = config or ClientConfig()
        self._target = parse_url(request.url)
        self._protocol: HttpProtocol | None = None

    @property
    def secure(self) -> bool:
        return self._target.secure

    def _create_transport(self) -> Transport:
        if self._target.secure:
            return TlsTransport(
                timeout=self._config.timeout,
                context=default_context(verify=self._config.verify_tls),
            )
        return TcpTransport(timeout=self._config.timeout)

    def open(self) -> None:
        if self._protocol is not None:
            raise InvalidRequestError("Connection is already open.")

        protocol = Http1Protocol(self._create_transport())
        protocol.connect(self._target.host, self._target.port)
        self._protocol = protocol

    def close(self) -> None:
        if self._protocol is not None:
            try:
                self._protocol.disconnect()
            finally:
                self._protocol = None

    def __enter__(self) -> "TransportConnection":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def build_http_request(self) -> HttpRequest:
        request = self._request
        headers = [("Host", self._target.host_header)]
        body = b""

        if request.upload is not None:
            body, content_type = build_multipart_body(request.upload, request.payload)
            headers += [
                ("Connection", "keep-alive"),
                ("Content-Length", str(len(body))),
                ("Content-Type", content_type),
            ]
        else:
            headers.append(("Connection", "close"))
            if request.json_body is not None:
                body = self._encode_json(request.json_body)
                headers += [("Content-Type", CONTENT_TYPE_JSON), ("Content-Length", str(len(body)))]
            elif request.payload is not None:
                body = urlencode(list(request.payload.items())).encode(self._config.charset)
                headers += [("Content-Type", CONTENT_TYPE_FORM), ("Content-Length", str(len(body)))]

        return HttpRequest(
            method=request.method,
            path=self._target.path,
            body=body,
            headers=_merge_headers(headers, request.headers),
        )

    def execute(self) -> HttpResponse:
        """Writes the request and waits for the complete response."""
        if self._protocol is None:
            raise InvalidRequestError("Connection must be opened before executing a request.")

        http_request = self.build_http_request()
        logger.debug("%s %s", http_request.method.value, self._request.url)
        return self._protocol.perform_request(http_request)

    @staticmethod
    def open_body(response: HttpResponse) -> BinaryIO:
        if response.status_code in _NOT_FOUND_STATUSES:
            raise ResponseBodyNotFoundError(f"No response body for HTTP status {response.status_code}.")
        return BytesIO(response.body)

    @staticmethod
    def _encode_json(value: Any) -> bytes:
        try:
            return _JSON.dump_json(value)
        except (PydanticSerializationError, ValueError) as e:
            raise EncodeError(f"Could not serialise JSON request body: {e}") from e
