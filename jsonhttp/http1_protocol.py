from .transport import Transport
from .http_protocol import HttpProtocol, HttpRequest, HttpResponse
from .errors import HttpParseError, ConnectionClosedError, InvalidRequestError


class Http1Protocol(HttpProtocol):
    _HEADER_SEPARATOR = b"\r\n\r\n"
    _HEADER_CONTENT_LENGTH = b"\r\ncontent-length:"
    _HEADER_TRANSFER_ENCODING = b"\r\ntransfer-encoding:"
    _READ_CHUNK_SIZE = 4096
    _SWITCHING_PROTOCOLS = 101

    def __init__(self, transport: Transport):
        self._transport: Transport = transport
        self._buffer: bytearray = bytearray()
        self._header_size: int = 0
        self._content_length: int | None = None
        self._chunked: bool = False
        self._bodyless: bool = False
        self._chunk_pos: int = 0
        self._chunk_body: bytearray = bytearray()
        self._chunks_done: bool = False

    def connect(self, host: str, port: int) -> None:
        self._transport.connect(host, port)

    def disconnect(self) -> None:
        self._transport.close()

    def perform_request(self, request: HttpRequest) -> HttpResponse:
        self._build_request_bytes(request)
        self._transport.write(bytes(self._buffer))
        self._read_full_response()
        return self._parse_response()

    def _build_request_bytes(self, request: HttpRequest) -> None:
        self._buffer.clear()

        try:
            request_line = f"{request.method.value} {request.path} HTTP/1.1\r\n"
            self._buffer += request_line.encode('ascii')

            for key, value in request.headers:
                header_line = f"{key}: {value}\r\n"
                self._buffer += header_line.encode('latin-1')
        except UnicodeEncodeError as e:
            raise InvalidRequestError(f"Request head is not latin-1 encodable: {e}") from e

        self._buffer += b"\r\n"

        if request.body:
            self._buffer += request.body

    def _read_full_response(self) -> None:
        self._buffer.clear()
        self._header_size = 0
        self._content_length = None
        self._chunked = False
        self._bodyless = False
        self._chunk_pos = 0
        self._chunk_body = bytearray()
        self._chunks_done = False
        chunk = bytearray(self._READ_CHUNK_SIZE)

        while True:
            try:
                bytes_read = self._transport.read_into(chunk)
            except ConnectionClosedError:
                bytes_read = 0

            if bytes_read == 0:
                self._check_complete_on_close()
                break

            self._buffer += memoryview(chunk)[:bytes_read]

            if self._header_size == 0:
                self._scan_headers()

            if self._header_size != 0 and self._is_complete():
                break

        if self._header_size == 0 and self._buffer:
            raise HttpParseError("Could not find header separator in response.")

    def _scan_headers(self) -> None:
        while True:
            separator_pos = self._buffer.find(self._HEADER_SEPARATOR)
            if separator_pos == -1:
                return

            header_size = separator_pos + len(self._HEADER_SEPARATOR)
            status_code = self._parse_status_line()[0]
            if 100 <= status_code < 200 and status_code != self._SWITCHING_PROTOCOLS:
                # Interim response such as 100 Continue; the final one follows.
                del self._buffer[:header_size]
                continue
            break

        self._header_size = header_size
        headers_block_lower = bytes(self._buffer[:self._header_size]).lower()
        self._bodyless = status_code == self._SWITCHING_PROTOCOLS or status_code in (204, 304)

        te_key_pos = headers_block_lower.find(self._HEADER_TRANSFER_ENCODING)
        if te_key_pos != -1:
            line_end_pos = headers_block_lower.find(b"\r\n", te_key_pos + 2)
            if b"chunked" in headers_block_lower[te_key_pos:line_end_pos]:
                self._chunked = True
                self._chunk_pos = self._header_size
                return

        cl_key_pos = headers_block_lower.find(self._HEADER_CONTENT_LENGTH)
        if cl_key_pos != -1:
            line_end_pos = headers_block_lower.find(b"\r\n", cl_key_pos + 2)
            value_start_pos = cl_key_pos + len(self._HEADER_CONTENT_LENGTH)
            value_slice = headers_block_lower[value_start_pos:line_end_pos]

            try:
                self._content_length = int(value_slice.strip())
            except ValueError:
                raise HttpParseError("Invalid Content-Length value")

    def _is_complete(self) -> bool:
        if self._bodyless:
            return True
        if self._chunked:
            return self._advance_chunked()
        if self._content_length is not None:
            return len(self._buffer) >= self._header_size + self._content_length
        # No framing information: the body runs until the server closes.
        return False

    def _check_complete_on_close(self) -> None:
        if self._header_size == 0 or self._bodyless:
            return
        if self._content_length is not None and len(self._buffer) < self._header_size + self._content_length:
            raise HttpParseError("Connection closed before full content length was received.")
        if self._chunked and not self._advance_chunked():
            raise HttpParseError("Connection closed before the final chunk was received.")

    def _advance_chunked(self) -> bool:
        """Consumes the chunks received since the last call.

        Returns True once the terminating chunk and any trailers are buffered.
        """
        while not self._chunks_done:
            line_end = self._buffer.find(b"\r\n", self._chunk_pos)
            if line_end == -1:
                return False

            size_field = bytes(self._buffer[self._chunk_pos:line_end]).split(b";", 1)[0].strip()
            try:
                size = int(size_field, 16)
            except ValueError:
                raise HttpParseError("Invalid chunk size in chunked response body.")

            if size == 0:
                # Optional trailers end with an empty line.
                if self._buffer.find(b"\r\n\r\n", line_end) == -1:
                    return False
                self._chunks_done = True
                break

            data_start = line_end + 2
            if len(self._buffer) < data_start + size + 2:
                return False

            self._chunk_body += self._buffer[data_start:data_start + size]
            self._chunk_pos = data_start + size + 2

        return True

    def _parse_status_line(self) -> tuple[int, str, int]:
        status_line_end = self._buffer.find(b'\r\n')
        if status_line_end == -1:
            raise HttpParseError("Could not find status line terminator.")

        first_space = self._buffer.find(b' ', 0, status_line_end)
        if first_space == -1:
            raise HttpParseError("Could not find space after HTTP version.")

        second_space = self._buffer.find(b' ', first_space + 1, status_line_end)
        code_end = second_space if second_space != -1 else status_line_end

        try:
            status_code = int(self._buffer[first_space + 1:code_end])
        except ValueError:
            raise HttpParseError("Invalid status code in status line.")

        if second_space == -1:
            status_message = ""
        else:
            status_message = self._buffer[second_space + 1:status_line_end].decode('latin-1')

        return status_code, status_message, status_line_end

    def _parse_response(self) -> HttpResponse:
        if self._header_size == 0:
            raise HttpParseError("Cannot parse response with no headers.")

        status_code, status_message, status_line_end = self._parse_status_line()

        headers = []
        current_pos = status_line_end + 2
        while current_pos < self._header_size:
            line_end = self._buffer.find(b'\r\n', current_pos, self._header_size)
            if line_end == -1 or line_end == current_pos:
                break

            colon_pos = self._buffer.find(b':', current_pos, line_end)
            if colon_pos != -1:
                key = self._buffer[current_pos:colon_pos].decode('latin-1')
                value = self._buffer[colon_pos + 1:line_end].decode('latin-1').strip(" \t")
                headers.append((key, value))

            current_pos = line_end + 2

        raw_body = self._buffer[self._header_size:]
        if self._bodyless:
            body = b""
        elif self._chunked:
            body = bytes(self._chunk_body)
        elif self._content_length is not None:
            body = bytes(raw_body[:self._content_length])
        else:
            body = bytes(raw_body)

        return HttpResponse(
            status_code=status_code,
            status_message=status_message,
            body=body,
            headers=headers
        )
