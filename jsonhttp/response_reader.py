import io
import logging

from .config import CHARSET
from .connection import TransportConnection
from .errors import ResponseBodyNotFoundError
from .http_protocol import HttpResponse
from .request import Response


logger = logging.getLogger(__name__)

# Checked in order; only the first match is removed.
XSSI_PREFIXES = (
    "for(;;);",
    "while(1);",
    ")]}',\n",
    ")]}',\\n",
    "throw 1; <dont be evil>",
    "throw 1;",
)


def strip_xssi_prefix(text: str) -> str:
    for prefix in XSSI_PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix):]
    return text


def response_charset(response: HttpResponse, default: str = CHARSET) -> str:
    content_type = response.header("Content-Type") or ""
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return default


class ResponseReader:
    def __init__(self, charset: str = CHARSET, debug: bool = False):
        self._charset = charset
        self._debug = debug

    def read(self, connection: TransportConnection) -> Response:
        response = connection.execute()
        logger.debug("Response Code: %d", response.status_code)

        try:
            stream = connection.open_body(response)
        except ResponseBodyNotFoundError:
            return Response(status_code=response.status_code, text="")

        charset = response_charset(response, self._charset)
        try:
            reader = io.TextIOWrapper(stream, encoding=charset, errors="replace", newline=None)
        except LookupError:
            # Unknown names and binary codecs such as base64 both land here.
            logger.warning("Unusable response charset %r, falling back to %s", charset, self._charset)
            reader = io.TextIOWrapper(stream, encoding=self._charset, errors="replace", newline=None)

        with reader:
            text = "".join(line.rstrip("\n") + "\n" for line in reader)

        if self._debug:
            logger.debug("Raw response text: %s", text)

        return Response(status_code=response.status_code, text=strip_xssi_prefix(text))
