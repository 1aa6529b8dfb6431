from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

@dataclass
class HttpRequest:
    method: HttpMethod = HttpMethod.GET
    path: str = "/"
    body: bytes = b""
    headers: list[tuple[str, str]] = field(default_factory=list)

@dataclass
class HttpResponse:
    status_code: int
    status_message: str
    body: bytes
    headers: list[tuple[str, str]]

    def header(self, name: str) -> str | None:
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None

class HttpProtocol(Protocol):
    def connect(self, host: str, port: int) -> None:
        ...

    def disconnect(self) -> None:
        ...

    def perform_request(self, request: HttpRequest) -> HttpResponse:
        ...

# --- Status Codes ---
class HttpStatusCode(Enum):
    CONTINUE = 100
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    FOUND = 302
    NOT_MODIFIED = 304
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    GONE = 410
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502
