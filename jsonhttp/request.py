from collections.abc import Mapping
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any, Generic, TypeVar

from .config import CONTENT_TYPE_OCTET_STREAM
from .errors import InvalidRequestError, JsonHttpError
from .http_protocol import HttpMethod, HttpStatusCode

T = TypeVar("T")


@dataclass(frozen=True)
class UploadPart:
    """A single file part of a multipart upload.

    When both ``data`` and ``file`` are given, the in-memory bytes are sent and
    the file is never opened.
    """
    field_name: str
    data: bytes | None = None
    file: str | PathLike | None = None
    content_type: str = CONTENT_TYPE_OCTET_STREAM

    @property
    def filename(self) -> str:
        if self.data is None and self.file is not None:
            return Path(self.file).name
        return self.field_name


@dataclass(frozen=True)
class Request:
    url: str
    method: HttpMethod = HttpMethod.GET
    payload: Mapping[str, str] | None = None
    headers: Mapping[str, str] | None = None
    expected_status: int = HttpStatusCode.OK.value
    upload: UploadPart | None = None
    json_body: Any = None

    @property
    def has_body(self) -> bool:
        return self.upload is not None or self.json_body is not None or self.payload is not None

    def validate(self) -> None:
        if not self.url:
            raise InvalidRequestError("A request needs a URL.")

        if self.method == HttpMethod.GET and self.has_body:
            raise InvalidRequestError("GET requests cannot have a body.")

        if self.payload is not None and self.json_body is not None:
            raise InvalidRequestError("A request cannot carry both a form payload and a JSON body.")

        if self.upload is not None and self.json_body is not None:
            raise InvalidRequestError("Multipart uploads cannot carry a JSON body.")

        if self.upload is not None:
            if not self.upload.field_name:
                raise InvalidRequestError("Upload parts must name a form field.")
            if self.upload.data is None and self.upload.file is None:
                raise InvalidRequestError("Upload parts need either in-memory data or a file.")


@dataclass(frozen=True)
class Response:
    status_code: int
    text: str


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """What a finished request resolves to.

    ``value`` is the raw text for executor outcomes and the decoded shape for
    client outcomes. ``error`` is set on every failure.
    """
    success: bool
    value: T | None = None
    status_code: int | None = None
    error: JsonHttpError | None = None

    @classmethod
    def failed(cls, error: JsonHttpError, status_code: int | None = None) -> "Outcome[T]":
        return cls(success=False, value=None, status_code=status_code, error=error)
