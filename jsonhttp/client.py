from collections.abc import Mapping
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from os import PathLike
from typing import Any, Generic, TypeVar

from .config import ClientConfig
from .decoder import Callback, JsonDecoder
from .executor import RequestExecutor
from .http_protocol import HttpMethod, HttpStatusCode
from .request import Outcome, Request, UploadPart
from .status_listeners import StatusListener, StatusListenerRegistry

T = TypeVar("T")

Headers = Mapping[str, str] | None
Payload = Mapping[str, str] | None

HTTP_OK = HttpStatusCode.OK.value


class JsonHttpClient(Generic[T]):
    """Issues HTTP requests in the background and maps JSON responses onto ``shape``.

    Every call returns a Future resolving to an Outcome and, when a callback is
    given, calls it once with ``(success, value)`` from the worker thread.
    """

    def __init__(
        self,
        shape: type[T],
        config: ClientConfig | None = None,
        registry: StatusListenerRegistry | None = None,
        executor: Executor | None = None,
    ):
        self._config = config or ClientConfig()
        self.registry = registry if registry is not None else StatusListenerRegistry()
        self._owns_pool = executor is None
        self._pool = executor if executor is not None else ThreadPoolExecutor(
            max_workers=self._config.max_workers, thread_name_prefix="jsonhttp"
        )
        self._decoder = JsonDecoder(shape)
        self._executor = RequestExecutor(self.registry, self._pool, self._config)

    @property
    def shape(self) -> type[T]:
        return self._decoder.shape

    def add_listener(self, status_code: int, listener: StatusListener) -> None:
        self.registry.add_listener(status_code, listener)

    def close(self) -> None:
        if self._owns_pool:
            self._pool.shutdown(wait=True)

    def __enter__(self) -> "JsonHttpClient[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- Single entry points ---

    def request_object(self, request: Request, callback: Callback[T] | None = None) -> "Future[Outcome[T]]":
        return self._executor.submit(request, lambda raw: self._decoder.complete_one(raw, callback))

    def request_list(self, request: Request, callback: Callback[list[T]] | None = None) -> "Future[Outcome[list[T]]]":
        return self._executor.submit(request, lambda raw: self._decoder.complete_many(raw, callback))

    # --- GET / DELETE ---

    def get_object(self, url: str, callback: Callback[T] | None = None, *,
                   headers: Headers = None, expected_status: int = HTTP_OK) -> "Future[Outcome[T]]":
        return self.request_object(Request(url, HttpMethod.GET, headers=headers, expected_status=expected_status), callback)

    def get_list(self, url: str, callback: Callback[list[T]] | None = None, *,
                 headers: Headers = None, expected_status: int = HTTP_OK) -> "Future[Outcome[list[T]]]":
        return self.request_list(Request(url, HttpMethod.GET, headers=headers, expected_status=expected_status), callback)

    def delete_and_get_object(self, url: str, callback: Callback[T] | None = None, *,
                              headers: Headers = None, expected_status: int = HTTP_OK) -> "Future[Outcome[T]]":
        return self.request_object(Request(url, HttpMethod.DELETE, headers=headers, expected_status=expected_status), callback)

    def delete_and_get_list(self, url: str, callback: Callback[list[T]] | None = None, *,
                            headers: Headers = None, expected_status: int = HTTP_OK) -> "Future[Outcome[list[T]]]":
        return self.request_list(Request(url, HttpMethod.DELETE, headers=headers, expected_status=expected_status), callback)

    # --- POST / PUT ---

    def post_and_get_object(self, url: str, payload: Payload = None, callback: Callback[T] | None = None, *,
                            headers: Headers = None, expected_status: int = HTTP_OK,
                            json_body: Any = None) -> "Future[Outcome[T]]":
        request = Request(url, HttpMethod.POST, payload=payload, headers=headers,
                          expected_status=expected_status, json_body=json_body)
        return self.request_object(request, callback)

    def post_and_get_list(self, url: str, payload: Payload = None, callback: Callback[list[T]] | None = None, *,
                          headers: Headers = None, expected_status: int = HTTP_OK,
                          json_body: Any = None) -> "Future[Outcome[list[T]]]":
        request = Request(url, HttpMethod.POST, payload=payload, headers=headers,
                          expected_status=expected_status, json_body=json_body)
        return self.request_list(request, callback)

    def put_and_get_object(self, url: str, payload: Payload = None, callback: Callback[T] | None = None, *,
                           headers: Headers = None, expected_status: int = HTTP_OK,
                           json_body: Any = None) -> "Future[Outcome[T]]":
        request = Request(url, HttpMethod.PUT, payload=payload, headers=headers,
                          expected_status=expected_status, json_body=json_body)
        return self.request_object(request, callback)

    def put_and_get_list(self, url: str, payload: Payload = None, callback: Callback[list[T]] | None = None, *,
                         headers: Headers = None, expected_status: int = HTTP_OK,
                         json_body: Any = None) -> "Future[Outcome[list[T]]]":
        request = Request(url, HttpMethod.PUT, payload=payload, headers=headers,
                          expected_status=expected_status, json_body=json_body)
        return self.request_list(request, callback)

    # --- Multipart uploads ---

    def upload_file_and_get_object(self, url: str, field_name: str, callback: Callback[T] | None = None, *,
                                   data: bytes | None = None, file: str | PathLike | None = None,
                                   payload: Payload = None, headers: Headers = None,
                                   expected_status: int = HTTP_OK) -> "Future[Outcome[T]]":
        return self.request_object(
            self._upload_request(HttpMethod.POST, url, field_name, data, file, payload, headers, expected_status),
            callback,
        )

    def upload_file_and_get_list(self, url: str, field_name: str, callback: Callback[list[T]] | None = None, *,
                                 data: bytes | None = None, file: str | PathLike | None = None,
                                 payload: Payload = None, headers: Headers = None,
                                 expected_status: int = HTTP_OK) -> "Future[Outcome[list[T]]]":
        return self.request_list(
            self._upload_request(HttpMethod.POST, url, field_name, data, file, payload, headers, expected_status),
            callback,
        )

    def upload_file_using_put_and_get_object(self, url: str, field_name: str, callback: Callback[T] | None = None, *,
                                             data: bytes | None = None, file: str | PathLike | None = None,
                                             payload: Payload = None, headers: Headers = None,
                                             expected_status: int = HTTP_OK) -> "Future[Outcome[T]]":
        return self.request_object(
            self._upload_request(HttpMethod.PUT, url, field_name, data, file, payload, headers, expected_status),
            callback,
        )

    def upload_file_using_put_and_get_list(self, url: str, field_name: str, callback: Callback[list[T]] | None = None, *,
                                           data: bytes | None = None, file: str | PathLike | None = None,
                                           payload: Payload = None, headers: Headers = None,
                                           expected_status: int = HTTP_OK) -> "Future[Outcome[list[T]]]":
        return self.request_list(
            self._upload_request(HttpMethod.PUT, url, field_name, data, file, payload, headers, expected_status),
            callback,
        )

    @staticmethod
    def _upload_request(method: HttpMethod, url: str, field_name: str, data: bytes | None,
                        file: str | PathLike | None, payload: Payload, headers: Headers,
                        expected_status: int) -> Request:
        return Request(
            url,
            method,
            payload=payload,
            headers=headers,
            expected_status=expected_status,
            upload=UploadPart(field_name=field_name, data=data, file=file),
        )
