import logging

from collections.abc import Callable
from concurrent.futures import Executor, Future
from typing import TypeVar

from .config import ClientConfig
from .connection import TransportConnection
from .errors import JsonHttpError, StatusMismatchError
from .request import Outcome, Request
from .response_reader import ResponseReader
from .status_listeners import StatusListenerRegistry


logger = logging.getLogger(__name__)

R = TypeVar("R")


class RequestExecutor:
    """Runs one request/response cycle per submitted Request on a background executor."""

    def __init__(self, registry: StatusListenerRegistry, pool: Executor, config: ClientConfig | None = None):
        self._registry = registry
        self._pool = pool
        self._config = config or ClientConfig()
        self._reader = ResponseReader(charset=self._config.charset, debug=self._config.debug)

    def submit(self, request: Request, on_done: Callable[[Outcome[str]], R]) -> "Future[R]":
        request.validate()
        return self._pool.submit(self._run, request, on_done)

    def _run(self, request: Request, on_done: Callable[[Outcome[str]], R]) -> R:
        return on_done(self.execute(request))

    def execute(self, request: Request) -> Outcome[str]:
        """Performs the request on the calling thread and reports the raw text."""
        try:
            with TransportConnection(request, self._config) as connection:
                response = self._reader.read(connection)
                self._registry.emit(response.status_code)
        except JsonHttpError as e:
            logger.warning("%s %s failed: %s", request.method.value, request.url, e)
            return Outcome.failed(e)

        if response.status_code != request.expected_status:
            error = StatusMismatchError(request.expected_status, response.status_code)
            logger.warning("%s %s: %s", request.method.value, request.url, error)
            return Outcome.failed(error, response.status_code)

        return Outcome(success=True, value=response.text, status_code=response.status_code)
