import logging
import threading

from collections.abc import Callable


logger = logging.getLogger(__name__)

StatusListener = Callable[[], None]


class StatusListenerRegistry:
    """Maps HTTP status codes to listeners that fire whenever a request completes with that code.

    One registry is meant to be created by the application and shared by every
    client that should report to it. Registration and emission are safe to call
    from any thread, and a listener may itself register further listeners while
    being notified.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[int, dict[StatusListener, None]] = {}

    def add_listener(self, status_code: int, listener: StatusListener) -> None:
        if listener is None:
            raise ValueError("A status listener must not be None.")

        with self._lock:
            self._listeners.setdefault(status_code, {})[listener] = None

    def listeners(self, status_code: int) -> list[StatusListener]:
        with self._lock:
            return list(self._listeners.get(status_code, ()))

    def emit(self, status_code: int) -> None:
        listeners = self.listeners(status_code)
        if not listeners:
            return

        logger.debug("Notifying %d listener(s) of HTTP status %d", len(listeners), status_code)
        for listener in listeners:
            try:
                listener()
            except Exception:
                # A broken listener must not abort the request that triggered it.
                logger.exception("Listener %r for HTTP status %d failed", listener, status_code)
