import logging

from collections.abc import Callable
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from .errors import DecodeError
from .request import Outcome


logger = logging.getLogger(__name__)

T = TypeVar("T")
V = TypeVar("V")

Callback = Callable[[bool, V | None], None]


class JsonDecoder(Generic[T]):
    """Turns response text into the client's target shape, or a list of it.

    The shape can be anything pydantic validates: models, dataclasses,
    TypedDicts or plain builtins. The list form is validated against an
    explicit ``list[shape]`` adapter.
    """

    def __init__(self, shape: type[T]):
        self.shape = shape
        self._one: TypeAdapter[T] = TypeAdapter(shape)
        self._many: TypeAdapter[list[T]] = TypeAdapter(list[shape])

    def decode_one(self, text: str) -> T:
        if not text.strip():
            raise DecodeError(f"Empty response body cannot be decoded into {self._shape_name}.")
        return self._validate(self._one, text)

    def decode_many(self, text: str) -> list[T]:
        if not text.strip():
            return []
        return self._validate(self._many, text)

    def complete_one(self, raw: Outcome[str], callback: Callback[T] | None = None) -> Outcome[T]:
        return self._complete(raw, self.decode_one, callback)

    def complete_many(self, raw: Outcome[str], callback: Callback[list[T]] | None = None) -> Outcome[list[T]]:
        return self._complete(raw, self.decode_many, callback)

    @property
    def _shape_name(self) -> str:
        return getattr(self.shape, "__name__", repr(self.shape))

    def _validate(self, adapter: TypeAdapter[V], text: str) -> V:
        try:
            return adapter.validate_json(text)
        except ValidationError as e:
            raise DecodeError(f"Response does not match {self._shape_name}: {e}") from e

    def _complete(self, raw: Outcome[str], decode: Callable[[str], V], callback: Callback[V] | None) -> Outcome[V]:
        if not raw.success:
            outcome = Outcome.failed(raw.error, raw.status_code)
        else:
            try:
                outcome = Outcome(success=True, value=decode(raw.value or ""), status_code=raw.status_code)
            except DecodeError as e:
                logger.warning("%s", e)
                outcome = Outcome.failed(e, raw.status_code)

        if callback is not None:
            callback(outcome.success, outcome.value)
        return outcome
