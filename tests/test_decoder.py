from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from jsonhttp.decoder import JsonDecoder
from jsonhttp.errors import DecodeError, StatusMismatchError
from jsonhttp.request import Outcome


class Item(BaseModel):
    id: int
    name: str


@dataclass
class Point:
    x: int
    y: int


def test_decode_one_into_model():
    decoder = JsonDecoder(Item)
    assert decoder.decode_one('{"id":7,"name":"x"}\n') == Item(id=7, name="x")


def test_decode_one_ignores_unknown_fields():
    decoder = JsonDecoder(Item)
    assert decoder.decode_one('{"id":1,"name":"a","extra":true}') == Item(id=1, name="a")


def test_decode_many_preserves_order():
    decoder = JsonDecoder(Point)
    result = decoder.decode_many('[{"x":1,"y":2},{"x":3,"y":4}]')
    assert result == [Point(1, 2), Point(3, 4)]


def test_decode_many_into_builtin_shape():
    decoder = JsonDecoder(int)
    assert decoder.decode_many("[3, 1, 2]") == [3, 1, 2]


def test_decode_one_empty_text_is_an_error():
    decoder = JsonDecoder(Item)
    with pytest.raises(DecodeError, match="Empty response body"):
        decoder.decode_one("")


def test_decode_many_empty_text_is_an_empty_list():
    decoder = JsonDecoder(Item)
    assert decoder.decode_many("") == []
    assert decoder.decode_many("\n") == []


@pytest.mark.parametrize("text", ["{not json", '{"id":"seven","name":"x"}', "[1, 2]"])
def test_decode_one_rejects_bad_payloads(text):
    decoder = JsonDecoder(Item)
    with pytest.raises(DecodeError, match="Item"):
        decoder.decode_one(text)


def test_decode_many_rejects_an_object():
    decoder = JsonDecoder(Item)
    with pytest.raises(DecodeError):
        decoder.decode_many('{"id":7,"name":"x"}')


def test_complete_one_skips_decoding_on_failure():
    decoder = JsonDecoder(Item)
    calls = []
    error = StatusMismatchError(201, 200)

    outcome = decoder.complete_one(Outcome.failed(error, 200), lambda ok, value: calls.append((ok, value)))

    assert calls == [(False, None)]
    assert outcome.error is error
    assert outcome.status_code == 200


def test_complete_one_reports_decode_error_distinctly():
    decoder = JsonDecoder(Item)
    calls = []

    outcome = decoder.complete_one(Outcome(success=True, value="oops", status_code=200),
                                   lambda ok, value: calls.append((ok, value)))

    assert calls == [(False, None)]
    assert not outcome.success
    assert isinstance(outcome.error, DecodeError)


def test_complete_many_invokes_callback_once_with_list():
    decoder = JsonDecoder(Item)
    calls = []

    outcome = decoder.complete_many(Outcome(success=True, value='[{"id":1,"name":"a"}]', status_code=200),
                                    lambda ok, value: calls.append((ok, value)))

    assert calls == [(True, [Item(id=1, name="a")])]
    assert outcome.value == [Item(id=1, name="a")]


def test_complete_without_callback_still_returns_outcome():
    decoder = JsonDecoder(Item)
    outcome = decoder.complete_one(Outcome(success=True, value='{"id":2,"name":"b"}', status_code=200))
    assert outcome.success
    assert outcome.value == Item(id=2, name="b")
