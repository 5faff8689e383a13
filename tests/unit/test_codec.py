import json

import pytest
from cryptography.fernet import Fernet
from pydantic import BaseModel

from objectstore_lib.codec import Codec, encrypted_codec, json_codec, model_codec


class Person(BaseModel):
    name: str
    age: int


def test_json_codec_round_trip():
    c = json_codec()
    value = {"a": [1, 2, {"b": None}], "c": "é"}
    data = c.encode(value)
    assert isinstance(data, bytes)
    assert c.decode(data) == value


def test_json_codec_rejects_garbage_with_value_error():
    c = json_codec()
    with pytest.raises(ValueError):
        c.decode(b"{not json")
    with pytest.raises(ValueError):
        c.decode(b"\xff\xfe")


def test_model_codec_for_base_model():
    c = model_codec(Person)
    data = c.encode(Person(name="Ada", age=36))
    assert json.loads(data) == {"name": "Ada", "age": 36}
    assert c.decode(data) == Person(name="Ada", age=36)
    with pytest.raises(ValueError):
        c.decode(b'{"name": "Ada"}')


def test_model_codec_for_plain_types():
    c = model_codec(list[int])
    assert c.decode(c.encode([1, 2, 3])) == [1, 2, 3]
    with pytest.raises(ValueError):
        c.decode(b'["x"]')


def test_encrypted_codec_with_key():
    key = Fernet.generate_key()
    c = encrypted_codec(key=key)
    data = c.encode({"secret": 1})
    assert b"secret" not in data
    frame = json.loads(data)
    assert frame["mode"] == "key"
    assert c.decode(data) == {"secret": 1}


def test_encrypted_codec_with_password():
    c = encrypted_codec(password="pw", iterations=1000)
    data = c.encode(["x"])
    assert json.loads(data)["mode"] == "password"
    assert c.decode(data) == ["x"]


def test_encrypted_codec_wrong_key_is_decode_error():
    data = encrypted_codec(key=Fernet.generate_key()).encode({"a": 1})
    with pytest.raises(ValueError):
        encrypted_codec(key=Fernet.generate_key()).decode(data)
    with pytest.raises(ValueError):
        encrypted_codec(password="pw").decode(data)


def test_encrypted_codec_requires_key_or_password():
    with pytest.raises(ValueError):
        encrypted_codec()


def test_encrypted_codec_wraps_model_codec():
    c = encrypted_codec(model_codec(Person), key=Fernet.generate_key())
    assert c.decode(c.encode(Person(name="Bo", age=3))) == Person(name="Bo", age=3)


def test_codec_is_plain_function_pair():
    c = Codec(lambda v: v.encode("ascii"), lambda b: b.decode("ascii"))
    assert c.decode(c.encode("hi")) == "hi"


@pytest.mark.parametrize(
    "frame",
    [
        b'{"mode": "key", "ct": 5}',
        b'{"mode": "key"}',
        b'{"mode": "password", "ct": "AAAA", "salt": 7}',
        b'{"mode": "password", "ct": "AAAA", "salt": "AAAA", "iterations": "many"}',
        b'["mode", "key"]',
    ],
)
def test_encrypted_codec_malformed_frames_are_value_errors(frame):
    with pytest.raises(ValueError):
        encrypted_codec(key=Fernet.generate_key()).decode(frame)
    with pytest.raises(ValueError):
        encrypted_codec(password="pw", iterations=1000).decode(frame)
