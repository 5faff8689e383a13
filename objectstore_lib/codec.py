"""Per-collection value codecs.

A codec is a pair of functions: `encode` turns a value into the bytes
written to disk and `decode` turns those bytes back into a value. The
store only calls them. Any exception `decode` raises for the stored bytes
is reported by the store as `CorruptJson`; the codecs here raise
`ValueError` for payloads they cannot turn into a value.
"""
from __future__ import annotations
import base64
import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Type, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Codec(Generic[T]):
    encode: Callable[[T], bytes]
    decode: Callable[[bytes], T]


def json_codec(*, indent: Optional[int] = None, sort_keys: bool = False) -> Codec[Any]:
    """Codec for plain JSON-serializable values. Caller must ensure values are JSON-serializable."""

    def encode(value: Any) -> bytes:
        return json.dumps(value, indent=indent, sort_keys=sort_keys).encode("utf-8")

    def decode(data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))

    return Codec(encode, decode)


def model_codec(model: Type[T]) -> Codec[T]:
    """Codec for pydantic models, or any type pydantic can validate.

    `BaseModel` subclasses use their own `model_dump_json` /
    `model_validate_json`; other types go through a `TypeAdapter`.
    Validation errors are `ValueError` subclasses.
    """
    from pydantic import BaseModel, TypeAdapter

    try:
        is_model = issubclass(model, BaseModel)
    except TypeError:
        # parametrized generics such as list[int] are not classes
        is_model = False

    if is_model:
        return Codec(
            lambda value: value.model_dump_json().encode("utf-8"),
            lambda data: model.model_validate_json(data),
        )

    adapter = TypeAdapter(model)
    return Codec(adapter.dump_json, adapter.validate_json)


class _FernetCodec:
    """Encrypts the inner codec's payload with Fernet (AES-CBC + HMAC).

    The on-disk frame is a small JSON document carrying a version, the mode
    and, in password mode, the salt and PBKDF2 parameters needed to derive
    the key on decode. Key rotation is out of scope; one key per codec.
    """

    def __init__(self, inner: Codec, *, key: bytes | None, password: str | None, iterations: int) -> None:
        if key is None and password is None:
            raise ValueError("encrypted codec requires either `key` or `password`")
        self.inner = inner
        self._key = key
        self._password = password
        self._iterations = iterations

    def _derive_key(self, password: str, salt: bytes, iterations: int) -> bytes:
        from cryptography.hazmat.primitives import hashes
        from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )
        return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))

    def encode(self, value: Any) -> bytes:
        from cryptography.fernet import Fernet

        plain = self.inner.encode(value)
        if self._password is not None:
            salt = os.urandom(16)
            key = self._derive_key(self._password, salt, self._iterations)
            frame = {
                "v": 1,
                "mode": "password",
                "kdf": "pbkdf2",
                "iterations": self._iterations,
                "salt": base64.urlsafe_b64encode(salt).decode("ascii"),
                "ct": base64.urlsafe_b64encode(Fernet(key).encrypt(plain)).decode("ascii"),
            }
        else:
            ct = Fernet(self._key).encrypt(plain)
            frame = {"v": 1, "mode": "key", "ct": base64.urlsafe_b64encode(ct).decode("ascii")}
        return json.dumps(frame).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        from cryptography.fernet import Fernet, InvalidToken

        frame = json.loads(data.decode("utf-8"))
        if not isinstance(frame, dict) or not isinstance(frame.get("ct"), str):
            raise ValueError("unknown frame format")
        mode = frame.get("mode")
        if mode == "password":
            if self._password is None:
                raise ValueError("codec was not configured with a password")
            salt, iterations = frame.get("salt"), frame.get("iterations", self._iterations)
            if not isinstance(salt, str) or not isinstance(iterations, int) or iterations < 1:
                raise ValueError("malformed password frame")
            key = self._derive_key(self._password, base64.urlsafe_b64decode(salt.encode("ascii")), iterations)
        elif mode == "key":
            if self._key is None:
                raise ValueError("codec was not configured with a key")
            key = self._key
        else:
            raise ValueError("unknown frame format")

        ct = base64.urlsafe_b64decode(frame["ct"].encode("ascii"))
        try:
            plain = Fernet(key).decrypt(ct)
        except InvalidToken as e:
            raise ValueError("payload failed authentication") from e
        return self.inner.decode(plain)


def encrypted_codec(
    inner: Codec[T] | None = None,
    *,
    key: bytes | None = None,
    password: str | None = None,
    iterations: int = 390000,
) -> Codec[T]:
    """Wrap `inner` (JSON by default) so objects are stored encrypted.

    Provide either a Fernet `key` (see `cryptography.fernet.Fernet.generate_key`)
    or a `password`, from which a key is derived per object with a random salt.
    """
    fernet = _FernetCodec(inner or json_codec(), key=key, password=password, iterations=iterations)
    return Codec(fernet.encode, fernet.decode)
