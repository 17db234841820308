# src/taskpad/auth/codec.py

from __future__ import annotations

import base64

import bcrypt

from ..config import CODEC_BCRYPT

_BCRYPT_MAX_BYTES = 72


def _secret(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class Base64Codec:
    """
    Reversible demo encoding (what the browser mock stored).

    Not a hash: anyone holding the store can read the passwords back.
    Kept as the default so stores written by the demo keep working.
    """

    name = "base64"

    def encode(self, plaintext: str) -> str:
        return base64.b64encode(plaintext.encode("utf-8")).decode("ascii")

    def matches(self, plaintext: str, encoded: str) -> bool:
        return self.encode(plaintext) == encoded


class BcryptCodec:
    """
    Salted one-way hash; the same password encodes differently every time.

    bcrypt only looks at the first 72 bytes of a secret, so longer inputs are
    cut there explicitly (newer bcrypt releases refuse them otherwise).
    """

    name = "bcrypt"

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def encode(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_secret(plaintext), salt).decode("ascii")

    def matches(self, plaintext: str, encoded: str) -> bool:
        try:
            return bcrypt.checkpw(_secret(plaintext), encoded.encode("ascii"))
        except (ValueError, UnicodeError):
            # Not a bcrypt hash (e.g. a record written by Base64Codec).
            return False


def make_codec(name: str) -> Base64Codec | BcryptCodec:
    if (name or "").strip().lower() == CODEC_BCRYPT:
        return BcryptCodec()
    return Base64Codec()
