"""RSA public keys: fingerprints and PEM reading and writing."""

from __future__ import annotations

import base64
import binascii
import hashlib
import io
import os
import re
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .tl.cursor import Encoder

_PEM_BLOCK = re.compile(
    rb"-----BEGIN ([^\r\n-]+)-----\r?\n(.*?)-----END \1-----",
    re.DOTALL,
)


def _public_numbers(key: Any) -> rsa.RSAPublicNumbers:
    if key is None:
        raise ValueError("key can't be None")
    if isinstance(key, rsa.RSAPublicNumbers):
        return key
    if isinstance(key, rsa.RSAPublicKey):
        return key.public_numbers()
    raise TypeError(f"not an RSA public key: {type(key).__name__}")


def _int_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def rsa_fingerprint(key: Any) -> bytes:
    """Return the 8-byte fingerprint of an RSA public key."""
    numbers = _public_numbers(key)
    buf = io.BytesIO()
    encoder = Encoder(buf)
    encoder.put_message(_int_bytes(numbers.n))
    encoder.put_message(_int_bytes(numbers.e))
    return hashlib.sha1(buf.getvalue()).digest()[12:]


def _der_to_rsa(der: bytes) -> rsa.RSAPublicKey:
    key = serialization.load_der_public_key(der)
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError(f"not an RSA key: {type(key).__name__}")
    return key


def _pem_blocks(data: bytes):
    for match in _PEM_BLOCK.finditer(data):
        lines = [line for line in match.group(2).splitlines() if b":" not in line]
        try:
            yield base64.b64decode(b"".join(lines), validate=True)
        except (binascii.Error, ValueError):
            continue


def read_from_file(path: str | os.PathLike[str]) -> list[rsa.RSAPublicKey]:
    """Read every PEM-encoded RSA public key in a file, in order."""
    path = os.fspath(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"file not found: {path}")
    with open(path, "rb") as f:
        data = f.read()

    keys: list[rsa.RSAPublicKey] = []
    for der in _pem_blocks(data):
        try:
            keys.append(_der_to_rsa(der))
        except (ValueError, TypeError) as exc:
            raise ValueError(f"decoding key #{len(keys) + 1}: {exc}") from exc
    return keys


def save_rsa_key(key: Any) -> str:
    """Return the key as a PEM ``RSA PUBLIC KEY`` block."""
    numbers = _public_numbers(key)
    return (
        numbers.public_key()
        .public_bytes(serialization.Encoding.PEM, serialization.PublicFormat.PKCS1)
        .decode("ascii")
    )