"""Number theory used while creating an auth key."""

from __future__ import annotations

import math
import random
import secrets
from typing import Any

from cryptography.hazmat.primitives.asymmetric import rsa

RSA_BLOCK_SIZE = 255
RSA_RESULT_SIZE = 256


def _public_numbers(key: Any) -> rsa.RSAPublicNumbers:
    if isinstance(key, rsa.RSAPublicNumbers):
        return key
    if isinstance(key, rsa.RSAPublicKey):
        return key.public_numbers()
    raise TypeError(f"not an RSA public key: {type(key).__name__}")


def do_rsa_encrypt(block: bytes, key: Any) -> bytes:
    """Raise a 255-byte block to the key's exponent and return 256 bytes.

    The result's minimal big-endian bytes are placed at the start of the
    output and the rest is filled with zeros.
    """
    block = bytes(block)
    if len(block) != RSA_BLOCK_SIZE:
        raise ValueError("block size isn't equal 255 bytes")
    numbers = _public_numbers(key)
    c = pow(int.from_bytes(block, "big"), numbers.e, numbers.n)
    raw = c.to_bytes((c.bit_length() + 7) // 8, "big")[:RSA_RESULT_SIZE]
    return raw + bytes(RSA_RESULT_SIZE - len(raw))


def split_pq(pq: int) -> tuple[int, int]:
    """Split a product of two primes into its factors, smaller one first."""
    what = int(pq)
    if what < 4:
        raise ValueError(f"can't split {what}")
    rnd = random.Random()
    g = 0
    i = 0
    while not 1 < g < what:
        q = ((rnd.getrandbits(64) & 15) + 17) % what
        x = rnd.getrandbits(64) % (what - 1) + 1
        y = x
        lim = 1 << (i + 18)
        j = 1
        while j < lim:
            x = (x * x + q) % what
            g = math.gcd(x - y, what)
            if j & (j - 1) == 0:
                y = x
            j += 1
            if g != 1:
                break
        i += 1

    p1, p2 = g, what // g
    return (p1, p2) if p1 <= p2 else (p2, p1)


def make_gab(g: int, g_a: int, dh_prime: int) -> tuple[int, int, int]:
    """Pick a secret b and return (b, g**b mod p, g_a**b mod p)."""
    b = secrets.randbelow(1 << 2048)
    g_b = pow(g, b, dh_prime)
    g_ab = pow(g_a, b, dh_prime)
    return b, g_b, g_ab


def xor(dst: bytes, src: bytes) -> bytes:
    """Return ``dst`` xored byte by byte with the start of ``src``."""
    if len(src) < len(dst):
        raise ValueError(f"source is shorter than destination: {len(src)} < {len(dst)}")
    return bytes(a ^ b for a, b in zip(dst, src))