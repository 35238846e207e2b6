"""
pz_core.utils
-------------
Small byte helpers shared by key import, key-set validation and logging.
"""

from __future__ import annotations
import hashlib


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def int_to_bytes(value: int, length: int) -> bytes:
    # Big-endian, left padded to the field length
    return value.to_bytes(length, "big")


def int_from_bytes(data: bytes) -> int:
    return int.from_bytes(data, "big")


def short_hex(data: bytes, n: int = 8) -> str:
    return data[:n].hex()
