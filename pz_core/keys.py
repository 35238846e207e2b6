"""
pz_core.keys
------------
Key identity and key containers.

A KeyID is the SHA-256 digest of a public key's canonical encoding:
the big-endian X coordinate when compact keys are in use, otherwise the
X9.62 uncompressed point. Keys are bound to their KeyID once at import
time and never mutated.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Generic, Iterable, Mapping, TypeVar
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from .utils import sha256, int_to_bytes, short_hex

T = TypeVar("T")


@dataclass(frozen=True)
class KeyID:
    value: bytes

    @classmethod
    def of(cls, public_key_data: bytes) -> "KeyID":
        return cls(sha256(public_key_data))

    def hex(self) -> str:
        return self.value.hex()

    def __str__(self) -> str:
        return f"KeyID({short_hex(self.value)})"


@dataclass(frozen=True)
class Key(Generic[T]):
    key_id: KeyID
    key_data: T = field(compare=False)  # identity is the KeyID

    def __str__(self) -> str:
        return f"Key({self.key_id}, {type(self.key_data).__name__})"


def export_public_key(public_key: ec.EllipticCurvePublicKey, use_compact_keys: bool) -> bytes:
    if use_compact_keys:
        length = (public_key.curve.key_size + 7) // 8
        return int_to_bytes(public_key.public_numbers().x, length)
    return public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )


def key_id(public_key: ec.EllipticCurvePublicKey, use_compact_keys: bool) -> KeyID:
    return KeyID.of(export_public_key(public_key, use_compact_keys))


def private_scalar(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    length = (private_key.curve.key_size + 7) // 8
    return int_to_bytes(private_key.private_numbers().private_value, length)


def keyring(keys: Iterable[Key[ec.EllipticCurvePrivateKey]]) -> Mapping[KeyID, Key[ec.EllipticCurvePrivateKey]]:
    """Read-only keyring view keyed by KeyID. Later duplicates replace earlier ones."""
    return MappingProxyType({key.key_id: key for key in keys})
