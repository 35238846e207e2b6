"""
pz_core.imports
---------------
Import EC public and private keys from raw protection-zone encodings.

Public keys arrive as X9.62 uncompressed (04||X||Y), X9.62 compressed
(02/03||X) or, when compact keys are enabled, the bare X coordinate with
y taken as min(y, p - y). The curve is chosen from the field length.

Both importers return None on failure; the reason is logged at DEBUG.
"""

from __future__ import annotations
from typing import Optional
from cryptography.hazmat.primitives.asymmetric import ec
from .curves import CURVES, CurveResolver, curve, field_prime
from .errors import KeyImportError
from .keys import Key, key_id
from .logger import get_logger
from .utils import int_from_bytes

logger = get_logger(__name__)

UNCOMPRESSED = b"\x04"
COMPRESSED = (b"\x02", b"\x03")


def _curve(name: str) -> ec.EllipticCurve:
    # The resolver is caller supplied and may name curves this module cannot load
    if name not in CURVES:
        raise KeyImportError(f"unsupported curve: {name}")
    return curve(name)


def _from_point(name: str, data: bytes) -> ec.EllipticCurvePublicKey:
    curve_ = _curve(name)
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(curve_, data)
    except ValueError as exc:
        raise KeyImportError(f"invalid {name} point: {exc}") from exc


def _from_compact(name: str, x: bytes) -> ec.EllipticCurvePublicKey:
    public_key = _from_point(name, COMPRESSED[0] + x)
    y = public_key.public_numbers().y
    p = field_prime(name)
    if y > p - y:
        # p is odd so p - y has the other parity
        public_key = _from_point(name, COMPRESSED[1] + x)
    return public_key


def decode_public_key(data: bytes, curve_resolver: CurveResolver, use_compact_keys: bool) -> ec.EllipticCurvePublicKey:
    length = len(data)
    prefix = data[:1]

    if prefix == UNCOMPRESSED and length % 2 == 1:
        name = curve_resolver((length - 1) // 2)
        if name:
            return _from_point(name, data)

    if prefix in COMPRESSED:
        name = curve_resolver(length - 1)
        if name:
            return _from_point(name, data)

    if use_compact_keys:
        name = curve_resolver(length)
        if name:
            return _from_compact(name, data)

    raise KeyImportError(f"unresolved public key encoding, length: {length}")


def import_public_key(
    data: bytes,
    curve_resolver: CurveResolver,
    use_compact_keys: bool,
) -> Optional[Key[ec.EllipticCurvePublicKey]]:
    try:
        public_key = decode_public_key(data, curve_resolver, use_compact_keys)
    except KeyImportError as exc:
        logger.debug("-- import_public_key() - %s", exc)
        return None
    return Key(key_id(public_key, use_compact_keys), public_key)


def decode_private_key(scalar: bytes, curve_resolver: CurveResolver) -> ec.EllipticCurvePrivateKey:
    name = curve_resolver(len(scalar))
    if not name:
        raise KeyImportError(f"unresolved private key length: {len(scalar)}")
    curve_ = _curve(name)
    try:
        return ec.derive_private_key(int_from_bytes(scalar), curve_)
    except ValueError as exc:
        raise KeyImportError(f"invalid {name} scalar: {exc}") from exc


def import_private_key(
    scalar: bytes,
    curve_resolver: CurveResolver,
    use_compact_keys: bool,
) -> Optional[Key[ec.EllipticCurvePrivateKey]]:
    try:
        private_key = decode_private_key(scalar, curve_resolver)
    except KeyImportError as exc:
        logger.debug("-- import_private_key() - %s", exc)
        return None
    return Key(key_id(private_key.public_key(), use_compact_keys), private_key)
