"""
pz_core.curves
--------------
Named prime curves supported for protection-zone keys and the resolver that
maps an encoded field length (in bytes) to a curve name.
"""

from __future__ import annotations
from typing import Callable, Iterable, Optional
from cryptography.hazmat.primitives.asymmetric import ec
from .errors import ConfigError

CurveResolver = Callable[[int], Optional[str]]

# name -> (curve class, field prime p)
CURVES = {
    "secp256r1": (ec.SECP256R1, 2**256 - 2**224 + 2**192 + 2**96 - 1),
    "secp384r1": (ec.SECP384R1, 2**384 - 2**128 - 2**96 + 2**32 - 1),
    "secp521r1": (ec.SECP521R1, 2**521 - 1),
}

DEFAULT_CURVES = ("secp256r1", "secp384r1", "secp521r1")


def curve(name: str) -> ec.EllipticCurve:
    try:
        return CURVES[name][0]()
    except KeyError:
        raise ConfigError(f"Unknown curve: {name}") from None


def field_prime(name: str) -> int:
    return CURVES[name][1]


def field_length(name: str) -> int:
    return (curve(name).key_size + 7) // 8


def field_length_to_curve_name(names: Iterable[str] = DEFAULT_CURVES) -> CurveResolver:
    """
    Build a resolver from field length in bytes to curve name.

    When two configured curves share a field length the first one wins.
    """
    table = {}
    for name in names:
        table.setdefault(field_length(name), name)

    def resolve(length: int) -> Optional[str]:
        return table.get(length)

    return resolve
