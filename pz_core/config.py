"""
pz_core.config
--------------
Construction-time configuration for the protection-zone assistant.

A PZConfig is built once at startup (explicitly or via load_config) and
passed by reference to every ProtectionZoneAssistant.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import os
from .curves import CURVES, DEFAULT_CURVES, CurveResolver, field_length_to_curve_name
from .crypto import DEFAULT_KDF_INFO, DEFAULT_KEK_LENGTH, ECKeyUnwrap
from .errors import ConfigError

Unwrap = Callable[[bytes, bytes], bytes]


@dataclass(frozen=True)
class PZConfig:
    curve_resolver: CurveResolver
    unwrap: Unwrap
    use_compact_keys: bool = True


def _bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_config(config: dict | None = None) -> PZConfig:
    """
    Resolve assistant configuration from a dict, falling back to env vars:

        PZ_CURVES        comma separated curve names (default all supported)
        PZ_COMPACT_KEYS  1/0 (default 1)
        PZ_KDF_INFO      HKDF info prefix for key unwrap
        PZ_KEK_LENGTH    16, 24 or 32
    """
    config = config or {}

    curves = config.get("curves") or os.getenv("PZ_CURVES") or ",".join(DEFAULT_CURVES)
    if isinstance(curves, str):
        curves = [c.strip() for c in curves.split(",") if c.strip()]
    unknown = [c for c in curves if c not in CURVES]
    if unknown or not curves:
        raise ConfigError(f"Unknown curves: {unknown or curves}")

    compact = config.get("use_compact_keys")
    if compact is None:
        compact = os.getenv("PZ_COMPACT_KEYS", "1")

    info = config.get("kdf_info") or os.getenv("PZ_KDF_INFO") or DEFAULT_KDF_INFO
    if isinstance(info, str):
        info = info.encode("utf-8")

    raw_kek_length = config.get("kek_length") or os.getenv("PZ_KEK_LENGTH") or DEFAULT_KEK_LENGTH
    try:
        kek_length = int(raw_kek_length)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid KEK length: {raw_kek_length!r}") from None
    if kek_length not in (16, 24, 32):
        raise ConfigError(f"Unsupported KEK length: {kek_length}")

    resolver = field_length_to_curve_name(curves)
    return PZConfig(
        curve_resolver=resolver,
        unwrap=config.get("unwrap") or ECKeyUnwrap(resolver, info=info, kek_length=kek_length),
        use_compact_keys=_bool(compact),
    )
