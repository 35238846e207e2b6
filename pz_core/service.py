"""
pz_core.service
---------------
Validated service key sets.

A decoded KeySet is only trusted once ServiceKeySetBuilder has checked that
its keys import, that any embedded public keys match, that every service
reference points at a key in the set, and that the checksum covers exactly
those keys.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from cryptography.hazmat.primitives.asymmetric import ec
from .curves import CurveResolver
from .errors import KeySetValidationError
from .imports import import_private_key, import_public_key
from .keys import Key, KeyID, export_public_key, private_scalar
from .logger import get_logger
from .models import KeySet, PrivateKeyInfo, ServiceKeyID
from .utils import sha256

logger = get_logger(__name__)


def key_set_checksum(key_ids: Iterable[KeyID]) -> bytes:
    return sha256(b"".join(kid.value for kid in key_ids))


@dataclass(frozen=True)
class ServiceKeySet:
    name: str
    keys: Tuple[Key[ec.EllipticCurvePrivateKey], ...]
    services: Tuple[Tuple[int, KeyID], ...] = ()

    def key_for_service(self, service: int) -> Optional[Key[ec.EllipticCurvePrivateKey]]:
        kid = dict(self.services).get(service)
        return next((key for key in self.keys if key.key_id == kid), None)


class ServiceKeySetBuilder:
    def __init__(self, curve_resolver: CurveResolver, use_compact_keys: bool = True):
        self.curve_resolver = curve_resolver
        self.use_compact_keys = use_compact_keys

    def build(self, key_set: KeySet) -> Optional[ServiceKeySet]:
        try:
            return self.validate(key_set)
        except KeySetValidationError as exc:
            logger.debug("-- build() - key set %r rejected: %s", key_set.name, exc)
            return None

    def validate(self, key_set: KeySet) -> ServiceKeySet:
        if not key_set.keys:
            raise KeySetValidationError("no keys")

        keys: List[Key[ec.EllipticCurvePrivateKey]] = []
        for index, info in enumerate(key_set.keys):
            keys.append(self._key(index, info))

        key_ids = [key.key_id for key in keys]
        if len(set(key_ids)) != len(key_ids):
            raise KeySetValidationError("duplicate keys")

        services: Dict[int, KeyID] = {}
        for service_key_id in key_set.service_key_ids:
            kid = KeyID(service_key_id.key_id)
            if kid not in key_ids:
                raise KeySetValidationError(f"service {service_key_id.service} references unknown {kid}")
            services[service_key_id.service] = kid

        if key_set.checksum != key_set_checksum(key_ids):
            raise KeySetValidationError("checksum mismatch")

        return ServiceKeySet(name=key_set.name, keys=tuple(keys), services=tuple(services.items()))

    def _key(self, index: int, info: PrivateKeyInfo) -> Key[ec.EllipticCurvePrivateKey]:
        key = import_private_key(info.private_key, self.curve_resolver, self.use_compact_keys)
        if key is None:
            raise KeySetValidationError(f"key {index}: private key import failed")
        if info.public_key is not None:
            public_key = import_public_key(info.public_key, self.curve_resolver, self.use_compact_keys)
            if public_key is None:
                raise KeySetValidationError(f"key {index}: public key import failed")
            if public_key.key_id != key.key_id:
                raise KeySetValidationError(f"key {index}: public key does not match private key")
        return key


def make_key_set(
    name: str,
    keys: Iterable[Key[ec.EllipticCurvePrivateKey]],
    services: Optional[Mapping[int, KeyID]] = None,
    use_compact_keys: bool = True,
    include_public_keys: bool = True,
) -> KeySet:
    """Build a consistent KeySet (with checksum) ready for DER encoding."""
    keys = list(keys)
    infos = []
    for key in keys:
        public_key = None
        if include_public_keys:
            public_key = export_public_key(key.key_data.public_key(), use_compact_keys)
        infos.append(PrivateKeyInfo(private_scalar(key.key_data), public_key))
    return KeySet(
        name=name,
        keys=tuple(infos),
        service_key_ids=tuple(ServiceKeyID(s, kid.value) for s, kid in (services or {}).items()),
        checksum=key_set_checksum(key.key_id for key in keys),
    )
