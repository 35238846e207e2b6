"""
pz_core.models
--------------
Immutable records decoded from protection-zone DER structures.

Each record maps to and from its ASN.1 schema in pz_core.der and is
decoded with der.parse(data, Record), which yields None on any defect.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
from . import der


def _service(asn1) -> Optional[int]:
    value = der.optional(asn1, "service")
    return None if value is None else int(value)


@dataclass(frozen=True)
class EncryptedKeyRecord:
    """A wrapped master key plus the recipient's embedded EC public key bytes."""
    public_key: bytes
    wrapped_key: bytes
    service: Optional[int] = None

    @staticmethod
    def asn1_spec():
        return der.EncryptedKey()

    @classmethod
    def from_asn1(cls, asn1) -> "EncryptedKeyRecord":
        master_key = asn1["masterKey"]
        return cls(
            public_key=master_key["key"].asOctets(),
            wrapped_key=asn1["wrappedKey"].asOctets(),
            service=_service(master_key),
        )

    def to_asn1(self):
        asn1 = der.EncryptedKey()
        asn1["masterKey"]["key"] = self.public_key
        if self.service is not None:
            asn1["masterKey"]["service"] = self.service
        asn1["wrappedKey"] = self.wrapped_key
        return asn1

    def __str__(self) -> str:
        return f"EncryptedKeyRecord(public_key={self.public_key[:8].hex()}.., wrapped={len(self.wrapped_key)}B)"


@dataclass(frozen=True)
class ProtectionInfo:
    encrypted_keys: Tuple[EncryptedKeyRecord, ...] = ()
    data: Optional[bytes] = None  # AEAD blob

    @staticmethod
    def asn1_spec():
        return der.ProtectionInfo()

    @classmethod
    def from_asn1(cls, asn1) -> "ProtectionInfo":
        data = der.optional(asn1, "data")
        return cls(
            encrypted_keys=tuple(
                EncryptedKeyRecord.from_asn1(ek) for ek in asn1["encryptedKeys"]["encryptedKeySet"]
            ),
            data=None if data is None else data.asOctets(),
        )

    def to_asn1(self):
        asn1 = der.ProtectionInfo()
        key_set = der.sequence_of(asn1["encryptedKeys"], "encryptedKeySet")
        for record in self.encrypted_keys:
            key_set.append(record.to_asn1())
        if self.data is not None:
            asn1["data"] = self.data
        return asn1


@dataclass(frozen=True)
class NOS:
    """Opaque nested entry carrying a DER encoded KeySet."""
    key: bytes
    service: Optional[int] = None

    @staticmethod
    def asn1_spec():
        return der.NOS()

    @classmethod
    def from_asn1(cls, asn1) -> "NOS":
        return cls(key=asn1["key"].asOctets(), service=_service(asn1))

    def to_asn1(self):
        asn1 = der.NOS()
        asn1["key"] = self.key
        if self.service is not None:
            asn1["service"] = self.service
        return asn1


@dataclass(frozen=True)
class ProtectionObject:
    master_key_set: Optional[Tuple[NOS, ...]] = None

    @staticmethod
    def asn1_spec():
        return der.ProtectionObject()

    @classmethod
    def from_asn1(cls, asn1) -> "ProtectionObject":
        master_key_set = der.optional(asn1, "masterKeySet")
        if master_key_set is None:
            return cls()
        return cls(master_key_set=tuple(NOS.from_asn1(nos) for nos in master_key_set))

    def to_asn1(self):
        asn1 = der.ProtectionObject()
        if self.master_key_set is not None:
            master_key_set = der.sequence_of(asn1, "masterKeySet")
            for nos in self.master_key_set:
                master_key_set.append(nos.to_asn1())
        return asn1


@dataclass(frozen=True)
class PrivateKeyInfo:
    private_key: bytes  # big-endian scalar
    public_key: Optional[bytes] = None

    @classmethod
    def from_asn1(cls, asn1) -> "PrivateKeyInfo":
        public_key = der.optional(asn1, "publicKey")
        return cls(
            private_key=asn1["privateKey"].asOctets(),
            public_key=None if public_key is None else public_key.asOctets(),
        )

    def to_asn1(self):
        asn1 = der.PrivateKeyInfo()
        asn1["privateKey"] = self.private_key
        if self.public_key is not None:
            asn1["publicKey"] = self.public_key
        return asn1


@dataclass(frozen=True)
class ServiceKeyID:
    service: int
    key_id: bytes

    @classmethod
    def from_asn1(cls, asn1) -> "ServiceKeyID":
        return cls(service=int(asn1["service"]), key_id=asn1["keyID"].asOctets())

    def to_asn1(self):
        asn1 = der.ServiceKeyID()
        asn1["service"] = self.service
        asn1["keyID"] = self.key_id
        return asn1


@dataclass(frozen=True)
class KeySet:
    name: str
    keys: Tuple[PrivateKeyInfo, ...]
    service_key_ids: Tuple[ServiceKeyID, ...]
    checksum: bytes

    @staticmethod
    def asn1_spec():
        return der.KeySet()

    @classmethod
    def from_asn1(cls, asn1) -> "KeySet":
        return cls(
            name=str(asn1["name"]),
            keys=tuple(PrivateKeyInfo.from_asn1(k) for k in asn1["keys"]),
            service_key_ids=tuple(ServiceKeyID.from_asn1(s) for s in asn1["serviceKeyIDs"]),
            checksum=asn1["checksum"].asOctets(),
        )

    def to_asn1(self):
        asn1 = der.KeySet()
        asn1["name"] = self.name
        keys = der.sequence_of(asn1, "keys")
        for key in self.keys:
            keys.append(key.to_asn1())
        service_key_ids = der.sequence_of(asn1, "serviceKeyIDs")
        for service_key_id in self.service_key_ids:
            service_key_ids.append(service_key_id.to_asn1())
        asn1["checksum"] = self.checksum
        return asn1


def parse_protection_info(data: bytes) -> Optional[ProtectionInfo]:
    return der.parse(data, ProtectionInfo)
