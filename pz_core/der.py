"""
pz_core.der
-----------
ASN.1 schemas for protection-zone structures and a DER parse/encode pair.

parse() never raises: any structural defect, trailing data or failed model
mapping surfaces as None. Models provide asn1_spec(), from_asn1() and to_asn1().
"""

from __future__ import annotations
from typing import Optional, Type, TypeVar
from pyasn1.codec.der import decoder, encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import char, namedtype, tag, univ
from .errors import DecodeError
from .logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class PublicKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("key", univ.OctetString()),
        namedtype.OptionalNamedType("service", univ.Integer()),
    )


class EncryptedKey(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("masterKey", PublicKeyInfo()),
        namedtype.NamedType("wrappedKey", univ.OctetString()),
    )


class EncryptedKeySet(univ.SequenceOf):
    componentType = EncryptedKey()


class EncryptedKeys(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("encryptedKeySet", EncryptedKeySet()),
    )


class ProtectionInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("encryptedKeys", EncryptedKeys()),
        namedtype.OptionalNamedType("data", univ.OctetString()),
    )


class NOS(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("key", univ.OctetString()),
        namedtype.OptionalNamedType("service", univ.Integer()),
    )


class NOSSet(univ.SequenceOf):
    componentType = NOS()


class ProtectionObject(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.OptionalNamedType(
            "masterKeySet",
            NOSSet().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatConstructed, 1)),
        ),
    )


class PrivateKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("privateKey", univ.OctetString()),
        namedtype.OptionalNamedType(
            "publicKey",
            univ.OctetString().subtype(implicitTag=tag.Tag(tag.tagClassContext, tag.tagFormatSimple, 0)),
        ),
    )


class ServiceKeyID(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("service", univ.Integer()),
        namedtype.NamedType("keyID", univ.OctetString()),
    )


class KeySet(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("name", char.UTF8String()),
        namedtype.NamedType("keys", univ.SequenceOf(componentType=PrivateKeyInfo())),
        namedtype.NamedType("serviceKeyIDs", univ.SequenceOf(componentType=ServiceKeyID())),
        namedtype.NamedType("checksum", univ.OctetString()),
    )


class WrappedKey(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("ephemeralKey", univ.OctetString()),
        namedtype.NamedType("wrappedKey", univ.OctetString()),
    )


def optional(asn1, name):
    """Component value, or None when an OPTIONAL component is absent."""
    value = asn1.getComponentByName(name, instantiate=False)
    if value is univ.noValue or not value.isValue:
        return None
    return value


def sequence_of(asn1, name):
    """Instantiate a SEQUENCE OF component as an empty value, ready for append()."""
    component = asn1[name]
    component.clear()
    return component


def decode(data: bytes, spec):
    try:
        asn1, rest = decoder.decode(data, asn1Spec=spec)
    except PyAsn1Error as exc:
        raise DecodeError(f"{type(spec).__name__}: {exc}") from exc
    if rest:
        raise DecodeError(f"{type(spec).__name__}: {len(rest)} trailing bytes")
    return asn1


def parse(data: bytes, target: Type[T]) -> Optional[T]:
    try:
        asn1 = decode(data, target.asn1_spec())
        return target.from_asn1(asn1)
    except DecodeError as exc:
        logger.debug("-- parse() - %s", exc)
    except (PyAsn1Error, ValueError, TypeError) as exc:
        logger.debug("-- parse() - %s: %s", target.__name__, exc)
    return None


def encode(obj) -> bytes:
    return encoder.encode(obj.to_asn1())
