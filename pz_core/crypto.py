"""
pz_core.crypto
--------------
Symmetric and key-agreement primitives for protection zones:

- ECDH + HKDF: key-encryption-key derivation from a recipient scalar
- AES-GCM: blob format nonce(12) || ciphertext || tag(16) for protection-info payloads
- ECKeyUnwrap / wrap_key: EC key agreement + HKDF + RFC 3394 AES key wrap

Failures surface as DecryptionError / KeyUnwrapError so callers can treat a
wrong key as a rejected candidate rather than a crash.
"""

from __future__ import annotations
from typing import Optional
import os
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, keywrap, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from pyasn1.codec.der import encoder
from pyasn1.error import PyAsn1Error
from . import der
from .curves import CurveResolver, field_length_to_curve_name
from .errors import DecodeError, DecryptionError, KeyImportError, KeyUnwrapError
from .imports import decode_public_key
from .utils import int_from_bytes

NONCE_LENGTH = 12
TAG_LENGTH = 16
DEFAULT_KDF_INFO = b"pz-unwrap-v1"
DEFAULT_KEK_LENGTH = 32


# --------- ECDH + HKDF ----------
def derive_key(
    private_key: ec.EllipticCurvePrivateKey,
    peer_public_key: ec.EllipticCurvePublicKey,
    info: bytes = DEFAULT_KDF_INFO,
    length: int = DEFAULT_KEK_LENGTH,
    salt: Optional[bytes] = None,
) -> bytes:
    shared = private_key.exchange(ec.ECDH(), peer_public_key)
    hkdf = HKDF(algorithm=hashes.SHA256(), length=length, salt=salt, info=info)
    return hkdf.derive(shared)


# --------- AES-GCM blobs ----------
def aead_encrypt(key: bytes, plaintext: bytes, aad: Optional[bytes] = None) -> bytes:
    aes = AESGCM(key)
    nonce = os.urandom(NONCE_LENGTH)
    return nonce + aes.encrypt(nonce, plaintext, aad)


def aead_decrypt(key: bytes, blob: bytes, aad: Optional[bytes] = None) -> bytes:
    if len(blob) < NONCE_LENGTH + TAG_LENGTH:
        raise DecryptionError(f"blob too short: {len(blob)} bytes")
    try:
        aes = AESGCM(key)
        return aes.decrypt(blob[:NONCE_LENGTH], blob[NONCE_LENGTH:], aad)
    except InvalidTag:
        raise DecryptionError("authentication tag mismatch") from None
    except (TypeError, ValueError) as exc:
        raise DecryptionError(f"invalid key or blob: {exc}") from exc


# --------- EC key wrap ----------
def _info(info: bytes, ephemeral_key: bytes) -> bytes:
    return info + ephemeral_key


def wrap_key(
    key: bytes,
    recipient: ec.EllipticCurvePublicKey,
    info: bytes = DEFAULT_KDF_INFO,
    kek_length: int = DEFAULT_KEK_LENGTH,
) -> bytes:
    """Wrap a master key for a recipient; returns a DER WrappedKey."""
    ephemeral = ec.generate_private_key(recipient.curve)
    ephemeral_key = ephemeral.public_key().public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )
    kek = derive_key(ephemeral, recipient, _info(info, ephemeral_key), kek_length)

    asn1 = der.WrappedKey()
    asn1["ephemeralKey"] = ephemeral_key
    asn1["wrappedKey"] = keywrap.aes_key_wrap(kek, key)
    return encoder.encode(asn1)


class ECKeyUnwrap:
    """
    Key-unwrap primitive: (wrapped DER bytes, private scalar bytes) -> key bytes.

    The recipient curve is taken from the ephemeral key. Raises KeyUnwrapError.
    """

    def __init__(
        self,
        curve_resolver: Optional[CurveResolver] = None,
        info: bytes = DEFAULT_KDF_INFO,
        kek_length: int = DEFAULT_KEK_LENGTH,
    ):
        self.curve_resolver = curve_resolver or field_length_to_curve_name()
        self.info = info
        self.kek_length = kek_length

    def __call__(self, wrapped: bytes, scalar: bytes) -> bytes:
        try:
            asn1 = der.decode(wrapped, der.WrappedKey())
            ephemeral_key = asn1["ephemeralKey"].asOctets()
            ephemeral = decode_public_key(ephemeral_key, self.curve_resolver, False)
        except (DecodeError, KeyImportError, PyAsn1Error) as exc:
            raise KeyUnwrapError(f"malformed wrapped key: {exc}") from exc

        try:
            private_key = ec.derive_private_key(int_from_bytes(scalar), ephemeral.curve)
        except ValueError as exc:
            raise KeyUnwrapError(f"invalid private scalar: {exc}") from exc

        kek = derive_key(private_key, ephemeral, _info(self.info, ephemeral_key), self.kek_length)
        try:
            return keywrap.aes_key_unwrap(kek, asn1["wrappedKey"].asOctets())
        except keywrap.InvalidUnwrap:
            raise KeyUnwrapError("key unwrap integrity check failed") from None
        except ValueError as exc:
            raise KeyUnwrapError(f"invalid wrapped key length: {exc}") from exc
