"""
pz_core.assistant
-----------------
Resolves the chain of trust inside a protection zone:

    wrapped master keys + keyring  -> master keys           (resolve_master_keys)
    master keys + encrypted payload -> plaintext            (recover_plaintext)
    plaintext                       -> nested NOS entries   (parse_protection_object)
    NOS entries                     -> private keys         (extract_private_keys)

No public operation raises on malformed or non-matching input. Each failed
item is dropped and reported to the observer; its siblings are unaffected.
"""

from __future__ import annotations
from typing import List, Mapping, Optional, Sequence
from cryptography.hazmat.primitives.asymmetric import ec
from . import der
from .config import PZConfig, load_config
from .crypto import aead_decrypt
from .errors import DecryptionError
from .events import Diagnostic, DiagnosticEvent, LoggingObserver, Observer
from .imports import import_public_key
from .keys import Key, KeyID, private_scalar
from .logger import get_logger
from .models import NOS, EncryptedKeyRecord, KeySet, ProtectionInfo, ProtectionObject
from .service import ServiceKeySetBuilder

logger = get_logger(__name__)

Keyring = Mapping[KeyID, Key[ec.EllipticCurvePrivateKey]]


class ProtectionZoneAssistant:
    def __init__(self, config: Optional[PZConfig] = None, observer: Optional[Observer] = None):
        self.config = config or load_config()
        self.observer = observer or LoggingObserver()
        self.builder = ServiceKeySetBuilder(self.config.curve_resolver, self.config.use_compact_keys)

    def _report(self, kind: Diagnostic, message: str, index: Optional[int] = None, **detail) -> None:
        self.observer.notify(DiagnosticEvent(kind, message, index, detail))

    # --------- master keys ----------
    def master_keys(self, protection_info: ProtectionInfo, keyring: Keyring) -> List[bytes]:
        return self.resolve_master_keys(protection_info.encrypted_keys, keyring)

    def resolve_master_keys(self, records: Sequence[EncryptedKeyRecord], keyring: Keyring) -> List[bytes]:
        logger.debug("-- resolve_master_keys() - %d encrypted keys", len(records))
        keys = []
        for index, record in enumerate(records):
            key = self.unwrap_key(index, record, keyring)
            if key is not None:
                keys.append(key)
        return keys

    def unwrap_key(self, index: int, record: EncryptedKeyRecord, keyring: Keyring) -> Optional[bytes]:
        public_key = self.import_public_key(record.public_key)
        if public_key is None:
            self._report(Diagnostic.IMPORT_FAILED, f"cannot import public key of {record}", index)
            return None

        private_key = keyring.get(public_key.key_id)
        if private_key is None:
            self._report(Diagnostic.KEY_NOT_FOUND, f"no private key for {public_key.key_id}", index,
                         key_id=public_key.key_id.hex())
            return None

        try:
            return self.config.unwrap(record.wrapped_key, private_scalar(private_key.key_data))
        except Exception as exc:
            # Injected primitives raise their own error types; any failure skips this record
            self._report(Diagnostic.UNWRAP_FAILED, f"failed to unwrap key: {exc}", index,
                         key_id=public_key.key_id.hex())
            return None

    def import_public_key(self, data: bytes) -> Optional[Key[ec.EllipticCurvePublicKey]]:
        return import_public_key(data, self.config.curve_resolver, self.config.use_compact_keys)

    # --------- protection info payload ----------
    def recover_plaintext(self, protection_info: ProtectionInfo, candidates: Sequence[bytes]) -> List[bytes]:
        """
        Decrypt the payload with the first candidate that passes AEAD verification.

        Candidate order is part of the contract: two distinct keys both
        authenticating the same blob is implausible but not impossible, and
        later candidates are never tried once one succeeds.
        """
        if protection_info.data is None:
            self._report(Diagnostic.NO_PAYLOAD, "protection info carries no encrypted payload")
            return []

        for index, candidate in enumerate(candidates):
            try:
                plaintext = aead_decrypt(candidate, protection_info.data)
            except DecryptionError as exc:
                self._report(Diagnostic.DECRYPT_REJECTED, f"candidate rejected: {exc}", index)
                continue
            logger.debug("-- recover_plaintext() - candidate %d accepted", index)
            return [plaintext]

        if candidates:
            self._report(Diagnostic.CANDIDATES_EXHAUSTED,
                         f"none of {len(candidates)} candidate keys decrypts the payload")
        return []

    # --------- protection object ----------
    def parse_protection_object(self, plaintext: bytes) -> List[NOS]:
        protection_object = der.parse(plaintext, ProtectionObject)
        if protection_object is None:
            self._report(Diagnostic.DECODE_FAILED, "malformed protection object")
            return []
        if protection_object.master_key_set is None:
            logger.debug("-- parse_protection_object() - no master key set")
            return []
        return list(protection_object.master_key_set)

    # --------- nested key sets ----------
    def extract_private_keys(self, entries: Sequence[NOS]) -> List[Key[ec.EllipticCurvePrivateKey]]:
        keys = []
        for index, nos in enumerate(entries):
            key_set = der.parse(nos.key, KeySet)
            if key_set is None:
                self._report(Diagnostic.DECODE_FAILED, "malformed key set", index)
                continue
            service_key_set = self.builder.build(key_set)
            if service_key_set is None:
                self._report(Diagnostic.VALIDATION_FAILED, f"key set {key_set.name!r} failed validation", index)
                continue
            keys.extend(service_key_set.keys)
        logger.debug("-- extract_private_keys() - keys: %s", [str(key) for key in keys])
        return keys

    # --------- pipeline ----------
    def private_keys(self, protection_info: ProtectionInfo, master_keys: Sequence[bytes]) -> List[Key[ec.EllipticCurvePrivateKey]]:
        keys = []
        for plaintext in self.recover_plaintext(protection_info, master_keys):
            keys.extend(self.extract_private_keys(self.parse_protection_object(plaintext)))
        return keys

    def resolve(self, protection_info: ProtectionInfo, keyring: Keyring) -> List[Key[ec.EllipticCurvePrivateKey]]:
        return self.private_keys(protection_info, self.master_keys(protection_info, keyring))
