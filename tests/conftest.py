import os
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from pz_core import der
from pz_core.assistant import ProtectionZoneAssistant
from pz_core.config import load_config
from pz_core.crypto import aead_encrypt, wrap_key
from pz_core.events import CollectingObserver
from pz_core.keys import Key, key_id
from pz_core.models import NOS, EncryptedKeyRecord, ProtectionInfo, ProtectionObject
from pz_core.service import make_key_set


def uncompressed(public_key):
    return public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )


@pytest.fixture
def config():
    return load_config({"curves": "secp256r1,secp384r1", "use_compact_keys": True})


@pytest.fixture
def observer():
    return CollectingObserver()


@pytest.fixture
def assistant(config, observer):
    return ProtectionZoneAssistant(config, observer)


@pytest.fixture
def new_key():
    """Factory for Key[EllipticCurvePrivateKey] bound to its compact KeyID."""
    def make(curve=None, use_compact_keys=True):
        sk = ec.generate_private_key(curve or ec.SECP256R1())
        return Key(key_id(sk.public_key(), use_compact_keys), sk)
    return make


@pytest.fixture
def new_record():
    """Factory for an EncryptedKeyRecord wrapping master_key for recipient."""
    def make(recipient, master_key):
        public_key = recipient.key_data.public_key()
        return EncryptedKeyRecord(uncompressed(public_key), wrap_key(master_key, public_key))
    return make


@pytest.fixture
def zone(new_key, new_record):
    """A complete protection zone: recipient key, master key, service key, encoded payload."""
    recipient = new_key()
    service_key = new_key()
    master_key = os.urandom(32)

    key_set = make_key_set("zone", [service_key], {1: service_key.key_id})
    protection_object = ProtectionObject(master_key_set=(NOS(der.encode(key_set), service=1),))
    protection_info = ProtectionInfo(
        encrypted_keys=(new_record(recipient, master_key),),
        data=aead_encrypt(master_key, der.encode(protection_object)),
    )
    return {
        "recipient": recipient,
        "service_key": service_key,
        "master_key": master_key,
        "protection_info": protection_info,
    }
