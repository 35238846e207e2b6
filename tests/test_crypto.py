import os
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from pz_core.crypto import ECKeyUnwrap, aead_decrypt, aead_encrypt, wrap_key
from pz_core.errors import DecryptionError, KeyUnwrapError
from pz_core.keys import private_scalar


def test_aead_decrypt():
    key = os.urandom(32)
    blob = aead_encrypt(key, b"protection object")
    assert aead_decrypt(key, blob) == b"protection object"


def test_aead_decrypt_wrong_key():
    blob = aead_encrypt(os.urandom(32), b"payload")
    with pytest.raises(DecryptionError):
        aead_decrypt(os.urandom(32), blob)


def test_aead_decrypt_tampered():
    key = os.urandom(16)
    blob = bytearray(aead_encrypt(key, b"payload"))
    blob[-1] ^= 0x01
    with pytest.raises(DecryptionError):
        aead_decrypt(key, bytes(blob))


@pytest.mark.parametrize("key,blob", [
    (os.urandom(32), b"short"),
    (b"bad key length", os.urandom(64)),
])
def test_aead_decrypt_malformed(key, blob):
    with pytest.raises(DecryptionError):
        aead_decrypt(key, blob)


@pytest.mark.parametrize("curve", [ec.SECP256R1(), ec.SECP384R1(), ec.SECP521R1()])
def test_unwrap_key(curve):
    recipient = ec.generate_private_key(curve)
    master_key = os.urandom(32)
    wrapped = wrap_key(master_key, recipient.public_key())

    assert ECKeyUnwrap()(wrapped, private_scalar(recipient)) == master_key


def test_unwrap_key_wrong_scalar():
    recipient = ec.generate_private_key(ec.SECP256R1())
    other = ec.generate_private_key(ec.SECP256R1())
    wrapped = wrap_key(os.urandom(32), recipient.public_key())

    with pytest.raises(KeyUnwrapError):
        ECKeyUnwrap()(wrapped, private_scalar(other))


def test_unwrap_key_info_mismatch():
    recipient = ec.generate_private_key(ec.SECP256R1())
    wrapped = wrap_key(os.urandom(16), recipient.public_key(), info=b"other-zone")

    with pytest.raises(KeyUnwrapError):
        ECKeyUnwrap()(wrapped, private_scalar(recipient))


def test_unwrap_key_kek_length():
    recipient = ec.generate_private_key(ec.SECP256R1())
    master_key = os.urandom(16)
    wrapped = wrap_key(master_key, recipient.public_key(), kek_length=16)

    assert ECKeyUnwrap(kek_length=16)(wrapped, private_scalar(recipient)) == master_key


@pytest.mark.parametrize("wrapped,scalar", [
    (b"not der", b"\x01" * 32),
    (b"", b"\x01" * 32),
    (b"\x30\x00", b"\x01" * 32),
])
def test_unwrap_key_malformed(wrapped, scalar):
    with pytest.raises(KeyUnwrapError):
        ECKeyUnwrap()(wrapped, scalar)


def test_unwrap_key_zero_scalar():
    recipient = ec.generate_private_key(ec.SECP256R1())
    wrapped = wrap_key(os.urandom(32), recipient.public_key())
    with pytest.raises(KeyUnwrapError):
        ECKeyUnwrap()(wrapped, b"\x00" * 32)


def test_unwrap_key_unsupported_curve():
    recipient = ec.generate_private_key(ec.SECP256R1())
    wrapped = wrap_key(os.urandom(32), recipient.public_key())
    with pytest.raises(KeyUnwrapError):
        ECKeyUnwrap({32: "brainpoolP256r1"}.get)(wrapped, private_scalar(recipient))
