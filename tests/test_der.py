import pytest
from pz_core import der
from pz_core.models import (
    NOS, EncryptedKeyRecord, KeySet, ProtectionInfo, ProtectionObject, parse_protection_info,
)


def test_protection_info_with_payload():
    info = ProtectionInfo(
        encrypted_keys=(
            EncryptedKeyRecord(b"\x04" + b"\x01" * 64, b"wrapped-1", service=7),
            EncryptedKeyRecord(b"\x02" + b"\x02" * 32, b"wrapped-2"),
        ),
        data=b"ciphertext",
    )
    parsed = parse_protection_info(der.encode(info))
    assert parsed == info
    assert [r.wrapped_key for r in parsed.encrypted_keys] == [b"wrapped-1", b"wrapped-2"]


def test_protection_info_without_payload():
    info = ProtectionInfo(encrypted_keys=())
    parsed = parse_protection_info(der.encode(info))
    assert parsed.data is None
    assert parsed.encrypted_keys == ()


def test_protection_object_master_key_set_order():
    obj = ProtectionObject(master_key_set=(NOS(b"b"), NOS(b"a", service=2), NOS(b"c")))
    parsed = der.parse(der.encode(obj), ProtectionObject)
    assert [n.key for n in parsed.master_key_set] == [b"b", b"a", b"c"]
    assert parsed.master_key_set[1].service == 2


def test_protection_object_without_master_key_set():
    parsed = der.parse(der.encode(ProtectionObject()), ProtectionObject)
    assert parsed is not None
    assert parsed.master_key_set is None


@pytest.mark.parametrize("data", [
    b"",
    b"garbage",
    b"\x30\x05\x04\x03abc",   # SEQUENCE with wrong content for KeySet
    b"\x30\x80\x00\x00",      # indefinite length is not DER
])
def test_parse_malformed_returns_none(data):
    assert der.parse(data, KeySet) is None
    assert der.parse(data, ProtectionInfo) is None


def test_parse_rejects_trailing_bytes():
    encoded = der.encode(NOS(b"key"))
    assert der.parse(encoded, NOS) == NOS(b"key")
    assert der.parse(encoded + b"\x00", NOS) is None


def test_parse_wrong_structure():
    # A valid NOS is not a ProtectionInfo
    assert der.parse(der.encode(NOS(b"key")), ProtectionInfo) is None
