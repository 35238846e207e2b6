from __future__ import annotations


class PZError(Exception):
    pass


class KeyImportError(PZError):
    """Public or private key material could not be imported."""
    pass


class KeyUnwrapError(PZError):
    """A wrapped master key could not be unwrapped with the given scalar."""
    pass


class DecryptionError(PZError):
    """AEAD decryption failed: wrong key, tampered or malformed blob."""
    pass


class DecodeError(PZError):
    pass


class KeySetValidationError(PZError):
    pass


class ConfigError(PZError):
    pass
