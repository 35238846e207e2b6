"""
pz_core
=======
Protection-zone key resolution.

Provides:
- Master-key unwrap against a caller supplied keyring
- AES-GCM protection-info decryption with ordered candidate keys
- DER protection objects and validated service key sets
"""

from .assistant import ProtectionZoneAssistant
from .config import PZConfig, load_config
from .events import CollectingObserver, Diagnostic, DiagnosticEvent, LoggingObserver, Observer
from .keys import Key, KeyID, keyring
from .models import NOS, EncryptedKeyRecord, KeySet, ProtectionInfo, ProtectionObject, parse_protection_info
from .service import ServiceKeySet, ServiceKeySetBuilder

__all__ = [
    "ProtectionZoneAssistant",
    "PZConfig",
    "load_config",
    "CollectingObserver",
    "Diagnostic",
    "DiagnosticEvent",
    "LoggingObserver",
    "Observer",
    "Key",
    "KeyID",
    "keyring",
    "NOS",
    "EncryptedKeyRecord",
    "KeySet",
    "ProtectionInfo",
    "ProtectionObject",
    "parse_protection_info",
    "ServiceKeySet",
    "ServiceKeySetBuilder",
]
