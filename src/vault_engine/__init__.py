"""
Vault Engine

Zero-knowledge cryptography for a password vault: root key derivation,
two-layer envelope encryption of vault records, one-time passwords and
password strength analysis.

Overview
--------
- **Root Encryption Key** is derived from the user's master secret with
  Argon2id; it only ever wraps record keys
- **Record keys** are one-time keys that encrypt a single record
- **Encrypted items** are the only thing that ever leaves the engine

Quick Start
-----------
```python
from vault_engine import EncryptedItem, LoginRecord, VaultService, generate_salt

salt = generate_salt()  # store with the account
with VaultService.unlock("correct horse battery staple", salt) as service:
    login_proof = service.auth_key  # borrowed; wiped by release()
    record = LoginRecord(owner_id="alice", name="GitHub", password="s3cret!")
    item = service.encrypt_item(record)
    stored = item.to_json()  # safe to persist

    recovered = service.decrypt_item(EncryptedItem.from_json(stored))
```

Modules
-------
- `secret_buffer`: wipeable container for key material
- `kdf`: Argon2id root key derivation
- `crypto`: AES-256-GCM primitives
- `codec`: two-layer envelope encryption and re-wrapping
- `records`: plaintext record model
- `envelope`: storage wire format and export bundles
- `service`: vault session over typed records
- `analyzer`: weak/reused/stale/flagged scan
- `totp`: RFC 6238 one-time passwords
- `password`: strength analysis and generation
- `files`: encrypted attachments
- `recovery`: recovery kit for the root key
- `config`: environment-driven settings
- `errors`: error types
"""

import logging

__version__ = "0.1.0"

logging.getLogger("vault_engine").addHandler(logging.NullHandler())

# ============================================================================
# Error Exports
# ============================================================================

from .errors import (
    USER_FACING_MESSAGE,
    ClearedAccessError,
    ConfigError,
    DecryptionFailedError,
    EngineLockedError,
    InvalidInputError,
    UnsupportedFormatError,
    VaultEngineError,
)

# ============================================================================
# Key Material Exports
# ============================================================================

from .rng import RANDOM, SecureRandom, generate_random_bytes
from .secret_buffer import SecretBuffer
from .kdf import RootKeyPair, derive, generate_salt

# ============================================================================
# Crypto Exports
# ============================================================================

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    AeadCipher,
    AeadEnvelope,
)
from .codec import ItemCodec, WrappedRecord

# ============================================================================
# Record Exports
# ============================================================================

from .records import (
    ApiKeyRecord,
    CardRecord,
    CustomField,
    FileRecord,
    IdentityRecord,
    LicenseRecord,
    LoginRecord,
    NoteRecord,
    RecordKind,
    RecordMetadata,
    TotpRecord,
    VaultRecord,
)
from .envelope import BUNDLE_VERSION, EncryptedItem

# ============================================================================
# Service Exports (Primary API)
# ============================================================================

from .config import EngineConfig
from .service import VaultService
from .analyzer import SecurityAnalyzer, SecurityReport
from .files import EncryptedFile, FileCipher, FileMetadata
from .recovery import create_recovery_kit, recover_root_key

# ============================================================================
# TOTP and Password Exports
# ============================================================================

from .totp import ProvisioningInfo, TOTPParameters
from .password import (
    PASSWORD_PRESETS,
    PasswordAnalysis,
    PasswordOptions,
    analyze_password,
    generate_passphrase,
    generate_password,
)

# ============================================================================
# Public API
# ============================================================================

__all__ = [
    # Version
    "__version__",
    # Errors
    "VaultEngineError",
    "InvalidInputError",
    "DecryptionFailedError",
    "EngineLockedError",
    "UnsupportedFormatError",
    "ClearedAccessError",
    "ConfigError",
    "USER_FACING_MESSAGE",
    # Key material
    "SecureRandom",
    "RANDOM",
    "generate_random_bytes",
    "SecretBuffer",
    "RootKeyPair",
    "derive",
    "generate_salt",
    # Crypto
    "AES_256_KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AeadCipher",
    "AeadEnvelope",
    "ItemCodec",
    "WrappedRecord",
    # Records
    "RecordKind",
    "VaultRecord",
    "LoginRecord",
    "CardRecord",
    "NoteRecord",
    "IdentityRecord",
    "FileRecord",
    "TotpRecord",
    "ApiKeyRecord",
    "LicenseRecord",
    "CustomField",
    "RecordMetadata",
    "EncryptedItem",
    "BUNDLE_VERSION",
    # Service
    "EngineConfig",
    "VaultService",
    "SecurityAnalyzer",
    "SecurityReport",
    "FileCipher",
    "EncryptedFile",
    "FileMetadata",
    "create_recovery_kit",
    "recover_root_key",
    # TOTP / passwords
    "TOTPParameters",
    "ProvisioningInfo",
    "PasswordAnalysis",
    "PasswordOptions",
    "PASSWORD_PRESETS",
    "analyze_password",
    "generate_password",
    "generate_passphrase",
]
