"""
Recovery kit: an offline copy of the root encryption key.

A random 32-byte recovery key is shown to the user once as a grouped base32
code. A wrapping key is derived from it with HKDF-SHA256 and used to seal
the root encryption key. The sealed key can be stored next to the vault
ciphertext; without the printed code it is useless.
"""

from __future__ import annotations

import logging
from typing import Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .crypto import AES_256_KEY_SIZE, AeadCipher, AeadEnvelope
from .errors import DecryptionFailedError
from .rng import RANDOM
from .secret_buffer import SecretBuffer
from .totp import base32_decode, base32_encode

logger = logging.getLogger("vault_engine.recovery")

RECOVERY_KEY_SIZE = 32
RECOVERY_CONTEXT = b"vault-engine-recovery-v1"
GROUP_SIZE = 4


def _wrapping_key(recovery_key: bytes) -> SecretBuffer:
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=AES_256_KEY_SIZE,
        salt=None,
        info=RECOVERY_CONTEXT,
    )
    return SecretBuffer(hkdf.derive(recovery_key))


def format_recovery_code(recovery_key: bytes) -> str:
    """Base32 in dash-separated groups of four characters."""
    encoded = base32_encode(recovery_key)
    return "-".join(encoded[i : i + GROUP_SIZE] for i in range(0, len(encoded), GROUP_SIZE))


def parse_recovery_code(code: str) -> bytes:
    """
    Inverse of format_recovery_code(); dashes, spaces and case are ignored.

    Raises:
        InvalidInputError: If the code contains non-base32 characters
        DecryptionFailedError: If the code does not hold a full recovery key
    """
    recovery_key = base32_decode("".join(code.split()).replace("-", ""))
    if len(recovery_key) != RECOVERY_KEY_SIZE:
        raise DecryptionFailedError()
    return recovery_key


def create_recovery_kit(encryption_key: SecretBuffer) -> Tuple[str, AeadEnvelope]:
    """
    Seal the root encryption key under a fresh recovery key.

    Returns:
        (recovery_code, wrapped). Show the code to the user once; persist
        only `wrapped`.
    """
    recovery_key = RANDOM.token_bytes(RECOVERY_KEY_SIZE)
    with _wrapping_key(recovery_key) as wrapping_key:
        wrapped = AeadCipher.seal(encryption_key.read(), wrapping_key, RECOVERY_CONTEXT)
    logger.info("Created recovery kit")
    return format_recovery_code(recovery_key), wrapped


def recover_root_key(recovery_code: str, wrapped: AeadEnvelope) -> SecretBuffer:
    """
    Recover the root encryption key from a recovery code.

    Raises:
        DecryptionFailedError: If the code is wrong or `wrapped` was tampered with
    """
    recovery_key = parse_recovery_code(recovery_code)
    with _wrapping_key(recovery_key) as wrapping_key:
        root_key = AeadCipher.open(wrapped, wrapping_key, RECOVERY_CONTEXT)
    if len(root_key) != AES_256_KEY_SIZE:
        raise DecryptionFailedError()
    logger.info("Recovered root key from recovery kit")
    return SecretBuffer(root_key)
