"""
Cryptographic primitives for AES-256-GCM authenticated encryption.

This module provides:
- AeadEnvelope: ciphertext, nonce and tag of one sealed message
- AeadCipher: seal/open with optional Additional Authenticated Data
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionFailedError, InvalidInputError
from .rng import RANDOM
from .secret_buffer import SecretBuffer

logger = logging.getLogger("vault_engine.crypto")

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)

KeyMaterial = Union[SecretBuffer, bytes, bytearray]


@dataclass(frozen=True)
class AeadEnvelope:
    """
    One AES-GCM sealed message.

    The tag is kept apart from the ciphertext so storage can persist the
    fields separately.
    """

    ciphertext: bytes
    nonce: bytes  # 12 bytes
    tag: bytes  # 16 bytes

    def to_blob(self) -> bytes:
        """
        Convert to the AEAD blob format: nonce || ciphertext || tag.

        For a wrapped 32-byte record key: 12 + 32 + 16 = 60 bytes total.
        """
        return self.nonce + self.ciphertext + self.tag

    @classmethod
    def from_blob(cls, blob: bytes) -> AeadEnvelope:
        """
        Parse from AEAD blob format: nonce || ciphertext || tag.

        Raises:
            DecryptionFailedError: If blob is too small
        """
        if len(blob) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionFailedError()
        return cls(
            ciphertext=bytes(blob[NONCE_SIZE:-TAG_SIZE]),
            nonce=bytes(blob[:NONCE_SIZE]),
            tag=bytes(blob[-TAG_SIZE:]),
        )

    def to_base64(self) -> str:
        """Encode the AEAD blob as a base64 string."""
        return base64.standard_b64encode(self.to_blob()).decode("ascii")

    @classmethod
    def from_base64(cls, encoded: str) -> AeadEnvelope:
        """
        Decode from a base64 AEAD blob.

        Raises:
            DecryptionFailedError: If decoding fails or data is invalid
        """
        return cls.from_blob(b64decode(encoded))


class AeadCipher:
    """
    AES-256-GCM authenticated encryption.

    Provides static methods for sealing and opening with optional
    Additional Authenticated Data (AAD) for binding.
    """

    @staticmethod
    def seal(
        plaintext: bytes,
        key: KeyMaterial,
        aad: Optional[bytes] = None,
    ) -> AeadEnvelope:
        """
        Encrypt plaintext with AES-256-GCM under a fresh random nonce.

        Args:
            plaintext: Data to encrypt
            key: 32-byte encryption key
            aad: Optional Additional Authenticated Data for binding

        Returns:
            AeadEnvelope with ciphertext, nonce and tag

        Raises:
            InvalidInputError: If key size is invalid
            ClearedAccessError: If key is a wiped SecretBuffer
        """
        key_bytes = _key_bytes(key)
        if len(key_bytes) != AES_256_KEY_SIZE:
            raise InvalidInputError(
                f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(key_bytes)}"
            )

        nonce = RANDOM.token_bytes(NONCE_SIZE)
        combined = AESGCM(key_bytes).encrypt(nonce, bytes(plaintext), aad)

        return AeadEnvelope(
            ciphertext=combined[:-TAG_SIZE],
            nonce=nonce,
            tag=combined[-TAG_SIZE:],
        )

    @staticmethod
    def open(
        envelope: AeadEnvelope,
        key: KeyMaterial,
        aad: Optional[bytes] = None,
    ) -> bytes:
        """
        Decrypt and authenticate an envelope.

        Args:
            envelope: AeadEnvelope produced by seal()
            key: 32-byte decryption key
            aad: Optional Additional Authenticated Data (must match seal)

        Returns:
            Decrypted plaintext bytes

        Raises:
            DecryptionFailedError: On any failure, without saying which
            ClearedAccessError: If key is a wiped SecretBuffer
        """
        key_bytes = _key_bytes(key)
        if (
            len(key_bytes) != AES_256_KEY_SIZE
            or len(envelope.nonce) != NONCE_SIZE
            or len(envelope.tag) != TAG_SIZE
        ):
            raise DecryptionFailedError()

        try:
            return AESGCM(key_bytes).decrypt(
                envelope.nonce, envelope.ciphertext + envelope.tag, aad
            )
        except (InvalidTag, ValueError, TypeError):
            # Generic error to prevent oracle attacks
            logger.debug("AEAD open rejected an envelope")
            raise DecryptionFailedError() from None


def _key_bytes(key: KeyMaterial) -> bytes:
    if isinstance(key, SecretBuffer):
        return key.read()
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise InvalidInputError("Key must be a SecretBuffer, bytes or bytearray")


def b64encode(data: bytes) -> str:
    """Standard base64 of raw bytes as an ASCII string."""
    return base64.standard_b64encode(data).decode("ascii")


def b64decode(encoded: str) -> bytes:
    """
    Strict base64 decode for envelope fields.

    Raises:
        DecryptionFailedError: If the input is not valid base64
    """
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise DecryptionFailedError() from None
