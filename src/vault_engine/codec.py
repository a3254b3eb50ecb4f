"""
Two-layer envelope encryption of vault records.

Hierarchy: Root Encryption Key -> wrapped record key -> encrypted payload

Each record gets a one-time 32-byte record key. The payload is sealed under
the record key, and the record key is sealed under the root key. Rotating
the root key only re-wraps the small record key; payload ciphertext is never
touched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional

from .crypto import (
    AES_256_KEY_SIZE,
    AeadCipher,
    AeadEnvelope,
    KeyMaterial,
    b64decode,
    b64encode,
)
from .errors import DecryptionFailedError
from .secret_buffer import SecretBuffer

logger = logging.getLogger("vault_engine.codec")


@dataclass(frozen=True)
class WrappedRecord:
    """Encrypted payload plus its record key wrapped under the root key."""

    payload: AeadEnvelope
    wrapped_key: AeadEnvelope

    def to_dict(self) -> dict:
        """Wire fields: payload parts plus the wrapped key as one AEAD blob."""
        return {
            "ciphertext": b64encode(self.payload.ciphertext),
            "wrappedKey": self.wrapped_key.to_base64(),
            "nonce": b64encode(self.payload.nonce),
            "tag": b64encode(self.payload.tag),
        }

    @classmethod
    def from_dict(cls, data: dict) -> WrappedRecord:
        """
        Rebuild from wire fields.

        Raises:
            DecryptionFailedError: If any field is missing or malformed
        """
        try:
            payload = AeadEnvelope(
                ciphertext=b64decode(data["ciphertext"]),
                nonce=b64decode(data["nonce"]),
                tag=b64decode(data["tag"]),
            )
            wrapped_key = AeadEnvelope.from_base64(data["wrappedKey"])
        except (KeyError, TypeError):
            raise DecryptionFailedError() from None
        return cls(payload=payload, wrapped_key=wrapped_key)

    def to_base64(self) -> str:
        """Base64 of the JSON-serialized record (used for encrypted metadata)."""
        return b64encode(json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8"))

    @classmethod
    def from_base64(cls, encoded: str) -> WrappedRecord:
        """
        Inverse of to_base64().

        Raises:
            DecryptionFailedError: If decoding fails or data is invalid
        """
        try:
            data = json.loads(b64decode(encoded).decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            raise DecryptionFailedError() from None
        if not isinstance(data, dict):
            raise DecryptionFailedError()
        return cls.from_dict(data)


class ItemCodec:
    """
    Envelope encryption of arbitrary byte payloads under a root key.

    Record keys live only inside these methods and are wiped on every exit
    path.
    """

    @staticmethod
    def encrypt_record(
        plaintext: bytes,
        root_key: KeyMaterial,
        aad: Optional[bytes] = None,
    ) -> WrappedRecord:
        """
        Encrypt a payload with a fresh record key, then wrap that key.

        Args:
            plaintext: Record bytes (may be empty)
            root_key: Root encryption key
            aad: Optional Additional Authenticated Data bound to both layers

        Returns:
            WrappedRecord with payload and wrapped key envelopes
        """
        record_key = SecretBuffer.generate(AES_256_KEY_SIZE)
        try:
            payload = AeadCipher.seal(plaintext, record_key, aad)
            wrapped_key = AeadCipher.seal(record_key.read(), root_key, aad)
        finally:
            record_key.wipe()

        return WrappedRecord(payload=payload, wrapped_key=wrapped_key)

    @staticmethod
    def decrypt_record(
        record: WrappedRecord,
        root_key: KeyMaterial,
        aad: Optional[bytes] = None,
    ) -> bytes:
        """
        Unwrap the record key and decrypt the payload.

        Raises:
            DecryptionFailedError: If either layer fails to authenticate
        """
        record_key = ItemCodec.unwrap_key(record, root_key, aad)
        try:
            return AeadCipher.open(record.payload, record_key, aad)
        finally:
            record_key.wipe()

    @staticmethod
    def unwrap_key(
        record: WrappedRecord,
        root_key: KeyMaterial,
        aad: Optional[bytes] = None,
    ) -> SecretBuffer:
        """
        Recover the record key. The caller owns and must wipe the result.

        Raises:
            DecryptionFailedError: If the wrapped key fails to authenticate
        """
        key_bytes = bytearray(AeadCipher.open(record.wrapped_key, root_key, aad))
        try:
            if len(key_bytes) != AES_256_KEY_SIZE:
                raise DecryptionFailedError()
            return SecretBuffer(key_bytes)
        finally:
            for i in range(len(key_bytes)):
                key_bytes[i] = 0

    @staticmethod
    def rewrap_record(
        record: WrappedRecord,
        old_root_key: KeyMaterial,
        new_root_key: KeyMaterial,
        aad: Optional[bytes] = None,
    ) -> WrappedRecord:
        """
        Re-wrap the record key under a new root key.

        The payload envelope is carried over unchanged.

        Raises:
            DecryptionFailedError: If the record key cannot be unwrapped
        """
        record_key = ItemCodec.unwrap_key(record, old_root_key, aad)
        try:
            new_wrapped_key = AeadCipher.seal(record_key.read(), new_root_key, aad)
        finally:
            record_key.wipe()

        return WrappedRecord(payload=record.payload, wrapped_key=new_wrapped_key)
