"""
Vault service: typed records in, encrypted items out.

This module provides:
- VaultService: holds the root encryption key for one unlocked session and
  runs the codec over typed records

Architecture:
- The root encryption key (derived from the master secret) wraps one-time
  record keys; it never encrypts record data directly
- Every record is encrypted twice: the full record and, under its own
  record key, the metadata projection used for listing and search
- Each envelope is bound to the item id and kind via AAD, so ciphertext
  cannot be moved between items
- Re-keying only re-wraps record keys; record ciphertext is untouched
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from types import TracebackType
from typing import Iterable, List, Optional, Type

from .codec import ItemCodec, WrappedRecord
from .config import EngineConfig
from .crypto import AES_256_KEY_SIZE, KeyMaterial
from .envelope import EncryptedItem, build_bundle, parse_bundle
from .errors import (
    DecryptionFailedError,
    EngineLockedError,
    InvalidInputError,
    UnsupportedFormatError,
)
from .kdf import RootKeyPair, derive
from .records import RecordMetadata, VaultRecord, record_from_dict, record_to_dict
from .secret_buffer import SecretBuffer

logger = logging.getLogger("vault_engine.service")


def _item_aad(item_id: str, kind: str) -> bytes:
    return f"vault-item:{item_id}:{kind}".encode("utf-8")


def _metadata_aad(item_id: str, kind: str) -> bytes:
    return _item_aad(item_id, kind) + b":metadata"


def _decode_json(plaintext: bytes) -> dict:
    try:
        data = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise UnsupportedFormatError(f"Decrypted payload is not valid JSON: {e}") from None
    if not isinstance(data, dict):
        raise UnsupportedFormatError("Decrypted payload must be a JSON object")
    return data


class VaultService:
    """
    Encrypts and decrypts vault records for one unlocked session.

    Takes ownership of the root encryption key: release() (or leaving a
    `with` block) wipes it, and every later call raises EngineLockedError.
    """

    def __init__(self, encryption_key: SecretBuffer, config: Optional[EngineConfig] = None) -> None:
        """
        Initialize VaultService.

        Args:
            encryption_key: Root encryption key (ownership is transferred)
            config: Engine configuration (defaults apply when omitted)

        Raises:
            InvalidInputError: If the key is not a 32-byte SecretBuffer
        """
        if not isinstance(encryption_key, SecretBuffer) or len(encryption_key) != AES_256_KEY_SIZE:
            raise InvalidInputError(f"Root key must be a {AES_256_KEY_SIZE}-byte SecretBuffer")
        self._root_key: Optional[SecretBuffer] = encryption_key
        self._key_pair: Optional[RootKeyPair] = None
        self._config = config or EngineConfig()

    @classmethod
    def unlock(
        cls,
        secret: str,
        salt: bytes,
        config: Optional[EngineConfig] = None,
    ) -> VaultService:
        """
        Derive the root key pair and open a session that owns both halves.

        The authentication key is lent out through `auth_key`; release()
        wipes it together with the encryption key.
        """
        pair = derive(secret, salt)
        service = cls(pair.encryption_key, config=config)
        service._key_pair = pair
        logger.info("Vault unlocked")
        return service

    @property
    def config(self) -> EngineConfig:
        self._key()
        return self._config

    @property
    def auth_key(self) -> Optional[SecretBuffer]:
        """
        Borrowed authentication key, or None for a session opened from a raw
        encryption key. Do not keep it past release().
        """
        self._key()
        return self._key_pair.auth_key if self._key_pair is not None else None

    @property
    def is_locked(self) -> bool:
        """True once release() has run."""
        return self._root_key is None

    def _key(self) -> SecretBuffer:
        if self._root_key is None:
            raise EngineLockedError("Vault is locked")
        return self._root_key

    # ========================================================================
    # Encryption / Decryption
    # ========================================================================

    def encrypt_item(self, record: VaultRecord) -> EncryptedItem:
        """
        Encrypt a record and its metadata projection.

        Args:
            record: Plaintext record

        Returns:
            EncryptedItem ready for the storage collaborator
        """
        root_key = self._key()
        kind = record.kind.value

        payload_bytes = json.dumps(record_to_dict(record)).encode("utf-8")
        payload = ItemCodec.encrypt_record(payload_bytes, root_key, _item_aad(record.id, kind))

        metadata_bytes = json.dumps(record.metadata().to_dict()).encode("utf-8")
        metadata = ItemCodec.encrypt_record(
            metadata_bytes, root_key, _metadata_aad(record.id, kind)
        )

        logger.debug("Encrypted %s item %s", kind, record.id)
        return EncryptedItem(
            id=record.id,
            owner_id=record.owner_id,
            kind=record.kind,
            created_at=record.created_at,
            updated_at=record.updated_at,
            payload=payload,
            metadata=metadata,
        )

    def decrypt_item(self, item: EncryptedItem) -> VaultRecord:
        """
        Decrypt a full record.

        Raises:
            DecryptionFailedError: If the item was tampered with or the key is wrong
            UnsupportedFormatError: If the decrypted payload is not a valid record
        """
        root_key = self._key()
        plaintext = ItemCodec.decrypt_record(
            item.payload, root_key, _item_aad(item.id, item.kind.value)
        )
        record = record_from_dict(_decode_json(plaintext))
        if record.id != item.id or record.kind != item.kind:
            raise DecryptionFailedError()
        return record

    def decrypt_items(self, items: Iterable[EncryptedItem]) -> List[VaultRecord]:
        """Decrypt a batch. The first failure propagates."""
        self._key()
        records = [self.decrypt_item(item) for item in items]
        logger.debug("Decrypted %d items", len(records))
        return records

    def decrypt_metadata_only(self, item: EncryptedItem) -> RecordMetadata:
        """
        Decrypt only the metadata projection.

        Falls back to full decryption for items stored without metadata.
        """
        if item.metadata is None:
            return self.decrypt_item(item).metadata()

        root_key = self._key()
        plaintext = ItemCodec.decrypt_record(
            item.metadata, root_key, _metadata_aad(item.id, item.kind.value)
        )
        return RecordMetadata.from_dict(_decode_json(plaintext))

    def seal_blob(self, data: bytes, aad: Optional[bytes] = None) -> WrappedRecord:
        """Envelope-encrypt raw bytes (attachments) under the held root key."""
        return ItemCodec.encrypt_record(data, self._key(), aad)

    def open_blob(self, record: WrappedRecord, aad: Optional[bytes] = None) -> bytes:
        """Inverse of seal_blob()."""
        return ItemCodec.decrypt_record(record, self._key(), aad)

    def search(self, items: Iterable[EncryptedItem], query: str) -> List[EncryptedItem]:
        """
        Filter items by a case-insensitive substring of name, username, url or tags.

        Only metadata is decrypted.
        """
        self._key()
        return [item for item in items if self.decrypt_metadata_only(item).matches(query)]

    # ========================================================================
    # Re-keying
    # ========================================================================

    def rekey_all(self, new_root_key: KeyMaterial, items: Iterable[EncryptedItem]) -> List[EncryptedItem]:
        """
        Re-wrap every record key under a new root key.

        Record ciphertext is carried over unchanged. The service keeps its
        current key; open a new VaultService with the new key afterwards.

        Args:
            new_root_key: Replacement root encryption key
            items: Every encrypted item owned by the account

        Returns:
            Items whose payload and metadata keys are wrapped under new_root_key

        Raises:
            DecryptionFailedError: If any item cannot be unwrapped with the current key
        """
        root_key = self._key()
        rekeyed = []
        for item in items:
            kind = item.kind.value
            payload = ItemCodec.rewrap_record(
                item.payload, root_key, new_root_key, _item_aad(item.id, kind)
            )
            metadata: Optional[WrappedRecord] = None
            if item.metadata is not None:
                metadata = ItemCodec.rewrap_record(
                    item.metadata, root_key, new_root_key, _metadata_aad(item.id, kind)
                )
            rekeyed.append(replace(item, payload=payload, metadata=metadata))

        logger.info("Re-keyed %d items", len(rekeyed))
        return rekeyed

    # ========================================================================
    # Export / Import
    # ========================================================================

    def export_bundle(self, records: Iterable[VaultRecord]) -> str:
        """Encrypt records into a version 1 export document."""
        self._key()
        items = [self.encrypt_item(record) for record in records]
        logger.info("Exported %d items", len(items))
        return build_bundle(items)

    def import_bundle(self, blob: str) -> List[VaultRecord]:
        """
        Decrypt every record in an export document.

        Raises:
            UnsupportedFormatError: On unknown version or malformed document
            DecryptionFailedError: If any item fails to decrypt
        """
        self._key()
        records = self.decrypt_items(parse_bundle(blob))
        logger.info("Imported %d items", len(records))
        return records

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def release(self) -> None:
        """Wipe the root key pair. Idempotent."""
        if self._root_key is None:
            return
        self._root_key.wipe()
        if self._key_pair is not None:
            self._key_pair.wipe()
            self._key_pair = None
        self._root_key = None
        logger.info("Vault released")

    def __enter__(self) -> VaultService:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "locked" if self.is_locked else "unlocked"
        return f"VaultService({state})"
