"""
Encrypted file attachments.

Files go through the same two-layer scheme as records: a one-time file key
encrypts the content and is wrapped under the session's root key. A SHA-256
checksum of the original content is bound to the ciphertext as AAD and
re-checked after decryption.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from .codec import WrappedRecord
from .errors import DecryptionFailedError, InvalidInputError
from .records import FileRecord
from .service import VaultService

logger = logging.getLogger("vault_engine.files")

DANGEROUS_EXTENSIONS = frozenset({"exe", "bat", "cmd", "sh", "ps1", "vbs", "js"})


@dataclass(frozen=True)
class FileMetadata:
    file_name: str
    file_size: int
    mime_type: str
    last_modified: Optional[float] = None


@dataclass(frozen=True)
class EncryptedFile:
    """Encrypted content, wrapped file key and plaintext-free descriptors."""

    record: WrappedRecord
    metadata: FileMetadata
    checksum: str  # SHA-256 hex of the original content

    def to_file_record(self, owner_id: str, storage_key: str) -> FileRecord:
        """Vault record pointing at the uploaded ciphertext."""
        return FileRecord(
            owner_id=owner_id,
            file_name=self.metadata.file_name,
            file_size=self.metadata.file_size,
            mime_type=self.metadata.mime_type,
            storage_key=storage_key,
            checksum=self.checksum,
        )


def calculate_checksum(data: bytes) -> str:
    """SHA-256 hex digest."""
    return hashlib.sha256(data).hexdigest()


def _aad(checksum: str) -> bytes:
    return f"vault-file:{checksum}".encode("ascii")


class FileCipher:
    """Validates, encrypts and decrypts attachments for an unlocked vault."""

    def __init__(self, service: VaultService) -> None:
        self._service = service
        self._config = service.config

    def validate(self, file_name: str, data: bytes, mime_type: str) -> None:
        """
        Reject files the vault will not store.

        Raises:
            InvalidInputError: If the file is empty, too large, of a disallowed
                MIME type or has a dangerous extension
        """
        if not data:
            raise InvalidInputError("File is empty")
        if len(data) > self._config.max_file_size:
            max_mb = self._config.max_file_size // (1024 * 1024)
            raise InvalidInputError(f"File size exceeds maximum allowed ({max_mb}MB)")
        if mime_type.lower() not in self._config.allowed_mime_types:
            raise InvalidInputError(f"File type not allowed: {mime_type}")
        extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
        if extension in DANGEROUS_EXTENSIONS:
            raise InvalidInputError("Potentially dangerous file type")

    def encrypt_file(
        self,
        file_name: str,
        data: bytes,
        mime_type: str,
        last_modified: Optional[float] = None,
    ) -> EncryptedFile:
        """Validate and encrypt one attachment."""
        self.validate(file_name, data, mime_type)
        checksum = calculate_checksum(data)
        record = self._service.seal_blob(data, _aad(checksum))
        logger.debug("Encrypted attachment (%d bytes)", len(data))
        return EncryptedFile(
            record=record,
            metadata=FileMetadata(
                file_name=file_name,
                file_size=len(data),
                mime_type=mime_type,
                last_modified=last_modified,
            ),
            checksum=checksum,
        )

    def decrypt_file(self, encrypted: EncryptedFile) -> bytes:
        """
        Decrypt an attachment and verify its checksum.

        Raises:
            DecryptionFailedError: On authentication failure or checksum mismatch
        """
        data = self._service.open_blob(encrypted.record, _aad(encrypted.checksum))
        if not hmac.compare_digest(calculate_checksum(data), encrypted.checksum):
            raise DecryptionFailedError()
        return data
