"""
Storage-facing wire format.

This module provides:
- EncryptedItem: one encrypted record as handed to the storage collaborator
- build_bundle / parse_bundle: the versioned export document

Everything here is ciphertext plus identifiers; nothing in this module ever
sees a key or plaintext.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .codec import WrappedRecord
from .errors import UnsupportedFormatError
from .records import RecordKind

logger = logging.getLogger("vault_engine.envelope")

BUNDLE_VERSION = 1


@dataclass(frozen=True)
class EncryptedItem:
    """Encrypted record plus its plaintext-free identifiers."""

    id: str
    owner_id: str
    kind: RecordKind
    created_at: datetime
    updated_at: datetime
    payload: WrappedRecord
    metadata: Optional[WrappedRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire dict (camelCase keys, base64 values)."""
        data: Dict[str, Any] = {
            "id": self.id,
            "ownerId": self.owner_id,
            "kind": self.kind.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        data.update(self.payload.to_dict())
        if self.metadata is not None:
            data["encryptedMetadata"] = self.metadata.to_base64()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EncryptedItem:
        """
        Parse the wire dict.

        Raises:
            UnsupportedFormatError: If identifiers are missing or invalid
            DecryptionFailedError: If an envelope field is not valid base64
        """
        if not isinstance(data, dict):
            raise UnsupportedFormatError("Encrypted item must be a JSON object")
        try:
            item_id = data["id"]
            owner_id = data["ownerId"]
            kind = RecordKind(data["kind"])
            created_at = datetime.fromisoformat(data["createdAt"])
            updated_at = datetime.fromisoformat(data["updatedAt"])
        except (KeyError, TypeError, ValueError) as e:
            raise UnsupportedFormatError(f"Invalid encrypted item: {e}") from None

        encoded_metadata = data.get("encryptedMetadata")
        return cls(
            id=item_id,
            owner_id=owner_id,
            kind=kind,
            created_at=created_at,
            updated_at=updated_at,
            payload=WrappedRecord.from_dict(data),
            metadata=WrappedRecord.from_base64(encoded_metadata) if encoded_metadata else None,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> EncryptedItem:
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise UnsupportedFormatError(f"Encrypted item is not valid JSON: {e}") from None
        return cls.from_dict(data)


def build_bundle(items: Iterable[EncryptedItem], exported_at: Optional[datetime] = None) -> str:
    """Serialize items into a version 1 export document."""
    exported_at = exported_at or datetime.now(timezone.utc)
    document = {
        "version": BUNDLE_VERSION,
        "exportedAt": exported_at.isoformat(),
        "items": [item.to_dict() for item in items],
    }
    return json.dumps(document, indent=2)


def parse_bundle(text: str) -> List[EncryptedItem]:
    """
    Parse an export document.

    Raises:
        UnsupportedFormatError: On a version other than 1 or a malformed document
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise UnsupportedFormatError(f"Export bundle is not valid JSON: {e}") from None
    if not isinstance(document, dict):
        raise UnsupportedFormatError("Export bundle must be a JSON object")

    version = document.get("version")
    if version != BUNDLE_VERSION or isinstance(version, bool):
        logger.warning("Rejected export bundle with version %r", version)
        raise UnsupportedFormatError(f"Unsupported export format version: {version!r}")

    items = document.get("items")
    if not isinstance(items, list):
        raise UnsupportedFormatError("Export bundle has no items list")
    return [EncryptedItem.from_dict(entry) for entry in items]
