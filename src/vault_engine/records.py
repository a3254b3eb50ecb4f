"""
Plaintext vault record model.

This module provides:
- RecordKind: the closed set of record kinds
- VaultRecord and one dataclass per kind
- RecordMetadata: the reduced projection used for search and listing
- record_to_dict / record_from_dict: JSON-ready (de)serialization

Records only ever exist in plaintext inside the engine. Their repr redacts
every secret-bearing field so they are safe to drop into a log line or a
traceback.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Type
from uuid import uuid4

from .errors import UnsupportedFormatError
from .totp import TOTPParameters

_DATETIME_FIELDS = frozenset({"created_at", "updated_at", "password_changed", "expires_at"})
_REDACTED = "[REDACTED]"


class RecordKind(str, Enum):
    """Kind tag stored alongside every encrypted item."""

    LOGIN = "login"
    CARD = "card"
    NOTE = "note"
    IDENTITY = "identity"
    FILE = "file"
    TOTP = "totp"
    API_KEY = "api_key"
    LICENSE = "license"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


@dataclass
class CustomField:
    """User-defined extra field."""

    label: str
    value: str
    field_type: str = "text"  # text | password | email | url | tel
    hidden: bool = False


@dataclass(kw_only=True, repr=False)
class VaultRecord:
    """Fields shared by every record kind."""

    kind: ClassVar[RecordKind]
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"notes", "custom_fields"})

    owner_id: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    favorite: bool = False
    tags: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    custom_fields: List[CustomField] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Human-readable name shown in listings."""
        raise NotImplementedError

    def metadata(self) -> RecordMetadata:
        """Project the record down to its searchable, non-secret fields."""
        return RecordMetadata(
            name=self.display_name,
            kind=self.kind,
            favorite=self.favorite,
            tags=list(self.tags),
        )

    def __repr__(self) -> str:
        redacted = type(self).secret_fields | VaultRecord.secret_fields
        parts = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in redacted and value:
                parts.append(f"{f.name}={_REDACTED!r}")
            else:
                parts.append(f"{f.name}={value!r}")
        return f"{type(self).__name__}({', '.join(parts)})"


@dataclass(kw_only=True, repr=False)
class LoginRecord(VaultRecord):
    """Website or application credential."""

    kind: ClassVar[RecordKind] = RecordKind.LOGIN
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"password", "totp_secret"})

    name: str
    password: str
    username: Optional[str] = None
    url: Optional[str] = None
    totp_secret: Optional[str] = None
    password_changed: Optional[datetime] = None
    compromised: bool = False
    password_strength: Optional[int] = None  # cached 0..4 score

    @property
    def display_name(self) -> str:
        return self.name

    def metadata(self) -> RecordMetadata:
        meta = super().metadata()
        meta.username = self.username
        meta.url = self.url
        return meta


@dataclass(kw_only=True, repr=False)
class CardRecord(VaultRecord):
    """Payment card. Only the last four digits ever reach the metadata."""

    kind: ClassVar[RecordKind] = RecordKind.CARD
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"card_number", "cvv", "pin"})

    cardholder_name: str
    card_number: str
    expiry_month: str
    expiry_year: str
    cvv: Optional[str] = None
    pin: Optional[str] = None
    card_type: str = "credit"  # credit | debit | prepaid
    brand: str = "other"  # visa | mastercard | amex | discover | other
    nickname: Optional[str] = None

    @property
    def last4(self) -> str:
        digits = "".join(ch for ch in self.card_number if ch.isdigit())
        return digits[-4:]

    @property
    def display_name(self) -> str:
        return self.nickname or f"{self.brand} {self.last4}"

    def metadata(self) -> RecordMetadata:
        meta = super().metadata()
        meta.last4 = self.last4
        return meta


@dataclass(kw_only=True, repr=False)
class NoteRecord(VaultRecord):
    kind: ClassVar[RecordKind] = RecordKind.NOTE
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"content"})

    title: str
    content: str
    category: Optional[str] = None
    pinned: bool = False

    @property
    def display_name(self) -> str:
        return self.title


@dataclass(kw_only=True, repr=False)
class IdentityRecord(VaultRecord):
    """Government ID or other identity document."""

    kind: ClassVar[RecordKind] = RecordKind.IDENTITY
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"document_number", "date_of_birth"})

    document_type: str  # passport | drivers_license | national_id | ssn | other
    first_name: str
    last_name: str
    date_of_birth: str
    document_number: str
    issuing_country: str
    middle_name: Optional[str] = None
    expiry_date: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name} - {self.document_type}"


@dataclass(kw_only=True, repr=False)
class FileRecord(VaultRecord):
    """Reference to an encrypted attachment held by the storage collaborator."""

    kind: ClassVar[RecordKind] = RecordKind.FILE
    secret_fields: ClassVar[FrozenSet[str]] = frozenset()

    file_name: str
    file_size: int
    mime_type: str
    storage_key: str
    checksum: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.file_name


@dataclass(kw_only=True, repr=False)
class TotpRecord(VaultRecord):
    """Authenticator entry."""

    kind: ClassVar[RecordKind] = RecordKind.TOTP
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"secret"})

    issuer: str
    account_name: str
    secret: str  # base32
    algorithm: str = "SHA1"
    digits: int = 6
    period: int = 30

    @property
    def display_name(self) -> str:
        return f"{self.issuer} - {self.account_name}"

    def metadata(self) -> RecordMetadata:
        meta = super().metadata()
        meta.issuer = self.issuer
        return meta

    def parameters(self) -> TOTPParameters:
        """Return the TOTPParameters for code generation."""
        return TOTPParameters(
            secret=self.secret,
            algorithm=self.algorithm,
            digits=self.digits,
            period=self.period,
        )


@dataclass(kw_only=True, repr=False)
class ApiKeyRecord(VaultRecord):
    kind: ClassVar[RecordKind] = RecordKind.API_KEY
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"api_key", "api_secret"})

    name: str
    service: str
    api_key: str
    api_secret: Optional[str] = None
    environment: Optional[str] = None  # e.g. production | staging
    expires_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name

    def metadata(self) -> RecordMetadata:
        meta = super().metadata()
        meta.service = self.service
        return meta


@dataclass(kw_only=True, repr=False)
class LicenseRecord(VaultRecord):
    kind: ClassVar[RecordKind] = RecordKind.LICENSE
    secret_fields: ClassVar[FrozenSet[str]] = frozenset({"license_key"})

    product: str
    license_key: str
    registered_to: Optional[str] = None
    vendor: Optional[str] = None
    seats: Optional[int] = None
    expiry_date: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.product


RECORD_TYPES: Dict[RecordKind, Type[VaultRecord]] = {
    cls.kind: cls
    for cls in (
        LoginRecord,
        CardRecord,
        NoteRecord,
        IdentityRecord,
        FileRecord,
        TotpRecord,
        ApiKeyRecord,
        LicenseRecord,
    )
}


@dataclass
class RecordMetadata:
    """Separately encrypted projection used for listing and search."""

    name: str
    kind: RecordKind
    favorite: bool = False
    tags: List[str] = field(default_factory=list)
    username: Optional[str] = None
    url: Optional[str] = None
    last4: Optional[str] = None
    service: Optional[str] = None
    issuer: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "favorite": self.favorite,
            "tags": list(self.tags),
        }
        for key in ("username", "url", "last4", "service", "issuer"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RecordMetadata:
        """
        Rebuild metadata from its decrypted JSON form.

        Raises:
            UnsupportedFormatError: If required fields are missing or invalid
        """
        try:
            return cls(
                name=data["name"],
                kind=RecordKind(data["kind"]),
                favorite=bool(data.get("favorite", False)),
                tags=list(data.get("tags", [])),
                username=data.get("username"),
                url=data.get("url"),
                last4=data.get("last4"),
                service=data.get("service"),
                issuer=data.get("issuer"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UnsupportedFormatError(f"Invalid record metadata: {e}") from None

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over name, username, url and tags."""
        needle = query.strip().lower()
        if not needle:
            return True
        haystack = [self.name, self.username, self.url, *self.tags]
        return any(needle in value.lower() for value in haystack if value)


def record_to_dict(record: VaultRecord) -> Dict[str, Any]:
    """Serialize a record to a JSON-ready dict tagged with its kind."""
    data: Dict[str, Any] = {"kind": record.kind.value}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, datetime):
            value = value.isoformat()
        elif f.name == "custom_fields":
            value = [asdict(cf) for cf in value]
        elif isinstance(value, list):
            value = list(value)
        data[f.name] = value
    return data


def record_from_dict(data: Dict[str, Any]) -> VaultRecord:
    """
    Rebuild a typed record from record_to_dict() output.

    Unknown keys are ignored.

    Raises:
        UnsupportedFormatError: On unknown kind, missing fields or bad values
    """
    if not isinstance(data, dict):
        raise UnsupportedFormatError("Record payload must be a JSON object")
    try:
        cls = RECORD_TYPES[RecordKind(data.get("kind"))]
    except ValueError:
        raise UnsupportedFormatError(f"Unknown record kind: {data.get('kind')!r}") from None

    kwargs: Dict[str, Any] = {}
    try:
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name in _DATETIME_FIELDS and value is not None:
                value = datetime.fromisoformat(value)
            elif f.name == "custom_fields":
                value = [CustomField(**cf) for cf in value]
            kwargs[f.name] = value
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise UnsupportedFormatError(f"Invalid {cls.kind.value} record: {e}") from None
