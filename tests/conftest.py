"""
Pytest configuration and fixtures for vault engine tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest

from vault_engine import (
    CardRecord,
    LoginRecord,
    NoteRecord,
    SecretBuffer,
    TotpRecord,
    VaultService,
)

OWNER_ID = "7f1c2d9e-0000-4000-8000-000000000001"


@pytest.fixture
def root_key() -> Generator[SecretBuffer, None, None]:
    """Random 32-byte root encryption key, wiped after the test."""
    key = SecretBuffer.generate(32)
    yield key
    key.wipe()


@pytest.fixture
def other_key() -> Generator[SecretBuffer, None, None]:
    """A second, unrelated root key."""
    key = SecretBuffer.generate(32)
    yield key
    key.wipe()


@pytest.fixture
def service(root_key: SecretBuffer) -> Generator[VaultService, None, None]:
    """Unlocked VaultService owning a copy of root_key."""
    svc = VaultService(root_key.duplicate())
    yield svc
    svc.release()


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def login(now: datetime) -> LoginRecord:
    """Login with a strong, recently rotated password."""
    return LoginRecord(
        owner_id=OWNER_ID,
        name="GitHub",
        username="alice@example.com",
        password="vP9#qL2!xR7$wT4m",
        url="https://github.com",
        tags=["work", "dev"],
        created_at=now - timedelta(days=10),
        updated_at=now - timedelta(days=10),
        password_changed=now - timedelta(days=10),
        password_strength=4,
    )


@pytest.fixture
def card() -> CardRecord:
    return CardRecord(
        owner_id=OWNER_ID,
        cardholder_name="Alice Example",
        card_number="4111 1111 1111 1234",
        expiry_month="09",
        expiry_year="2029",
        cvv="123",
        brand="visa",
    )


@pytest.fixture
def note() -> NoteRecord:
    return NoteRecord(
        owner_id=OWNER_ID,
        title="Wifi",
        content="SSID home / passphrase hunter2",
        tags=["home"],
    )


@pytest.fixture
def totp_record() -> TotpRecord:
    return TotpRecord(
        owner_id=OWNER_ID,
        issuer="GitHub",
        account_name="alice@example.com",
        secret="GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ",
    )


@pytest.fixture
def sample_records(login: LoginRecord, card: CardRecord, note: NoteRecord, totp_record: TotpRecord) -> list:
    """One record of several kinds."""
    return [login, card, note, totp_record]
