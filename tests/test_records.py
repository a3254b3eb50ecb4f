"""
Tests for the record model and the storage wire format.
"""

import json
from datetime import datetime, timezone

import pytest

from vault_engine import (
    ApiKeyRecord,
    CustomField,
    EncryptedItem,
    IdentityRecord,
    LicenseRecord,
    RecordKind,
    RecordMetadata,
    UnsupportedFormatError,
)
from vault_engine.envelope import build_bundle, parse_bundle
from vault_engine.records import record_from_dict, record_to_dict

OWNER_ID = "7f1c2d9e-0000-4000-8000-000000000001"


class TestRecordSerialization:
    def test_round_trip_every_sample(self, sample_records):
        for record in sample_records:
            data = json.loads(json.dumps(record_to_dict(record)))
            assert data["kind"] == record.kind.value
            assert record_from_dict(data) == record

    def test_round_trip_with_custom_fields_and_datetimes(self):
        record = ApiKeyRecord(
            owner_id=OWNER_ID,
            name="Stripe live",
            service="stripe",
            api_key="sk_live_abc",
            expires_at=datetime(2027, 1, 1, tzinfo=timezone.utc),
            custom_fields=[CustomField(label="webhook", value="whsec_1", hidden=True)],
        )
        restored = record_from_dict(json.loads(json.dumps(record_to_dict(record))))
        assert restored == record
        assert restored.expires_at.tzinfo is not None
        assert restored.custom_fields[0].hidden is True

    def test_unknown_kind(self):
        with pytest.raises(UnsupportedFormatError):
            record_from_dict({"kind": "spaceship", "owner_id": OWNER_ID})

    def test_missing_required_field(self):
        with pytest.raises(UnsupportedFormatError):
            record_from_dict({"kind": "login", "owner_id": OWNER_ID, "name": "x"})

    def test_unknown_keys_ignored(self, note):
        data = record_to_dict(note)
        data["future_field"] = 1
        assert record_from_dict(data) == note


class TestRedaction:
    def test_login_repr_hides_password(self, login):
        text = repr(login)
        assert login.password not in text
        assert "GitHub" in text
        assert "[REDACTED]" in text

    def test_card_repr_hides_number_and_cvv(self, card):
        text = repr(card)
        assert card.card_number not in text
        assert "cvv='[REDACTED]'" in text

    def test_note_repr_hides_content(self, note):
        assert "hunter2" not in repr(note)


class TestMetadata:
    def test_login_metadata(self, login):
        meta = login.metadata()
        assert meta.kind is RecordKind.LOGIN
        assert meta.name == "GitHub"
        assert meta.username == "alice@example.com"
        assert meta.url == "https://github.com"
        assert meta.tags == ["work", "dev"]

    def test_card_metadata_only_last4(self, card):
        meta = card.metadata()
        assert meta.last4 == "1234"
        assert meta.name == "visa 1234"
        assert "4111" not in json.dumps(meta.to_dict())

    def test_display_names(self, totp_record):
        identity = IdentityRecord(
            owner_id=OWNER_ID,
            document_type="passport",
            first_name="Alice",
            last_name="Example",
            date_of_birth="1990-01-01",
            document_number="X123",
            issuing_country="PT",
        )
        license_record = LicenseRecord(owner_id=OWNER_ID, product="IDE Pro", license_key="AAAA")
        assert identity.display_name == "Alice Example - passport"
        assert license_record.display_name == "IDE Pro"
        assert totp_record.metadata().issuer == "GitHub"

    def test_metadata_dict_round_trip(self, login):
        meta = login.metadata()
        assert RecordMetadata.from_dict(meta.to_dict()) == meta

    @pytest.mark.parametrize(
        "query,expected",
        [("git", True), ("ALICE", True), ("dev", True), ("", True), ("gitlab", False)],
    )
    def test_matches(self, login, query, expected):
        assert login.metadata().matches(query) is expected


class TestWireFormat:
    def test_item_fields(self, service, login):
        data = service.encrypt_item(login).to_dict()
        assert set(data) == {
            "id",
            "ownerId",
            "kind",
            "createdAt",
            "updatedAt",
            "ciphertext",
            "wrappedKey",
            "nonce",
            "tag",
            "encryptedMetadata",
        }
        assert data["kind"] == "login"
        assert login.password not in json.dumps(data)

    def test_item_json_round_trip(self, service, login):
        item = service.encrypt_item(login)
        assert EncryptedItem.from_json(item.to_json()) == item

    def test_missing_identifier(self, service, login):
        data = service.encrypt_item(login).to_dict()
        del data["ownerId"]
        with pytest.raises(UnsupportedFormatError):
            EncryptedItem.from_dict(data)

    def test_bundle_round_trip(self, service, sample_records):
        items = [service.encrypt_item(record) for record in sample_records]
        document = json.loads(build_bundle(items))
        assert document["version"] == 1
        assert "exportedAt" in document
        assert parse_bundle(build_bundle(items)) == items

    @pytest.mark.parametrize("version", [0, 2, "1", None, True])
    def test_bundle_version_rejected(self, version):
        text = json.dumps({"version": version, "exportedAt": "x", "items": []})
        with pytest.raises(UnsupportedFormatError):
            parse_bundle(text)

    @pytest.mark.parametrize("text", ["", "not json", "[]", '{"version": 1}'])
    def test_malformed_bundle_rejected(self, text):
        with pytest.raises(UnsupportedFormatError):
            parse_bundle(text)
