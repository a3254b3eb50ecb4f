"""
Tests for AES-256-GCM primitives.
"""

import pytest

from vault_engine import (
    NONCE_SIZE,
    TAG_SIZE,
    AeadCipher,
    AeadEnvelope,
    ClearedAccessError,
    DecryptionFailedError,
    InvalidInputError,
    SecretBuffer,
)


def _flip(data: bytes, index: int) -> bytes:
    mutable = bytearray(data)
    mutable[index] ^= 0x01
    return bytes(mutable)


class TestSealOpen:
    """Round-trip and authentication."""

    def test_round_trip(self, root_key):
        envelope = AeadCipher.seal(b"hello vault", root_key)
        assert AeadCipher.open(envelope, root_key) == b"hello vault"

    def test_round_trip_with_raw_bytes_key(self):
        key = bytes(range(32))
        envelope = AeadCipher.seal(b"payload", key)
        assert AeadCipher.open(envelope, key) == b"payload"

    def test_envelope_shape(self, root_key):
        envelope = AeadCipher.seal(b"abc", root_key)
        assert len(envelope.nonce) == NONCE_SIZE
        assert len(envelope.tag) == TAG_SIZE
        assert len(envelope.ciphertext) == 3

    def test_fresh_nonce_per_seal(self, root_key):
        first = AeadCipher.seal(b"same", root_key)
        second = AeadCipher.seal(b"same", root_key)
        assert first.nonce != second.nonce
        assert first.ciphertext != second.ciphertext

    def test_empty_plaintext(self, root_key):
        envelope = AeadCipher.seal(b"", root_key)
        assert AeadCipher.open(envelope, root_key) == b""

    @pytest.mark.parametrize("field", ["ciphertext", "nonce", "tag"])
    def test_bit_flip_detected(self, root_key, field):
        envelope = AeadCipher.seal(b"tamper evident", root_key)
        for index in range(len(getattr(envelope, field))):
            fields = {
                "ciphertext": envelope.ciphertext,
                "nonce": envelope.nonce,
                "tag": envelope.tag,
            }
            fields[field] = _flip(fields[field], index)
            with pytest.raises(DecryptionFailedError):
                AeadCipher.open(AeadEnvelope(**fields), root_key)

    def test_wrong_key(self, root_key, other_key):
        envelope = AeadCipher.seal(b"secret", root_key)
        with pytest.raises(DecryptionFailedError):
            AeadCipher.open(envelope, other_key)

    def test_aad_must_match(self, root_key):
        envelope = AeadCipher.seal(b"bound", root_key, b"item-1")
        assert AeadCipher.open(envelope, root_key, b"item-1") == b"bound"
        with pytest.raises(DecryptionFailedError):
            AeadCipher.open(envelope, root_key, b"item-2")
        with pytest.raises(DecryptionFailedError):
            AeadCipher.open(envelope, root_key)

    def test_error_message_is_generic(self, root_key, other_key):
        envelope = AeadCipher.seal(b"secret", root_key)
        with pytest.raises(DecryptionFailedError) as exc_info:
            AeadCipher.open(envelope, other_key)
        assert str(exc_info.value) == "Decryption failed"
        assert exc_info.value.user_message == "Unable to unlock this item"
        assert exc_info.value.__cause__ is None

    def test_seal_rejects_short_key(self):
        with pytest.raises(InvalidInputError):
            AeadCipher.seal(b"data", b"short")

    def test_open_rejects_short_key(self, root_key):
        envelope = AeadCipher.seal(b"data", root_key)
        with pytest.raises(DecryptionFailedError):
            AeadCipher.open(envelope, b"short")

    def test_truncated_nonce(self, root_key):
        envelope = AeadCipher.seal(b"data", root_key)
        broken = AeadEnvelope(envelope.ciphertext, envelope.nonce[:8], envelope.tag)
        with pytest.raises(DecryptionFailedError):
            AeadCipher.open(broken, root_key)


class TestBlobFormat:
    def test_blob_layout(self, root_key):
        envelope = AeadCipher.seal(b"\x00" * 32, root_key)
        blob = envelope.to_blob()
        assert len(blob) == 12 + 32 + 16
        assert blob[:12] == envelope.nonce
        assert blob[-16:] == envelope.tag

    def test_base64_round_trip(self, root_key):
        envelope = AeadCipher.seal(b"blob", root_key)
        restored = AeadEnvelope.from_base64(envelope.to_base64())
        assert restored == envelope
        assert AeadCipher.open(restored, root_key) == b"blob"

    def test_short_blob_rejected(self):
        with pytest.raises(DecryptionFailedError):
            AeadEnvelope.from_blob(b"\x00" * 20)

    def test_invalid_base64_rejected(self):
        with pytest.raises(DecryptionFailedError):
            AeadEnvelope.from_base64("not*base64!")

    def test_wiped_key_cannot_seal(self):
        key = SecretBuffer.generate(32)
        key.wipe()
        with pytest.raises(ClearedAccessError):
            AeadCipher.seal(b"data", key)
