"""
Root key derivation from the user's master secret.

Argon2id turns a low-entropy secret plus a per-account salt into 64 bytes
of key material, split into the Master Encryption Key (wraps record keys)
and the Authentication Key (handed to the authentication collaborator).

The Argon2id parameters below are a frozen contract: lowering them weakens
every vault derived with them and requires a security review.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Optional, Type

from argon2.low_level import Type as Argon2Type
from argon2.low_level import hash_secret_raw

from .errors import InvalidInputError
from .rng import RANDOM
from .secret_buffer import SecretBuffer

logger = logging.getLogger("vault_engine.kdf")

KEY_SIZE = 32
SALT_SIZE = 32

# Argon2id parameters, calibrated for ~300ms on commodity hardware
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 64 * 1024  # KiB (64 MiB)
ARGON2_PARALLELISM = 4
ARGON2_OUTPUT_SIZE = 2 * KEY_SIZE  # MEK || AK


@dataclass
class RootKeyPair:
    """Keys derived from one unlock. Both halves are wiped together."""

    encryption_key: SecretBuffer
    auth_key: SecretBuffer
    salt: bytes

    def wipe(self) -> None:
        """Wipe both keys."""
        self.encryption_key.wipe()
        self.auth_key.wipe()

    def __enter__(self) -> RootKeyPair:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.wipe()


def generate_salt() -> bytes:
    """
    Generate a random per-account salt.

    Salts must be unique per account; a shared salt lets an attacker run one
    dictionary attack against many accounts at once.
    """
    return RANDOM.token_bytes(SALT_SIZE)


def derive(secret: str, salt: bytes) -> RootKeyPair:
    """
    Derive the root key pair from a master secret using Argon2id.

    This call is CPU and memory bound and cannot be cancelled; a partial
    derivation is never reused.

    Args:
        secret: User's master secret (encoded as UTF-8)
        salt: 32-byte per-account salt

    Returns:
        RootKeyPair with encryption_key = output[0:32], auth_key = output[32:64]

    Raises:
        InvalidInputError: If secret is empty or salt is not 32 bytes
    """
    if not isinstance(secret, str) or not secret:
        raise InvalidInputError("Secret cannot be empty")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise InvalidInputError(f"Salt must be exactly {SALT_SIZE} bytes")

    secret_bytes = bytearray(secret.encode("utf-8"))
    material = bytearray()
    try:
        material = bytearray(
            hash_secret_raw(
                secret=bytes(secret_bytes),
                salt=bytes(salt),
                time_cost=ARGON2_TIME_COST,
                memory_cost=ARGON2_MEMORY_COST,
                parallelism=ARGON2_PARALLELISM,
                hash_len=ARGON2_OUTPUT_SIZE,
                type=Argon2Type.ID,
            )
        )
        with memoryview(material) as view:
            pair = RootKeyPair(
                encryption_key=SecretBuffer(view[:KEY_SIZE]),
                auth_key=SecretBuffer(view[KEY_SIZE:]),
                salt=bytes(salt),
            )
    finally:
        for buf in (secret_bytes, material):
            for i in range(len(buf)):
                buf[i] = 0

    logger.debug("Derived root key pair")
    return pair
