"""
Guarded container for key material.

This module provides:
- SecretBuffer: fixed-length byte buffer with a single wipe path
"""

from __future__ import annotations

from types import TracebackType
from typing import Optional, Type

from .errors import ClearedAccessError, InvalidInputError
from .rng import RANDOM


class SecretBuffer:
    """
    Fixed-length key material with explicit wipe-on-release semantics.

    Uses a bytearray internally so the bytes can be overwritten in place.
    `wipe()` is the only release path: it writes fresh random bytes over the
    buffer and then zeroes it, so no recognizable pattern of the key is left
    behind. Callers must wipe explicitly (or use the buffer as a context
    manager); `__del__` is a best-effort backstop only.
    """

    __slots__ = ("_bytes", "_wiped")

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        """
        Create a SecretBuffer holding a private copy of `key_bytes`.

        Args:
            key_bytes: Raw key material

        Raises:
            InvalidInputError: If key_bytes is not bytes-like or is empty
        """
        if not isinstance(key_bytes, (bytes, bytearray, memoryview)):
            raise InvalidInputError("Key material must be bytes or bytearray")
        if len(key_bytes) == 0:
            raise InvalidInputError("Key material cannot be empty")
        self._bytes = bytearray(key_bytes)
        self._wiped = False

    @classmethod
    def generate(cls, size: int) -> SecretBuffer:
        """Generate a buffer of `size` cryptographically secure random bytes."""
        if size <= 0:
            raise InvalidInputError(f"Buffer size must be positive, got {size}")
        return cls(RANDOM.token_bytes(size))

    @property
    def is_wiped(self) -> bool:
        """True once wipe() has run."""
        return self._wiped

    def read(self) -> bytes:
        """
        Return the key material as immutable bytes.

        Raises:
            ClearedAccessError: If the buffer has been wiped
        """
        if self._wiped:
            raise ClearedAccessError("Key material has been wiped from memory")
        return bytes(self._bytes)

    def duplicate(self) -> SecretBuffer:
        """
        Return an independent copy with its own lifetime.

        Raises:
            ClearedAccessError: If the buffer has been wiped
        """
        if self._wiped:
            raise ClearedAccessError("Cannot duplicate wiped key material")
        return SecretBuffer(self._bytes)

    def wipe(self) -> None:
        """Overwrite with random bytes, then zeroes. Safe to call repeatedly."""
        if self._wiped:
            return
        RANDOM.fill(self._bytes)
        for i in range(len(self._bytes)):
            self._bytes[i] = 0
        self._wiped = True

    def __len__(self) -> int:
        """Return buffer length in bytes (unchanged by wiping)."""
        return len(self._bytes)

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        state = "wiped" if self._wiped else f"{len(self._bytes)} bytes"
        return f"SecretBuffer([REDACTED], {state})"

    def __enter__(self) -> SecretBuffer:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.wipe()

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_bytes") and not getattr(self, "_wiped", True):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0
