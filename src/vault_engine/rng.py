"""
Cryptographically secure random source.

Every component draws randomness through the single module-level RANDOM
instance, so nonces, salts, keys and generated passwords all come from the
same OS CSPRNG. `secrets` is backed by os.urandom and safe to call from
multiple threads.
"""

from __future__ import annotations

import secrets
from typing import Sequence, TypeVar

T = TypeVar("T")


class SecureRandom:
    """Thin interface over the OS CSPRNG."""

    def token_bytes(self, length: int) -> bytes:
        """Return `length` random bytes."""
        return secrets.token_bytes(length)

    def fill(self, buffer: bytearray) -> None:
        """Overwrite `buffer` in place with random bytes."""
        buffer[:] = secrets.token_bytes(len(buffer))

    def randbelow(self, upper: int) -> int:
        """Return a uniform random int in [0, upper)."""
        return secrets.randbelow(upper)

    def choice(self, seq: Sequence[T]) -> T:
        """Return a uniformly chosen element of a non-empty sequence."""
        return secrets.choice(seq)


RANDOM = SecureRandom()


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate

    Returns:
        Random bytes of specified length
    """
    return RANDOM.token_bytes(length)
