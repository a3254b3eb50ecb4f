"""
Exception classes for vault engine operations.

Every error raised by the engine derives from VaultEngineError so callers can
catch the whole family at their boundary.
"""

from __future__ import annotations

# The only text a DecryptionFailedError should ever turn into for an end user.
USER_FACING_MESSAGE = "Unable to unlock this item"


class VaultEngineError(Exception):
    """Base exception for all vault engine operations."""

    pass


class InvalidInputError(VaultEngineError, ValueError):
    """Malformed secret, salt, length or option supplied by the caller."""

    pass


class DecryptionFailedError(VaultEngineError):
    """
    Authenticated decryption failed.

    Raised for tag mismatch, wrong key, wrong AAD, truncated or otherwise
    corrupt envelopes. The message never says which.
    """

    def __init__(self, message: str = "Decryption failed") -> None:
        super().__init__(message)

    @property
    def user_message(self) -> str:
        """Message safe to show to an end user."""
        return USER_FACING_MESSAGE


class EngineLockedError(VaultEngineError):
    """Operation attempted after the root key was released."""

    pass


class UnsupportedFormatError(VaultEngineError):
    """Unknown export version, malformed bundle or provisioning URI."""

    pass


class ClearedAccessError(VaultEngineError):
    """Read attempted on a wiped SecretBuffer."""

    pass


class ConfigError(VaultEngineError):
    """Configuration error."""

    pass
