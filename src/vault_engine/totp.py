"""
Time-based one-time passwords (RFC 6238).

Code generation delegates the HMAC and RFC 4226 dynamic truncation to
`cryptography`'s HOTP; this module adds the time step, the verification
window, base32 handling, provisioning URIs and backup codes.
"""

from __future__ import annotations

import base64
import hmac
import logging
import time
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.twofactor.hotp import HOTP

from .config import EngineConfig
from .errors import InvalidInputError, UnsupportedFormatError
from .rng import RANDOM

logger = logging.getLogger("vault_engine.totp")

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
BACKUP_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

DEFAULT_ALGORITHM = "SHA1"
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30

_ALGORITHMS = {
    "SHA1": hashes.SHA1,
    "SHA256": hashes.SHA256,
    "SHA512": hashes.SHA512,
}


@dataclass(frozen=True)
class TOTPParameters:
    """Shared secret and code shape for one authenticator entry."""

    secret: str  # base32
    algorithm: str = DEFAULT_ALGORITHM
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD

    def __post_init__(self) -> None:
        if self.algorithm not in _ALGORITHMS:
            raise InvalidInputError(f"Unsupported TOTP algorithm: {self.algorithm}")
        if self.digits not in (6, 8):
            raise InvalidInputError(f"TOTP digits must be 6 or 8, got {self.digits}")
        if not isinstance(self.period, int) or self.period <= 0:
            raise InvalidInputError(f"TOTP period must be a positive integer, got {self.period}")

    def __repr__(self) -> str:
        return (
            f"TOTPParameters(secret='[REDACTED]', algorithm={self.algorithm!r}, "
            f"digits={self.digits}, period={self.period})"
        )


@dataclass(frozen=True)
class ProvisioningInfo:
    """Parsed content of a provisioning URI."""

    issuer: str
    account_name: str
    parameters: TOTPParameters


def base32_encode(data: bytes) -> str:
    """RFC 4648 base32 without padding."""
    return base64.b32encode(data).decode("ascii").rstrip("=")


def base32_decode(encoded: str) -> bytes:
    """
    Decode base32, ignoring case and trailing padding.

    Leftover bits that do not fill a whole byte are dropped.

    Raises:
        InvalidInputError: If a character is outside the base32 alphabet
    """
    cleaned = encoded.upper().rstrip("=")
    output = bytearray()
    value = 0
    bits = 0
    for ch in cleaned:
        index = BASE32_ALPHABET.find(ch)
        if index < 0:
            raise InvalidInputError(f"Invalid base32 character: {ch!r}")
        value = ((value << 5) | index) & 0xFFFF
        bits += 5
        if bits >= 8:
            bits -= 8
            output.append((value >> bits) & 0xFF)
    return bytes(output)


def generate_secret(length: int = 20) -> str:
    """Random base32 secret of `length` bytes (160 bits by default)."""
    if length < 10:
        raise InvalidInputError("TOTP secret must be at least 10 bytes")
    return base32_encode(RANDOM.token_bytes(length))


def _hotp(params: TOTPParameters) -> HOTP:
    key = base32_decode(params.secret)
    if not key:
        raise InvalidInputError("TOTP secret cannot be empty")
    return HOTP(
        key,
        params.digits,
        _ALGORITHMS[params.algorithm](),
        enforce_key_length=False,
    )


def _counter(at_time: Optional[float], period: int) -> int:
    now = time.time() if at_time is None else at_time
    return int(now // period)


def generate(params: TOTPParameters, at_time: Optional[float] = None) -> str:
    """
    Generate the code for the time step containing `at_time`.

    Args:
        params: Secret and code shape
        at_time: Unix time in seconds (defaults to now)

    Returns:
        Zero-padded decimal code of params.digits characters
    """
    counter = _counter(at_time, params.period)
    return _hotp(params).generate(counter).decode("ascii")


def verify(
    code: str,
    params: TOTPParameters,
    window: Optional[int] = None,
    at_time: Optional[float] = None,
    config: Optional[EngineConfig] = None,
) -> bool:
    """
    Check a code against the current step and `window` steps either side.

    `window` defaults to config.totp_window. Comparison is constant-time
    per candidate.
    """
    if window is None:
        window = (config or EngineConfig()).totp_window
    if window < 0:
        raise InvalidInputError("Verification window cannot be negative")
    candidate = code.replace(" ", "")
    if len(candidate) != params.digits or not candidate.isdigit():
        return False

    hotp = _hotp(params)
    counter = _counter(at_time, params.period)
    matched = False
    for offset in range(-window, window + 1):
        step = counter + offset
        if step < 0:
            continue
        expected = hotp.generate(step).decode("ascii")
        if hmac.compare_digest(candidate, expected):
            matched = True
    return matched


def remaining_seconds(period: int = DEFAULT_PERIOD, at_time: Optional[float] = None) -> int:
    """Seconds until the current code expires."""
    now = int(time.time() if at_time is None else at_time)
    return period - (now % period)


def build_provisioning_url(params: TOTPParameters, issuer: str, account_name: str) -> str:
    """
    Build an otpauth:// URI for authenticator apps.

    Algorithm, digits and period are only emitted when they differ from
    SHA1/6/30.
    """
    if not issuer or not account_name:
        raise InvalidInputError("Issuer and account name are required")

    label = f"{quote(issuer, safe='')}:{quote(account_name, safe='@')}"
    query = {"secret": params.secret, "issuer": issuer}
    if params.algorithm != DEFAULT_ALGORITHM:
        query["algorithm"] = params.algorithm
    if params.digits != DEFAULT_DIGITS:
        query["digits"] = str(params.digits)
    if params.period != DEFAULT_PERIOD:
        query["period"] = str(params.period)
    return f"otpauth://totp/{label}?{urlencode(query, quote_via=quote)}"


def parse_provisioning_url(url: str) -> ProvisioningInfo:
    """
    Parse an otpauth://totp/ URI, or the short totp:// form.

    Raises:
        UnsupportedFormatError: If the URI is not a well-formed TOTP URI
    """
    parts = urlsplit(url.strip())
    if parts.scheme == "otpauth":
        if parts.netloc != "totp":
            raise UnsupportedFormatError("Only otpauth://totp/ URIs are supported")
        raw_label = parts.path[1:]
    elif parts.scheme == "totp":
        raw_label = parts.netloc + parts.path
    else:
        raise UnsupportedFormatError(f"Unsupported URI scheme: {parts.scheme!r}")

    query = {key: values[0] for key, values in parse_qs(parts.query).items()}
    # Split before unquoting: a ":" inside the issuer travels as %3A.
    if ":" in raw_label:
        raw_issuer, raw_account = raw_label.split(":", 1)
        label_issuer = unquote(raw_issuer).strip()
    else:
        label_issuer, raw_account = "", raw_label
    issuer = query.get("issuer", "").strip() or label_issuer
    account_name = unquote(raw_account).strip()
    if not issuer or not account_name:
        raise UnsupportedFormatError("TOTP URI is missing issuer or account name")

    secret = query.get("secret")
    if not secret:
        raise UnsupportedFormatError("TOTP URI is missing the secret")

    try:
        params = TOTPParameters(
            secret=secret,
            algorithm=query.get("algorithm", DEFAULT_ALGORITHM).upper(),
            digits=int(query.get("digits", DEFAULT_DIGITS)),
            period=int(query.get("period", DEFAULT_PERIOD)),
        )
        base32_decode(secret)
    except ValueError as e:
        raise UnsupportedFormatError(f"Invalid TOTP URI: {e}") from None

    return ProvisioningInfo(issuer=issuer, account_name=account_name, parameters=params)


def backup_codes(count: Optional[int] = None, config: Optional[EngineConfig] = None) -> List[str]:
    """Single-use recovery codes formatted XXXX-XXXX; `count` defaults to config.backup_code_count."""
    if count is None:
        count = (config or EngineConfig()).backup_code_count
    if count <= 0:
        raise InvalidInputError("Backup code count must be positive")
    codes = []
    for _ in range(count):
        raw = "".join(RANDOM.choice(BACKUP_CODE_ALPHABET) for _ in range(8))
        codes.append(f"{raw[:4]}-{raw[4:]}")
    logger.debug("Generated %d backup codes", count)
    return codes
