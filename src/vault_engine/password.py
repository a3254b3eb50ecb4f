"""
Password strength analysis and generation.

Strength scoring delegates to zxcvbn (dictionary, keyboard pattern, date
and leetspeak detection). Policy checks and the entropy estimate are
computed locally. All randomness comes from rng.RANDOM.
"""

from __future__ import annotations

import logging
import math
import string
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from zxcvbn import zxcvbn

from .errors import InvalidInputError
from .rng import RANDOM
from .wordlist import WORDLIST

logger = logging.getLogger("vault_engine.password")

MIN_LENGTH = 12
MAX_LENGTH = 128

MIN_GENERATED_LENGTH = 4
MAX_GENERATED_LENGTH = 256
MAX_GENERATION_ATTEMPTS = 10

MIN_PASSPHRASE_WORDS = 3
MAX_PASSPHRASE_WORDS = 10

# zxcvbn refuses longer input
ZXCVBN_MAX_INPUT = 72

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SPECIAL = "!@#$%^&*()_+-=[]{}|;:,.<>?"
AMBIGUOUS = "il1Lo0O"

# Charset sizes used by the entropy estimate
_LOWER_POOL = 26
_UPPER_POOL = 26
_DIGIT_POOL = 10
_SPECIAL_POOL = 32


@dataclass
class PasswordAnalysis:
    """Result of analyze_password()."""

    score: int  # 0..4
    entropy_bits: float
    meets_minimum_policy: bool
    violations: List[str] = field(default_factory=list)
    warning: str = ""
    suggestions: List[str] = field(default_factory=list)
    crack_time: str = "instant"


@dataclass(frozen=True)
class PasswordOptions:
    """Options for generate_password()."""

    length: int = 16
    uppercase: bool = True
    lowercase: bool = True
    numbers: bool = True
    special: bool = True
    exclude_ambiguous: bool = False


PASSWORD_PRESETS: Dict[str, PasswordOptions] = {
    "strong": PasswordOptions(length=16, exclude_ambiguous=True),
    "maximum": PasswordOptions(length=32),
    "pin": PasswordOptions(length=6, uppercase=False, lowercase=False, special=False),
    "memorable": PasswordOptions(length=20, special=False, exclude_ambiguous=True),
}


def _character_classes(password: str) -> Dict[str, bool]:
    return {
        "lower": any(ch in LOWERCASE for ch in password),
        "upper": any(ch in UPPERCASE for ch in password),
        "digit": any(ch in DIGITS for ch in password),
        "special": any(not (ch.isascii() and ch.isalnum()) for ch in password),
    }


def calculate_entropy(password: str) -> float:
    """
    Estimate entropy in bits as length * log2(charset size).

    The charset is the union of the classes actually present.
    """
    if not password:
        return 0.0
    classes = _character_classes(password)
    charset = (
        (_LOWER_POOL if classes["lower"] else 0)
        + (_UPPER_POOL if classes["upper"] else 0)
        + (_DIGIT_POOL if classes["digit"] else 0)
        + (_SPECIAL_POOL if classes["special"] else 0)
    )
    return len(password) * math.log2(charset)


def policy_violations(password: str) -> List[str]:
    """Every unmet rule of the minimum password policy."""
    if not password:
        return ["Password is required"]

    violations = []
    if len(password) < MIN_LENGTH:
        violations.append(f"Password must be at least {MIN_LENGTH} characters")
    if len(password) > MAX_LENGTH:
        violations.append(f"Password must not exceed {MAX_LENGTH} characters")

    classes = _character_classes(password)
    if not classes["upper"]:
        violations.append("Password must contain at least one uppercase letter")
    if not classes["lower"]:
        violations.append("Password must contain at least one lowercase letter")
    if not classes["digit"]:
        violations.append("Password must contain at least one number")
    if not classes["special"]:
        violations.append("Password must contain at least one special character")
    return violations


def analyze_password(password: str, context_words: Sequence[str] = ()) -> PasswordAnalysis:
    """
    Score a password and check it against the minimum policy.

    Args:
        password: Candidate password
        context_words: Words that make a password weaker for this user
            (account email, name, site name)

    Returns:
        PasswordAnalysis; meets_minimum_policy is True iff violations is empty
    """
    if not password:
        return PasswordAnalysis(
            score=0,
            entropy_bits=0.0,
            meets_minimum_policy=False,
            violations=["Password is required"],
            warning="No password provided",
            suggestions=["Password cannot be empty"],
        )

    violations = policy_violations(password)
    result = zxcvbn(password[:ZXCVBN_MAX_INPUT], user_inputs=[w for w in context_words if w])
    feedback = result.get("feedback") or {}

    return PasswordAnalysis(
        score=int(result["score"]),
        entropy_bits=calculate_entropy(password),
        meets_minimum_policy=not violations,
        violations=violations,
        warning=feedback.get("warning") or "",
        suggestions=list(feedback.get("suggestions") or []),
        crack_time=str(result["crack_times_display"]["offline_slow_hashing_1e4_per_second"]),
    )


def _pools(options: PasswordOptions) -> List[str]:
    requested = [
        (options.uppercase, UPPERCASE),
        (options.lowercase, LOWERCASE),
        (options.numbers, DIGITS),
        (options.special, SPECIAL),
    ]
    pools = []
    for enabled, chars in requested:
        if not enabled:
            continue
        if options.exclude_ambiguous:
            chars = "".join(ch for ch in chars if ch not in AMBIGUOUS)
        pools.append(chars)
    return pools


def generate_password(options: Optional[PasswordOptions] = None) -> str:
    """
    Generate a random password containing every requested class.

    Draws are rejected and retried a bounded number of times; if a class is
    still missing, one character of each class is spliced into distinct
    random positions.

    Raises:
        InvalidInputError: If length is out of range or no class is requested
    """
    options = options or PasswordOptions()
    if not MIN_GENERATED_LENGTH <= options.length <= MAX_GENERATED_LENGTH:
        raise InvalidInputError(
            f"Password length must be between {MIN_GENERATED_LENGTH} and {MAX_GENERATED_LENGTH}"
        )
    pools = _pools(options)
    if not pools:
        raise InvalidInputError("At least one character class must be selected")

    charset = "".join(pools)
    chars: List[str] = []
    for _ in range(MAX_GENERATION_ATTEMPTS):
        chars = [RANDOM.choice(charset) for _ in range(options.length)]
        if all(any(ch in pool for ch in chars) for pool in pools):
            return "".join(chars)

    logger.debug("Password draw missed a class; splicing")
    positions = list(range(options.length))
    for pool in pools:
        index = positions.pop(RANDOM.randbelow(len(positions)))
        chars[index] = RANDOM.choice(pool)
    return "".join(chars)


def generate_passphrase(word_count: int = 4, separator: str = "-", capitalize: bool = False) -> str:
    """Random passphrase of `word_count` words from the built-in wordlist."""
    if not MIN_PASSPHRASE_WORDS <= word_count <= MAX_PASSPHRASE_WORDS:
        raise InvalidInputError(
            f"Word count must be between {MIN_PASSPHRASE_WORDS} and {MAX_PASSPHRASE_WORDS}"
        )
    words = [RANDOM.choice(WORDLIST) for _ in range(word_count)]
    if capitalize:
        words = [word.capitalize() for word in words]
    return separator.join(words)
