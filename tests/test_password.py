"""
Tests for password analysis and generation.
"""

import math
import string

import pytest

from vault_engine import (
    PASSWORD_PRESETS,
    InvalidInputError,
    PasswordOptions,
    analyze_password,
    generate_passphrase,
    generate_password,
)
from vault_engine.password import AMBIGUOUS, SPECIAL, calculate_entropy
from vault_engine.wordlist import WORDLIST


class TestAnalyze:
    def test_short_password_fails_policy(self):
        result = analyze_password("short")
        assert not result.meets_minimum_policy
        assert "Password must be at least 12 characters" in result.violations

    def test_strong_password_meets_policy(self):
        result = analyze_password("Tr0ub4dor&3XYZ!")
        assert result.meets_minimum_policy
        assert result.violations == []

    def test_empty_password(self):
        result = analyze_password("")
        assert result.score == 0
        assert result.entropy_bits == 0
        assert result.violations == ["Password is required"]
        assert not result.meets_minimum_policy

    def test_every_violation_listed(self):
        result = analyze_password("abcdefghijklm")
        assert result.violations == [
            "Password must contain at least one uppercase letter",
            "Password must contain at least one number",
            "Password must contain at least one special character",
        ]

    def test_too_long(self):
        result = analyze_password("Aa1!" * 40)
        assert "Password must not exceed 128 characters" in result.violations

    def test_score_range_and_feedback(self):
        weak = analyze_password("password")
        strong = analyze_password("vP9#qL2!xR7$wT4m")
        assert 0 <= weak.score <= 4
        assert weak.score < 3
        assert strong.score >= 3
        assert isinstance(weak.suggestions, list)
        assert weak.crack_time

    def test_context_words_lower_score(self):
        plain = analyze_password("alicewonderland")
        with_context = analyze_password("alicewonderland", ["alice", "wonderland"])
        assert with_context.score <= plain.score


class TestEntropy:
    def test_lowercase_only(self):
        assert calculate_entropy("abcd") == pytest.approx(4 * math.log2(26))

    def test_all_classes(self):
        assert calculate_entropy("aA1!") == pytest.approx(4 * math.log2(94))

    def test_empty(self):
        assert calculate_entropy("") == 0


class TestGeneratePassword:
    def test_every_class_always_present(self):
        options = PasswordOptions(length=16)
        for _ in range(1000):
            password = generate_password(options)
            assert len(password) == 16
            assert any(ch in string.ascii_uppercase for ch in password)
            assert any(ch in string.ascii_lowercase for ch in password)
            assert any(ch in string.digits for ch in password)
            assert any(ch in SPECIAL for ch in password)

    def test_minimum_length_has_every_class(self):
        for _ in range(200):
            password = generate_password(PasswordOptions(length=4))
            assert any(ch in SPECIAL for ch in password)
            assert any(ch in string.digits for ch in password)

    def test_exclude_ambiguous(self):
        options = PasswordOptions(length=64, exclude_ambiguous=True)
        for _ in range(50):
            assert not set(generate_password(options)) & set(AMBIGUOUS)

    def test_pin_preset(self):
        pin = generate_password(PASSWORD_PRESETS["pin"])
        assert len(pin) == 6
        assert pin.isdigit()

    def test_presets(self):
        assert set(PASSWORD_PRESETS) == {"strong", "maximum", "pin", "memorable"}
        assert len(generate_password(PASSWORD_PRESETS["maximum"])) == 32
        assert not set(generate_password(PASSWORD_PRESETS["memorable"])) & set(SPECIAL)

    @pytest.mark.parametrize("length", [3, 257])
    def test_length_bounds(self, length):
        with pytest.raises(InvalidInputError):
            generate_password(PasswordOptions(length=length))

    def test_no_class_selected(self):
        options = PasswordOptions(uppercase=False, lowercase=False, numbers=False, special=False)
        with pytest.raises(InvalidInputError):
            generate_password(options)


class TestPassphrase:
    def test_default(self):
        words = generate_passphrase().split("-")
        assert len(words) == 4
        assert all(word in WORDLIST for word in words)

    def test_separator_and_capitalize(self):
        words = generate_passphrase(6, separator=" ", capitalize=True).split(" ")
        assert len(words) == 6
        assert all(word[0].isupper() for word in words)

    @pytest.mark.parametrize("count", [2, 11])
    def test_word_count_bounds(self, count):
        with pytest.raises(InvalidInputError):
            generate_passphrase(count)
