"""
Tests for the vault security analyzer.
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from vault_engine import EngineConfig, SecurityAnalyzer


@pytest.fixture
def analyzer() -> SecurityAnalyzer:
    return SecurityAnalyzer()


@pytest.fixture
def second_login(login):
    """Another clean login with its own id and password."""
    return replace(login, id="login-2", name="GitLab", password="Zk8&fN3@pQ6^hJ1s", tags=[])


class TestAnalyze:
    def test_clean_vault(self, analyzer, login, second_login, now):
        report = analyzer.analyze([login, second_login], now=now)
        assert report.weak == []
        assert report.reused == []
        assert report.stale == []
        assert report.flagged == []

    def test_shared_password_reported_for_every_member(self, analyzer, login, second_login, now):
        second_login.password = login.password
        report = analyzer.analyze([login, second_login], now=now)
        assert report.reused == [login, second_login]

    def test_policy_failing_password_is_weak(self, analyzer, login, now):
        login.password = "password123"
        login.password_strength = None
        report = analyzer.analyze([login], now=now)
        assert report.weak == [login]

    def test_high_scoring_passphrase_failing_policy_is_weak(self, analyzer, login, now):
        login.password = "correct horse battery staple unicorn galaxy"
        login.password_strength = None
        assert analyzer.analyze([login], now=now).weak == [login]

    def test_cached_strength_does_not_hide_policy_failure(self, analyzer, login, now):
        login.password = "short"
        login.password_strength = 4
        assert analyzer.analyze([login], now=now).weak == [login]

    def test_cached_strength_is_used(self, analyzer, login, now):
        login.password_strength = 2
        assert analyzer.analyze([login], now=now).weak == [login]

    def test_stale_uses_password_changed(self, analyzer, login, now):
        login.password_changed = now - timedelta(days=91)
        assert analyzer.analyze([login], now=now).stale == [login]

    def test_stale_falls_back_to_updated_at(self, analyzer, login, now):
        login.password_changed = None
        login.updated_at = now - timedelta(days=120)
        assert analyzer.analyze([login], now=now).stale == [login]

    def test_stale_threshold_from_config(self, login, now):
        login.password_changed = now - timedelta(days=40)
        analyzer = SecurityAnalyzer(EngineConfig(stale_after_days=30))
        assert analyzer.analyze([login], now=now).stale == [login]

    def test_flagged(self, analyzer, login, now):
        login.compromised = True
        assert analyzer.analyze([login], now=now).flagged == [login]

    def test_non_logins_ignored(self, analyzer, card, note, now):
        report = analyzer.analyze([card, note], now=now)
        assert report.weak == report.reused == report.stale == report.flagged == []


class TestScore:
    def test_all_clean_scores_100(self, analyzer, login, second_login, now):
        assert analyzer.score([login, second_login], now=now) == 100

    def test_no_logins_scores_100(self, analyzer, note):
        assert analyzer.score([note]) == 100
        assert analyzer.score([]) == 100

    def test_reuse_penalty(self, analyzer, login, second_login, now):
        second_login.password = login.password
        assert analyzer.score([login, second_login], now=now) == 60

    def test_partial_penalty(self, analyzer, login, second_login, now):
        second_login.compromised = True
        # flagged 1/2 * 50
        assert analyzer.score([login, second_login], now=now) == 75

    def test_clamped_at_zero(self, analyzer, login, now):
        login.password_strength = 0
        login.compromised = True
        login.password_changed = now - timedelta(days=365)
        twin = replace(login, id="twin")
        assert analyzer.score([login, twin], now=now) == 0
