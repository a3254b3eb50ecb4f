"""
Vault health scan over decrypted login records.

Works on plaintext records already inside the engine; it never decrypts,
stores or transmits anything.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from .config import EngineConfig
from .password import analyze_password, policy_violations
from .records import LoginRecord, VaultRecord

logger = logging.getLogger("vault_engine.analyzer")

WEAK_SCORE_THRESHOLD = 3

WEAK_PENALTY = 30
REUSED_PENALTY = 40
STALE_PENALTY = 20
FLAGGED_PENALTY = 50


@dataclass
class SecurityReport:
    """Login records grouped by problem. One record may appear in several lists."""

    weak: List[LoginRecord] = field(default_factory=list)
    reused: List[LoginRecord] = field(default_factory=list)
    stale: List[LoginRecord] = field(default_factory=list)
    flagged: List[LoginRecord] = field(default_factory=list)


def _logins(records: Iterable[VaultRecord]) -> List[LoginRecord]:
    return [record for record in records if isinstance(record, LoginRecord)]


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class SecurityAnalyzer:
    """Finds weak, reused, stale and flagged passwords and scores the vault."""

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self._config = config or EngineConfig()

    def _strength(self, record: LoginRecord) -> int:
        if record.password_strength is not None:
            return record.password_strength
        return analyze_password(record.password, [record.username or "", record.name]).score

    def _is_weak(self, record: LoginRecord) -> bool:
        # A cached score never excuses a policy failure.
        if policy_violations(record.password):
            return True
        return self._strength(record) < WEAK_SCORE_THRESHOLD

    def analyze(self, records: Iterable[VaultRecord], now: Optional[datetime] = None) -> SecurityReport:
        """
        Scan every login record.

        Args:
            records: Decrypted records of any kind (non-logins are ignored)
            now: Reference time for staleness (defaults to current UTC time)
        """
        logins = _logins(records)
        now = _as_aware(now or datetime.now(timezone.utc))
        cutoff = now - timedelta(days=self._config.stale_after_days)

        groups: Dict[str, List[LoginRecord]] = defaultdict(list)
        for record in logins:
            groups[record.password].append(record)

        report = SecurityReport()
        for record in logins:
            if self._is_weak(record):
                report.weak.append(record)
            if len(groups[record.password]) > 1:
                report.reused.append(record)
            last_changed = record.password_changed or record.updated_at
            if _as_aware(last_changed) < cutoff:
                report.stale.append(record)
            if record.compromised:
                report.flagged.append(record)

        logger.debug(
            "Analyzed %d logins: %d weak, %d reused, %d stale, %d flagged",
            len(logins),
            len(report.weak),
            len(report.reused),
            len(report.stale),
            len(report.flagged),
        )
        return report

    def score(self, records: Iterable[VaultRecord], now: Optional[datetime] = None) -> int:
        """Health score 0..100; a vault without logins scores 100."""
        records = list(records)
        total = len(_logins(records))
        if total == 0:
            return 100

        report = self.analyze(records, now)
        penalty = (
            len(report.weak) / total * WEAK_PENALTY
            + len(report.reused) / total * REUSED_PENALTY
            + len(report.stale) / total * STALE_PENALTY
            + len(report.flagged) / total * FLAGGED_PENALTY
        )
        return max(0, round(100 - min(100.0, penalty)))
