"""
Gap analysis against the readiness target.

Compares each domain's score to the target readiness score and ranks the
domains that fall short. All analysis is deterministic.

Severity Levels (by domain score, default breakpoints):
    - critical: score below 50
    - high: 50 to 64
    - medium: 65 to 74
    - low: at or above the target (75); such domains have no gap

Ranking:
    Domains with a positive gap are sorted by descending gap. The sort is
    stable, so domains with equal gaps keep framework section order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cmmcready.scoring.maturity_calculator import DomainScore

logger = logging.getLogger(__name__)

DEFAULT_TARGET_SCORE = 75
DEFAULT_CRITICAL_BELOW = 50
DEFAULT_HIGH_BELOW = 65
DEFAULT_TOP_GAPS = 5


class Severity(str, Enum):
    """Gap severity level."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class GapAnalyzerConfig:
    """
    Configuration for gap analysis.

    Attributes:
        target_score: Readiness bar; also the medium/low severity breakpoint.
        critical_below: Scores below this are critical.
        high_below: Scores below this (and not critical) are high.
        top_gaps: Default size of "top gaps" views.
    """

    target_score: int = DEFAULT_TARGET_SCORE
    critical_below: int = DEFAULT_CRITICAL_BELOW
    high_below: int = DEFAULT_HIGH_BELOW
    top_gaps: int = DEFAULT_TOP_GAPS


@dataclass(frozen=True)
class Gap:
    """
    A domain scoring below the readiness target.

    Attributes:
        domain_id: Section identifier.
        domain_name: Section display name.
        score: Current domain score.
        target: Target score the gap is measured against.
        gap: Shortfall, max(0, target - score).
        completion_rate: Answered share of the domain (percent).
        severity: Severity tag derived from the score.
    """

    domain_id: str
    domain_name: str
    score: int
    target: int
    gap: int
    completion_rate: int
    severity: Severity

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "domain_id": self.domain_id,
            "domain_name": self.domain_name,
            "score": self.score,
            "target": self.target,
            "gap": self.gap,
            "completion_rate": self.completion_rate,
            "severity": self.severity.value,
        }


class GapAnalyzer:
    """
    Analyzer that derives and ranks domain gaps.

    Example:
        analyzer = GapAnalyzer()
        gaps = analyzer.analyze(domain_scores)
        worst = analyzer.top_gaps(gaps)

    The analyzer returns the full ranked list; truncation to a "top N"
    view is left to the caller via top_gaps().

    Attributes:
        config: GapAnalyzerConfig with target and breakpoints.
    """

    def __init__(self, config: GapAnalyzerConfig | None = None) -> None:
        """
        Initialize the gap analyzer.

        Args:
            config: GapAnalyzerConfig. Defaults to target 75 with 50/65
                severity breakpoints.
        """
        self.config = config or GapAnalyzerConfig()

    def calculate_gap(self, score: int) -> int:
        """Shortfall against the target, floored at zero."""
        return max(0, self.config.target_score - score)

    def classify_severity(self, score: int) -> Severity:
        """Map a domain score to its severity tag."""
        if score < self.config.critical_below:
            return Severity.CRITICAL
        if score < self.config.high_below:
            return Severity.HIGH
        if score < self.config.target_score:
            return Severity.MEDIUM
        return Severity.LOW

    def build_gap(self, domain: DomainScore) -> Gap:
        """Build the gap record for one domain, whether or not it falls short."""
        return Gap(
            domain_id=domain.domain_id,
            domain_name=domain.domain_name,
            score=domain.score,
            target=self.config.target_score,
            gap=self.calculate_gap(domain.score),
            completion_rate=domain.completion_rate,
            severity=self.classify_severity(domain.score),
        )

    def analyze(self, domain_scores: Iterable[DomainScore]) -> list[Gap]:
        """
        Derive the ranked gap list.

        Args:
            domain_scores: Domain scores in framework section order.

        Returns:
            Gaps with gap > 0, sorted by descending gap; ties keep input order.
        """
        gaps = [self.build_gap(d) for d in domain_scores]
        ranked = sorted((g for g in gaps if g.gap > 0), key=lambda g: g.gap, reverse=True)

        logger.info(
            "Gap analysis complete: %d of %d domains below target %d",
            len(ranked),
            len(gaps),
            self.config.target_score,
        )
        return ranked

    def top_gaps(self, gaps: list[Gap], limit: int | None = None) -> list[Gap]:
        """
        Get the leading entries of a ranked gap list.

        Args:
            gaps: Ranked gaps from analyze().
            limit: Number to keep (defaults to config.top_gaps).

        Returns:
            At most `limit` gaps.
        """
        n = self.config.top_gaps if limit is None else limit
        return gaps[: max(0, n)]

    def count_by_severity(self, gaps: Iterable[Gap]) -> dict[str, int]:
        """Count gaps per severity, including zero counts."""
        counts = {s.value: 0 for s in Severity}
        for gap in gaps:
            counts[gap.severity.value] += 1
        return counts
