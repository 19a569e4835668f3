"""
Remediation recommendations for domain gaps.

Turns each ranked gap into an actionable suggestion. Everything is derived
from the gap alone: a fixed table supplies the remediation action for the
domain, and the gap size sets effort, timeframe and projected impact.

Effort and Timeframe (default breakpoints):
    - gap > 30: high effort, 6-12 months
    - gap > 15: medium effort, 3-6 months
    - otherwise: low effort, 1-3 months

Projected impact is capped at 25 percentage points regardless of the gap
size, so estimates stay conservative.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cmmcready.analysis.gap_analyzer import Gap, Severity

logger = logging.getLogger(__name__)

DEFAULT_HIGH_EFFORT_ABOVE = 30
DEFAULT_MEDIUM_EFFORT_ABOVE = 15
DEFAULT_IMPACT_CAP = 25

GENERIC_ACTION = "Implement comprehensive security controls and procedures"

# Domain name to remediation action
REMEDIATION_ACTIONS: dict[str, str] = {
    "Access Control": "Implement multi-factor authentication and role-based access controls",
    "Asset Management": "Deploy automated asset discovery and maintain comprehensive inventory",
    "Audit and Accountability": "Enhance logging capabilities and implement continuous monitoring",
    "Awareness and Training": "Develop comprehensive security awareness program",
    "Configuration Management": "Implement change control processes and baseline configurations",
    "Identification and Authentication": "Deploy identity management systems and authentication policies",
    "Incident Response": "Establish formal incident response procedures and team",
    "Maintenance": "Implement patch management and system maintenance procedures",
    "Media Protection": "Establish data handling and media sanitization procedures",
    "Personnel Security": "Implement background screening and access management",
    "Physical Protection": "Enhance physical access controls and environmental protections",
    "Recovery": "Develop business continuity and disaster recovery capabilities",
    "Risk Assessment": "Conduct regular risk assessments and vulnerability management",
    "Security Assessment": "Implement continuous security testing and validation",
    "System and Communications Protection": "Deploy network security and encryption controls",
    "System and Information Integrity": "Implement malware protection and integrity monitoring",
    "Supply Chain Risk Management": "Establish vendor risk management program",
}

# Trailing domain abbreviation, e.g. "Access Control (AC)"
_ABBREVIATION_SUFFIX = re.compile(r"\s*\([A-Za-z]{1,5}\)\s*$")


class Effort(str, Enum):
    """Effort required to close a gap."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RecommendationConfig:
    """
    Configuration for recommendation heuristics.

    Attributes:
        high_effort_above: Gaps larger than this are high effort.
        medium_effort_above: Gaps larger than this (and not high) are medium.
        impact_cap: Maximum projected improvement in percentage points.
    """

    high_effort_above: int = DEFAULT_HIGH_EFFORT_ABOVE
    medium_effort_above: int = DEFAULT_MEDIUM_EFFORT_ABOVE
    impact_cap: int = DEFAULT_IMPACT_CAP


TIMEFRAMES: dict[Effort, str] = {
    Effort.HIGH: "6-12 months",
    Effort.MEDIUM: "3-6 months",
    Effort.LOW: "1-3 months",
}


@dataclass(frozen=True)
class Recommendation:
    """
    Actionable recommendation for closing a domain gap.

    Attributes:
        domain_name: Domain the recommendation addresses.
        priority: Mirrors the gap's severity.
        action: Remediation guidance.
        effort: Estimated effort.
        timeframe: Estimated time to close the gap.
        impact: Projected score improvement, e.g. "+25% improvement".
    """

    domain_name: str
    priority: Severity
    action: str
    effort: Effort
    timeframe: str
    impact: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "domain_name": self.domain_name,
            "priority": self.priority.value,
            "action": self.action,
            "effort": self.effort.value,
            "timeframe": self.timeframe,
            "impact": self.impact,
        }


class RecommendationEngine:
    """
    Engine mapping ranked gaps to recommendations.

    Example:
        engine = RecommendationEngine()
        recommendations = engine.generate(gaps)

    The mapping is one-to-one and order-preserving: the first
    recommendation addresses the highest-priority gap.

    Attributes:
        config: RecommendationConfig with effort breakpoints and impact cap.
        actions: Domain name to remediation action table.
    """

    def __init__(
        self,
        config: RecommendationConfig | None = None,
        actions: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize the recommendation engine.

        Args:
            config: RecommendationConfig. Defaults to 30/15 breakpoints and
                a 25 point impact cap.
            actions: Replacement action table (defaults to REMEDIATION_ACTIONS).
        """
        self.config = config or RecommendationConfig()
        self.actions = dict(REMEDIATION_ACTIONS if actions is None else actions)

    def lookup_action(self, domain_name: str) -> str:
        """
        Get the remediation action for a domain.

        Tries the exact name, then the name without a trailing abbreviation
        such as "(AC)". Unknown domains get the generic action.
        """
        if domain_name in self.actions:
            return self.actions[domain_name]

        base_name = _ABBREVIATION_SUFFIX.sub("", domain_name)
        if base_name in self.actions:
            return self.actions[base_name]

        logger.debug("No remediation action for domain %r, using generic", domain_name)
        return GENERIC_ACTION

    def estimate_effort(self, gap: int) -> Effort:
        """Effort tag for a gap size."""
        if gap > self.config.high_effort_above:
            return Effort.HIGH
        if gap > self.config.medium_effort_above:
            return Effort.MEDIUM
        return Effort.LOW

    def estimate_timeframe(self, gap: int) -> str:
        """Timeframe string for a gap size."""
        return TIMEFRAMES[self.estimate_effort(gap)]

    def project_impact(self, gap: int) -> str:
        """Projected improvement string, capped at config.impact_cap."""
        return f"+{min(gap, self.config.impact_cap)}% improvement"

    def recommend(self, gap: Gap) -> Recommendation:
        """Build the recommendation for a single gap."""
        return Recommendation(
            domain_name=gap.domain_name,
            priority=gap.severity,
            action=self.lookup_action(gap.domain_name),
            effort=self.estimate_effort(gap.gap),
            timeframe=self.estimate_timeframe(gap.gap),
            impact=self.project_impact(gap.gap),
        )

    def generate(self, gaps: Iterable[Gap]) -> list[Recommendation]:
        """
        Generate one recommendation per gap, preserving order.

        Args:
            gaps: Ranked gaps from GapAnalyzer.analyze().

        Returns:
            Recommendations in the same order as the gaps.
        """
        return [self.recommend(gap) for gap in gaps]
