"""
Portfolio statistics across saved assessments.

Summarizes the whole collection of assessments rather than the active one:
completion counts, average score, risk distribution, time spent and recent
activity. Also provides the search, filter and sort operations used to
browse the assessment list.

Risk Levels (by a record's overall score, default breakpoints):
    - low: 80 and above
    - medium: 60 to 79
    - high: 40 to 59
    - critical: below 40

Time-based figures take an explicit `now` so results are reproducible.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from fractions import Fraction
from typing import Any

from cmmcready.assessments.models import AssessmentRecord
from cmmcready.assessments.selector import sort_by_recency, timestamp_or_none
from cmmcready.scoring.maturity_calculator import MaturityCalculator, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_LOW_RISK_FROM = 80
DEFAULT_MEDIUM_RISK_FROM = 60
DEFAULT_HIGH_RISK_FROM = 40
DEFAULT_RECENT_DAYS = 7
DEFAULT_COMPLETION_WINDOW_DAYS = 30

STATUS_FILTERS = ("all", "completed", "in_progress")
SORT_KEYS = ("date", "score", "name", "progress")


class RiskLevel(str, Enum):
    """Risk level of an assessment by overall score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class PortfolioConfig:
    """
    Configuration for portfolio statistics.

    Attributes:
        low_risk_from: Minimum score for low risk.
        medium_risk_from: Minimum score for medium risk.
        high_risk_from: Minimum score for high risk; below is critical.
        recent_days: Window for "recently modified" assessments.
        completion_window_days: Window for "recently completed" assessments.
    """

    low_risk_from: int = DEFAULT_LOW_RISK_FROM
    medium_risk_from: int = DEFAULT_MEDIUM_RISK_FROM
    high_risk_from: int = DEFAULT_HIGH_RISK_FROM
    recent_days: int = DEFAULT_RECENT_DAYS
    completion_window_days: int = DEFAULT_COMPLETION_WINDOW_DAYS


@dataclass
class PortfolioStatistics:
    """
    Summary of all saved assessments.

    Attributes:
        total: Number of assessments.
        completed: Number marked complete.
        in_progress: Number not yet complete.
        average_score: Mean overall score across assessments (rounded).
        risk_distribution: Count of assessments per risk level.
        total_time_spent: Sum of time spent in minutes.
        recent_assessments: Assessments modified within the recent window.
        recent_completions: Completed assessments modified within the
            completion window.
    """

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    average_score: int = 0
    risk_distribution: dict[str, int] = field(
        default_factory=lambda: {r.value: 0 for r in RiskLevel}
    )
    total_time_spent: int = 0
    recent_assessments: int = 0
    recent_completions: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "completed": self.completed,
            "in_progress": self.in_progress,
            "average_score": self.average_score,
            "risk_distribution": dict(self.risk_distribution),
            "total_time_spent": self.total_time_spent,
            "recent_assessments": self.recent_assessments,
            "recent_completions": self.recent_completions,
        }


class PortfolioAnalyzer:
    """
    Analyzer for the collection of saved assessments.

    Example:
        analyzer = PortfolioAnalyzer()
        stats = analyzer.calculate_statistics(records, now=datetime.now(UTC))

        at_risk = analyzer.filter_records(records, risk="critical")
        newest = analyzer.sort_records(at_risk, sort_by="date")

    Attributes:
        config: PortfolioConfig with risk breakpoints and windows.
        calculator: MaturityCalculator used to score each record.
    """

    def __init__(
        self,
        config: PortfolioConfig | None = None,
        calculator: MaturityCalculator | None = None,
    ) -> None:
        self.config = config or PortfolioConfig()
        self.calculator = calculator or MaturityCalculator()

    def score_record(self, record: AssessmentRecord) -> int:
        """Overall score of a record."""
        return self.calculator.calculate_overall_score(record.responses)

    def classify_risk(self, score: int) -> RiskLevel:
        """Map an overall score to a risk level."""
        if score >= self.config.low_risk_from:
            return RiskLevel.LOW
        if score >= self.config.medium_risk_from:
            return RiskLevel.MEDIUM
        if score >= self.config.high_risk_from:
            return RiskLevel.HIGH
        return RiskLevel.CRITICAL

    def calculate_statistics(
        self,
        records: Iterable[AssessmentRecord],
        now: datetime,
    ) -> PortfolioStatistics:
        """
        Calculate portfolio statistics.

        Args:
            records: All saved assessments.
            now: Reference time for the recent-activity windows. A naive
                value is taken as UTC, matching parse_timestamp.

        Returns:
            PortfolioStatistics; all zero for an empty collection.
        """
        records = list(records)
        stats = PortfolioStatistics()
        if not records:
            return stats

        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        recent_cutoff = now - timedelta(days=self.config.recent_days)
        completion_cutoff = now - timedelta(days=self.config.completion_window_days)
        score_sum = Fraction(0)

        for record in records:
            stats.total += 1
            if record.is_complete:
                stats.completed += 1

            score_sum += self.calculator.exact_overall_score(record.responses)
            risk = self.classify_risk(self.score_record(record))
            stats.risk_distribution[risk.value] += 1

            stats.total_time_spent += record.time_spent or 0

            modified = timestamp_or_none(record)
            if modified is not None:
                if modified >= recent_cutoff:
                    stats.recent_assessments += 1
                if record.is_complete and modified >= completion_cutoff:
                    stats.recent_completions += 1

        stats.in_progress = stats.total - stats.completed
        stats.average_score = round_half_up(score_sum / stats.total)

        logger.debug(
            "Portfolio: %d assessments, %d complete, average score %d",
            stats.total,
            stats.completed,
            stats.average_score,
        )
        return stats

    def filter_records(
        self,
        records: Iterable[AssessmentRecord],
        search: str = "",
        status: str = "all",
        risk: str = "all",
    ) -> list[AssessmentRecord]:
        """
        Filter the assessment list.

        Args:
            records: Assessments to filter.
            search: Case-insensitive substring matched against the framework
                name and organization name.
            status: "all", "completed" or "in_progress".
            risk: "all" or a RiskLevel value.

        Returns:
            Matching records in input order.

        Raises:
            ValueError: For an unknown status or risk filter.
        """
        if status not in STATUS_FILTERS:
            raise ValueError(f"Unknown status filter: {status}")
        risk_filter = None if risk == "all" else RiskLevel(risk)
        needle = search.lower()

        matched = []
        for record in records:
            haystacks = (
                (record.framework_name or "").lower(),
                (record.organization_name or "").lower(),
            )
            if needle and not any(needle in h for h in haystacks):
                continue
            if status == "completed" and not record.is_complete:
                continue
            if status == "in_progress" and record.is_complete:
                continue
            if risk_filter and self.classify_risk(self.score_record(record)) != risk_filter:
                continue
            matched.append(record)
        return matched

    def sort_records(
        self,
        records: Iterable[AssessmentRecord],
        sort_by: str = "date",
        descending: bool = True,
    ) -> list[AssessmentRecord]:
        """
        Sort the assessment list.

        Args:
            records: Assessments to sort.
            sort_by: "date" (last modified), "score", "name" (framework
                name) or "progress" (number of answers).
            descending: Largest/newest/last-alphabetical first when True.

        Returns:
            Sorted records. The sort is stable; for "date", records with
            missing or unparsable timestamps always come last.

        Raises:
            ValueError: For an unknown sort key.
        """
        if sort_by == "date":
            return sort_by_recency(records, newest_first=descending)
        if sort_by == "score":
            return sorted(records, key=self.score_record, reverse=descending)
        if sort_by == "name":
            return sorted(
                records,
                key=lambda r: (r.framework_name or "").lower(),
                reverse=descending,
            )
        if sort_by == "progress":
            return sorted(records, key=lambda r: r.response_count, reverse=descending)
        raise ValueError(f"Unknown sort key: {sort_by}")
