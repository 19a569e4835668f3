"""
Executive summary generation for compliance reports.

This module generates human-readable summaries of CMMC readiness
suitable for executives and stakeholders who need high-level insights
without control-by-control detail.

Output Formats:
    - Plain text summary (for reports and terminals)
    - Markdown (for documentation)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from cmmcready.analysis.gap_analyzer import DEFAULT_TARGET_SCORE
from cmmcready.engine import MetricsBundle

logger = logging.getLogger(__name__)


# Posture ratings by overall score, highest first
POSTURE_RATINGS: tuple[tuple[int, str], ...] = (
    (DEFAULT_TARGET_SCORE, "Strong"),
    (50, "Developing"),
    (25, "Foundational"),
    (0, "Needs Improvement"),
)


@dataclass
class SummaryConfig:
    """
    Configuration for summary generation.

    Attributes:
        organization: Organization name. Falls back to the assessment's
            organization, then to "Organization".
        include_recommendations: Whether to include top recommendations.
        max_recommendations: Maximum recommendations to include.
        report_date: Date for the report (defaults to now).
    """

    organization: str = ""
    include_recommendations: bool = True
    max_recommendations: int = 5
    report_date: datetime | None = None


class ExecutiveSummaryGenerator:
    """
    Generator for executive-level compliance summaries.

    Example:
        generator = ExecutiveSummaryGenerator(SummaryConfig(organization="Acme"))

        # Generate text summary
        summary = generator.generate_summary(bundle)

        # Generate markdown
        markdown = generator.generate_markdown(bundle)

    Attributes:
        config: SummaryConfig with generation settings.
    """

    def __init__(self, config: SummaryConfig | None = None) -> None:
        """
        Initialize the summary generator.

        Args:
            config: SummaryConfig with generation settings.
        """
        self.config = config or SummaryConfig()

    def _organization(self, bundle: MetricsBundle) -> str:
        return self.config.organization or bundle.organization_name or "Organization"

    def _date_str(self) -> str:
        report_date = self.config.report_date or datetime.now(UTC)
        return report_date.strftime("%B %d, %Y")

    def generate_summary(self, bundle: MetricsBundle) -> str:
        """
        Generate a text-based executive summary.

        Args:
            bundle: MetricsBundle from the compliance engine.

        Returns:
            Multi-paragraph text summary.
        """
        sections = []

        # Header
        sections.append(f"{bundle.framework_name or bundle.framework_id} READINESS SUMMARY".upper())
        sections.append(self._organization(bundle))
        sections.append(f"Report Date: {self._date_str()}")
        sections.append("")

        sections.append("OVERVIEW")
        sections.append("-" * 40)
        sections.append(self._generate_overview(bundle))
        sections.append("")

        sections.append("SCORES BY DOMAIN")
        sections.append("-" * 40)
        sections.append(self._generate_scores_section(bundle))
        sections.append("")

        sections.append("IMPLEMENTATION STATUS")
        sections.append("-" * 40)
        for bucket in bundle.status_distribution:
            sections.append(f"{bucket.label}: {bucket.count}")
        sections.append("")

        findings = self._generate_key_findings(bundle)
        sections.append("KEY FINDINGS")
        sections.append("-" * 40)
        for i, finding in enumerate(findings, 1):
            sections.append(f"{i}. {finding}")
        sections.append("")

        if self.config.include_recommendations:
            sections.append("RECOMMENDED ACTIONS")
            sections.append("-" * 40)
            for i, rec in enumerate(self._generate_recommendations(bundle), 1):
                sections.append(f"{i}. {rec}")
            sections.append("")

        return "\n".join(sections)

    def generate_markdown(self, bundle: MetricsBundle) -> str:
        """
        Generate a markdown-formatted summary.

        Args:
            bundle: MetricsBundle from the compliance engine.

        Returns:
            Markdown-formatted summary.
        """
        lines = []

        lines.append(f"# {bundle.framework_name or bundle.framework_id} Readiness Summary")
        lines.append(f"**{self._organization(bundle)}** | {self._date_str()}")
        lines.append("")

        lines.append("## Overview")
        lines.append("")
        lines.append(self._generate_overview(bundle))
        lines.append("")

        # Domain table
        lines.append("## Domain Scores")
        lines.append("")
        lines.append("| Domain | Score | Answered | Implemented |")
        lines.append("|--------|-------|----------|-------------|")
        for domain in bundle.domain_scores:
            lines.append(
                f"| {domain.domain_name} | {domain.score}% | "
                f"{domain.answered}/{domain.total} | {domain.implemented} |"
            )
        lines.append(
            f"| **Overall** | **{bundle.overall_score}%** | "
            f"**{bundle.answered_controls}/{bundle.total_controls}** | "
            f"**{bundle.implemented_controls}** |"
        )
        lines.append("")

        lines.append("## Key Findings")
        lines.append("")
        for finding in self._generate_key_findings(bundle):
            lines.append(f"- {finding}")
        lines.append("")

        if bundle.gaps:
            counts = {"critical": 0, "high": 0, "medium": 0}
            for gap in bundle.gaps:
                counts[gap.severity.value] = counts.get(gap.severity.value, 0) + 1
            lines.append("## Gap Summary")
            lines.append("")
            lines.append(
                f"- **Domains Below Target:** {len(bundle.gaps)} of {len(bundle.domain_scores)}"
            )
            lines.append(f"- **Critical:** {counts['critical']}")
            lines.append(f"- **High:** {counts['high']}")
            lines.append(f"- **Medium:** {counts['medium']}")
            lines.append("")

        if self.config.include_recommendations:
            lines.append("## Recommended Actions")
            lines.append("")
            for i, rec in enumerate(self._generate_recommendations(bundle), 1):
                lines.append(f"{i}. {rec}")
            lines.append("")

        return "\n".join(lines)

    def _generate_overview(self, bundle: MetricsBundle) -> str:
        """Generate overview paragraph."""
        organization = self._organization(bundle)

        if not bundle.has_assessment:
            return (
                f"No assessment has been recorded for {organization} against "
                f"{bundle.framework_name or bundle.framework_id}. "
                f"Scores will appear once controls are assessed."
            )

        rating = self.get_posture_rating(bundle).lower()
        overview = (
            f"{organization} has a {rating} readiness posture with an overall "
            f"score of {bundle.overall_score}%. "
            f"{bundle.answered_controls} of {bundle.total_controls} controls have been "
            f"assessed and {bundle.implemented_controls} are fully implemented. "
        )

        if bundle.gaps:
            critical = sum(1 for g in bundle.gaps if g.severity.value == "critical")
            overview += (
                f"{len(bundle.gaps)} domain(s) fall below the readiness target, "
                f"including {critical} critical."
            )
        else:
            overview += "Every domain meets the readiness target."

        return overview

    def _generate_scores_section(self, bundle: MetricsBundle) -> str:
        """Generate scores section."""
        lines = []
        for domain in bundle.domain_scores:
            lines.append(
                f"{domain.domain_name}: {domain.score}% "
                f"({domain.answered}/{domain.total} assessed)"
            )
        lines.append("")
        lines.append(f"Overall Score: {bundle.overall_score}%")
        return "\n".join(lines)

    def _generate_key_findings(self, bundle: MetricsBundle) -> list[str]:
        """Generate list of key findings."""
        findings = []

        answered = [d for d in bundle.domain_scores if d.answered > 0]
        if answered:
            # max/min keep the first of equal scores
            best = max(answered, key=lambda d: d.score)
            worst = min(answered, key=lambda d: d.score)
            findings.append(f"Strongest area: {best.domain_name} at {best.score}%")
            if worst is not best:
                findings.append(f"Area needing attention: {worst.domain_name} at {worst.score}%")

        unanswered = [d for d in bundle.domain_scores if d.answered == 0]
        if unanswered:
            findings.append(f"{len(unanswered)} domain(s) have no assessed controls")

        critical = [g for g in bundle.gaps if g.severity.value == "critical"]
        if critical:
            findings.append(f"{len(critical)} critical gap(s) require immediate attention")
        else:
            findings.append("No critical gaps identified")

        return findings

    def _generate_recommendations(self, bundle: MetricsBundle) -> list[str]:
        """Generate prioritized recommendation lines."""
        recommendations = [
            f"{rec.domain_name}: {rec.action} "
            f"({rec.effort.value} effort, {rec.timeframe}, {rec.impact})"
            for rec in bundle.top_recommendations(self.config.max_recommendations)
        ]

        if not recommendations:
            if bundle.has_assessment:
                recommendations = ["Maintain current controls and reassess periodically"]
            else:
                recommendations = ["Complete a self-assessment of every control"]

        return recommendations

    def get_posture_rating(self, bundle: MetricsBundle) -> str:
        """
        Get a simple posture rating for quick reference.

        Args:
            bundle: MetricsBundle from the compliance engine.

        Returns:
            Rating string (e.g., "Strong", "Developing", "Needs Improvement").
        """
        for threshold, rating in POSTURE_RATINGS:
            if bundle.overall_score >= threshold:
                return rating
        return POSTURE_RATINGS[-1][1]
