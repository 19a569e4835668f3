"""
Compliance metrics pipeline.

Runs the scoring components in a fixed order and returns one immutable
MetricsBundle that dashboards, reports and exports all read from:

    1. Resolve the framework definition (MissingFrameworkError if unknown)
    2. Select the active assessment (most recently modified)
    3. Normalize and aggregate responses per domain
    4. Tally the status distribution
    5. Derive and rank gaps against the target
    6. Map each gap to a recommendation

When no assessment qualifies the pipeline short-circuits to the zero-state
bundle: overall score 0, every domain at 0, an all-zero distribution, and
no gaps or recommendations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from cmmcready.analysis.gap_analyzer import (
    DEFAULT_TOP_GAPS,
    Gap,
    GapAnalyzer,
    GapAnalyzerConfig,
)
from cmmcready.analysis.recommendation_engine import (
    Recommendation,
    RecommendationConfig,
    RecommendationEngine,
)
from cmmcready.assessments.models import AssessmentRecord
from cmmcready.assessments.selector import AssessmentSelector
from cmmcready.config.settings import Settings
from cmmcready.framework.definitions import FrameworkDefinition
from cmmcready.framework.registry import FrameworkRegistry, default_registry
from cmmcready.scoring.maturity_calculator import (
    DomainScore,
    MaturityCalculator,
    MaturityConfig,
)
from cmmcready.scoring.status_classifier import StatusBucket, StatusClassifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricsBundle:
    """
    Complete compliance metrics for one framework.

    Attributes:
        framework_id: Framework the metrics were computed against.
        framework_name: Display name of the framework.
        assessment_id: Scored assessment, or None in the zero-state.
        organization_name: Organization from the assessment, if recorded.
        overall_score: Rounded mean normalized score over all responses.
        implemented_controls: Responses at level 3.
        open_controls: Responses below level 3.
        total_controls: Question count of the framework.
        answered_controls: Number of responses in the assessment.
        domain_scores: Per-domain scores in framework section order.
        status_distribution: Four status buckets in level order.
        gaps: Ranked gaps (full list; see top_gaps()).
        recommendations: One recommendation per gap, same order.
    """

    framework_id: str
    framework_name: str
    assessment_id: str | None
    organization_name: str | None
    overall_score: int
    implemented_controls: int
    open_controls: int
    total_controls: int
    answered_controls: int
    domain_scores: tuple[DomainScore, ...]
    status_distribution: tuple[StatusBucket, ...]
    gaps: tuple[Gap, ...]
    recommendations: tuple[Recommendation, ...]

    @property
    def has_assessment(self) -> bool:
        """Whether an assessment was scored (False in the zero-state)."""
        return self.assessment_id is not None

    def top_gaps(self, n: int = DEFAULT_TOP_GAPS) -> list[Gap]:
        """Get the n highest-ranked gaps."""
        return list(self.gaps[: max(0, n)])

    def top_recommendations(self, n: int = DEFAULT_TOP_GAPS) -> list[Recommendation]:
        """Get the recommendations for the n highest-ranked gaps."""
        return list(self.recommendations[: max(0, n)])

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "framework_id": self.framework_id,
            "framework_name": self.framework_name,
            "assessment_id": self.assessment_id,
            "organization_name": self.organization_name,
            "overall_score": self.overall_score,
            "implemented_controls": self.implemented_controls,
            "open_controls": self.open_controls,
            "total_controls": self.total_controls,
            "answered_controls": self.answered_controls,
            "domain_scores": [d.to_dict() for d in self.domain_scores],
            "status_distribution": [b.to_dict() for b in self.status_distribution],
            "gaps": [g.to_dict() for g in self.gaps],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }

    @classmethod
    def empty(
        cls,
        framework: FrameworkDefinition | None = None,
        framework_id: str = "",
    ) -> MetricsBundle:
        """
        Build the zero-state bundle.

        Args:
            framework: Known framework; its sections are listed at score 0.
                Without one the domain list is empty.
            framework_id: Identifier to report when no framework is known.

        Returns:
            MetricsBundle with no assessment, scores 0 and no gaps.
        """
        domains: tuple[DomainScore, ...] = ()
        if framework is not None:
            domains = tuple(
                DomainScore(
                    domain_id=section.id,
                    domain_name=section.name,
                    score=0,
                    answered=0,
                    total=len(section.questions),
                    implemented=0,
                )
                for section in framework.sections
            )
        return cls(
            framework_id=framework.id if framework is not None else framework_id,
            framework_name=framework.name if framework is not None else "",
            assessment_id=None,
            organization_name=None,
            overall_score=0,
            implemented_controls=0,
            open_controls=0,
            total_controls=framework.control_count if framework is not None else 0,
            answered_controls=0,
            domain_scores=domains,
            status_distribution=tuple(StatusClassifier().empty_distribution()),
            gaps=(),
            recommendations=(),
        )


class ComplianceEngine:
    """
    Pipeline producing MetricsBundles from assessment records.

    Example:
        engine = ComplianceEngine(default_registry())
        bundle = engine.calculate(records, "cmmc-2.0-level1")

        print(bundle.overall_score)
        for gap in bundle.top_gaps():
            print(gap.domain_name, gap.gap)

    The engine holds only its registry and frozen component configuration;
    calling it twice on the same input gives equal bundles.

    Attributes:
        registry: FrameworkRegistry used to resolve framework identifiers.
        calculator: MaturityCalculator for normalization and aggregation.
        classifier: StatusClassifier for the status distribution.
        gap_analyzer: GapAnalyzer for ranking gaps.
        recommendation_engine: RecommendationEngine for remediation advice.
        selector: AssessmentSelector picking the active record.
    """

    def __init__(
        self,
        registry: FrameworkRegistry | None = None,
        maturity_config: MaturityConfig | None = None,
        gap_config: GapAnalyzerConfig | None = None,
        recommendation_config: RecommendationConfig | None = None,
    ) -> None:
        """
        Initialize the compliance engine.

        Args:
            registry: Framework registry. Defaults to default_registry().
            maturity_config: Normalization settings.
            gap_config: Target and severity breakpoints.
            recommendation_config: Effort breakpoints and impact cap.
        """
        self.registry = registry if registry is not None else default_registry()
        self.calculator = MaturityCalculator(maturity_config)
        self.classifier = StatusClassifier()
        self.gap_analyzer = GapAnalyzer(gap_config)
        self.recommendation_engine = RecommendationEngine(recommendation_config)
        self.selector = AssessmentSelector(self.registry)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        registry: FrameworkRegistry | None = None,
    ) -> ComplianceEngine:
        """Build an engine configured from loaded Settings."""
        scoring = settings.scoring
        recs = settings.recommendations
        return cls(
            registry=registry,
            maturity_config=MaturityConfig(points_per_level=scoring.points_per_level),
            gap_config=GapAnalyzerConfig(
                target_score=scoring.target_score,
                critical_below=scoring.critical_below,
                high_below=scoring.high_below,
                top_gaps=scoring.top_gaps,
            ),
            recommendation_config=RecommendationConfig(
                high_effort_above=recs.high_effort_above,
                medium_effort_above=recs.medium_effort_above,
                impact_cap=recs.impact_cap,
            ),
        )

    def calculate(
        self,
        records: Iterable[AssessmentRecord],
        framework_id: str,
    ) -> MetricsBundle:
        """
        Compute metrics for the active assessment of a framework.

        Args:
            records: All stored assessments, in any order.
            framework_id: Framework identifier or alias.

        Returns:
            MetricsBundle for the most recently modified matching record,
            or the zero-state bundle when there is none.

        Raises:
            MissingFrameworkError: If the framework is not registered.
            InvalidLevelError: If the active record holds an out-of-range level.
        """
        framework = self.registry.get(framework_id)
        record = self.selector.select(records, framework.id)
        if record is None:
            return MetricsBundle.empty(framework)
        return self.calculate_for_record(record, framework)

    def calculate_for_record(
        self,
        record: AssessmentRecord,
        framework: FrameworkDefinition,
    ) -> MetricsBundle:
        """
        Compute metrics for an explicit record.

        Args:
            record: Assessment to score.
            framework: Framework the record answers.

        Returns:
            MetricsBundle for the record.

        Raises:
            InvalidLevelError: If any response level is outside 0-3.
        """
        responses = record.responses

        # Validates every level before anything is derived
        distribution = self.classifier.classify(responses)
        overall = self.calculator.calculate_overall_score(responses)
        domains = self.calculator.calculate_domain_scores(framework, responses)
        gaps = self.gap_analyzer.analyze(domains)
        recommendations = self.recommendation_engine.generate(gaps)

        logger.info(
            "Scored assessment %s against %s: overall %d%%, %d gap(s)",
            record.id,
            framework.id,
            overall,
            len(gaps),
        )

        return MetricsBundle(
            framework_id=framework.id,
            framework_name=framework.name,
            assessment_id=record.id,
            organization_name=record.organization_name,
            overall_score=overall,
            implemented_controls=self.calculator.count_implemented(responses),
            open_controls=self.calculator.count_open(responses),
            total_controls=framework.control_count,
            answered_controls=len(responses),
            domain_scores=tuple(domains),
            status_distribution=tuple(distribution),
            gaps=tuple(gaps),
            recommendations=tuple(recommendations),
        )
