"""
Gap analysis, remediation recommendations and portfolio statistics.

Gap Analysis:
    The GapAnalyzer compares each domain score with the readiness target
    (75 by default), tags severity, and ranks deficient domains by
    descending gap with ties kept in framework order.

Recommendations:
    The RecommendationEngine maps each ranked gap to a remediation action,
    effort estimate, timeframe and capped projected impact.

Portfolio:
    The PortfolioAnalyzer summarizes every saved assessment (completion,
    average score, risk distribution, recent activity) and filters or
    sorts the assessment list.

Example:
    from cmmcready.analysis import GapAnalyzer, RecommendationEngine

    gaps = GapAnalyzer().analyze(domain_scores)
    recommendations = RecommendationEngine().generate(gaps)
"""

from cmmcready.analysis.gap_analyzer import (
    Gap,
    GapAnalyzer,
    GapAnalyzerConfig,
    Severity,
)
from cmmcready.analysis.portfolio import (
    PortfolioAnalyzer,
    PortfolioConfig,
    PortfolioStatistics,
    RiskLevel,
)
from cmmcready.analysis.recommendation_engine import (
    GENERIC_ACTION,
    REMEDIATION_ACTIONS,
    Effort,
    Recommendation,
    RecommendationConfig,
    RecommendationEngine,
)

__all__ = [
    # Gap Analyzer
    "GapAnalyzer",
    "GapAnalyzerConfig",
    "Gap",
    "Severity",
    # Recommendation Engine
    "RecommendationEngine",
    "RecommendationConfig",
    "Recommendation",
    "Effort",
    "REMEDIATION_ACTIONS",
    "GENERIC_ACTION",
    # Portfolio
    "PortfolioAnalyzer",
    "PortfolioConfig",
    "PortfolioStatistics",
    "RiskLevel",
]
