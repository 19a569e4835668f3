"""
Response normalization, domain aggregation and status distribution.

All scoring is deterministic: a 0-3 maturity level becomes
level x 25 percent, domain scores are rounded means of their answered
controls, and the status distribution is a raw tally of levels.

Example:
    from cmmcready.scoring import MaturityCalculator, StatusClassifier

    calculator = MaturityCalculator()
    domains = calculator.calculate_domain_scores(framework, record.responses)
    distribution = StatusClassifier().classify(record.responses)
"""

from cmmcready.scoring.maturity_calculator import (
    DEFAULT_POINTS_PER_LEVEL,
    FULLY_IMPLEMENTED_LEVEL,
    MAX_LEVEL,
    MIN_LEVEL,
    DomainScore,
    InvalidLevelError,
    MaturityCalculator,
    MaturityConfig,
    round_half_up,
    validate_level,
)
from cmmcready.scoring.status_classifier import (
    STATUS_LABELS,
    StatusBucket,
    StatusClassifier,
)

__all__ = [
    # Maturity Calculator
    "MaturityCalculator",
    "MaturityConfig",
    "DomainScore",
    "InvalidLevelError",
    "round_half_up",
    "validate_level",
    "MIN_LEVEL",
    "MAX_LEVEL",
    "FULLY_IMPLEMENTED_LEVEL",
    "DEFAULT_POINTS_PER_LEVEL",
    # Status Classifier
    "StatusClassifier",
    "StatusBucket",
    "STATUS_LABELS",
]
