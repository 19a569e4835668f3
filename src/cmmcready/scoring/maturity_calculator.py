"""
Maturity scoring for assessment responses.

Each control is answered with a maturity level on a 0-3 scale:

    - Level 0: Not implemented
    - Level 1: Partially implemented
    - Level 2: Largely implemented
    - Level 3: Fully implemented

Scoring Algorithm:
    1. Each answered control is normalized to a percentage:
       level x points_per_level (25 by default).
    2. A domain (framework section) score is the mean of the normalized
       scores of its answered controls, rounded half up. Unanswered
       controls are excluded, not counted as zero. A domain with no
       answers scores 0.
    3. The overall score is the same mean taken over every answer in the
       record.

All arithmetic is exact (integer/Fraction), so rounding never depends on
floating point representation.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from fractions import Fraction
from typing import Any

from cmmcready.framework.definitions import FrameworkDefinition, Section

logger = logging.getLogger(__name__)

MIN_LEVEL = 0
MAX_LEVEL = 3
FULLY_IMPLEMENTED_LEVEL = MAX_LEVEL
DEFAULT_POINTS_PER_LEVEL = 25
MAX_SCORE = 100
MAX_POINTS_PER_LEVEL = MAX_SCORE // MAX_LEVEL


class InvalidLevelError(ValueError):
    """Raised when a response's maturity level is outside 0-3."""

    def __init__(self, level: Any, control_id: str | None = None) -> None:
        self.level = level
        self.control_id = control_id
        where = f" for control {control_id}" if control_id else ""
        super().__init__(
            f"Invalid maturity level {level!r}{where}: "
            f"must be an integer between {MIN_LEVEL} and {MAX_LEVEL}"
        )


def round_half_up(value: Fraction | int) -> int:
    """Round a non-negative exact value to the nearest integer, halves up."""
    return math.floor(Fraction(value) + Fraction(1, 2))


def validate_level(level: Any, control_id: str | None = None) -> int:
    """
    Check that a level is an integer in 0-3.

    Raises:
        InvalidLevelError: For out-of-range or non-integer values.
    """
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevelError(level, control_id)
    if level < MIN_LEVEL or level > MAX_LEVEL:
        raise InvalidLevelError(level, control_id)
    return level


@dataclass(frozen=True)
class MaturityConfig:
    """
    Configuration for response normalization.

    Attributes:
        points_per_level: Percentage points awarded per maturity level.
            Must keep a level-3 answer within 0-100, so 1-33.
    """

    points_per_level: int = DEFAULT_POINTS_PER_LEVEL

    def __post_init__(self) -> None:
        if not 1 <= self.points_per_level <= MAX_POINTS_PER_LEVEL:
            raise ValueError(
                f"points_per_level must be between 1 and {MAX_POINTS_PER_LEVEL}, "
                f"got {self.points_per_level}"
            )


@dataclass(frozen=True)
class DomainScore:
    """
    Aggregate score for one framework section.

    Attributes:
        domain_id: Section identifier.
        domain_name: Section display name.
        score: Rounded mean of normalized scores (0-100).
        answered: Number of questions with a response.
        total: Number of questions in the section.
        implemented: Number of responses at level 3.
    """

    domain_id: str
    domain_name: str
    score: int
    answered: int
    total: int
    implemented: int

    @property
    def completion_rate(self) -> int:
        """Answered share of the section as a whole percentage."""
        if self.total == 0:
            return 0
        return round_half_up(Fraction(self.answered * 100, self.total))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "domain_id": self.domain_id,
            "domain_name": self.domain_name,
            "score": self.score,
            "answered": self.answered,
            "total": self.total,
            "implemented": self.implemented,
            "completion_rate": self.completion_rate,
        }


class MaturityCalculator:
    """
    Calculator for normalized and aggregated maturity scores.

    Example:
        calculator = MaturityCalculator()

        calculator.normalize(2)  # 50
        domain = calculator.calculate_domain_score(section, record.responses)
        domains = calculator.calculate_domain_scores(framework, record.responses)
        overall = calculator.calculate_overall_score(record.responses)

    Attributes:
        config: MaturityConfig with normalization settings.
    """

    def __init__(self, config: MaturityConfig | None = None) -> None:
        """
        Initialize the maturity calculator.

        Args:
            config: MaturityConfig. Defaults to 25 points per level.
        """
        self.config = config or MaturityConfig()

    def normalize(self, level: Any, control_id: str | None = None) -> int:
        """
        Convert a maturity level to a percentage score.

        Args:
            level: Maturity level (0-3).
            control_id: Control the level belongs to, for error messages.

        Returns:
            level x points_per_level.

        Raises:
            InvalidLevelError: If the level is outside 0-3.
        """
        return validate_level(level, control_id) * self.config.points_per_level

    def mean_score(self, normalized: list[int]) -> int:
        """Rounded mean of normalized scores, 0 for an empty list."""
        if not normalized:
            return 0
        return round_half_up(Fraction(sum(normalized), len(normalized)))

    def calculate_domain_score(
        self,
        section: Section,
        responses: Mapping[str, int],
    ) -> DomainScore:
        """
        Calculate the aggregate score for one section.

        Args:
            section: Framework section.
            responses: Control identifier to maturity level.

        Returns:
            DomainScore for the section.
        """
        questions = section.questions
        normalized: list[int] = []
        implemented = 0

        for question in questions:
            if question.id not in responses:
                continue
            level = responses[question.id]
            normalized.append(self.normalize(level, question.id))
            if level == FULLY_IMPLEMENTED_LEVEL:
                implemented += 1

        return DomainScore(
            domain_id=section.id,
            domain_name=section.name,
            score=self.mean_score(normalized),
            answered=len(normalized),
            total=len(questions),
            implemented=implemented,
        )

    def calculate_domain_scores(
        self,
        framework: FrameworkDefinition,
        responses: Mapping[str, int],
    ) -> list[DomainScore]:
        """Calculate scores for every section, in framework order."""
        scores = [
            self.calculate_domain_score(section, responses)
            for section in framework.sections
        ]
        logger.debug(
            "Scored %d domains for framework %s",
            len(scores),
            framework.id,
        )
        return scores

    def calculate_overall_score(self, responses: Mapping[str, int]) -> int:
        """
        Calculate the overall score across every response.

        Args:
            responses: Control identifier to maturity level.

        Returns:
            Rounded mean normalized score, 0 when there are no responses.
        """
        return self.mean_score(
            [self.normalize(level, control_id) for control_id, level in responses.items()]
        )

    def exact_overall_score(self, responses: Mapping[str, int]) -> Fraction:
        """Unrounded overall score, used when averaging across records."""
        if not responses:
            return Fraction(0)
        total = sum(self.normalize(level, cid) for cid, level in responses.items())
        return Fraction(total, len(responses))

    def count_implemented(self, responses: Mapping[str, int]) -> int:
        """Count responses at the fully implemented level."""
        return sum(
            1
            for control_id, level in responses.items()
            if validate_level(level, control_id) == FULLY_IMPLEMENTED_LEVEL
        )

    def count_open(self, responses: Mapping[str, int]) -> int:
        """Count responses below the fully implemented level."""
        return sum(
            1
            for control_id, level in responses.items()
            if validate_level(level, control_id) < FULLY_IMPLEMENTED_LEVEL
        )
