"""
Implementation status distribution.

Tallies the raw maturity levels of a record into the four named
implementation statuses. The tallies are for distribution reporting only;
no normalization is applied.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cmmcready.scoring.maturity_calculator import MAX_LEVEL, MIN_LEVEL, validate_level

logger = logging.getLogger(__name__)

# Indexed by maturity level
STATUS_LABELS: tuple[str, ...] = (
    "Not Implemented",
    "Partially Implemented",
    "Largely Implemented",
    "Fully Implemented",
)


@dataclass(frozen=True)
class StatusBucket:
    """Count of responses at one maturity level."""

    level: int
    label: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"status": self.label, "level": self.level, "count": self.count}


class StatusClassifier:
    """
    Classifier producing the implementation status distribution.

    Example:
        distribution = StatusClassifier().classify(record.responses)
        for bucket in distribution:
            print(bucket.label, bucket.count)
    """

    def classify(self, responses: Mapping[str, int]) -> list[StatusBucket]:
        """
        Count responses per maturity level.

        Args:
            responses: Control identifier to maturity level.

        Returns:
            Four buckets in level order 0-3; counts sum to len(responses).

        Raises:
            InvalidLevelError: If any level is outside 0-3.
        """
        counts = dict.fromkeys(range(MIN_LEVEL, MAX_LEVEL + 1), 0)
        for control_id, level in responses.items():
            counts[validate_level(level, control_id)] += 1

        return [
            StatusBucket(level=level, label=STATUS_LABELS[level], count=count)
            for level, count in counts.items()
        ]

    def empty_distribution(self) -> list[StatusBucket]:
        """Distribution with every bucket at zero."""
        return self.classify({})
