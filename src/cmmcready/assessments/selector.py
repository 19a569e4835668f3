"""
Active assessment selection.

Picks the record the dashboards score: the most recently modified record,
optionally restricted to one framework. Stored "last modified" values are
not trusted; anything missing or unparsable ranks after every record with a
valid timestamp instead of failing the selection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from cmmcready.assessments.models import AssessmentRecord
from cmmcready.framework.registry import FrameworkRegistry

logger = logging.getLogger(__name__)


class AmbiguousTimestampError(ValueError):
    """Raised when a stored "last modified" value cannot be interpreted."""

    def __init__(self, value: Any, reason: str = "unparsable") -> None:
        self.value = value
        super().__init__(f"Ambiguous timestamp {value!r}: {reason}")


def parse_timestamp(value: Any) -> datetime:
    """
    Interpret a stored "last modified" value.

    Accepted forms:
        - timezone-aware or naive datetime (naive is taken as UTC)
        - ISO-8601 string, including a trailing "Z"
        - int/float epoch milliseconds, as written by browser clients

    Args:
        value: Raw stored value.

    Returns:
        Timezone-aware datetime.

    Raises:
        AmbiguousTimestampError: If the value is missing or cannot be parsed.
    """
    if value is None:
        raise AmbiguousTimestampError(value, "missing")

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)

    if isinstance(value, bool):
        raise AmbiguousTimestampError(value, "boolean")

    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value / 1000, UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise AmbiguousTimestampError(value, str(e)) from e

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise AmbiguousTimestampError(value, "empty")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise AmbiguousTimestampError(value, str(e)) from e
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    raise AmbiguousTimestampError(value, f"unsupported type {type(value).__name__}")


def timestamp_or_none(record: AssessmentRecord) -> datetime | None:
    """Parse a record's timestamp, returning None when it is ambiguous."""
    try:
        return parse_timestamp(record.last_modified)
    except AmbiguousTimestampError as e:
        logger.debug("Assessment %s ranks last: %s", record.id, e)
        return None


def sort_by_recency(
    records: Iterable[AssessmentRecord],
    newest_first: bool = True,
) -> list[AssessmentRecord]:
    """
    Sort records by last-modified time.

    Records with missing or unparsable timestamps always come last, in
    their input order. Records with equal timestamps keep input order.
    """
    dated: list[tuple[datetime, AssessmentRecord]] = []
    undated: list[AssessmentRecord] = []
    for record in records:
        timestamp = timestamp_or_none(record)
        if timestamp is None:
            undated.append(record)
        else:
            dated.append((timestamp, record))

    dated.sort(key=lambda item: item[0], reverse=newest_first)
    return [record for _, record in dated] + undated


class AssessmentSelector:
    """
    Selects the active assessment from a collection.

    Example:
        selector = AssessmentSelector(registry)
        record = selector.select(records, framework_id="cmmc")
        if record is None:
            ...  # zero-state

    Attributes:
        registry: Optional registry used to resolve framework aliases when
            filtering. Without one, framework ids must match exactly.
    """

    def __init__(self, registry: FrameworkRegistry | None = None) -> None:
        self.registry = registry

    def filter_by_framework(
        self,
        records: Iterable[AssessmentRecord],
        framework_id: str,
    ) -> list[AssessmentRecord]:
        """Keep only records answering the given framework."""
        if self.registry is not None:
            return [r for r in records if self.registry.matches(r.framework_id, framework_id)]
        return [r for r in records if r.framework_id == framework_id]

    def select(
        self,
        records: Iterable[AssessmentRecord],
        framework_id: str | None = None,
    ) -> AssessmentRecord | None:
        """
        Select the most recently modified record.

        Args:
            records: Candidate records in any order.
            framework_id: Restrict to records for this framework.

        Returns:
            The active record, or None when no record qualifies.
        """
        candidates = list(records)
        if framework_id is not None:
            candidates = self.filter_by_framework(candidates, framework_id)

        if not candidates:
            logger.info(
                "No active assessment%s",
                f" for framework {framework_id}" if framework_id else "",
            )
            return None

        selected = sort_by_recency(candidates)[0]
        logger.debug(
            "Selected assessment %s from %d candidate(s)",
            selected.id,
            len(candidates),
        )
        return selected
