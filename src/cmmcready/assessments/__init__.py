"""
Assessment records and active-assessment selection.

Records are read-only inputs owned by the storage collaborator. The
selector picks the record that dashboards and reports score: the most
recently modified one for the requested framework, with missing or
unparsable timestamps ranked last.

Example:
    from cmmcready.assessments import AssessmentSelector, load_assessments

    records = load_assessments("assessments.json")
    active = AssessmentSelector().select(records, framework_id="cmmc-2.0-level1")
"""

from cmmcready.assessments.loader import load_assessments, parse_assessments
from cmmcready.assessments.models import AssessmentRecord, AssessmentValidationError
from cmmcready.assessments.selector import (
    AmbiguousTimestampError,
    AssessmentSelector,
    parse_timestamp,
    sort_by_recency,
    timestamp_or_none,
)

__all__ = [
    "AssessmentRecord",
    "AssessmentValidationError",
    "load_assessments",
    "parse_assessments",
    "AssessmentSelector",
    "AmbiguousTimestampError",
    "parse_timestamp",
    "sort_by_recency",
    "timestamp_or_none",
]
