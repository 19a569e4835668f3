"""
Tests for assessment records, loading, and active-record selection.

Uses Python's unittest module.
Tests record validation, camelCase/snake_case input, timestamp parsing,
recency ordering, and framework filtering.
"""

from __future__ import annotations

import json
import shutil
import tempfile
import unittest
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

from cmmcready.assessments.loader import load_assessments, parse_assessments
from cmmcready.assessments.models import (
    AssessmentRecord,
    AssessmentValidationError,
)
from cmmcready.assessments.selector import (
    AmbiguousTimestampError,
    AssessmentSelector,
    parse_timestamp,
    sort_by_recency,
)
from cmmcready.framework.registry import default_registry


class TestAssessmentRecord(unittest.TestCase):
    """Tests for AssessmentRecord."""

    def test_from_dict_camel_case(self) -> None:
        """Test the browser export format."""
        record = AssessmentRecord.from_dict(
            {
                "id": 42,
                "frameworkId": "cmmc",
                "frameworkName": "CMMC 2.0 Level 1",
                "responses": {"ac.l1-3.1.1": 3, "ia.l1-3.5.1": 0},
                "lastModified": "2026-01-15T10:00:00Z",
                "isComplete": True,
                "timeSpent": "45",
                "organizationInfo": {"name": "Acme Corp"},
            }
        )

        self.assertEqual(record.id, "42")
        self.assertEqual(record.framework_id, "cmmc")
        self.assertEqual(record.framework_name, "CMMC 2.0 Level 1")
        self.assertEqual(dict(record.responses), {"ac.l1-3.1.1": 3, "ia.l1-3.5.1": 0})
        self.assertEqual(record.last_modified, "2026-01-15T10:00:00Z")
        self.assertTrue(record.is_complete)
        self.assertEqual(record.time_spent, 45)
        self.assertEqual(record.organization_name, "Acme Corp")

    def test_from_dict_snake_case(self) -> None:
        """Test snake_case keys."""
        record = AssessmentRecord.from_dict(
            {
                "id": "a1",
                "framework_id": "cmmc",
                "responses": {},
                "is_complete": False,
                "organization_name": "Globex",
            }
        )

        self.assertEqual(record.framework_id, "cmmc")
        self.assertFalse(record.is_complete)
        self.assertEqual(record.organization_name, "Globex")
        self.assertIsNone(record.time_spent)
        self.assertEqual(record.response_count, 0)

    def test_null_responses_dropped(self) -> None:
        """Test null answers count as unanswered."""
        record = AssessmentRecord.from_dict(
            {"id": "a", "frameworkId": "cmmc", "responses": {"x": None, "y": 2}}
        )

        self.assertEqual(dict(record.responses), {"y": 2})

    def test_out_of_range_level_loads(self) -> None:
        """Test range checking is left to scoring."""
        record = AssessmentRecord.from_dict(
            {"id": "a", "frameworkId": "cmmc", "responses": {"x": 7}}
        )

        self.assertEqual(record.responses["x"], 7)

    def test_non_integer_level_rejected(self) -> None:
        """Test non-integer answers are rejected on load."""
        for value in ("3", 2.5, True):
            with self.assertRaises(AssessmentValidationError):
                AssessmentRecord.from_dict(
                    {"id": "a", "frameworkId": "cmmc", "responses": {"x": value}}
                )

    def test_missing_fields_rejected(self) -> None:
        """Test id and framework id are required."""
        with self.assertRaises(AssessmentValidationError):
            AssessmentRecord.from_dict({"frameworkId": "cmmc"})
        with self.assertRaises(AssessmentValidationError):
            AssessmentRecord.from_dict({"id": "a"})
        with self.assertRaises(AssessmentValidationError):
            AssessmentRecord.from_dict({"id": "a", "frameworkId": "cmmc", "responses": [1]})

    def test_bad_time_spent_rejected(self) -> None:
        """Test a non-numeric time spent is rejected."""
        with self.assertRaises(AssessmentValidationError):
            AssessmentRecord.from_dict({"id": "a", "frameworkId": "cmmc", "timeSpent": "long"})

    def test_responses_read_only(self) -> None:
        """Test responses cannot be mutated through the record."""
        source = {"x": 1}
        record = AssessmentRecord(id="a", framework_id="cmmc", responses=source)
        source["x"] = 3

        self.assertEqual(record.responses["x"], 1)
        with self.assertRaises(TypeError):
            record.responses["x"] = 2

    def test_to_dict(self) -> None:
        """Test conversion to dictionary."""
        when = datetime(2026, 1, 1, tzinfo=UTC)
        data = AssessmentRecord(
            id="a", framework_id="cmmc", responses={"x": 1}, last_modified=when
        ).to_dict()

        self.assertEqual(data["responses"], {"x": 1})
        self.assertEqual(data["last_modified"], when.isoformat())
        json.dumps(data)


class TestLoader(unittest.TestCase):
    """Tests for loading assessment files."""

    def setUp(self) -> None:
        """Create temp directory."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self) -> None:
        """Clean up temp directory."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_parse_list(self) -> None:
        """Test a bare list of records."""
        records = parse_assessments([{"id": "a", "frameworkId": "cmmc"}])

        self.assertEqual([r.id for r in records], ["a"])

    def test_parse_wrapped(self) -> None:
        """Test a mapping with an assessments list."""
        records = parse_assessments(
            {"assessments": [{"id": "a", "frameworkId": "x"}, {"id": "b", "frameworkId": "y"}]}
        )

        self.assertEqual([r.id for r in records], ["a", "b"])

    def test_parse_empty(self) -> None:
        """Test empty documents."""
        self.assertEqual(parse_assessments(None), [])
        self.assertEqual(parse_assessments({}), [])

    def test_parse_invalid_shape(self) -> None:
        """Test a scalar document is rejected."""
        with self.assertRaises(AssessmentValidationError):
            parse_assessments("records")

    def test_load_json(self) -> None:
        """Test loading a JSON file."""
        path = Path(self.temp_dir) / "assessments.json"
        path.write_text(
            json.dumps([{"id": "a", "frameworkId": "cmmc", "responses": {"x": 2}}]),
            encoding="utf-8",
        )

        records = load_assessments(path)

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].responses["x"], 2)

    def test_load_yaml(self) -> None:
        """Test loading a YAML file."""
        path = Path(self.temp_dir) / "assessments.yaml"
        path.write_text(
            "assessments:\n  - id: a\n    frameworkId: cmmc\n    responses:\n      x: 1\n",
            encoding="utf-8",
        )

        self.assertEqual(load_assessments(path)[0].responses["x"], 1)

    def test_load_invalid_json(self) -> None:
        """Test malformed JSON is reported as a validation error."""
        path = Path(self.temp_dir) / "broken.json"
        path.write_text("[{", encoding="utf-8")

        with self.assertRaises(AssessmentValidationError):
            load_assessments(path)

    def test_load_missing_file(self) -> None:
        """Test a missing file is reported as a validation error."""
        with self.assertRaises(AssessmentValidationError):
            load_assessments(Path(self.temp_dir) / "missing.json")


class TestParseTimestamp(unittest.TestCase):
    """Tests for parse_timestamp."""

    def test_iso_with_z(self) -> None:
        """Test ISO-8601 with a Z suffix."""
        self.assertEqual(
            parse_timestamp("2026-01-15T10:00:00Z"),
            datetime(2026, 1, 15, 10, 0, tzinfo=UTC),
        )

    def test_iso_with_offset(self) -> None:
        """Test ISO-8601 with an explicit offset."""
        parsed = parse_timestamp("2026-01-15T12:00:00+02:00")

        self.assertEqual(parsed, datetime(2026, 1, 15, 10, 0, tzinfo=UTC))

    def test_naive_is_utc(self) -> None:
        """Test naive values are taken as UTC."""
        self.assertEqual(
            parse_timestamp("2026-01-15T10:00:00"),
            datetime(2026, 1, 15, 10, 0, tzinfo=UTC),
        )
        self.assertEqual(
            parse_timestamp(datetime(2026, 1, 15)).tzinfo,
            UTC,
        )

    def test_aware_datetime_unchanged(self) -> None:
        """Test aware datetimes keep their zone."""
        value = datetime(2026, 1, 15, tzinfo=timezone(timedelta(hours=-5)))

        self.assertIs(parse_timestamp(value), value)

    def test_epoch_milliseconds(self) -> None:
        """Test numeric values are epoch milliseconds."""
        self.assertEqual(
            parse_timestamp(1_700_000_000_000),
            datetime.fromtimestamp(1_700_000_000, UTC),
        )

    def test_ambiguous_values(self) -> None:
        """Test missing and unparsable values raise."""
        for value in (None, "", "yesterday", True, [2026], 10**20):
            with self.assertRaises(AmbiguousTimestampError, msg=repr(value)):
                parse_timestamp(value)


class TestSelection(unittest.TestCase):
    """Tests for recency ordering and AssessmentSelector."""

    def setUp(self) -> None:
        """Set up records with mixed timestamps."""
        self.old = AssessmentRecord(
            id="old", framework_id="cmmc", last_modified="2025-06-01T00:00:00Z"
        )
        self.new = AssessmentRecord(
            id="new", framework_id="cmmc-2.0-level1", last_modified="2026-02-01T00:00:00Z"
        )
        self.bad = AssessmentRecord(id="bad", framework_id="cmmc", last_modified="n/a")
        self.other = AssessmentRecord(
            id="other", framework_id="nist-csf", last_modified="2026-03-01T00:00:00Z"
        )

    def test_sort_newest_first(self) -> None:
        """Test undated records go last."""
        ordered = sort_by_recency([self.bad, self.old, self.new])

        self.assertEqual([r.id for r in ordered], ["new", "old", "bad"])

    def test_sort_oldest_first(self) -> None:
        """Test undated records go last in ascending order too."""
        ordered = sort_by_recency([self.bad, self.new, self.old], newest_first=False)

        self.assertEqual([r.id for r in ordered], ["old", "new", "bad"])

    def test_equal_timestamps_keep_order(self) -> None:
        """Test ties keep input order."""
        twin = AssessmentRecord(
            id="twin", framework_id="cmmc", last_modified="2026-02-01T00:00:00+00:00"
        )
        ordered = sort_by_recency([self.new, twin])

        self.assertEqual([r.id for r in ordered], ["new", "twin"])

    def test_select_most_recent(self) -> None:
        """Test the newest record is selected."""
        selector = AssessmentSelector()

        self.assertIs(selector.select([self.old, self.other, self.new]), self.other)

    def test_select_by_framework_with_aliases(self) -> None:
        """Test framework filtering resolves aliases."""
        selector = AssessmentSelector(default_registry())
        selected = selector.select([self.old, self.other, self.new], "cmmc")

        self.assertIs(selected, self.new)

    def test_select_exact_without_registry(self) -> None:
        """Test framework filtering without a registry is exact."""
        selector = AssessmentSelector()

        self.assertIs(selector.select([self.old, self.new], "cmmc"), self.old)

    def test_select_none(self) -> None:
        """Test no candidates selects nothing."""
        selector = AssessmentSelector(default_registry())

        self.assertIsNone(selector.select([]))
        self.assertIsNone(selector.select([self.other], "cmmc"))

    def test_select_only_undated(self) -> None:
        """Test a lone undated record is still selected."""
        self.assertIs(AssessmentSelector().select([self.bad]), self.bad)


if __name__ == "__main__":
    unittest.main()
