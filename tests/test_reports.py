"""
Tests for the reports module.

Uses Python's unittest module.
Tests JSON exports and executive summary generation.
"""

from __future__ import annotations

import gzip
import json
import shutil
import tempfile
import unittest
from datetime import UTC, datetime
from pathlib import Path

from cmmcready.analysis.portfolio import PortfolioStatistics
from cmmcready.assessments.models import AssessmentRecord
from cmmcready.engine import ComplianceEngine, MetricsBundle
from cmmcready.framework.cmmc_level1 import CMMC_LEVEL1_ID, get_cmmc_level1
from cmmcready.reports.executive_summary import (
    ExecutiveSummaryGenerator,
    SummaryConfig,
)
from cmmcready.reports.json_exporter import (
    GAPS_EXPORT_SCHEMA,
    METRICS_EXPORT_SCHEMA,
    STATISTICS_EXPORT_SCHEMA,
    ExportMetadata,
    ExportResult,
    JsonExporter,
)


def create_mixed_bundle(organization: str | None = "Acme Corp") -> MetricsBundle:
    """Score a partially implemented Level 1 assessment."""
    responses = {f"ac.l1-3.1.{i}": 3 for i in range(1, 7)}
    responses.update({"ia.l1-3.5.1": 1, "ia.l1-3.5.2": 1, "mp.l1-3.8.3": 2})
    responses.update({"sc.l1-3.13.1": 3, "sc.l1-3.13.8": 2})
    responses.update({f"si.l1-3.14.{i}": 0 for i in (1, 2, 4, 5)})
    record = AssessmentRecord(
        id="acme-1",
        framework_id=CMMC_LEVEL1_ID,
        responses=responses,
        organization_name=organization,
    )
    return ComplianceEngine().calculate([record], CMMC_LEVEL1_ID)


def create_complete_bundle() -> MetricsBundle:
    """Score a fully implemented Level 1 assessment."""
    framework = get_cmmc_level1()
    record = AssessmentRecord(
        id="done",
        framework_id=CMMC_LEVEL1_ID,
        responses={cid: 3 for cid in framework.control_ids()},
    )
    return ComplianceEngine().calculate([record], CMMC_LEVEL1_ID)


class TestExportMetadata(unittest.TestCase):
    """Tests for ExportMetadata dataclass."""

    def test_to_dict(self) -> None:
        """Test conversion to dictionary."""
        timestamp = datetime(2026, 1, 15, 10, 30, tzinfo=UTC)
        metadata = ExportMetadata(
            export_type="metrics",
            timestamp=timestamp,
            version="0.1.0",
            organization="Acme Corp",
            framework_id=CMMC_LEVEL1_ID,
        )
        data = metadata.to_dict()

        self.assertEqual(data["export_type"], "metrics")
        self.assertEqual(data["timestamp"], timestamp.isoformat())
        self.assertEqual(data["organization"], "Acme Corp")
        self.assertEqual(data["format_version"], "1.0")


class TestExportResult(unittest.TestCase):
    """Tests for ExportResult dataclass."""

    def test_to_dict(self) -> None:
        """Test conversion to dictionary."""
        result = ExportResult(
            success=True,
            path=Path("/tmp/export.json"),
            size_bytes=1024,
            record_count=10,
            export_type="metrics",
            compressed=False,
        )
        data = result.to_dict()

        self.assertTrue(data["success"])
        self.assertEqual(data["path"], "/tmp/export.json")
        self.assertIsNone(data["error"])

    def test_to_dict_without_path(self) -> None:
        """Test a failed result serializes a null path."""
        result = ExportResult(False, None, 0, 0, "gaps", False, error="boom")

        self.assertIsNone(result.to_dict()["path"])
        self.assertEqual(result.to_dict()["error"], "boom")


class TestJsonExporter(unittest.TestCase):
    """Tests for JsonExporter."""

    def setUp(self) -> None:
        """Create temp directory and sample data."""
        self.temp_dir = tempfile.mkdtemp()
        self.output_dir = Path(self.temp_dir) / "exports"
        self.exporter = JsonExporter(version="0.1.0")
        self.bundle = create_mixed_bundle()

    def tearDown(self) -> None:
        """Clean up temp directory."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_build_metrics_document(self) -> None:
        """Test the in-memory metrics document."""
        document = self.exporter.build_metrics_document(self.bundle)

        self.assertEqual(document["summary"]["overall_score"], 45)
        self.assertEqual(document["summary"]["total_controls"], 17)
        self.assertEqual(len(document["domain_scores"]), 6)
        self.assertEqual(len(document["status_distribution"]), 4)
        self.assertEqual(len(document["gaps"]), 5)
        self.assertEqual(len(document["recommendations"]), 5)
        self.assertEqual(document["schema"], METRICS_EXPORT_SCHEMA)

    def test_metadata_organization_fallback(self) -> None:
        """Test the assessment organization is used when none is configured."""
        document = self.exporter.build_metrics_document(self.bundle)

        self.assertEqual(document["metadata"]["organization"], "Acme Corp")
        self.assertEqual(document["metadata"]["framework_id"], CMMC_LEVEL1_ID)

    def test_metadata_configured_organization(self) -> None:
        """Test a configured organization wins."""
        exporter = JsonExporter(organization="Initech")
        document = exporter.build_metrics_document(self.bundle)

        self.assertEqual(document["metadata"]["organization"], "Initech")

    def test_export_metrics(self) -> None:
        """Test writing a metrics export."""
        result = self.exporter.export_metrics(self.bundle, self.output_dir)

        self.assertTrue(result.success)
        self.assertFalse(result.compressed)
        self.assertTrue(result.path.exists())
        self.assertTrue(result.path.name.endswith("_metrics_export.json"))
        self.assertEqual(result.size_bytes, result.path.stat().st_size)
        # 6 domains + 5 gaps + summary
        self.assertEqual(result.record_count, 12)

        data = json.loads(result.path.read_text(encoding="utf-8"))
        for key in METRICS_EXPORT_SCHEMA["required"]:
            self.assertIn(key, data)
        self.assertEqual(data["metadata"]["export_type"], "metrics")

    def test_export_metrics_compressed(self) -> None:
        """Test gzip compressed export."""
        result = self.exporter.export_metrics(self.bundle, self.output_dir, compress=True)

        self.assertTrue(result.success)
        self.assertTrue(result.compressed)
        self.assertTrue(result.path.name.endswith(".json.gz"))
        with gzip.open(result.path, "rt", encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["summary"]["assessment_id"], "acme-1")

    def test_export_gaps(self) -> None:
        """Test gap export with severity counts."""
        result = self.exporter.export_gaps(self.bundle, self.output_dir)

        self.assertTrue(result.success)
        self.assertEqual(result.record_count, 5)

        data = json.loads(result.path.read_text(encoding="utf-8"))
        self.assertEqual(data["summary"]["domains"], 6)
        self.assertEqual(data["summary"]["domains_with_gaps"], 5)
        self.assertEqual(
            data["summary"]["gaps_by_severity"],
            {"critical": 3, "high": 1, "medium": 1},
        )
        self.assertEqual(data["gaps"][0]["domain_id"], "physical-protection")
        self.assertEqual(data["recommendations"][0]["timeframe"], "6-12 months")

    def test_export_zero_state(self) -> None:
        """Test exporting a bundle without an assessment."""
        bundle = MetricsBundle.empty(get_cmmc_level1())
        result = self.exporter.export_gaps(bundle, self.output_dir)

        self.assertTrue(result.success)
        self.assertEqual(result.record_count, 0)
        data = json.loads(result.path.read_text(encoding="utf-8"))
        self.assertEqual(data["gaps"], [])
        self.assertIsNone(data["metadata"]["organization"])

    def test_export_statistics(self) -> None:
        """Test portfolio statistics export."""
        stats = PortfolioStatistics(total=3, completed=1, in_progress=2, average_score=42)
        result = self.exporter.export_statistics(stats, self.output_dir)

        self.assertTrue(result.success)
        self.assertEqual(result.record_count, 3)
        data = json.loads(result.path.read_text(encoding="utf-8"))
        self.assertEqual(data["statistics"]["average_score"], 42)
        self.assertIsNone(data["metadata"]["framework_id"])
        self.assertEqual(data["schema"], STATISTICS_EXPORT_SCHEMA)

    def test_export_failure_reported(self) -> None:
        """Test write failures are reported, not raised."""
        blocker = Path(self.temp_dir) / "not_a_dir"
        blocker.write_text("x")

        result = self.exporter.export_metrics(self.bundle, blocker)

        self.assertFalse(result.success)
        self.assertIsNone(result.path)
        self.assertIsNotNone(result.error)

    def test_get_schema(self) -> None:
        """Test schema lookup."""
        self.assertEqual(self.exporter.get_schema("gaps"), GAPS_EXPORT_SCHEMA)
        self.assertEqual(self.exporter.get_schema("unknown"), {})


class TestExecutiveSummaryGenerator(unittest.TestCase):
    """Tests for ExecutiveSummaryGenerator."""

    def setUp(self) -> None:
        """Set up generator and sample data."""
        self.config = SummaryConfig(report_date=datetime(2026, 1, 15, tzinfo=UTC))
        self.generator = ExecutiveSummaryGenerator(self.config)
        self.bundle = create_mixed_bundle()

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = SummaryConfig()

        self.assertEqual(config.organization, "")
        self.assertTrue(config.include_recommendations)
        self.assertEqual(config.max_recommendations, 5)

    def test_text_summary_sections(self) -> None:
        """Test every section heading appears."""
        summary = self.generator.generate_summary(self.bundle)

        self.assertIn("CMMC 2.0 LEVEL 1 - BASIC CYBER HYGIENE READINESS SUMMARY", summary)
        self.assertIn("Acme Corp", summary)
        self.assertIn("Report Date: January 15, 2026", summary)
        for heading in (
            "OVERVIEW",
            "SCORES BY DOMAIN",
            "IMPLEMENTATION STATUS",
            "KEY FINDINGS",
            "RECOMMENDED ACTIONS",
        ):
            self.assertIn(heading, summary)

    def test_text_summary_figures(self) -> None:
        """Test scores and status counts in the text summary."""
        summary = self.generator.generate_summary(self.bundle)

        self.assertIn("Overall Score: 45%", summary)
        self.assertIn("Access Control (AC): 75% (6/6 assessed)", summary)
        self.assertIn("Physical Protection (PE): 0% (0/2 assessed)", summary)
        self.assertIn("Not Implemented: 4", summary)
        self.assertIn("Fully Implemented: 7", summary)
        self.assertIn("foundational readiness posture", summary)

    def test_key_findings(self) -> None:
        """Test strongest and weakest areas and critical gaps."""
        summary = self.generator.generate_summary(self.bundle)

        self.assertIn("Strongest area: Access Control (AC) at 75%", summary)
        self.assertIn(
            "Area needing attention: System and Information Integrity (SI) at 0%",
            summary,
        )
        self.assertIn("1 domain(s) have no assessed controls", summary)
        self.assertIn("3 critical gap(s) require immediate attention", summary)

    def test_recommendation_lines(self) -> None:
        """Test recommendation formatting."""
        summary = self.generator.generate_summary(self.bundle)

        self.assertIn(
            "1. Physical Protection (PE): Enhance physical access controls and "
            "environmental protections (high effort, 6-12 months, +25% improvement)",
            summary,
        )

    def test_max_recommendations(self) -> None:
        """Test recommendations are truncated."""
        generator = ExecutiveSummaryGenerator(SummaryConfig(max_recommendations=2))
        summary = generator.generate_summary(self.bundle)

        self.assertIn("2. System and Information Integrity (SI)", summary)
        self.assertNotIn("3. Identification and Authentication (IA)", summary)

    def test_without_recommendations(self) -> None:
        """Test recommendations can be omitted."""
        generator = ExecutiveSummaryGenerator(SummaryConfig(include_recommendations=False))

        self.assertNotIn("RECOMMENDED ACTIONS", generator.generate_summary(self.bundle))

    def test_organization_precedence(self) -> None:
        """Test configured, then assessment, then default organization."""
        configured = ExecutiveSummaryGenerator(SummaryConfig(organization="Initech"))
        anonymous = create_mixed_bundle(organization=None)

        self.assertIn("Initech", configured.generate_summary(self.bundle))
        self.assertIn("Organization has a", self.generator.generate_summary(anonymous))

    def test_complete_assessment(self) -> None:
        """Test summary when every domain meets the target."""
        bundle = create_complete_bundle()
        summary = self.generator.generate_summary(bundle)

        self.assertIn("Every domain meets the readiness target.", summary)
        self.assertIn("No critical gaps identified", summary)
        self.assertIn("Maintain current controls and reassess periodically", summary)
        self.assertEqual(self.generator.get_posture_rating(bundle), "Strong")

    def test_zero_state(self) -> None:
        """Test summary without an assessment."""
        bundle = MetricsBundle.empty(get_cmmc_level1())
        summary = self.generator.generate_summary(bundle)

        self.assertIn("No assessment has been recorded for Organization", summary)
        self.assertIn("6 domain(s) have no assessed controls", summary)
        self.assertIn("Complete a self-assessment of every control", summary)
        self.assertNotIn("Strongest area", summary)

    def test_unknown_framework_zero_state(self) -> None:
        """Test summary for an unregistered framework."""
        bundle = MetricsBundle.empty(framework_id="nist-csf")
        summary = self.generator.generate_summary(bundle)

        self.assertIn("NIST-CSF READINESS SUMMARY", summary)
        self.assertIn("Overall Score: 0%", summary)

    def test_markdown(self) -> None:
        """Test markdown layout."""
        markdown = self.generator.generate_markdown(self.bundle)

        self.assertTrue(
            markdown.startswith("# CMMC 2.0 Level 1 - Basic Cyber Hygiene Readiness Summary")
        )
        self.assertIn("**Acme Corp** | January 15, 2026", markdown)
        self.assertIn("| Domain | Score | Answered | Implemented |", markdown)
        self.assertIn("| Media Protection (MP) | 50% | 1/1 | 0 |", markdown)
        self.assertIn("| **Overall** | **45%** | **15/17** | **7** |", markdown)
        self.assertIn("## Gap Summary", markdown)
        self.assertIn("- **Domains Below Target:** 5 of 6", markdown)
        self.assertIn("- **Critical:** 3", markdown)

    def test_markdown_without_gaps(self) -> None:
        """Test the gap summary is omitted when nothing falls short."""
        markdown = self.generator.generate_markdown(create_complete_bundle())

        self.assertNotIn("## Gap Summary", markdown)

    def test_posture_ratings(self) -> None:
        """Test posture rating breakpoints."""
        self.assertEqual(self.generator.get_posture_rating(self.bundle), "Foundational")
        self.assertEqual(
            self.generator.get_posture_rating(MetricsBundle.empty(get_cmmc_level1())),
            "Needs Improvement",
        )


if __name__ == "__main__":
    unittest.main()
