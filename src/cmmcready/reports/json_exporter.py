"""
JSON export functionality for compliance metrics.

This module exports metrics bundles, gap analysis, and portfolio statistics
in machine-readable JSON format. All exports include metadata for
traceability.

Export Types:
    - metrics: Complete metrics bundle for the active assessment
    - gaps: Ranked gaps and recommendations only
    - statistics: Portfolio statistics across all assessments

Every export embeds the JSON schema describing its top-level layout.
"""

from __future__ import annotations

import gzip
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from cmmcready.analysis.portfolio import PortfolioStatistics
from cmmcready.engine import MetricsBundle

logger = logging.getLogger(__name__)


# JSON Schema definitions for export validation
METRICS_EXPORT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "cmmcready Metrics Export",
    "type": "object",
    "required": ["metadata", "summary", "domain_scores"],
    "properties": {
        "metadata": {
            "type": "object",
            "required": ["export_type", "timestamp", "version"],
        },
        "summary": {"type": "object"},
        "domain_scores": {"type": "array"},
        "status_distribution": {"type": "array"},
        "gaps": {"type": "array"},
        "recommendations": {"type": "array"},
    },
}

GAPS_EXPORT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "cmmcready Gap Analysis Export",
    "type": "object",
    "required": ["metadata", "summary", "gaps"],
    "properties": {
        "metadata": {"type": "object"},
        "summary": {"type": "object"},
        "gaps": {"type": "array"},
        "recommendations": {"type": "array"},
    },
}

STATISTICS_EXPORT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "cmmcready Portfolio Statistics Export",
    "type": "object",
    "required": ["metadata", "statistics"],
    "properties": {
        "metadata": {"type": "object"},
        "statistics": {"type": "object"},
    },
}


@dataclass
class ExportMetadata:
    """
    Metadata included in all exports.

    Attributes:
        export_type: Type of export (metrics, gaps, statistics).
        timestamp: When the export was created.
        version: cmmcready version that created the export.
        organization: Organization name (from config or the assessment).
        framework_id: Framework the data refers to (if applicable).
    """

    export_type: str
    timestamp: datetime
    version: str
    organization: str | None = None
    framework_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "export_type": self.export_type,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "organization": self.organization,
            "framework_id": self.framework_id,
            "format_version": "1.0",
        }


@dataclass
class ExportResult:
    """
    Result of an export operation.

    Attributes:
        success: Whether the export completed successfully.
        path: Path to the exported file.
        size_bytes: Size of the exported file in bytes.
        record_count: Number of records exported.
        export_type: Type of export performed.
        compressed: Whether the file is compressed.
        error: Error message if export failed.
    """

    success: bool
    path: Path | None
    size_bytes: int
    record_count: int
    export_type: str
    compressed: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "path": str(self.path) if self.path else None,
            "size_bytes": self.size_bytes,
            "record_count": self.record_count,
            "export_type": self.export_type,
            "compressed": self.compressed,
            "error": self.error,
        }


def _bundle_summary(bundle: MetricsBundle) -> dict[str, Any]:
    """Headline figures of a bundle."""
    return {
        "framework_id": bundle.framework_id,
        "framework_name": bundle.framework_name,
        "assessment_id": bundle.assessment_id,
        "organization_name": bundle.organization_name,
        "overall_score": bundle.overall_score,
        "implemented_controls": bundle.implemented_controls,
        "open_controls": bundle.open_controls,
        "answered_controls": bundle.answered_controls,
        "total_controls": bundle.total_controls,
    }


class JsonExporter:
    """
    Exporter for JSON format compliance data.

    Example:
        exporter = JsonExporter(version="0.1.0", organization="Acme Corp")

        # Export the full metrics bundle
        result = exporter.export_metrics(bundle, Path("./exports"))

        # Export gaps and recommendations only
        result = exporter.export_gaps(bundle, Path("./exports"))

        # Export portfolio statistics
        result = exporter.export_statistics(stats, Path("./exports"))

    Failures are logged and reported through ExportResult.error rather
    than raised.

    Attributes:
        version: cmmcready version string.
        organization: Organization name for metadata.
    """

    def __init__(
        self,
        version: str = "0.1.0",
        organization: str | None = None,
    ) -> None:
        """
        Initialize the JSON exporter.

        Args:
            version: cmmcready version string for metadata.
            organization: Organization name for metadata. When unset, the
                assessment's organization is used.
        """
        self.version = version
        self.organization = organization

    def _metadata(
        self,
        export_type: str,
        bundle: MetricsBundle | None = None,
    ) -> ExportMetadata:
        organization = self.organization
        if not organization and bundle is not None:
            organization = bundle.organization_name
        return ExportMetadata(
            export_type=export_type,
            timestamp=datetime.now(UTC),
            version=self.version,
            organization=organization,
            framework_id=bundle.framework_id if bundle is not None else None,
        )

    def build_metrics_document(self, bundle: MetricsBundle) -> dict[str, Any]:
        """Build the metrics export document without writing it."""
        return {
            "metadata": self._metadata("metrics", bundle).to_dict(),
            "summary": _bundle_summary(bundle),
            "domain_scores": [d.to_dict() for d in bundle.domain_scores],
            "status_distribution": [b.to_dict() for b in bundle.status_distribution],
            "gaps": [g.to_dict() for g in bundle.gaps],
            "recommendations": [r.to_dict() for r in bundle.recommendations],
            "schema": METRICS_EXPORT_SCHEMA,
        }

    def export_metrics(
        self,
        bundle: MetricsBundle,
        output_dir: Path,
        compress: bool = False,
    ) -> ExportResult:
        """
        Export a metrics bundle to JSON.

        Args:
            bundle: MetricsBundle from the compliance engine.
            output_dir: Directory to write export file.
            compress: Whether to gzip compress the output.

        Returns:
            ExportResult with export details.
        """
        record_count = len(bundle.domain_scores) + len(bundle.gaps) + 1  # summary
        return self._export(
            "metrics",
            self.build_metrics_document(bundle),
            record_count,
            output_dir,
            compress,
        )

    def export_gaps(
        self,
        bundle: MetricsBundle,
        output_dir: Path,
        compress: bool = False,
    ) -> ExportResult:
        """
        Export ranked gaps and recommendations to JSON.

        Args:
            bundle: MetricsBundle from the compliance engine.
            output_dir: Directory to write export file.
            compress: Whether to gzip compress the output.

        Returns:
            ExportResult with export details.
        """
        severity_counts: dict[str, int] = {}
        for gap in bundle.gaps:
            severity_counts[gap.severity.value] = severity_counts.get(gap.severity.value, 0) + 1

        export_data = {
            "metadata": self._metadata("gaps", bundle).to_dict(),
            "summary": {
                "framework_id": bundle.framework_id,
                "overall_score": bundle.overall_score,
                "domains": len(bundle.domain_scores),
                "domains_with_gaps": len(bundle.gaps),
                "gaps_by_severity": severity_counts,
            },
            "gaps": [g.to_dict() for g in bundle.gaps],
            "recommendations": [r.to_dict() for r in bundle.recommendations],
            "schema": GAPS_EXPORT_SCHEMA,
        }
        return self._export("gaps", export_data, len(bundle.gaps), output_dir, compress)

    def export_statistics(
        self,
        statistics: PortfolioStatistics,
        output_dir: Path,
        compress: bool = False,
    ) -> ExportResult:
        """
        Export portfolio statistics to JSON.

        Args:
            statistics: PortfolioStatistics from the portfolio analyzer.
            output_dir: Directory to write export file.
            compress: Whether to gzip compress the output.

        Returns:
            ExportResult with export details.
        """
        export_data = {
            "metadata": self._metadata("statistics").to_dict(),
            "statistics": statistics.to_dict(),
            "schema": STATISTICS_EXPORT_SCHEMA,
        }
        return self._export(
            "statistics", export_data, statistics.total, output_dir, compress
        )

    def _export(
        self,
        export_type: str,
        export_data: dict[str, Any],
        record_count: int,
        output_dir: Path,
        compress: bool,
    ) -> ExportResult:
        """Write an export document and describe the outcome."""
        try:
            output_dir = Path(output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

            filepath = output_dir / self._generate_filename(export_type, compress)
            size_bytes = self._write_json(export_data, filepath, compress)

            logger.info("Exported %s data to %s (%d bytes)", export_type, filepath, size_bytes)

            return ExportResult(
                success=True,
                path=filepath,
                size_bytes=size_bytes,
                record_count=record_count,
                export_type=export_type,
                compressed=compress,
            )

        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to export %s data: %s", export_type, e)
            return ExportResult(
                success=False,
                path=None,
                size_bytes=0,
                record_count=0,
                export_type=export_type,
                compressed=compress,
                error=str(e),
            )

    def _generate_filename(self, export_type: str, compress: bool) -> str:
        """Generate filename with timestamp."""
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
        extension = ".json.gz" if compress else ".json"
        return f"{timestamp}_{export_type}_export{extension}"

    def _write_json(
        self,
        data: dict[str, Any],
        filepath: Path,
        compress: bool,
    ) -> int:
        """
        Write JSON data to file.

        Args:
            data: Data to write.
            filepath: Path to output file.
            compress: Whether to gzip compress.

        Returns:
            Size of written file in bytes.
        """
        json_content = json.dumps(data, indent=2, default=str)

        if compress:
            with gzip.open(filepath, "wt", encoding="utf-8") as f:
                f.write(json_content)
        else:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(json_content)

        return filepath.stat().st_size

    def get_schema(self, export_type: str) -> dict[str, Any]:
        """
        Get JSON schema for an export type.

        Args:
            export_type: Type of export (metrics, gaps, statistics).

        Returns:
            JSON schema dictionary, empty for unknown types.
        """
        schemas = {
            "metrics": METRICS_EXPORT_SCHEMA,
            "gaps": GAPS_EXPORT_SCHEMA,
            "statistics": STATISTICS_EXPORT_SCHEMA,
        }
        return schemas.get(export_type, {})
