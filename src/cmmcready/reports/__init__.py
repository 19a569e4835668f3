"""
Report generation for compliance documentation.

This module turns metrics bundles and portfolio statistics into outputs
for people and programs.

Supported Formats:
    - JSON: Machine-readable exports with metadata and schemas.
    - Text: Plain text summaries for emails and quick reference.
    - Markdown: Documentation-friendly format.

Example:
    from cmmcready.reports import ExecutiveSummaryGenerator, JsonExporter

    # Export JSON data
    json_exp = JsonExporter(version="0.1.0")
    result = json_exp.export_metrics(bundle, output_dir=Path("./exports"))

    # Generate executive summary
    summary = ExecutiveSummaryGenerator().generate_summary(bundle)
"""

from cmmcready.reports.executive_summary import (
    ExecutiveSummaryGenerator,
    SummaryConfig,
)
from cmmcready.reports.json_exporter import (
    ExportMetadata,
    ExportResult,
    JsonExporter,
)

__all__ = [
    # JSON Exporter
    "JsonExporter",
    "ExportMetadata",
    "ExportResult",
    # Executive Summary
    "ExecutiveSummaryGenerator",
    "SummaryConfig",
]
