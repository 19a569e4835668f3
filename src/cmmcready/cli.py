"""
Command-line interface for cmmcready.

Provides commands for scoring the active CMMC assessment, inspecting gaps
and recommendations, summarizing the assessment portfolio, and exporting
reports.

Uses Python's argparse module (no external CLI libraries).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, NoReturn

from cmmcready import __version__
from cmmcready.analysis.gap_analyzer import Severity
from cmmcready.analysis.portfolio import (
    SORT_KEYS,
    STATUS_FILTERS,
    PortfolioAnalyzer,
    PortfolioConfig,
    RiskLevel,
)
from cmmcready.assessments.loader import load_assessments
from cmmcready.assessments.models import AssessmentRecord, AssessmentValidationError
from cmmcready.config.settings import (
    DEFAULT_CONFIG_DIR,
    ConfigurationError,
    Settings,
    get_config_path,
    load_config,
)
from cmmcready.engine import ComplianceEngine, MetricsBundle
from cmmcready.framework.definitions import FrameworkValidationError, load_framework
from cmmcready.framework.registry import (
    FrameworkRegistry,
    MissingFrameworkError,
    default_registry,
)
from cmmcready.scoring.maturity_calculator import (
    InvalidLevelError,
    MaturityCalculator,
    MaturityConfig,
)

# Set up logging
logger = logging.getLogger(__name__)

# Global verbosity settings (set during main() based on args)
_quiet_mode = False
_verbose_level = 0


def set_output_mode(quiet: bool = False, verbose: int = 0) -> None:
    """
    Set the output mode for the CLI.

    Args:
        quiet: If True, suppress non-essential output.
        verbose: Verbosity level (0=normal, 1+=verbose).
    """
    global _quiet_mode, _verbose_level
    _quiet_mode = quiet
    _verbose_level = verbose


def output(message: str = "", force: bool = False) -> None:
    """
    Print a message to stdout, respecting quiet mode.

    Args:
        message: The message to print.
        force: If True, print even in quiet mode (for essential output like JSON/CSV).
    """
    if force or not _quiet_mode:
        print(message)


def output_verbose(message: str, level: int = 1) -> None:
    """
    Print a verbose message only if verbosity is high enough.

    Args:
        message: The message to print.
        level: Required verbosity level to show this message.
    """
    if _verbose_level >= level and not _quiet_mode:
        print(message)


def output_error(message: str) -> None:
    """
    Print an error message (always shown, even in quiet mode).

    Args:
        message: The error message to print.
    """
    print(message, file=sys.stderr)


def format_as_csv(headers: list[str], rows: list[list[Any]]) -> str:
    """
    Format data as CSV string.

    Args:
        headers: Column headers.
        rows: List of row data (each row is a list of values).

    Returns:
        CSV formatted string.
    """
    import csv
    import io

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    writer.writerows(rows)
    return output.getvalue()


def _add_format_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["table", "json", "csv"],
        default="table",
        help="Output format (default: table)",
    )


def _add_data_arguments(parser: argparse.ArgumentParser, framework: bool = True) -> None:
    """Add the options selecting assessment data and framework."""
    parser.add_argument(
        "--assessments",
        metavar="PATH",
        help="Assessment export to read (default: cmmcready.data_file from config)",
    )
    parser.add_argument(
        "--framework-file",
        metavar="PATH",
        help="Additional framework definition (JSON or YAML) to register",
    )
    if framework:
        parser.add_argument(
            "--framework",
            metavar="ID",
            help="Framework identifier or alias (default: cmmcready.default_framework)",
        )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for cmmcready CLI."""
    parser = argparse.ArgumentParser(
        prog="cmmcready",
        description="CMMC 2.0 compliance scoring and gap analysis",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"cmmcready {__version__}",
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Override config file location (default: ~/.cmmcready/config.yaml)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (can be repeated)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        metavar="<command>",
    )

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show system information and diagnostics",
        description="Display version, configuration paths, and effective settings.",
    )
    info_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    info_parser.set_defaults(func=cmd_info)

    # frameworks command
    frameworks_parser = subparsers.add_parser(
        "frameworks",
        help="List available frameworks",
        description="List built-in and loaded framework definitions.",
    )
    frameworks_parser.add_argument(
        "--framework-file",
        metavar="PATH",
        help="Additional framework definition (JSON or YAML) to register",
    )
    _add_format_argument(frameworks_parser)
    frameworks_parser.set_defaults(func=cmd_frameworks)

    # score command
    score_parser = subparsers.add_parser(
        "score",
        help="Show overall and domain scores",
        description="Score the most recently modified assessment for a framework.",
    )
    _add_data_arguments(score_parser)
    _add_format_argument(score_parser)
    score_parser.set_defaults(func=cmd_score)

    # gaps command
    gaps_parser = subparsers.add_parser(
        "gaps",
        help="Show ranked domain gaps",
        description="Display domains scoring below the readiness target, largest gap first.",
    )
    _add_data_arguments(gaps_parser)
    gaps_parser.add_argument(
        "--severity",
        choices=[s.value for s in Severity if s != Severity.LOW],
        help="Filter by severity level",
    )
    gaps_parser.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Number of gaps to show (default: scoring.top_gaps from config)",
    )
    gaps_parser.add_argument(
        "--all",
        action="store_true",
        dest="show_all",
        help="Show every gap",
    )
    _add_format_argument(gaps_parser)
    gaps_parser.set_defaults(func=cmd_gaps)

    # recommendations command
    recommendations_parser = subparsers.add_parser(
        "recommendations",
        help="Show remediation recommendations",
        description="Display remediation actions for the highest-priority gaps.",
    )
    _add_data_arguments(recommendations_parser)
    recommendations_parser.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Number of recommendations to show (default: scoring.top_gaps from config)",
    )
    recommendations_parser.add_argument(
        "--all",
        action="store_true",
        dest="show_all",
        help="Show every recommendation",
    )
    _add_format_argument(recommendations_parser)
    recommendations_parser.set_defaults(func=cmd_recommendations)

    # status command
    status_parser = subparsers.add_parser(
        "status",
        help="Show implementation status distribution",
        description="Count controls per implementation status for the active assessment.",
    )
    _add_data_arguments(status_parser)
    _add_format_argument(status_parser)
    status_parser.set_defaults(func=cmd_status)

    # stats command
    stats_parser = subparsers.add_parser(
        "stats",
        help="Show portfolio statistics",
        description="Summarize every saved assessment: completion, scores, risk and activity.",
    )
    _add_data_arguments(stats_parser, framework=False)
    _add_format_argument(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    # assessments command
    assessments_parser = subparsers.add_parser(
        "assessments",
        help="List saved assessments",
        description="Search, filter and sort the saved assessments.",
    )
    _add_data_arguments(assessments_parser, framework=False)
    assessments_parser.add_argument(
        "--search",
        metavar="TEXT",
        default="",
        help="Match framework or organization name",
    )
    assessments_parser.add_argument(
        "--status",
        choices=list(STATUS_FILTERS),
        default="all",
        help="Filter by completion status (default: all)",
    )
    assessments_parser.add_argument(
        "--risk",
        choices=["all"] + [r.value for r in RiskLevel],
        default="all",
        help="Filter by risk level (default: all)",
    )
    assessments_parser.add_argument(
        "--sort",
        choices=list(SORT_KEYS),
        default="date",
        help="Sort key (default: date)",
    )
    assessments_parser.add_argument(
        "--ascending",
        action="store_true",
        help="Sort ascending instead of descending",
    )
    _add_format_argument(assessments_parser)
    assessments_parser.set_defaults(func=cmd_assessments)

    # summary command
    summary_parser = subparsers.add_parser(
        "summary",
        help="Generate executive summary",
        description="Write a plain-text or Markdown executive summary of the active assessment.",
    )
    _add_data_arguments(summary_parser)
    summary_parser.add_argument(
        "--markdown",
        action="store_true",
        help="Render as Markdown",
    )
    summary_parser.add_argument(
        "--organization",
        metavar="NAME",
        help="Organization name (default: reporting.organization from config)",
    )
    summary_parser.add_argument(
        "--output",
        metavar="PATH",
        help="Write the summary to a file instead of stdout",
    )
    summary_parser.set_defaults(func=cmd_summary)

    # export command
    export_parser = subparsers.add_parser(
        "export",
        help="Export data to JSON",
        description="Export metrics, gaps, or portfolio statistics for external use.",
    )
    _add_data_arguments(export_parser)
    export_parser.add_argument(
        "--type",
        choices=["metrics", "gaps", "statistics"],
        default="metrics",
        help="Export type (default: metrics)",
    )
    export_parser.add_argument(
        "--output",
        metavar="PATH",
        help="Output directory path (default: reporting.output_dir from config)",
    )
    export_parser.add_argument(
        "--compress",
        action="store_true",
        help="Gzip compress the export",
    )
    export_parser.set_defaults(func=cmd_export)

    return parser


def setup_logging(verbose: int, quiet: bool) -> None:
    """Configure logging based on verbosity level."""
    if quiet:
        level = logging.WARNING
    elif verbose == 0:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load_settings(args: argparse.Namespace) -> Settings:
    config_path = Path(args.config) if args.config else None
    settings = load_config(config_path)
    # -v and -q take precedence over the configured level
    if not args.verbose and not args.quiet:
        logging.getLogger().setLevel(settings.log_level)
    return settings


def _build_registry(args: argparse.Namespace) -> FrameworkRegistry:
    """Default registry plus any --framework-file definition."""
    registry = default_registry()
    framework_file = getattr(args, "framework_file", None)
    if framework_file:
        framework = load_framework(framework_file)
        registry.register(framework)
        output_verbose(f"Loaded framework {framework.id} from {framework_file}")
    return registry


def _load_records(args: argparse.Namespace, settings: Settings) -> list[AssessmentRecord]:
    """
    Load assessments from --assessments or the configured data file.

    A missing default data file means nothing has been saved yet; a missing
    explicit path is an error.
    """
    if args.assessments:
        path = Path(args.assessments).expanduser()
        if not path.exists():
            raise AssessmentValidationError(f"Assessment file not found: {path}")
    else:
        path = Path(settings.data_file).expanduser()
        if not path.exists():
            logger.info("No assessment data at %s", path)
            return []
    return load_assessments(path)


def _build_bundle(args: argparse.Namespace, settings: Settings) -> MetricsBundle:
    """Run the engine for the requested framework, falling back to the zero-state."""
    registry = _build_registry(args)
    records = _load_records(args, settings)
    engine = ComplianceEngine.from_settings(settings, registry)
    framework_id = args.framework or settings.default_framework

    try:
        return engine.calculate(records, framework_id)
    except MissingFrameworkError as e:
        logger.warning("%s; reporting zero-state metrics", e)
        return MetricsBundle.empty(framework_id=framework_id)


def _build_portfolio_analyzer(settings: Settings) -> PortfolioAnalyzer:
    portfolio = settings.portfolio
    return PortfolioAnalyzer(
        config=PortfolioConfig(
            low_risk_from=portfolio.low_risk_from,
            medium_risk_from=portfolio.medium_risk_from,
            high_risk_from=portfolio.high_risk_from,
            recent_days=portfolio.recent_days,
            completion_window_days=portfolio.completion_window_days,
        ),
        calculator=MaturityCalculator(
            MaturityConfig(points_per_level=settings.scoring.points_per_level)
        ),
    )


def _resolve_limit(args: argparse.Namespace, settings: Settings) -> int | None:
    """Number of entries to show, or None for all."""
    if args.show_all:
        return None
    if args.limit is not None:
        return args.limit
    return settings.scoring.top_gaps


def _print_no_assessment(bundle: MetricsBundle) -> None:
    if not bundle.has_assessment:
        output(f"No assessment recorded for {bundle.framework_id}; showing zero-state.")
        output()


def cmd_info(args: argparse.Namespace) -> int:
    """Show system information and diagnostics."""
    import platform as platform_module

    info: dict[str, Any] = {
        "version": __version__,
        "python_version": platform_module.python_version(),
        "platform": platform_module.platform(),
        "config_dir": str(DEFAULT_CONFIG_DIR),
        "config_file": str(Path(args.config) if args.config else get_config_path()),
        "data_file": None,
        "default_framework": None,
        "frameworks": [f.id for f in default_registry().list_frameworks()],
    }

    settings = _load_settings(args)
    info["data_file"] = settings.data_file
    info["default_framework"] = settings.default_framework
    info["target_score"] = settings.scoring.target_score

    if args.json:
        output(json.dumps(info, indent=2, default=str), force=True)
    else:
        output("cmmcready System Information")
        output("=" * 60)
        output()
        output(f"Version: {info['version']}")
        output(f"Python: {info['python_version']}")
        output(f"Platform: {info['platform']}")
        output()
        output("Paths:")
        output(f"  Config directory: {info['config_dir']}")
        output(f"  Config file: {info['config_file']}")
        output(f"  Data file: {info['data_file']}")
        output()
        output("Scoring:")
        output(f"  Default framework: {info['default_framework']}")
        output(f"  Target score: {info['target_score']}%")
        output(f"  Built-in frameworks: {', '.join(info['frameworks'])}")

    return 0


def cmd_frameworks(args: argparse.Namespace) -> int:
    """List available frameworks."""
    registry = _build_registry(args)
    frameworks = registry.list_frameworks()

    if args.format == "json":
        result = [
            {
                "id": f.id,
                "name": f.name,
                "version": f.version,
                "domains": len(f.sections),
                "controls": f.control_count,
            }
            for f in frameworks
        ]
        output(json.dumps(result, indent=2), force=True)
    elif args.format == "csv":
        headers = ["Framework ID", "Name", "Version", "Domains", "Controls"]
        rows = [[f.id, f.name, f.version, len(f.sections), f.control_count] for f in frameworks]
        output(format_as_csv(headers, rows), force=True)
    else:
        output()
        output("Available Frameworks")
        output("=" * 70)
        output(f"{'ID':<22} {'Name':<30} {'Domains':>8} {'Controls':>8}")
        output("-" * 70)
        for f in frameworks:
            output(f"{f.id:<22} {f.name[:30]:<30} {len(f.sections):>8} {f.control_count:>8}")

    return 0


def cmd_score(args: argparse.Namespace) -> int:
    """Show overall and domain scores."""
    settings = _load_settings(args)
    output_verbose("Scoring assessment...")
    bundle = _build_bundle(args, settings)

    if args.format == "json":
        result = {
            "timestamp": datetime.now(UTC).isoformat(),
            **bundle.to_dict(),
        }
        output(json.dumps(result, indent=2), force=True)
    elif args.format == "csv":
        headers = ["Domain ID", "Domain", "Score", "Answered", "Total", "Implemented", "Completion"]
        rows = [
            [d.domain_id, d.domain_name, d.score, d.answered, d.total, d.implemented, d.completion_rate]
            for d in bundle.domain_scores
        ]
        output(format_as_csv(headers, rows), force=True)
    else:
        output()
        output(f"{bundle.framework_name or bundle.framework_id} Readiness Score")
        output("=" * 70)
        output()
        _print_no_assessment(bundle)

        output(f"Overall Score: {bundle.overall_score}%")
        output(f"Controls assessed: {bundle.answered_controls}/{bundle.total_controls}")
        output(f"Fully implemented: {bundle.implemented_controls}")
        output(f"Open: {bundle.open_controls}")
        output()

        output("By Domain:")
        output("-" * 70)
        output(f"{'Domain':<42} {'Score':>7} {'Answered':>10} {'Done':>8}")
        output("-" * 70)
        for d in bundle.domain_scores:
            output(
                f"{d.domain_name[:42]:<42} {d.score:>6}% "
                f"{f'{d.answered}/{d.total}':>10} {d.implemented:>8}"
            )
        output("-" * 70)

    return 0


def cmd_gaps(args: argparse.Namespace) -> int:
    """Show ranked domain gaps."""
    settings = _load_settings(args)
    output_verbose("Analyzing gaps...")
    bundle = _build_bundle(args, settings)

    gaps_to_show = list(bundle.gaps)
    if args.severity:
        severity_filter = Severity(args.severity)
        gaps_to_show = [g for g in gaps_to_show if g.severity == severity_filter]

    limit = _resolve_limit(args, settings)
    total_matching = len(gaps_to_show)
    if limit is not None:
        gaps_to_show = gaps_to_show[: max(0, limit)]

    if args.format == "json":
        result = {
            "framework_id": bundle.framework_id,
            "assessment_id": bundle.assessment_id,
            "target_score": settings.scoring.target_score,
            "gaps": [g.to_dict() for g in gaps_to_show],
        }
        output(json.dumps(result, indent=2), force=True)
    elif args.format == "csv":
        headers = ["Domain ID", "Domain", "Score", "Target", "Gap", "Completion", "Severity"]
        rows = [
            [g.domain_id, g.domain_name, g.score, g.target, g.gap, g.completion_rate, g.severity.value]
            for g in gaps_to_show
        ]
        output(format_as_csv(headers, rows), force=True)
    else:
        output()
        output(f"{bundle.framework_name or bundle.framework_id} Gap Analysis")
        output("=" * 70)
        output()
        _print_no_assessment(bundle)

        output(f"Target score: {settings.scoring.target_score}%")
        output(f"Domains below target: {len(bundle.gaps)}/{len(bundle.domain_scores)}")
        output()

        if gaps_to_show:
            output(f"{'Domain':<42} {'Score':>7} {'Gap':>6} {'Severity':>10}")
            output("-" * 70)
            for g in gaps_to_show:
                output(
                    f"{g.domain_name[:42]:<42} {g.score:>6}% {g.gap:>6} "
                    f"{g.severity.value.upper():>10}"
                )
            if total_matching > len(gaps_to_show):
                output(f"\n... and {total_matching - len(gaps_to_show)} more gaps")
        else:
            output("No gaps found matching filters.")

    return 0


def cmd_recommendations(args: argparse.Namespace) -> int:
    """Show remediation recommendations."""
    settings = _load_settings(args)
    bundle = _build_bundle(args, settings)

    limit = _resolve_limit(args, settings)
    recommendations = (
        list(bundle.recommendations)
        if limit is None
        else bundle.top_recommendations(limit)
    )

    if args.format == "json":
        output(json.dumps([r.to_dict() for r in recommendations], indent=2), force=True)
    elif args.format == "csv":
        headers = ["Domain", "Priority", "Action", "Effort", "Timeframe", "Impact"]
        rows = [
            [r.domain_name, r.priority.value, r.action, r.effort.value, r.timeframe, r.impact]
            for r in recommendations
        ]
        output(format_as_csv(headers, rows), force=True)
    else:
        output()
        output("Recommended Actions")
        output("=" * 70)
        _print_no_assessment(bundle)

        if not recommendations:
            output("No recommendations: every assessed domain meets the target.")
            return 0

        for i, r in enumerate(recommendations, 1):
            output(f"\n{i}. {r.domain_name} [{r.priority.value.upper()}]")
            output(f"   Action: {r.action}")
            output(f"   Effort: {r.effort.value} ({r.timeframe})")
            output(f"   Impact: {r.impact}")

    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show implementation status distribution."""
    settings = _load_settings(args)
    bundle = _build_bundle(args, settings)
    distribution = bundle.status_distribution

    if args.format == "json":
        output(json.dumps([b.to_dict() for b in distribution], indent=2), force=True)
    elif args.format == "csv":
        headers = ["Level", "Status", "Count"]
        rows = [[b.level, b.label, b.count] for b in distribution]
        output(format_as_csv(headers, rows), force=True)
    else:
        output()
        output("Implementation Status")
        output("=" * 40)
        _print_no_assessment(bundle)
        for b in distribution:
            output(f"{b.label:<25} {b.count:>5}")
        output("-" * 40)
        output(f"{'Total answered':<25} {bundle.answered_controls:>5}")

    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Show portfolio statistics."""
    settings = _load_settings(args)
    records = _load_records(args, settings)
    analyzer = _build_portfolio_analyzer(settings)
    stats = analyzer.calculate_statistics(records, now=datetime.now(UTC))

    if args.format == "json":
        output(json.dumps(stats.to_dict(), indent=2), force=True)
    elif args.format == "csv":
        headers = ["Metric", "Value"]
        rows: list[list[Any]] = [
            ["total", stats.total],
            ["completed", stats.completed],
            ["in_progress", stats.in_progress],
            ["average_score", stats.average_score],
            ["total_time_spent", stats.total_time_spent],
            ["recent_assessments", stats.recent_assessments],
            ["recent_completions", stats.recent_completions],
        ]
        rows.extend([f"risk_{k}", v] for k, v in stats.risk_distribution.items())
        output(format_as_csv(headers, rows), force=True)
    else:
        output()
        output("Assessment Portfolio")
        output("=" * 50)
        output()
        output(f"Assessments: {stats.total} ({stats.completed} completed, {stats.in_progress} in progress)")
        output(f"Average score: {stats.average_score}%")
        output(f"Time spent: {stats.total_time_spent} minutes")
        output(f"Modified in last {settings.portfolio.recent_days} days: {stats.recent_assessments}")
        output(
            f"Completed in last {settings.portfolio.completion_window_days} days: "
            f"{stats.recent_completions}"
        )
        output()
        output("By Risk:")
        for risk, count in stats.risk_distribution.items():
            output(f"  {risk.capitalize()}: {count}")

    return 0


def cmd_assessments(args: argparse.Namespace) -> int:
    """List saved assessments."""
    settings = _load_settings(args)
    records = _load_records(args, settings)
    analyzer = _build_portfolio_analyzer(settings)

    matched = analyzer.filter_records(
        records,
        search=args.search,
        status=args.status,
        risk=args.risk,
    )
    ordered = analyzer.sort_records(matched, sort_by=args.sort, descending=not args.ascending)

    rows_data = []
    for record in ordered:
        score = analyzer.score_record(record)
        rows_data.append({
            "id": record.id,
            "framework_id": record.framework_id,
            "framework_name": record.framework_name,
            "organization_name": record.organization_name,
            "score": score,
            "risk": analyzer.classify_risk(score).value,
            "answered": record.response_count,
            "is_complete": record.is_complete,
            "last_modified": record.to_dict()["last_modified"],
        })

    if args.format == "json":
        output(json.dumps(rows_data, indent=2, default=str), force=True)
    elif args.format == "csv":
        headers = ["ID", "Framework", "Organization", "Score", "Risk", "Answered", "Complete", "Last Modified"]
        rows = [
            [
                r["id"],
                r["framework_name"] or r["framework_id"],
                r["organization_name"] or "",
                r["score"],
                r["risk"],
                r["answered"],
                r["is_complete"],
                r["last_modified"],
            ]
            for r in rows_data
        ]
        output(format_as_csv(headers, rows), force=True)
    else:
        output()
        output(f"Assessments ({len(rows_data)} of {len(records)})")
        output("=" * 78)
        if not rows_data:
            output("No assessments found matching filters.")
            return 0
        output(f"{'ID':<16} {'Framework':<24} {'Score':>6} {'Risk':>9} {'Answered':>9} {'Status':>11}")
        output("-" * 78)
        for r in rows_data:
            framework = (r["framework_name"] or r["framework_id"])[:24]
            status = "completed" if r["is_complete"] else "in progress"
            output(
                f"{r['id'][:16]:<16} {framework:<24} {r['score']:>5}% "
                f"{r['risk']:>9} {r['answered']:>9} {status:>11}"
            )

    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Generate executive summary."""
    from cmmcready.reports import ExecutiveSummaryGenerator, SummaryConfig

    settings = _load_settings(args)
    bundle = _build_bundle(args, settings)

    generator = ExecutiveSummaryGenerator(
        SummaryConfig(
            organization=args.organization or settings.reporting.organization,
            max_recommendations=settings.scoring.top_gaps,
        )
    )
    if args.markdown:
        text = generator.generate_markdown(bundle)
    else:
        text = generator.generate_summary(bundle)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        output(f"Summary written to {output_path}")
    else:
        output(text, force=True)

    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export data to JSON."""
    from cmmcready.reports import JsonExporter

    settings = _load_settings(args)

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = Path(settings.reporting.output_dir).expanduser()

    exporter = JsonExporter(
        version=__version__,
        organization=settings.reporting.organization or None,
    )

    output(f"Exporting {args.type} data...")

    if args.type == "statistics":
        records = _load_records(args, settings)
        stats = _build_portfolio_analyzer(settings).calculate_statistics(
            records, now=datetime.now(UTC)
        )
        result = exporter.export_statistics(stats, output_path, compress=args.compress)
    elif args.type == "gaps":
        bundle = _build_bundle(args, settings)
        result = exporter.export_gaps(bundle, output_path, compress=args.compress)
    else:
        bundle = _build_bundle(args, settings)
        result = exporter.export_metrics(bundle, output_path, compress=args.compress)

    if result.success:
        output(f"Export complete: {result.path}")
        output(f"Size: {result.size_bytes:,} bytes")
        output(f"Records: {result.record_count}")
    else:
        output_error(f"Error: {result.error}")
        return 1

    return 0


def main() -> NoReturn:
    """Main entry point for cmmcready CLI."""
    parser = create_parser()
    args = parser.parse_args()

    # Set up logging and output mode
    setup_logging(args.verbose, args.quiet)
    set_output_mode(args.quiet, args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        exit_code = args.func(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        output("\nOperation cancelled.")
        sys.exit(130)
    except ConfigurationError as e:
        output_error(f"Configuration error: {e}")
        sys.exit(2)
    except (FrameworkValidationError, AssessmentValidationError) as e:
        output_error(f"Input error: {e}")
        sys.exit(2)
    except InvalidLevelError as e:
        output_error(f"Invalid response: {e}")
        sys.exit(2)
    except Exception as e:
        if args.verbose > 0:
            raise
        output_error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
