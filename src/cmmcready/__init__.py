"""
cmmcready - CMMC 2.0 Compliance Scoring and Gap Analysis

Know how far you are from certification, and what to fix first.

cmmcready turns per-control self-assessment answers (maturity levels 0-3)
into the numbers a CMMC readiness dashboard shows and the actions it
suggests.

Key Features:
    - Normalizes maturity levels to percentage scores
    - Aggregates scores per domain with completion and implementation counts
    - Tallies the implementation status distribution
    - Ranks domains falling short of the readiness target
    - Generates remediation recommendations with effort and timeframe
    - Summarizes the whole assessment portfolio
    - Exports metrics as JSON, CSV or a written executive summary

Design Principles:
    - Determinism: identical input always yields identical output
    - Transparency: every threshold is a named, configurable value
    - Strictness: malformed frameworks and levels are errors, not zeros
"""

__version__ = "0.1.0"
__author__ = ""
__email__ = ""

from cmmcready.config.settings import Settings, load_config
from cmmcready.engine import ComplianceEngine, MetricsBundle

__all__ = [
    "__version__",
    "Settings",
    "load_config",
    "ComplianceEngine",
    "MetricsBundle",
]
