"""
Loading exported assessment collections.

The storage collaborator exports saved assessments as a JSON (or YAML)
document: either a bare list of records or a mapping with an
"assessments" list. Every record is validated on load.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from cmmcready.assessments.models import AssessmentRecord, AssessmentValidationError

logger = logging.getLogger(__name__)


def _read_document(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise AssessmentValidationError(f"Invalid assessment file {path}: {e}") from e
    except OSError as e:
        raise AssessmentValidationError(f"Cannot read assessment file {path}: {e}") from e


def parse_assessments(data: Any) -> list[AssessmentRecord]:
    """
    Build records from a parsed assessment document.

    Args:
        data: A list of record mappings, a mapping with an "assessments"
            list, or None (treated as empty).

    Returns:
        List of validated AssessmentRecords in document order.

    Raises:
        AssessmentValidationError: If the document shape or any record is invalid.
    """
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("assessments", [])
    if not isinstance(data, list):
        raise AssessmentValidationError(
            "Assessment document must be a list or contain an 'assessments' list"
        )
    return [AssessmentRecord.from_dict(item) for item in data]


def load_assessments(path: Path | str) -> list[AssessmentRecord]:
    """
    Load and validate an exported assessment collection.

    Args:
        path: Path to a .json, .yaml or .yml file.

    Returns:
        List of AssessmentRecords.

    Raises:
        AssessmentValidationError: If the file cannot be read or is invalid.
    """
    path = Path(path)
    records = parse_assessments(_read_document(path))
    logger.info("Loaded %d assessment(s) from %s", len(records), path)
    return records
