"""
Framework definition model.

A framework is an ordered hierarchy of sections (domains), each holding
categories, each holding questions. Every question carries the control
identifier that assessment responses are keyed by.

Definitions are validated once, when they are constructed:

    - every section, category and question has a non-empty identifier
    - every section and category has a display name
    - control identifiers are unique within the framework
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class FrameworkValidationError(Exception):
    """Raised when a framework definition is structurally invalid."""

    pass


def _require_text(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise FrameworkValidationError(f"{what} must be a non-empty string")
    return value


def _require_list(data: dict[str, Any], key: str, what: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list | tuple):
        raise FrameworkValidationError(f"{what} '{key}' must be a list")
    return list(value)


@dataclass(frozen=True)
class Question:
    """
    A single assessed control.

    Attributes:
        id: Control identifier (e.g., "ac.l1-3.1.1").
        text: Requirement text shown to the assessment taker.
    """

    id: str
    text: str = ""

    def __post_init__(self) -> None:
        _require_text(self.id, "Question id")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "text": self.text}


@dataclass(frozen=True)
class Category:
    """A group of questions inside a section."""

    id: str
    name: str
    questions: tuple[Question, ...] = ()

    def __post_init__(self) -> None:
        _require_text(self.id, "Category id")
        _require_text(self.name, f"Category '{self.id}' name")
        object.__setattr__(self, "questions", tuple(self.questions))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "questions": [q.to_dict() for q in self.questions],
        }


@dataclass(frozen=True)
class Section:
    """
    A framework section (domain), the unit of aggregate scoring.

    Attributes:
        id: Section identifier (e.g., "access-control").
        name: Display name (e.g., "Access Control (AC)").
        description: Optional description.
        categories: Ordered categories in this section.
    """

    id: str
    name: str
    description: str = ""
    categories: tuple[Category, ...] = ()

    def __post_init__(self) -> None:
        _require_text(self.id, "Section id")
        _require_text(self.name, f"Section '{self.id}' name")
        object.__setattr__(self, "categories", tuple(self.categories))

    @property
    def questions(self) -> list[Question]:
        """All questions in this section, flattened in category order."""
        return [q for category in self.categories for q in category.questions]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "categories": [c.to_dict() for c in self.categories],
        }


@dataclass(frozen=True)
class FrameworkDefinition:
    """
    A complete assessment framework.

    Attributes:
        id: Framework identifier (e.g., "cmmc-2.0-level1").
        name: Display name.
        version: Framework version string.
        sections: Ordered sections (domains).
    """

    id: str
    name: str
    version: str = ""
    sections: tuple[Section, ...] = field(default=())

    def __post_init__(self) -> None:
        _require_text(self.id, "Framework id")
        _require_text(self.name, f"Framework '{self.id}' name")
        object.__setattr__(self, "sections", tuple(self.sections))

        seen: set[str] = set()
        for question in self.questions:
            if question.id in seen:
                raise FrameworkValidationError(
                    f"Duplicate control identifier '{question.id}' "
                    f"in framework '{self.id}'"
                )
            seen.add(question.id)

    @property
    def questions(self) -> list[Question]:
        """All questions in the framework, in section order."""
        return [q for section in self.sections for q in section.questions]

    @property
    def control_count(self) -> int:
        """Number of controls referenced by this framework."""
        return len(self.questions)

    def control_ids(self) -> list[str]:
        """Get all control identifiers in framework order."""
        return [q.id for q in self.questions]

    def get_section(self, section_id: str) -> Section | None:
        """Get a section by identifier."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def section_for_control(self, control_id: str) -> Section | None:
        """Get the section a control belongs to."""
        for section in self.sections:
            if any(q.id == control_id for q in section.questions):
                return section
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "sections": [s.to_dict() for s in self.sections],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FrameworkDefinition:
        """
        Build a validated framework from a parsed JSON/YAML mapping.

        Args:
            data: Mapping with id, name, optional version, and sections.

        Returns:
            FrameworkDefinition.

        Raises:
            FrameworkValidationError: If required fields are missing or
                control identifiers are duplicated.
        """
        if not isinstance(data, dict):
            raise FrameworkValidationError("Framework definition must be a mapping")

        sections = []
        for raw_section in _require_list(data, "sections", "Framework"):
            if not isinstance(raw_section, dict):
                raise FrameworkValidationError("Each section must be a mapping")
            categories = []
            for raw_category in _require_list(raw_section, "categories", "Section"):
                if not isinstance(raw_category, dict):
                    raise FrameworkValidationError("Each category must be a mapping")
                questions = []
                for raw_question in _require_list(raw_category, "questions", "Category"):
                    if not isinstance(raw_question, dict):
                        raise FrameworkValidationError("Each question must be a mapping")
                    questions.append(
                        Question(
                            id=raw_question.get("id"),
                            text=str(raw_question.get("text", "")),
                        )
                    )
                categories.append(
                    Category(
                        id=raw_category.get("id"),
                        name=raw_category.get("name"),
                        questions=tuple(questions),
                    )
                )
            sections.append(
                Section(
                    id=raw_section.get("id"),
                    name=raw_section.get("name"),
                    description=str(raw_section.get("description", "")),
                    categories=tuple(categories),
                )
            )

        framework = cls(
            id=data.get("id"),
            name=data.get("name"),
            version=str(data.get("version", "")),
            sections=tuple(sections),
        )
        logger.debug(
            "Loaded framework %s: %d sections, %d controls",
            framework.id,
            len(framework.sections),
            framework.control_count,
        )
        return framework


def load_framework(path: Path | str) -> FrameworkDefinition:
    """
    Load a framework definition from a JSON or YAML file.

    Args:
        path: Path to the definition file.

    Returns:
        Validated FrameworkDefinition.

    Raises:
        FrameworkValidationError: If the file cannot be read or parsed,
            or the definition is invalid.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FrameworkValidationError(f"Invalid framework file {path}: {e}") from e
    except OSError as e:
        raise FrameworkValidationError(f"Cannot read framework file {path}: {e}") from e

    return FrameworkDefinition.from_dict(data)
