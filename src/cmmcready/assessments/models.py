"""
Assessment record model.

An AssessmentRecord is one saved self-assessment: the per-control maturity
answers plus the bookkeeping the dashboard shows (completion flag, time
spent, organization). Records are owned by the storage collaborator; this
package only reads them.

Stored records come from a browser application, so the mapping form
accepts both the camelCase keys it writes (frameworkId, lastModified,
isComplete, timeSpent, organizationInfo.name) and snake_case equivalents.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


class AssessmentValidationError(Exception):
    """Raised when an assessment record is malformed."""

    pass


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class AssessmentRecord:
    """
    A saved assessment.

    Attributes:
        id: Record identifier.
        framework_id: Identifier of the framework the record answers.
        responses: Control identifier to maturity level (0-3). Read-only.
        last_modified: Raw "last modified" value as stored (ISO-8601 string,
            datetime, epoch milliseconds, or None). Parsed lazily by the
            selector so that bad values can be ranked instead of rejected.
        is_complete: Whether the assessment was marked complete.
        time_spent: Minutes spent on the assessment, if tracked.
        organization_name: Organization display name, if provided.
        framework_name: Framework display name saved with the record.
    """

    id: str
    framework_id: str
    responses: Mapping[str, int] = field(default_factory=dict, hash=False)
    last_modified: Any = field(default=None, hash=False)
    is_complete: bool = False
    time_spent: int | None = None
    organization_name: str | None = None
    framework_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "responses", MappingProxyType(dict(self.responses)))

    @property
    def response_count(self) -> int:
        """Number of answered controls."""
        return len(self.responses)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        last_modified = self.last_modified
        if hasattr(last_modified, "isoformat"):
            last_modified = last_modified.isoformat()
        return {
            "id": self.id,
            "framework_id": self.framework_id,
            "framework_name": self.framework_name,
            "responses": dict(self.responses),
            "last_modified": last_modified,
            "is_complete": self.is_complete,
            "time_spent": self.time_spent,
            "organization_name": self.organization_name,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssessmentRecord:
        """
        Build a record from a stored mapping.

        Response values that are null are treated as unanswered and dropped.
        Levels are checked for type here; range checking happens when the
        record is scored so that out-of-range answers surface as
        InvalidLevelError.

        Args:
            data: Stored record mapping.

        Returns:
            AssessmentRecord.

        Raises:
            AssessmentValidationError: If required fields are missing or
                responses are not a mapping of identifiers to integers.
        """
        if not isinstance(data, Mapping):
            raise AssessmentValidationError("Assessment record must be a mapping")

        record_id = _first(data, "id")
        if record_id is None or str(record_id).strip() == "":
            raise AssessmentValidationError("Assessment record is missing 'id'")

        framework_id = _first(data, "framework_id", "frameworkId")
        if not isinstance(framework_id, str) or not framework_id.strip():
            raise AssessmentValidationError(
                f"Assessment {record_id} is missing 'frameworkId'"
            )

        raw_responses = _first(data, "responses", default={})
        if not isinstance(raw_responses, Mapping):
            raise AssessmentValidationError(
                f"Assessment {record_id} responses must be a mapping"
            )

        responses: dict[str, int] = {}
        for control_id, level in raw_responses.items():
            if level is None:
                continue
            if isinstance(level, bool) or not isinstance(level, int):
                raise AssessmentValidationError(
                    f"Assessment {record_id} response for {control_id} "
                    f"must be an integer, got {level!r}"
                )
            responses[str(control_id)] = level

        time_spent = _first(data, "time_spent", "timeSpent")
        if time_spent is not None:
            try:
                time_spent = int(time_spent)
            except (TypeError, ValueError) as e:
                raise AssessmentValidationError(
                    f"Assessment {record_id} timeSpent must be a number"
                ) from e

        organization_name = _first(data, "organization_name")
        if organization_name is None:
            org_info = data.get("organizationInfo")
            if isinstance(org_info, Mapping):
                organization_name = org_info.get("name")

        return cls(
            id=str(record_id),
            framework_id=framework_id,
            responses=responses,
            last_modified=_first(data, "last_modified", "lastModified"),
            is_complete=bool(_first(data, "is_complete", "isComplete", default=False)),
            time_spent=time_spent,
            organization_name=organization_name,
            framework_name=_first(data, "framework_name", "frameworkName"),
        )
