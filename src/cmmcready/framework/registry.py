"""
Framework registry.

Resolves framework identifiers (and their aliases) to validated
FrameworkDefinition instances. A registry is an ordinary object passed to
the components that need it; there is no process-wide instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from cmmcready.framework.cmmc_level1 import CMMC_LEVEL1_ID, get_cmmc_level1
from cmmcready.framework.definitions import FrameworkDefinition

logger = logging.getLogger(__name__)

# Legacy identifiers stored by older assessment records
DEFAULT_ALIASES: dict[str, str] = {
    "cmmc": CMMC_LEVEL1_ID,
    "cmmc-level1": CMMC_LEVEL1_ID,
}


class MissingFrameworkError(Exception):
    """Raised when no framework definition matches the requested identifier."""

    def __init__(self, framework_id: str) -> None:
        self.framework_id = framework_id
        super().__init__(f"No framework definition found for '{framework_id}'")


class FrameworkRegistry:
    """
    Lookup table of framework definitions.

    Example:
        registry = default_registry()
        framework = registry.get("cmmc")  # alias of cmmc-2.0-level1

        registry.register_dict(yaml.safe_load(open("custom.yaml")))

    Identifiers and aliases are matched case-insensitively.
    """

    def __init__(
        self,
        frameworks: Iterable[FrameworkDefinition] | None = None,
        aliases: dict[str, str] | None = None,
    ) -> None:
        self._frameworks: dict[str, FrameworkDefinition] = {}
        self._aliases: dict[str, str] = {}

        for framework in frameworks or []:
            self.register(framework)
        for alias, target in (aliases or {}).items():
            self.add_alias(alias, target)

    def register(
        self,
        framework: FrameworkDefinition,
        aliases: Iterable[str] = (),
    ) -> None:
        """
        Register a framework definition.

        Registering an identifier that is already present replaces it.

        Args:
            framework: Validated framework definition.
            aliases: Additional identifiers that resolve to this framework.
        """
        key = framework.id.lower()
        if key in self._frameworks:
            logger.debug("Replacing framework definition %s", framework.id)
        self._frameworks[key] = framework
        for alias in aliases:
            self.add_alias(alias, framework.id)

    def register_dict(self, data: dict[str, Any]) -> FrameworkDefinition:
        """Validate a parsed mapping and register the resulting framework."""
        framework = FrameworkDefinition.from_dict(data)
        self.register(framework)
        return framework

    def add_alias(self, alias: str, framework_id: str) -> None:
        """Map an alternative identifier to a registered framework id."""
        self._aliases[alias.lower()] = framework_id.lower()

    def resolve_id(self, framework_id: str) -> str:
        """
        Resolve an identifier or alias to a canonical lowercase key.

        Unknown identifiers are returned lowercased so that comparisons
        between two unknown identifiers still work.
        """
        key = framework_id.lower()
        return self._aliases.get(key, key)

    def find(self, framework_id: str | None) -> FrameworkDefinition | None:
        """Get a framework by identifier or alias, or None."""
        if not framework_id:
            return None
        return self._frameworks.get(self.resolve_id(framework_id))

    def get(self, framework_id: str) -> FrameworkDefinition:
        """
        Get a framework by identifier or alias.

        Raises:
            MissingFrameworkError: If nothing matches.
        """
        framework = self.find(framework_id)
        if framework is None:
            raise MissingFrameworkError(framework_id)
        return framework

    def matches(self, framework_id: str | None, requested_id: str) -> bool:
        """Check whether a record's framework id refers to the requested one."""
        if not framework_id:
            return False
        return self.resolve_id(framework_id) == self.resolve_id(requested_id)

    def list_frameworks(self) -> list[FrameworkDefinition]:
        """Get all registered frameworks in registration order."""
        return list(self._frameworks.values())

    def __contains__(self, framework_id: object) -> bool:
        return isinstance(framework_id, str) and self.find(framework_id) is not None

    def __len__(self) -> int:
        return len(self._frameworks)


def default_registry() -> FrameworkRegistry:
    """
    Build a registry holding the built-in frameworks.

    Returns:
        New FrameworkRegistry with CMMC 2.0 Level 1 and its legacy aliases.
    """
    return FrameworkRegistry(
        frameworks=[get_cmmc_level1()],
        aliases=DEFAULT_ALIASES,
    )
