"""
Framework definitions and lookup.

A framework is an ordered hierarchy of sections (domains), categories and
questions; each question names the control identifier that assessment
responses refer to. Definitions are validated when built.

Built-in Frameworks:
    - cmmc-2.0-level1: CMMC 2.0 Level 1, 6 domains and 17 practices
      (aliases: "cmmc", "cmmc-level1")

Example:
    from cmmcready.framework import default_registry, load_framework

    registry = default_registry()
    registry.register(load_framework("my-framework.yaml"))
    framework = registry.get("cmmc")
"""

from cmmcready.framework.cmmc_level1 import (
    CMMC_LEVEL1_ID,
    get_cmmc_level1,
)
from cmmcready.framework.definitions import (
    Category,
    FrameworkDefinition,
    FrameworkValidationError,
    Question,
    Section,
    load_framework,
)
from cmmcready.framework.registry import (
    DEFAULT_ALIASES,
    FrameworkRegistry,
    MissingFrameworkError,
    default_registry,
)

__all__ = [
    # Model
    "FrameworkDefinition",
    "Section",
    "Category",
    "Question",
    "FrameworkValidationError",
    "load_framework",
    # Registry
    "FrameworkRegistry",
    "MissingFrameworkError",
    "DEFAULT_ALIASES",
    "default_registry",
    # Built-in
    "CMMC_LEVEL1_ID",
    "get_cmmc_level1",
]
