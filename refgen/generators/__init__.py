"""Generator registry keyed by CLI name."""

from __future__ import annotations

from typing import Dict, Type

from .adr_summary import AdrSummaryGenerator
from .base import GenerationResult, Generator, GeneratorContext
from .config_guide import ConfigGuideGenerator
from .crate_deps import CrateDependencyGenerator
from .db_schema import DatabaseSchemaGenerator
from .error_guide import ErrorGuideGenerator
from .state_machines import StateMachineGenerator

GENERATORS: Dict[str, Type[Generator]] = {
    generator.name: generator
    for generator in (
        DatabaseSchemaGenerator,
        StateMachineGenerator,
        CrateDependencyGenerator,
        ErrorGuideGenerator,
        ConfigGuideGenerator,
        AdrSummaryGenerator,
    )
}

# AI-backed generators are opt-in and run only when named explicitly.
DEFAULT_PIPELINE = ("db-schema", "state-machines", "crate-deps")

__all__ = [
    "AdrSummaryGenerator",
    "ConfigGuideGenerator",
    "CrateDependencyGenerator",
    "DEFAULT_PIPELINE",
    "DatabaseSchemaGenerator",
    "ErrorGuideGenerator",
    "GENERATORS",
    "GenerationResult",
    "Generator",
    "GeneratorContext",
    "StateMachineGenerator",
]
