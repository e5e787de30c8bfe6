"""Line-oriented extractors, one per source grammar."""

from .base import Extractor, read_source
from .config_structs import ConfigStructExtractor
from .decisions import DecisionRecordExtractor
from .enums import EnumExtractor
from .foreign_keys import ForeignKeyExtractor
from .schema import SchemaExtractor
from .state_machine import StateTransitionExtractor
from .workspace_deps import WorkspaceDependencyExtractor, WorkspaceGraph

__all__ = [
    "ConfigStructExtractor",
    "DecisionRecordExtractor",
    "EnumExtractor",
    "Extractor",
    "ForeignKeyExtractor",
    "SchemaExtractor",
    "StateTransitionExtractor",
    "WorkspaceDependencyExtractor",
    "WorkspaceGraph",
    "read_source",
]
