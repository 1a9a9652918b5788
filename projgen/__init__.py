"""projgen -- frontend, backend and fullstack project scaffolding with rollback.

Quick usage::

    from projgen import Config, CreationOrchestrator, ProjectType

    orchestrator = CreationOrchestrator(Config())
    project_path = await orchestrator.create(ProjectType.FULLSTACK, "demo-app")
"""

from projgen.config import Config
from projgen.errors import (
    ArgumentError,
    BackupError,
    DirectoryConflictError,
    MutationError,
    ProjectGenError,
    RequirementError,
    ValidationError,
)
from projgen.models import CreationState, ProjectType
from projgen.orchestrator import CreationOrchestrator

__version__ = "0.1.0"

__all__ = [
    "ArgumentError",
    "BackupError",
    "Config",
    "CreationOrchestrator",
    "CreationState",
    "DirectoryConflictError",
    "MutationError",
    "ProjectGenError",
    "ProjectType",
    "RequirementError",
    "ValidationError",
]
