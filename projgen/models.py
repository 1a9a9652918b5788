"""Core enumerations shared across projgen."""

from __future__ import annotations

from enum import Enum


class ProjectType(str, Enum):
    """Kind of project to scaffold."""
    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"

    @property
    def has_frontend(self) -> bool:
        return self in (ProjectType.FRONTEND, ProjectType.FULLSTACK)

    @property
    def has_backend(self) -> bool:
        return self in (ProjectType.BACKEND, ProjectType.FULLSTACK)

    @classmethod
    def choices(cls) -> list[str]:
        return [member.value for member in cls]


class CreationState(str, Enum):
    """States the creation orchestrator moves through."""
    VALIDATING = "validating"
    BACKING_UP = "backing_up"
    SCAFFOLDING = "scaffolding"
    TEMPLATE_GENERATING = "template_generating"
    GIT_INITIALIZING = "git_initializing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ROLLED_BACK = "rolled_back"
