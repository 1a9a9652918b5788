"""Exception hierarchy for project creation.

Errors raised before any filesystem mutation (``ArgumentError``,
``ValidationError``, ``RequirementError``, ``DirectoryConflictError``,
``BackupError``) abort immediately. ``MutationError`` is raised after the
partially created project has been rolled back.
"""

from __future__ import annotations


class ProjectGenError(Exception):
    """Base class for every error that ends a project creation run."""


class ArgumentError(ProjectGenError):
    """Missing or invalid command-line argument (type, name, config file)."""


class ValidationError(ProjectGenError):
    """The project name violates the length, format or reserved-word rules."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        super().__init__(message)


class RequirementError(ProjectGenError):
    """A required tool is missing or older than the configured minimum."""

    def __init__(self, message: str, failures: list[str] | None = None) -> None:
        self.failures = list(failures or [])
        super().__init__(message)


class DirectoryConflictError(ProjectGenError):
    """The target project directory already exists."""


class BackupError(ProjectGenError):
    """The backup snapshot could not be created."""


class MutationError(ProjectGenError):
    """A scaffolding, template or git step failed; the project was rolled back."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"{step} failed: {message}")
