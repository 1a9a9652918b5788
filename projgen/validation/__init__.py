"""Validation, requirement checks, backup and rollback for project creation."""

from projgen.validation.backup import (
    BackupManager,
    BackupSnapshot,
    RollbackManager,
    backup_path_for,
)
from projgen.validation.naming import RESERVED_NAMES, ValidationResult, validate_project_name
from projgen.validation.requirements import (
    RequirementChecker,
    RequirementReport,
    RequirementResult,
    RequirementStatus,
    SubprocessToolRunner,
    ToolRunner,
    ToolSpec,
)
from projgen.validation.version import (
    Comparison,
    compare_versions,
    extract_version,
    parse_version,
)

__all__ = [
    "BackupManager",
    "BackupSnapshot",
    "Comparison",
    "RESERVED_NAMES",
    "RequirementChecker",
    "RequirementReport",
    "RequirementResult",
    "RequirementStatus",
    "RollbackManager",
    "SubprocessToolRunner",
    "ToolRunner",
    "ToolSpec",
    "ValidationResult",
    "backup_path_for",
    "compare_versions",
    "extract_version",
    "parse_version",
    "validate_project_name",
]
