"""Project name validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 50

NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9-]*[a-zA-Z0-9]$")

RESERVED_NAMES: frozenset[str] = frozenset(
    {"node_modules", "build", "dist", "test", "src", "app", "config", "public"}
)

ERROR_LENGTH = "length"
ERROR_FORMAT = "format"
ERROR_RESERVED = "reserved"


@dataclass
class ValidationResult:
    """Outcome of validating a project name. ``errors`` holds error codes."""

    name: str
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        """Human-readable explanation for each error code."""
        texts = {
            ERROR_LENGTH: (
                f"Project name must be between {MIN_NAME_LENGTH} and "
                f"{MAX_NAME_LENGTH} characters (got {len(self.name)})"
            ),
            ERROR_FORMAT: (
                "Project name must start with a letter, end with a letter or digit, "
                "and contain only letters, digits and hyphens"
            ),
            ERROR_RESERVED: f"Project name '{self.name}' is reserved",
        }
        return [texts[code] for code in self.errors]


def validate_project_name(name: str) -> ValidationResult:
    """Check *name* against every rule and collect all violations."""
    result = ValidationResult(name=name)

    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        result.errors.append(ERROR_LENGTH)

    if not NAME_PATTERN.fullmatch(name):
        result.errors.append(ERROR_FORMAT)

    if name.lower() in RESERVED_NAMES:
        result.errors.append(ERROR_RESERVED)

    return result
