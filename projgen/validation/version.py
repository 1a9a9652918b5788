"""Dotted version parsing and comparison.

Comparison is numeric and component-wise over the components of the
*required* version only, so ``2.1.3.4`` satisfies ``2.1.3``. It is not
semver-aware: pre-release tags are not special-cased.
"""

from __future__ import annotations

import re
from enum import Enum

_LEADING_DIGITS = re.compile(r"^\d+")
_VERSION_IN_TEXT = re.compile(r"\d+(?:\.\d+)*")


class Comparison(str, Enum):
    """Outcome of comparing an installed version against a required one."""
    LESS = "less"
    EQUAL_OR_GREATER = "equal_or_greater"


def parse_version(value: str) -> list[int]:
    """Parse ``value`` into its integer components.

    Any non-digit prefix (``v20.11.0``, ``jdk-21``) is stripped first. Each
    component contributes its leading digits; a component without digits
    counts as zero.

    Examples::

        parse_version("v20.11.0") -> [20, 11, 0]
        parse_version("1.8.0_292") -> [1, 8, 0]
        parse_version("") -> []
    """
    stripped = value.strip()
    index = 0
    while index < len(stripped) and not stripped[index].isdigit():
        index += 1
    stripped = stripped[index:]
    if not stripped:
        return []

    components: list[int] = []
    for part in stripped.split("."):
        match = _LEADING_DIGITS.match(part)
        components.append(int(match.group(0)) if match else 0)
    return components


def compare_versions(current: str, required: str) -> Comparison:
    """Compare *current* against *required*.

    Walks the components of *required*, padding *current* with zeros. The
    first differing component decides; if none differ the result is
    ``EQUAL_OR_GREATER``.
    """
    current_parts = parse_version(current)
    required_parts = parse_version(required)

    for index, required_part in enumerate(required_parts):
        current_part = current_parts[index] if index < len(current_parts) else 0
        if current_part != required_part:
            if current_part < required_part:
                return Comparison.LESS
            return Comparison.EQUAL_OR_GREATER
    return Comparison.EQUAL_OR_GREATER


def extract_version(text: str) -> str | None:
    """Return the first dotted version found in a tool's version banner.

    Examples::

        extract_version('openjdk version "21.0.2" 2024-01-16') -> "21.0.2"
        extract_version("Apache Maven 3.9.6 (bc0240f3)") -> "3.9.6"
        extract_version("command not found") -> None
    """
    match = _VERSION_IN_TEXT.search(text)
    return match.group(0) if match else None
