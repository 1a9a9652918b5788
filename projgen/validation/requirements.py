"""Installed tool version checks.

Each project type needs a fixed set of tools. Every check runs even when an
earlier one fails so the user sees all problems at once. Tools are probed
through a :class:`ToolRunner`, which tests replace with a fake.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

from projgen.config import RequirementsConfig
from projgen.models import ProjectType
from projgen.utils import print_verbose, run_command

from .version import Comparison, compare_versions, extract_version


# ---------------------------------------------------------------------------
# Tool runner
# ---------------------------------------------------------------------------


class ToolRunner(Protocol):
    """Runs an external command and returns ``(returncode, stdout, stderr)``.

    Implementations raise ``FileNotFoundError`` when the executable is missing.
    """

    async def run(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: float = 120,
    ) -> tuple[int, str, str]: ...


class SubprocessToolRunner:
    """Default :class:`ToolRunner` backed by :func:`projgen.utils.run_command`."""

    async def run(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: float = 120,
    ) -> tuple[int, str, str]:
        executable = shutil.which(cmd[0])
        if executable is None:
            raise FileNotFoundError(f"{cmd[0]}: command not found")
        return await run_command([executable, *cmd[1:]], cwd=cwd, timeout=timeout)


# ---------------------------------------------------------------------------
# Tool catalogue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolSpec:
    """How to probe one tool's version."""

    key: str
    display_name: str
    probe: tuple[str, ...]


NODE = ToolSpec(key="node", display_name="Node.js", probe=("node", "-v"))
JAVA = ToolSpec(key="java", display_name="Java", probe=("java", "-version"))
MAVEN = ToolSpec(key="maven", display_name="Maven", probe=("mvn", "-v"))

TOOLS_BY_PROJECT_TYPE: dict[ProjectType, tuple[ToolSpec, ...]] = {
    ProjectType.FRONTEND: (NODE,),
    ProjectType.BACKEND: (JAVA, MAVEN),
    ProjectType.FULLSTACK: (NODE, JAVA, MAVEN),
}


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class RequirementStatus(str, Enum):
    OK = "ok"
    TOOL_NOT_FOUND = "tool_not_found"
    VERSION_TOO_LOW = "version_too_low"


@dataclass
class RequirementResult:
    """Outcome of a single tool check."""

    tool: ToolSpec
    status: RequirementStatus
    required_version: str = ""
    installed_version: str | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is RequirementStatus.OK

    @property
    def message(self) -> str:
        name = self.tool.display_name
        if self.status is RequirementStatus.TOOL_NOT_FOUND:
            suffix = f" ({self.detail})" if self.detail else ""
            wanted = (
                f"version {self.required_version} or higher"
                if self.required_version
                else "any version"
            )
            return f"{name} is not installed{suffix}. Please install {name} {wanted}"
        if self.status is RequirementStatus.VERSION_TOO_LOW:
            return (
                f"{name} version {self.installed_version} is lower than "
                f"required version {self.required_version}"
            )
        return f"{name} {self.installed_version} found"


@dataclass
class RequirementReport:
    """Aggregate of every check run for a project type."""

    results: list[RequirementResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def failures(self) -> list[RequirementResult]:
        return [result for result in self.results if not result.ok]


# ---------------------------------------------------------------------------
# Checker
# ---------------------------------------------------------------------------


class RequirementChecker:
    """Probes installed tools and compares them with configured minimums."""

    def __init__(
        self,
        requirements: RequirementsConfig,
        runner: ToolRunner | None = None,
        timeout: float = 30,
    ) -> None:
        self.requirements = requirements
        self.runner = runner or SubprocessToolRunner()
        self.timeout = timeout

    def required_version(self, tool: ToolSpec) -> str:
        return getattr(self.requirements, tool.key, "")

    async def check_requirement(
        self, tool: ToolSpec, required_version: str
    ) -> RequirementResult:
        """Probe *tool* and compare its version with *required_version*."""
        print_verbose(f"Checking {tool.display_name} installation...")

        try:
            returncode, stdout, stderr = await self.runner.run(
                list(tool.probe), timeout=self.timeout
            )
        except (FileNotFoundError, PermissionError) as exc:
            return RequirementResult(
                tool=tool,
                status=RequirementStatus.TOOL_NOT_FOUND,
                required_version=required_version,
                detail=str(exc),
            )

        if returncode != 0:
            return RequirementResult(
                tool=tool,
                status=RequirementStatus.TOOL_NOT_FOUND,
                required_version=required_version,
                detail=f"'{' '.join(tool.probe)}' exited with {returncode}",
            )

        # java -version writes its banner to stderr.
        installed = extract_version(stdout) or extract_version(stderr)
        if installed is None:
            return RequirementResult(
                tool=tool,
                status=RequirementStatus.TOOL_NOT_FOUND,
                required_version=required_version,
                detail="could not determine installed version",
            )

        print_verbose(f"Found {tool.display_name} version: {installed}")

        if required_version and compare_versions(installed, required_version) is Comparison.LESS:
            return RequirementResult(
                tool=tool,
                status=RequirementStatus.VERSION_TOO_LOW,
                required_version=required_version,
                installed_version=installed,
            )

        print_verbose(f"{tool.display_name} version check passed")
        return RequirementResult(
            tool=tool,
            status=RequirementStatus.OK,
            required_version=required_version,
            installed_version=installed,
        )

    async def check_project_type(self, project_type: ProjectType) -> RequirementReport:
        """Run every check for *project_type*, collecting all failures."""
        report = RequirementReport()
        for tool in TOOLS_BY_PROJECT_TYPE[project_type]:
            result = await self.check_requirement(tool, self.required_version(tool))
            report.results.append(result)
        return report
