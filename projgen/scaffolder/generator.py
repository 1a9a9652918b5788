"""Project file scaffolding.

Creates the documentation skeleton of a new project (``docs/``,
``README.md``, ``docs/CONTRIBUTING.md``) from Jinja2 templates. The same
template context is shared by the stack generators and the git setup.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from projgen.config import Config
from projgen.models import ProjectType
from projgen.utils import print_info, print_success, print_verbose

from .templates import TemplateRenderer, java_package_segment


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


def frontend_dir_name(project_name: str) -> str:
    return f"{project_name}-frontend"


def backend_dir_name(project_name: str) -> str:
    return f"{project_name}-backend"


def build_context(
    project_type: ProjectType, project_name: str, config: Config
) -> dict[str, Any]:
    """Build the Jinja2 template context for a project."""
    backend_dir = backend_dir_name(project_name)
    return {
        "project_name": project_name,
        "project_type": project_type.value,
        "has_frontend": project_type.has_frontend,
        "has_backend": project_type.has_backend,
        "frontend_dir": frontend_dir_name(project_name),
        "backend_dir": backend_dir,
        "java_package": f"{config.backend.group_id}.{java_package_segment(backend_dir)}",
        "frontend": config.frontend.model_dump(),
        "backend": config.backend.model_dump(),
        "git": config.git.model_dump(),
        "required": config.requirements.model_dump(),
    }


# ---------------------------------------------------------------------------
# File scaffolding
# ---------------------------------------------------------------------------


class ProjectFiles:
    """Writes the documentation skeleton shared by every project type."""

    DIRECTORIES = ("docs",)

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    async def create_directory_structure(self, root: Path, ctx: dict[str, Any]) -> None:
        print_info(f"Creating directory structure for {ctx['project_type']} project...")
        for name in self.DIRECTORIES:
            print_verbose(f"Creating {name} directory...")
            await asyncio.to_thread((root / name).mkdir, parents=True, exist_ok=True)

    async def create_documentation(self, root: Path, ctx: dict[str, Any]) -> list[Path]:
        print_info("Creating documentation files...")
        print_verbose("Generating README.md...")
        readme = await self.renderer.render_to_file("README.md.j2", root / "README.md", ctx)
        print_verbose("Generating CONTRIBUTING.md...")
        contributing = await self.renderer.render_to_file(
            "CONTRIBUTING.md.j2", root / "docs" / "CONTRIBUTING.md", ctx
        )
        return [readme, contributing]

    async def generate(self, root: Path, ctx: dict[str, Any]) -> list[Path]:
        """Create ``docs/`` and the documentation files inside *root*."""
        print_verbose("Starting project files setup...")
        await self.create_directory_structure(root, ctx)
        written = await self.create_documentation(root, ctx)
        print_success("Project files setup completed")
        return written
