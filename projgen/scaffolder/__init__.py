"""projgen scaffolder -- writes the documentation skeleton of a new project.

Quick usage::

    from projgen.scaffolder import ProjectFiles, build_context

    ctx = build_context(ProjectType.FRONTEND, "my-app", Config())
    await ProjectFiles().generate(Path("my-app"), ctx)
"""

from projgen.scaffolder.generator import (
    ProjectFiles,
    backend_dir_name,
    build_context,
    frontend_dir_name,
)
from projgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "ProjectFiles",
    "TemplateRenderer",
    "backend_dir_name",
    "build_context",
    "frontend_dir_name",
]
