"""Vite + React + TypeScript + Tailwind frontend template."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from projgen.config import Config
from projgen.scaffolder.templates import TemplateRenderer
from projgen.utils import print_info, print_success, print_verbose, progress_indicator
from projgen.validation.requirements import SubprocessToolRunner, ToolRunner

from .base import StackError, run_step


class FrontendStack:
    """Creates ``<name>-frontend`` with ``npm create vite`` and configures Tailwind.

    Steps run in order inside the project root:

    1. ``npm create vite@<version> <dir> -- --template <template>``
    2. ``npm install``
    3. ``npm install -D <tailwind packages>``
    4. ``npx tailwindcss init -p``
    5. render Tailwind, TypeScript and Vite config files plus a README
    """

    def __init__(
        self,
        config: Config,
        runner: ToolRunner | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessToolRunner()
        self.renderer = renderer or TemplateRenderer()

    async def _step(self, description: str, cmd: list[str], cwd: Path) -> None:
        print_verbose(f"Running: {' '.join(cmd)}")
        with progress_indicator(description):
            await run_step(self.runner, cmd, cwd, self.config.timeouts.install)

    async def generate(self, root: Path, ctx: dict[str, Any]) -> Path:
        """Generate the frontend application inside *root*.

        Returns:
            Path to the frontend directory.

        Raises:
            StackError: If any npm step fails or the Vite project is missing.
        """
        settings = self.config.frontend
        frontend_dir = root / ctx["frontend_dir"]

        print_info("Setting up frontend project with Vite + React + TypeScript + Tailwind...")

        await self._step(
            "Creating Vite project...",
            [
                "npm",
                "create",
                "--yes",
                f"vite@{settings.vite_version}",
                ctx["frontend_dir"],
                "--",
                "--template",
                settings.vite_template,
            ],
            root,
        )
        if not frontend_dir.is_dir():
            raise StackError(f"Vite did not create {frontend_dir}")

        await self._step("Installing dependencies...", ["npm", "install"], frontend_dir)
        await self._step(
            "Adding Tailwind CSS...",
            ["npm", "install", "-D", *settings.tailwind_packages],
            frontend_dir,
        )
        await self._step(
            "Initialising Tailwind CSS...",
            ["npx", "tailwindcss", "init", "-p"],
            frontend_dir,
        )

        print_verbose("Writing Tailwind, TypeScript and Vite configuration...")
        await self.renderer.render_tree("frontend", frontend_dir, ctx)

        print_success("Frontend project setup completed")
        return frontend_dir
