"""Project creation orchestrator.

Sequences a creation run:

1. VALIDATING          -- project name, installed tool versions, target directory.
2. BACKING_UP          -- snapshot of the target path.
3. SCAFFOLDING         -- ``docs/``, ``README.md``, ``docs/CONTRIBUTING.md``.
4. TEMPLATE_GENERATING -- frontend and/or backend starter code.
5. GIT_INITIALIZING    -- repository, ``.gitignore``, hooks, initial commit.

Anything that fails before step 2 aborts without touching the filesystem.
Anything that fails from step 3 on is rolled back and re-raised as
``MutationError``. On success the backup is discarded.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any

import httpx
from rich.tree import Tree

from projgen.config import Config
from projgen.errors import (
    ArgumentError,
    DirectoryConflictError,
    MutationError,
    ProjectGenError,
    RequirementError,
    ValidationError,
)
from projgen.git import GitSetup
from projgen.models import CreationState, ProjectType
from projgen.scaffolder import ProjectFiles, TemplateRenderer, build_context
from projgen.stacks import BackendStack, FrontendStack
from projgen.utils import (
    console,
    format_duration,
    is_verbose,
    print_error,
    print_info,
    print_section,
    print_success,
    print_summary_table,
    print_verbose,
    print_warning,
    progress_indicator,
)
from projgen.validation import (
    BackupManager,
    BackupSnapshot,
    RequirementChecker,
    RollbackManager,
    SubprocessToolRunner,
    ToolRunner,
    validate_project_name,
)


def coerce_project_type(value: ProjectType | str | None) -> ProjectType:
    """Return *value* as a ``ProjectType`` or raise ``ArgumentError``."""
    if isinstance(value, ProjectType):
        return value
    if not value:
        raise ArgumentError("Project type is required")
    try:
        return ProjectType(value)
    except ValueError:
        raise ArgumentError(
            f"Invalid project type '{value}'. Must be one of the following: "
            f"{', '.join(ProjectType.choices())}"
        ) from None


class CreationOrchestrator:
    """Drives a single project creation run.

    All collaborators can be injected; by default they share one
    ``SubprocessToolRunner`` and one ``TemplateRenderer``.

    Attributes:
        state: Current ``CreationState`` (``None`` before the first run).
        history: Every state entered, in order.
    """

    def __init__(
        self,
        config: Config | None = None,
        runner: ToolRunner | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or Config()
        self.runner = runner or SubprocessToolRunner()
        self.renderer = renderer or TemplateRenderer()

        self.checker = RequirementChecker(
            self.config.requirements, self.runner, timeout=self.config.timeouts.probe
        )
        self.backups = BackupManager(self.config.backup)
        self.rollbacks = RollbackManager(self.config.backup)
        self.project_files = ProjectFiles(self.renderer)
        self.frontend = FrontendStack(self.config, self.runner, self.renderer)
        self.backend = BackendStack(self.config, self.renderer, transport=transport)
        self.git = GitSetup(self.config, self.runner, self.renderer)

        self.state: CreationState | None = None
        self.history: list[CreationState] = []

    # ------------------------------------------------------------------
    # State tracking
    # ------------------------------------------------------------------

    def _enter(self, state: CreationState) -> None:
        self.state = state
        self.history.append(state)
        print_verbose(f"State: {state.value}")

    def target_path(self, name: str) -> Path:
        return self.config.output_dir / name

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_name(self, name: str) -> None:
        """Raise ``ValidationError`` listing every rule *name* breaks."""
        if not name:
            raise ArgumentError("Project name is required")
        print_verbose(f"Validating project name: {name}")
        result = validate_project_name(name)
        if not result.ok:
            for message in result.messages:
                print_error(message)
            raise ValidationError(
                f"Invalid project name '{name}': {'; '.join(result.messages)}",
                errors=result.errors,
            )
        print_verbose("Project name validation passed")

    async def check_requirements(self, project_type: ProjectType) -> None:
        """Raise ``RequirementError`` if any tool for *project_type* is unusable."""
        report = await self.checker.check_project_type(project_type)
        if not report.ok:
            messages = [failure.message for failure in report.failures]
            for message in messages:
                print_error(message)
            raise RequirementError(
                f"Requirements validation failed: {'; '.join(messages)}",
                failures=messages,
            )
        print_success("All requirements validated")

    async def validate(self, project_type: ProjectType, name: str) -> Path:
        """Run every pre-mutation check and return the target path."""
        self.validate_name(name)
        await self.check_requirements(project_type)

        target = self.target_path(name)
        if target.exists() or target.is_symlink():
            raise DirectoryConflictError(f"Directory {target} already exists")
        return target

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create(self, project_type: ProjectType | str, name: str) -> Path:
        """Create the project and return its absolute path.

        Raises:
            ProjectGenError: ``ArgumentError``, ``ValidationError``,
                ``RequirementError``, ``DirectoryConflictError`` or
                ``BackupError`` before any mutation; ``MutationError`` after
                a failed step has been rolled back.
        """
        started = time.monotonic()
        self.history.clear()
        self._enter(CreationState.VALIDATING)

        try:
            ptype = coerce_project_type(project_type)
            target = await self.validate(ptype, name)
            print_section(f"Creating new {ptype.value} project: {name}")

            self._enter(CreationState.BACKING_UP)
            snapshot = await asyncio.to_thread(self.backups.create_backup, target)
        except ProjectGenError:
            self._enter(CreationState.FAILED)
            raise

        ctx = build_context(ptype, name, self.config)
        git_result = await self._run_mutations(ptype, target, snapshot, ctx)

        await asyncio.to_thread(self.backups.discard, snapshot)
        self._enter(CreationState.SUCCEEDED)

        full_path = target.resolve()
        self._print_completion(
            ptype, name, full_path, git_result, time.monotonic() - started
        )
        return full_path

    async def _run_mutations(
        self,
        project_type: ProjectType,
        target: Path,
        snapshot: BackupSnapshot,
        ctx: dict[str, Any],
    ) -> dict[str, bool]:
        """Run the mutating steps, rolling back on any failure.

        Returns:
            The git setup outcome (``initialised``, ``committed``).
        """
        step = "Project directory"
        try:
            print_info("Creating project directory...")
            await asyncio.to_thread(target.mkdir, parents=True)
            print_success(f"Created directory: {target.resolve()}")

            self._enter(CreationState.SCAFFOLDING)
            step = "Project structure"
            print_section("Setting up project files")
            with progress_indicator(
                "Creating project structure...",
                success="Project structure created successfully!",
                failure="Failed to create project structure",
            ):
                await self.project_files.generate(target, ctx)

            self._enter(CreationState.TEMPLATE_GENERATING)
            print_section("Generating project template")
            if project_type.has_backend:
                step = "Backend template"
                await self.backend.generate(target, ctx)
            if project_type.has_frontend:
                step = "Frontend template"
                await self.frontend.generate(target, ctx)

            self._enter(CreationState.GIT_INITIALIZING)
            step = "Git setup"
            print_section("Setting up Git repository")
            with progress_indicator(
                "Initialising Git...",
                success="Git repository initialised successfully!",
                failure="Failed to initialise Git repository",
            ):
                git_result = await self.git.setup(target, ctx)

        except Exception as exc:
            self._enter(CreationState.FAILED)
            print_error(f"{step} failed: {exc}")
            await self._rollback(target, snapshot)
            raise MutationError(step, str(exc)) from exc
        except BaseException:
            self._enter(CreationState.FAILED)
            await self._rollback(target, snapshot)
            raise

        return git_result

    async def _rollback(self, target: Path, snapshot: BackupSnapshot) -> None:
        try:
            await asyncio.to_thread(self.rollbacks.rollback, target, snapshot)
        except Exception as exc:
            print_warning(f"Rollback raised unexpectedly: {exc}")
        self._enter(CreationState.ROLLED_BACK)

    def _print_completion(
        self,
        project_type: ProjectType,
        name: str,
        full_path: Path,
        git_result: dict[str, bool],
        elapsed: float,
    ) -> None:
        print_section("Project creation completed! 🎉")
        print_success(f"Project location: {full_path}")

        if is_verbose():
            print_summary_table(
                {
                    "Type": project_type.value,
                    "Name": name,
                    "Location": str(full_path),
                    "Git initialised": "yes" if git_result["initialised"] else "no",
                    "Initial commit": "yes" if git_result["committed"] else "no",
                    "Elapsed": format_duration(elapsed),
                },
                title="Project summary",
            )

        console.print()
        print_info("Next steps:")
        console.print(f"  cd {name}")
        if project_type.has_backend:
            console.print(f"  (cd {name}-backend && ./mvnw spring-boot:run)")
        if project_type.has_frontend:
            console.print(f"  (cd {name}-frontend && npm run dev)")

    # ------------------------------------------------------------------
    # Dry run
    # ------------------------------------------------------------------

    def build_preview(self, project_type: ProjectType, name: str) -> Tree:
        """Return the tree of everything :meth:`create` would produce."""
        tree = Tree(f"[bold]{name}/[/bold]")

        if project_type.has_frontend:
            frontend = tree.add(f"{name}-frontend/  [dim]# Frontend application[/dim]")
            src = frontend.add("src/  [dim]# Source files[/dim]")
            for entry, note in (
                ("assets/", "Static assets"),
                ("components/", "React components"),
                ("pages/", "Route components"),
                ("services/", "API services"),
                ("types/", "TypeScript definitions"),
            ):
                src.add(f"{entry}  [dim]# {note}[/dim]")
            for entry, note in (
                ("public/", "Public assets"),
                ("index.html", "Entry point"),
                ("package.json", "Dependencies"),
                ("tsconfig.json", "TypeScript config"),
                ("vite.config.ts", "Vite config"),
                ("tailwind.config.js", "Tailwind config"),
                ("README.md", "Frontend documentation"),
            ):
                frontend.add(f"{entry}  [dim]# {note}[/dim]")

        if project_type.has_backend:
            backend = tree.add(f"{name}-backend/  [dim]# Backend application[/dim]")
            src = backend.add("src/")
            main = src.add("main/")
            main.add("java/  [dim]# Java source files[/dim]")
            main.add("resources/  [dim]# Application resources[/dim]")
            src.add("test/  [dim]# Test files[/dim]")
            backend.add("pom.xml  [dim]# Maven configuration[/dim]")
            backend.add("mvnw  [dim]# Maven wrapper[/dim]")
            backend.add("README.md  [dim]# Backend documentation[/dim]")

        docs = tree.add("docs/  [dim]# Documentation[/dim]")
        docs.add("CONTRIBUTING.md  [dim]# Contribution guidelines[/dim]")
        tree.add(".git/  [dim]# Repository with pre-commit hook[/dim]")
        tree.add(".gitignore  [dim]# Git ignore rules[/dim]")
        tree.add("README.md  [dim]# Project documentation[/dim]")
        return tree

    def preview(self, project_type: ProjectType | str, name: str) -> Tree:
        """Print the dry-run preview without touching the filesystem."""
        ptype = coerce_project_type(project_type)
        self.validate_name(name)

        print_section("Preview: Project Structure")
        console.print(f"Project Type: {ptype.value}")
        console.print(f"Project Name: {name}")
        console.print(f"Location:     {self.target_path(name).resolve()}")
        console.print()
        console.print("The following will be created:")
        tree = self.build_preview(ptype, name)
        console.print(tree)

        print_section("Preview: Git Configuration")
        console.print("✓ Git repository will be initialised")
        console.print("✓ Git hooks will be set up (including security checks)")
        console.print("✓ Initial commit will be created")

        print_section("Preview: Additional Setup")
        if ptype.has_frontend:
            console.print("✓ Node.js dependencies will be installed")
            console.print("✓ Tailwind CSS will be configured")
            console.print("✓ TypeScript will be configured")
            console.print("✓ Vite development server will be configured")
        if ptype.has_backend:
            console.print("✓ Spring Boot will be downloaded from Spring Initializr")
            console.print("✓ Maven wrapper will be configured")

        console.print()
        print_warning("This is a dry run - no files will be created")
        return tree
