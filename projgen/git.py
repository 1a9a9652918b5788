"""Git repository setup for a freshly scaffolded project.

Initialises the repository, writes ``.gitignore``, installs the pre-commit
hook that blocks large files and likely secrets, and records an initial
commit. Runs last so the commit sees the fully populated tree.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from projgen.config import Config
from projgen.scaffolder.templates import TemplateRenderer
from projgen.utils import make_executable, print_info, print_success, print_verbose, print_warning
from projgen.validation.requirements import SubprocessToolRunner, ToolRunner


class GitError(Exception):
    """Raised when a git operation fails."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


async def _run_git(
    runner: ToolRunner,
    *args: str,
    cwd: str | Path | None = None,
    timeout: float = 60.0,
) -> tuple[str, str]:
    """Run a git command and return (stdout, stderr).

    Raises GitError if git is missing or the command exits with a non-zero code.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)

    try:
        returncode, stdout, stderr = await runner.run(cmd, cwd=cwd, timeout=timeout)
    except FileNotFoundError as exc:
        raise GitError("git is not installed", command=cmd_str) from exc

    if returncode != 0:
        raise GitError(
            f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


class GitSetup:
    """Turns a project directory into a git repository with hooks."""

    def __init__(
        self,
        config: Config,
        runner: ToolRunner | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessToolRunner()
        self.renderer = renderer or TemplateRenderer()

    async def _git(self, *args: str, cwd: Path) -> tuple[str, str]:
        return await _run_git(self.runner, *args, cwd=cwd, timeout=self.config.timeouts.git)

    async def init_repo(self, root: Path) -> bool:
        """Run ``git init`` unless *root* already is a repository.

        Returns:
            ``True`` if a new repository was initialised.
        """
        print_info("Initialising Git repository...")
        if (root / ".git").exists():
            print_info("Git repository already initialised")
            return False

        # --initial-branch needs git 2.28+
        await self._git("init", cwd=root)
        await self._git(
            "symbolic-ref", "HEAD", f"refs/heads/{self.config.git.default_branch}", cwd=root
        )

        for key in ("user.name", "user.email"):
            try:
                value, _ = await self._git("config", key, cwd=root)
            except GitError:
                value = ""
            if not value:
                print_warning(f"Git {key} not set. Please configure it manually.")
        return True

    async def create_gitignore(self, root: Path, ctx: dict[str, Any]) -> Path:
        print_verbose("Creating .gitignore file...")
        return await self.renderer.render_to_file("git/gitignore.j2", root / ".gitignore", ctx)

    async def install_hooks(self, root: Path, ctx: dict[str, Any]) -> Path:
        print_verbose("Setting up Git hooks...")
        hook = await self.renderer.render_to_file(
            "git/pre-commit.j2", root / ".git" / "hooks" / "pre-commit", ctx
        )
        await asyncio.to_thread(make_executable, hook)
        return hook

    async def create_initial_commit(self, root: Path, project_name: str) -> bool:
        """Stage everything and commit.

        A failed commit (typically an unset git identity) is reported as a
        warning; the repository is still usable.
        """
        print_verbose("Creating initial commit...")
        await self._git("add", ".", cwd=root)
        try:
            await self._git(
                "commit", "-m", f"Initial commit: Setup {project_name} project structure", cwd=root
            )
        except GitError as exc:
            print_warning(
                "Could not create initial commit. Please configure git user.name "
                f"and user.email ({exc.stderr or exc})"
            )
            return False
        return True

    async def setup(self, root: Path, ctx: dict[str, Any]) -> dict[str, bool]:
        """Run every git step in order and report what happened."""
        initialised = await self.init_repo(root)
        await self.create_gitignore(root, ctx)
        await self.install_hooks(root, ctx)
        committed = await self.create_initial_commit(root, ctx["project_name"])
        print_success("Git setup completed")
        return {"initialised": initialised, "committed": committed}
