"""Unit tests for the Vite frontend stack (projgen.stacks.frontend).

Tests cover:
- Command sequence and working directories
- Rendered Tailwind/TypeScript/Vite configuration
- Failures from npm/npx and a missing npm executable
"""

from __future__ import annotations

from pathlib import Path

import pytest

from projgen.config import Config, FrontendConfig
from projgen.stacks import FrontendStack, StackError, run_step

pytestmark = pytest.mark.unit


@pytest.fixture
def root(output_dir: Path) -> Path:
    project = output_dir / "demo-app"
    project.mkdir()
    return project


class TestFrontendStack:
    async def test_command_sequence(self, config, fake_runner, root, sample_context):
        frontend_dir = await FrontendStack(config, fake_runner).generate(root, sample_context)

        assert frontend_dir == root / "demo-app-frontend"
        assert fake_runner.commands() == [
            "npm create --yes vite@latest demo-app-frontend -- --template react-ts",
            "npm install",
            "npm install -D tailwindcss@3 postcss autoprefixer",
            "npx tailwindcss init -p",
        ]
        cwds = [cwd for _, cwd in fake_runner.calls]
        assert cwds == [root, frontend_dir, frontend_dir, frontend_dir]

    async def test_configuration_files_written(self, config, fake_runner, root, sample_context):
        frontend_dir = await FrontendStack(config, fake_runner).generate(root, sample_context)

        for name in (
            "tailwind.config.js",
            "vite.config.ts",
            "tsconfig.app.json",
            "tsconfig.node.json",
            "src/index.css",
            "README.md",
        ):
            assert (frontend_dir / name).is_file(), name
        assert "@tailwind base" in (frontend_dir / "src" / "index.css").read_text(encoding="utf-8")
        # files created by vite are left alone
        assert (frontend_dir / "package.json").is_file()

    async def test_custom_frontend_settings(self, output_dir, fake_runner, root):
        from projgen.models import ProjectType
        from projgen.scaffolder import build_context

        config = Config(
            output_dir=output_dir,
            frontend=FrontendConfig(vite_version="5.5.0", vite_template="react", dev_server_port=3000),
        )
        ctx = build_context(ProjectType.FRONTEND, "demo-app", config)
        frontend_dir = await FrontendStack(config, fake_runner).generate(root, ctx)

        assert fake_runner.commands()[0] == (
            "npm create --yes vite@5.5.0 demo-app-frontend -- --template react"
        )
        assert "port: 3000" in (frontend_dir / "vite.config.ts").read_text(encoding="utf-8")

    async def test_npm_install_failure(self, config, fake_runner, root, sample_context):
        fake_runner.fail(("npm", "install"), stderr="ERESOLVE unable to resolve dependency tree")

        with pytest.raises(StackError, match="exit 1") as exc_info:
            await FrontendStack(config, fake_runner).generate(root, sample_context)

        assert exc_info.value.command == "npm install"
        assert "ERESOLVE" in exc_info.value.stderr
        assert "npx tailwindcss init -p" not in fake_runner.commands()

    async def test_vite_directory_missing(self, config, fake_runner, root, sample_context):
        fake_runner.set(("npm", "create"), (0, "", ""))

        with pytest.raises(StackError, match="Vite did not create"):
            await FrontendStack(config, fake_runner).generate(root, sample_context)

    async def test_npm_not_installed(self, config, fake_runner, root, sample_context):
        fake_runner.missing.add("npm")

        with pytest.raises(StackError, match="npm is not installed"):
            await FrontendStack(config, fake_runner).generate(root, sample_context)


class TestRunStep:
    async def test_returns_stdout(self, fake_runner, tmp_path):
        fake_runner.set(("echo",), (0, "hi", ""))
        assert await run_step(fake_runner, ["echo", "hi"], tmp_path, 5) == "hi"

    async def test_non_zero_exit(self, fake_runner, tmp_path):
        fake_runner.fail(("false",), stderr="nope", returncode=2)
        with pytest.raises(StackError, match=r"exit 2\): false"):
            await run_step(fake_runner, ["false"], tmp_path, 5)
