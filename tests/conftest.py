"""Shared pytest fixtures for the projgen test suite.

Provides reusable fixtures for:
- A fake ToolRunner that stands in for node, java, mvn, npm, npx and git
- Configuration rooted in a temporary output directory
- A Spring Initializr archive served through ``httpx.MockTransport``
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from projgen.config import Config, RequirementsConfig
from projgen.utils import set_verbose


# ---------------------------------------------------------------------------
# Fake tool runner
# ---------------------------------------------------------------------------

Result = tuple[int, str, str]
Handler = Callable[[list[str], Path | None], Result]


class FakeToolRunner:
    """In-memory ToolRunner with sensible defaults for every external tool.

    * ``missing`` -- executables that raise ``FileNotFoundError``.
    * ``responses`` -- command prefix -> fixed ``(returncode, stdout, stderr)``
      or a handler ``(cmd, cwd) -> result``; the longest matching prefix wins.
    * ``calls`` -- every ``(cmd, cwd)`` received, in order.
    """

    def __init__(self) -> None:
        self.missing: set[str] = set()
        self.responses: dict[tuple[str, ...], Result | Handler] = {}
        self.calls: list[tuple[list[str], Path | None]] = []

    def set(self, prefix: tuple[str, ...], response: Result | Handler) -> None:
        self.responses[prefix] = response

    def fail(self, prefix: tuple[str, ...], stderr: str = "boom", returncode: int = 1) -> None:
        self.responses[prefix] = (returncode, "", stderr)

    def commands(self) -> list[str]:
        return [" ".join(cmd) for cmd, _ in self.calls]

    async def run(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: float = 120,
    ) -> Result:
        cwd_path = Path(cwd) if cwd is not None else None
        self.calls.append((list(cmd), cwd_path))

        if cmd[0] in self.missing:
            raise FileNotFoundError(f"{cmd[0]}: command not found")

        for prefix in sorted(self.responses, key=len, reverse=True):
            if tuple(cmd[: len(prefix)]) == prefix:
                response = self.responses[prefix]
                if callable(response):
                    return response(cmd, cwd_path)
                return response

        return _default_response(cmd, cwd_path)


def _default_response(cmd: list[str], cwd: Path | None) -> Result:
    head = tuple(cmd[:2])
    if head == ("node", "-v"):
        return (0, "v20.11.0", "")
    if head == ("java", "-version"):
        return (0, "", 'openjdk version "21.0.2" 2024-01-16\nOpenJDK Runtime Environment')
    if head == ("mvn", "-v"):
        return (0, "Apache Maven 3.9.6 (bc0240f3c744dd6b6ec2920b3cd08dcc295161ae)", "")
    if head == ("npm", "create") and cwd is not None:
        # npm create --yes vite@x <dir> -- --template react-ts
        app_dir = cwd / cmd[4]
        (app_dir / "src").mkdir(parents=True)
        (app_dir / "public").mkdir()
        (app_dir / "package.json").write_text('{"name": "%s"}\n' % cmd[4], encoding="utf-8")
        (app_dir / "index.html").write_text("<div id=\"root\"></div>\n", encoding="utf-8")
        return (0, "Scaffolding project...", "")
    if head == ("git", "init") and cwd is not None:
        (cwd / ".git" / "hooks").mkdir(parents=True, exist_ok=True)
        return (0, f"Initialized empty Git repository in {cwd}/.git/", "")
    if head == ("git", "config"):
        return (0, "Test User" if cmd[2] == "user.name" else "test@example.com", "")
    return (0, "", "")


@pytest.fixture
def fake_runner() -> FakeToolRunner:
    """A FakeToolRunner where every tool is installed and every command succeeds."""
    return FakeToolRunner()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _quiet_output():
    """Reset verbose output between tests."""
    set_verbose(False)
    yield
    set_verbose(False)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory new projects are created in."""
    out = tmp_path / "workspace"
    out.mkdir()
    return out


@pytest.fixture
def config(output_dir: Path) -> Config:
    """Config rooted in the temporary workspace with default requirements."""
    return Config(output_dir=output_dir, requirements=RequirementsConfig())


# ---------------------------------------------------------------------------
# Spring Initializr
# ---------------------------------------------------------------------------

def make_initializr_zip(artifact_id: str) -> bytes:
    """Build a minimal archive shaped like a Spring Initializr download."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr(f"{artifact_id}/pom.xml", "<project></project>\n")
        wrapper = zipfile.ZipInfo(f"{artifact_id}/mvnw")
        wrapper.external_attr = 0o644 << 16
        archive.writestr(wrapper, "#!/bin/sh\necho mvnw\n")
        archive.writestr(
            f"{artifact_id}/src/main/java/com/example/Application.java",
            "class Application {}\n",
        )
        archive.writestr(
            f"{artifact_id}/src/main/resources/application.properties",
            "spring.application.name=%s\n" % artifact_id,
        )
    return buffer.getvalue()


class InitializrStub:
    """Records requests and answers with a generated archive (or an error)."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: bytes | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="Invalid request")
        body = self.body
        if body is None:
            body = make_initializr_zip(request.url.params["artifactId"])
        return httpx.Response(200, content=body, headers={"Content-Type": "application/zip"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def initializr() -> InitializrStub:
    """Spring Initializr stand-in; pass ``initializr.transport`` to BackendStack."""
    return InitializrStub()


@pytest.fixture
def sample_context(config: Config) -> dict[str, Any]:
    """Template context for a fullstack project named ``demo-app``."""
    from projgen.models import ProjectType
    from projgen.scaffolder import build_context

    return build_context(ProjectType.FULLSTACK, "demo-app", config)


@pytest.fixture
def initializr_zip() -> Callable[[str], bytes]:
    """Factory building an Initializr-shaped archive for a given artifact id."""
    return make_initializr_zip
