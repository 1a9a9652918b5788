"""Spring Boot backend template downloaded from Spring Initializr."""

from __future__ import annotations

import asyncio
import io
import zipfile
from pathlib import Path
from typing import Any

import httpx

from projgen.config import Config
from projgen.scaffolder.templates import TemplateRenderer
from projgen.utils import make_executable, print_info, print_success, print_verbose, progress_indicator

from .base import StackError


def initializr_params(config: Config, ctx: dict[str, Any]) -> dict[str, str]:
    """Query parameters for the ``starter.zip`` endpoint."""
    settings = config.backend
    artifact_id = ctx["backend_dir"]
    return {
        "type": "maven-project",
        "language": "java",
        "bootVersion": settings.boot_version,
        "baseDir": artifact_id,
        "groupId": settings.group_id,
        "artifactId": artifact_id,
        "name": artifact_id,
        "description": settings.description,
        "packageName": ctx["java_package"],
        "packaging": "jar",
        "javaVersion": settings.java_version,
        "dependencies": ",".join(settings.dependencies),
    }


def extract_archive(content: bytes, destination: Path) -> list[Path]:
    """Extract a zip archive into *destination*, keeping unix permissions.

    Raises:
        StackError: If the payload is not a zip file or a member would be
            written outside *destination*.
    """
    root = destination.resolve()
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as exc:
        raise StackError(f"Spring Initializr returned an invalid archive: {exc}") from exc

    extracted: list[Path] = []
    with archive:
        for info in archive.infolist():
            target = (root / info.filename).resolve()
            if target != root and root not in target.parents:
                raise StackError(f"Archive member escapes the project directory: {info.filename}")
            archive.extract(info, root)
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                target.chmod(mode)
            extracted.append(target)
    return extracted


class BackendStack:
    """Downloads a Spring Boot project into ``<name>-backend`` and documents it.

    The HTTP transport is injectable so tests can serve a canned archive via
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: Config,
        renderer: TemplateRenderer | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.transport = transport

    async def download(self, ctx: dict[str, Any]) -> bytes:
        """Fetch the project archive from Spring Initializr."""
        settings = self.config.backend
        params = initializr_params(self.config, ctx)
        print_verbose(f"GET {settings.initializr_url} {params}")

        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=httpx.Timeout(self.config.timeouts.download, connect=10.0),
                follow_redirects=True,
            ) as client:
                response = await client.get(settings.initializr_url, params=params)
        except httpx.HTTPError as exc:
            raise StackError(f"Could not reach Spring Initializr: {exc}") from exc

        if response.status_code != 200:
            raise StackError(
                f"Spring Initializr responded with HTTP {response.status_code}: "
                f"{response.text[:200]}"
            )
        return response.content

    async def generate(self, root: Path, ctx: dict[str, Any]) -> Path:
        """Generate the backend application inside *root*.

        Returns:
            Path to the backend directory.

        Raises:
            StackError: If the download or extraction fails.
        """
        backend_dir = root / ctx["backend_dir"]
        print_info("Setting up backend project with Spring Boot...")

        with progress_indicator("Downloading Spring Boot project template..."):
            content = await self.download(ctx)

        print_verbose("Extracting project files...")
        await asyncio.to_thread(extract_archive, content, root)
        if not backend_dir.is_dir():
            raise StackError(f"Spring Initializr archive did not contain {backend_dir.name}/")

        wrapper = backend_dir / "mvnw"
        if wrapper.exists():
            make_executable(wrapper)

        await self.renderer.render_to_file(
            "backend/README.md.j2", backend_dir / "README.md", ctx
        )

        print_success("Backend project setup completed")
        return backend_dir
