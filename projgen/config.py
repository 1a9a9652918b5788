"""projgen configuration.

Centralised, typed configuration for project creation. All settings use
Pydantic v2 models so they can be validated at construction time and loaded
from JSON/YAML files or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class BackupCollision(str, Enum):
    """What to do when a backup already exists at the snapshot path."""
    FAIL = "fail"
    OVERWRITE = "overwrite"
    VERSION = "version"


class RequirementsConfig(BaseModel):
    """Minimum tool versions. An empty string accepts any installed version."""

    node: str = Field(default="18.0.0")
    java: str = Field(default="17")
    maven: str = Field(default="3.6.0")


class BackupConfig(BaseModel):
    """Backup snapshot naming and collision policy."""

    suffix: str = Field(default=".bak", min_length=1)
    collision: BackupCollision = Field(default=BackupCollision.FAIL)


class FrontendConfig(BaseModel):
    """Vite + React + TypeScript + Tailwind template parameters."""

    vite_version: str = Field(default="latest")
    vite_template: str = Field(default="react-ts")
    tailwind_packages: list[str] = Field(
        default_factory=lambda: ["tailwindcss@3", "postcss", "autoprefixer"]
    )
    api_proxy_target: str = Field(
        default="http://localhost:8080",
        description="Backend URL the Vite dev server proxies /api requests to",
    )
    dev_server_port: int = Field(default=5173, ge=1, le=65535)


class BackendConfig(BaseModel):
    """Spring Initializr download parameters."""

    initializr_url: str = Field(default="https://start.spring.io/starter.zip")
    boot_version: str = Field(default="3.4.0")
    java_version: str = Field(default="21")
    group_id: str = Field(default="com.example")
    dependencies: list[str] = Field(
        default_factory=lambda: [
            "web",
            "data-jpa",
            "security",
            "validation",
            "lombok",
            "devtools",
        ]
    )
    description: str = Field(default="Demo project for Spring Boot")
    server_port: int = Field(default=8080, ge=1, le=65535)


class GitConfig(BaseModel):
    """Repository initialisation settings."""

    default_branch: str = Field(default="main")
    max_file_size_mb: int = Field(
        default=5, ge=1, description="Files above this size are rejected by the pre-commit hook"
    )


class TimeoutConfig(BaseModel):
    """Per-call timeouts for external collaborators, in seconds."""

    probe: int = Field(default=30, ge=1)
    install: int = Field(default=600, ge=10)
    download: int = Field(default=120, ge=5)
    git: int = Field(default=60, ge=5)


class Config(BaseModel):
    """Global projgen configuration.

    Instances are created once by the CLI entry point (from defaults, an
    optional config file and the environment) and then passed to the
    orchestrator and its collaborators.
    """

    output_dir: Path = Field(default=Path("."))
    requirements: RequirementsConfig = Field(default_factory=RequirementsConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    frontend: FrontendConfig = Field(default_factory=FrontendConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration file.

        ``.yaml``/``.yml`` files are parsed with PyYAML, anything else as JSON.
        An empty YAML file yields the defaults.

        Raises:
            FileNotFoundError: If *path* does not exist.
            pydantic.ValidationError: If the content does not match the schema.
        """
        file_path = Path(path)
        raw = file_path.read_text(encoding="utf-8")
        if file_path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw) or {}
            return cls.model_validate(data)
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Apply environment overrides on top of *base* (or the defaults).

        Recognised variables (all optional):
            PROJGEN_REQUIRED_NODE_VERSION, PROJGEN_REQUIRED_JAVA_VERSION,
            PROJGEN_REQUIRED_MAVEN_VERSION, PROJGEN_BACKUP_COLLISION,
            PROJGEN_SPRING_BOOT_VERSION, PROJGEN_JAVA_VERSION.
        """
        config = base.model_copy(deep=True) if base else cls()

        requirements_kwargs: dict[str, Any] = {}
        if "PROJGEN_REQUIRED_NODE_VERSION" in os.environ:
            requirements_kwargs["node"] = os.environ["PROJGEN_REQUIRED_NODE_VERSION"]
        if "PROJGEN_REQUIRED_JAVA_VERSION" in os.environ:
            requirements_kwargs["java"] = os.environ["PROJGEN_REQUIRED_JAVA_VERSION"]
        if "PROJGEN_REQUIRED_MAVEN_VERSION" in os.environ:
            requirements_kwargs["maven"] = os.environ["PROJGEN_REQUIRED_MAVEN_VERSION"]
        if requirements_kwargs:
            config.requirements = config.requirements.model_copy(update=requirements_kwargs)

        if os.environ.get("PROJGEN_BACKUP_COLLISION"):
            config.backup = BackupConfig(
                suffix=config.backup.suffix,
                collision=BackupCollision(os.environ["PROJGEN_BACKUP_COLLISION"]),
            )

        backend_kwargs: dict[str, Any] = {}
        if os.environ.get("PROJGEN_SPRING_BOOT_VERSION"):
            backend_kwargs["boot_version"] = os.environ["PROJGEN_SPRING_BOOT_VERSION"]
        if os.environ.get("PROJGEN_JAVA_VERSION"):
            backend_kwargs["java_version"] = os.environ["PROJGEN_JAVA_VERSION"]
        if backend_kwargs:
            config.backend = config.backend.model_copy(update=backend_kwargs)

        return config
