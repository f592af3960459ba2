"""Main scaffolding orchestrator.

Takes a resolved ``ProjectConfig`` and produces a complete Express project:
manifest, entrypoints and shared middleware, an example resource, tooling
configuration and container files.  Content generation is pure; only
``generate`` and ``generate_resource`` touch the filesystem.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..models import (
    ORM,
    ExpressgenError,
    ProjectConfig,
    ProjectStyle,
    ResourceConfig,
    pascal_case,
)
from ..utils import dump_json
from .app_gen import AppGenerator
from .config_gen import EXAMPLE_RESOURCE, PRISMA_SCHEMA, ConfigGenerator
from .docker_gen import DockerGenerator
from .manifest import build_manifest
from .planner import plan_directories
from .resource_gen import ResourceGenerator, resource_dir
from .templates import TemplateRenderer, write_file


class PreconditionError(ExpressgenError):
    """Raised when a generation target already exists or a project is missing."""


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Main scaffolding orchestrator.

    Given a ``ProjectConfig``, generates a directory tree containing:
    - ``package.json`` with the dependency matrix and scripts
    - ``src/app``, ``src/server`` and shared middleware/utils
    - an example ``user`` resource (resource style only)
    - tsconfig / jest / eslint / prettier / prisma configuration
    - Dockerfile and Compose file (when docker is enabled)
    """

    def __init__(self, config: ProjectConfig, renderer: TemplateRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.app_gen = AppGenerator(self.renderer)
        self.resource_gen = ResourceGenerator(self.renderer)
        self.config_gen = ConfigGenerator(self.renderer)
        self.docker_gen = DockerGenerator(self.renderer)

    # -- Pure content generation -------------------------------------------

    def example_resource(self) -> ResourceConfig:
        """The resource every resource-style project starts with."""
        return ResourceConfig(
            name=EXAMPLE_RESOURCE,
            generate_tests=self.config.testing,
            with_auth=False,
            boilerplate_level=self.config.boilerplate_level,
            include_validation=self.config.include_validation,
        )

    def build_artifacts(self) -> dict[str, str]:
        """Return every file of the project as ``{relative path: text}``.

        Deterministic: the same configuration always yields the same mapping.
        """
        artifacts: dict[str, str] = {"package.json": dump_json(build_manifest(self.config))}
        artifacts.update(self.app_gen.generate(self.config))
        if self.config.style is ProjectStyle.RESOURCE:
            artifacts.update(self.build_resource_artifacts(self.example_resource()))
        artifacts.update(self.config_gen.generate(self.config))
        artifacts.update(self.docker_gen.generate(self.config))
        return artifacts

    def build_resource_artifacts(self, resource: ResourceConfig) -> dict[str, str]:
        """Return the files of one resource, and nothing else."""
        return self.resource_gen.generate(self.config, resource)

    # -- Public API --------------------------------------------------------

    async def generate(self, output_dir: str | Path) -> Path:
        """Generate the complete project structure.

        Args:
            output_dir: Parent directory where the project folder will be
                created.  A subdirectory named after the project is created
                inside it.

        Returns:
            Path to the generated project root.

        Raises:
            PreconditionError: If ``<output_dir>/<name>`` already exists.
                Nothing is written in that case.
        """
        project_root = Path(output_dir) / self.config.name
        if project_root.exists():
            raise PreconditionError(f"Directory {project_root} already exists")

        artifacts = self.build_artifacts()
        await asyncio.to_thread(project_root.mkdir, parents=True)
        await _write_all(project_root, artifacts)

        # Planned directories that no artifact populated
        for rel in sorted(plan_directories(self.config)):
            target = project_root / rel
            if not target.is_dir():
                await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)

        return project_root

    async def generate_resource(self, project_root: str | Path, resource: ResourceConfig) -> list[Path]:
        """Write one resource into an existing project.

        For a prisma project the resource's ``model`` block is appended to
        ``prisma/schema.prisma`` when the schema does not declare it yet; the
        schema is then part of the returned paths.

        Raises:
            PreconditionError: If ``src/resources/<name>`` already exists.
        """
        root = Path(project_root)
        target = root / resource_dir(resource.name)
        if target.exists():
            raise PreconditionError(f"Resource '{resource.name}' already exists at {target}")

        artifacts = self.build_resource_artifacts(resource)
        written = await _write_all(root, artifacts)
        if self.config.orm is ORM.PRISMA:
            schema = await self._register_prisma_model(root, pascal_case(resource.name))
            if schema is not None:
                written.append(schema)
        return written

    async def _register_prisma_model(self, root: Path, model: str) -> Path | None:
        """Declare *model* in the project's prisma schema; ``None`` if already declared."""
        path = root / PRISMA_SCHEMA
        if path.is_file():
            current = await asyncio.to_thread(path.read_text, encoding="utf-8")
            updated = self.config_gen.add_prisma_model(self.config, current, model)
            if updated is None:
                return None
        else:
            updated = self.config_gen.prisma_schema(self.config, [model])
        await asyncio.to_thread(write_file, path, updated)
        return path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


async def _write_all(root: Path, artifacts: dict[str, str]) -> list[Path]:
    """Write every artifact concurrently and wait for all of them."""
    paths = [root / rel for rel in artifacts]
    await asyncio.gather(
        *(asyncio.to_thread(write_file, path, text) for path, text in zip(paths, artifacts.values()))
    )
    return paths
