"""Entrypoint and shared artifacts of a generated project.

Covers ``src/app``, ``src/server``, the middleware, the utils shared by
every resource, the Swagger setup and the two environment files.
"""

from __future__ import annotations

from typing import Any

from ..models import ProjectConfig, ProjectStyle
from .context import project_context
from .templates import TemplateRenderer


class AppGenerator:
    """Renders the application shell around the resources."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, config: ProjectConfig) -> dict[str, str]:
        """Return ``{relative path: text}`` for the entrypoint and shared files.

        Args:
            config: The resolved project configuration.

        Returns:
            Artifacts keyed by POSIX path relative to the project root.
        """
        ctx = project_context(config)
        ext = config.ext
        files: dict[str, str] = {
            f"src/app{ext}": self.renderer.render("app/app.j2", ctx),
            f"src/server{ext}": self.renderer.render("app/server.j2", ctx),
            f"src/middleware/errorHandler{ext}": self.renderer.render("app/errorHandler.j2", ctx),
        }

        if config.has_auth:
            files[f"src/middleware/auth{ext}"] = self.renderer.render("app/auth.j2", ctx)
        if config.style is ProjectStyle.RESOURCE:
            files[f"src/utils/registerResources{ext}"] = self.renderer.render(
                "app/registerResources.j2", ctx
            )
        if config.orm is not None:
            files[f"src/utils/database{ext}"] = self.renderer.render("app/database.j2", ctx)
        if config.docs.enabled:
            files[f"src/swagger{ext}"] = self.renderer.render("app/swagger.j2", ctx)

        files.update(self._env_files(config, ctx))
        return files

    def _env_files(self, config: ProjectConfig, ctx: dict[str, Any]) -> dict[str, str]:
        env_ctx = dict(ctx, db_name=config.name)
        example_ctx = dict(ctx, db_name="your-database-name", example=True)
        return {
            ".env": self.renderer.render("app/env.j2", dict(env_ctx, example=False)),
            ".env.example": self.renderer.render("app/env.j2", example_ctx),
        }
