"""Per-resource artifact generation.

A resource is a self-contained folder under ``src/resources/<name>/``.  Every
file in it is rendered from one ``ResourceContext`` so class names, variable
names and the mount path agree across files.
"""

from __future__ import annotations

from ..models import ProjectConfig, ResourceConfig
from .context import ResourceContext
from .templates import TemplateRenderer

RESOURCES_DIR = "src/resources"


def resource_dir(name: str) -> str:
    return f"{RESOURCES_DIR}/{name}"


class ResourceGenerator:
    """Renders the controller, service, routes, validation, index, model and test files."""

    # Always emitted, in this order.
    _CORE_TEMPLATES: tuple[str, ...] = ("controller", "service", "routes")

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, project: ProjectConfig, resource: ResourceConfig) -> dict[str, str]:
        """Return ``{relative path: text}`` for one resource.

        ``validation`` is emitted only when validation is included, ``model``
        only when the project has a database adapter, and the test file only
        when both the resource and the project have tests enabled.
        """
        ctx = ResourceContext(project, resource).as_dict()
        base = resource_dir(resource.name)
        ext = project.ext

        files: dict[str, str] = {}
        for stem in self._CORE_TEMPLATES:
            files[f"{base}/{stem}{ext}"] = self.renderer.render(f"resource/{stem}.j2", ctx)
        if resource.include_validation:
            files[f"{base}/validation{ext}"] = self.renderer.render("resource/validation.j2", ctx)
        files[f"{base}/index{ext}"] = self.renderer.render("resource/index.j2", ctx)
        if project.orm is not None:
            files[f"{base}/model{ext}"] = self.renderer.render("resource/model.j2", ctx)
        if resource.generate_tests and project.testing:
            files[f"{base}/{resource.name}.test{ext}"] = self.renderer.render("resource/test.j2", ctx)
        return files
