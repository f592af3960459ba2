"""expressgen scaffolder -- renders Express projects and resources.

Quick usage::

    from expressgen.models import ProjectConfig
    from expressgen.scaffolder import ProjectGenerator

    config = ProjectConfig(name="shop-api", testing=True)
    generator = ProjectGenerator(config)
    project_path = await generator.generate("/tmp/output")
"""

from expressgen.scaffolder.generator import PreconditionError, ProjectGenerator
from expressgen.scaffolder.manifest import build_manifest
from expressgen.scaffolder.planner import plan_directories
from expressgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "PreconditionError",
    "ProjectGenerator",
    "TemplateRenderer",
    "build_manifest",
    "plan_directories",
]
