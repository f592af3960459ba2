"""Directory planning for a generated project.

The plan is a pure function of the configuration.  Callers create only the
directories that do not exist yet, so planning twice is harmless.
"""

from __future__ import annotations

from ..models import ORM, ProjectConfig, ProjectStyle

BASE_DIRECTORIES: tuple[str, ...] = ("src/middleware", "src/utils", "src/types")
LAYERED_DIRECTORIES: tuple[str, ...] = ("src/controllers", "src/services", "src/routes")


def plan_directories(config: ProjectConfig) -> frozenset[str]:
    """Return every relative directory *config* calls for."""
    planned = set(BASE_DIRECTORIES)

    if config.style is ProjectStyle.RESOURCE:
        planned.add("src/resources")
    else:
        planned.update(LAYERED_DIRECTORIES)

    if config.has_database:
        planned.add("src/models")
        if config.orm is ORM.PRISMA:
            planned.add("prisma")

    if config.testing:
        planned.add("tests")

    return frozenset(planned)
