"""Project introspection: approximate a ``ProjectConfig`` from an existing tree.

Used only by the incremental add/remove path, which has no access to the
original resolution inputs.  The mapping is best-effort: fields that leave no
trace in the manifest fall back to fixed values, and a manifest with no
recognised signature yields "no database / no auth / no testing" instead of
an error.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable, Optional

from .models import (
    ORM,
    Auth,
    BoilerplateLevel,
    Database,
    DocsConfig,
    Language,
    PackageManager,
    ProjectConfig,
    ProjectStyle,
)
from .utils import load_json

_PROVIDER_RE = re.compile(r'provider\s*=\s*"(\w+)"')

# Adapter signatures in priority order.
_ADAPTER_SIGNATURES: list[tuple[tuple[str, ...], ORM]] = [
    (("mongoose",), ORM.MONGOOSE),
    (("@prisma/client", "prisma"), ORM.PRISMA),
    (("sequelize",), ORM.SEQUELIZE),
    (("typeorm",), ORM.TYPEORM),
]

_LOCKFILES: list[tuple[str, PackageManager]] = [
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
]

_AUTH_SIGNATURES: list[tuple[str, Auth]] = [
    ("jsonwebtoken", Auth.JWT),
    ("passport", Auth.PASSPORT),
]


def introspect(
    dependencies: Iterable[str],
    has_type_config: bool,
    *,
    name: str = "app",
    prisma_provider: Optional[str] = None,
    package_manager: PackageManager = PackageManager.NPM,
) -> ProjectConfig:
    """Reconstruct an approximate configuration from declared package names.

    Args:
        dependencies: Every runtime and dev package name in the manifest.
        has_type_config: Whether ``tsconfig.json`` exists in the tree.
        name: Project name, taken from the manifest when available.
        prisma_provider: The datasource provider from ``schema.prisma``,
            used to tell a mongodb prisma project from a postgres one.
        package_manager: Detected from lockfiles by the caller; npm otherwise.

    Returns:
        A ``ProjectConfig``.  Never raises on a missing signature.
    """
    names = set(dependencies)

    database: Optional[Database] = None
    orm: Optional[ORM] = None
    for signature, adapter in _ADAPTER_SIGNATURES:
        if names.intersection(signature):
            orm = adapter
            break

    if orm is ORM.MONGOOSE:
        database = Database.MONGODB
    elif orm is ORM.PRISMA:
        database = Database.MONGODB if prisma_provider == "mongodb" else Database.POSTGRES
    elif orm is not None:
        database = Database.POSTGRES

    auth: Optional[Auth] = None
    for package, kind in _AUTH_SIGNATURES:
        if package in names:
            auth = kind
            break

    docs_enabled = "swagger-ui-express" in names
    return ProjectConfig(
        name=name or "app",
        language=Language.TS if has_type_config else Language.JS,
        package_manager=package_manager,
        style=ProjectStyle.RESOURCE,
        database=database,
        orm=orm,
        auth=auth,
        testing="jest" in names,
        eslint="eslint" in names,
        prettier="prettier" in names,
        docker=False,
        git=False,
        light=False,
        boilerplate_level=BoilerplateLevel.FULL,
        include_validation=True,
        docs=DocsConfig(enabled=docs_enabled, title=f"{name or 'app'} API"),
    )


def read_prisma_provider(project_root: Path) -> Optional[str]:
    """Return the datasource provider of ``prisma/schema.prisma``, if any."""
    schema = project_root / "prisma" / "schema.prisma"
    if not schema.is_file():
        return None
    in_datasource = False
    for line in schema.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("datasource"):
            in_datasource = True
        elif in_datasource and stripped.startswith("}"):
            in_datasource = False
        elif in_datasource:
            match = _PROVIDER_RE.search(stripped)
            if match:
                return match.group(1)
    return None


def _detect_package_manager(project_root: Path) -> PackageManager:
    for lockfile, manager in _LOCKFILES:
        if (project_root / lockfile).is_file():
            return manager
    return PackageManager.NPM


def introspect_project(project_root: Path) -> ProjectConfig:
    """Read ``package.json``, ``tsconfig.json`` and the prisma schema under *project_root*.

    An unreadable manifest, or one that is not a JSON object, is treated as
    an empty one.
    """
    try:
        manifest = load_json(project_root / "package.json")
    except (FileNotFoundError, json.JSONDecodeError):
        manifest = {}

    dependencies: list[str] = []
    for section in ("dependencies", "devDependencies"):
        entries = manifest.get(section) or {}
        if isinstance(entries, dict):
            dependencies.extend(entries)

    return introspect(
        dependencies,
        (project_root / "tsconfig.json").is_file(),
        name=str(manifest.get("name") or project_root.name),
        prisma_provider=read_prisma_provider(project_root),
        package_manager=_detect_package_manager(project_root),
    )
