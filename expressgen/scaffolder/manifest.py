"""``package.json`` generation for the scaffolded project.

The manifest is built as a plain dict and serialised with ``dump_json`` so
the output is stable: scripts appear in a fixed order and dependency maps
are sorted by package name.
"""

from __future__ import annotations

from typing import Any

from ..dependencies import dependencies
from ..models import ORM, ProjectConfig


def build_scripts(config: ProjectConfig) -> dict[str, str]:
    """Return the npm scripts for *config*, in display order."""
    ext = config.ext
    if config.is_typescript:
        scripts = {
            "build": "tsc",
            "start": "node dist/server.js",
            "dev": "ts-node src/server.ts",
        }
    else:
        scripts = {
            "build": "node --check src/server.js",
            "start": "node src/server.js",
            "dev": "nodemon src/server.js",
        }

    if config.testing:
        scripts["test"] = "jest"
        scripts["test:watch"] = "jest --watch"
        scripts["test:coverage"] = "jest --coverage"

    if config.eslint:
        scripts["lint"] = f'eslint "src/**/*{ext}"'
        scripts["lint:fix"] = f'eslint "src/**/*{ext}" --fix'

    if config.prettier:
        scripts["format"] = f'prettier --write "src/**/*{ext}"'

    if config.orm is ORM.PRISMA:
        scripts["db:generate"] = "prisma generate"
        scripts["db:push"] = "prisma db push"
        scripts["db:migrate"] = "prisma migrate dev"
        scripts["db:studio"] = "prisma studio"

    return scripts


def build_manifest(config: ProjectConfig) -> dict[str, Any]:
    """Build the ``package.json`` document for *config*.

    Args:
        config: The resolved project configuration.

    Returns:
        A JSON-serialisable dict.  ``dependencies`` and ``devDependencies``
        come from the dependency matrix and are sorted by key.
    """
    descriptor = dependencies(config)
    keywords = ["express", "api", config.language.value]
    if config.orm is not None:
        keywords.append(config.orm.value)

    return {
        "name": config.name,
        "version": "1.0.0",
        "description": f"{config.name} Express API",
        "main": "dist/server.js" if config.is_typescript else "src/server.js",
        "scripts": build_scripts(config),
        "keywords": keywords,
        "author": "",
        "license": "ISC",
        "dependencies": descriptor.runtime_versions(),
        "devDependencies": descriptor.dev_versions(),
    }
