"""Tooling and repository artifacts: tsconfig, jest, eslint, prettier, prisma,
``.gitignore`` and ``README.md``.

JSON artifacts are built as dicts and serialised with ``dump_json``; the
rest come from templates under ``config/``.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from ..models import ORM, ProjectConfig, pascal_case
from ..utils import dump_json
from .context import project_context
from .manifest import build_scripts
from .templates import TemplateRenderer

EXAMPLE_RESOURCE = "user"
PRISMA_SCHEMA = "prisma/schema.prisma"


# ---------------------------------------------------------------------------
# JSON documents
# ---------------------------------------------------------------------------


def tsconfig(config: ProjectConfig) -> dict[str, Any]:
    types = ["node"]
    if config.testing:
        types.append("jest")
    return {
        "compilerOptions": {
            "target": "ES2020",
            "module": "commonjs",
            "lib": ["ES2020"],
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
            "resolveJsonModule": True,
            "sourceMap": True,
            "types": types,
            "moduleResolution": "node",
            "experimentalDecorators": True,
            "emitDecoratorMetadata": True,
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist", "**/*.test.ts"],
    }


def jest_config(config: ProjectConfig) -> dict[str, Any]:
    ext = config.language.value
    doc: dict[str, Any] = {
        "testEnvironment": "node",
        "roots": ["<rootDir>/src"],
        "testMatch": [f"**/*.test.{ext}"],
        "collectCoverageFrom": [f"src/**/*.{ext}", f"!src/**/*.test.{ext}"],
        "coverageDirectory": "coverage",
        "coverageReporters": ["text", "lcov"],
    }
    if config.is_typescript:
        doc["preset"] = "ts-jest"
        doc["moduleFileExtensions"] = ["ts", "js", "json"]
    return doc


def eslint_config(config: ProjectConfig) -> dict[str, Any]:
    """Build ``.eslintrc.json``.

    Unused arguments are allowed so signature-level stubs lint cleanly.
    """
    doc: dict[str, Any] = {
        "root": True,
        "env": {"node": True, "es2021": True},
        "extends": ["eslint:recommended"],
        "parserOptions": {"ecmaVersion": 2021, "sourceType": "module"},
        "plugins": [],
        "rules": {"prefer-const": "error"},
    }
    if config.testing:
        doc["env"]["jest"] = True

    unused = ["error", {"args": "none"}]
    if config.is_typescript:
        doc["parser"] = "@typescript-eslint/parser"
        doc["extends"].append("plugin:@typescript-eslint/recommended")
        doc["plugins"].append("@typescript-eslint")
        doc["rules"]["no-unused-vars"] = "off"
        doc["rules"]["@typescript-eslint/no-unused-vars"] = unused
    else:
        doc["parserOptions"]["sourceType"] = "script"
        doc["rules"]["no-unused-vars"] = unused

    if config.prettier:
        doc["extends"].append("prettier")
        doc["plugins"].append("prettier")
        doc["rules"]["prettier/prettier"] = "error"

    if not doc["plugins"]:
        del doc["plugins"]
    return doc


def prettier_config() -> dict[str, Any]:
    return {
        "semi": True,
        "trailingComma": "es5",
        "singleQuote": True,
        "printWidth": 100,
        "tabWidth": 2,
        "useTabs": False,
    }


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ConfigGenerator:
    """Renders the project's tooling configuration files."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, config: ProjectConfig) -> dict[str, str]:
        ctx = project_context(config)
        files: dict[str, str] = {}

        if config.is_typescript:
            files["tsconfig.json"] = dump_json(tsconfig(config))
        if config.testing:
            files["jest.config.json"] = dump_json(jest_config(config))
        if config.eslint:
            files[".eslintrc.json"] = dump_json(eslint_config(config))
        if config.prettier:
            files[".prettierrc"] = dump_json(prettier_config())
            files[".prettierignore"] = self.renderer.render("config/prettierignore.j2", ctx)
        if config.orm is ORM.PRISMA:
            files[PRISMA_SCHEMA] = self.prisma_schema(config, [pascal_case(EXAMPLE_RESOURCE)])

        files[".gitignore"] = self.renderer.render("config/gitignore.j2", ctx)
        files["README.md"] = self.renderer.render(
            "config/README.md.j2",
            dict(ctx, scripts=build_scripts(config)),
        )
        return files

    def prisma_schema(self, config: ProjectConfig, models: list[str]) -> str:
        """Render a complete ``schema.prisma`` declaring *models*."""
        return self.renderer.render(
            "config/schema.prisma.j2", dict(project_context(config), models=models)
        )

    def add_prisma_model(self, config: ProjectConfig, schema: str, model: str) -> Optional[str]:
        """Return *schema* with a ``model`` block appended, or ``None`` if it already has one."""
        if re.search(rf"^\s*model\s+{re.escape(model)}\s*\{{", schema, re.MULTILINE):
            return None
        block = self.renderer.render(
            "config/prisma_model.j2", dict(project_context(config), model=model)
        )
        return schema.rstrip("\n") + "\n\n" + block
