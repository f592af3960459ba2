"""Dependency matrix: configuration -> npm packages a generated project declares.

``resolve_dependencies`` is a pure, total function over every combination of
its inputs (including database/adapter pairs the resolver would reject), so
it can be evaluated for any manifest without raising.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from .models import ORM, Auth, Database, Language, ProjectConfig


# ---------------------------------------------------------------------------
# Package tables
# ---------------------------------------------------------------------------

BASELINE_RUNTIME: tuple[str, ...] = (
    "express",
    "cors",
    "helmet",
    "express-rate-limit",
    "express-validator",
    "dotenv",
)

# (runtime, dev) pair per adapter kind, independent of any other field.
ORM_PACKAGES: dict[ORM, tuple[tuple[str, ...], tuple[str, ...]]] = {
    ORM.MONGOOSE: (("mongoose",), ("@types/mongoose",)),
    ORM.PRISMA: (("@prisma/client",), ("prisma",)),
    ORM.SEQUELIZE: (("sequelize", "pg"), ("@types/sequelize", "@types/pg")),
    ORM.TYPEORM: (("typeorm", "reflect-metadata", "pg"), ("@types/pg",)),
}

AUTH_PACKAGES: dict[Auth, tuple[tuple[str, ...], tuple[str, ...]]] = {
    Auth.JWT: (
        ("jsonwebtoken", "bcryptjs"),
        ("@types/jsonwebtoken", "@types/bcryptjs"),
    ),
    Auth.PASSPORT: (
        ("passport", "passport-local", "express-session"),
        ("@types/passport", "@types/passport-local", "@types/express-session"),
    ),
}

DOCS_PACKAGES: tuple[tuple[str, ...], tuple[str, ...]] = (
    ("swagger-ui-express", "swagger-jsdoc"),
    ("@types/swagger-ui-express", "@types/swagger-jsdoc"),
)

DIALECT_DEV: dict[Language, tuple[str, ...]] = {
    Language.TS: ("typescript", "ts-node", "@types/node", "@types/express", "@types/cors"),
    Language.JS: ("nodemon",),
}

TESTING_DEV: tuple[str, ...] = ("jest", "supertest")
TESTING_TS_DEV: tuple[str, ...] = ("ts-jest", "@types/jest", "@types/supertest")
ESLINT_DEV: tuple[str, ...] = ("eslint",)
ESLINT_TS_DEV: tuple[str, ...] = ("@typescript-eslint/parser", "@typescript-eslint/eslint-plugin")
PRETTIER_DEV: tuple[str, ...] = ("prettier",)
PRETTIER_ESLINT_DEV: tuple[str, ...] = ("eslint-config-prettier", "eslint-plugin-prettier")

PACKAGE_VERSIONS: dict[str, str] = {
    "express": "^4.18.2",
    "cors": "^2.8.5",
    "helmet": "^7.0.0",
    "express-rate-limit": "^6.10.0",
    "express-validator": "^7.0.1",
    "dotenv": "^16.3.1",
    "mongoose": "^7.5.0",
    "@prisma/client": "^5.2.0",
    "prisma": "^5.2.0",
    "sequelize": "^6.32.1",
    "pg": "^8.11.3",
    "typeorm": "^0.3.17",
    "reflect-metadata": "^0.1.13",
    "jsonwebtoken": "^9.0.2",
    "bcryptjs": "^2.4.3",
    "passport": "^0.6.0",
    "passport-local": "^1.0.0",
    "express-session": "^1.17.3",
    "swagger-ui-express": "^5.0.0",
    "swagger-jsdoc": "^6.2.8",
    "typescript": "^5.1.6",
    "ts-node": "^10.9.1",
    "nodemon": "^3.0.1",
    "@types/node": "^20.5.0",
    "@types/express": "^4.17.17",
    "@types/cors": "^2.8.13",
    "@types/pg": "^8.10.2",
    "@types/jsonwebtoken": "^9.0.2",
    "@types/bcryptjs": "^2.4.2",
    "@types/passport": "^1.0.12",
    "@types/passport-local": "^1.0.35",
    "@types/express-session": "^1.17.7",
    "@types/swagger-ui-express": "^4.1.3",
    "@types/swagger-jsdoc": "^6.0.1",
    "jest": "^29.6.2",
    "ts-jest": "^29.1.1",
    "@types/jest": "^29.5.4",
    "supertest": "^6.3.3",
    "@types/supertest": "^2.0.12",
    "eslint": "^8.47.0",
    "@typescript-eslint/parser": "^6.4.0",
    "@typescript-eslint/eslint-plugin": "^6.4.0",
    "prettier": "^3.0.2",
    "eslint-config-prettier": "^9.0.0",
    "eslint-plugin-prettier": "^5.0.0",
}


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


class DependencyDescriptor(BaseModel):
    """Runtime and development-only package names. The two sets are disjoint."""

    model_config = ConfigDict(frozen=True)

    runtime: frozenset[str]
    dev: frozenset[str]

    @model_validator(mode="after")
    def _disjoint(self) -> "DependencyDescriptor":
        overlap = self.runtime & self.dev
        if overlap:
            raise ValueError(f"Packages declared as both runtime and dev: {sorted(overlap)}")
        return self

    def runtime_versions(self) -> dict[str, str]:
        """Return ``{name: version}`` for runtime packages, sorted by name."""
        return {name: package_version(name) for name in sorted(self.runtime)}

    def dev_versions(self) -> dict[str, str]:
        """Return ``{name: version}`` for dev packages, sorted by name."""
        return {name: package_version(name) for name in sorted(self.dev)}


def package_version(name: str) -> str:
    """Return the pinned semver range for *name*, or ``"latest"``."""
    return PACKAGE_VERSIONS.get(name, "latest")


# ---------------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------------


def resolve_dependencies(
    *,
    database: Optional[Database] = None,
    orm: Optional[ORM] = None,
    auth: Optional[Auth] = None,
    docs_enabled: bool = False,
    language: Language = Language.TS,
    testing: bool = False,
    eslint: bool = False,
    prettier: bool = False,
) -> DependencyDescriptor:
    """Compute the package sets for one combination of configuration fields.

    *database* does not change the result: each adapter maps to one fixed
    pair, and a database without an adapter contributes nothing. It is
    accepted so callers can pass a full configuration tuple.
    """
    runtime: set[str] = set(BASELINE_RUNTIME)
    dev: set[str] = set(DIALECT_DEV[language])

    if orm is not None:
        orm_runtime, orm_dev = ORM_PACKAGES[orm]
        runtime.update(orm_runtime)
        dev.update(orm_dev)

    if auth is not None:
        auth_runtime, auth_dev = AUTH_PACKAGES[auth]
        runtime.update(auth_runtime)
        dev.update(auth_dev)

    if docs_enabled:
        runtime.update(DOCS_PACKAGES[0])
        dev.update(DOCS_PACKAGES[1])

    is_ts = language is Language.TS
    if testing:
        dev.update(TESTING_DEV)
        if is_ts:
            dev.update(TESTING_TS_DEV)
    if eslint:
        dev.update(ESLINT_DEV)
        if is_ts:
            dev.update(ESLINT_TS_DEV)
    if prettier:
        dev.update(PRETTIER_DEV)
        if eslint:
            dev.update(PRETTIER_ESLINT_DEV)

    return DependencyDescriptor(runtime=frozenset(runtime), dev=frozenset(dev - runtime))


def dependencies(config: ProjectConfig) -> DependencyDescriptor:
    """Dependency matrix entry point for a resolved ``ProjectConfig``."""
    return resolve_dependencies(
        database=config.database,
        orm=config.orm,
        auth=config.auth,
        docs_enabled=config.docs.enabled,
        language=config.language,
        testing=config.testing,
        eslint=config.eslint,
        prettier=config.prettier,
    )
