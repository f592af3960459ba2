"""Pydantic v2 models for the expressgen configuration layer.

Defines the enumerations, the canonical ``ProjectConfig`` and
``ResourceConfig`` records that drive every generator, and the raw CLI-level
options records (``CreateOptions`` / ``AddOptions``) that the resolver turns
into canonical configuration.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ExpressgenError(Exception):
    """Base class for every error the engine raises on purpose."""


class ConfigurationError(ExpressgenError, ValueError):
    """Raised when explicit options cannot form a valid configuration."""


class IncompatibleAdapterError(ConfigurationError):
    """Raised when an adapter kind is not allowed for the database kind."""

    def __init__(self, database: Optional["Database"], orm: "ORM") -> None:
        self.database = database
        self.orm = orm
        if database is None:
            message = f"Adapter '{orm.value}' requires a database, but no database was selected"
        else:
            allowed = ", ".join(o.value for o in COMPATIBLE_ORMS[database])
            message = (
                f"Adapter '{orm.value}' is not compatible with database "
                f"'{database.value}' (expected one of: {allowed})"
            )
        super().__init__(message)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Language(str, Enum):
    """Source dialect of the generated project."""
    TS = "ts"
    JS = "js"

    @property
    def ext(self) -> str:
        return f".{self.value}"


class PackageManager(str, Enum):
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


class ProjectStyle(str, Enum):
    """Resource modules (Nest-like) or a controllers/services/routes split."""
    RESOURCE = "resource"
    LAYERED = "layered"


class Database(str, Enum):
    MONGODB = "mongodb"
    POSTGRES = "postgres"


class ORM(str, Enum):
    """Data-access adapter for the selected database."""
    MONGOOSE = "mongoose"
    PRISMA = "prisma"
    SEQUELIZE = "sequelize"
    TYPEORM = "typeorm"


class Auth(str, Enum):
    JWT = "jwt"
    PASSPORT = "passport"


class BoilerplateLevel(str, Enum):
    """How complete generated method bodies are."""
    MINIMAL = "minimal"
    SIGNATURES = "signatures"
    FULL = "full"


class DocsTheme(str, Enum):
    DEFAULT = "default"
    DARK = "dark"
    MATERIAL = "material"


# ---------------------------------------------------------------------------
# Compatibility table
# ---------------------------------------------------------------------------

COMPATIBLE_ORMS: dict[Database, tuple[ORM, ...]] = {
    Database.MONGODB: (ORM.MONGOOSE, ORM.PRISMA),
    Database.POSTGRES: (ORM.PRISMA, ORM.SEQUELIZE, ORM.TYPEORM),
}

# Adapter picked when a database is set but no adapter is.
DEFAULT_ORM: dict[Database, ORM] = {
    Database.MONGODB: ORM.MONGOOSE,
    Database.POSTGRES: ORM.PRISMA,
}

# Database picked when an adapter is set but no database is.
ORM_HOME_DATABASE: dict[ORM, Database] = {
    ORM.MONGOOSE: Database.MONGODB,
    ORM.PRISMA: Database.POSTGRES,
    ORM.SEQUELIZE: Database.POSTGRES,
    ORM.TYPEORM: Database.POSTGRES,
}


def check_adapter_compatibility(database: Optional[Database], orm: Optional[ORM]) -> None:
    """Raise ``IncompatibleAdapterError`` if *orm* is not allowed for *database*."""
    if orm is None:
        return
    if database is None or orm not in COMPATIBLE_ORMS[database]:
        raise IncompatibleAdapterError(database, orm)


def databases_for_orm(orm: ORM) -> list[Database]:
    """Return every database whose compatibility entry contains *orm*."""
    return [db for db, orms in COMPATIBLE_ORMS.items() if orm in orms]


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------

_WORD_SPLIT_RE = re.compile(r"[-_\s]+")


def pascal_case(value: str) -> str:
    """Convert ``blog-post`` or ``blog_post`` to ``BlogPost``.

    Only the first letter of each word is changed, so ``userProfile`` becomes
    ``UserProfile``.
    """
    parts = _WORD_SPLIT_RE.split(value.strip())
    return "".join(word[0].upper() + word[1:] for word in parts if word)


def camel_case(value: str) -> str:
    """Convert ``blog-post`` or ``blog_post`` to ``blogPost``."""
    pascal = pascal_case(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


# ---------------------------------------------------------------------------
# Canonical configuration
# ---------------------------------------------------------------------------

_RESOURCE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")

# Controller handlers every non-minimal resource defines.
STANDARD_HANDLERS = frozenset({"getAll", "getById", "create", "update", "delete"})


def check_resource_name(value: str, kind: str = "resource name") -> str:
    """Return *value* stripped, or raise ``ConfigurationError`` if it is not a usable name."""
    value = value.strip()
    if not _RESOURCE_NAME_RE.match(value):
        raise ConfigurationError(
            f"Invalid {kind} {value!r}: use letters, digits, '-' or '_', "
            "starting with a letter"
        )
    return value


class DocsConfig(BaseModel):
    """API documentation (Swagger UI) settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Whether Swagger UI is mounted")
    title: str = Field(default="API Documentation", description="Documentation title")
    path: str = Field(default="/docs", description="URL path Swagger UI is served on")
    theme: DocsTheme = Field(default=DocsTheme.DEFAULT, description="Swagger UI theme")

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"Documentation path must start with '/': {value!r}")
        return value.rstrip("/") or "/"


class ProjectConfig(BaseModel):
    """Canonical, immutable configuration for one ``create`` (or ``add``) run."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Project name (package.json name)")
    language: Language = Field(default=Language.TS)
    package_manager: PackageManager = Field(default=PackageManager.NPM)
    style: ProjectStyle = Field(default=ProjectStyle.RESOURCE)
    database: Optional[Database] = Field(default=None)
    orm: Optional[ORM] = Field(default=None, description="Adapter kind for the database")
    auth: Optional[Auth] = Field(default=None)
    testing: bool = Field(default=False, description="Include Jest + supertest")
    eslint: bool = Field(default=False)
    prettier: bool = Field(default=False)
    docker: bool = Field(default=False)
    git: bool = Field(default=True, description="Initialise a git repository after generation")
    light: bool = Field(default=False, description="Reduced-feature preset")
    boilerplate_level: BoilerplateLevel = Field(default=BoilerplateLevel.FULL)
    include_validation: bool = Field(default=True)
    docs: DocsConfig = Field(default_factory=DocsConfig)

    @model_validator(mode="after")
    def _check_invariants(self) -> "ProjectConfig":
        check_adapter_compatibility(self.database, self.orm)
        if self.light:
            violations = [
                label
                for label, bad in (
                    ("boilerplate_level", self.boilerplate_level is not BoilerplateLevel.MINIMAL),
                    ("testing", self.testing),
                    ("eslint", self.eslint),
                    ("prettier", self.prettier),
                    ("docker", self.docker),
                    ("database", self.database is not None),
                    ("auth", self.auth is not None),
                    ("docs", self.docs.enabled),
                    ("include_validation", self.include_validation),
                )
                if bad
            ]
            if violations:
                raise ValueError(
                    "Light mode forbids: " + ", ".join(violations)
                )
        return self

    # -- Derived values ----------------------------------------------------

    @property
    def ext(self) -> str:
        return self.language.ext

    @property
    def is_typescript(self) -> bool:
        return self.language is Language.TS

    @property
    def has_database(self) -> bool:
        return self.database is not None

    @property
    def has_auth(self) -> bool:
        return self.auth is not None


class ResourceConfig(BaseModel):
    """Configuration for a single CRUD resource module."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Singular resource name, e.g. 'order'")
    generate_tests: bool = Field(default=True)
    with_auth: bool = Field(default=False, description="Guard write routes with auth middleware")
    boilerplate_level: BoilerplateLevel = Field(default=BoilerplateLevel.FULL)
    include_validation: bool = Field(default=True)
    custom_endpoints: tuple[str, ...] = Field(
        default=(), description="Extra endpoint names appended after the CRUD routes"
    )

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        return check_resource_name(value)

    @field_validator("custom_endpoints", mode="before")
    @classmethod
    def _normalise_endpoints(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        seen: list[str] = []
        for raw in value:  # type: ignore[union-attr]
            endpoint = str(raw).strip()
            if not endpoint:
                continue
            endpoint = check_resource_name(endpoint, kind="endpoint name")
            if endpoint not in seen:
                seen.append(endpoint)
        return tuple(seen)

    @model_validator(mode="after")
    def _distinct_handlers(self) -> "ResourceConfig":
        """Every custom endpoint must map to its own controller field."""
        taken = set(STANDARD_HANDLERS) | {"constructor", f"{camel_case(self.name)}Service"}
        owners: dict[str, str] = {}
        for endpoint in self.custom_endpoints:
            handler = camel_case(endpoint)
            if handler in owners:
                raise ConfigurationError(
                    f"Endpoints {owners[handler]!r} and {endpoint!r} both map to handler {handler!r}"
                )
            if handler in taken:
                raise ConfigurationError(
                    f"Endpoint {endpoint!r} clashes with the controller member {handler!r}"
                )
            owners[handler] = endpoint
        return self


# ---------------------------------------------------------------------------
# Raw options records (CLI collaborator output)
# ---------------------------------------------------------------------------


class CreateOptions(BaseModel):
    """Options for ``create``. ``None`` means "not supplied"."""

    lang: Optional[str] = None
    pkg_manager: Optional[str] = None
    style: Optional[str] = None
    with_db: Optional[bool] = None
    db: Optional[str] = None
    orm: Optional[str] = None
    with_auth: Optional[bool] = None
    auth: Optional[str] = None
    with_jest: Optional[bool] = None
    tests: Optional[bool] = None
    with_eslint: Optional[bool] = None
    with_prettier: Optional[bool] = None
    with_docker: Optional[bool] = None
    git: Optional[bool] = None
    light: Optional[bool] = None
    boilerplate: Optional[str] = None
    validation: Optional[bool] = None
    with_swagger: Optional[bool] = None
    swagger_title: Optional[str] = None
    swagger_path: Optional[str] = None
    swagger_theme: Optional[str] = None


class AddOptions(BaseModel):
    """Options for ``add``. ``None`` means "not supplied"."""

    tests: Optional[bool] = None
    with_auth: Optional[bool] = None
    boilerplate: Optional[str] = None
    validation: Optional[bool] = None
    endpoints: Optional[list[str]] = None

    @field_validator("endpoints", mode="before")
    @classmethod
    def _split_endpoints(cls, value: object) -> object:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value
