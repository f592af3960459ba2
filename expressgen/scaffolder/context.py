"""Template contexts and derived resource names.

Every name a resource's artifacts share (class prefix, variable prefix, route
prefix) is computed once here in ``ResourceNames`` and threaded into every
template, so the controller, service, routes, validation, model, index and
test artifacts cannot drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..models import (
    BoilerplateLevel,
    ProjectConfig,
    ProjectStyle,
    ResourceConfig,
    camel_case,
    pascal_case,
)


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceNames:
    """Derived identifiers for one resource, e.g. ``order`` -> ``Order``."""

    singular: str
    pascal: str
    camel: str
    plural: str
    camel_plural: str
    route: str

    @classmethod
    def from_name(cls, name: str) -> "ResourceNames":
        plural = f"{name}s"
        camel = camel_case(name)
        return cls(
            singular=name,
            pascal=pascal_case(name),
            camel=camel,
            plural=plural,
            camel_plural=f"{camel}s",
            route=f"/api/{plural}",
        )


# ---------------------------------------------------------------------------
# Route table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Route:
    """One entry of a resource's route table."""

    method: str
    path: str
    handler: str
    summary: str
    middleware: tuple[str, ...] = ()
    has_id: bool = False
    has_body: bool = False
    custom: bool = False
    status: int = 200

    def openapi_path(self, prefix: str) -> str:
        suffix = self.path.replace(":id", "{id}")
        return prefix if suffix == "/" else f"{prefix}{suffix}"


AUTH_MIDDLEWARE = "authenticateToken"


def validator_name(names: ResourceNames) -> str:
    return f"validate{names.pascal}"


def route_table(
    names: ResourceNames,
    resource: ResourceConfig,
    project: ProjectConfig,
) -> list[Route]:
    """Return the standard five routes followed by custom endpoints.

    Validation runs before auth on create and update; delete carries auth
    only.  Custom endpoints are ``POST /:id/<endpoint>`` in declaration
    order.
    """
    validate: tuple[str, ...] = (validator_name(names),) if resource.include_validation else ()
    auth: tuple[str, ...] = (AUTH_MIDDLEWARE,) if resource.with_auth and project.has_auth else ()

    routes = [
        Route("get", "/", "getAll", f"List {names.plural}"),
        Route("get", "/:id", "getById", f"Get a {names.singular} by id", has_id=True),
        Route("post", "/", "create", f"Create a {names.singular}",
              middleware=validate + auth, has_body=True, status=201),
        Route("put", "/:id", "update", f"Update a {names.singular}",
              middleware=validate + auth, has_id=True, has_body=True),
        Route("delete", "/:id", "delete", f"Delete a {names.singular}",
              middleware=auth, has_id=True),
    ]
    for endpoint in resource.custom_endpoints:
        routes.append(
            Route("post", f"/:id/{endpoint}", camel_case(endpoint),
                  f"{endpoint} a {names.singular}", middleware=auth,
                  has_id=True, custom=True, status=501)
        )
    return routes


# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------


def _value(member: Optional[Any]) -> Optional[str]:
    return None if member is None else member.value


def project_context(config: ProjectConfig) -> dict[str, Any]:
    """Flatten a ``ProjectConfig`` into template variables.

    Enum fields are passed as their string values; ``ts`` is the single
    switch templates use for extension and syntax.
    """
    return {
        "name": config.name,
        "ts": config.is_typescript,
        "ext": config.ext,
        "lang": config.language.value,
        "package_manager": config.package_manager.value,
        "resource_style": config.style is ProjectStyle.RESOURCE,
        "database": _value(config.database),
        "orm": _value(config.orm),
        "auth": _value(config.auth),
        "testing": config.testing,
        "eslint": config.eslint,
        "prettier": config.prettier,
        "docker": config.docker,
        "light": config.light,
        "docs": config.docs,
        "docs_theme": config.docs.theme.value,
    }


@dataclass
class ResourceContext:
    """Everything a resource template needs, built once per resource."""

    project: ProjectConfig
    resource: ResourceConfig
    names: ResourceNames = field(init=False)
    routes: list[Route] = field(init=False)

    def __post_init__(self) -> None:
        self.names = ResourceNames.from_name(self.resource.name)
        self.routes = route_table(self.names, self.resource, self.project)

    @property
    def level(self) -> str:
        return self.resource.boilerplate_level.value

    @property
    def with_auth(self) -> bool:
        return self.resource.with_auth and self.project.has_auth

    def as_dict(self) -> dict[str, Any]:
        ctx = project_context(self.project)
        ctx.update(
            n=self.names,
            routes=self.routes,
            standard_routes=[r for r in self.routes if not r.custom],
            custom_routes=[r for r in self.routes if r.custom],
            level=self.level,
            full=self.resource.boilerplate_level is BoilerplateLevel.FULL,
            minimal=self.resource.boilerplate_level is BoilerplateLevel.MINIMAL,
            validation=self.resource.include_validation,
            validator=validator_name(self.names),
            with_auth=self.with_auth,
            auth_middleware=AUTH_MIDDLEWARE,
        )
        return ctx
