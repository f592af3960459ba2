"""Project configuration resolver.

Merges explicit options, interactive answers and built-in defaults into one
canonical ``ProjectConfig``.  Precedence per field is explicit option, then
answer, then default.  Three flows are mutually exclusive: light, default and
full.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, TypeVar

from ..models import (
    COMPATIBLE_ORMS,
    DEFAULT_ORM,
    ORM,
    ORM_HOME_DATABASE,
    Auth,
    BoilerplateLevel,
    ConfigurationError,
    CreateOptions,
    Database,
    DocsConfig,
    DocsTheme,
    Language,
    PackageManager,
    ProjectConfig,
    ProjectStyle,
    check_adapter_compatibility,
    databases_for_orm,
)
from .channel import InteractiveChannel
from .questions import CONFIRM, SELECT, TEXT, Answers, Question, QuestionGraph

E = TypeVar("E", bound=Enum)

NONE_VALUE = "none"

# Values used when neither an option nor an answer supplies a field.
DEFAULTS: dict[str, Any] = {
    "language": Language.TS,
    "package_manager": PackageManager.NPM,
    "style": ProjectStyle.RESOURCE,
    "boilerplate_level": BoilerplateLevel.FULL,
    "include_validation": True,
    "database": None,
    "orm": None,
    "auth": None,
    "testing": False,
    "eslint": False,
    "prettier": False,
    "docker": False,
    "git": True,
    "docs_enabled": False,
    "docs_path": "/docs",
    "docs_theme": DocsTheme.DEFAULT,
}

# The full flow suggests the tooling on.
FULL_FLOW_DEFAULTS: dict[str, Any] = {
    **DEFAULTS,
    "testing": True,
    "eslint": True,
    "prettier": True,
}

LIGHT_QUESTION = "Create a lightweight minimal project?"
CONFIGURE_MORE_QUESTION = "Configure additional options (database, auth, testing, etc.)?"


# ---------------------------------------------------------------------------
# Explicit option extraction
# ---------------------------------------------------------------------------


def parse_enum(enum_cls: type[E], value: str, option: str) -> E:
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Unknown value {value!r} for --{option} (expected one of: {allowed})"
        ) from None


def parse_optional_enum(enum_cls: type[E], value: str, option: str) -> Optional[E]:
    if value.strip().lower() == NONE_VALUE:
        return None
    return parse_enum(enum_cls, value, option)


def extract_explicit(options: CreateOptions) -> Answers:
    """Turn supplied options into explicit field values.

    A key is present in the result only when the option was supplied.
    ``None`` values (e.g. ``database``) mean "explicitly none".

    Raises:
        ConfigurationError: An option carries an unknown enum value, or
            ``--orm none`` is combined with a database.
        IncompatibleAdapterError: An explicit adapter does not fit an
            explicit database.
    """
    explicit: Answers = {}

    if options.lang is not None:
        explicit["language"] = parse_enum(Language, options.lang, "lang")
    if options.pkg_manager is not None:
        explicit["package_manager"] = parse_enum(PackageManager, options.pkg_manager, "pkg-manager")
    if options.style is not None:
        explicit["style"] = parse_enum(ProjectStyle, options.style, "style")
    if options.boilerplate is not None:
        explicit["boilerplate_level"] = parse_enum(BoilerplateLevel, options.boilerplate, "boilerplate")
    if options.validation is not None:
        explicit["include_validation"] = options.validation

    if options.orm is not None:
        explicit["orm"] = parse_optional_enum(ORM, options.orm, "orm")

    if options.db is not None:
        explicit["database"] = parse_optional_enum(Database, options.db, "db")
    elif options.with_db is True:
        orm = explicit.get("orm")
        explicit["database"] = ORM_HOME_DATABASE[orm] if orm is not None else Database.MONGODB
    elif options.with_db is False:
        explicit["database"] = None

    if options.auth is not None:
        explicit["auth"] = parse_optional_enum(Auth, options.auth, "auth")
    elif options.with_auth is True:
        explicit["auth"] = Auth.JWT
    elif options.with_auth is False:
        explicit["auth"] = None

    if options.tests is False:
        explicit["testing"] = False
    elif options.with_jest is not None:
        explicit["testing"] = options.with_jest

    for key, value in (
        ("eslint", options.with_eslint),
        ("prettier", options.with_prettier),
        ("docker", options.with_docker),
        ("git", options.git),
        ("docs_enabled", options.with_swagger),
        ("docs_title", options.swagger_title),
    ):
        if value is not None:
            explicit[key] = value

    if options.swagger_path is not None:
        if not options.swagger_path.startswith("/"):
            raise ConfigurationError(
                f"Documentation path must start with '/': {options.swagger_path!r}"
            )
        explicit["docs_path"] = options.swagger_path
    if options.swagger_theme is not None:
        explicit["docs_theme"] = parse_enum(DocsTheme, options.swagger_theme, "swagger-theme")

    if "orm" in explicit and explicit["orm"] is None:
        # No adapter means no database wiring at all.
        if explicit.get("database") is not None:
            raise ConfigurationError(
                f"--orm none cannot be combined with database '{explicit['database'].value}'"
            )
        explicit["database"] = None
    elif explicit.get("orm") is not None and "database" in explicit:
        check_adapter_compatibility(explicit["database"], explicit["orm"])

    return explicit


# ---------------------------------------------------------------------------
# Question graph (full flow)
# ---------------------------------------------------------------------------


def _none_or(enum_cls: type[E]):
    def parse(raw: str) -> Optional[E]:
        return None if raw == NONE_VALUE else enum_cls(raw)
    return parse


def _database_choices(explicit: Answers):
    def choices(answers: Answers) -> list[Any]:
        orm = explicit.get("orm")
        if orm is not None:
            return databases_for_orm(orm)
        return [None, *Database]
    return choices


def build_project_graph(name: str, explicit: Answers) -> QuestionGraph:
    """Build the full-flow question graph for project *name*."""
    d = FULL_FLOW_DEFAULTS
    orm_explicit = explicit.get("orm") is not None
    return QuestionGraph([
        Question("language", SELECT, "Which language would you like to use?",
                 default=d["language"], choices=list(Language), parse=Language),
        Question("package_manager", SELECT, "Which package manager would you like to use?",
                 default=d["package_manager"], choices=list(PackageManager), parse=PackageManager),
        Question("style", SELECT, "Which project style would you prefer?",
                 default=d["style"], choices=list(ProjectStyle), parse=ProjectStyle),
        Question("boilerplate_level", SELECT, "How much boilerplate code would you like?",
                 default=d["boilerplate_level"],
                 choices=[BoilerplateLevel.FULL, BoilerplateLevel.SIGNATURES, BoilerplateLevel.MINIMAL],
                 parse=BoilerplateLevel),
        Question("include_validation", CONFIRM, "Include input validation (express-validator)?",
                 default=d["include_validation"]),
        Question("database", SELECT, "Which database would you like to use?",
                 default=ORM_HOME_DATABASE[explicit["orm"]] if orm_explicit else None,
                 choices=_database_choices(explicit),
                 parse=Database if orm_explicit else _none_or(Database)),
        Question("orm", SELECT, "Which ORM/ODM would you like to use?",
                 default=lambda a: DEFAULT_ORM[a["database"]],
                 choices=lambda a: COMPATIBLE_ORMS[a["database"]],
                 depends_on=("database",),
                 when=lambda a: a.get("database") is not None,
                 parse=ORM),
        Question("auth", SELECT, "Which authentication method would you like?",
                 default=None, choices=[None, *Auth], parse=_none_or(Auth)),
        Question("testing", CONFIRM, "Enable Jest testing?", default=d["testing"]),
        Question("eslint", CONFIRM, "Enable ESLint?", default=d["eslint"]),
        Question("prettier", CONFIRM, "Enable Prettier?", default=d["prettier"]),
        Question("docker", CONFIRM, "Include Docker configuration?", default=d["docker"]),
        Question("git", CONFIRM, "Initialize a Git repository?", default=d["git"]),
        Question("docs_enabled", CONFIRM, "Generate API documentation (Swagger UI)?",
                 default=d["docs_enabled"]),
        Question("docs_title", TEXT, "Documentation title?",
                 default=f"{name} API", depends_on=("docs_enabled",),
                 when=lambda a: bool(a.get("docs_enabled"))),
        Question("docs_theme", SELECT, "Documentation theme?",
                 default=d["docs_theme"], choices=list(DocsTheme),
                 depends_on=("docs_enabled",),
                 when=lambda a: bool(a.get("docs_enabled")),
                 parse=DocsTheme),
    ])


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


def _light_config(name: str, explicit: Answers) -> ProjectConfig:
    return ProjectConfig(
        name=name,
        language=explicit.get("language", DEFAULTS["language"]),
        package_manager=explicit.get("package_manager", DEFAULTS["package_manager"]),
        style=ProjectStyle.RESOURCE,
        git=explicit.get("git", DEFAULTS["git"]),
        light=True,
        boilerplate_level=BoilerplateLevel.MINIMAL,
        include_validation=False,
        docs=DocsConfig(enabled=False),
    )


def _fill_adapter_pair(values: Answers, explicit: Answers) -> None:
    database, orm = values.get("database"), values.get("orm")
    if database is not None and orm is None:
        values["orm"] = DEFAULT_ORM[database]
    elif orm is not None and database is None and "database" not in explicit:
        values["database"] = ORM_HOME_DATABASE[orm]


def _build_config(name: str, values: Answers) -> ProjectConfig:
    check_adapter_compatibility(values.get("database"), values.get("orm"))
    docs = DocsConfig(
        enabled=bool(values.get("docs_enabled")),
        title=values.get("docs_title") or f"{name} API",
        path=values.get("docs_path") or "/docs",
        theme=values.get("docs_theme") or DocsTheme.DEFAULT,
    )
    return ProjectConfig(
        name=name,
        language=values["language"],
        package_manager=values["package_manager"],
        style=values["style"],
        database=values.get("database"),
        orm=values.get("orm"),
        auth=values.get("auth"),
        testing=values["testing"],
        eslint=values["eslint"],
        prettier=values["prettier"],
        docker=values["docker"],
        git=values["git"],
        light=False,
        boilerplate_level=values["boilerplate_level"],
        include_validation=values["include_validation"],
        docs=docs,
    )


def resolve_project_config(
    name: str,
    options: CreateOptions,
    channel: InteractiveChannel,
) -> ProjectConfig:
    """Resolve options and answers into a canonical ``ProjectConfig``.

    Args:
        name: Project name.
        options: Options supplied on the command line.
        channel: Interactive transport for the questions still open.

    Raises:
        ConfigurationError: Unknown enum values, or an incompatible adapter
            (``IncompatibleAdapterError``).  Raised before any question.
    """
    if not name or not name.strip():
        raise ConfigurationError("Project name must not be empty")
    name = name.strip()
    explicit = extract_explicit(options)

    light = options.light
    if light is None:
        light = channel.confirm(LIGHT_QUESTION, default=False)
    if light:
        return _light_config(name, explicit)

    if not channel.confirm(CONFIGURE_MORE_QUESTION, default=True):
        values = {**DEFAULTS, **explicit}
        _fill_adapter_pair(values, explicit)
        return _build_config(name, values)

    answers = build_project_graph(name, explicit).ask(channel, explicit)
    values = {**FULL_FLOW_DEFAULTS, **answers}
    _fill_adapter_pair(values, explicit)
    return _build_config(name, values)
