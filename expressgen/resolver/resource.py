"""Resource configuration resolver.

One gating question, then up to five sub-questions, each skipped when its
field was supplied explicitly.  The effective test and auth flags are clamped
to what the parent project supports.
"""

from __future__ import annotations

from ..models import AddOptions, BoilerplateLevel, ProjectConfig, ResourceConfig
from ..utils import print_warning
from .channel import InteractiveChannel
from .project import parse_enum
from .questions import CONFIRM, SELECT, TEXT, Answers, Question, QuestionGraph

GATE_QUESTION = "Configure additional options for this resource?"


def _split_endpoints(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def build_resource_graph(project: ProjectConfig) -> QuestionGraph:
    """Sub-questions asked after the gate, defaulting to the project's choices."""
    return QuestionGraph([
        Question("boilerplate_level", SELECT, "How much boilerplate code for this resource?",
                 default=project.boilerplate_level,
                 choices=[BoilerplateLevel.FULL, BoilerplateLevel.SIGNATURES, BoilerplateLevel.MINIMAL],
                 parse=BoilerplateLevel),
        Question("include_validation", CONFIRM, "Include input validation for this resource?",
                 default=project.include_validation),
        Question("custom_endpoints", TEXT,
                 "Custom endpoints (comma-separated, e.g. activate,deactivate)?",
                 default="", parse=_split_endpoints),
        Question("generate_tests", CONFIRM, "Generate test files for this resource?", default=True),
        Question("with_auth", CONFIRM, "Include authentication middleware?", default=False),
    ])


def extract_resource_explicit(options: AddOptions) -> Answers:
    explicit: Answers = {}
    if options.boilerplate is not None:
        explicit["boilerplate_level"] = parse_enum(BoilerplateLevel, options.boilerplate, "boilerplate")
    if options.validation is not None:
        explicit["include_validation"] = options.validation
    if options.endpoints is not None:
        explicit["custom_endpoints"] = list(options.endpoints)
    if options.tests is not None:
        explicit["generate_tests"] = options.tests
    if options.with_auth is not None:
        explicit["with_auth"] = options.with_auth
    return explicit


def resolve_resource_config(
    name: str,
    options: AddOptions,
    channel: InteractiveChannel,
    project: ProjectConfig,
) -> ResourceConfig:
    """Resolve a ``ResourceConfig`` consistent with its parent *project*.

    Requesting tests for a project without a test framework, or auth for a
    project without an auth kind, is a no-op with a notice, never an error.
    """
    explicit = extract_resource_explicit(options)
    graph = build_resource_graph(project)

    answers: Answers = dict(explicit)
    if graph.pending(explicit) and channel.confirm(GATE_QUESTION, default=False):
        answers = graph.ask(channel, explicit)

    requested_tests = answers.get("generate_tests", True)
    requested_auth = answers.get("with_auth", False)

    generate_tests = requested_tests and project.testing
    if requested_tests and not project.testing and "generate_tests" in answers:
        print_warning("Project has no test framework; skipping resource tests.")

    with_auth = requested_auth and project.has_auth
    if requested_auth and not project.has_auth:
        print_warning("Project has no authentication configured; skipping auth middleware.")

    return ResourceConfig(
        name=name,
        generate_tests=generate_tests,
        with_auth=with_auth,
        boilerplate_level=answers.get("boilerplate_level", project.boilerplate_level),
        include_validation=answers.get("include_validation", project.include_validation),
        custom_endpoints=tuple(answers.get("custom_endpoints", ())),
    )
