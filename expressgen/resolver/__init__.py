"""Configuration resolver: options + answers + defaults -> canonical config."""

from expressgen.resolver.channel import DefaultsChannel, InteractiveChannel, RichPromptChannel
from expressgen.resolver.project import build_project_graph, extract_explicit, resolve_project_config
from expressgen.resolver.questions import Question, QuestionGraph, QuestionGraphError
from expressgen.resolver.resource import build_resource_graph, resolve_resource_config

__all__ = [
    "DefaultsChannel",
    "InteractiveChannel",
    "Question",
    "QuestionGraph",
    "QuestionGraphError",
    "RichPromptChannel",
    "build_project_graph",
    "build_resource_graph",
    "extract_explicit",
    "resolve_project_config",
    "resolve_resource_config",
]
