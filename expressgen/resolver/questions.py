"""Question graph for interactive configuration.

Questions are nodes with explicit ``depends_on`` edges.  The graph is
evaluated in topological order (ties broken by declaration order), so a
question whose choices depend on an earlier answer, e.g. the adapter kind on
the database kind, is always asked after it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Sequence, Union

from ..models import ExpressgenError

if TYPE_CHECKING:
    from .channel import InteractiveChannel

Answers = dict[str, Any]
ChoicesSpec = Union[Sequence[str], Callable[[Answers], Sequence[str]]]
DefaultSpec = Union[Any, Callable[[Answers], Any]]

CONFIRM = "confirm"
SELECT = "select"
TEXT = "text"


class QuestionGraphError(ExpressgenError):
    """Raised when a question graph has a cycle, a duplicate or an unknown edge."""


def choice_value(value: Any) -> str:
    """Render an answer value the way it is offered as a choice."""
    if value is None:
        return "none"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class Question:
    """One interactive question.

    ``choices`` and ``default`` may be callables of the answers collected so
    far.  ``parse`` turns the raw channel answer into the stored value.  A
    question is skipped when ``when`` returns False.
    """

    key: str
    kind: str
    message: str
    default: DefaultSpec = None
    choices: Optional[ChoicesSpec] = None
    depends_on: tuple[str, ...] = ()
    when: Optional[Callable[[Answers], bool]] = None
    parse: Optional[Callable[[Any], Any]] = None

    def resolve_choices(self, answers: Answers) -> list[str]:
        if self.choices is None:
            return []
        raw = self.choices(answers) if callable(self.choices) else self.choices
        return [choice_value(c) for c in raw]

    def resolve_default(self, answers: Answers) -> Any:
        return self.default(answers) if callable(self.default) else self.default

    def applies(self, answers: Answers) -> bool:
        return self.when is None or bool(self.when(answers))

    def ask(self, channel: "InteractiveChannel", answers: Answers) -> Any:
        """Put this question to *channel* and return the parsed answer."""
        default = self.resolve_default(answers)
        if self.kind == CONFIRM:
            raw: Any = channel.confirm(self.message, default=bool(default))
        elif self.kind == SELECT:
            choices = self.resolve_choices(answers)
            default_str = choice_value(default)
            if default_str not in choices:
                default_str = choices[0]
            raw = channel.select(self.message, choices, default=default_str)
        elif self.kind == TEXT:
            raw = channel.text(self.message, default="" if default is None else str(default))
        else:
            raise QuestionGraphError(f"Unknown question kind {self.kind!r} for '{self.key}'")
        return self.parse(raw) if self.parse is not None else raw


@dataclass
class QuestionGraph:
    """A DAG of questions evaluated in a stable topological order."""

    questions: list[Question]
    order: list[Question] = field(init=False)

    def __post_init__(self) -> None:
        self.questions = list(self.questions)
        self.order = _topological_order(self.questions)

    @property
    def keys(self) -> list[str]:
        return [q.key for q in self.order]

    def get(self, key: str) -> Question:
        for question in self.questions:
            if question.key == key:
                return question
        raise KeyError(key)

    def pending(self, explicit: Answers) -> list[Question]:
        """Questions whose key has no explicit value."""
        return [q for q in self.order if q.key not in explicit]

    def ask(self, channel: "InteractiveChannel", explicit: Answers) -> Answers:
        """Ask every applicable question without an explicit value.

        Args:
            channel: Interactive transport that answers each question.
            explicit: Values supplied up front.  They are never asked and
                take precedence over any answer.

        Returns:
            The merged answers: explicit values plus collected answers.
        """
        answers: Answers = dict(explicit)
        for question in self.order:
            if question.key in explicit:
                continue
            if not question.applies(answers):
                continue
            answers[question.key] = question.ask(channel, answers)
        return answers


def _topological_order(questions: Iterable[Question]) -> list[Question]:
    """Kahn's algorithm; among ready nodes the earliest declared goes first."""
    questions = list(questions)
    index: dict[str, int] = {}
    for position, question in enumerate(questions):
        if question.key in index:
            raise QuestionGraphError(f"Duplicate question key '{question.key}'")
        index[question.key] = position

    indegree = [0] * len(questions)
    dependents: dict[int, list[int]] = {i: [] for i in range(len(questions))}
    for position, question in enumerate(questions):
        for dep in question.depends_on:
            if dep not in index:
                raise QuestionGraphError(
                    f"Question '{question.key}' depends on unknown question '{dep}'"
                )
            dependents[index[dep]].append(position)
            indegree[position] += 1

    ready = sorted(i for i, degree in enumerate(indegree) if degree == 0)
    ordered: list[Question] = []
    while ready:
        current = ready.pop(0)
        ordered.append(questions[current])
        for nxt in dependents[current]:
            indegree[nxt] -= 1
            if indegree[nxt] == 0:
                ready.append(nxt)
        ready.sort()

    if len(ordered) != len(questions):
        stuck = [q.key for i, q in enumerate(questions) if indegree[i] > 0]
        raise QuestionGraphError(f"Question graph has a cycle through: {', '.join(stuck)}")
    return ordered
