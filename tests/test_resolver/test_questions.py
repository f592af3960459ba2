"""Tests for the question graph and the interactive channels."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from expressgen.models import Database
from expressgen.resolver import (
    DefaultsChannel,
    Question,
    QuestionGraph,
    QuestionGraphError,
    RichPromptChannel,
    build_project_graph,
)
from expressgen.resolver.questions import CONFIRM, SELECT, TEXT, choice_value

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_declaration_order_without_edges(self):
        graph = QuestionGraph([Question("a", CONFIRM, "A?"), Question("b", CONFIRM, "B?")])
        assert graph.keys == ["a", "b"]

    def test_dependency_moves_after_its_parent(self):
        graph = QuestionGraph([
            Question("child", CONFIRM, "Child?", depends_on=("parent",)),
            Question("parent", CONFIRM, "Parent?"),
            Question("other", CONFIRM, "Other?"),
        ])
        assert graph.keys == ["parent", "child", "other"]

    def test_cycle_rejected(self):
        with pytest.raises(QuestionGraphError, match="cycle"):
            QuestionGraph([
                Question("a", CONFIRM, "A?", depends_on=("b",)),
                Question("b", CONFIRM, "B?", depends_on=("a",)),
            ])

    def test_unknown_dependency_rejected(self):
        with pytest.raises(QuestionGraphError, match="unknown"):
            QuestionGraph([Question("a", CONFIRM, "A?", depends_on=("ghost",))])

    def test_duplicate_key_rejected(self):
        with pytest.raises(QuestionGraphError, match="Duplicate"):
            QuestionGraph([Question("a", CONFIRM, "A?"), Question("a", TEXT, "A again?")])

    def test_project_graph_orders_orm_after_database(self):
        keys = build_project_graph("shop", {}).keys
        assert keys.index("database") < keys.index("orm")
        assert keys.index("docs_enabled") < keys.index("docs_title")


# ---------------------------------------------------------------------------
# Asking
# ---------------------------------------------------------------------------


class TestAsk:
    def test_explicit_answers_are_kept_and_not_asked(self, scripted):
        graph = QuestionGraph([Question("a", TEXT, "A?"), Question("b", TEXT, "B?")])
        channel = scripted({"B?": "typed"})
        answers = graph.ask(channel, {"a": "given"})

        assert answers == {"a": "given", "b": "typed"}
        assert channel.asked == ["B?"]

    def test_when_false_skips_question(self, scripted):
        graph = QuestionGraph([
            Question("flag", CONFIRM, "Flag?"),
            Question("detail", TEXT, "Detail?", depends_on=("flag",), when=lambda a: a["flag"]),
        ])
        channel = scripted({"Flag?": False})
        assert graph.ask(channel, {}) == {"flag": False}

    def test_select_default_falls_back_to_first_choice(self, scripted):
        question = Question("db", SELECT, "DB?", default="oracle", choices=["mongodb", "postgres"])
        channel = scripted()
        assert question.ask(channel, {}) == "mongodb"

    def test_parse_applied_to_raw_answer(self, scripted):
        question = Question("db", SELECT, "DB?", choices=list(Database), parse=Database)
        assert question.ask(scripted({"DB?": "postgres"}), {}) is Database.POSTGRES

    def test_callable_choices_see_earlier_answers(self):
        question = Question("x", SELECT, "X?", choices=lambda a: [a["prefix"] + "1"])
        assert question.resolve_choices({"prefix": "v"}) == ["v1"]

    def test_pending_excludes_explicit(self):
        graph = QuestionGraph([Question("a", CONFIRM, "A?"), Question("b", CONFIRM, "B?")])
        assert [q.key for q in graph.pending({"a": True})] == ["b"]

    def test_unknown_kind(self, scripted):
        with pytest.raises(QuestionGraphError):
            Question("a", "slider", "A?").ask(scripted(), {})

    def test_choice_value(self):
        assert choice_value(None) == "none"
        assert choice_value(Database.MONGODB) == "mongodb"


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------


class TestChannels:
    def test_defaults_channel(self):
        channel = DefaultsChannel()
        assert channel.confirm("Q?", default=True) is True
        assert channel.select("Q?", ["a", "b"], default="b") == "b"
        assert channel.select("Q?", ["a", "b"], default="zzz") == "a"
        assert channel.text("Q?", default="x") == "x"

    def test_rich_channel_delegates_to_prompts(self):
        channel = RichPromptChannel()
        with patch("expressgen.resolver.channel.Confirm.ask", return_value=True) as confirm, \
                patch("expressgen.resolver.channel.Prompt.ask", return_value="yarn") as prompt:
            assert channel.confirm("Git?", default=False) is True
            assert channel.select("PM?", ["npm", "yarn"]) == "yarn"

        confirm.assert_called_once()
        assert prompt.call_args.kwargs["choices"] == ["npm", "yarn"]
        assert prompt.call_args.kwargs["default"] == "npm"
