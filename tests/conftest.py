"""Shared pytest fixtures for the expressgen test suite.

Provides reusable fixtures for:
- A scripted interactive channel (answers by question text)
- Canonical project configurations in common shapes
- A template renderer bound to the packaged templates
- A mocked ``run_command`` for the post-generation subprocesses
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Sequence
from unittest.mock import AsyncMock, patch

import pytest

from expressgen.models import (
    ORM,
    Auth,
    Database,
    DocsConfig,
    Language,
    ProjectConfig,
)
from expressgen.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Interactive channel double
# ---------------------------------------------------------------------------


class ScriptedChannel:
    """``InteractiveChannel`` that answers from a script.

    The script maps a fragment of the question text to the answer.  The
    first fragment contained in the message wins; unscripted questions get
    their default.  Every message asked is recorded in ``asked`` and every
    choice list offered in ``choices``.
    """

    def __init__(self, script: Optional[dict[str, Any]] = None) -> None:
        self.script = dict(script or {})
        self.asked: list[str] = []
        self.choices: dict[str, list[str]] = {}

    def _answer(self, message: str, default: Any) -> Any:
        self.asked.append(message)
        for fragment, answer in self.script.items():
            if fragment in message:
                return answer
        return default

    def confirm(self, message: str, default: bool = False) -> bool:
        return bool(self._answer(message, default))

    def select(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        self.choices[message] = list(choices)
        answer = self._answer(message, default if default is not None else choices[0])
        assert answer in choices, f"{answer!r} is not offered for {message!r}: {list(choices)}"
        return answer

    def text(self, message: str, default: str = "") -> str:
        return str(self._answer(message, default))

    def was_asked(self, fragment: str) -> bool:
        return any(fragment in message for message in self.asked)


@pytest.fixture
def scripted():
    """Factory for ``ScriptedChannel`` instances.

    Usage:
        def test_flow(scripted):
            channel = scripted({"Which database": "postgres"})
    """
    def factory(script: Optional[dict[str, Any]] = None) -> ScriptedChannel:
        return ScriptedChannel(script)

    return factory


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def ts_config() -> ProjectConfig:
    """TypeScript project, in-memory store, no auth, jest on."""
    return ProjectConfig(name="shop", language=Language.TS, testing=True)


@pytest.fixture
def js_config() -> ProjectConfig:
    """JavaScript project, in-memory store, tests off."""
    return ProjectConfig(name="shop", language=Language.JS)


@pytest.fixture
def full_stack_config() -> ProjectConfig:
    """Every optional feature switched on."""
    return ProjectConfig(
        name="shop",
        language=Language.TS,
        database=Database.POSTGRES,
        orm=ORM.PRISMA,
        auth=Auth.JWT,
        testing=True,
        eslint=True,
        prettier=True,
        docker=True,
        docs=DocsConfig(enabled=True, title="Shop API"),
    )


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Projects on disk
# ---------------------------------------------------------------------------


@pytest.fixture
def existing_project(tmp_path: Path):
    """Factory writing a minimal project (``package.json`` + ``src/``).

    Usage:
        root = existing_project({"mongoose": "^8.0.0"}, ts=True)
    """
    def factory(
        dependencies: Optional[dict[str, str]] = None,
        dev_dependencies: Optional[dict[str, str]] = None,
        ts: bool = True,
        name: str = "shop",
    ) -> Path:
        root = tmp_path / name
        (root / "src" / "resources").mkdir(parents=True)
        manifest = {
            "name": name,
            "dependencies": dependencies or {"express": "^4.18.2"},
            "devDependencies": dev_dependencies or {},
        }
        (root / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
        if ts:
            (root / "tsconfig.json").write_text("{}", encoding="utf-8")
        return root

    return factory


# ---------------------------------------------------------------------------
# Subprocesses
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_run_command():
    """Patch ``run_command`` as seen by the command flows.

    The mock returns ``(0, "", "")`` unless its ``return_value`` or
    ``side_effect`` is changed by the test.
    """
    with patch("expressgen.commands.run_command", new_callable=AsyncMock) as mocked:
        mocked.return_value = (0, "", "")
        yield mocked
