"""Unit tests for utility functions (expressgen.utils).

Tests cover:
- run_command (success, failure, missing executable, working directory)
- load_json / dump_json
- Rich output helpers
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from expressgen.utils import (
    create_progress,
    dump_json,
    load_json,
    print_error,
    print_hint,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    async def test_success(self):
        rc, out, err = await run_command([sys.executable, "-c", "print('hello')"])
        assert rc == 0
        assert out == "hello"
        assert err == ""

    async def test_failure(self):
        rc, _out, err = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        )
        assert rc == 3
        assert err == "bad"

    async def test_missing_executable(self):
        rc, _out, err = await run_command(["definitely-not-a-real-binary-xyz"])
        assert rc == 127
        assert "Command not found" in err

    async def test_cwd(self, tmp_path: Path):
        rc, out, _err = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert rc == 0
        assert Path(out).resolve() == tmp_path.resolve()

    async def test_waits_without_timeout(self):
        rc, out, _err = await run_command(
            [sys.executable, "-c", "import time; time.sleep(0.3); print('done')"]
        )
        assert (rc, out) == (0, "done")


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class TestJson:
    def test_dump_is_indented_with_newline(self):
        text = dump_json({"name": "café"})
        assert text == '{\n  "name": "café"\n}\n'

    def test_load_object(self, tmp_path: Path):
        path = tmp_path / "a.json"
        path.write_text(json.dumps({"a": 1}), encoding="utf-8")
        assert load_json(path) == {"a": 1}

    def test_load_non_object_is_wrapped(self, tmp_path: Path):
        path = tmp_path / "a.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_json(path) == {"_root": [1, 2]}

    def test_load_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


class TestOutput:
    @pytest.mark.parametrize(
        "helper,style",
        [(print_success, "green"), (print_error, "red"), (print_warning, "yellow"), (print_hint, "cyan")],
    )
    def test_helpers_style_messages(self, helper, style):
        with patch("expressgen.utils.console") as console:
            helper("message")
        printed = console.print.call_args.args[0]
        assert "message" in printed
        assert style in printed

    def test_summary_table(self):
        with patch("expressgen.utils.console") as console:
            print_summary_table({"Language": "ts"}, title="shop")
        table = console.print.call_args_list[0].args[0]
        assert table.title == "shop"
        assert table.row_count == 1

    def test_progress_is_a_context_manager(self):
        with create_progress() as progress:
            task = progress.add_task("working", total=None)
            progress.update(task, description="done")
