"""Tests for argument parsing and the CLI entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from expressgen import __version__
from expressgen.cli import _options, _settings_from_args, build_parser, main
from expressgen.models import AddOptions, ConfigurationError, CreateOptions, DocsConfig
from expressgen.resolver import DefaultsChannel
from expressgen.scaffolder import PreconditionError

pytestmark = pytest.mark.unit


@pytest.fixture
def parser():
    return build_parser()


class TestParser:
    def test_unsupplied_flags_are_none(self, parser):
        options = _options(CreateOptions, parser.parse_args(["create", "shop"]))
        assert options == CreateOptions()

    def test_negated_flags_are_false(self, parser):
        args = parser.parse_args(["create", "shop", "--no-git", "--no-tests", "--no-validation"])
        options = _options(CreateOptions, args)
        assert options.git is False
        assert options.tests is False
        assert options.validation is False

    def test_create_values(self, parser):
        args = parser.parse_args([
            "create", "shop", "--lang", "js", "--db", "postgres", "--orm", "prisma",
            "--with-auth", "--auth", "jwt", "--with-swagger", "--swagger-theme", "dark",
        ])
        options = _options(CreateOptions, args)
        assert options.lang == "js"
        assert options.orm == "prisma"
        assert options.with_auth is True
        assert options.with_swagger is True
        assert options.swagger_theme == "dark"
        assert options.with_docker is None

    def test_add_endpoints(self, parser):
        args = parser.parse_args(["add", "order", "--endpoints", "ship,cancel", "--with-auth"])
        options = _options(AddOptions, args)
        assert options.endpoints == ["ship", "cancel"]
        assert options.with_auth is True
        assert options.tests is None

    def test_invalid_choice_exits(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["create", "shop", "--lang", "go"])

    def test_version(self, parser, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestSettings:
    def test_yes_makes_session_non_interactive(self, parser, tmp_path, monkeypatch):
        monkeypatch.delenv("EXPRESSGEN_NON_INTERACTIVE", raising=False)
        args = parser.parse_args(["create", "shop", "-y", "-o", str(tmp_path), "--skip-install"])
        settings = _settings_from_args(args)
        assert settings.non_interactive is True
        assert settings.skip_install is True
        assert settings.output_dir == Path(tmp_path)


class TestMain:
    def test_create_dispatch(self, tmp_path):
        with patch("expressgen.cli.create_project", new_callable=AsyncMock) as create:
            main(["create", "shop", "-y", "-o", str(tmp_path)])

        name, options, channel, settings = create.await_args.args
        assert name == "shop"
        assert isinstance(options, CreateOptions)
        assert isinstance(channel, DefaultsChannel)
        assert settings.output_dir == tmp_path

    def test_list_dispatch(self, tmp_path):
        with patch("expressgen.cli.list_resources") as listing:
            main(["list", "--dir", str(tmp_path)])
        listing.assert_called_once_with(tmp_path)

    @pytest.mark.parametrize("error", [PreconditionError("exists"), ConfigurationError("bad")])
    def test_engine_errors_exit_1(self, tmp_path, error):
        with patch("expressgen.cli.remove_resource", new_callable=AsyncMock, side_effect=error), \
                patch("expressgen.cli.print_error") as print_error:
            with pytest.raises(SystemExit) as exc_info:
                main(["remove", "order", "--dir", str(tmp_path)])
        assert exc_info.value.code == 1
        assert str(error) in print_error.call_args.args[0]

    def test_bad_docs_path_exit_1(self, tmp_path):
        with patch("expressgen.cli.print_error") as print_error:
            with pytest.raises(SystemExit) as exc_info:
                main(["create", "shop", "-y", "-o", str(tmp_path), "--swagger-path", "docs",
                      "--with-swagger", "--skip-install"])
        assert exc_info.value.code == 1
        assert "/" in print_error.call_args.args[0]
        assert not (tmp_path / "shop").exists()

    def test_model_validation_error_exit_1(self, tmp_path):
        def invalid(*args):
            DocsConfig(path="docs")

        with patch("expressgen.cli.create_project", new_callable=AsyncMock, side_effect=invalid), \
                patch("expressgen.cli.print_error") as print_error:
            with pytest.raises(SystemExit) as exc_info:
                main(["create", "shop", "-y", "-o", str(tmp_path)])
        assert exc_info.value.code == 1
        assert print_error.call_args.args[0].startswith("Error: path:")

    @pytest.mark.parametrize("endpoints", ["it's", "ship,create", "bulk-update,bulk_update"])
    def test_bad_endpoints_exit_1_without_writing(self, existing_project, endpoints):
        root = existing_project()
        with patch("expressgen.cli.print_error") as print_error:
            with pytest.raises(SystemExit) as exc_info:
                main(["add", "order", "--dir", str(root), "--endpoints", endpoints, "-y"])
        assert exc_info.value.code == 1
        assert print_error.call_args.args[0].startswith("Error: ")
        assert not (root / "src/resources/order").exists()

    def test_keyboard_interrupt_exit_130(self, tmp_path):
        with patch("expressgen.cli.list_resources", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main(["list", "--dir", str(tmp_path)])
        assert exc_info.value.code == 130
