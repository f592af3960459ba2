"""Command-line entry point for ``expressgen``.

Usage::

    expressgen create shop-api --lang ts --db postgres --orm prisma --with-jest
    expressgen add order --endpoints activate,deactivate
    expressgen remove order
    expressgen list
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from expressgen import __version__
from expressgen.commands import add_resource, create_project, list_resources, remove_resource
from expressgen.config import Settings
from expressgen.models import AddOptions, CreateOptions, ExpressgenError
from expressgen.resolver import DefaultsChannel, InteractiveChannel, RichPromptChannel
from expressgen.utils import console, print_error, print_warning


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    """``--with-x`` style switch that stays ``None`` when not given."""
    parser.add_argument(name, action="store_true", default=None, help=help_text)


def _negated(parser: argparse.ArgumentParser, name: str, dest: str, help_text: str) -> None:
    """``--no-x`` switch mapping to an explicit ``False``, ``None`` when not given."""
    parser.add_argument(name, dest=dest, action="store_false", default=None, help=help_text)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--yes", "-y",
        dest="yes",
        action="store_true",
        help="Accept the default answer for every question",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expressgen",
        description="expressgen -- scaffold Express.js APIs and their resources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  expressgen create my-api\n"
            "  expressgen create my-api --lang js --db mongodb --with-auth --auth jwt -y\n"
            "  expressgen add order --endpoints activate,deactivate\n"
            "  expressgen list\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    # -- create ------------------------------------------------------------
    create = sub.add_parser("create", help="Create a new Express project")
    create.add_argument("name", help="Project name (also the directory name)")
    create.add_argument("--output", "-o", default=None, help="Parent directory (default: current directory)")
    create.add_argument("--lang", choices=["ts", "js"], default=None, help="Language")
    create.add_argument("--pkg-manager", choices=["npm", "yarn", "pnpm"], default=None, help="Package manager")
    create.add_argument("--style", choices=["resource", "layered"], default=None, help="Project style")
    _flag(create, "--with-db", "Include database support")
    create.add_argument("--db", default=None, help="Database (mongodb|postgres|none)")
    create.add_argument("--orm", default=None, help="ORM/ODM (mongoose|prisma|sequelize|typeorm)")
    _flag(create, "--with-auth", "Include authentication")
    create.add_argument("--auth", default=None, help="Auth type (jwt|passport|none)")
    _flag(create, "--with-jest", "Include Jest testing")
    _negated(create, "--no-tests", "tests", "Disable test generation")
    _flag(create, "--with-eslint", "Include ESLint")
    _flag(create, "--with-prettier", "Include Prettier")
    _flag(create, "--with-docker", "Include Docker configuration")
    _negated(create, "--no-git", "git", "Skip Git initialization")
    _flag(create, "--light", "Create a lightweight minimal project")
    create.add_argument("--boilerplate", choices=["full", "signatures", "minimal"], default=None,
                        help="How much boilerplate code to generate")
    _negated(create, "--no-validation", "validation", "Skip input validation generation")
    _flag(create, "--with-swagger", "Include Swagger API documentation")
    create.add_argument("--swagger-title", default=None, help="API documentation title")
    create.add_argument("--swagger-path", default=None, help="Documentation path (default: /docs)")
    create.add_argument("--swagger-theme", choices=["default", "dark", "material"], default=None,
                        help="Swagger UI theme")
    create.add_argument("--skip-install", action="store_true", default=None,
                        help="Do not run the package manager after generation")
    _add_common(create)

    # -- add ---------------------------------------------------------------
    add = sub.add_parser("add", help="Add a resource to the current project")
    add.add_argument("name", help="Singular resource name, e.g. order")
    add.add_argument("--dir", default=".", help="Project root (default: current directory)")
    _negated(add, "--no-tests", "tests", "Skip test file generation")
    _flag(add, "--with-auth", "Include auth middleware")
    add.add_argument("--boilerplate", choices=["full", "signatures", "minimal"], default=None,
                     help="How much boilerplate code to generate")
    _negated(add, "--no-validation", "validation", "Skip input validation generation")
    add.add_argument("--endpoints", default=None, help="Custom endpoints (comma-separated)")
    _add_common(add)

    # -- remove / list -----------------------------------------------------
    remove = sub.add_parser("remove", help="Remove a resource from the current project")
    remove.add_argument("name", help="Resource name")
    remove.add_argument("--dir", default=".", help="Project root (default: current directory)")

    listing = sub.add_parser("list", help="List the resources of the current project")
    listing.add_argument("--dir", default=".", help="Project root (default: current directory)")

    return parser


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    update: dict[str, object] = {}
    if getattr(args, "output", None):
        update["output_dir"] = Path(args.output)
    if getattr(args, "skip_install", None):
        update["skip_install"] = True
    if getattr(args, "yes", False):
        update["non_interactive"] = True
    return settings.model_copy(update=update) if update else settings


def _channel(settings: Settings) -> InteractiveChannel:
    if settings.non_interactive:
        return DefaultsChannel()
    return RichPromptChannel(console)


def _options(model: type, args: argparse.Namespace):
    return model(**{field: getattr(args, field, None) for field in model.model_fields})


def run(args: argparse.Namespace) -> None:
    """Execute the parsed command.  Errors propagate to ``main``."""
    settings = _settings_from_args(args)

    if args.command == "create":
        options = _options(CreateOptions, args)
        asyncio.run(create_project(args.name, options, _channel(settings), settings))
    elif args.command == "add":
        options = _options(AddOptions, args)
        asyncio.run(add_resource(Path(args.dir), args.name, options, _channel(settings)))
    elif args.command == "remove":
        asyncio.run(remove_resource(Path(args.dir), args.name))
    elif args.command == "list":
        list_resources(Path(args.dir))


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``expressgen`` and ``python -m expressgen``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        run(args)
    except ExpressgenError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except ValidationError as exc:
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "config"
            print_error(f"Error: {location}: {error['msg']}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("\nAborted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
