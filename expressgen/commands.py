"""Command flows behind the CLI: create, add, remove and list.

Each flow checks its preconditions before asking a question or writing a
file.  Post-generation subprocesses (package install, git) run only after
every artifact has been written, and their failures are reported as warnings
with a manual recovery hint rather than failing the flow.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any

from rich.table import Table

from .config import Settings
from .introspect import introspect_project
from .models import ORM, AddOptions, CreateOptions, PackageManager, check_resource_name
from .resolver import InteractiveChannel, resolve_project_config, resolve_resource_config
from .scaffolder import PreconditionError, ProjectGenerator
from .scaffolder.context import ResourceNames
from .scaffolder.resource_gen import RESOURCES_DIR, resource_dir
from .utils import (
    console,
    create_progress,
    print_hint,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)

GIT_STEPS: tuple[tuple[str, ...], ...] = (
    ("git", "init"),
    ("git", "add", "."),
    ("git", "commit", "-m", "Initial commit"),
)


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


async def create_project(
    name: str,
    options: CreateOptions,
    channel: InteractiveChannel,
    settings: Settings,
) -> Path:
    """Resolve a configuration, write the project, then install and commit.

    Args:
        name: Project name; also the directory created under
            ``settings.output_dir``.
        options: Raw CLI options (``None`` fields were not supplied).
        channel: Where unanswered questions are asked.
        settings: Output directory and post-generation switches.

    Returns:
        Path to the generated project root.

    Raises:
        PreconditionError: If the target directory already exists.
        ConfigurationError: If the options are invalid or incompatible.
    """
    target = Path(settings.output_dir) / name
    if target.exists():
        raise PreconditionError(f"Directory {name} already exists!")

    console.print(f"[bold blue]Creating {name} with expressgen[/bold blue]\n")
    config = resolve_project_config(name, options, channel)
    generator = ProjectGenerator(config)

    with create_progress() as progress:
        task = progress.add_task("Generating project files...", total=None)
        project_root = await generator.generate(settings.output_dir)
        progress.update(task, description="Project files generated")

    print_summary_table(
        {
            "Language": config.language.value,
            "Package manager": config.package_manager.value,
            "Style": config.style.value,
            "Database": config.database.value if config.database else "none",
            "ORM": config.orm.value if config.orm else "none",
            "Auth": config.auth.value if config.auth else "none",
            "Docs": config.docs.path if config.docs.enabled else "off",
        },
        title=name,
    )

    if not settings.skip_install:
        await install_dependencies(project_root, config.package_manager)
    if config.git and not settings.skip_git:
        await init_git(project_root)

    print_success("\nProject created successfully!\n")
    console.print("[bold]Next steps:[/bold]")
    print_hint(f"cd {name}")
    print_hint(f"{config.package_manager.value} run dev")
    return project_root


async def install_dependencies(project_root: Path, package_manager: PackageManager) -> bool:
    """Run ``<pm> install`` in *project_root*.  Returns ``False`` on failure."""
    manager = package_manager.value
    with create_progress() as progress:
        task = progress.add_task(f"Installing dependencies with {manager}...", total=None)
        rc, _stdout, stderr = await run_command([manager, "install"], cwd=project_root)
        progress.update(task, description="Dependency install finished")

    if rc != 0:
        print_warning(f"Failed to install dependencies: {stderr or f'exit code {rc}'}")
        console.print("You can install dependencies manually later with:")
        print_hint(f"cd {project_root.name} && {manager} install")
        return False
    print_success("Dependencies installed")
    return True


async def init_git(project_root: Path) -> bool:
    """Initialise a repository and make the first commit.  Stops at the first failing step."""
    for step in GIT_STEPS:
        rc, _stdout, stderr = await run_command(list(step), cwd=project_root)
        if rc != 0:
            print_warning(f"Failed to initialize Git repository ({' '.join(step)}): {stderr}")
            print_hint(f"cd {project_root.name} && git init && git add . && git commit -m \"Initial commit\"")
            return False
    print_success("Git repository initialized")
    return True


# ---------------------------------------------------------------------------
# add / remove / list
# ---------------------------------------------------------------------------


def _require_project(project_root: Path) -> None:
    if not (project_root / "package.json").is_file():
        raise PreconditionError(
            "No package.json found. Make sure you're in a project directory."
        )
    if not (project_root / "src").is_dir():
        raise PreconditionError(
            "No src directory found. Make sure you're in an expressgen project."
        )


async def add_resource(
    project_root: str | Path,
    name: str,
    options: AddOptions,
    channel: InteractiveChannel,
) -> list[Path]:
    """Add one resource to an existing project.

    The project's configuration is reconstructed from its manifest, so only
    the resource's own files are written.

    Raises:
        PreconditionError: Not a project, or the resource already exists.
    """
    root = Path(project_root)
    name = check_resource_name(name)
    _require_project(root)
    if (root / resource_dir(name)).exists():
        raise PreconditionError(f"Resource {name} already exists!")

    project = introspect_project(root)
    resource = resolve_resource_config(name, options, channel, project)
    written = await ProjectGenerator(project).generate_resource(root, resource)

    names = ResourceNames.from_name(name)
    print_success(f"\nResource {name} created successfully!\n")
    console.print("[bold]Generated files:[/bold]")
    for path in written:
        print_hint(path.relative_to(root).as_posix())
    console.print(f"\n[bold]Endpoint:[/bold] {names.route}")
    if project.orm is ORM.PRISMA:
        print_warning(
            f"Run `{project.package_manager.value} run db:generate` to update the Prisma client."
        )
    return written


async def remove_resource(project_root: str | Path, name: str) -> Path:
    """Delete ``src/resources/<name>``.

    Raises:
        PreconditionError: Not a project, or the resource does not exist.
    """
    root = Path(project_root)
    name = check_resource_name(name)
    _require_project(root)
    target = root / resource_dir(name)
    if not target.is_dir():
        raise PreconditionError(f"Resource {name} does not exist!")

    await asyncio.to_thread(shutil.rmtree, target)
    print_success(f"\nResource {name} removed successfully!\n")
    print_hint(f"{resource_dir(name)}/ (entire directory)")
    print_warning("Remove any imports or references to this resource in your code.")
    return target


def list_resources(project_root: str | Path) -> list[dict[str, Any]]:
    """Describe every resource directory and print them as a table.

    Returns:
        One ``{"name", "path", "files", "endpoint"}`` dict per resource,
        sorted by name.
    """
    root = Path(project_root)
    _require_project(root)
    resources_path = root / RESOURCES_DIR
    if not resources_path.is_dir():
        print_warning('No resources directory found. Use "expressgen add <name>" to create one.')
        return []

    rows: list[dict[str, Any]] = []
    for entry in sorted(resources_path.iterdir()):
        if not entry.is_dir():
            continue
        rows.append(
            {
                "name": entry.name,
                "path": f"{resource_dir(entry.name)}/",
                "files": sorted(child.name for child in entry.iterdir()),
                "endpoint": ResourceNames.from_name(entry.name).route,
            }
        )

    if not rows:
        print_warning('No resources found. Use "expressgen add <name>" to create one.')
        return rows

    table = Table(title=f"Found {len(rows)} resource(s)", show_header=True, header_style="bold cyan")
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Path", style="dim")
    table.add_column("Files")
    table.add_column("Endpoint")
    for row in rows:
        table.add_row(row["name"], row["path"], ", ".join(row["files"]), row["endpoint"])
    console.print(table)
    return rows
