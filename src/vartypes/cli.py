"""Command-line interface for vartypes."""

import logging
from pathlib import Path
from typing import NoReturn

import click
from rich.logging import RichHandler

from vartypes import __version__
from vartypes.config.init import (
    copy_default_templates,
    ensure_home_vartypes_dir,
    ensure_vartypes_dir,
)
from vartypes.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_yaml_config,
    remember_target_folder,
    save_config,
)
from vartypes.config.schema import VarTypesConfig
from vartypes.console import console, err_console
from vartypes.generator.errors import GenerationError, GenerationResult
from vartypes.metadata.descriptor import (
    DEFAULT_MENU_ORDER,
    Referability,
    TypeDescriptor,
)
from vartypes.metadata.identifiers import is_valid_name
from vartypes.project import Project
from vartypes.registry.models import ArtifactSet, Partition

logger = logging.getLogger(__name__)

REFERABILITY_CHOICES = ("struct", "class", "value", "reference")
PARTITION_CHOICES = ("system", "custom", "all")


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"vartypes [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _get_project(ctx: click.Context) -> Project:
    """Lazily open the project for the current invocation."""
    project = ctx.obj.get("project") if ctx.obj else None
    if project is None:
        project = Project.from_config()
        ctx.ensure_object(dict)["project"] = project
    return project


def _partitions(which: str) -> list[Partition]:
    if which == "system":
        return [Partition.SYSTEM]
    if which == "custom":
        return [Partition.CUSTOM]
    return [Partition.SYSTEM, Partition.CUSTOM]


def _partition_title(partition: Partition) -> str:
    if partition is Partition.SYSTEM:
        return "System Variable Types"
    return "Custom Variable Types"


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]✗[/red] {message}")
    raise SystemExit(1)


def _lookup(project: Project, name: str) -> ArtifactSet:
    artifact_set = project.registry.get(name)
    if artifact_set is None:
        _fail(f"No variable type named '{name}'")
    return artifact_set


def _report(result: GenerationResult, done: str, descriptor: TypeDescriptor) -> None:
    """Print a generation result; exits non-zero on failure."""
    if result.error is not None:
        _fail(f"Couldn't generate scripts for {descriptor.name}: {result.error}")
    console.print(
        f"[green]✓[/green] {done} [cyan]{descriptor.name}[/cyan] "
        f"({len(result.paths)} file(s))"
    )
    for path in result.paths:
        console.print(f"    {path}")
    for path in result.removed:
        console.print(f"    [dim]removed {path}[/dim]")


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """vartypes - generate and manage variable-type wrapper scripts."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)

    if ctx.invoked_subcommand is None:
        console.print("[bold]vartypes[/bold] - variable-type script generator")
        console.print("\nRun [cyan]vartypes --help[/cyan] for available commands.")


@main.command("list")
@click.option(
    "--partition",
    "-p",
    type=click.Choice(PARTITION_CHOICES),
    default="all",
    help="Which partition to list (default: all).",
)
@click.option("--verbose", "-v", is_flag=True, help="Show files and warnings.")
@click.pass_context
def list_types(ctx: click.Context, partition: str, verbose: bool) -> None:
    """List known variable types."""
    project = _get_project(ctx)

    for which in _partitions(partition):
        entries = project.registry.list_partition(which)
        console.print(f"[bold]{_partition_title(which)} ({len(entries)}):[/bold]")
        if not entries:
            console.print("  [dim]none[/dim]")
        for entry in entries:
            descriptor = entry.descriptor
            console.print(
                f"  [cyan]{entry.name}[/cyan] ({descriptor.type_name}, "
                f"{descriptor.referability.text})"
            )
            if verbose:
                location = entry.dominant_location or "-"
                console.print(f"    [dim]Location: {location}[/dim]")
                for path in entry.artifact_set.paths(project.store):
                    console.print(f"    {path}")
                for warning in entry.artifact_set.warnings:
                    console.print(f"    [yellow]⚠[/yellow] {warning}")
        console.print()


@main.command()
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, name: str) -> None:
    """Show details of one variable type."""
    project = _get_project(ctx)
    artifact_set = _lookup(project, name)
    descriptor = artifact_set.descriptor

    console.print(f"[bold]{descriptor.name}[/bold]")
    console.print(f"  Type: {descriptor.type_name}")
    console.print(f"  Referability: {descriptor.referability.text}")
    console.print(f"  Menu order: {descriptor.menu_order}")
    console.print(f"  Partition: {artifact_set.partition.name.lower()}")
    location = artifact_set.dominant_location(project.store) or "-"
    console.print(f"  Location: {location}")
    console.print("  Files:")
    for path in artifact_set.paths(project.store):
        console.print(f"    {path}")
    for warning in artifact_set.warnings:
        console.print(f"  [yellow]⚠[/yellow] {warning}")


@main.command("check-name")
@click.argument("name")
@click.pass_context
def check_name(ctx: click.Context, name: str) -> None:
    """Check whether NAME can be used for a new variable type."""
    if not is_valid_name(name):
        _fail(f"'{name}' is not a valid C# name")
    project = _get_project(ctx)
    if project.registry.is_name_taken(name):
        _fail(f"'{name}' conflicts with an existing variable type")
    console.print(f"[green]✓[/green] '{name}' is available")


@main.command()
@click.argument("name")
@click.argument("type_name", metavar="TYPE")
@click.option(
    "--referability",
    "-r",
    type=click.Choice(REFERABILITY_CHOICES, case_sensitive=False),
    required=True,
    help="Struct (value) or class (reference) semantics of TYPE.",
)
@click.option("--order", "-o", type=int, default=None, help="Menu order.")
@click.option(
    "--target",
    "-t",
    type=click.Path(path_type=Path),
    default=None,
    help="Folder for the new scripts (default: last used folder or asset root).",
)
@click.pass_context
def create(
    ctx: click.Context,
    name: str,
    type_name: str,
    referability: str,
    order: int | None,
    target: Path | None,
) -> None:
    """Create scripts for a new variable type NAME wrapping TYPE."""
    project = _get_project(ctx)
    config = project.config

    if order is None:
        order = config.default_menu_order or DEFAULT_MENU_ORDER

    descriptor = TypeDescriptor(
        name=name,
        type_name=type_name,
        referability=Referability.parse(referability),
        menu_order=order,
        builtin=project.builtin_mode,
    )

    if target is None:
        last = config.last_target_folder
        target = Path(last) if last and Path(last).is_dir() else project.store.root

    result = project.generator.create(descriptor, target)
    _report(result, "Created", descriptor)
    remember_target_folder(target.resolve())


@main.command()
@click.argument("name")
@click.option("--new-name", default=None, help="Rename the variable type.")
@click.option("--type", "type_name", default=None, help="New wrapped type.")
@click.option(
    "--referability",
    "-r",
    type=click.Choice(REFERABILITY_CHOICES, case_sensitive=False),
    default=None,
    help="New referability.",
)
@click.option("--order", "-o", type=int, default=None, help="New menu order.")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def edit(
    ctx: click.Context,
    name: str,
    new_name: str | None,
    type_name: str | None,
    referability: str | None,
    order: int | None,
    yes: bool,
) -> None:
    """Regenerate NAME with changed metadata."""
    project = _get_project(ctx)
    artifact_set = _lookup(project, name)

    changes: dict[str, object] = {}
    if new_name is not None:
        changes["name"] = new_name
    if type_name is not None:
        changes["type_name"] = type_name
    if referability is not None:
        changes["referability"] = Referability.parse(referability)
    if order is not None:
        changes["menu_order"] = order
    descriptor = artifact_set.descriptor.with_changes(**changes)

    if not yes and not click.confirm(
        f"Remake '{name}' as {descriptor}? This cannot be undone.", default=False
    ):
        console.print("[dim]Cancelled.[/dim]")
        return

    _report(project.generator.rebuild(artifact_set, descriptor), "Rebuilt", descriptor)


@main.command()
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def rebuild(ctx: click.Context, name: str, yes: bool) -> None:
    """Remake the scripts of NAME from the current templates."""
    project = _get_project(ctx)
    artifact_set = _lookup(project, name)
    location = artifact_set.dominant_location(project.store)

    if not yes and not click.confirm(
        f"Remake scripts named '{name}'? They will be placed inside {location}.",
        default=False,
    ):
        console.print("[dim]Cancelled.[/dim]")
        return

    _report(project.generator.rebuild(artifact_set), "Rebuilt", artifact_set.descriptor)


@main.command("rebuild-all")
@click.option(
    "--partition",
    "-p",
    type=click.Choice(("system", "custom")),
    default="custom",
    help="Which partition to rebuild (default: custom).",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def rebuild_all(ctx: click.Context, partition: str, yes: bool) -> None:
    """Remake every variable type of a partition."""
    project = _get_project(ctx)
    which = _partitions(partition)[0]

    if not yes and not click.confirm(
        f"Remake ALL {_partition_title(which)}? This could break things.",
        default=False,
    ):
        console.print("[dim]Cancelled.[/dim]")
        return

    results = project.generator.rebuild_all(which)
    failures = 0
    for name, result in sorted(results.items()):
        if result.ok:
            console.print(f"[green]✓[/green] {name} ({len(result.paths)} file(s))")
        else:
            failures += 1
            console.print(f"[red]✗[/red] {name}: {result.error}")

    if failures:
        raise SystemExit(1)


@main.command()
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete(ctx: click.Context, name: str, yes: bool) -> None:
    """Delete every script of variable type NAME."""
    project = _get_project(ctx)
    artifact_set = _lookup(project, name)

    if not yes and not click.confirm(
        f"Delete variable object scripts named '{name}'? This cannot be undone.",
        default=False,
    ):
        console.print("[dim]Spared.[/dim]")
        return

    try:
        removed = project.generator.delete(artifact_set)
    except GenerationError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Deleted {len(removed)} file(s) of '{name}'")


@main.command()
@click.pass_context
def templates(ctx: click.Context) -> None:
    """List the templates that new scripts are generated from."""
    project = _get_project(ctx)
    catalog = project.catalog
    found = catalog.templates

    if not found:
        console.print(f"[yellow]No templates found in {catalog.root}.[/yellow]")
        return

    console.print(f"[bold]Templates in {catalog.root}:[/bold]\n")
    for template in found:
        kinds = ", ".join(sorted(k.text for k in template.referabilities))
        placement = "editor" if template.is_tool_only else "runtime"
        console.print(
            f"  [cyan]{template.name_pattern}[/cyan] [dim]({placement}; {kinds})[/dim]"
        )


@main.command()
@click.option(
    "--global",
    "-g",
    "global_config",
    is_flag=True,
    help="Install templates and config under ~/.vartypes/.",
)
@click.option("--force", is_flag=True, help="Overwrite existing templates.")
@click.option(
    "--builtin/--no-builtin",
    default=None,
    help="Enable or disable builtin mode in the written config.",
)
def init(global_config: bool, force: bool, builtin: bool | None) -> None:
    """Initialize vartypes configuration and templates.

    Without flags, writes ./.vartypes/config.yaml and copies the default
    templates to ./.vartypes/templates/ so they can be customized.
    """
    if global_config:
        ensure_home_vartypes_dir()
        config_path = get_home_config_path()
    else:
        ensure_vartypes_dir()
        config_path = get_local_config_path()

    copied = copy_default_templates(local=not global_config, overwrite=force)
    for relative in copied:
        console.print(f"[green]✓[/green] Copied template {relative}")

    # Only this file and explicit flags; other layers stay where they are.
    config = VarTypesConfig.from_dict(load_yaml_config(config_path) or {})
    if builtin is not None:
        config = config.merge(VarTypesConfig(builtin_mode=builtin))
    save_config(config, config_path)
    console.print(f"[green]✓[/green] Wrote {config_path}")
