import functools
import logging

import click
from rapidfuzz import fuzz, process
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.tree import Tree

from aliasman import __version__
from aliasman.config import Config
from aliasman.errors import AliasManError, AliasNotFoundError
from aliasman.groups import GroupStore, JsonKeyValueStore
from aliasman.models import SYSTEM_GROUP
from aliasman.reconciler import Reconciler
from aliasman.session import InteractiveShellSession
from aliasman.shell_detector import ShellDetector
from aliasman.store import StoreFile

console = Console()
config = Config()


def setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("aliasman")
    logger.handlers = [RichHandler(console=Console(stderr=True), show_path=False)]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_reconciler(store_path=None) -> Reconciler:
    """Wire the engine to the configured store file, group state and shell"""
    backup_dir = config.backup_dir if config.get("auto_backup", True) else None
    store = StoreFile(
        config.get_store_path(store_path),
        backup_dir=backup_dir,
        max_backups=config.get("max_backups", 10),
    )
    groups = GroupStore(JsonKeyValueStore(config.groups_path))
    session = InteractiveShellSession(ShellDetector().detect_current_shell(), console)
    return Reconciler(store, groups, session)


def suggest(name: str, candidates) -> str:
    """Closest candidate name, or an empty string"""
    match = process.extractOne(name, list(candidates), scorer=fuzz.ratio, score_cutoff=60)
    return match[0] if match else ""


def reports_errors(f):
    """Turn engine errors into a red message and exit status 1"""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except AliasManError as e:
            console.print(f"[red]✗[/] {escape(str(e))}")
            raise SystemExit(1)

    return wrapper


def lookup(reconciler: Reconciler, name: str, group: str):
    try:
        return reconciler.find_alias(name, group)
    except AliasNotFoundError:
        names = [alias.name for alias in reconciler.groups.get_group(group)]
        hint = suggest(name, names)
        if hint:
            console.print(f"[dim]💡 Did you mean '{escape(hint)}'?[/]")
        raise


group_option = click.option(
    "--group", "-g", default=SYSTEM_GROUP, show_default=True, help="Group the alias is looked up in"
)


@click.group()
@click.option("--store", "-s", envvar="ALIASMAN_STORE", help="Shell rc file holding the aliases")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
@click.version_option(version=__version__, prog_name="aliasman")
@click.pass_context
def main(ctx, store, verbose):
    """aliasman - manage the aliases in your shell rc file 🚀"""
    setup_logging(verbose)
    ctx.obj = reports_errors(build_reconciler)(store)


@main.command("list")
@click.pass_obj
@reports_errors
def list_aliases(reconciler):
    """Show every group and its aliases"""
    show_descriptions = config.get("show_descriptions", True)
    root = Tree(f"[bold cyan]{escape(str(reconciler.store.path))}[/]")
    for node in reconciler.tree():
        label = f"[bold yellow]{escape(node.name)}[/]" if node.is_system else f"[bold]{escape(node.name)}[/]"
        branch = root.add(f"{label} [dim]({len(node.children)})[/]")
        for child in node.children:
            alias = child.alias
            text = f"[cyan]{escape(alias.name)}[/] = '{escape(alias.command)}' [dim]×{alias.frequency}[/]"
            if show_descriptions and alias.description:
                text += f" [green]{escape(alias.description)}[/]"
            branch.add(text)
    console.print(root)


@main.command()
@click.argument("text")
@click.pass_obj
@reports_errors
def add(reconciler, text):
    """Add an alias, e.g. aliasman add "nv='node -v'" """
    alias = reconciler.add_alias(text)
    console.print(f"[green]✔[/] Added alias: [cyan]{escape(alias.name)}[/] = '{escape(alias.command)}'")


@main.command()
@click.argument("name")
@group_option
@click.pass_obj
@reports_errors
def delete(reconciler, name, group):
    """Delete an alias from the rc file and every group"""
    alias = lookup(reconciler, name, group)
    reconciler.delete_alias(alias)
    console.print(f"[green]✔[/] Deleted alias: [cyan]{escape(alias.name)}[/]")


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
@reports_errors
def clear(reconciler, yes):
    """Delete all aliases from the rc file and empty every group"""
    if config.get("confirm_delete", True) and not yes:
        if not click.confirm("Are you sure to delete all aliases?"):
            return
    removed = reconciler.delete_all_aliases()
    if not removed:
        console.print("[yellow]No aliases to delete[/]")
        return
    console.print(f"[green]✔[/] Deleted {removed} aliases")


@main.command()
@click.argument("name")
@click.argument("new_name")
@group_option
@click.pass_obj
@reports_errors
def rename(reconciler, name, new_name, group):
    """Rename an alias"""
    alias = lookup(reconciler, name, group)
    renamed = reconciler.rename_alias_name(alias, new_name)
    console.print(f"[green]✔[/] Renamed alias: [cyan]{escape(name)}[/] → [cyan]{escape(renamed.name)}[/]")


@main.command()
@click.argument("name")
@click.argument("new_command")
@group_option
@click.pass_obj
@reports_errors
def recommand(reconciler, name, new_command, group):
    """Change the command of an alias"""
    alias = lookup(reconciler, name, group)
    renamed = reconciler.rename_alias_command(alias, new_command)
    console.print(f"[green]✔[/] Edited alias: [cyan]{escape(renamed.name)}[/] = '{escape(renamed.command)}'")


@main.command()
@click.argument("name")
@group_option
@click.pass_obj
@reports_errors
def run(reconciler, name, group):
    """Run an alias and count the use"""
    alias = lookup(reconciler, name, group)
    frequency = reconciler.run_alias(alias, group)
    console.print(f"[dim]frequency: {frequency}[/]")


@main.command()
@click.argument("name")
@group_option
@click.pass_obj
@reports_errors
def copy(reconciler, name, group):
    """Copy an alias definition to the clipboard"""
    alias = lookup(reconciler, name, group)
    copied, content = reconciler.copy_alias(alias)
    if copied:
        console.print("[green]✔[/] Alias has been added to the clipboard successfully")
    else:
        console.print("[yellow]⚠[/] Clipboard unavailable, copy it from here:")
        click.echo(content)


@main.command("copy-group")
@click.argument("group")
@click.pass_obj
@reports_errors
def copy_group(reconciler, group):
    """Copy every alias definition of a group to the clipboard"""
    if group == SYSTEM_GROUP:
        reconciler.refresh()
    copied, content = reconciler.copy_all_in_group(group)
    if not content:
        console.print("[yellow]No alias[/]")
    elif copied:
        console.print("[green]✔[/] Aliases have been added to the clipboard successfully")
    else:
        console.print("[yellow]⚠[/] Clipboard unavailable, copy them from here:")
        click.echo(content)


@main.command()
@click.argument("name")
@click.argument("description")
@group_option
@click.pass_obj
@reports_errors
def describe(reconciler, name, description, group):
    """Set the description of an alias in every group"""
    alias = lookup(reconciler, name, group)
    updated = reconciler.set_description(alias, description)
    console.print(f"[green]✔[/] Described [cyan]{escape(alias.name)}[/] in {len(updated)} group(s)")


CONFIG_TYPES = {bool: click.BOOL, int: click.INT}


@main.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.pass_context
@reports_errors
def config_cmd(ctx, key, value):
    """Show settings, or set one, e.g. aliasman config max_backups 5"""
    if key is None:
        for name, current in config.config.items():
            console.print(f"[cyan]{escape(name)}[/] = {escape(repr(current))}")
        return
    if key not in Config.DEFAULT_CONFIG:
        hint = suggest(key, Config.DEFAULT_CONFIG)
        message = f"Unknown setting '{key}'" + (f", did you mean '{hint}'?" if hint else "")
        raise click.BadParameter(message, ctx=ctx, param_hint="KEY")
    if value is None:
        console.print(f"[cyan]{escape(key)}[/] = {escape(repr(config.get(key)))}")
        return

    param_type = CONFIG_TYPES.get(type(Config.DEFAULT_CONFIG[key]), click.STRING)
    config.set(key, param_type.convert(value, None, ctx))
    console.print(f"[green]✔[/] Set [cyan]{escape(key)}[/] = {escape(repr(config.get(key)))}")


@main.group("group")
def group_cmd():
    """Manage alias groups"""


@group_cmd.command("new")
@click.argument("name")
@click.pass_obj
@reports_errors
def group_new(reconciler, name):
    """Create an empty group"""
    reconciler.new_group(name)
    console.print(f"[green]✔[/] Created group: [bold]{escape(name)}[/]")


@group_cmd.command("rename")
@click.argument("old")
@click.argument("new")
@click.pass_obj
@reports_errors
def group_rename(reconciler, old, new):
    """Rename a group"""
    reconciler.rename_group(old, new)
    console.print(f"[green]✔[/] Renamed group: [bold]{escape(old)}[/] → [bold]{escape(new)}[/]")


@group_cmd.command("delete")
@click.argument("name")
@click.pass_obj
@reports_errors
def group_delete(reconciler, name):
    """Delete a group (its aliases stay in the rc file)"""
    reconciler.delete_group(name)
    console.print(f"[green]✔[/] Deleted group: [bold]{escape(name)}[/]")


@group_cmd.command("add")
@click.argument("name")
@click.argument("target")
@group_option
@click.pass_obj
@reports_errors
def group_add(reconciler, name, target, group):
    """Copy an alias into another group"""
    alias = lookup(reconciler, name, group)
    reconciler.add_to_group(alias, group, target)
    console.print(f"[green]✔[/] Added [cyan]{escape(alias.name)}[/] to [bold]{escape(target)}[/]")


@group_cmd.command("remove")
@click.argument("group")
@click.argument("name")
@click.pass_obj
@reports_errors
def group_remove(reconciler, group, name):
    """Remove an alias from one group"""
    alias = lookup(reconciler, name, group)
    reconciler.remove_from_group(alias, group)
    console.print(f"[green]✔[/] Removed [cyan]{escape(alias.name)}[/] from [bold]{escape(group)}[/]")


@group_cmd.command("sort")
@click.argument("group")
@click.option("--by", type=click.Choice(["name", "frequency"]), default="name", show_default=True)
@click.pass_obj
@reports_errors
def group_sort(reconciler, group, by):
    """Sort a group by alias name or by frequency"""
    if by == "frequency":
        aliases = reconciler.sort_by_frequency(group)
    else:
        aliases = reconciler.sort_by_alphabet(group)
    console.print(f"[green]✔[/] Sorted {len(aliases)} aliases in [bold]{escape(group)}[/] by {by}")


if __name__ == "__main__":
    main()
