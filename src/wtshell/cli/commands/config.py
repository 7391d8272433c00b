import click
from rich.console import Console
from rich.table import Table

from wtshell.cli.output import machine_output, user_output
from wtshell.core.context import WtShellContext
from wtshell.core.global_config import (
    CONFIG_KEYS,
    global_config_path,
    save_global_config,
    update_global_config_field,
)


@click.group("config")
def config_group() -> None:
    """Manage wtshell configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: WtShellContext) -> None:
    """Print a list of configuration keys and values."""
    table = Table(title=str(global_config_path()), title_justify="left")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key in CONFIG_KEYS:
        table.add_row(key, ctx.global_config.value_as_string(key))

    Console().print(table)


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: WtShellContext, key: str) -> None:
    """Print the value of a given configuration key."""
    if key not in CONFIG_KEYS:
        user_output(click.style("Error: ", fg="red") + f"Invalid key: {key}")
        raise SystemExit(1)

    machine_output(ctx.global_config.value_as_string(key))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: WtShellContext, key: str, value: str) -> None:
    """Update configuration with a value for the given key.

    Re-run `wtshell init` afterwards so the shell function picks up new
    command names.
    """
    try:
        new_config = update_global_config_field(ctx.global_config, key, value)
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    save_global_config(new_config)
    user_output(f"Set {key}={value}")
