import click

from wtshell.cli.output import machine_output, user_output
from wtshell.cli.shell_integration.render import ENGINES, SUPPORTED_SHELLS, render_integration
from wtshell.core.context import WtShellContext


def _print_usage() -> None:
    user_output("Usage: wtshell init <shell>")
    user_output(f"  Shell: {', '.join(SUPPORTED_SHELLS)}")
    user_output('  Example: eval "$(wtshell init bash)"')
    user_output("  Example: wtshell init fish | source")


@click.command("init")
@click.argument("shell", required=False, type=click.Choice(SUPPORTED_SHELLS))
@click.option(
    "--engine",
    type=click.Choice(ENGINES),
    default="shell",
    show_default=True,
    help="'shell' runs git-wt from the shell function itself; "
    "'python' delegates to `wtshell git`.",
)
@click.pass_obj
def init_cmd(ctx: WtShellContext, shell: str | None, engine: str) -> None:
    """Print the shell integration function for SHELL.

    The function wraps `git` so that `git wt ...` can change the current
    shell's directory.
    """
    if shell is None:
        _print_usage()
        raise SystemExit(1)

    try:
        script = render_integration(shell, ctx.global_config, engine=engine)
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    machine_output(script, nl=False)
