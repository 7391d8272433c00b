import click

from wtshell.core.context import WtShellContext
from wtshell.core.dispatcher import Dispatcher


@click.command(
    "git",
    hidden=True,
    add_help_option=False,
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def git_cmd(ctx: WtShellContext, args: tuple[str, ...]) -> None:
    """Run the underlying command through the shim dispatcher."""
    dispatcher = Dispatcher.from_context(ctx, click.get_binary_stream("stdout"))
    raise SystemExit(dispatcher.dispatch(args))
