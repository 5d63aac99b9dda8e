import logging
import os
import pathlib
import typing

import click

from . import __doc__, __version__
from .config import (
    DEFAULT_CLIPBOARD,
    DEFAULT_LENGTH,
    DEFAULT_TIMEOUT,
    Config,
    default_root,
    default_tty,
)
from .gpg import GPG
from .utils import MissingArgument
from .vault import EntryStore

log = logging.getLogger(__name__)

Tree = typing.Dict[typing.Tuple[str, bool], typing.Any]


class PathType(click.Path):
    def convert(self, value, param, ctx):
        return pathlib.Path(super().convert(value, param, ctx))


def show_help(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print the help text and exit with a failure, like any other usage error."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help(), color=ctx.color)
    ctx.exit(1)


class HelpFailsMixin:
    def get_help_option(self, ctx):
        option = super().get_help_option(ctx)  # type: ignore
        if option is not None:
            option.callback = show_help
        return option


class Command(HelpFailsMixin, click.Command):
    pass


class PrefixGroup(HelpFailsMixin, click.Group):
    """
    A group that accepts any unique prefix of a command name.

    Usage errors exit with status 1, the same as every other error.
    """

    command_class = Command

    def make_context(self, *args, **kwargs):
        try:
            return super().make_context(*args, **kwargs)
        except click.UsageError as error:
            error.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as error:
            error.exit_code = 1
            raise

    def get_command(self, ctx, cmd_name):
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command

        matches = [name for name in self.list_commands(ctx) if name.startswith(cmd_name)]
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        if matches:
            ctx.fail(f"Ambiguous command '{cmd_name}' could be: {', '.join(matches)}")
        return None

    def resolve_command(self, ctx, args):
        _, command, args = super().resolve_command(ctx, args)
        return (command.name if command else None), command, args


def required(name: typing.Optional[str]) -> str:
    if not name:
        raise MissingArgument("Missing [name] argument")
    return name


def category(name: str) -> str:
    """Style a category name."""
    return click.style(f"{name}/", fg='blue', bold=True)


def build_tree(names: typing.Iterable[str]) -> Tree:
    tree: Tree = {}
    for name in names:
        *categories, leaf = name.split('/')
        node = tree
        for part in categories:
            node = node.setdefault((part, True), {})
        node[(leaf, False)] = None
    return tree


def render_tree(tree: Tree, prefix: str = '') -> typing.Iterator[str]:
    """Render nested categories in the style of tree(1)."""
    items = sorted(tree.items())
    for index, ((label, is_category), children) in enumerate(items):
        last = index == len(items) - 1
        branch = '└── ' if last else '├── '
        yield prefix + branch + (category(label) if is_category else label)
        if is_category:
            yield from render_tree(children, prefix + ('    ' if last else '│   '))


secret_name_argument = click.argument(
    'name',
    type=click.STRING,
    required=False)


@click.group(cls=PrefixGroup, help=__doc__, invoke_without_command=True)
@click.version_option(__version__, prog_name='gringotts')
@click.option(
    '-p', '--path', 'root',
    type=PathType(file_okay=False, dir_okay=True),
    envvar='GRINGOTTS_DIR',
    default=default_root,
    help="Defaults to $XDG_DATA_HOME/gringotts.")
@click.option(
    '-r', '--recipient',
    metavar='ID',
    envvar='GRINGOTTS_KEYID',
    default=None,
    help="Encrypt for this key (always trusted) instead of with a passphrase.")
@click.option(
    '-l', '--length',
    type=click.IntRange(min=0),
    envvar='GRINGOTTS_LENGTH',
    default=DEFAULT_LENGTH,
    show_default=True,
    help="Length of generated passwords.")
@click.option(
    '--clipboard',
    metavar='COMMAND',
    envvar='GRINGOTTS_CLIP',
    default=' '.join(DEFAULT_CLIPBOARD),
    show_default=True,
    help="Command that reads the clipboard contents from stdin.")
@click.option(
    '--timeout',
    type=click.IntRange(min=0),
    envvar='GRINGOTTS_TIMEOUT',
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Seconds before a copied password is cleared (0 to keep it).")
@click.option(
    '--tty',
    envvar='GPG_TTY',
    default=default_tty,
    help="Terminal used by GPG for passphrase prompts.")
@click.option(
    '-d', '--debug', 'debug',
    default=False,
    is_flag=True,
    help="Enable debug logging.")
@click.option(
    '-v', '--verbose', 'gpg_verbose',
    default=False,
    is_flag=True,
    help="Display GPG's normal STDERR output.")
@click.pass_context
def main(
        ctx,
        root: pathlib.Path,
        recipient: typing.Optional[str],
        length: int,
        clipboard: str,
        timeout: int,
        tty: typing.Optional[str],
        debug: bool,
        gpg_verbose: bool):
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    logging.basicConfig(level=(logging.DEBUG if debug else logging.WARNING))

    try:
        config = Config(
            root=root,
            recipient=recipient,
            length=length,
            clipboard=clipboard,
            timeout=timeout,
            tty=tty)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    # New files and categories are only readable by the current user.
    os.umask(0o077)
    gpg = GPG.discover(verbose=gpg_verbose, tty=config.tty)
    ctx.obj = EntryStore.open(config, gpg=gpg)


@main.command()
@secret_name_argument
@click.pass_obj
def add(store: EntryStore, name: typing.Optional[str]):
    """Add a new entry, generating or asking for its password."""
    entry = store.add(required(name))
    click.echo(f"Saved '{entry}' to the store.")


@main.command()
@secret_name_argument
@click.pass_obj
def copy(store: EntryStore, name: typing.Optional[str]):
    """Copy the password of an entry to the clipboard."""
    store.copy(required(name))


@main.command()
@secret_name_argument
@click.pass_obj
def delete(store: EntryStore, name: typing.Optional[str]):
    """Delete an entry after confirmation."""
    store.delete(required(name))


@main.command(name='list')
@click.option(
    '--flat',
    default=False,
    is_flag=True,
    help="Print one full entry name per line instead of a tree.")
@click.pass_obj
def list_(store: EntryStore, flat: bool):
    """List all entries."""
    if flat:
        for name in store.names():
            click.echo(name)
        return

    for line in render_tree(build_tree(store.names())):
        click.echo(line)


@main.command()
@secret_name_argument
@click.pass_obj
def show(store: EntryStore, name: typing.Optional[str]):
    """Print the password of an entry."""
    click.echo(store.show(required(name)))
