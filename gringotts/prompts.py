import logging
import typing

import attr
import click

from .gpg import GPG
from .utils import EmptySecret, GenerationFailed

log = logging.getLogger(__name__)


def confirm(message: str) -> bool:
    """
    Ask a yes/no question answered by a single keystroke.

    click.getchar() puts the terminal into raw mode for exactly one read and
    restores it afterwards, even if the read fails. Only 'y' or 'Y' count as
    yes, anything else (including end of input) is no.
    """
    click.echo(f"{message} [y/n]: ", nl=False)
    try:
        answer = click.getchar()
    except EOFError:
        answer = ''
    click.echo(answer if answer.isprintable() else '')
    return answer.lower() == 'y'


def generate(gpg: GPG, length: int) -> str:
    """Generate a printable password of exactly length characters."""
    if length < 1:
        raise GenerationFailed("Password length must be at least 1")

    output = ''.join(gpg.random(length).split())
    if not output:
        raise GenerationFailed("GPG generated no output")

    password = output[:length]
    if not password:
        raise GenerationFailed("Generated password is empty")

    return password


def read_secret(prompt: str = "Enter password") -> str:
    """Read a password from the terminal without echoing it."""
    secret = click.prompt(prompt, default='', hide_input=True, show_default=False)
    if not secret:
        raise EmptySecret("No password was entered")
    return secret


@attr.s(frozen=True)
class SecretAcquirer:
    gpg: GPG = attr.ib()
    length: int = attr.ib()
    ask: typing.Callable[[str], bool] = attr.ib(default=confirm)

    def __call__(self) -> str:
        if self.ask("Generate a password?"):
            log.debug(f"Generating a password of {self.length} characters")
            return generate(self.gpg, self.length)
        return read_secret()
