import os
import pathlib
import shlex
import sys
import typing

import attr

DEFAULT_LENGTH = 50
DEFAULT_TIMEOUT = 15
DEFAULT_CLIPBOARD = ('xclip', '-selection', 'clipboard')


def default_root() -> pathlib.Path:
    """The store lives in $XDG_DATA_HOME/gringotts by default."""
    data = os.environ.get('XDG_DATA_HOME') or pathlib.Path.home() / '.local' / 'share'
    return pathlib.Path(data) / 'gringotts'


def default_tty() -> typing.Optional[str]:
    """Name of the terminal gpg should use for passphrase prompts."""
    try:
        return os.ttyname(sys.stdin.fileno())
    except (OSError, ValueError):
        return None


def split_command(value: typing.Union[str, typing.Sequence[str]]) -> typing.Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(shlex.split(value))
    return tuple(value)


@attr.s(frozen=True, kw_only=True)
class Config:
    root: pathlib.Path = attr.ib(converter=pathlib.Path)
    recipient: typing.Optional[str] = attr.ib(default=None)
    length: int = attr.ib(default=DEFAULT_LENGTH)
    clipboard: typing.Tuple[str, ...] = attr.ib(
        default=DEFAULT_CLIPBOARD,
        converter=split_command)
    timeout: int = attr.ib(default=DEFAULT_TIMEOUT)
    tty: typing.Optional[str] = attr.ib(default=None)

    @length.validator
    def _check_length(self, attribute, value):
        if value < 0:
            raise ValueError(f"Password length must not be negative, got {value}")

    @clipboard.validator
    def _check_clipboard(self, attribute, value):
        if not value:
            raise ValueError("Clipboard command must not be empty")
