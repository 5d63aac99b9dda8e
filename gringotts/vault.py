import logging
import os
import pathlib
import typing

import attr

from .clipboard import Clipboard
from .config import Config
from .gpg import GPG
from .paths import PathResolver
from .prompts import SecretAcquirer, confirm
from .utils import (
    EntryAlreadyExists,
    EntryNotFound,
    RemoveEntryFailed,
    RootUnavailable,
    prune,
)

log = logging.getLogger(__name__)


@attr.s(frozen=True, kw_only=True)
class Entry:
    name: str = attr.ib()
    path: pathlib.Path = attr.ib()

    def __str__(self):
        return self.name


@attr.s(frozen=True)
class EntryStore:
    config: Config = attr.ib()
    gpg: GPG = attr.ib(factory=GPG)

    @classmethod
    def open(cls, config: Config, gpg: GPG) -> 'EntryStore':
        """Create the root directory if needed and return a store for it."""
        try:
            config.root.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as error:
            raise RootUnavailable(
                f"Couldn't create password directory {config.root}: "
                f"{error.strerror}") from error

        if not os.access(config.root, os.R_OK | os.W_OK | os.X_OK):
            raise RootUnavailable(f"Can't access password directory {config.root}")

        return cls(config, gpg)

    @property
    def resolver(self) -> PathResolver:
        return PathResolver(self.config.root)

    @property
    def root(self) -> pathlib.Path:
        return self.resolver.root

    @property
    def clipboard(self) -> Clipboard:
        return Clipboard(self.config.clipboard, timeout=self.config.timeout)

    def existing(self, name: str) -> Entry:
        path = self.resolver.resolve(name, create=False)
        if not path.is_file():
            raise EntryNotFound(f"Pass file '{name}' doesn't exist")
        return Entry(name=name, path=path)

    def add(self, name: str, secret: typing.Optional[str] = None) -> Entry:
        """
        Encrypt a new entry.

        The password is generated or read from the terminal unless one is
        given. Categories created for the entry are removed again if anything
        fails before the entry is written.
        """
        path = self.resolver.resolve(name)
        if path.exists():
            raise EntryAlreadyExists(f"Pass file '{name}' already exists")

        try:
            if secret is None:
                secret = SecretAcquirer(self.gpg, self.config.length)()
            self.gpg.encrypt_text(path, secret, recipient=self.config.recipient)
        except BaseException:
            prune(path.parent, self.root)
            raise

        log.info(f"Added {name}")
        return Entry(name=name, path=path)

    def show(self, name: str) -> str:
        entry = self.existing(name)
        return self.gpg.contents(entry.path)

    def copy(self, name: str) -> Entry:
        entry = self.existing(name)
        text = self.gpg.contents(entry.path)
        self.clipboard.copy(text)
        self.clipboard.schedule_clear()
        log.info(f"Copied {name} to the clipboard")
        return entry

    def delete(
            self,
            name: str,
            ask: typing.Callable[[str], bool] = confirm) -> bool:
        """Delete an entry after confirmation, then prune empty categories."""
        entry = self.existing(name)
        if not ask(f"Delete pass file '{name}'?"):
            log.info(f"Not deleting {name}")
            return False

        try:
            entry.path.unlink()
        except OSError as error:
            raise RemoveEntryFailed(
                f"Couldn't delete pass file '{name}': {error.strerror}") from error

        prune(entry.path.parent, self.root)
        log.info(f"Deleted {name}")
        return True

    def __iter__(self) -> typing.Iterator[Entry]:
        """Walk the store in a stable order, reading the filesystem each time."""
        extension = self.resolver.extension
        for directory, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(dirnames)
            for filename in sorted(filenames):
                path = pathlib.Path(directory, filename)
                if filename.endswith(extension) and filename != extension and path.is_file():
                    yield Entry(name=self.resolver.name(path), path=path)

    def names(self) -> typing.Iterator[str]:
        return (entry.name for entry in self)
