import logging
import os
import pathlib
import shutil
import subprocess
import typing

import attr

from .utils import (
    BackendError,
    BackendUnavailable,
    DecryptionFailed,
    EncryptionFailed,
    GenerationFailed,
)

log = logging.getLogger(__name__)

# Preferred first.
CANDIDATES = ('gpg2', 'gpg')


@attr.s(frozen=True)
class GPG:
    binary: str = attr.ib(default='gpg')
    verbose: bool = attr.ib(default=False)
    home: typing.Optional[pathlib.Path] = attr.ib(default=None)
    tty: typing.Optional[str] = attr.ib(default=None)

    @classmethod
    def discover(
            cls,
            candidates: typing.Sequence[str] = CANDIDATES,
            **kwargs) -> 'GPG':
        """Use the first gpg binary found on $PATH."""
        for candidate in candidates:
            binary = shutil.which(candidate)
            if binary:
                log.debug(f"Using {binary} as the gpg backend")
                return cls(binary=binary, **kwargs)
        raise BackendUnavailable(
            f"GPG not found (tried {', '.join(candidates)})")

    def command(
            self,
            arguments: typing.Sequence[str],
            armour: bool) -> typing.Tuple[str, ...]:
        command: typing.Tuple[str, ...] = (self.binary, '--yes')
        if armour:
            command = (*command, '--armour')
        if self.verbose:
            command = (*command, '--verbose')
        return (*command, *arguments)

    def environment(self) -> typing.Dict[str, str]:
        env = dict(os.environ)
        if self.home:
            env['GNUPGHOME'] = self.home.as_posix()
        if self.tty:
            env['GPG_TTY'] = self.tty
        return env

    def run(self,
            arguments: typing.Sequence[str],
            armour: bool,
            error: typing.Type[BackendError],
            stdin: typing.Optional[str] = None) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                self.command(arguments, armour),
                encoding='utf-8',
                input=stdin,
                stdout=subprocess.PIPE,
                stderr=(None if self.verbose else subprocess.PIPE),
                env=self.environment(),
                check=True)
        except FileNotFoundError as exc:
            raise BackendUnavailable(f"GPG not found at {self.binary}") from exc
        except subprocess.CalledProcessError as exc:
            for line in (exc.stderr or '').splitlines():
                log.error(line)
            raise error(f"{self.binary} exited with status {exc.returncode}") from exc

    def encrypt_text(
            self,
            path: pathlib.Path,
            text: str,
            recipient: typing.Optional[str] = None) -> subprocess.CompletedProcess:
        """
        Encrypt text into a new file.

        With a recipient the key is trusted unconditionally, otherwise gpg
        asks for a passphrase on the terminal.
        """
        log.debug(f"Encrypting {path}")
        args: typing.List[str] = []
        if recipient:
            args += ['--trust-model', 'always', '--recipient', recipient, '--encrypt']
        else:
            args += ['--symmetric']
        args = ['--output', str(path), *args]
        try:
            return self.run(args, armour=False, error=EncryptionFailed, stdin=text)
        except (EncryptionFailed, BackendUnavailable):
            if path.exists():
                log.debug(f"Removing partial output {path}")
                path.unlink()
            raise

    def contents(self, path: pathlib.Path) -> str:
        log.debug(f"Reading contents of {path}")
        return self.run(
            ['--quiet', '--decrypt', str(path)],
            armour=False,
            error=DecryptionFailed).stdout

    def random(self, count: int) -> str:
        """
        Generate printable (base64) random data from count random bytes.

        gpg treats a count of 0 as an endless stream, so it is never passed on.
        """
        if count < 1:
            raise GenerationFailed(f"Can't generate {count} random bytes")

        log.debug(f"Generating {count} random bytes")
        return self.run(
            ['--gen-random', '1', str(count)],
            armour=True,
            error=GenerationFailed).stdout
