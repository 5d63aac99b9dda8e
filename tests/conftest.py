import base64
import os
import pathlib
import subprocess
import typing

import attr
import click.testing
import pytest

import gringotts.cli
from gringotts.config import Config
from gringotts.gpg import GPG
from gringotts.vault import EntryStore

MARKER = 'FAKE-GPG:'


@attr.s(frozen=True)
class FakeGPG(GPG):
    """
    Stands in for the gpg binary.

    Only GPG.run is replaced, so the argument handling of the real class is
    still used. Encrypted files are base64 with a marker so tests can tell
    they aren't plaintext.
    """
    fail: bool = attr.ib(default=False)
    calls: typing.List[typing.Tuple[str, ...]] = attr.ib(factory=list, eq=False)

    @classmethod
    def discover(cls, candidates=(), **kwargs):
        return cls(binary='fake-gpg', **kwargs)

    def run(self, arguments, armour, error, stdin=None):
        command = self.command(arguments, armour)
        self.calls.append(command)

        if '--output' in arguments:
            path = pathlib.Path(arguments[arguments.index('--output') + 1])
            path.write_text('partial')
            if self.fail:
                raise error("fake-gpg exited with status 2")
            encoded = base64.b64encode(stdin.encode('utf-8')).decode('ascii')
            path.write_text(MARKER + encoded)
            stdout = ''
        elif self.fail:
            raise error("fake-gpg exited with status 2")
        elif '--decrypt' in arguments:
            text = pathlib.Path(arguments[-1]).read_text()
            if not text.startswith(MARKER):
                raise error("fake-gpg exited with status 2")
            stdout = base64.b64decode(text[len(MARKER):]).decode('utf-8')
        elif '--gen-random' in arguments:
            count = int(arguments[-1])
            # A count of 0 makes gpg write random data forever
            assert count > 0, "gpg --gen-random with a count of 0 never ends"
            encoded = base64.b64encode(os.urandom(count)).decode('ascii')
            # gpg wraps armoured output at 64 characters
            stdout = '\n'.join(encoded[i:i + 64] for i in range(0, len(encoded), 64)) + '\n'
        else:
            raise AssertionError(f"Unexpected gpg call {command}")

        return subprocess.CompletedProcess(command, 0, stdout=stdout, stderr='')


@pytest.fixture()
def root(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / 'store'


@pytest.fixture()
def gpg() -> FakeGPG:
    return FakeGPG()


@pytest.fixture()
def config(root: pathlib.Path) -> Config:
    return Config(root=root, length=10, clipboard=('true',), timeout=0)


@pytest.fixture()
def store(config: Config, gpg: FakeGPG) -> EntryStore:
    return EntryStore.open(config, gpg=gpg)


@pytest.fixture()
def clip(tmp_path: pathlib.Path) -> pathlib.Path:
    """File written by the clipboard command used by the CLI."""
    return tmp_path / 'clipboard.txt'


@pytest.fixture()
def invoke(monkeypatch, root: pathlib.Path, clip: pathlib.Path):
    monkeypatch.setattr(gringotts.cli, 'GPG', FakeGPG)

    def invoke_func(
            arguments: typing.Sequence[str],
            input: typing.Optional[str] = None,
            exit_code: int = 0) -> click.testing.Result:
        assert all(isinstance(arg, str) for arg in arguments)
        runner = click.testing.CliRunner()
        result = runner.invoke(gringotts.cli.main, [
            '--path', str(root),
            '--length', '10',
            '--timeout', '0',
            '--clipboard', f'tee {clip}',
            *arguments,
        ], input=input)
        if result.exit_code != exit_code:
            message = f"Command gringotts {' '.join(arguments)} exited with {result.exit_code}"
            raise Exception(f"{message}\n{result.output}") from result.exception
        return result

    return invoke_func
