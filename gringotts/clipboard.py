import logging
import shlex
import subprocess
import typing

import attr

from .utils import ClipboardFailed

log = logging.getLogger(__name__)


@attr.s(frozen=True)
class Clipboard:
    command: typing.Tuple[str, ...] = attr.ib(converter=tuple)
    timeout: int = attr.ib(default=0)

    def copy(self, text: str) -> None:
        log.debug(f"Copying to the clipboard with {self.command[0]}")
        try:
            subprocess.run(
                self.command,
                encoding='utf-8',
                input=text,
                stdout=subprocess.DEVNULL,
                check=True)
        except FileNotFoundError as error:
            raise ClipboardFailed(
                f"Clipboard command {self.command[0]} not found") from error
        except subprocess.CalledProcessError as error:
            raise ClipboardFailed(
                f"Clipboard command {self.command[0]} exited with "
                f"status {error.returncode}") from error

    def schedule_clear(self) -> typing.Optional[subprocess.Popen]:
        """Empty the clipboard after the timeout, outliving this process."""
        if self.timeout <= 0:
            return None

        log.debug(f"Clearing the clipboard in {self.timeout} seconds")
        script = f"sleep {int(self.timeout)}; printf '' | {shlex.join(self.command)}"
        return subprocess.Popen(
            ('sh', '-c', script),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True)
