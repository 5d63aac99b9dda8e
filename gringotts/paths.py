"""
Entry names are mapped to files below the store root.

A name is a slash separated list of segments. Every segment but the last one
is a category (a directory), the last one is the entry itself.
"""

import logging
import os.path
import pathlib
import typing

import attr

from .utils import (
    AbsolutePathRejected,
    CreateCategoryFailed,
    InvalidName,
    TraversalRejected,
    in_directory,
)

log = logging.getLogger(__name__)

EXTENSION = '.gpg'


def split_name(name: str) -> typing.Sequence[str]:
    """Split a name into segments, rejecting anything that could leave the root."""
    if name.startswith('/'):
        raise AbsolutePathRejected(f"Name '{name}' can't start with '/'")

    if '\0' in name:
        raise InvalidName(f"Name '{name}' contains a NUL byte")

    segments = name.split('/')

    for segment in segments:
        if segment == '..':
            raise TraversalRejected(f"Name '{name}' goes outside of the store")

    for segment in segments:
        if segment in ('', '.'):
            raise InvalidName(f"Name '{name}' contains an empty or '.' segment")

    return segments


@attr.s(frozen=True)
class PathResolver:
    root: pathlib.Path = attr.ib(converter=lambda p: pathlib.Path(os.path.abspath(p)))
    extension: str = attr.ib(default=EXTENSION)

    def resolve(self, name: str, create: bool = True) -> pathlib.Path:
        """
        Return the absolute path of the file storing an entry.

        All validation happens before anything is written. When create is set
        any missing categories are created, the entry file itself is never
        touched.
        """
        *categories, leaf = split_name(name)
        directory = self.root.joinpath(*categories)
        path = directory / f'{leaf}{self.extension}'

        if not in_directory(pathlib.Path(os.path.normpath(path)), self.root):
            raise TraversalRejected(f"Name '{name}' goes outside of the store")

        if create and categories and not directory.is_dir():
            log.debug(f"Creating category {directory}")
            try:
                directory.mkdir(mode=0o700, parents=True, exist_ok=True)
            except OSError as error:
                raise CreateCategoryFailed(
                    f"Couldn't create category '{'/'.join(categories)}': "
                    f"{error.strerror}") from error

        return path

    def name(self, path: pathlib.Path) -> str:
        """Convert the path of an entry file back into its name."""
        relative = path.relative_to(self.root).as_posix()
        return relative[:-len(self.extension)]
