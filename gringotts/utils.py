import logging
import pathlib

import click

log = logging.getLogger(__name__)


def in_directory(path: pathlib.Path, directory: pathlib.Path) -> bool:
    """Check if a path is lexically a subpath of a directory."""
    try:
        path.relative_to(directory)
    except ValueError:
        return False
    else:
        return True


def prune(directory: pathlib.Path, root: pathlib.Path) -> None:
    """
    Remove empty directories, walking upwards from a directory.

    Stops at the first directory that isn't empty and never removes the root.
    Failures are logged and ignored.
    """
    while directory != root and in_directory(directory, root):
        try:
            directory.rmdir()
        except OSError as error:
            log.debug(f"Stopped pruning at {directory}: {error.strerror}")
            return
        log.debug(f"Removed empty category {directory}")
        directory = directory.parent


class GringottsException(click.ClickException):
    pass


class ConfigurationError(GringottsException):
    pass


class BackendUnavailable(ConfigurationError):
    pass


class RootUnavailable(ConfigurationError):
    pass


class ArgumentError(GringottsException):
    pass


class MissingArgument(ArgumentError):
    pass


class ValidationError(GringottsException):
    pass


class AbsolutePathRejected(ValidationError):
    pass


class TraversalRejected(ValidationError):
    pass


class InvalidName(ValidationError):
    pass


class PreconditionError(GringottsException):
    pass


class EntryAlreadyExists(PreconditionError):
    pass


class EntryNotFound(PreconditionError):
    pass


class StoreIOError(GringottsException):
    pass


class CreateCategoryFailed(StoreIOError):
    pass


class RemoveEntryFailed(StoreIOError):
    pass


class ClipboardFailed(StoreIOError):
    pass


class SecretAcquisitionError(GringottsException):
    pass


class GenerationFailed(SecretAcquisitionError):
    pass


class EmptySecret(SecretAcquisitionError):
    pass


class BackendError(GringottsException):
    pass


class EncryptionFailed(BackendError):
    pass


class DecryptionFailed(BackendError):
    pass
