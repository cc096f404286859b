"""Errors raised by alias and group operations"""

from typing import Iterable


class AliasManError(Exception):
    """Base class for errors reported at the command boundary."""


class InvalidFormatError(AliasManError):
    """Input does not match `alias <name>=<value>` or a required value is empty."""


class DuplicateAliasError(AliasManError):
    """An alias with the same name is already defined in the store file."""


class AliasNotFoundError(AliasManError):
    """No alias with the requested identity exists."""


class DuplicateGroupError(AliasManError):
    """A group with the requested name already exists."""


class NoEligibleGroupError(AliasManError):
    """There is no group the alias can be added to."""


class SystemGroupError(AliasManError):
    """The system group cannot be renamed, deleted or filled by hand."""


class StoreIOError(AliasManError, OSError):
    """The store file could not be read or written."""


class PropagationError(AliasManError):
    """Some groups could not be updated; earlier updates are kept."""

    def __init__(self, groups: Iterable[str]):
        self.groups = list(groups)
        super().__init__(f"Failed to update group(s): {', '.join(self.groups)}")


class ShellError(AliasManError):
    """The shell used to run an alias could not be started."""
