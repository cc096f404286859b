"""Alias commands: edit the store file and keep every group consistent with it.

The system group mirrors the store file and is rebuilt from it on every
refresh. User groups hold copies of aliases; an edit to an alias (rename,
description, run count, delete) is applied to the first copy with the same
(name, command) identity in every group. Groups are written one at a time,
so a failed write leaves earlier groups updated and is reported as a
PropagationError.
"""

import logging
from typing import Callable, List, Optional, Tuple

from aliasman.clipboard import ClipboardManager
from aliasman.errors import (
    AliasNotFoundError,
    DuplicateAliasError,
    DuplicateGroupError,
    InvalidFormatError,
    NoEligibleGroupError,
    PropagationError,
    StoreIOError,
    SystemGroupError,
)
from aliasman.groups import GroupStore
from aliasman.models import SYSTEM_GROUP, Alias, AliasNode, GroupNode
from aliasman.scanner import (
    format_alias_statement,
    format_unalias_command,
    normalize_statement,
    resolve_alias,
)
from aliasman.session import ShellSession
from aliasman.store import StoreFile

logger = logging.getLogger(__name__)

# Edits the copy at the given index of one group's aliases in place
AliasEdit = Callable[[List[Alias], int], None]


def _require(value: Optional[str], what: str) -> str:
    if value is None or not value.strip():
        raise InvalidFormatError(f"{what} is mandatory to execute this action")
    return value.strip()


def _index_of(aliases: List[Alias], alias: Alias) -> int:
    for index, candidate in enumerate(aliases):
        if candidate.is_same(alias):
            return index
    return -1


class Reconciler:
    """Command surface for managing aliases and groups"""

    def __init__(
        self,
        store: StoreFile,
        groups: GroupStore,
        session: ShellSession,
        clipboard: Optional[ClipboardManager] = None,
    ):
        self.store = store
        self.groups = groups
        self.session = session
        self.clipboard = clipboard or ClipboardManager()

    # -- refresh ---------------------------------------------------------

    def refresh(self) -> List[Alias]:
        """Rebuild the system group from the store file, in file order.

        Frequency and description survive for aliases whose identity is
        still in the file.
        """
        previous = self.groups.get_group(SYSTEM_GROUP)
        aliases = self.store.aliases()
        for alias in aliases:
            index = _index_of(previous, alias)
            if index >= 0:
                known = previous.pop(index)
                alias.frequency = known.frequency
                alias.description = known.description
        self.groups.set_group(SYSTEM_GROUP, aliases)
        return aliases

    def tree(self) -> List[GroupNode]:
        """Refresh, then return every group (system group first) with its aliases"""
        self.refresh()
        names = [SYSTEM_GROUP] + [name for name in self.groups.list_groups() if name != SYSTEM_GROUP]
        return [
            GroupNode(name=name, children=[AliasNode(group=name, alias=alias) for alias in self.groups.get_group(name)])
            for name in names
        ]

    def find_alias(self, name: str, group: str = SYSTEM_GROUP) -> Alias:
        """First alias called `name` in a group"""
        if group == SYSTEM_GROUP:
            self.refresh()
        for alias in self.groups.get_group(group):
            if alias.name == name:
                return alias
        raise AliasNotFoundError(f"Alias '{name}' not found in group '{group}'")

    def _propagate(self, alias: Alias, edit: AliasEdit) -> List[str]:
        """Apply edit to the first copy of alias in every group holding it"""
        updated, failed = [], []
        for name in self.groups.list_groups():
            aliases = self.groups.get_group(name)
            index = _index_of(aliases, alias)
            if index < 0:
                continue
            edit(aliases, index)
            try:
                self.groups.set_group(name, aliases)
            except StoreIOError as e:
                logger.error("Could not update group '%s': %s", name, e)
                failed.append(name)
                continue
            updated.append(name)
        if failed:
            raise PropagationError(failed)
        return updated

    def _holders(self, alias: Alias) -> List[str]:
        return [name for name in self.groups.list_groups() if _index_of(self.groups.get_group(name), alias) >= 0]

    # -- alias commands --------------------------------------------------

    def add_alias(self, text: str) -> Alias:
        """Validate `alias name=value`, append it to the file and the system group"""
        alias = resolve_alias(text)
        if any(existing.name == alias.name for existing in self.store.aliases()):
            raise DuplicateAliasError(f"Duplicate alias: '{alias.name}'")

        statement = normalize_statement(text)
        self.store.append(statement)

        aliases = self.groups.get_group(SYSTEM_GROUP)
        aliases.append(alias)
        self.groups.set_group(SYSTEM_GROUP, aliases)

        self.session.apply(statement)
        logger.debug("Added alias %s", alias)
        return alias

    def delete_alias(self, alias: Alias) -> List[str]:
        """Remove an alias from the file and every copy of it from every group"""
        self.store.delete_matching(alias.is_same)

        def remove_all(aliases: List[Alias], index: int) -> None:
            aliases[:] = [candidate for candidate in aliases if not candidate.is_same(alias)]

        updated = self._propagate(alias, remove_all)
        self.session.apply(format_unalias_command([alias]))
        return updated

    def delete_all_aliases(self) -> int:
        """Remove every alias line from the file and empty every group"""
        aliases = self.store.aliases()
        if not aliases:
            return 0

        self.session.apply(format_unalias_command(aliases))
        removed = self.store.delete_matching(lambda alias: True)

        failed = []
        for name in self.groups.list_groups():
            try:
                self.groups.set_group(name, [])
            except StoreIOError as e:
                logger.error("Could not clear group '%s': %s", name, e)
                failed.append(name)
        if failed:
            raise PropagationError(failed)
        return removed

    def _rename(self, alias: Alias, name: str, command: str) -> Alias:
        statement = format_alias_statement(name, command)
        renamed = resolve_alias(statement)
        if renamed.identity != (name, command):
            raise InvalidFormatError(f"Please check the format of the input content: {statement}")
        if name != alias.name and any(existing.name == name for existing in self.store.aliases()):
            raise DuplicateAliasError(f"Duplicate alias: '{name}'")

        self.store.replace_one(alias, statement)

        def rename(aliases: List[Alias], index: int) -> None:
            aliases[index].name = name
            aliases[index].command = command

        self._propagate(alias, rename)
        self.session.apply(statement)
        return renamed

    def rename_alias_name(self, alias: Alias, name: str) -> Alias:
        return self._rename(alias, _require(name, "Alias name"), alias.command)

    def rename_alias_command(self, alias: Alias, command: str) -> Alias:
        return self._rename(alias, alias.name, _require(command, "Alias command"))

    def set_description(self, alias: Alias, description: str) -> List[str]:
        if not self._holders(alias):
            raise AliasNotFoundError(f"Alias {alias} not found in any group")

        def describe(aliases: List[Alias], index: int) -> None:
            aliases[index].description = description

        return self._propagate(alias, describe)

    def run_alias(self, alias: Alias, group: str = SYSTEM_GROUP) -> int:
        """Count one more use of an alias, then run it in the shell.

        Returns the new frequency as seen in `group`.
        """
        current = self.groups.get_group(group)
        index = _index_of(current, alias)
        if index < 0:
            raise AliasNotFoundError(f"Alias {alias} not found in group '{group}'")

        def increment(aliases: List[Alias], index: int) -> None:
            aliases[index].frequency = (aliases[index].frequency or 0) + 1

        self._propagate(alias, increment)
        self.session.execute(alias.name)
        return (current[index].frequency or 0) + 1

    def copy_alias(self, alias: Alias) -> Tuple[bool, str]:
        """Put the alias statement on the clipboard"""
        content = format_alias_statement(alias.name, alias.command)
        return self.clipboard.copy(content), content

    def copy_all_in_group(self, group: str) -> Tuple[bool, str]:
        """Put every alias statement of a group on the clipboard, one per line"""
        aliases = self.groups.get_group(group)
        if not aliases:
            return False, ""
        content = "\n".join(format_alias_statement(alias.name, alias.command) for alias in aliases)
        return self.clipboard.copy(content), content

    # -- group commands --------------------------------------------------

    def eligible_groups(self, group: str) -> List[str]:
        """Groups an alias shown in `group` can be added to"""
        return [name for name in self.groups.list_groups() if name not in (SYSTEM_GROUP, group)]

    def add_to_group(self, alias: Alias, group: str, target: str) -> None:
        """Copy an alias from `group` into `target`"""
        candidates = self.eligible_groups(group)
        if not candidates:
            raise NoEligibleGroupError("No group can be added to")
        if target not in candidates:
            raise NoEligibleGroupError(f"Group '{target}' is not one of: {', '.join(candidates)}")

        source = self.groups.get_group(group)
        index = _index_of(source, alias)
        if index < 0:
            raise AliasNotFoundError(f"Alias {alias} not found in group '{group}'")

        aliases = self.groups.get_group(target)
        aliases.append(source[index])
        self.groups.set_group(target, aliases)

    def remove_from_group(self, alias: Alias, group: str) -> None:
        aliases = self.groups.get_group(group)
        index = _index_of(aliases, alias)
        if index < 0:
            raise AliasNotFoundError(f"Alias {alias} not found in group '{group}'")
        del aliases[index]
        self.groups.set_group(group, aliases)

    def new_group(self, name: str) -> None:
        name = _require(name, "Group")
        if name == SYSTEM_GROUP or self.groups.has_group(name):
            raise DuplicateGroupError(f"Duplicate group: '{name}'")
        self.groups.set_group(name, [])

    def rename_group(self, old: str, new: str) -> None:
        new = _require(new, "Group")
        if old == SYSTEM_GROUP:
            raise SystemGroupError("The system group cannot be renamed")
        if new == SYSTEM_GROUP or self.groups.has_group(new):
            raise DuplicateGroupError(f"Duplicate group: '{new}'")
        if not self.groups.has_group(old):
            raise InvalidFormatError(f"Group '{old}' does not exist")

        aliases = self.groups.get_group(old)
        self.groups.set_group(new, aliases)
        self.groups.delete_group(old)

    def delete_group(self, name: str) -> None:
        if name == SYSTEM_GROUP:
            raise SystemGroupError("The system group cannot be deleted")
        self.groups.delete_group(name)

    def _sort_group(self, group: str, key: Callable[[Alias], object]) -> List[Alias]:
        aliases = self.groups.get_group(group)
        if not aliases:
            return aliases
        aliases.sort(key=key)
        self.groups.set_group(group, aliases)
        return aliases

    def sort_by_alphabet(self, group: str) -> List[Alias]:
        return self._sort_group(group, lambda alias: alias.name.lower())

    def sort_by_frequency(self, group: str) -> List[Alias]:
        return self._sort_group(group, lambda alias: alias.frequency or 0)
