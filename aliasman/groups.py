"""Named, ordered alias groups on top of a key-value store"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from aliasman.errors import StoreIOError
from aliasman.models import Alias

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Durable key-value storage; one key per group"""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def update(self, key: str, value: Any) -> None:
        """Set key to value; a value of None removes the key."""
        ...

    @abstractmethod
    def keys(self) -> List[str]:
        ...


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def update(self, key: str, value: Any) -> None:
        if value is None:
            self.data.pop(key, None)
        else:
            self.data[key] = value

    def keys(self) -> List[str]:
        return list(self.data)


class JsonKeyValueStore(MemoryKeyValueStore):
    """Key-value store persisted to a JSON file, saved on every update"""

    def __init__(self, path: Path):
        super().__init__()
        self.path = path
        self.load()

    def load(self) -> None:
        """Load state from JSON file"""
        if not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level value is not an object")
            for key, value in data.items():
                if not isinstance(value, list) or not all(
                    isinstance(item, dict) and "name" in item and "command" in item for item in value
                ):
                    raise ValueError(f"group '{key}' is not a list of aliases")
            self.data = data
        except ValueError as e:
            # Start fresh but keep the corrupted file around
            backup_path = self.path.with_suffix(".corrupted")
            logger.warning("Group state %s is corrupted (%s), moved to %s", self.path, e, backup_path)
            try:
                self.path.rename(backup_path)
            except OSError as rename_error:
                raise StoreIOError(f"Cannot move aside {self.path}: {rename_error}") from rename_error
            self.data = {}
        except OSError as e:
            raise StoreIOError(f"Cannot read {self.path}: {e}") from e

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            raise StoreIOError(f"Cannot write {self.path}: {e}") from e

    def update(self, key: str, value: Any) -> None:
        previous = dict(self.data)
        super().update(key, value)
        try:
            self.save()
        except StoreIOError:
            self.data = previous
            raise


class GroupStore:
    """Ordered mapping of group name to a list of aliases.

    Aliases are stored as plain dictionaries, so every get_group returns
    fresh copies; edits only persist through set_group.
    """

    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    def list_groups(self) -> List[str]:
        return self.backend.keys()

    def has_group(self, name: str) -> bool:
        return name in self.backend.keys()

    def get_group(self, name: str) -> List[Alias]:
        """Aliases of a group, empty if the group does not exist"""
        return [Alias.from_dict(data) for data in self.backend.get(name) or []]

    def set_group(self, name: str, aliases: List[Alias]) -> None:
        self.backend.update(name, [alias.to_dict() for alias in aliases])

    def delete_group(self, name: str) -> None:
        self.backend.update(name, None)
