"""Data models for aliases and the alias tree"""

from dataclasses import dataclass, field
from typing import List, Tuple

# Group mirroring the store file
SYSTEM_GROUP = "system"


@dataclass
class Alias:
    """Represents a shell alias"""
    name: str
    command: str
    frequency: int = 0
    description: str = ""

    @property
    def identity(self) -> Tuple[str, str]:
        """The (name, command) pair that identifies an alias across groups"""
        return (self.name, self.command)

    def is_same(self, other: "Alias") -> bool:
        return self.identity == other.identity

    def to_dict(self) -> dict:
        """Convert alias to dictionary for storage"""
        return {
            "name": self.name,
            "command": self.command,
            "frequency": self.frequency,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Alias":
        """Create alias from dictionary"""
        return cls(
            name=data["name"],
            command=data["command"],
            frequency=data.get("frequency") or 0,
            description=data.get("description") or "",
        )

    def __str__(self) -> str:
        """String representation for display"""
        return f"{self.name}='{self.command}'"


@dataclass
class AliasNode:
    """Leaf of the alias tree: one alias inside one group"""
    group: str
    alias: Alias

    @property
    def is_system(self) -> bool:
        return self.group == SYSTEM_GROUP


@dataclass
class GroupNode:
    """Parent of the alias tree: a group and its aliases"""
    name: str
    children: List[AliasNode] = field(default_factory=list)

    @property
    def is_system(self) -> bool:
        return self.name == SYSTEM_GROUP
