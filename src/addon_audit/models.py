"""Dataclasses representing installed add-ons, presets and their analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

# add-on ids and byte sizes are unsigned 64-bit values
MAX_ID = 2**64 - 1


@dataclass(frozen=True)
class Addon:
    """Represents a single entry of the launcher's ``Extensions`` list."""

    id: int
    display_name: str
    path: Path
    url: str
    file_size: int
    file_space_required: int
    last_update: datetime
    dependencies: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class RemoteAddon:
    """A ``steam:<id>`` reference inside a preset."""

    id: int


@dataclass(frozen=True)
class LocalAddon:
    """A ``local:<path>`` reference inside a preset."""

    path: Path


PresetAddon = Union[RemoteAddon, LocalAddon]


@dataclass(frozen=True)
class Preset:
    name: str
    last_update: datetime
    mods: List[PresetAddon] = field(default_factory=list)

    def remote_ids(self) -> Iterator[int]:
        """Yield the ids of remote references in order, duplicates included."""

        for mod in self.mods:
            if isinstance(mod, RemoteAddon):
                yield mod.id


@dataclass(frozen=True)
class AddonAnalysis:
    id: int
    name: str
    link: str
    last_update: datetime
    last_usage: Optional[datetime]
    file_size: int
    preset_count: int
    dependency_count: int
    dependents_count: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "link": self.link,
            "last_update": self.last_update.isoformat(),
            "last_usage": self.last_usage.isoformat() if self.last_usage else None,
            "file_size": self.file_size,
            "preset_count": self.preset_count,
            "dependency_count": self.dependency_count,
            "dependents_count": self.dependents_count,
        }


__all__ = ["MAX_ID", "Addon", "AddonAnalysis", "LocalAddon", "Preset", "PresetAddon", "RemoteAddon"]
