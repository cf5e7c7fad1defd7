"""Cross-reference installed add-ons with presets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from .models import Addon, AddonAnalysis, Preset

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    addon: Addon
    last_usage: Optional[datetime] = None
    preset_count: int = 0
    dependents_count: int = 0

    def freeze(self) -> AddonAnalysis:
        return AddonAnalysis(
            id=self.addon.id,
            name=self.addon.display_name,
            link=self.addon.url,
            last_update=self.addon.last_update,
            last_usage=self.last_usage,
            file_size=self.addon.file_size,
            preset_count=self.preset_count,
            dependency_count=len(self.addon.dependencies),
            dependents_count=self.dependents_count,
        )


def perform_analysis(
    addons: Mapping[int, Addon], presets: Mapping[str, Preset]
) -> List[AddonAnalysis]:
    """Compute usage and dependency statistics for every add-on in *addons*.

    References to ids outside the catalog are ignored. Every occurrence of an
    id in a preset counts towards ``preset_count``, so an add-on listed twice
    in one preset is counted twice. The result is sorted by lowercase name;
    equal names keep catalog order.
    """

    tallies: Dict[int, _Tally] = {addon.id: _Tally(addon) for addon in addons.values()}

    dangling_dependencies = 0
    for addon in addons.values():
        for dependency in addon.dependencies:
            tally = tallies.get(dependency)
            if tally is None:
                dangling_dependencies += 1
                continue
            tally.dependents_count += 1

    unmatched_references = 0
    for preset in presets.values():
        for addon_id in preset.remote_ids():
            tally = tallies.get(addon_id)
            if tally is None:
                unmatched_references += 1
                continue
            tally.preset_count += 1
            # compared as instants; on a tie the later preset's offset is kept
            if tally.last_usage is None or preset.last_update >= tally.last_usage:
                tally.last_usage = preset.last_update

    logger.debug(
        "Analysed %d add-ons against %d presets (%d dangling dependencies, %d unmatched preset references)",
        len(tallies),
        len(presets),
        dangling_dependencies,
        unmatched_references,
    )

    analysis = [tally.freeze() for tally in tallies.values()]
    return sorted(analysis, key=lambda entry: entry.name.lower())


__all__ = ["perform_analysis"]
