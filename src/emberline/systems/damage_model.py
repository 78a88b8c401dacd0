"""Damage-type effectiveness against enemy category tags."""

from __future__ import annotations

from collections.abc import Iterable
import math

from emberline.config import DamageProfile, ResistanceTable, TowerArchetype
from emberline.core.damage_types import CategoryTag


# Lower bound of each label, checked from the top down.
EFFECTIVENESS_LABELS: list[tuple[float, str]] = [
    (1.8, "super_effective"),
    (1.4, "effective"),
    (1.1, "slightly_effective"),
    (0.9, "normal"),
    (0.6, "resisted"),
    (0.3, "strongly_resisted"),
]


def effectiveness_label(multiplier: float) -> str:
    for threshold, label in EFFECTIVENESS_LABELS:
        if multiplier >= threshold:
            return label
    return "immune"


class DamageModel:
    """Resolves tower damage against enemy category tags.

    Each tag yields a blended multiplier from the tower's primary and
    secondary damage types. Single-tag enemies take the blended value as is;
    multi-tag enemies take the mean of the best and worst tag.
    """

    def __init__(self, resistances: ResistanceTable, profiles: dict[str, DamageProfile]) -> None:
        self._resistances = resistances
        self._profiles = profiles

    @classmethod
    def from_towers(
        cls,
        resistances: ResistanceTable,
        towers: Iterable[TowerArchetype],
    ) -> "DamageModel":
        return cls(resistances, {t.tower_id: t.damage_profile for t in towers})

    def _blended(self, profile: DamageProfile, tag: CategoryTag) -> float | None:
        multipliers = self._resistances.get(tag)
        if multipliers is None:
            return None
        if profile.secondary is None:
            return multipliers[profile.primary]
        ratio = profile.primary_ratio
        return multipliers[profile.primary] * ratio + multipliers[profile.secondary] * (1.0 - ratio)

    def effective_multiplier(self, tower_id: str, tags: Iterable[CategoryTag]) -> float:
        profile = self._profiles.get(tower_id)
        if profile is None:
            return 1.0

        best: float | None = None
        worst: float | None = None
        resolved = 0
        for tag in tags:
            value = self._blended(profile, tag)
            if value is None:
                continue
            resolved += 1
            best = value if best is None else max(best, value)
            worst = value if worst is None else min(worst, value)

        if best is None or worst is None:
            return 1.0
        if resolved == 1:
            return best
        return (best + worst) / 2.0

    def effective_damage(self, base_damage: float, tower_id: str, tags: Iterable[CategoryTag]) -> int:
        if tower_id not in self._profiles:
            return math.floor(base_damage)
        multiplier = self.effective_multiplier(tower_id, tags)
        # Rounding first keeps float noise such as 114.99999999999999 from losing a point.
        return math.floor(round(base_damage * multiplier, 9))
