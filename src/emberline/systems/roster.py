"""Read-only catalogs of enemy and tower archetypes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from emberline.config import EnemyArchetype, TowerArchetype
from emberline.core.damage_types import CategoryTag


logger = logging.getLogger(__name__)


FALLBACK_ARCHETYPE = EnemyArchetype(
    archetype_id="fallback",
    display_name="Torch Goblin",
    health=30,
    speed=80,
    damage=1,
    reward=10,
    tags=(CategoryTag.SWARM, CategoryTag.HUMANOID),
    unlock_wave=1,
)


@dataclass(frozen=True)
class TowerStats:
    damage: float
    range: float
    fire_interval: float


class Roster:
    def __init__(
        self,
        enemies: dict[str, EnemyArchetype],
        towers: dict[str, TowerArchetype] | None = None,
    ) -> None:
        self._enemies = dict(enemies)
        self._towers = dict(towers or {})

    def enemy(self, archetype_id: str) -> EnemyArchetype:
        archetype = self._enemies.get(archetype_id)
        if archetype is None:
            logger.debug("Unknown archetype %r, using fallback", archetype_id)
            return FALLBACK_ARCHETYPE
        return archetype

    def tower(self, tower_id: str) -> TowerArchetype | None:
        return self._towers.get(tower_id)

    def towers(self) -> list[TowerArchetype]:
        return list(self._towers.values())

    def regular_pool(self, wave: int) -> list[str]:
        return [
            a.archetype_id for a in self._enemies.values() if a.unlock_wave <= wave and not a.is_boss
        ]

    def boss_pool(self, wave: int) -> list[str]:
        return [a.archetype_id for a in self._enemies.values() if a.unlock_wave <= wave and a.is_boss]

    def newly_unlocked_tags(self, wave: int) -> list[CategoryTag]:
        tags: list[CategoryTag] = []
        for archetype in self._enemies.values():
            if archetype.unlock_wave != wave:
                continue
            for tag in archetype.tags:
                if tag != CategoryTag.BOSS and tag not in tags:
                    tags.append(tag)
        return tags

    def pool_by_tags(self, pool: Iterable[str], tags: Iterable[CategoryTag]) -> list[str]:
        wanted = set(tags)
        if not wanted:
            return []
        return [
            archetype_id
            for archetype_id in pool
            if archetype_id in self._enemies and wanted.intersection(self._enemies[archetype_id].tags)
        ]

    def tower_stats(self, tower_id: str, level: int) -> TowerStats:
        tower = self._towers.get(tower_id)
        if tower is None:
            raise ValueError(f"Unknown tower_id: {tower_id}")
        damage = tower.damage
        range_ = tower.range
        fire_interval = tower.fire_interval
        for upgrade in tower.upgrades:
            if upgrade.level > level:
                break
            damage += upgrade.damage_bonus
            range_ += upgrade.range_bonus
            fire_interval += upgrade.fire_interval_bonus
        return TowerStats(damage=damage, range=range_, fire_interval=max(1.0, fire_interval))

    def upgrade_cost(self, tower_id: str, level: int) -> int | None:
        """Cost of going from ``level`` to ``level + 1``, or None at max level."""
        tower = self._towers.get(tower_id)
        if tower is None:
            raise ValueError(f"Unknown tower_id: {tower_id}")
        for upgrade in tower.upgrades:
            if upgrade.level == level + 1:
                return upgrade.cost
        return None
