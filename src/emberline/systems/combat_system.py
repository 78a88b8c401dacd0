"""Tower targeting and hit resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
import math

from emberline.entities.enemy_unit import EnemyUnit
from emberline.entities.tower import Tower
from emberline.systems.damage_model import DamageModel
from emberline.systems.pathing import Path
from emberline.systems.roster import Roster


@dataclass
class CombatTickResult:
    killed_units: list[EnemyUnit] = field(default_factory=list)
    shots_fired: int = 0
    damage_dealt: int = 0


class CombatSystem:
    def __init__(self, roster: Roster, damage_model: DamageModel) -> None:
        self._roster = roster
        self._damage_model = damage_model

    def tick(self, dt_ms: float, towers: list[Tower], units: list[EnemyUnit], path: Path) -> CombatTickResult:
        result = CombatTickResult()
        alive_units = [u for u in units if u.alive]

        for tower in towers:
            tower.tick_cooldown(dt_ms)
            if not tower.can_attack():
                continue

            tower_cfg = self._roster.tower(tower.tower_id)
            if tower_cfg is None:
                continue
            stats = self._roster.tower_stats(tower.tower_id, tower.level)

            target = self._select_target(tower, stats.range, alive_units, path)
            if target is None:
                continue

            result.shots_fired += 1
            tower.reset_cooldown(stats.fire_interval)

            damage = self._damage_model.effective_damage(stats.damage, tower.tower_id, target.tags)
            result.damage_dealt += damage
            if target.apply_damage(damage):
                result.killed_units.append(target)
                alive_units.remove(target)
                continue

            if tower_cfg.slow_percent > 0:
                target.apply_slow(tower_cfg.slow_percent, tower_cfg.slow_duration)

        return result

    def _select_target(
        self,
        tower: Tower,
        range_px: float,
        units: list[EnemyUnit],
        path: Path,
    ) -> EnemyUnit | None:
        in_range: list[EnemyUnit] = []
        for unit in units:
            if not unit.alive:
                continue
            ux, uy = path.position_at_distance(unit.distance)
            if math.hypot(tower.x - ux, tower.y - uy) <= range_px:
                in_range.append(unit)

        if not in_range:
            return None

        # Closest to the exit first.
        return min(in_range, key=lambda u: path.remaining_distance(u.distance))
