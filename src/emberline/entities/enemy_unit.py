"""Spawned enemy unit and its status effect logic."""

from __future__ import annotations

from dataclasses import dataclass
import math

from emberline.config import EnemyArchetype
from emberline.core.damage_types import CategoryTag
from emberline.core.game_state import UnitState


MAX_SLOW_PERCENT = 80.0


@dataclass
class EnemyUnit:
    unit_id: str
    archetype_id: str
    tags: tuple[CategoryTag, ...]
    max_hp: float
    hp: float
    speed: float
    reward: int
    damage: int
    distance: float = 0.0
    state: UnitState = UnitState.ALIVE
    active: bool = True
    slow_percent: float = 0.0
    slow_duration_left: float = 0.0

    @classmethod
    def spawn(
        cls,
        unit_id: str,
        archetype: EnemyArchetype,
        health_multiplier: float,
        speed_multiplier: float,
        reward_multiplier: float,
    ) -> "EnemyUnit":
        health = math.floor(archetype.health * health_multiplier)
        return cls(
            unit_id=unit_id,
            archetype_id=archetype.archetype_id,
            tags=tuple(archetype.tags),
            max_hp=health,
            hp=health,
            speed=math.floor(archetype.speed * speed_multiplier),
            reward=math.floor(archetype.reward * reward_multiplier),
            damage=archetype.damage,
        )

    @property
    def is_dead(self) -> bool:
        return self.state == UnitState.DEAD

    @property
    def escaped(self) -> bool:
        return self.state == UnitState.ESCAPED

    @property
    def alive(self) -> bool:
        return self.state == UnitState.ALIVE and self.active

    def apply_damage(self, amount: float) -> bool:
        if not self.alive:
            return False
        self.hp -= max(amount, 0.0)
        if self.hp <= 0:
            self.hp = 0
            self.state = UnitState.DEAD
            return True
        return False

    def apply_slow(self, slow_percent: float, duration: float) -> None:
        if not self.alive:
            return
        if slow_percent <= 0 or duration <= 0:
            return
        if slow_percent > self.slow_percent:
            self.slow_percent = slow_percent
        self.slow_duration_left = max(self.slow_duration_left, duration)

    def move(self, dt_ms: float, path_length: float) -> bool:
        """Advance along the path; True once the terminal point is reached."""
        if not self.alive:
            return False

        if self.slow_duration_left > 0:
            self.slow_duration_left = max(0.0, self.slow_duration_left - dt_ms)
            if self.slow_duration_left == 0:
                self.slow_percent = 0.0

        speed_multiplier = 1.0 - min(self.slow_percent, MAX_SLOW_PERCENT) / 100.0
        self.distance += self.speed * speed_multiplier * dt_ms / 1000.0
        if self.distance >= path_length:
            self.distance = path_length
            self.state = UnitState.ESCAPED
            return True
        return False

    def destroy(self) -> None:
        self.active = False
