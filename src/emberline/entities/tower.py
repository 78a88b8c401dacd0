"""Placed tower and its fire cooldown."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Tower:
    tower_instance_id: str
    tower_id: str
    col: int
    row: int
    x: float
    y: float
    level: int = 1
    total_invested: int = 0
    cooldown_left: float = 0.0

    def tick_cooldown(self, dt_ms: float) -> None:
        self.cooldown_left = max(0.0, self.cooldown_left - dt_ms)

    def can_attack(self) -> bool:
        return self.cooldown_left <= 0.0

    def reset_cooldown(self, fire_interval: float) -> None:
        self.cooldown_left = fire_interval if fire_interval > 0 else 1000.0

    def sell_price(self) -> int:
        return self.total_invested // 2
