"""Wave runtime: spawn scheduling, active units and wave lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
import logging

from emberline.config import DifficultyProfile, NEUTRAL_DIFFICULTY
from emberline.core.event_bus import (
    ENEMY_REACHED_BASE,
    ENEMY_SPAWNED,
    WAVE_COMPLETE,
    WAVE_STARTED,
    EventBus,
)
from emberline.core.game_state import WaveState
from emberline.core.scheduler import Scheduler, Timer
from emberline.entities.enemy_unit import EnemyUnit
from emberline.systems.pathing import Path
from emberline.systems.roster import Roster
from emberline.systems.wave_composer import WaveComposer, WaveComposition, completion_bonus


logger = logging.getLogger(__name__)


SPAWN_FINISH_PADDING = 500.0


@dataclass
class WaveRuntime:
    composition: WaveComposition
    difficulty: DifficultyProfile
    spawn_timers: list[Timer] = field(default_factory=list)
    finish_timer: Timer | None = None


@dataclass
class WaveTickResult:
    spawned: list[EnemyUnit] = field(default_factory=list)
    escaped: list[EnemyUnit] = field(default_factory=list)
    removed: list[EnemyUnit] = field(default_factory=list)
    completed_wave: int | None = None
    bonus_gold: int = 0


class WaveSystem:
    """Drives one wave at a time on a logical-time schedule.

    ``update`` receives real elapsed milliseconds and advances logical time
    by ``elapsed * time_acceleration``; spawn timers sit at
    ``index * spawn_interval`` in logical time, so changing the game speed
    never requires rescheduling.
    """

    def __init__(
        self,
        composer: WaveComposer,
        roster: Roster,
        path: Path,
        events: EventBus | None = None,
        difficulty: DifficultyProfile = NEUTRAL_DIFFICULTY,
    ) -> None:
        self._composer = composer
        self._roster = roster
        self._path = path
        self.events = events or EventBus()
        self.difficulty = difficulty
        self.scheduler = Scheduler()
        self.state = WaveState.IDLE
        self.current_wave = 0
        self.time_acceleration = 1.0
        self._runtime: WaveRuntime | None = None
        self._units: list[EnemyUnit] = []
        self._unit_counter = 0
        self._tick_spawned: list[EnemyUnit] = []

    @property
    def units(self) -> list[EnemyUnit]:
        return list(self._units)

    @property
    def runtime(self) -> WaveRuntime | None:
        return self._runtime

    def has_active_wave(self) -> bool:
        return self.state != WaveState.IDLE

    def set_difficulty(self, difficulty: DifficultyProfile) -> None:
        self.difficulty = difficulty

    def set_time_acceleration(self, factor: float) -> None:
        if factor <= 0:
            raise ValueError("time acceleration must be positive")
        self.time_acceleration = factor

    def start_next_wave(self, time_acceleration: float = 1.0) -> bool:
        if self.state != WaveState.IDLE or self.scheduler.closed:
            return False
        self.set_time_acceleration(time_acceleration)

        self.current_wave += 1
        composition = self._composer.compose_wave(self.current_wave, self.difficulty)
        runtime = WaveRuntime(composition=composition, difficulty=self.difficulty)
        self._runtime = runtime
        self.state = WaveState.SPAWNING

        self.events.emit(
            WAVE_STARTED,
            wave=self.current_wave,
            theme=composition.theme.theme_id,
            planned_enemies=len(composition.sequence),
            boss_wave=composition.boss_count > 0,
        )

        interval = composition.scaling.spawn_interval
        for index, archetype_id in enumerate(composition.sequence):
            timer = self.scheduler.schedule(index * interval, partial(self._spawn, runtime, archetype_id))
            runtime.spawn_timers.append(timer)

        finish_at = (len(composition.sequence) - 1) * interval + SPAWN_FINISH_PADDING
        runtime.finish_timer = self.scheduler.schedule(finish_at, partial(self._finish_spawning, runtime))

        logger.info(
            "Wave %d started: %d enemies, theme %s",
            self.current_wave,
            len(composition.sequence),
            composition.theme.theme_id,
        )
        return True

    def update(self, elapsed_ms: float) -> WaveTickResult:
        result = WaveTickResult()
        if self.scheduler.closed:
            return result

        dt = max(0.0, elapsed_ms) * self.time_acceleration
        self._tick_spawned = result.spawned
        self.scheduler.advance(dt)
        self._tick_spawned = []

        survivors: list[EnemyUnit] = []
        for unit in self._units:
            if unit.is_dead or not unit.active:
                result.removed.append(unit)
                continue
            if unit.move(dt, self._path.length):
                self.events.emit(ENEMY_REACHED_BASE, unit=unit, unit_id=unit.unit_id, damage=unit.damage)
                unit.destroy()
                result.escaped.append(unit)
                continue
            survivors.append(unit)
        self._units = survivors

        if self.state == WaveState.CLEARING and not self._units:
            result.completed_wave = self.current_wave
            result.bonus_gold = self._complete_wave()

        return result

    def pause_spawning(self) -> None:
        for timer in self._pending_timers():
            self.scheduler.pause(timer)

    def resume_spawning(self) -> None:
        for timer in self._pending_timers():
            self.scheduler.resume(timer)

    def clear(self) -> None:
        self.scheduler.cancel_all()
        for unit in self._units:
            unit.destroy()
        self._units = []
        self._runtime = None
        self.state = WaveState.IDLE

    def destroy(self) -> None:
        self.clear()
        self.scheduler.close()

    def remaining_to_spawn(self) -> int:
        if self._runtime is None:
            return 0
        return sum(1 for t in self._runtime.spawn_timers if t.pending)

    def _pending_timers(self) -> list[Timer]:
        if self._runtime is None:
            return []
        timers = list(self._runtime.spawn_timers)
        if self._runtime.finish_timer is not None:
            timers.append(self._runtime.finish_timer)
        return [t for t in timers if t.pending]

    def _spawn(self, runtime: WaveRuntime, archetype_id: str) -> None:
        if runtime is not self._runtime:
            return
        archetype = self._roster.enemy(archetype_id)
        scaling = runtime.composition.scaling
        self._unit_counter += 1
        unit = EnemyUnit.spawn(
            unit_id=f"unit_{self._unit_counter:04d}",
            archetype=archetype,
            health_multiplier=scaling.health_multiplier,
            speed_multiplier=scaling.speed_multiplier,
            reward_multiplier=scaling.reward_multiplier,
        )
        self._units.append(unit)
        self._tick_spawned.append(unit)
        self.events.emit(ENEMY_SPAWNED, unit=unit, unit_id=unit.unit_id, archetype_id=unit.archetype_id)

    def _finish_spawning(self, runtime: WaveRuntime) -> None:
        if runtime is not self._runtime:
            return
        self.state = WaveState.CLEARING

    def _complete_wave(self) -> int:
        runtime = self._runtime
        difficulty = runtime.difficulty if runtime is not None else self.difficulty
        bonus = completion_bonus(self.current_wave, difficulty)
        self._runtime = None
        self.state = WaveState.IDLE
        self.events.emit(WAVE_COMPLETE, wave=self.current_wave, next_wave=self.current_wave + 1, bonus_gold=bonus)
        logger.info("Wave %d complete, bonus %d gold", self.current_wave, bonus)
        return bonus
