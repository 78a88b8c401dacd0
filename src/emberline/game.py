"""Battle simulation orchestrator for the Emberline model."""

from __future__ import annotations

from pathlib import Path as FsPath
import logging
import random

from emberline.config import DifficultyProfile, GameContent, load_game_content
from emberline.core.event_bus import EventBus
from emberline.core.game_state import GameState
from emberline.systems.combat_system import CombatSystem
from emberline.systems.damage_model import DamageModel
from emberline.systems.economy_system import EconomySystem
from emberline.systems.pathing import Path
from emberline.systems.placement_system import PlacementSystem
from emberline.systems.roster import Roster
from emberline.systems.theme_selector import ThemeSelector
from emberline.systems.wave_composer import WaveComposer
from emberline.systems.wave_system import WaveSystem


logger = logging.getLogger(__name__)


class EmberlineGame:
    """Engine-agnostic battle model: towers, waves, gold and lives."""

    def __init__(
        self,
        data_dir: FsPath | None = None,
        content: GameContent | None = None,
        difficulty: str = "easy",
        seed: int | None = None,
    ) -> None:
        self.content = content or load_game_content(base_data_dir=data_dir)
        self.events = EventBus()
        self.state = GameState.BUILD_PHASE
        self.paused = False

        self.roster = Roster(self.content.enemy_archetypes, self.content.tower_archetypes)
        self.damage_model = DamageModel.from_towers(self.content.resistances, self.roster.towers())
        self.path = Path(self.content.map_config.path_waypoints)
        self.economy = EconomySystem(
            gold=self.content.map_config.starting_gold,
            lives=self.content.map_config.starting_lives,
        )
        self.placement = PlacementSystem(self.content.map_config.grid)
        self.combat = CombatSystem(self.roster, self.damage_model)

        composer = WaveComposer(
            self.roster,
            ThemeSelector(self.content.themes, self.roster),
            rng=random.Random(seed),
        )
        self.wave_system = WaveSystem(
            composer,
            self.roster,
            self.path,
            events=self.events,
            difficulty=self._difficulty(difficulty),
        )

    def _difficulty(self, difficulty_id: str) -> DifficultyProfile:
        profile = self.content.difficulties.get(difficulty_id)
        if profile is None:
            raise ValueError(f"Unknown difficulty: {difficulty_id}")
        return profile

    def set_difficulty(self, difficulty_id: str) -> None:
        if self.state != GameState.BUILD_PHASE:
            raise ValueError("Difficulty can only change between waves")
        self.wave_system.set_difficulty(self._difficulty(difficulty_id))

    def build_tower(self, tower_id: str, col: int, row: int) -> None:
        if self.state == GameState.GAME_OVER:
            raise ValueError("Game is over")

        tower_cfg = self.roster.tower(tower_id)
        if tower_cfg is None:
            raise ValueError(f"Unknown tower_id: {tower_id}")
        if not self.placement.is_cell_available(col, row):
            raise ValueError(f"Cell not available: ({col}, {row})")
        if not self.economy.can_afford(tower_cfg.cost):
            raise ValueError("Not enough gold")

        self.placement.place_tower(col, row, tower_id, tower_cfg.cost)
        self.economy.spend(tower_cfg.cost)

    def upgrade_tower(self, col: int, row: int) -> None:
        tower = self.placement.get_tower(col, row)
        if tower is None:
            raise ValueError(f"No tower at cell: ({col}, {row})")

        upgrade_cost = self.roster.upgrade_cost(tower.tower_id, tower.level)
        if upgrade_cost is None:
            raise ValueError("Tower is already max level")
        if not self.economy.spend(upgrade_cost):
            raise ValueError("Not enough gold")

        tower.level += 1
        tower.total_invested += upgrade_cost

    def sell_tower(self, col: int, row: int) -> int:
        tower = self.placement.remove_tower(col, row)
        refund = tower.sell_price()
        self.economy.reward(refund)
        return refund

    def start_next_wave(self, game_speed: float = 1.0) -> bool:
        if self.state == GameState.GAME_OVER:
            return False
        if not self.wave_system.start_next_wave(game_speed):
            return False
        self.state = GameState.WAVE_RUNNING
        return True

    def set_game_speed(self, game_speed: float) -> None:
        self.wave_system.set_time_acceleration(game_speed)

    def pause(self) -> None:
        self.paused = True
        self.wave_system.pause_spawning()

    def resume(self) -> None:
        self.paused = False
        self.wave_system.resume_spawning()

    def tick(self, elapsed_ms: float) -> None:
        if self.state != GameState.WAVE_RUNNING or self.paused:
            return

        wave_outcome = self.wave_system.update(elapsed_ms)

        for unit in wave_outcome.escaped:
            self.economy.lose_lives(unit.damage)
        if self.economy.defeated:
            logger.info("Defeated on wave %d", self.wave_system.current_wave)
            self.wave_system.clear()
            self.state = GameState.GAME_OVER
            return

        if wave_outcome.completed_wave is not None:
            self.economy.reward(wave_outcome.bonus_gold)
            self.state = GameState.BUILD_PHASE
            return

        dt = elapsed_ms * self.wave_system.time_acceleration
        combat_outcome = self.combat.tick(dt, self.placement.all_towers(), self.wave_system.units, self.path)
        for unit in combat_outcome.killed_units:
            self.economy.reward(unit.reward)

    def snapshot(self) -> dict[str, int | str]:
        return {
            "state": self.state.value,
            "gold": self.economy.gold,
            "lives": self.economy.lives,
            "current_wave": self.wave_system.current_wave,
            "difficulty": self.wave_system.difficulty.difficulty_id,
            "enemies_remaining": len(self.wave_system.units) + self.wave_system.remaining_to_spawn(),
            "towers_built": len(self.placement.all_towers()),
        }
