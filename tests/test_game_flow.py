import pytest

from emberline.config import (
    DamageProfile,
    DifficultyProfile,
    EnemyArchetype,
    GameContent,
    GridConfig,
    MapConfig,
    TowerArchetype,
    TowerUpgrade,
    Waypoint,
    load_game_content,
)
from emberline.core.damage_types import CategoryTag, DamageType
from emberline.core.event_bus import WAVE_COMPLETE
from emberline.core.game_state import GameState
from emberline.game import EmberlineGame


def _mini_content() -> GameContent:
    map_cfg = MapConfig(
        map_id="test_map",
        starting_gold=100,
        starting_lives=5,
        grid=GridConfig(cols=3, rows=3, cell_size=100, offset_x=0, offset_y=0, path_cols=[1]),
        path_waypoints=[Waypoint(x=150.0, y=0.0), Waypoint(x=150.0, y=300.0)],
    )

    towers = {
        "arrow": TowerArchetype(
            tower_id="arrow",
            display_name="Arrow Tower",
            tier=1,
            cost=10,
            damage=80,
            range=500,
            fire_interval=100,
            damage_profile=DamageProfile(primary=DamageType.FIRE),
        )
    }

    enemies = {
        "scout": EnemyArchetype(
            archetype_id="scout",
            display_name="Scout",
            health=50,
            speed=20,
            damage=1,
            reward=5,
            tags=(CategoryTag.SWARM,),
            unlock_wave=1,
        )
    }

    resistances = {tag: {dt: 1.0 for dt in DamageType} for tag in CategoryTag}

    return GameContent(
        map_config=map_cfg,
        enemy_archetypes=enemies,
        tower_archetypes=towers,
        resistances=resistances,
        themes=load_game_content().themes,
        difficulties={"easy": DifficultyProfile(difficulty_id="easy", display_name="Easy")},
    )


def _run_until(game: EmberlineGame, state: GameState, max_ticks: int = 2000) -> None:
    for _ in range(max_ticks):
        if game.state == state:
            return
        game.tick(100)


def test_wave_clears_and_pays_out() -> None:
    game = EmberlineGame(content=_mini_content(), seed=1)
    game.build_tower("arrow", 0, 0)
    assert game.economy.gold == 90

    assert game.start_next_wave()
    assert game.state == GameState.WAVE_RUNNING
    _run_until(game, GameState.BUILD_PHASE)

    assert game.state == GameState.BUILD_PHASE
    assert game.economy.lives == 5
    # 8 kills at 5 gold plus the wave 1 bonus of 16.
    assert game.economy.gold == 90 + 40 + 16
    assert game.events.named(WAVE_COMPLETE)[0].payload["wave"] == 1
    assert game.snapshot()["current_wave"] == 1


def test_undefended_base_falls() -> None:
    game = EmberlineGame(content=_mini_content(), seed=1)
    game.start_next_wave()
    _run_until(game, GameState.GAME_OVER)

    assert game.state == GameState.GAME_OVER
    assert game.economy.lives == 0
    assert not game.start_next_wave()
    assert game.snapshot()["enemies_remaining"] == 0
    with pytest.raises(ValueError, match="Game is over"):
        game.build_tower("arrow", 0, 0)


def test_pause_freezes_the_battle() -> None:
    game = EmberlineGame(content=_mini_content(), seed=1)
    game.start_next_wave()
    game.tick(100)
    game.pause()
    for _ in range(100):
        game.tick(100)
    assert game.wave_system.remaining_to_spawn() == 7
    game.resume()
    assert not game.paused
    game.tick(100)
    assert game.state == GameState.WAVE_RUNNING


def test_build_upgrade_and_sell() -> None:
    game = EmberlineGame(seed=3)
    assert game.economy.gold == 150
    game.build_tower("ember_watch", 0, 0)
    game.upgrade_tower(0, 0)
    assert game.placement.get_tower(0, 0).level == 2
    assert game.economy.gold == 60

    assert game.sell_tower(0, 0) == 45
    assert game.economy.gold == 105
    assert game.placement.get_tower(0, 0) is None


def test_invalid_player_actions_raise() -> None:
    game = EmberlineGame(seed=3)
    with pytest.raises(ValueError, match="Unknown tower_id"):
        game.build_tower("laser", 0, 0)
    with pytest.raises(ValueError, match="Cell not available"):
        game.build_tower("ember_watch", 6, 0)
    with pytest.raises(ValueError, match="No tower"):
        game.upgrade_tower(0, 0)

    game.build_tower("sunflare_cannon", 0, 0)
    with pytest.raises(ValueError, match="Not enough gold"):
        game.build_tower("sunflare_cannon", 1, 0)


def test_max_level_tower_cannot_upgrade() -> None:
    content = _mini_content()
    arrow = content.tower_archetypes["arrow"]
    content.tower_archetypes["arrow"] = TowerArchetype(
        tower_id=arrow.tower_id,
        display_name=arrow.display_name,
        tier=arrow.tier,
        cost=arrow.cost,
        damage=arrow.damage,
        range=arrow.range,
        fire_interval=arrow.fire_interval,
        damage_profile=arrow.damage_profile,
        upgrades=(TowerUpgrade(level=2, cost=20, damage_bonus=10, range_bonus=0, fire_interval_bonus=0),),
    )
    game = EmberlineGame(content=content)
    game.build_tower("arrow", 0, 0)
    game.upgrade_tower(0, 0)
    assert game.economy.gold == 70
    with pytest.raises(ValueError, match="max level"):
        game.upgrade_tower(0, 0)


def test_difficulty_locked_during_wave() -> None:
    game = EmberlineGame(seed=3)
    game.set_difficulty("hard")
    assert game.snapshot()["difficulty"] == "hard"
    with pytest.raises(ValueError, match="Unknown difficulty"):
        game.set_difficulty("nightmare")

    game.start_next_wave()
    with pytest.raises(ValueError):
        game.set_difficulty("easy")


def test_game_speed_scales_spawn_timing() -> None:
    game = EmberlineGame(content=_mini_content(), seed=1)
    game.start_next_wave(game_speed=3.0)
    game.tick(0)
    # 270 real ms at 3x covers the 809 ms wave 1 interval.
    game.tick(270)
    assert game.wave_system.remaining_to_spawn() == 6


def test_unaffordable_build_leaves_gold_and_cell_untouched() -> None:
    game = EmberlineGame(seed=3)
    game.economy.gold = 49
    with pytest.raises(ValueError, match="Not enough gold"):
        game.build_tower("ember_watch", 0, 0)
    assert game.economy.gold == 49
    assert game.placement.get_tower(0, 0) is None
