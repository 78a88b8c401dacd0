import pytest

from emberline.config import Waypoint, load_game_content
from emberline.core.damage_types import CategoryTag
from emberline.entities.enemy_unit import EnemyUnit
from emberline.entities.tower import Tower
from emberline.systems.combat_system import CombatSystem
from emberline.systems.damage_model import DamageModel
from emberline.systems.pathing import Path
from emberline.systems.roster import Roster


def _combat() -> CombatSystem:
    content = load_game_content()
    roster = Roster(content.enemy_archetypes, content.tower_archetypes)
    return CombatSystem(roster, DamageModel.from_towers(content.resistances, roster.towers()))


def _path() -> Path:
    return Path([Waypoint(x=0.0, y=0.0), Waypoint(x=1000.0, y=0.0)])


def _unit(unit_id: str, distance: float, tags: tuple[CategoryTag, ...], hp: float = 200) -> EnemyUnit:
    return EnemyUnit(
        unit_id=unit_id,
        archetype_id="test",
        tags=tags,
        max_hp=hp,
        hp=hp,
        speed=40,
        reward=5,
        damage=1,
        distance=distance,
    )


def test_tower_targets_unit_closest_to_exit() -> None:
    combat = _combat()
    tower = Tower("t1", "ironspike_launcher", col=0, row=0, x=500.0, y=50.0)
    tags = (CategoryTag.HUMANOID, CategoryTag.ARMORED)
    behind = _unit("u1", 450.0, tags)
    ahead = _unit("u2", 520.0, tags)

    result = combat.tick(16, [tower], [behind, ahead], _path())

    assert result.shots_fired == 1
    assert result.damage_dealt == 39
    assert ahead.hp == 161
    assert behind.hp == 200
    assert tower.cooldown_left == 1400


def test_out_of_range_units_are_ignored() -> None:
    combat = _combat()
    tower = Tower("t1", "ember_watch", col=0, row=0, x=0.0, y=400.0)
    unit = _unit("u1", 0.0, (CategoryTag.SWARM,))

    result = combat.tick(16, [tower], [unit], _path())
    assert result.shots_fired == 0
    assert unit.hp == 200


def test_frost_tower_slows_surviving_target() -> None:
    combat = _combat()
    tower = Tower("t1", "frostcoil_tower", col=0, row=0, x=100.0, y=50.0)
    unit = _unit("u1", 100.0, (CategoryTag.SWARM,))

    combat.tick(16, [tower], [unit], _path())

    assert unit.hp == 200 - 14
    assert unit.slow_percent == 50
    assert unit.slow_duration_left == 2500


def test_killing_blow_is_reported_once() -> None:
    combat = _combat()
    towers = [
        Tower("t1", "ember_watch", col=0, row=0, x=100.0, y=20.0),
        Tower("t2", "ember_watch", col=1, row=0, x=120.0, y=20.0),
    ]
    unit = _unit("u1", 100.0, (CategoryTag.SWARM,), hp=20)

    result = combat.tick(16, towers, [unit], _path())

    assert result.killed_units == [unit]
    assert result.shots_fired == 1
    assert unit.is_dead


def test_cooldown_gates_follow_up_shots() -> None:
    combat = _combat()
    tower = Tower("t1", "ember_watch", col=0, row=0, x=100.0, y=20.0)
    unit = _unit("u1", 100.0, (CategoryTag.SWARM,), hp=500)
    path = _path()

    assert combat.tick(16, [tower], [unit], path).shots_fired == 1
    assert combat.tick(599, [tower], [unit], path).shots_fired == 0
    assert combat.tick(1, [tower], [unit], path).shots_fired == 1
    assert unit.hp == 500 - 48


def test_slow_reduces_movement_and_expires() -> None:
    unit = _unit("u1", 0.0, (CategoryTag.SWARM,))
    unit.apply_slow(50, 1000)
    unit.apply_slow(25, 500)
    assert unit.slow_percent == 50
    assert unit.slow_duration_left == 1000

    unit.move(500, 10_000)
    assert unit.distance == pytest.approx(10)
    assert unit.slow_percent == 50

    unit.move(500, 10_000)
    assert unit.slow_percent == 0
    assert unit.distance == pytest.approx(30)


def test_slow_is_capped() -> None:
    unit = _unit("u1", 0.0, (CategoryTag.SWARM,))
    unit.apply_slow(95, 5000)
    unit.move(1000, 10_000)
    assert unit.distance == pytest.approx(8)
