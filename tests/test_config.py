import json
import shutil

import pytest

from emberline.config import DEFAULT_DATA_DIR, load_game_content
from emberline.core.damage_types import CategoryTag, DamageType


def test_load_content_success() -> None:
    content = load_game_content()
    assert content.map_config.map_id == "center_road"
    assert content.map_config.starting_gold == 150
    assert content.map_config.starting_lives == 20
    assert content.map_config.grid.path_cols == [6, 7]
    assert len(content.enemy_archetypes) == 19
    assert len(content.tower_archetypes) == 9
    assert sorted(content.themes.early) == [1, 2, 3, 4]
    assert len(content.themes.cycle) == 8
    assert content.themes.boss_support.theme_id == "boss_support"
    assert set(content.difficulties) == {"easy", "normal", "hard"}
    assert set(content.resistances) == set(CategoryTag)


def test_archetype_fields_are_typed() -> None:
    content = load_game_content()
    warlord = content.enemy_archetypes["warlord"]
    assert warlord.is_boss
    assert warlord.tags == (CategoryTag.BOSS, CategoryTag.TANK)
    sunflare = content.tower_archetypes["sunflare_cannon"]
    assert sunflare.damage_profile.primary == DamageType.LIGHT
    assert sunflare.damage_profile.secondary == DamageType.FIRE
    assert sunflare.damage_profile.primary_ratio == pytest.approx(0.7)
    assert sunflare.max_level == 3


def _copy_data(tmp_path):
    data_dir = tmp_path / "data"
    shutil.copytree(DEFAULT_DATA_DIR, data_dir)
    return data_dir


def test_unknown_tag_is_rejected(tmp_path) -> None:
    data_dir = _copy_data(tmp_path)
    enemies_path = data_dir / "enemies" / "enemies.json"
    enemies = json.loads(enemies_path.read_text())
    enemies[0]["tags"] = ["gelatinous"]
    enemies_path.write_text(json.dumps(enemies))

    with pytest.raises(ValueError, match="unknown category tag"):
        load_game_content(base_data_dir=data_dir)


def test_missing_keys_are_reported(tmp_path) -> None:
    data_dir = _copy_data(tmp_path)
    towers_path = data_dir / "towers" / "towers.json"
    towers = json.loads(towers_path.read_text())
    del towers[0]["damage_profile"]
    towers_path.write_text(json.dumps(towers))

    with pytest.raises(ValueError, match="missing keys"):
        load_game_content(base_data_dir=data_dir)


def test_primary_ratio_out_of_range_is_rejected(tmp_path) -> None:
    data_dir = _copy_data(tmp_path)
    towers_path = data_dir / "towers" / "towers.json"
    towers = json.loads(towers_path.read_text())
    towers[0]["damage_profile"]["primary_ratio"] = 1.5
    towers_path.write_text(json.dumps(towers))

    with pytest.raises(ValueError, match="primary_ratio"):
        load_game_content(base_data_dir=data_dir)


def test_missing_file_is_reported(tmp_path) -> None:
    data_dir = _copy_data(tmp_path)
    (data_dir / "waves" / "themes.json").unlink()

    with pytest.raises(ValueError, match="Missing config file"):
        load_game_content(base_data_dir=data_dir)
