"""Content loading and validation for the Emberline battle model."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import json
import logging

from emberline.core.damage_types import CategoryTag, DamageType


logger = logging.getLogger(__name__)


@dataclass
class Waypoint:
    x: float
    y: float


@dataclass
class GridConfig:
    cols: int
    rows: int
    cell_size: float
    offset_x: float
    offset_y: float
    path_cols: list[int]


@dataclass
class MapConfig:
    map_id: str
    starting_gold: int
    starting_lives: int
    grid: GridConfig
    path_waypoints: list[Waypoint]


@dataclass(frozen=True)
class DamageProfile:
    primary: DamageType
    secondary: DamageType | None = None
    primary_ratio: float = 1.0


@dataclass(frozen=True)
class TowerUpgrade:
    level: int
    cost: int
    damage_bonus: float
    range_bonus: float
    fire_interval_bonus: float


@dataclass(frozen=True)
class TowerArchetype:
    tower_id: str
    display_name: str
    tier: int
    cost: int
    damage: float
    range: float
    fire_interval: float
    damage_profile: DamageProfile
    upgrades: tuple[TowerUpgrade, ...] = ()
    slow_percent: float = 0.0
    slow_duration: float = 0.0

    @property
    def max_level(self) -> int:
        return 1 + len(self.upgrades)


@dataclass(frozen=True)
class EnemyArchetype:
    archetype_id: str
    display_name: str
    health: float
    speed: float
    damage: int
    reward: int
    tags: tuple[CategoryTag, ...]
    unlock_wave: int

    @property
    def is_boss(self) -> bool:
        return CategoryTag.BOSS in self.tags


@dataclass(frozen=True)
class WaveTheme:
    """Composition profile biasing which category tags dominate a wave."""

    theme_id: str
    label: str
    focus_tags: tuple[CategoryTag, ...]
    support_tags: tuple[CategoryTag, ...]
    wildcard_tags: tuple[CategoryTag, ...]
    focus_ratio: float
    support_ratio: float
    wildcard_ratio: float
    segment_count: int
    spawn_interval_multiplier: float = 1.0


@dataclass
class ThemeLibrary:
    early: dict[int, WaveTheme]
    cycle: list[WaveTheme]
    boss_support: WaveTheme


@dataclass(frozen=True)
class DifficultyProfile:
    difficulty_id: str
    display_name: str
    reward_multiplier: float = 1.0
    health_multiplier: float = 1.0
    count_multiplier: float = 1.0
    speed_multiplier: float = 1.0


NEUTRAL_DIFFICULTY = DifficultyProfile(difficulty_id="neutral", display_name="Neutral")

ResistanceTable = dict[CategoryTag, dict[DamageType, float]]


@dataclass
class GameContent:
    map_config: MapConfig
    enemy_archetypes: dict[str, EnemyArchetype]
    tower_archetypes: dict[str, TowerArchetype]
    resistances: ResistanceTable
    themes: ThemeLibrary
    difficulties: dict[str, DifficultyProfile] = field(default_factory=dict)


DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"


def _load_json(path: Path) -> dict | list:
    if not path.exists():
        raise ValueError(f"Missing config file: {path}")
    return json.loads(path.read_text())


def _require_keys(data: dict, keys: set[str], context: str) -> None:
    missing = keys - set(data.keys())
    if missing:
        raise ValueError(f"{context}: missing keys {sorted(missing)}")


def _parse_tag(value: str, context: str) -> CategoryTag:
    try:
        return CategoryTag(value)
    except ValueError:
        raise ValueError(f"{context}: unknown category tag {value!r}") from None


def _parse_damage_type(value: str, context: str) -> DamageType:
    try:
        return DamageType(value)
    except ValueError:
        raise ValueError(f"{context}: unknown damage type {value!r}") from None


def _parse_tags(values: list[str], context: str) -> tuple[CategoryTag, ...]:
    return tuple(_parse_tag(v, context) for v in values)


def load_map_config(path: Path) -> MapConfig:
    map_raw = _load_json(path)
    _require_keys(
        map_raw,
        {"map_id", "starting_gold", "starting_lives", "grid", "path_waypoints"},
        path.stem,
    )
    grid_raw = map_raw["grid"]
    _require_keys(grid_raw, {"cols", "rows", "cell_size", "offset_x", "offset_y", "path_cols"}, "grid")

    map_config = MapConfig(
        map_id=map_raw["map_id"],
        starting_gold=int(map_raw["starting_gold"]),
        starting_lives=int(map_raw["starting_lives"]),
        grid=GridConfig(
            cols=int(grid_raw["cols"]),
            rows=int(grid_raw["rows"]),
            cell_size=float(grid_raw["cell_size"]),
            offset_x=float(grid_raw["offset_x"]),
            offset_y=float(grid_raw["offset_y"]),
            path_cols=[int(c) for c in grid_raw["path_cols"]],
        ),
        path_waypoints=[Waypoint(x=float(p["x"]), y=float(p["y"])) for p in map_raw["path_waypoints"]],
    )

    if map_config.starting_gold < 0:
        raise ValueError("starting_gold must be non-negative")
    if map_config.starting_lives <= 0:
        raise ValueError("starting_lives must be positive")
    if len(map_config.path_waypoints) < 2:
        raise ValueError("path_waypoints must include at least 2 points")
    return map_config


def load_enemy_archetypes(path: Path) -> dict[str, EnemyArchetype]:
    enemy_archetypes: dict[str, EnemyArchetype] = {}
    for enemy in _load_json(path):
        context = f"enemy {enemy.get('archetype_id', enemy)!r}"
        _require_keys(
            enemy,
            {"archetype_id", "display_name", "health", "speed", "damage", "reward", "tags", "unlock_wave"},
            context,
        )
        archetype = EnemyArchetype(
            archetype_id=enemy["archetype_id"],
            display_name=enemy["display_name"],
            health=float(enemy["health"]),
            speed=float(enemy["speed"]),
            damage=int(enemy["damage"]),
            reward=int(enemy["reward"]),
            tags=_parse_tags(enemy["tags"], context),
            unlock_wave=int(enemy["unlock_wave"]),
        )
        if not archetype.tags:
            raise ValueError(f"{context}: tags must not be empty")
        if archetype.unlock_wave < 1:
            raise ValueError(f"{context}: unlock_wave must be at least 1")
        if archetype.archetype_id in enemy_archetypes:
            raise ValueError(f"{context}: duplicate archetype id")
        enemy_archetypes[archetype.archetype_id] = archetype
    return enemy_archetypes


def _parse_damage_profile(raw: dict, context: str) -> DamageProfile:
    _require_keys(raw, {"primary", "primary_ratio"}, f"{context} damage_profile")
    secondary_raw = raw.get("secondary")
    profile = DamageProfile(
        primary=_parse_damage_type(raw["primary"], context),
        secondary=_parse_damage_type(secondary_raw, context) if secondary_raw else None,
        primary_ratio=float(raw["primary_ratio"]),
    )
    if not 0.0 <= profile.primary_ratio <= 1.0:
        raise ValueError(f"{context}: primary_ratio must be within [0, 1]")
    return profile


def load_tower_archetypes(path: Path) -> dict[str, TowerArchetype]:
    tower_archetypes: dict[str, TowerArchetype] = {}
    for tower in _load_json(path):
        context = f"tower {tower.get('tower_id', tower)!r}"
        _require_keys(
            tower,
            {"tower_id", "display_name", "tier", "cost", "damage", "range", "fire_interval", "damage_profile"},
            context,
        )
        upgrades = [
            TowerUpgrade(
                level=int(u["level"]),
                cost=int(u["cost"]),
                damage_bonus=float(u.get("damage_bonus", 0.0)),
                range_bonus=float(u.get("range_bonus", 0.0)),
                fire_interval_bonus=float(u.get("fire_interval_bonus", 0.0)),
            )
            for u in tower.get("upgrades", [])
        ]
        archetype = TowerArchetype(
            tower_id=tower["tower_id"],
            display_name=tower["display_name"],
            tier=int(tower["tier"]),
            cost=int(tower["cost"]),
            damage=float(tower["damage"]),
            range=float(tower["range"]),
            fire_interval=float(tower["fire_interval"]),
            damage_profile=_parse_damage_profile(tower["damage_profile"], context),
            upgrades=tuple(sorted(upgrades, key=lambda u: u.level)),
            slow_percent=float(tower.get("slow_percent", 0.0)),
            slow_duration=float(tower.get("slow_duration", 0.0)),
        )
        if archetype.fire_interval <= 0:
            raise ValueError(f"{context}: fire_interval must be positive")
        tower_archetypes[archetype.tower_id] = archetype
    return tower_archetypes


def load_resistances(path: Path) -> ResistanceTable:
    raw = _load_json(path)
    table: ResistanceTable = {}
    for tag_name, multipliers in raw.items():
        tag = _parse_tag(tag_name, "resistances")
        _require_keys(multipliers, {d.value for d in DamageType}, f"resistances[{tag_name}]")
        table[tag] = {d: float(multipliers[d.value]) for d in DamageType}
    missing = set(CategoryTag) - set(table)
    if missing:
        raise ValueError(f"resistances: missing tags {sorted(t.value for t in missing)}")
    return table


def _parse_theme(raw: dict) -> WaveTheme:
    context = f"theme {raw.get('theme_id', raw)!r}"
    _require_keys(
        raw,
        {
            "theme_id",
            "label",
            "focus_tags",
            "support_tags",
            "wildcard_tags",
            "focus_ratio",
            "support_ratio",
            "wildcard_ratio",
            "segment_count",
        },
        context,
    )
    theme = WaveTheme(
        theme_id=raw["theme_id"],
        label=raw["label"],
        focus_tags=_parse_tags(raw["focus_tags"], context),
        support_tags=_parse_tags(raw["support_tags"], context),
        wildcard_tags=_parse_tags(raw["wildcard_tags"], context),
        focus_ratio=float(raw["focus_ratio"]),
        support_ratio=float(raw["support_ratio"]),
        wildcard_ratio=float(raw["wildcard_ratio"]),
        segment_count=int(raw["segment_count"]),
        spawn_interval_multiplier=float(raw.get("spawn_interval_multiplier", 1.0)),
    )
    if min(theme.focus_ratio, theme.support_ratio, theme.wildcard_ratio) < 0:
        raise ValueError(f"{context}: ratios must be non-negative")
    if theme.segment_count < 1:
        raise ValueError(f"{context}: segment_count must be at least 1")
    if theme.spawn_interval_multiplier <= 0:
        raise ValueError(f"{context}: spawn_interval_multiplier must be positive")
    return theme


def load_theme_library(path: Path) -> ThemeLibrary:
    raw = _load_json(path)
    _require_keys(raw, {"early", "cycle", "boss_support"}, "themes")
    early: dict[int, WaveTheme] = {}
    for entry in raw["early"]:
        _require_keys(entry, {"wave"}, "early theme")
        early[int(entry["wave"])] = _parse_theme(entry)
    cycle = [_parse_theme(entry) for entry in raw["cycle"]]
    if not cycle:
        raise ValueError("themes: cycle must include at least one theme")
    return ThemeLibrary(early=early, cycle=cycle, boss_support=_parse_theme(raw["boss_support"]))


def load_difficulties(path: Path) -> dict[str, DifficultyProfile]:
    difficulties: dict[str, DifficultyProfile] = {}
    for entry in _load_json(path):
        _require_keys(
            entry,
            {
                "difficulty_id",
                "display_name",
                "reward_multiplier",
                "health_multiplier",
                "count_multiplier",
                "speed_multiplier",
            },
            f"difficulty {entry!r}",
        )
        profile = DifficultyProfile(
            difficulty_id=entry["difficulty_id"],
            display_name=entry["display_name"],
            reward_multiplier=float(entry["reward_multiplier"]),
            health_multiplier=float(entry["health_multiplier"]),
            count_multiplier=float(entry["count_multiplier"]),
            speed_multiplier=float(entry["speed_multiplier"]),
        )
        difficulties[profile.difficulty_id] = profile
    return difficulties


def load_game_content(base_data_dir: Path | None = None) -> GameContent:
    data_dir = base_data_dir or DEFAULT_DATA_DIR

    map_config = load_map_config(data_dir / "maps" / "center_road.json")
    enemy_archetypes = load_enemy_archetypes(data_dir / "enemies" / "enemies.json")
    tower_archetypes = load_tower_archetypes(data_dir / "towers" / "towers.json")
    resistances = load_resistances(data_dir / "damage" / "resistances.json")
    themes = load_theme_library(data_dir / "waves" / "themes.json")
    difficulties = load_difficulties(data_dir / "difficulty" / "difficulty.json")

    logger.debug(
        "Loaded content from %s: %d enemies, %d towers, %d cycle themes",
        data_dir,
        len(enemy_archetypes),
        len(tower_archetypes),
        len(themes.cycle),
    )

    return GameContent(
        map_config=map_config,
        enemy_archetypes=enemy_archetypes,
        tower_archetypes=tower_archetypes,
        resistances=resistances,
        themes=themes,
        difficulties=difficulties,
    )
