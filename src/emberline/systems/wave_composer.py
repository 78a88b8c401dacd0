"""Wave composition and difficulty scaling.

For every wave this decides how many enemies spawn, how their stats scale,
how fast they come out and in what order archetypes appear. Sequences are
built from a wave theme: the archetype pool is split into focus, support and
wildcard sub-pools, counts are allocated from the theme ratios and the wave is
laid out in sequential segments so it reads as recognisable phases. Boss
waves spread their bosses evenly through a support escort.

All randomness goes through the injected ``random.Random`` so a seeded
composer replays the same waves.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import random

from emberline.config import DifficultyProfile, NEUTRAL_DIFFICULTY, WaveTheme
from emberline.systems.roster import FALLBACK_ARCHETYPE, Roster
from emberline.systems.theme_selector import ThemeSelector


logger = logging.getLogger(__name__)


BASE_ENEMY_COUNT = 5
BOSS_WAVE_PERIOD = 10
WAVES_PER_EXTRA_BOSS = 25
MAX_SEGMENTS = 4
ENEMIES_PER_SEGMENT = 8
MIN_SPAWN_INTERVAL = 300
HARD_MIN_SPAWN_INTERVAL = 280


@dataclass(frozen=True)
class WaveScaling:
    enemy_count: int
    health_multiplier: float
    speed_multiplier: float
    reward_multiplier: float
    spawn_interval: int


@dataclass
class ThemeCounts:
    focus: int
    support: int
    wildcard: int


@dataclass
class WaveComposition:
    wave_number: int
    sequence: list[str]
    scaling: WaveScaling
    theme: WaveTheme
    is_boss_wave: bool
    boss_count: int = 0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def is_boss_wave(wave_number: int) -> bool:
    return wave_number > 0 and wave_number % BOSS_WAVE_PERIOD == 0


def boss_count_for_wave(wave_number: int) -> int:
    return max(1, wave_number // WAVES_PER_EXTRA_BOSS)


def compute_scaling(
    wave_number: int,
    difficulty: DifficultyProfile = NEUTRAL_DIFFICULTY,
    theme: WaveTheme | None = None,
) -> WaveScaling:
    w = wave_number
    enemy_count = math.floor(
        (BASE_ENEMY_COUNT + w * 1.5 + math.log(w + 1) * 3) * difficulty.count_multiplier
    )
    health = (1 + (w - 1) * 0.15 + math.pow(w / 10, 1.5)) * difficulty.health_multiplier
    speed = (1 + min(w * 0.04, 0.5)) * difficulty.speed_multiplier
    reward = min(1.25, 0.95 + math.log(w + 1) * 0.08) * difficulty.reward_multiplier

    spawn_interval = max(MIN_SPAWN_INTERVAL, 800 - w * 30)
    if theme is not None:
        spawn_interval = max(
            HARD_MIN_SPAWN_INTERVAL,
            _round_half_up(spawn_interval * theme.spawn_interval_multiplier),
        )

    return WaveScaling(
        enemy_count=max(0, enemy_count),
        health_multiplier=health,
        speed_multiplier=speed,
        reward_multiplier=reward,
        spawn_interval=spawn_interval,
    )


def completion_bonus(wave_number: int, difficulty: DifficultyProfile = NEUTRAL_DIFFICULTY) -> int:
    base = 12 + wave_number * 3 + math.pow(wave_number, 1.1)
    return math.floor(base * difficulty.reward_multiplier)


def allocate_theme_counts(total: int, theme: WaveTheme) -> ThemeCounts:
    ratio_total = theme.focus_ratio + theme.support_ratio + theme.wildcard_ratio
    if ratio_total > 0:
        focus_ratio = theme.focus_ratio / ratio_total
        support_ratio = theme.support_ratio / ratio_total
    else:
        focus_ratio, support_ratio = 1.0, 0.0

    focus = math.floor(total * focus_ratio)
    support = math.floor(total * support_ratio)
    wildcard = total - focus - support

    if total > 0 and focus == 0:
        focus = 1
        wildcard = total - focus - support

    if wildcard < 0:
        wildcard = 0
        if support > 0:
            support = total - focus
        else:
            focus = total

    return ThemeCounts(focus=focus, support=support, wildcard=wildcard)


def segment_count_for(total: int, preferred: int) -> int:
    dynamic = total // ENEMIES_PER_SEGMENT + 1
    return max(1, min(preferred, min(MAX_SEGMENTS, dynamic)))


def insert_bosses(support: list[str], boss_id: str, boss_count: int) -> list[str]:
    if not support:
        return [boss_id] * boss_count
    spaced = list(support)
    spacing = max(1, len(spaced) // (boss_count + 1))
    for i in range(boss_count):
        insert_at = min(len(spaced), spacing * (i + 1) + i)
        spaced.insert(insert_at, boss_id)
    return spaced


class WaveComposer:
    def __init__(
        self,
        roster: Roster,
        theme_selector: ThemeSelector,
        rng: random.Random | None = None,
    ) -> None:
        self._roster = roster
        self._themes = theme_selector
        self.rng = rng or random.Random()

    def compose_wave(
        self,
        wave_number: int,
        difficulty: DifficultyProfile = NEUTRAL_DIFFICULTY,
        available: list[str] | None = None,
    ) -> WaveComposition:
        if available is None:
            available = self._roster.regular_pool(wave_number)
        boss_wave = is_boss_wave(wave_number)
        bosses = self._roster.boss_pool(wave_number) if boss_wave else []

        theme = self._themes.select_theme(
            wave_number,
            boss_wave,
            self._roster.newly_unlocked_tags(wave_number),
            available,
        )
        scaling = compute_scaling(wave_number, difficulty, theme)
        count = scaling.enemy_count

        if bosses:
            boss_count = min(count, boss_count_for_wave(wave_number))
            boss_id = self.rng.choice(bosses)
            support = self.themed_sequence(count - boss_count, available, theme)
            sequence = insert_bosses(support, boss_id, boss_count) if boss_count else support
            logger.debug(
                "Wave %d: boss wave, %d x %s in %d escorts", wave_number, boss_count, boss_id, len(support)
            )
        else:
            boss_count = 0
            if boss_wave:
                logger.debug("Wave %d: no boss unlocked, escort only", wave_number)
            sequence = self.themed_sequence(count, available, theme)

        logger.debug(
            "Wave %d: theme=%s count=%d interval=%dms",
            wave_number,
            theme.theme_id,
            len(sequence),
            scaling.spawn_interval,
        )
        return WaveComposition(
            wave_number=wave_number,
            sequence=sequence,
            scaling=scaling,
            theme=theme,
            is_boss_wave=boss_wave,
            boss_count=boss_count,
        )

    def themed_sequence(self, count: int, available: list[str], theme: WaveTheme) -> list[str]:
        if count <= 0:
            return []
        base_pool = list(available) or [FALLBACK_ARCHETYPE.archetype_id]
        focus_pool = self._roster.pool_by_tags(base_pool, theme.focus_tags) or base_pool
        support_pool = self._roster.pool_by_tags(base_pool, theme.support_tags) or focus_pool
        wildcard_pool = self._roster.pool_by_tags(base_pool, theme.wildcard_tags) or support_pool

        counts = allocate_theme_counts(count, theme)
        segments = segment_count_for(count, theme.segment_count)

        layout: list[tuple[list[str], int]] = []
        if segments <= 1:
            layout.append((focus_pool, count))
        elif segments == 2:
            layout.append((focus_pool, counts.focus))
            layout.append((support_pool, count - counts.focus))
        else:
            focus_first = math.ceil(counts.focus / 2)
            focus_second = counts.focus - focus_first
            support_size = counts.support + (counts.wildcard if segments < MAX_SEGMENTS else 0)
            layout.append((focus_pool, focus_first))
            if support_size > 0:
                layout.append((support_pool, support_size))
            if segments >= MAX_SEGMENTS and counts.wildcard > 0:
                layout.append((wildcard_pool, counts.wildcard))
            if focus_second > 0:
                layout.append((focus_pool, focus_second))

        sequence: list[str] = []
        for pool, size in layout:
            sequence.extend(self.sequence_from_pool(pool, size))

        if len(sequence) < count:
            sequence.extend(self.sequence_from_pool(focus_pool, count - len(sequence)))

        return sequence[:count]

    def sequence_from_pool(self, pool: list[str], count: int) -> list[str]:
        """Concatenate shuffled passes over ``pool`` until ``count`` entries exist.

        When a new pass would start with the archetype that ended the previous
        one, the pass is rotated by one so the seam does not repeat it.
        """
        if not pool or count <= 0:
            return []
        sequence: list[str] = []
        while len(sequence) < count:
            batch = list(pool)
            self.rng.shuffle(batch)
            if sequence and len(batch) > 1 and sequence[-1] == batch[0]:
                batch.append(batch.pop(0))
            sequence.extend(batch)
        return sequence[:count]
