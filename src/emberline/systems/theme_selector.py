"""Wave theme selection: scripted openers, unlock spotlights, then a cycle."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from emberline.config import ThemeLibrary, WaveTheme
from emberline.core.damage_types import CategoryTag
from emberline.systems.roster import Roster


logger = logging.getLogger(__name__)


# Tags worth a dedicated wave when they first appear.
STRATEGIC_TAGS = frozenset(
    {
        CategoryTag.FLYING,
        CategoryTag.ARMORED,
        CategoryTag.UNDEAD,
        CategoryTag.CONSTRUCT,
        CategoryTag.TANK,
        CategoryTag.ELEMENTAL,
        CategoryTag.AQUATIC,
        CategoryTag.BEAST,
    }
)

CYCLE_START_WAVE = 5


def new_threat_theme(focus_tags: Iterable[CategoryTag]) -> WaveTheme:
    return WaveTheme(
        theme_id="new_threat",
        label="New Threat",
        focus_tags=tuple(focus_tags),
        support_tags=(CategoryTag.SWARM, CategoryTag.HUMANOID, CategoryTag.ARMORED),
        wildcard_tags=(CategoryTag.TANK,),
        focus_ratio=0.65,
        support_ratio=0.25,
        wildcard_ratio=0.1,
        segment_count=3,
        spawn_interval_multiplier=1.0,
    )


class ThemeSelector:
    def __init__(self, library: ThemeLibrary, roster: Roster) -> None:
        if not library.cycle:
            raise ValueError("Theme cycle must include at least one theme")
        self._library = library
        self._roster = roster

    @property
    def boss_support(self) -> WaveTheme:
        return self._library.boss_support

    def select_theme(
        self,
        wave_number: int,
        is_boss_wave: bool,
        newly_unlocked_tags: Iterable[CategoryTag],
        available: list[str],
    ) -> WaveTheme:
        if is_boss_wave:
            return self._library.boss_support

        early = self._library.early.get(wave_number)
        if early is not None:
            return early

        unlock_theme = self._unlock_theme(newly_unlocked_tags, available)
        if unlock_theme is not None:
            logger.debug("Wave %d spotlights new tags %s", wave_number, [t.value for t in unlock_theme.focus_tags])
            return unlock_theme

        cycle = self._library.cycle
        return cycle[max(0, wave_number - CYCLE_START_WAVE) % len(cycle)]

    def _unlock_theme(self, newly_unlocked_tags: Iterable[CategoryTag], available: list[str]) -> WaveTheme | None:
        focus_tags = [tag for tag in newly_unlocked_tags if tag in STRATEGIC_TAGS]
        if not focus_tags:
            return None
        if not self._roster.pool_by_tags(available, focus_tags):
            return None
        return new_threat_theme(focus_tags)
