"""Waypoint path geometry in pixel space."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
import math

from emberline.config import Waypoint


@dataclass
class Path:
    points: list[Waypoint]
    length: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError("Path requires at least 2 points")
        # Distance from the spawn point to the start of each segment.
        self._offsets: list[float] = []
        total = 0.0
        for a, b in zip(self.points, self.points[1:]):
            self._offsets.append(total)
            total += math.hypot(b.x - a.x, b.y - a.y)
        self.length = total

    @property
    def spawn_position(self) -> tuple[float, float]:
        return (self.points[0].x, self.points[0].y)

    @property
    def end_position(self) -> tuple[float, float]:
        return (self.points[-1].x, self.points[-1].y)

    def remaining_distance(self, distance: float) -> float:
        return max(0.0, self.length - distance)

    def position_at_distance(self, distance: float) -> tuple[float, float]:
        if distance <= 0:
            return self.spawn_position
        if distance >= self.length:
            return self.end_position

        idx = bisect_right(self._offsets, distance) - 1
        a, b = self.points[idx], self.points[idx + 1]
        seg_end = self._offsets[idx + 1] if idx + 1 < len(self._offsets) else self.length
        seg_len = seg_end - self._offsets[idx]
        if seg_len <= 0:
            return (b.x, b.y)
        t = (distance - self._offsets[idx]) / seg_len
        return (a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)
