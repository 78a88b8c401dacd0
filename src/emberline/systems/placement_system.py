"""Grid cell placement and occupancy validation."""

from __future__ import annotations

from dataclasses import dataclass

from emberline.config import GridConfig
from emberline.entities.tower import Tower


@dataclass
class PlacementSystem:
    grid: GridConfig

    def __post_init__(self) -> None:
        self._towers_by_cell: dict[tuple[int, int], Tower] = {}
        self._counter = 0

    def cell_center(self, col: int, row: int) -> tuple[float, float]:
        size = self.grid.cell_size
        return (self.grid.offset_x + (col + 0.5) * size, self.grid.offset_y + (row + 0.5) * size)

    def is_on_grid(self, col: int, row: int) -> bool:
        return 0 <= col < self.grid.cols and 0 <= row < self.grid.rows

    def is_cell_available(self, col: int, row: int) -> bool:
        return (
            self.is_on_grid(col, row)
            and col not in self.grid.path_cols
            and (col, row) not in self._towers_by_cell
        )

    def place_tower(self, col: int, row: int, tower_id: str, cost: int) -> Tower:
        if not self.is_on_grid(col, row):
            raise ValueError(f"Cell off grid: ({col}, {row})")
        if col in self.grid.path_cols:
            raise ValueError(f"Cell is on the path: ({col}, {row})")
        if (col, row) in self._towers_by_cell:
            raise ValueError(f"Cell is occupied: ({col}, {row})")
        self._counter += 1
        x, y = self.cell_center(col, row)
        tower = Tower(
            tower_instance_id=f"tower_{self._counter:03d}",
            tower_id=tower_id,
            col=col,
            row=row,
            x=x,
            y=y,
            level=1,
            total_invested=cost,
        )
        self._towers_by_cell[(col, row)] = tower
        return tower

    def remove_tower(self, col: int, row: int) -> Tower:
        tower = self._towers_by_cell.pop((col, row), None)
        if tower is None:
            raise ValueError(f"No tower at cell: ({col}, {row})")
        return tower

    def get_tower(self, col: int, row: int) -> Tower | None:
        return self._towers_by_cell.get((col, row))

    def all_towers(self) -> list[Tower]:
        return list(self._towers_by_cell.values())
