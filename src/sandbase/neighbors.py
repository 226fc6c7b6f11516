"""Neighbor lookup with horizontal wraparound and a hard floor."""

from typing import Iterable, NamedTuple

from .grid import GridStore
from .types import DIRECTION_DELTAS, Direction, GridPosition
from .voxels import OUT_OF_BOUNDS, Sentinel, Voxel


class Neighbor(NamedTuple):
    """What sits in a neighboring cell, and where that cell is."""

    occupant: Voxel | Sentinel
    position: GridPosition


class NeighborResolver:
    """
    Resolves the cells around a grid position.

    Policy:
    - Horizontal offsets wrap around: left of column 0 is the last column,
      right of the last column is column 0.
    - Vertical offsets do not wrap: a row outside the grid resolves to
      OUT_OF_BOUNDS together with the raw (unusable) position.

    This is the only place that turns off-grid coordinates into the sentinel,
    so rule evaluation never reaches the store's OutOfRangeError.
    """

    def __init__(self, grid: GridStore):
        self.grid = grid

    def position_of(self, position: GridPosition, direction: Direction) -> GridPosition:
        """Return the candidate position for direction, wrapped horizontally."""
        dx, dy = DIRECTION_DELTAS[direction]
        return GridPosition(x=(position.x + dx) % self.grid.width, y=position.y + dy)

    def resolve(self, position: GridPosition, direction: Direction) -> Neighbor:
        """Look up the occupant in one direction."""
        candidate = self.position_of(position, direction)
        if not 0 <= candidate.y < self.grid.height:
            return Neighbor(OUT_OF_BOUNDS, candidate)
        return Neighbor(self.grid.get(candidate), candidate)

    def neighbors(
        self, position: GridPosition, directions: Iterable[Direction]
    ) -> list[Neighbor]:
        """Resolve several directions, in the order given."""
        return [self.resolve(position, direction) for direction in directions]

    def resolve_all(self, position: GridPosition) -> dict[Direction, Neighbor]:
        """Resolve every named direction."""
        return {direction: self.resolve(position, direction) for direction in Direction}
