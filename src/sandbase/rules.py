"""Per-material movement rules.

Each material has an ordered list of candidate directions and a behavior
that turns "what is in that cell" into an optional move. The first candidate
whose behavior yields a move wins; if none do, the voxel stays put this tick.

    Material  Candidates                                  Behavior
    sand      bottom, bottom_left, bottom_right           falling solid
    earth     bottom, bottom2_left, bottom2_right         falling solid
    water     bottom, bottom_left, bottom_right,          liquid
              left, right

Earth only shifts sideways over a two-row drop, so its piles spread more
slowly than sand.
"""

from dataclasses import dataclass
from typing import Callable

from .grid import GridStore
from .neighbors import NeighborResolver
from .types import Direction, GridPosition, Material
from .voxels import ABSENT, Sentinel, Voxel


@dataclass(frozen=True)
class Displace:
    """Move into an empty cell."""

    target: GridPosition


@dataclass(frozen=True)
class Swap:
    """Trade places with the target cell's occupant."""

    target: GridPosition


Move = Displace | Swap

Behavior = Callable[[Voxel | Sentinel, GridPosition], Move | None]


def falling_solid(occupant: Voxel | Sentinel, target: GridPosition) -> Move | None:
    """Solids fall into empty cells and sink through liquids."""
    if isinstance(occupant, Voxel):
        return Swap(target) if occupant.is_liquid else None
    if occupant is ABSENT:
        return Displace(target)
    # OUT_OF_BOUNDS
    return None


def liquid(occupant: Voxel | Sentinel, target: GridPosition) -> Move | None:
    """Liquids only ever flow into empty cells."""
    if occupant is ABSENT:
        return Displace(target)
    return None


@dataclass(frozen=True)
class MovementRule:
    """Ordered candidates and the behavior applied to each."""

    candidates: tuple[Direction, ...]
    behavior: Behavior


RULES: dict[Material, MovementRule] = {
    Material.SAND: MovementRule(
        candidates=(Direction.BOTTOM, Direction.BOTTOM_LEFT, Direction.BOTTOM_RIGHT),
        behavior=falling_solid,
    ),
    Material.EARTH: MovementRule(
        candidates=(Direction.BOTTOM, Direction.BOTTOM2_LEFT, Direction.BOTTOM2_RIGHT),
        behavior=falling_solid,
    ),
    Material.WATER: MovementRule(
        candidates=(
            Direction.BOTTOM,
            Direction.BOTTOM_LEFT,
            Direction.BOTTOM_RIGHT,
            Direction.LEFT,
            Direction.RIGHT,
        ),
        behavior=liquid,
    ),
}


class RuleEngine:
    """Decides moves for voxels on one grid. Holds no state between ticks."""

    def __init__(self, grid: GridStore):
        self.grid = grid
        self.resolver = NeighborResolver(grid)

    def decide(self, position: GridPosition) -> Move | None:
        """Decide the move for whatever occupies position.

        Empty cells never move.

        Raises:
            OutOfRangeError: If position is off the grid.
        """
        cell = self.grid.get(position)
        if not isinstance(cell, Voxel):
            return None
        return self.decide_for(cell, position)

    def decide_for(self, voxel: Voxel, position: GridPosition) -> Move | None:
        """Evaluate voxel's rule as if it sat at position."""
        rule = RULES[voxel.material]
        for direction in rule.candidates:
            occupant, target = self.resolver.resolve(position, direction)
            move = rule.behavior(occupant, target)
            if move is not None:
                return move
        return None


def decide_move(grid: GridStore, position: GridPosition) -> Move | None:
    """Decide a single move without keeping an engine around."""
    return RuleEngine(grid).decide(position)
