"""Shared test fixtures for sandbase tests."""

import pytest

from sandbase.config import GridConfig
from sandbase.grid import GridStore
from sandbase.types import GridPosition, Material
from sandbase.voxels import Voxel


@pytest.fixture
def config() -> GridConfig:
    """10 wide, 20 high grid of 10-unit cells."""
    return GridConfig(grid_width=10, grid_height=20, cell_pixel_size=10)


@pytest.fixture
def wide_config() -> GridConfig:
    """256x144 grid of 10-unit cells, a 2560x1440 render area."""
    return GridConfig(grid_width=256, grid_height=144, cell_pixel_size=10)


@pytest.fixture
def grid(config: GridConfig) -> GridStore:
    """Empty 10x20 grid."""
    return GridStore(config)


@pytest.fixture
def sand(config: GridConfig) -> Voxel:
    return Voxel.spawn(Material.SAND, config)


@pytest.fixture
def water(config: GridConfig) -> Voxel:
    return Voxel.spawn(Material.WATER, config)


@pytest.fixture
def earth(config: GridConfig) -> Voxel:
    return Voxel.spawn(Material.EARTH, config)


@pytest.fixture
def water_in_trough(grid: GridStore, sand: Voxel, water: Voxel, earth: Voxel) -> GridStore:
    """Water boxed in on the floor with sand directly above it.

        row 1: . . . . . s . . . .
        row 0: . . . . # ~ # . . .

    The water cannot move, so the sand can only sink through it.
    """
    grid.set(GridPosition(x=4, y=0), earth)
    grid.set(GridPosition(x=5, y=0), water)
    grid.set(GridPosition(x=6, y=0), earth)
    grid.set(GridPosition(x=5, y=1), sand)
    return grid


@pytest.fixture
def converging_water(grid: GridStore, water: Voxel, earth: Voxel) -> GridStore:
    """Two waters on an earth ledge that both want the same cell.

        row 1: . . . # ~ . ~ . . .
        row 0: . . . # # # # # . .

    The water at (4, 1) is walled in on the left, so it flows right into
    (5, 1). The water at (6, 1) tries left first, also into (5, 1).
    """
    for x in range(3, 8):
        grid.set(GridPosition(x=x, y=0), earth)
    grid.set(GridPosition(x=3, y=1), earth)
    grid.set(GridPosition(x=4, y=1), water)
    grid.set(GridPosition(x=6, y=1), water)
    return grid
